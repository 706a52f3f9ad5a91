# rangebet/core/manager.py

from typing import Callable, Dict, List, Optional, Sequence, Tuple

from rangebet.core.binledger import BinLedger
from rangebet.core.collateral import CollateralAsset
from rangebet.core.config import settings
from rangebet.core.costmath import spot_price
from rangebet.core.events import EventLog
from rangebet.core.positions import PositionLedger, encode_token_id, decode_token_id
from rangebet.core.purchase import PurchaseOrchestrator
from rangebet.core.registry import MarketRegistry, unix_now
from rangebet.core.roles import AccessControl, OwnerAccessControl
from rangebet.core.settlement import SettlementEngine
from rangebet.core.store import MarketInfo, Store

class RangeBetManager:
    """
    Bin-based parimutuel prediction market. Traders buy positions in price
    bins; after the owner closes a market on a winning bin, holders of that
    bin split the collateral pool pro-rata.
    """
    def __init__(self, collateral: CollateralAsset, event_log: EventLog,
                 access: Optional[AccessControl] = None,
                 address: Optional[str] = None,
                 clock: Callable[[], int] = unix_now,
                 ln_precision: Optional[int] = None):
        self.collateral = collateral
        self.event_log = event_log
        self.access = access or OwnerAccessControl(settings.OWNER)
        self.address = address or settings.VAULT_ADDRESS
        ln_precision = ln_precision or settings.LN_PRECISION

        self.store = Store()
        self.bins = BinLedger(self.store)
        self.positions = PositionLedger(event_log, manager=self.address)
        self.registry = MarketRegistry(self.store, self.access, event_log, clock)
        self.purchases = PurchaseOrchestrator(
            self.store, self.bins, self.positions, collateral, event_log,
            self.address, ln_precision)
        self.settlement = SettlementEngine(
            self.store, self.bins, self.positions, collateral, self.access,
            event_log, self.address)

    # Lifecycle

    def create_market(self, caller: str, tick_spacing: int, min_tick: int,
                      max_tick: int, close_timestamp: Optional[int] = None) -> int:
        return self.registry.create_market(caller, tick_spacing, min_tick, max_tick,
                                           close_timestamp)

    def activate_market(self, caller: str, market_id: int) -> None:
        self.registry.activate_market(caller, market_id)

    def deactivate_market(self, caller: str, market_id: int) -> None:
        self.registry.deactivate_market(caller, market_id)

    def close_market(self, caller: str, market_id: int, winning_bin: int) -> None:
        self.registry.close_market(caller, market_id, winning_bin)

    # Trading and settlement

    def buy_tokens(self, buyer: str, market_id: int, bin_indices: Sequence[int],
                   amounts: Sequence[int], max_collateral: int) -> Dict:
        return self.purchases.buy_tokens(buyer, market_id, bin_indices, amounts,
                                         max_collateral)

    def claim_reward(self, claimant: str, market_id: int, bin_index: int) -> Dict:
        return self.settlement.claim_reward(claimant, market_id, bin_index)

    def withdraw_all_collateral(self, caller: str, to: str) -> int:
        return self.settlement.withdraw_all_collateral(caller, to)

    # Queries

    def get_market_info(self, market_id: int) -> MarketInfo:
        return self.registry.get_market_info(market_id)

    def market_count(self) -> int:
        return self.registry.market_count()

    def get_bin_quantity(self, market_id: int, bin_index: int) -> int:
        return self.bins.get(market_id, bin_index)

    def get_bin_quantities_in_range(self, market_id: int, from_bin: int,
                                    to_bin: int) -> Tuple[List[int], List[int]]:
        return self.bins.range_query(market_id, from_bin, to_bin)

    def calculate_bin_cost(self, market_id: int, bin_index: int, amount: int) -> int:
        return self.purchases.calculate_bin_cost(market_id, bin_index, amount)

    def calculate_reward(self, market_id: int, holder: str) -> int:
        return self.settlement.calculate_reward(market_id, holder)

    def get_spot_price(self, market_id: int, bin_index: int) -> int:
        """Marginal price of the next unit in a bin, scaled by 10**settings.DECIMALS."""
        market = self.store.get(market_id)
        return spot_price(self.bins.get(market_id, bin_index), market.total_supply)

    def balance_of(self, holder: str, market_id: int, bin_index: int) -> int:
        """Position balance of holder in one bin of a market."""
        return self.positions.balance_of(holder, encode_token_id(market_id, bin_index))

    encode_token_id = staticmethod(encode_token_id)
    decode_token_id = staticmethod(decode_token_id)
