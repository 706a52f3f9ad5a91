# rangebet/core/purchase.py

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Sequence, Tuple

from .binledger import BinLedger
from .collateral import CollateralAsset
from .costmath import (DEFAULT_LN_PRECISION, MAX_UINT256, calculate_cost, checked_add,
                       require_uint256)
from .errors import (ArrayLengthMismatch, BinOutOfRange, CostExceedsMax, InvalidBinIndex,
                     MarketClosed, MarketNotActive)
from .events import EventLog, create_tokens_bought_event
from .positions import PositionLedger, encode_token_id
from .store import Market, Store

logger = logging.getLogger(__name__)

@dataclass
class PurchasePlan:
    """
    Accumulator threaded through the bins of one order. Each fill is
    priced against the bin quantities and total supply left by the
    fills before it.
    """
    total_supply: int
    bin_quantities: Dict[int, int] = field(default_factory=dict)
    fills: List[Tuple[int, int, int]] = field(default_factory=list)
    total_cost: int = 0

    def add(self, market: Market, bin_index: int, amount: int,
            ln_precision: int = DEFAULT_LN_PRECISION) -> "PurchasePlan":
        q = self.bin_quantities.get(bin_index, market.bins.get(bin_index, 0))
        cost = calculate_cost(q, self.total_supply, amount, ln_precision)
        logger.debug("Market %d bin %d: q=%d T=%d t=%d cost=%d",
                     market.market_id, bin_index, q, self.total_supply, amount, cost)

        self.bin_quantities[bin_index] = checked_add(q, amount, "bin quantity")
        self.total_supply = checked_add(self.total_supply, amount, "total supply")
        self.total_cost = checked_add(self.total_cost, cost, "total cost")
        self.fills.append((bin_index, amount, cost))
        return self

def validate_bin(market: Market, bin_index: int) -> None:
    if not market.is_aligned(bin_index):
        raise InvalidBinIndex()
    if not market.in_range(bin_index):
        raise BinOutOfRange()

def plan_purchase(market: Market, bin_indices: Sequence[int], amounts: Sequence[int],
                  ln_precision: int = DEFAULT_LN_PRECISION) -> PurchasePlan:
    """Price an order bin by bin without touching any ledger. Zero amounts are skipped."""
    if len(bin_indices) != len(amounts):
        raise ArrayLengthMismatch()

    plan = PurchasePlan(total_supply=market.total_supply)
    for bin_index, amount in zip(bin_indices, amounts):
        require_uint256(amount, "amount")
        if amount == 0:
            continue
        validate_bin(market, bin_index)
        plan = plan.add(market, bin_index, amount, ln_precision)
    return plan

class PurchaseOrchestrator:
    """Validates and executes multi-bin purchases."""
    def __init__(self, store: Store, bins: BinLedger, positions: PositionLedger,
                 collateral: CollateralAsset, event_log: EventLog, address: str,
                 ln_precision: int = DEFAULT_LN_PRECISION):
        self._store = store
        self._bins = bins
        self._positions = positions
        self._collateral = collateral
        self._event_log = event_log
        self.address = address
        self._ln_precision = ln_precision

    def buy_tokens(self, buyer: str, market_id: int, bin_indices: Sequence[int],
                   amounts: Sequence[int], max_collateral: int) -> Dict:
        """
        Buy positions in one or more bins of a market.

        Bins are priced in the order given. Nothing is written until the
        whole order is priced, checked against max_collateral and paid for.

        Returns:
            Dict with total_cost and the per-bin fills (bin_index, amount, cost)
        """
        market = self._store.get(market_id)
        if market.closed:
            raise MarketClosed()
        if not market.active:
            raise MarketNotActive()

        plan = plan_purchase(market, bin_indices, amounts, self._ln_precision)
        if plan.total_cost > max_collateral:
            raise CostExceedsMax(plan.total_cost, max_collateral)
        new_collateral = checked_add(market.collateral_balance, plan.total_cost,
                                     "collateral balance")
        self._positions.require_manager(self.address)

        # Collateral failures propagate before any ledger is touched
        if plan.total_cost > 0:
            self._collateral.transfer_from(self.address, buyer, self.address,
                                           plan.total_cost)

        for bin_index, amount, _ in plan.fills:
            self._bins.increase(market_id, bin_index, amount)
            self._positions.mint(self.address, buyer,
                                 encode_token_id(market_id, bin_index), amount)
        market.total_supply = plan.total_supply
        market.collateral_balance = new_collateral

        logger.info("Market %d: %s bought %d bins for %d",
                    market_id, buyer, len(plan.fills), plan.total_cost)
        self._event_log.emit(create_tokens_bought_event(
            market_id, buyer, bin_indices, amounts, plan.total_cost))
        return {
            "total_cost": plan.total_cost,
            "fills": list(plan.fills)
        }

    def calculate_bin_cost(self, market_id: int, bin_index: int, amount: int) -> int:
        """
        Cost of buying amount in a single bin right now. Returns 0 instead of
        failing when the market is unknown, inactive or closed, the bin is
        invalid, or the amount would push the supply past 2**256 - 1.
        """
        market = self._store.find(market_id)
        if market is None or not market.active or market.closed:
            return 0
        if amount <= 0 or market.total_supply + amount > MAX_UINT256:
            return 0
        if not market.is_aligned(bin_index) or not market.in_range(bin_index):
            return 0
        return calculate_cost(market.bins.get(bin_index, 0), market.total_supply,
                              amount, self._ln_precision)
