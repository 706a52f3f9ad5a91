# rangebet/core/settlement.py

import logging
from typing import Dict

from .binledger import BinLedger
from .collateral import CollateralAsset
from .errors import MarketNotClosed, NoCollateralToWithdraw, NotWinningBin, NoTokensToClaim
from .events import EventLog, create_collateral_withdrawn_event, create_reward_claimed_event
from .positions import PositionLedger, encode_token_id
from .roles import AccessControl
from .store import Store

logger = logging.getLogger(__name__)

class SettlementEngine:
    """
    Pays winning-bin holders out of a closed market's collateral pool.

    Each claim takes bal / Q of the pool that is left, where Q is the
    winning bin's remaining quantity. Q and the pool both shrink with every
    claim, so the shares telescope: once every holder has claimed, the
    pool at close has been paid out in full whatever the claim order.
    """
    def __init__(self, store: Store, bins: BinLedger, positions: PositionLedger,
                 collateral: CollateralAsset, access: AccessControl,
                 event_log: EventLog, address: str):
        self._store = store
        self._bins = bins
        self._positions = positions
        self._collateral = collateral
        self._access = access
        self._event_log = event_log
        self.address = address

    def calculate_reward(self, market_id: int, holder: str) -> int:
        """Reward holder would receive by claiming now; 0 if nothing is claimable."""
        market = self._store.find(market_id)
        if market is None or not market.closed:
            return 0
        token_id = encode_token_id(market_id, market.winning_bin)
        balance = self._positions.balance_of(holder, token_id)
        remaining = self._bins.get(market_id, market.winning_bin)
        if balance == 0 or remaining == 0:
            return 0
        return balance * market.collateral_balance // remaining

    def claim_reward(self, claimant: str, market_id: int, bin_index: int) -> Dict:
        """
        Burn the claimant's winning-bin position and pay out their share.

        Returns:
            Dict with recipient, amount and the burned balance
        """
        market = self._store.get(market_id)
        if not market.closed:
            raise MarketNotClosed()
        if bin_index != market.winning_bin:
            raise NotWinningBin()

        token_id = encode_token_id(market_id, bin_index)
        balance = self._positions.balance_of(claimant, token_id)
        if balance == 0:
            raise NoTokensToClaim()

        remaining = self._bins.get(market_id, bin_index)
        reward = balance * market.collateral_balance // remaining
        self._positions.require_manager(self.address)

        # Nothing below the payout can fail
        if reward > 0:
            self._collateral.transfer(self.address, claimant, reward)

        market.collateral_balance -= reward
        self._bins.decrease(market_id, bin_index, balance)
        self._positions.burn(self.address, claimant, token_id, balance)

        logger.info("Market %d: %s claimed %d for %d winning units",
                    market_id, claimant, reward, balance)
        self._event_log.emit(create_reward_claimed_event(market_id, claimant, reward))
        return {
            "recipient": claimant,
            "amount": reward,
            "burned": balance
        }

    def withdraw_all_collateral(self, caller: str, to: str) -> int:
        """
        Sweep every unit of collateral the vault holds to another address.

        This is not scoped to one market: every market's pool is zeroed,
        including markets that are still open.
        """
        self._access.require(caller)
        amount = self._collateral.balance_of(self.address)
        if amount == 0:
            raise NoCollateralToWithdraw()

        self._collateral.transfer(self.address, to, amount)
        for market in self._store.markets():
            market.collateral_balance = 0

        logger.warning("Withdrew all collateral (%d) to %s", amount, to)
        self._event_log.emit(create_collateral_withdrawn_event(to, amount))
        return amount
