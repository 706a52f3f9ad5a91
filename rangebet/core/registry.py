# rangebet/core/registry.py

import logging
import time
from typing import Callable, Optional

from .errors import (InvalidParameters, InvalidWinningBin, MarketAlreadyClosed,
                     MarketNotActive)
from .events import (EventLog, create_market_closed_event, create_market_created_event,
                     create_market_status_event)
from .positions import MAX_BIN_INDEX, MIN_BIN_INDEX
from .roles import AccessControl
from .store import Market, MarketInfo, Store

logger = logging.getLogger(__name__)

def unix_now() -> int:
    return int(time.time())

class MarketRegistry:
    """Market lifecycle: create, activate/deactivate, close."""
    def __init__(self, store: Store, access: AccessControl, event_log: EventLog,
                 clock: Callable[[], int] = unix_now):
        self._store = store
        self._access = access
        self._event_log = event_log
        self._clock = clock

    def create_market(self, caller: str, tick_spacing: int, min_tick: int,
                      max_tick: int, close_timestamp: Optional[int] = None) -> int:
        """
        Create a market and return its id.

        Args:
            caller: Identity requesting the creation (must be authorized)
            tick_spacing: Distance between bins, strictly positive
            min_tick: Lowest bin, a multiple of tick_spacing
            max_tick: Highest bin, a multiple of tick_spacing above min_tick
            close_timestamp: Informational deadline; None records 0
        """
        self._access.require(caller)
        if tick_spacing <= 0:
            raise InvalidParameters("Tick spacing must be positive")
        if min_tick % tick_spacing != 0:
            raise InvalidParameters("Min tick must be a multiple of tick spacing")
        if max_tick % tick_spacing != 0:
            raise InvalidParameters("Max tick must be a multiple of tick spacing")
        if min_tick >= max_tick:
            raise InvalidParameters("Min tick must be less than max tick")
        if min_tick < MIN_BIN_INDEX or max_tick > MAX_BIN_INDEX:
            raise InvalidParameters("Ticks exceed the bin index domain")
        if close_timestamp is not None and close_timestamp < 0:
            raise InvalidParameters("Close timestamp must be non-negative")

        market = self._store.add(Market(
            market_id=self._store.next_market_id(),
            tick_spacing=tick_spacing,
            min_tick=min_tick,
            max_tick=max_tick,
            open_timestamp=self._clock(),
            close_timestamp=close_timestamp or 0,
        ))

        logger.info("Market %d created: spacing=%d range=[%d, %d]",
                    market.market_id, tick_spacing, min_tick, max_tick)
        self._event_log.emit(create_market_created_event(
            market.market_id, tick_spacing, min_tick, max_tick,
            market.open_timestamp, market.close_timestamp))
        return market.market_id

    def activate_market(self, caller: str, market_id: int) -> None:
        self._set_active(caller, market_id, True)

    def deactivate_market(self, caller: str, market_id: int) -> None:
        self._set_active(caller, market_id, False)

    def _set_active(self, caller: str, market_id: int, active: bool) -> None:
        self._access.require(caller)
        market = self._store.get(market_id)
        if market.closed:
            raise MarketAlreadyClosed()
        if market.active == active:
            return

        market.active = active
        logger.info("Market %d %s", market_id, "activated" if active else "deactivated")
        self._event_log.emit(create_market_status_event(market_id, active))

    def close_market(self, caller: str, market_id: int, winning_bin: int) -> None:
        """Resolve a market. Closing is terminal."""
        self._access.require(caller)
        market = self._store.get(market_id)
        if market.closed:
            raise MarketAlreadyClosed()
        if not market.active:
            raise MarketNotActive()
        if not market.is_aligned(winning_bin):
            raise InvalidWinningBin("Winning bin must be a multiple of tick spacing")
        if not market.in_range(winning_bin):
            raise InvalidWinningBin("Winning bin out of range")

        market.closed = True
        market.active = False
        market.winning_bin = winning_bin

        logger.info("Market %d closed, winning bin %d holds %d of %d",
                    market_id, winning_bin, market.bins.get(winning_bin, 0),
                    market.total_supply)
        self._event_log.emit(create_market_closed_event(market_id, winning_bin))

    def get_market_info(self, market_id: int) -> MarketInfo:
        return self._store.get(market_id).snapshot()

    def market_count(self) -> int:
        return len(self._store)
