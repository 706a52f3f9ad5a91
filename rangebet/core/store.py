# rangebet/core/store.py

from dataclasses import dataclass, field
from typing import Dict, List, Optional

from .errors import MarketNotFound

@dataclass
class Market:
    """Mutable state of one market. Only components holding the Store write to it."""
    market_id: int
    tick_spacing: int
    min_tick: int
    max_tick: int
    active: bool = True
    closed: bool = False
    winning_bin: int = 0
    # Cumulative amount ever bought; the pricing denominator, never decreases
    total_supply: int = 0
    collateral_balance: int = 0
    open_timestamp: int = 0
    close_timestamp: int = 0
    # Sparse bin index -> quantity; absent bins hold 0
    bins: Dict[int, int] = field(default_factory=dict)

    def is_aligned(self, bin_index: int) -> bool:
        return bin_index % self.tick_spacing == 0

    def in_range(self, bin_index: int) -> bool:
        return self.min_tick <= bin_index <= self.max_tick

    def snapshot(self) -> "MarketInfo":
        return MarketInfo(
            market_id=self.market_id,
            active=self.active,
            closed=self.closed,
            tick_spacing=self.tick_spacing,
            min_tick=self.min_tick,
            max_tick=self.max_tick,
            total_supply=self.total_supply,
            collateral_balance=self.collateral_balance,
            winning_bin=self.winning_bin,
            open_timestamp=self.open_timestamp,
            close_timestamp=self.close_timestamp,
        )

@dataclass(frozen=True)
class MarketInfo:
    """Read-only snapshot returned by get_market_info."""
    market_id: int
    active: bool
    closed: bool
    tick_spacing: int
    min_tick: int
    max_tick: int
    total_supply: int
    collateral_balance: int
    winning_bin: int
    open_timestamp: int
    close_timestamp: int

class Store:
    """
    Owns every market, indexed by sequential id. Constructed once and
    shared by the registry, bin ledger, purchase and settlement components.
    """
    def __init__(self):
        self._markets: List[Market] = []

    def __len__(self) -> int:
        return len(self._markets)

    def next_market_id(self) -> int:
        return len(self._markets)

    def add(self, market: Market) -> Market:
        if market.market_id != self.next_market_id():
            raise ValueError(
                f"Market id {market.market_id} is not the next id {self.next_market_id()}")
        self._markets.append(market)
        return market

    def get(self, market_id: int) -> Market:
        """Get a market by id, raising MarketNotFound for unknown ids."""
        if market_id < 0 or market_id >= len(self._markets):
            raise MarketNotFound(market_id)
        return self._markets[market_id]

    def find(self, market_id: int) -> Optional[Market]:
        """Get a market by id, or None."""
        if market_id < 0 or market_id >= len(self._markets):
            return None
        return self._markets[market_id]

    def markets(self) -> List[Market]:
        return list(self._markets)
