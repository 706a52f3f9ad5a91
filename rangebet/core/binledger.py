# rangebet/core/binledger.py

from typing import List, Tuple

from .costmath import checked_add
from .errors import InvalidRange, InsufficientBalance
from .store import Store

class BinLedger:
    """
    Per-market bin quantities. Bins are sparse: a bin nobody has bought
    reads as 0.
    """
    def __init__(self, store: Store):
        self._store = store

    def get(self, market_id: int, bin_index: int) -> int:
        """Get the quantity in a bin (0 if absent)."""
        return self._store.get(market_id).bins.get(bin_index, 0)

    def increase(self, market_id: int, bin_index: int, amount: int) -> int:
        """Add amount to a bin and return the new quantity."""
        bins = self._store.get(market_id).bins
        new_quantity = checked_add(bins.get(bin_index, 0), amount, "bin quantity")
        bins[bin_index] = new_quantity
        return new_quantity

    def decrease(self, market_id: int, bin_index: int, amount: int) -> int:
        """Remove amount from a bin and return the new quantity."""
        bins = self._store.get(market_id).bins
        current = bins.get(bin_index, 0)
        if current < amount:
            raise InsufficientBalance(current, amount)
        bins[bin_index] = current - amount
        return bins[bin_index]

    def range_query(self, market_id: int, from_bin: int,
                    to_bin: int) -> Tuple[List[int], List[int]]:
        """
        Enumerate every bin slot in [from_bin, to_bin], inclusive.

        Returns:
            Parallel lists (indices, quantities) in ascending order, one
            entry per slot including empty ones.
        """
        market = self._store.get(market_id)
        if from_bin > to_bin:
            raise InvalidRange("fromBinIndex must be <= toBinIndex")
        if from_bin < market.min_tick or to_bin > market.max_tick:
            raise InvalidRange("Bin index out of range")
        if not market.is_aligned(from_bin):
            raise InvalidRange("fromBinIndex not multiple of tickSpacing")
        if not market.is_aligned(to_bin):
            raise InvalidRange("toBinIndex not multiple of tickSpacing")

        indices = list(range(from_bin, to_bin + 1, market.tick_spacing))
        quantities = [market.bins.get(i, 0) for i in indices]
        return indices, quantities
