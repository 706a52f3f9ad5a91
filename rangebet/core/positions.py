# rangebet/core/positions.py

import logging
from typing import Dict, List, Sequence, Tuple

from .costmath import checked_add, require_uint256
from .errors import InsufficientBalance, InvalidParameters, NotManager
from .events import Event, EventLog, create_transfer_single_event

logger = logging.getLogger(__name__)

# Token ids pack the market id above a 128-bit two's complement bin index
BIN_BITS = 128
BIN_MASK = (1 << BIN_BITS) - 1
MIN_BIN_INDEX = -(1 << (BIN_BITS - 1))
MAX_BIN_INDEX = (1 << (BIN_BITS - 1)) - 1
MAX_MARKET_ID = (1 << BIN_BITS) - 1

def encode_token_id(market_id: int, bin_index: int) -> int:
    """Pack (market_id, bin_index) into one integer key."""
    if not 0 <= market_id <= MAX_MARKET_ID:
        raise ValueError(f"market_id out of range: {market_id}")
    if not MIN_BIN_INDEX <= bin_index <= MAX_BIN_INDEX:
        raise ValueError(f"bin_index out of range: {bin_index}")
    return (market_id << BIN_BITS) | (bin_index & BIN_MASK)

def decode_token_id(token_id: int) -> Tuple[int, int]:
    """Inverse of encode_token_id."""
    require_uint256(token_id, "token_id")
    market_id = token_id >> BIN_BITS
    bin_index = token_id & BIN_MASK
    if bin_index > MAX_BIN_INDEX:
        bin_index -= 1 << BIN_BITS
    return market_id, bin_index

class PositionLedger:
    """
    Multi-token balance ledger keyed by (holder, token_id), like an ERC-1155.
    Minting and burning are reserved for the manager; holders may transfer
    freely.
    """
    def __init__(self, event_log: EventLog, manager: str):
        if not manager:
            raise InvalidParameters("Manager cannot be zero address")
        self._balances: Dict[Tuple[str, int], int] = {}
        self._supply: Dict[int, int] = {}
        self._event_log = event_log
        self._manager = manager

    @property
    def manager(self) -> str:
        return self._manager

    def set_manager(self, caller: str, new_manager: str) -> None:
        """Hand the manager role to another identity."""
        self.require_manager(caller)
        if not new_manager:
            raise InvalidParameters("Manager cannot be zero address")
        old_manager = self._manager
        self._manager = new_manager
        logger.info("Position ledger manager changed from %s to %s",
                    old_manager, new_manager)
        self._event_log.emit(Event(
            name="ManagerChanged",
            params={
                "old_manager": old_manager,
                "new_manager": new_manager
            }
        ))

    def balance_of(self, holder: str, token_id: int) -> int:
        """Get the balance of a holder for a token id."""
        return self._balances.get((holder, token_id), 0)

    def balance_of_batch(self, holders: Sequence[str],
                         token_ids: Sequence[int]) -> List[int]:
        """Get balances for parallel lists of holders and token ids."""
        if len(holders) != len(token_ids):
            raise ValueError("holders and token_ids length mismatch")
        return [self.balance_of(h, t) for h, t in zip(holders, token_ids)]

    def total_supply(self, token_id: int) -> int:
        """Outstanding amount of a token id (minted minus burned)."""
        return self._supply.get(token_id, 0)

    def mint(self, caller: str, holder: str, token_id: int, amount: int) -> None:
        """Create position units for a holder."""
        self.require_manager(caller)
        require_uint256(amount, "amount")
        new_balance = checked_add(self.balance_of(holder, token_id), amount, "balance")
        new_supply = checked_add(self.total_supply(token_id), amount, "supply")
        self._balances[(holder, token_id)] = new_balance
        self._supply[token_id] = new_supply

        self._event_log.emit(create_transfer_single_event(
            caller, None, holder, token_id, amount))

    def burn(self, caller: str, holder: str, token_id: int, amount: int) -> None:
        """Destroy position units held by a holder."""
        self.require_manager(caller)
        require_uint256(amount, "amount")
        current_balance = self.balance_of(holder, token_id)
        if current_balance < amount:
            raise InsufficientBalance(current_balance, amount)

        self._set_balance(holder, token_id, current_balance - amount)
        self._supply[token_id] = self.total_supply(token_id) - amount

        self._event_log.emit(create_transfer_single_event(
            caller, holder, None, token_id, amount))

    def transfer(self, from_holder: str, to_holder: str,
                 token_id: int, amount: int) -> None:
        """Move position units between holders."""
        require_uint256(amount, "amount")
        from_balance = self.balance_of(from_holder, token_id)
        if from_balance < amount:
            raise InsufficientBalance(from_balance, amount)
        if from_holder == to_holder:
            return  # No-op transfer

        self._set_balance(from_holder, token_id, from_balance - amount)
        self._balances[(to_holder, token_id)] = self.balance_of(to_holder, token_id) + amount

        self._event_log.emit(create_transfer_single_event(
            from_holder, from_holder, to_holder, token_id, amount))

    def _set_balance(self, holder: str, token_id: int, balance: int) -> None:
        if balance == 0:
            self._balances.pop((holder, token_id), None)
        else:
            self._balances[(holder, token_id)] = balance

    def require_manager(self, caller: str) -> None:
        """Raise NotManager unless caller holds the manager role."""
        if caller != self._manager:
            raise NotManager()
