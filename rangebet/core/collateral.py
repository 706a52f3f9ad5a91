# rangebet/core/collateral.py

from abc import ABC, abstractmethod
from typing import Dict, Optional, Tuple

from .config import settings
from .events import Event, EventLog, create_transfer_event, create_approval_event

class InsufficientBalanceError(Exception):
    """Raised when an address has insufficient balance for a transfer."""
    pass

class InsufficientAllowanceError(Exception):
    """Raised when a spender has not been approved for enough tokens."""
    pass

class CollateralAsset(ABC):
    """
    Transfer interface of the fungible asset used as collateral. Failures
    raised by an implementation propagate unchanged through the market.
    """
    @abstractmethod
    def balance_of(self, address: str) -> int:
        pass

    @abstractmethod
    def transfer(self, caller: str, to_address: str, amount: int) -> bool:
        """Move amount from caller to to_address."""
        pass

    @abstractmethod
    def transfer_from(self, spender: str, from_address: str,
                      to_address: str, amount: int) -> bool:
        """Move amount from from_address using spender's allowance."""
        pass

class SimpleCollateralToken(CollateralAsset):
    """
    Simple ERC-20 like token. Balances are tracked in minimal units
    (10**decimals per whole token).
    """
    def __init__(self, event_log: EventLog, owner: str,
                 initial_supply: int = 0, decimals: Optional[int] = None):
        self._balances: Dict[str, int] = {}
        self._allowances: Dict[Tuple[str, str], int] = {}
        self._event_log = event_log
        self._total_supply = 0
        self.owner = owner
        self.decimals = settings.DECIMALS if decimals is None else decimals
        if initial_supply:
            self._mint(owner, initial_supply)

    def balance_of(self, address: str) -> int:
        """Get the balance of an address."""
        return self._balances.get(address, 0)

    def total_supply(self) -> int:
        """Get total supply of tokens in the system."""
        return self._total_supply

    def allowance(self, owner: str, spender: str) -> int:
        return self._allowances.get((owner, spender), 0)

    def mint(self, caller: str, to_address: str, amount: int) -> bool:
        """
        Create new tokens and assign them to an address.
        Only the token owner may mint.
        """
        if caller != self.owner:
            raise PermissionError(f"Unauthorized account: {caller}")
        return self._mint(to_address, amount)

    def request_tokens(self, caller: str, amount: int) -> bool:
        """Faucet: anyone may request tokens for themselves."""
        self._mint(caller, amount)
        self._event_log.emit(Event(
            name="TokensRequested",
            params={
                "requester": caller,
                "amount": amount
            }
        ))
        return True

    def approve(self, caller: str, spender: str, amount: int) -> bool:
        """Allow spender to move up to amount of caller's tokens."""
        if amount < 0:
            raise ValueError("Approve amount must be non-negative")
        self._allowances[(caller, spender)] = amount
        self._event_log.emit(create_approval_event(caller, spender, amount))
        return True

    def transfer(self, caller: str, to_address: str, amount: int) -> bool:
        """
        Transfer tokens from caller to another address.
        """
        self._move(caller, to_address, amount)
        return True

    def transfer_from(self, spender: str, from_address: str,
                      to_address: str, amount: int) -> bool:
        """
        Transfer tokens on behalf of from_address, consuming allowance.
        """
        allowed = self.allowance(from_address, spender)
        if allowed < amount:
            raise InsufficientAllowanceError(
                f"Insufficient allowance: {allowed} < {amount}")
        self._move(from_address, to_address, amount)
        self._allowances[(from_address, spender)] = allowed - amount
        return True

    def _mint(self, to_address: str, amount: int) -> bool:
        if amount <= 0:
            raise ValueError("Mint amount must be positive")

        self._balances[to_address] = self.balance_of(to_address) + amount
        self._total_supply += amount

        self._event_log.emit(create_transfer_event(None, to_address, amount))
        return True

    def _move(self, from_address: str, to_address: str, amount: int) -> None:
        if amount < 0:
            raise ValueError("Transfer amount must be non-negative")

        from_balance = self.balance_of(from_address)
        if from_balance < amount:
            raise InsufficientBalanceError(
                f"Insufficient balance: {from_balance} < {amount}")

        if from_address != to_address:
            self._balances[from_address] = from_balance - amount
            self._balances[to_address] = self.balance_of(to_address) + amount

        self._event_log.emit(create_transfer_event(from_address, to_address, amount))
