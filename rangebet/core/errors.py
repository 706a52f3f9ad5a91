# rangebet/core/errors.py
"""Error taxonomy for the range bet engine.

Every failure carries a stable integer ``code`` and a stable ``reason``
string so callers and tests can assert on the exact cause.

Code ranges:
  1xxx: Access control
  2xxx: Market lifecycle
  3xxx: Bins / ranges
  4xxx: Purchases
  5xxx: Positions
  6xxx: Settlement
"""


class RangeBetError(Exception):
    """Base error."""

    def __init__(self, code: int, reason: str) -> None:
        self.code = code
        self.reason = reason
        super().__init__(reason)


# --- 1xxx: Access control ---

class Unauthorized(RangeBetError):
    def __init__(self, caller: str) -> None:
        super().__init__(1001, f"Unauthorized account: {caller}")
        self.caller = caller


class NotManager(RangeBetError):
    def __init__(self) -> None:
        super().__init__(1002, "Only manager can call this function")


# --- 2xxx: Market lifecycle ---

class InvalidParameters(RangeBetError):
    def __init__(self, reason: str) -> None:
        super().__init__(2001, reason)


class MarketNotFound(RangeBetError):
    def __init__(self, market_id: int) -> None:
        super().__init__(2002, f"Market not found: {market_id}")


class MarketNotActive(RangeBetError):
    def __init__(self) -> None:
        super().__init__(2003, "Market is not active")


class MarketClosed(RangeBetError):
    def __init__(self) -> None:
        super().__init__(2004, "Market is closed")


class MarketAlreadyClosed(RangeBetError):
    def __init__(self) -> None:
        super().__init__(2005, "Market is already closed")


class MarketNotClosed(RangeBetError):
    def __init__(self) -> None:
        super().__init__(2006, "Market is not closed")


# --- 3xxx: Bins / ranges ---

class InvalidBinIndex(RangeBetError):
    def __init__(self) -> None:
        super().__init__(3001, "Bin index must be a multiple of tick spacing")


class BinOutOfRange(RangeBetError):
    def __init__(self) -> None:
        super().__init__(3002, "Bin index out of range")


class InvalidRange(RangeBetError):
    def __init__(self, reason: str) -> None:
        super().__init__(3003, reason)


class InvalidWinningBin(RangeBetError):
    def __init__(self, reason: str) -> None:
        super().__init__(3004, reason)


# --- 4xxx: Purchases ---

class ArrayLengthMismatch(RangeBetError):
    def __init__(self) -> None:
        super().__init__(4001, "Array lengths must match")


class CostExceedsMax(RangeBetError):
    def __init__(self, cost: int, max_collateral: int) -> None:
        super().__init__(4002, "Cost exceeds max collateral")
        self.cost = cost
        self.max_collateral = max_collateral


# --- 5xxx: Positions ---

class InsufficientBalance(RangeBetError):
    def __init__(self, available: int, required: int) -> None:
        super().__init__(
            5001, f"Insufficient balance: {available} < {required}")
        self.available = available
        self.required = required


# --- 6xxx: Settlement ---

class NotWinningBin(RangeBetError):
    def __init__(self) -> None:
        super().__init__(6001, "Not the winning bin")


class NoTokensToClaim(RangeBetError):
    def __init__(self) -> None:
        super().__init__(6002, "No tokens to claim")


class NoCollateralToWithdraw(RangeBetError):
    def __init__(self) -> None:
        super().__init__(6003, "No collateral to withdraw")
