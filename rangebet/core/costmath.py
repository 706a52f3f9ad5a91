# rangebet/core/costmath.py
"""
Integral pricing for range bet bins.

All amounts are unsigned fixed-point integers in minimal units (18
decimals by default). The marginal price of one more unit in a bin is

    p(x) = (q + x) / (T + x)

where q is the bin quantity and T the market-wide supply. Buying t units
costs the integral of p over [0, t]:

    cost = t + (q - T) * ln((T + t) / T)

The logarithm is evaluated with the decimal module at a precision that
grows with the operands, and the result is rounded up, so the market
never under-charges. The charged cost exceeds the exact integral by less
than one minimal unit plus an error bound far below 1e-20 units.
"""

from decimal import Decimal, localcontext, ROUND_CEILING
from typing import Optional

from .config import settings

MAX_UINT256 = 2**256 - 1
DEFAULT_LN_PRECISION = 60

# Extra significant digits carried beyond the size of the operands
_GUARD_DIGITS = 30

def require_uint256(value: int, name: str = "value") -> int:
    """
    Check that value fits the unsigned 256-bit domain.

    Raises:
        ValueError: value is negative
        OverflowError: value exceeds 2**256 - 1
    """
    if value < 0:
        raise ValueError(f"{name} must be non-negative")
    if value > MAX_UINT256:
        raise OverflowError(f"{name} exceeds uint256: {value}")
    return value

def checked_add(a: int, b: int, name: str = "value") -> int:
    """Add two unsigned amounts, failing loudly past 2**256 - 1."""
    return require_uint256(a + b, name)

def calculate_cost(q: int, T: int, t: int,
                   ln_precision: int = DEFAULT_LN_PRECISION) -> int:
    """
    Calculate the collateral cost of buying t units in a bin.

    Args:
        q: Quantity already in the target bin
        T: Market-wide total supply before this purchase
        t: Amount being purchased
        ln_precision: Minimum significant digits for the logarithm

    Returns:
        Cost in minimal collateral units, rounded up
    """
    require_uint256(q, "q")
    require_uint256(T, "T")
    require_uint256(t, "t")
    require_uint256(T + t, "T + t")

    # Price is identically 1 on an empty market or a bin holding all supply
    if T == 0 or q == T or t == 0:
        return t

    digits = len(str(T + t))
    precision = max(ln_precision, digits + _GUARD_DIGITS)
    with localcontext() as ctx:
        ctx.prec = precision
        log_ratio = (Decimal(T + t) / Decimal(T)).ln()
        spread = Decimal(q - T)
        term = spread * log_ratio
        # Bound on division, ln and multiplication error; ln(ratio) <= 178
        margin = abs(spread) * Decimal(10) ** (6 - precision)
        upper = (term + margin).to_integral_value(rounding=ROUND_CEILING)

    cost = t + int(upper)
    return require_uint256(max(cost, 0), "cost")

def spot_price(q: int, T: int, decimals: Optional[int] = None) -> int:
    """
    Marginal price of the next unit in a bin, as a fixed-point fraction.

    Args:
        q: Quantity in the bin
        T: Market-wide total supply
        decimals: Fixed-point scale of the result, settings.DECIMALS if omitted

    Returns:
        q / T scaled by 10**decimals (1.0 when the market is empty)
    """
    if decimals is None:
        decimals = settings.DECIMALS
    one = 10 ** decimals
    if T == 0:
        return one
    return q * one // T
