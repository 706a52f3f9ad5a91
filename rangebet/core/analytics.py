# rangebet/core/analytics.py

from typing import Optional, Tuple

import numpy as np
from scipy.integrate import quad
from matplotlib.axes import Axes
import matplotlib.pyplot as plt

from rangebet.core.config import settings
from rangebet.core.costmath import calculate_cost

def bin_distribution(manager, market_id: int, decimals: Optional[int] = None
                     ) -> Tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Summarize a market's bins as arrays.

    Args:
        manager: RangeBetManager holding the market
        market_id: Market to summarize
        decimals: Fixed-point scale used to convert quantities to tokens,
            settings.DECIMALS if omitted

    Returns:
        Tuple of (bin indices, quantities in whole tokens, implied
        probabilities, each bin's share of the bin total). Probabilities
        are all zero on an empty market.
    """
    info = manager.get_market_info(market_id)
    indices, quantities = manager.get_bin_quantities_in_range(
        market_id, info.min_tick, info.max_tick)

    if decimals is None:
        decimals = settings.DECIMALS
    scale = float(10 ** decimals)
    bins = np.asarray(indices)
    tokens = np.array([q / scale for q in quantities], dtype=float)
    total = tokens.sum()
    if total > 0:
        probabilities = tokens / total
    else:
        probabilities = np.zeros_like(tokens)
    return bins, tokens, probabilities

def reference_cost(q: float, T: float, t: float) -> float:
    """
    Numerically integrate the bin price (q + x) / (T + x) over [0, t].

    Floating-point counterpart of calculate_cost, for inspecting the
    fixed-point result.
    """
    if T == 0:
        return float(t)
    value, _ = quad(lambda x: (q + x) / (T + x), 0.0, t)
    return value

def cost_curve(q: int, T: int, max_amount: int, points: int = 50) -> Tuple[np.ndarray, np.ndarray]:
    """
    Sample the cost of buying increasing amounts in one bin.

    Returns:
        Tuple of (amounts, costs) as integer-valued float arrays
    """
    if points < 2:
        raise ValueError("points must be at least 2")
    amounts = np.linspace(0, max_amount, points)
    costs = np.array([calculate_cost(q, T, int(a)) for a in amounts], dtype=float)
    return amounts, costs

def plot_bin_distribution(manager, market_id: int, ax: Optional[Axes] = None,
                          decimals: Optional[int] = None) -> Axes:
    """Bar chart of bin quantities with the winning bin highlighted once closed."""
    bins, tokens, _ = bin_distribution(manager, market_id, decimals)
    info = manager.get_market_info(market_id)

    if ax is None:
        _, ax = plt.subplots()
    colors = ["tab:blue"] * len(bins)
    if info.closed:
        colors = ["tab:green" if b == info.winning_bin else "tab:gray" for b in bins]
    ax.bar(bins, tokens, width=info.tick_spacing * 0.8, color=colors)
    ax.set_xlabel("bin")
    ax.set_ylabel("quantity")
    ax.set_title(f"Market {market_id}")
    return ax
