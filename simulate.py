"""
Range bet market walkthrough.

Creates a market, funds a few traders, runs their purchases, closes the
market on a winning bin and lets every winner claim.

    python simulate.py --winning-bin 0 --plot market.png
"""

import argparse
import logging

from rangebet.core.analytics import bin_distribution, plot_bin_distribution
from rangebet.core.collateral import SimpleCollateralToken
from rangebet.core.config import settings
from rangebet.core.events import EventLog
from rangebet.core.manager import RangeBetManager
from rangebet.core.roles import OwnerAccessControl

logger = logging.getLogger("simulate")

ONE = 10 ** settings.DECIMALS

# trader -> (bins, whole-token amounts)
ORDERS = {
    "user1": ([0], [100]),
    "user2": ([0, 60], [50, 100]),
    "user3": ([-60], [150]),
    "user4": ([-120, -60, 0, 60, 120], [20, 20, 20, 20, 20]),
}

def run(tick_spacing: int, min_tick: int, max_tick: int, winning_bin: int,
        plot_path: str = None) -> RangeBetManager:
    event_log = EventLog()
    owner = settings.OWNER
    token = SimpleCollateralToken(event_log, owner, initial_supply=1_000_000 * ONE)
    manager = RangeBetManager(token, event_log, access=OwnerAccessControl(owner))

    market_id = manager.create_market(owner, tick_spacing, min_tick, max_tick)

    for trader, (bins, amounts) in ORDERS.items():
        token.transfer(owner, trader, 10_000 * ONE)
        token.approve(trader, manager.address, 10_000 * ONE)
        result = manager.buy_tokens(trader, market_id, bins, [a * ONE for a in amounts],
                                    10_000 * ONE)
        logger.info("%s paid %.6f for bins %s", trader, result["total_cost"] / ONE, bins)

    info = manager.get_market_info(market_id)
    logger.info("Pool %.6f, total supply %.2f",
                info.collateral_balance / ONE, info.total_supply / ONE)
    _, _, probabilities = bin_distribution(manager, market_id)
    logger.info("Implied probabilities: %s", probabilities.round(4).tolist())
    if plot_path:
        ax = plot_bin_distribution(manager, market_id)
        ax.figure.savefig(plot_path)
        logger.info("Saved plot to %s", plot_path)

    manager.close_market(owner, market_id, winning_bin)
    for trader in ORDERS:
        if manager.balance_of(trader, market_id, winning_bin) == 0:
            continue
        claim = manager.claim_reward(trader, market_id, winning_bin)
        logger.info("%s claimed %.6f", trader, claim["amount"] / ONE)

    logger.info("Dust left in pool: %d",
                manager.get_market_info(market_id).collateral_balance)
    return manager

def main():
    parser = argparse.ArgumentParser(description="Simulate a range bet market")
    parser.add_argument("--tick-spacing", type=int, default=60)
    parser.add_argument("--min-tick", type=int, default=-360)
    parser.add_argument("--max-tick", type=int, default=360)
    parser.add_argument("--winning-bin", type=int, default=0)
    parser.add_argument("--plot", help="Save a bar chart of the market to this path")
    args = parser.parse_args()

    logging.basicConfig(level=settings.LOG_LEVEL,
                        format="%(asctime)s %(name)s %(levelname)s %(message)s")

    run(args.tick_spacing, args.min_tick, args.max_tick, args.winning_bin, args.plot)

if __name__ == "__main__":
    main()
