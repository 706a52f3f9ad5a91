import matplotlib
matplotlib.use("Agg")

import pytest

from rangebet.core.collateral import SimpleCollateralToken
from rangebet.core.events import EventLog
from rangebet.core.manager import RangeBetManager
from rangebet.core.roles import OwnerAccessControl

ONE = 10 ** 18
NOW = 1_700_000_000

OWNER = "owner"
VAULT = "rangebet_manager"

def ether(amount) -> int:
    """Whole tokens to minimal units."""
    return int(amount * ONE)

@pytest.fixture
def event_log():
    return EventLog(clock=lambda: NOW)

@pytest.fixture
def token(event_log):
    return SimpleCollateralToken(event_log, OWNER, initial_supply=ether(1_000_000))

@pytest.fixture
def manager(token, event_log):
    return RangeBetManager(token, event_log, access=OwnerAccessControl(OWNER),
                           address=VAULT, clock=lambda: NOW)

@pytest.fixture
def users(token, manager):
    """
    Five traders. user4 holds only 1 token but approved 1000; user5 holds
    10,000 but approved only 10.
    """
    funding = {
        "user1": (ether(10_000), ether(10_000)),
        "user2": (ether(10_000), ether(10_000)),
        "user3": (ether(10_000), ether(10_000)),
        "user4": (ether(1), ether(1_000)),
        "user5": (ether(10_000), ether(10)),
    }
    for user, (balance, allowance) in funding.items():
        token.transfer(OWNER, user, balance)
        token.approve(user, manager.address, allowance)
    return list(funding)

@pytest.fixture
def market_params():
    return {
        "tick_spacing": 60,
        "min_tick": -360,
        "max_tick": 360
    }

@pytest.fixture
def market_id(manager, users, market_params):
    return manager.create_market(OWNER, **market_params)

@pytest.fixture
def settled_bets(manager, market_id):
    """user1 on bin 0, user2 on bins 0 and 60, user3 on bin -60."""
    manager.buy_tokens("user1", market_id, [0], [ether(100)], ether(150))
    manager.buy_tokens("user2", market_id, [0, 60], [ether(50), ether(100)], ether(200))
    manager.buy_tokens("user3", market_id, [-60], [ether(150)], ether(200))
    return market_id
