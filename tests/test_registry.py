import pytest
from datetime import datetime

from conftest import NOW, OWNER, ether
from rangebet.core.errors import (
    InvalidParameters,
    InvalidWinningBin,
    MarketAlreadyClosed,
    MarketNotActive,
    MarketNotFound,
    Unauthorized
)

def test_create_market(manager, market_id):
    """Second market gets id 1 and starts active and empty."""
    new_id = manager.create_market(OWNER, 120, -720, 720)
    assert new_id == 1

    info = manager.get_market_info(new_id)
    assert info.active
    assert not info.closed
    assert info.tick_spacing == 120
    assert info.min_tick == -720
    assert info.max_tick == 720
    assert info.total_supply == 0
    assert info.collateral_balance == 0
    assert info.open_timestamp == NOW
    assert info.close_timestamp == 0

    event = manager.event_log.last("MarketCreated")
    assert event.params["market_id"] == 1
    assert event.params["tick_spacing"] == 120
    assert event.timestamp == datetime.fromtimestamp(info.open_timestamp)

def test_sequential_ids(manager, market_id):
    params = [(120, -720, 720), (180, -1080, 1080)]
    ids = [manager.create_market(OWNER, *p) for p in params]

    assert ids == [1, 2]
    assert manager.market_count() == 3
    for market, (spacing, low, high) in zip(ids, params):
        info = manager.get_market_info(market)
        assert (info.tick_spacing, info.min_tick, info.max_tick) == (spacing, low, high)

def test_close_timestamp_recorded(manager):
    market = manager.create_market(OWNER, 60, -360, 360, close_timestamp=NOW + 86400)
    assert manager.get_market_info(market).close_timestamp == NOW + 86400

@pytest.mark.parametrize("params,reason", [
    ((60, -361, 360), "Min tick must be a multiple of tick spacing"),
    ((60, -360, 361), "Max tick must be a multiple of tick spacing"),
    ((60, 360, 360), "Min tick must be less than max tick"),
    ((0, -360, 360), "Tick spacing must be positive"),
    ((-60, -360, 360), "Tick spacing must be positive"),
])
def test_invalid_parameters(manager, params, reason):
    with pytest.raises(InvalidParameters) as exc_info:
        manager.create_market(OWNER, *params)
    assert exc_info.value.reason == reason
    assert manager.market_count() == 0

def test_only_owner_creates(manager):
    with pytest.raises(Unauthorized):
        manager.create_market("user1", 60, -360, 360)

def test_unknown_market(manager):
    with pytest.raises(MarketNotFound):
        manager.get_market_info(7)

def test_deactivate_and_reactivate(manager, market_id):
    manager.deactivate_market(OWNER, market_id)
    assert not manager.get_market_info(market_id).active

    with pytest.raises(MarketNotActive):
        manager.buy_tokens("user1", market_id, [0], [ether(100)], ether(150))

    manager.activate_market(OWNER, market_id)
    assert manager.get_market_info(market_id).active
    manager.buy_tokens("user1", market_id, [0], [ether(100)], ether(150))

def test_lifecycle_calls_are_idempotent(manager, market_id):
    manager.activate_market(OWNER, market_id)
    assert manager.get_market_info(market_id).active

    manager.deactivate_market(OWNER, market_id)
    manager.deactivate_market(OWNER, market_id)
    assert not manager.get_market_info(market_id).active

    # Only real transitions are announced
    assert len(manager.event_log.get_events("MarketDeactivated")) == 1
    assert manager.event_log.get_events("MarketActivated") == []

def test_lifecycle_calls_are_owner_only(manager, market_id):
    with pytest.raises(Unauthorized):
        manager.deactivate_market("user1", market_id)
    with pytest.raises(Unauthorized):
        manager.activate_market("user1", market_id)
    with pytest.raises(Unauthorized):
        manager.close_market("user1", market_id, 0)

def test_closed_market_cannot_toggle(manager, settled_bets):
    manager.close_market(OWNER, settled_bets, 0)

    with pytest.raises(MarketAlreadyClosed):
        manager.deactivate_market(OWNER, settled_bets)
    with pytest.raises(MarketAlreadyClosed):
        manager.activate_market(OWNER, settled_bets)

def test_close_market(manager, settled_bets):
    manager.close_market(OWNER, settled_bets, 0)

    info = manager.get_market_info(settled_bets)
    assert info.closed
    assert not info.active
    assert info.winning_bin == 0
    assert manager.event_log.last("MarketClosed").params == {
        "market_id": settled_bets,
        "winning_bin": 0
    }

def test_close_with_invalid_winning_bin(manager, settled_bets):
    with pytest.raises(InvalidWinningBin) as exc_info:
        manager.close_market(OWNER, settled_bets, 61)
    assert exc_info.value.reason == "Winning bin must be a multiple of tick spacing"

    with pytest.raises(InvalidWinningBin) as exc_info:
        manager.close_market(OWNER, settled_bets, 420)
    assert exc_info.value.reason == "Winning bin out of range"

    assert not manager.get_market_info(settled_bets).closed

def test_cannot_close_inactive_market(manager, settled_bets):
    manager.deactivate_market(OWNER, settled_bets)
    with pytest.raises(MarketNotActive):
        manager.close_market(OWNER, settled_bets, 0)

def test_cannot_close_twice(manager, settled_bets):
    manager.close_market(OWNER, settled_bets, 0)
    with pytest.raises(MarketAlreadyClosed):
        manager.close_market(OWNER, settled_bets, 60)
    assert manager.get_market_info(settled_bets).winning_bin == 0

def test_snapshot_is_read_only(manager, market_id):
    info = manager.get_market_info(market_id)
    with pytest.raises(AttributeError):
        info.active = False
