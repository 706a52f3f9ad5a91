# rangebet/core/events.py

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Sequence
from datetime import datetime

@dataclass
class Event:
    """Base class for all events in the system."""
    name: str
    params: Dict[str, Any]
    timestamp: datetime = None

    def __post_init__(self):
        if self.timestamp is None:
            self.timestamp = datetime.now()

class EventLog:
    """
    Maintains a log of all events in the system.

    When a clock (returning Unix seconds) is given, emitted events are
    stamped from it instead of the wall clock.
    """
    def __init__(self, clock: Optional[Callable[[], int]] = None):
        self._events: List[Event] = []
        self._clock = clock

    def emit(self, event: Event):
        """Add an event to the log."""
        if self._clock is not None:
            event.timestamp = datetime.fromtimestamp(self._clock())
        self._events.append(event)

    def get_events(self, event_name: Optional[str] = None) -> List[Event]:
        """
        Retrieve events from the log.
        If event_name is provided, only returns events with that name.
        """
        if event_name is None:
            return self._events.copy()
        return [e for e in self._events if e.name == event_name]

    def last(self, event_name: Optional[str] = None) -> Optional[Event]:
        """Most recent event, optionally filtered by name."""
        events = self.get_events(event_name)
        return events[-1] if events else None

    def clear(self):
        """Clear all events from the log."""
        self._events = []

# Market event factories
def create_market_created_event(market_id: int, tick_spacing: int, min_tick: int,
                                max_tick: int, open_timestamp: int,
                                close_timestamp: int) -> Event:
    return Event(
        name="MarketCreated",
        params={
            "market_id": market_id,
            "tick_spacing": tick_spacing,
            "min_tick": min_tick,
            "max_tick": max_tick,
            "open_timestamp": open_timestamp,
            "close_timestamp": close_timestamp
        }
    )

def create_market_status_event(market_id: int, active: bool) -> Event:
    return Event(
        name="MarketActivated" if active else "MarketDeactivated",
        params={
            "market_id": market_id
        }
    )

def create_tokens_bought_event(market_id: int, buyer: str, bin_indices: Sequence[int],
                               amounts: Sequence[int], total_cost: int) -> Event:
    return Event(
        name="TokensBought",
        params={
            "market_id": market_id,
            "buyer": buyer,
            "bin_indices": list(bin_indices),
            "amounts": list(amounts),
            "total_cost": total_cost
        }
    )

def create_market_closed_event(market_id: int, winning_bin: int) -> Event:
    return Event(
        name="MarketClosed",
        params={
            "market_id": market_id,
            "winning_bin": winning_bin
        }
    )

def create_reward_claimed_event(market_id: int, claimant: str, amount: int) -> Event:
    return Event(
        name="RewardClaimed",
        params={
            "market_id": market_id,
            "claimant": claimant,
            "amount": amount
        }
    )

def create_collateral_withdrawn_event(to: str, amount: int) -> Event:
    return Event(
        name="CollateralWithdrawn",
        params={
            "to": to,
            "amount": amount
        }
    )

# Balance ledger event factories
def create_transfer_single_event(operator: str, from_address: Optional[str],
                                 to_address: Optional[str], token_id: int,
                                 amount: int) -> Event:
    """Mints have no sender and burns have no recipient."""
    return Event(
        name="TransferSingle",
        params={
            "operator": operator,
            "from": from_address,
            "to": to_address,
            "id": token_id,
            "amount": amount
        }
    )

def create_transfer_event(from_address: Optional[str], to_address: str,
                          amount: int) -> Event:
    return Event(
        name="Transfer",
        params={
            "from": from_address,
            "to": to_address,
            "amount": amount
        }
    )

def create_approval_event(owner: str, spender: str, amount: int) -> Event:
    return Event(
        name="Approval",
        params={
            "owner": owner,
            "spender": spender,
            "amount": amount
        }
    )
