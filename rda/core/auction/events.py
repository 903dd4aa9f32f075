"""
Events - notifications emitted by the auction house.

Each successful operation emits exactly one event after all of its state
changes and transfers have gone through. A failed operation emits
nothing.
"""

from dataclasses import asdict, dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from rda.crypto import bytes_to_hex
from rda.utils.logger import get_logger

logger = get_logger("events")


@dataclass(frozen=True)
class AuctionCreated:
    auction_id: int
    name: str
    description: str
    image_ref: str
    auctioneer: bytes
    asset_kind: int
    asset_ref: bytes
    asset_id_or_amount: int
    settlement_token: bytes
    starting_price: int
    reserved_price: int
    decay_rate: int
    duration: int
    deadline: int


@dataclass(frozen=True)
class ItemWithdrawn:
    auction_id: int
    receiver: bytes
    asset_ref: bytes
    asset_id_or_amount: int


@dataclass(frozen=True)
class FundsWithdrawn:
    auction_id: int
    amount: int


def event_to_dict(event) -> Dict[str, Any]:
    """Flatten an event for logging or storage (bytes as 0x-hex)."""
    data = {
        key: bytes_to_hex(value) if isinstance(value, bytes) else value
        for key, value in asdict(event).items()
    }
    data["event"] = type(event).__name__
    return data


def event_document(event) -> Tuple[str, Dict[str, Any]]:
    """(name, document) pair as written next to the auction record."""
    return type(event).__name__, event_to_dict(event)


class EventLog:
    """
    Ordered in-memory record of emitted events, fanned out to subscribers.

    Persisting an event is not done here: the repository writes it in the
    same transaction as the record change that produced it. By the time
    ``emit`` runs the operation has committed, so a failing subscriber is
    logged and skipped rather than reported to the caller.
    """

    def __init__(self):
        self.events: List[Any] = []
        self._subscribers: List[Callable[[Any], None]] = []

    def subscribe(self, callback: Callable[[Any], None]) -> None:
        self._subscribers.append(callback)

    def emit(self, event) -> None:
        self.events.append(event)

        logger.info(f"{type(event).__name__}: auction={event.auction_id}")
        for callback in self._subscribers:
            try:
                callback(event)
            except Exception as e:
                logger.error(f"Subscriber {callback!r} failed on {type(event).__name__}: {e}")

    def for_auction(self, auction_id: int) -> List[Any]:
        return [e for e in self.events if e.auction_id == auction_id]

    def last(self, event_type: Optional[type] = None):
        for event in reversed(self.events):
            if event_type is None or isinstance(event, event_type):
                return event
        return None

    def __len__(self) -> int:
        return len(self.events)
