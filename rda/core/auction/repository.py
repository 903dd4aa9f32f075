"""
Repository - the keyed store that owns every auction record.

Identifiers are assigned from a private counter starting at 1 and are
never reused. Each record has its own reentrant lock; every operation
that reads-then-mutates a record runs inside that lock, so two callers
can never interleave on the same auction. The lock is reentrant so a
transfer callback that re-enters the house on the same thread sees the
already-terminal state instead of deadlocking.
"""

import threading
from typing import Any, Callable, Dict, List, Optional

from rda.core.auction.events import event_document
from rda.core.auction.record import AuctionParams, AuctionRecord
from rda.core.errors import InvalidAuctionId
from rda.utils.logger import get_logger

logger = get_logger("repository")

FIRST_AUCTION_ID = 1


class AuctionRepository:
    """
    In-memory auction store with optional SQLite backing.

    Attributes:
        storage_manager: Persistence manager. None = in-memory only.
    """

    def __init__(self, storage_manager=None):
        self._records: Dict[int, AuctionRecord] = {}
        self._locks: Dict[int, threading.RLock] = {}
        self._next_id = FIRST_AUCTION_ID
        self._registry_lock = threading.Lock()

        self.storage_manager = storage_manager

        if storage_manager:
            self._load_from_storage()

    # =========================================================================
    # Creation
    # =========================================================================

    def insert(
        self,
        params: AuctionParams,
        created_at: int,
        event_for: Optional[Callable[[AuctionRecord], Any]] = None,
    ) -> AuctionRecord:
        """
        Assign the next id and store a fresh record for it.

        ``event_for`` builds the creation event from the new record; it is
        written together with the record and the id counter.
        """
        with self._registry_lock:
            auction_id = self._next_id
            record = AuctionRecord.open(auction_id, params, created_at)
            if self.storage_manager:
                event = event_document(event_for(record)) if event_for else None
                self.storage_manager.persist_auction(record.to_dict(), next_id=auction_id + 1, event=event)
            self._records[auction_id] = record
            self._locks[auction_id] = threading.RLock()
            self._next_id = auction_id + 1

        logger.debug(f"Stored auction {auction_id}")
        return record

    # =========================================================================
    # Access
    # =========================================================================

    def exists(self, auction_id: int) -> bool:
        return auction_id in self._records

    def require(self, auction_id: int) -> AuctionRecord:
        """Live record for ``auction_id``; raises InvalidAuctionId if unknown."""
        record = self._records.get(auction_id)
        if record is None:
            raise InvalidAuctionId(auction_id, "no such auction")
        return record

    def lock(self, auction_id: int) -> threading.RLock:
        """Per-auction critical section."""
        lock = self._locks.get(auction_id)
        if lock is None:
            raise InvalidAuctionId(auction_id, "no such auction")
        return lock

    def get(self, auction_id: int) -> Optional[AuctionRecord]:
        """Detached copy of a record, or None."""
        record = self._records.get(auction_id)
        return record.copy() if record else None

    def list(self) -> List[AuctionRecord]:
        return [self._records[i].copy() for i in sorted(self._records)]

    def count(self) -> int:
        return len(self._records)

    @property
    def next_id(self) -> int:
        return self._next_id

    # =========================================================================
    # Persistence
    # =========================================================================

    def save(self, record: AuctionRecord, event=None) -> None:
        """Persist a mutated record and the event it produced (no-op when in-memory only)."""
        if self.storage_manager:
            self.storage_manager.persist_auction(
                record.to_dict(),
                event=event_document(event) if event is not None else None,
            )

    def _load_from_storage(self) -> None:
        for data in self.storage_manager.load_auctions():
            record = AuctionRecord.from_dict(data)
            self._records[record.auction_id] = record
            self._locks[record.auction_id] = threading.RLock()

        stored_next = self.storage_manager.get_next_id() or FIRST_AUCTION_ID
        highest = max(self._records, default=FIRST_AUCTION_ID - 1)
        self._next_id = max(stored_next, highest + 1)

        logger.info(f"Loaded {len(self._records)} auctions, next id={self._next_id}")

    def __repr__(self) -> str:
        return f"AuctionRepository(auctions={len(self._records)}, next_id={self._next_id})"
