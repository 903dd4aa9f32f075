"""
Unit tests for SQLite storage.
"""

import sqlite3

import pytest

from rda.core.auction import AuctionRecord, EventLog, FundsWithdrawn
from rda.core.storage import StorageManager


@pytest.fixture
def storage(tmp_path):
    return StorageManager(data_dir=tmp_path / "store")


class TestStorageManager:
    """Tests for auction and event persistence."""

    def test_creates_database(self, storage, tmp_path):
        assert (tmp_path / "store" / "auctions.db").exists()

    def test_auction_roundtrip(self, storage, params):
        record = AuctionRecord.open(1, params, created_at=50)
        storage.persist_auction(record.to_dict(), next_id=2)

        loaded = AuctionRecord.from_dict(storage.load_auction(1))
        assert loaded == record
        assert storage.get_next_id() == 2

    def test_upsert(self, storage, params, bob):
        record = AuctionRecord.open(1, params, created_at=50)
        storage.persist_auction(record.to_dict(), next_id=2)

        record.winner, record.escrowed_funds, record.settled = bob, 123, True
        storage.persist_auction(record.to_dict())

        assert storage.load_auction(1)["settled"] is True
        assert storage.stats()["auctions"] == 1
        assert storage.stats()["settled"] == 1
        # Counter untouched by plain saves
        assert storage.get_next_id() == 2

    def test_missing_auction(self, storage):
        assert storage.load_auction(9) is None
        assert storage.get_next_id() is None

    def test_event_written_with_record(self, storage, params):
        record = AuctionRecord.open(3, params, created_at=50)
        storage.persist_auction(record.to_dict(), event=("FundsWithdrawn", {"auction_id": 3, "amount": 10}))
        storage.persist_auction(record.to_dict())

        assert storage.load_events(3) == [(3, "FundsWithdrawn", {"auction_id": 3, "amount": 10})]
        assert storage.stats()["events"] == 1

    def test_failed_write_keeps_neither(self, storage, params):
        """Record and event share one transaction; a rejected event undoes the record write."""
        record = AuctionRecord.open(3, params, created_at=50)
        storage.persist_auction(record.to_dict())
        record.settled = True

        with pytest.raises(sqlite3.IntegrityError):
            storage.persist_auction(record.to_dict(), event=(None, {"amount": 10}))

        assert storage.load_auction(3)["settled"] is False
        assert storage.load_events(3) == []


class TestEventLog:
    """Tests for in-memory event log behaviour."""

    def test_subscribers(self):
        seen = []
        log = EventLog()
        log.subscribe(seen.append)
        event = FundsWithdrawn(auction_id=1, amount=5)
        log.emit(event)

        assert seen == [event]
        assert log.for_auction(1) == [event]
        assert log.last(FundsWithdrawn) is event
        assert log.last(int) is None

    def test_failing_subscriber_is_isolated(self):
        seen = []
        log = EventLog()

        def broken(event):
            raise RuntimeError("subscriber down")

        log.subscribe(broken)
        log.subscribe(seen.append)
        event = FundsWithdrawn(auction_id=1, amount=5)
        log.emit(event)

        assert seen == [event]
        assert len(log) == 1
