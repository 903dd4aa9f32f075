import json
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

from rda.core.storage.sqlite_adapter import SQLiteAdapter
from rda.utils.logger import get_logger

logger = get_logger("storage.manager")


class StorageManager:
    """
    Manages persistent storage for the auction house.

    Coordinates data persistence using SQLite adapter.
    Handles:
    - Auction records (JSON documents)
    - Event log
    - Metadata (next auction id)
    """

    def __init__(self, data_dir: Path, db_name: str = "auctions.db"):
        self.data_dir = Path(data_dir)
        self.db_path = self.data_dir / db_name
        self.adapter = SQLiteAdapter(self.db_path)

        logger.info(f"StorageManager initialized at {self.db_path}")

    # =========================================================================
    # Auctions
    # =========================================================================

    def persist_auction(
        self,
        record: Dict[str, Any],
        next_id: Optional[int] = None,
        event: Optional[Tuple[str, Dict[str, Any]]] = None,
    ):
        """
        Persist an auction record (as produced by AuctionRecord.to_dict).

        Args:
            record: Record document
            next_id: Id counter to store with the record
            event: (name, document) of the event the write produces
        """
        encoded_event = None
        if event is not None:
            name, data = event
            encoded_event = (name, json.dumps(data, sort_keys=True))

        self.adapter.save_auction(
            record["auction_id"],
            json.dumps(record, sort_keys=True),
            record["settled"],
            counter=next_id,
            event=encoded_event,
        )

    def load_auction(self, auction_id: int) -> Optional[Dict[str, Any]]:
        data = self.adapter.get_auction(auction_id)
        return json.loads(data) if data else None

    def load_auctions(self) -> List[Dict[str, Any]]:
        return [json.loads(data) for _, data in self.adapter.get_all_auctions()]

    def get_next_id(self) -> Optional[int]:
        value = self.adapter.get_meta("next_auction_id")
        return int(value) if value else None

    # =========================================================================
    # Events
    # =========================================================================

    def load_events(self, auction_id: Optional[int] = None) -> List[Tuple[int, str, Dict[str, Any]]]:
        return [
            (aid, name, json.loads(data))
            for aid, name, data in self.adapter.get_events(auction_id)
        ]

    def stats(self) -> dict:
        return {
            "auctions": self.adapter.count_auctions(),
            "settled": self.adapter.count_auctions(settled=True),
            "events": len(self.adapter.get_events()),
        }

    def close(self):
        self.adapter.close()
