import sqlite3
import threading
from pathlib import Path
from typing import List, Optional, Tuple

from rda.utils.logger import get_logger

logger = get_logger("storage.sqlite")


class SQLiteAdapter:
    """
    SQLite backend for persistent storage.

    Provides:
    1. Auction records, one JSON document per auction id.
    2. Append-only event log.
    3. House metadata (id counter).
    """

    def __init__(self, db_path: Path):
        self.db_path = db_path
        self._conn_local = threading.local()

        if not db_path.parent.exists():
            db_path.parent.mkdir(parents=True, exist_ok=True)

        self._init_schema()

    def _get_conn(self) -> sqlite3.Connection:
        """Get or create connection for current thread."""
        if not hasattr(self._conn_local, "conn"):
            self._conn_local.conn = sqlite3.connect(
                self.db_path,
                timeout=30.0,
                check_same_thread=False
            )
            self._conn_local.conn.row_factory = sqlite3.Row
            # WAL lets readers proceed while a claim is being written
            self._conn_local.conn.execute("PRAGMA journal_mode=WAL;")
            self._conn_local.conn.execute("PRAGMA synchronous=NORMAL;")
        return self._conn_local.conn

    def _init_schema(self):
        """Initialize database schema."""
        conn = self._get_conn()
        with conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS auctions (
                    auction_id INTEGER PRIMARY KEY,
                    data TEXT NOT NULL,
                    settled INTEGER NOT NULL DEFAULT 0
                )
            """)

            conn.execute("""
                CREATE TABLE IF NOT EXISTS events (
                    seq INTEGER PRIMARY KEY AUTOINCREMENT,
                    auction_id INTEGER NOT NULL,
                    name TEXT NOT NULL,
                    data TEXT NOT NULL
                )
            """)
            conn.execute("CREATE INDEX IF NOT EXISTS idx_events_auction ON events(auction_id);")

            conn.execute("""
                CREATE TABLE IF NOT EXISTS house_state (
                    key TEXT PRIMARY KEY,
                    value TEXT
                )
            """)

    # =========================================================================
    # Auctions
    # =========================================================================

    def save_auction(
        self,
        auction_id: int,
        data: str,
        settled: bool,
        counter: Optional[int] = None,
        event: Optional[Tuple[str, str]] = None,
    ):
        """
        Upsert an auction in one transaction.

        Optionally bumps the id counter and appends a (name, data) event
        alongside the record, so either all of them are written or none.
        """
        conn = self._get_conn()
        with conn:
            conn.execute(
                "INSERT OR REPLACE INTO auctions (auction_id, data, settled) VALUES (?, ?, ?)",
                (auction_id, data, int(settled))
            )
            if counter is not None:
                conn.execute(
                    "INSERT OR REPLACE INTO house_state (key, value) VALUES (?, ?)",
                    ("next_auction_id", str(counter))
                )
            if event is not None:
                name, event_data = event
                conn.execute(
                    "INSERT INTO events (auction_id, name, data) VALUES (?, ?, ?)",
                    (auction_id, name, event_data)
                )

    def get_auction(self, auction_id: int) -> Optional[str]:
        conn = self._get_conn()
        cursor = conn.execute("SELECT data FROM auctions WHERE auction_id = ?", (auction_id,))
        row = cursor.fetchone()
        return row['data'] if row else None

    def get_all_auctions(self) -> List[Tuple[int, str]]:
        """Get all (auction_id, data) ordered by id."""
        conn = self._get_conn()
        cursor = conn.execute("SELECT auction_id, data FROM auctions ORDER BY auction_id ASC")
        return [(row['auction_id'], row['data']) for row in cursor]

    def count_auctions(self, settled: Optional[bool] = None) -> int:
        conn = self._get_conn()
        if settled is None:
            cursor = conn.execute("SELECT COUNT(*) as cnt FROM auctions")
        else:
            cursor = conn.execute("SELECT COUNT(*) as cnt FROM auctions WHERE settled = ?", (int(settled),))
        return cursor.fetchone()['cnt']

    # =========================================================================
    # Events
    # =========================================================================

    def get_events(self, auction_id: Optional[int] = None) -> List[Tuple[int, str, str]]:
        """Get (auction_id, name, data) in emission order."""
        conn = self._get_conn()
        if auction_id is None:
            cursor = conn.execute("SELECT auction_id, name, data FROM events ORDER BY seq ASC")
        else:
            cursor = conn.execute(
                "SELECT auction_id, name, data FROM events WHERE auction_id = ? ORDER BY seq ASC",
                (auction_id,)
            )
        return [(row['auction_id'], row['name'], row['data']) for row in cursor]

    # =========================================================================
    # House State
    # =========================================================================

    def get_meta(self, key: str) -> Optional[str]:
        conn = self._get_conn()
        cursor = conn.execute("SELECT value FROM house_state WHERE key = ?", (key,))
        row = cursor.fetchone()
        return row['value'] if row else None

    def close(self):
        """Close this thread's connection."""
        conn = getattr(self._conn_local, "conn", None)
        if conn is not None:
            conn.close()
            del self._conn_local.conn
