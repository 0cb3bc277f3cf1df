"""Persisted resource state for the CLI host.

Purpose:
-------
The reconciler's controllers are stateless: they receive persisted state and
return the next one. Something has to keep that state between invocations.
For the CLI that is a small SQLite database holding one row per declared
resource address plus an append-only history of lifecycle operations.

Database Schema:
---------------
```
resources (
    address        TEXT PRIMARY KEY,   -- Caller-chosen name, e.g. "peer0_mychannel"
    resource_type  TEXT NOT NULL,      -- e.g. fabric_join_node
    resource_id    TEXT,               -- Composite identity "<network_id>:<node_id>"
    state          TEXT NOT NULL,      -- JSON: persisted state
    updated_at     TEXT NOT NULL       -- ISO format timestamp
)

history (
    id             INTEGER PRIMARY KEY,
    address        TEXT NOT NULL,
    timestamp      TEXT NOT NULL,
    operation      TEXT NOT NULL,      -- create, read, delete, import, set_role
    success        BOOLEAN NOT NULL,
    outcome        TEXT,               -- e.g. "removed" when read detected drift
    error_message  TEXT,
    state          TEXT                -- JSON: state after the operation
)
```
"""

import json
import sqlite3
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType

import structlog

from ..models.state import JoinNodeState

logger = structlog.get_logger(__name__)


@dataclass
class HistoryEntry:
    """One recorded lifecycle operation."""

    id: int | None
    address: str
    timestamp: str
    operation: str
    success: bool
    outcome: str | None
    error_message: str | None
    state: str | None  # JSON


class StateStore:
    """
    SQLite-backed store of persisted join-node state.

    The store is the caller's persistence layer: controllers never touch it.
    The host reads state before an operation and writes back what the
    controller returned.
    """

    def __init__(self, db_path: str | Path) -> None:
        """
        Initialize StateStore.

        Args:
            db_path: Path to SQLite database file
        """
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.conn: sqlite3.Connection = self._initialize_db()

    def _initialize_db(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self.db_path))
        conn.row_factory = sqlite3.Row

        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS resources (
                address TEXT PRIMARY KEY,
                resource_type TEXT NOT NULL,
                resource_id TEXT,
                state TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """
        )
        conn.execute(
            """
            CREATE TABLE IF NOT EXISTS history (
                id INTEGER PRIMARY KEY AUTOINCREMENT,
                address TEXT NOT NULL,
                timestamp TEXT NOT NULL,
                operation TEXT NOT NULL,
                success BOOLEAN NOT NULL,
                outcome TEXT,
                error_message TEXT,
                state TEXT
            )
        """
        )
        conn.execute(
            """
            CREATE INDEX IF NOT EXISTS idx_history_address
            ON history(address)
        """
        )

        conn.commit()
        return conn

    def get(self, address: str) -> JoinNodeState | None:
        """Return the persisted state for an address, or None."""
        row = self.conn.execute(
            "SELECT state FROM resources WHERE address = ?", (address,)
        ).fetchone()
        if row is None:
            return None
        return JoinNodeState.from_dict(json.loads(row["state"]))

    def put(self, address: str, resource_type: str, state: JoinNodeState) -> None:
        """Insert or replace the persisted state for an address."""
        self.conn.execute(
            """
            INSERT INTO resources (address, resource_type, resource_id, state, updated_at)
            VALUES (?, ?, ?, ?, ?)
            ON CONFLICT(address) DO UPDATE SET
                resource_type = excluded.resource_type,
                resource_id = excluded.resource_id,
                state = excluded.state,
                updated_at = excluded.updated_at
            """,
            (address, resource_type, state.id, json.dumps(state.to_dict()), _now()),
        )
        self.conn.commit()
        logger.debug("Persisted state", address=address, id=state.id)

    def remove(self, address: str) -> bool:
        """
        Drop the persisted state for an address.

        Returns:
            True if a row was removed.
        """
        cursor = self.conn.execute("DELETE FROM resources WHERE address = ?", (address,))
        self.conn.commit()
        removed = cursor.rowcount > 0
        logger.debug("Removed state", address=address, removed=removed)
        return removed

    def list_addresses(self) -> list[str]:
        """All addresses with persisted state, sorted."""
        cursor = self.conn.execute("SELECT address FROM resources ORDER BY address")
        return [row["address"] for row in cursor.fetchall()]

    def record_operation(
        self,
        address: str,
        operation: str,
        success: bool,
        outcome: str | None = None,
        error_message: str | None = None,
        state: JoinNodeState | None = None,
    ) -> int:
        """
        Append a lifecycle operation to the history.

        Returns:
            ID of inserted record
        """
        cursor = self.conn.execute(
            """
            INSERT INTO history (
                address, timestamp, operation, success, outcome, error_message, state
            ) VALUES (?, ?, ?, ?, ?, ?, ?)
            """,
            (
                address,
                _now(),
                operation,
                success,
                outcome,
                error_message,
                json.dumps(state.to_dict()) if state else None,
            ),
        )
        self.conn.commit()
        entry_id = cursor.lastrowid
        assert entry_id is not None, "INSERT should always set lastrowid"
        return entry_id

    def get_history(self, address: str) -> list[HistoryEntry]:
        """All history entries for an address, oldest first."""
        cursor = self.conn.execute(
            "SELECT * FROM history WHERE address = ? ORDER BY id ASC", (address,)
        )
        return [self._row_to_entry(row) for row in cursor.fetchall()]

    def _row_to_entry(self, row: sqlite3.Row) -> HistoryEntry:
        return HistoryEntry(
            id=row["id"],
            address=row["address"],
            timestamp=row["timestamp"],
            operation=row["operation"],
            success=bool(row["success"]),
            outcome=row["outcome"],
            error_message=row["error_message"],
            state=row["state"],
        )

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()

    def __enter__(self) -> "StateStore":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()


def _now() -> str:
    return datetime.now(timezone.utc).isoformat()
