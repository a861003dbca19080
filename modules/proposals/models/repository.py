"""Persistence layer for workshop proposals.

Proposals are kept as JSON documents in a single ``proposals`` table of a
SQLite database.  The repository mirrors a document-store collection: the
store assigns identifiers and timestamps, listing is newest-first, and
interested views can subscribe to a snapshot stream that is pushed after every
write.
"""

from __future__ import annotations

import json
import logging
import os
import sqlite3
import uuid
from dataclasses import dataclass
from datetime import datetime, timezone
from pathlib import Path
from typing import Callable, List, Optional

from pydantic import ValidationError

from .proposal_models import Proposal
from .schemas import ProposalPayload, StoredProposalRow

__all__ = ["ProposalRepository", "StoredProposal", "Subscription"]

logger = logging.getLogger(__name__)

DEFAULT_LIST_LIMIT = 200

Listener = Callable[[List["StoredProposal"]], None]


@dataclass(frozen=True, slots=True)
class StoredProposal:
    """A proposal as held by the store, with its store-only metadata."""

    id: str
    created_at: datetime
    updated_at: datetime
    proposal: Proposal


class Subscription:
    """Handle returned by :meth:`ProposalRepository.subscribe`."""

    def __init__(self, repository: "ProposalRepository", listener: Listener) -> None:
        self._repository = repository
        self._listener = listener
        self.closed = False

    def close(self) -> None:
        if self.closed:
            return
        self.closed = True
        self._repository._remove_listener(self._listener)

    def __enter__(self) -> "Subscription":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()


class ProposalRepository:
    """Encapsulates read/write operations for stored proposals."""

    def __init__(self, db_path: Path, *, list_limit: int = DEFAULT_LIST_LIMIT):
        self.db_path = Path(db_path)
        self.db_path.parent.mkdir(parents=True, exist_ok=True)
        self.list_limit = list_limit
        self._listeners: List[Listener] = []
        self._initialized = False

    # -- lifecycle -----------------------------------------------------------------
    def initialize(self) -> None:
        """Ensure the ``proposals`` table exists."""

        with self._connect() as conn:
            conn.execute(
                """
                CREATE TABLE IF NOT EXISTS proposals (
                    id TEXT PRIMARY KEY,
                    name TEXT NOT NULL DEFAULT '',
                    data_json TEXT NOT NULL,
                    created_at TEXT NOT NULL,
                    updated_at TEXT NOT NULL
                )
                """
            )
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_proposals_created ON proposals(created_at DESC)"
            )
            conn.commit()
        self._initialized = True

    # -- document operations ---------------------------------------------------------
    def create(self, proposal: Proposal) -> str:
        """Insert ``proposal`` and return the generated identifier."""

        self._ensure_initialized()
        record_id = uuid.uuid4().hex
        now = self._now()
        with self._connect() as conn:
            conn.execute(
                """
                INSERT INTO proposals (id, name, data_json, created_at, updated_at)
                VALUES (?, ?, ?, ?, ?)
                """,
                (record_id, proposal.name, self._encode(proposal), now, now),
            )
            conn.commit()
        logger.info("Created proposal %s (%s)", record_id, proposal.name)
        self._notify()
        return record_id

    def update(self, record_id: str, proposal: Proposal) -> None:
        """Replace the stored document for ``record_id`` and refresh ``updated_at``."""

        self._ensure_initialized()
        with self._connect() as conn:
            cur = conn.execute(
                """
                UPDATE proposals
                SET name = ?, data_json = ?, updated_at = ?
                WHERE id = ?
                """,
                (proposal.name, self._encode(proposal), self._now(), record_id),
            )
            if cur.rowcount == 0:
                raise KeyError(f"No proposal with id {record_id!r}")
            conn.commit()
        logger.info("Updated proposal %s", record_id)
        self._notify()

    def delete(self, record_id: str) -> None:
        """Remove ``record_id`` permanently.  Unknown ids are ignored."""

        self._ensure_initialized()
        with self._connect() as conn:
            conn.execute("DELETE FROM proposals WHERE id = ?", (record_id,))
            conn.commit()
        logger.info("Deleted proposal %s", record_id)
        self._notify()

    def get(self, record_id: str) -> StoredProposal:
        self._ensure_initialized()
        with self._connect() as conn:
            row = conn.execute(
                "SELECT id, name, data_json, created_at, updated_at FROM proposals WHERE id = ?",
                (record_id,),
            ).fetchone()
        if row is None:
            raise KeyError(f"No proposal with id {record_id!r}")
        return self._row_to_stored(row)

    def list(self, limit: Optional[int] = None) -> List[StoredProposal]:
        """Return stored proposals, newest first."""

        self._ensure_initialized()
        sql = (
            "SELECT id, name, data_json, created_at, updated_at FROM proposals "
            "ORDER BY created_at DESC, rowid DESC"
        )
        params: tuple = ()
        if limit is not None:
            sql += " LIMIT ?"
            params = (int(limit),)
        with self._connect() as conn:
            rows = conn.execute(sql, params).fetchall()
        return [self._row_to_stored(row) for row in rows]

    # -- live snapshots --------------------------------------------------------------
    def subscribe(self, listener: Listener) -> Subscription:
        """Register ``listener`` for snapshot pushes.

        The current snapshot is delivered immediately; afterwards every write
        through this repository pushes the full, newest-first list capped at
        ``list_limit``.  Close the returned :class:`Subscription` to stop.
        """

        self._listeners.append(listener)
        subscription = Subscription(self, listener)
        self._deliver(listener, self.list(self.list_limit))
        return subscription

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def _remove_listener(self, listener: Listener) -> None:
        try:
            self._listeners.remove(listener)
        except ValueError:
            pass

    def _notify(self) -> None:
        if not self._listeners:
            return
        # runs after commit; a failed snapshot must not turn into a failed write
        try:
            snapshot = self.list(self.list_limit)
        except (sqlite3.Error, ValueError):
            logger.exception("Could not refresh proposal subscribers")
            return
        for listener in list(self._listeners):
            self._deliver(listener, snapshot)

    @staticmethod
    def _deliver(listener: Listener, snapshot: List[StoredProposal]) -> None:
        try:
            listener(list(snapshot))
        except Exception:
            logger.exception("Proposal listener %r failed", listener)

    # -- internal utilities --------------------------------------------------------
    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(os.fspath(self.db_path))
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA busy_timeout=3000")
        return conn

    def _ensure_initialized(self) -> None:
        if not self._initialized:
            self.initialize()

    def _row_to_stored(self, row: sqlite3.Row) -> StoredProposal:
        try:
            data = ProposalPayload.model_validate(self._decode(row["data_json"]))
        except ValidationError as exc:
            # keep the record listable (and deletable) under its stored name
            logger.warning("Proposal %s does not match the schema: %s", row["id"], exc)
            data = ProposalPayload(name=row["name"] or "")
        parsed = StoredProposalRow(
            id=row["id"],
            created_at=row["created_at"],
            updated_at=row["updated_at"],
            data=data,
        )
        return StoredProposal(
            id=parsed.id,
            created_at=parsed.created_at,
            updated_at=parsed.updated_at,
            proposal=parsed.data.to_proposal(),
        )

    @staticmethod
    def _encode(proposal: Proposal) -> str:
        payload = ProposalPayload.model_validate(proposal.to_dict())
        return payload.model_dump_json()

    @staticmethod
    def _decode(payload: str | None) -> dict:
        if not payload:
            return {}
        try:
            data = json.loads(payload)
        except json.JSONDecodeError:
            logger.warning("Discarding undecodable proposal document")
            return {}
        return data if isinstance(data, dict) else {}

    @staticmethod
    def _now() -> str:
        return datetime.now(timezone.utc).isoformat()
