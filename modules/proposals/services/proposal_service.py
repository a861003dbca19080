"""Service layer providing business logic for stored proposals."""

from __future__ import annotations

import logging
import sqlite3
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Protocol

from ..errors import MissingRequiredField, SaveInProgress, StoreWriteFailed
from ..models.proposal_models import Proposal
from ..models.repository import StoredProposal, Subscription

__all__ = [
    "CardSummary",
    "ProposalService",
    "ProposalStore",
    "SaveResult",
    "card_summary",
    "filter_proposals",
]

logger = logging.getLogger(__name__)

_STORE_ERRORS = (sqlite3.Error, OSError, KeyError, ValueError)


class ProposalStore(Protocol):
    """Operations the service needs from a document store."""

    def create(self, proposal: Proposal) -> str: ...

    def update(self, record_id: str, proposal: Proposal) -> None: ...

    def delete(self, record_id: str) -> None: ...

    def list(self, limit: Optional[int] = None) -> List[StoredProposal]: ...

    def subscribe(self, listener: Callable[[List[StoredProposal]], None]) -> Subscription: ...


@dataclass(frozen=True)
class SaveResult:
    record_id: str
    created: bool


@dataclass(frozen=True)
class CardSummary:
    record_id: str
    title: str
    schedule: str
    responsible: str


def validate_for_save(proposal: Proposal) -> None:
    if not proposal.has_name:
        raise MissingRequiredField("name", "Fill in at least the workshop name.")


class ProposalService:
    """High-level API consumed by the session and the list view."""

    def __init__(self, store: ProposalStore) -> None:
        self.store = store
        self.saving = False

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------
    def save(self, proposal: Proposal, record_id: Optional[str] = None) -> SaveResult:
        """Create or update ``proposal``.

        Raises :class:`MissingRequiredField` before touching the store when the
        name is blank, :class:`SaveInProgress` while another save is running
        and :class:`StoreWriteFailed` when the store rejects the write.
        """

        validate_for_save(proposal)
        if self.saving:
            raise SaveInProgress("A save is already in progress")
        self.saving = True
        try:
            if record_id:
                self._write("update", lambda: self.store.update(record_id, proposal))
                return SaveResult(record_id, created=False)
            new_id = self._write("create", lambda: self.store.create(proposal))
            return SaveResult(new_id, created=True)
        finally:
            self.saving = False

    def delete(self, record_id: str) -> None:
        self._write("delete", lambda: self.store.delete(record_id))

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------
    def list(self) -> List[StoredProposal]:
        return self.store.list()

    def subscribe(self, listener: Callable[[List[StoredProposal]], None]) -> Subscription:
        return self.store.subscribe(listener)

    # ------------------------------------------------------------------
    def _write(self, operation: str, action):
        try:
            return action()
        except _STORE_ERRORS as exc:
            logger.exception("Proposal store %s failed", operation)
            raise StoreWriteFailed(operation, f"Could not {operation} the proposal: {exc}") from exc


def filter_proposals(items: Iterable[StoredProposal], query: str) -> List[StoredProposal]:
    """Case-insensitive search over name, responsible parties and thematic axes."""

    needle = (query or "").strip().lower()
    items = list(items)
    if not needle:
        return items
    return [
        item
        for item in items
        if needle in item.proposal.name.lower()
        or needle in item.proposal.responsible_parties.lower()
        or needle in item.proposal.axes.lower()
    ]


def card_summary(item: StoredProposal) -> CardSummary:
    def fmt(value: str) -> str:
        return value.strip() or "—"

    proposal = item.proposal
    return CardSummary(
        record_id=item.id,
        title=proposal.name.strip() or "Untitled",
        schedule=f"{fmt(proposal.capacity.duration)} · {fmt(proposal.capacity.headcount)}",
        responsible=fmt(proposal.responsible_parties),
    )
