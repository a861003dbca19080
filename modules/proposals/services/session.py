"""Screen-level coordination for the proposals app.

:class:`ProposalSession` decides which view is showing and is the boundary
where user actions meet the wizard, the store and the exporter.  Errors from
below are turned into :class:`Notice` values here; nothing raised by the store
or the cache travels further up into the widgets.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..errors import MissingRequiredField, SaveInProgress, StoreWriteFailed
from ..models.repository import StoredProposal
from .exporter import PreviewHandle, ProposalPdfExporter
from .proposal_service import ProposalService
from .wizard import ProposalWizard

__all__ = ["Notice", "ProposalSession", "VIEW_FORM", "VIEW_LIST", "VIEW_WELCOME"]

logger = logging.getLogger(__name__)

VIEW_WELCOME = "welcome"
VIEW_FORM = "form"
VIEW_LIST = "list"

LEVEL_INFO = "info"
LEVEL_WARNING = "warning"
LEVEL_ERROR = "error"


@dataclass(frozen=True)
class Notice:
    """Message for the user.  ``blocking`` notices need acknowledgement."""

    level: str
    message: str
    blocking: bool = False

    @property
    def ok(self) -> bool:
        return self.level == LEVEL_INFO


class ProposalSession:
    def __init__(
        self,
        service: ProposalService,
        wizard: ProposalWizard,
        exporter: ProposalPdfExporter,
    ) -> None:
        self.service = service
        self.wizard = wizard
        self.exporter = exporter
        self.view = VIEW_WELCOME

    # ------------------------------------------------------------------ views
    def show_welcome(self) -> None:
        self.view = VIEW_WELCOME

    def show_form(self) -> None:
        self.view = VIEW_FORM

    def show_list(self) -> None:
        self.view = VIEW_LIST

    def new_proposal(self) -> None:
        self.wizard.reset()
        self.view = VIEW_FORM

    def open_proposal(self, stored: StoredProposal) -> None:
        """Load ``stored`` into the wizard; its id is tracked, not edited."""

        self.wizard.load(stored.proposal, stored.id)
        self.view = VIEW_FORM

    # ------------------------------------------------------------------ status
    @property
    def saving(self) -> bool:
        return self.service.saving

    @property
    def can_save(self) -> bool:
        return self.wizard.proposal.has_name and not self.service.saving

    @property
    def status_tag(self) -> str:
        record_id = self.wizard.current_id
        return f"ID: {record_id}" if record_id else "Not saved yet"

    @property
    def missing_tag(self) -> Optional[str]:
        return None if self.wizard.proposal.has_name else "Missing: workshop name"

    @property
    def save_label(self) -> str:
        if self.service.saving:
            return "Saving…"
        return "Save changes" if self.wizard.current_id else "Save proposal"

    # ------------------------------------------------------------------ actions
    def save(self) -> Notice:
        """Persist the proposal being edited and describe the outcome."""

        proposal = self.wizard.proposal
        try:
            result = self.service.save(proposal, self.wizard.current_id)
        except MissingRequiredField as exc:
            return Notice(LEVEL_WARNING, str(exc), blocking=True)
        except SaveInProgress:
            return Notice(LEVEL_WARNING, "A save is already in progress.")
        except StoreWriteFailed as exc:
            logger.error("Save failed: %s", exc)
            return Notice(LEVEL_ERROR, "Error while saving. Your changes are kept; try again.")
        if result.created:
            self.wizard.mark_saved(result.record_id)
            return Notice(LEVEL_INFO, "Proposal saved.")
        return Notice(LEVEL_INFO, "Proposal updated.")

    def delete(self, record_id: str) -> Notice:
        try:
            self.service.delete(record_id)
        except StoreWriteFailed as exc:
            logger.error("Delete failed: %s", exc)
            return Notice(LEVEL_ERROR, "Error while deleting the proposal.")
        if self.wizard.current_id == record_id:
            self.wizard.current_id = None
        return Notice(LEVEL_INFO, "Proposal deleted.")

    def export_to(self, directory: Path) -> Path:
        return self.exporter.export_to(self.wizard.proposal, directory)

    def export_filename(self) -> str:
        return self.exporter.filename(self.wizard.proposal)

    def preview(self) -> PreviewHandle:
        return self.exporter.preview(self.wizard.proposal)
