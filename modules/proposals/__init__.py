"""Workshop proposals module."""

from __future__ import annotations

from typing import Optional

from utils.app_settings import ProposalSettings, load_settings

from .models.repository import ProposalRepository
from .services.draft_cache import DraftCache
from .services.exporter import ProposalPdfExporter
from .services.proposal_service import ProposalService
from .services.session import ProposalSession
from .services.wizard import ProposalWizard

__all__ = [
    "build_session",
    "create_proposal_window",
]


def build_session(settings: Optional[ProposalSettings] = None) -> ProposalSession:
    """Wire store, cache, wizard and exporter for ``settings``."""

    settings = settings or load_settings()
    repository = ProposalRepository(settings.db_path, list_limit=settings.list_limit)
    wizard = ProposalWizard(
        cache=DraftCache(settings.draft_path),
        require_name_to_advance=settings.require_name_to_advance,
        default_year=settings.default_year,
    )
    wizard.restore_draft()
    return ProposalSession(
        ProposalService(repository),
        wizard,
        ProposalPdfExporter.from_settings(settings),
    )


def create_proposal_window(parent=None, *, settings: Optional[ProposalSettings] = None):
    """Factory for the proposals main window."""
    from .ui.proposal_window import ProposalWindow

    return ProposalWindow(build_session(settings), parent=parent)
