"""Business logic for workshop proposals: wizard, export and store access."""

from __future__ import annotations

from .draft_cache import DraftCache
from .exporter import PreviewHandle, ProposalPdfExporter, Section, export_filename, flatten
from .layout import PageGeometry, Typography, paginate, wrap_text
from .proposal_service import ProposalService, card_summary, filter_proposals
from .session import Notice, ProposalSession
from .wizard import STEPS, ProposalWizard

__all__ = [
    "DraftCache",
    "Notice",
    "PageGeometry",
    "PreviewHandle",
    "ProposalPdfExporter",
    "ProposalService",
    "ProposalSession",
    "ProposalWizard",
    "STEPS",
    "Section",
    "Typography",
    "card_summary",
    "export_filename",
    "filter_proposals",
    "flatten",
    "paginate",
    "wrap_text",
]
