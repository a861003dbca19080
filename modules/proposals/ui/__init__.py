"""UI widgets for the workshop proposals module."""

from __future__ import annotations

from .list_panel import ProposalListPanel
from .proposal_window import ProposalWindow
from .wizard_panel import WizardPanel

__all__ = [
    "ProposalListPanel",
    "ProposalWindow",
    "WizardPanel",
]
