"""Data models and persistence helpers for workshop proposals."""

from __future__ import annotations

from .proposal_models import (
    AUDIENCE_FLAGS,
    DISABILITY_FLAGS,
    Accessibility,
    Audience,
    CanBeAdapted,
    Capacity,
    DisabilityTypes,
    Proposal,
    WorkSequence,
    get_path,
    set_path,
    toggle_path,
    update,
)
from .repository import ProposalRepository, StoredProposal, Subscription

__all__ = [
    "AUDIENCE_FLAGS",
    "DISABILITY_FLAGS",
    "Accessibility",
    "Audience",
    "CanBeAdapted",
    "Capacity",
    "DisabilityTypes",
    "Proposal",
    "ProposalRepository",
    "StoredProposal",
    "Subscription",
    "WorkSequence",
    "get_path",
    "set_path",
    "toggle_path",
    "update",
]
