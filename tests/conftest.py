from __future__ import annotations

import os

import pytest

# Qt widgets require a platform plugin.  Offscreen avoids libGL dependencies
# inside the test container.
os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")

from modules.proposals.models.proposal_models import (  # noqa: E402
    Accessibility,
    Audience,
    CanBeAdapted,
    Capacity,
    DisabilityTypes,
    Proposal,
    WorkSequence,
)
from utils.app_settings import ProposalSettings, load_settings  # noqa: E402


@pytest.fixture
def settings(tmp_path) -> ProposalSettings:
    return load_settings(tmp_path)


@pytest.fixture
def nature_workshop() -> Proposal:
    return Proposal(
        name="Nature Workshop",
        capacity=Capacity(headcount="25", duration="4 sessions of 90 min"),
    )


@pytest.fixture
def full_proposal() -> Proposal:
    return Proposal(
        year="2026",
        name="Urban Gardening",
        rationale="Connects families with food production.",
        objectives="General: learn to grow vegetables.\nSpecific: compost, seedlings.",
        audience=Audience(children=True, older_adults=True, clarifications="Prior registration"),
        axes="Ecology\nCommunity",
        capacity=Capacity(headcount="20", duration="6 sessions of 2 h"),
        responsible_parties="Ana Ruiz (educator)",
        sequence=WorkSequence(opening="Welcome", development="Planting", closing="Harvest fair"),
        resources="Seeds, pots",
        logistics="Greenhouse on Saturdays",
        accessibility=Accessibility(
            can_be_adapted=CanBeAdapted.YES,
            disability_types=DisabilityTypes(motor=True, visual=True, other="ASD"),
        ),
        spaces="BioPark",
        integration="Agreement with the Science Museum",
        final_notes="Bring sunscreen.",
    )
