"""Tests for the immutable proposal model and its helpers."""

from __future__ import annotations

import pytest

from modules.proposals.models.proposal_models import (
    AUDIENCE_FLAGS,
    CanBeAdapted,
    Proposal,
    checked_labels,
    get_path,
    set_path,
    toggle_path,
    update,
)


def test_blank_proposal_has_default_year_and_empty_fields() -> None:
    proposal = Proposal.blank()

    assert proposal.year == "2026"
    assert proposal.name == ""
    assert proposal.audience.infants is False
    assert proposal.accessibility.can_be_adapted is CanBeAdapted.UNSET
    assert not proposal.has_name


def test_blank_proposal_accepts_year() -> None:
    assert Proposal.blank("2027").year == "2027"


def test_set_path_returns_new_object_and_keeps_untouched_branches() -> None:
    original = Proposal.blank()

    changed = set_path(original, "capacity.headcount", "25")

    assert changed is not original
    assert changed.capacity.headcount == "25"
    assert original.capacity.headcount == ""
    assert changed.audience is original.audience
    assert changed.sequence is original.sequence


def test_set_path_with_equal_value_returns_same_object() -> None:
    original = Proposal(name="Nature Workshop")

    assert set_path(original, "name", "Nature Workshop") is original


def test_set_path_rejects_unknown_field() -> None:
    with pytest.raises(AttributeError):
        set_path(Proposal.blank(), "capacity.price", "10")


def test_set_path_coerces_answer_to_enum() -> None:
    proposal = set_path(Proposal.blank(), "accessibility.can_be_adapted", "yes")

    assert proposal.accessibility.can_be_adapted is CanBeAdapted.YES


def test_toggle_path_flips_flags_only() -> None:
    proposal = toggle_path(Proposal.blank(), "audience.teens")
    assert proposal.audience.teens is True
    assert toggle_path(proposal, "audience.teens").audience.teens is False

    with pytest.raises(TypeError):
        toggle_path(proposal, "name")


def test_update_requires_a_proposal() -> None:
    proposal = Proposal.blank()

    assert update(proposal, lambda p: p) is proposal
    with pytest.raises(TypeError):
        update(proposal, lambda p: {"name": "x"})


def test_get_path_reads_nested_values() -> None:
    proposal = Proposal.blank()
    proposal = set_path(proposal, "accessibility.disability_types.other", "ASD")

    assert get_path(proposal, "accessibility.disability_types.other") == "ASD"


def test_checked_labels_follow_declaration_order() -> None:
    proposal = toggle_path(Proposal.blank(), "audience.teens")
    proposal = toggle_path(proposal, "audience.infants")

    assert checked_labels(proposal.audience, AUDIENCE_FLAGS) == ["Infants", "Teens"]


def test_to_dict_and_from_dict_roundtrip(full_proposal: Proposal) -> None:
    data = full_proposal.to_dict()

    assert data["accessibility"]["can_be_adapted"] == "yes"
    assert Proposal.from_dict(data) == full_proposal


def test_from_dict_merges_partial_data_over_blank() -> None:
    proposal = Proposal.from_dict(
        {"name": "Clay", "capacity": {"headcount": 12}, "unknown": "ignored"},
        year="2030",
    )

    assert proposal.name == "Clay"
    assert proposal.capacity.headcount == "12"
    assert proposal.capacity.duration == ""
    assert proposal.year == "2030"


def test_from_dict_treats_nulls_as_blank() -> None:
    proposal = Proposal.from_dict(
        {"name": None, "audience": None, "accessibility": {"can_be_adapted": None}}
    )

    assert proposal.name == ""
    assert proposal.audience.children is False
    assert proposal.accessibility.can_be_adapted is CanBeAdapted.UNSET


def test_has_name_ignores_whitespace() -> None:
    assert not Proposal(name="   ").has_name
    assert Proposal(name=" x ").has_name
