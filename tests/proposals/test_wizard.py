"""Tests for the proposal data-entry wizard."""

from __future__ import annotations

import logging

import pytest

from modules.proposals.models.proposal_models import CanBeAdapted, Proposal
from modules.proposals.services.draft_cache import DraftCache
from modules.proposals.services.wizard import STEPS, ProposalWizard


def test_steps_are_in_form_order() -> None:
    assert [step.key for step in STEPS] == [
        "name",
        "rationale",
        "objectives",
        "audience",
        "axes",
        "capacity",
        "responsible_parties",
        "sequence",
        "resources",
        "logistics",
        "accessibility",
        "spaces",
        "integration",
        "final_notes",
    ]


def test_next_and_back_clamp_at_the_ends() -> None:
    wizard = ProposalWizard()

    assert wizard.is_first
    assert wizard.back() is False
    assert wizard.index == 0

    for _ in range(30):
        wizard.next()

    assert wizard.index == wizard.step_count - 1
    assert wizard.is_last
    assert wizard.can_proceed is False
    assert wizard.next() is False
    assert wizard.index == 13


def test_next_is_allowed_without_a_name_by_default() -> None:
    wizard = ProposalWizard()

    assert wizard.next() is True
    assert wizard.step.key == "rationale"


def test_name_guard_blocks_only_the_first_step() -> None:
    wizard = ProposalWizard(require_name_to_advance=True)

    assert wizard.can_proceed is False
    assert wizard.next() is False

    wizard.set_value("name", "Nature Workshop")
    assert wizard.next() is True

    wizard.set_value("name", "")
    assert wizard.next() is True


def test_go_to_accepts_index_or_key() -> None:
    wizard = ProposalWizard()

    assert wizard.go_to("accessibility") == 10
    assert wizard.go_to(99) == 13
    assert wizard.go_to(-5) == 0
    with pytest.raises(KeyError):
        wizard.go_to("budget")


def test_progress_marks_done_active_and_todo() -> None:
    wizard = ProposalWizard()
    wizard.go_to(2)

    progress = wizard.progress()

    assert progress[:3] == ["done", "done", "active"]
    assert set(progress[3:]) == {"todo"}


def test_edits_produce_new_proposals() -> None:
    wizard = ProposalWizard()
    before = wizard.proposal

    after = wizard.set_value("capacity.headcount", "25")

    assert after is wizard.proposal
    assert after is not before
    assert before.capacity.headcount == ""
    assert wizard.value("capacity.headcount") == "25"


def test_unchanged_edit_keeps_identity_and_skips_listeners() -> None:
    wizard = ProposalWizard(Proposal(name="Clay"))
    seen = []
    wizard.subscribe(seen.append)

    wizard.set_value("name", "Clay")

    assert seen == []


def test_toggle_and_setter_helpers() -> None:
    wizard = ProposalWizard()

    wizard.toggler("audience.teens")()
    wizard.setter("audience.clarifications")("Ages 12-16")

    assert wizard.proposal.audience.teens is True
    assert wizard.proposal.audience.clarifications == "Ages 12-16"


def test_choose_validates_options() -> None:
    wizard = ProposalWizard()

    wizard.choose("accessibility.can_be_adapted", "no")
    assert wizard.proposal.accessibility.can_be_adapted is CanBeAdapted.NO

    with pytest.raises(ValueError):
        wizard.choose("accessibility.can_be_adapted", "maybe")


def test_accessibility_follow_up_fields_depend_on_answer() -> None:
    wizard = ProposalWizard()
    wizard.go_to("accessibility")

    assert [f.path for f in wizard.visible_fields()] == ["accessibility.can_be_adapted"]

    wizard.choose("accessibility.can_be_adapted", "yes")
    paths = [f.path for f in wizard.visible_fields()]
    assert len(paths) == 7
    assert "accessibility.disability_types.other" in paths
    assert "accessibility.what_would_be_needed" not in paths

    wizard.choose("accessibility.can_be_adapted", "no")
    assert [f.path for f in wizard.visible_fields()] == [
        "accessibility.can_be_adapted",
        "accessibility.what_would_be_needed",
    ]


def test_reset_clears_identifier_and_step() -> None:
    wizard = ProposalWizard()
    wizard.load(Proposal(name="Clay"), "abc123")
    wizard.go_to(5)

    wizard.reset()

    assert wizard.current_id is None
    assert wizard.index == 0
    assert wizard.proposal == Proposal.blank()


def test_load_tracks_identifier_outside_the_proposal() -> None:
    wizard = ProposalWizard()
    wizard.go_to(4)

    wizard.load(Proposal(name="Clay"), "abc123")

    assert wizard.current_id == "abc123"
    assert wizard.index == 0
    assert "abc123" not in str(wizard.proposal.to_dict())


def test_subscribe_returns_disposer_and_survives_listener_errors() -> None:
    wizard = ProposalWizard()
    seen = []

    def broken(_proposal) -> None:
        raise RuntimeError("boom")

    wizard.subscribe(broken)
    dispose = wizard.subscribe(seen.append)

    wizard.set_value("name", "A")
    dispose()
    dispose()
    wizard.set_value("name", "B")

    assert [p.name for p in seen] == ["A"]


def test_every_edit_is_mirrored_to_the_draft_cache(tmp_path) -> None:
    cache = DraftCache(tmp_path / "draft.json")
    wizard = ProposalWizard(cache=cache)
    wizard.set_value("name", "Nature Workshop")
    wizard.toggle("audience.infants")

    restored = ProposalWizard(cache=cache)

    assert restored.restore_draft() is True
    assert restored.proposal == wizard.proposal


def test_restore_draft_without_cache_or_draft(tmp_path) -> None:
    assert ProposalWizard().restore_draft() is False
    assert ProposalWizard(cache=DraftCache(tmp_path / "none.json")).restore_draft() is False


def test_default_year_is_configurable() -> None:
    wizard = ProposalWizard(default_year="2027")

    assert wizard.proposal.year == "2027"
    wizard.set_value("name", "x")
    wizard.reset()
    assert wizard.proposal.year == "2027"


def test_listener_errors_are_logged_with_traceback(caplog) -> None:
    wizard = ProposalWizard()

    def broken(_proposal) -> None:
        raise RuntimeError("listener bug")

    wizard.subscribe(broken)
    with caplog.at_level(logging.ERROR):
        wizard.set_value("name", "A")

    record = next(r for r in caplog.records if "Wizard listener" in r.getMessage())
    assert record.exc_info is not None
    assert wizard.proposal.name == "A"
