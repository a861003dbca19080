"""Tests for the proposal PDF exporter."""

from __future__ import annotations

from io import BytesIO

from pypdf import PdfReader

from modules.proposals.models.proposal_models import (
    Accessibility,
    CanBeAdapted,
    DisabilityTypes,
    Proposal,
    toggle_path,
)
from modules.proposals.services.exporter import (
    PreviewHandle,
    ProposalPdfExporter,
    export_filename,
    flatten,
)


def _pages(data: bytes) -> int:
    return len(PdfReader(BytesIO(data)).pages)


def test_flatten_nature_workshop_yields_three_sections(nature_workshop: Proposal) -> None:
    sections = flatten(nature_workshop)

    assert [s.title for s in sections] == ["Workshop / Activity Name", "Headcount", "Duration"]
    assert [s.body for s in sections] == ["Nature Workshop", "25", "4 sessions of 90 min"]


def test_nature_workshop_exports_single_page(nature_workshop: Proposal) -> None:
    data = ProposalPdfExporter().build_pdf(nature_workshop)

    assert data.startswith(b"%PDF")
    assert _pages(data) == 1
    text = PdfReader(BytesIO(data)).pages[0].extract_text()
    assert "Nature Workshop" in text
    assert "Activity Proposal 2026" in text


def test_audience_uses_declaration_order_not_toggle_order() -> None:
    proposal = toggle_path(Proposal.blank(), "audience.teens")
    proposal = toggle_path(proposal, "audience.infants")

    sections = dict(flatten(proposal))

    assert sections["Audience"] == "Infants, Teens"


def test_empty_proposal_has_no_sections_and_one_page() -> None:
    proposal = Proposal(year="2026")

    assert flatten(proposal) == []
    assert _pages(ProposalPdfExporter().build_pdf(proposal)) == 1


def test_whitespace_only_fields_are_dropped() -> None:
    proposal = Proposal(name="  Clay  ", rationale="   \n  ")

    assert flatten(proposal) == [("Workshop / Activity Name", "Clay")]


def test_disability_types_only_when_adaptable(full_proposal: Proposal) -> None:
    sections = dict(flatten(full_proposal))

    assert sections["Can the workshop be carried out by people with disabilities?"] == "Yes"
    assert sections["What type of disability?"] == "Motor, Visual, Other: ASD"
    assert "What would be needed to make it inclusive?" not in sections


def test_inclusion_needs_only_when_not_adaptable() -> None:
    proposal = Proposal(
        name="Climbing",
        accessibility=Accessibility(
            can_be_adapted=CanBeAdapted.NO,
            disability_types=DisabilityTypes(motor=True),
            what_would_be_needed="Adapted harness",
        ),
    )

    sections = dict(flatten(proposal))

    assert sections["Can the workshop be carried out by people with disabilities?"] == "No"
    assert sections["What would be needed to make it inclusive?"] == "Adapted harness"
    assert "What type of disability?" not in sections


def test_unanswered_accessibility_is_omitted() -> None:
    proposal = Proposal(
        name="Reading club",
        accessibility=Accessibility(what_would_be_needed="Large print"),
    )

    assert [s.title for s in flatten(proposal)] == ["Workshop / Activity Name"]


def test_flatten_keeps_fixed_order(full_proposal: Proposal) -> None:
    titles = [s.title for s in flatten(full_proposal)]

    assert titles[0] == "Workshop / Activity Name"
    assert titles.index("Audience") < titles.index("Thematic axes") < titles.index("Headcount")
    assert titles.index("Sequence – Opening") < titles.index("Sequence – Closing")
    assert titles[-1] == "Final notes"


def test_flatten_and_render_are_repeatable(full_proposal: Proposal) -> None:
    exporter = ProposalPdfExporter()

    assert flatten(full_proposal) == flatten(full_proposal)
    assert exporter.build_pdf(full_proposal) == exporter.build_pdf(full_proposal)


def test_long_proposal_spans_several_pages() -> None:
    proposal = Proposal(
        name="Marathon",
        rationale="\n".join(f"Reason number {i}" for i in range(40)),
        objectives="\n".join(f"Objective number {i}" for i in range(40)),
        resources="\n".join(f"Resource number {i}" for i in range(40)),
    )
    exporter = ProposalPdfExporter()

    data = exporter.build_pdf(proposal)

    assert _pages(data) == exporter.layout(proposal).page_count
    assert _pages(data) >= 2


def test_export_filename() -> None:
    assert export_filename(Proposal(name="Nature Workshop")) == "Proposal_LaMaxima_Nature Workshop_2026.pdf"
    assert export_filename(Proposal(year="2027")) == "Proposal_LaMaxima_activity_2027.pdf"
    assert export_filename(Proposal(name="Art/Music: Kids")) == "Proposal_LaMaxima_Art-Music- Kids_2026.pdf"


def test_export_to_writes_named_file(tmp_path, nature_workshop: Proposal) -> None:
    exporter = ProposalPdfExporter(org_tag="Hub")

    path = exporter.export_to(nature_workshop, tmp_path / "out")

    assert path.name == "Proposal_Hub_Nature Workshop_2026.pdf"
    assert path.read_bytes() == exporter.build_pdf(nature_workshop)


def test_preview_matches_download_and_releases(full_proposal: Proposal) -> None:
    exporter = ProposalPdfExporter()

    handle = exporter.preview(full_proposal)

    assert isinstance(handle, PreviewHandle)
    assert handle.data == exporter.build_pdf(full_proposal)
    assert handle.filename == exporter.filename(full_proposal)
    assert handle.page_count == _pages(handle.data)
    path = handle.path
    assert path.exists()
    assert handle.url.startswith("file:")

    handle.release()
    handle.release()

    assert handle.released
    assert not path.exists()


def test_preview_handle_as_context_manager(nature_workshop: Proposal) -> None:
    with ProposalPdfExporter().preview(nature_workshop) as handle:
        path = handle.path
    assert handle.released
    assert not path.exists()
