"""PDF export for workshop proposals.

:func:`flatten` turns a proposal into the ordered list of titled sections that
appear in the document.  :class:`ProposalPdfExporter` lays those sections out
with :func:`~modules.proposals.services.layout.paginate` and draws them with
ReportLab.  Download and preview share one render routine and the canvas is
built in invariant mode, so the saved file matches the preview byte for byte.
"""

from __future__ import annotations

import logging
import os
import re
import tempfile
from io import BytesIO
from pathlib import Path
from typing import List, NamedTuple, Optional

from reportlab.lib import colors
from reportlab.pdfgen import canvas

from ..models.proposal_models import (
    AUDIENCE_FLAGS,
    DISABILITY_FLAGS,
    CanBeAdapted,
    Proposal,
    checked_labels,
)
from .layout import LayoutResult, PageGeometry, PageLayout, Rect, Typography, paginate

__all__ = [
    "PreviewHandle",
    "ProposalPdfExporter",
    "Section",
    "export_filename",
    "flatten",
]

logger = logging.getLogger(__name__)

BACKGROUND = colors.HexColor("#E8E1D0")
BRAND_GREEN = colors.HexColor("#1FA35B")
INK = colors.HexColor("#111111")

_UNSAFE_FILENAME_CHARS = re.compile(r'[\\/:*?"<>|]+')


class Section(NamedTuple):
    title: str
    body: str


def _clean(value: object) -> str:
    return ("" if value is None else str(value)).strip()


def flatten(proposal: Proposal) -> List[Section]:
    """Return the non-empty document sections of ``proposal`` in print order."""

    audience = checked_labels(proposal.audience, AUDIENCE_FLAGS)
    access = proposal.accessibility
    disability = checked_labels(access.disability_types, DISABILITY_FLAGS)
    other = _clean(access.disability_types.other)
    if other:
        disability.append(f"Other: {other}")

    adapted = CanBeAdapted(access.can_be_adapted)
    sections = [
        Section("Workshop / Activity Name", proposal.name),
        Section("Rationale", proposal.rationale),
        Section("Objectives", proposal.objectives),
        Section("Audience", ", ".join(audience)),
        Section("Audience clarifications", proposal.audience.clarifications),
        Section("Thematic axes", proposal.axes),
        Section("Headcount", proposal.capacity.headcount),
        Section("Duration", proposal.capacity.duration),
        Section("Responsible parties", proposal.responsible_parties),
        Section("Sequence – Opening", proposal.sequence.opening),
        Section("Sequence – Development", proposal.sequence.development),
        Section("Sequence – Closing", proposal.sequence.closing),
        Section("Resources needed", proposal.resources),
        Section("Logistics needed", proposal.logistics),
        Section("Can the workshop be carried out by people with disabilities?", adapted.label),
        Section(
            "What type of disability?",
            ", ".join(disability) if adapted is CanBeAdapted.YES else "",
        ),
        Section(
            "What would be needed to make it inclusive?",
            access.what_would_be_needed if adapted is CanBeAdapted.NO else "",
        ),
        Section("Which spaces of the Hub take part?", proposal.spaces),
        Section("What would be needed to integrate other spaces of the Hub?", proposal.integration),
        Section("Final notes", proposal.final_notes),
    ]
    return [Section(s.title, _clean(s.body)) for s in sections if _clean(s.body)]


def export_filename(proposal: Proposal, org_tag: str = "LaMaxima", placeholder: str = "activity") -> str:
    """Return ``Proposal_<org>_<name>_<year>.pdf`` for ``proposal``."""

    name = _clean(proposal.name) or placeholder
    name = _UNSAFE_FILENAME_CHARS.sub("-", name)
    return f"Proposal_{org_tag}_{name}_{_clean(proposal.year)}.pdf"


class PreviewHandle:
    """In-process reference to a rendered preview.

    The handle owns the PDF bytes.  Viewers that need a location get one from
    :attr:`path` / :attr:`url`, which materialise a temporary file on first
    use.  :meth:`release` drops both; it is safe to call more than once.
    """

    def __init__(self, data: bytes, filename: str, page_count: int) -> None:
        self._data: Optional[bytes] = data
        self.filename = filename
        self.page_count = page_count
        self._path: Optional[Path] = None

    @property
    def released(self) -> bool:
        return self._data is None

    @property
    def data(self) -> bytes:
        if self._data is None:
            raise RuntimeError("Preview has been released")
        return self._data

    @property
    def path(self) -> Path:
        if self._path is None:
            fd, name = tempfile.mkstemp(prefix="proposal_preview_", suffix=".pdf")
            with os.fdopen(fd, "wb") as f:
                f.write(self.data)
            self._path = Path(name)
        return self._path

    @property
    def url(self) -> str:
        return self.path.as_uri()

    def release(self) -> None:
        if self._path is not None:
            try:
                self._path.unlink()
            except FileNotFoundError:
                pass
            except OSError as exc:
                logger.warning("Could not remove preview file %s: %s", self._path, exc)
            self._path = None
        self._data = None

    def __enter__(self) -> "PreviewHandle":
        return self

    def __exit__(self, *exc_info) -> None:
        self.release()


class ProposalPdfExporter:
    """Render proposals to styled A4 PDF documents."""

    def __init__(
        self,
        *,
        brand_name: str = "LA MÁXIMA",
        organization: str = "Educational and Recreational Hub",
        org_tag: str = "LaMaxima",
        placeholder: str = "activity",
        geometry: PageGeometry | None = None,
        typography: Typography | None = None,
        split_oversized: bool = False,
    ) -> None:
        self.brand_name = brand_name
        self.organization = organization
        self.org_tag = org_tag
        self.placeholder = placeholder
        self.geometry = geometry or PageGeometry()
        self.typography = typography or Typography()
        self.split_oversized = split_oversized

    @classmethod
    def from_settings(cls, settings) -> "ProposalPdfExporter":
        return cls(
            brand_name=settings.brand_name,
            organization=settings.organization,
            org_tag=settings.org_tag,
            placeholder=settings.untitled_placeholder,
        )

    # ------------------------------------------------------------------ public API
    def filename(self, proposal: Proposal) -> str:
        return export_filename(proposal, self.org_tag, self.placeholder)

    def layout(self, proposal: Proposal) -> LayoutResult:
        return paginate(
            flatten(proposal),
            self.geometry,
            self.typography,
            split_oversized=self.split_oversized,
        )

    def build_pdf(self, proposal: Proposal) -> bytes:
        """Render ``proposal`` and return the PDF bytes."""

        return self._render(proposal, self.layout(proposal))

    def export_to(self, proposal: Proposal, directory: Path) -> Path:
        """Write the PDF for ``proposal`` into ``directory`` and return its path."""

        directory = Path(directory)
        directory.mkdir(parents=True, exist_ok=True)
        output_path = directory / self.filename(proposal)
        output_path.write_bytes(self.build_pdf(proposal))
        logger.info("Exported proposal PDF to %s", output_path)
        return output_path

    def preview(self, proposal: Proposal) -> PreviewHandle:
        layout = self.layout(proposal)
        return PreviewHandle(self._render(proposal, layout), self.filename(proposal), layout.page_count)

    # ------------------------------------------------------------------ drawing
    def _render(self, proposal: Proposal, layout: LayoutResult) -> bytes:
        buffer = BytesIO()
        g = self.geometry
        c = canvas.Canvas(buffer, pagesize=(g.width, g.height), invariant=1)
        c.setTitle(f"Activity Proposal {_clean(proposal.year)}")
        c.setAuthor(self.brand_name)
        for page in layout.pages:
            self._draw_page(c, page, proposal)
            c.showPage()
        c.save()
        return buffer.getvalue()

    def _draw_page(self, c: canvas.Canvas, page: PageLayout, proposal: Proposal) -> None:
        g = self.geometry
        t = self.typography
        c.setFillColor(BACKGROUND)
        self._rect(c, page.background)

        if page.has_header:
            c.setFillColor(BRAND_GREEN)
            self._rect(c, g.header)
            c.setFillColor(colors.white)
            c.setFont("Helvetica-Bold", 18)
            c.drawString(g.header_text_x, g.height - g.brand_baseline, self.brand_name)
            c.setFont("Helvetica", 11)
            c.drawString(g.header_text_x, g.height - g.subtitle_baseline, self.organization)
            c.setFont("Helvetica-Bold", 14)
            c.drawString(
                g.header_text_x,
                g.height - g.title_baseline,
                f"Activity Proposal {_clean(proposal.year)}",
            )

        c.setFillColor(colors.white)
        self._rect(c, page.container)

        c.setFillColor(INK)
        for block in page.blocks:
            if block.title_y is not None:
                c.setFont(t.title_font, t.title_size)
                c.drawString(g.text_left, g.height - block.title_y, block.title)
            c.setFont(t.body_font, t.body_size)
            for line in block.lines:
                c.drawString(g.text_left, g.height - line.y, line.text)

    def _rect(self, c: canvas.Canvas, rect: Rect) -> None:
        # layout rects are top-down; PDF space is bottom-up
        y = self.geometry.height - rect.y - rect.height
        if rect.radius:
            c.roundRect(rect.x, y, rect.width, rect.height, rect.radius, stroke=0, fill=1)
        else:
            c.rect(rect.x, y, rect.width, rect.height, stroke=0, fill=1)
