"""Pagination engine for proposal documents.

The engine takes ordered ``(title, body)`` blocks and lays them out over fixed
A4 pages.  It only computes positions; drawing is done by
:mod:`modules.proposals.services.exporter`.  Coordinates are in points and
measured from the *top* of the page, so ``y`` grows downwards.

Page breaks follow the after-the-fact rule: a block is written in full on the
page where it starts and, once it is written, a cursor past the bottom
threshold makes the *next* block start on a new page.  A block taller than a
page therefore runs past the bottom margin.  ``split_oversized=True`` switches
to a variant that continues such a block on the following page instead.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, List, Optional, Tuple

from reportlab.lib.pagesizes import A4
from reportlab.pdfbase.pdfmetrics import stringWidth

__all__ = [
    "LayoutResult",
    "PageGeometry",
    "PageLayout",
    "PlacedBlock",
    "PlacedLine",
    "Rect",
    "Typography",
    "paginate",
    "wrap_text",
]


@dataclass(frozen=True, slots=True)
class Rect:
    x: float
    y: float
    width: float
    height: float
    radius: float = 0.0

    @property
    def bottom(self) -> float:
        return self.y + self.height


@dataclass(frozen=True, slots=True)
class PageGeometry:
    """Fixed presentation constants for one portrait A4 page."""

    width: float = A4[0]
    height: float = A4[1]
    inset: float = 40.0
    header_top: float = 36.0
    header_height: float = 78.0
    header_radius: float = 14.0
    header_text_x: float = 60.0
    brand_baseline: float = 68.0
    subtitle_baseline: float = 88.0
    title_baseline: float = 108.0
    container_top: float = 135.0
    container_bottom_margin: float = 60.0
    continuation_top: float = 40.0
    continuation_bottom_margin: float = 60.0
    container_radius: float = 16.0
    text_left: float = 60.0
    first_cursor_offset: float = 28.0
    continuation_cursor: float = 70.0
    bottom_margin: float = 80.0

    @property
    def text_width(self) -> float:
        return self.width - 2 * self.text_left

    @property
    def first_cursor(self) -> float:
        return self.container_top + self.first_cursor_offset

    @property
    def bottom_limit(self) -> float:
        return self.height - self.bottom_margin

    @property
    def background(self) -> Rect:
        return Rect(0.0, 0.0, self.width, self.height)

    @property
    def header(self) -> Rect:
        return Rect(
            self.inset,
            self.header_top,
            self.width - 2 * self.inset,
            self.header_height,
            self.header_radius,
        )

    @property
    def first_container(self) -> Rect:
        return Rect(
            self.inset,
            self.container_top,
            self.width - 2 * self.inset,
            self.height - self.container_top - self.container_bottom_margin,
            self.container_radius,
        )

    @property
    def continuation_container(self) -> Rect:
        return Rect(
            self.inset,
            self.continuation_top,
            self.width - 2 * self.inset,
            self.height - self.continuation_top - self.continuation_bottom_margin,
            self.container_radius,
        )


@dataclass(frozen=True, slots=True)
class Typography:
    title_font: str = "Helvetica-Bold"
    title_size: float = 11.5
    title_advance: float = 14.0
    body_font: str = "Helvetica"
    body_size: float = 10.5
    line_height: float = 12.0
    block_gap: float = 12.0


@dataclass(frozen=True, slots=True)
class PlacedLine:
    text: str
    y: float


@dataclass(frozen=True, slots=True)
class PlacedBlock:
    """One block (or the continuation of one) on a page.

    ``title_y`` is ``None`` for a continuation, whose title is not redrawn.
    """

    title: str
    title_y: Optional[float]
    lines: Tuple[PlacedLine, ...]
    continued: bool = False


@dataclass(slots=True)
class PageLayout:
    number: int
    background: Rect
    container: Rect
    has_header: bool
    blocks: List[PlacedBlock] = field(default_factory=list)


@dataclass(slots=True)
class LayoutResult:
    pages: List[PageLayout]
    geometry: PageGeometry
    typography: Typography

    @property
    def page_count(self) -> int:
        return len(self.pages)

    def ordered_lines(self) -> List[Tuple[str, str]]:
        """Return every ``(title, line)`` pair in reading order."""

        return [
            (block.title, line.text)
            for page in self.pages
            for block in page.blocks
            for line in block.lines
        ]


# -- text measurement ---------------------------------------------------------------
def wrap_text(text: str, font_name: str, font_size: float, max_width: float) -> List[str]:
    """Split ``text`` into lines no wider than ``max_width`` points.

    Newlines are hard breaks and blank lines are kept.  Words are packed
    greedily; a word wider than the line on its own is broken between
    characters.
    """

    def width(value: str) -> float:
        return stringWidth(value, font_name, font_size)

    lines: List[str] = []
    normalized = text.replace("\r\n", "\n").replace("\r", "\n")
    for paragraph in normalized.split("\n"):
        current = ""
        for word in paragraph.split():
            candidate = f"{current} {word}" if current else word
            if width(candidate) <= max_width:
                current = candidate
                continue
            if current:
                lines.append(current)
                current = ""
            if width(word) <= max_width:
                current = word
                continue
            pieces = _break_word(word, width, max_width)
            lines.extend(pieces[:-1])
            current = pieces[-1]
        lines.append(current)
    return lines


def _break_word(word: str, width, max_width: float) -> List[str]:
    pieces: List[str] = []
    buf = ""
    for ch in word:
        if buf and width(buf + ch) > max_width:
            pieces.append(buf)
            buf = ch
        else:
            buf += ch
    pieces.append(buf)
    return pieces


# -- pagination ---------------------------------------------------------------------
class _Cursor:
    def __init__(self, geometry: PageGeometry) -> None:
        self.geometry = geometry
        self.pages: List[PageLayout] = []
        self.y = 0.0
        self._first_page()

    @property
    def page(self) -> PageLayout:
        return self.pages[-1]

    def _first_page(self) -> None:
        g = self.geometry
        self.pages.append(
            PageLayout(number=1, background=g.background, container=g.first_container, has_header=True)
        )
        self.y = g.first_cursor

    def new_page(self) -> None:
        g = self.geometry
        self.pages.append(
            PageLayout(
                number=len(self.pages) + 1,
                background=g.background,
                container=g.continuation_container,
                has_header=False,
            )
        )
        self.y = g.continuation_cursor


def paginate(
    blocks: Iterable[Tuple[str, str]],
    geometry: PageGeometry | None = None,
    typography: Typography | None = None,
    *,
    split_oversized: bool = False,
) -> LayoutResult:
    """Lay ``blocks`` out over as many pages as needed.

    Blocks are expected to be non-empty; callers drop blank sections first.
    With no blocks the result is a single page carrying only the header.
    """

    geometry = geometry or PageGeometry()
    typography = typography or Typography()
    cursor = _Cursor(geometry)
    limit = geometry.bottom_limit
    pending_break = False

    for title, body in blocks:
        if pending_break:
            cursor.new_page()
        elif split_oversized and cursor.page.blocks and cursor.y + typography.title_advance > limit:
            # keep a title together with its first line
            cursor.new_page()

        lines = wrap_text(body, typography.body_font, typography.body_size, geometry.text_width)
        title_y: Optional[float] = cursor.y
        cursor.y += typography.title_advance
        placed: List[PlacedLine] = []
        continued = False
        for text in lines:
            if split_oversized and placed and cursor.y > limit:
                cursor.page.blocks.append(PlacedBlock(title, title_y, tuple(placed), continued))
                cursor.new_page()
                placed = []
                title_y = None
                continued = True
            placed.append(PlacedLine(text, cursor.y))
            cursor.y += typography.line_height
        cursor.page.blocks.append(PlacedBlock(title, title_y, tuple(placed), continued))
        cursor.y += typography.block_gap
        pending_break = cursor.y > limit

    return LayoutResult(pages=cursor.pages, geometry=geometry, typography=typography)
