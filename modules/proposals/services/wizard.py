"""Step-by-step editing state for a single proposal.

:class:`ProposalWizard` has no Qt dependency; widgets and tests drive it the
same way.  Widgets read :data:`STEPS` to know which fields
a step edits and call the wizard's setters; every edit produces a new
:class:`~modules.proposals.models.proposal_models.Proposal` and is mirrored to
the draft cache straight away.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, List, Optional, Sequence, Tuple, Union

from ..models.proposal_models import (
    AUDIENCE_FLAGS,
    DEFAULT_YEAR,
    DISABILITY_FLAGS,
    CanBeAdapted,
    Proposal,
    get_path,
    set_path,
    toggle_path,
    update,
)
from .draft_cache import DraftCache, load_draft, save_draft

__all__ = ["FieldSpec", "ProposalWizard", "STEPS", "WizardStep"]

logger = logging.getLogger(__name__)

FIELD_LINE = "line"
FIELD_TEXT = "text"
FIELD_FLAG = "flag"
FIELD_CHOICE = "choice"

Listener = Callable[[Proposal], None]


@dataclass(frozen=True)
class FieldSpec:
    path: str
    label: str
    kind: str = FIELD_TEXT
    placeholder: str = ""
    options: Tuple[Tuple[str, str], ...] = ()
    visible_when: Optional[Callable[[Proposal], bool]] = None

    def is_visible(self, proposal: Proposal) -> bool:
        return self.visible_when is None or bool(self.visible_when(proposal))


@dataclass(frozen=True)
class WizardStep:
    key: str
    label: str
    fields: Tuple[FieldSpec, ...]


def _adapted_is(answer: CanBeAdapted) -> Callable[[Proposal], bool]:
    return lambda proposal: proposal.accessibility.can_be_adapted == answer


STEPS: Tuple[WizardStep, ...] = (
    WizardStep(
        "name",
        "Workshop / activity name",
        (FieldSpec("name", "Workshop / activity name", FIELD_LINE, "e.g. Nature Workshop"),),
    ),
    WizardStep(
        "rationale",
        "Brief rationale",
        (FieldSpec("rationale", "Brief rationale", placeholder="Why does it matter? What does it bring?"),),
    ),
    WizardStep(
        "objectives",
        "Objectives",
        (
            FieldSpec(
                "objectives",
                "Objectives",
                placeholder="Include a general objective and 2 or 3 specific ones.",
            ),
        ),
    ),
    WizardStep(
        "audience",
        "Target audience",
        tuple(FieldSpec(f"audience.{attr}", label, FIELD_FLAG) for attr, label in AUDIENCE_FLAGS)
        + (
            FieldSpec(
                "audience.clarifications",
                "Clarifications (optional)",
                placeholder="e.g. requirements, ages, prior registration",
            ),
        ),
    ),
    WizardStep(
        "axes",
        "Thematic axes",
        (FieldSpec("axes", "Thematic axes", placeholder="One per line or as bullets."),),
    ),
    WizardStep(
        "capacity",
        "Headcount and duration",
        (
            FieldSpec("capacity.headcount", "Headcount", FIELD_LINE, "e.g. 25"),
            FieldSpec("capacity.duration", "Duration", FIELD_LINE, "e.g. 4 sessions of 90 min"),
        ),
    ),
    WizardStep(
        "responsible_parties",
        "Responsible parties",
        (FieldSpec("responsible_parties", "Responsible parties", placeholder="Name(s) and role(s)."),),
    ),
    WizardStep(
        "sequence",
        "Work sequence",
        (
            FieldSpec("sequence.opening", "Stage 1 – Opening", placeholder="Welcome, introductions, warm-up…"),
            FieldSpec("sequence.development", "Stage 2 – Development", placeholder="Core activities, methodology…"),
            FieldSpec("sequence.closing", "Stage 3 – Closing", placeholder="Wrap-up, evaluation, feedback…"),
        ),
    ),
    WizardStep(
        "resources",
        "Resources needed",
        (FieldSpec("resources", "Resources needed", placeholder="Teaching, technical, artistic materials…"),),
    ),
    WizardStep(
        "logistics",
        "Logistics needed",
        (FieldSpec("logistics", "Logistics needed", placeholder="Rooms, furniture, schedules, support…"),),
    ),
    WizardStep(
        "accessibility",
        "Accessibility and inclusion",
        (
            FieldSpec(
                "accessibility.can_be_adapted",
                "Can people with disabilities take part?",
                FIELD_CHOICE,
                options=((CanBeAdapted.YES.value, "Yes"), (CanBeAdapted.NO.value, "No")),
            ),
        )
        + tuple(
            FieldSpec(
                f"accessibility.disability_types.{attr}",
                label,
                FIELD_FLAG,
                visible_when=_adapted_is(CanBeAdapted.YES),
            )
            for attr, label in DISABILITY_FLAGS
        )
        + (
            FieldSpec(
                "accessibility.disability_types.other",
                "Other (optional)",
                FIELD_LINE,
                "e.g. ASD",
                visible_when=_adapted_is(CanBeAdapted.YES),
            ),
            FieldSpec(
                "accessibility.what_would_be_needed",
                "What would be needed to make it inclusive?",
                placeholder="e.g. interpreter, adaptations, accessible materials…",
                visible_when=_adapted_is(CanBeAdapted.NO),
            ),
        ),
    ),
    WizardStep(
        "spaces",
        "Participating spaces of the Hub",
        (
            FieldSpec(
                "spaces",
                "Which spaces of the Hub take part?",
                placeholder="e.g. BioPark, Science Museum…",
            ),
        ),
    ),
    WizardStep(
        "integration",
        "Integrating other spaces of the Hub",
        (
            FieldSpec(
                "integration",
                "What would be needed to integrate other spaces?",
                placeholder="Resources, agreements, adaptations…",
            ),
        ),
    ),
    WizardStep(
        "final_notes",
        "Final notes",
        (FieldSpec("final_notes", "Final notes", placeholder="Notes, precautions, recommendations…"),),
    ),
)


class ProposalWizard:
    """Current step and in-progress proposal of the data-entry wizard."""

    def __init__(
        self,
        proposal: Optional[Proposal] = None,
        *,
        cache: Optional[DraftCache] = None,
        steps: Sequence[WizardStep] = STEPS,
        require_name_to_advance: bool = False,
        default_year: str = DEFAULT_YEAR,
    ) -> None:
        if not steps:
            raise ValueError("a wizard needs at least one step")
        self.steps: Tuple[WizardStep, ...] = tuple(steps)
        self.cache = cache
        self.require_name_to_advance = require_name_to_advance
        self.default_year = default_year
        self._proposal = proposal or Proposal.blank(default_year)
        self._index = 0
        self.current_id: Optional[str] = None
        self._listeners: List[Listener] = []

    # ------------------------------------------------------------------ state
    @property
    def proposal(self) -> Proposal:
        return self._proposal

    @property
    def index(self) -> int:
        return self._index

    @property
    def step(self) -> WizardStep:
        return self.steps[self._index]

    @property
    def step_count(self) -> int:
        return len(self.steps)

    @property
    def is_first(self) -> bool:
        return self._index == 0

    @property
    def is_last(self) -> bool:
        return self._index == len(self.steps) - 1

    @property
    def can_proceed(self) -> bool:
        if self.is_last:
            return False
        if self.require_name_to_advance and self._index == 0:
            return self._proposal.has_name
        return True

    def progress(self) -> List[str]:
        """Return ``"done"``, ``"active"`` or ``"todo"`` for every step."""

        return [
            "done" if i < self._index else "active" if i == self._index else "todo"
            for i in range(len(self.steps))
        ]

    def visible_fields(self, step: Optional[WizardStep] = None) -> List[FieldSpec]:
        step = step or self.step
        return [spec for spec in step.fields if spec.is_visible(self._proposal)]

    # ------------------------------------------------------------------ transitions
    def next(self) -> bool:
        """Advance one step; return ``False`` when that was not possible."""

        if not self.can_proceed:
            return False
        self._index = min(self._index + 1, len(self.steps) - 1)
        return True

    def back(self) -> bool:
        if self._index == 0:
            return False
        self._index = max(self._index - 1, 0)
        return True

    def go_to(self, step: Union[int, str]) -> int:
        """Jump to ``step`` (an index or a step key) and return the new index."""

        if isinstance(step, str):
            keys = [s.key for s in self.steps]
            if step not in keys:
                raise KeyError(f"Unknown wizard step {step!r}")
            index = keys.index(step)
        else:
            index = int(step)
        self._index = max(0, min(index, len(self.steps) - 1))
        return self._index

    def reset(self) -> None:
        """Start over with a blank proposal and no tracked identifier."""

        self.current_id = None
        self._index = 0
        self._replace(Proposal.blank(self.default_year), force=True)

    def load(self, proposal: Proposal, record_id: Optional[str]) -> None:
        """Edit ``proposal`` (stored as ``record_id``) from the first step."""

        self.current_id = record_id
        self._index = 0
        self._replace(proposal, force=True)

    def mark_saved(self, record_id: str) -> None:
        self.current_id = record_id

    def restore_draft(self) -> bool:
        """Replace the proposal with the cached draft, if one exists."""

        draft = load_draft(self.cache, year=self.default_year)
        if draft is None:
            return False
        self._replace(draft, force=True)
        return True

    # ------------------------------------------------------------------ edits
    def value(self, path: str) -> Any:
        return get_path(self._proposal, path)

    def update(self, patch_fn: Callable[[Proposal], Proposal]) -> Proposal:
        self._replace(update(self._proposal, patch_fn))
        return self._proposal

    def set_value(self, path: str, value: Any) -> Proposal:
        return self.update(lambda p: set_path(p, path, value))

    def toggle(self, path: str) -> Proposal:
        return self.update(lambda p: toggle_path(p, path))

    def choose(self, path: str, value: str) -> Proposal:
        spec = self._field(path)
        allowed = {key for key, _ in spec.options} if spec is not None else set()
        if allowed and value not in allowed:
            raise ValueError(f"{value!r} is not an option for {path}")
        return self.set_value(path, value)

    def setter(self, path: str) -> Callable[[Any], Proposal]:
        return lambda value: self.set_value(path, value)

    def toggler(self, path: str) -> Callable[[], Proposal]:
        return lambda: self.toggle(path)

    # ------------------------------------------------------------------ listeners
    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Call ``listener`` with every new proposal; return a disposer."""

        self._listeners.append(listener)

        def dispose() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return dispose

    # ------------------------------------------------------------------ internals
    def _field(self, path: str) -> Optional[FieldSpec]:
        for step in self.steps:
            for spec in step.fields:
                if spec.path == path:
                    return spec
        return None

    def _replace(self, proposal: Proposal, *, force: bool = False) -> None:
        if proposal is self._proposal and not force:
            return
        self._proposal = proposal
        save_draft(self.cache, proposal)
        for listener in list(self._listeners):
            try:
                listener(proposal)
            except Exception:
                logger.exception("Wizard listener %r failed", listener)
