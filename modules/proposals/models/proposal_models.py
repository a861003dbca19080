"""Core data models for workshop proposals.

A proposal is a tree of frozen dataclasses.  Editing never mutates an instance
in place: :func:`update`, :func:`set_path` and :func:`toggle_path` return a new
top-level :class:`Proposal` and keep every untouched sub-object as-is, so views
can detect changes with a plain identity check.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass, field, fields, is_dataclass, replace
from enum import Enum
from typing import Any, Callable, Dict, List, Tuple

__all__ = [
    "AUDIENCE_FLAGS",
    "DEFAULT_YEAR",
    "DISABILITY_FLAGS",
    "Accessibility",
    "Audience",
    "CanBeAdapted",
    "Capacity",
    "DisabilityTypes",
    "Proposal",
    "WorkSequence",
    "checked_labels",
    "get_path",
    "set_path",
    "toggle_path",
    "update",
]

DEFAULT_YEAR = "2026"

# (attribute, human label) in display order
AUDIENCE_FLAGS: Tuple[Tuple[str, str], ...] = (
    ("infants", "Infants"),
    ("children", "Children"),
    ("teens", "Teens"),
    ("young_adults", "Young adults (18+)"),
    ("older_adults", "Older adults"),
)

DISABILITY_FLAGS: Tuple[Tuple[str, str], ...] = (
    ("motor", "Motor"),
    ("visual", "Visual"),
    ("auditory", "Auditory"),
    ("intellectual", "Intellectual"),
    ("psychosocial", "Psychosocial"),
)


class CanBeAdapted(str, Enum):
    """Answer to "can people with disabilities take part?"."""

    YES = "yes"
    NO = "no"
    UNSET = ""

    @property
    def label(self) -> str:
        return {"yes": "Yes", "no": "No"}.get(self.value, "")


@dataclass(frozen=True, slots=True)
class Audience:
    infants: bool = False
    children: bool = False
    teens: bool = False
    young_adults: bool = False
    older_adults: bool = False
    clarifications: str = ""


@dataclass(frozen=True, slots=True)
class Capacity:
    headcount: str = ""
    duration: str = ""


@dataclass(frozen=True, slots=True)
class WorkSequence:
    opening: str = ""
    development: str = ""
    closing: str = ""


@dataclass(frozen=True, slots=True)
class DisabilityTypes:
    motor: bool = False
    visual: bool = False
    auditory: bool = False
    intellectual: bool = False
    psychosocial: bool = False
    other: str = ""


@dataclass(frozen=True, slots=True)
class Accessibility:
    can_be_adapted: CanBeAdapted = CanBeAdapted.UNSET
    disability_types: DisabilityTypes = field(default_factory=DisabilityTypes)
    what_would_be_needed: str = ""


@dataclass(frozen=True, slots=True)
class Proposal:
    """Editable shape of one workshop proposal.

    Store metadata (identifier and timestamps) never lives here; the wizard
    tracks the identifier of the record being edited separately.
    """

    year: str = DEFAULT_YEAR
    name: str = ""
    rationale: str = ""
    objectives: str = ""
    audience: Audience = field(default_factory=Audience)
    axes: str = ""
    capacity: Capacity = field(default_factory=Capacity)
    responsible_parties: str = ""
    sequence: WorkSequence = field(default_factory=WorkSequence)
    resources: str = ""
    logistics: str = ""
    accessibility: Accessibility = field(default_factory=Accessibility)
    spaces: str = ""
    integration: str = ""
    final_notes: str = ""

    @classmethod
    def blank(cls, year: str | None = None) -> "Proposal":
        """Return an empty proposal for ``year`` (or the built-in default)."""

        return cls(year=year or DEFAULT_YEAR)

    def to_dict(self) -> Dict[str, Any]:
        """Return a JSON-compatible mapping of every field."""

        payload = asdict(self)
        payload["accessibility"]["can_be_adapted"] = self.accessibility.can_be_adapted.value
        return payload

    @classmethod
    def from_dict(cls, data: Dict[str, Any] | None, *, year: str | None = None) -> "Proposal":
        """Build a proposal from a stored or cached mapping.

        Missing keys fall back to the blank defaults and unknown keys are
        ignored, so a partial draft merges cleanly over an empty proposal.
        """

        from .schemas import ProposalPayload

        payload = dict(data or {})
        if year and not payload.get("year"):
            payload["year"] = year
        return ProposalPayload.model_validate(payload).to_proposal()

    @property
    def has_name(self) -> bool:
        return bool(self.name.strip())


def checked_labels(group: object, flags: Tuple[Tuple[str, str], ...]) -> List[str]:
    """Return the labels of the flags set on ``group`` in declaration order."""

    return [label for attr, label in flags if getattr(group, attr)]


# -- immutable updates ---------------------------------------------------------------
def update(proposal: Proposal, patch_fn: Callable[[Proposal], Proposal]) -> Proposal:
    """Apply ``patch_fn`` and return its result.

    ``patch_fn`` must return a :class:`Proposal`; returning the same instance
    signals "no change".
    """

    result = patch_fn(proposal)
    if not isinstance(result, Proposal):
        raise TypeError(f"patch function returned {type(result).__name__}, expected Proposal")
    return result


def get_path(obj: object, path: str) -> Any:
    """Read a dotted attribute path such as ``"capacity.headcount"``."""

    value = obj
    for part in path.split("."):
        value = getattr(value, part)
    return value


def set_path(obj: Any, path: str, value: Any) -> Any:
    """Return a copy of ``obj`` with the dotted ``path`` set to ``value``.

    Each dataclass along the path is rebuilt with :func:`dataclasses.replace`.
    When the new value equals the current one the original object is returned.
    """

    head, _, rest = path.partition(".")
    if not is_dataclass(obj) or head not in {f.name for f in fields(obj)}:
        raise AttributeError(f"{type(obj).__name__} has no field {head!r}")
    current = getattr(obj, head)
    if rest:
        new_value = set_path(current, rest, value)
    else:
        new_value = _coerce(current, value)
    if new_value is current or new_value == current:
        return obj
    return replace(obj, **{head: new_value})


def toggle_path(obj: Any, path: str) -> Any:
    """Flip the boolean flag at ``path``."""

    current = get_path(obj, path)
    if not isinstance(current, bool):
        raise TypeError(f"{path} is not a flag")
    return set_path(obj, path, not current)


def _coerce(current: Any, value: Any) -> Any:
    if isinstance(current, CanBeAdapted):
        return CanBeAdapted(value if value is not None else "")
    if isinstance(current, bool):
        return bool(value)
    if isinstance(current, str):
        return "" if value is None else str(value)
    return value
