"""Pydantic schemas for proposal documents kept in the store and draft cache."""

from __future__ import annotations

from datetime import datetime

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .proposal_models import (
    Accessibility,
    Audience,
    CanBeAdapted,
    Capacity,
    DisabilityTypes,
    DEFAULT_YEAR,
    Proposal,
    WorkSequence,
)


class _Payload(BaseModel):
    model_config = ConfigDict(extra="ignore", coerce_numbers_to_str=True)

    @field_validator("*", mode="before")
    @classmethod
    def _blank_nulls(cls, value, info):
        # Documents written by older clients may carry nulls for unset fields.
        if value is not None:
            return value
        annotation = cls.model_fields[info.field_name].annotation
        if annotation is bool:
            return False
        if isinstance(annotation, type) and issubclass(annotation, BaseModel):
            return {}
        if isinstance(annotation, type) and issubclass(annotation, str):
            return ""
        return value


class AudiencePayload(_Payload):
    infants: bool = False
    children: bool = False
    teens: bool = False
    young_adults: bool = False
    older_adults: bool = False
    clarifications: str = ""


class CapacityPayload(_Payload):
    headcount: str = ""
    duration: str = ""


class SequencePayload(_Payload):
    opening: str = ""
    development: str = ""
    closing: str = ""


class DisabilityTypesPayload(_Payload):
    motor: bool = False
    visual: bool = False
    auditory: bool = False
    intellectual: bool = False
    psychosocial: bool = False
    other: str = ""


class AccessibilityPayload(_Payload):
    can_be_adapted: CanBeAdapted = CanBeAdapted.UNSET
    disability_types: DisabilityTypesPayload = Field(default_factory=DisabilityTypesPayload)
    what_would_be_needed: str = ""


class ProposalPayload(_Payload):
    year: str = DEFAULT_YEAR
    name: str = ""
    rationale: str = ""
    objectives: str = ""
    audience: AudiencePayload = Field(default_factory=AudiencePayload)
    axes: str = ""
    capacity: CapacityPayload = Field(default_factory=CapacityPayload)
    responsible_parties: str = ""
    sequence: SequencePayload = Field(default_factory=SequencePayload)
    resources: str = ""
    logistics: str = ""
    accessibility: AccessibilityPayload = Field(default_factory=AccessibilityPayload)
    spaces: str = ""
    integration: str = ""
    final_notes: str = ""

    def to_proposal(self) -> Proposal:
        access = self.accessibility
        return Proposal(
            year=self.year or DEFAULT_YEAR,
            name=self.name,
            rationale=self.rationale,
            objectives=self.objectives,
            audience=Audience(**self.audience.model_dump()),
            axes=self.axes,
            capacity=Capacity(**self.capacity.model_dump()),
            responsible_parties=self.responsible_parties,
            sequence=WorkSequence(**self.sequence.model_dump()),
            resources=self.resources,
            logistics=self.logistics,
            accessibility=Accessibility(
                can_be_adapted=access.can_be_adapted,
                disability_types=DisabilityTypes(**access.disability_types.model_dump()),
                what_would_be_needed=access.what_would_be_needed,
            ),
            spaces=self.spaces,
            integration=self.integration,
            final_notes=self.final_notes,
        )


class StoredProposalRow(BaseModel):
    """A row read back from the ``proposals`` table."""

    id: str
    created_at: datetime
    updated_at: datetime
    data: ProposalPayload


__all__ = [
    "AccessibilityPayload",
    "AudiencePayload",
    "CapacityPayload",
    "DisabilityTypesPayload",
    "ProposalPayload",
    "SequencePayload",
    "StoredProposalRow",
]
