from __future__ import annotations

import math

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from src.domain.content import (
    BookEntry,
    CaseStudyEntry,
    ClaimEntry,
    FrameworkEntry,
    PublicRecordEntry,
)
from src.domain.signals import AUTHORITY_SIGNALS, ENTITY_KINDS, Binding, SignalWeightVector


class _ContentModel(BaseModel):
    # Content files use camelCase keys; snake_case is accepted too
    model_config = ConfigDict(populate_by_name=True, extra="ignore", frozen=True)


class ClaimModel(_ContentModel):
    id: str
    label_key: str = Field(alias="labelKey")
    summary_key: str = Field("", alias="summaryKey")
    category: str = ""
    record_ids: list[str] = Field(default_factory=list, alias="recordIds")

    def to_entry(self) -> ClaimEntry:
        return ClaimEntry(
            id=self.id,
            label_key=self.label_key,
            summary_key=self.summary_key,
            category=self.category,
            record_ids=tuple(self.record_ids),
        )


class RecordModel(_ContentModel):
    slug: str
    title: str
    id: str | None = None
    artifact_type: str = Field("", alias="artifactType")
    date: str = ""

    def to_entry(self) -> PublicRecordEntry:
        return PublicRecordEntry(
            slug=self.slug,
            title=self.title,
            artifact_type=self.artifact_type,
            date=self.date,
            explicit_id=self.id,
        )


class CaseStudyModel(_ContentModel):
    slug: str
    title: str
    id: str | None = None
    summary: str = ""
    date: str = ""
    proof_refs: list[str] = Field(default_factory=list, alias="proofRefs")
    claim_refs: list[str] = Field(default_factory=list, alias="claimRefs")

    def to_entry(self) -> CaseStudyEntry:
        return CaseStudyEntry(
            slug=self.slug,
            title=self.title,
            summary=self.summary,
            date=self.date,
            proof_refs=tuple(self.proof_refs),
            claim_refs=tuple(self.claim_refs),
            explicit_id=self.id,
        )


class BookModel(_ContentModel):
    slug: str
    title: str
    id: str | None = None
    summary: str = ""
    publication_date: str = Field("", alias="publicationDate")
    proof_refs: list[str] = Field(default_factory=list, alias="proofRefs")

    def to_entry(self) -> BookEntry:
        return BookEntry(
            slug=self.slug,
            title=self.title,
            summary=self.summary,
            publication_date=self.publication_date,
            proof_refs=tuple(self.proof_refs),
            explicit_id=self.id,
        )


class FrameworkModel(_ContentModel):
    id: str
    title_key: str = Field(alias="titleKey")
    summary_key: str = Field("", alias="summaryKey")
    related_claims: list[str] = Field(default_factory=list, alias="relatedClaims")
    related_records: list[str] = Field(default_factory=list, alias="relatedRecords")
    related_case_studies: list[str] = Field(default_factory=list, alias="relatedCaseStudies")

    def to_entry(self) -> FrameworkEntry:
        return FrameworkEntry(
            id=self.id,
            title_key=self.title_key,
            summary_key=self.summary_key,
            related_claims=tuple(self.related_claims),
            related_records=tuple(self.related_records),
            related_case_studies=tuple(self.related_case_studies),
        )


def _check_weights(weights: dict[str, float] | None) -> dict[str, float] | None:
    if weights is None:
        return None
    for signal, value in weights.items():
        if signal not in AUTHORITY_SIGNALS:
            raise ValueError(f"unknown authority signal: {signal!r}")
        if not math.isfinite(value) or value < 0.0 or value > 1.0:
            raise ValueError(f"weight for {signal} must be within [0, 1], got {value}")
    return weights


class SignalVectorModel(_ContentModel):
    # "weights" is the legacy name of the primary layer
    primary: dict[str, float] = Field(
        default_factory=dict, validation_alias=AliasChoices("primary", "weights")
    )
    secondary: dict[str, float] | None = None
    tertiary: dict[str, float] | None = None
    negative: dict[str, float] | None = None
    context_override: dict[str, dict[str, float]] | None = Field(
        None, validation_alias=AliasChoices("contextOverride", "context_override")
    )

    @field_validator("primary", "secondary", "tertiary", "negative")
    @classmethod
    def _valid_layer(cls, v: dict[str, float] | None) -> dict[str, float] | None:
        return _check_weights(v)

    @field_validator("context_override")
    @classmethod
    def _valid_overrides(
        cls, v: dict[str, dict[str, float]] | None
    ) -> dict[str, dict[str, float]] | None:
        if v is not None:
            for layer in v.values():
                _check_weights(layer)
        return v

    def to_vector(self) -> SignalWeightVector:
        return SignalWeightVector(
            primary=dict(self.primary),
            secondary=self.secondary,
            tertiary=self.tertiary,
            negative=self.negative,
            context_override=self.context_override,
        )


class BindingModel(_ContentModel):
    entity_kind: str = Field(alias="entityKind")
    entity_id: str = Field(alias="entityId")
    signal_vector: SignalVectorModel = Field(alias="signalVector")

    @field_validator("entity_kind")
    @classmethod
    def _known_kind(cls, v: str) -> str:
        if v not in ENTITY_KINDS:
            raise ValueError(f"unknown entity kind: {v!r}")
        return v

    def to_binding(self) -> Binding:
        return Binding(self.entity_kind, self.entity_id, self.signal_vector.to_vector())  # type: ignore[arg-type]
