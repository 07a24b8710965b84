from __future__ import annotations

from dataclasses import dataclass, field


def stable_id(explicit_id: str | None, slug: str) -> str:
    """Explicit id when present, else the presentation slug."""
    return (explicit_id or "").strip() or slug


@dataclass(frozen=True)
class ClaimEntry:
    id: str
    label_key: str
    summary_key: str = ""
    category: str = ""
    record_ids: tuple[str, ...] = ()


@dataclass(frozen=True)
class PublicRecordEntry:
    slug: str
    title: str
    artifact_type: str = ""
    date: str = ""
    explicit_id: str | None = None

    @property
    def id(self) -> str:
        return stable_id(self.explicit_id, self.slug)


@dataclass(frozen=True)
class CaseStudyEntry:
    slug: str
    title: str
    summary: str = ""
    date: str = ""
    proof_refs: tuple[str, ...] = ()
    claim_refs: tuple[str, ...] = ()
    explicit_id: str | None = None

    @property
    def id(self) -> str:
        return stable_id(self.explicit_id, self.slug)


@dataclass(frozen=True)
class BookEntry:
    slug: str
    title: str
    summary: str = ""
    publication_date: str = ""
    proof_refs: tuple[str, ...] = ()
    explicit_id: str | None = None

    @property
    def id(self) -> str:
        return stable_id(self.explicit_id, self.slug)


@dataclass(frozen=True)
class FrameworkEntry:
    id: str
    title_key: str
    summary_key: str = ""
    related_claims: tuple[str, ...] = field(default_factory=tuple)
    related_records: tuple[str, ...] = field(default_factory=tuple)
    related_case_studies: tuple[str, ...] = field(default_factory=tuple)
