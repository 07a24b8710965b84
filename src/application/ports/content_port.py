from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol

from src.domain.content import (
    BookEntry,
    CaseStudyEntry,
    ClaimEntry,
    FrameworkEntry,
    PublicRecordEntry,
)


class ContentPort(Protocol):
    """Read-only content snapshots, already validated by the content collaborator.

    Every method is required; an adapter without frameworks returns an empty sequence.
    """

    def get_all_claims(self) -> Sequence[ClaimEntry]:  # pragma: no cover - interface
        ...

    def get_public_record_entries(self) -> Sequence[PublicRecordEntry]:  # pragma: no cover
        ...

    def get_case_study_entries(self) -> Sequence[CaseStudyEntry]:  # pragma: no cover
        ...

    def get_book_entries(self) -> Sequence[BookEntry]:  # pragma: no cover
        ...

    def get_framework_entries(self) -> Sequence[FrameworkEntry]:  # pragma: no cover
        ...
