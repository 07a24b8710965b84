from __future__ import annotations

from collections.abc import Sequence

import pytest

from src.domain.content import (
    BookEntry,
    CaseStudyEntry,
    ClaimEntry,
    FrameworkEntry,
    PublicRecordEntry,
)
from src.domain.signals import Binding, SignalWeightVector, balanced_weights, with_primary


class FakeContent:
    """In-memory content port; counts snapshot reads."""

    def __init__(
        self,
        claims: Sequence[ClaimEntry] = (),
        records: Sequence[PublicRecordEntry] = (),
        case_studies: Sequence[CaseStudyEntry] = (),
        books: Sequence[BookEntry] = (),
        frameworks: Sequence[FrameworkEntry] = (),
    ) -> None:
        self.claims = list(claims)
        self.records = list(records)
        self.case_studies = list(case_studies)
        self.books = list(books)
        self.frameworks = list(frameworks)
        self.reads = 0

    def get_all_claims(self) -> list[ClaimEntry]:
        self.reads += 1
        return list(self.claims)

    def get_public_record_entries(self) -> list[PublicRecordEntry]:
        return list(self.records)

    def get_case_study_entries(self) -> list[CaseStudyEntry]:
        return list(self.case_studies)

    def get_book_entries(self) -> list[BookEntry]:
        return list(self.books)

    def get_framework_entries(self) -> list[FrameworkEntry]:
        return list(self.frameworks)


def make_content() -> FakeContent:
    return FakeContent(
        claims=[
            ClaimEntry("c1", "claims.c1.label", "claims.c1.summary", "governance", ("r1",)),
            ClaimEntry("c2", "claims.c2.label", "claims.c2.summary", "delivery", ("r2", "r-missing")),
        ],
        records=[
            PublicRecordEntry("r1-slug", "Recovery plan record", "plan", "2023-01-01", "r1"),
            PublicRecordEntry("r2", "Governance artifact", "policy", "2023-02-01"),
        ],
        case_studies=[
            CaseStudyEntry(
                "cs1",
                "Program recovery",
                "Turned around a failing program",
                proof_refs=("r1",),
                claim_refs=("c1",),
            ),
        ],
        books=[BookEntry("b1", "Policy and Evidence", "Evidence-led policy", proof_refs=("r2",))],
        frameworks=[
            FrameworkEntry("f1", "frameworks.f1.title", "", ("c1",), ("r1",), ("cs1",)),
            FrameworkEntry("f2", "frameworks.f2.title", "", ("c2",)),
        ],
    )


def make_bindings() -> list[Binding]:
    def bind(kind: str, eid: str, primary: dict[str, float]) -> Binding:
        return Binding(kind, eid, SignalWeightVector(primary=primary))  # type: ignore[arg-type]

    return [
        bind("claim", "c1", with_primary("institutional_leadership", 0.6)),
        bind("claim", "c2", with_primary("operational_transformation", 0.4)),
        bind("record", "r1", with_primary("operational_transformation", 0.5)),
        bind("record", "r2", with_primary("institutional_leadership", 0.4)),
        bind("caseStudy", "cs1", with_primary("systems_construction", 0.4)),
        bind("book", "b1", with_primary("strategic_cognition", 0.4)),
        bind("framework", "f1", with_primary("strategic_cognition", 0.7)),
        bind("framework", "f2", with_primary("public_service_statesmanship", 0.4)),
        bind("briefNode", "brief", balanced_weights()),
    ]


@pytest.fixture()
def content() -> FakeContent:
    return make_content()


@pytest.fixture()
def bindings() -> list[Binding]:
    return make_bindings()
