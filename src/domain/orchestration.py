from __future__ import annotations

from typing import Literal

EvaluatorContext = Literal["executive", "board", "public_service", "investor", "media", "default"]

EVALUATOR_CONTEXTS: tuple[EvaluatorContext, ...] = (
    "executive",
    "board",
    "public_service",
    "investor",
    "media",
    "default",
)

# Result buckets that carry a presentation priority.
SURFACE_BUCKETS = ("frameworks", "claims", "case_studies", "records", "books")

# Evaluator context -> priority weight per bucket (0..1, higher surfaces first).
SURFACE_PRIORITY_MATRIX: dict[str, dict[str, float]] = {
    "executive": {
        "frameworks": 0.95,
        "claims": 0.9,
        "case_studies": 0.7,
        "records": 0.85,
        "books": 0.5,
    },
    "board": {
        "frameworks": 0.9,
        "claims": 0.85,
        "case_studies": 0.75,
        "records": 0.8,
        "books": 0.55,
    },
    "public_service": {
        "frameworks": 0.75,
        "claims": 0.85,
        "case_studies": 0.8,
        "records": 0.9,
        "books": 0.5,
    },
    "investor": {
        "frameworks": 0.85,
        "claims": 0.9,
        "case_studies": 0.8,
        "records": 0.85,
        "books": 0.6,
    },
    "media": {
        "frameworks": 0.7,
        "claims": 0.8,
        "case_studies": 0.9,
        "records": 0.75,
        "books": 0.65,
    },
    "default": {
        "frameworks": 0.8,
        "claims": 0.8,
        "case_studies": 0.8,
        "records": 0.8,
        "books": 0.8,
    },
}


def priority_weights_for(context: str | None) -> dict[str, float] | None:
    """Copy of the priority row for ``context``; None when absent or unknown."""
    if context not in EVALUATOR_CONTEXTS:
        return None
    row = SURFACE_PRIORITY_MATRIX[context]
    return {bucket: row[bucket] for bucket in SURFACE_BUCKETS}
