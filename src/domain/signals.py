from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Literal

AuthoritySignal = Literal[
    "strategic_cognition",
    "systems_construction",
    "operational_transformation",
    "institutional_leadership",
    "public_service_statesmanship",
]

# Closed, ordered set. Order is significant for tie-breaking everywhere.
AUTHORITY_SIGNALS: tuple[AuthoritySignal, ...] = (
    "strategic_cognition",
    "systems_construction",
    "operational_transformation",
    "institutional_leadership",
    "public_service_statesmanship",
)

EntityKind = Literal["claim", "record", "caseStudy", "book", "briefNode", "framework"]

ENTITY_KINDS: tuple[EntityKind, ...] = (
    "claim",
    "record",
    "caseStudy",
    "book",
    "briefNode",
    "framework",
)

WeightMap = Mapping[str, float]


@dataclass(frozen=True)
class SignalWeightVector:
    """Layered opinion about one entity's alignment to the five authority signals.

    ``primary`` is the doctrinal default. ``secondary``/``tertiary`` only break ties,
    ``negative`` subtracts, and ``context_override`` replaces resolved entries for one
    evaluator context. Consumers only ever read the effective vector.
    """

    primary: WeightMap = field(default_factory=dict)
    secondary: WeightMap | None = None
    tertiary: WeightMap | None = None
    negative: WeightMap | None = None
    context_override: Mapping[str, WeightMap] | None = None


@dataclass(frozen=True)
class Binding:
    entity_kind: EntityKind
    entity_id: str
    vector: SignalWeightVector

    @property
    def key(self) -> str:
        return entity_key(self.entity_kind, self.entity_id)


def entity_key(kind: str, entity_id: str) -> str:
    return f"{kind}:{entity_id}"


def _finite(x: object) -> float:
    try:
        v = float(x)  # type: ignore[arg-type]
    except (TypeError, ValueError):
        return 0.0
    return v if math.isfinite(v) else 0.0


def full_vector(weights: WeightMap | None) -> dict[str, float]:
    """Expand a partial weight map to all five signals (missing = 0). Unknown keys are ignored."""
    w = weights or {}
    return {s: _finite(w.get(s, 0.0)) for s in AUTHORITY_SIGNALS}


def resolve_effective(
    vector: SignalWeightVector, active_context: str | None = None
) -> dict[str, float]:
    """Collapse the layers of ``vector`` into one effective weight per signal.

    primary + secondary + tertiary, minus negative floored at 0; then the entries of
    ``context_override[active_context]`` replace the computed ones when present.
    """
    out = full_vector(vector.primary)
    for layer in (vector.secondary, vector.tertiary):
        for s, v in full_vector(layer).items():
            out[s] += v
    neg = full_vector(vector.negative)
    for s in AUTHORITY_SIGNALS:
        out[s] = max(0.0, out[s] - neg[s])

    if active_context and vector.context_override:
        override = vector.context_override.get(active_context)
        if override:
            for s in AUTHORITY_SIGNALS:
                if s in override:
                    out[s] = max(0.0, _finite(override[s]))
    return out


def vector_sum(vector: SignalWeightVector, active_context: str | None = None) -> float:
    return sum(resolve_effective(vector, active_context).values())


def dominant_signal(vector: SignalWeightVector) -> str | None:
    """Signal with the largest effective weight; first in signal order on ties; None if all 0."""
    eff = resolve_effective(vector)
    best: str | None = None
    best_val = 0.0
    for s in AUTHORITY_SIGNALS:
        if eff[s] > best_val:
            best, best_val = s, eff[s]
    return best


def balanced_weights() -> dict[str, float]:
    return {s: 0.2 for s in AUTHORITY_SIGNALS}


def with_primary(signal: AuthoritySignal, weight: float) -> dict[str, float]:
    """Emphasize one signal and share the remainder equally among the other four."""
    rest = (1.0 - weight) / (len(AUTHORITY_SIGNALS) - 1)
    return {s: (weight if s == signal else rest) for s in AUTHORITY_SIGNALS}
