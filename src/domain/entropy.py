"""Entropy and dimensionality diagnostics over a batch of bindings.

All functions are pure: they read the effective vectors of the batch and never mutate it.
"""

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field

import numpy as np

from src.domain.differentiation import vector_signature
from src.domain.signals import AUTHORITY_SIGNALS, Binding, resolve_effective

# Max entropy for 5 outcomes
MAX_ENTROPY_BITS = math.log2(len(AUTHORITY_SIGNALS))

SEVERE_ENTROPY_THRESHOLD = 0.12
SEVERE_DIMENSIONALITY_THRESHOLD = 0.15


def _matrix(bindings: Sequence[Binding]) -> np.ndarray:
    """Rows = entities, columns = signals in canonical order."""
    rows = [
        [resolve_effective(b.vector)[s] for s in AUTHORITY_SIGNALS] for b in bindings
    ]
    return np.asarray(rows, dtype=np.float64).reshape(len(rows), len(AUTHORITY_SIGNALS))


def _shannon_bits(probs: np.ndarray) -> float:
    p = probs[probs > 0]
    return float(-(p * np.log2(p)).sum())


def signal_entropy_score(bindings: Sequence[Binding]) -> float:
    """Mean per-signal Shannon entropy of weight spread across entities, normalized to [0, 1].

    Signals whose total weight is zero contribute nothing. A single entity has no
    distribution to measure and scores 0.
    """
    if len(bindings) <= 1:
        return 0.0
    m = _matrix(bindings)
    total = 0.0
    for col in m.T:
        s = col.sum()
        if s <= 0:
            continue
        total += _shannon_bits(col / s)
    mean_entropy = total / len(AUTHORITY_SIGNALS)
    return min(1.0, max(0.0, mean_entropy / MAX_ENTROPY_BITS))


def topology_dimensionality_index(bindings: Sequence[Binding]) -> float:
    if not bindings:
        return 0.0
    unique = {vector_signature(b.vector) for b in bindings}
    return len(unique) / len(bindings)


@dataclass(frozen=True)
class SignalStats:
    mean: float
    variance: float


@dataclass(frozen=True)
class VarianceDistributionReport:
    per_signal: dict[str, SignalStats]
    overall_variance: float
    unique_signatures: int
    total_entities: int


def variance_distribution_report(bindings: Sequence[Binding]) -> VarianceDistributionReport:
    n = len(bindings)
    m = _matrix(bindings)
    per_signal: dict[str, SignalStats] = {}
    for j, s in enumerate(AUTHORITY_SIGNALS):
        col = m[:, j]
        mean = float(col.mean()) if n else 0.0
        variance = float(col.var(ddof=1)) if n > 1 else 0.0
        per_signal[s] = SignalStats(mean=mean, variance=variance)
    overall = sum(p.variance for p in per_signal.values()) / len(AUTHORITY_SIGNALS)
    unique = len({vector_signature(b.vector) for b in bindings})
    return VarianceDistributionReport(
        per_signal=per_signal,
        overall_variance=overall,
        unique_signatures=unique,
        total_entities=n,
    )


@dataclass(frozen=True)
class CollapseReport:
    severe: bool
    reason: str | None = None
    entropy_score: float = 0.0
    dimensionality_index: float = 0.0


def detect_severe_collapse(
    bindings: Sequence[Binding],
    *,
    entropy_threshold: float = SEVERE_ENTROPY_THRESHOLD,
    dimensionality_threshold: float = SEVERE_DIMENSIONALITY_THRESHOLD,
) -> CollapseReport:
    """Build-time gate: severe when entropy or dimensionality falls below its threshold."""
    entropy = signal_entropy_score(bindings)
    dim = topology_dimensionality_index(bindings)
    if entropy < entropy_threshold:
        return CollapseReport(
            True,
            f"Signal entropy score {entropy:.3f} below threshold {entropy_threshold}",
            entropy,
            dim,
        )
    if dim < dimensionality_threshold:
        return CollapseReport(
            True,
            f"Topology dimensionality index {dim:.3f} below threshold {dimensionality_threshold}",
            entropy,
            dim,
        )
    return CollapseReport(False, None, entropy, dim)


def entropy_contribution(vector: Mapping[str, float], mean: Mapping[str, float]) -> float:
    """Squared Euclidean distance from the kind mean. Higher = more distinctive."""
    return sum((vector.get(s, 0.0) - mean.get(s, 0.0)) ** 2 for s in AUTHORITY_SIGNALS)


def mean_vectors_by_kind(bindings: Sequence[Binding]) -> dict[str, dict[str, float]]:
    groups: dict[str, list[Binding]] = {}
    for b in bindings:
        groups.setdefault(b.entity_kind, []).append(b)
    out: dict[str, dict[str, float]] = {}
    for kind, group in groups.items():
        col_means = _matrix(group).mean(axis=0)
        out[kind] = {s: float(col_means[j]) for j, s in enumerate(AUTHORITY_SIGNALS)}
    return out


@dataclass
class ContributionIndex:
    """Per-entity entropy contributions keyed by ``(kind, id)``."""

    values: dict[tuple[str, str], float] = field(default_factory=dict)

    def get(self, kind: str, entity_id: str) -> float | None:
        return self.values.get((kind, entity_id))

    __call__ = get


def entropy_contributions(bindings: Sequence[Binding]) -> ContributionIndex:
    means = mean_vectors_by_kind(bindings)
    idx = ContributionIndex()
    for b in bindings:
        idx.values[(b.entity_kind, b.entity_id)] = entropy_contribution(
            resolve_effective(b.vector), means[b.entity_kind]
        )
    return idx
