from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, replace

from src.domain.signals import AUTHORITY_SIGNALS, Binding, SignalWeightVector, resolve_effective

MODULATION_STEP = 0.08
TERTIARY_STEP = 0.04
MAX_SECONDARY = 0.4
MAX_TERTIARY = 0.2


def vector_signature(vector: SignalWeightVector) -> str:
    """Canonical string for an effective vector (2-decimal rounding, signal-sorted)."""
    eff = resolve_effective(vector)
    parts = sorted(f"{s}:{round(eff[s], 2):.2f}" for s in AUTHORITY_SIGNALS)
    return "|".join(parts)


@dataclass(frozen=True)
class SignatureCluster:
    signature: str
    entity_keys: list[str]

    @property
    def count(self) -> int:
        return len(self.entity_keys)


def _clusters(bindings: Sequence[Binding]) -> dict[str, list[int]]:
    by_sig: dict[str, list[int]] = {}
    for i, b in enumerate(bindings):
        by_sig.setdefault(vector_signature(b.vector), []).append(i)
    return by_sig


def differentiate_bindings(bindings: Sequence[Binding]) -> list[Binding]:
    """Nudge bindings that share an effective signature apart.

    Only secondary/tertiary entries are set; primary, negative and context overrides are
    carried over unchanged. Output has the same order and entity keys as the input.
    Intended to run once per canonical list: position in the cluster drives the nudge,
    so re-running on its own output is not a fixed point.
    """
    out = list(bindings)
    for indices in _clusters(bindings).values():
        if len(indices) <= 1:
            continue
        for i, pos in enumerate(indices):
            b = bindings[pos]
            eff = resolve_effective(b.vector)
            # stable on canonical signal order for equal weights
            signal_order = sorted(AUTHORITY_SIGNALS, key=lambda s: eff[s])
            under_used = signal_order[i % len(signal_order)]
            dominant = signal_order[-1]

            secondary = dict(b.vector.secondary or {})
            secondary[under_used] = min(MAX_SECONDARY, MODULATION_STEP * (i + 1))
            tertiary = dict(b.vector.tertiary or {})
            tertiary[dominant] = min(MAX_TERTIARY, TERTIARY_STEP * (i + 1))

            out[pos] = replace(b, vector=replace(b.vector, secondary=secondary, tertiary=tertiary))
    return out


def find_duplicate_signatures(bindings: Sequence[Binding]) -> list[SignatureCluster]:
    return [
        SignatureCluster(sig, [bindings[i].key for i in idx])
        for sig, idx in _clusters(bindings).items()
        if len(idx) > 1
    ]


def find_low_entropy_clusters(
    bindings: Sequence[Binding], size_threshold: int = 4
) -> list[SignatureCluster]:
    return [
        SignatureCluster(sig, [bindings[i].key for i in idx])
        for sig, idx in _clusters(bindings).items()
        if len(idx) >= size_threshold
    ]


def detect_flattening(bindings: Sequence[Binding], variance_threshold: float = 0.01) -> bool:
    """True when the batch's mean per-signal variance is below ``variance_threshold``."""
    if len(bindings) <= 1:
        return False
    vectors = [resolve_effective(b.vector) for b in bindings]
    n = len(vectors)
    total = 0.0
    for s in AUTHORITY_SIGNALS:
        mean = sum(v[s] for v in vectors) / n
        total += sum((v[s] - mean) ** 2 for v in vectors)
    return total / (n * len(AUTHORITY_SIGNALS)) < variance_threshold
