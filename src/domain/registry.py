from __future__ import annotations

from collections.abc import Iterable

from src.domain.signals import (
    AUTHORITY_SIGNALS,
    Binding,
    SignalWeightVector,
    entity_key,
    resolve_effective,
)


class SignalRegistry:
    """Lookup table from ``kind:id`` to the latest registered signal vector.

    One instance belongs to one request/work unit; callers clear and repopulate it
    before relying on lookups. Concurrent repopulation of a shared instance is not
    supported.
    """

    def __init__(self, bindings: Iterable[Binding] | None = None) -> None:
        self._bindings: dict[str, Binding] = {}
        if bindings is not None:
            self.populate(bindings)

    def clear(self) -> None:
        self._bindings.clear()

    def register(self, binding: Binding) -> None:
        self._bindings[binding.key] = binding

    def populate(self, bindings: Iterable[Binding]) -> None:
        self.clear()
        for b in bindings:
            self.register(b)

    def lookup(self, kind: str, entity_id: str) -> SignalWeightVector | None:
        b = self._bindings.get(entity_key(kind, entity_id))
        return b.vector if b is not None else None

    def lookup_effective(
        self, kind: str, entity_id: str, context: str | None = None
    ) -> dict[str, float] | None:
        vec = self.lookup(kind, entity_id)
        return resolve_effective(vec, context) if vec is not None else None

    def bindings(self) -> list[Binding]:
        return list(self._bindings.values())

    def bindings_by_kind(self, kind: str) -> list[Binding]:
        return [b for b in self._bindings.values() if b.entity_kind == kind]

    def aggregate_coverage(self) -> dict[str, float]:
        """Per-signal sum of effective weights across every registered entity."""
        agg = {s: 0.0 for s in AUTHORITY_SIGNALS}
        for b in self._bindings.values():
            for s, v in resolve_effective(b.vector).items():
                agg[s] += v
        return agg

    def __len__(self) -> int:
        return len(self._bindings)

    def __contains__(self, key: object) -> bool:
        return key in self._bindings
