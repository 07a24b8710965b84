"""Typed entity graph: one node class per kind, derived edges, flat text index."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import ClassVar, Literal

from src.domain.signals import SignalWeightVector

EdgeKind = Literal["supports", "verifies", "references", "derivesFrom"]

# Node sort rank; also the traversal order of the fallback retrieval path.
KIND_RANK: dict[str, int] = {
    "claim": 0,
    "record": 1,
    "caseStudy": 2,
    "book": 3,
    "framework": 4,
}


@dataclass(frozen=True)
class ClaimNode:
    kind: ClassVar[str] = "claim"
    id: str
    label_key: str
    summary_key: str = ""
    category: str = ""
    record_ids: tuple[str, ...] = ()
    signal_vector: SignalWeightVector | None = None
    signal_entropy_contribution: float | None = None


@dataclass(frozen=True)
class RecordNode:
    kind: ClassVar[str] = "record"
    id: str
    title: str
    slug: str
    artifact_type: str = ""
    date: str = ""
    signal_vector: SignalWeightVector | None = None
    signal_entropy_contribution: float | None = None


@dataclass(frozen=True)
class CaseStudyNode:
    kind: ClassVar[str] = "caseStudy"
    id: str
    title: str
    slug: str
    summary: str = ""
    date: str = ""
    proof_refs: tuple[str, ...] = ()
    claim_refs: tuple[str, ...] = ()
    signal_vector: SignalWeightVector | None = None
    signal_entropy_contribution: float | None = None


@dataclass(frozen=True)
class BookNode:
    kind: ClassVar[str] = "book"
    id: str
    title: str
    slug: str
    summary: str = ""
    publication_date: str = ""
    proof_refs: tuple[str, ...] = ()
    signal_vector: SignalWeightVector | None = None
    signal_entropy_contribution: float | None = None


@dataclass(frozen=True)
class FrameworkNode:
    kind: ClassVar[str] = "framework"
    id: str
    title_key: str
    summary_key: str = ""
    related_claims: tuple[str, ...] = ()
    related_records: tuple[str, ...] = ()
    related_case_studies: tuple[str, ...] = ()
    signal_vector: SignalWeightVector | None = None
    signal_entropy_contribution: float | None = None


GraphNode = ClaimNode | RecordNode | CaseStudyNode | BookNode | FrameworkNode


@dataclass(frozen=True)
class GraphEdge:
    from_id: str
    to_id: str
    kind: EdgeKind
    weight: float | None = None


@dataclass(frozen=True)
class EntityGraph:
    nodes: tuple[GraphNode, ...] = ()
    edges: tuple[GraphEdge, ...] = ()
    _by_key: dict[tuple[str, str], GraphNode] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )
    _outbound: dict[str, list[str]] = field(
        init=False, repr=False, compare=False, default_factory=dict
    )

    def __post_init__(self) -> None:
        for n in self.nodes:
            self._by_key.setdefault((n.kind, n.id), n)
        for e in self.edges:
            self._outbound.setdefault(e.from_id, []).append(e.to_id)

    def node(self, kind: str, node_id: str) -> GraphNode | None:
        return self._by_key.get((kind, node_id))

    def nodes_of(self, kind: str) -> list[GraphNode]:
        return [n for n in self.nodes if n.kind == kind]

    def outbound_ids(self, from_id: str) -> list[str]:
        return list(self._outbound.get(from_id, ()))

    def inbound_ids(self, to_id: str) -> list[str]:
        return [e.from_id for e in self.edges if e.to_id == to_id]


@dataclass(frozen=True)
class SemanticIndexEntry:
    id: str
    type: str
    text: str
    url: str
    signal_vector: SignalWeightVector | None = None
    signal_entropy_contribution: float | None = None
