"""Deterministic retrieval over the entity graph and the flat semantic index.

No generative model and no fuzzy matching: every result is a pure function of the
graph, the index, the intent and the options. Missing ids and absent vectors degrade
to smaller buckets; nothing here raises for malformed graph data.
"""

from __future__ import annotations

import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.domain.graph import EntityGraph, GraphNode, SemanticIndexEntry
from src.domain.intents import QueryIntent
from src.domain.signals import SignalWeightVector, vector_sum

log = logging.getLogger(__name__)

DEFAULT_MAX_PER_TYPE = 10

# node kind -> result bucket
BUCKET_FOR_KIND: dict[str, str] = {
    "framework": "frameworks",
    "claim": "claims",
    "record": "records",
    "book": "books",
    "caseStudy": "case_studies",
}


@dataclass(frozen=True)
class RetrievedEntity:
    id: str
    node: GraphNode


@dataclass
class RetrievalResult:
    frameworks: list[RetrievedEntity] = field(default_factory=list)
    claims: list[RetrievedEntity] = field(default_factory=list)
    records: list[RetrievedEntity] = field(default_factory=list)
    books: list[RetrievedEntity] = field(default_factory=list)
    case_studies: list[RetrievedEntity] = field(default_factory=list)

    @property
    def total(self) -> int:
        return (
            len(self.frameworks)
            + len(self.claims)
            + len(self.records)
            + len(self.books)
            + len(self.case_studies)
        )

    def ids(self, bucket: str) -> list[str]:
        return [e.id for e in getattr(self, bucket)]


def _signal_score(vector: SignalWeightVector | None, context: str | None) -> float:
    return vector_sum(vector, context) if vector is not None else 0.0


def by_signal_and_entropy(
    nodes: Sequence[GraphNode], evaluator_context: str | None = None
) -> list[GraphNode]:
    """Strict total order: contribution desc, effective weight sum desc, id asc."""
    return sorted(
        nodes,
        key=lambda n: (
            -(n.signal_entropy_contribution or 0.0),
            -_signal_score(n.signal_vector, evaluator_context),
            n.id,
        ),
    )


def rank_semantic_entries(
    entries: Sequence[SemanticIndexEntry],
    query_text: str = "",
    evaluator_context: str | None = None,
) -> list[SemanticIndexEntry]:
    """Literal substring match first (skipped for empty text), then weight sum, then
    contribution. Python's sort is stable, so remaining ties keep index order."""
    q = (query_text or "").strip().lower()

    def key(e: SemanticIndexEntry) -> tuple[int, float, float]:
        match = 1 if q and q in (e.text or "").lower() else 0
        return (
            -match,
            -_signal_score(e.signal_vector, evaluator_context),
            -(e.signal_entropy_contribution or 0.0),
        )

    return sorted(entries, key=key)


class _Collector:
    """Kind-checked, de-duplicated, capped bucket inserts."""

    def __init__(self, graph: EntityGraph, max_per_type: int) -> None:
        self.graph = graph
        self.max_per_type = max_per_type
        self.result = RetrievalResult()
        self._seen: dict[str, set[str]] = {b: set() for b in BUCKET_FOR_KIND.values()}

    def add(self, kind: str, node_id: str) -> bool:
        bucket = BUCKET_FOR_KIND.get(kind)
        if bucket is None:
            return False
        node = self.graph.node(kind, node_id)
        if node is None:
            return False
        items: list[RetrievedEntity] = getattr(self.result, bucket)
        if len(items) >= self.max_per_type or node_id in self._seen[bucket]:
            return False
        items.append(RetrievedEntity(id=node_id, node=node))
        self._seen[bucket].add(node_id)
        return True

    def add_node(self, node: GraphNode) -> bool:
        return self.add(node.kind, node.id)


def query(
    graph: EntityGraph,
    semantic_index: Sequence[SemanticIndexEntry],
    intent: QueryIntent | str,
    *,
    evaluator_context: str | None = None,
    max_per_type: int = DEFAULT_MAX_PER_TYPE,
    query_text: str = "",
) -> RetrievalResult:
    max_per_type = max(0, int(max_per_type))
    col = _Collector(graph, max_per_type)
    try:
        resolved = QueryIntent(intent)
    except ValueError:
        resolved = None

    def top(kind: str) -> list[GraphNode]:
        return by_signal_and_entropy(graph.nodes_of(kind), evaluator_context)[:max_per_type]

    if resolved in (QueryIntent.SUMMARIZE_FRAMEWORK, QueryIntent.EXTRACT_DECISION_MODEL):
        for n in top("framework"):
            col.add_node(n)
        for entry in list(col.result.frameworks):
            fw = entry.node
            for cid in getattr(fw, "related_claims", ()):
                col.add("claim", cid)
            for rid in getattr(fw, "related_records", ()):
                col.add("record", rid)
            if resolved is QueryIntent.SUMMARIZE_FRAMEWORK:
                for csid in getattr(fw, "related_case_studies", ()):
                    col.add("caseStudy", csid)

    elif resolved in (QueryIntent.TRACE_EVIDENCE_CHAIN, QueryIntent.COMPARE_CLAIMS):
        for n in top("claim"):
            col.add_node(n)
            for rid in getattr(n, "record_ids", ()):
                col.add("record", rid)
        if resolved is QueryIntent.TRACE_EVIDENCE_CHAIN:
            for r in list(col.result.records):
                for target in graph.outbound_ids(r.id):
                    col.add("caseStudy", target)

    elif resolved is QueryIntent.EXPLORE_DOMAIN:
        ranked = rank_semantic_entries(semantic_index, query_text, evaluator_context)
        for e in ranked[: max_per_type * 2]:
            col.add(e.type, e.id)

    else:
        log.warning("retrieval.unknown_intent=%r; falling back to graph order", intent)
        for n in graph.nodes:
            col.add_node(n)

    log.info(
        "retrieval.intent=%s retrieval.total=%d",
        resolved.value if resolved is not None else intent,
        col.result.total,
    )
    return col.result
