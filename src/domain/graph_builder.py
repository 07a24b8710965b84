from __future__ import annotations

import logging
import math
from collections.abc import Callable, Iterable, Sequence

from src.domain.content import (
    BookEntry,
    CaseStudyEntry,
    ClaimEntry,
    FrameworkEntry,
    PublicRecordEntry,
)
from src.domain.graph import (
    KIND_RANK,
    BookNode,
    CaseStudyNode,
    ClaimNode,
    EdgeKind,
    EntityGraph,
    FrameworkNode,
    GraphEdge,
    GraphNode,
    RecordNode,
    SemanticIndexEntry,
)
from src.domain.signals import SignalWeightVector, resolve_effective

log = logging.getLogger(__name__)

SignalVectorResolver = Callable[[str, str], SignalWeightVector | None]
SignalVarianceResolver = Callable[[str, str], float | None]

DEFAULT_LOCALE = "en"


def cosine_distance(a: dict[str, float], b: dict[str, float]) -> float | None:
    """1 - cosine similarity; None when either vector has zero norm."""
    keys = sorted(set(a) | set(b))
    dot = sum(a.get(k, 0.0) * b.get(k, 0.0) for k in keys)
    na = math.sqrt(sum(a.get(k, 0.0) ** 2 for k in keys))
    nb = math.sqrt(sum(b.get(k, 0.0) ** 2 for k in keys))
    if na == 0.0 or nb == 0.0:
        return None
    return 1.0 - dot / (na * nb)


def _sort_nodes(nodes: Iterable[GraphNode]) -> tuple[GraphNode, ...]:
    return tuple(sorted(nodes, key=lambda n: (KIND_RANK.get(n.kind, len(KIND_RANK)), n.id)))


def _sort_edges(edges: Iterable[GraphEdge]) -> tuple[GraphEdge, ...]:
    return tuple(sorted(edges, key=lambda e: (e.from_id, e.to_id, e.kind)))


def build_entity_graph(
    claims: Sequence[ClaimEntry],
    records: Sequence[PublicRecordEntry],
    case_studies: Sequence[CaseStudyEntry],
    books: Sequence[BookEntry],
    frameworks: Sequence[FrameworkEntry] = (),
    *,
    get_signal_vector: SignalVectorResolver | None = None,
    get_signal_variance: SignalVarianceResolver | None = None,
    active_context: str | None = None,
) -> EntityGraph:
    """Assemble nodes and derived edges from the content collections.

    Edges: claim -> record (supports); record -> case study and claim -> case study
    (references, from the case study's proof/claim refs); book -> record (references);
    framework -> related claim/record/case study (derivesFrom). References to ids with
    no node are dropped here and reported by ``validate_entity_graph`` at build time.
    """

    def vec(kind: str, entity_id: str) -> SignalWeightVector | None:
        return get_signal_vector(kind, entity_id) if get_signal_vector else None

    def contrib(kind: str, entity_id: str) -> float | None:
        return get_signal_variance(kind, entity_id) if get_signal_variance else None

    nodes: list[GraphNode] = []
    for c in claims:
        nodes.append(
            ClaimNode(
                id=c.id,
                label_key=c.label_key,
                summary_key=c.summary_key,
                category=c.category,
                record_ids=tuple(c.record_ids),
                signal_vector=vec("claim", c.id),
                signal_entropy_contribution=contrib("claim", c.id),
            )
        )
    for r in records:
        nodes.append(
            RecordNode(
                id=r.id,
                title=r.title,
                slug=r.slug,
                artifact_type=r.artifact_type,
                date=r.date,
                signal_vector=vec("record", r.id),
                signal_entropy_contribution=contrib("record", r.id),
            )
        )
    for cs in case_studies:
        nodes.append(
            CaseStudyNode(
                id=cs.id,
                title=cs.title,
                slug=cs.slug,
                summary=cs.summary,
                date=cs.date,
                proof_refs=tuple(cs.proof_refs),
                claim_refs=tuple(cs.claim_refs),
                signal_vector=vec("caseStudy", cs.id),
                signal_entropy_contribution=contrib("caseStudy", cs.id),
            )
        )
    for b in books:
        nodes.append(
            BookNode(
                id=b.id,
                title=b.title,
                slug=b.slug,
                summary=b.summary,
                publication_date=b.publication_date,
                proof_refs=tuple(b.proof_refs),
                signal_vector=vec("book", b.id),
                signal_entropy_contribution=contrib("book", b.id),
            )
        )
    for f in frameworks:
        nodes.append(
            FrameworkNode(
                id=f.id,
                title_key=f.title_key,
                summary_key=f.summary_key,
                related_claims=tuple(f.related_claims),
                related_records=tuple(f.related_records),
                related_case_studies=tuple(f.related_case_studies),
                signal_vector=vec("framework", f.id),
                signal_entropy_contribution=contrib("framework", f.id),
            )
        )

    by_key: dict[tuple[str, str], GraphNode] = {}
    for n in nodes:
        by_key.setdefault((n.kind, n.id), n)

    edges: list[GraphEdge] = []
    dropped = 0

    def add_edge(from_kind: str, from_id: str, to_kind: str, to_id: str, kind: EdgeKind) -> None:
        nonlocal dropped
        a = by_key.get((from_kind, from_id))
        b = by_key.get((to_kind, to_id))
        if a is None or b is None:
            dropped += 1
            return
        weight = None
        if a.signal_vector is not None and b.signal_vector is not None:
            weight = cosine_distance(
                resolve_effective(a.signal_vector, active_context),
                resolve_effective(b.signal_vector, active_context),
            )
        edges.append(GraphEdge(from_id=from_id, to_id=to_id, kind=kind, weight=weight))

    for c in claims:
        for rid in c.record_ids:
            add_edge("claim", c.id, "record", rid, "supports")
    for cs in case_studies:
        for rid in cs.proof_refs:
            add_edge("record", rid, "caseStudy", cs.id, "references")
        for cid in cs.claim_refs:
            add_edge("claim", cid, "caseStudy", cs.id, "references")
    for b in books:
        for rid in b.proof_refs:
            add_edge("book", b.id, "record", rid, "references")
    for f in frameworks:
        for cid in f.related_claims:
            add_edge("framework", f.id, "claim", cid, "derivesFrom")
        for rid in f.related_records:
            add_edge("framework", f.id, "record", rid, "derivesFrom")
        for csid in f.related_case_studies:
            add_edge("framework", f.id, "caseStudy", csid, "derivesFrom")

    if dropped:
        log.debug("graph.dropped_dangling_refs=%d", dropped)
    log.debug("graph.nodes=%d graph.edges=%d", len(nodes), len(edges))
    return EntityGraph(nodes=_sort_nodes(nodes), edges=_sort_edges(edges))


def validate_entity_graph(graph: EntityGraph) -> list[str]:
    """Integrity check: orphan nodes and dangling edge endpoints, as error strings."""
    errors: list[str] = []
    node_ids = {n.id for n in graph.nodes}
    endpoints: set[str] = set()
    for e in graph.edges:
        endpoints.add(e.from_id)
        endpoints.add(e.to_id)
    for n in graph.nodes:
        if n.id not in endpoints:
            errors.append(f'Orphan node: {n.kind} id="{n.id}" (appears in no edge).')
    for e in graph.edges:
        if e.from_id not in node_ids:
            errors.append(
                f'Missing reference: edge fromId "{e.from_id}" (kind={e.kind}) has no matching node.'
            )
        if e.to_id not in node_ids:
            errors.append(
                f'Missing reference: edge toId "{e.to_id}" (kind={e.kind}) has no matching node.'
            )
    return errors


def build_semantic_index(
    claims: Sequence[ClaimEntry],
    records: Sequence[PublicRecordEntry],
    case_studies: Sequence[CaseStudyEntry],
    books: Sequence[BookEntry],
    frameworks: Sequence[FrameworkEntry] = (),
    *,
    locale: str = DEFAULT_LOCALE,
    get_signal_vector: SignalVectorResolver | None = None,
    get_signal_variance: SignalVarianceResolver | None = None,
) -> list[SemanticIndexEntry]:
    """Flat text corpus, one entry per content item, for literal-text retrieval."""

    def entry(kind: str, entity_id: str, text: str, url: str) -> SemanticIndexEntry:
        return SemanticIndexEntry(
            id=entity_id,
            type=kind,
            text=text,
            url=url,
            signal_vector=get_signal_vector(kind, entity_id) if get_signal_vector else None,
            signal_entropy_contribution=(
                get_signal_variance(kind, entity_id) if get_signal_variance else None
            ),
        )

    def join(*parts: str) -> str:
        return " ".join(p for p in parts if p)

    entries: list[SemanticIndexEntry] = []
    for c in claims:
        entries.append(entry("claim", c.id, join(c.label_key, c.summary_key), f"/{locale}/brief"))
    for r in records:
        entries.append(entry("record", r.id, r.title, f"/{locale}/proof/{r.slug}"))
    for cs in case_studies:
        entries.append(
            entry("caseStudy", cs.id, join(cs.title, cs.summary), f"/{locale}/casestudies/{cs.slug}")
        )
    for b in books:
        entries.append(entry("book", b.id, join(b.title, b.summary), f"/{locale}/books/{b.slug}"))
    for f in frameworks:
        entries.append(
            entry("framework", f.id, join(f.title_key, f.summary_key), f"/{locale}/brief#doctrine")
        )
    return sorted(entries, key=lambda e: (KIND_RANK.get(e.type, len(KIND_RANK)), e.id))
