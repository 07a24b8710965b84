from __future__ import annotations

import logging
from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field

from src.application.use_cases.graph_cache import ContentSnapshot
from src.core.exceptions import AuthorityValidationError
from src.core.settings import DiagnosticsSettings
from src.domain.differentiation import (
    detect_flattening,
    differentiate_bindings,
    find_duplicate_signatures,
    find_low_entropy_clusters,
)
from src.domain.entropy import (
    CollapseReport,
    VarianceDistributionReport,
    detect_severe_collapse,
    signal_entropy_score,
    topology_dimensionality_index,
    variance_distribution_report,
)
from src.domain.graph_builder import build_entity_graph, validate_entity_graph
from src.domain.registry import SignalRegistry
from src.domain.signals import AUTHORITY_SIGNALS, Binding, entity_key, full_vector

log = logging.getLogger(__name__)

BRIEF_NODE_KEY = "briefNode:brief"


@dataclass(frozen=True)
class EntityIdSet:
    claim_ids: frozenset[str] = frozenset()
    record_ids: frozenset[str] = frozenset()
    case_study_ids: frozenset[str] = frozenset()
    book_ids: frozenset[str] = frozenset()
    framework_ids: frozenset[str] = frozenset()

    @classmethod
    def from_snapshot(cls, snap: ContentSnapshot) -> EntityIdSet:
        return cls(
            claim_ids=frozenset(c.id for c in snap.claims),
            record_ids=frozenset(r.id for r in snap.records),
            case_study_ids=frozenset(cs.id for cs in snap.case_studies),
            book_ids=frozenset(b.id for b in snap.books),
            framework_ids=frozenset(f.id for f in snap.frameworks),
        )


@dataclass
class MappingDiagnostics:
    errors: list[str] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    info: list[str] = field(default_factory=list)


@dataclass(frozen=True)
class TopologyReport:
    entropy_score: float
    dimensionality_index: float
    variance: VarianceDistributionReport
    collapse: CollapseReport


def validate_all_entities_mapped(ids: EntityIdSet, bindings: Iterable[Binding]) -> list[str]:
    """Every known content entity (and the executive brief node) needs a binding."""
    keys = {b.key for b in bindings}
    errors: list[str] = []
    groups = (
        ("claim", "Claim", ids.claim_ids),
        ("record", "Record", ids.record_ids),
        ("caseStudy", "Case study", ids.case_study_ids),
        ("book", "Book", ids.book_ids),
        ("framework", "Framework", ids.framework_ids),
    )
    for kind, label, entity_ids in groups:
        for eid in sorted(entity_ids):
            if entity_key(kind, eid) not in keys:
                errors.append(f'{label} "{eid}" has no authority signal binding.')
    if BRIEF_NODE_KEY not in keys:
        errors.append('Executive brief node "brief" has no authority signal binding.')
    return errors


def validate_minimum_density(bindings: Iterable[Binding], min_density: float = 0.2) -> list[str]:
    """Primary weight sum per entity must reach ``min_density``."""
    warnings: list[str] = []
    for b in bindings:
        total = sum(full_vector(b.vector.primary).values())
        if total < min_density:
            warnings.append(f"Entity {b.key} has low signal density ({total:.2f}).")
    return warnings


def find_dangling_references(snap: ContentSnapshot) -> list[str]:
    """Content references whose target id does not exist (dropped from the graph)."""
    records = {r.id for r in snap.records}
    claims = {c.id for c in snap.claims}
    case_studies = {cs.id for cs in snap.case_studies}
    errors: list[str] = []

    def check(owner: str, ref_kind: str, ref: str, known: set[str]) -> None:
        if ref not in known:
            errors.append(f'Missing reference: {owner} -> {ref_kind} "{ref}" has no matching node.')

    for c in snap.claims:
        for rid in c.record_ids:
            check(entity_key("claim", c.id), "record", rid, records)
    for cs in snap.case_studies:
        for rid in cs.proof_refs:
            check(entity_key("caseStudy", cs.id), "record", rid, records)
        for cid in cs.claim_refs:
            check(entity_key("caseStudy", cs.id), "claim", cid, claims)
    for bk in snap.books:
        for rid in bk.proof_refs:
            check(entity_key("book", bk.id), "record", rid, records)
    for f in snap.frameworks:
        for cid in f.related_claims:
            check(entity_key("framework", f.id), "claim", cid, claims)
        for rid in f.related_records:
            check(entity_key("framework", f.id), "record", rid, records)
        for csid in f.related_case_studies:
            check(entity_key("framework", f.id), "caseStudy", csid, case_studies)
    return errors


def topology_report(
    bindings: Sequence[Binding], settings: DiagnosticsSettings | None = None
) -> TopologyReport:
    cfg = settings or DiagnosticsSettings()
    return TopologyReport(
        entropy_score=signal_entropy_score(bindings),
        dimensionality_index=topology_dimensionality_index(bindings),
        variance=variance_distribution_report(bindings),
        collapse=detect_severe_collapse(
            bindings,
            entropy_threshold=cfg.severe_entropy_threshold,
            dimensionality_threshold=cfg.severe_dimensionality_threshold,
        ),
    )


def mapping_diagnostics(
    ids: EntityIdSet,
    bindings: Sequence[Binding],
    settings: DiagnosticsSettings | None = None,
) -> MappingDiagnostics:
    """Signal imbalance, coverage gaps and redundancy over the canonical bindings.

    Returns human-readable messages keyed by entity; never raises.
    """
    cfg = settings or DiagnosticsSettings()
    diag = MappingDiagnostics()
    differentiated = differentiate_bindings(bindings)
    registry = SignalRegistry(differentiated)

    diag.errors.extend(validate_all_entities_mapped(ids, bindings))
    diag.warnings.extend(validate_minimum_density(bindings, cfg.min_entity_density))

    agg = registry.aggregate_coverage()
    mean = sum(agg.values()) / len(AUTHORITY_SIGNALS)
    if mean > 0:
        for s in AUTHORITY_SIGNALS:
            ratio = agg[s] / mean
            if ratio >= cfg.overconcentration_ratio:
                diag.warnings.append(f'Signal "{s}" is overconcentrated (ratio {ratio:.2f} of mean).')
            if ratio <= cfg.starvation_ratio:
                diag.warnings.append(f'Signal "{s}" may be starved (ratio {ratio:.2f} of mean).')

    # Redundancy: entities declaring the same set of primary signals
    by_profile: dict[tuple[str, ...], list[str]] = {}
    for b in bindings:
        profile = tuple(sorted(k for k, v in (b.vector.primary or {}).items() if v))
        by_profile.setdefault(profile, []).append(b.key)
    for keys in by_profile.values():
        if len(keys) >= cfg.redundancy_cluster_size:
            diag.info.append(
                f"Redundancy cluster: {len(keys)} entities share the same signal profile."
            )

    for cluster in find_duplicate_signatures(differentiated):
        diag.warnings.append(
            f"Vector duplication: {', '.join(cluster.entity_keys)} share signature "
            f"{cluster.signature[:40]}..."
        )
    for cluster in find_low_entropy_clusters(differentiated, cfg.low_entropy_cluster_size):
        diag.warnings.append(
            f"Low entropy cluster: {cluster.count} entities "
            f"({', '.join(cluster.entity_keys[:3])}...) share same vector."
        )
    if detect_flattening(differentiated, cfg.flattening_variance_threshold):
        diag.warnings.append(
            "Signal flattening detected: entity vectors are too similar (low variance)."
        )

    log.info(
        "mapping.errors=%d mapping.warnings=%d mapping.info=%d",
        len(diag.errors),
        len(diag.warnings),
        len(diag.info),
    )
    return diag


def validate_or_raise(
    snap: ContentSnapshot,
    bindings: Sequence[Binding],
    settings: DiagnosticsSettings | None = None,
) -> MappingDiagnostics:
    """Build-time gate: raise one aggregated error for everything content authors must fix.

    Errors are unmapped entities, dangling references, orphan graph nodes and a severe
    topology collapse. Warnings and info are returned, never raised.
    """
    cfg = settings or DiagnosticsSettings()
    diag = mapping_diagnostics(EntityIdSet.from_snapshot(snap), bindings, cfg)
    errors = list(diag.errors)
    errors.extend(find_dangling_references(snap))
    graph = build_entity_graph(
        snap.claims, snap.records, snap.case_studies, snap.books, snap.frameworks
    )
    errors.extend(validate_entity_graph(graph))

    report = topology_report(differentiate_bindings(bindings), cfg)
    if report.collapse.severe:
        errors.append(f"Severe topology collapse: {report.collapse.reason}")

    if errors:
        raise AuthorityValidationError(errors)
    return diag
