"""Domain layer: pure types and logic (no I/O).

Keep this layer free of side-effects. Signal vectors, the registry, topology diagnostics,
the entity graph and the deterministic retrieval/formatting pipeline live here.
"""

from .differentiation import (
    detect_flattening,
    differentiate_bindings,
    find_duplicate_signatures,
    find_low_entropy_clusters,
    vector_signature,
)
from .entropy import (
    detect_severe_collapse,
    entropy_contribution,
    entropy_contributions,
    mean_vectors_by_kind,
    signal_entropy_score,
    topology_dimensionality_index,
    variance_distribution_report,
)
from .formatting import EntityLink, FormattedResult, format_result
from .graph import EntityGraph, GraphEdge, GraphNode, SemanticIndexEntry
from .graph_builder import build_entity_graph, build_semantic_index, validate_entity_graph
from .intents import QueryIntent, is_query_intent
from .registry import SignalRegistry
from .retrieval import RetrievalResult, RetrievedEntity, by_signal_and_entropy, query
from .signals import AUTHORITY_SIGNALS, Binding, SignalWeightVector, resolve_effective

__all__ = [
    "AUTHORITY_SIGNALS",
    "Binding",
    "SignalWeightVector",
    "resolve_effective",
    "SignalRegistry",
    "vector_signature",
    "differentiate_bindings",
    "find_duplicate_signatures",
    "find_low_entropy_clusters",
    "detect_flattening",
    "signal_entropy_score",
    "topology_dimensionality_index",
    "variance_distribution_report",
    "detect_severe_collapse",
    "entropy_contribution",
    "entropy_contributions",
    "mean_vectors_by_kind",
    "EntityGraph",
    "GraphEdge",
    "GraphNode",
    "SemanticIndexEntry",
    "build_entity_graph",
    "build_semantic_index",
    "validate_entity_graph",
    "QueryIntent",
    "is_query_intent",
    "RetrievalResult",
    "RetrievedEntity",
    "by_signal_and_entropy",
    "query",
    "EntityLink",
    "FormattedResult",
    "format_result",
]
