from .authority_query import AuthorityQueryUseCase
from .graph_cache import create_request_cache, get_entity_graph, get_semantic_index
from .validate_mapping import mapping_diagnostics, topology_report, validate_or_raise

__all__ = [
    "AuthorityQueryUseCase",
    "create_request_cache",
    "get_entity_graph",
    "get_semantic_index",
    "mapping_diagnostics",
    "topology_report",
    "validate_or_raise",
]
