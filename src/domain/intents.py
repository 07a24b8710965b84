from __future__ import annotations

from enum import Enum


class QueryIntent(str, Enum):
    """Closed set of deterministic retrieval strategies. No open-ended queries."""

    SUMMARIZE_FRAMEWORK = "summarize_framework"
    TRACE_EVIDENCE_CHAIN = "trace_evidence_chain"
    COMPARE_CLAIMS = "compare_claims"
    EXPLORE_DOMAIN = "explore_domain"
    EXTRACT_DECISION_MODEL = "extract_decision_model"


def is_query_intent(value: object) -> bool:
    try:
        QueryIntent(value)
    except ValueError:
        return False
    return True
