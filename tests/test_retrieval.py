from __future__ import annotations

import logging

import pytest

from src.domain.graph import ClaimNode, EntityGraph, SemanticIndexEntry
from src.domain.graph_builder import build_entity_graph, build_semantic_index
from src.domain.intents import QueryIntent, is_query_intent
from src.domain.registry import SignalRegistry
from src.domain.retrieval import by_signal_and_entropy, query, rank_semantic_entries
from src.domain.signals import SignalWeightVector

CONTRIBUTIONS = {
    ("framework", "f1"): 0.1,
    ("framework", "f2"): 0.3,
    ("claim", "c1"): 0.2,
    ("claim", "c2"): 0.05,
    ("record", "r1"): 0.1,
    ("record", "r2"): 0.2,
}


@pytest.fixture()
def corpus(content, bindings) -> tuple[EntityGraph, list[SemanticIndexEntry]]:
    reg = SignalRegistry(bindings)

    def contrib(kind: str, eid: str) -> float | None:
        return CONTRIBUTIONS.get((kind, eid))

    args = (content.claims, content.records, content.case_studies, content.books, content.frameworks)
    graph = build_entity_graph(*args, get_signal_vector=reg.lookup, get_signal_variance=contrib)
    index = build_semantic_index(*args, get_signal_vector=reg.lookup, get_signal_variance=contrib)
    return graph, index


def test_intent_enum() -> None:
    assert is_query_intent("trace_evidence_chain")
    assert not is_query_intent("summarize")
    assert QueryIntent("explore_domain") is QueryIntent.EXPLORE_DOMAIN


def test_summarize_framework_follows_related_entities(corpus) -> None:
    graph, index = corpus
    result = query(graph, index, QueryIntent.SUMMARIZE_FRAMEWORK)
    assert result.ids("frameworks") == ["f2", "f1"]
    assert result.ids("claims") == ["c2", "c1"]
    assert result.ids("records") == ["r1"]
    assert result.ids("case_studies") == ["cs1"]
    assert result.books == []


def test_extract_decision_model_skips_case_studies(corpus) -> None:
    graph, index = corpus
    result = query(graph, index, "extract_decision_model")
    assert result.ids("frameworks") == ["f2", "f1"]
    assert result.case_studies == []


def test_trace_evidence_chain(corpus) -> None:
    graph, index = corpus
    result = query(graph, index, QueryIntent.TRACE_EVIDENCE_CHAIN)
    assert result.ids("claims") == ["c1", "c2"]
    # "r-missing" on c2 has no node and is skipped
    assert result.ids("records") == ["r1", "r2"]
    assert result.ids("case_studies") == ["cs1"]
    assert result.frameworks == []


def test_compare_claims_has_no_case_studies(corpus) -> None:
    graph, index = corpus
    result = query(graph, index, QueryIntent.COMPARE_CLAIMS)
    assert result.ids("claims") == ["c1", "c2"]
    assert result.ids("records") == ["r1", "r2"]
    assert result.case_studies == []


def test_max_per_type_caps_every_bucket(corpus) -> None:
    graph, index = corpus
    result = query(graph, index, QueryIntent.TRACE_EVIDENCE_CHAIN, max_per_type=1)
    assert result.ids("claims") == ["c1"]
    assert result.ids("records") == ["r1"]
    assert result.ids("case_studies") == ["cs1"]
    assert query(graph, index, QueryIntent.TRACE_EVIDENCE_CHAIN, max_per_type=0).total == 0


def test_explore_domain_prefers_literal_matches(corpus) -> None:
    graph, index = corpus
    result = query(graph, index, QueryIntent.EXPLORE_DOMAIN, query_text="POLICY", max_per_type=1)
    assert result.ids("books") == ["b1"]
    assert result.total <= 2


def test_unknown_intent_falls_back_to_graph_order(corpus, caplog) -> None:
    graph, index = corpus
    with caplog.at_level(logging.WARNING):
        result = query(graph, index, "not_an_intent")
    assert result.ids("claims") == ["c1", "c2"]
    assert result.ids("frameworks") == ["f1", "f2"]
    assert result.total == len(graph.nodes)
    assert "not_an_intent" in caplog.text


def test_query_is_deterministic(corpus) -> None:
    graph, index = corpus
    for intent in QueryIntent:
        a = query(graph, index, intent, evaluator_context="board", query_text="plan")
        b = query(graph, index, intent, evaluator_context="board", query_text="plan")
        for bucket in ("frameworks", "claims", "records", "books", "case_studies"):
            assert a.ids(bucket) == b.ids(bucket)


def test_buckets_never_hold_duplicates(corpus) -> None:
    graph, index = corpus
    result = query(graph, index, QueryIntent.EXPLORE_DOMAIN, query_text="")
    for bucket in ("frameworks", "claims", "records", "books", "case_studies"):
        ids = result.ids(bucket)
        assert len(ids) == len(set(ids))


def test_ranking_order_contribution_then_sum_then_id() -> None:
    heavy = SignalWeightVector(primary={"strategic_cognition": 1.0})
    light = SignalWeightVector(primary={"strategic_cognition": 0.5})
    nodes = [
        ClaimNode(id="b", label_key="", signal_vector=light),
        ClaimNode(id="a", label_key="", signal_vector=light),
        ClaimNode(id="z", label_key="", signal_vector=heavy),
        ClaimNode(id="top", label_key="", signal_entropy_contribution=0.9),
    ]
    assert [n.id for n in by_signal_and_entropy(nodes)] == ["top", "z", "a", "b"]


def test_ranking_uses_evaluator_context() -> None:
    boosted = SignalWeightVector(
        primary={"strategic_cognition": 0.1},
        context_override={"investor": {"strategic_cognition": 1.0}},
    )
    plain = SignalWeightVector(primary={"strategic_cognition": 0.5})
    nodes = [
        ClaimNode(id="a", label_key="", signal_vector=plain),
        ClaimNode(id="b", label_key="", signal_vector=boosted),
    ]
    assert [n.id for n in by_signal_and_entropy(nodes)] == ["a", "b"]
    assert [n.id for n in by_signal_and_entropy(nodes, "investor")] == ["b", "a"]


def test_semantic_ranking_tiers() -> None:
    entries = [
        SemanticIndexEntry("x", "claim", "nothing here", "/x"),
        SemanticIndexEntry(
            "y", "claim", "nothing either", "/y", SignalWeightVector(primary={"systems_construction": 1.0})
        ),
        SemanticIndexEntry("z", "record", "Governance plan", "/z"),
    ]
    assert [e.id for e in rank_semantic_entries(entries, "governance")] == ["z", "y", "x"]
    # empty text: no literal tier, weight sum decides, ties keep index order
    assert [e.id for e in rank_semantic_entries(entries, "")] == ["y", "x", "z"]
