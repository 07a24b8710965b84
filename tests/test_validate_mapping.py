from __future__ import annotations

import pytest

from src.application.use_cases.graph_cache import load_snapshot
from src.application.use_cases.validate_mapping import (
    EntityIdSet,
    find_dangling_references,
    mapping_diagnostics,
    topology_report,
    validate_all_entities_mapped,
    validate_minimum_density,
    validate_or_raise,
)
from src.core.exceptions import AuthorityValidationError
from src.domain.content import ClaimEntry
from src.domain.signals import AUTHORITY_SIGNALS, Binding, SignalWeightVector


def _clean(content):
    # drop the dangling "r-missing" reference from c2
    content.claims[1] = ClaimEntry("c2", "claims.c2.label", record_ids=("r2",))
    return content


def test_unmapped_entities_and_brief_node(content, bindings) -> None:
    ids = EntityIdSet.from_snapshot(load_snapshot(content))
    assert validate_all_entities_mapped(ids, bindings) == []
    partial = [b for b in bindings if b.key not in ("claim:c1", "briefNode:brief")]
    errors = validate_all_entities_mapped(ids, partial)
    assert 'Claim "c1" has no authority signal binding.' in errors
    assert any("brief" in e for e in errors)
    assert len(errors) == 2


def test_low_density_warning() -> None:
    thin = Binding("claim", "thin", SignalWeightVector(primary={"strategic_cognition": 0.1}))
    warnings = validate_minimum_density([thin], min_density=0.2)
    assert warnings == ["Entity claim:thin has low signal density (0.10)."]


def test_dangling_references(content) -> None:
    errors = find_dangling_references(load_snapshot(content))
    assert errors == ['Missing reference: claim:c2 -> record "r-missing" has no matching node.']


def test_concentration_and_redundancy_diagnostics() -> None:
    bindings = [
        Binding("claim", f"c{i}", SignalWeightVector(primary={"strategic_cognition": 1.0}))
        for i in range(4)
    ]
    ids = EntityIdSet(claim_ids=frozenset(b.entity_id for b in bindings))
    diag = mapping_diagnostics(ids, bindings)
    assert any('"strategic_cognition" is overconcentrated' in w for w in diag.warnings)
    assert any('"systems_construction" may be starved' in w for w in diag.warnings)
    assert any("Redundancy cluster: 4 entities" in i for i in diag.info)
    # the brief node is missing from this batch
    assert diag.errors


def test_clean_corpus_validates(content, bindings) -> None:
    diag = validate_or_raise(load_snapshot(_clean(content)), bindings)
    assert diag.errors == []


def test_validate_or_raise_collects_every_error(content, bindings) -> None:
    partial = [b for b in bindings if b.key != "book:b1"]
    with pytest.raises(AuthorityValidationError) as exc:
        validate_or_raise(load_snapshot(content), partial)
    errors = exc.value.errors
    assert 'Book "b1" has no authority signal binding.' in errors
    assert any("r-missing" in e for e in errors)
    assert "2 error(s)" in str(exc.value)


def test_severe_collapse_is_an_error(content) -> None:
    _clean(content)
    one_hot = [
        Binding(kind, eid, SignalWeightVector(primary={AUTHORITY_SIGNALS[i % 5]: 1.0}))  # type: ignore[arg-type]
        for i, (kind, eid) in enumerate(
            [
                ("claim", "c1"),
                ("claim", "c2"),
                ("record", "r1"),
                ("record", "r2"),
                ("caseStudy", "cs1"),
            ]
        )
    ]
    with pytest.raises(AuthorityValidationError) as exc:
        validate_or_raise(load_snapshot(content), one_hot)
    assert any(e.startswith("Severe topology collapse") for e in exc.value.errors)


def test_topology_report(bindings) -> None:
    report = topology_report(bindings)
    assert 0.0 < report.entropy_score <= 1.0
    assert report.dimensionality_index == pytest.approx(1.0)
    assert report.variance.total_entities == len(bindings)
    assert report.collapse.severe is False
