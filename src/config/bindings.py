"""Canonical signal bindings for the known content entities.

Every claim, record, case study, book, framework and the executive brief node should
appear here; ``validate`` reports gaps. Extend this list when content is added.
"""

from __future__ import annotations

from src.domain.signals import (
    Binding,
    EntityKind,
    SignalWeightVector,
    balanced_weights,
    with_primary,
)


def _bind(kind: EntityKind, entity_id: str, weights: dict[str, float]) -> Binding:
    return Binding(kind, entity_id, SignalWeightVector(primary=weights))


ENTITY_BINDINGS: tuple[Binding, ...] = (
    # Claims
    _bind("claim", "recovery-plan-speed", with_primary("operational_transformation", 0.4)),
    _bind("claim", "executive-brief-evaluation", with_primary("institutional_leadership", 0.4)),
    _bind("claim", "procurement-governance", with_primary("institutional_leadership", 0.4)),
    _bind("claim", "accessibility-compliance", with_primary("public_service_statesmanship", 0.4)),
    _bind("claim", "security-disclosure", with_primary("public_service_statesmanship", 0.4)),
    _bind("claim", "content-os-pgf", with_primary("systems_construction", 0.4)),
    _bind("claim", "intelligence-graph", with_primary("systems_construction", 0.4)),
    _bind("claim", "case-study-evidence", with_primary("operational_transformation", 0.4)),
    _bind("claim", "delivery-governance", with_primary("operational_transformation", 0.4)),
    _bind("claim", "policy-verification", balanced_weights()),
    # Public records (by id/slug)
    _bind("record", "recovery-plan-two-weeks", with_primary("operational_transformation", 0.4)),
    _bind("record", "executive-brief-scope-evaluation", with_primary("strategic_cognition", 0.4)),
    _bind("record", "procurement-governance-artifact", with_primary("institutional_leadership", 0.4)),
    _bind(
        "record",
        "accessibility-compliance-evidence",
        with_primary("public_service_statesmanship", 0.4),
    ),
    _bind("record", "security-disclosure-process", with_primary("public_service_statesmanship", 0.4)),
    _bind("record", "content-os-pgf-adoption", with_primary("systems_construction", 0.4)),
    _bind("record", "intelligence-layer-graph-record", with_primary("systems_construction", 0.4)),
    _bind("record", "case-study-evidence-bundle", balanced_weights()),
    # Case studies
    _bind("caseStudy", "program-recovery-plan", with_primary("operational_transformation", 0.4)),
    _bind("caseStudy", "governance-operating-system", with_primary("systems_construction", 0.4)),
    _bind(
        "caseStudy",
        "evidence-verification-policy",
        with_primary("public_service_statesmanship", 0.4),
    ),
    # Books
    _bind("book", "briefing-and-governance", with_primary("institutional_leadership", 0.4)),
    _bind("book", "policy-and-evidence", with_primary("strategic_cognition", 0.4)),
    # Executive brief (single page-level node)
    _bind("briefNode", "brief", balanced_weights()),
    # Frameworks (doctrine)
    _bind("framework", "strategic-cognition-lens", with_primary("strategic_cognition", 0.4)),
    _bind("framework", "governance-stack-doctrine", with_primary("institutional_leadership", 0.4)),
    _bind(
        "framework",
        "operational-transformation-model",
        with_primary("operational_transformation", 0.4),
    ),
)
