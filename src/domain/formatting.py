from __future__ import annotations

from collections.abc import Callable, Mapping
from dataclasses import dataclass, field

from src.domain.graph import GraphNode
from src.domain.retrieval import RetrievalResult

LabelResolver = Callable[[GraphNode], str]

DEFAULT_GROUP_WEIGHT = 0.5
EMPTY_SUMMARY = "No matching entities in the authority corpus."

# (bucket, bullet template) in fixed presentation order
_BUCKETS: tuple[tuple[str, str], ...] = (
    ("frameworks", "Frameworks: {n} in scope."),
    ("claims", "Claims: {n} indexed."),
    ("records", "Public record: {n} artifact(s)."),
    ("case_studies", "Case studies: {n} referenced."),
    ("books", "Books: {n} referenced."),
)

_CAMEL = {"case_studies": "caseStudies"}


@dataclass(frozen=True)
class EntityLink:
    id: str
    kind: str
    label: str
    href: str


@dataclass
class FormattedResult:
    summary: str
    bullets: list[str] = field(default_factory=list)
    entity_links: list[EntityLink] = field(default_factory=list)


def default_label(node: GraphNode) -> str:
    if node.kind == "claim":
        return getattr(node, "label_key", "") or node.id
    if node.kind == "framework":
        return getattr(node, "title_key", "") or node.id
    title = getattr(node, "title", None)
    return title if isinstance(title, str) and title else node.id


def build_href(node: GraphNode, base_path: str) -> str:
    base = (base_path or "").rstrip("/")
    slug = getattr(node, "slug", None)
    if node.kind == "record" and slug:
        return f"{base}/publicrecord/{slug}"
    if node.kind == "caseStudy" and slug:
        return f"{base}/casestudies/{slug}"
    if node.kind == "book" and slug:
        return f"{base}/books/{slug}"
    if node.kind == "framework":
        return f"{base}/brief#doctrine"
    if node.kind == "claim":
        return f"{base}/brief#claim-{node.id}"
    return f"{base}/brief"


def format_result(
    result: RetrievalResult,
    *,
    label_resolver: LabelResolver | None = None,
    base_path: str = "",
    priority_weights: Mapping[str, float] | None = None,
) -> FormattedResult:
    """Render a retrieval result as count bullets plus ordered entity links.

    With ``priority_weights`` the link groups are emitted by descending weight (ties keep
    presentation order); without them, in the fixed bucket order.
    """
    resolve = label_resolver or default_label
    bullets: list[str] = []
    links: list[EntityLink] = []
    groups: list[tuple[float, Callable[[], None]]] = []

    def appender(bucket: str) -> Callable[[], None]:
        def run() -> None:
            for item in getattr(result, bucket):
                links.append(
                    EntityLink(
                        id=item.node.id,
                        kind=item.node.kind,
                        label=resolve(item.node),
                        href=build_href(item.node, base_path),
                    )
                )

        return run

    for bucket, template in _BUCKETS:
        items = getattr(result, bucket)
        if not items:
            continue
        bullets.append(template.format(n=len(items)))
        weight = DEFAULT_GROUP_WEIGHT
        if priority_weights is not None:
            # accept the camelCase bucket name used by presentation code
            raw = priority_weights.get(bucket, priority_weights.get(_CAMEL.get(bucket, bucket)))
            try:
                weight = float(raw) if raw is not None else DEFAULT_GROUP_WEIGHT
            except (TypeError, ValueError):
                weight = DEFAULT_GROUP_WEIGHT
        groups.append((weight, appender(bucket)))

    if priority_weights is not None:
        groups.sort(key=lambda g: -g[0])
    for _weight, run in groups:
        run()

    total = result.total
    summary = (
        EMPTY_SUMMARY
        if total == 0
        else f"Retrieval returned {total} entity reference(s). Evidence-linked."
    )
    return FormattedResult(summary=summary, bullets=bullets, entity_links=links)
