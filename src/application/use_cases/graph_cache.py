"""Request-scoped memoization of graph and index builds.

The caller owns the cache object and passes it along for the lifetime of one request;
callers sharing a cache await the same in-flight build. Omitting the cache builds fresh
on every call. Keys carry the context and the identity of the resolvers (the registry
and contribution index that own them), so a cache shared across requests only hands a
build to callers resolving through the same objects. There is no invalidation.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any, TypeVar

from src.application.ports.content_port import ContentPort
from src.domain.content import (
    BookEntry,
    CaseStudyEntry,
    ClaimEntry,
    FrameworkEntry,
    PublicRecordEntry,
)
from src.domain.graph import EntityGraph, SemanticIndexEntry
from src.domain.graph_builder import (
    SignalVarianceResolver,
    SignalVectorResolver,
    build_entity_graph,
    build_semantic_index,
)

log = logging.getLogger(__name__)

T = TypeVar("T")


class RequestCache(dict[str, "asyncio.Future[Any]"]):
    """Cache key -> in-flight build.

    Also holds on to the resolver owners named in its keys, so their ids cannot be reused
    by other objects while the cache is alive.
    """

    def __init__(self) -> None:
        super().__init__()
        self._owners: list[object] = []

    def pin(self, *owners: object) -> None:
        self._owners.extend(o for o in owners if o is not None)


def create_request_cache() -> RequestCache:
    return RequestCache()


@dataclass(frozen=True)
class ContentSnapshot:
    claims: tuple[ClaimEntry, ...]
    records: tuple[PublicRecordEntry, ...]
    case_studies: tuple[CaseStudyEntry, ...]
    books: tuple[BookEntry, ...]
    frameworks: tuple[FrameworkEntry, ...] = ()


def load_snapshot(content: ContentPort) -> ContentSnapshot:
    return ContentSnapshot(
        claims=tuple(content.get_all_claims()),
        records=tuple(content.get_public_record_entries()),
        case_studies=tuple(content.get_case_study_entries()),
        books=tuple(content.get_book_entries()),
        frameworks=tuple(content.get_framework_entries()),
    )


def _owner(fn: Callable[..., Any] | None) -> object | None:
    # bound methods are recreated on every attribute access; key on their owner
    return getattr(fn, "__self__", fn) if fn is not None else None


def _cache_key(prefix: str, owners: tuple[object | None, ...], context: str | None) -> str:
    tokens = ":".join("-" if o is None else str(id(o)) for o in owners)
    return f"{prefix}:{tokens}:{context or ''}"


async def _memoize(
    cache: RequestCache | None,
    prefix: str,
    resolvers: tuple[Callable[..., Any] | None, ...],
    context: str | None,
    build: Callable[[], T],
) -> T:
    if cache is None:
        return build()
    owners = tuple(_owner(r) for r in resolvers)
    key = _cache_key(prefix, owners, context)
    fut = cache.get(key)
    if fut is None:

        async def _run() -> T:
            return build()

        fut = asyncio.ensure_future(_run())
        cache[key] = fut
        # plain dicts are accepted too; only RequestCache pins owners
        if isinstance(cache, RequestCache):
            cache.pin(*owners)
        log.debug("graph_cache.miss key=%s", key)
    else:
        log.debug("graph_cache.hit key=%s", key)
    return await fut


async def get_entity_graph(
    content: ContentPort,
    cache: RequestCache | None = None,
    *,
    get_signal_vector: SignalVectorResolver | None = None,
    get_signal_variance: SignalVarianceResolver | None = None,
    active_context: str | None = None,
) -> EntityGraph:
    def build() -> EntityGraph:
        snap = load_snapshot(content)
        return build_entity_graph(
            snap.claims,
            snap.records,
            snap.case_studies,
            snap.books,
            snap.frameworks,
            get_signal_vector=get_signal_vector,
            get_signal_variance=get_signal_variance,
            active_context=active_context,
        )

    return await _memoize(
        cache, "entity_graph", (get_signal_vector, get_signal_variance), active_context, build
    )


async def get_semantic_index(
    content: ContentPort,
    cache: RequestCache | None = None,
    *,
    locale: str = "en",
    get_signal_vector: SignalVectorResolver | None = None,
    get_signal_variance: SignalVarianceResolver | None = None,
) -> list[SemanticIndexEntry]:
    def build() -> list[SemanticIndexEntry]:
        snap = load_snapshot(content)
        return build_semantic_index(
            snap.claims,
            snap.records,
            snap.case_studies,
            snap.books,
            snap.frameworks,
            locale=locale,
            get_signal_vector=get_signal_vector,
            get_signal_variance=get_signal_variance,
        )

    return await _memoize(
        cache, f"semantic_index:{locale}", (get_signal_vector, get_signal_variance), None, build
    )
