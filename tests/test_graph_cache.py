from __future__ import annotations

import asyncio

from src.application.use_cases.graph_cache import (
    create_request_cache,
    get_entity_graph,
    get_semantic_index,
    load_snapshot,
)
from src.domain.registry import SignalRegistry
from src.domain.signals import Binding, SignalWeightVector


def test_concurrent_callers_share_one_build(content) -> None:
    async def run():
        cache = create_request_cache()
        return await asyncio.gather(
            get_entity_graph(content, cache),
            get_entity_graph(content, cache),
            get_entity_graph(content, cache),
        )

    graphs = asyncio.run(run())
    assert content.reads == 1
    assert graphs[0] is graphs[1] is graphs[2]


def test_no_cache_builds_every_time(content) -> None:
    async def run():
        a = await get_entity_graph(content)
        b = await get_entity_graph(content)
        return a, b

    a, b = asyncio.run(run())
    assert content.reads == 2
    assert a is not b
    assert a == b


def test_signals_and_context_are_separate_cache_entries(content, bindings) -> None:
    reg = SignalRegistry(bindings)

    async def run():
        cache = create_request_cache()
        plain = await get_entity_graph(content, cache)
        signed = await get_entity_graph(content, cache, get_signal_vector=reg.lookup)
        board = await get_entity_graph(
            content, cache, get_signal_vector=reg.lookup, active_context="board"
        )
        again = await get_entity_graph(content, cache, get_signal_vector=reg.lookup)
        return cache, plain, signed, board, again

    cache, plain, signed, board, again = asyncio.run(run())
    assert len(cache) == 3
    assert plain.nodes[0].signal_vector is None
    assert signed.nodes[0].signal_vector is not None
    assert again is signed
    assert board is not signed


def test_semantic_index_is_memoized_per_locale(content) -> None:
    async def run():
        cache = create_request_cache()
        en = await get_semantic_index(content, cache, locale="en")
        en_again = await get_semantic_index(content, cache, locale="en")
        de = await get_semantic_index(content, cache, locale="de")
        return en, en_again, de

    en, en_again, de = asyncio.run(run())
    assert en is en_again
    assert de[0].url.startswith("/de/")


def test_load_snapshot_reads_every_collection(content) -> None:
    snap = load_snapshot(content)
    assert [f.id for f in snap.frameworks] == ["f1", "f2"]
    assert len(snap.claims) == 2
    assert len(snap.books) == 1


def test_distinct_registries_get_distinct_builds(content, bindings) -> None:
    first = SignalRegistry(bindings)
    second = SignalRegistry(bindings)
    second.register(
        Binding("claim", "c1", SignalWeightVector(primary={"public_service_statesmanship": 1.0}))
    )

    async def run():
        cache = create_request_cache()
        a = await get_entity_graph(content, cache, get_signal_vector=first.lookup)
        b = await get_entity_graph(content, cache, get_signal_vector=second.lookup)
        a_again = await get_entity_graph(content, cache, get_signal_vector=first.lookup)
        return a, b, a_again

    a, b, a_again = asyncio.run(run())
    assert a is a_again
    assert b is not a
    assert b.node("claim", "c1").signal_vector.primary == {"public_service_statesmanship": 1.0}
    assert content.reads == 2
