from __future__ import annotations

import asyncio
import logging
from collections.abc import Sequence
from dataclasses import dataclass, field

from src.application.ports.content_port import ContentPort
from src.application.use_cases.graph_cache import (
    RequestCache,
    create_request_cache,
    get_entity_graph,
    get_semantic_index,
)
from src.core.settings import RetrievalSettings
from src.domain.differentiation import differentiate_bindings
from src.domain.entropy import entropy_contributions
from src.domain.formatting import FormattedResult, LabelResolver, format_result
from src.domain.intents import QueryIntent
from src.domain.orchestration import priority_weights_for
from src.domain.registry import SignalRegistry
from src.domain.retrieval import RetrievalResult, query
from src.domain.signals import Binding

log = logging.getLogger(__name__)


@dataclass
class AuthorityQueryUseCase:
    """One intent-driven request: registry -> graph/index -> retrieval -> formatting.

    The canonical bindings are differentiated once, at construction. Each request gets
    its own ``SignalRegistry``; graph and index builds are shared through the optional
    request cache.
    """

    content: ContentPort
    bindings: Sequence[Binding]
    settings: RetrievalSettings = field(default_factory=RetrievalSettings)
    label_resolver: LabelResolver | None = None

    def __post_init__(self) -> None:
        self._differentiated = differentiate_bindings(self.bindings)
        self._contributions = entropy_contributions(self._differentiated)

    @property
    def differentiated_bindings(self) -> list[Binding]:
        return list(self._differentiated)

    def new_registry(self) -> SignalRegistry:
        return SignalRegistry(self._differentiated)

    async def aretrieve(
        self,
        intent: QueryIntent | str,
        *,
        evaluator_context: str | None = None,
        query_text: str = "",
        max_per_type: int | None = None,
        cache: RequestCache | None = None,
        registry: SignalRegistry | None = None,
    ) -> RetrievalResult:
        """Run one retrieval. A cache shared between calls only reuses builds made through
        the same ``registry``; each call without one gets a fresh registry.
        """
        reg = registry if registry is not None else self.new_registry()
        graph = await get_entity_graph(
            self.content,
            cache,
            get_signal_vector=reg.lookup,
            get_signal_variance=self._contributions.get,
            active_context=evaluator_context,
        )
        index = await get_semantic_index(
            self.content,
            cache,
            locale=self.settings.locale,
            get_signal_vector=reg.lookup,
            get_signal_variance=self._contributions.get,
        )
        return query(
            graph,
            index,
            intent,
            evaluator_context=evaluator_context,
            max_per_type=(self.settings.max_per_type if max_per_type is None else max_per_type),
            query_text=query_text,
        )

    async def aexecute(
        self,
        intent: QueryIntent | str,
        *,
        evaluator_context: str | None = None,
        query_text: str = "",
        max_per_type: int | None = None,
        base_path: str | None = None,
        label_resolver: LabelResolver | None = None,
        cache: RequestCache | None = None,
        registry: SignalRegistry | None = None,
    ) -> FormattedResult:
        result = await self.aretrieve(
            intent,
            evaluator_context=evaluator_context,
            query_text=query_text,
            max_per_type=max_per_type,
            cache=cache,
            registry=registry,
        )
        weights = (
            priority_weights_for(evaluator_context) if self.settings.use_priority_weights else None
        )
        formatted = format_result(
            result,
            label_resolver=label_resolver or self.label_resolver,
            base_path=self.settings.base_path if base_path is None else base_path,
            priority_weights=weights,
        )
        log.info(
            "aec.intent=%s aec.context=%s aec.links=%d",
            getattr(intent, "value", intent),
            evaluator_context or "-",
            len(formatted.entity_links),
        )
        return formatted

    def execute(
        self,
        intent: QueryIntent | str,
        *,
        evaluator_context: str | None = None,
        query_text: str = "",
        max_per_type: int | None = None,
        base_path: str | None = None,
        label_resolver: LabelResolver | None = None,
    ) -> FormattedResult:
        """Synchronous entry for CLI flows; runs one request with its own cache."""

        async def _run() -> FormattedResult:
            return await self.aexecute(
                intent,
                evaluator_context=evaluator_context,
                query_text=query_text,
                max_per_type=max_per_type,
                base_path=base_path,
                label_resolver=label_resolver,
                cache=create_request_cache(),
            )

        return asyncio.run(_run())

    def retrieve(
        self,
        intent: QueryIntent | str,
        *,
        evaluator_context: str | None = None,
        query_text: str = "",
        max_per_type: int | None = None,
    ) -> RetrievalResult:
        return asyncio.run(
            self.aretrieve(
                intent,
                evaluator_context=evaluator_context,
                query_text=query_text,
                max_per_type=max_per_type,
            )
        )
