"""Composition root: assemble and expose the authority query use-case.

Provides cached getters to avoid re-reading content and bindings repeatedly in
long-lived processes. Keeps environment/settings handling inside the config layer.
"""

from __future__ import annotations

from functools import lru_cache

from src.application.use_cases import AuthorityQueryUseCase
from src.config.bindings import ENTITY_BINDINGS
from src.core.exceptions import ConfigurationError
from src.core.settings import AppSettings
from src.domain.formatting import LabelResolver
from src.domain.signals import Binding
from src.infra.content import JsonContentLoader
from src.infra.i18n import load_messages, make_label_resolver


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    return AppSettings()


@lru_cache(maxsize=1)
def get_content() -> JsonContentLoader:
    content_dir = get_settings().content.content_dir
    if not content_dir.is_dir():
        raise ConfigurationError(f"content_dir not found: {content_dir}")
    return JsonContentLoader(content_dir)


@lru_cache(maxsize=1)
def get_bindings() -> tuple[Binding, ...]:
    # bindings.json in the content directory replaces the built-in list
    shipped = get_content().load_bindings()
    return tuple(shipped) if shipped is not None else ENTITY_BINDINGS


@lru_cache(maxsize=1)
def get_label_resolver() -> LabelResolver:
    app = get_settings()
    return make_label_resolver(load_messages(app.content.messages_dir, app.retrieval.locale))


def build_query_use_case(app: AppSettings | None = None) -> AuthorityQueryUseCase:
    app = app or get_settings()
    return AuthorityQueryUseCase(
        content=get_content(),
        bindings=get_bindings(),
        settings=app.retrieval,
        label_resolver=get_label_resolver(),
    )


@lru_cache(maxsize=1)
def get_query_use_case() -> AuthorityQueryUseCase:
    return build_query_use_case()


def reset_caches() -> None:
    """Drop cached adapters (tests, or after changing env/content at runtime)."""
    for fn in (get_settings, get_content, get_bindings, get_label_resolver, get_query_use_case):
        fn.cache_clear()


__all__ = [
    "get_settings",
    "get_content",
    "get_bindings",
    "get_label_resolver",
    "get_query_use_case",
    "build_query_use_case",
    "reset_caches",
]
