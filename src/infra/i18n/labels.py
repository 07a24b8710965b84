from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from pathlib import Path
from typing import Any

from src.core.exceptions import ContentLoadError
from src.domain.formatting import LabelResolver, default_label
from src.domain.graph import GraphNode

log = logging.getLogger(__name__)


def load_messages(messages_dir: str | Path, locale: str) -> dict[str, Any]:
    """Message catalog ``<messages_dir>/<locale>.json``; empty when the file is absent."""
    path = Path(messages_dir) / f"{locale}.json"
    if not path.exists():
        log.warning("labels.catalog_missing=%s", path)
        return {}
    try:
        with path.open("r", encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, json.JSONDecodeError) as exc:
        raise ContentLoadError(f"{path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ContentLoadError(f"{path}: message catalog must be a JSON object")
    return data


def lookup_message(messages: Mapping[str, Any], key: str) -> str | None:
    """Flat key first, then a dotted path through nested objects."""
    if not key:
        return None
    flat = messages.get(key)
    if isinstance(flat, str):
        return flat
    cur: Any = messages
    for part in key.split("."):
        if not isinstance(cur, Mapping) or part not in cur:
            return None
        cur = cur[part]
    return cur if isinstance(cur, str) else None


def make_label_resolver(messages: Mapping[str, Any]) -> LabelResolver:
    def resolve(node: GraphNode) -> str:
        key = getattr(node, "label_key", None) or getattr(node, "title_key", None)
        if key:
            text = lookup_message(messages, key)
            if text:
                return text
        return default_label(node)

    return resolve
