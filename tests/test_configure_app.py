from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.config.bindings import ENTITY_BINDINGS
from src.config.configure_app import get_bindings, get_content, get_query_use_case, reset_caches
from src.core.exceptions import ConfigurationError


def test_canonical_bindings_are_unique_and_include_brief() -> None:
    keys = [b.key for b in ENTITY_BINDINGS]
    assert len(keys) == len(set(keys))
    assert "briefNode:brief" in keys
    for b in ENTITY_BINDINGS:
        assert sum(b.vector.primary.values()) == pytest.approx(1.0)


def test_bindings_file_replaces_builtin_list(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    for name in ("claims.json", "records.json", "case_studies.json", "books.json"):
        (tmp_path / name).write_text("[]", encoding="utf-8")
    (tmp_path / "bindings.json").write_text(
        json.dumps(
            [{"entityKind": "briefNode", "entityId": "brief", "signalVector": {"primary": {}}}]
        ),
        encoding="utf-8",
    )
    monkeypatch.setenv("AUTHORITY_CONTENT_DIR", str(tmp_path))
    reset_caches()
    try:
        assert [b.key for b in get_bindings()] == ["briefNode:brief"]
        uc = get_query_use_case()
        assert uc is get_query_use_case()
        assert uc.execute("compare_claims").entity_links == []
    finally:
        reset_caches()


def test_missing_content_dir_is_a_configuration_error(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> None:
    monkeypatch.setenv("AUTHORITY_CONTENT_DIR", str(tmp_path / "nope"))
    reset_caches()
    try:
        with pytest.raises(ConfigurationError, match="content_dir not found"):
            get_content()
    finally:
        reset_caches()
