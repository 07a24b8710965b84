from __future__ import annotations

import json
from pathlib import Path

import pytest

from src.core.exceptions import ContentLoadError
from src.infra.content import JsonContentLoader, load_bindings


def _write(path: Path, payload: object) -> None:
    path.write_text(json.dumps(payload), encoding="utf-8")


@pytest.fixture()
def content_dir(tmp_path: Path) -> Path:
    _write(
        tmp_path / "claims.json",
        [{"id": "c1", "labelKey": "claims.c1.label", "recordIds": ["r1"], "category": "gov"}],
    )
    _write(
        tmp_path / "records.json",
        [
            {"slug": "r1", "title": "Record one", "artifactType": "plan"},
            {"slug": "r2-slug", "id": "r2", "title": "Record two"},
        ],
    )
    _write(
        tmp_path / "case_studies.json",
        [{"slug": "cs1", "title": "Case", "proofRefs": ["r1"], "claimRefs": ["c1"]}],
    )
    _write(tmp_path / "books.json", [{"slug": "b1", "title": "Book", "publicationDate": "2024-01-01"}])
    return tmp_path


def test_loads_entries_and_falls_back_to_slug(content_dir: Path) -> None:
    loader = JsonContentLoader(content_dir)
    claims = loader.get_all_claims()
    assert claims[0].id == "c1"
    assert claims[0].record_ids == ("r1",)
    assert [r.id for r in loader.get_public_record_entries()] == ["r1", "r2"]
    assert loader.get_case_study_entries()[0].claim_refs == ("c1",)
    assert loader.get_book_entries()[0].publication_date == "2024-01-01"
    # frameworks.json and bindings.json are optional
    assert loader.get_framework_entries() == ()
    assert loader.load_bindings() is None


def test_frameworks_file(content_dir: Path) -> None:
    _write(
        content_dir / "frameworks.json",
        [{"id": "f1", "titleKey": "fw.title", "relatedClaims": ["c1"]}],
    )
    fw = JsonContentLoader(content_dir).get_framework_entries()[0]
    assert fw.related_claims == ("c1",)
    assert fw.related_case_studies == ()


def test_missing_directory_and_required_file(tmp_path: Path) -> None:
    with pytest.raises(ContentLoadError):
        JsonContentLoader(tmp_path / "nope")
    with pytest.raises(ContentLoadError, match="claims.json"):
        JsonContentLoader(tmp_path).get_all_claims()


def test_invalid_json_and_schema(content_dir: Path) -> None:
    (content_dir / "books.json").write_text("{not json", encoding="utf-8")
    with pytest.raises(ContentLoadError, match="invalid JSON"):
        JsonContentLoader(content_dir).get_book_entries()
    _write(content_dir / "claims.json", [{"id": "c1"}])
    with pytest.raises(ContentLoadError, match="claims.json"):
        JsonContentLoader(content_dir).get_all_claims()


def test_bindings_file(content_dir: Path) -> None:
    _write(
        content_dir / "bindings.json",
        [
            {
                "entityKind": "claim",
                "entityId": "c1",
                "signalVector": {
                    "weights": {"strategic_cognition": 0.6},
                    "negative": {"systems_construction": 0.1},
                    "contextOverride": {"board": {"strategic_cognition": 0.9}},
                },
            },
            {"entityKind": "briefNode", "entityId": "brief", "signalVector": {"primary": {}}},
        ],
    )
    bindings = JsonContentLoader(content_dir).load_bindings()
    assert bindings is not None
    assert bindings[0].key == "claim:c1"
    assert bindings[0].vector.primary == {"strategic_cognition": 0.6}
    assert bindings[0].vector.context_override == {"board": {"strategic_cognition": 0.9}}
    assert bindings[1].vector.primary == {}


@pytest.mark.parametrize(
    "vector",
    [
        {"primary": {"strategic_cognition": 1.5}},
        {"primary": {"charisma": 0.5}},
        {"contextOverride": {"board": {"strategic_cognition": -0.1}}},
    ],
)
def test_bindings_reject_bad_weights(tmp_path: Path, vector: dict) -> None:
    path = tmp_path / "bindings.json"
    _write(path, [{"entityKind": "claim", "entityId": "c1", "signalVector": vector}])
    with pytest.raises(ContentLoadError):
        load_bindings(path)


def test_bindings_reject_unknown_kind(tmp_path: Path) -> None:
    path = tmp_path / "bindings.json"
    _write(path, [{"entityKind": "podcast", "entityId": "p", "signalVector": {}}])
    with pytest.raises(ContentLoadError):
        load_bindings(path)
