from __future__ import annotations

import json
import logging
from collections.abc import Sequence
from functools import cached_property
from pathlib import Path
from typing import Any, TypeVar

from pydantic import BaseModel, TypeAdapter, ValidationError

from src.core.exceptions import ContentLoadError
from src.domain.content import (
    BookEntry,
    CaseStudyEntry,
    ClaimEntry,
    FrameworkEntry,
    PublicRecordEntry,
)
from src.domain.signals import Binding

from .schemas import (
    BindingModel,
    BookModel,
    CaseStudyModel,
    ClaimModel,
    FrameworkModel,
    RecordModel,
)

log = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)

CLAIMS_FILE = "claims.json"
RECORDS_FILE = "records.json"
CASE_STUDIES_FILE = "case_studies.json"
BOOKS_FILE = "books.json"
FRAMEWORKS_FILE = "frameworks.json"
BINDINGS_FILE = "bindings.json"


def _read_json(path: Path) -> Any:
    try:
        with path.open("r", encoding="utf-8") as f:
            return json.load(f)
    except OSError as exc:
        raise ContentLoadError(f"{path}: {exc}") from exc
    except json.JSONDecodeError as exc:
        raise ContentLoadError(f"{path}: invalid JSON ({exc})") from exc


def load_models(path: Path, model: type[M], *, required: bool = True) -> list[M]:
    """Read a JSON array from ``path`` and validate each item as ``model``.

    A missing optional file yields an empty list.
    """
    if not path.exists():
        if required:
            raise ContentLoadError(f"{path}: file not found")
        log.debug("content.optional_missing=%s", path)
        return []
    raw = _read_json(path)
    try:
        items = TypeAdapter(list[model]).validate_python(raw)  # type: ignore[valid-type]
    except ValidationError as exc:
        raise ContentLoadError(f"{path}: {exc}") from exc
    log.debug("content.loaded file=%s items=%d", path.name, len(items))
    return items


def load_bindings(path: str | Path) -> list[Binding]:
    """Bindings file: a JSON array of ``{entityKind, entityId, signalVector}`` objects."""
    return [m.to_binding() for m in load_models(Path(path), BindingModel)]


class JsonContentLoader:
    """Content port backed by one directory of JSON files.

    Files are read lazily, once per loader instance. ``frameworks.json`` and
    ``bindings.json`` are optional.
    """

    def __init__(self, root: str | Path) -> None:
        self.root = Path(root)
        if not self.root.is_dir():
            raise ContentLoadError(f"{self.root}: content directory not found")

    @cached_property
    def _claims(self) -> tuple[ClaimEntry, ...]:
        return tuple(m.to_entry() for m in load_models(self.root / CLAIMS_FILE, ClaimModel))

    @cached_property
    def _records(self) -> tuple[PublicRecordEntry, ...]:
        return tuple(m.to_entry() for m in load_models(self.root / RECORDS_FILE, RecordModel))

    @cached_property
    def _case_studies(self) -> tuple[CaseStudyEntry, ...]:
        models = load_models(self.root / CASE_STUDIES_FILE, CaseStudyModel)
        return tuple(m.to_entry() for m in models)

    @cached_property
    def _books(self) -> tuple[BookEntry, ...]:
        return tuple(m.to_entry() for m in load_models(self.root / BOOKS_FILE, BookModel))

    @cached_property
    def _frameworks(self) -> tuple[FrameworkEntry, ...]:
        models = load_models(self.root / FRAMEWORKS_FILE, FrameworkModel, required=False)
        return tuple(m.to_entry() for m in models)

    def get_all_claims(self) -> Sequence[ClaimEntry]:
        return self._claims

    def get_public_record_entries(self) -> Sequence[PublicRecordEntry]:
        return self._records

    def get_case_study_entries(self) -> Sequence[CaseStudyEntry]:
        return self._case_studies

    def get_book_entries(self) -> Sequence[BookEntry]:
        return self._books

    def get_framework_entries(self) -> Sequence[FrameworkEntry]:
        return self._frameworks

    def load_bindings(self) -> list[Binding] | None:
        """Bindings shipped with the content, or None when the directory has none."""
        path = self.root / BINDINGS_FILE
        if not path.exists():
            return None
        return load_bindings(path)
