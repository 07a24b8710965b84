from __future__ import annotations

from collections.abc import Iterable


class ConfigurationError(Exception):
    """Raised for invalid or missing configuration."""


class ContentLoadError(Exception):
    """Raised when a content or bindings file cannot be read or validated."""


class AuthorityValidationError(Exception):
    """Aggregated build-time validation failure.

    Carries every collected message so content authors can fix all of them in one pass.
    """

    def __init__(self, errors: Iterable[str]) -> None:
        self.errors = list(errors)
        lines = "\n".join(f"  {e}" for e in self.errors)
        super().__init__(f"Authority validation failed ({len(self.errors)} error(s)):\n{lines}")
