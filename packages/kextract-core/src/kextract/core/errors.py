"""Exception hierarchy for knowledge extraction."""

from __future__ import annotations

from typing import TYPE_CHECKING, List

if TYPE_CHECKING:
    from kextract.core.types.knowledge import SchemaIssue


class KExtractError(Exception):
    """Base class for every error raised by kextract."""


class SchemaError(KExtractError):
    """Requested knowledge failed validation; the session did not start."""

    def __init__(self, issues: List[SchemaIssue]):
        self.issues = list(issues)
        super().__init__(
            f"Errors in requested knowledge ({len(self.issues)}): "
            + "; ".join(issue.message for issue in self.issues)
        )


class DuplicateSessionError(KExtractError):
    """A start was requested while an extraction session is active."""


class ParseError(KExtractError):
    """The model's extraction answer could not be interpreted."""


class ModelInvocationError(KExtractError):
    """The extraction model could not be called or returned nothing usable."""
