"""SchemaValidator: checks requested knowledge before a session starts."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, List, Optional, Protocol

from kextract.core.types.knowledge import (
    SUPPORTED_TYPES,
    SchemaIssue,
    SchemaValidation,
    build_record,
)


class ActiveFlag(Protocol):
    @property
    def active(self) -> bool: ...


def _is_text(value: Any) -> bool:
    return isinstance(value, str) and value != ""


class SchemaValidator:
    """Validates a requested-knowledge mapping and the ``force`` flag.

    Every defect is reported; validation never stops at the first one.
    Issues are returned rather than raised so the caller decides whether to
    log, notify or abort.
    """

    def __init__(self, guard: Optional[ActiveFlag] = None):
        self._guard = guard

    def validate(self, requested_knowledge: Any, force: Any) -> SchemaValidation:
        if self._guard is not None and self._guard.active:
            return SchemaValidation(issues=[SchemaIssue(
                code="in_use",
                message="Knowledge extraction pipeline already in use",
            )])

        issues: List[SchemaIssue] = []

        if not isinstance(requested_knowledge, Mapping):
            issues.append(SchemaIssue(
                code="entry",
                message="Requested knowledge must be a mapping of name to field definition",
                value=requested_knowledge,
            ))
        else:
            for key, entry in requested_knowledge.items():
                issues.extend(self._check_entry(key, entry))

        if force is not True and force is not False:
            issues.append(SchemaIssue(
                code="force",
                message="'force' must be a boolean",
                value=force,
            ))

        if issues:
            return SchemaValidation(issues=issues)
        return SchemaValidation(record=build_record(requested_knowledge))

    def _check_entry(self, key: Any, entry: Any) -> List[SchemaIssue]:
        issues: List[SchemaIssue] = []
        name = key if isinstance(key, str) else None

        if not _is_text(key):
            issues.append(SchemaIssue(
                code="key",
                message="Key is the name and it must be a non-empty string",
                value=key,
            ))

        if not isinstance(entry, Mapping):
            issues.append(SchemaIssue(
                code="entry",
                message=(
                    "Value must be an object containing 'type', 'description' "
                    "and 'question' and optional 'enum'"
                ),
                key=name,
                value=entry,
            ))
            return issues

        field_type = entry.get("type")
        if not _is_text(field_type):
            issues.append(SchemaIssue(
                code="type",
                message="'type' must be a non-empty string",
                key=name,
                value=field_type,
            ))
        if field_type not in SUPPORTED_TYPES:
            issues.append(SchemaIssue(
                code="unsupported_type",
                message=f"Invalid 'type' requested, must be one of: {', '.join(SUPPORTED_TYPES)}",
                key=name,
                value=field_type,
            ))

        for attr in ("description", "question"):
            if not _is_text(entry.get(attr)):
                issues.append(SchemaIssue(
                    code=attr,
                    message=f"'{attr}' must be a non-empty string",
                    key=name,
                    value=entry.get(attr),
                ))

        if entry.get("enum") is not None and not isinstance(entry["enum"], list):
            issues.append(SchemaIssue(
                code="enum",
                message="'enum' must be a list of allowed values",
                key=name,
                value=entry["enum"],
            ))

        return issues
