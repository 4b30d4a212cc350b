"""ExtractionState: the schema-plus-values record of one session."""

from __future__ import annotations

import logging
from typing import Any, Dict, List

from kextract.core.types.knowledge import (
    NO_VALUE,
    ExtractionRecord,
    FieldSpec,
    matches_type,
)

logger = logging.getLogger(__name__)


class ExtractionState:
    """Owns an ExtractionRecord and answers questions about it.

    Only ``assign`` sets values, and it never overwrites a resolved field,
    so replaying the same model answer leaves the record unchanged.
    """

    def __init__(self, record: ExtractionRecord):
        self._record = record
        self.rounds = 0

    @property
    def record(self) -> ExtractionRecord:
        return self._record

    def __len__(self) -> int:
        return len(self._record)

    def __contains__(self, name: object) -> bool:
        return name in self._record

    def outstanding_fields(self) -> List[FieldSpec]:
        return [spec for spec in self._record.values() if not spec.is_resolved]

    def questions(self) -> List[str]:
        return [spec.question for spec in self.outstanding_fields()]

    def is_complete(self) -> bool:
        return not self.outstanding_fields()

    def assign(self, name: str, value: Any) -> bool:
        """Set *value* on field *name* if it exists, is open and the type fits."""
        spec = self._record.get(name)
        if spec is None:
            logger.debug("Skipping unknown field %r", name)
            return False
        if spec.is_resolved:
            logger.debug("Field %r already resolved, keeping %r", name, spec.value)
            return False
        if not matches_type(value, spec.type):
            logger.debug(
                "Skipping %r for field %r: expected %s", value, name, spec.type.value
            )
            return False
        spec.value = value
        return True

    @staticmethod
    def nullify(value: Any) -> Any:
        """Map JSON ``null`` and the string ``"null"`` to ``NO_VALUE``."""
        if value is None or value == "null":
            return NO_VALUE
        return value

    def values(self) -> Dict[str, Any]:
        """Resolved fields as a name → value mapping."""
        return {
            name: spec.value
            for name, spec in self._record.items()
            if spec.is_resolved
        }

    def snapshot(self) -> Dict[str, Dict[str, Any]]:
        """Full record dump, outstanding fields included."""
        return {
            name: spec.model_dump(mode="json")
            for name, spec in self._record.items()
        }

    def reset(self) -> None:
        """Forget every resolved value and the round count."""
        for spec in self._record.values():
            spec.value = None
        self.rounds = 0
