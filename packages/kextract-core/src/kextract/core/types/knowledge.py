from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Mapping, Optional

from pydantic import BaseModel


class FieldType(str, Enum):
    """Declared type of a requested-knowledge field."""

    STRING = "string"
    NUMBER = "number"
    BOOLEAN = "boolean"
    OBJECT = "object"
    ARRAY = "array"


SUPPORTED_TYPES: List[str] = [t.value for t in FieldType]

_PYTHON_TYPES = {
    FieldType.STRING: (str,),
    FieldType.NUMBER: (int, float),
    FieldType.BOOLEAN: (bool,),
    FieldType.OBJECT: (dict,),
    FieldType.ARRAY: (list,),
}


def matches_type(value: Any, field_type: FieldType | str) -> bool:
    """Return True if *value* is an instance of the JSON type *field_type*."""
    field_type = FieldType(field_type)
    # bool is an int subclass; it only counts as a boolean.
    if isinstance(value, bool) and field_type is not FieldType.BOOLEAN:
        return False
    return isinstance(value, _PYTHON_TYPES[field_type])


class _NoValue:
    """Marker for a model answer that explicitly carries no value."""

    _instance: Optional["_NoValue"] = None

    def __new__(cls) -> "_NoValue":
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __bool__(self) -> bool:
        return False

    def __repr__(self) -> str:
        return "NO_VALUE"


NO_VALUE = _NoValue()


class FieldSpec(BaseModel):
    """One unit of requested knowledge."""

    name: str
    type: FieldType
    description: str
    question: str
    """Shown to the user while the field is outstanding."""

    enum: Optional[List[Any]] = None
    """Allowed values, passed to the model as context."""

    value: Optional[Any] = None
    """Resolved value; ``None`` while the field is outstanding."""

    @property
    def is_resolved(self) -> bool:
        return self.value is not None


ExtractionRecord = Dict[str, FieldSpec]


def build_record(schema: Mapping[str, Mapping[str, Any]]) -> ExtractionRecord:
    """Build an ExtractionRecord from an already validated schema mapping.

    Entries are copied so the record never aliases the caller's dicts. A
    pre-filled ``value`` survives only if it matches the declared type, which
    lets a host resume a partially answered record.
    """
    record: ExtractionRecord = {}
    for name, entry in schema.items():
        spec = FieldSpec(
            name=name,
            type=entry["type"],
            description=entry["description"],
            question=entry["question"],
            enum=list(entry["enum"]) if entry.get("enum") is not None else None,
        )
        value = entry.get("value")
        if value is not None and matches_type(value, spec.type):
            spec.value = value
        record[name] = spec
    return record


class Mode(str, Enum):
    """How outstanding questions reach the user; fixed per session."""

    PER_TURN = "per-turn"
    BATCH = "batch"

    @classmethod
    def from_force(cls, force: bool) -> "Mode":
        """``force=True`` makes the user answer one question per turn."""
        return cls.PER_TURN if force else cls.BATCH


class SchemaIssue(BaseModel):
    """A single defect found while validating requested knowledge."""

    code: str
    message: str
    key: Optional[str] = None
    value: Any = None


class SchemaValidation(BaseModel):
    """Outcome of validating a requested-knowledge schema."""

    issues: List[SchemaIssue] = []
    record: Optional[ExtractionRecord] = None

    @property
    def ok(self) -> bool:
        return not self.issues


class TurnOutcome(BaseModel):
    """What one processed host turn produced."""

    merged: List[str] = []
    """Fields resolved during this turn."""

    outstanding: List[str] = []
    complete: bool = False
    question: Optional[str] = None
    """Question dispatched to the user (per-turn mode only)."""

    handled: bool = False
    """True when the host's default response flow must be suppressed."""

    parse_error: Optional[str] = None
