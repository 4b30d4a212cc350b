"""Core test fixtures."""

from __future__ import annotations

import pytest

from kextract.core.state import ExtractionState
from kextract.core.types.knowledge import build_record


@pytest.fixture()
def contact_state(contact_schema):
    """ExtractionState over the three-field contact schema."""
    return ExtractionState(build_record(contact_schema))
