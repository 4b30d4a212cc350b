"""ResponseMerger: folds a model's extraction answer into the record."""

from __future__ import annotations

import logging
from typing import Any, List, Tuple

from kextract.core.errors import ParseError
from kextract.core.state import ExtractionState
from kextract.core.types.knowledge import NO_VALUE
from kextract.llm.structured import parse_json_payload

logger = logging.getLogger(__name__)


class ResponseMerger:
    """Parses raw model output and assigns type-checked values.

    Accepted payloads:

    - an object: ``{"email": "a@b.com", "age": 31}``
    - an array of objects: ``[{"email": "a@b.com"}, {"age": 31}]``
    - an array of pairs: ``[["email", "a@b.com"]]``

    The payload is fully interpreted before anything is assigned, so a
    structural failure never leaves a half-merged record. Unknown keys,
    null answers and type mismatches are dropped without error.
    """

    def merge(self, state: ExtractionState, raw_output: str) -> List[str]:
        """Merge *raw_output* into *state*; return the names that were set."""
        pairs = self.parse(raw_output)

        merged: List[str] = []
        for name, value in pairs:
            value = state.nullify(value)
            if value is NO_VALUE:
                continue
            if state.assign(name, value):
                merged.append(name)

        if len(merged) < len(pairs):
            logger.debug("Merged %d of %d extracted pairs", len(merged), len(pairs))
        return merged

    def parse(self, raw_output: str) -> List[Tuple[str, Any]]:
        """Turn raw model output into ordered (name, value) pairs."""
        try:
            payload = parse_json_payload(raw_output)
        except ValueError as exc:
            raise ParseError(str(exc)) from exc

        if isinstance(payload, dict):
            return list(payload.items())

        if isinstance(payload, list):
            pairs: List[Tuple[str, Any]] = []
            for index, item in enumerate(payload):
                if isinstance(item, dict):
                    pairs.extend(item.items())
                elif (
                    isinstance(item, list)
                    and len(item) == 2
                    and isinstance(item[0], str)
                ):
                    pairs.append((item[0], item[1]))
                elif item is None:
                    continue
                else:
                    raise ParseError(
                        f"Item {index} of the extraction answer is not a key/value entry: {item!r}"
                    )
            return pairs

        raise ParseError(
            f"Extraction answer must be a JSON object or array, got {type(payload).__name__}"
        )
