"""Prompt templates for extraction and batch questioning."""

from __future__ import annotations

import json
from typing import TYPE_CHECKING, Dict, Iterable, Sequence

if TYPE_CHECKING:
    from kextract.core.types.knowledge import FieldSpec

EXTRACT_PROMPT = "kextract:extract"
ADD_QUESTION_PROMPT = "kextract:add_question"


class UnknownPromptError(KeyError):
    """No template is registered under the requested name."""


EXTRACT_TEMPLATE = """\
You extract structured facts from a single user message.

## Fields
{fields}

## Rules
- Only use information the user actually stated in the message below.
- Use the declared JSON type of each field (string, number, boolean, object, array).
- When a field lists allowed values, answer with one of them exactly.
- If the message does not answer a field, set it to null.
- Respond with a JSON object mapping field names to values, nothing else.

## Message
{message}
"""

ADD_QUESTION_TEMPLATE = """\
Before continuing the conversation you still need some information from the \
user. Work these questions naturally into your next reply, all of them in \
the same turn, without inventing answers:

{questions}
"""

PROMPTS: Dict[str, str] = {
    EXTRACT_PROMPT: EXTRACT_TEMPLATE,
    ADD_QUESTION_PROMPT: ADD_QUESTION_TEMPLATE,
}


def format_fields(fields: Iterable[FieldSpec]) -> str:
    """Render field specs as a bullet list for model context."""
    lines = []
    for spec in fields:
        line = f"- `{spec.name}` ({spec.type.value}): {spec.description}"
        if spec.enum:
            line += f" Allowed values: {json.dumps(spec.enum)}."
        lines.append(line)
    return "\n".join(lines) if lines else "(none)"


def format_questions(questions: Sequence[str]) -> str:
    return "\n".join(f"{i}. {q}" for i, q in enumerate(questions, 1))


def render_prompt(name: str, prompts: Dict[str, str] = PROMPTS, **context: str) -> str:
    """Look up template *name* and fill it with *context*."""
    try:
        template = prompts[name]
    except KeyError:
        raise UnknownPromptError(name) from None
    return template.format(**context)
