"""``kextract`` command line: validate a schema or fill it interactively.

Usage:
  kextract validate examples/contact.json
  kextract run examples/contact.json
  kextract run examples/contact.json --batch --config kextract.toml -v
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import sys
from typing import Any, Dict, List, Optional

from rich.logging import RichHandler

from kextract.core.display import TranscriptDisplay
from kextract.core.errors import KExtractError
from kextract.core.extract.engine import LLMExtractor
from kextract.core.extractor import KnowledgeExtractor
from kextract.core.host import ABORTED, HANDLE_COMPLETE, LocalHost
from kextract.core.schema import SchemaValidator
from kextract.core.types.config import KExtractConfig, load_config

logger = logging.getLogger(__name__)

CONSOLE_HANDLE = "console"


class ConsoleHost(LocalHost):
    """LocalHost that talks to a person through the terminal."""

    def __init__(self, display: TranscriptDisplay):
        super().__init__()
        self.display = display
        self.result: Optional[Dict[str, Any]] = None
        self.aborted = False
        self.subscribe(HANDLE_COMPLETE, self._on_complete)
        self.subscribe(ABORTED, self._on_aborted)

    async def ask(self, question: str) -> None:
        await super().ask(question)
        self.display.assistant(question)

    def _on_complete(self, payload: Dict[str, Any]) -> None:
        self.result = payload.get("knowledge", {})
        self.display.show_result("Extracted", self.result)

    def _on_aborted(self, payload: Dict[str, Any]) -> None:
        self.aborted = True
        self.display.show_result("Partial", payload.get("knowledge", {}), style="red")


def _load_schema(path: str) -> Any:
    with open(path, encoding="utf-8") as f:
        data = json.load(f)
    # Accept either the bare mapping or a start-event shaped document.
    if isinstance(data, dict) and "requested_knowledge" in data:
        return data["requested_knowledge"]
    return data


def _build_extractor(config: KExtractConfig, host: ConsoleHost) -> KnowledgeExtractor:
    from kextract.llm import InstrumentedLLMClient, create_llm_client
    from kextract.llm.types import ModelConfig

    model_config = ModelConfig(
        provider=config.llm.provider,
        model_name=config.llm.model,
        api_key=config.llm.api_key,
        base_url=config.llm.base_url,
        temperature=config.llm.temperature,
        max_tokens=config.llm.max_tokens,
    )
    llm_client = InstrumentedLLMClient(
        create_llm_client(model_config), host.display.on_llm_event
    )
    return KnowledgeExtractor(
        host,
        LLMExtractor(llm_client),
        config=config.extraction,
        event_callback=host.display.on_extraction_event,
    )


async def _converse(extractor: KnowledgeExtractor, host: ConsoleHost, batch: bool) -> None:
    controller = extractor.controller
    if controller is None or controller.finished:
        return

    questions = controller.state.questions()
    if batch:
        host.display.assistant(" ".join(questions))
    else:
        await host.ask(questions[0])

    while extractor.active:
        text = await asyncio.to_thread(host.display.prompt_user)
        if not text.strip():
            continue
        if not batch:
            await host.user_message(text)
            continue

        host.conversations[CONSOLE_HANDLE].append(text)
        await host.set_prompts(CONSOLE_HANDLE)
        if extractor.active:
            # Stand-in for the host's generated reply: the folded-in questions.
            pending = host.context[CONSOLE_HANDLE].get("questions", [])
            host.display.assistant(" ".join(pending))


async def _run(args: argparse.Namespace) -> int:
    config = load_config(args.config)
    display = TranscriptDisplay(show_progress=args.verbose or config.verbose)
    host = ConsoleHost(display)
    extractor = _build_extractor(config, host)

    try:
        await extractor.start(_load_schema(args.schema), force=not args.batch)
    except KExtractError as exc:
        issues = getattr(exc, "issues", None)
        if issues:
            display.show_issues(issues)
        else:
            display.console.print(f"[bold red]{exc}[/bold red]")
        return 2

    try:
        await _converse(extractor, host, args.batch)
    except (EOFError, KeyboardInterrupt):
        extractor.stop()
        return 130

    return 0 if host.result is not None else 1


def _validate(args: argparse.Namespace) -> int:
    display = TranscriptDisplay()
    validation = SchemaValidator().validate(_load_schema(args.schema), True)
    if not validation.ok:
        display.show_issues(validation.issues)
        return 1
    names = ", ".join(validation.record or {})
    display.console.print(f"[green]ok[/green] {len(validation.record or {})} fields: {names}")
    return 0


def build_parser() -> argparse.ArgumentParser:
    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("-v", "--verbose", action="store_true", help="Show extraction progress and debug logs")

    parser = argparse.ArgumentParser(
        prog="kextract", description="Conversational knowledge extraction."
    )
    sub = parser.add_subparsers(dest="command", required=True)

    validate = sub.add_parser("validate", parents=[common], help="Check a requested-knowledge schema")
    validate.add_argument("schema", help="Path to a JSON schema file")

    run = sub.add_parser("run", parents=[common], help="Fill a schema by chatting in the terminal")
    run.add_argument("schema", help="Path to a JSON schema file")
    run.add_argument("--batch", action="store_true", help="Ask all open questions at once")
    run.add_argument("--config", default=None, help="Path to kextract.toml")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(message)s",
        handlers=[RichHandler(show_path=False)],
    )

    if args.command == "validate":
        return _validate(args)
    return asyncio.run(_run(args))


if __name__ == "__main__":
    sys.exit(main())
