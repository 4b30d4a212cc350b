"""Drive a per-turn session against LocalHost with a scripted model.

No LLM is needed: the invoker below answers from a fixed list, which is
handy for trying out hook wiring or writing host integration tests.
"""

import asyncio
import json

from kextract.core import KnowledgeExtractor, LocalHost
from kextract.core.host import HANDLE_COMPLETE

ANSWERS = [
    '{"email": "ada@example.com"}',
    '```json\n{"age": 36, "newsletter": null}\n```',
    '[["newsletter", false]]',
]


class ScriptedInvoker:
    def __init__(self, answers):
        self._answers = iter(answers)

    async def extract(self, fields, message, prompt, timeout):
        return next(self._answers, "{}")


async def main():
    host = LocalHost()
    host.subscribe(HANDLE_COMPLETE, lambda p: print("done:", json.dumps(p["knowledge"])))

    with open("examples/contact.json") as f:
        schema = json.load(f)

    extractor = KnowledgeExtractor(host, ScriptedInvoker(ANSWERS))
    await extractor.start(schema, force=True)

    for text in ["ada@example.com", "I'm 36", "no thanks"]:
        print(f"assistant> {host.asked[-1]}")
        print(f"user> {text}")
        await host.user_message(text)


if __name__ == "__main__":
    asyncio.run(main())
