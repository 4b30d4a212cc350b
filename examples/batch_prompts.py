"""Batch mode: fold the open questions into the host's own prompt.

Instead of asking one question per turn, the batch controller listens to
prompt assembly and adds every unanswered question to the prompt context.
The host's model then works them into its normal reply.
"""

import asyncio

from kextract.core import KnowledgeExtractor, LocalHost
from kextract.core.extract import LLMExtractor
from kextract.core.host import HANDLE_COMPLETE, HANDLE_START
from kextract.llm import create_llm_client
from kextract.llm.types import ModelConfig

SCHEMA = {
    "city": {
        "type": "string",
        "description": "City the user lives in",
        "question": "Which city do you live in?",
    },
    "pets": {
        "type": "number",
        "description": "How many pets the user has",
        "question": "How many pets do you have?",
    },
}


async def main():
    host = LocalHost()
    llm = create_llm_client(ModelConfig(provider="openai", model_name="gpt-4o-mini"))
    extractor = KnowledgeExtractor(host, LLMExtractor(llm))
    extractor.install()

    host.subscribe(HANDLE_COMPLETE, lambda p: print("collected:", p["knowledge"]))

    # Any host component can start a session through the hook.
    await host.emit(HANDLE_START, {"requested_knowledge": SCHEMA, "force": False})

    for text in ["Hi! I just moved to Lisbon.", "We have two cats, so 2."]:
        host.conversations["chat-1"].append(text)
        await host.set_prompts("chat-1")
        print(f"user> {text}")
        print(f"  context: {host.context['chat-1']}")
        print(f"  prompts: {host.prompts['chat-1']}")

    print("still active:", extractor.active)


if __name__ == "__main__":
    asyncio.run(main())
