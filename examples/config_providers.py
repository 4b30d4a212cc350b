"""Switch between LLM providers: Anthropic, OpenAI, and Ollama.

The extraction model can be configured in kextract.toml or in code.
This example builds each config programmatically and prints the prompt
the extractor would send for a one-field schema.
"""

from kextract.core.extract import LLMExtractor
from kextract.core.extract.prompts import EXTRACT_PROMPT
from kextract.core.schema import SchemaValidator
from kextract.core.state import ExtractionState
from kextract.core.types.config import ExtractionConfig, KExtractConfig, LLMConfig

# Requires: ANTHROPIC_API_KEY environment variable or api_key below
anthropic_config = KExtractConfig(
    llm=LLMConfig(provider="anthropic", model="claude-sonnet-4-20250514"),
)

# Requires: OPENAI_API_KEY environment variable or api_key below
openai_config = KExtractConfig(
    llm=LLMConfig(provider="openai", model="gpt-4o-mini"),
    extraction=ExtractionConfig(timeout_ms=5000, max_rounds=6),
)

# Requires: Ollama running locally (ollama serve)
ollama_config = KExtractConfig(
    llm=LLMConfig(provider="ollama", model="llama3", base_url="http://localhost:11434"),
)

for config in (anthropic_config, openai_config, ollama_config):
    print(f"{config.llm.provider:10} {config.llm.model:28} timeout={config.extraction.timeout}s")

record = SchemaValidator().validate(
    {"email": {"type": "string", "description": "Email address", "question": "Your email?"}},
    True,
).record
state = ExtractionState(record)
extractor = LLMExtractor(llm_client=None)
for message in extractor.build_messages(state.outstanding_fields(), "a@b.com", EXTRACT_PROMPT):
    print(f"\n[{message.role}]\n{message.content}")
