from vizgen.llm.client import LLMResponse, OpenAICompatibleClient
from vizgen.llm.provider import get_llm_client, llm_configured

__all__ = ["LLMResponse", "OpenAICompatibleClient", "get_llm_client", "llm_configured"]
