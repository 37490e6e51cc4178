from fastapi import HTTPException, status

from vizgen.core.config import settings
from vizgen.llm.client import OpenAICompatibleClient

SUPPORTED_PROVIDERS = ("openai_compatible",)


def llm_configured() -> bool:
    """True when the credentials needed for a recommendation call are set."""
    return bool(settings.llm_api_key and settings.llm_base_url and settings.llm_model)


def get_llm_client() -> OpenAICompatibleClient:
    if settings.llm_provider not in SUPPORTED_PROVIDERS:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unsupported LLM provider: {settings.llm_provider}",
        )
    if not llm_configured():
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="LLM not configured")
    return OpenAICompatibleClient(
        base_url=settings.llm_base_url,
        api_key=settings.llm_api_key,
        model=settings.llm_model,
        temperature=settings.llm_temperature,
        max_tokens=settings.llm_max_tokens,
        timeout=settings.llm_timeout,
        json_mode=True,
    )
