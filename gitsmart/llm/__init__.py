from .base import LLMClient, LLMError
from .ollama import OllamaClient
from .openai_client import OpenAIClient


def create_llm_client(cfg, provider: str | None = None, model: str | None = None,
                      stream: bool | None = None) -> LLMClient:
    """Build the client for *provider* (default: ``cfg.PROVIDER``)."""
    provider = provider or cfg.PROVIDER
    llm_kwargs = dict(
        max_retries=cfg.LLM_MAX_RETRIES,
        retry_delay=cfg.LLM_RETRY_DELAY,
        stream=cfg.STREAM_RESPONSES if stream is None else stream,
    )
    model = model or cfg.MODEL

    if provider == "ollama":
        return OllamaClient(base_url=cfg.OLLAMA_BASE_URL, model=model, **llm_kwargs)
    if provider == "lm_studio":
        return OpenAIClient(base_url=cfg.LM_STUDIO_BASE_URL, model=model, **llm_kwargs)
    if provider == "openai":
        return OpenAIClient(base_url=cfg.OPENAI_BASE_URL, model=model,
                            api_key=cfg.OPENAI_API_KEY, **llm_kwargs)
    raise ValueError(f"Unknown LLM provider: {provider}")


__all__ = ["LLMClient", "LLMError", "OllamaClient", "OpenAIClient", "create_llm_client"]
