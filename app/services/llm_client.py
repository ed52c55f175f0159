from openai import OpenAI

from app.core.config import get_settings

_client: OpenAI | None = None
_client_key: str | None = None


def get_client() -> OpenAI:
    global _client, _client_key
    settings = get_settings()
    if not settings.groq_api_key:
        raise RuntimeError("GROQ_API_KEY is not set")
    if _client is None or _client_key != settings.groq_api_key:
        _client = OpenAI(api_key=settings.groq_api_key, base_url=settings.llm_base_url)
        _client_key = settings.groq_api_key
    return _client


def get_model() -> str:
    return get_settings().llm_model
