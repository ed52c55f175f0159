import logging
from typing import Optional

from openai import OpenAIError

from app.core.config import get_settings
from app.core.errors import Err, ErrorKind, Ok, Result
from app.services.llm_client import get_client, get_model
from app.services.validators import is_blank

logger = logging.getLogger(__name__)

SYSTEM_PROMPT = (
    "You are a professional meeting notes summarizer. "
    "Provide clear, well-structured summaries that are easy to read and understand."
)
DEFAULT_INSTRUCTION = (
    "Please provide a clear and structured summary of the following text. "
    "Focus on key points, main ideas, and important details:"
)
NO_SUMMARY = "No summary generated"

TEMPERATURE = 0.3
MAX_TOKENS = 2048


def build_prompt(text: str, custom_prompt: Optional[str]) -> str:
    if custom_prompt:
        return f"{custom_prompt}\n\nText to summarize:\n{text}"
    return f"{DEFAULT_INSTRUCTION}\n\n{text}"


def summarize_text(text: Optional[str], custom_prompt: Optional[str], request_id: str) -> Result[str]:
    if is_blank(text):
        return Err(ErrorKind.VALIDATION, "Text content is required")

    if not get_settings().groq_api_key:
        logger.error(f"[{request_id}] summarizer_config_error missing=GROQ_API_KEY")
        return Err(ErrorKind.CONFIGURATION, "Groq API key not configured")

    prompt = build_prompt(text, custom_prompt)
    logger.info(f"[{request_id}] calling_llm_for_summary chars={len(text)} custom_prompt={bool(custom_prompt)}")
    logger.debug(f"[{request_id}] prompt_preview={prompt[:200]!r}")

    try:
        client = get_client()
        resp = client.chat.completions.create(
            model=get_model(),
            messages=[
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            temperature=TEMPERATURE,
            max_tokens=MAX_TOKENS,
        )
    except (OpenAIError, Exception) as e:
        logger.error(f"[{request_id}] summarizer_error: {type(e).__name__}: {e}")
        return Err(ErrorKind.UPSTREAM, "Failed to generate summary", details=str(e))

    logger.info(f"[{request_id}] llm_returned")

    choices = getattr(resp, "choices", None) or []
    content = choices[0].message.content if choices else None
    return Ok(content or NO_SUMMARY)
