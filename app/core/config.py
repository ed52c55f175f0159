import os
from dataclasses import dataclass
from typing import List, Optional

from dotenv import load_dotenv

load_dotenv()

DEFAULT_LLM_BASE_URL = "https://api.groq.com/openai/v1"
DEFAULT_LLM_MODEL = "llama3-8b-8192"
DEV_ORIGINS = ["http://localhost:3000"]


@dataclass
class Settings:
    groq_api_key: Optional[str]
    llm_base_url: str
    llm_model: str

    email_user: Optional[str]
    email_pass: Optional[str]
    smtp_host: str
    smtp_port: int

    frontend_url: Optional[str]
    port: int
    environment: str
    log_level: str

    max_body_mb: int
    rate_limit_max: int
    rate_limit_window_seconds: int

    @property
    def max_body_bytes(self) -> int:
        return self.max_body_mb * 1024 * 1024

    @property
    def allowed_origins(self) -> List[str]:
        origins = list(DEV_ORIGINS)
        if self.frontend_url:
            origins.append(self.frontend_url.rstrip("/"))
        return origins

    @property
    def email_configured(self) -> bool:
        return bool(self.email_user and self.email_pass)


def get_settings() -> Settings:
    """
    Read configuration from the environment on every call, so a key added to
    the environment after startup is picked up by the next request.
    """
    return Settings(
        groq_api_key=os.getenv("GROQ_API_KEY") or None,
        llm_base_url=os.getenv("LLM_BASE_URL", DEFAULT_LLM_BASE_URL),
        llm_model=os.getenv("LLM_MODEL", DEFAULT_LLM_MODEL),
        email_user=os.getenv("EMAIL_USER") or None,
        email_pass=os.getenv("EMAIL_PASS") or None,
        smtp_host=os.getenv("SMTP_HOST", "smtp.gmail.com"),
        smtp_port=int(os.getenv("SMTP_PORT", "465")),
        frontend_url=os.getenv("FRONTEND_URL") or None,
        port=int(os.getenv("PORT", "5000")),
        environment=os.getenv("APP_ENV", "development"),
        log_level=os.getenv("LOG_LEVEL", "INFO"),
        max_body_mb=int(os.getenv("MAX_BODY_MB", "10")),
        rate_limit_max=int(os.getenv("RATE_LIMIT_MAX", "100")),
        rate_limit_window_seconds=int(os.getenv("RATE_LIMIT_WINDOW_SECONDS", "900")),
    )
