import pytest
from fastapi.testclient import TestClient

from app.core.rate_limit import FixedWindowCounterStore
from app.main import app
from tests.fakes import FakeLLM, FakeSender

CONFIG_VARS = [
    "GROQ_API_KEY",
    "LLM_MODEL",
    "LLM_BASE_URL",
    "EMAIL_USER",
    "EMAIL_PASS",
    "FRONTEND_URL",
    "APP_ENV",
    "MAX_BODY_MB",
]


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in CONFIG_VARS:
        monkeypatch.delenv(name, raising=False)
    app.state.rate_limiter = FixedWindowCounterStore(max_requests=100, window_seconds=15 * 60)
    yield


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def llm(monkeypatch):
    monkeypatch.setenv("GROQ_API_KEY", "test-key")
    fake = FakeLLM()
    monkeypatch.setattr("app.services.summarizer.get_client", lambda: fake)
    return fake


@pytest.fixture
def mail_env(monkeypatch):
    monkeypatch.setenv("EMAIL_USER", "notes@example.com")
    monkeypatch.setenv("EMAIL_PASS", "app-password")


@pytest.fixture
def sender(monkeypatch, mail_env):
    fake = FakeSender()
    monkeypatch.setattr("app.services.share.get_sender", lambda: fake)
    return fake
