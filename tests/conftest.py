"""
Shared fixtures. Provider settings come from a clean environment so a
developer's .env or shell never leaks into the tests.
"""
import pytest

from service.completion_service import CompletionResult
from service.schemas import LogRecord
from utils import token_utils

PROVIDER_ENV_VARS = (
    "AI_PROVIDER", "AI_MODEL", "OPENAI_API_KEY", "OPENAI_BASE_URL", "AI_API_KEY",
    "AI_API_KEY_ENCODED", "AZURE_OPENAI_API_KEY", "AZURE_OPENAI_ENDPOINT",
    "AZURE_OPENAI_DEPLOYMENT", "AZURE_OPENAI_API_VERSION", "LOG_INDEX_PATTERNS",
    "LOG_TIMESTAMP_FIELD", "LOG_MESSAGE_FIELD", "LOG_LEVEL",
)


@pytest.fixture(autouse=True)
def clean_env(monkeypatch, tmp_path):
    for name in PROVIDER_ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    monkeypatch.chdir(tmp_path)
    monkeypatch.setenv("OPENAI_API_KEY", "test-key")


@pytest.fixture(autouse=True)
def offline_token_counter(monkeypatch):
    monkeypatch.setattr(token_utils, "count_tokens", lambda text: len(text.split()))


def completion(content):
    return CompletionResult(content=content, provider="openai", model="gpt-4o-mini")


def text_stream(*pieces, fail_after=None, closed=None):
    """Async iterator of text pieces; records in `closed` when it is closed."""
    async def _gen():
        try:
            for i, piece in enumerate(pieces):
                if fail_after is not None and i == fail_after:
                    raise RuntimeError("stream dropped")
                yield piece
        finally:
            if closed is not None:
                closed.append(True)
    return _gen()


@pytest.fixture
def sample_hits():
    return [
        {
            "_index": "logs-2024.05.01",
            "_source": {
                "@timestamp": "2024-05-01T10:00:02Z",
                "message": "Payment gateway timeout after 30s",
                "level": "ERROR",
                "service": "payment",
                "trace_id": "abc123",
                "http": {"status": 504},
            },
        },
        {
            "_index": "logs-2024.05.01",
            "_source": {
                "@timestamp": "2024-05-01T10:00:01Z",
                "log": "retrying charge request",
                "service": "payment",
            },
        },
    ]


@pytest.fixture
def sample_logs():
    return [
        LogRecord.model_validate({
            "timestamp": f"2024-05-01T10:00:{i:02d}Z",
            "message": f"event {i}",
            "level": "ERROR",
            "service": "payment",
        })
        for i in range(3)
    ]
