from dataclasses import dataclass
from typing import Optional, Union
from pydantic_settings import BaseSettings
import base64
import binascii

from custom_exceptions.provider_config_error import ProviderConfigError
from utils.constants import (
    AZURE_PROVIDER,
    DEFAULT_AZURE_API_VERSION,
    DEFAULT_MODEL,
    OPENAI_PROVIDER,
)


@dataclass(frozen=True)
class OpenAIProvider:
    model: str
    api_key: str
    base_url: Optional[str] = None
    name: str = OPENAI_PROVIDER


@dataclass(frozen=True)
class AzureOpenAIProvider:
    model: str
    api_key: str
    endpoint: str
    deployment: str
    api_version: str
    name: str = AZURE_PROVIDER


ProviderConfig = Union[OpenAIProvider, AzureOpenAIProvider]


class EnvConfig(BaseSettings):
    AI_PROVIDER: str = OPENAI_PROVIDER
    AI_MODEL: str = DEFAULT_MODEL
    OPENAI_API_KEY: Optional[str] = None
    OPENAI_BASE_URL: Optional[str] = None
    AI_API_KEY: Optional[str] = None
    AI_API_KEY_ENCODED: Optional[str] = None

    AZURE_OPENAI_API_KEY: Optional[str] = None
    AZURE_OPENAI_ENDPOINT: Optional[str] = None
    AZURE_OPENAI_DEPLOYMENT: Optional[str] = None
    AZURE_OPENAI_API_VERSION: str = DEFAULT_AZURE_API_VERSION

    LOG_INDEX_PATTERNS: str = "logs-*"
    LOG_TIMESTAMP_FIELD: str = "@timestamp"
    LOG_MESSAGE_FIELD: str = "message"
    SEARCH_REQUEST_TIMEOUT: float = 30.0

    LOG_LEVEL: str = "INFO"
    host: str = "127.0.0.1"
    port: int = 8000

    class Config:
        env_file = ".env"
        extra = "allow"

    @property
    def openai_api_key(self) -> Optional[str]:
        if self.OPENAI_API_KEY:
            return self.OPENAI_API_KEY
        if self.AI_API_KEY:
            return self.AI_API_KEY
        if self.AI_API_KEY_ENCODED:
            try:
                return base64.b64decode(self.AI_API_KEY_ENCODED, validate=True).decode()
            except (binascii.Error, UnicodeDecodeError) as e:
                raise ProviderConfigError(f"AI_API_KEY_ENCODED is not valid base64: {e}") from e
        return None

    @property
    def index_patterns(self) -> list[str]:
        return [p.strip() for p in self.LOG_INDEX_PATTERNS.split(",") if p.strip()]

    def resolve_provider(self) -> ProviderConfig:
        """
        Resolve the completion-service provider into exactly the fields
        that provider needs. Unknown providers and missing credentials
        raise ProviderConfigError.
        """
        provider = (self.AI_PROVIDER or "").strip().lower()

        if provider == OPENAI_PROVIDER:
            api_key = self.openai_api_key
            if not api_key:
                raise ProviderConfigError(
                    "OPENAI_API_KEY (or AI_API_KEY / AI_API_KEY_ENCODED) is not set"
                )
            return OpenAIProvider(
                model=self.AI_MODEL,
                api_key=api_key,
                base_url=self.OPENAI_BASE_URL,
            )

        if provider == AZURE_PROVIDER:
            missing = [
                name
                for name, value in (
                    ("AZURE_OPENAI_API_KEY", self.AZURE_OPENAI_API_KEY),
                    ("AZURE_OPENAI_ENDPOINT", self.AZURE_OPENAI_ENDPOINT),
                    ("AZURE_OPENAI_DEPLOYMENT", self.AZURE_OPENAI_DEPLOYMENT),
                )
                if not value
            ]
            if missing:
                raise ProviderConfigError(f"Missing Azure OpenAI settings: {', '.join(missing)}")
            return AzureOpenAIProvider(
                model=self.AI_MODEL,
                api_key=self.AZURE_OPENAI_API_KEY,
                endpoint=self.AZURE_OPENAI_ENDPOINT,
                deployment=self.AZURE_OPENAI_DEPLOYMENT,
                api_version=self.AZURE_OPENAI_API_VERSION,
            )

        raise ProviderConfigError(f"Unknown AI provider: {self.AI_PROVIDER!r}")


def get_env_config() -> EnvConfig:
    return EnvConfig()
