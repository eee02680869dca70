"""
Single entry point to the language model. Provider, model and credentials are
read from the environment on every call, so the callers never branch on
which provider is configured.
"""
from dataclasses import dataclass
from typing import Any, AsyncIterator, Optional, Union
import json
import re

from openai import AsyncAzureOpenAI, AsyncOpenAI

from utils.env_config import AzureOpenAIProvider, ProviderConfig, get_env_config
from utils.logger import logger

_FENCE_RE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


@dataclass(frozen=True)
class Prompt:
    text: str
    system_prompt: str = ""


@dataclass(frozen=True)
class GenerateOptions:
    temperature: float = 0.5
    max_tokens: Optional[int] = None
    json_output: bool = False
    streaming: bool = False


@dataclass(frozen=True)
class CompletionResult:
    content: Any
    provider: str
    model: str


def _build_client(provider: ProviderConfig) -> Union[AsyncOpenAI, AsyncAzureOpenAI]:
    if isinstance(provider, AzureOpenAIProvider):
        return AsyncAzureOpenAI(
            api_key=provider.api_key,
            azure_endpoint=provider.endpoint,
            api_version=provider.api_version,
        )
    return AsyncOpenAI(api_key=provider.api_key, base_url=provider.base_url)


def _model_name(provider: ProviderConfig) -> str:
    # Azure routes by deployment name rather than model name
    if isinstance(provider, AzureOpenAIProvider):
        return provider.deployment
    return provider.model


def _request_kwargs(provider: ProviderConfig, prompt: Prompt, options: GenerateOptions) -> dict:
    messages = []
    if prompt.system_prompt:
        messages.append({"role": "system", "content": prompt.system_prompt.strip()})
    messages.append({"role": "user", "content": prompt.text.strip()})

    kwargs = {
        "model": _model_name(provider),
        "messages": messages,
        "temperature": options.temperature,
    }
    if options.max_tokens is not None:
        kwargs["max_tokens"] = options.max_tokens
    if options.json_output:
        kwargs["response_format"] = {"type": "json_object"}
    return kwargs


async def generate(prompt: Prompt, options: GenerateOptions):
    """
    Non-streaming calls return a CompletionResult. Streaming calls return an
    async iterator of text pieces; the upstream stream is closed when the
    iterator is closed, exhausted or cancelled.
    """
    provider = get_env_config().resolve_provider()
    kwargs = _request_kwargs(provider, prompt, options)

    if options.streaming:
        return _stream(provider, kwargs)

    logger.debug("Completion request: provider=%s model=%s", provider.name, kwargs["model"])
    async with _build_client(provider) as client:
        response = await client.chat.completions.create(**kwargs)

    if not response.choices or response.choices[0].message.content is None:
        raise ValueError("No response from AI")
    return CompletionResult(
        content=response.choices[0].message.content,
        provider=provider.name,
        model=kwargs["model"],
    )


async def _stream(provider: ProviderConfig, kwargs: dict) -> AsyncIterator[str]:
    logger.debug("Streaming request: provider=%s model=%s", provider.name, kwargs["model"])
    async with _build_client(provider) as client:
        stream = await client.chat.completions.create(**kwargs, stream=True)
        try:
            async for chunk in stream:
                if not chunk.choices:
                    continue
                text = chunk.choices[0].delta.content
                if text:
                    yield text
        finally:
            await stream.close()


def load_json_content(content: Any) -> dict:
    """Parse a JSON completion. Structured content is used as-is."""
    if isinstance(content, dict):
        return content
    if not isinstance(content, str):
        raise ValueError(f"Unexpected completion content type: {type(content).__name__}")

    text = content.strip()
    fenced = _FENCE_RE.match(text)
    if fenced:
        text = fenced.group(1)

    parsed = json.loads(text)
    if not isinstance(parsed, dict):
        raise ValueError("Expected a JSON object from the model")
    return parsed
