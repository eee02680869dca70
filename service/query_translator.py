"""
Turns a free-text question or issue description into a SearchSpec.

The model proposes query keywords, a time range and field filters. The
caller's context always wins over the model: a context service is forced
into the filters. Any failure falls back to a SearchSpec built from the text and
context alone, so translation never raises.
"""
from enum import Enum
from typing import Any, Dict, Optional

from service.completion_service import GenerateOptions, Prompt, generate, load_json_content
from service.schemas import AIOutcome, DebugContext, SearchSpec
from utils.constants import (
    DEBUG_QUERY_PROMPT,
    DEBUG_RESULT_LIMIT,
    DEFAULT_TIME_RANGE,
    QUERY_PARSER_PROMPT,
    QUERY_RESULT_LIMIT,
    TRANSLATE_TEMPERATURE,
)
from utils.logger import logger
from utils.time_range import normalize_time_range

_SCALAR_TYPES = (str, int, float, bool)


class TranslationMode(str, Enum):
    QUERY = "query"
    DEBUG = "debug"

    @property
    def result_limit(self) -> int:
        return QUERY_RESULT_LIMIT if self is TranslationMode.QUERY else DEBUG_RESULT_LIMIT


def describe_context(context: DebugContext) -> str:
    return (
        f"Service: {context.service or 'N/A'}, Time: {context.time_range or 'N/A'}, "
        f"Env: {context.environment or 'N/A'}, User: {context.user_id or 'N/A'}, "
        f"Request: {context.request_id or 'N/A'}"
    )


def build_prompt(free_text: str, context: DebugContext, mode: TranslationMode) -> Prompt:
    if mode is TranslationMode.DEBUG:
        text = f"Issue: {free_text}\nContext: {describe_context(context)}\n\nCreate an optimal search query."
        return Prompt(text=text, system_prompt=DEBUG_QUERY_PROMPT)

    if any(context.model_dump().values()):
        text = f"{free_text}\n\nContext: {describe_context(context)}"
    else:
        text = free_text
    return Prompt(text=text, system_prompt=QUERY_PARSER_PROMPT)


def _clean_filters(raw: Any) -> Dict[str, Any]:
    if not isinstance(raw, dict):
        return {}
    return {
        str(field): value
        for field, value in raw.items()
        if field and isinstance(value, _SCALAR_TYPES)
    }


def _apply_context(filters: Dict[str, Any], context: DebugContext) -> Dict[str, Any]:
    merged = dict(filters)
    if context.service:
        merged["service"] = context.service
    return merged


def fallback_spec(free_text: str, context: DebugContext, mode: TranslationMode) -> SearchSpec:
    return SearchSpec(
        query=free_text,
        time_range=normalize_time_range(context.time_range) or DEFAULT_TIME_RANGE,
        filters=_apply_context({}, context),
        result_limit=mode.result_limit,
    )


def spec_from_model_output(
    parsed: dict, free_text: str, context: DebugContext, mode: TranslationMode
) -> SearchSpec:
    query = parsed.get("query")
    if not isinstance(query, str):
        query = free_text

    time_range: Optional[str] = (
        normalize_time_range(parsed.get("time_range"))
        or normalize_time_range(context.time_range)
    )
    if time_range is None and mode is TranslationMode.DEBUG:
        time_range = DEFAULT_TIME_RANGE

    return SearchSpec(
        query=query.strip(),
        time_range=time_range,
        filters=_apply_context(_clean_filters(parsed.get("filters")), context),
        result_limit=mode.result_limit,
    )


async def translate(
    free_text: str,
    context: Optional[DebugContext] = None,
    mode: TranslationMode = TranslationMode.QUERY,
) -> AIOutcome[SearchSpec]:
    context = context or DebugContext()
    prompt = build_prompt(free_text, context, mode)
    options = GenerateOptions(temperature=TRANSLATE_TEMPERATURE, json_output=True)

    try:
        result = await generate(prompt, options)
        parsed = load_json_content(result.content)
        return AIOutcome.ok(spec_from_model_output(parsed, free_text, context, mode))
    except Exception as e:
        logger.warning("Query translation failed, using fallback search: %s", str(e))
        return AIOutcome.fallback(fallback_spec(free_text, context, mode), reason=str(e))
