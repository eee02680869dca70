import json
from typing import Sequence

from service.completion_service import GenerateOptions, Prompt, generate, load_json_content
from service.schemas import AIOutcome, AnalysisResult, DebugContext, LogRecord
from utils.constants import (
    ANALYSIS_ERROR_TEXT,
    DEBUG_ANALYSIS_PROMPT,
    DEBUG_MAX_TOKENS,
    DEBUG_TEMPERATURE,
    MAX_PROMPT_LOGS,
)
from utils.logger import logger


def summarize_logs(logs: Sequence[LogRecord]) -> str:
    """Only the first MAX_PROMPT_LOGS records go to the model, with the real total stated."""
    payload = [log.model_dump(mode="json") for log in logs[:MAX_PROMPT_LOGS]]
    rendered = json.dumps(payload, indent=2, default=str)
    if len(logs) > MAX_PROMPT_LOGS:
        return f"Found {len(logs)} logs. Here are the most recent:\n{rendered}"
    return rendered


def build_prompt(issue: str, context: DebugContext, logs: Sequence[LogRecord]) -> Prompt:
    context_str = json.dumps(context.model_dump(), indent=2)
    text = f"""Issue: {issue}

Context:
{context_str}

Logs:
{summarize_logs(logs)}

Provide debugging analysis."""
    return Prompt(text=text, system_prompt=DEBUG_ANALYSIS_PROMPT)


def result_from_model_output(parsed: dict, raw_content) -> AnalysisResult:
    analysis = parsed.get("analysis")
    if not isinstance(analysis, str) or not analysis:
        analysis = raw_content if isinstance(raw_content, str) else json.dumps(raw_content)

    root_cause = parsed.get("root_cause")
    if not isinstance(root_cause, str) or root_cause.strip().lower() in ("", "null", "none"):
        root_cause = None

    recommendations = parsed.get("recommendations")
    if not isinstance(recommendations, list):
        recommendations = []

    return AnalysisResult(
        analysis=analysis,
        root_cause=root_cause,
        recommendations=[step for step in recommendations if isinstance(step, str)],
    )


def placeholder_result() -> AnalysisResult:
    return AnalysisResult(analysis=ANALYSIS_ERROR_TEXT, root_cause=None, recommendations=[])


async def analyze(issue: str, context: DebugContext, logs: Sequence[LogRecord]) -> AIOutcome[AnalysisResult]:
    logger.info("Performing AI-powered debug analysis over %d logs", len(logs))
    prompt = build_prompt(issue, context, logs)
    options = GenerateOptions(
        temperature=DEBUG_TEMPERATURE,
        max_tokens=DEBUG_MAX_TOKENS,
        json_output=True,
    )

    try:
        result = await generate(prompt, options)
        parsed = load_json_content(result.content)
        return AIOutcome.ok(result_from_model_output(parsed, result.content))
    except Exception as e:
        logger.warning("Debug analysis failed: %s", str(e))
        return AIOutcome.fallback(placeholder_result(), reason=str(e))
