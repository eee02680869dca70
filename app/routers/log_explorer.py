from contextlib import aclosing

from fastapi import APIRouter, HTTPException, Request
from fastapi.responses import JSONResponse, StreamingResponse

from custom_exceptions.log_search_error import LogSearchError
from service import debug_analyzer
from service.log_search import search_logs
from service.query_translator import TranslationMode, translate
from service.schemas import (
    AnalyzeRequest,
    DebugContext,
    DebugRequest,
    DebugResponse,
    LogSourceConfig,
    QueryRequest,
    QueryResponse,
)
from service.stream_analyzer import analyze_stream
from utils.constants import NO_LOGS_SUMMARY, SUPPORTED_SOURCES
from utils.logger import logger

router = APIRouter(prefix="/api")

SSE_HEADERS = {
    "Cache-Control": "no-cache",
    "Connection": "keep-alive",
    "X-Accel-Buffering": "no",
}


def _require_config(config: LogSourceConfig | None) -> LogSourceConfig:
    if config is None or not config.url:
        raise HTTPException(status_code=400, detail="Config with URL is required")
    return config


def _require_source(source: str) -> str:
    # openobserve exposes an elasticsearch-compatible search API
    if source not in SUPPORTED_SOURCES:
        raise HTTPException(status_code=400, detail=f"Unknown source: {source}")
    return source


def _search_failed(e: LogSearchError) -> JSONResponse:
    return JSONResponse(status_code=502, content={"error": "Log search failed", "message": e.message})


@router.post("/analyze")
async def analyze_logs(body: AnalyzeRequest, request: Request):
    if not isinstance(body.logs, list):
        raise HTTPException(status_code=400, detail="Logs array is required")
    if not body.question:
        raise HTTPException(status_code=400, detail="Question is required")

    logger.info("Analyzing %d logs", len(body.logs))

    async def event_stream():
        async with aclosing(analyze_stream(body.logs, body.question)) as chunks:
            async for chunk in chunks:
                if await request.is_disconnected():
                    logger.info("Client disconnected, stopping analysis stream")
                    break
                yield chunk.to_sse()

    return StreamingResponse(event_stream(), media_type="text/event-stream", headers=SSE_HEADERS)


@router.post("/query", response_model=QueryResponse)
async def query_logs(body: QueryRequest):
    if not body.query:
        raise HTTPException(status_code=400, detail="Query is required")
    if not body.source:
        raise HTTPException(status_code=400, detail="Source is required")
    config = _require_config(body.config)
    _require_source(body.source)

    logger.info("Query request: %s (source: %s)", body.query, body.source)

    outcome = await translate(body.query, DebugContext(), TranslationMode.QUERY)
    if outcome.degraded:
        logger.warning("Using fallback search params for query: %s", outcome.reason)
    logger.info("Search params: %s", outcome.value.model_dump())

    try:
        logs = await search_logs(config, outcome.value)
    except LogSearchError as e:
        return _search_failed(e)

    return QueryResponse(
        query=body.query,
        results=logs,
        total=len(logs),
        summary=f"Found {len(logs)} logs" if logs else NO_LOGS_SUMMARY,
    )


@router.post("/debug", response_model=DebugResponse)
async def debug_issue(body: DebugRequest):
    if not body.issue_description:
        raise HTTPException(status_code=400, detail="Issue description is required")
    config = _require_config(body.config)
    _require_source(config.source or body.source or "elasticsearch")

    context = body.context or DebugContext()
    logger.info("Debug request: %s", body.issue_description)

    translation = await translate(body.issue_description, context, TranslationMode.DEBUG)
    if translation.degraded:
        logger.warning("Using fallback search params for debug: %s", translation.reason)
    logger.info("Search params: %s", translation.value.model_dump())

    try:
        logs = await search_logs(config, translation.value)
    except LogSearchError as e:
        return _search_failed(e)

    analysis = await debug_analyzer.analyze(body.issue_description, context, logs)
    if analysis.degraded:
        logger.warning("Returning logs without AI analysis: %s", analysis.reason)
    else:
        logger.info("Debug analysis complete")

    return DebugResponse(
        issue=body.issue_description,
        analysis=analysis.value.analysis,
        root_cause=analysis.value.root_cause,
        recommendations=analysis.value.recommendations,
        relevant_logs=logs,
    )
