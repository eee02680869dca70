"""
Runs a SearchSpec against an Elasticsearch-compatible log store and
normalises the hits into LogRecords.
"""
from typing import Any, Dict, List, Optional

from elasticsearch import ApiError, AsyncElasticsearch, TransportError

from custom_exceptions.log_search_error import LogSearchError
from service.schemas import LogRecord, LogSourceConfig, SearchSpec
from utils.env_config import EnvConfig, get_env_config
from utils.logger import logger

MESSAGE_FALLBACK_FIELDS = ("log", "msg")


def build_query(spec: SearchSpec, timestamp_field: str = "@timestamp", message_field: str = "message") -> dict:
    must: List[dict] = []

    if spec.query:
        must.append({
            "query_string": {
                "query": spec.query,
                "default_field": message_field,
            }
        })

    if spec.time_range:
        must.append({"range": {timestamp_field: {"gte": f"now-{spec.time_range}"}}})

    for field, value in spec.filters.items():
        must.append({"term": {field: value}})

    # an empty bool.must would still match everything, but say so explicitly
    return {"bool": {"must": must or [{"match_all": {}}]}}


def build_search_body(spec: SearchSpec, timestamp_field: str = "@timestamp", message_field: str = "message") -> dict:
    return {
        "query": build_query(spec, timestamp_field, message_field),
        "size": spec.result_limit,
        "sort": [{timestamp_field: {"order": "desc", "unmapped_type": "date"}}],
    }


def normalize_hit(hit: Dict[str, Any], timestamp_field: str = "@timestamp", message_field: str = "message") -> LogRecord:
    source = hit.get("_source") or {}

    message = next(
        (
            source[name]
            for name in (message_field, "message", *MESSAGE_FALLBACK_FIELDS)
            if source.get(name) is not None
        ),
        "",
    )

    record = {
        "timestamp": source.get(timestamp_field, source.get("timestamp")),
        "message": message,
        "level": source.get("level"),
        "service": source.get("service"),
    }
    # original keys win, matching the source document verbatim
    record.update(source)
    return LogRecord.model_validate(record)


def _create_client(config: LogSourceConfig, settings: EnvConfig) -> AsyncElasticsearch:
    basic_auth = None
    if config.username and config.password:
        basic_auth = (config.username, config.password)
    return AsyncElasticsearch(
        config.url,
        basic_auth=basic_auth,
        request_timeout=settings.SEARCH_REQUEST_TIMEOUT,
    )


async def search_logs(
    config: LogSourceConfig,
    spec: SearchSpec,
    settings: Optional[EnvConfig] = None,
) -> List[LogRecord]:
    """
    Execute the search. Backend failures surface as LogSearchError; they are
    never turned into an empty result.
    """
    settings = settings or get_env_config()
    body = build_search_body(spec, settings.LOG_TIMESTAMP_FIELD, settings.LOG_MESSAGE_FIELD)
    logger.debug("Search body for %s: %s", config.url, body)

    try:
        async with _create_client(config, settings) as client:
            response = await client.search(
                index=",".join(settings.index_patterns),
                query=body["query"],
                size=body["size"],
                sort=body["sort"],
                allow_no_indices=True,
                ignore_unavailable=True,
            )
    except ApiError as e:
        logger.error("Log store rejected the search: %s", str(e))
        raise LogSearchError(f"Log store error: {e.message}", status_code=e.status_code) from e
    except TransportError as e:
        logger.error("Could not reach the log store at %s: %s", config.url, str(e))
        raise LogSearchError(f"Could not reach log store: {e.message}") from e

    hits = response["hits"]["hits"]
    logs = [normalize_hit(hit, settings.LOG_TIMESTAMP_FIELD, settings.LOG_MESSAGE_FIELD) for hit in hits]
    logger.info("Found %d log entries", len(logs))
    return logs
