"""
Request-scoped data shapes shared by the routers and the services.
"""
from dataclasses import dataclass
from typing import Any, Dict, Generic, List, Optional, TypeVar
import json

from pydantic import BaseModel, ConfigDict, Field

T = TypeVar("T")


class SearchSpec(BaseModel):
    model_config = ConfigDict(frozen=True)

    query: str = ""
    time_range: Optional[str] = None
    filters: Dict[str, Any] = Field(default_factory=dict)
    result_limit: int = Field(gt=0)


class DebugContext(BaseModel):
    """Caller-supplied hints. `time_range` is only a hint for the translator."""
    model_config = ConfigDict(frozen=True, extra="ignore")

    service: Optional[str] = None
    time_range: Optional[str] = None
    environment: Optional[str] = None
    user_id: Optional[str] = None
    request_id: Optional[str] = None


class LogRecord(BaseModel):
    """
    One normalised hit. The four promoted fields sit next to every field of
    the source document, which are kept under their original keys.
    """
    model_config = ConfigDict(frozen=True, extra="allow")

    timestamp: Optional[Any] = None
    message: Any = ""
    level: Optional[Any] = None
    service: Optional[Any] = None


class AnalysisResult(BaseModel):
    analysis: str
    root_cause: Optional[str] = None
    recommendations: List[str] = Field(default_factory=list)


class StreamChunk(BaseModel):
    content: str = ""
    done: bool = False
    error: Optional[str] = None
    message: Optional[str] = None
    log_count: Optional[int] = None

    def to_sse(self) -> str:
        return f"data: {json.dumps(self.model_dump(exclude_none=True))}\n\n"


@dataclass(frozen=True)
class AIOutcome(Generic[T]):
    """Result of an AI-driven step: either the model's answer or a fallback."""
    value: T
    degraded: bool = False
    reason: Optional[str] = None

    @classmethod
    def ok(cls, value: T) -> "AIOutcome[T]":
        return cls(value=value)

    @classmethod
    def fallback(cls, value: T, reason: str) -> "AIOutcome[T]":
        return cls(value=value, degraded=True, reason=reason)


class LogSourceConfig(BaseModel):
    model_config = ConfigDict(extra="ignore")

    source: Optional[str] = None
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None
    organization: Optional[str] = None


class AnalyzeRequest(BaseModel):
    logs: Any = None
    question: Optional[str] = None


class QueryRequest(BaseModel):
    query: Optional[str] = None
    source: Optional[str] = None
    config: Optional[LogSourceConfig] = None


class DebugRequest(BaseModel):
    issue_description: Optional[str] = None
    context: Optional[DebugContext] = None
    source: Optional[str] = None
    config: Optional[LogSourceConfig] = None


class QueryResponse(BaseModel):
    query: str
    results: List[LogRecord]
    total: int
    summary: str


class DebugResponse(BaseModel):
    issue: str
    analysis: str
    root_cause: Optional[str] = None
    recommendations: List[str]
    relevant_logs: List[LogRecord]


class HealthResponse(BaseModel):
    status: str
    ai_enabled: bool
    provider: Optional[str] = None
