OPENAI_PROVIDER = "openai"
AZURE_PROVIDER = "azure-openai"
DEFAULT_MODEL = "gpt-4o-mini"
DEFAULT_AZURE_API_VERSION = "2024-06-01"

SUPPORTED_SOURCES = ("elasticsearch", "openobserve")

DEFAULT_TIME_RANGE = "1h"
QUERY_RESULT_LIMIT = 100
DEBUG_RESULT_LIMIT = 200
MAX_PROMPT_LOGS = 50

TRANSLATE_TEMPERATURE = 0.3
DEBUG_TEMPERATURE = 0.4
DEBUG_MAX_TOKENS = 2000
STREAM_TEMPERATURE = 0.5
STREAM_MAX_TOKENS = 1500

ANALYSIS_ERROR_TEXT = "Error analyzing logs"
NO_LOGS_SUMMARY = "No logs found matching your query"

QUERY_PARSER_PROMPT = """
You are a log query parser. Convert natural language queries into structured search parameters.
Extract:
1. The main search query (keywords to search in logs)
2. Time range if mentioned (format: 1h, 24h, 7d, etc.)
3. Filters like service name, log level, etc.

Respond in JSON format:
{
  "query": "extracted keywords",
  "time_range": "1h" or null,
  "filters": {"field": "value"}
}

Examples:
- "Show errors in payment service last hour" -> {"query": "error", "time_range": "1h", "filters": {"service": "payment", "level": "ERROR"}}
- "Database timeouts" -> {"query": "database timeout", "time_range": null, "filters": {}}
- "Recent logs" -> {"query": "", "time_range": "1h", "filters": {}}
"""

DEBUG_QUERY_PROMPT = """
You are a debugging expert. Based on the issue description and context, create an effective search query to find relevant logs.

Respond in JSON format:
{
  "query": "search keywords",
  "time_range": "suggested time range",
  "filters": {"field": "value"}
}
"""

DEBUG_ANALYSIS_PROMPT = """
You are an expert SRE and debugging assistant. Analyze the issue, logs, and context to provide:
1. A detailed analysis of what's happening
2. The root cause (if identifiable)
3. Step-by-step recommendations to fix the issue

Respond in JSON format:
{
  "analysis": "detailed analysis",
  "root_cause": "identified root cause or null",
  "recommendations": ["step 1", "step 2", ...]
}
"""

STREAM_ANALYSIS_PROMPT = """
You are a log analysis expert. Analyze the provided logs and answer the user's question with detailed insights, patterns, and actionable recommendations.
"""

WELCOME_TEXT = """Logs Explorer API - AI-Powered Log Analysis

Endpoints:
  GET  /api/health
  POST /api/query
  POST /api/analyze
  POST /api/debug"""
