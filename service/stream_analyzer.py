"""
Direct Q&A over a caller-supplied batch of logs, streamed back as it is
generated.
"""
from contextlib import aclosing
from typing import Any, AsyncIterator, Sequence
import json

from service.completion_service import GenerateOptions, Prompt, generate
from service.schemas import StreamChunk
from utils import token_utils
from utils.constants import STREAM_ANALYSIS_PROMPT, STREAM_MAX_TOKENS, STREAM_TEMPERATURE
from utils.logger import logger


def build_prompt(logs: Sequence[Any], question: str) -> Prompt:
    text = f"""Question: {question}

Logs:
{json.dumps(list(logs), indent=2, default=str)}

Provide a detailed analysis."""
    return Prompt(text=text, system_prompt=STREAM_ANALYSIS_PROMPT)


def _log_token_usage(prompt: Prompt, output: str) -> None:
    try:
        input_tokens = token_utils.count_tokens(prompt.system_prompt + prompt.text)
        output_tokens = token_utils.count_tokens(output)
    except Exception as e:
        logger.debug("Token usage unavailable: %s", str(e))
        return
    logger.info(
        "[TOKEN USAGE] input=%d output=%d total=%d",
        input_tokens, output_tokens, input_tokens + output_tokens,
    )


async def analyze_stream(logs: Sequence[Any], question: str) -> AsyncIterator[StreamChunk]:
    """
    Yields one chunk per piece of generated text, then a final chunk with
    done=True carrying the whole answer and the log count. Errors end the
    stream with a done chunk carrying the error; chunks already sent stay sent.
    Closing this generator closes the completion stream.
    """
    prompt = build_prompt(logs, question)
    options = GenerateOptions(
        temperature=STREAM_TEMPERATURE,
        max_tokens=STREAM_MAX_TOKENS,
        streaming=True,
    )
    full_content = ""

    try:
        pieces = await generate(prompt, options)
        async with aclosing(pieces):
            async for piece in pieces:
                full_content += piece
                yield StreamChunk(content=piece, done=False)

        _log_token_usage(prompt, full_content)
        yield StreamChunk(content=full_content, done=True, log_count=len(logs))
    except Exception as e:
        logger.error("Analysis stream failed: %s", str(e))
        yield StreamChunk(error="Internal server error", message=str(e), done=True)
