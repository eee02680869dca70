from unittest.mock import AsyncMock, patch

from conftest import text_stream
from service.stream_analyzer import analyze_stream, build_prompt


async def _collect(stream):
    return [chunk async for chunk in stream]


class TestAnalyzeStream:

    async def test_chunks_add_up_to_final_content(self):
        fake = AsyncMock(return_value=text_stream("The ", "payment ", "service ", "timed out."))
        logs = [{"message": "timeout"}, {"message": "retry"}]

        with patch("service.stream_analyzer.generate", fake):
            chunks = await _collect(analyze_stream(logs, "What happened?"))

        *partial, final = chunks
        assert [c.content for c in partial] == ["The ", "payment ", "service ", "timed out."]
        assert all(not c.done for c in partial)
        assert final.done is True
        assert final.content == "".join(c.content for c in partial)
        assert final.log_count == 2

    async def test_requests_streaming_generation(self):
        fake = AsyncMock(return_value=text_stream("ok"))
        with patch("service.stream_analyzer.generate", fake):
            await _collect(analyze_stream([], "q"))

        prompt, options = fake.await_args.args
        assert options.streaming is True
        assert options.temperature == 0.5
        assert options.max_tokens == 1500
        assert prompt.text.startswith("Question: q")

    async def test_error_mid_stream_ends_with_error_chunk(self):
        fake = AsyncMock(return_value=text_stream("partial ", "never", fail_after=1))
        with patch("service.stream_analyzer.generate", fake):
            chunks = await _collect(analyze_stream([{"m": 1}], "q"))

        assert chunks[0].content == "partial "
        assert chunks[-1].done is True
        assert chunks[-1].error == "Internal server error"
        assert chunks[-1].message == "stream dropped"

    async def test_error_before_stream_starts(self):
        fake = AsyncMock(side_effect=RuntimeError("bad credentials"))
        with patch("service.stream_analyzer.generate", fake):
            chunks = await _collect(analyze_stream([], "q"))

        assert len(chunks) == 1
        assert chunks[0].done and chunks[0].message == "bad credentials"

    async def test_closing_early_closes_upstream(self):
        closed = []
        fake = AsyncMock(return_value=text_stream("a", "b", "c", closed=closed))

        with patch("service.stream_analyzer.generate", fake):
            stream = analyze_stream([], "q")
            first = await stream.__anext__()
            await stream.aclose()

        assert first.content == "a"
        assert closed == [True]


def test_prompt_embeds_every_log():
    logs = [{"message": f"line {i}"} for i in range(120)]
    prompt = build_prompt(logs, "why?")
    assert "line 119" in prompt.text
