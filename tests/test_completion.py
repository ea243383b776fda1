"""Tests for the completion client: retry policy, headers and both call modes."""

import json

import httpx
import pytest

from board_backend.completion import BASE_DELAY, MAX_RETRIES, retry_delay
from board_core.errors import CompletionAPIError
from board_core.stream import StreamCallbacks

from conftest import API_URL, RecordingSleep, make_client, sse, text_response

BODY = {"model": "test-model", "max_tokens": 10, "messages": [{"role": "user", "content": "hi"}]}


def sequence_handler(responses, requests):
    """Serve `(status, kwargs)` pairs in order, repeating the last, recording each request."""

    def handler(request: httpx.Request) -> httpx.Response:
        requests.append(request)
        status, kwargs = responses[min(len(requests) - 1, len(responses) - 1)]
        return httpx.Response(status, **kwargs)

    return handler


class TestRetryDelay:
    def test_numeric_retry_after(self):
        response = httpx.Response(429, headers={"retry-after": "7"})
        assert retry_delay(response, 0) == 7

    def test_zero_retry_after_is_honored(self):
        response = httpx.Response(429, headers={"retry-after": "0"})
        assert retry_delay(response, 2) == 0

    def test_exponential_backoff(self):
        response = httpx.Response(429)
        assert [retry_delay(response, a) for a in range(3)] == [BASE_DELAY, BASE_DELAY * 2, BASE_DELAY * 4]

    def test_non_numeric_header_falls_back(self):
        response = httpx.Response(529, headers={"retry-after": "Wed, 21 Oct 2026 07:28:00 GMT"})
        assert retry_delay(response, 1) == BASE_DELAY * 2


class TestCreate:
    @pytest.mark.asyncio
    async def test_success(self):
        requests = []
        client = make_client(sequence_handler([(200, {"json": text_response("hello")})], requests))
        response = await client.create(BODY, trace_context={"boardId": "b1"})

        assert response.text() == "hello"
        assert response.stop_reason == "end_turn"
        request = requests[0]
        assert str(request.url) == API_URL
        assert json.loads(request.content) == BODY
        assert request.headers["x-api-key"] == "test-key"
        assert request.headers["anthropic-version"] == "2023-06-01"
        assert json.loads(request.headers["x-trace-context"]) == {"boardId": "b1", "callType": "conversation"}

    @pytest.mark.asyncio
    async def test_unknown_block_types_dropped(self):
        payload = {
            "content": [
                {"type": "server_tool_use", "id": "x"},
                {"type": "text", "text": "kept"},
            ],
            "stop_reason": "end_turn",
        }
        client = make_client(sequence_handler([(200, {"json": payload})], []))
        response = await client.create(BODY)
        assert [b.type for b in response.content] == ["text"]

    @pytest.mark.asyncio
    async def test_retries_rate_limits_then_succeeds(self):
        requests, progress = [], []
        sleep = RecordingSleep()
        responses = [
            (429, {"headers": {"retry-after": "2"}}),
            (529, {}),
            (200, {"json": text_response("ok")}),
        ]
        client = make_client(sequence_handler(responses, requests), sleep)

        response = await client.create(BODY, on_progress=progress.append)

        assert response.text() == "ok"
        assert len(requests) == 3
        assert sleep.delays == [2, BASE_DELAY * 2]
        assert progress == [
            {"phase": "rate_limited", "wait_sec": 2},
            {"phase": "rate_limited", "wait_sec": 120},
        ]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_retries(self):
        requests = []
        sleep = RecordingSleep()
        client = make_client(sequence_handler([(429, {"text": "slow down"})], requests), sleep)

        with pytest.raises(CompletionAPIError) as exc_info:
            await client.create(BODY)

        assert len(requests) == MAX_RETRIES + 1
        assert len(sleep.delays) == MAX_RETRIES
        assert exc_info.value.status == 429
        assert "slow down" in str(exc_info.value)

    @pytest.mark.asyncio
    async def test_other_errors_are_not_retried(self):
        requests = []
        sleep = RecordingSleep()
        client = make_client(
            sequence_handler([(400, {"text": '{"error": "bad request"}'})], requests), sleep
        )

        with pytest.raises(CompletionAPIError) as exc_info:
            await client.create(BODY)

        assert len(requests) == 1
        assert sleep.delays == []
        assert str(exc_info.value) == 'Completion API error 400: {"error": "bad request"}'


class TestStream:
    @pytest.mark.asyncio
    async def test_stream_decodes_events(self):
        stream = (
            sse({"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}})
            + sse({"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Hi"}})
            + sse({"type": "message_delta", "delta": {"stop_reason": "end_turn"}})
        )
        requests, deltas = [], []
        client = make_client(sequence_handler(
            [(200, {"content": stream.encode(), "headers": {"content-type": "text/event-stream"}})],
            requests,
        ))

        response = await client.stream(
            {**BODY, "stream": True}, StreamCallbacks(on_text=deltas.append), call_type="tool"
        )

        assert deltas == ["Hi"]
        assert response.text() == "Hi"
        assert json.loads(requests[0].headers["x-trace-context"]) == {"callType": "tool"}

    @pytest.mark.asyncio
    async def test_stream_retries_too(self):
        requests = []
        sleep = RecordingSleep()
        stream = sse({"type": "message_delta", "delta": {"stop_reason": "end_turn"}})
        client = make_client(
            sequence_handler([(529, {}), (200, {"content": stream.encode()})], requests),
            sleep,
        )
        response = await client.stream({**BODY, "stream": True})
        assert response.stop_reason == "end_turn"
        assert len(requests) == 2
        assert sleep.delays == [BASE_DELAY]
