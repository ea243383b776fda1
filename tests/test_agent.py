"""Tests for the agent loop."""

import json

import httpx
import pytest

from board_backend.agent import MAX_TOOL_ROUNDS, build_request_body, run_agent
from board_core.errors import CompletionAPIError
from board_core.models import ConversationMessage, Viewport

from conftest import make_client, scripted_client, sse, text_response, tool_response

STICKY = {"type": "sticky", "text": "Hello", "x": 0, "y": 0}


class TestRunAgent:
    @pytest.mark.asyncio
    async def test_plain_reply(self, store):
        client, bodies = scripted_client([text_response("Nothing to do.")])

        result = await run_agent("hi", store, client=client)

        assert result.text == "Nothing to do."
        assert result.messages == [{"role": "user", "content": "hi"}]
        assert len(bodies) == 1

    @pytest.mark.asyncio
    async def test_tool_round_then_reply(self, store):
        client, bodies = scripted_client([
            tool_response("create_object", STICKY, tool_id="toolu_a"),
            text_response("Added a sticky."),
        ])
        calls, progress = [], []

        result = await run_agent(
            "add a sticky", store, client=client,
            on_tool_call=lambda name, inp, res: calls.append((name, inp, res)),
            on_progress=progress.append,
        )

        assert result.text == "Added a sticky."
        assert store.count == 1
        assert calls[0][0] == "create_object"
        assert calls[0][2]["ok"] is True
        assert [p["phase"] for p in progress] == ["calling", "executing", "calling"]

        user, assistant, tool_results = result.messages
        assert assistant["role"] == "assistant"
        assert assistant["content"][0]["type"] == "tool_use"
        assert tool_results["role"] == "user"
        block = tool_results["content"][0]
        assert block["type"] == "tool_result"
        assert block["tool_use_id"] == "toolu_a"
        assert json.loads(block["content"])["label"] == calls[0][2]["label"]
        # The second request replays the whole exchange
        assert len(bodies[1]["messages"]) == 3

    @pytest.mark.asyncio
    async def test_tool_errors_are_fed_back(self, store):
        client, bodies = scripted_client([
            tool_response("delete_object", {"object_id": "no such object"}),
            text_response("Could not find it."),
        ])
        result = await run_agent("delete it", store, client=client)
        payload = json.loads(result.messages[2]["content"][0]["content"])
        assert payload["ok"] is False
        assert payload["object_count"] == 0

    @pytest.mark.asyncio
    async def test_end_turn_with_tool_blocks_stops(self, store):
        response = tool_response("create_object", STICKY)
        response["stop_reason"] = "end_turn"
        client, bodies = scripted_client([response])

        await run_agent("hi", store, client=client)

        assert len(bodies) == 1
        assert store.count == 0

    @pytest.mark.asyncio
    async def test_round_limit(self, store):
        client, bodies = scripted_client([tool_response("get_board_state", {})])

        result = await run_agent("loop forever", store, client=client)

        assert len(bodies) == MAX_TOOL_ROUNDS
        assert len(result.messages) == 1 + 2 * MAX_TOOL_ROUNDS

    @pytest.mark.asyncio
    async def test_last_non_empty_text_wins(self, store):
        first = tool_response("get_board_state", {})
        first["content"].insert(0, {"type": "text", "text": "Looking..."})
        client, _ = scripted_client([first, {"content": [], "stop_reason": "end_turn"}])

        result = await run_agent("look", store, client=client)

        assert result.text == "Looking..."

    @pytest.mark.asyncio
    async def test_history_and_viewport_are_sent(self, store):
        client, bodies = scripted_client([text_response("ok")])
        history = [
            ConversationMessage(role="user", content="earlier"),
            {"role": "assistant", "content": "reply"},
        ]
        viewport = Viewport(left=0, top=0, right=800, bottom=600, selected_ids=["abc"])

        await run_agent("now", store, client=client, history=history, viewport=viewport)

        body = bodies[0]
        assert [m["content"] for m in body["messages"]] == ["earlier", "reply", "now"]
        assert "Viewport: (0,0) to (800,600)" in body["system"]
        assert "Selected objects: abc" in body["system"]
        assert "thinking" not in body
        assert body["max_tokens"] == client.config.plain_max_tokens
        assert {t["name"] for t in body["tools"]} >= {"create_object", "apply_template"}

    @pytest.mark.asyncio
    async def test_api_errors_propagate(self, store):
        client = make_client(lambda request: httpx.Response(500, text="boom"))
        with pytest.raises(CompletionAPIError):
            await run_agent("hi", store, client=client)


class TestStreamingAgent:
    @pytest.mark.asyncio
    async def test_streamed_rounds(self, store):
        rounds = [
            sse({"type": "content_block_start", "index": 0, "content_block": {"type": "thinking", "thinking": ""}})
            + sse({"type": "content_block_delta", "index": 0, "delta": {"type": "thinking_delta", "thinking": "plan"}})
            + sse({"type": "content_block_stop", "index": 0})
            + sse({"type": "content_block_start", "index": 1,
                   "content_block": {"type": "tool_use", "id": "toolu_s", "name": "create_object", "input": {}}})
            + sse({"type": "content_block_delta", "index": 1,
                   "delta": {"type": "input_json_delta", "partial_json": json.dumps(STICKY)}})
            + sse({"type": "content_block_stop", "index": 1})
            + sse({"type": "message_delta", "delta": {"stop_reason": "tool_use"}}),
            sse({"type": "content_block_start", "index": 0, "content_block": {"type": "text", "text": ""}})
            + sse({"type": "content_block_delta", "index": 0, "delta": {"type": "text_delta", "text": "Done"}})
            + sse({"type": "message_delta", "delta": {"stop_reason": "end_turn"}}),
        ]
        bodies, events = [], []

        def handler(request):
            bodies.append(json.loads(request.content))
            return httpx.Response(200, content=rounds[len(bodies) - 1].encode())

        result = await run_agent("add", store, client=make_client(handler), on_stream=events.append)

        assert result.text == "Done"
        assert store.count == 1
        assert {"type": "thinking", "delta": "plan"} in events
        assert {"type": "tool_start", "name": "create_object"} in events
        assert {"type": "text", "delta": "Done"} in events
        assert events[-1] == {"type": "done"}

        assistant = result.messages[1]
        assert [b["type"] for b in assistant["content"]] == ["tool_use"]
        assert bodies[0]["stream"] is True
        assert bodies[0]["thinking"]["type"] == "enabled"


class TestBuildRequestBody:
    def test_streaming_body(self):
        client, _ = scripted_client([text_response("x")])
        body = build_request_body([], "system", client, streaming=True)
        assert body["max_tokens"] == client.config.max_tokens
        assert body["thinking"] == {"type": "enabled", "budget_tokens": client.config.thinking_budget}
