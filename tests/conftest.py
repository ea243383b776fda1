"""Shared fixtures for the board agent tests."""

from __future__ import annotations

import json
from typing import Any, Callable

import httpx
import pytest

from board_backend.board_store import BoardStore
from board_backend.completion import CompletionClient
from board_backend.config import CompletionConfig

API_URL = "https://completion.test/v1/messages"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def sse(data: dict[str, Any]) -> str:
    """One server-sent event record carrying `data`."""
    return f"event: {data['type']}\ndata: {json.dumps(data)}\n\n"


def text_response(text: str, stop_reason: str = "end_turn") -> dict[str, Any]:
    return {"content": [{"type": "text", "text": text}], "stop_reason": stop_reason}


def tool_response(name: str, tool_input: dict[str, Any], tool_id: str = "toolu_1") -> dict[str, Any]:
    return {
        "content": [{"type": "tool_use", "id": tool_id, "name": name, "input": tool_input}],
        "stop_reason": "tool_use",
    }


class RecordingSleep:
    """Stands in for asyncio.sleep and records the requested delays."""

    def __init__(self):
        self.delays: list[float] = []

    async def __call__(self, seconds: float) -> None:
        self.delays.append(seconds)


def make_client(
    handler: Callable[[httpx.Request], httpx.Response],
    sleep: RecordingSleep | None = None,
) -> CompletionClient:
    """A CompletionClient whose HTTP traffic goes to `handler`."""
    http = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    config = CompletionConfig(api_url=API_URL, api_key="test-key")
    return CompletionClient(config=config, http_client=http, sleep=sleep or RecordingSleep())


def scripted_client(responses: list[dict[str, Any]]) -> tuple[CompletionClient, list[dict]]:
    """
    A client that answers with `responses` in order (repeating the last one).

    Returns the client and the list that collects every request body sent.
    """
    bodies: list[dict] = []

    def handler(request: httpx.Request) -> httpx.Response:
        bodies.append(json.loads(request.content))
        payload = responses[min(len(bodies) - 1, len(responses) - 1)]
        return httpx.Response(200, json=payload)

    return make_client(handler), bodies


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------


@pytest.fixture
def store() -> BoardStore:
    """A fresh, empty board."""
    return BoardStore()


@pytest.fixture
def add_object(store: BoardStore):
    """Create an object directly in the store, filling in sensible defaults."""

    async def _add(**fields: Any) -> dict[str, Any]:
        spec = {"type": "sticky", "x": 0, "y": 0, "width": 200, "height": 160, **fields}
        return await store.create_object(spec)

    return _add
