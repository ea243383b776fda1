"""Completion API client with rate-limit retry, streaming and non-streaming."""

import asyncio
import json
import logging
import math
from typing import Any, Awaitable, Callable, Optional

import httpx

from board_core.errors import CompletionAPIError
from board_core.models import CompletionResponse
from board_core.stream import StreamCallbacks, decode_stream

from .config import CompletionConfig, get_config

logger = logging.getLogger("board.completion")

MAX_RETRIES = 3
BASE_DELAY = 60.0  # seconds
RETRY_STATUSES = (429, 529)

ProgressCallback = Callable[[dict[str, Any]], None]


def retry_delay(response: httpx.Response, attempt: int) -> float:
    """Seconds to wait before the next attempt: retry-after if numeric, else backoff."""
    header = response.headers.get("retry-after")
    if header:
        try:
            seconds = float(header)
        except ValueError:
            seconds = None
        if seconds is not None and math.isfinite(seconds) and seconds >= 0:
            return seconds
    return BASE_DELAY * (2 ** attempt)


class CompletionClient:
    """
    Thin async client for the completion endpoint.

    Both call modes retry on 429/529 up to MAX_RETRIES times and fail
    immediately on any other error status.
    """

    def __init__(
        self,
        config: Optional[CompletionConfig] = None,
        http_client: Optional[httpx.AsyncClient] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self.config = config or get_config().completion
        self._owns_client = http_client is None
        self._http = http_client or httpx.AsyncClient(timeout=self.config.timeout)
        self._sleep = sleep

    async def aclose(self):
        if self._owns_client:
            await self._http.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, *exc):
        await self.aclose()

    def _headers(self, trace_context: Optional[dict], call_type: str) -> dict[str, str]:
        headers = self.config.headers()
        headers["X-Trace-Context"] = json.dumps({**(trace_context or {}), "callType": call_type})
        return headers

    async def _send(
        self,
        body: dict[str, Any],
        on_progress: Optional[ProgressCallback],
        trace_context: Optional[dict],
        call_type: str,
    ) -> httpx.Response:
        """POST the request, retrying rate limits. Returns an open, successful response."""
        headers = self._headers(trace_context, call_type)

        for attempt in range(MAX_RETRIES + 1):
            request = self._http.build_request(
                "POST", self.config.api_url, json=body, headers=headers
            )
            response = await self._http.send(request, stream=True)

            if response.status_code in RETRY_STATUSES and attempt < MAX_RETRIES:
                await response.aclose()
                delay = retry_delay(response, attempt)
                logger.warning(
                    "Retry %d/%d after %.1fs: completion API returned %d",
                    attempt + 1,
                    MAX_RETRIES,
                    delay,
                    response.status_code,
                )
                if on_progress:
                    on_progress({"phase": "rate_limited", "wait_sec": math.ceil(delay)})
                await self._sleep(delay)
                continue

            if not response.is_success:
                text = (await response.aread()).decode("utf-8", errors="replace")
                await response.aclose()
                logger.error("Completion API error %d: %s", response.status_code, text[:500])
                raise CompletionAPIError(response.status_code, text)

            return response

        raise AssertionError("unreachable")

    async def create(
        self,
        body: dict[str, Any],
        *,
        on_progress: Optional[ProgressCallback] = None,
        trace_context: Optional[dict] = None,
        call_type: str = "conversation",
    ) -> CompletionResponse:
        """Non-streaming call. Returns the parsed response."""
        response = await self._send(body, on_progress, trace_context, call_type)
        try:
            await response.aread()
            return CompletionResponse.from_api(response.json())
        finally:
            await response.aclose()

    async def stream(
        self,
        body: dict[str, Any],
        callbacks: Optional[StreamCallbacks] = None,
        *,
        on_progress: Optional[ProgressCallback] = None,
        trace_context: Optional[dict] = None,
        call_type: str = "conversation",
    ) -> CompletionResponse:
        """Streaming call. `body` should carry `stream: True`."""
        response = await self._send(body, on_progress, trace_context, call_type)
        try:
            return await decode_stream(response.aiter_bytes(), callbacks)
        finally:
            await response.aclose()
