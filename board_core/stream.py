"""
Streaming decoder for the completion API's server-sent event protocol.

The stream is a sequence of blank-line-separated records:

    event: content_block_delta
    data: {"type": "content_block_delta", "index": 0, "delta": {...}}

Dispatch is driven by the `type` field of each `data:` payload; `event:`
lines are informational only. Network chunks may split a record (or a
multi-byte character) anywhere, so partial lines are buffered across reads
and the trailing partial line is processed when the stream ends.

Records whose payload doesn't parse, or whose type we don't know, are
skipped. A tool call's `input` is accumulated as raw JSON text and only
parsed when its block closes; if that fails the input becomes `{}`.
"""

import codecs
import json
import logging
from dataclasses import dataclass
from typing import Any, AsyncIterable, Callable, Optional

from .models import CompletionResponse

logger = logging.getLogger("board.stream")


_SHAPES = (("index", int), ("delta", dict), ("content_block", dict))


def _well_formed(data: dict) -> bool:
    """Check the typed fields a record carries before any handler reads them."""
    for key, expected in _SHAPES:
        value = data.get(key)
        if value is None:
            continue
        if not isinstance(value, expected) or isinstance(value, bool):
            return False
    return True


def _str(value: Any) -> str:
    return value if isinstance(value, str) else ""


@dataclass
class StreamCallbacks:
    """Optional hooks fired as the stream is decoded."""
    on_thinking: Optional[Callable[[str], None]] = None
    on_text: Optional[Callable[[str], None]] = None
    on_tool_start: Optional[Callable[[int, str, str], None]] = None
    on_tool_delta: Optional[Callable[[int, str], None]] = None
    on_tool_end: Optional[Callable[[int], None]] = None
    on_stop: Optional[Callable[[str], None]] = None


class StreamDecoder:
    """
    Incremental decoder: feed it raw bytes, then call finish().

    Blocks are addressed by the index the protocol assigns them. Indices may
    arrive out of order or with gaps; the finished content is ordered by
    index with gaps dropped.
    """

    def __init__(self, callbacks: Optional[StreamCallbacks] = None):
        self.callbacks = callbacks or StreamCallbacks()
        self.blocks: dict[int, dict[str, Any]] = {}
        self.stop_reason: Optional[str] = None
        self.current_event = ""
        self._json_buffers: dict[int, str] = {}
        self._buffer = ""
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def feed(self, chunk: bytes) -> None:
        """Consume a chunk of the byte stream, dispatching every complete line."""
        self._buffer += self._decoder.decode(chunk)
        *lines, self._buffer = self._buffer.split("\n")
        for line in lines:
            self.process_line(line)

    def finish(self) -> CompletionResponse:
        """Flush the trailing partial line and return the decoded response."""
        self._buffer += self._decoder.decode(b"", final=True)
        if self._buffer.strip():
            self.process_line(self._buffer)
        self._buffer = ""
        content = [self.blocks[i] for i in sorted(self.blocks)]
        return CompletionResponse(content=content, stop_reason=self.stop_reason)

    def process_line(self, line: str) -> None:
        line = line.rstrip("\r")
        if line.startswith("event: "):
            self.current_event = line[7:].strip()
            return
        if not line.startswith("data: "):
            return

        raw = line[6:].strip()
        if raw == "[DONE]":
            return
        try:
            data = json.loads(raw)
        except json.JSONDecodeError:
            logger.debug("Skipping unparseable %s record", self.current_event or "stream")
            return
        if not isinstance(data, dict):
            return

        handler = self._handlers.get(data.get("type"))
        if handler is None:
            return
        if not _well_formed(data):
            logger.debug("Skipping malformed %s record", data["type"])
            return
        handler(self, data)

    def _block_start(self, data: dict) -> None:
        index = data.get("index")
        block = data.get("content_block") or {}
        kind = block.get("type")
        if not isinstance(index, int):
            return

        if kind == "thinking":
            self.blocks[index] = {"type": "thinking", "thinking": ""}
        elif kind == "text":
            self.blocks[index] = {"type": "text", "text": ""}
        elif kind == "tool_use":
            self.blocks[index] = {
                "type": "tool_use", "id": _str(block.get("id")), "name": _str(block.get("name")), "input": {}
            }
            self._json_buffers[index] = ""
            if self.callbacks.on_tool_start:
                self.callbacks.on_tool_start(index, self.blocks[index]["id"], self.blocks[index]["name"])
        else:
            logger.debug("Skipping content block of type %s", kind)

    def _block_delta(self, data: dict) -> None:
        index = data.get("index")
        delta = data.get("delta") or {}
        block = self.blocks.get(index)
        if block is None:
            logger.debug("Skipping delta for unknown block %s", index)
            return

        kind = delta.get("type")
        if kind == "thinking_delta" and block["type"] == "thinking":
            text = delta.get("thinking")
            if not isinstance(text, str):
                logger.debug("Skipping non-string %s delta for block %s", kind, index)
                return
            block["thinking"] += text
            if self.callbacks.on_thinking:
                self.callbacks.on_thinking(text)
        elif kind == "text_delta" and block["type"] == "text":
            text = delta.get("text")
            if not isinstance(text, str):
                logger.debug("Skipping non-string %s delta for block %s", kind, index)
                return
            block["text"] += text
            if self.callbacks.on_text:
                self.callbacks.on_text(text)
        elif kind == "input_json_delta" and index in self._json_buffers:
            partial = delta.get("partial_json")
            if not isinstance(partial, str):
                logger.debug("Skipping non-string %s delta for block %s", kind, index)
                return
            self._json_buffers[index] += partial
            if self.callbacks.on_tool_delta:
                self.callbacks.on_tool_delta(index, partial)

    def _block_stop(self, data: dict) -> None:
        index = data.get("index")
        block = self.blocks.get(index)
        if block is None or block["type"] != "tool_use":
            return

        raw = self._json_buffers.pop(index, "")
        try:
            parsed = json.loads(raw) if raw else {}
        except json.JSONDecodeError:
            logger.debug("Tool input for block %s did not parse; using {}", index)
            parsed = {}
        block["input"] = parsed if isinstance(parsed, dict) else {}
        if self.callbacks.on_tool_end:
            self.callbacks.on_tool_end(index)

    def _message_delta(self, data: dict) -> None:
        stop_reason = (data.get("delta") or {}).get("stop_reason")
        if isinstance(stop_reason, str) and stop_reason:
            self.stop_reason = stop_reason
            if self.callbacks.on_stop:
                self.callbacks.on_stop(stop_reason)

    _handlers = {
        "content_block_start": _block_start,
        "content_block_delta": _block_delta,
        "content_block_stop": _block_stop,
        "message_delta": _message_delta,
    }


async def decode_stream(
    chunks: AsyncIterable[bytes],
    callbacks: Optional[StreamCallbacks] = None
) -> CompletionResponse:
    """Decode an async byte stream (e.g. `response.aiter_bytes()`) into a response."""
    decoder = StreamDecoder(callbacks)
    async for chunk in chunks:
        decoder.feed(chunk)
    return decoder.finish()
