"""
Agent loop - Turns a user request into rounds of completion calls and tool executions.

Each round:
1. Call the completion API (streamed when the caller wants live output)
2. Stop if the model asked for no tools or ended its turn
3. Record the assistant turn (minus thinking blocks) in the history
4. Execute every tool call and feed the results back as the next user turn

The loop is bounded by MAX_TOOL_ROUNDS; rate-limit retries happen inside
the completion client.
"""

import json
import logging
from dataclasses import dataclass, field
from typing import Any, Callable, Iterable, Optional

from board_core.models import ConversationMessage, ThinkingBlock, Viewport
from board_core.stream import StreamCallbacks

from .board_store import BoardStore
from .completion import CompletionClient, ProgressCallback
from .executor import ToolExecutor
from .prompts import build_system_prompt
from .tools import TOOLS

logger = logging.getLogger("board.agent")

MAX_TOOL_ROUNDS = 40

StreamCallback = Callable[[dict[str, Any]], None]
ToolCallCallback = Callable[[str, dict[str, Any], dict[str, Any]], None]


@dataclass
class AgentResult:
    """Final reply text and the full conversation history."""
    text: str
    messages: list[dict[str, Any]] = field(default_factory=list)


def build_request_body(
    messages: list[dict[str, Any]],
    system_prompt: str,
    client: CompletionClient,
    streaming: bool,
) -> dict[str, Any]:
    """Request body for a conversation round. Thinking is only enabled when streaming."""
    config = client.config
    body: dict[str, Any] = {
        "model": config.model,
        "max_tokens": config.max_tokens if streaming else config.plain_max_tokens,
        "system": system_prompt,
        "tools": TOOLS,
        "messages": messages,
    }
    if streaming:
        body["thinking"] = {"type": "enabled", "budget_tokens": config.thinking_budget}
        body["stream"] = True
    return body


def _stream_callbacks(on_stream: StreamCallback) -> StreamCallbacks:
    return StreamCallbacks(
        on_thinking=lambda delta: on_stream({"type": "thinking", "delta": delta}),
        on_text=lambda delta: on_stream({"type": "text", "delta": delta}),
        on_tool_start=lambda _index, _id, name: on_stream({"type": "tool_start", "name": name}),
        on_tool_end=lambda _index: on_stream({"type": "tool_end"}),
        on_stop=lambda _reason: on_stream({"type": "done"}),
    )


def _history_dicts(history: Iterable[Any]) -> list[dict[str, Any]]:
    return [
        m.model_dump() if isinstance(m, ConversationMessage) else dict(m)
        for m in history
    ]


async def run_agent(
    message: str,
    store: BoardStore,
    *,
    client: CompletionClient,
    history: Iterable[Any] = (),
    viewport: Optional[Viewport] = None,
    on_progress: Optional[ProgressCallback] = None,
    on_tool_call: Optional[ToolCallCallback] = None,
    on_stream: Optional[StreamCallback] = None,
    trace_context: Optional[dict] = None,
) -> AgentResult:
    """
    Run the agent on one user message.

    Args:
        message: The user's request
        store: Object store the tools act on
        client: Completion client
        history: Prior conversation (ConversationMessage or plain dicts)
        viewport: Visible window, cursor and selection
        on_progress: Receives {"phase": "calling" | "executing" | "rate_limited", ...}
        on_tool_call: Called with (name, input, result) after each tool runs
        on_stream: Enables streaming; receives thinking/text deltas and tool events
        trace_context: Opaque metadata sent with every completion call

    Returns:
        AgentResult with the last non-empty reply text and the updated history
    """
    messages = _history_dicts(history)
    messages.append({"role": "user", "content": message})
    system_prompt = build_system_prompt(viewport)
    executor = ToolExecutor(
        store, client=client, viewport=viewport, trace_context=trace_context, on_stream=on_stream
    )
    streaming = on_stream is not None
    callbacks = _stream_callbacks(on_stream) if streaming else None
    text_reply = ""

    for round_num in range(MAX_TOOL_ROUNDS):
        if on_progress:
            on_progress({"phase": "calling", "round": round_num})

        body = build_request_body(messages, system_prompt, client, streaming)
        if streaming:
            response = await client.stream(
                body, callbacks, on_progress=on_progress, trace_context=trace_context
            )
        else:
            response = await client.create(
                body, on_progress=on_progress, trace_context=trace_context
            )

        logger.info(
            "Round %d, stop_reason: %s, content blocks: %d",
            round_num, response.stop_reason, len(response.content),
        )
        text_reply = response.text() or text_reply

        tool_blocks = response.tool_uses()
        if not tool_blocks or response.stop_reason == "end_turn":
            break

        if on_stream:
            on_stream({"type": "done"})

        # Thinking blocks reconstructed from a stream can't be replayed
        messages.append({
            "role": "assistant",
            "content": [
                b.model_dump() for b in response.content if not isinstance(b, ThinkingBlock)
            ],
        })

        tool_results = []
        for block in tool_blocks:
            if on_progress:
                on_progress({"phase": "executing", "tool": block.name, "round": round_num})
            try:
                result = await executor.execute(block.name, block.input)
            except Exception as e:
                logger.error("Tool %s raised: %s", block.name, e)
                result = {"ok": False, "error": str(e) or "Unknown tool error"}
            if on_tool_call:
                on_tool_call(block.name, block.input, result)
            tool_results.append({
                "type": "tool_result",
                "tool_use_id": block.id,
                "content": json.dumps(result),
            })

        messages.append({"role": "user", "content": tool_results})
    else:
        logger.warning("Stopped after %d tool rounds", MAX_TOOL_ROUNDS)

    return AgentResult(text=text_reply, messages=messages)
