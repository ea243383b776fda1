"""
Secondary completion calls made from inside tools.

Both use the cheaper model with a small token budget:
- Template search: match a description against the template catalog
- Board summary: answer a question about a filtered slice of the board
"""

import json
import logging
from typing import Any, Callable, Optional

from board_core.stream import StreamCallbacks
from board_core.templates import TEMPLATE_CATALOG

from .completion import CompletionClient

logger = logging.getLogger("board.agent")

SEARCH_PROMPT = f"""You are a template search agent. Given the catalog below, return 1-3 matching templates.
Format: ID|Slot1; Slot2; Slot3|short reason (one per line, no other text).
Example: swot|Strengths; Weaknesses; Opportunities; Threats|strategic grid

{TEMPLATE_CATALOG}"""

SUMMARY_PROMPT = """You answer questions about a whiteboard. You are given a JSON list of board objects
(x/y are centers). Answer the question concisely using only that data. Refer to objects by label."""

StreamCallback = Callable[[dict[str, Any]], None]


async def _ask(
    client: CompletionClient,
    system: str,
    content: str,
    tool_name: str,
    trace_context: Optional[dict],
    on_stream: Optional[StreamCallback],
) -> str:
    config = client.config
    body: dict[str, Any] = {
        "model": config.fast_model,
        "max_tokens": config.fast_max_tokens,
        "system": system,
        "messages": [{"role": "user", "content": content}],
    }
    context = {**(trace_context or {}), "toolName": tool_name}

    if on_stream:
        body["stream"] = True
        callbacks = StreamCallbacks(
            on_text=lambda delta: on_stream({"type": "sub_agent_text", "delta": delta})
        )
        response = await client.stream(
            body, callbacks, trace_context=context, call_type="tool"
        )
    else:
        response = await client.create(body, trace_context=context, call_type="tool")

    return response.text()


async def search_templates(
    query: str,
    client: CompletionClient,
    *,
    trace_context: Optional[dict] = None,
    on_stream: Optional[StreamCallback] = None,
) -> str:
    """Ask the search model for templates matching `query`. Returns `name|slots|reason` lines."""
    logger.info("Searching templates for %r", query)
    return await _ask(client, SEARCH_PROMPT, query, "search_templates", trace_context, on_stream)


def parse_search_results(text: str) -> list[dict[str, Any]]:
    """Split `name|slot; slot|reason` lines into dicts. Lines without a name are dropped."""
    results = []
    for line in text.splitlines():
        parts = [p.strip() for p in line.split("|")]
        if not parts[0]:
            continue
        slots = [s.strip() for s in parts[1].split(";") if s.strip()] if len(parts) > 1 else []
        results.append({
            "name": parts[0],
            "slots": slots,
            "reason": parts[2] if len(parts) > 2 else "",
        })
    return results


async def summarize_board(
    query: str,
    objects: list[dict[str, Any]],
    client: CompletionClient,
    *,
    trace_context: Optional[dict] = None,
    on_stream: Optional[StreamCallback] = None,
) -> str:
    """Answer `query` from the given board objects."""
    content = f"Question: {query}\n\nObjects:\n{json.dumps(objects)}"
    return await _ask(client, SUMMARY_PROMPT, content, "get_board_state", trace_context, on_stream)
