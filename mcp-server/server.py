#!/usr/bin/env python3
"""
Board Agent MCP Server

Provides MCP tools for AI agents to drive the board agent backend.
Every tool goes through the backend HTTP API, so the backend's board
is the single source of truth.
"""

import httpx
from mcp.server.fastmcp import FastMCP
from typing import Optional
import json

# Backend API URL
API_BASE = "http://127.0.0.1:8765/api"

# The agent endpoint runs a full tool loop; allow for rate-limit backoff
AGENT_TIMEOUT = 600.0

# Create MCP server
mcp = FastMCP("board-agent")


# --- HTTP Client Helper ---

def api_request(method: str, endpoint: str, timeout: float = 30.0, **kwargs) -> dict:
    """Make a request to the board agent backend."""
    url = f"{API_BASE}{endpoint}"
    with httpx.Client(timeout=timeout) as client:
        if method == "GET":
            response = client.get(url, params=kwargs.get("params"))
        elif method == "POST":
            response = client.post(url, json=kwargs.get("json"), params=kwargs.get("params"))
        else:
            raise ValueError(f"Unknown method: {method}")

        if response.status_code >= 400:
            error = response.json().get("detail", "Unknown error")
            raise Exception(f"API error: {error}")

        return response.json()


def call_tool(name: str, tool_input: dict) -> dict:
    """Run one board tool through the backend."""
    return api_request("POST", f"/tools/{name}", json={"input": tool_input})


# ============================================================================
# AGENT
# ============================================================================

@mcp.tool()
def board_ask(message: str, history_json: Optional[str] = None) -> str:
    """
    Ask the board agent to do something in natural language.

    Args:
        message: What to do, e.g. "Add a SWOT analysis for our launch"
        history_json: Optional JSON list of prior conversation messages
            (the "messages" field of a previous board_ask result)

    Returns the agent's reply and the updated conversation history.
    """
    history = json.loads(history_json) if history_json else []
    result = api_request(
        "POST", "/agent",
        timeout=AGENT_TIMEOUT,
        json={"message": message, "history": history},
    )
    return json.dumps(result, indent=2)


# ============================================================================
# BOARD TOOLS
# ============================================================================

@mcp.tool()
def board_get_state(
    filter_type: Optional[str] = None,
    fields: Optional[list[str]] = None,
    query: Optional[str] = None
) -> str:
    """
    Get objects on the board.

    Args:
        filter_type: Only return objects of this type (sticky, frame, connector, ...)
        fields: Only return these fields per object (id and label are always kept)
        query: Question to answer about the returned objects (summarized by a fast model)

    Positions are object centers.
    """
    tool_input = {}
    if filter_type:
        tool_input["filter"] = {"type": filter_type}
    if fields:
        tool_input["fields"] = fields
    if query:
        tool_input["query"] = query
    return json.dumps(call_tool("get_board_state", tool_input), indent=2)


@mcp.tool()
def board_apply_template(
    markup: str,
    x: Optional[float] = None,
    y: Optional[float] = None
) -> str:
    """
    Create or modify board content from a template.

    Args:
        markup: Either template DSL lines, e.g.
                swot "Launch" ; Strengths ; Weaknesses ; Opportunities ; Threats
            or XML, e.g.
                <frame title="Ideas"><row><sticky>A</sticky><sticky>B</sticky></row></frame>
                <batch><update ref="tango golf potato" color="#FF0000"/></batch>
        x: Center X for new content (defaults to the origin)
        y: Center Y for new content (defaults to the origin)

    Markup starting with "<" is sent as XML, anything else as DSL.

    Returns created/updated/deleted ids and any per-item errors.
    """
    key = "xml" if markup.lstrip().startswith("<") else "dsl"
    tool_input = {key: markup}
    if x is not None:
        tool_input["x"] = x
    if y is not None:
        tool_input["y"] = y
    return json.dumps(call_tool("apply_template", tool_input), indent=2)


@mcp.tool()
def board_search_templates(query: str) -> str:
    """
    Find catalog templates matching a description.

    Args:
        query: What the user wants, e.g. "compare two options" or "retrospective"

    Returns up to three template names with suggested slot values.
    """
    return json.dumps(call_tool("search_templates", {"query": query}), indent=2)


@mcp.tool()
def board_delete_object(ref: str) -> str:
    """
    Delete an object by id or 3-word label.

    Args:
        ref: Object id, or its label such as "tango golf potato"

    Connectors attached to the object are removed with it.
    """
    return json.dumps(call_tool("delete_object", {"object_id": ref}), indent=2)


# ============================================================================
# MAIN
# ============================================================================

if __name__ == "__main__":
    mcp.run()
