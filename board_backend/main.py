"""
Board Agent Backend - FastAPI Application

This is the main entry point for the board agent backend.
It provides:
- REST API for the board state and the template catalog
- Direct tool execution (the same tools the agent calls)
- The agent endpoint: natural-language request in, reply and history out
- CORS configuration for local frontend development
"""
import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from board_core.errors import CompletionAPIError, TemplateSyntaxError
from board_core.models import AgentRequest, AgentResponse, ToolCallRequest
from board_core.template_engine import layout_template, measure_template, parse_template
from board_core.templates import TEMPLATE_CATALOG, TEMPLATES

from .agent import run_agent
from .board_store import BoardStore, board_store
from .completion import CompletionClient
from .config import get_config
from .executor import ToolExecutor
from .tools import TOOL_NAMES

logger = logging.getLogger("board.api")

logging.basicConfig(
    level=get_config().log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)


# --- Dependencies ---

_completion_client: Optional[CompletionClient] = None


def get_store() -> BoardStore:
    """The board every request acts on."""
    return board_store


def get_completion_client() -> CompletionClient:
    """Shared completion client, created on first use."""
    global _completion_client
    if _completion_client is None:
        _completion_client = CompletionClient()
    return _completion_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Lifespan handler for startup/shutdown tasks."""
    global _completion_client
    logger.info("Board agent API starting")

    yield

    if _completion_client is not None:
        await _completion_client.aclose()
        _completion_client = None


# --- FastAPI App ---

app = FastAPI(
    title="Board Agent API",
    description="Natural-language board editing via template-driven tool use",
    version="1.0.0",
    lifespan=lifespan
)

# CORS for local development
app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:5173", "http://localhost:3000", "http://127.0.0.1:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


# --- Health Check ---

@app.get("/api/health")
async def health_check(store: BoardStore = Depends(get_store)):
    """Health check endpoint."""
    return {"status": "ok", "objects": store.count}


# --- Board State ---

@app.get("/api/board")
async def get_board(store: BoardStore = Depends(get_store)):
    """Get every object on the board."""
    return store.get_state()


# --- Templates ---

@app.get("/api/templates")
async def list_templates():
    """List template names and the human-readable catalog."""
    return {"templates": sorted(TEMPLATES), "catalog": TEMPLATE_CATALOG}


@app.get("/api/templates/{name}")
async def get_template_layout(name: str, x: float = 0, y: float = 0):
    """Get a template's markup, size and laid-out specs centered on (x, y)."""
    markup = TEMPLATES.get(name)
    if markup is None:
        raise HTTPException(status_code=404, detail=f"Unknown template: {name}")
    try:
        root = parse_template(markup)
    except TemplateSyntaxError as e:
        raise HTTPException(status_code=500, detail=str(e))
    width, height = measure_template(root)
    return {
        "name": name,
        "markup": markup,
        "width": width,
        "height": height,
        "specs": [spec.model_dump(exclude_none=True) for spec in layout_template(root, x, y)],
    }


# --- Tools ---

@app.post("/api/tools/{tool_name}")
async def call_tool(
    tool_name: str,
    request: ToolCallRequest,
    store: BoardStore = Depends(get_store),
    client: CompletionClient = Depends(get_completion_client),
):
    """Run a single tool call directly against the board."""
    if tool_name not in TOOL_NAMES:
        raise HTTPException(status_code=404, detail=f"Unknown tool: {tool_name}")
    executor = ToolExecutor(store, client=client, viewport=request.viewport)
    return await executor.execute(tool_name, request.input)


# --- Agent ---

@app.post("/api/agent", response_model=AgentResponse)
async def ask_agent(
    request: AgentRequest,
    store: BoardStore = Depends(get_store),
    client: CompletionClient = Depends(get_completion_client),
):
    """Run the agent on a natural-language request."""
    try:
        result = await run_agent(
            request.message,
            store,
            client=client,
            history=request.history,
            viewport=request.viewport,
        )
    except CompletionAPIError as e:
        raise HTTPException(status_code=502, detail=str(e))
    return AgentResponse(text=result.text, messages=result.messages)


# --- Run with uvicorn ---

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="127.0.0.1", port=8765)
