"""
Core data models for the board agent.

These models define the shapes that cross component boundaries:
- Board objects as stored by the object store (top-left coordinates)
- Layout output handed to the object store (center coordinates)
- Content blocks and messages exchanged with the completion API
- Request/response bodies for the HTTP API

Field Naming Convention:
- Board objects store `x`/`y` as the top-left corner
- Layout specs and tool inputs use `x`/`y` as the center point
"""

from enum import Enum
from typing import Annotated, Any, Literal, Optional, Union
import uuid

from pydantic import BaseModel, Field


class ObjectType(str, Enum):
    """Kinds of objects that can live on the board."""
    STICKY = "sticky"
    RECTANGLE = "rectangle"
    CIRCLE = "circle"
    TEXT = "text"
    FRAME = "frame"
    CONNECTOR = "connector"
    EMBED = "embed"


class ConnectorStyle(str, Enum):
    """Line styles for connectors."""
    LINE = "line"
    ARROW = "arrow"


def generate_object_id() -> str:
    """Generate a unique object ID."""
    return str(uuid.uuid4())


class BoardObject(BaseModel):
    """An object on the board, as held by the object store."""
    id: str = Field(default_factory=generate_object_id)
    type: str = ObjectType.STICKY.value
    label: Optional[str] = None
    x: Optional[float] = None  # Top-left corner
    y: Optional[float] = None
    width: Optional[float] = None
    height: Optional[float] = None
    z_index: int = 0  # Higher = further in front (frames sit behind their contents)
    color: Optional[str] = None
    text: Optional[str] = None
    title: Optional[str] = None
    font_size: Optional[float] = None
    html: Optional[str] = None
    # Connector endpoints
    from_id: Optional[str] = None
    to_id: Optional[str] = None
    style: Optional[str] = None
    stroke_width: Optional[float] = None

    def to_json_dict(self) -> dict:
        """Convert to a JSON-serializable dict without unset fields."""
        return self.model_dump(exclude_none=True)


class Viewport(BaseModel):
    """The visible board window plus the user's cursor and selection."""
    left: float
    top: float
    right: float
    bottom: float
    cursor_x: Optional[float] = None
    cursor_y: Optional[float] = None
    selected_ids: list[str] = Field(default_factory=list)

    def center(self) -> tuple[float, float]:
        """Get the center point of the viewport."""
        return ((self.left + self.right) / 2, (self.top + self.bottom) / 2)

    def anchor(self) -> tuple[float, float]:
        """Where new content goes: the cursor if known, else the center."""
        if self.cursor_x is not None and self.cursor_y is not None:
            return (self.cursor_x, self.cursor_y)
        return self.center()


# --- Layout Output ---

class ObjectSpec(BaseModel):
    """A placed template element, positioned by its center."""
    type: str
    x: float
    y: float
    width: float
    height: float
    text: Optional[str] = None
    color: Optional[str] = None
    title: Optional[str] = None
    key: Optional[str] = None
    font_size: Optional[float] = None


class ConnectorSpec(BaseModel):
    """A template connector between two keyed elements."""
    type: Literal["connector"] = "connector"
    from_key: Optional[str] = None
    to_key: Optional[str] = None
    style: str = ConnectorStyle.ARROW.value
    color: str = "#000"


LayoutSpec = Union[ObjectSpec, ConnectorSpec]


# --- Completion API Content ---

class ThinkingBlock(BaseModel):
    type: Literal["thinking"] = "thinking"
    thinking: str = ""


class TextBlock(BaseModel):
    type: Literal["text"] = "text"
    text: str = ""


class ToolUseBlock(BaseModel):
    """A tool call requested by the model. `input` is only final after the block closes."""
    type: Literal["tool_use"] = "tool_use"
    id: str
    name: str
    input: dict[str, Any] = Field(default_factory=dict)


ContentBlock = Annotated[
    Union[ThinkingBlock, TextBlock, ToolUseBlock],
    Field(discriminator="type"),
]

CONTENT_BLOCK_TYPES = ("thinking", "text", "tool_use")


class CompletionResponse(BaseModel):
    """A finished completion round, from either the streaming or the plain call."""
    content: list[ContentBlock] = Field(default_factory=list)
    stop_reason: Optional[str] = None

    @classmethod
    def from_api(cls, data: dict) -> "CompletionResponse":
        """Build from a non-streaming API payload, dropping block types we don't model."""
        content = [
            block for block in data.get("content") or []
            if isinstance(block, dict) and block.get("type") in CONTENT_BLOCK_TYPES
        ]
        return cls(content=content, stop_reason=data.get("stop_reason"))

    def text(self) -> str:
        """Join all text blocks."""
        return "\n".join(b.text for b in self.content if isinstance(b, TextBlock))

    def tool_uses(self) -> list[ToolUseBlock]:
        """Get the tool-use blocks in order."""
        return [b for b in self.content if isinstance(b, ToolUseBlock)]


class ConversationMessage(BaseModel):
    """One turn of conversation history, replayable to the completion API."""
    role: Literal["user", "assistant"]
    content: Union[str, list[dict[str, Any]]]


# --- API Request/Response Models ---

class AgentRequest(BaseModel):
    """Request to run the agent on a user message."""
    message: str
    history: list[ConversationMessage] = Field(default_factory=list)
    viewport: Optional[Viewport] = None


class AgentResponse(BaseModel):
    """Final agent reply and the updated history."""
    text: str
    messages: list[ConversationMessage]


class ToolCallRequest(BaseModel):
    """Request to run a single tool directly."""
    input: dict[str, Any] = Field(default_factory=dict)
    viewport: Optional[Viewport] = None
