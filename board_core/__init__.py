"""
Board Agent Core - Models, parsers and layout algorithms for the board agent.

This package is pure and I/O-free. It provides the label codec, the
template DSL and patch language, the template layout engine, arrangement
helpers and the streaming decoder used by the backend and the CLI.
"""

from .models import (
    # Enums
    ObjectType,
    ConnectorStyle,
    # Board models
    BoardObject,
    Viewport,
    # Layout output
    ObjectSpec,
    ConnectorSpec,
    LayoutSpec,
    # Completion content
    ThinkingBlock,
    TextBlock,
    ToolUseBlock,
    ContentBlock,
    CompletionResponse,
    ConversationMessage,
    # Request models (for API)
    AgentRequest,
    AgentResponse,
    ToolCallRequest,
)

from .errors import (
    BoardError,
    ReferenceResolutionError,
    ObjectNotFoundError,
    AmbiguousReferenceError,
    TemplateSyntaxError,
    SlotFillError,
    CompletionAPIError,
)
from .labels import uuid_to_label, object_label
from .dsl import ApplyOp, PatchOp, parse_dsl
from .patch import apply_patch, apply_patches, resolve_path
from .template_engine import parse_template, fill_slots, layout_template, measure_template
from .layout import grid_layout, distribute_objects, align_objects
from .stream import StreamCallbacks, StreamDecoder, decode_stream
from .templates import TEMPLATES, TEMPLATE_CATALOG

__all__ = [
    # Enums
    "ObjectType",
    "ConnectorStyle",
    # Models
    "BoardObject",
    "Viewport",
    "ObjectSpec",
    "ConnectorSpec",
    "LayoutSpec",
    "ThinkingBlock",
    "TextBlock",
    "ToolUseBlock",
    "ContentBlock",
    "CompletionResponse",
    "ConversationMessage",
    # Request models
    "AgentRequest",
    "AgentResponse",
    "ToolCallRequest",
    # Errors
    "BoardError",
    "ReferenceResolutionError",
    "ObjectNotFoundError",
    "AmbiguousReferenceError",
    "TemplateSyntaxError",
    "SlotFillError",
    "CompletionAPIError",
    # Labels
    "uuid_to_label",
    "object_label",
    # DSL and patches
    "ApplyOp",
    "PatchOp",
    "parse_dsl",
    "apply_patch",
    "apply_patches",
    "resolve_path",
    # Templates
    "parse_template",
    "fill_slots",
    "layout_template",
    "measure_template",
    "TEMPLATES",
    "TEMPLATE_CATALOG",
    # Layout
    "grid_layout",
    "distribute_objects",
    "align_objects",
    # Streaming
    "StreamCallbacks",
    "StreamDecoder",
    "decode_stream",
]
