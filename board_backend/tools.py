"""
Tool definitions handed to the completion API.

Object references (`object_id`, `from_id`, `frame_id`, ...) accept either a
full object id or its 3-word label.
"""

from enum import Enum

from board_core.models import ObjectType


class ToolName(str, Enum):
    """Every tool the agent can call."""
    CREATE_OBJECT = "create_object"
    UPDATE_OBJECT = "update_object"
    DELETE_OBJECT = "delete_object"
    GET_BOARD_STATE = "get_board_state"
    FIT_FRAME_TO_OBJECTS = "fit_frame_to_objects"
    LAYOUT_OBJECTS = "layout_objects"
    APPLY_TEMPLATE = "apply_template"
    SEARCH_TEMPLATES = "search_templates"


class LayoutMode(str, Enum):
    """Arrangements supported by layout_objects."""
    GRID = "grid"
    DISTRIBUTE_H = "distribute_h"
    DISTRIBUTE_V = "distribute_v"
    ALIGN = "align"


_REF = {"type": "string", "description": "Object id or 3-word label"}

_UPDATE_FIELDS = {
    "x": {"type": "number", "description": "Center x coordinate"},
    "y": {"type": "number", "description": "Center y coordinate"},
    "width": {"type": "number"},
    "height": {"type": "number"},
    "text": {"type": "string"},
    "color": {"type": "string"},
    "title": {"type": "string"},
    "font_size": {"type": "number"},
    "z_index": {"type": "number", "description": "Stack order. Higher = in front."},
}

TOOLS = [
    {
        "name": ToolName.CREATE_OBJECT.value,
        "description": "Create a board object. Types: sticky, rectangle, circle, text, frame, connector, embed.",
        "input_schema": {
            "type": "object",
            "properties": {
                "type": {"type": "string", "enum": [t.value for t in ObjectType]},
                "x": {"type": "number", "description": "Center x coordinate"},
                "y": {"type": "number", "description": "Center y coordinate"},
                "width": {"type": "number"},
                "height": {"type": "number"},
                "text": {"type": "string"},
                "title": {"type": "string"},
                "color": {"type": "string"},
                "font_size": {"type": "number"},
                "html": {"type": "string"},
                "from_id": _REF,
                "to_id": _REF,
                "style": {"type": "string", "enum": ["line", "arrow"]},
                "z_index": {"type": "number", "description": "Stack order. Higher = in front. Auto-assigned if omitted."},
            },
            "required": ["type"],
        },
    },
    {
        "name": ToolName.UPDATE_OBJECT.value,
        "description": (
            "Update properties of one object, or several via `updates`. "
            "Moving a frame moves everything inside it."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "object_id": _REF,
                **_UPDATE_FIELDS,
                "updates": {
                    "type": "array",
                    "description": "Batch form: one entry per object",
                    "items": {
                        "type": "object",
                        "properties": {
                            "target": _REF,
                            "fields": {"type": "object", "properties": _UPDATE_FIELDS},
                        },
                        "required": ["target", "fields"],
                    },
                },
            },
        },
    },
    {
        "name": ToolName.DELETE_OBJECT.value,
        "description": "Delete an object. Connectors attached to it are removed too.",
        "input_schema": {
            "type": "object",
            "properties": {"object_id": _REF},
            "required": ["object_id"],
        },
    },
    {
        "name": ToolName.GET_BOARD_STATE.value,
        "description": (
            "Get objects on the board (center coordinates). Narrow with `filter` "
            "(exact match; `text` matches case-insensitive substrings) and `fields`. "
            "Pass `query` to get a natural-language answer instead of raw data."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "filter": {"type": "object", "description": "e.g. {\"type\": \"sticky\", \"color\": \"#FFD700\"}"},
                "fields": {"type": "array", "items": {"type": "string"}},
                "query": {"type": "string"},
            },
        },
    },
    {
        "name": ToolName.FIT_FRAME_TO_OBJECTS.value,
        "description": "Resize and move a frame so it wraps the given objects with padding.",
        "input_schema": {
            "type": "object",
            "properties": {
                "frame_id": _REF,
                "object_ids": {"type": "array", "items": _REF},
            },
            "required": ["frame_id", "object_ids"],
        },
    },
    {
        "name": ToolName.LAYOUT_OBJECTS.value,
        "description": "Arrange existing objects: grid, distribute_h, distribute_v, or align.",
        "input_schema": {
            "type": "object",
            "properties": {
                "object_ids": {"type": "array", "items": _REF},
                "mode": {"type": "string", "enum": [m.value for m in LayoutMode]},
                "cols": {"type": "integer"},
                "gap": {"type": "number"},
                "alignment": {
                    "type": "string",
                    "enum": ["left", "center", "right", "top", "middle", "bottom"],
                },
            },
            "required": ["object_ids", "mode"],
        },
    },
    {
        "name": ToolName.APPLY_TEMPLATE.value,
        "description": (
            "Create diagrams from a template DSL or XML, or update/delete/layout "
            "existing objects with XML commands."
        ),
        "input_schema": {
            "type": "object",
            "properties": {
                "dsl": {"type": "string", "description": 'templateName "Title" ; slot1 ; slot2|sub'},
                "xml": {"type": "string"},
                "x": {"type": "number", "description": "Center x (defaults to cursor)"},
                "y": {"type": "number", "description": "Center y (defaults to cursor)"},
            },
        },
    },
    {
        "name": ToolName.SEARCH_TEMPLATES.value,
        "description": "Find up to 3 catalog templates matching a description. Returns name|slots|reason lines.",
        "input_schema": {
            "type": "object",
            "properties": {"query": {"type": "string"}},
            "required": ["query"],
        },
    },
]

TOOL_NAMES = [t["name"] for t in TOOLS]
