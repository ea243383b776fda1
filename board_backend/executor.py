"""
Tool Executor - Runs the agent's tool calls against the object store.

Every tool that names an object resolves the reference the same way:
an exact id wins; otherwise the reference is matched against object
labels. No match raises ObjectNotFoundError (with the live object count and
a type histogram), several matches raise AmbiguousReferenceError (with all
candidates). Both reach the agent as structured results it can correct from.

execute() is the error boundary: handlers raise, and any exception comes
back as `{"ok": False, "error": ...}`.
"""

import asyncio
import logging
from collections import Counter
from typing import Any, Callable, Optional
from xml.etree.ElementTree import Element

from board_core.dsl import ApplyOp, parse_dsl
from board_core.errors import AmbiguousReferenceError, ObjectNotFoundError, ReferenceResolutionError, SlotFillError
from board_core.geometry import contains, intersects, object_bounds, object_center, top_left, union_bounds
from board_core.labels import object_label, uuid_to_label
from board_core.layout import DEFAULT_GAP, align_objects, distribute_objects, grid_layout
from board_core.models import ConnectorSpec, LayoutSpec, ObjectType, Viewport, generate_object_id
from board_core.patch import apply_patch
from board_core.template_engine import (
    FRAME_PADDING, fill_slots, layout_template, measure_template, parse_template, set_frame_title, text_content
)
from board_core.templates import get_template

from .board_store import BoardStore
from .completion import CompletionClient
from .subagents import parse_search_results, search_templates, summarize_board
from .tools import LayoutMode, ToolName

logger = logging.getLogger("board.executor")

TYPE_DEFAULTS: dict[str, dict[str, Any]] = {
    "sticky": {"width": 200, "height": 160, "color": "#FFD700"},
    "rectangle": {"width": 240, "height": 160, "color": "#4ECDC4"},
    "circle": {"width": 200, "height": 200, "color": "#FF6B6B"},
    "text": {"width": 200, "height": 60, "color": "#111827", "font_size": 16},
    "frame": {"width": 420, "height": 260},
    "connector": {"stroke_width": 2, "color": "#111827", "style": "line"},
    "embed": {"width": 400, "height": 300},
}

# Space between template instances placed side by side
TEMPLATE_GAP = 100

# Fields reported by get_board_state, in order
STATE_FIELDS = (
    "id", "label", "type", "x", "y", "width", "height", "text", "title",
    "color", "html", "z_index", "from_id", "to_id", "style",
)

UPDATABLE_FIELDS = ("width", "height", "text", "color", "title", "z_index", "font_size")

COMMAND_TAGS = {"update", "delete", "layout", "batch"}

LAYOUT_MODE_ALIASES = {"distributeH": "distribute_h", "distributeV": "distribute_v"}

StreamCallback = Callable[[dict[str, Any]], None]


def _max_z(objects: dict[str, dict]) -> int:
    return max((o.get("z_index") or 0 for o in objects.values()), default=0)


def _z_index(tool_input: dict[str, Any], default: int) -> int:
    value = tool_input.get("z_index")
    return default if value is None else int(value)


def _normalize_label(ref: str) -> str:
    return " ".join(ref.lower().split())


def _float_attr(el: Element, name: str) -> Optional[float]:
    raw = el.get(name)
    if raw is None:
        return None
    try:
        return float(raw)
    except ValueError:
        return None


class ToolExecutor:
    """
    Dispatches tool calls by name.

    Args:
        store: The object store (create/update/delete coroutines, get_objects snapshot)
        client: Completion client for search and board summaries (optional)
        viewport: The user's visible window, for spatial filtering and placement
        trace_context: Opaque metadata forwarded on secondary completion calls
        on_stream: Receives streamed sub-agent text
    """

    def __init__(
        self,
        store: BoardStore,
        *,
        client: Optional[CompletionClient] = None,
        viewport: Optional[Viewport] = None,
        trace_context: Optional[dict] = None,
        on_stream: Optional[StreamCallback] = None,
    ):
        self.store = store
        self.client = client
        self.viewport = viewport
        self.trace_context = trace_context
        self.on_stream = on_stream

    async def execute(self, name: str, tool_input: Optional[dict[str, Any]] = None) -> dict[str, Any]:
        """Run one tool call. Never raises."""
        tool_input = tool_input or {}
        logger.info("Tool %s %s", name, tool_input)
        try:
            tool = ToolName(name)
        except ValueError:
            return {"ok": False, "error": f"Unknown tool: {name}"}

        handler = self._handlers[tool]
        try:
            result = await handler(self, tool_input)
        except ReferenceResolutionError as e:
            result = e.to_result()
        except Exception as e:
            logger.error("Tool %s failed: %s", name, e)
            result = {"ok": False, "error": str(e)}

        logger.debug("Tool %s result: %s", name, result)
        return result

    # --- Reference Resolution ---

    def resolve_ref(
        self,
        ref: Optional[str],
        objects: Optional[dict[str, dict]] = None,
        role: str = "Object"
    ) -> dict[str, Any]:
        """
        Find the object a reference names: exact id first, then label.

        Raises:
            ObjectNotFoundError: Nothing matches
            AmbiguousReferenceError: The label is shared by several objects
        """
        if objects is None:
            objects = self.store.get_objects()
        ref = str(ref or "").strip()

        if ref in objects:
            return objects[ref]

        wanted = _normalize_label(ref)
        matches = [o for o in objects.values() if wanted and object_label(o) == wanted]
        if len(matches) == 1:
            return matches[0]
        if not matches:
            types = Counter(o.get("type") for o in objects.values())
            raise ObjectNotFoundError(ref, len(objects), dict(types), role=role)
        raise AmbiguousReferenceError(
            ref,
            [{"id": o["id"], "label": object_label(o), "type": o.get("type")} for o in matches],
            role=role,
        )

    def _anchor(self, tool_input: dict[str, Any]) -> tuple[float, float]:
        """Where to place new content: explicit x/y, else the viewport's cursor or center."""
        if self.viewport is not None:
            default_x, default_y = self.viewport.anchor()
        else:
            default_x, default_y = 0, 0
        x = tool_input.get("x")
        y = tool_input.get("y")
        return (default_x if x is None else x, default_y if y is None else y)

    # --- create_object ---

    async def _create(self, tool_input: dict[str, Any]) -> dict[str, Any]:
        obj_type = tool_input.get("type")
        if obj_type not in TYPE_DEFAULTS:
            raise ValueError(f"Unknown object type: {obj_type}")

        defaults = TYPE_DEFAULTS[obj_type]
        objects = self.store.get_objects()
        object_id = generate_object_id()
        spec: dict[str, Any] = {"id": object_id, "label": uuid_to_label(object_id), "type": obj_type}

        if obj_type == ObjectType.CONNECTOR.value:
            if not tool_input.get("from_id") or not tool_input.get("to_id"):
                raise ValueError("Connectors need from_id and to_id.")
            source = self.resolve_ref(tool_input["from_id"], objects, role="Source object")
            target = self.resolve_ref(tool_input["to_id"], objects, role="Target object")
            lowest = min(source.get("z_index") or 0, target.get("z_index") or 0)
            spec.update(
                from_id=source["id"],
                to_id=target["id"],
                style=tool_input.get("style") or defaults["style"],
                stroke_width=defaults["stroke_width"],
                color=tool_input.get("color") or defaults["color"],
                z_index=_z_index(tool_input, lowest - 1),
            )
        else:
            width = tool_input.get("width") or defaults["width"]
            height = tool_input.get("height") or defaults["height"]
            center_x, center_y = self._anchor(tool_input)
            x, y = top_left(center_x, center_y, width, height)
            max_z = _max_z(objects)
            auto_z = max_z - 1 if obj_type == ObjectType.FRAME.value else max_z + 1
            spec.update(
                x=x,
                y=y,
                width=width,
                height=height,
                z_index=_z_index(tool_input, auto_z),
            )
            color = tool_input.get("color") or defaults.get("color")
            if color is not None:
                spec["color"] = color

            if obj_type in ("sticky", "text"):
                spec["text"] = tool_input.get("text") or ""
            elif tool_input.get("text"):
                spec["text"] = tool_input["text"]
            if obj_type == "text":
                spec["font_size"] = tool_input.get("font_size") or defaults["font_size"]
            if obj_type == "frame":
                title = tool_input.get("title")
                spec["title"] = "Frame" if title is None else title
            if obj_type == "embed":
                spec["html"] = tool_input.get("html") or ""

        created = await self.store.create_object(spec)
        return {
            "ok": True,
            "object_id": created["id"],
            "label": created.get("label"),
            "type": obj_type,
        }

    # --- update_object ---

    async def _update(self, tool_input: dict[str, Any]) -> dict[str, Any]:
        updates = tool_input.get("updates")
        if updates is None:
            fields = {k: v for k, v in tool_input.items() if k != "object_id"}
            return await self._update_one(tool_input.get("object_id"), fields)

        outcomes = await asyncio.gather(
            *(self._update_one(u.get("target"), u.get("fields") or {}) for u in updates),
            return_exceptions=True,
        )
        results = []
        for entry, outcome in zip(updates, outcomes):
            if isinstance(outcome, ReferenceResolutionError):
                outcome = outcome.to_result()
            elif isinstance(outcome, Exception):
                outcome = {"ok": False, "error": str(outcome)}
            results.append({"target": entry.get("target"), **outcome})

        failed = [r for r in results if not r.get("ok")]
        return {
            "ok": not failed,
            "updated": len(results) - len(failed),
            "failed": len(failed),
            "results": results,
        }

    async def _update_one(self, ref: Optional[str], fields: dict[str, Any]) -> dict[str, Any]:
        objects = self.store.get_objects()
        target = self.resolve_ref(ref, objects)

        updates: dict[str, Any] = {k: fields[k] for k in UPDATABLE_FIELDS if fields.get(k) is not None}
        if "z_index" in updates:
            updates["z_index"] = int(updates["z_index"])
        if not updates and fields.get("x") is None and fields.get("y") is None:
            return {"ok": False, "error": "No updates provided."}

        old_x, old_y, old_right, old_bottom = object_bounds(target)
        old_cx, old_cy = object_center(target)
        new_w = updates.get("width", target.get("width") or 0)
        new_h = updates.get("height", target.get("height") or 0)
        new_cx = fields["x"] if fields.get("x") is not None else old_cx
        new_cy = fields["y"] if fields.get("y") is not None else old_cy

        # Positions are kept center-anchored, so a resize alone leaves the center put
        if fields.get("x") is not None or "width" in updates:
            updates["x"] = new_cx - new_w / 2
        if fields.get("y") is not None or "height" in updates:
            updates["y"] = new_cy - new_h / 2

        pending = [self.store.update_object(target["id"], updates)]

        # Moving a frame carries everything fully inside it along
        dx, dy = new_cx - old_cx, new_cy - old_cy
        if target.get("type") == ObjectType.FRAME.value and (dx or dy):
            frame_bounds = (old_x, old_y, old_right, old_bottom)
            for obj in objects.values():
                if obj["id"] == target["id"] or obj.get("type") == ObjectType.CONNECTOR.value:
                    continue
                if contains(frame_bounds, object_bounds(obj)):
                    pending.append(self.store.update_object(obj["id"], {
                        "x": (obj.get("x") or 0) + dx,
                        "y": (obj.get("y") or 0) + dy,
                    }))

        await asyncio.gather(*pending)
        return {"ok": True, "object_id": target["id"], "moved_children": len(pending) - 1}

    # --- delete_object ---

    async def _delete(self, tool_input: dict[str, Any]) -> dict[str, Any]:
        target = self.resolve_ref(tool_input.get("object_id"))
        await self.store.delete_object(target["id"])
        return {"ok": True, "object_id": target["id"]}

    # --- get_board_state ---

    def _summarize_object(self, obj: dict[str, Any]) -> dict[str, Any]:
        center_x, center_y = object_center(obj)
        entry = {**obj, "label": object_label(obj)}
        if obj.get("type") != ObjectType.CONNECTOR.value:
            entry.update(x=center_x, y=center_y)
        if entry.get("html") is not None:
            entry["html"] = entry["html"][:200]
        return {k: entry[k] for k in STATE_FIELDS if entry.get(k) is not None}

    def _visible(self, objects: dict[str, dict]) -> list[dict[str, Any]]:
        if self.viewport is None:
            return list(objects.values())

        view = (self.viewport.left, self.viewport.top, self.viewport.right, self.viewport.bottom)
        visible_ids = {
            o["id"] for o in objects.values()
            if o.get("type") != ObjectType.CONNECTOR.value and intersects(view, object_bounds(o))
        }
        return [
            o for o in objects.values()
            if o["id"] in visible_ids
            or (o.get("type") == ObjectType.CONNECTOR.value
                and (o.get("from_id") in visible_ids or o.get("to_id") in visible_ids))
        ]

    async def _get_board_state(self, tool_input: dict[str, Any]) -> dict[str, Any]:
        summary = [self._summarize_object(o) for o in self._visible(self.store.get_objects())]

        for key, value in (tool_input.get("filter") or {}).items():
            if key == "text":
                needle = str(value).lower()
                summary = [o for o in summary if needle in (o.get("text") or "").lower()]
            else:
                summary = [o for o in summary if o.get(key) == value]

        fields = tool_input.get("fields")
        if fields:
            keep = {"id", "label", *fields}
            summary = [{k: v for k, v in o.items() if k in keep} for o in summary]

        query = tool_input.get("query")
        if not query:
            return {"ok": True, "objects": summary, "count": len(summary)}

        try:
            if self.client is None:
                raise RuntimeError("No completion client configured")
            answer = await summarize_board(
                query, summary, self.client,
                trace_context=self.trace_context, on_stream=self.on_stream,
            )
        except Exception as e:
            logger.warning("Board summary failed, returning raw data: %s", e)
            return {"ok": True, "objects": summary, "count": len(summary), "summary_error": str(e)}
        return {"ok": True, "answer": answer, "count": len(summary)}

    # --- fit_frame_to_objects ---

    async def _fit_frame(self, tool_input: dict[str, Any]) -> dict[str, Any]:
        objects = self.store.get_objects()
        frame = self.resolve_ref(tool_input.get("frame_id"), objects, role="Frame")
        if frame.get("type") != ObjectType.FRAME.value:
            raise ValueError(f"Object {frame['id']} is a {frame.get('type')}, not a frame.")

        refs = tool_input.get("object_ids") or []
        if not refs:
            raise ValueError("object_ids must list at least one object.")
        targets = [self.resolve_ref(ref, objects) for ref in refs]

        left, top, right, bottom = union_bounds([object_bounds(o) for o in targets])
        pad_left, pad_right, pad_top, pad_bottom = FRAME_PADDING
        updates = {
            "x": left - pad_left,
            "y": top - pad_top,
            "width": right - left + pad_left + pad_right,
            "height": bottom - top + pad_top + pad_bottom,
        }
        await self.store.update_object(frame["id"], updates)
        return {
            "ok": True,
            "object_id": frame["id"],
            "x": updates["x"] + updates["width"] / 2,
            "y": updates["y"] + updates["height"] / 2,
            "width": updates["width"],
            "height": updates["height"],
        }

    # --- layout_objects ---

    async def _layout(self, tool_input: dict[str, Any]) -> dict[str, Any]:
        mode = tool_input.get("mode")
        mode = LAYOUT_MODE_ALIASES.get(mode, mode)
        objects = self.store.get_objects()
        # Every reference must resolve before anything moves
        targets = [self.resolve_ref(ref, objects) for ref in tool_input.get("object_ids") or []]

        if mode == LayoutMode.GRID.value:
            gap = tool_input.get("gap")
            cols = tool_input.get("cols")
            positions = grid_layout(
                targets, int(cols) if cols else None, DEFAULT_GAP if gap is None else gap
            )
        elif mode == LayoutMode.DISTRIBUTE_H.value:
            positions = distribute_objects(targets, "horizontal")
        elif mode == LayoutMode.DISTRIBUTE_V.value:
            positions = distribute_objects(targets, "vertical")
        elif mode == LayoutMode.ALIGN.value:
            positions = align_objects(targets, tool_input.get("alignment") or "left")
        else:
            raise ValueError(f"Unknown layout mode: {mode}")

        ids = list(positions)
        outcomes = await asyncio.gather(
            *(self.store.update_object(oid, positions[oid]) for oid in ids),
            return_exceptions=True,
        )
        errors = [
            {"object_id": oid, "error": str(outcome)}
            for oid, outcome in zip(ids, outcomes)
            if isinstance(outcome, Exception)
        ]
        return {"ok": not errors, "mode": mode, "moved": len(ids) - len(errors), "errors": errors}

    # --- apply_template ---

    async def _apply_template(self, tool_input: dict[str, Any]) -> dict[str, Any]:
        origin_x, origin_y = self._anchor(tool_input)
        if tool_input.get("dsl"):
            return await self._apply_dsl(tool_input["dsl"], origin_x, origin_y)
        if tool_input.get("xml"):
            return await self._apply_xml(tool_input["xml"], origin_x, origin_y)
        raise ValueError("apply_template needs `dsl` or `xml`.")

    async def _apply_dsl(self, text: str, origin_x: float, origin_y: float) -> dict[str, Any]:
        instances: list[Element] = []
        errors: list[dict[str, Any]] = []
        current: Optional[Element] = None

        for line, op in enumerate(parse_dsl(text), start=1):
            if isinstance(op, ApplyOp):
                current = None
                markup = get_template(op.name)
                if markup is None:
                    errors.append({"line": line, "error": f"Unknown template: {op.name}"})
                    continue
                root = parse_template(markup)
                if op.title is not None:
                    set_frame_title(root, op.title)
                try:
                    fill_slots(root, op.slots)
                except SlotFillError as e:
                    errors.append({"line": line, "error": str(e)})
                    continue
                instances.append(root)
                current = root
            elif current is None:
                errors.append({"line": line, "error": f"Patch @{op.path} has no template to apply to"})
            else:
                apply_patch(current, op.path, op.value)

        created = await self._place_instances(instances, origin_x, origin_y, errors)
        return {"ok": True, "created": created, "errors": errors}

    async def _apply_xml(self, markup: str, origin_x: float, origin_y: float) -> dict[str, Any]:
        root = parse_template(markup)
        items = list(root) if root.tag == "batch" else [root]

        created: list[dict[str, Any]] = []
        updated: list[str] = []
        deleted: list[str] = []
        errors: list[dict[str, Any]] = []
        templates: list[Element] = []

        for item in items:
            if item.tag not in COMMAND_TAGS:
                templates.append(item)
                continue
            if item.tag == "batch":
                errors.append({"item": "batch", "error": "Nested <batch> is not supported"})
                continue

            ref = item.get("ref")
            try:
                if item.tag == "update":
                    result = await self._update_one(ref, self._command_fields(item))
                elif item.tag == "delete":
                    result = await self._delete({"object_id": ref})
                else:
                    result = await self._layout(self._layout_input(item))
            except ReferenceResolutionError as e:
                result = e.to_result()
            except Exception as e:
                result = {"ok": False, "error": str(e)}

            if not result.get("ok"):
                errors.append({"item": item.tag, "ref": ref, **result})
            elif item.tag == "update":
                updated.append(result["object_id"])
            elif item.tag == "delete":
                deleted.append(result["object_id"])

        created = await self._place_instances(templates, origin_x, origin_y, errors)
        return {"ok": True, "created": created, "updated": updated, "deleted": deleted, "errors": errors}

    @staticmethod
    def _command_fields(item: Element) -> dict[str, Any]:
        fields: dict[str, Any] = {}
        for name in ("x", "y", "width", "height", "z_index"):
            value = _float_attr(item, name)
            if value is not None:
                fields[name] = value
        size = _float_attr(item, "font_size")
        if size is None:
            size = _float_attr(item, "size")
        if size is not None:
            fields["font_size"] = size
        for name in ("color", "title"):
            if item.get(name) is not None:
                fields[name] = item.get(name)
        if item.get("text") is not None:
            fields["text"] = item.get("text")
        elif text_content(item).strip():
            fields["text"] = text_content(item).strip()
        return fields

    @staticmethod
    def _layout_input(item: Element) -> dict[str, Any]:
        refs = [(r.text or "").strip() for r in item.findall("ref")]
        cols = _float_attr(item, "cols")
        return {
            "mode": item.get("mode"),
            "object_ids": [r for r in refs if r],
            "cols": int(cols) if cols else None,
            "gap": _float_attr(item, "gap"),
            "alignment": item.get("alignment"),
        }

    async def _place_instances(
        self,
        roots: list[Element],
        origin_x: float,
        origin_y: float,
        errors: list[dict[str, Any]]
    ) -> list[dict[str, Any]]:
        """Lay template roots out left to right, centered as a group on the origin."""
        if not roots:
            return []

        widths = [measure_template(root)[0] for root in roots]
        left = origin_x - (sum(widths) + TEMPLATE_GAP * (len(roots) - 1)) / 2

        created: list[dict[str, Any]] = []
        for root, width in zip(roots, widths):
            specs = layout_template(root, left + width / 2, origin_y)
            created.extend(await self._create_specs(specs, errors))
            left += width + TEMPLATE_GAP
        return created

    async def _create_specs(self, specs: list[LayoutSpec], errors: list[dict[str, Any]]) -> list[dict[str, Any]]:
        """Create laid-out objects in order, then connectors between keyed ones."""
        keys: dict[str, str] = {}
        created: list[dict[str, Any]] = []

        for spec in specs:
            if isinstance(spec, ConnectorSpec):
                source = keys.get(spec.from_key or "")
                target = keys.get(spec.to_key or "")
                if source is None or target is None:
                    errors.append({
                        "item": "connector",
                        "error": f"Connector keys not found: {spec.from_key} -> {spec.to_key}",
                    })
                    continue
                result = await self._create({
                    "type": "connector",
                    "from_id": source,
                    "to_id": target,
                    "style": spec.style,
                    "color": spec.color,
                })
            else:
                result = await self._create(spec.model_dump(exclude_none=True, exclude={"key"}))
                if spec.key:
                    keys[spec.key] = result["object_id"]
            created.append({k: result[k] for k in ("object_id", "label", "type")})

        return created

    # --- search_templates ---

    async def _search_templates(self, tool_input: dict[str, Any]) -> dict[str, Any]:
        query = tool_input.get("query")
        if not query:
            raise ValueError("search_templates needs a query.")
        if self.client is None:
            raise RuntimeError("Template search is unavailable: no completion client configured")
        text = await search_templates(
            query, self.client, trace_context=self.trace_context, on_stream=self.on_stream
        )
        return {"ok": True, "results": text, "templates": parse_search_results(text)}

    _handlers = {
        ToolName.CREATE_OBJECT: _create,
        ToolName.UPDATE_OBJECT: _update,
        ToolName.DELETE_OBJECT: _delete,
        ToolName.GET_BOARD_STATE: _get_board_state,
        ToolName.FIT_FRAME_TO_OBJECTS: _fit_frame,
        ToolName.LAYOUT_OBJECTS: _layout,
        ToolName.APPLY_TEMPLATE: _apply_template,
        ToolName.SEARCH_TEMPLATES: _search_templates,
    }
