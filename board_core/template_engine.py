"""
Template layout engine - Turns template markup into placed board objects.

Templates are small XML documents built from a fixed vocabulary:
- Leaves: sticky, text, rect, circle, embed
- Containers: grid (cols, gap), row (gap), stack (gap)
- frame (title): padding around one nested container
- connector (from, to, style, color): an edge between keyed leaves

Layout runs in two passes over a tree of template nodes:
1. Measure (bottom-up): every node's size comes from its children's sizes.
2. Place (top-down): children get deterministic offsets from their parent's
   top-left corner, and leaves/frames are emitted as center-point specs in
   document order. Connector specs are collected separately and appended last.

Slot filling and patches operate on the parsed markup before layout.
"""

import copy
import math
from dataclasses import dataclass, field
from typing import Optional, Union
from xml.etree import ElementTree
from xml.etree.ElementTree import Element

from .errors import SlotFillError, TemplateSyntaxError
from .models import ConnectorSpec, LayoutSpec, ObjectSpec
from .patch import set_text_content


ELEMENT_DEFAULTS: dict[str, tuple[float, float]] = {
    "sticky": (200, 160),
    "text": (200, 60),
    "rect": (240, 160),
    "rectangle": (240, 160),
    "circle": (200, 200),
    "embed": (400, 300),
}
FALLBACK_SIZE = (100, 100)

# left, right, top, bottom
FRAME_PADDING = (30, 30, 50, 30)

DEFAULT_GAP = 30
DEFAULT_COLS = 2

LAYOUT_TAGS = {"grid", "row", "stack"}
LEAF_TAGS = {"sticky", "text", "rect", "circle", "embed"}
TYPE_MAP = {"rect": "rectangle"}


# --- Template Nodes ---

@dataclass
class ConnectorNode:
    """An edge between two keyed leaves. Has no size."""
    from_key: Optional[str] = None
    to_key: Optional[str] = None
    style: str = "arrow"
    color: str = "#000"


@dataclass
class LeafNode:
    """An atomic element that becomes one board object."""
    kind: str
    width: float
    height: float
    text: str = ""
    color: Optional[str] = None
    key: Optional[str] = None
    font_size: Optional[float] = None


@dataclass
class ContainerNode:
    """A grid, row or stack of children."""
    kind: str
    children: list["TemplateNode"] = field(default_factory=list)
    gap: float = DEFAULT_GAP
    cols: int = DEFAULT_COLS  # grid only


@dataclass
class FrameNode:
    """A titled frame padded around a single container."""
    title: str = ""
    child: Optional[ContainerNode] = None
    connectors: list[ConnectorNode] = field(default_factory=list)


TemplateNode = Union[LeafNode, ContainerNode, FrameNode, ConnectorNode]


@dataclass
class MeasuredNode:
    """A template node with its computed size (pass 1 output)."""
    node: TemplateNode
    width: float = 0
    height: float = 0
    children: list["MeasuredNode"] = field(default_factory=list)
    cell_width: float = 0   # grid only
    cell_height: float = 0  # grid only

    @property
    def spatial(self) -> list["MeasuredNode"]:
        return [c for c in self.children if not isinstance(c.node, ConnectorNode)]

    @property
    def connectors(self) -> list["MeasuredNode"]:
        return [c for c in self.children if isinstance(c.node, ConnectorNode)]


# --- Parsing ---

def parse_template(markup: str) -> Element:
    """
    Parse template markup into an element tree.

    Raises:
        TemplateSyntaxError: If the markup is not well-formed.
    """
    try:
        return ElementTree.fromstring(markup.strip())
    except ElementTree.ParseError as e:
        raise TemplateSyntaxError(f"Invalid template markup: {e}") from e


def _number(el: Element, *names: str) -> Optional[float]:
    for name in names:
        raw = el.get(name)
        if raw is None or raw.strip() == "":
            continue
        try:
            value = float(raw)
        except ValueError:
            return None
        return value if math.isfinite(value) else None
    return None


def _leaf_size(el: Element) -> tuple[float, float]:
    default_w, default_h = ELEMENT_DEFAULTS.get(el.tag, FALLBACK_SIZE)
    width = _number(el, "width", "w")
    height = _number(el, "height", "h")
    return (
        width if width and width > 0 else default_w,
        height if height and height > 0 else default_h,
    )


def text_content(el: Element) -> str:
    """All text inside an element, like the DOM's textContent."""
    return "".join(el.itertext())


def build_tree(el: Element) -> Optional[TemplateNode]:
    """Convert parsed markup into template nodes. Unknown wrappers pass through their first child."""
    tag = el.tag

    if tag == "connector":
        return ConnectorNode(
            from_key=el.get("from"),
            to_key=el.get("to"),
            style=el.get("style") or "arrow",
            color=el.get("color") or "#000",
        )

    if tag in LEAF_TAGS:
        width, height = _leaf_size(el)
        return LeafNode(
            kind=tag,
            width=width,
            height=height,
            text=text_content(el),
            color=el.get("color") or None,
            key=el.get("key") or None,
            font_size=_number(el, "size") if tag == "text" else None,
        )

    children = [node for node in (build_tree(child) for child in el) if node is not None]

    if tag in LAYOUT_TAGS:
        gap = _number(el, "gap")
        cols = _number(el, "cols")
        return ContainerNode(
            kind=tag,
            children=children,
            gap=DEFAULT_GAP if gap is None else gap,
            cols=max(1, int(cols)) if cols is not None else DEFAULT_COLS,
        )

    if tag == "frame":
        return FrameNode(
            title=el.get("title") or "",
            child=next((c for c in children if isinstance(c, ContainerNode)), None),
            connectors=[c for c in children if isinstance(c, ConnectorNode)],
        )

    return children[0] if children else None


# --- Pass 1: Measure (bottom-up) ---

def measure(node: TemplateNode) -> MeasuredNode:
    """Compute the size of `node` from the sizes of its children."""
    if isinstance(node, ConnectorNode):
        return MeasuredNode(node=node)

    if isinstance(node, LeafNode):
        return MeasuredNode(node=node, width=node.width, height=node.height)

    if isinstance(node, FrameNode):
        left, right, top, bottom = FRAME_PADDING
        children = [measure(c) for c in node.connectors]
        inner_w = inner_h = 0.0
        if node.child is not None:
            inner = measure(node.child)
            children.insert(0, inner)
            inner_w, inner_h = inner.width, inner.height
        return MeasuredNode(
            node=node,
            width=inner_w + left + right,
            height=inner_h + top + bottom,
            children=children,
        )

    measured = MeasuredNode(node=node, children=[measure(c) for c in node.children])
    spatial = measured.spatial
    if not spatial:
        return measured

    widths = [c.width for c in spatial]
    heights = [c.height for c in spatial]
    gaps = (len(spatial) - 1) * node.gap

    if node.kind == "grid":
        rows = math.ceil(len(spatial) / node.cols)
        measured.cell_width = max(widths)
        measured.cell_height = max(heights)
        measured.width = node.cols * measured.cell_width + (node.cols - 1) * node.gap
        measured.height = rows * measured.cell_height + (rows - 1) * node.gap
    elif node.kind == "row":
        measured.width = sum(widths) + gaps
        measured.height = max(heights)
    else:
        measured.width = max(widths)
        measured.height = sum(heights) + gaps

    return measured


# --- Pass 2: Place (top-down) ---

def _place(
    measured: MeasuredNode,
    left: float,
    top: float,
    results: list[LayoutSpec],
    connectors: list[ConnectorSpec]
) -> None:
    node = measured.node

    if isinstance(node, ConnectorNode):
        connectors.append(ConnectorSpec(
            from_key=node.from_key, to_key=node.to_key, style=node.style, color=node.color
        ))
        return

    if isinstance(node, LeafNode):
        results.append(ObjectSpec(
            type=TYPE_MAP.get(node.kind, node.kind),
            x=left + measured.width / 2,
            y=top + measured.height / 2,
            width=measured.width,
            height=measured.height,
            text=node.text,
            color=node.color,
            key=node.key,
            font_size=node.font_size,
        ))
        return

    if isinstance(node, FrameNode):
        results.append(ObjectSpec(
            type="frame",
            x=left + measured.width / 2,
            y=top + measured.height / 2,
            width=measured.width,
            height=measured.height,
            title=node.title,
        ))
        pad_left, _, pad_top, _ = FRAME_PADDING
        for child in measured.spatial:
            _place(child, left + pad_left, top + pad_top, results, connectors)
    elif node.kind == "grid":
        for idx, child in enumerate(measured.spatial):
            row, col = divmod(idx, node.cols)
            _place(
                child,
                left + col * (measured.cell_width + node.gap),
                top + row * (measured.cell_height + node.gap),
                results,
                connectors,
            )
    elif node.kind == "row":
        x = left
        for child in measured.spatial:
            _place(child, x, top, results, connectors)
            x += child.width + node.gap
    else:
        y = top
        for child in measured.spatial:
            _place(child, left, y, results, connectors)
            y += child.height + node.gap

    for child in measured.connectors:
        _place(child, 0, 0, results, connectors)


def layout_tree(node: Optional[TemplateNode], origin_x: float = 0, origin_y: float = 0) -> list[LayoutSpec]:
    """Measure and place a template tree centered on (origin_x, origin_y)."""
    if node is None:
        return []
    measured = measure(node)
    results: list[LayoutSpec] = []
    connectors: list[ConnectorSpec] = []
    _place(
        measured,
        origin_x - measured.width / 2,
        origin_y - measured.height / 2,
        results,
        connectors,
    )
    return results + connectors


def layout_template(root: Element, origin_x: float = 0, origin_y: float = 0) -> list[LayoutSpec]:
    """
    Lay out parsed template markup centered on (origin_x, origin_y).

    Returns object specs in document order (frames before their contents),
    followed by all connector specs.
    """
    return layout_tree(build_tree(root), origin_x, origin_y)


def measure_template(root: Element) -> tuple[float, float]:
    """Get the (width, height) the template will occupy."""
    node = build_tree(root)
    if node is None:
        return (0, 0)
    measured = measure(node)
    return (measured.width, measured.height)


# --- Slot Filling ---

def _spatial_children(el: Element) -> list[Element]:
    return [child for child in el if child.tag != "connector"]


def _collect_leaves(el: Element, found: list[tuple[Element, Element]]) -> None:
    """Depth-first (leaf, parent) pairs below `el`, descending only into containers."""
    for child in el:
        if child.tag in LEAF_TAGS:
            found.append((child, el))
        elif child.tag in LAYOUT_TAGS:
            _collect_leaves(child, found)


def fill_slots(root: Element, slots: list[list[str]]) -> Element:
    """
    Fill a template's placeholder leaves with slot values, in place.

    Each value group fills one top-level group of the template's container:
    a leaf group takes the first value; a container group has its leaves
    filled positionally, cloning the last leaf when there are more values
    than leaves.

    Raises:
        SlotFillError: If values are supplied for a container group with no leaves.
    """
    if root.tag == "frame":
        container = next((c for c in _spatial_children(root) if c.tag in LAYOUT_TAGS), None)
    elif root.tag in LAYOUT_TAGS:
        container = root
    else:
        return root
    if container is None:
        return root

    for values, group in zip(slots, _spatial_children(container)):
        if group.tag in LEAF_TAGS:
            if values:
                set_text_content(group, values[0])
        elif group.tag in LAYOUT_TAGS:
            leaves: list[tuple[Element, Element]] = []
            _collect_leaves(group, leaves)
            for j, value in enumerate(values):
                if j < len(leaves):
                    set_text_content(leaves[j][0], value)
                    continue
                if not leaves:
                    raise SlotFillError(
                        f"Cannot fill <{group.tag}> group: it has no leaves to clone"
                    )
                last, parent = leaves[-1]
                clone = copy.deepcopy(last)
                clone.tail = None
                set_text_content(clone, value)
                parent.append(clone)
                leaves.append((clone, parent))

    return root


def set_frame_title(root: Element, title: str) -> None:
    """Retitle a template whose root is a frame."""
    if root.tag == "frame":
        root.set("title", title)
