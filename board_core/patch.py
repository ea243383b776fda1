"""
Template patches - Path-addressed text and attribute overrides.

Path syntax:
    seg(/seg)*[/@attrName]      seg = tagName | tagName[N]   (N is 1-indexed, default 1)

The first segment searches every element of the tree, root included, in
document order. Later segments only look at direct children of the element
matched so far. A trailing /@attr targets that attribute; otherwise the
element's text content is replaced.

Paths that do not resolve are skipped silently and leave the tree unchanged.
"""

import re
from dataclasses import dataclass
from typing import Iterable, Optional, Union
from xml.etree.ElementTree import Element

from .dsl import PatchOp

_ATTR_SUFFIX = re.compile(r"/@([^/]+)$")
_SEGMENT = re.compile(r"^([^\[]+)(?:\[(\d+)\])?$")


@dataclass
class PatchTarget:
    """The element a path resolved to, plus the attribute to set (None = text)."""
    element: Element
    attr: Optional[str] = None


def _parse_segment(segment: str) -> tuple[str, int]:
    match = _SEGMENT.match(segment)
    if match is None:
        return segment, 1
    return match.group(1), int(match.group(2)) if match.group(2) else 1


def resolve_path(root: Element, path: str) -> Optional[PatchTarget]:
    """Resolve `path` against the tree rooted at `root`, or None if it doesn't resolve."""
    attr = None
    elem_path = path
    suffix = _ATTR_SUFFIX.search(path)
    if suffix:
        attr = suffix.group(1)
        elem_path = path[:suffix.start()]

    current: Optional[Element] = None
    for i, segment in enumerate(elem_path.split("/")):
        tag, index = _parse_segment(segment)
        if index < 1:
            return None
        if i == 0:
            candidates = [el for el in root.iter() if el.tag == tag]
        else:
            candidates = [child for child in current if child.tag == tag]
        if index > len(candidates):
            return None
        current = candidates[index - 1]

    if current is None:
        return None
    return PatchTarget(element=current, attr=attr)


def set_text_content(element: Element, value: str) -> None:
    """Replace everything inside `element` with plain text."""
    for child in list(element):
        element.remove(child)
    element.text = value


def apply_patch(root: Element, path: str, value: str) -> bool:
    """Apply a single patch. Returns False when the path didn't resolve."""
    target = resolve_path(root, path)
    if target is None:
        return False
    if target.attr is not None:
        target.element.set(target.attr, value)
    else:
        set_text_content(target.element, value)
    return True


def apply_patches(
    root: Element,
    patches: Iterable[Union[PatchOp, tuple[str, str]]]
) -> Element:
    """Apply patches in order. Unresolvable ones are skipped. Returns `root`."""
    for patch in patches:
        if isinstance(patch, PatchOp):
            apply_patch(root, patch.path, patch.value)
        else:
            apply_patch(root, *patch)
    return root
