"""
Template DSL - Line-oriented shorthand for instantiating and patching templates.

Grammar:
    line  = apply | patch
    apply = NAME TITLE? (';' SLOT)*
    patch = '@' PATH VALUE
    SLOT  = VALUE ('|' VALUE)*

Example:
    swot "Q3 Review" ; Fast shipping ; Small team ; New market ; Competitors
    @sticky[2]/@color #FF0000

The parser never raises: every non-blank line yields exactly one record,
however malformed it is.
"""

from dataclasses import dataclass, field
from typing import Optional, Union


@dataclass
class ApplyOp:
    """Instantiate the named template, optionally retitled and slot-filled."""
    name: str
    title: Optional[str] = None
    slots: list[list[str]] = field(default_factory=list)
    type: str = "apply"


@dataclass
class PatchOp:
    """Override the text or an attribute addressed by `path`."""
    path: str
    value: str = ""
    type: str = "patch"


DslOperation = Union[ApplyOp, PatchOp]


def parse_dsl(text: str) -> list[DslOperation]:
    """Parse DSL text into one operation per non-blank line."""
    results: list[DslOperation] = []
    for raw in text.split("\n"):
        line = raw.strip()
        if not line:
            continue
        if line.startswith("@"):
            results.append(_parse_patch(line))
        else:
            results.append(_parse_apply(line))
    return results


def _parse_patch(line: str) -> PatchOp:
    body = line[1:]
    path, sep, value = body.partition(" ")
    if not sep:
        return PatchOp(path=body)
    return PatchOp(path=path, value=value.strip())


def _parse_apply(line: str) -> ApplyOp:
    name = line.split(None, 1)[0]
    rest = line[len(name):].strip()

    # A title without its closing quote is left in `rest` and ends up in the slots.
    title = None
    if rest.startswith('"'):
        close = rest.find('"', 1)
        if close != -1:
            title = rest[1:close]
            rest = rest[close + 1:].strip()

    slots = []
    for part in rest.split(";"):
        piece = part.strip()
        if not piece:
            continue
        slots.append([value.strip() for value in piece.split("|")])

    return ApplyOp(name=name, title=title, slots=slots)
