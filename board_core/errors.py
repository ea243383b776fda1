"""Custom exceptions for the board agent."""

from typing import Any


class BoardError(Exception):
    """Base class for board agent errors."""


class ReferenceResolutionError(BoardError):
    """An object reference (identifier or label) could not be resolved."""

    def to_result(self) -> dict[str, Any]:
        """Convert to a structured tool result the agent can correct from."""
        return {"ok": False, "error": str(self)}


class ObjectNotFoundError(ReferenceResolutionError):
    """No object matches the reference by identifier or label."""

    def __init__(self, ref: str, object_count: int, type_counts: dict[str, int], role: str = "Object"):
        self.ref = ref
        self.object_count = object_count
        self.type_counts = type_counts
        super().__init__(
            f"{role} '{ref}' not found. The board has {object_count} objects; "
            f"use get_board_state to look up labels."
        )

    def to_result(self) -> dict[str, Any]:
        return {
            "ok": False,
            "error": str(self),
            "object_count": self.object_count,
            "types": self.type_counts,
        }


class AmbiguousReferenceError(ReferenceResolutionError):
    """More than one object shares the referenced label."""

    def __init__(self, ref: str, matches: list[dict[str, Any]], role: str = "Object"):
        self.ref = ref
        self.matches = matches
        super().__init__(
            f"{role} reference '{ref}' is ambiguous: Multiple objects share this label. "
            f"Retry with one of the ids."
        )

    def to_result(self) -> dict[str, Any]:
        return {"ok": False, "error": str(self), "matches": self.matches}


class TemplateSyntaxError(BoardError):
    """Template markup could not be parsed."""


class SlotFillError(BoardError):
    """Slot values were supplied for a group that has no leaves to fill or clone."""


class CompletionAPIError(BoardError):
    """The completion endpoint returned a failure that will not be retried."""

    def __init__(self, status: int, body: str):
        self.status = status
        self.body = body
        super().__init__(f"Completion API error {status}: {body}")
