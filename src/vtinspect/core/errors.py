"""Exception hierarchy for vtinspect.

Every failure surfaced by the library derives from ``VtInspectError`` so
callers can catch one type and still tell the failing step apart.
"""

from __future__ import annotations


class VtInspectError(Exception):
    """Base class for all vtinspect errors."""


class OpenError(VtInspectError):
    """A tile store could not be opened (bad path, wrong format, permissions)."""


class UnsupportedPathError(OpenError):
    """Path rejected before opening because it is not a tile store path."""


class ReadError(VtInspectError):
    """A row could not be read while scanning a tile store."""


class CopyError(VtInspectError):
    """Duplicating a tile store failed.

    Attributes:
        step: Which part of the copy failed, e.g. ``"tile write"``
    """

    def __init__(self, step: str, message: str) -> None:
        super().__init__(f"{step} failed: {message}")
        self.step = step


class StyleParseError(VtInspectError):
    """A style document is malformed or has no ``layers`` list."""


class NoSourceLayers(StyleParseError):
    """A well-formed style document has no layer bound to a source-layer."""
