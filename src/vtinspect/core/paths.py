"""Path utilities for gating which files may be opened as tile stores."""

from __future__ import annotations

from pathlib import Path
from urllib.parse import unquote, urlparse

from vtinspect.config import TILE_STORE_EXTENSIONS

from .errors import UnsupportedPathError


def to_local_path(value: str | Path) -> Path:
    """Convert a path-or-URL into a local filesystem ``Path``.

    ``file:///...`` URLs are converted to native paths; plain paths are
    returned unchanged.
    """
    if isinstance(value, Path):
        return value

    text = str(value).strip()
    if not text:
        return Path()

    parsed = urlparse(text)
    if parsed.scheme == "file":
        return Path(unquote(parsed.path))

    return Path(text)


def is_tile_store_path(path: str | Path) -> bool:
    """Check if a path carries a supported tile store extension."""
    return to_local_path(path).suffix.lower() in TILE_STORE_EXTENSIONS


def ensure_tile_store_path(path: str | Path) -> Path:
    """Return ``path`` as a ``Path`` if it names a tile store.

    Raises:
        UnsupportedPathError: If the extension is not a tile store extension
    """
    local = to_local_path(path)
    if not is_tile_store_path(local):
        supported = ", ".join(sorted(TILE_STORE_EXTENSIONS))
        raise UnsupportedPathError(
            f"Only {supported} paths are supported, got: {local}"
        )
    return local
