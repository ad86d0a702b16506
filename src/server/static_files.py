"""Safe static-asset lookup for files shipped next to the UI index page."""

from __future__ import annotations

import mimetypes
from pathlib import Path
from typing import Optional

_TEXT_TYPES = frozenset(
    {
        "application/javascript",
        "application/json",
        "application/xml",
        "image/svg+xml",
    }
)


def resolve_static_file(ui_root: Path, request_path: str) -> Optional[Path]:
    """Resolve a request path to a file strictly inside `ui_root`."""
    root = ui_root.resolve()
    relative = (request_path or "").lstrip("/")
    if not relative:
        return None

    candidate = (root / relative).resolve()
    if root not in candidate.parents or not candidate.is_file():
        return None
    return candidate


def guess_content_type(path: Path) -> str:
    """Guess an HTTP content type, adding a UTF-8 charset for text payloads."""
    mime_type, _ = mimetypes.guess_type(str(path))
    if not mime_type:
        return "application/octet-stream"
    if mime_type.startswith("text/") or mime_type in _TEXT_TYPES:
        return f"{mime_type}; charset=utf-8"
    return mime_type


def load_static_asset(ui_root: Path, request_path: str) -> Optional[tuple[bytes, str]]:
    """Return `(body, content_type)` for a servable asset, else None."""
    path = resolve_static_file(ui_root, request_path)
    if path is None:
        return None
    try:
        body = path.read_bytes()
    except OSError:
        return None
    return body, guess_content_type(path)
