"""Text and JSON file utilities."""

from __future__ import annotations

import json
import os
from typing import Any, Optional


def _fsync_enabled() -> bool:
    """Check if fsync is enabled for atomic writes."""
    value = os.environ.get("FOLDERBRIDGE_IO_FSYNC", "strict").strip().lower()
    return value not in ("0", "false", "no", "off", "relaxed", "skip", "disabled")


def ensure_parent_dir(path: str) -> None:
    """Ensure parent directory exists."""
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def write_text_atomic(path: str, text: str) -> None:
    """Write text file atomically using temp file and replace."""
    if not path:
        return
    ensure_parent_dir(path)
    tmp_path = f"{path}.tmp"
    with open(tmp_path, "w", encoding="utf-8") as handle:
        handle.write(text or "")
        handle.flush()
        if _fsync_enabled():
            os.fsync(handle.fileno())
    os.replace(tmp_path, path)


def write_json_atomic(path: str, data: Any) -> None:
    """Write JSON file atomically."""
    payload = json.dumps(data, ensure_ascii=False, indent=2)
    write_text_atomic(path, payload + "\n")


def read_json_safe(path: str) -> Optional[Any]:
    """Safely read JSON file, returning None when missing or malformed."""
    if not path or not os.path.isfile(path):
        return None
    try:
        with open(path, "r", encoding="utf-8") as handle:
            return json.load(handle)
    except Exception:
        return None


def decode_text_bytes(data: bytes) -> str:
    """Decode file content as text.

    UTF-8 (with or without BOM) only. Raises ``UnicodeDecodeError`` for
    content that is not text, so callers can skip binary files.
    """
    if not data:
        return ""
    if b"\x00" in data:
        raise UnicodeDecodeError("utf-8", data, data.index(b"\x00"), data.index(b"\x00") + 1, "NUL byte in content")
    if data.startswith(b"\xef\xbb\xbf"):
        return data.decode("utf-8-sig")
    return data.decode("utf-8")
