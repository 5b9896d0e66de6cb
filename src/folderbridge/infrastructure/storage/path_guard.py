"""Path guardrails for the local state directory."""

from __future__ import annotations

import os
from pathlib import Path


class InvalidStatePathError(ValueError):
    """Raised when a path escapes the configured state root."""


def normalize_path(path: str | Path) -> Path:
    raw = str(path or "").strip()
    if not raw:
        raise InvalidStatePathError("path is required")
    expanded = os.path.expandvars(os.path.expanduser(raw))
    return Path(expanded).resolve(strict=False)


def ensure_within_root(root: str | Path, path: str | Path) -> Path:
    """Ensure `path` is under `root` (inclusive)."""
    root_path = normalize_path(root)
    candidate = normalize_path(path)

    try:
        common = os.path.commonpath([str(root_path), str(candidate)])
    except ValueError as exc:
        raise InvalidStatePathError(str(exc)) from exc

    if common != str(root_path):
        raise InvalidStatePathError(f"path escapes root: {candidate}")
    return candidate


def safe_join(root: str | Path, *parts: str) -> Path:
    base = normalize_path(root)
    candidate = (base.joinpath(*parts)).resolve(strict=False)
    return ensure_within_root(base, candidate)
