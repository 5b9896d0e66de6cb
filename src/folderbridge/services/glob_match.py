"""Glob pattern compilation.

Patterns are matched against folder-relative, slash-separated paths:
- ``*``       any run of characters except ``/``
- ``**``      any run including ``/`` (as a whole segment, also zero segments)
- ``?``       one character except ``/``
- ``[abc]``   character class, ``[!abc]`` negated
- ``{a,b}``   alternatives
- ``\\x``     literal ``x``

Wildcards skip dot-files and dot-directories: ``**/*`` does not match
``.env`` or ``.git/config``, while ``.env`` and ``.git/**`` do.
"""

from __future__ import annotations

import functools
import re
from typing import List

from folderbridge.domain.errors import PatternError


def _find_closing(pattern: str, start: int, opener: str, closer: str) -> int:
    """Index of the closer matching ``pattern[start]``, or -1."""
    depth = 0
    i = start
    while i < len(pattern):
        c = pattern[i]
        if c == "\\":
            i += 2
            continue
        if c == opener:
            depth += 1
        elif c == closer:
            depth -= 1
            if depth == 0:
                return i
        i += 1
    return -1


def _split_alternatives(body: str) -> List[str]:
    """Split a brace body on top-level commas."""
    parts: List[str] = []
    depth = 0
    current: List[str] = []
    i = 0
    while i < len(body):
        c = body[i]
        if c == "\\" and i + 1 < len(body):
            current.append(body[i : i + 2])
            i += 2
            continue
        if c == "{":
            depth += 1
        elif c == "}":
            depth -= 1
        elif c == "," and depth == 0:
            parts.append("".join(current))
            current = []
            i += 1
            continue
        current.append(c)
        i += 1
    parts.append("".join(current))
    return parts


# Wildcards never match a segment that begins with "."; only a literal dot
# in the pattern does.
_SEGMENT = r"(?!\.)[^/]*"


def _translate(pattern: str, at_start: bool = True) -> str:
    i = 0
    n = len(pattern)
    out: List[str] = []

    while i < n:
        c = pattern[i]
        segment_start = at_start if i == 0 else pattern[i - 1] == "/"
        if c == "*":
            if i + 1 < n and pattern[i + 1] == "*":
                j = i + 2
                while j < n and pattern[j] == "*":
                    j += 1
                if segment_start and j < n and pattern[j] == "/":
                    # "**/" matches zero or more whole directories
                    out.append(f"(?:{_SEGMENT}/)*")
                    i = j + 1
                elif segment_start and j == n:
                    out.append(f"(?:{_SEGMENT}(?:/{_SEGMENT})*)?")
                    i = j
                else:
                    out.append(_SEGMENT if segment_start else "[^/]*")
                    i = j
            else:
                out.append(_SEGMENT if segment_start else "[^/]*")
                i += 1
        elif c == "?":
            out.append("[^/.]" if segment_start else "[^/]")
            i += 1
        elif c == "[":
            j = i + 1
            if j < n and pattern[j] in "!^":
                j += 1
            if j < n and pattern[j] == "]":
                j += 1
            while j < n and pattern[j] != "]":
                j += 1
            if j >= n:
                out.append("\\[")
                i += 1
            else:
                body = pattern[i + 1 : j].replace("\\", "\\\\")
                if body[:1] in ("!", "^"):
                    body = "^" + body[1:]
                out.append(f"[{body}]")
                i = j + 1
        elif c == "{":
            j = _find_closing(pattern, i, "{", "}")
            if j < 0:
                out.append("\\{")
                i += 1
            else:
                alternatives = _split_alternatives(pattern[i + 1 : j])
                out.append(
                    "(?:" + "|".join(_translate(alt, segment_start) for alt in alternatives) + ")"
                )
                i = j + 1
        elif c == "\\" and i + 1 < n:
            out.append(re.escape(pattern[i + 1]))
            i += 2
        else:
            out.append(re.escape(c))
            i += 1

    return "".join(out)


@functools.lru_cache(maxsize=256)
def compile_glob(pattern: str) -> "re.Pattern[str]":
    """Compile a glob into a regex to be used with ``fullmatch``."""
    raw = str(pattern or "").strip()
    if not raw:
        raise PatternError("Glob pattern is required", operation="glob")
    while raw.startswith("./"):
        raw = raw[2:]
    raw = raw.lstrip("/")
    try:
        return re.compile(_translate(raw), re.DOTALL)
    except re.error as exc:
        raise PatternError(f"Invalid glob pattern {pattern!r}: {exc}", operation="glob") from exc


def glob_matches(pattern: str, relative_path: str) -> bool:
    return compile_glob(pattern).fullmatch(relative_path) is not None


__all__ = ["compile_glob", "glob_matches"]
