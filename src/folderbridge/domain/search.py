"""Search result models."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Dict


@dataclass(frozen=True)
class GrepMatch:
    """One regex match occurrence inside a file."""

    path: str
    line_number: int  # 1-based
    line: str
    column: int  # 0-based

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)
