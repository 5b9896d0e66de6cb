"""Change events broadcast by write-path operations."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Dict

from folderbridge.infrastructure.time_utils import utc_now


class ChangeKind(str, Enum):
    """Types of filesystem changes."""

    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"


@dataclass(frozen=True)
class ChangeEvent:
    """One change to a virtual path. Ephemeral, never persisted."""

    kind: ChangeKind
    path: str
    timestamp: datetime = field(default_factory=utc_now)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "type": self.kind.value,
            "path": self.path,
            "timestamp": self.timestamp.isoformat(),
        }
