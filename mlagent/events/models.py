"""Package lifecycle event data models."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum


class EventType(Enum):
    """The request the package manager is processing."""

    INSTALL = "install"
    UNINSTALL = "uninstall"
    UPDATE = "update"
    MOVE = "move"
    CLEAR = "clear"
    RES_COPY = "res_copy"  # Internal copy phase before the package is usable
    RES_CREATE_DIR = "res_create_dir"
    RES_REMOVE = "res_remove"
    RES_UNINSTALL = "res_uninstall"


class EventState(Enum):
    """Phase of a package manager request."""

    STARTED = "started"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class PackageEvent:
    """One lifecycle notification from the package manager."""

    package_type: str
    package_id: str
    event_type: EventType
    event_state: EventState
    progress: int = 0
    error: int = 0

    def is_resource_package(self, expected: str) -> bool:
        return self.package_type.lower() == expected.lower()

    @classmethod
    def from_dict(cls, data: dict) -> PackageEvent:
        """Build an event from a replayed YAML/JSON mapping."""
        return cls(
            package_type=data["type"],
            package_id=data["package"],
            event_type=EventType(str(data["event"]).lower()),
            event_state=EventState(str(data["state"]).lower()),
            progress=int(data.get("progress", 0)),
            error=int(data.get("error", 0)),
        )

    def summary(self) -> str:
        return (
            f"type: {self.package_type}, package: {self.package_id}, "
            f"event: {self.event_type.value}, state: {self.event_state.value}"
        )
