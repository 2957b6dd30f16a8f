"""Platform package manager interface.

The dispatcher owns one package manager handle for its whole lifetime:
it is created on startup, receives the event callback, answers metadata
queries, and is destroyed on shutdown. Tests and the CLI use the in-process
``LocalPackageManager``.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Callable, Optional

from mlagent.errors import PackageManagerError
from mlagent.events.models import PackageEvent

logger = logging.getLogger(__name__)

EventCallback = Callable[[PackageEvent], None]

ERROR_INVALID_STATE = "INVALID_STATE"
ERROR_NO_SUCH_PACKAGE = "NO_SUCH_PACKAGE"


@dataclass
class PackageInfo:
    """Resource metadata the platform reports for an installed package."""

    res_type: str
    res_version: str


class PackageManager(ABC):
    """Abstract handle to the platform package manager.

    Real implementations bind to the platform's package service. Fake
    implementations are pure in-memory for unit tests.
    """

    @abstractmethod
    def create(self) -> None:
        """Acquire the platform handle.

        Raises:
            PackageManagerError: If the handle cannot be created
        """
        ...

    @abstractmethod
    def destroy(self) -> None:
        """Release the platform handle. Safe to call more than once."""
        ...

    @abstractmethod
    def set_event_callback(self, callback: EventCallback) -> None:
        """Register the single callback receiving lifecycle events."""
        ...

    @abstractmethod
    def get_package_info(self, package_id: str) -> PackageInfo:
        """Return resource type and version for ``package_id``.

        Raises:
            PackageManagerError: If the package is unknown or the query fails
        """
        ...


class LocalPackageManager(PackageManager):
    """In-process package manager driven by explicit ``emit`` calls.

    Metadata is served from a static mapping of package id to
    ``{"res_type": ..., "res_version": ...}``.
    """

    def __init__(self, packages: Optional[dict[str, dict]] = None):
        self._packages = dict(packages or {})
        self._callback: Optional[EventCallback] = None
        self._created = False

    @property
    def is_created(self) -> bool:
        return self._created

    def create(self) -> None:
        self._created = True

    def destroy(self) -> None:
        self._created = False
        self._callback = None

    def set_event_callback(self, callback: EventCallback) -> None:
        if not self._created:
            raise PackageManagerError(ERROR_INVALID_STATE, "handle is not created")
        self._callback = callback

    def register_package(self, package_id: str, res_type: str, res_version: str) -> None:
        self._packages[package_id] = {"res_type": res_type, "res_version": res_version}

    def get_package_info(self, package_id: str) -> PackageInfo:
        data = self._packages.get(package_id)
        if data is None:
            raise PackageManagerError(ERROR_NO_SUCH_PACKAGE, f"unknown package '{package_id}'")
        if not data.get("res_type"):
            raise PackageManagerError(ERROR_NO_SUCH_PACKAGE, f"package '{package_id}' has no res_type")
        return PackageInfo(
            res_type=str(data.get("res_type", "")),
            res_version=str(data.get("res_version", "")),
        )

    def emit(self, event: PackageEvent) -> None:
        """Deliver one event to the registered callback, synchronously."""
        if not self._created:
            raise PackageManagerError(ERROR_INVALID_STATE, "handle is not created")
        if self._callback is None:
            logger.debug("No event callback registered, dropping %s", event.summary())
            return
        self._callback(event)
