"""Event filter and dispatcher for resource package lifecycle events.

Events arrive one at a time on the caller's thread. Each is filtered by
package type, mapped through ``TRANSITIONS`` to an action, and handled to
completion before the callback returns. No failure escapes to the platform.
"""

from __future__ import annotations

import logging
from enum import Enum
from pathlib import Path
from typing import Optional

from mlagent.config import AgentConfig
from mlagent.errors import PackageManagerError, ProvenanceError
from mlagent.events.models import EventState, EventType, PackageEvent
from mlagent.events.platform import PackageManager
from mlagent.registry.store import RegistryStore
from mlagent.sync.engine import RegistrySync, SyncReport
from mlagent.sync.provenance import build_app_descriptor

logger = logging.getLogger(__name__)


class EventAction(Enum):
    """What the dispatcher does for a (type, state) pair."""

    INGEST = "ingest"  # Parse manifests and sync the registry
    INSPECT = "inspect"  # Log the package's resource directory
    NOT_IMPLEMENTED = "not_implemented"  # Known transition without a policy yet
    IGNORE = "ignore"


TRANSITIONS: dict[tuple[EventType, EventState], EventAction] = {
    (EventType.INSTALL, EventState.COMPLETED): EventAction.INGEST,
    (EventType.UNINSTALL, EventState.STARTED): EventAction.INSPECT,
    # TODO: re-sync the registry from the updated manifests once a versioning policy exists
    (EventType.UPDATE, EventState.COMPLETED): EventAction.INSPECT,
    # TODO: invalidate the package's models, pipelines and resources
    (EventType.UNINSTALL, EventState.COMPLETED): EventAction.NOT_IMPLEMENTED,
}


def resolve_action(event: PackageEvent) -> EventAction:
    return TRANSITIONS.get((event.event_type, event.event_state), EventAction.IGNORE)


class PackageEventDispatcher:
    """Routes package manager events into the registry ingestion pipeline."""

    def __init__(
        self,
        package_manager: PackageManager,
        registry: RegistryStore,
        config: Optional[AgentConfig] = None,
    ):
        self.package_manager = package_manager
        self.config = config or AgentConfig()
        self.sync = RegistrySync(registry)
        self.last_report: Optional[SyncReport] = None

    def start(self) -> None:
        """Create the platform handle and subscribe to its events.

        Raises:
            PackageManagerError: If the handle cannot be set up
        """
        self.package_manager.create()
        self.package_manager.set_event_callback(self.handle_event)
        logger.info("Monitoring '%s' package events", self.config.package_type)

    def stop(self) -> None:
        self.package_manager.destroy()

    def resource_dir(self, package_id: str) -> Path:
        return Path(self.config.app_root) / package_id / "res" / self.config.resource_scope

    def handle_event(self, event: PackageEvent) -> Optional[EventAction]:
        """Handle one lifecycle event.

        Returns the action taken, or None if the event was filtered out.
        Never raises.
        """
        logger.debug("Package event: %s", event.summary())

        if not event.is_resource_package(self.config.package_type):
            return None

        if event.event_type == EventType.RES_COPY:
            logger.info("Resource package copy is being started for %s", event.package_id)
            return None

        action = resolve_action(event)
        try:
            self._dispatch(action, event)
        except Exception:
            logger.exception("Unexpected failure while handling %s", event.summary())
        return action

    def _dispatch(self, action: EventAction, event: PackageEvent) -> None:
        if action == EventAction.INGEST:
            self.ingest(event.package_id)
        elif action == EventAction.INSPECT:
            if event.event_type == EventType.UPDATE:
                logger.info("Resource package %s is updated, registry not re-synced", event.package_id)
            else:
                logger.info("Resource package %s is being uninstalled", event.package_id)
            self.inspect(event.package_id)
        elif action == EventAction.NOT_IMPLEMENTED:
            logger.warning(
                "No registry policy for %s/%s of %s yet, registry left unchanged",
                event.event_type.value,
                event.event_state.value,
                event.package_id,
            )

    def ingest(self, package_id: str) -> Optional[SyncReport]:
        """Sync the registry from an installed package's manifests.

        Returns None if the package metadata could not be obtained or is unusable.
        """
        if not _is_safe_path_part(package_id):
            logger.error("Invalid package id '%s', ingestion aborted", package_id)
            return None

        try:
            descriptor = build_app_descriptor(package_id, self.package_manager)
        except (PackageManagerError, ProvenanceError) as e:
            logger.error("Failed to get resource info of package '%s': %s", package_id, e)
            return None

        logger.info(
            "Resource package %s is installed. res_type: %s, res_version: %s",
            package_id,
            descriptor.res_type,
            descriptor.res_version,
        )

        if not _is_safe_path_part(descriptor.res_type):
            logger.error(
                "Invalid res_type '%s' of package '%s', ingestion aborted",
                descriptor.res_type,
                package_id,
            )
            return None

        json_dir = self.resource_dir(package_id) / descriptor.res_type
        self.last_report = self.sync.sync_directory(json_dir, descriptor.to_json())
        return self.last_report

    def inspect(self, package_id: str) -> list[str]:
        """Log and return the file names in a package's resource directory."""
        if not _is_safe_path_part(package_id):
            return []

        pkg_path = self.resource_dir(package_id)
        if not pkg_path.is_dir():
            return []

        logger.info("Package path: %s", pkg_path)
        names = sorted(p.name for p in pkg_path.iterdir())
        for name in names:
            logger.info("- file: %s", name)
        return names


def _is_safe_path_part(value: str) -> bool:
    """True if ``value`` names exactly one directory level."""
    return bool(value) and value not in (".", "..") and "/" not in value
