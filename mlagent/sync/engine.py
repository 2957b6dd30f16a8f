"""Registry sync engine: apply manifest entries to the registry store.

Every entry is applied on its own. A bad or conflicting entry is logged and
skipped, and the rest of the manifest still lands in the registry; nothing
already registered in the same pass is rolled back.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path

from mlagent.errors import ManifestEntryError, RegistryError
from mlagent.manifest.entries import (
    ManifestEntry,
    ModelEntry,
    PipelineEntry,
    ResourceEntry,
    parse_entry,
)
from mlagent.manifest.reader import ManifestKind, manifest_path, read_manifest
from mlagent.registry.store import RegistryStore

logger = logging.getLogger(__name__)


@dataclass
class KindReport:
    """Outcome of syncing one manifest kind."""

    registered: int = 0
    skipped: int = 0  # Non-object records or records missing required fields
    failed: int = 0  # Records the store rejected


@dataclass
class SyncReport:
    """Outcome of one ingestion pass over a resource directory."""

    directory: str = ""
    kinds: dict[ManifestKind, KindReport] = field(
        default_factory=lambda: {kind: KindReport() for kind in ManifestKind}
    )
    model_versions: dict[str, list[int]] = field(default_factory=dict)

    @property
    def registered(self) -> int:
        return sum(r.registered for r in self.kinds.values())

    @property
    def skipped(self) -> int:
        return sum(r.skipped for r in self.kinds.values())

    @property
    def failed(self) -> int:
        return sum(r.failed for r in self.kinds.values())

    def summary(self) -> str:
        return (
            f"{self.registered} registered, {self.skipped} skipped, "
            f"{self.failed} failed in {self.directory}"
        )


class RegistrySync:
    """Applies per-kind upsert/delete policy against a registry store."""

    def __init__(self, registry: RegistryStore):
        self.registry = registry

    def sync_directory(self, directory: str | Path, app_info: str = "") -> SyncReport:
        """Ingest every manifest kind found in ``directory``, in a fixed order."""
        report = SyncReport(directory=str(directory))
        for kind in ManifestKind:
            self.sync_kind(directory, kind, app_info, report)
        logger.info("Sync finished: %s", report.summary())
        return report

    def sync_kind(
        self,
        directory: str | Path,
        kind: ManifestKind,
        app_info: str = "",
        report: SyncReport | None = None,
    ) -> SyncReport:
        report = report or SyncReport(directory=str(directory))
        kind_report = report.kinds[kind]
        source = manifest_path(directory, kind)

        for record in read_manifest(directory, kind):
            try:
                entry = parse_entry(kind, record)
            except ManifestEntryError as e:
                logger.error("Skipped invalid entry in json file '%s': %s", source, e)
                kind_report.skipped += 1
                continue

            if self.apply(entry, app_info, report):
                kind_report.registered += 1
            else:
                kind_report.failed += 1

        return report

    def apply(self, entry: ManifestEntry, app_info: str = "", report: SyncReport | None = None) -> bool:
        """Write one entry to the registry. Returns False if the store rejected it."""
        if isinstance(entry, ModelEntry):
            return self._apply_model(entry, app_info, report)
        if isinstance(entry, PipelineEntry):
            return self._apply_pipeline(entry)
        if isinstance(entry, ResourceEntry):
            return self._apply_resource(entry, app_info)
        raise TypeError(f"Unknown manifest entry type: {type(entry).__name__}")

    def _apply_model(self, entry: ModelEntry, app_info: str, report: SyncReport | None) -> bool:
        if entry.clear:
            # Cleanup is advisory: a failed delete never blocks the add.
            try:
                self.registry.model_delete(entry.name, 0)
            except RegistryError as e:
                logger.debug("Ignoring failure to clear model '%s': %s", entry.name, e)

        try:
            version = self.registry.model_add(
                entry.name, entry.model, entry.activate, entry.description, app_info
            )
        except RegistryError as e:
            logger.error("Failed to register the model with name '%s': %s", entry.name, e)
            return False

        logger.info("The model with name '%s' is registered as version '%d'.", entry.name, version)
        if report is not None:
            report.model_versions.setdefault(entry.name, []).append(version)
        return True

    def _apply_pipeline(self, entry: PipelineEntry) -> bool:
        try:
            self.registry.pipeline_set(entry.name, entry.description)
        except RegistryError as e:
            logger.error("Failed to register pipeline with name '%s': %s", entry.name, e)
            return False

        logger.info("The pipeline description with name '%s' is registered.", entry.name)
        return True

    def _apply_resource(self, entry: ResourceEntry, app_info: str) -> bool:
        if entry.clear:
            try:
                self.registry.resource_delete(entry.name)
            except RegistryError as e:
                logger.debug("Ignoring failure to clear resource '%s': %s", entry.name, e)

        try:
            self.registry.resource_add(entry.name, entry.path, entry.description, app_info)
        except RegistryError as e:
            logger.error("Failed to register the resource with name '%s': %s", entry.name, e)
            return False

        logger.info("The resource with name '%s' is registered.", entry.name)
        return True
