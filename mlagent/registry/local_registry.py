"""Local file-based registry implementation.

A simple, file-system-backed registry for a single device.
Stores every model, pipeline and resource record as JSON in one index file.
"""

from __future__ import annotations

import copy
import json
import logging
from contextlib import contextmanager
from pathlib import Path

from mlagent.errors import RegistryError, RegistryNotFoundError
from mlagent.registry.models import ModelRecord, PipelineRecord, ResourceRecord
from mlagent.registry.store import RegistryStore

logger = logging.getLogger(__name__)


class LocalRegistry(RegistryStore):
    """File-based local registry for ML service assets."""

    INDEX_FILE = "registry.json"

    def __init__(self, registry_dir: str | Path):
        self.registry_dir = Path(registry_dir)
        self.registry_dir.mkdir(parents=True, exist_ok=True)
        self.index_path = self.registry_dir / self.INDEX_FILE
        self._index: dict[str, dict] = self._load_index()

    # ── Models ───────────────────────────────────────────────────────

    def model_add(
        self,
        name: str,
        path: str,
        active: bool,
        description: str,
        app_info: str,
    ) -> int:
        """Register a new model version.

        Versions come from a per-name counter that survives deletion, so a
        name never reuses a version number. Adding an active version
        deactivates every other version of the same name.
        """
        _require(name, "model name")
        _require(path, "model path")

        with self._transaction() as index:
            slot = index["models"].setdefault(name, {"next_version": 1, "versions": {}})
            version = slot["next_version"]
            slot["next_version"] = version + 1

            if active:
                for data in slot["versions"].values():
                    data["active"] = False

            record = ModelRecord(
                name=name,
                version=version,
                path=path,
                active=active,
                description=description,
                app_info=app_info,
            )
            slot["versions"][str(version)] = _model_to_dict(record)

        return version

    def model_delete(self, name: str, version: int = 0) -> None:
        _require(name, "model name")
        slot = self._index["models"].get(name)
        if not slot or not slot["versions"]:
            raise RegistryNotFoundError(f"No model named '{name}'")

        if version != 0 and str(version) not in slot["versions"]:
            raise RegistryNotFoundError(f"No model '{name}' with version {version}")

        with self._transaction() as index:
            versions = index["models"][name]["versions"]
            if version == 0:
                versions.clear()
            else:
                del versions[str(version)]

    def model_activate(self, name: str, version: int) -> None:
        """Mark one version active and the others inactive."""
        slot = self._index["models"].get(name)
        if not slot or str(version) not in slot["versions"]:
            raise RegistryNotFoundError(f"No model '{name}' with version {version}")

        with self._transaction() as index:
            for key, data in index["models"][name]["versions"].items():
                data["active"] = key == str(version)

    def model_get(self, name: str, version: int) -> ModelRecord:
        slot = self._index["models"].get(name, {})
        data = slot.get("versions", {}).get(str(version))
        if not data:
            raise RegistryNotFoundError(f"No model '{name}' with version {version}")
        return _dict_to_model(data)

    def model_get_active(self, name: str) -> ModelRecord:
        slot = self._index["models"].get(name, {})
        for data in slot.get("versions", {}).values():
            if data.get("active"):
                return _dict_to_model(data)
        raise RegistryNotFoundError(f"No active version of model '{name}'")

    def model_list(self) -> list[ModelRecord]:
        records = [
            _dict_to_model(data)
            for slot in self._index["models"].values()
            for data in slot["versions"].values()
        ]
        return sorted(records, key=lambda r: (r.name, r.version))

    # ── Pipelines ────────────────────────────────────────────────────

    def pipeline_set(self, name: str, description: str) -> None:
        _require(name, "pipeline name")
        with self._transaction() as index:
            index["pipelines"][name] = description

    def pipeline_get(self, name: str) -> PipelineRecord:
        description = self._index["pipelines"].get(name)
        if description is None:
            raise RegistryNotFoundError(f"No pipeline named '{name}'")
        return PipelineRecord(name=name, description=description)

    def pipeline_delete(self, name: str) -> None:
        if name not in self._index["pipelines"]:
            raise RegistryNotFoundError(f"No pipeline named '{name}'")
        with self._transaction() as index:
            del index["pipelines"][name]

    def pipeline_list(self) -> list[PipelineRecord]:
        return [
            PipelineRecord(name=name, description=description)
            for name, description in sorted(self._index["pipelines"].items())
        ]

    # ── Resources ────────────────────────────────────────────────────

    def resource_add(self, name: str, path: str, description: str, app_info: str) -> None:
        _require(name, "resource name")
        _require(path, "resource path")
        record = ResourceRecord(name=name, path=path, description=description, app_info=app_info)
        with self._transaction() as index:
            index["resources"][name] = _resource_to_dict(record)

    def resource_get(self, name: str) -> ResourceRecord:
        data = self._index["resources"].get(name)
        if not data:
            raise RegistryNotFoundError(f"No resource named '{name}'")
        return _dict_to_resource(data)

    def resource_delete(self, name: str) -> None:
        if name not in self._index["resources"]:
            raise RegistryNotFoundError(f"No resource named '{name}'")
        with self._transaction() as index:
            del index["resources"][name]

    def resource_list(self) -> list[ResourceRecord]:
        return [_dict_to_resource(d) for _, d in sorted(self._index["resources"].items())]

    # ── Persistence ──────────────────────────────────────────────────

    @contextmanager
    def _transaction(self):
        """Apply changes to the index and persist them, or leave it untouched.

        If the index cannot be written, the in-memory index is restored so it
        never holds records that are not on disk.
        """
        snapshot = copy.deepcopy(self._index)
        try:
            yield self._index
            self._save_index()
        except RegistryError:
            self._index = snapshot
            raise

    def _load_index(self) -> dict[str, dict]:
        index: dict[str, dict] = {"models": {}, "pipelines": {}, "resources": {}}
        if self.index_path.exists():
            try:
                with open(self.index_path) as f:
                    index.update(json.load(f))
            except (OSError, json.JSONDecodeError) as e:
                raise RegistryError(f"Cannot read registry index '{self.index_path}': {e}") from e
        return index

    def _save_index(self):
        try:
            with open(self.index_path, "w") as f:
                json.dump(self._index, f, indent=2)
        except OSError as e:
            raise RegistryError(f"Cannot write registry index '{self.index_path}': {e}") from e
        logger.debug("Registry index saved to %s", self.index_path)


def _require(value: str, what: str) -> None:
    if not value:
        raise RegistryError(f"Invalid {what}: must be a non-empty string")


def _model_to_dict(record: ModelRecord) -> dict:
    return {
        "name": record.name,
        "version": record.version,
        "path": record.path,
        "active": record.active,
        "description": record.description,
        "app_info": record.app_info,
    }


def _dict_to_model(data: dict) -> ModelRecord:
    return ModelRecord(
        name=data["name"],
        version=data["version"],
        path=data["path"],
        active=data.get("active", False),
        description=data.get("description", ""),
        app_info=data.get("app_info", ""),
    )


def _resource_to_dict(record: ResourceRecord) -> dict:
    return {
        "name": record.name,
        "path": record.path,
        "description": record.description,
        "app_info": record.app_info,
    }


def _dict_to_resource(data: dict) -> ResourceRecord:
    return ResourceRecord(
        name=data["name"],
        path=data["path"],
        description=data.get("description", ""),
        app_info=data.get("app_info", ""),
    )
