"""Shared fixtures: an in-memory registry that records every store call."""

import json
from pathlib import Path

import pytest

from mlagent.errors import RegistryError, RegistryNotFoundError
from mlagent.registry.models import ModelRecord, PipelineRecord, ResourceRecord
from mlagent.registry.store import RegistryStore


class RecordingRegistry(RegistryStore):
    """Pure in-memory registry for unit tests.

    Every call is appended to ``calls`` as ``(method, args...)``. Add
    ``(method, name)`` pairs to ``fail_on`` to make that call raise.
    """

    def __init__(self):
        self.calls: list[tuple] = []
        self.fail_on: set[tuple[str, str]] = set()
        self.models: dict[str, list[ModelRecord]] = {}
        self.pipelines: dict[str, str] = {}
        self.resources: dict[str, ResourceRecord] = {}
        self._next_version: dict[str, int] = {}

    def _check(self, method: str, name: str):
        if (method, name) in self.fail_on:
            raise RegistryError(f"{method} failed for '{name}'")

    def model_add(self, name, path, active, description, app_info):
        self.calls.append(("model_add", name, path, active, description, app_info))
        self._check("model_add", name)
        version = self._next_version.get(name, 1)
        self._next_version[name] = version + 1
        record = ModelRecord(name, version, path, active, description, app_info)
        self.models.setdefault(name, []).append(record)
        return version

    def model_delete(self, name, version=0):
        self.calls.append(("model_delete", name, version))
        self._check("model_delete", name)
        if not self.models.get(name):
            raise RegistryNotFoundError(name)
        self.models[name] = [] if version == 0 else [
            r for r in self.models[name] if r.version != version
        ]

    def model_get(self, name, version):
        for record in self.models.get(name, []):
            if record.version == version:
                return record
        raise RegistryNotFoundError(name)

    def model_get_active(self, name):
        for record in self.models.get(name, []):
            if record.active:
                return record
        raise RegistryNotFoundError(name)

    def model_list(self):
        return [r for records in self.models.values() for r in records]

    def pipeline_set(self, name, description):
        self.calls.append(("pipeline_set", name, description))
        self._check("pipeline_set", name)
        self.pipelines[name] = description

    def pipeline_get(self, name):
        if name not in self.pipelines:
            raise RegistryNotFoundError(name)
        return PipelineRecord(name, self.pipelines[name])

    def pipeline_delete(self, name):
        self.calls.append(("pipeline_delete", name))
        if self.pipelines.pop(name, None) is None:
            raise RegistryNotFoundError(name)

    def pipeline_list(self):
        return [PipelineRecord(n, d) for n, d in self.pipelines.items()]

    def resource_add(self, name, path, description, app_info):
        self.calls.append(("resource_add", name, path, description, app_info))
        self._check("resource_add", name)
        self.resources[name] = ResourceRecord(name, path, description, app_info)

    def resource_get(self, name):
        if name not in self.resources:
            raise RegistryNotFoundError(name)
        return self.resources[name]

    def resource_delete(self, name):
        self.calls.append(("resource_delete", name))
        self._check("resource_delete", name)
        if self.resources.pop(name, None) is None:
            raise RegistryNotFoundError(name)

    def resource_list(self):
        return list(self.resources.values())

    def calls_to(self, method: str) -> list[tuple]:
        return [c for c in self.calls if c[0] == method]


@pytest.fixture
def registry():
    return RecordingRegistry()


@pytest.fixture
def write_manifest():
    """Write ``data`` as JSON to ``<directory>/<file_name>`` and return the path."""

    def _write(directory, file_name: str, data) -> Path:
        path = Path(directory) / file_name
        path.parent.mkdir(parents=True, exist_ok=True)
        text = data if isinstance(data, str) else json.dumps(data)
        path.write_text(text, encoding="utf-8")
        return path

    return _write
