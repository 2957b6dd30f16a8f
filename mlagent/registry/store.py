"""Registry store interface.

Ingestion talks to the registry only through this small CRUD contract, so
the storage engine can be swapped (file, embedded DB) and faked in tests.
Every operation raises ``RegistryError`` on failure.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from mlagent.registry.models import ModelRecord, PipelineRecord, ResourceRecord


class RegistryStore(ABC):
    """Abstract keyed store for models, pipelines and resources."""

    # ── Models ───────────────────────────────────────────────────────

    @abstractmethod
    def model_add(
        self,
        name: str,
        path: str,
        active: bool,
        description: str,
        app_info: str,
    ) -> int:
        """Register a new model version and return the assigned version.

        Raises:
            RegistryError: If the model cannot be stored
        """
        ...

    @abstractmethod
    def model_delete(self, name: str, version: int = 0) -> None:
        """Delete one version of a model, or every version when ``version`` is 0.

        Raises:
            RegistryNotFoundError: If nothing matches
        """
        ...

    @abstractmethod
    def model_get(self, name: str, version: int) -> ModelRecord:
        ...

    @abstractmethod
    def model_get_active(self, name: str) -> ModelRecord:
        ...

    @abstractmethod
    def model_list(self) -> list[ModelRecord]:
        ...

    # ── Pipelines ────────────────────────────────────────────────────

    @abstractmethod
    def pipeline_set(self, name: str, description: str) -> None:
        """Create or replace the pipeline description for ``name``."""
        ...

    @abstractmethod
    def pipeline_get(self, name: str) -> PipelineRecord:
        ...

    @abstractmethod
    def pipeline_delete(self, name: str) -> None:
        ...

    @abstractmethod
    def pipeline_list(self) -> list[PipelineRecord]:
        ...

    # ── Resources ────────────────────────────────────────────────────

    @abstractmethod
    def resource_add(self, name: str, path: str, description: str, app_info: str) -> None:
        """Create or overwrite the resource record for ``name``."""
        ...

    @abstractmethod
    def resource_get(self, name: str) -> ResourceRecord:
        ...

    @abstractmethod
    def resource_delete(self, name: str) -> None:
        ...

    @abstractmethod
    def resource_list(self) -> list[ResourceRecord]:
        ...
