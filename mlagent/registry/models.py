"""Registry data models: stored model, pipeline and resource records."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class ModelRecord:
    """A single registered version of a model."""

    name: str
    version: int
    path: str
    active: bool = False
    description: str = ""
    app_info: str = ""  # Provenance JSON of the installing package

    @property
    def qualified_id(self) -> str:
        return f"{self.name}@{self.version}"


@dataclass
class PipelineRecord:
    """A pipeline description keyed by name."""

    name: str
    description: str


@dataclass
class ResourceRecord:
    """A shared resource keyed by name."""

    name: str
    path: str
    description: str = ""
    app_info: str = ""
