"""Manifest entries: typed views of raw manifest records.

Raw records are loosely-typed dicts. ``parse_entry`` checks the required
fields for the record's kind and returns one of the entry dataclasses.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Union

from mlagent.errors import ManifestEntryError
from mlagent.manifest.reader import ManifestKind

REQUIRED_FIELDS = {
    ManifestKind.MODEL: ("name", "model"),
    ManifestKind.PIPELINE: ("name", "description"),
    ManifestKind.RESOURCE: ("name", "path"),
}


@dataclass
class ModelEntry:
    name: str
    model: str
    description: str = ""
    activate: bool = False
    clear: bool = False

    kind = ManifestKind.MODEL


@dataclass
class PipelineEntry:
    name: str
    description: str

    kind = ManifestKind.PIPELINE


@dataclass
class ResourceEntry:
    name: str
    path: str
    description: str = ""
    clear: bool = False

    kind = ManifestKind.RESOURCE


ManifestEntry = Union[ModelEntry, PipelineEntry, ResourceEntry]


def parse_bool(value) -> bool:
    """Manifest flags are true only for the string "true", in any case."""
    return isinstance(value, str) and value.lower() == "true"


def parse_entry(kind: ManifestKind, record) -> ManifestEntry:
    """Build the typed entry for ``record``.

    Empty strings count as present; the store decides whether to accept them.

    Raises:
        ManifestEntryError: If ``record`` is not an object, or a required
            field is absent or not a string
    """
    if not isinstance(record, dict):
        raise ManifestEntryError(kind.value, [], reason="is not a json object")

    missing = [name for name in REQUIRED_FIELDS[kind] if not isinstance(record.get(name), str)]
    if missing:
        raise ManifestEntryError(kind.value, missing)

    if kind == ManifestKind.MODEL:
        return ModelEntry(
            name=record["name"],
            model=record["model"],
            description=_string(record, "description"),
            activate=parse_bool(record.get("activate")),
            clear=parse_bool(record.get("clear")),
        )

    if kind == ManifestKind.PIPELINE:
        return PipelineEntry(name=record["name"], description=record["description"])

    return ResourceEntry(
        name=record["name"],
        path=record["path"],
        description=_string(record, "description"),
        clear=parse_bool(record.get("clear")),
    )


def _string(record: dict, name: str) -> str:
    value = record.get(name)
    return value if isinstance(value, str) else ""
