"""Manifest reader: locate and parse the per-kind manifest files.

Each file holds either a single JSON object or an array of objects. Records
are yielded lazily and untyped, array elements as they are. Validation,
including rejecting elements that are not objects, happens in ``entries``.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Iterator

logger = logging.getLogger(__name__)


class ManifestKind(Enum):
    """The kinds of assets a resource package can declare."""

    MODEL = "model"
    PIPELINE = "pipeline"
    RESOURCE = "resource"

    @property
    def file_name(self) -> str:
        return f"{self.value}_description.json"


def manifest_path(directory: str | Path, kind: ManifestKind) -> Path:
    """Return the fixed location of a kind's manifest within ``directory``."""
    return Path(directory) / kind.file_name


def read_manifest(directory: str | Path, kind: ManifestKind) -> Iterator:
    """Yield the raw records of one manifest file.

    A missing file yields nothing: the package may simply not declare that
    kind. Malformed content is logged and also yields nothing, without
    affecting the other kinds.
    """
    path = manifest_path(directory, kind)

    if not path.is_file():
        logger.warning(
            "Failed to find json file '%s'. Resource packages using the ML service "
            "should provide this file.",
            path,
        )
        return

    try:
        with open(path, encoding="utf-8") as f:
            root = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        logger.error("Failed to parse json file '%s': %s", path, e)
        return

    if isinstance(root, dict):
        yield root
    elif isinstance(root, list):
        yield from root
    else:
        logger.error("Root of json file '%s' must be an object or an array.", path)
