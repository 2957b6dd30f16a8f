"""Provenance: which package and resource version produced a registry entry.

Every asset registered from a resource package carries the serialized app
descriptor of that package, so entries can be audited later.
"""

from __future__ import annotations

import json
from dataclasses import dataclass

from mlagent.errors import ProvenanceError
from mlagent.events.platform import PackageManager

RPK_MARKER = "T"


@dataclass
class AppDescriptor:
    """Provenance of assets installed by one resource package."""

    app_id: str
    res_type: str
    res_version: str
    is_rpk: str = RPK_MARKER

    def to_json(self) -> str:
        data = {
            "is_rpk": self.is_rpk,
            "app_id": self.app_id,
            "res_type": self.res_type,
            "res_version": self.res_version,
        }
        return json.dumps(data, indent=2)

    @classmethod
    def from_json(cls, text: str) -> AppDescriptor:
        try:
            data = json.loads(text)
            return cls(
                app_id=data["app_id"],
                res_type=data["res_type"],
                res_version=data["res_version"],
                is_rpk=data.get("is_rpk", RPK_MARKER),
            )
        except (json.JSONDecodeError, KeyError, TypeError) as e:
            raise ProvenanceError(f"Invalid app descriptor: {e}") from e


def build_app_descriptor(package_id: str, package_manager: PackageManager) -> AppDescriptor:
    """Query the platform for the package's resource metadata.

    Raises:
        ProvenanceError: If ``package_id`` is empty
        PackageManagerError: If the metadata query fails
    """
    if not package_id:
        raise ProvenanceError("Package id is required to build an app descriptor")

    info = package_manager.get_package_info(package_id)
    return AppDescriptor(app_id=package_id, res_type=info.res_type, res_version=info.res_version)
