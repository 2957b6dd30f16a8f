"""Exception hierarchy shared across the agent."""

from __future__ import annotations


class MLAgentError(Exception):
    """Base class for all agent errors."""


class ConfigError(MLAgentError):
    """Raised when the agent configuration cannot be loaded."""


class PackageManagerError(MLAgentError):
    """Raised when a platform package manager call fails."""

    def __init__(self, code: str, message: str = ""):
        self.code = code
        self.message = message
        super().__init__(f"{code}: {message}" if message else code)


class ProvenanceError(MLAgentError):
    """Raised when an app descriptor cannot be built."""


class ManifestEntryError(MLAgentError):
    """Raised when a manifest record lacks required fields."""

    def __init__(self, kind: str, missing: list[str], reason: str = ""):
        self.kind = kind
        self.missing = missing
        reason = reason or f"missing required field(s): {', '.join(missing)}"
        super().__init__(f"{kind} entry {reason}")


class RegistryError(MLAgentError):
    """Raised when a registry store operation fails."""


class RegistryNotFoundError(RegistryError):
    """Raised when a registry lookup or delete targets a missing key."""
