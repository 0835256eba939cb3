"""
Schemas & Encoding
File: versioning.py

Purpose: Centralize persisted-schema and hash-encoding version constants.
This file must remain tiny and import nothing from other schema files
to avoid circular dependencies.
"""

from typing import Literal

# Version written into every persisted chain, mempool and proof file
SCHEMA_VERSION: str = "v1"

# Leading byte of every canonical encoding fed to the hasher.
# Changing the transaction or header layout MUST bump this value.
ENCODING_VERSION: int = 1

SchemaVersion = Literal["v1"]

SUPPORTED_SCHEMA_VERSIONS: frozenset[str] = frozenset({"v1"})


class UnsupportedSchemaVersionError(ValueError):
    """Raised when a persisted file declares an unsupported schema version."""

    def __init__(self, version: str, supported: frozenset[str] | None = None) -> None:
        self.version = version
        self.supported = supported or SUPPORTED_SCHEMA_VERSIONS
        super().__init__(
            f"Unsupported schema version: '{version}'. "
            f"Supported versions: {sorted(self.supported)}"
        )


def assert_supported_schema_version(version: str) -> None:
    """
    Validate that the given schema version is supported.

    Args:
        version: The schema version string to validate.

    Raises:
        UnsupportedSchemaVersionError: If the version is not supported.
    """
    if version not in SUPPORTED_SCHEMA_VERSIONS:
        raise UnsupportedSchemaVersionError(version)


def is_compatible_schema_version(version: str) -> bool:
    """Check if a schema version is compatible without raising."""
    return version in SUPPORTED_SCHEMA_VERSIONS
