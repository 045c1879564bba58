"""Workspace persistence for ForgeKit."""

from forgepack.storage.exceptions import (
    StorageChecksumError,
    StorageError,
    StorageValidationError,
)
from forgepack.storage.io import (
    DEFAULT_WORKSPACE_FILENAME,
    WORKSPACE_ENV_VAR,
    build_workspace_envelope,
    compute_workspace_checksum,
    open_workspace,
    read_workspace,
    read_workspace_envelope,
    write_workspace,
)
from forgepack.storage.schema import (
    DEFAULT_WORKSPACE_VERSION,
    WORKSPACE_SCHEMA_V1,
    parse_workspace_version,
    validate_workspace,
)

__all__ = [
    "StorageError",
    "StorageValidationError",
    "StorageChecksumError",
    "DEFAULT_WORKSPACE_FILENAME",
    "DEFAULT_WORKSPACE_VERSION",
    "WORKSPACE_ENV_VAR",
    "WORKSPACE_SCHEMA_V1",
    "build_workspace_envelope",
    "compute_workspace_checksum",
    "open_workspace",
    "read_workspace",
    "read_workspace_envelope",
    "write_workspace",
    "parse_workspace_version",
    "validate_workspace",
]
