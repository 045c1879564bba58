"""JSON schema and validation for `.fkw` workspace files."""

from __future__ import annotations

from functools import lru_cache
import re
from typing import Any

from jsonschema import Draft202012Validator

from forgepack.storage.exceptions import StorageValidationError

SUPPORTED_MAJOR_VERSION = 1
DEFAULT_WORKSPACE_VERSION = "1.0"

_VERSION_PATTERN = re.compile(r"^(?P<major>\d+)\.(?P<minor>\d+)$")

_ARTIFACT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["path", "language", "code", "lines"],
    "additionalProperties": False,
    "properties": {
        "path": {"type": "string", "minLength": 1},
        "language": {"type": "string"},
        "code": {"type": "string"},
        "lines": {"type": "integer", "minimum": 0},
    },
}

_SNAPSHOT_SCHEMA: dict[str, Any] = {
    "type": "object",
    "required": ["id", "timestamp", "description", "artifacts"],
    "additionalProperties": False,
    "properties": {
        "id": {"type": "string", "pattern": r"^v[1-9]\d*$"},
        "timestamp": {"type": "integer", "minimum": 0},
        "description": {"type": "string"},
        "artifacts": {"type": "array", "items": {"$ref": "#/$defs/artifact"}},
    },
}

WORKSPACE_SCHEMA_V1: dict[str, Any] = {
    "$schema": "https://json-schema.org/draft/2020-12/schema",
    "title": "ForgeKit Workspace",
    "type": "object",
    "required": ["version", "metadata", "payload", "checksum"],
    "additionalProperties": True,
    "$defs": {
        "artifact": _ARTIFACT_SCHEMA,
        "snapshot": _SNAPSHOT_SCHEMA,
    },
    "properties": {
        "version": {
            "type": "string",
            "pattern": r"^\d+\.\d+$",
            "description": "Major.minor workspace file version",
        },
        "metadata": {
            "type": "object",
            "required": ["workspace_id", "created_at"],
            "additionalProperties": True,
            "properties": {
                "workspace_id": {"type": "string"},
                "created_at": {"type": "string"},
            },
        },
        "payload": {
            "type": "object",
            "required": ["live", "history"],
            "additionalProperties": False,
            "properties": {
                "live": {
                    "type": "object",
                    "additionalProperties": {
                        "type": "array",
                        "items": {"$ref": "#/$defs/artifact"},
                    },
                },
                "history": {
                    "type": "object",
                    "additionalProperties": {
                        "type": "array",
                        "items": {"$ref": "#/$defs/snapshot"},
                    },
                },
            },
        },
        "checksum": {
            "type": "string",
            "pattern": r"^sha256:[0-9a-f]{64}$",
        },
    },
}


def parse_workspace_version(version: str) -> tuple[int, int]:
    """Parse major/minor workspace file version."""
    match = _VERSION_PATTERN.fullmatch(version.strip())
    if match is None:
        raise StorageValidationError(f"Invalid workspace version: {version}")
    return int(match.group("major")), int(match.group("minor"))


@lru_cache(maxsize=1)
def _validator() -> Draft202012Validator:
    return Draft202012Validator(WORKSPACE_SCHEMA_V1)


def validate_workspace(envelope: dict[str, Any]) -> None:
    """Validate workspace shape, supported version and history ordering."""
    version = str(envelope.get("version", "")).strip()
    major, _minor = parse_workspace_version(version)
    if major != SUPPORTED_MAJOR_VERSION:
        raise StorageValidationError(
            "Unsupported workspace major version: "
            f"{version}. Supported major: {SUPPORTED_MAJOR_VERSION}.x"
        )

    errors = sorted(_validator().iter_errors(envelope), key=lambda err: list(map(str, err.path)))
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.path) or "$"
        raise StorageValidationError(f"Invalid workspace at {location}: {first.message}")

    for entity_id, snapshots in envelope["payload"]["history"].items():
        ids = [snapshot["id"] for snapshot in snapshots]
        expected = [f"v{position}" for position in range(1, len(snapshots) + 1)]
        if ids != expected:
            raise StorageValidationError(
                f"Invalid workspace at payload.history.{entity_id}: "
                f"snapshot ids must be {expected}, got {ids}"
            )
