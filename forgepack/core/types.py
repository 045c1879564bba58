"""Type definitions for ForgeKit core models."""

from typing import Literal

DiffEntryType = Literal["unchanged", "added", "removed"]

ChangeType = Literal["added", "modified", "deleted"]

DEFAULT_COMMIT_DESCRIPTION = "Checkpoint"
