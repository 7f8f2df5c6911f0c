"""Error kinds raised by byte edit operations."""
from pathlib import Path
from typing import Optional


class ByteEditError(Exception):
    """Base class for all byte edit failures."""

    kind = "Other"


class TargetNotFoundError(ByteEditError, FileNotFoundError):
    """Target path does not exist."""

    kind = "NotFound"


class InvalidInputError(ByteEditError, ValueError):
    """Request cannot be applied to the target (bad path, bounds or value)."""

    kind = "InvalidInput"


class IntegrityError(ByteEditError):
    """Draft construction or verification proved the draft is not the intended result."""

    kind = "IntegrityFailure"

    def __init__(self, message: str, phase: Optional[str] = None):
        super().__init__(message)
        self.phase = phase


class SwapError(ByteEditError):
    """Draft could not be renamed over the original.

    Original, backup and draft are all left on disk for manual recovery.
    """

    kind = "SwapFailure"

    def __init__(self, message: str, draft_path: Path, backup_path: Optional[Path] = None):
        super().__init__(message)
        self.draft_path = draft_path
        self.backup_path = backup_path
