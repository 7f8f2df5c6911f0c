"""Verified, atomic single-byte file editing: replace, remove or insert one byte."""

from .core import (
    ByteEditError,
    ByteEditor,
    EditResult,
    IntegrityError,
    InvalidInputError,
    RecordingObserver,
    SwapError,
    TargetNotFoundError,
    add_byte,
    remove_byte,
    replace_byte,
)

__version__ = "0.1.0"

__all__ = [
    # Operations
    "replace_byte",
    "remove_byte",
    "add_byte",
    "ByteEditor",
    "EditResult",
    "RecordingObserver",
    # Errors
    "ByteEditError",
    "TargetNotFoundError",
    "InvalidInputError",
    "IntegrityError",
    "SwapError",
]
