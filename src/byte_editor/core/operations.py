"""Edit operations and the mutation request that carries them.

Each operation knows three things the pipeline needs from it: what to write
in place of the original byte at the target offset, how the draft length
relates to the original length, and how to prove at the target offset that
the draft holds exactly that edit.
"""
import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .errors import IntegrityError, InvalidInputError

logger = logging.getLogger(__name__)

AT_POSITION_PHASE = "at-position"


class OperationKind(str, Enum):
    REPLACE = "replace"
    REMOVE = "remove"
    ADD = "add"


def _check_byte_value(value: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= 0xFF:
        raise InvalidInputError(f"Byte value must be an integer in 0-255, got {value!r}")
    return value


def _read_one(stream: BinaryIO) -> Optional[int]:
    data = stream.read(1)
    return data[0] if data else None


class Operation:
    """Base class for the per-offset transformation applied by the draft builder."""

    kind: OperationKind
    length_delta = 0
    allows_append = False

    @property
    def new_byte(self) -> Optional[int]:
        """Byte value this operation writes at the target offset, if any."""
        return None

    def expected_size(self, original_size: int) -> int:
        return original_size + self.length_delta

    def target_bytes(self, original_byte: Optional[int]) -> bytes:
        """Bytes written to the draft in place of ``original_byte``.

        ``original_byte`` is None only when appending past the last byte.
        """
        raise NotImplementedError

    def prove_at_position(
        self,
        original: BinaryIO,
        draft: BinaryIO,
        position: int,
        expected_original_byte: Optional[int],
    ) -> str:
        """Consume the target offset from both streams and check the edit.

        Both streams must be positioned at ``position``. On return they are
        aligned so that the remaining bytes of each must be identical.

        Returns:
            Short description of what was proven
        """
        raise NotImplementedError


@dataclass(frozen=True)
class Replace(Operation):
    """Overwrite one byte in place; length unchanged."""

    new_value: int
    kind: OperationKind = field(default=OperationKind.REPLACE, init=False)

    def __post_init__(self):
        _check_byte_value(self.new_value)

    @property
    def new_byte(self) -> Optional[int]:
        return self.new_value

    def target_bytes(self, original_byte: Optional[int]) -> bytes:
        return bytes([self.new_value])

    def prove_at_position(self, original, draft, position, expected_original_byte):
        original_byte = _read_one(original)
        draft_byte = _read_one(draft)

        if original_byte is None or draft_byte is None:
            raise IntegrityError(
                f"Unexpected end of file at position {position}", phase=AT_POSITION_PHASE
            )

        if original_byte != expected_original_byte:
            raise IntegrityError(
                f"Original byte mismatch at position {position}: "
                f"expected=0x{expected_original_byte:02X}, actual=0x{original_byte:02X}",
                phase=AT_POSITION_PHASE,
            )

        if draft_byte != self.new_value:
            raise IntegrityError(
                f"Modified byte mismatch at position {position}: "
                f"expected=0x{self.new_value:02X}, actual=0x{draft_byte:02X}",
                phase=AT_POSITION_PHASE,
            )

        if original_byte == draft_byte:
            logger.warning(
                f"Byte value unchanged at position {position} (same value 0x{draft_byte:02X} written)"
            )

        return f"0x{original_byte:02X} -> 0x{draft_byte:02X}"


@dataclass(frozen=True)
class Remove(Operation):
    """Drop one byte; everything after it shifts one offset earlier."""

    kind: OperationKind = field(default=OperationKind.REMOVE, init=False)
    length_delta = -1

    def target_bytes(self, original_byte: Optional[int]) -> bytes:
        return b""

    def prove_at_position(self, original, draft, position, expected_original_byte):
        removed = _read_one(original)

        if removed is None:
            raise IntegrityError(
                f"Original ended before removal position {position}", phase=AT_POSITION_PHASE
            )

        if removed != expected_original_byte:
            raise IntegrityError(
                f"Removed byte mismatch: expected=0x{expected_original_byte:02X}, "
                f"actual=0x{removed:02X}",
                phase=AT_POSITION_PHASE,
            )

        draft_byte = _read_one(draft)
        if draft_byte is None:
            return f"removed 0x{removed:02X} (was last byte)"

        following = _read_one(original)
        if following is None:
            raise IntegrityError(
                "Draft has more bytes than expected after removal position",
                phase=AT_POSITION_PHASE,
            )

        # draft[p] must be original[p + 1]
        if draft_byte != following:
            raise IntegrityError(
                f"Frame-shift verification failed: draft[{position}]=0x{draft_byte:02X}, "
                f"expected original[{position + 1}]=0x{following:02X}",
                phase=AT_POSITION_PHASE,
            )

        return (
            f"removed 0x{removed:02X}, position {position} now holds 0x{draft_byte:02X} "
            f"from position {position + 1}"
        )


@dataclass(frozen=True)
class Add(Operation):
    """Insert one byte at the target offset; the byte previously there shifts one later."""

    value: int
    kind: OperationKind = field(default=OperationKind.ADD, init=False)
    length_delta = 1
    allows_append = True

    def __post_init__(self):
        _check_byte_value(self.value)

    @property
    def new_byte(self) -> Optional[int]:
        return self.value

    def target_bytes(self, original_byte: Optional[int]) -> bytes:
        if original_byte is None:
            return bytes([self.value])
        return bytes([self.value, original_byte])

    def prove_at_position(self, original, draft, position, expected_original_byte):
        inserted = _read_one(draft)

        if inserted != self.value:
            actual = "EOF" if inserted is None else f"0x{inserted:02X}"
            raise IntegrityError(
                f"Inserted byte mismatch at position {position}: "
                f"expected=0x{self.value:02X}, actual={actual}",
                phase=AT_POSITION_PHASE,
            )

        if expected_original_byte is None:
            return f"appended 0x{inserted:02X}"

        original_byte = _read_one(original)
        shifted = _read_one(draft)

        if original_byte != expected_original_byte:
            actual = "EOF" if original_byte is None else f"0x{original_byte:02X}"
            raise IntegrityError(
                f"Original byte mismatch at position {position}: "
                f"expected=0x{expected_original_byte:02X}, actual={actual}",
                phase=AT_POSITION_PHASE,
            )

        # draft[p + 1] must be original[p]
        if shifted != original_byte:
            actual = "EOF" if shifted is None else f"0x{shifted:02X}"
            raise IntegrityError(
                f"Frame-shift verification failed: draft[{position + 1}]={actual}, "
                f"expected original[{position}]=0x{original_byte:02X}",
                phase=AT_POSITION_PHASE,
            )

        return (
            f"inserted 0x{inserted:02X}, original 0x{original_byte:02X} "
            f"shifted to position {position + 1}"
        )


@dataclass(frozen=True)
class MutationRequest:
    """One edit of one file, consumed by a single pipeline run."""

    path: Path
    byte_position: int
    operation: Operation

    def __post_init__(self):
        if not isinstance(self.path, Path):
            object.__setattr__(self, "path", Path(self.path))

    @classmethod
    def create(
        cls, path: Union[str, Path], byte_position: int, operation: Operation
    ) -> "MutationRequest":
        return cls(Path(path), byte_position, operation)
