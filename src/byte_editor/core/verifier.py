"""Four-phase structural comparison of an original file and its draft.

1. Length: draft size equals the operation's expected size.
2. Pre-position: bytes ``[0, position)`` identical, windowed, with checksums.
3. At-position: the operation proves its own edit at the target offset.
4. Post-position: the remaining bytes identical given the frame-shift, and
   both files reach EOF together.

Verification is read-only. A failed verification leaves the draft in place;
deleting it is the caller's job.
"""
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .checksum import RollingChecksum
from .errors import IntegrityError, InvalidInputError
from .operations import Operation

logger = logging.getLogger(__name__)

DEFAULT_VERIFICATION_WINDOW = 64

LENGTH_PHASE = "length"
PRE_POSITION_PHASE = "pre-position"
POST_POSITION_PHASE = "post-position"


@dataclass(frozen=True)
class VerificationReport:
    original_size: int
    draft_size: int
    pre_position_bytes: int
    pre_position_checksum: str
    at_position: str
    post_position_bytes: int
    post_position_checksum: str


class IntegrityVerifier:
    """Proves a draft differs from its original by exactly one operation."""

    def __init__(
        self,
        original_path: Union[str, Path],
        draft_path: Union[str, Path],
        window_size: int = DEFAULT_VERIFICATION_WINDOW,
    ):
        if window_size <= 0:
            raise InvalidInputError(f"Verification window must be positive, got {window_size}")
        self.original_path = Path(original_path)
        self.draft_path = Path(draft_path)
        self.window_size = window_size

    def verify(
        self,
        operation: Operation,
        byte_position: int,
        expected_original_byte: Optional[int],
    ) -> VerificationReport:
        """Run all four phases, stopping at the first failure.

        Args:
            operation: The operation the draft was built with
            byte_position: Target offset
            expected_original_byte: Byte at the target offset in the original,
                None when appending

        Raises:
            IntegrityError: Describing the first failed check
        """
        original_size, draft_size = self._check_length(operation)

        with open(self.original_path, "rb") as original, open(self.draft_path, "rb") as draft:
            pre = self._compare_prefix(original, draft, byte_position)
            logger.info(
                f"Pre-position bytes match ({pre.bytes_seen} bytes, checksum {pre.hexdigest()})"
            )

            at_position = operation.prove_at_position(
                original, draft, byte_position, expected_original_byte
            )
            logger.info(f"At-position check passed: {at_position}")

            post = self._compare_to_eof(original, draft)
            logger.info(
                f"Post-position bytes match ({post.bytes_seen} bytes, checksum {post.hexdigest()})"
            )

        return VerificationReport(
            original_size=original_size,
            draft_size=draft_size,
            pre_position_bytes=pre.bytes_seen,
            pre_position_checksum=pre.hexdigest(),
            at_position=at_position,
            post_position_bytes=post.bytes_seen,
            post_position_checksum=post.hexdigest(),
        )

    def _check_length(self, operation: Operation) -> tuple[int, int]:
        original_size = self.original_path.stat().st_size
        draft_size = self.draft_path.stat().st_size
        expected = operation.expected_size(original_size)

        if draft_size != expected:
            raise IntegrityError(
                f"File size mismatch for {operation.kind.value}: original={original_size}, "
                f"draft={draft_size}, expected draft={expected}",
                phase=LENGTH_PHASE,
            )

        logger.info(f"File sizes verified: original={original_size}, draft={draft_size}")
        return original_size, draft_size

    def _compare_prefix(
        self, original: BinaryIO, draft: BinaryIO, byte_position: int
    ) -> RollingChecksum:
        original_sum = RollingChecksum()
        draft_sum = RollingChecksum()
        verified = 0

        while verified < byte_position:
            to_read = min(self.window_size, byte_position - verified)
            original_window = original.read(to_read)
            draft_window = draft.read(to_read)

            if len(original_window) != len(draft_window):
                raise IntegrityError(
                    f"Pre-position read mismatch at offset {verified}: "
                    f"original={len(original_window)} bytes, draft={len(draft_window)} bytes",
                    phase=PRE_POSITION_PHASE,
                )
            if not original_window:
                raise IntegrityError(
                    f"Unexpected end of file at offset {verified} before position {byte_position}",
                    phase=PRE_POSITION_PHASE,
                )

            self._compare_windows(original_window, draft_window, verified, PRE_POSITION_PHASE)
            original_sum.update(original_window)
            draft_sum.update(draft_window)
            verified += len(original_window)

        self._compare_checksums(original_sum, draft_sum, PRE_POSITION_PHASE)
        return original_sum

    def _compare_to_eof(self, original: BinaryIO, draft: BinaryIO) -> RollingChecksum:
        original_sum = RollingChecksum()
        draft_sum = RollingChecksum()
        original_offset = original.tell()
        draft_offset = draft.tell()

        while True:
            original_window = original.read(self.window_size)
            draft_window = draft.read(self.window_size)

            # both streams must hit EOF in the same iteration
            if len(original_window) != len(draft_window):
                raise IntegrityError(
                    f"Post-position read size mismatch: original={len(original_window)}, "
                    f"draft={len(draft_window)}",
                    phase=POST_POSITION_PHASE,
                )
            if not original_window:
                break

            self._compare_windows(
                original_window,
                draft_window,
                original_offset + original_sum.bytes_seen,
                POST_POSITION_PHASE,
                draft_offset + draft_sum.bytes_seen,
            )
            original_sum.update(original_window)
            draft_sum.update(draft_window)

        self._compare_checksums(original_sum, draft_sum, POST_POSITION_PHASE)
        return original_sum

    @staticmethod
    def _compare_windows(
        original_window: bytes,
        draft_window: bytes,
        original_offset: int,
        phase: str,
        draft_offset: Optional[int] = None,
    ):
        if original_window == draft_window:
            return

        if draft_offset is None:
            draft_offset = original_offset

        for i, (expected, actual) in enumerate(zip(original_window, draft_window)):
            if expected != actual:
                raise IntegrityError(
                    f"{phase.capitalize()} byte mismatch: original[{original_offset + i}]=0x{expected:02X}, "
                    f"draft[{draft_offset + i}]=0x{actual:02X}",
                    phase=phase,
                )

    @staticmethod
    def _compare_checksums(original_sum: RollingChecksum, draft_sum: RollingChecksum, phase: str):
        if original_sum != draft_sum:
            raise IntegrityError(
                f"{phase.capitalize()} checksum mismatch: original={original_sum.hexdigest()}, "
                f"draft={draft_sum.hexdigest()}",
                phase=phase,
            )
