"""Streaming draft construction through a small fixed-size buffer.

The original is copied chunk by chunk ("bucket brigade") into a sibling draft
file. The single chunk that contains the target offset is split into the
slice before the target, the operation's replacement bytes, and the slice
after it. Memory use is bounded by the chunk size regardless of file size.
"""
import logging
import os
from collections.abc import Iterator
from dataclasses import dataclass
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .errors import IntegrityError, InvalidInputError
from .operations import Operation

logger = logging.getLogger(__name__)

DEFAULT_CHUNK_SIZE = 64
# ~1 GiB at 64-byte chunks
MAX_CHUNKS_ALLOWED = 16_777_216

BUILD_PHASE = "build"


@dataclass(frozen=True)
class ChunkWindow:
    """Bounded view of the stream: ``buffer`` holds bytes ``[start_offset, end_offset)``."""

    start_offset: int
    end_offset: int
    buffer: bytes

    def contains(self, offset: int) -> bool:
        return self.start_offset <= offset < self.end_offset

    def local(self, offset: int) -> int:
        return offset - self.start_offset

    def __len__(self):
        return self.end_offset - self.start_offset


@dataclass(frozen=True)
class DraftReport:
    """What a completed draft build did."""

    draft_path: Path
    bytes_read: int
    bytes_written: int
    chunks: int
    original_byte: Optional[int]


class DraftBuilder:
    """Builds the draft file for one operation at one offset."""

    def __init__(
        self,
        source_path: Union[str, Path],
        draft_path: Union[str, Path],
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_chunks: int = MAX_CHUNKS_ALLOWED,
    ):
        """Initialize draft builder.

        Args:
            source_path: Original file, only ever read
            draft_path: Draft file, created or truncated
            chunk_size: Buffer capacity in bytes
            max_chunks: Hard ceiling on read iterations
        """
        if chunk_size <= 0:
            raise InvalidInputError(f"Chunk size must be positive, got {chunk_size}")
        if max_chunks <= 0:
            raise InvalidInputError(f"Chunk ceiling must be positive, got {max_chunks}")

        self.source_path = Path(source_path)
        self.draft_path = Path(draft_path)
        self.chunk_size = chunk_size
        self.max_chunks = max_chunks
        self.chunks = 0

    def read_chunks(self, source: BinaryIO) -> Iterator[ChunkWindow]:
        """Yield consecutive windows of ``source`` until a zero-byte read.

        Raises:
            IntegrityError: If the chunk ceiling is reached before EOF
        """
        offset = 0
        self.chunks = 0

        while True:
            if self.chunks >= self.max_chunks:
                raise IntegrityError(
                    f"Maximum chunk limit exceeded ({self.max_chunks} chunks of "
                    f"{self.chunk_size} bytes): file too large or read loop not terminating",
                    phase=BUILD_PHASE,
                )

            self.chunks += 1
            buffer = source.read(self.chunk_size)
            if not buffer:
                logger.debug(f"Reached end of {self.source_path} after {offset} bytes")
                return

            yield ChunkWindow(offset, offset + len(buffer), buffer)
            offset += len(buffer)

    def build(self, operation: Operation, byte_position: int) -> DraftReport:
        """Stream the original into the draft, applying ``operation`` at ``byte_position``.

        The partial draft is deleted on any failure.

        Returns:
            DraftReport for the completed draft

        Raises:
            IntegrityError: On incomplete writes, chunk ceiling, or if the
                target offset was never reached
        """
        try:
            report = self._stream(operation, byte_position)
        except Exception:
            self.discard()
            raise

        logger.info(
            f"Draft built: {report.bytes_read} bytes read, {report.bytes_written} bytes written "
            f"in {report.chunks} chunks -> {self.draft_path}"
        )
        return report

    def discard(self):
        """Delete the draft file if present."""
        if self.draft_path.exists():
            self.draft_path.unlink()
            logger.info(f"Removed draft: {self.draft_path}")

    def _stream(self, operation: Operation, byte_position: int) -> DraftReport:
        bytes_read = 0
        bytes_written = 0
        original_byte: Optional[int] = None
        target_visited = False

        with open(self.source_path, "rb") as source, open(self.draft_path, "wb") as draft:
            for window in self.read_chunks(source):
                bytes_read += len(window)

                if window.contains(byte_position):
                    local = window.local(byte_position)
                    original_byte = window.buffer[local]
                    target_visited = True

                    bytes_written += self._write(draft, window.buffer[:local])
                    bytes_written += self._write(draft, operation.target_bytes(original_byte))
                    bytes_written += self._write(draft, window.buffer[local + 1:])

                    logger.debug(
                        f"{operation.kind.value} at position {byte_position}: "
                        f"original 0x{original_byte:02X}"
                    )
                else:
                    bytes_written += self._write(draft, window.buffer)

                draft.flush()

            if not target_visited and operation.allows_append and byte_position == bytes_read:
                bytes_written += self._write(draft, operation.target_bytes(None))
                target_visited = True
                draft.flush()

            if not target_visited:
                raise IntegrityError(
                    f"Target byte position {byte_position} was never reached "
                    f"({bytes_read} bytes read)",
                    phase=BUILD_PHASE,
                )

            os.fsync(draft.fileno())

        return DraftReport(
            draft_path=self.draft_path,
            bytes_read=bytes_read,
            bytes_written=bytes_written,
            chunks=self.chunks,
            original_byte=original_byte,
        )

    @staticmethod
    def _write(draft: BinaryIO, data: bytes) -> int:
        if not data:
            return 0

        written = draft.write(data)
        if written != len(data):
            raise IntegrityError(
                f"Incomplete write: expected {len(data)} bytes, wrote {written} bytes",
                phase=BUILD_PHASE,
            )
        return written
