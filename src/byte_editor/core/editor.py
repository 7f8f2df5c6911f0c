"""Byte editor: one pipeline shared by every byte operation.

validate -> backup -> build draft -> verify -> atomic swap -> remove backup

The original file is never written to. It is only replaced, by rename, once
an independently verified draft exists.
"""
import logging
from contextlib import contextmanager
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Optional, Union

from .draft_builder import DEFAULT_CHUNK_SIZE, MAX_CHUNKS_ALLOWED, DraftBuilder
from .operations import Add, MutationRequest, OperationKind, Remove, Replace
from .progress import EditObserver, LoggingObserver, Phase
from .safety import (
    DRAFT_SUFFIX,
    AtomicSwapper,
    BackupManager,
    PerformanceMonitor,
    sibling_path,
    target_lock,
)
from .seek_reader import read_byte_at
from .validation import validate_position
from .verifier import DEFAULT_VERIFICATION_WINDOW, IntegrityVerifier, VerificationReport

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class EditResult:
    """Structured outcome of a successful edit."""

    path: Path
    operation: OperationKind
    position: int
    original_byte: Optional[int]
    new_byte: Optional[int]
    original_size: int
    new_size: int
    chunks: int
    bytes_read: int
    bytes_written: int
    verification: VerificationReport
    backup_retained: bool

    def summary(self) -> str:
        def fmt(value):
            return "-" if value is None else f"0x{value:02X}"

        return (
            f"{self.operation.value} @ {self.position} in {self.path}: "
            f"{fmt(self.original_byte)} -> {fmt(self.new_byte)}, "
            f"{self.original_size} -> {self.new_size} bytes"
        )


class ByteEditor:
    """Surgical single-byte editing with backup, verification and atomic swap."""

    def __init__(
        self,
        chunk_size: int = DEFAULT_CHUNK_SIZE,
        max_chunks: int = MAX_CHUNKS_ALLOWED,
        verification_window: int = DEFAULT_VERIFICATION_WINDOW,
        lock_timeout: Optional[float] = None,
        observer: Optional[EditObserver] = None,
    ):
        """Initialize byte editor.

        Args:
            chunk_size: Draft builder buffer capacity in bytes
            max_chunks: Ceiling on draft builder read iterations
            verification_window: Window size for the verification pass
            lock_timeout: If set, hold an advisory lock on ``<name>.lock``
                for the whole edit, waiting at most this many seconds
            observer: Progress observer (defaults to logging)
        """
        self.chunk_size = chunk_size
        self.max_chunks = max_chunks
        self.verification_window = verification_window
        self.lock_timeout = lock_timeout
        self.observer = observer if observer is not None else LoggingObserver()
        self.monitor = PerformanceMonitor()

    def replace_byte(self, file_path: Union[str, Path], position: int, new_value: int) -> EditResult:
        """Replace the byte at ``position`` with ``new_value``; length unchanged."""
        return self.execute(MutationRequest.create(file_path, position, Replace(new_value)))

    def remove_byte(self, file_path: Union[str, Path], position: int) -> EditResult:
        """Remove the byte at ``position``; later bytes shift one offset earlier."""
        return self.execute(MutationRequest.create(file_path, position, Remove()))

    def add_byte(self, file_path: Union[str, Path], position: int, value: int) -> EditResult:
        """Insert ``value`` at ``position``; ``position == size`` appends."""
        return self.execute(MutationRequest.create(file_path, position, Add(value)))

    def execute(self, request: MutationRequest) -> EditResult:
        """Run the full pipeline for one request.

        Raises:
            TargetNotFoundError: Path does not exist (nothing touched)
            InvalidInputError: Bad path, position or value (nothing touched)
            IntegrityError: Draft build or verification failed (draft
                deleted, backup kept, original untouched)
            SwapError: Rename failed (original, backup and draft kept)
        """
        operation = request.operation

        # validation must see the file as it is once the lock is held
        with target_lock(request.path, self.lock_timeout):
            with self._phase(
                Phase.VALIDATE, path=str(request.path), position=request.byte_position
            ) as done:
                original_size = validate_position(
                    request.path, request.byte_position, allow_append=operation.allows_append
                )
                backup = BackupManager(request.path)
                draft_path = sibling_path(request.path, DRAFT_SUFFIX)
                done["size"] = original_size

            return self._apply(request, original_size, backup, draft_path)

    def _apply(
        self,
        request: MutationRequest,
        original_size: int,
        backup: BackupManager,
        draft_path: Path,
    ) -> EditResult:
        path = request.path
        position = request.byte_position
        operation = request.operation

        with self._phase(Phase.BACKUP, backup_path=str(backup.backup_path)):
            backup.create()

        original_byte = read_byte_at(path, position) if position < original_size else None

        builder = DraftBuilder(path, draft_path, self.chunk_size, self.max_chunks)
        with self._phase(Phase.BUILD, draft_path=str(draft_path), operation=operation.kind.value) as done:
            report = builder.build(operation, position)
            done.update(chunks=report.chunks, bytes_written=report.bytes_written)

        verifier = IntegrityVerifier(path, draft_path, self.verification_window)
        with self._phase(Phase.VERIFY) as done:
            try:
                verification = verifier.verify(operation, position, original_byte)
            except Exception:
                builder.discard()
                raise
            done["at_position"] = verification.at_position

        if operation.kind is OperationKind.REPLACE and original_byte == operation.new_byte:
            self.observer.warning(
                Phase.VERIFY, f"Byte at position {position} already 0x{original_byte:02X}"
            )

        with self._phase(Phase.SWAP, draft_path=str(draft_path)):
            AtomicSwapper(path, backup.backup_path).swap(draft_path)

        with self._phase(Phase.CLEANUP) as done:
            backup_retained = not backup.discard()
            done["backup_retained"] = backup_retained

        if backup_retained:
            self.observer.warning(Phase.CLEANUP, f"Backup file retained at {backup.backup_path}")

        result = EditResult(
            path=path,
            operation=operation.kind,
            position=position,
            original_byte=original_byte,
            new_byte=operation.new_byte,
            original_size=original_size,
            new_size=verification.draft_size,
            chunks=report.chunks,
            bytes_read=report.bytes_read,
            bytes_written=report.bytes_written,
            verification=verification,
            backup_retained=backup_retained,
        )
        logger.info(f"Edit complete: {result.summary()}")
        return result

    @contextmanager
    def _phase(self, phase: Phase, **details: Any):
        self.observer.phase_started(phase, details)
        completed: dict[str, Any] = {}
        try:
            with self.monitor.measure_phase(phase.value):
                yield completed
        except Exception as e:
            self.observer.phase_failed(phase, e)
            raise
        self.observer.phase_completed(phase, completed)


def replace_byte(
    file_path: Union[str, Path], position: int, new_value: int, **editor_options: Any
) -> EditResult:
    """Quick replace with a one-shot ByteEditor.

    Args:
        file_path: Path to file
        position: Zero-indexed offset of the byte to replace
        new_value: New byte value (0-255)
        **editor_options: Passed to ByteEditor
    """
    return ByteEditor(**editor_options).replace_byte(file_path, position, new_value)


def remove_byte(file_path: Union[str, Path], position: int, **editor_options: Any) -> EditResult:
    """Quick remove with a one-shot ByteEditor."""
    return ByteEditor(**editor_options).remove_byte(file_path, position)


def add_byte(
    file_path: Union[str, Path], position: int, value: int, **editor_options: Any
) -> EditResult:
    """Quick insert with a one-shot ByteEditor."""
    return ByteEditor(**editor_options).add_byte(file_path, position, value)
