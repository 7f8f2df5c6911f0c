"""Safety mechanisms around the draft: backup copy, atomic swap, optional lock."""
import logging
import os
import shutil
import time
from contextlib import contextmanager, nullcontext
from pathlib import Path
from typing import Optional, Union

from filelock import FileLock

from .errors import InvalidInputError, SwapError, TargetNotFoundError

logger = logging.getLogger(__name__)

BACKUP_SUFFIX = ".backup"
DRAFT_SUFFIX = ".draft"
LOCK_SUFFIX = ".lock"


def sibling_path(file_path: Union[str, Path], suffix: str) -> Path:
    """Return ``<name><suffix>`` in the same directory as ``file_path``."""
    file_path = Path(file_path)
    if not file_path.name:
        raise InvalidInputError(f"Invalid file name: {file_path}")
    return file_path.with_name(f"{file_path.name}{suffix}")


class BackupManager:
    """Byte-exact sibling copy of the original, kept until the swap succeeds."""

    def __init__(self, file_path: Union[str, Path]):
        """Initialize backup manager.

        Args:
            file_path: Path to the file being edited
        """
        self.file_path = Path(file_path)
        self.backup_path = sibling_path(self.file_path, BACKUP_SUFFIX)

    def create(self) -> Path:
        """Copy the original to ``<name>.backup``.

        Raises:
            OSError: If the copy fails; the edit must not proceed
        """
        try:
            shutil.copy2(self.file_path, self.backup_path)
        except OSError as e:
            logger.error(f"Failed to create backup {self.backup_path}: {e}")
            raise

        logger.info(f"Created backup: {self.backup_path}")
        return self.backup_path

    def exists(self) -> bool:
        return self.backup_path.exists()

    def discard(self) -> bool:
        """Remove the backup after a completed swap.

        Failure is non-fatal: the backup is left on disk and a warning logged.

        Returns:
            True if the backup is gone, False if it was retained
        """
        try:
            os.remove(self.backup_path)
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.warning(f"Could not remove backup file {self.backup_path} ({e}); backup retained")
            return False

        logger.info(f"Removed backup: {self.backup_path}")
        return True


class AtomicSwapper:
    """Renames the verified draft over the original.

    Strict policy: if the rename fails nothing is copied or deleted, so the
    original, the backup and the draft all stay on disk for manual recovery.
    """

    def __init__(self, file_path: Union[str, Path], backup_path: Optional[Path] = None):
        self.file_path = Path(file_path)
        self.backup_path = backup_path

    def swap(self, draft_path: Union[str, Path]):
        """Atomically replace the target file with ``draft_path``.

        Raises:
            SwapError: If the rename fails
        """
        draft_path = Path(draft_path)

        try:
            os.replace(draft_path, self.file_path)
        except OSError as e:
            logger.error(
                f"Cannot atomically replace {self.file_path} with {draft_path}: {e}. "
                f"Original, backup and draft preserved for manual recovery"
            )
            raise SwapError(
                f"Atomic replace of {self.file_path} failed: {e}",
                draft_path=draft_path,
                backup_path=self.backup_path,
            ) from e

        logger.info(f"Atomically replaced {self.file_path} with {draft_path}")


def target_lock(file_path: Union[str, Path], timeout: Optional[float] = None):
    """Advisory lock on ``<name>.lock`` when ``timeout`` is given, else a no-op context.

    Without a timeout no lock is taken and serializing edits of the same
    path is the caller's responsibility. The lock file is left in place
    after release; deleting it would let a waiter lock an unlinked inode.
    """
    if timeout is None:
        return nullcontext()

    file_path = Path(file_path)
    if not file_path.parent.is_dir():
        raise TargetNotFoundError(f"Target directory does not exist: {file_path.parent}")
    return FileLock(str(sibling_path(file_path, LOCK_SUFFIX)), timeout=timeout)


class PerformanceMonitor:
    """Per-phase timing for edit pipelines."""

    def __init__(self):
        self.metrics = {}

    @contextmanager
    def measure_phase(self, phase: str):
        """Context manager to measure phase duration.

        Args:
            phase: Name of pipeline phase being measured
        """
        start_time = time.perf_counter()
        try:
            yield
        finally:
            self._record(phase, time.perf_counter() - start_time)

    def _record(self, phase: str, duration: float):
        metrics = self.metrics.setdefault(
            phase, {"count": 0, "total_time": 0.0, "min_time": float("inf"), "max_time": 0.0}
        )
        metrics["count"] += 1
        metrics["total_time"] += duration
        metrics["min_time"] = min(metrics["min_time"], duration)
        metrics["max_time"] = max(metrics["max_time"], duration)

    def get_stats(self, phase: str) -> dict:
        """Get statistics for a phase, or an empty dict if never measured."""
        if phase not in self.metrics:
            return {}

        metrics = self.metrics[phase]
        return {**metrics, "average_time": metrics["total_time"] / metrics["count"]}

    def get_all_stats(self) -> dict:
        return {phase: self.get_stats(phase) for phase in self.metrics}
