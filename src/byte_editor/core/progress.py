"""Observers notified by the editor at pipeline phase boundaries."""
import logging
import time
from enum import Enum
from typing import Any

logger = logging.getLogger(__name__)


class Phase(str, Enum):
    VALIDATE = "validate"
    BACKUP = "backup"
    BUILD = "build"
    VERIFY = "verify"
    SWAP = "swap"
    CLEANUP = "cleanup"


class EditObserver:
    """Receives progress events. All hooks are no-ops; override what you need."""

    def phase_started(self, phase: Phase, details: dict[str, Any]):
        pass

    def phase_completed(self, phase: Phase, details: dict[str, Any]):
        pass

    def phase_failed(self, phase: Phase, error: Exception):
        pass

    def warning(self, phase: Phase, message: str):
        pass


class LoggingObserver(EditObserver):
    """Renders progress through the standard logging module."""

    def __init__(self, log: logging.Logger = logger):
        self.log = log

    def phase_started(self, phase, details):
        self.log.info(f"[{phase.value}] started {details}")

    def phase_completed(self, phase, details):
        self.log.info(f"[{phase.value}] completed {details}")

    def phase_failed(self, phase, error):
        self.log.error(f"[{phase.value}] failed: {error}")

    def warning(self, phase, message):
        self.log.warning(f"[{phase.value}] {message}")


class RecordingObserver(EditObserver):
    """Keeps an in-memory audit trail of every event."""

    def __init__(self):
        self.events: list[dict[str, Any]] = []

    def _record(self, event: str, phase: Phase, details: Any):
        self.events.append(
            {"timestamp": time.time(), "event": event, "phase": phase, "details": details}
        )

    def phase_started(self, phase, details):
        self._record("started", phase, details)

    def phase_completed(self, phase, details):
        self._record("completed", phase, details)

    def phase_failed(self, phase, error):
        self._record("failed", phase, error)

    def warning(self, phase, message):
        self._record("warning", phase, message)

    def phases(self, event: str = "completed") -> list[Phase]:
        """Phases that produced ``event``, in order."""
        return [entry["phase"] for entry in self.events if entry["event"] == event]
