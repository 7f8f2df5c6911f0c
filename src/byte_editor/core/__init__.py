"""Core byte editing modules."""

from .checksum import RollingChecksum, window_checksum
from .draft_builder import ChunkWindow, DraftBuilder, DraftReport
from .editor import ByteEditor, EditResult, add_byte, remove_byte, replace_byte
from .errors import (
    ByteEditError,
    IntegrityError,
    InvalidInputError,
    SwapError,
    TargetNotFoundError,
)
from .operations import Add, MutationRequest, Operation, OperationKind, Remove, Replace
from .progress import EditObserver, LoggingObserver, Phase, RecordingObserver
from .safety import AtomicSwapper, BackupManager, PerformanceMonitor, sibling_path
from .seek_reader import ByteReader, read_byte_at
from .validation import validate_position
from .verifier import IntegrityVerifier, VerificationReport

__all__ = [
    # Editing pipeline
    'ByteEditor',
    'EditResult',
    'replace_byte',
    'remove_byte',
    'add_byte',

    # Requests and operations
    'MutationRequest',
    'Operation',
    'OperationKind',
    'Replace',
    'Remove',
    'Add',

    # Pipeline stages
    'validate_position',
    'DraftBuilder',
    'DraftReport',
    'ChunkWindow',
    'IntegrityVerifier',
    'VerificationReport',
    'RollingChecksum',
    'window_checksum',
    'ByteReader',
    'read_byte_at',

    # Safety mechanisms
    'BackupManager',
    'AtomicSwapper',
    'PerformanceMonitor',
    'sibling_path',

    # Progress
    'EditObserver',
    'LoggingObserver',
    'RecordingObserver',
    'Phase',

    # Errors
    'ByteEditError',
    'TargetNotFoundError',
    'InvalidInputError',
    'IntegrityError',
    'SwapError',
]
