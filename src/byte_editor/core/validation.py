"""Pre-flight checks on the target path and byte position."""
import logging
from pathlib import Path
from typing import Union

from .errors import InvalidInputError, TargetNotFoundError

logger = logging.getLogger(__name__)


def validate_position(
    file_path: Union[str, Path], byte_position: int, allow_append: bool = False
) -> int:
    """Check that ``byte_position`` can be edited in ``file_path``.

    Reads metadata only; nothing is opened or written.

    Args:
        file_path: Target file
        byte_position: Zero-indexed byte offset
        allow_append: Accept ``byte_position == file size`` (insertion at EOF)

    Returns:
        Size of the target file in bytes

    Raises:
        TargetNotFoundError: If the path does not exist
        InvalidInputError: If the path is not a regular file, the file is
            empty, or the position is out of bounds
    """
    file_path = Path(file_path)

    if not file_path.name:
        raise InvalidInputError(f"Target path has no file name component: {file_path}")

    if not file_path.exists():
        raise TargetNotFoundError(f"Target file does not exist: {file_path}")

    if not file_path.is_file():
        raise InvalidInputError(f"Target path is not a regular file: {file_path}")

    if isinstance(byte_position, bool) or not isinstance(byte_position, int):
        raise InvalidInputError(
            f"Byte position must be an integer, got {type(byte_position).__name__}"
        )

    if byte_position < 0:
        raise InvalidInputError(f"Byte position {byte_position} is negative")

    file_size = file_path.stat().st_size

    if file_size == 0 and not allow_append:
        raise InvalidInputError(f"Cannot edit byte in empty file: {file_path}")

    limit = file_size if allow_append else file_size - 1
    if byte_position > limit:
        raise InvalidInputError(
            f"Byte position {byte_position} exceeds file size {file_size} "
            f"(valid range: 0-{max(limit, 0)})"
        )

    logger.debug(f"Validated position {byte_position} in {file_path} ({file_size} bytes)")
    return file_size
