"""Seek-based read access to single bytes of a file."""
import logging
from pathlib import Path
from typing import BinaryIO, Optional, Union

logger = logging.getLogger(__name__)


class ByteReader:
    """Read-only seek access for precise positioning.

    Used to capture the byte at the edit offset straight from the original,
    independent of the streaming pass that builds the draft.
    """

    def __init__(self, file_path: Union[str, Path]):
        """Initialize seek-based reader.

        Args:
            file_path: Path to the file to read
        """
        self.file_path = Path(file_path)
        self._file: Optional[BinaryIO] = None

    def __enter__(self):
        """Context manager entry."""
        self.open()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()

    def open(self):
        if self._file is not None:
            raise RuntimeError("File is already open")
        self._file = open(self.file_path, "rb")

    def close(self):
        if self._file is not None:
            self._file.close()
            self._file = None

    def read_at(self, offset: int, size: int) -> bytes:
        """Read up to ``size`` bytes starting at ``offset``.

        Args:
            offset: Starting offset
            size: Number of bytes to read

        Returns:
            Bytes read (shorter than ``size`` near end of file)
        """
        if self._file is None:
            raise RuntimeError("File not open")
        self._file.seek(offset)
        return self._file.read(size)

    def read_byte_at(self, offset: int) -> Optional[int]:
        """Read the byte at ``offset``, or None past end of file."""
        data = self.read_at(offset, 1)
        return data[0] if data else None


def read_byte_at(file_path: Union[str, Path], offset: int) -> Optional[int]:
    """Open ``file_path``, read one byte at ``offset`` and close it again."""
    with ByteReader(file_path) as reader:
        value = reader.read_byte_at(offset)
    logger.debug(f"Byte at {offset} in {file_path}: {value!r}")
    return value
