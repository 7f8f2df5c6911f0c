"""Tests for target path and position validation."""
import tempfile
from pathlib import Path

import pytest
from byte_editor.core.errors import InvalidInputError, TargetNotFoundError
from byte_editor.core.validation import validate_position


class TestValidatePosition:
    """Test pre-flight checks."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.test_file = Path(self.temp_dir) / "test.bin"

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def test_valid_position_returns_size(self) -> None:
        self.test_file.write_bytes(b"\x00\x11\x22")
        assert validate_position(self.test_file, 0) == 3
        assert validate_position(str(self.test_file), 2) == 3

    def test_missing_file(self) -> None:
        missing = Path(self.temp_dir) / "missing.bin"

        with pytest.raises(TargetNotFoundError) as exc_info:
            validate_position(missing, 0)

        assert isinstance(exc_info.value, FileNotFoundError)
        assert exc_info.value.kind == "NotFound"

    def test_directory_is_not_a_regular_file(self) -> None:
        with pytest.raises(InvalidInputError, match="not a regular file"):
            validate_position(self.temp_dir, 0)

    def test_empty_file(self) -> None:
        self.test_file.write_bytes(b"")

        with pytest.raises(InvalidInputError, match="empty file"):
            validate_position(self.test_file, 0)

    def test_position_equal_to_size(self) -> None:
        self.test_file.write_bytes(b"\x00\x11")

        with pytest.raises(InvalidInputError, match="exceeds file size"):
            validate_position(self.test_file, 2)

    def test_position_beyond_size(self) -> None:
        self.test_file.write_bytes(b"\x00\x11")

        with pytest.raises(InvalidInputError) as exc_info:
            validate_position(self.test_file, 10)

        assert isinstance(exc_info.value, ValueError)
        assert exc_info.value.kind == "InvalidInput"

    def test_negative_position(self) -> None:
        self.test_file.write_bytes(b"\x00")

        with pytest.raises(InvalidInputError, match="negative"):
            validate_position(self.test_file, -1)

    def test_non_integer_position(self) -> None:
        self.test_file.write_bytes(b"\x00\x11")

        with pytest.raises(InvalidInputError, match="integer"):
            validate_position(self.test_file, True)
        with pytest.raises(InvalidInputError, match="integer"):
            validate_position(self.test_file, 1.0)

    def test_append_position_allowed_for_insertion(self) -> None:
        self.test_file.write_bytes(b"\x00\x11")

        assert validate_position(self.test_file, 2, allow_append=True) == 2
        with pytest.raises(InvalidInputError):
            validate_position(self.test_file, 3, allow_append=True)

    def test_empty_file_accepts_append_at_zero(self) -> None:
        self.test_file.write_bytes(b"")
        assert validate_position(self.test_file, 0, allow_append=True) == 0

    def test_path_without_name(self) -> None:
        with pytest.raises(InvalidInputError, match="file name"):
            validate_position(Path("/"), 0)
