"""Tests for the four-phase integrity verification."""
import itertools
import logging
import tempfile
from pathlib import Path
from unittest.mock import patch

import pytest
from byte_editor.core.errors import IntegrityError, InvalidInputError
from byte_editor.core.operations import Add, Remove, Replace
from byte_editor.core.verifier import IntegrityVerifier


class TestIntegrityVerifier:
    """Test verification of original/draft pairs built by hand."""

    def setup_method(self) -> None:
        """Set up test environment."""
        self.temp_dir = tempfile.mkdtemp()
        self.original = Path(self.temp_dir) / "data.bin"
        self.draft = Path(self.temp_dir) / "data.bin.draft"
        self.original.write_bytes(bytes([0x00, 0x11, 0x22, 0x33, 0x44]))

    def teardown_method(self) -> None:
        """Clean up test environment."""
        import shutil

        shutil.rmtree(self.temp_dir)

    def _verifier(self, draft_bytes: bytes, window_size: int = 64) -> IntegrityVerifier:
        self.draft.write_bytes(draft_bytes)
        return IntegrityVerifier(self.original, self.draft, window_size=window_size)

    def test_replace_passes(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0xFF, 0x33, 0x44]))

        report = verifier.verify(Replace(0xFF), 2, 0x22)

        assert report.original_size == 5
        assert report.draft_size == 5
        assert report.pre_position_bytes == 2
        assert report.post_position_bytes == 2
        assert "0x22 -> 0xFF" in report.at_position

    def test_small_windows(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0x22, 0xFF, 0x44]), window_size=1)
        report = verifier.verify(Replace(0xFF), 3, 0x33)
        assert report.pre_position_bytes == 3

    def test_length_mismatch(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0xFF, 0x33]))

        with pytest.raises(IntegrityError, match="size mismatch") as exc_info:
            verifier.verify(Replace(0xFF), 2, 0x22)

        assert exc_info.value.phase == "length"

    def test_pre_position_byte_mismatch(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x10, 0xFF, 0x33, 0x44]))

        with pytest.raises(IntegrityError, match=r"original\[1\]=0x11") as exc_info:
            verifier.verify(Replace(0xFF), 2, 0x22)

        assert exc_info.value.phase == "pre-position"

    def test_pre_position_checksum_mismatch(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0xFF, 0x33, 0x44]))

        with patch(
            "byte_editor.core.checksum.window_checksum", side_effect=itertools.count(1)
        ):
            with pytest.raises(IntegrityError, match="checksum mismatch") as exc_info:
                verifier.verify(Replace(0xFF), 2, 0x22)

        assert exc_info.value.phase == "pre-position"

    def test_unexpected_original_byte(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0xFF, 0x33, 0x44]))

        with pytest.raises(IntegrityError, match="Original byte mismatch") as exc_info:
            verifier.verify(Replace(0xFF), 2, 0x99)

        assert exc_info.value.phase == "at-position"

    def test_wrong_new_byte(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0xFE, 0x33, 0x44]))

        with pytest.raises(IntegrityError, match="Modified byte mismatch"):
            verifier.verify(Replace(0xFF), 2, 0x22)

    def test_same_value_replace_warns(self, caplog: pytest.LogCaptureFixture) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0x22, 0x33, 0x44]))

        with caplog.at_level(logging.WARNING):
            verifier.verify(Replace(0x22), 2, 0x22)

        assert "unchanged" in caplog.text

    def test_post_position_mismatch(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0xFF, 0x33, 0x45]))

        with pytest.raises(IntegrityError, match="byte mismatch") as exc_info:
            verifier.verify(Replace(0xFF), 2, 0x22)

        assert exc_info.value.phase == "post-position"

    def test_remove_passes(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0x33, 0x44]))

        report = verifier.verify(Remove(), 2, 0x22)

        assert report.draft_size == 4
        assert "from position 3" in report.at_position
        assert report.post_position_bytes == 1

    def test_remove_last_byte(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0x22, 0x33]))

        report = verifier.verify(Remove(), 4, 0x44)

        assert "last byte" in report.at_position
        assert report.post_position_bytes == 0

    def test_remove_without_frame_shift_fails(self) -> None:
        # byte 0x22 overwritten instead of removed
        verifier = self._verifier(bytes([0x00, 0x11, 0x99, 0x44]))

        with pytest.raises(IntegrityError, match="Frame-shift") as exc_info:
            verifier.verify(Remove(), 2, 0x22)

        assert exc_info.value.phase == "at-position"

    def test_remove_wrong_byte_recorded(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0x33, 0x44]))

        with pytest.raises(IntegrityError, match="Removed byte mismatch"):
            verifier.verify(Remove(), 2, 0x23)

    def test_remove_post_position_mismatch(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x22, 0x33, 0x99]))

        with pytest.raises(IntegrityError) as exc_info:
            verifier.verify(Remove(), 1, 0x11)

        assert exc_info.value.phase == "post-position"

    def test_add_passes(self) -> None:
        verifier = self._verifier(bytes([0x00, 0xAB, 0x11, 0x22, 0x33, 0x44]))

        report = verifier.verify(Add(0xAB), 1, 0x11)

        assert report.draft_size == 6
        assert "shifted to position 2" in report.at_position

    def test_add_append_passes(self) -> None:
        verifier = self._verifier(bytes([0x00, 0x11, 0x22, 0x33, 0x44, 0xAB]))

        report = verifier.verify(Add(0xAB), 5, None)

        assert "appended" in report.at_position

    def test_add_without_shift_fails(self) -> None:
        # new byte written but original byte at the position dropped
        verifier = self._verifier(bytes([0x00, 0xAB, 0x22, 0x33, 0x44, 0x44]))

        with pytest.raises(IntegrityError, match="Frame-shift"):
            verifier.verify(Add(0xAB), 1, 0x11)

    def test_verification_is_read_only(self) -> None:
        draft_bytes = bytes([0x00, 0x11, 0x99, 0x44])
        verifier = self._verifier(draft_bytes)

        with pytest.raises(IntegrityError):
            verifier.verify(Remove(), 2, 0x22)

        assert self.original.read_bytes() == bytes([0x00, 0x11, 0x22, 0x33, 0x44])
        assert self.draft.read_bytes() == draft_bytes

    def test_invalid_window(self) -> None:
        with pytest.raises(InvalidInputError):
            IntegrityVerifier(self.original, self.draft, window_size=0)
