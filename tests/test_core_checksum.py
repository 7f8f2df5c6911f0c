"""Tests for the rolling position-sensitive checksum."""
from byte_editor.core.checksum import RollingChecksum, window_checksum
from hypothesis import given
from hypothesis import strategies as st


class TestWindowChecksum:
    """Test single-window checksums."""

    def test_empty_window(self) -> None:
        assert window_checksum(b"") == 0

    def test_single_byte(self) -> None:
        # rotl(1, 0) + 1
        assert window_checksum(b"\x01") == 2

    def test_order_sensitive(self) -> None:
        """Transposed bytes produce a different checksum."""
        assert window_checksum(b"\x01\x02") == 8
        assert window_checksum(b"\x02\x01") == 7

    def test_rotation_wraps_every_64_bytes(self) -> None:
        window = b"\x01" + bytes(63) + b"\x01"
        assert window_checksum(window) == 4

    def test_accepts_bytearray_and_memoryview(self) -> None:
        data = b"\x10\x20\x30"
        assert window_checksum(bytearray(data)) == window_checksum(data)
        assert window_checksum(memoryview(data)) == window_checksum(data)

    @given(window=st.binary(max_size=512))
    def test_fits_in_64_bits(self, window: bytes) -> None:
        assert 0 <= window_checksum(window) < 2**64


class TestRollingChecksum:
    """Test accumulation across windows."""

    def test_accumulates_window_sums(self) -> None:
        checksum = RollingChecksum()
        checksum.update(b"\x01\x02").update(b"\x03")

        assert checksum.value == window_checksum(b"\x01\x02") + window_checksum(b"\x03")
        assert checksum.bytes_seen == 3

    def test_hexdigest_is_zero_padded(self) -> None:
        checksum = RollingChecksum().update(b"\x01")
        assert checksum.hexdigest() == "0000000000000002"

    def test_equality(self) -> None:
        assert RollingChecksum().update(b"abc") == RollingChecksum().update(b"abc")
        assert RollingChecksum().update(b"abc") != RollingChecksum().update(b"acb")

    def test_wraps_at_64_bits(self) -> None:
        checksum = RollingChecksum()
        for _ in range(1000):
            checksum.update(b"\xff" * 64)
        assert 0 <= checksum.value < 2**64
