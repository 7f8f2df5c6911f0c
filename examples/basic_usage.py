#!/usr/bin/env python3
"""Basic usage examples for the byte-editor library."""

import logging
import tempfile
from pathlib import Path

from byte_editor import (
    ByteEditor,
    IntegrityError,
    InvalidInputError,
    RecordingObserver,
    add_byte,
    remove_byte,
    replace_byte,
)


def hex_edit_example(workspace: Path):
    """Replace one byte in place."""
    print("=== Hex Edit Example ===")

    target = workspace / "pytest_file_1.py"
    target.write_bytes(b"def test_one():\n    assert True\n")

    result = replace_byte(target, 3, 0x61)
    print(result.summary())
    print(f"Now: {target.read_bytes()!r}\n")


def remove_byte_example(workspace: Path):
    """Remove one byte; the rest of the file shifts down by one."""
    print("=== Remove Byte Example ===")

    target = workspace / "pytest_file_2.py"
    target.write_bytes(b"def test_two():\n    assert True\n")

    result = remove_byte(target, 3)
    print(result.summary())
    print(f"Now: {target.read_bytes()!r}\n")


def add_byte_example(workspace: Path):
    """Insert one byte; the rest of the file shifts up by one."""
    print("=== Add Byte Example ===")

    target = workspace / "pytest_file_3.py"
    target.write_bytes(b"def tst_three():\n    assert True\n")

    result = add_byte(target, 5, ord("e"))
    print(result.summary())
    print(f"Now: {target.read_bytes()!r}\n")


def observer_example(workspace: Path):
    """Collect phase events and timings from an editor."""
    print("=== Observer Example ===")

    target = workspace / "firmware.bin"
    target.write_bytes(bytes(range(256)) * 16)

    observer = RecordingObserver()
    editor = ByteEditor(chunk_size=64, observer=observer)
    editor.replace_byte(target, 1000, 0xFF)

    for event in observer.events:
        print(f"  {event['event']:<9} {event['phase'].value:<8} {event['details']}")

    for phase, stats in editor.monitor.get_all_stats().items():
        print(f"  {phase:<8} {stats['total_time'] * 1000:.2f} ms")
    print()


def error_handling_example(workspace: Path):
    """Invalid requests fail before anything is written."""
    print("=== Error Handling Example ===")

    target = workspace / "small.bin"
    target.write_bytes(b"\x00\x11")

    try:
        remove_byte(target, 10)
    except InvalidInputError as e:
        print(f"{e.kind}: {e}")

    try:
        ByteEditor(max_chunks=1).remove_byte(workspace / "firmware.bin", 0)
    except IntegrityError as e:
        print(f"{e.kind} during {e.phase}: {e}")

    leftovers = sorted(p.name for p in workspace.iterdir() if p.suffix in (".draft", ".backup"))
    print(f"Leftover artifacts: {leftovers}\n")


def main():
    """Run all examples."""
    logging.basicConfig(level=logging.WARNING, format="%(levelname)s %(name)s: %(message)s")

    with tempfile.TemporaryDirectory() as temp_dir:
        workspace = Path(temp_dir)
        hex_edit_example(workspace)
        remove_byte_example(workspace)
        add_byte_example(workspace)
        observer_example(workspace)
        error_handling_example(workspace)

    print("All examples completed!")


if __name__ == "__main__":
    main()
