#!/usr/bin/env python3
"""Basic usage examples for the line-loom library."""

import logging
import tempfile
from pathlib import Path

from line_loom import (
    LineLoom,
    LineNotFoundError,
    LoomConfig,
    ModifierResultError,
    performance_monitor,
)


def search_example(loom: LineLoom, path: Path):
    """Demonstrate literal and regex search."""
    print("=== Search Example ===")

    for match in loom.find_line(path, "feature", case_sensitive=False):
        print(f"  {match}")

    todo = loom.find_line_regex(path, r"\bTODO\b")
    print(f"Found {len(todo)} TODO markers")


def mutation_example(loom: LineLoom, path: Path):
    """Demonstrate direct and atomic line edits."""
    print("\n=== Mutation Example ===")

    loom.replace_line_safe(path, 1, "# My Document (revised)")
    loom.insert_lines(path, {4: "- Feature 0", 6: "- Feature 1.5"})
    loom.modify_line_safe(path, 2, lambda text: text.strip() or "(blank)")
    count = loom.replace_text_all(path, "Feature", "Capability")
    print(f"Made {count} replacements")

    print(path.read_text())


def failure_example(loom: LineLoom, path: Path):
    """Failed edits leave the file exactly as it was."""
    print("=== Failure Example ===")
    before = path.read_bytes()

    try:
        loom.delete_lines_safe(path, [1, 999])
    except LineNotFoundError as e:
        print(f"Delete refused: {e}")

    try:
        loom.modify_line(path, 1, lambda text: None)
    except ModifierResultError as e:
        print(f"Modify refused: {e}")

    print(f"File unchanged: {path.read_bytes() == before}")


def main():
    """Run all examples."""
    logging.basicConfig(level=logging.INFO, format="%(name)s: %(message)s")

    with tempfile.TemporaryDirectory() as temp_dir:
        path = Path(temp_dir) / "document.md"
        path.write_text(
            "# My Document\n"
            "   \n"
            "## Features\n"
            "- Feature 1\n"
            "- Feature 2 TODO\n"
            "- Feature 3\n"
        )

        loom = LineLoom(LoomConfig(fsync=True))
        search_example(loom, path)
        mutation_example(loom, path)
        failure_example(loom, path)

    print("\n=== Timings ===")
    for operation, stats in performance_monitor.get_all_stats().items():
        print(f"{operation}: {stats['count']} call(s), avg {stats['average_time'] * 1000:.2f} ms")


if __name__ == "__main__":
    main()
