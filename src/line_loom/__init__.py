"""Line-addressable text file editing with direct and atomic variants."""

from .core import (
    CommitError,
    LineNotFoundError,
    LoomConfig,
    LoomConfigError,
    LoomContractError,
    LoomError,
    LoomIOError,
    LoomMemoryError,
    ModifierError,
    ModifierResultError,
    TargetNotFoundError,
    TextNotFoundError,
    performance_monitor,
)
from .lines import (
    Match,
    delete_line,
    delete_line_safe,
    delete_lines,
    delete_lines_safe,
    find_line,
    find_line_in_range,
    find_line_regex,
    find_line_regex_in_range,
    insert_line,
    insert_line_safe,
    insert_lines,
    insert_lines_safe,
    locate,
    modify_line,
    modify_line_safe,
    modify_lines,
    modify_lines_safe,
    replace_line,
    replace_line_safe,
    replace_lines,
    replace_lines_safe,
    replace_text,
    replace_text_all,
    replace_text_all_safe,
    replace_text_safe,
)
from .loom import LineLoom

__version__ = "0.1.0"

__all__ = [
    # Facade
    "LineLoom",
    "LoomConfig",
    "performance_monitor",
    # Search
    "Match",
    "locate",
    "find_line",
    "find_line_in_range",
    "find_line_regex",
    "find_line_regex_in_range",
    # Mutations
    "replace_line",
    "replace_line_safe",
    "replace_lines",
    "replace_lines_safe",
    "insert_line",
    "insert_line_safe",
    "insert_lines",
    "insert_lines_safe",
    "modify_line",
    "modify_line_safe",
    "modify_lines",
    "modify_lines_safe",
    "delete_line",
    "delete_line_safe",
    "delete_lines",
    "delete_lines_safe",
    "replace_text",
    "replace_text_safe",
    "replace_text_all",
    "replace_text_all_safe",
    # Errors
    "LoomError",
    "LoomContractError",
    "LoomConfigError",
    "ModifierResultError",
    "ModifierError",
    "TargetNotFoundError",
    "LineNotFoundError",
    "TextNotFoundError",
    "LoomIOError",
    "CommitError",
    "LoomMemoryError",
]
