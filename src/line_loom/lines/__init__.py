"""Line location and line mutation."""

from .engine import (
    EditState,
    delete_line,
    delete_line_safe,
    delete_lines,
    delete_lines_safe,
    insert_line,
    insert_line_safe,
    insert_lines,
    insert_lines_safe,
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
from .locator import (
    Match,
    find_line,
    find_line_in_range,
    find_line_regex,
    find_line_regex_in_range,
    locate,
)

__all__ = [
    "EditState",
    "Match",
    "locate",
    "find_line",
    "find_line_in_range",
    "find_line_regex",
    "find_line_regex_in_range",
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
]
