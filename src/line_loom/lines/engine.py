"""Line mutation engine: replace, insert, modify and delete numbered lines.

Every operation comes in two tiers. The direct tier (``replace_line``)
builds the result in memory and rewrites the file in place. The safe tier
(``replace_line_safe``) streams the result into a temp file next to the
target and renames it over the original, so the original is untouched
unless the whole operation succeeds.

All operations share one template: validate, scan every line through a
:class:`~line_loom.lines.edits.LineEdit`, verify that every requested line
was acted on, then commit.
"""
import logging
import os
from collections.abc import Callable, Collection
from contextlib import closing
from enum import Enum
from pathlib import Path
from typing import Optional, TextIO, Union

from ..core.config import LoomConfig, resolve_charset
from ..core.errors import LoomIOError, LoomMemoryError
from ..core.safety import SafeLineEdit, overwrite_in_place, performance_monitor
from ..core.stream import memory_sink, read_lines
from ..core.validation import (
    validate_content,
    validate_file,
    validate_line_number,
    validate_line_numbers,
    validate_modifier,
    validate_modifiers,
    validate_replacements,
    validate_text_target,
)
from .edits import (
    DeleteEdit,
    InsertEdit,
    LineEdit,
    ModifyEdit,
    ReplaceEdit,
    ReplaceTextAllEdit,
    ReplaceTextEdit,
)

logger = logging.getLogger(__name__)

PathLike = Union[str, os.PathLike]
Modifier = Callable[[str], str]


class EditState(Enum):
    VALIDATING = "validating"
    SCANNING = "scanning"
    VERIFYING = "verifying"
    COMMITTING = "committing"
    SUCCESS = "success"
    ABORTED = "aborted"


class PendingEdit:
    """One in-flight operation: the edit, its target and its state."""

    def __init__(self, path: Path, edit: LineEdit, operation: str):
        self.path = path
        self.edit = edit
        self.operation = operation
        self.state = EditState.VALIDATING

    def advance(self, state: EditState):
        logger.debug(f"{self.operation} {self.path.name}: {self.state.value} -> {state.value}")
        self.state = state

    def scan(self, encoding: str, out: TextIO):
        """Stream the source through the edit into ``out``, then verify."""
        self.advance(EditState.SCANNING)
        try:
            with closing(read_lines(self.path, encoding)) as lines:
                for line in lines:
                    self.edit.visit(line, out)
            self.edit.finish(out)
        except (OSError, UnicodeError) as e:
            logger.error(f"[{self.operation}] Error processing {self.path}: {e}")
            raise LoomIOError(self.operation, self.path, e) from e

        self.advance(EditState.VERIFYING)
        self.edit.verify(self.path)


def _settings(charset: Optional[str], config: Optional[LoomConfig]) -> tuple[LoomConfig, str]:
    config = config if config is not None else LoomConfig()
    encoding = resolve_charset(charset) if charset is not None else config.encoding
    return config, encoding


def _check_buffer_limit(pending: PendingEdit, config: LoomConfig):
    limit = config.max_buffer_bytes
    if limit is None:
        return
    size = pending.path.stat().st_size
    if size > limit:
        raise LoomMemoryError(
            pending.operation,
            pending.path,
            f"File is {size} bytes, above the {limit} byte in-memory limit",
        )


def _commit_direct(pending: PendingEdit, encoding: str, config: LoomConfig):
    _check_buffer_limit(pending, config)
    try:
        buffer = memory_sink()
        pending.scan(encoding, buffer)
        text = buffer.getvalue()
    except MemoryError as e:
        raise LoomMemoryError(pending.operation, pending.path) from e

    pending.advance(EditState.COMMITTING)
    overwrite_in_place(pending.path, text, encoding, pending.operation)


def _commit_safe(pending: PendingEdit, encoding: str, config: LoomConfig):
    with SafeLineEdit(
        pending.path,
        pending.operation,
        encoding,
        fsync=config.fsync,
        preserve_mode=config.preserve_mode,
    ) as safe_op:
        with safe_op.sink() as out:
            pending.scan(encoding, out)
        pending.advance(EditState.COMMITTING)
        safe_op.commit()


def run_edit(
    path: Path,
    edit: LineEdit,
    operation: str,
    encoding: str,
    config: LoomConfig,
    safe: bool,
) -> LineEdit:
    """Run a validated edit through scan, verify and commit.

    Args:
        path: Validated target file
        edit: Transform to apply
        operation: Public operation name (log messages, temp file tag)
        encoding: Resolved codec name
        config: Settings for this call
        safe: Stage through a temp file and rename instead of rewriting in place

    Returns:
        The edit, for callers that report counts
    """
    pending = PendingEdit(path, edit, operation)
    with performance_monitor.measure_operation(operation):
        try:
            if safe:
                _commit_safe(pending, encoding, config)
            else:
                _commit_direct(pending, encoding, config)
        except Exception:
            pending.advance(EditState.ABORTED)
            raise
        pending.advance(EditState.SUCCESS)
    return edit


# Replace


def _replace(file_path, replacements, charset, config, operation, safe, single):
    path = validate_file(file_path)
    if single:
        line_number, content = replacements
        validate_line_number(line_number)
        validate_content(content)
        replacements = {line_number: content}
    else:
        replacements = validate_replacements(replacements)
    config, encoding = _settings(charset, config)
    run_edit(path, ReplaceEdit(replacements, config.default_newline), operation, encoding, config, safe)


def replace_line(
    file_path: PathLike,
    line_number: int,
    content: str,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Replace a single line, rewriting the file in place.

    Args:
        file_path: File to modify
        line_number: Line to replace (1-based)
        content: New line content, without a line break
        charset: File encoding (defaults to the config's charset)
        config: Settings; a default LoomConfig if None

    Raises:
        LoomContractError: For an invalid file, line number or content
        LineNotFoundError: If the line does not exist; the file is unchanged
        LoomIOError: If reading or writing fails
    """
    _replace(file_path, (line_number, content), charset, config, "replace_line", False, True)


def replace_line_safe(
    file_path: PathLike,
    line_number: int,
    content: str,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Replace a single line through a temp file and an atomic rename."""
    _replace(file_path, (line_number, content), charset, config, "replace_line_safe", True, True)


def replace_lines(
    file_path: PathLike,
    replacements: dict[int, str],
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Replace several lines at once.

    Every line in ``replacements`` must exist, otherwise nothing is written.
    """
    _replace(file_path, replacements, charset, config, "replace_lines", False, False)


def replace_lines_safe(
    file_path: PathLike,
    replacements: dict[int, str],
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Atomic variant of :func:`replace_lines`."""
    _replace(file_path, replacements, charset, config, "replace_lines_safe", True, False)


# Insert


def _insert(file_path, inserts, charset, config, operation, safe, single):
    path = validate_file(file_path)
    if single:
        line_number, content = inserts
        validate_line_number(line_number)
        validate_content(content)
        inserts = {line_number: content}
    else:
        inserts = validate_replacements(inserts, "Inserts")
    config, encoding = _settings(charset, config)
    run_edit(path, InsertEdit(inserts, config.default_newline), operation, encoding, config, safe)


def insert_line(
    file_path: PathLike,
    line_number: int,
    content: str,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Insert a line before the current line at ``line_number``.

    A position past the end of the file appends the line instead.

    Args:
        file_path: File to modify
        line_number: Position the new line will occupy (1-based)
        content: Line content, without a line break
        charset: File encoding (defaults to the config's charset)
        config: Settings; a default LoomConfig if None
    """
    _insert(file_path, (line_number, content), charset, config, "insert_line", False, True)


def insert_line_safe(
    file_path: PathLike,
    line_number: int,
    content: str,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    _insert(file_path, (line_number, content), charset, config, "insert_line_safe", True, True)


def insert_lines(
    file_path: PathLike,
    inserts: dict[int, str],
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Insert several lines, addressed by the file's original numbering.

    ``{2: "X", 4: "Y"}`` puts "X" before original line 2 and "Y" before
    original line 4. Positions past the end are appended in ascending order.
    """
    _insert(file_path, inserts, charset, config, "insert_lines", False, False)


def insert_lines_safe(
    file_path: PathLike,
    inserts: dict[int, str],
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Atomic variant of :func:`insert_lines`."""
    _insert(file_path, inserts, charset, config, "insert_lines_safe", True, False)


# Modify


def _modify(file_path, modifiers, charset, config, operation, safe, single):
    path = validate_file(file_path)
    if single:
        line_number, modifier = modifiers
        validate_line_number(line_number)
        validate_modifier(modifier)
        modifiers = {line_number: modifier}
    else:
        modifiers = validate_modifiers(modifiers)
    config, encoding = _settings(charset, config)
    run_edit(path, ModifyEdit(modifiers, config.default_newline), operation, encoding, config, safe)


def modify_line(
    file_path: PathLike,
    line_number: int,
    modifier: Modifier,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Rewrite one line through a function of its current content.

    Args:
        file_path: File to modify
        line_number: Line to transform (1-based)
        modifier: Pure function from old content to new content
        charset: File encoding (defaults to the config's charset)
        config: Settings; a default LoomConfig if None

    Raises:
        ModifierResultError: If the modifier returns None; nothing is written
        ModifierError: If the modifier raises; nothing is written
        LineNotFoundError: If the line does not exist
    """
    _modify(file_path, (line_number, modifier), charset, config, "modify_line", False, True)


def modify_line_safe(
    file_path: PathLike,
    line_number: int,
    modifier: Modifier,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Atomic variant of :func:`modify_line`."""
    _modify(file_path, (line_number, modifier), charset, config, "modify_line_safe", True, True)


def modify_lines(
    file_path: PathLike,
    modifiers: dict[int, Modifier],
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    _modify(file_path, modifiers, charset, config, "modify_lines", False, False)


def modify_lines_safe(
    file_path: PathLike,
    modifiers: dict[int, Modifier],
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    _modify(file_path, modifiers, charset, config, "modify_lines_safe", True, False)


# Delete


def _delete(file_path, line_numbers, charset, config, operation, safe):
    path = validate_file(file_path)
    line_numbers = validate_line_numbers(line_numbers)
    config, encoding = _settings(charset, config)
    run_edit(path, DeleteEdit(line_numbers, config.default_newline), operation, encoding, config, safe)


def delete_line(
    file_path: PathLike,
    line_number: int,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Delete one line; raises LineNotFoundError if it does not exist."""
    _delete(file_path, (line_number,), charset, config, "delete_line", False)


def delete_line_safe(
    file_path: PathLike,
    line_number: int,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    _delete(file_path, (line_number,), charset, config, "delete_line_safe", True)


def delete_lines(
    file_path: PathLike,
    line_numbers: Collection[int],
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Delete several lines at once.

    If any requested line does not exist, nothing is deleted.
    """
    _delete(file_path, line_numbers, charset, config, "delete_lines", False)


def delete_lines_safe(
    file_path: PathLike,
    line_numbers: Collection[int],
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
):
    """Atomic variant of :func:`delete_lines`."""
    _delete(file_path, line_numbers, charset, config, "delete_lines_safe", True)


# Replace text


def _replace_text(file_path, line_number, target, replacement, charset, config, operation, safe) -> int:
    path = validate_file(file_path)
    validate_line_number(line_number)
    validate_text_target(target, replacement)
    config, encoding = _settings(charset, config)
    edit = ReplaceTextEdit(line_number, target, replacement, config.default_newline)
    run_edit(path, edit, operation, encoding, config, safe)
    return edit.replacements


def replace_text(
    file_path: PathLike,
    line_number: int,
    target: str,
    replacement: str,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
) -> int:
    """Replace every occurrence of ``target`` on one line.

    Args:
        file_path: File to modify
        line_number: Line to search (1-based)
        target: Literal substring to replace (not a regex)
        replacement: Text to put in its place
        charset: File encoding (defaults to the config's charset)
        config: Settings; a default LoomConfig if None

    Returns:
        Number of substitutions made

    Raises:
        LineNotFoundError: If the line does not exist
        TextNotFoundError: If the line does not contain ``target``
    """
    return _replace_text(file_path, line_number, target, replacement, charset, config, "replace_text", False)


def replace_text_safe(
    file_path: PathLike,
    line_number: int,
    target: str,
    replacement: str,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
) -> int:
    """Atomic variant of :func:`replace_text`."""
    return _replace_text(
        file_path, line_number, target, replacement, charset, config, "replace_text_safe", True
    )


def _replace_text_all(file_path, target, replacement, charset, config, operation, safe) -> int:
    path = validate_file(file_path)
    validate_text_target(target, replacement)
    config, encoding = _settings(charset, config)
    edit = ReplaceTextAllEdit(target, replacement, config.default_newline)
    run_edit(path, edit, operation, encoding, config, safe)
    logger.info(f"Made {edit.replacements} replacements in {path}")
    return edit.replacements


def replace_text_all(
    file_path: PathLike,
    target: str,
    replacement: str,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
) -> int:
    """Replace every occurrence of ``target`` in the whole file.

    Zero occurrences is an error (TextNotFoundError), not a silent no-op.

    Returns:
        Number of substitutions made
    """
    return _replace_text_all(file_path, target, replacement, charset, config, "replace_text_all", False)


def replace_text_all_safe(
    file_path: PathLike,
    target: str,
    replacement: str,
    charset: Optional[str] = None,
    config: Optional[LoomConfig] = None,
) -> int:
    """Atomic variant of :func:`replace_text_all`."""
    return _replace_text_all(
        file_path, target, replacement, charset, config, "replace_text_all_safe", True
    )
