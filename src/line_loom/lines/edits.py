"""Per-kind line transforms with touched-set bookkeeping.

An edit is fed every line of the source in order through :meth:`LineEdit.visit`
and writes its output to a text sink. After the scan, :meth:`LineEdit.finish`
flushes anything that belongs after the last line and :meth:`LineEdit.verify`
raises if any requested locus was never acted on.
"""
import logging
from collections.abc import Callable, Iterable
from pathlib import Path
from typing import Optional, TextIO

from ..core.errors import (
    LineNotFoundError,
    ModifierError,
    ModifierResultError,
    TextNotFoundError,
)
from ..core.stream import Line

logger = logging.getLogger(__name__)


class LineEdit:
    """Base transform: copies every line through unchanged.

    Attributes:
        requested: Line numbers the edit must act on
        touched: Line numbers it actually acted on
        line_count: Number of source lines seen so far
    """

    operation = "edit"

    def __init__(self, targets: Iterable[int] = (), default_newline: str = "\n"):
        self.requested = frozenset(targets)
        self.touched: set[int] = set()
        self.line_count = 0
        self.default_newline = default_newline
        self.newline: Optional[str] = None
        self.last_terminator = ""

    @property
    def file_newline(self) -> str:
        """First line break seen in the file, else the configured default."""
        return self.newline or self.default_newline

    def visit(self, line: Line, out: TextIO):
        self.line_count = line.number
        self.last_terminator = line.terminator
        if self.newline is None and line.terminator:
            self.newline = line.terminator

        if line.number in self.requested:
            self.apply(line, out)
        else:
            out.write(line.raw)

    def apply(self, line: Line, out: TextIO):
        raise NotImplementedError

    def finish(self, out: TextIO):
        pass

    def missing(self) -> set[int]:
        return set(self.requested - self.touched)

    def verify(self, path: Optional[Path] = None):
        """Raise if the edit did not act on every requested line."""
        missing = self.missing()
        if missing or len(self.touched) != len(self.requested):
            raise LineNotFoundError(missing, self.line_count, path)


class ReplaceEdit(LineEdit):
    """Emit a new payload in place of each target line."""

    operation = "replace_lines"

    def __init__(self, replacements: dict[int, str], default_newline: str = "\n"):
        super().__init__(replacements, default_newline)
        self.replacements = replacements

    def apply(self, line: Line, out: TextIO):
        out.write(self.replacements[line.number] + line.terminator)
        self.touched.add(line.number)


class InsertEdit(LineEdit):
    """Emit each payload before the original line at its position.

    Positions refer to the original numbering, so inserting at 2 and 4 puts
    the payloads before original lines 2 and 4 no matter how many lines were
    inserted earlier. Positions past the end are appended in ascending order.
    """

    operation = "insert_lines"

    def __init__(self, inserts: dict[int, str], default_newline: str = "\n"):
        super().__init__(inserts, default_newline)
        self.inserts = inserts

    def apply(self, line: Line, out: TextIO):
        out.write(self.inserts[line.number] + self.file_newline)
        out.write(line.raw)
        self.touched.add(line.number)

    def finish(self, out: TextIO):
        pending = sorted(self.requested - self.touched)
        if not pending:
            return

        newline = self.file_newline
        if self.line_count and not self.last_terminator:
            # Source ended without a line break; keep it that way after appending.
            for number in pending:
                out.write(newline + self.inserts[number])
        else:
            for number in pending:
                out.write(self.inserts[number] + newline)
        self.touched.update(pending)
        logger.debug(f"Appended {len(pending)} line(s) past end of file")


class ModifyEdit(LineEdit):
    """Rewrite each target line through its modifier."""

    operation = "modify_lines"

    def __init__(self, modifiers: dict[int, Callable[[str], str]], default_newline: str = "\n"):
        super().__init__(modifiers, default_newline)
        self.modifiers = modifiers

    def apply(self, line: Line, out: TextIO):
        modifier = self.modifiers[line.number]
        try:
            result = modifier(line.content)
        except Exception as e:
            raise ModifierError(line.number) from e

        if not isinstance(result, str):
            raise ModifierResultError(line.number, result)

        out.write(result + line.terminator)
        self.touched.add(line.number)


class DeleteEdit(LineEdit):
    """Drop every target line."""

    operation = "delete_lines"

    def apply(self, line: Line, out: TextIO):
        self.touched.add(line.number)


class ReplaceTextEdit(LineEdit):
    """Replace every literal occurrence of a substring on one line."""

    operation = "replace_text"

    def __init__(self, line_number: int, target: str, replacement: str, default_newline: str = "\n"):
        super().__init__((line_number,), default_newline)
        self.line_number = line_number
        self.target = target
        self.replacement = replacement
        self.found_line = False
        self.replacements = 0

    def apply(self, line: Line, out: TextIO):
        self.found_line = True
        self.replacements = line.content.count(self.target)
        out.write(line.content.replace(self.target, self.replacement) + line.terminator)
        if self.replacements:
            self.touched.add(line.number)

    def verify(self, path: Optional[Path] = None):
        if not self.found_line:
            raise LineNotFoundError((self.line_number,), self.line_count, path)
        if not self.replacements:
            raise TextNotFoundError(self.target, path, self.line_number)


class ReplaceTextAllEdit(LineEdit):
    """Replace every literal occurrence of a substring in the whole file."""

    operation = "replace_text_all"

    def __init__(self, target: str, replacement: str, default_newline: str = "\n"):
        super().__init__((), default_newline)
        self.target = target
        self.replacement = replacement
        self.replacements = 0

    def visit(self, line: Line, out: TextIO):
        self.line_count = line.number
        count = line.content.count(self.target)
        if count:
            self.replacements += count
            self.touched.add(line.number)
            out.write(line.content.replace(self.target, self.replacement) + line.terminator)
        else:
            out.write(line.raw)

    def verify(self, path: Optional[Path] = None):
        if not self.replacements:
            raise TextNotFoundError(self.target, path)
