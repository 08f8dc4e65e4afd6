"""Configuration for line_loom operations."""
import codecs
import logging
import re
from dataclasses import dataclass, field
from typing import Optional

from .errors import LoomConfigError

logger = logging.getLogger(__name__)

DEFAULT_CHARSET = "utf-8"
RECOMMENDED_CHARSETS = ("utf-8", "latin-1", "ascii", "utf-16")

_CHARSET_NAME = re.compile(r"^[A-Za-z0-9_.\-]+$")


def resolve_charset(charset: Optional[str]) -> str:
    """Validate a charset name and return its canonical codec name.

    Args:
        charset: Encoding name such as ``"utf-8"`` or ``"ISO-8859-1"``

    Returns:
        Canonical codec name understood by ``open()``

    Raises:
        LoomConfigError: If the name is missing, malformed or unknown
    """
    if charset is None:
        raise LoomConfigError("Charset cannot be None. Use 'utf-8' for the default encoding.")
    if not isinstance(charset, str):
        raise LoomConfigError(f"Charset must be a str, got {type(charset).__name__}")

    name = charset.strip()
    if not name:
        raise LoomConfigError(
            "Charset name cannot be empty or whitespace. Use 'utf-8' for the default encoding."
        )
    if not _CHARSET_NAME.match(name):
        raise LoomConfigError(
            f"Invalid charset name format: {charset!r}. "
            "Charset names may only contain letters, digits, '-', '_' and '.'."
        )

    try:
        info = codecs.lookup(name)
    except LookupError as e:
        raise LoomConfigError(
            f"Unsupported charset: {charset!r}. "
            f"Recommended charsets: {', '.join(RECOMMENDED_CHARSETS)}"
        ) from e

    # Text-only codecs; rot13 and friends cannot back a text file.
    if not getattr(info, "_is_text_encoding", True):
        raise LoomConfigError(f"Codec {charset!r} is not a text encoding")

    return info.name


@dataclass
class LoomConfig:
    """Per-instance settings shared by every operation.

    Attributes:
        charset: Default file encoding
        default_newline: Terminator for inserted lines when the file has none
        max_buffer_bytes: Largest file the direct (in-memory) variants accept,
            None for no limit
        fsync: Flush the temp file to disk before the atomic rename
        preserve_mode: Copy the target's permission bits onto the temp file
    """

    charset: str = DEFAULT_CHARSET
    default_newline: str = "\n"
    max_buffer_bytes: Optional[int] = None
    fsync: bool = False
    preserve_mode: bool = True
    _resolved: str = field(default="", init=False, repr=False, compare=False)

    def __post_init__(self):
        self._resolved = resolve_charset(self.charset)
        if self.default_newline not in ("\n", "\r\n", "\r"):
            raise LoomConfigError(
                f"default_newline must be one of '\\n', '\\r\\n', '\\r'; got {self.default_newline!r}"
            )
        if self.max_buffer_bytes is not None and self.max_buffer_bytes <= 0:
            raise LoomConfigError(
                f"max_buffer_bytes must be positive or None, got {self.max_buffer_bytes}"
            )

    @property
    def encoding(self) -> str:
        """Canonical codec name for the configured charset."""
        return self._resolved

    def set_charset(self, charset: str):
        """Change the default charset, validating it first."""
        resolved = resolve_charset(charset)
        self.charset = charset
        self._resolved = resolved
        logger.debug(f"Charset set to {resolved}")
