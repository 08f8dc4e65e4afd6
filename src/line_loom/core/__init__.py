"""Core building blocks: errors, configuration, validation, streaming and safety."""

from .config import DEFAULT_CHARSET, LoomConfig, resolve_charset
from .errors import (
    CommitError,
    LineNotFoundError,
    LoomConfigError,
    LoomContractError,
    LoomError,
    LoomIOError,
    LoomMemoryError,
    ModifierError,
    ModifierResultError,
    TargetNotFoundError,
    TextNotFoundError,
)
from .safety import (
    PerformanceMonitor,
    SafeLineEdit,
    atomic_commit,
    create_temp_file,
    discard_temp_file,
    performance_monitor,
)
from .stream import Line, read_lines

__all__ = [
    # Configuration
    'DEFAULT_CHARSET',
    'LoomConfig',
    'resolve_charset',

    # Errors
    'LoomError',
    'LoomContractError',
    'LoomConfigError',
    'ModifierResultError',
    'ModifierError',
    'TargetNotFoundError',
    'LineNotFoundError',
    'TextNotFoundError',
    'LoomIOError',
    'CommitError',
    'LoomMemoryError',

    # Streaming
    'Line',
    'read_lines',

    # Safety mechanisms
    'SafeLineEdit',
    'atomic_commit',
    'create_temp_file',
    'discard_temp_file',
    'PerformanceMonitor',
    'performance_monitor',
]
