"""Temp-file staging and atomic commit for safe line edits."""
import logging
import os
import shutil
import tempfile
import time
import uuid
from contextlib import contextmanager
from pathlib import Path
from typing import Optional, TextIO, Union

from .errors import CommitError, LoomIOError
from .stream import open_sink

logger = logging.getLogger(__name__)


def create_temp_file(target: Union[str, Path], tag: str = "edit") -> Path:
    """Create an empty temp file next to ``target``.

    The temp file lives in the same directory so the final rename stays on
    one filesystem. Its name is ``<name>.<random>.<tag>.tmp``.

    Args:
        target: File the temp file will eventually replace
        tag: Operation name embedded in the file name

    Returns:
        Path of the new, empty temp file
    """
    target = Path(target)
    suffix = f".{tag}.tmp"
    try:
        fd, name = tempfile.mkstemp(dir=target.parent, prefix=f"{target.name}.", suffix=suffix)
        os.close(fd)
        return Path(name)
    except OSError as e:
        logger.warning(f"mkstemp failed in {target.parent}: {e}; using a random name")

    fallback = target.parent / f"{target.name}.{uuid.uuid4().hex}{suffix}"
    try:
        fallback.touch(exist_ok=False)
    except OSError as e:
        raise LoomIOError(tag, target, e) from e
    return fallback


def discard_temp_file(temp_path: Optional[Union[str, Path]]) -> bool:
    """Delete a temp file, swallowing failures.

    Returns:
        True if nothing is left behind
    """
    if temp_path is None:
        return True
    try:
        Path(temp_path).unlink()
        return True
    except FileNotFoundError:
        return True
    except OSError as e:
        logger.warning(f"Could not remove temp file {temp_path}: {e}")
        return False


def atomic_commit(
    temp_path: Union[str, Path],
    target: Union[str, Path],
    operation: str = "commit",
    preserve_mode: bool = True,
):
    """Move a finished temp file over the target.

    Tries an atomic ``os.replace`` first. If the platform refuses (for
    example across devices), falls back to a non-atomic ``shutil.move``.
    If that fails too, the temp file is deleted and the target is left as it
    was.

    Args:
        temp_path: Fully written temp file
        target: File to replace
        operation: Operation name used in log and error messages
        preserve_mode: Copy the target's permission bits onto the temp file

    Raises:
        CommitError: If neither rename succeeded
    """
    temp_path = Path(temp_path)
    target = Path(target)

    if preserve_mode:
        try:
            shutil.copymode(target, temp_path)
        except OSError as e:
            logger.debug(f"Could not copy mode of {target} onto {temp_path}: {e}")

    try:
        os.replace(temp_path, target)
        logger.info(f"Atomically replaced {target} ({operation})")
        return
    except OSError as e:
        logger.warning(f"[{operation}] Atomic rename not possible for {target}: {e}. Falling back to move.")

    try:
        shutil.move(str(temp_path), str(target))
        logger.info(f"Replaced {target} with non-atomic move ({operation})")
    except OSError as e:
        logger.error(f"[{operation}] Failed to replace {target}: {e}")
        discard_temp_file(temp_path)
        raise CommitError(operation, target, e) from e


class SafeLineEdit:
    """Context manager owning the temp file of one atomic edit.

    The temp file is either promoted with :meth:`commit` or deleted when the
    block exits, whichever comes first. Nothing is registered for later
    cleanup.
    """

    def __init__(
        self,
        file_path: Union[str, Path],
        operation: str,
        encoding: str,
        fsync: bool = False,
        preserve_mode: bool = True,
    ):
        """Initialize safe line edit.

        Args:
            file_path: File being edited
            operation: Operation name (used as the temp file tag)
            encoding: Codec for the temp file sink
            fsync: Flush the temp file to disk before committing
            preserve_mode: Copy permission bits of the original onto the result
        """
        self.file_path = Path(file_path)
        self.operation = operation
        self.encoding = encoding
        self.fsync = fsync
        self.preserve_mode = preserve_mode
        self.temp_path: Optional[Path] = None
        self.committed = False

    def __enter__(self):
        self.temp_path = create_temp_file(self.file_path, self.operation)
        logger.debug(f"Staging {self.operation} of {self.file_path} in {self.temp_path}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if not self.committed:
            if exc_type is not None:
                logger.debug(f"{self.operation} aborted for {self.file_path}: {exc_val}")
            discard_temp_file(self.temp_path)
        return False

    @contextmanager
    def sink(self):
        """Open the temp file for writing; syncs it on a clean exit if asked."""
        try:
            with open_sink(self.temp_path, self.encoding) as out:
                yield out
                if self.fsync:
                    out.flush()
                    os.fsync(out.fileno())
        except OSError as e:
            logger.error(f"[{self.operation}] Failed writing temp file for {self.file_path}: {e}")
            raise LoomIOError(self.operation, self.file_path, e) from e

    def commit(self):
        """Promote the temp file over the original."""
        if self.committed:
            raise RuntimeError("Edit already committed")
        atomic_commit(
            self.temp_path,
            self.file_path,
            operation=self.operation,
            preserve_mode=self.preserve_mode,
        )
        self.committed = True


def overwrite_in_place(file_path: Union[str, Path], text: str, encoding: str, operation: str):
    """Rewrite a file from an in-memory result (direct variants).

    The text is encoded before the file is opened, so a payload the charset
    cannot represent leaves the original untouched.
    """
    try:
        data = text.encode(encoding)
    except UnicodeError as e:
        logger.error(f"[{operation}] Cannot encode result for {file_path}: {e}")
        raise LoomIOError(operation, file_path, e) from e

    try:
        with open(file_path, "wb") as out:
            out.write(data)
    except OSError as e:
        logger.error(f"[{operation}] Failed writing {file_path}: {e}")
        raise LoomIOError(operation, file_path, e) from e
    logger.info(f"Rewrote {file_path} in place ({operation})")


class PerformanceMonitor:
    """Monitor file operation performance."""

    def __init__(self):
        self.metrics = {}

    @contextmanager
    def measure_operation(self, operation_name: str):
        """Context manager to measure operation duration.

        Args:
            operation_name: Name of operation being measured
        """
        start_time = time.perf_counter()
        failed = False
        try:
            yield
        except BaseException:
            failed = True
            raise
        finally:
            duration = time.perf_counter() - start_time
            self._record_metric(operation_name, duration, failed)

    def _record_metric(self, operation: str, duration: float, failed: bool = False):
        if operation not in self.metrics:
            self.metrics[operation] = {
                "count": 0,
                "failures": 0,
                "total_time": 0.0,
                "min_time": float("inf"),
                "max_time": 0.0,
            }

        metrics = self.metrics[operation]
        metrics["count"] += 1
        metrics["failures"] += int(failed)
        metrics["total_time"] += duration
        metrics["min_time"] = min(metrics["min_time"], duration)
        metrics["max_time"] = max(metrics["max_time"], duration)

    def get_stats(self, operation: str) -> dict:
        """Get statistics for an operation.

        Args:
            operation: Operation name

        Returns:
            Dictionary with performance statistics, empty if never measured
        """
        if operation not in self.metrics:
            return {}

        metrics = self.metrics[operation]
        return {
            "count": metrics["count"],
            "failures": metrics["failures"],
            "total_time": metrics["total_time"],
            "average_time": metrics["total_time"] / metrics["count"],
            "min_time": metrics["min_time"],
            "max_time": metrics["max_time"],
        }

    def get_all_stats(self) -> dict:
        """Get all recorded statistics."""
        return {op: self.get_stats(op) for op in self.metrics}

    def reset(self):
        self.metrics.clear()


# Global performance monitor instance
performance_monitor = PerformanceMonitor()
