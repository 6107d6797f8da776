"""Import statistics — thread-safe counters shared by the worker pool."""

import threading
import time


class ImportStats:
    """Counts files, lines and batches handled by the importer."""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._files_imported: int = 0
        self._files_failed: int = 0
        self._lines_read: int = 0
        self._batches_sent: int = 0
        self._batches_failed: int = 0
        self._start_time = time.monotonic()

    def record_file(self, completed: bool, lines: int = 0) -> None:
        """Record the outcome of one file.

        Args:
            completed: True when the file was read to its end.
            lines: Logical lines read from the file, including on failure.
        """
        with self._lock:
            if completed:
                self._files_imported += 1
            else:
                self._files_failed += 1
            self._lines_read += lines

    def record_batch(self, delivered: bool) -> None:
        with self._lock:
            if delivered:
                self._batches_sent += 1
            else:
                self._batches_failed += 1

    def snapshot(self) -> dict:
        """Return a point-in-time copy of all counters plus uptime."""
        with self._lock:
            return {
                "files_imported": self._files_imported,
                "files_failed": self._files_failed,
                "lines_read": self._lines_read,
                "batches_sent": self._batches_sent,
                "batches_failed": self._batches_failed,
                "uptime_seconds": time.monotonic() - self._start_time,
            }
