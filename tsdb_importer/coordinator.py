"""Coordinator — scans the watched folder and feeds new files to the workers."""

import fnmatch
import logging
import os
import queue
import threading
import time

from tsdb_importer.config import ImporterConfig

logger = logging.getLogger(__name__)

# Upper bound on a single wait, so shutdown is noticed promptly
WAIT_SLICE = 0.5


class Coordinator:
    """Owns the pending set: files queued for import but not yet completed.

    Only the coordinator thread touches the pending set.  A file is queued
    at most once until its completion notice arrives on *done*.
    """

    def __init__(
        self,
        config: ImporterConfig,
        todo: queue.Queue,
        done: queue.Queue,
        shutdown_event: threading.Event,
    ):
        self._config = config
        self._todo = todo
        self._done = done
        self._shutdown = shutdown_event
        self._pending: dict[str, str] = {}

    @property
    def pending(self) -> set[str]:
        return set(self._pending)

    def run(self):
        """Main loop — blocks until shutdown_event is set."""
        logger.info(
            "Coordinator watching %s/%s every %.1fs",
            self._config.watch_dir,
            self._config.file_pattern,
            self._config.scan_interval,
        )
        next_scan = time.monotonic() + self._config.scan_interval

        while not self._shutdown.is_set():
            timeout = min(max(next_scan - time.monotonic(), 0.0), WAIT_SLICE)
            try:
                filename = self._done.get(timeout=timeout)
            except queue.Empty:
                pass
            else:
                self.retire(filename)

            if self._shutdown.is_set():
                break

            if time.monotonic() >= next_scan:
                self.scan()
                next_scan = time.monotonic() + self._config.scan_interval

        logger.info("Coordinator exits!")

    def list_files(self) -> list[str]:
        """Return matching regular files in the watched directory, sorted.

        Raises OSError if the directory cannot be listed.
        """
        watch_dir = self._config.watch_dir
        files = []
        for name in sorted(os.listdir(watch_dir)):
            if not fnmatch.fnmatch(name, self._config.file_pattern):
                continue
            path = os.path.join(watch_dir, name) if watch_dir != "." else name
            if os.path.isfile(path):
                files.append(path)
        return files

    def scan(self) -> int:
        """Queue every newly discovered file. Returns the number queued."""
        try:
            files = self.list_files()
        except OSError as exc:
            logger.error(
                "Failed to scan %s files due to %s", self._config.file_pattern, exc
            )
            return 0

        queued = 0
        for filename in files:
            if filename in self._pending:
                continue
            self._pending[filename] = filename
            try:
                self._todo.put_nowait(filename)
            except queue.Full:
                # Forget it so the next scan retries
                del self._pending[filename]
                logger.warning("Work queue full, deferring %s", filename)
                break
            queued += 1

        if queued:
            logger.info("Queued %d new file(s) for import", queued)
        return queued

    def retire(self, filename: str):
        """Drop a completed file from the pending set."""
        if self._pending.pop(filename, None) is None:
            logger.warning("Completion notice for unknown file %s", filename)
        else:
            logger.debug("Retired %s", filename)
