"""Import worker — decompresses one metric file at a time and ships its batches."""

import gzip
import logging
import os
import queue
import threading
import zlib
from typing import Optional

from tsdb_importer.batcher import BatchAssembler
from tsdb_importer.client import TSDBClient
from tsdb_importer.config import ImporterConfig
from tsdb_importer.reframer import read_lines
from tsdb_importer.stats import ImportStats

logger = logging.getLogger(__name__)

# How long a worker blocks on the work queue before re-checking shutdown
QUEUE_POLL_INTERVAL = 0.5

# Raised by gzip for unreadable, corrupt or truncated streams
DECODE_ERRORS = (OSError, EOFError, zlib.error)


class ImportWorker:
    """Pulls filenames from *todo*, imports each file, reports it on *done*.

    Files are processed one after another; run several workers for
    parallelism.  A file that fails to open or breaks mid-read gets no
    completion notice and therefore stays pending in the coordinator.
    """

    def __init__(
        self,
        worker_id: int,
        config: ImporterConfig,
        todo: queue.Queue,
        done: queue.Queue,
        shutdown_event: threading.Event,
        client: Optional[TSDBClient] = None,
        stats: Optional[ImportStats] = None,
    ):
        self._id = worker_id
        self._config = config
        self._todo = todo
        self._done = done
        self._shutdown = shutdown_event
        self._client = client or TSDBClient(config.tsdb_url, config.request_timeout)
        self._stats = stats or ImportStats()

    @property
    def worker_id(self) -> int:
        return self._id

    def run(self):
        """Main loop — blocks until shutdown_event is set."""
        logger.info("File importer #%d started", self._id)
        try:
            while not self._shutdown.is_set():
                try:
                    filename = self._todo.get(timeout=QUEUE_POLL_INTERVAL)
                except queue.Empty:
                    continue
                if self._shutdown.is_set():
                    break
                self.import_file(filename)
        finally:
            self._client.close()
            logger.info("File importer #%d exits!", self._id)

    def import_file(self, filename: str) -> bool:
        """Import a single gzip file. Returns True if a completion notice was sent."""
        try:
            raw = open(filename, "rb")
        except OSError as exc:
            logger.error("Failed to open the metric data file %s: %s", filename, exc)
            self._stats.record_file(completed=False)
            return False

        with raw:
            if os.fstat(raw.fileno()).st_size == 0:
                # No gzip header yet, e.g. a file that is still being written
                logger.error("Failed to open the metric data file %s: empty file", filename)
                self._stats.record_file(completed=False)
                return False

            with gzip.GzipFile(fileobj=raw, mode="rb") as stream:
                try:
                    # Reads the gzip header so a bad file fails here, not mid-stream
                    stream.peek(1)
                except DECODE_ERRORS as exc:
                    logger.error(
                        "Failed to open the metric data file %s: %s", filename, exc
                    )
                    self._stats.record_file(completed=False)
                    return False
                return self._import_stream(filename, stream)

    def _import_stream(self, filename: str, stream) -> bool:
        assembler = BatchAssembler(self._config.batch_size)

        try:
            for line in read_lines(stream, self._config.read_buffer_size):
                payload = assembler.add(line)
                if payload is not None:
                    self._deliver(payload)
        except DECODE_ERRORS as exc:
            logger.error("Failed to read line from %s due to %s", filename, exc)
            self._stats.record_file(completed=False, lines=assembler.line_count)
            return False

        payload = assembler.finish()
        if payload is not None:
            self._deliver(payload)

        self._stats.record_file(completed=True, lines=assembler.line_count)
        logger.info(
            "Imported %s: %d lines (worker #%d)",
            filename,
            assembler.line_count,
            self._id,
        )
        return self._report_done(filename)

    def _report_done(self, filename: str) -> bool:
        """Send the completion notice, giving up only once shutdown is requested."""
        while True:
            try:
                self._done.put(filename, timeout=QUEUE_POLL_INTERVAL)
                return True
            except queue.Full:
                if self._shutdown.is_set():
                    logger.warning(
                        "Completion queue full during shutdown, dropping notice for %s",
                        filename,
                    )
                    return False

    def _deliver(self, payload: bytes):
        self._stats.record_batch(delivered=self._client.post(payload))
