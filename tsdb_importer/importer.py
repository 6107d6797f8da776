"""Importer — wires the coordinator, worker pool and shutdown controller together."""

import logging
import queue
import threading
from typing import Optional

from tsdb_importer.config import ImporterConfig
from tsdb_importer.coordinator import Coordinator
from tsdb_importer.shutdown import ShutdownController
from tsdb_importer.stats import ImportStats
from tsdb_importer.worker import ImportWorker

logger = logging.getLogger(__name__)


class Importer:
    """Runs one coordinator and ``config.workers`` workers as background threads."""

    def __init__(
        self,
        config: ImporterConfig,
        controller: Optional[ShutdownController] = None,
    ):
        self._config = config
        self._controller = controller or ShutdownController()
        self._stats = ImportStats()

        # Filenames waiting for a worker / filenames finished by a worker
        self._todo: queue.Queue = queue.Queue(maxsize=config.queue_size)
        self._done: queue.Queue = queue.Queue(maxsize=config.queue_size)

        shutdown = self._controller.event
        self._coordinator = Coordinator(config, self._todo, self._done, shutdown)
        self._workers = [
            ImportWorker(
                i + 1, config, self._todo, self._done, shutdown, stats=self._stats
            )
            for i in range(config.workers)
        ]

    @property
    def stats(self) -> ImportStats:
        return self._stats

    def start(self):
        """Start all background threads."""
        threads = [
            threading.Thread(
                target=self._coordinator.run, name="coordinator", daemon=True
            )
        ]
        threads += [
            threading.Thread(
                target=w.run, name=f"importer-{w.worker_id}", daemon=True
            )
            for w in self._workers
        ]
        for t in threads:
            self._controller.register(t)
            t.start()

        logger.info(
            "Importer started: %d worker(s), batch_size=%d, target=%s",
            len(self._workers),
            self._config.batch_size,
            self._config.tsdb_url,
        )

    def stop(self):
        self._controller.trigger()

    def join(self, timeout: Optional[float] = None) -> bool:
        """Block until shutdown is requested and every thread has exited."""
        return self._controller.wait(timeout)

    def run(self):
        """Start, block until a shutdown request, then wait for every thread."""
        self.start()
        clean = self.join()
        logger.info("Import stats: %s", self._stats.snapshot())
        if clean:
            logger.info("Importer exits! See you later!")
        else:
            logger.warning("Importer exiting with threads still running")
