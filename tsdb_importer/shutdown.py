"""Shutdown controller — turns OS signals into a cooperative stop."""

import logging
import signal
import threading
from typing import Optional

logger = logging.getLogger(__name__)


class ShutdownController:
    """Broadcasts termination through one Event and joins every registered thread.

    Nothing is cancelled forcibly: each thread observes the event at its
    next queue wait and exits on its own.
    """

    def __init__(self, shutdown_event: Optional[threading.Event] = None):
        self._event = shutdown_event or threading.Event()
        self._threads: list[threading.Thread] = []

    @property
    def event(self) -> threading.Event:
        return self._event

    def register(self, thread: threading.Thread):
        self._threads.append(thread)

    def install_signal_handlers(self):
        """Route SIGINT and SIGTERM to trigger(). Must run on the main thread."""
        signal.signal(signal.SIGINT, self._handle_signal)
        signal.signal(signal.SIGTERM, self._handle_signal)

    def _handle_signal(self, signum, frame):
        logger.info("Received signal %d, shutting down...", signum)
        self.trigger()

    def trigger(self):
        self._event.set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until termination is requested, then join all threads.

        Returns True when every thread has exited.
        """
        # Short waits keep the main thread responsive to signals
        while not self._event.wait(timeout=1.0):
            pass

        for thread in self._threads:
            thread.join(timeout=timeout)
            if thread.is_alive():
                logger.warning("Thread %s did not exit in time", thread.name)

        return not any(t.is_alive() for t in self._threads)
