"""Tests for the shutdown controller."""

import os
import signal
import threading
import time

from tsdb_importer.shutdown import ShutdownController


def _waiter(event: threading.Event, delay: float = 0.0):
    def run():
        event.wait()
        time.sleep(delay)

    return threading.Thread(target=run, daemon=True)


class TestShutdownController:
    def test_trigger_sets_event(self):
        controller = ShutdownController()
        assert not controller.event.is_set()
        controller.trigger()
        assert controller.event.is_set()

    def test_uses_given_event(self):
        event = threading.Event()
        controller = ShutdownController(event)
        assert controller.event is event

    def test_wait_joins_all_threads(self):
        controller = ShutdownController()
        threads = [_waiter(controller.event, delay=0.05) for _ in range(3)]
        for t in threads:
            controller.register(t)
            t.start()

        threading.Timer(0.1, controller.trigger).start()
        assert controller.wait(timeout=5) is True
        assert all(not t.is_alive() for t in threads)

    def test_wait_reports_stuck_thread(self):
        controller = ShutdownController()
        release = threading.Event()
        stuck = threading.Thread(target=release.wait, daemon=True)
        controller.register(stuck)
        stuck.start()

        controller.trigger()
        assert controller.wait(timeout=0.1) is False
        release.set()
        stuck.join(timeout=5)

    def test_sigterm_triggers_shutdown(self):
        previous_term = signal.getsignal(signal.SIGTERM)
        previous_int = signal.getsignal(signal.SIGINT)
        controller = ShutdownController()
        try:
            controller.install_signal_handlers()
            os.kill(os.getpid(), signal.SIGTERM)
            assert controller.event.wait(timeout=5)
        finally:
            signal.signal(signal.SIGTERM, previous_term)
            signal.signal(signal.SIGINT, previous_int)
