"""Periodic refresher for the kitchen order board.

One worker thread per ``start()``; starting again stops the previous worker first,
so at most one timer is ever active. The callback runs on the worker thread.
"""
from __future__ import annotations
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 15.0


class OrderRefresher:
    def __init__(self, callback: Callable[[], None], interval: float = DEFAULT_INTERVAL_SECONDS):
        if interval <= 0:
            raise ValueError('interval must be positive')
        self.callback = callback
        self.interval = float(interval)
        self.ticks = 0
        self._lock = threading.RLock()
        self._stop_event: Optional[threading.Event] = None
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        with self._lock:
            return self._thread is not None and self._thread.is_alive()

    def start(self, interval: Optional[float] = None) -> None:
        with self._lock:
            self.stop()
            if interval is not None:
                if interval <= 0:
                    raise ValueError('interval must be positive')
                self.interval = float(interval)
            stop_event = threading.Event()
            self._stop_event = stop_event
            self._thread = threading.Thread(target=self._run, args=(stop_event,), name='OrderRefresher', daemon=True)
            self._thread.start()

    def stop(self, join: bool = True) -> None:
        with self._lock:
            stop_event, thread = self._stop_event, self._thread
            self._stop_event = None
            self._thread = None
        if stop_event is not None:
            stop_event.set()
        if join and thread is not None and thread is not threading.current_thread():
            thread.join()

    def tick(self) -> None:
        """Run the callback once; errors are logged and do not stop the timer."""
        try:
            self.callback()
        except Exception:
            logger.exception('order board refresh failed')
        finally:
            self.ticks += 1

    def _run(self, stop_event: threading.Event) -> None:
        # wait() returns True once stop is requested
        while not stop_event.wait(self.interval):
            self.tick()


__all__ = ['OrderRefresher', 'DEFAULT_INTERVAL_SECONDS']
