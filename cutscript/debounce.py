"""Coalesce bursts of text edits into one pipeline pass per quiet period."""

import threading
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Callable, Optional


class Debouncer:
    """
    Deliver the latest pushed text once no push has arrived for quiet_ms.

    Deliveries run on a single worker thread, so callbacks never overlap
    and always see snapshots in push order. on_push runs synchronously in
    the pushing thread (used to tell the pipeline the document moved on).
    """

    def __init__(
        self,
        callback: Callable[[str], object],
        quiet_ms: int = 500,
        on_push: Optional[Callable[[], None]] = None,
    ):
        self._callback = callback
        self._quiet = quiet_ms / 1000
        self._on_push = on_push
        self._lock = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._pending: Optional[str] = None
        self._last_future: Optional[Future] = None
        self._executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix="cutscript-pass")
        self._closed = False
        self._generation = 0

    def push(self, text: str) -> None:
        with self._lock:
            if self._closed:
                raise RuntimeError("debouncer is closed")
            self._pending = text
            self._generation += 1
            if self._timer is not None:
                self._timer.cancel()
            self._timer = threading.Timer(self._quiet, self._fire, args=(self._generation,))
            self._timer.daemon = True
            self._timer.start()
        if self._on_push is not None:
            self._on_push()

    def _fire(self, generation: Optional[int] = None) -> None:
        with self._lock:
            # a timer that lost the race against a newer push
            if generation is not None and generation != self._generation:
                return
            self._timer = None
            text, self._pending = self._pending, None
            if text is None or self._closed:
                return
            self._last_future = self._executor.submit(self._callback, text)

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._pending is not None

    def flush(self) -> None:
        """Deliver pending text immediately and wait for the delivery to finish."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self._fire()
        with self._lock:
            future = self._last_future
        if future is not None:
            future.result()

    def close(self) -> None:
        with self._lock:
            self._closed = True
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._pending = None
        self._executor.shutdown(wait=True)
