# Parallel: debounced persistence
#
# Collapses bursts of board changes into a single write. Each schedule()
# replaces the pending payload and restarts the timer; only the latest
# payload is ever handed to the callback.

import logging
import threading
from typing import Any, Callable, Optional

logger = logging.getLogger(__name__)

_NOTHING = object()


class Debouncer:
    """Single-flight, cancelable delayed call carrying the latest payload."""

    def __init__(self, callback: Callable[[Any], None], delay: float = 0.3):
        self.callback = callback
        self.delay = delay
        self._lock = threading.Lock()
        # Held for the whole callback so writes never overlap
        self._in_flight = threading.Lock()
        self._timer: Optional[threading.Timer] = None
        self._payload: Any = _NOTHING

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._payload is not _NOTHING

    def schedule(self, payload: Any) -> None:
        """Replace any pending payload and restart the delay window."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._payload = payload
            self._timer = threading.Timer(self.delay, self._fire)
            self._timer.daemon = True
            self._timer.start()

    def flush(self) -> None:
        """Run the pending call now, on the calling thread."""
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
        self._fire()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
                self._timer = None
            self._payload = _NOTHING

    def _fire(self) -> None:
        # Take the payload only once the previous call has finished, so a
        # later board can never be overtaken by an older one.
        with self._in_flight:
            with self._lock:
                payload, self._payload = self._payload, _NOTHING
                self._timer = None
            if payload is _NOTHING:
                return
            try:
                self.callback(payload)
            except Exception:
                logger.exception("Debounced callback failed")
