"""
Error Emitter - publish/subscribe relay for application errors.

Code that detects a permission failure emits a 'permission-error' event;
listeners registered at startup decide how to surface it (logging, toast
notification payloads). Events are blinker signals, the same machinery
Flask uses for its own request signals.
"""

import logging
from typing import Callable

from blinker import Namespace

logger = logging.getLogger(__name__)

PERMISSION_ERROR = 'permission-error'

EVENTS = (PERMISSION_ERROR,)


class ErrorEmitter:
    """Typed event emitter. Only events listed in ``EVENTS`` may be used."""

    def __init__(self, events=EVENTS):
        self._namespace = Namespace()
        self._signals = {name: self._namespace.signal(name) for name in events}

    def _signal(self, event: str):
        try:
            return self._signals[event]
        except KeyError:
            raise ValueError(f"Unknown event: {event}")

    def on(self, event: str, listener: Callable) -> Callable:
        """Subscribe a listener. Returns the listener so it can be used as a decorator."""
        signal = self._signal(event)
        if listener not in self._receivers(signal):
            signal.connect(listener, weak=False)
        return listener

    def off(self, event: str, listener: Callable) -> bool:
        """Unsubscribe a listener. Returns False if it was not subscribed."""
        signal = self._signal(event)
        for receiver in self._receivers(signal):
            if receiver == listener:
                signal.disconnect(receiver)
                return True
        return False

    @staticmethod
    def _receivers(signal):
        return list(signal.receivers_for(None))

    def emit(self, event: str, payload) -> int:
        """
        Deliver payload to every listener of event.

        A listener that raises is logged and skipped; the remaining
        listeners still run and nothing reaches the emitter's caller.

        Returns:
            Number of listeners that handled the payload
        """
        delivered = 0
        for listener in self._receivers(self._signal(event)):
            try:
                listener(payload)
                delivered += 1
            except Exception as e:
                logger.error(f"{event} listener {listener!r} failed: {e}", exc_info=True)
        return delivered

    def listener_count(self, event: str) -> int:
        return len(self._signal(event).receivers)

    def clear(self):
        for signal in self._signals.values():
            for listener in self._receivers(signal):
                signal.disconnect(listener)


# Application-wide emitter
error_emitter = ErrorEmitter()
