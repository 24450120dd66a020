"""
Module: notifier.py
Description: Diagnostic event notifier.

Publish/subscribe side channel for debug, info and error diagnostics raised
by the queue client and the polling engine. Listeners run synchronously in
registration order; every "log" diagnostic is also written to structlog.
"""

from typing import Any, Callable, Dict, List, Optional

from .logger import get_logger

logger = get_logger(__name__)

LOG_EVENT = "log"

Listener = Callable[..., Any]


class EventNotifier:
    """
    Registry of diagnostic listeners keyed by event name.

    Example:
        >>> notifier = EventNotifier()
        >>> notifier.on("log", lambda level, message, detail: print(level, message))
        >>> notifier.emit("log", "info", "Created SQS queue 'orders'")
        info Created SQS queue 'orders'
    """

    def __init__(self):
        self._listeners: Dict[str, List[Listener]] = {}

    def on(self, event_name: str, listener: Listener) -> "EventNotifier":
        """
        Add a listener to the end of the listeners for `event_name`.

        Returns the notifier so calls can be chained.
        """
        if not callable(listener):
            raise ValueError("listener must be callable")
        self._listeners.setdefault(event_name, []).append(listener)
        return self

    def listeners(self, event_name: str) -> List[Listener]:
        return list(self._listeners.get(event_name, []))

    def remove_all_listeners(self, event_name: Optional[str] = None) -> "EventNotifier":
        if event_name is None:
            self._listeners.clear()
        else:
            self._listeners.pop(event_name, None)
        return self

    def emit(self, event_name: str, level: str, message: Any, detail: Any = None) -> bool:
        """
        Call every listener registered for `event_name` with
        (level, message, detail).

        Never raises: a failing listener is logged and skipped.

        Returns:
            True if the event had listeners, False otherwise
        """
        listeners = self.listeners(event_name)
        for listener in listeners:
            try:
                listener(level, message, detail)
            except Exception as e:
                logger.warning(
                    "Diagnostic listener failed",
                    event_name=event_name,
                    listener=getattr(listener, '__name__', repr(listener)),
                    error=str(e)
                )

        if event_name == LOG_EVENT:
            self._log(level, message, detail)
        return bool(listeners)

    @staticmethod
    def _log(level: str, message: Any, detail: Any) -> None:
        log_method = getattr(logger, str(level).lower(), None)
        if log_method is None:
            log_method = logger.info
        if isinstance(message, BaseException):
            log_method(str(message), error_type=type(message).__name__, detail=detail)
        else:
            log_method(str(message), detail=detail)
