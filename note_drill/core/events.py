"""Event system for Note Drill sessions."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class DrillEventType(Enum):
    """Event types emitted by a drill session."""

    TARGET_CHANGED = auto()
    RESULT_SUBMITTED = auto()
    MODE_CHANGED = auto()
    TIMER_TICK = auto()
    TIMER_EXPIRED = auto()


class EventEmitter:
    """Event emitter for Note Drill components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        listeners = self._listeners.setdefault(event_type, [])
        if callback not in listeners:
            listeners.append(callback)
            logger.debug("Added listener for event %s", event_type)

    def off(self, event_type: Any, callback: Callable) -> None:
        """Remove a previously registered callback, if present."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)
            logger.debug("Removed listener for event %s", event_type)

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        Listener failures are logged and do not reach the emitter.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        for callback in list(self._listeners.get(event_type, [])):
            try:
                callback(*args, **kwargs)
            except Exception:
                logger.exception("Error in event listener for %s", event_type)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")
