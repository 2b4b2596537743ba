"""Event system for Scale Climber components."""

from typing import Dict, List, Callable, Any
from enum import Enum, auto

from ..logger import get_logger

logger = get_logger(__name__)


class SessionEventType(Enum):
    """Event types emitted by a listening session."""

    STARTED = auto()
    STOPPED = auto()
    POSITION_UPDATED = auto()
    ERROR = auto()


class EventEmitter:
    """Event emitter for Scale Climber components."""

    def __init__(self):
        """Initialize the event emitter."""
        self._listeners: Dict[Any, List[Callable]] = {}

    def on(self, event_type: Any, callback: Callable) -> None:
        """Register a callback for an event type.

        Args:
            event_type: Event type to listen for
            callback: Function to call when the event occurs
        """
        if event_type not in self._listeners:
            self._listeners[event_type] = []

        if callback not in self._listeners[event_type]:
            self._listeners[event_type].append(callback)
            logger.debug(f"Added listener for event {event_type}")

    def off(self, event_type: Any, callback: Callable) -> None:
        """Remove a previously registered callback, if present."""
        listeners = self._listeners.get(event_type, [])
        if callback in listeners:
            listeners.remove(callback)

    def emit(self, event_type: Any, *args, **kwargs) -> None:
        """Emit an event.

        Args:
            event_type: Event type to emit
            *args: Positional arguments to pass to listeners
            **kwargs: Keyword arguments to pass to listeners
        """
        if event_type not in self._listeners:
            return

        for callback in list(self._listeners[event_type]):
            try:
                callback(*args, **kwargs)
            except Exception as e:
                logger.error(f"Error in event listener for {event_type}: {e}")

    def clear(self) -> None:
        """Remove all event listeners."""
        self._listeners = {}
        logger.debug("Cleared all event listeners")


class SessionEvents:
    """Event emitter specifically for session events."""

    def __init__(self):
        self._emitter = EventEmitter()

    def on_position_updated(self, callback: Callable) -> None:
        """Register a callback receiving each PollResult."""
        self._emitter.on(SessionEventType.POSITION_UPDATED, callback)

    def on_error(self, callback: Callable) -> None:
        """Register a callback receiving an error message string."""
        self._emitter.on(SessionEventType.ERROR, callback)

    def on_started(self, callback: Callable) -> None:
        self._emitter.on(SessionEventType.STARTED, callback)

    def on_stopped(self, callback: Callable) -> None:
        self._emitter.on(SessionEventType.STOPPED, callback)

    def emit(self, event_type: SessionEventType, *args, **kwargs) -> None:
        self._emitter.emit(event_type, *args, **kwargs)

    def clear(self) -> None:
        """Remove all event listeners."""
        self._emitter.clear()
