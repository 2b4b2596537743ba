"""Core components for the Scale Climber application."""

# Import interfaces for easier access
from .interfaces import IAudioInput
from .events import EventEmitter, SessionEvents, SessionEventType

__all__ = ["IAudioInput", "EventEmitter", "SessionEvents", "SessionEventType"]
