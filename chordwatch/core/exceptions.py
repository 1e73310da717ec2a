# --- Error Types ---
from typing import Optional


class ChordwatchError(Exception):
    """Base class for all errors raised by chordwatch."""


class NoteOutOfRangeError(ChordwatchError, ValueError):
    def __init__(self, note: int, message: Optional[str] = None):
        self.note = note
        super().__init__(message or f"MIDI note {note} is outside the range 0-127.")


class NoInputSourceError(ChordwatchError):
    def __init__(self, message: str = "No MIDI input ports found."):
        super().__init__(message)


class MidiConnectionError(ChordwatchError):
    def __init__(self, port_name: Optional[str], reason: str = ""):
        self.port_name = port_name
        message = f"Could not connect to MIDI port '{port_name}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class PublisherError(ChordwatchError):
    """Raised when the ZMQ publisher socket cannot be bound."""
