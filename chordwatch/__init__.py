"""Live MIDI chord identification."""

__version__ = "0.1.0"
