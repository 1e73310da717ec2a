# --- Single-line terminal output ---
import sys
from typing import Any, Dict, Optional, TextIO

# Carriage return plus "erase entire line"
CLEAR_LINE = "\r\x1b[2K"


class TerminalChordDisplay:
    PREFIX = "Currently playing: "

    def __init__(self, stream: Optional[TextIO] = None):
        self.stream = stream if stream is not None else sys.stdout
        self.current_line: Optional[str] = None

    def _write(self, text: str):
        self.stream.write(text)
        self.stream.flush()

    def show(self, label: str):
        line = f"{self.PREFIX}{label}"
        if line == self.current_line:
            return
        self._write(CLEAR_LINE + line)
        self.current_line = line

    def clear(self):
        if self.current_line is None:
            return
        self._write(CLEAR_LINE)
        self.current_line = None

    def update(self, chord_data: Dict[str, Any]):
        """Redraw from a recognizer update; idle updates clear the line."""
        if chord_data.get("active"):
            self.show(chord_data["full_chord_name"])
        else:
            self.clear()

    def announce(self, message: str):
        self.clear()
        self._write(message + "\n")
