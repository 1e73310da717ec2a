# --- PianoKeyboardWidget ---
from typing import Dict, Iterable

from PyQt6.QtWidgets import QFrame

from chordwatch.core.music_theory import ChordTheory
from chordwatch.ui.piano_keyboard_widget import PianoKeyWidget


class PianoKeyboardWidget(QFrame):
    START_MIDI_NOTE = 21  # A0
    END_MIDI_NOTE = 108  # C8 (88 keys)

    WHITE_KEY_WIDTH = 23
    WHITE_KEY_HEIGHT = 120
    BLACK_KEY_WIDTH = int(WHITE_KEY_WIDTH * 0.6)
    BLACK_KEY_HEIGHT = int(WHITE_KEY_HEIGHT * 0.65)
    MARGIN = 5

    def __init__(self, parent=None):
        super().__init__(parent)
        self.setObjectName("PianoKeyboardFrame")
        self.setFrameStyle(QFrame.Shape.StyledPanel | QFrame.Shadow.Raised)
        self.setStyleSheet("""
            QFrame#PianoKeyboardFrame {
                background-color: #1E1E1E;
                border: 2px solid #444444;
                border-radius: 5px;
            }
        """)

        self.keys: Dict[int, PianoKeyWidget] = {}
        self._setup_keyboard_ui()

    @staticmethod
    def _is_black_key(midi_note: int) -> bool:
        return ChordTheory.pitch_name(midi_note).endswith("#")

    def _setup_keyboard_ui(self):
        # White keys sit side by side; each black key overlaps the white key to its left.
        x = self.MARGIN
        for midi_note in range(self.START_MIDI_NOTE, self.END_MIDI_NOTE + 1):
            if self._is_black_key(midi_note):
                continue
            key_widget = PianoKeyWidget(midi_note, False, self)
            key_widget.setGeometry(x, self.MARGIN, self.WHITE_KEY_WIDTH, self.WHITE_KEY_HEIGHT)
            self.keys[midi_note] = key_widget
            x += self.WHITE_KEY_WIDTH

        for midi_note in range(self.START_MIDI_NOTE, self.END_MIDI_NOTE + 1):
            if not self._is_black_key(midi_note):
                continue
            left_white = self.keys[midi_note - 1]
            key_widget = PianoKeyWidget(midi_note, True, self)
            key_widget.setGeometry(
                left_white.x() + int(self.WHITE_KEY_WIDTH * 0.6),
                self.MARGIN,
                self.BLACK_KEY_WIDTH,
                self.BLACK_KEY_HEIGHT,
            )
            key_widget.raise_()
            self.keys[midi_note] = key_widget

        self.setFixedHeight(self.WHITE_KEY_HEIGHT + 2 * self.MARGIN)
        self.setMinimumWidth(x + self.MARGIN)

    def update_active_notes(self, active_notes_midi: Iterable[int]):
        """Highlight exactly the given MIDI notes."""
        pressed_notes = set(active_notes_midi)
        for note, key_widget in self.keys.items():
            key_widget.set_pressed(note in pressed_notes)
