# --- PianoKeyWidget ---
from PyQt6.QtWidgets import QWidget
from PyQt6.QtGui import QPainter, QColor, QBrush, QPen
from PyQt6.QtCore import Qt

from chordwatch.core.music_theory import ChordTheory


class PianoKeyWidget(QWidget):
    COLOR_WHITE_KEY = QColor("#FFFFFF")
    COLOR_BLACK_KEY = QColor("#222222")
    COLOR_PRESSED_WHITE = QColor("#AED6F1")
    COLOR_PRESSED_BLACK = QColor("#5DADE2")
    COLOR_BORDER = QColor("#000000")
    COLOR_LABEL = QColor("#777777")

    def __init__(self, midi_note: int, is_black: bool, parent=None):
        super().__init__(parent)
        self.midi_note = midi_note
        self.is_black = is_black
        self.is_pressed = False
        # Octave marker on every C
        self.label = ChordTheory.pitch_name(midi_note, include_octave=True) if midi_note % 12 == 0 else ""
        self.setMinimumSize(10, 30)

    def set_pressed(self, pressed: bool):
        if self.is_pressed != pressed:
            self.is_pressed = pressed
            self.update()

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.RenderHint.Antialiasing)
        rect = self.rect()

        if self.is_black:
            key_color = self.COLOR_PRESSED_BLACK if self.is_pressed else self.COLOR_BLACK_KEY
        else:
            key_color = self.COLOR_PRESSED_WHITE if self.is_pressed else self.COLOR_WHITE_KEY

        painter.setBrush(QBrush(key_color))
        painter.setPen(QPen(self.COLOR_BORDER, 1))
        painter.drawRect(rect)

        if self.label:
            font = painter.font()
            font.setPointSize(7)
            painter.setFont(font)
            painter.setPen(self.COLOR_LABEL)
            painter.drawText(rect, Qt.AlignmentFlag.AlignBottom | Qt.AlignmentFlag.AlignHCenter, self.label)
        painter.end()
