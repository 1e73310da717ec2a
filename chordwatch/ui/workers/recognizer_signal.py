# --- Custom Signal Emitter for MIDI Recognizer ---
from PyQt6.QtCore import pyqtSignal, QObject

class RecognizerSignals(QObject):
    chord_updated = pyqtSignal(dict)  # Update dict built by MIDIChordRecognizer
    recognizer_status = pyqtSignal(str)
