# --- QThread for running the MIDI Recognizer ---
import logging
from typing import Optional

from PyQt6.QtCore import QThread

from chordwatch.core.chord_recognition_engine import MIDIChordRecognizer, list_input_ports
from chordwatch.core.exceptions import ChordwatchError
from chordwatch.ui.workers.recognizer_signal import RecognizerSignals

logger = logging.getLogger(__name__)


class MIDIWorkerThread(QThread):
    def __init__(self, config_path, min_notes, parent=None):
        super().__init__(parent)
        self.signals = RecognizerSignals()
        self.recognizer: Optional[MIDIChordRecognizer] = None
        self.selected_midi_port: Optional[str] = None

        self._config_path = config_path
        self._min_notes = min_notes
        self._running = False

    def set_midi_port(self, port_name: Optional[str]):
        self.selected_midi_port = port_name

    def run(self):
        self._running = True
        self.signals.recognizer_status.emit("Worker thread started.")

        if not self.selected_midi_port:
            available_ports = list_input_ports()
            if not available_ports:
                self.signals.recognizer_status.emit("No MIDI input ports found.")
            else:
                self.signals.recognizer_status.emit("Please select a MIDI port.")
            self._running = False
            return

        # The update callback runs on the recognizer's handler thread;
        # emitting a signal hands the dict over to the GUI thread.
        self.recognizer = MIDIChordRecognizer(
            midi_port_name=self.selected_midi_port,
            min_notes_for_chord=self._min_notes,
            chord_config_path=self._config_path,
            use_zmq=False,
            strict_port=True,
            update_callback=self.signals.chord_updated.emit,
        )

        try:
            self.recognizer.start()
        except ChordwatchError as e:
            logger.error(f"Failed to start MIDI recognizer: {e}")
            self.signals.recognizer_status.emit(f"Failed to start MIDI recognizer: {e}")
            self.recognizer = None
            return

        self.signals.recognizer_status.emit(f"Recognizer started on {self.recognizer.midi_port_name}.")
        while self._running and self.recognizer.running:
            self.msleep(100)

        if self.recognizer.running:
            self.recognizer.stop()
        self.signals.recognizer_status.emit("Recognizer stopped.")
        self.recognizer = None

    def stop_recognizer(self):
        self._running = False
        if self.recognizer:
            self.recognizer.stop()
        self.quit()
        self.wait()
        self.signals.recognizer_status.emit("Worker thread stopped.")
