import logging
from typing import Any, Dict, Optional

from PyQt6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QComboBox, QLabel, QFrame, QSizePolicy
)
from PyQt6.QtCore import Qt, QTimer

from chordwatch.core.chord_recognition_engine import list_input_ports
from chordwatch.core.held_notes import DEFAULT_MIN_NOTES_FOR_CHORD
from chordwatch.core.music_theory import ChordTheory, DEFAULT_CHORD_CONFIG_PATH, UNMATCHED_CHORD_LABEL
from chordwatch.ui.piano_keyboard_window import PianoKeyboardWidget
from chordwatch.ui.workers.midi_worker import MIDIWorkerThread

PORT_PLACEHOLDER = "Select MIDI Input Device"
IDLE_CHORD_TEXT = "N.C."
PORT_SCAN_INTERVAL_MS = 5000

logger = logging.getLogger(__name__)


# --- Main Application Window ---
class ChordAppMainWindow(QMainWindow):
    def __init__(self, config_path: str = DEFAULT_CHORD_CONFIG_PATH,
                 min_notes: int = DEFAULT_MIN_NOTES_FOR_CHORD):
        super().__init__()
        self.setWindowTitle("chordwatch")
        self.setGeometry(100, 100, 900, 420)

        self.config_path = config_path
        self.min_notes = min_notes
        self.recognizer_thread: Optional[MIDIWorkerThread] = None

        self.setStyleSheet("""
            QMainWindow {
                background-color: #2E2E2E;
            }
            QLabel {
                color: #E0E0E0;
                font-size: 11pt;
            }
            QComboBox {
                font-size: 10pt;
                padding: 5px;
            }
            QFrame#chordDisplayFrame {
                border: 1px solid #555555;
                border-radius: 5px;
                background-color: #3A3A3A;
            }
            QLabel#chordNameLabel {
                font-size: 32pt;
                font-weight: bold;
                padding: 10px;
            }
            QLabel#statusLabel {
                font-size: 9pt;
                color: #AAAAAA;
            }
        """)

        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.layout = QVBoxLayout(self.central_widget)

        self._setup_ui()
        self._populate_midi_ports()

        # Pick up devices plugged in after startup
        self.port_scan_timer = QTimer(self)
        self.port_scan_timer.timeout.connect(self._check_and_repopulate_midi_ports)
        self.port_scan_timer.start(PORT_SCAN_INTERVAL_MS)

    def _setup_ui(self):
        self.midi_port_combo = QComboBox()
        self.midi_port_combo.activated.connect(self.on_midi_port_selected)
        self.layout.addWidget(self.midi_port_combo)

        chord_display_frame = QFrame()
        chord_display_frame.setObjectName("chordDisplayFrame")
        chord_display_frame.setFrameShape(QFrame.Shape.StyledPanel)
        chord_display_layout = QVBoxLayout(chord_display_frame)

        self.chord_name_label = QLabel(IDLE_CHORD_TEXT)
        self.chord_name_label.setObjectName("chordNameLabel")
        self.chord_name_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        chord_display_layout.addWidget(self.chord_name_label)

        self.notes_label = QLabel("")
        self.notes_label.setAlignment(Qt.AlignmentFlag.AlignCenter)
        chord_display_layout.addWidget(self.notes_label)

        self.layout.addWidget(chord_display_frame)

        self.piano_keyboard_widget = PianoKeyboardWidget(self)
        self.piano_keyboard_widget.setSizePolicy(QSizePolicy.Policy.Preferred, QSizePolicy.Policy.Fixed)
        self.layout.addWidget(self.piano_keyboard_widget)

        self.status_label = QLabel("App Initialized. Select a MIDI port.")
        self.status_label.setObjectName("statusLabel")
        self.layout.addWidget(self.status_label)

    def _populate_midi_ports(self, selected_port_name: Optional[str] = None):
        current_selection = selected_port_name or self.midi_port_combo.currentText()
        self.midi_port_combo.blockSignals(True)
        self.midi_port_combo.clear()
        self.midi_port_combo.addItem(PORT_PLACEHOLDER)
        try:
            ports = list_input_ports()
        except OSError as e:
            ports = []
            self.status_label.setText(f"Error listing MIDI ports: {e}")
            logger.error(f"Error listing MIDI ports: {e}")
        if ports:
            self.midi_port_combo.addItems(ports)
            if current_selection in ports:
                self.midi_port_combo.setCurrentText(current_selection)
        else:
            self.status_label.setText("No MIDI input devices found.")
        self.midi_port_combo.blockSignals(False)

    def _check_and_repopulate_midi_ports(self):
        if self.recognizer_thread and self.recognizer_thread.isRunning():
            return

        current_ports_in_combo = [self.midi_port_combo.itemText(i) for i in range(1, self.midi_port_combo.count())]
        try:
            actual_ports = list_input_ports()
        except OSError as e:
            logger.warning(f"Error during periodic MIDI port check: {e}")
            return
        if set(current_ports_in_combo) != set(actual_ports):
            self.status_label.setText("MIDI port list changed. Repopulating...")
            self._populate_midi_ports()

    def on_midi_port_selected(self, index: int):
        if index == 0:
            if self.recognizer_thread and self.recognizer_thread.isRunning():
                self.recognizer_thread.stop_recognizer()
            self.status_label.setText("Please select a MIDI port.")
            self._reset_chord_display()
            return

        port_name = self.midi_port_combo.itemText(index)
        self.status_label.setText(f"Selected MIDI port: {port_name}. Starting recognizer...")

        if self.recognizer_thread and self.recognizer_thread.isRunning():
            self.recognizer_thread.stop_recognizer()
        self._start_recognizer_for_port(port_name)

    def _start_recognizer_for_port(self, port_name: str):
        self.recognizer_thread = MIDIWorkerThread(
            config_path=self.config_path,
            min_notes=self.min_notes,
        )
        self.recognizer_thread.set_midi_port(port_name)
        self.recognizer_thread.signals.chord_updated.connect(self.update_chord_display)
        self.recognizer_thread.signals.recognizer_status.connect(self.status_label.setText)

        self._reset_chord_display()
        self.recognizer_thread.start()

    def _reset_chord_display(self):
        self.chord_name_label.setText(IDLE_CHORD_TEXT)
        self.chord_name_label.setStyleSheet("color: #E0E0E0;")
        self.notes_label.setText("")
        self.piano_keyboard_widget.update_active_notes([])

    def update_chord_display(self, chord_data: Dict[str, Any]):
        chord_name = chord_data.get("full_chord_name")
        if chord_data.get("active") and chord_name:
            self.chord_name_label.setText(chord_name)
            matched = chord_name != UNMATCHED_CHORD_LABEL
            self.chord_name_label.setStyleSheet("color: #4CAF50;" if matched else "color: #E0E0E0;")
        else:
            # Fewer than min_notes held: drop the previous chord
            self.chord_name_label.setText(IDLE_CHORD_TEXT)
            self.chord_name_label.setStyleSheet("color: #E0E0E0;")

        notes_midi = chord_data.get("played_notes_midi", [])
        note_names = chord_data.get("played_note_names") or [ChordTheory.pitch_name(n) for n in notes_midi]
        self.notes_label.setText("  ".join(f"{name} ({n})" for name, n in zip(note_names, notes_midi)))
        self.piano_keyboard_widget.update_active_notes(notes_midi)

    def closeEvent(self, event):
        self.port_scan_timer.stop()
        if self.recognizer_thread and self.recognizer_thread.isRunning():
            self.status_label.setText("Closing... Stopping recognizer thread.")
            self.recognizer_thread.stop_recognizer()
        super().closeEvent(event)
