import logging
import threading
import time
from typing import Any, Callable, Dict, List, Optional

import mido
import zmq

from chordwatch.core.exceptions import (
    MidiConnectionError,
    NoInputSourceError,
    PublisherError,
)
from chordwatch.core.held_notes import DEFAULT_MIN_NOTES_FOR_CHORD, HeldNotesTracker
from chordwatch.core.music_theory import (
    DEFAULT_CHORD_CONFIG_PATH,
    UNMATCHED_CHORD_LABEL,
    ChordTheory,
)

# --- Constants ---
DEFAULT_ZMQ_PUB_PORT = 5557
ALL_NOTES_OFF_CONTROL = 123

# --- Logging Setup ---
logger = logging.getLogger(__name__)


def list_input_ports() -> List[str]:
    return mido.get_input_names()


# --- MIDIChordRecognizer Class ---
class MIDIChordRecognizer:
    def __init__(
        self,
        midi_port_name: Optional[str] = None,
        zmq_pub_port: int = DEFAULT_ZMQ_PUB_PORT,
        min_notes_for_chord: int = DEFAULT_MIN_NOTES_FOR_CHORD,
        chord_config_path: str = DEFAULT_CHORD_CONFIG_PATH,
        use_zmq: bool = False,
        strict_port: bool = False,
        update_callback: Optional[Callable[[Dict[str, Any]], None]] = None,
        theory: Optional[ChordTheory] = None,
    ):
        self.midi_port_name = midi_port_name
        self.zmq_pub_port = zmq_pub_port
        self.min_notes = min_notes_for_chord
        self.chord_config_path = chord_config_path
        self.strict_port = strict_port
        self.theory = theory or ChordTheory.from_config(chord_config_path)
        self.held_notes = HeldNotesTracker(self.theory, min_notes_for_chord)
        self.last_chord_name: Optional[str] = None
        self.running = False
        self.midi_port: Optional[mido.ports.BaseInput] = None
        self.zmq_context: Optional[zmq.Context] = None
        self.zmq_socket: Optional[zmq.Socket] = None
        self.lock = threading.Lock()
        self.midi_thread: Optional[threading.Thread] = None
        self.use_zmq = use_zmq
        self.update_callback = update_callback

    def _choose_port(self, available_ports: List[str]) -> str:
        if not self.midi_port_name:
            logger.info(
                f"No MIDI port specified. Using first available: '{available_ports[0]}'."
            )
            return available_ports[0]
        if self.midi_port_name in available_ports:
            return self.midi_port_name
        if self.strict_port:
            raise MidiConnectionError(
                self.midi_port_name, f"port not found among {available_ports}"
            )
        logger.warning(
            f"Specified MIDI port '{self.midi_port_name}' not found. "
            f"Available ports: {available_ports}. Using first available: '{available_ports[0]}'."
        )
        return available_ports[0]

    def _setup_midi(self):
        available_ports = list_input_ports()
        if not available_ports:
            raise NoInputSourceError()
        port_to_open = self._choose_port(available_ports)
        try:
            self.midi_port = mido.open_input(port_to_open)
        except Exception as e:
            raise MidiConnectionError(port_to_open, str(e)) from e
        self.midi_port_name = port_to_open
        logger.info(f"Successfully opened MIDI port: '{self.midi_port.name}'.")

    def _setup_zmq(self):
        if not self.use_zmq:
            self.zmq_context = None
            self.zmq_socket = None
            logger.info("ZMQ publishing is disabled for this recognizer instance.")
            return

        try:
            self.zmq_context = zmq.Context()
            self.zmq_socket = self.zmq_context.socket(zmq.PUB)
            self.zmq_socket.bind(f"tcp://*:{self.zmq_pub_port}")
        except zmq.ZMQError as e:
            raise PublisherError(
                f"Could not bind ZMQ publisher to port {self.zmq_pub_port}: {e}"
            ) from e
        logger.info(f"ZMQ publisher bound to tcp://*:{self.zmq_pub_port}")

    def _process_midi_message(self, msg: mido.Message) -> bool:
        changed = False
        if msg.type == "note_on" and msg.velocity > 0:
            changed = self.held_notes.on_note_on(msg.note)
            logger.debug(
                f"Note ON: {msg.note} Vel: {msg.velocity} | Held: {self.held_notes.snapshot_sorted()}"
            )
        elif msg.type == "note_off" or (msg.type == "note_on" and msg.velocity == 0):
            changed = self.held_notes.on_note_off(msg.note)
            logger.debug(
                f"Note OFF: {msg.note} | Held: {self.held_notes.snapshot_sorted()}"
            )
        elif msg.type == "control_change" and msg.control == ALL_NOTES_OFF_CONTROL:
            changed = self.held_notes.clear()
            logger.debug("All Notes Off received.")
        return changed

    def handle_message(self, msg: mido.Message) -> Optional[Dict[str, Any]]:
        """Apply one MIDI message; returns the update it produced, if any."""
        with self.lock:
            if not self._process_midi_message(msg):
                return None
            publish_data = self._build_update()
        self._dispatch(publish_data)
        return publish_data

    def handle_bytes(self, data: bytes) -> Optional[Dict[str, Any]]:
        return self.handle_message(mido.Message.from_bytes(data))

    def _midi_handler(self):
        logger.info("MIDI handler thread started.")
        while self.running:
            try:
                if not self.midi_port:
                    logger.error("MIDI port is not open in handler loop.")
                    time.sleep(1)
                    continue
                msg = self.midi_port.receive(block=True)
                if not self.running:
                    break
                if msg is not None:
                    self.handle_message(msg)
            except Exception as e:
                if self.running:
                    logger.error(f"Error in MIDI handler thread: {e}", exc_info=True)
                    time.sleep(0.1)
        logger.info("MIDI handler thread stopped.")

    def _build_update(self) -> Dict[str, Any]:
        played = self.held_notes.snapshot_sorted()
        active = self.held_notes.is_active
        publish_data: Dict[str, Any] = {
            "timestamp": time.time(),
            "active": active,
            "full_chord_name": None,
            "played_notes_midi": played,
            "played_note_names": [
                ChordTheory.pitch_name(n, include_octave=n >= 12) for n in played
            ],
            "bass_note_name": ChordTheory.pitch_name(played[0]) if played else None,
        }
        if active:
            publish_data["full_chord_name"] = (
                self.theory.match_chord(played) or UNMATCHED_CHORD_LABEL
            )
        return publish_data

    def _dispatch(self, publish_data: Dict[str, Any]):
        chord_name = publish_data["full_chord_name"]
        if chord_name is not None and chord_name != self.last_chord_name:
            logger.info(f"Chord: {chord_name}, Notes: {publish_data['played_notes_midi']}")
        elif chord_name is None:
            logger.debug(f"Idle. Held notes: {publish_data['played_notes_midi']}")
        self.last_chord_name = chord_name

        if self.update_callback:
            try:
                self.update_callback(publish_data)
            except Exception as e:
                logger.error(f"Error in update_callback: {e}", exc_info=True)

        if self.use_zmq:
            self._publish(publish_data)

    def _publish(self, data_to_publish: Dict[str, Any]):
        if not self.zmq_socket or not self.running:
            return
        try:
            self.zmq_socket.send_json(data_to_publish)
            logger.debug(f"ZMQ Published: {data_to_publish.get('full_chord_name')}")
        except zmq.ZMQError as e:
            logger.warning(f"ZMQ publish error: {e}")

    def start(self) -> bool:
        with self.lock:
            if self.running:
                logger.info("Recognizer already running.")
                return True
            logger.info("Starting MIDI Chord Recognizer...")
            try:
                self._setup_midi()
                self._setup_zmq()
            except Exception:
                logger.error("Setup failed. Cleaning up and aborting start.")
                self._cleanup()
                raise
            self.running = True
            self.midi_thread = threading.Thread(
                target=self._midi_handler, name="MIDIHandlerThread", daemon=True
            )
            self.midi_thread.start()
            logger.info("Recognizer started successfully.")
            return True

    def stop(self):
        logger.info("Stopping MIDI Chord Recognizer...")
        with self.lock:
            if not self.running:
                logger.info("Recognizer already stopped.")
                return
            self.running = False
        if self.midi_thread and self.midi_thread.is_alive():
            logger.debug("Waiting for MIDI handler thread to join...")
            if self.midi_port:
                try:
                    self.midi_port.close()
                    logger.debug("MIDI port closed to help thread unblock.")
                except Exception as e:
                    logger.warning(f"Exception closing MIDI port during stop: {e}")
            self.midi_thread.join(timeout=2.0)
            if self.midi_thread.is_alive():
                logger.warning("MIDI handler thread did not join in time.")
        with self.lock:
            self._cleanup()
        logger.info("Recognizer stopped.")

    def _cleanup(self):
        logger.debug("Cleaning up resources...")
        if self.midi_port and not self.midi_port.closed:
            try:
                self.midi_port.close()
                logger.debug("MIDI port closed.")
            except Exception as e:
                logger.warning(f"Error closing MIDI port: {e}")
        self.midi_port = None
        if self.zmq_socket:
            try:
                self.zmq_socket.close(linger=0)
                logger.debug("ZMQ socket closed.")
            except zmq.ZMQError as e:
                logger.warning(f"Error closing ZMQ socket: {e}")
        self.zmq_socket = None
        if self.zmq_context:
            try:
                self.zmq_context.term()
                logger.debug("ZMQ context terminated.")
            except zmq.ZMQError as e:
                logger.warning(f"Error terminating ZMQ context: {e}")
        self.zmq_context = None
        self.held_notes.clear()
        self.last_chord_name = None
        logger.debug("Internal state cleared.")
