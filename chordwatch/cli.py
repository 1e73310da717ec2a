import argparse
import logging
import sys
import time
from typing import List, Optional

from chordwatch.core.chord_recognition_engine import (
    DEFAULT_ZMQ_PUB_PORT,
    MIDIChordRecognizer,
    list_input_ports,
)
from chordwatch.core.exceptions import ChordwatchError
from chordwatch.core.held_notes import DEFAULT_MIN_NOTES_FOR_CHORD
from chordwatch.core.music_theory import DEFAULT_CHORD_CONFIG_PATH
from chordwatch.core.terminal_display import TerminalChordDisplay

DEFAULT_LOG_LEVEL = "WARNING"
LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(threadName)s] %(name)s.%(funcName)s:%(lineno)d - %(message)s"
POLL_INTERVAL = 0.1

logger = logging.getLogger(__name__)


def positive_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"'{value}' is not an integer")
    if number < 1:
        raise argparse.ArgumentTypeError(f"must be at least 1, got {number}")
    return number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chordwatch",
        description="Show the chord currently held on a MIDI input device.",
    )
    parser.add_argument(
        "--midi-port", type=str, default=None,
        help="Name of the MIDI input port (default: first available)."
    )
    parser.add_argument(
        "--strict-port", action="store_true",
        help="Fail instead of falling back to the first port when --midi-port is missing."
    )
    parser.add_argument(
        "--min-notes",
        type=positive_int,
        default=DEFAULT_MIN_NOTES_FOR_CHORD,
        help=f"Min held notes before a chord is looked up (default: {DEFAULT_MIN_NOTES_FOR_CHORD}).",
    )
    parser.add_argument(
        "--config",
        type=str,
        default=DEFAULT_CHORD_CONFIG_PATH,
        help="Chord definitions JSON replacing the built-in table.",
    )
    parser.add_argument(
        "--zmq", action="store_true",
        help="Publish chord updates as JSON on a ZMQ PUB socket."
    )
    parser.add_argument(
        "--zmq-port",
        type=int,
        default=DEFAULT_ZMQ_PUB_PORT,
        help=f"ZMQ port (default: {DEFAULT_ZMQ_PUB_PORT}).",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=DEFAULT_LOG_LEVEL,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help=f"Logging level (default: {DEFAULT_LOG_LEVEL}).",
    )
    parser.add_argument(
        "--list-midi-ports", action="store_true", help="List MIDI input ports and exit."
    )
    return parser


def configure_logging(level_name: str):
    # stderr keeps the stdout chord line intact
    logging.basicConfig(
        level=getattr(logging, level_name.upper(), logging.INFO),
        format=LOG_FORMAT,
        stream=sys.stderr,
    )


def print_ports() -> int:
    available_ports = list_input_ports()
    if available_ports:
        print("Available MIDI input ports:")
        for p in available_ports:
            print(f'  - "{p}"')
    else:
        print("No MIDI input ports found.")
    return 0


def main(argv: Optional[List[str]] = None) -> int:
    args = build_parser().parse_args(argv)
    configure_logging(args.log_level)

    if args.list_midi_ports:
        return print_ports()

    display = TerminalChordDisplay()
    recognizer = MIDIChordRecognizer(
        midi_port_name=args.midi_port,
        zmq_pub_port=args.zmq_port,
        min_notes_for_chord=args.min_notes,
        chord_config_path=args.config,
        use_zmq=args.zmq,
        strict_port=args.strict_port,
        update_callback=display.update,
    )

    try:
        recognizer.start()
    except ChordwatchError as e:
        logger.error(f"Failed to start MIDI Chord Recognizer: {e}")
        print(e, file=sys.stderr)
        return 1

    display.announce(f"Successfully connected to {recognizer.midi_port_name}\n")
    try:
        while recognizer.running:
            time.sleep(POLL_INTERVAL)
    except KeyboardInterrupt:
        logger.info("Keyboard interrupt received.")
    finally:
        recognizer.stop()
        display.clear()
    return 0


if __name__ == "__main__":
    sys.exit(main())
