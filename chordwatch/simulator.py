"""
MIDI simulator to create a virtual MIDI port and send note messages.
Plays a chord progression so the detector can be tried without a keyboard.
"""

import argparse
import logging
import sys
import time
from typing import List, Optional, Sequence, Tuple

import mido

logger = logging.getLogger(__name__)

# C major, G7, A minor, F maj7 (no 5th), a pause
DEMO_SEQUENCE: List[Tuple[List[int], float]] = [
    ([60, 64, 67], 1.0),
    ([55, 59, 62, 65], 1.0),
    ([57, 60, 64], 1.0),
    ([53, 57, 64], 1.0),
    ([], 1.0),
]


class MIDISimulator:
    def __init__(self, port_name: str = "Virtual MIDI", output_port=None):
        self.port_name = port_name
        self.output_port = output_port

    def setup(self) -> bool:
        """Create a virtual MIDI output port."""
        try:
            self.output_port = mido.open_output(self.port_name, virtual=True)
        except (OSError, NotImplementedError) as e:
            logger.error(f"Failed to create virtual MIDI port: {e}", exc_info=True)
            return False
        logger.info(f"Created virtual MIDI output port: {self.port_name}")
        return True

    def send_chord(self, notes: Sequence[int], duration: float = 1.0, velocity: int = 64):
        """Press every note, hold for duration seconds, then release them."""
        for note in notes:
            self.output_port.send(mido.Message('note_on', note=note, velocity=velocity))
            logger.debug(f"Sent note_on: note={note}, velocity={velocity}")
        time.sleep(duration)
        for note in notes:
            self.output_port.send(mido.Message('note_off', note=note, velocity=0))
            logger.debug(f"Sent note_off: note={note}")

    def simulate_sequence(self, sequence: Sequence[Tuple[Sequence[int], float]], gap: float = 0.1):
        if not self.output_port:
            logger.error("MIDI port not initialized")
            return
        for notes, duration in sequence:
            logger.info(f"Playing chord: {list(notes)}")
            self.send_chord(notes, duration)
            time.sleep(gap)

    def close(self):
        """Close the MIDI output port."""
        if not self.output_port:
            return
        try:
            self.output_port.close()
            logger.info("Virtual MIDI output port closed")
        except OSError as e:
            logger.error(f"Error closing MIDI port: {e}", exc_info=True)
        finally:
            self.output_port = None


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(
        prog="chordwatch-sim", description="Play a demo chord progression on a virtual MIDI port."
    )
    parser.add_argument("--port-name", default="Virtual MIDI", help="Name of the virtual output port.")
    parser.add_argument("--delay", type=float, default=2.0, help="Seconds to wait before playing.")
    parser.add_argument("--loop", action="store_true", help="Repeat the progression until interrupted.")
    args = parser.parse_args(argv)

    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')

    simulator = MIDISimulator(port_name=args.port_name)
    if not simulator.setup():
        return 1
    try:
        logger.info(f"Starting chord simulation. Select '{args.port_name}' as the input.")
        time.sleep(args.delay)
        simulator.simulate_sequence(DEMO_SEQUENCE)
        while args.loop:
            simulator.simulate_sequence(DEMO_SEQUENCE)
    except KeyboardInterrupt:
        logger.info("Simulation stopped by user")
    finally:
        simulator.close()
    return 0


if __name__ == "__main__":
    sys.exit(main())
