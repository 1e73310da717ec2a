import argparse
import logging
import sys
from typing import List, Optional

from PyQt6.QtWidgets import QApplication

from chordwatch.cli import LOG_FORMAT, positive_int
from chordwatch.core.held_notes import DEFAULT_MIN_NOTES_FOR_CHORD
from chordwatch.core.music_theory import DEFAULT_CHORD_CONFIG_PATH
from chordwatch.ui.main_window import ChordAppMainWindow


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(prog="chordwatch-gui", description="Desktop chord display.")
    parser.add_argument("--config", default=DEFAULT_CHORD_CONFIG_PATH, help="Chord definitions JSON.")
    parser.add_argument("--min-notes", type=positive_int, default=DEFAULT_MIN_NOTES_FOR_CHORD)
    parser.add_argument("--log-level", default="INFO", choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"])
    args, qt_args = parser.parse_known_args(argv)

    logging.basicConfig(level=getattr(logging, args.log_level), format=LOG_FORMAT)

    app = QApplication([sys.argv[0]] + qt_args)
    main_window = ChordAppMainWindow(config_path=args.config, min_notes=args.min_notes)
    main_window.show()
    return app.exec()


if __name__ == '__main__':
    sys.exit(main())
