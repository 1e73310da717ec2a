# --- ChordTheory Class ---
import json
import logging
import os
from pathlib import Path
from typing import Iterable, List, NamedTuple, Optional, Sequence, Tuple

from chordwatch.core.exceptions import NoteOutOfRangeError
from chordwatch.utils.utils import resource_path

# --- Constants ---
MIDI_NOTE_MIN = 0
MIDI_NOTE_MAX = 127
UNMATCHED_CHORD_LABEL = "???"

# Optional override for the built-in chord table
DEFAULT_CHORD_CONFIG_PATH = resource_path(
    os.path.join("data", "chord_definitions.json")
)

# --- Logging Setup ---
logger = logging.getLogger(__name__)


class ChordPattern(NamedTuple):
    quality: str
    intervals: Tuple[int, ...]


# Order matters: the first exact match wins, so sparse voicings come
# before their extended variants.
DEFAULT_CHORD_TABLE: Tuple[ChordPattern, ...] = (
    # --- MAJOR ---
    ChordPattern("M", (0, 4, 7)),
    ChordPattern("maj7", (0, 4, 11)),
    ChordPattern("maj7", (0, 4, 7, 11)),
    ChordPattern("maj9", (0, 4, 11, 14)),
    ChordPattern("maj9", (0, 4, 7, 11, 14)),
    ChordPattern("maj11", (0, 4, 11, 17)),
    ChordPattern("maj11", (0, 4, 7, 11, 14, 17)),
    ChordPattern("6", (0, 4, 9)),
    ChordPattern("6", (0, 4, 7, 9)),

    # --- DOMINANT ---
    ChordPattern("7", (0, 4, 10)),
    ChordPattern("7", (0, 4, 7, 10)),

    # --- SUSPENDED ---
    ChordPattern("sus4", (0, 5)),
    ChordPattern("sus4", (0, 5, 7)),
    ChordPattern("sus2", (0, 2)),
    ChordPattern("sus2", (0, 2, 7)),

    # --- MINOR ---
    ChordPattern("m", (0, 3, 7)),
    ChordPattern("m7", (0, 3, 10)),
    ChordPattern("m7", (0, 3, 7, 10)),
    ChordPattern("m6", (0, 3, 8)),
    ChordPattern("m6", (0, 3, 7, 8)),
    ChordPattern("m9", (0, 3, 10, 14)),
    ChordPattern("m9", (0, 3, 7, 10, 14)),

    # --- DIMINISHED ---
    ChordPattern("dim", (0, 3, 6)),
    ChordPattern("dim7", (0, 3, 6, 9)),
    ChordPattern("m7b5", (0, 3, 6, 10)),

    # --- OTHER ---
    ChordPattern("5", (0, 7)),
    ChordPattern("aug", (0, 4, 8)),
    ChordPattern("aug7", (0, 4, 8, 10)),
    ChordPattern("maj7#5", (0, 4, 8, 11)),
)


def is_valid_interval_pattern(intervals: Sequence[int]) -> bool:
    """True for a non-empty, strictly ascending int sequence starting at 0."""
    if not intervals or not all(isinstance(i, int) and not isinstance(i, bool) for i in intervals):
        return False
    if intervals[0] != 0:
        return False
    return all(a < b for a, b in zip(intervals, intervals[1:]))


def load_chord_definitions(config_path: str = DEFAULT_CHORD_CONFIG_PATH) -> Optional[Tuple[ChordPattern, ...]]:
    """Read a chord table from a JSON list of {"quality", "intervals"} objects.

    Returns None when the file is missing, unreadable or holds no valid
    entries, in which case callers keep the built-in table.
    """
    config_file = Path(config_path)
    if not config_file.exists():
        logger.info(f"Chord definition file not found at '{config_path}'. Using default definitions.")
        return None

    try:
        with open(config_file, "r", encoding="utf-8") as f:
            custom_chords = json.load(f)
    except json.JSONDecodeError as e:
        logger.error(f"Error decoding JSON from '{config_path}': {e}. Using default definitions.")
        return None
    except OSError as e:
        logger.error(f"Failed to read chord definitions from '{config_path}': {e}. Using default definitions.")
        return None

    if not isinstance(custom_chords, list):
        logger.error(f"Chord definitions in '{config_path}' must be a JSON list. Using default definitions.")
        return None

    loaded_definitions: List[ChordPattern] = []
    for position, data in enumerate(custom_chords):
        if not isinstance(data, dict):
            logger.warning(f"Skipping chord definition #{position} in '{config_path}': not an object.")
            continue
        quality = data.get("quality")
        intervals = data.get("intervals")
        if isinstance(quality, str) and isinstance(intervals, list) and is_valid_interval_pattern(intervals):
            loaded_definitions.append(ChordPattern(quality, tuple(intervals)))
            logger.debug(f"Loaded custom chord: {quality} {intervals}")
        else:
            logger.warning(f"Skipping invalid chord definition #{position} ('{quality}') in '{config_path}'.")

    if not loaded_definitions:
        logger.warning(f"No valid chord definitions found in '{config_path}'. Using default definitions.")
        return None

    logger.info(f"Successfully loaded {len(loaded_definitions)} chord definitions from '{config_path}'.")
    return tuple(loaded_definitions)


class ChordTheory:
    NOTE_PITCH_CLASSES = [
        "C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"
    ]

    def __init__(self, chord_table: Optional[Iterable[ChordPattern]] = None):
        self.chord_table: Tuple[ChordPattern, ...] = (
            tuple(chord_table) if chord_table is not None else DEFAULT_CHORD_TABLE
        )

    @classmethod
    def from_config(cls, config_path: str = DEFAULT_CHORD_CONFIG_PATH) -> "ChordTheory":
        return cls(load_chord_definitions(config_path))

    @classmethod
    def pitch_name(cls, midi_note: int, include_octave: bool = False) -> str:
        """Name a MIDI note by pitch class, e.g. 61 -> "C#", or "C#4" with octave."""
        if not (MIDI_NOTE_MIN <= midi_note <= MIDI_NOTE_MAX):
            raise NoteOutOfRangeError(midi_note)
        name = cls.NOTE_PITCH_CLASSES[midi_note % 12]
        if not include_octave:
            return name
        octave = midi_note // 12 - 1
        if octave < 0:
            raise NoteOutOfRangeError(
                midi_note, f"MIDI note {midi_note} has no non-negative octave number."
            )
        return f"{name}{octave}"

    def find_pattern(self, notes: Sequence[int]) -> Optional[ChordPattern]:
        if not notes:
            return None
        root = notes[0]
        diffs = tuple(n - root for n in notes)
        for pattern in self.chord_table:
            if pattern.intervals == diffs:
                return pattern
        return None

    def match_chord(self, notes: Sequence[int]) -> Optional[str]:
        """Label an ascending run of held notes, e.g. [60, 64, 67] -> "CM".

        The intervals above the lowest note must equal a table entry exactly,
        so inversions and added tones do not match their base chord.
        """
        pattern = self.find_pattern(notes)
        if pattern is None:
            return None
        return f"{self.pitch_name(notes[0])}{pattern.quality}"


_default_theory = ChordTheory()


def pitch_name(midi_note: int, include_octave: bool = False) -> str:
    return ChordTheory.pitch_name(midi_note, include_octave)


def match_chord(notes: Sequence[int]) -> Optional[str]:
    return _default_theory.match_chord(notes)
