# --- HeldNotesTracker Class ---
from typing import List, Optional

from chordwatch.core.music_theory import ChordTheory

DEFAULT_MIN_NOTES_FOR_CHORD = 2


class HeldNotesTracker:
    """Notes currently held down, each at most once.

    Not synchronized: a single event thread mutates it, and other threads
    should only read the copies returned by snapshot_sorted().
    """

    def __init__(
        self,
        theory: Optional[ChordTheory] = None,
        min_notes_for_chord: int = DEFAULT_MIN_NOTES_FOR_CHORD,
    ):
        if min_notes_for_chord < 1:
            raise ValueError(f"min_notes_for_chord must be at least 1, got {min_notes_for_chord}.")
        self.theory = theory or ChordTheory()
        self.min_notes = min_notes_for_chord
        self._held: List[int] = []

    def __len__(self) -> int:
        return len(self._held)

    def __contains__(self, note: int) -> bool:
        return note in self._held

    def on_note_on(self, note: int) -> bool:
        # Retriggered or stuck keys must not be counted twice
        if note in self._held:
            return False
        self._held.append(note)
        return True

    def on_note_off(self, note: int) -> bool:
        if note not in self._held:
            return False
        self._held = [n for n in self._held if n != note]
        return True

    def clear(self) -> bool:
        changed = bool(self._held)
        self._held.clear()
        return changed

    def snapshot_sorted(self) -> List[int]:
        return sorted(self._held)

    @property
    def is_active(self) -> bool:
        return len(self._held) >= self.min_notes

    def current_chord(self) -> Optional[str]:
        """Chord label for the held notes, or None while idle or unmatched."""
        if not self.is_active:
            return None
        return self.theory.match_chord(self.snapshot_sorted())
