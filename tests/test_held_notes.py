"""Tests for the held-notes tracker and its idle/active states."""

import pytest

from chordwatch.core.held_notes import HeldNotesTracker
from chordwatch.core.music_theory import ChordPattern, ChordTheory


class TestNoteEvents:

    def test_starts_empty_and_idle(self):
        tracker = HeldNotesTracker()
        assert len(tracker) == 0
        assert not tracker.is_active
        assert tracker.current_chord() is None

    def test_repeated_note_on_is_idempotent(self):
        once = HeldNotesTracker()
        once.on_note_on(60)

        twice = HeldNotesTracker()
        assert twice.on_note_on(60)
        assert not twice.on_note_on(60)

        assert twice.snapshot_sorted() == once.snapshot_sorted() == [60]

    def test_note_off_removes(self):
        tracker = HeldNotesTracker()
        tracker.on_note_on(60)
        tracker.on_note_on(64)
        tracker.on_note_off(60)
        assert tracker.snapshot_sorted() == [64]
        assert not tracker.is_active
        assert tracker.current_chord() is None

    def test_note_off_for_unheld_note_is_noop(self):
        tracker = HeldNotesTracker()
        tracker.on_note_on(60)
        assert not tracker.on_note_off(61)
        assert tracker.snapshot_sorted() == [60]

    def test_contains(self):
        tracker = HeldNotesTracker()
        tracker.on_note_on(67)
        assert 67 in tracker
        assert 60 not in tracker

    def test_clear(self):
        tracker = HeldNotesTracker()
        tracker.on_note_on(60)
        tracker.on_note_on(64)
        assert tracker.clear()
        assert len(tracker) == 0
        assert not tracker.clear()


class TestSnapshot:

    def test_snapshot_is_sorted_copy(self):
        tracker = HeldNotesTracker()
        for note in (67, 60, 64):
            tracker.on_note_on(note)
        snapshot = tracker.snapshot_sorted()
        assert snapshot == [60, 64, 67]
        snapshot.append(72)
        assert tracker.snapshot_sorted() == [60, 64, 67]

    def test_insertion_order_does_not_change_match(self):
        shuffled = HeldNotesTracker()
        for note in (67, 60, 64):
            shuffled.on_note_on(note)
        ordered = HeldNotesTracker()
        for note in (60, 64, 67):
            ordered.on_note_on(note)
        assert shuffled.current_chord() == ordered.current_chord() == "CM"


class TestStates:

    def test_second_note_activates(self):
        tracker = HeldNotesTracker()
        tracker.on_note_on(60)
        assert not tracker.is_active
        tracker.on_note_on(65)
        assert tracker.is_active
        assert tracker.current_chord() == "Csus4"

    def test_active_without_match(self):
        tracker = HeldNotesTracker()
        tracker.on_note_on(60)
        tracker.on_note_on(61)
        assert tracker.is_active
        assert tracker.current_chord() is None

    def test_returns_to_idle(self):
        tracker = HeldNotesTracker()
        for note in (60, 64, 67):
            tracker.on_note_on(note)
        tracker.on_note_off(64)
        assert tracker.current_chord() == "C5"
        tracker.on_note_off(67)
        assert not tracker.is_active

    def test_custom_min_notes(self):
        tracker = HeldNotesTracker(min_notes_for_chord=3)
        tracker.on_note_on(60)
        tracker.on_note_on(67)
        assert not tracker.is_active
        tracker.on_note_on(64)
        assert tracker.current_chord() == "CM"

    @pytest.mark.parametrize("min_notes", [0, -1])
    def test_min_notes_below_one_is_rejected(self, min_notes):
        with pytest.raises(ValueError):
            HeldNotesTracker(min_notes_for_chord=min_notes)

    def test_single_note_minimum_releases_to_idle(self):
        tracker = HeldNotesTracker(min_notes_for_chord=1)
        tracker.on_note_on(60)
        assert tracker.is_active
        tracker.on_note_off(60)
        assert not tracker.is_active
        assert tracker.current_chord() is None

    def test_uses_given_theory(self):
        theory = ChordTheory([ChordPattern("power", (0, 7))])
        tracker = HeldNotesTracker(theory)
        tracker.on_note_on(50)
        tracker.on_note_on(57)
        assert tracker.current_chord() == "Dpower"
