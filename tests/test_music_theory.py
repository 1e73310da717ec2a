"""Tests for pitch naming, the chord table and exact chord matching."""

import json

import pytest

from chordwatch.core.exceptions import NoteOutOfRangeError
from chordwatch.core.music_theory import (
    DEFAULT_CHORD_TABLE,
    ChordPattern,
    ChordTheory,
    is_valid_interval_pattern,
    load_chord_definitions,
    match_chord,
    pitch_name,
)


class TestPitchName:
    """Pitch-class names with and without octave."""

    def test_middle_c(self):
        assert pitch_name(60) == "C"
        assert pitch_name(60, include_octave=True) == "C4"

    def test_sharps_only(self):
        names = [pitch_name(n) for n in range(60, 72)]
        assert names == ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

    def test_pitch_class_repeats_every_octave(self):
        for n in range(0, 116):
            assert pitch_name(n) == pitch_name(n + 12)

    def test_octave_increases_by_one_per_twelve(self):
        for n in range(12, 116):
            low = pitch_name(n, include_octave=True)
            high = pitch_name(n + 12, include_octave=True)
            name = pitch_name(n)
            assert int(high[len(name):]) == int(low[len(name):]) + 1

    def test_extremes(self):
        assert pitch_name(0) == "C"
        assert pitch_name(127, include_octave=True) == "G9"
        assert pitch_name(12, include_octave=True) == "C0"

    @pytest.mark.parametrize("note", [-1, 128, 500])
    def test_out_of_range_raises(self, note):
        with pytest.raises(NoteOutOfRangeError) as exc_info:
            pitch_name(note)
        assert exc_info.value.note == note

    def test_negative_octave_raises(self):
        with pytest.raises(NoteOutOfRangeError):
            pitch_name(11, include_octave=True)
        assert pitch_name(11) == "B"

    def test_out_of_range_is_a_value_error(self):
        with pytest.raises(ValueError):
            pitch_name(200)


class TestChordTable:
    """Shape of the built-in table."""

    def test_table_size_and_order(self):
        assert len(DEFAULT_CHORD_TABLE) == 29
        assert DEFAULT_CHORD_TABLE[0] == ChordPattern("M", (0, 4, 7))
        assert DEFAULT_CHORD_TABLE[1] == ChordPattern("maj7", (0, 4, 11))
        assert DEFAULT_CHORD_TABLE[-1] == ChordPattern("maj7#5", (0, 4, 8, 11))

    def test_all_patterns_ascend_from_zero(self):
        for pattern in DEFAULT_CHORD_TABLE:
            assert is_valid_interval_pattern(pattern.intervals), pattern

    def test_no_duplicate_shapes(self):
        shapes = [p.intervals for p in DEFAULT_CHORD_TABLE]
        assert len(shapes) == len(set(shapes))

    def test_max_interval(self):
        assert max(p.intervals[-1] for p in DEFAULT_CHORD_TABLE) == 17


class TestMatchChord:
    """Exact interval matching against the lowest held note."""

    @pytest.mark.parametrize("notes,expected", [
        ([60, 64, 67], "CM"),
        ([48, 52, 55], "CM"),
        ([60, 63, 66, 69], "Cdim7"),
        ([60, 65], "Csus4"),
        ([62, 65, 69, 72], "Dm7"),
        ([55, 59, 62, 65], "G7"),
        ([62, 69], "D5"),
        ([60, 64, 71], "Cmaj7"),
        ([60, 64, 67, 71, 74, 77], "Cmaj11"),
        ([61, 64, 67, 71], "C#m7b5"),
        ([58, 62, 66], "A#aug"),
    ])
    def test_known_chords(self, notes, expected):
        assert match_chord(notes) == expected

    def test_unmatched_interval(self):
        assert match_chord([60, 61]) is None

    def test_inversion_is_not_recognised(self):
        assert match_chord([67, 72, 76]) is None

    def test_added_tone_is_not_recognised(self):
        assert match_chord([60, 62, 64, 67]) is None

    def test_same_shape_any_root(self):
        for root in range(12, 100):
            assert match_chord([root, root + 3, root + 7]) == pitch_name(root) + "m"

    def test_single_note_does_not_match(self):
        assert match_chord([60]) is None

    def test_empty_does_not_match(self):
        assert match_chord([]) is None

    def test_first_entry_wins_on_duplicate_shapes(self):
        theory = ChordTheory([ChordPattern("first", (0, 4, 7)), ChordPattern("second", (0, 4, 7))])
        assert theory.match_chord([60, 64, 67]) == "Cfirst"

    def test_custom_table(self):
        theory = ChordTheory([ChordPattern("min", (0, 3, 7))])
        assert theory.match_chord([57, 60, 64]) == "Amin"
        assert theory.match_chord([60, 64, 67]) is None

    def test_find_pattern(self):
        theory = ChordTheory()
        assert theory.find_pattern([60, 64, 67, 70]) == ChordPattern("7", (0, 4, 7, 10))


class TestLoadChordDefinitions:
    """Loading a replacement table from JSON."""

    def test_missing_file_keeps_default(self, tmp_path):
        assert load_chord_definitions(str(tmp_path / "missing.json")) is None
        theory = ChordTheory.from_config(str(tmp_path / "missing.json"))
        assert theory.chord_table == DEFAULT_CHORD_TABLE

    def test_valid_file_preserves_order(self, tmp_path):
        path = tmp_path / "chords.json"
        path.write_text(json.dumps([
            {"quality": "maj", "intervals": [0, 4, 7]},
            {"quality": "min", "intervals": [0, 3, 7]},
        ]))
        table = load_chord_definitions(str(path))
        assert table == (ChordPattern("maj", (0, 4, 7)), ChordPattern("min", (0, 3, 7)))
        assert ChordTheory.from_config(str(path)).match_chord([60, 63, 67]) == "Cmin"

    def test_invalid_entries_are_skipped(self, tmp_path, caplog):
        path = tmp_path / "chords.json"
        path.write_text(json.dumps([
            {"quality": "ok", "intervals": [0, 5]},
            {"quality": "no-zero", "intervals": [1, 5]},
            {"quality": "descending", "intervals": [0, 7, 4]},
            {"quality": "strings", "intervals": ["0", "4"]},
            {"intervals": [0, 4]},
            "not an object",
        ]))
        table = load_chord_definitions(str(path))
        assert table == (ChordPattern("ok", (0, 5)),)
        assert "Skipping invalid chord definition" in caplog.text

    def test_bad_json_keeps_default(self, tmp_path):
        path = tmp_path / "chords.json"
        path.write_text("{not json")
        assert load_chord_definitions(str(path)) is None

    def test_non_list_keeps_default(self, tmp_path):
        path = tmp_path / "chords.json"
        path.write_text(json.dumps({"M": [0, 4, 7]}))
        assert load_chord_definitions(str(path)) is None

    def test_no_valid_entries_keeps_default(self, tmp_path):
        path = tmp_path / "chords.json"
        path.write_text(json.dumps([{"quality": "x", "intervals": []}]))
        assert load_chord_definitions(str(path)) is None
