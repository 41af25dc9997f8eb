"""Unit tests for pitch utilities and register bounds."""

import pytest

from triadvoice.errors import RangeError
from triadvoice.pitch import (
    RegisterBounds,
    midi_to_note,
    nearest_pitch_for_class,
    note_to_midi,
    parse_register_bounds,
    pitch_class_name,
    round_half_up,
)


def test_note_to_midi_middle_c() -> None:
    assert note_to_midi("C4") == 60


def test_note_to_midi_accepts_bare_integer() -> None:
    assert note_to_midi("36") == 36
    assert note_to_midi(84) == 84


def test_note_to_midi_flats_sharps_and_negative_octave() -> None:
    assert note_to_midi("Bb3") == 58
    assert note_to_midi("f#2") == 42
    assert note_to_midi("C-1") == 0


def test_note_to_midi_rejects_garbage() -> None:
    assert note_to_midi("H2") is None
    assert note_to_midi("C") is None
    assert note_to_midi("") is None


def test_midi_to_note_uses_sharps() -> None:
    assert midi_to_note(60) == "C4"
    assert midi_to_note(61) == "C#4"
    assert midi_to_note(36) == "C2"


def test_pitch_class_name_prefers_flats_for_black_keys() -> None:
    assert [pitch_class_name(pc) for pc in (1, 3, 6, 8, 10)] == ["Db", "Eb", "Gb", "Ab", "Bb"]
    assert pitch_class_name(4) == "E"


def test_nearest_pitch_for_class_picks_closest_octave() -> None:
    assert nearest_pitch_for_class(4, 64) == 64
    assert nearest_pitch_for_class(7, 64) == 67
    assert nearest_pitch_for_class(0, 59) == 60


def test_nearest_pitch_for_class_tie_prefers_lower() -> None:
    # F#3 (54) and F#4 (66) are both 6 semitones from C4.
    assert nearest_pitch_for_class(6, 60) == 54


def test_nearest_pitch_for_class_stays_in_midi_range() -> None:
    assert nearest_pitch_for_class(11, 127) == 119
    assert nearest_pitch_for_class(0, 0) == 0


def test_round_half_up() -> None:
    assert round_half_up(9.6) == 10
    assert round_half_up(37.5) == 38
    assert round_half_up(42.5) == 43


def test_parse_register_bounds_note_names() -> None:
    bounds = parse_register_bounds("C2", "C6")
    assert (bounds.low, bounds.high) == (36, 84)


def test_parse_register_bounds_mixed_inputs() -> None:
    bounds = parse_register_bounds("36", "C6")
    assert (bounds.low, bounds.high) == (36, 84)


def test_parse_register_bounds_clamps_to_midi_range() -> None:
    bounds = parse_register_bounds("-5", "200")
    assert (bounds.low, bounds.high) == (0, 127)


def test_parse_register_bounds_rejects_unparseable() -> None:
    with pytest.raises(RangeError, match="note names like C2/C6"):
        parse_register_bounds("low", "C6")


def test_parse_register_bounds_rejects_inverted_range() -> None:
    with pytest.raises(RangeError, match="Low must be less than High"):
        parse_register_bounds("C6", "C2")


def test_parse_register_bounds_rejects_equal_bounds() -> None:
    with pytest.raises(RangeError):
        parse_register_bounds("60", "60")


def test_register_bounds_rejects_less_than_two_octaves() -> None:
    with pytest.raises(RangeError, match="at least two octaves"):
        RegisterBounds(60, 70)
    with pytest.raises(RangeError, match="at least two octaves"):
        RegisterBounds(48, 71)


def test_register_bounds_accepts_two_octaves() -> None:
    assert RegisterBounds(48, 72).high == 72


def test_register_bounds_allows_low_bass() -> None:
    assert RegisterBounds(36, 84).allows_low_bass
    assert not RegisterBounds(60, 84).allows_low_bass
