"""Unit tests for chord token and progression parsing."""

import pytest

from triadvoice.chord_parser import (
    MAJOR,
    MINOR,
    parse_chord_token,
    parse_pitch_class,
    parse_progression,
)
from triadvoice.errors import ChordParseError


def test_parse_minor_slash_chord() -> None:
    chord = parse_chord_token("Am/E")
    assert chord is not None
    assert (chord.root, chord.quality, chord.slash) == (9, MINOR, 4)
    assert chord.symbol == "Am/E"


def test_parse_plain_major_chord() -> None:
    chord = parse_chord_token("C")
    assert chord is not None
    assert (chord.root, chord.quality, chord.slash) == (0, MAJOR, None)


def test_parse_maj_suffix_is_major() -> None:
    chord = parse_chord_token("Fmaj")
    assert chord is not None
    assert (chord.root, chord.quality) == (5, MAJOR)


def test_parse_accidentals_and_lowercase_letter() -> None:
    assert parse_chord_token("Bb").root == 10  # type: ignore[union-attr]
    assert parse_chord_token("d#m").root == 3  # type: ignore[union-attr]
    assert parse_chord_token("bb").root == 10  # type: ignore[union-attr]


def test_parse_theoretical_spellings() -> None:
    assert parse_chord_token("E#").root == 5  # type: ignore[union-attr]
    assert parse_chord_token("Fb").root == 4  # type: ignore[union-attr]
    assert parse_chord_token("B#").root == 0  # type: ignore[union-attr]
    assert parse_chord_token("Cbm").root == 11  # type: ignore[union-attr]


def test_parse_blank_token_returns_none() -> None:
    assert parse_chord_token("   ") is None


def test_parse_invalid_root_names_token() -> None:
    with pytest.raises(ChordParseError, match='"Xm"'):
        parse_chord_token("Xm")


def test_parse_uppercase_minor_marker_is_invalid() -> None:
    with pytest.raises(ChordParseError):
        parse_chord_token("CM")


def test_parse_invalid_slash_note() -> None:
    with pytest.raises(ChordParseError, match="Invalid slash bass"):
        parse_chord_token("Am/H")


def test_parse_empty_slash_part_is_invalid() -> None:
    with pytest.raises(ChordParseError, match="Invalid slash bass"):
        parse_chord_token("C/")


def test_parse_double_slash_is_invalid() -> None:
    with pytest.raises(ChordParseError):
        parse_chord_token("C/E/G")


def test_chord_symbol_name_uses_flats() -> None:
    chord = parse_chord_token("A#m/F")
    assert chord is not None
    assert chord.name == "Bbm"


def test_parse_progression_commas_and_spaces() -> None:
    chords = parse_progression("Am, F  G,C/E")
    assert [c.symbol for c in chords] == ["Am", "F", "G", "C/E"]


def test_parse_progression_empty_fails() -> None:
    with pytest.raises(ChordParseError, match="at least one chord"):
        parse_progression(" , ,  ")


def test_parse_progression_reports_bad_token() -> None:
    with pytest.raises(ChordParseError, match='"Q"'):
        parse_progression("C, Q, G")


def test_parse_pitch_class() -> None:
    assert parse_pitch_class("G") == 7
    assert parse_pitch_class("eb") == 3
    assert parse_pitch_class("") is None


def test_parse_pitch_class_rejects_octave() -> None:
    with pytest.raises(ChordParseError, match="No octave"):
        parse_pitch_class("C4")
