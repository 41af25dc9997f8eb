"""Unit tests for slash-bass resolution."""

from triadvoice.slash_bass import apply_slash_bass

LOW, HIGH = 36, 84
TARGET_BASS = 46


def test_no_slash_returns_chord_unchanged() -> None:
    assert apply_slash_bass([60, 64, 67], None, TARGET_BASS, LOW, HIGH) == [60, 64, 67]


def test_chord_tone_slash_reinverts_without_doubling() -> None:
    result = apply_slash_bass([60, 64, 67], 4, TARGET_BASS, LOW, HIGH)
    assert result == [52, 60, 67]


def test_chord_tone_slash_on_fifth() -> None:
    result = apply_slash_bass([60, 64, 67], 7, TARGET_BASS, LOW, HIGH)
    assert len(result) == 3
    assert result[0] % 12 == 7
    assert sorted(n % 12 for n in result) == [0, 4, 7]


def test_non_chord_tone_slash_adds_one_bass_note() -> None:
    result = apply_slash_bass([60, 64, 67], 2, TARGET_BASS, LOW, HIGH)
    assert len(result) == 4
    assert result[0] % 12 == 2
    assert sorted(n % 12 for n in result[1:]) == [0, 4, 7]


def test_non_chord_tone_slash_follows_previous_bass() -> None:
    near_low = apply_slash_bass([60, 64, 67], 2, TARGET_BASS, LOW, HIGH, previous_bass=40)
    near_high = apply_slash_bass([60, 64, 67], 2, TARGET_BASS, LOW, HIGH, previous_bass=62)
    assert near_low[0] == 38
    assert near_high[0] == 50


def test_non_chord_tone_slash_lifts_chord_at_bottom_of_range() -> None:
    result = apply_slash_bass([36, 40, 43], 2, TARGET_BASS, LOW, HIGH)
    assert result == [38, 48, 52, 55]


def test_slash_bass_stays_below_ceiling() -> None:
    result = apply_slash_bass([72, 76, 79], 9, TARGET_BASS, LOW, HIGH)
    assert result[0] < 60
    assert result[0] % 12 == 9


def test_slash_bass_narrow_register_terminates_in_range() -> None:
    result = apply_slash_bass([60, 64, 67], 2, 62, 60, 72)
    assert all(60 <= n <= 72 for n in result)
    assert all(a < b for a, b in zip(result, result[1:]))


def test_added_bass_lifts_tones_when_chord_cannot_move_up() -> None:
    # C3 - C6: the chord's top is too high to lift it whole, so only C moves.
    result = apply_slash_bass([48, 76, 79], 1, 55, 48, 84)
    assert result == [49, 60, 64, 67]
