"""Slash-bass resolution for chords written as ``X/Y``.

Two rules apply, depending on whether the requested bass is already a chord
tone:

* **Chord-tone slash** (``C/E``): nothing is doubled. The matching tone is
  moved to the bass and the other tones are restacked above it, so the chord
  keeps its size and becomes an inversion.
* **Non-chord-tone slash** (``C/D``): one extra note of the slash pitch class
  is added underneath, its octave picked close to the previous chord's bass
  so the bass line moves smoothly.
"""

import logging

from triadvoice.pitch import (
    BASS_CEILING_MIDI,
    MIDI_MAX,
    MIDI_MIN,
    SEMITONES_PER_OCTAVE,
    clamp,
    nearest_pitch_for_class,
    pitch_class,
)
from triadvoice.spacing import MAX_OCTAVE_SHIFTS, enforce_spacing

logger = logging.getLogger(__name__)

OCTAVE = SEMITONES_PER_OCTAVE


def _lower_below(note: int, limit: int) -> int:
    """Lower *note* by octaves until it is strictly below *limit*."""
    for _ in range(MAX_OCTAVE_SHIFTS):
        if note < limit:
            break
        note -= OCTAVE
    return note


def _raise_to(note: int, low: int) -> int:
    """Raise *note* by octaves until it is at or above *low*."""
    for _ in range(MAX_OCTAVE_SHIFTS):
        if note >= low:
            break
        note += OCTAVE
    return note


def _invert_onto(
    chord: list[int],
    slash: int,
    low: int,
    high: int,
    previous_bass: int | None,
    bass_weight: float,
) -> list[int]:
    best: list[int] | None = None
    best_score = float("inf")
    bass_limit = BASS_CEILING_MIDI if low < BASS_CEILING_MIDI else high + 1

    for idx, tone in enumerate(chord):
        if pitch_class(tone) != slash:
            continue

        bass = _raise_to(_lower_below(tone, bass_limit), low)
        stacked = [clamp(bass, MIDI_MIN, MIDI_MAX)]
        for other in sorted(chord[:idx] + chord[idx + 1:]):
            for _ in range(MAX_OCTAVE_SHIFTS):
                if other > stacked[-1]:
                    break
                other += OCTAVE
            stacked.append(other)
        stacked = enforce_spacing(stacked, low, high)

        bass_cost = 0 if previous_bass is None else abs(stacked[0] - previous_bass)
        score = bass_weight * bass_cost
        if score < best_score:
            best_score = score
            best = stacked

    if best is None:
        return enforce_spacing(chord, low, high)
    return best


def _add_bass_note(
    chord: list[int],
    slash: int,
    target_bass: int,
    low: int,
    high: int,
    previous_bass: int | None,
) -> list[int]:
    target = target_bass if previous_bass is None else previous_bass
    bass = nearest_pitch_for_class(slash, target)
    if low < BASS_CEILING_MIDI:
        bass = _lower_below(bass, BASS_CEILING_MIDI)
    bass = _raise_to(bass, low)

    bass = _raise_to(_lower_below(bass, chord[0]), low)
    if bass >= chord[0]:
        # No room under the lowest tone; lift the upper notes instead.
        if chord[-1] + OCTAVE <= high:
            chord = [n + OCTAVE for n in chord]
        else:
            logger.debug("Lifting tones of %s above slash bass %d", chord, bass)
            chord = sorted(_raise_to(n, bass + 1) for n in chord)

    return enforce_spacing([clamp(bass, MIDI_MIN, MIDI_MAX)] + chord, low, high)


def apply_slash_bass(
    chord: list[int],
    slash: int | None,
    target_bass: int,
    low: int,
    high: int,
    previous_bass: int | None = None,
    bass_weight: float = 1.0,
) -> list[int]:
    """
    Realise the slash bass of a voiced chord.

    Args:
        chord:         Voiced chord, MIDI pitches.
        slash:         Requested bass pitch class, or None for no slash.
        target_bass:   Reference pitch for the added bass note when there is
                       no previous chord.
        low, high:     Register bounds.
        previous_bass: Lowest pitch of the previous chord, if any.
        bass_weight:   Scales the bass-motion cost when choosing between
                       several matching chord tones.

    Returns:
        The repaired chord, ascending. Unchanged when *slash* is None.
    """
    if slash is None:
        return list(chord)

    notes = sorted(chord)
    if not notes:
        return notes
    wanted = pitch_class(slash)

    if any(pitch_class(n) == wanted for n in notes):
        return _invert_onto(notes, wanted, low, high, previous_bass, bass_weight)
    return _add_bass_note(notes, wanted, target_bass, low, high, previous_bass)
