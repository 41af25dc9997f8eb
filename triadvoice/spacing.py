"""Range and spacing engine shared by every voicing strategy.

All repairs move notes by whole octaves, so pitch classes are never changed.
Every loop is capped: when a cap is reached the current notes are returned as
a best effort instead of raising.
"""

import logging

from triadvoice.pitch import (
    BASS_CEILING_MIDI,
    MIDI_MAX,
    MIDI_MIN,
    SEMITONES_PER_OCTAVE,
    clamp,
    pitch_class,
)

logger = logging.getLogger(__name__)

#: Upper bound on octave shifts attempted by any single repair loop.
MAX_OCTAVE_SHIFTS = 24

#: Upper bound on spread-tightening passes in :func:`enforce_spacing`.
MAX_TIGHTEN_PASSES = 8

MIN_BOTTOM_INTERVAL = 7     # perfect fifth between the two lowest voices
MAX_SPREAD_PREFERRED = 19   # octave plus a fifth from bottom to top

OCTAVE = SEMITONES_PER_OCTAVE


def _clamped_sorted(pitches: list[int]) -> list[int]:
    return sorted(clamp(n, MIDI_MIN, MIDI_MAX) for n in pitches)


def _restack_above(notes: list[int], start: int = 1) -> list[int]:
    """Raise notes[start:] by octaves until each sits above its predecessor."""
    out = list(notes)
    for i in range(max(start, 1), len(out)):
        for _ in range(MAX_OCTAVE_SHIFTS):
            if out[i] > out[i - 1]:
                break
            out[i] += OCTAVE
    return out


def _shift_whole(notes: list[int], low: int, high: int) -> list[int]:
    """Shift the whole chord by octaves so it sits inside [low, high] if it can."""
    out = list(notes)
    for _ in range(MAX_OCTAVE_SHIFTS):
        if min(out) >= low:
            break
        out = [n + OCTAVE for n in out]
    for _ in range(MAX_OCTAVE_SHIFTS):
        if max(out) <= high or min(out) - OCTAVE < low:
            break
        out = [n - OCTAVE for n in out]
    return out


def _repair_note(note: int, below: int | None, low: int, high: int) -> int:
    """Move one note into [low, high], keeping it above *below* when given."""
    for _ in range(MAX_OCTAVE_SHIFTS):
        if note >= low:
            break
        note += OCTAVE
    for _ in range(MAX_OCTAVE_SHIFTS):
        if note <= high:
            break
        note -= OCTAVE

    if below is not None:
        for _ in range(MAX_OCTAVE_SHIFTS):
            if note > below:
                break
            note += OCTAVE
        for _ in range(MAX_OCTAVE_SHIFTS):
            if not (note > high and note - OCTAVE > below and note - OCTAVE >= low):
                break
            note -= OCTAVE
    return clamp(note, MIDI_MIN, MIDI_MAX)


def _fold_above_bass(classes: list[int], low: int, high: int) -> list[int] | None:
    """
    Close the chord up over its bass inside [low, high].

    The bass takes its lowest in-range octave and every upper pitch class the
    first octave above the bass. Returns None when a voice has no room.
    """
    bass = low + (classes[0] - low) % OCTAVE
    if bass > high:
        return None
    placed = [bass]
    for pc in classes[1:]:
        candidate = bass + 1 + (pc - bass - 1) % OCTAVE
        while candidate in placed and candidate + OCTAVE <= high:
            candidate += OCTAVE
        if candidate in placed or candidate > high:
            return None
        placed.append(candidate)
    return sorted(placed)


def _fold_into_range(classes: list[int], low: int, high: int) -> list[int]:
    """
    Place every pitch class on its lowest representative inside [low, high].

    Last resort for registers too narrow to keep the bass underneath; the
    voice order may change but pitch classes are kept.
    """
    placed: list[int] = []
    for pc in classes:
        candidate = low + (pc - low) % OCTAVE
        while candidate in placed and candidate + OCTAVE <= high:
            candidate += OCTAVE
        if candidate not in placed and candidate <= high:
            placed.append(candidate)
    return sorted(placed)


def _is_well_formed(notes: list[int], classes: list[int], low: int, high: int) -> bool:
    return (
        all(low <= n <= high for n in notes)
        and all(a < b for a, b in zip(notes, notes[1:]))
        and [pitch_class(n) for n in notes] == classes
    )


def fit_to_range(pitches: list[int], low: int, high: int) -> list[int]:
    """
    Octave-shift a chord into [low, high] as a strictly ascending stack.

    The whole chord is shifted first; each note is then repaired on its own,
    staying above its predecessor and preferring the lowest in-range octave.
    A final whole-chord shift confirms the result. If the voices still do not
    fit in order, the chord is closed up over its lowest note, so the bass
    pitch class stays at the bottom. Applying this function to its own output
    returns the same notes.
    """
    source = sorted(pitches)
    if not source:
        return source
    classes = [pitch_class(n) for n in source]

    notes = _shift_whole(_clamped_sorted(source), low, high)
    for i, note in enumerate(notes):
        notes[i] = _repair_note(note, notes[i - 1] if i > 0 else None, low, high)
    notes = _clamped_sorted(_shift_whole(notes, low, high))
    if _is_well_formed(notes, classes, low, high):
        return notes

    folded = _fold_above_bass(classes, low, high)
    if folded is None:
        logger.debug("No room above the bass for %s in [%d, %d]; folding all voices", source, low, high)
        return _fold_into_range(classes, low, high)
    logger.debug("Range repair exhausted for %s in [%d, %d]; closed up over the bass", source, low, high)
    return folded


def pull_bass_below_ceiling(
    pitches: list[int],
    low: int,
    high: int,
    ceiling: int = BASS_CEILING_MIDI,
) -> list[int]:
    """
    Drop the lowest note below *ceiling* (C4) when the register allows it.

    The bass moves down by octaves until it is under the ceiling, then back
    up if that took it below *low*. The upper notes are restacked above it and
    the chord is re-fitted. If *low* is already at or above the ceiling only
    the re-fit happens.
    """
    if not pitches:
        return list(pitches)
    if low >= ceiling:
        return fit_to_range(pitches, low, high)

    notes = _clamped_sorted(pitches)
    bass = notes[0]
    for _ in range(MAX_OCTAVE_SHIFTS):
        if bass < ceiling:
            break
        bass -= OCTAVE
    for _ in range(MAX_OCTAVE_SHIFTS):
        if bass >= low:
            break
        bass += OCTAVE
    notes[0] = bass

    return fit_to_range(_restack_above(notes), low, high)


def enforce_spacing(
    pitches: list[int],
    low: int,
    high: int,
    min_bottom_interval: int = MIN_BOTTOM_INTERVAL,
    max_spread_preferred: int = MAX_SPREAD_PREFERRED,
) -> list[int]:
    """
    Keep a voicing playable: open bottom interval, compact overall spread.

    Steps:
      1. Push the second-lowest voice up by octaves until it is at least
         *min_bottom_interval* above the bass; restack the voices above it.
      2. Up to ``MAX_TIGHTEN_PASSES`` passes, top voice first: lower a voice
         an octave if it stays above the voice beneath it and at or above
         *low*, while the spread exceeds *max_spread_preferred*.
      3. Keep the bass below the C4 ceiling where the register allows.
      4. If the spread still exceeds *max_spread_preferred* + 12, drop the top
         voice one octave once unless that makes it collide, then re-fit.
    """
    notes = fit_to_range(pitches, low, high)
    if len(notes) < 2:
        return notes

    for _ in range(MAX_OCTAVE_SHIFTS):
        if notes[1] - notes[0] >= min_bottom_interval:
            break
        notes[1] += OCTAVE
    notes = fit_to_range(_restack_above(notes, start=2), low, high)

    for _ in range(MAX_TIGHTEN_PASSES):
        if notes[-1] - notes[0] <= max_spread_preferred:
            break
        changed = False
        for i in range(len(notes) - 1, 0, -1):
            candidate = notes[i] - OCTAVE
            if candidate <= notes[i - 1] or candidate < low:
                continue
            if i == 1 and candidate - notes[0] < min_bottom_interval:
                continue
            notes[i] = candidate
            changed = True
        if not changed:
            break

    if low < BASS_CEILING_MIDI:
        notes = pull_bass_below_ceiling(notes, low, high)

    if len(notes) >= 2 and notes[-1] - notes[0] > max_spread_preferred + OCTAVE:
        dropped = notes[-1] - OCTAVE
        if dropped > notes[-2] and dropped >= low:
            notes[-1] = dropped
        else:
            logger.debug("Spread of %s left wide; top voice would collide", notes)

    return fit_to_range(notes, low, high)
