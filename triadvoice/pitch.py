"""Pitch utilities: note names, MIDI numbers, register bounds."""

import math
import re
from dataclasses import dataclass

from triadvoice.errors import RangeError

# ── MIDI constants ──────────────────────────────────────────────────────────
SEMITONES_PER_OCTAVE = 12
MIDDLE_C_MIDI = 60  # C4 in Scientific Pitch Notation
MIDI_MIN = 0
MIDI_MAX = 127

#: Keep the bass below C4 whenever the register allows it.
BASS_CEILING_MIDI = 60

#: Narrowest register in which any slash chord can keep its bass underneath.
MIN_REGISTER_WIDTH = 24

NOTE_TO_SEMITONE: dict[str, int] = {
    "C": 0, "C#": 1, "Db": 1, "D": 2, "D#": 3, "Eb": 3, "E": 4, "Fb": 4,
    "E#": 5, "F": 5, "F#": 6, "Gb": 6, "G": 7, "G#": 8, "Ab": 8, "A": 9,
    "A#": 10, "Bb": 10, "B": 11, "Cb": 11, "B#": 0,
}

# Chromatic pitch class names (index 0 = C)
NOTE_NAMES: list[str] = ["C", "C#", "D", "D#", "E", "F", "F#", "G", "G#", "A", "A#", "B"]

_FLAT_SPELLINGS: dict[str, str] = {"C#": "Db", "D#": "Eb", "F#": "Gb", "G#": "Ab", "A#": "Bb"}

_NOTE_WITH_OCTAVE_RE = re.compile(r"^([A-Ga-g])([#b]?)(-?\d+)$")
_INTEGER_RE = re.compile(r"^-?\d+$")


def clamp(value: int, low: int, high: int) -> int:
    """Clamp *value* into the closed interval [low, high]."""
    return max(low, min(high, value))


def round_half_up(value: float) -> int:
    """Round to the nearest integer, halves away from zero for positives (2.5 -> 3)."""
    return int(math.floor(value + 0.5))


def pitch_class(pitch: int) -> int:
    """Return the pitch class (0-11) of an absolute pitch."""
    return pitch % SEMITONES_PER_OCTAVE


def note_name_to_pitch_class(letter: str, accidental: str = "") -> int:
    """Resolve a letter plus optional ``#``/``b`` through the enharmonic table."""
    return NOTE_TO_SEMITONE[letter.upper() + accidental]


def pitch_class_name(pc: int) -> str:
    """Display name for a pitch class, preferring flats for the black keys."""
    sharp_name = NOTE_NAMES[pitch_class(pc)]
    return _FLAT_SPELLINGS.get(sharp_name, sharp_name)


def note_to_midi(token: str | int) -> int | None:
    """
    Convert a note name with octave (``"C2"``, ``"Bb-1"``) or a bare MIDI
    number (``"36"``) to an absolute pitch.

    Returns:
        The MIDI note number, or ``None`` if *token* is not recognised.
        The value is not clamped.
    """
    if isinstance(token, int):
        return token

    text = str(token).strip()
    if not text:
        return None
    if _INTEGER_RE.match(text):
        return int(text)

    match = _NOTE_WITH_OCTAVE_RE.match(text)
    if not match:
        return None
    letter, accidental, octave = match.groups()
    return (int(octave) + 1) * SEMITONES_PER_OCTAVE + note_name_to_pitch_class(letter, accidental)


def midi_to_note(pitch: int) -> str:
    """Convert a MIDI note number to a sharp-spelled name with octave (60 -> ``"C4"``)."""
    octave = pitch // SEMITONES_PER_OCTAVE - 1
    return f"{NOTE_NAMES[pitch_class(pitch)]}{octave}"


def nearest_pitch_for_class(pc: int, target: int) -> int:
    """
    Choose the absolute pitch of class *pc* closest to *target*.

    Octaves from two below to two above the target's octave are searched in
    ascending order; on a tie the lower candidate wins. Candidates outside
    0-127 are skipped, and if none remain the clamped target is returned.
    """
    base_octave = target // SEMITONES_PER_OCTAVE
    best: int | None = None
    best_cost = 0
    for octave in range(base_octave - 2, base_octave + 3):
        candidate = octave * SEMITONES_PER_OCTAVE + pc
        cost = abs(candidate - target)
        if MIDI_MIN <= candidate <= MIDI_MAX and (best is None or cost < best_cost):
            best = candidate
            best_cost = cost
    if best is None:
        return clamp(target, MIDI_MIN, MIDI_MAX)
    return best


@dataclass(frozen=True)
class RegisterBounds:
    """
    The permissible register for voiced chords.

    Attributes:
        low:  Lowest allowed MIDI pitch (inclusive).
        high: Highest allowed MIDI pitch (inclusive).
    """

    low: int
    high: int

    def __post_init__(self) -> None:
        if not (MIDI_MIN <= self.low <= MIDI_MAX and MIDI_MIN <= self.high <= MIDI_MAX):
            raise RangeError(f"Register bounds must lie within {MIDI_MIN}-{MIDI_MAX}.")
        if self.low >= self.high:
            raise RangeError("Register bounds invalid: Low must be less than High.")
        if self.high - self.low < MIN_REGISTER_WIDTH:
            raise RangeError(
                "Register bounds invalid: the range must span at least two octaves "
                f"({MIN_REGISTER_WIDTH} semitones)."
            )

    @property
    def allows_low_bass(self) -> bool:
        """True when the bass can be kept below the C4 ceiling."""
        return self.low < BASS_CEILING_MIDI

    def describe(self) -> str:
        return f"{midi_to_note(self.low)} ({self.low}) → {midi_to_note(self.high)} ({self.high})"


def parse_register_bounds(low_text: str | int, high_text: str | int) -> RegisterBounds:
    """
    Resolve the two register fields into :class:`RegisterBounds`.

    Each field accepts a note name with octave or a bare MIDI number; values
    are clamped to 0-127.

    Raises:
        RangeError: If either field is unparseable or the range is unusable.
    """
    low = note_to_midi(low_text)
    high = note_to_midi(high_text)
    if low is None or high is None:
        raise RangeError(
            "Register bounds invalid. Use note names like C2/C6 or MIDI numbers like 36/84."
        )
    return RegisterBounds(clamp(low, MIDI_MIN, MIDI_MAX), clamp(high, MIDI_MIN, MIDI_MAX))
