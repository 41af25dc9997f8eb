"""ChordParser: turns typed chord symbols such as ``Am/E`` into ChordSymbols."""

import re
from dataclasses import dataclass

from triadvoice.errors import ChordParseError
from triadvoice.pitch import note_name_to_pitch_class, pitch_class_name

MAJOR = "major"
MINOR = "minor"

_CHORD_BODY_RE = re.compile(r"^([A-Ga-g])([#b]?)(m|maj)?$")
_NOTE_RE = re.compile(r"^([A-Ga-g])([#b]?)$")
_SEPARATOR_RE = re.compile(r"[\s,]+")


@dataclass(frozen=True)
class ChordSymbol:
    """
    One parsed chord token.

    Attributes:
        symbol:  The token exactly as typed (e.g. "Am/E").
        root:    Pitch class of the chord root (0=C, 1=C#, ..., 11=B).
        quality: "major" or "minor".
        slash:   Pitch class of the requested bass note, or None.
    """

    symbol: str
    root: int
    quality: str
    slash: int | None = None

    @property
    def name(self) -> str:
        """Human-readable chord name without the slash part, e.g. 'Am' or 'Bb'."""
        suffix = "m" if self.quality == MINOR else ""
        return f"{pitch_class_name(self.root)}{suffix}"


def parse_chord_token(token: str) -> ChordSymbol | None:
    """
    Parse a single chord token.

    Accepts ``C``, ``F#``, ``Bb``, ``Am``, ``Cmaj``, ``D#m`` with an optional
    slash bass (``Am/E``, ``F/C``). The note letter is case-insensitive; only
    a lowercase ``m`` marks a minor chord.

    Returns:
        The parsed ChordSymbol, or None if *token* is blank.

    Raises:
        ChordParseError: If the chord body or the slash bass is malformed.
    """
    raw = str(token or "").strip()
    if not raw:
        return None

    body, has_slash, slash_text = raw.partition("/")
    match = _CHORD_BODY_RE.match(body.strip())
    if not match:
        raise ChordParseError(
            f'Invalid chord: "{raw}". Use e.g. Am, F, G#, Bb, Cm, D#m, or Am/E.'
        )

    letter, accidental, suffix = match.groups()
    root = note_name_to_pitch_class(letter, accidental)
    quality = MINOR if suffix == "m" else MAJOR

    slash: int | None = None
    if has_slash:
        slash_match = _NOTE_RE.match(slash_text.strip())
        if not slash_match:
            raise ChordParseError(
                f'Invalid slash bass: "{slash_text.strip()}" in "{raw}". Use e.g. Am/E, F/C.'
            )
        slash = note_name_to_pitch_class(*slash_match.groups())

    return ChordSymbol(symbol=raw, root=root, quality=quality, slash=slash)


def parse_progression(text: str) -> list[ChordSymbol]:
    """
    Split a progression on whitespace and/or commas and parse every token.

    Raises:
        ChordParseError: If the text holds no chords or any token is invalid.
    """
    tokens = [tok for tok in _SEPARATOR_RE.split(str(text or "").strip()) if tok]
    if not tokens:
        raise ChordParseError("Please enter at least one chord (e.g. Am, F, G, Cm, Am/E).")

    symbols = []
    for tok in tokens:
        parsed = parse_chord_token(tok)
        if parsed is not None:
            symbols.append(parsed)
    return symbols


def parse_pitch_class(token: str) -> int | None:
    """
    Parse a bare pitch-class query such as ``G``, ``Eb`` or ``F#`` (no octave).

    Returns:
        The pitch class, or None if *token* is blank.

    Raises:
        ChordParseError: If *token* is not a note name.
    """
    text = str(token or "").strip()
    if not text:
        return None

    match = _NOTE_RE.match(text)
    if not match:
        raise ChordParseError('Enter a pitch class like "G", "Eb", "F#". (No octave.)')
    return note_name_to_pitch_class(*match.groups())
