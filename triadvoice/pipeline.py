"""Sequence pipeline: progression text in, voiced chord sequence out.

Each call regenerates everything from the raw inputs; nothing is cached
between calls.
"""

import logging
import re
from dataclasses import dataclass, field

from triadvoice.chord_parser import ChordSymbol, parse_progression
from triadvoice.errors import TriadVoiceError
from triadvoice.pitch import BASS_CEILING_MIDI, MIDDLE_C_MIDI, RegisterBounds, parse_register_bounds
from triadvoice.voicing_strategy import ChordSpec, VoicedChord, get_voicer

logger = logging.getLogger(__name__)

DEFAULT_PROGRESSION = "Am, G, C/E, F"
EXAMPLE_PROGRESSION = "Dm, Bb, F, C, Dm/A, Bb/F, C/G"
DEFAULT_LOW = "C2"
DEFAULT_HIGH = "C6"
DEFAULT_MODE = "voicelead"
DEFAULT_BASS_WEIGHT = 1.2
MIN_BASS_WEIGHT = 0.0
MAX_BASS_WEIGHT = 3.0

_TRAILING_SEPARATORS_RE = re.compile(r"[,\s]*$")


@dataclass(frozen=True)
class GenerationResult:
    """
    Outcome of one generation run.

    Attributes:
        symbols:     Parsed chord symbols, in progression order.
        chords:      One VoicedChord per symbol.
        bounds:      Register used, or None if generation failed early.
        mode:        Voicing mode name.
        bass_weight: Bass smoothness weight after clamping.
        error:       Human-readable failure message; empty on success.
    """

    symbols: list[ChordSymbol] = field(default_factory=list)
    chords: list[VoicedChord] = field(default_factory=list)
    bounds: RegisterBounds | None = None
    mode: str = DEFAULT_MODE
    bass_weight: float = DEFAULT_BASS_WEIGHT
    error: str = ""

    @property
    def ok(self) -> bool:
        return not self.error

    @property
    def note_sets(self) -> list[list[int]]:
        return [list(chord.pitches) for chord in self.chords]


def clamp_bass_weight(weight: float) -> float:
    return float(max(MIN_BASS_WEIGHT, min(MAX_BASS_WEIGHT, weight)))


def build_chord_specs(symbols: list[ChordSymbol], reference: int = MIDDLE_C_MIDI) -> list[ChordSpec]:
    """Resolve every parsed symbol to a root register near *reference*."""
    return [ChordSpec.from_symbol(symbol, reference) for symbol in symbols]


def generate_sequence(
    progression: str,
    low: str | int = DEFAULT_LOW,
    high: str | int = DEFAULT_HIGH,
    mode: str = DEFAULT_MODE,
    bass_weight: float = DEFAULT_BASS_WEIGHT,
) -> GenerationResult:
    """
    Parse, voice and return a whole progression.

    The register is validated before anything else, then the progression is
    parsed and handed to the selected voicing strategy.

    Raises:
        RangeError:       If the register bounds are unusable.
        ChordParseError:  If the progression is empty or a token is invalid.
        VoicingModeError: If *mode* is unknown.
    """
    bounds = parse_register_bounds(low, high)
    voicer = get_voicer(mode)
    weight = clamp_bass_weight(bass_weight)

    symbols = parse_progression(progression)
    specs = build_chord_specs(symbols)
    chords = voicer.voice_sequence(specs, bounds, weight)

    logger.info(
        "Generated %d chord(s) with %s voicing in %s", len(chords), voicer.name, bounds.describe()
    )
    return GenerationResult(
        symbols=symbols,
        chords=chords,
        bounds=bounds,
        mode=voicer.name,
        bass_weight=weight,
    )


def safe_generate(
    progression: str,
    low: str | int = DEFAULT_LOW,
    high: str | int = DEFAULT_HIGH,
    mode: str = DEFAULT_MODE,
    bass_weight: float = DEFAULT_BASS_WEIGHT,
) -> GenerationResult:
    """Like :func:`generate_sequence`, but reports failures as an empty result with a message."""
    try:
        return generate_sequence(progression, low, high, mode, bass_weight)
    except TriadVoiceError as exc:
        logger.info("Generation failed: %s", exc)
        return GenerationResult(mode=mode, bass_weight=clamp_bass_weight(bass_weight), error=str(exc))


def append_chord_to_progression(progression: str, symbol: str) -> str:
    """Append *symbol* to a progression, separated by ``", "``."""
    current = progression.strip()
    if not current:
        return symbol
    return _TRAILING_SEPARATORS_RE.sub("", current) + ", " + symbol


def format_status(result: GenerationResult) -> str:
    """Multi-line status summary of a generation run."""
    bounds = result.bounds
    if result.error or bounds is None:
        return f"Error:\n{result.error}\n"

    if bounds.low < BASS_CEILING_MIDI:
        bass_rule = "bass < C4 enforced"
    else:
        bass_rule = "bass < C4 not possible (clamp low >= C4)"

    return (
        f"Chords = {len(result.chords)}\n"
        f"Voicing = {result.mode}\n"
        f"Bass smoothness weight = {result.bass_weight:.1f}\n"
        f"Clamp range = {bounds.describe()}\n"
        f"Bass rule = {bass_rule}\n"
        f"Parsed: {' | '.join(s.symbol for s in result.symbols)}\n"
    )


def format_sequence_lines(result: GenerationResult) -> list[str]:
    """One line per chord: index, symbol, note names and MIDI numbers."""
    lines = []
    for i, chord in enumerate(result.chords, start=1):
        names = " ".join(chord.note_names)
        numbers = ",".join(str(p) for p in chord.pitches)
        lines.append(f"{i:02d}. {chord.spec.symbol:<6}  {names}   ({numbers})")
    return lines
