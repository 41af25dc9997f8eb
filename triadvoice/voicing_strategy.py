"""VoicingStrategy: Strategy pattern for mapping chord specs to MIDI note sets."""

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass

from triadvoice.chord_parser import ChordSymbol
from triadvoice.errors import VoicingModeError
from triadvoice.pitch import (
    BASS_CEILING_MIDI,
    MIDDLE_C_MIDI,
    MIDI_MAX,
    MIDI_MIN,
    SEMITONES_PER_OCTAVE,
    RegisterBounds,
    clamp,
    midi_to_note,
    nearest_pitch_for_class,
    pitch_class,
    round_half_up,
)
from triadvoice.slash_bass import apply_slash_bass
from triadvoice.spacing import (
    MAX_OCTAVE_SHIFTS,
    MIN_BOTTOM_INTERVAL,
    enforce_spacing,
    fit_to_range,
    pull_bass_below_ceiling,
)
from triadvoice.triads import MAJOR_THIRD, PERFECT_FIFTH, triad_pitch_classes

logger = logging.getLogger(__name__)

OCTAVE = SEMITONES_PER_OCTAVE

#: Fraction of the register, from the bottom, used as the slash-bass reference.
TARGET_BASS_FRACTION = 0.20


@dataclass(frozen=True)
class ChordSpec:
    """
    A parsed chord resolved to a concrete register.

    Attributes:
        target_root: Absolute MIDI pitch of the root near middle C.
        quality:     "major" or "minor".
        slash:       Requested bass pitch class, or None.
        symbol:      The chord token as typed.
    """

    target_root: int
    quality: str
    slash: int | None
    symbol: str

    @classmethod
    def from_symbol(cls, chord: ChordSymbol, reference: int = MIDDLE_C_MIDI) -> "ChordSpec":
        return cls(
            target_root=nearest_pitch_for_class(chord.root, reference),
            quality=chord.quality,
            slash=chord.slash,
            symbol=chord.symbol,
        )

    @property
    def root(self) -> int:
        return pitch_class(self.target_root)


@dataclass(frozen=True)
class VoicedChord:
    """
    A chord spec annotated with its concrete MIDI notes.

    Attributes:
        spec:    The ChordSpec that was voiced.
        pitches: Ascending MIDI note numbers, no exact duplicates. Usually
                 three notes, four when a non-chord-tone slash bass was added.
    """

    spec: ChordSpec
    pitches: tuple[int, ...]

    @property
    def bass(self) -> int:
        return self.pitches[0]

    @property
    def note_names(self) -> list[str]:
        return [midi_to_note(p) for p in self.pitches]


def target_bass_for(bounds: RegisterBounds) -> int:
    """Reference bass pitch a fifth of the way up the register."""
    return bounds.low + round_half_up((bounds.high - bounds.low) * TARGET_BASS_FRACTION)


def motion_cost(previous: list[int] | tuple[int, ...], candidate: list[int]) -> int:
    """Sum of absolute semitone moves between same-index voices, overlapping voices only."""
    return sum(abs(a - b) for a, b in zip(sorted(previous), sorted(candidate)))


def close_voicing(spec: ChordSpec) -> list[int]:
    """Root-position close triad built upward from the chord's target root."""
    _, third_pc, fifth_pc = triad_pitch_classes(spec.root, spec.quality)
    root = spec.target_root
    third = nearest_pitch_for_class(third_pc, root + MAJOR_THIRD)
    fifth = nearest_pitch_for_class(fifth_pc, root + PERFECT_FIFTH)

    notes = sorted([root, third, fifth])
    for i in range(1, len(notes)):
        for _ in range(MAX_OCTAVE_SHIFTS):
            if notes[i] > notes[i - 1]:
                break
            notes[i] += OCTAVE
    return sorted(clamp(n, MIDI_MIN, MIDI_MAX) for n in notes)


# ── Abstract base ────────────────────────────────────────────────────────────

class VoicingStrategy(ABC):
    """
    Abstract Strategy for turning a progression of chord specs into voicings.

    ``voice_sequence()`` walks the progression left to right, handing each
    chord the previously voiced chord so strategies can keep the bass and
    upper voices smooth. Every result is finished by keeping the bass under
    the C4 ceiling where the register allows.
    """

    name: str = ""

    def voice_sequence(
        self,
        specs: list[ChordSpec],
        bounds: RegisterBounds,
        bass_weight: float,
    ) -> list[VoicedChord]:
        voiced: list[VoicedChord] = []
        previous: VoicedChord | None = None
        for spec in specs:
            notes = self.voice(spec, bounds, previous, bass_weight)
            notes = pull_bass_below_ceiling(notes, bounds.low, bounds.high)
            chord = VoicedChord(spec=spec, pitches=tuple(notes))
            logger.debug("%s voiced %s as %s", self.name, spec.symbol, chord.note_names)
            voiced.append(chord)
            previous = chord
        return voiced

    @abstractmethod
    def voice(
        self,
        spec: ChordSpec,
        bounds: RegisterBounds,
        previous: VoicedChord | None,
        bass_weight: float,
    ) -> list[int]:
        """
        Voice a single chord.

        Args:
            spec:        Chord to voice.
            bounds:      Register the notes must stay within.
            previous:    The chord voiced just before, or None for the first.
            bass_weight: Weight of bass motion in smoothness decisions.

        Returns:
            Ascending MIDI pitches within *bounds*.
        """


# ── Concrete strategies ──────────────────────────────────────────────────────

class CloseVoicer(VoicingStrategy):
    """
    Close voicing: root, third and fifth stacked as tightly as possible
    above the target root, then spaced, fitted and given its slash bass.
    """

    name = "close"

    def voice(
        self,
        spec: ChordSpec,
        bounds: RegisterBounds,
        previous: VoicedChord | None,
        bass_weight: float,
    ) -> list[int]:
        low, high = bounds.low, bounds.high
        notes = enforce_spacing(fit_to_range(close_voicing(spec), low, high), low, high)
        return apply_slash_bass(
            notes,
            spec.slash,
            target_bass_for(bounds),
            low,
            high,
            previous.bass if previous else None,
            bass_weight,
        )


class OpenVoicer(VoicingStrategy):
    """
    Open voicing: an explicit bottom/middle/top pitch-class order built from
    the bass upward.

    Voice order by slash role
    -------------------------
        no slash / slash on root : root  – fifth – third
        slash on the third       : third – root  – fifth
        slash on the fifth       : fifth – third – root

    The middle voice sits at least a perfect fifth above the bass. The top
    voice is chosen from a tight and a wide placement, preferring a total
    spread of at most ``PREFERRED_SPREAD`` and lightly penalising notes above
    ``HIGH_TOP``. A slash bass outside the triad is added afterwards.
    """

    name = "open"

    DEFAULT_BASS_MIDI = 57   # A3
    PREFERRED_SPREAD = 16
    HIGH_TOP = 72            # C5
    HIGH_TOP_PENALTY = 0.25
    TIGHT_TOP_OFFSET = 4
    WIDE_TOP_OFFSET = 16

    def _voice_order(self, spec: ChordSpec) -> tuple[list[int], bool]:
        """Return the (bottom, middle, top) pitch classes and whether a bass note must be added."""
        root, third, fifth = triad_pitch_classes(spec.root, spec.quality)
        if spec.slash == third:
            return [third, root, fifth], False
        if spec.slash == fifth:
            return [fifth, third, root], False
        return [root, fifth, third], spec.slash is not None and spec.slash != root

    def _top_score(self, bass: int, top: int) -> float:
        excess_spread = max(0, top - bass - self.PREFERRED_SPREAD)
        return excess_spread + self.HIGH_TOP_PENALTY * max(0, top - self.HIGH_TOP)

    def _above(self, note: int, floor: int) -> int:
        for _ in range(MAX_OCTAVE_SHIFTS):
            if note > floor:
                break
            note += OCTAVE
        return note

    def voice(
        self,
        spec: ChordSpec,
        bounds: RegisterBounds,
        previous: VoicedChord | None,
        bass_weight: float,
    ) -> list[int]:
        low, high = bounds.low, bounds.high
        (bottom_pc, middle_pc, top_pc), needs_added_bass = self._voice_order(spec)

        reference = previous.bass if previous else self.DEFAULT_BASS_MIDI
        bass = nearest_pitch_for_class(bottom_pc, reference)
        for _ in range(MAX_OCTAVE_SHIFTS):
            if not (bounds.allows_low_bass and bass >= BASS_CEILING_MIDI):
                break
            bass -= OCTAVE
        for _ in range(MAX_OCTAVE_SHIFTS):
            if bass >= low:
                break
            bass += OCTAVE

        middle = nearest_pitch_for_class(middle_pc, bass + MIN_BOTTOM_INTERVAL)
        for _ in range(MAX_OCTAVE_SHIFTS):
            if middle - bass >= MIN_BOTTOM_INTERVAL:
                break
            middle += OCTAVE

        tight = self._above(nearest_pitch_for_class(top_pc, middle + self.TIGHT_TOP_OFFSET), middle)
        wide = self._above(nearest_pitch_for_class(top_pc, middle + self.WIDE_TOP_OFFSET), middle)
        top = tight if self._top_score(bass, tight) <= self._top_score(bass, wide) else wide

        notes = enforce_spacing([bass, middle, top], low, high)
        if needs_added_bass:
            notes = apply_slash_bass(
                notes,
                spec.slash,
                target_bass_for(bounds),
                low,
                high,
                previous.bass if previous else None,
                bass_weight,
            )
        return notes


class VoiceLedVoicer(VoicingStrategy):
    """
    Voice-led voicing: pick, for each chord, the candidate voicing that moves
    least from the previous chord.

    Candidates are the three inversions of the triad, each placed at five
    octave shifts (-2 … +2) around ``TRIAD_TARGET_MIDI`` and fitted to the
    register; duplicates are dropped, leaving at most 15. Each candidate gets
    its slash bass and spacing before scoring:

        score = Σ |voice motion| over overlapping voices
                + bass_weight × |bass motion|

    The first chord has nothing to move from, so every candidate scores 0 and
    the first one enumerated wins.
    """

    name = "voicelead"

    TRIAD_TARGET_MIDI = MIDDLE_C_MIDI
    OCTAVE_SHIFTS = range(-2, 3)

    def candidates(self, spec: ChordSpec, bounds: RegisterBounds) -> list[list[int]]:
        root, third, fifth = triad_pitch_classes(spec.root, spec.quality)
        inversions = [
            [root, third, fifth],
            [third, fifth, root],
            [fifth, root, third],
        ]

        seen: set[tuple[int, ...]] = set()
        unique: list[list[int]] = []
        for bottom_pc, middle_pc, top_pc in inversions:
            base = nearest_pitch_for_class(bottom_pc, self.TRIAD_TARGET_MIDI)
            for shift in self.OCTAVE_SHIFTS:
                bottom = base + OCTAVE * shift
                middle = nearest_pitch_for_class(middle_pc, bottom + MAJOR_THIRD)
                top = nearest_pitch_for_class(top_pc, middle + MAJOR_THIRD)
                for _ in range(MAX_OCTAVE_SHIFTS):
                    if middle > bottom:
                        break
                    middle += OCTAVE
                for _ in range(MAX_OCTAVE_SHIFTS):
                    if top > middle:
                        break
                    top += OCTAVE

                chord = fit_to_range([bottom, middle, top], bounds.low, bounds.high)
                key = tuple(chord)
                if key not in seen:
                    seen.add(key)
                    unique.append(chord)
        return unique

    def voice(
        self,
        spec: ChordSpec,
        bounds: RegisterBounds,
        previous: VoicedChord | None,
        bass_weight: float,
    ) -> list[int]:
        low, high = bounds.low, bounds.high
        previous_bass = previous.bass if previous else None
        target_bass = target_bass_for(bounds)

        best: list[int] | None = None
        best_score = float("inf")
        pool = self.candidates(spec, bounds)
        for candidate in pool:
            notes = apply_slash_bass(
                candidate, spec.slash, target_bass, low, high, previous_bass, bass_weight
            )
            notes = pull_bass_below_ceiling(enforce_spacing(notes, low, high), low, high)

            upper = motion_cost(previous.pitches, notes) if previous else 0
            bass_motion = 0 if previous_bass is None else abs(notes[0] - previous_bass)
            score = upper + bass_weight * bass_motion
            if score < best_score:
                best_score = score
                best = notes

        if best is None:
            logger.debug("No voice-led candidates for %s; using close voicing", spec.symbol)
            return CloseVoicer().voice(spec, bounds, previous, bass_weight)

        logger.debug("%s: %d candidates, best score %.2f", spec.symbol, len(pool), best_score)
        return best


_VOICERS: dict[str, type[VoicingStrategy]] = {
    CloseVoicer.name: CloseVoicer,
    OpenVoicer.name: OpenVoicer,
    VoiceLedVoicer.name: VoiceLedVoicer,
}

VOICING_MODES: list[str] = list(_VOICERS)


def get_voicer(mode: str) -> VoicingStrategy:
    """Return the VoicingStrategy for ``close``, ``open`` or ``voicelead``."""
    try:
        return _VOICERS[mode.strip().lower()]()
    except KeyError:
        raise VoicingModeError(
            f"Unknown voicing mode '{mode}'. Use one of: {', '.join(VOICING_MODES)}."
        ) from None
