"""Triad model: pitch classes of major/minor triads and reverse lookup."""

from dataclasses import dataclass

from triadvoice.chord_parser import MINOR
from triadvoice.pitch import SEMITONES_PER_OCTAVE, pitch_class_name

MINOR_THIRD = 3   # semitones above root for minor 3rd
MAJOR_THIRD = 4   # semitones above root for major 3rd
PERFECT_FIFTH = 7


@dataclass(frozen=True)
class TriadLookup:
    """Names of the major and minor triads that contain one pitch class."""

    major: list[str]
    minor: list[str]


def triad_pitch_classes(root: int, quality: str) -> list[int]:
    """Return ``[root, third, fifth]`` pitch classes for a major or minor triad."""
    third = MINOR_THIRD if quality == MINOR else MAJOR_THIRD
    return [
        root % SEMITONES_PER_OCTAVE,
        (root + third) % SEMITONES_PER_OCTAVE,
        (root + PERFECT_FIFTH) % SEMITONES_PER_OCTAVE,
    ]


def _triad_names(roots: list[int], suffix: str) -> list[str]:
    unique_roots = dict.fromkeys(r % SEMITONES_PER_OCTAVE for r in roots)
    return sorted(f"{pitch_class_name(root)}{suffix}" for root in unique_roots)


def triads_containing_pitch_class(pc: int) -> TriadLookup:
    """
    Find every major and minor triad in which *pc* is the root, third or fifth.

    The root is back-solved for each role, so pitch class C yields the major
    triads C (root), Ab (third) and F (fifth). Names use flat spellings for
    the black keys and are sorted alphabetically.
    """
    major_roots = [pc, pc - MAJOR_THIRD, pc - PERFECT_FIFTH]
    minor_roots = [pc, pc - MINOR_THIRD, pc - PERFECT_FIFTH]
    return TriadLookup(
        major=_triad_names(major_roots, ""),
        minor=_triad_names(minor_roots, "m"),
    )
