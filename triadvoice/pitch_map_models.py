"""Data models for pitch-map rendering outputs."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PitchDot:
    """One voiced pitch placed on the map."""

    pitch: int
    note_name: str
    y: float


@dataclass(frozen=True)
class PitchMapColumn:
    """One chord of the sequence: a column of dots plus its hover label."""

    index: int
    symbol: str
    x: float
    width: float
    dots: list[PitchDot]
    label: str
    sequence_line: str


@dataclass(frozen=True)
class PitchMapDocument:
    """Neutral pitch-map representation consumed by the renderers."""

    title: str
    low: int
    high: int
    width: int
    height: int
    columns: list[PitchMapColumn]
