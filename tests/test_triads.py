"""Unit tests for the triad model and reverse lookup."""

from triadvoice.chord_parser import MAJOR, MINOR
from triadvoice.triads import triad_pitch_classes, triads_containing_pitch_class


def test_c_major_triad() -> None:
    assert triad_pitch_classes(0, MAJOR) == [0, 4, 7]


def test_a_minor_triad_wraps_octave() -> None:
    assert triad_pitch_classes(9, MINOR) == [9, 0, 4]


def test_b_major_triad() -> None:
    assert triad_pitch_classes(11, MAJOR) == [11, 3, 6]


def test_triads_containing_c() -> None:
    lookup = triads_containing_pitch_class(0)
    assert lookup.major == ["Ab", "C", "F"]
    assert lookup.minor == ["Am", "Cm", "Fm"]


def test_triads_containing_a() -> None:
    lookup = triads_containing_pitch_class(9)
    assert lookup.major == ["A", "D", "F"]
    assert lookup.minor == ["Am", "Dm", "Gbm"]


def test_every_pitch_class_has_three_of_each() -> None:
    for pc in range(12):
        lookup = triads_containing_pitch_class(pc)
        assert len(lookup.major) == 3
        assert len(lookup.minor) == 3
