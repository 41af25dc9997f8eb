"""Tests for the click command-line interface."""

from pathlib import Path

import mido
import pytest
from click.testing import CliRunner, Result

from triadvoice.cli import main


def _run(*args: str) -> Result:
    return CliRunner().invoke(main, list(args))


def test_generate_prints_status_and_sequence(tmp_path: Path) -> None:
    out = tmp_path / "out.mid"
    result = _run("generate", "C", "--mode", "close", "-o", str(out))
    assert result.exit_code == 0, result.output
    assert "Chords = 1" in result.output
    assert "Voicing = close" in result.output
    assert "01. C       C3 E5 G5   (48,76,79)" in result.output
    assert "Done!" in result.output


@pytest.mark.integration
def test_generate_writes_readable_midi(tmp_path: Path) -> None:
    out = tmp_path / "prog.mid"
    result = _run("generate", "Am, F, G, C/E", "-o", str(out), "--style", "arpUp", "--bpm", "90")
    assert result.exit_code == 0, result.output
    assert out.read_bytes().startswith(b"MThd")

    midi = mido.MidiFile(str(out))
    assert midi.type == 0
    assert sum(1 for msg in midi.tracks[0] if msg.type == "note_on") >= 12


def test_generate_no_midi_skips_file(tmp_path: Path) -> None:
    out = tmp_path / "skip.mid"
    result = _run("generate", "C, Am", "--no-midi", "-o", str(out))
    assert result.exit_code == 0, result.output
    assert not out.exists()
    assert "Writing MIDI" not in result.output


def test_generate_append_extends_progression() -> None:
    result = _run("generate", "C", "--append", "Am", "--append", "F/C", "--no-midi")
    assert result.exit_code == 0, result.output
    assert "Chords = 3" in result.output
    assert "Parsed: C | Am | F/C" in result.output


def test_generate_invalid_chord_exits_with_error() -> None:
    result = _run("generate", "C, Hm", "--no-midi")
    assert result.exit_code == 1
    assert "ERROR" in result.output
    assert "Hm" in result.output


def test_generate_invalid_range_exits_with_error() -> None:
    result = _run("generate", "C", "--low", "C6", "--high", "C2", "--no-midi")
    assert result.exit_code == 1
    assert "Low must be less than High" in result.output


@pytest.mark.integration
def test_generate_writes_pitch_map(tmp_path: Path) -> None:
    pitch_map = tmp_path / "map.txt"
    result = _run(
        "generate", "Dm, Bb, F, C", "--no-midi",
        "--pitch-map", str(pitch_map), "--pitch-map-format", "text",
    )
    assert result.exit_code == 0, result.output
    text = pitch_map.read_text(encoding="utf-8")
    assert text.startswith("Dm, Bb, F, C\nRange: C2 (36) - C6 (84)")
    assert "04. C" in text


def test_triads_lists_major_and_minor() -> None:
    result = _run("triads", "E")
    assert result.exit_code == 0, result.output
    assert "Contains E:" in result.output
    assert "  Major: A  C  E" in result.output
    assert "  Minor: Am  Dbm  Em" in result.output


def test_triads_pick_appends_to_progression() -> None:
    result = _run("triads", "E", "--progression", "Am, F,", "--pick", "C")
    assert result.exit_code == 0, result.output
    assert result.output.rstrip().endswith("Am, F, C")


def test_triads_pick_must_contain_note() -> None:
    result = _run("triads", "E", "--pick", "D")
    assert result.exit_code == 1
    assert "D does not contain E" in result.output


def test_triads_invalid_note() -> None:
    result = _run("triads", "E4")
    assert result.exit_code == 1
    assert "No octave" in result.output


def test_generate_without_progression_uses_default() -> None:
    result = _run("generate", "--no-midi")
    assert result.exit_code == 0, result.output
    assert "Parsed: Am | G | C/E | F" in result.output


@pytest.mark.integration
def test_generate_pitch_map_suffix_follows_format(tmp_path: Path) -> None:
    result = _run("generate", "C, Am", "--no-midi", "--pitch-map", str(tmp_path / "map"))
    assert result.exit_code == 0, result.output
    assert (tmp_path / "map.html").read_text(encoding="utf-8").startswith("<!DOCTYPE html>")

    result = _run(
        "generate", "C, Am", "--no-midi",
        "--pitch-map", str(tmp_path / "map"), "--pitch-map-format", "text",
    )
    assert result.exit_code == 0, result.output
    assert (tmp_path / "map.txt").exists()
