"""triadvoice CLI entry point."""

import logging
import sys
from pathlib import Path

import click

from triadvoice import __version__
from triadvoice.chord_parser import parse_pitch_class
from triadvoice.errors import ExportError, TriadVoiceError
from triadvoice.midi_exporter import DEFAULT_FILENAME, MIDI_STYLES, MidiExporter
from triadvoice.pipeline import (
    DEFAULT_BASS_WEIGHT,
    DEFAULT_HIGH,
    DEFAULT_LOW,
    DEFAULT_MODE,
    DEFAULT_PROGRESSION,
    MAX_BASS_WEIGHT,
    MIN_BASS_WEIGHT,
    append_chord_to_progression,
    format_sequence_lines,
    format_status,
    safe_generate,
)
from triadvoice.pitch import pitch_class_name
from triadvoice.pitch_map import SUPPORTED_FORMATS, PitchMapExporter
from triadvoice.triads import triads_containing_pitch_class
from triadvoice.voicing_strategy import VOICING_MODES


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )


# ── CLI group ──────────────────────────────────────────────────────────────────

@click.group(context_settings={"help_option_names": ["-h", "--help"]})
@click.version_option(version=__version__, prog_name="triadvoice")
def main() -> None:
    """triadvoice — triad progressions to voicings and MIDI."""


# ── generate subcommand ────────────────────────────────────────────────────────

@main.command()
@click.argument("progression", default=DEFAULT_PROGRESSION)
@click.option(
    "--mode",
    type=click.Choice(VOICING_MODES, case_sensitive=False),
    default=DEFAULT_MODE,
    show_default=True,
    help="Voicing strategy: close triads, open spacing, or voice-led inversions.",
)
@click.option("--low", default=DEFAULT_LOW, show_default=True, metavar="NOTE",
              help="Lowest allowed pitch, note name (C2) or MIDI number (36).")
@click.option("--high", default=DEFAULT_HIGH, show_default=True, metavar="NOTE",
              help="Highest allowed pitch, note name (C6) or MIDI number (84).")
@click.option(
    "--bass-weight",
    type=click.FloatRange(MIN_BASS_WEIGHT, MAX_BASS_WEIGHT, clamp=True),
    default=DEFAULT_BASS_WEIGHT,
    show_default=True,
    help="Bass line smoothness weight (0–3). Higher keeps the bass moving less.",
)
@click.option(
    "--append",
    "appended",
    multiple=True,
    metavar="SYMBOL",
    help="Append a chord symbol to the progression (repeatable).",
)
@click.option(
    "--output",
    "-o",
    default=DEFAULT_FILENAME,
    show_default=True,
    metavar="PATH",
    help="Destination MIDI file path.",
)
@click.option("--no-midi", is_flag=True, help="Only print the voicings; do not write a MIDI file.")
@click.option(
    "--style",
    type=click.Choice(MIDI_STYLES),
    default=MIDI_STYLES[0],
    show_default=True,
    help="MIDI note style: block chords or ascending arpeggios.",
)
@click.option("--bpm", type=click.FloatRange(1, 999), default=MidiExporter.DEFAULT_BPM,
              show_default=True, help="Playback tempo in BPM.")
@click.option("--duration", type=click.FloatRange(0.05, 64), default=MidiExporter.DEFAULT_CHORD_BEATS,
              show_default=True, metavar="BEATS", help="Block chord length in beats.")
@click.option("--arp-step", type=float, default=MidiExporter.DEFAULT_ARP_STEP_BEATS,
              show_default=True, metavar="BEATS", help="Arpeggio step length in beats (arpUp).")
@click.option("--rest", type=float, default=MidiExporter.DEFAULT_REST_BEATS,
              show_default=True, metavar="BEATS", help="Rest after each arpeggio in beats (arpUp).")
@click.option(
    "--pitch-map",
    "pitch_map_path",
    default=None,
    metavar="PATH",
    help="Also write a pitch map of the sequence to PATH (suffix added from the format if missing).",
)
@click.option(
    "--pitch-map-format",
    type=click.Choice(sorted(SUPPORTED_FORMATS), case_sensitive=False),
    default="html",
    show_default=True,
    help="Pitch map format: HTML page with inline SVG, or plain text.",
)
@click.option("--verbose", "-v", is_flag=True, help="Log voicing decisions to stderr.")
def generate(
    progression: str,
    mode: str,
    low: str,
    high: str,
    bass_weight: float,
    appended: tuple[str, ...],
    output: str,
    no_midi: bool,
    style: str,
    bpm: float,
    duration: float,
    arp_step: float,
    rest: float,
    pitch_map_path: str | None,
    pitch_map_format: str,
    verbose: bool,
) -> None:
    """
    Voice a chord progression and export it as MIDI.

    PROGRESSION is a list of major/minor triads separated by commas or
    spaces, with optional slash basses (wrap it in quotes). Defaults to
    "Am, G, C/E, F".

    \b
    Examples:
      triadvoice generate "Am, F, G, C/E"
      triadvoice generate "Dm Bb F C Dm/A" --mode open --low C2 --high C6
      triadvoice generate "C, Am, F, G" --style arpUp --bpm 90 -o arps.mid
    """
    _configure_logging(verbose)

    for symbol in appended:
        progression = append_chord_to_progression(progression, symbol)

    click.echo(f"triadvoice v{__version__}")
    click.echo()

    # ── Step 1: Voice ───────────────────────────────────────────────────
    result = safe_generate(progression, low, high, mode.lower(), bass_weight)
    if not result.ok:
        click.echo(f"  ERROR: {result.error}", err=True)
        sys.exit(1)

    click.echo(format_status(result))
    for line in format_sequence_lines(result):
        click.echo(f"  {line}")
    click.echo()

    # ── Step 2: Export MIDI ─────────────────────────────────────────────
    if not no_midi:
        click.echo(f"Writing MIDI file → '{output}'...")
        exporter = MidiExporter(
            bpm=bpm,
            style=style,
            chord_duration_beats=duration,
            arp_step_beats=arp_step,
            rest_beats=rest,
        )
        try:
            exporter.export(result.note_sets, output)
        except ExportError as exc:
            click.echo(f"  {exc}", err=True)
            sys.exit(1)
        except OSError as exc:
            click.echo(f"  ERROR: Could not write MIDI file — {exc}", err=True)
            sys.exit(1)

    # ── Step 3: Pitch map ───────────────────────────────────────────────
    if pitch_map_path is not None:
        pitch_map = PitchMapExporter(title=progression, output_format=pitch_map_format)
        map_path = Path(pitch_map_path)
        if not map_path.suffix:
            map_path = map_path.with_suffix(pitch_map.renderer.default_extension)
        pitch_map_path = str(map_path)
        click.echo(f"Writing pitch map → '{pitch_map_path}'...")
        try:
            pitch_map.export(result, pitch_map_path)
        except OSError as exc:
            click.echo(f"  ERROR: Could not write pitch map — {exc}", err=True)
            sys.exit(1)

    click.echo()
    click.echo("Done!")


# ── triads subcommand ──────────────────────────────────────────────────────────

@main.command()
@click.argument("note")
@click.option("--progression", default=None, metavar="TEXT",
              help="Progression to append a picked triad to.")
@click.option("--pick", default=None, metavar="SYMBOL",
              help="Triad to append to --progression (must contain NOTE).")
def triads(note: str, progression: str | None, pick: str | None) -> None:
    """
    List the major and minor triads that contain a pitch class.

    NOTE is a pitch class without octave, e.g. G, Eb or F#.

    \b
    Examples:
      triadvoice triads E
      triadvoice triads Eb --progression "Cm, Ab" --pick Bb
    """
    try:
        pc = parse_pitch_class(note)
    except TriadVoiceError as exc:
        click.echo(f"  ERROR: {exc}", err=True)
        sys.exit(1)
    if pc is None:
        click.echo("  ERROR: Enter a note.", err=True)
        sys.exit(1)

    lookup = triads_containing_pitch_class(pc)
    click.echo(f"Contains {pitch_class_name(pc)}:")
    click.echo(f"  Major: {'  '.join(lookup.major)}")
    click.echo(f"  Minor: {'  '.join(lookup.minor)}")

    if pick is None:
        return
    if pick not in lookup.major + lookup.minor:
        click.echo(f"  ERROR: {pick} does not contain {pitch_class_name(pc)}.", err=True)
        sys.exit(1)
    click.echo()
    click.echo(append_chord_to_progression(progression or "", pick))
