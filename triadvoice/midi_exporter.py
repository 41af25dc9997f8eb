"""MidiExporter: Converts voiced chord note sets into a single-track MIDI file."""

import io
import math
from collections.abc import Sequence

import mido

from triadvoice.errors import ExportError
from triadvoice.pitch import MIDI_MAX, MIDI_MIN, clamp, round_half_up

DEFAULT_FILENAME = "triad-progression.mid"
MIME_TYPE = "audio/midi"

STYLE_BLOCK = "block"
STYLE_ARP_UP = "arpUp"
MIDI_STYLES: list[str] = [STYLE_BLOCK, STYLE_ARP_UP]

MICROSECONDS_PER_MINUTE = 60_000_000


class MidiExporter:
    """
    Writes a Standard MIDI File (format 0, one track) from chord note sets.

    Track layout
    ------------
    1. Tempo meta event derived from ``bpm``.
    2. 4/4 time signature.
    3. Program change on ``channel``.
    4. Note events, one chord after another.
    5. End of track.

    Note styles
    -----------
    ``block``
        Every note of a chord starts together, is held for
        ``chord_duration_beats`` and released together.

    ``arpUp``
        Notes play one at a time from the bottom up. Each step lasts
        ``arp_step_beats``; the note sounds for ``gate`` of the step and the
        remainder is silence. ``rest_beats`` of silence follow each chord.

    Velocity
    --------
    ``velocity / sqrt(note count)``, clamped to ``[min_velocity, 127]``, so
    thicker chords are not louder overall. Single notes are capped at
    ``single_note_cap``.
    """

    DEFAULT_TICKS_PER_BEAT = 480
    DEFAULT_BPM = 60
    DEFAULT_CHORD_BEATS = 2.0
    DEFAULT_ARP_STEP_BEATS = 0.25
    DEFAULT_GATE = 0.85
    DEFAULT_REST_BEATS = 0.5
    DEFAULT_VELOCITY = 75
    DEFAULT_MIN_VELOCITY = 30
    DEFAULT_SINGLE_NOTE_CAP = 52

    def __init__(
        self,
        bpm: float = DEFAULT_BPM,
        style: str = STYLE_BLOCK,
        chord_duration_beats: float = DEFAULT_CHORD_BEATS,
        arp_step_beats: float = DEFAULT_ARP_STEP_BEATS,
        rest_beats: float = DEFAULT_REST_BEATS,
        gate: float = DEFAULT_GATE,
        velocity: int = DEFAULT_VELOCITY,
        min_velocity: int = DEFAULT_MIN_VELOCITY,
        single_note_cap: int = DEFAULT_SINGLE_NOTE_CAP,
        channel: int = 0,
        program: int = 0,
        ticks_per_beat: int = DEFAULT_TICKS_PER_BEAT,
    ) -> None:
        """
        Args:
            bpm:                  Playback tempo in beats per minute.
            style:                "block" or "arpUp".
            chord_duration_beats: Block chord length in beats.
            arp_step_beats:       Arpeggio step length in beats (0.05-8).
            rest_beats:           Silence after each arpeggiated chord (0-32).
            gate:                 Sounding fraction of an arpeggio step (0.05-0.98).
            velocity:             Base note-on velocity before scaling.
            min_velocity:         Floor for scaled velocities.
            single_note_cap:      Ceiling for one-note chords.
            channel:              MIDI channel (0-15).
            program:              General MIDI program number (0-127).
            ticks_per_beat:       File division, ticks per quarter note.

        Raises:
            ValueError: If *style* or *bpm* is invalid.
        """
        if style not in MIDI_STYLES:
            raise ValueError(f"Unsupported MIDI style '{style}'. Use one of: {', '.join(MIDI_STYLES)}.")
        if bpm <= 0:
            raise ValueError("Tempo must be a positive number of beats per minute.")

        self.bpm = bpm
        self.style = style
        self.chord_duration_beats = chord_duration_beats
        self.arp_step_beats = min(8.0, max(0.05, arp_step_beats))
        self.rest_beats = min(32.0, max(0.0, rest_beats))
        self.gate = min(0.98, max(0.05, gate))
        self.velocity = clamp(velocity, 1, MIDI_MAX)
        self.min_velocity = clamp(min_velocity, 1, MIDI_MAX)
        self.single_note_cap = clamp(single_note_cap, 1, MIDI_MAX)
        self.channel = clamp(channel, 0, 15)
        self.program = clamp(program, 0, MIDI_MAX)
        self.ticks_per_beat = ticks_per_beat

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _beats_to_ticks(self, beats: float) -> int:
        """Convert beats to ticks, never less than one tick."""
        return max(1, round_half_up(self.ticks_per_beat * beats))

    def _tempo(self) -> int:
        """Microseconds per quarter note for the current BPM."""
        return round_half_up(MICROSECONDS_PER_MINUTE / self.bpm)

    def _chord_velocity(self, note_count: int) -> int:
        scaled = round_half_up(self.velocity / math.sqrt(max(1, note_count)))
        velocity = clamp(scaled, self.min_velocity, MIDI_MAX)
        if note_count == 1:
            velocity = min(velocity, self.single_note_cap)
        return velocity

    def _prepare_notes(self, chord: Sequence[int]) -> list[int]:
        return sorted({clamp(n, MIDI_MIN, MIDI_MAX) for n in chord})

    def _note_on(self, note: int, velocity: int, time: int) -> mido.Message:
        return mido.Message("note_on", channel=self.channel, note=note, velocity=velocity, time=time)

    def _note_off(self, note: int, time: int) -> mido.Message:
        return mido.Message("note_off", channel=self.channel, note=note, velocity=0, time=time)

    def _add_block_chords(self, track: mido.MidiTrack, chords: Sequence[Sequence[int]]) -> int:
        chord_ticks = self._beats_to_ticks(self.chord_duration_beats)
        for chord in chords:
            notes = self._prepare_notes(chord)
            if not notes:
                continue
            velocity = self._chord_velocity(len(notes))
            for note in notes:
                track.append(self._note_on(note, velocity, 0))
            for i, note in enumerate(notes):
                track.append(self._note_off(note, chord_ticks if i == 0 else 0))
        return 0

    def _add_arpeggios(self, track: mido.MidiTrack, chords: Sequence[Sequence[int]]) -> int:
        step_ticks = self._beats_to_ticks(self.arp_step_beats)
        note_ticks = max(1, round_half_up(step_ticks * self.gate))
        gap_ticks = max(0, step_ticks - note_ticks)
        rest_ticks = self._beats_to_ticks(self.rest_beats)

        carry = 0
        for chord in chords:
            notes = self._prepare_notes(chord)
            if not notes:
                continue
            velocity = self._chord_velocity(len(notes))
            for i, note in enumerate(notes):
                track.append(self._note_on(note, velocity, carry if i == 0 else gap_ticks))
                track.append(self._note_off(note, note_ticks))
            carry = rest_ticks
        return carry

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def build(self, chords: Sequence[Sequence[int]]) -> mido.MidiFile:
        """
        Build the in-memory MIDI file for a sequence of chord note sets.

        Raises:
            ExportError: If *chords* is empty.
        """
        if not chords:
            raise ExportError("Generate a sequence first.")

        midi = mido.MidiFile(type=0, ticks_per_beat=self.ticks_per_beat)
        track = mido.MidiTrack()
        midi.tracks.append(track)

        track.append(mido.MetaMessage("set_tempo", tempo=self._tempo(), time=0))
        track.append(
            mido.MetaMessage(
                "time_signature",
                numerator=4,
                denominator=4,
                clocks_per_click=24,
                notated_32nd_notes_per_beat=8,
                time=0,
            )
        )
        track.append(
            mido.Message("program_change", channel=self.channel, program=self.program, time=0)
        )

        if self.style == STYLE_ARP_UP:
            tail = self._add_arpeggios(track, chords)
        else:
            tail = self._add_block_chords(track, chords)

        track.append(mido.MetaMessage("end_of_track", time=tail))
        return midi

    def to_bytes(self, chords: Sequence[Sequence[int]]) -> bytes:
        """Render the MIDI file for *chords* to bytes."""
        buffer = io.BytesIO()
        self.build(chords).save(file=buffer)
        return buffer.getvalue()

    def export(self, chords: Sequence[Sequence[int]], output_path: str) -> None:
        """
        Render chords to a Standard MIDI File on disk.

        Args:
            chords:      Ordered chord note sets (e.g. ``GenerationResult.note_sets``).
            output_path: Destination file path (e.g. "triad-progression.mid").

        Raises:
            ExportError: If *chords* is empty.
            OSError: If the output file cannot be opened for writing.
        """
        midi = self.build(chords)
        with open(output_path, "wb") as f:
            midi.save(file=f)
