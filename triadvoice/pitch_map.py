"""PitchMapExporter: draws a generated chord sequence as a pitch map."""

from __future__ import annotations

from typing import Final

import numpy as np

from triadvoice.pipeline import GenerationResult, format_sequence_lines
from triadvoice.pitch import MIDI_MAX, MIDI_MIN, midi_to_note
from triadvoice.pitch_map_models import PitchDot, PitchMapColumn, PitchMapDocument
from triadvoice.pitch_map_renderers import (
    HtmlPitchMapRenderer,
    PitchMapRenderer,
    TextPitchMapRenderer,
)

SUPPORTED_FORMATS: Final[set[str]] = {"html", "text"}


class PitchMapExporter:
    """
    Convert a GenerationResult into a pitch map via a pluggable renderer.

    Layout: one column per chord, one dot per voiced pitch. Dots are placed by
    linear interpolation between the register bounds, low at the bottom,
    and kept inside the column's drawable area.

    Supported formats:
    - ``html``: self-contained HTML page with an inline SVG and hover labels.
    - ``text``: one line per chord with note names and MIDI numbers.
    """

    DEFAULT_WIDTH = 720
    DEFAULT_HEIGHT = 560

    _PAD_TOP: Final[int] = 34
    _PAD_BOTTOM: Final[int] = 26
    _DOT_MARGIN_TOP: Final[int] = 12
    _DOT_MARGIN_BOTTOM: Final[int] = 14

    def __init__(
        self,
        title: str = "",
        output_format: str = "html",
        width: int = DEFAULT_WIDTH,
        height: int = DEFAULT_HEIGHT,
    ) -> None:
        self.title = title
        normalized = output_format.strip().lower()
        if normalized not in SUPPORTED_FORMATS:
            supported = ", ".join(sorted(SUPPORTED_FORMATS))
            raise ValueError(f"Unsupported output format '{output_format}'. Use one of: {supported}.")
        self.output_format = normalized
        self.width = width
        self.height = height
        self.renderer = self._build_renderer(normalized)

    # ------------------------------------------------------------------
    # Private helpers
    # ------------------------------------------------------------------

    def _build_renderer(self, output_format: str) -> PitchMapRenderer:
        if output_format == "html":
            return HtmlPitchMapRenderer()
        return TextPitchMapRenderer()

    def _y_positions(self, pitches: list[int], low: int, high: int) -> np.ndarray:
        """Map pitches linearly from [low, high] to [bottom, top] of the drawable area."""
        bottom = self.height - self._PAD_BOTTOM
        # np.interp holds pitches outside the register at the nearest edge.
        y = np.interp(pitches, [low, max(high, low + 1)], [bottom, self._PAD_TOP])
        return np.clip(y, self._DOT_MARGIN_TOP, self.height - self._DOT_MARGIN_BOTTOM)

    def _build_document(self, result: GenerationResult) -> PitchMapDocument:
        low, high = (
            (result.bounds.low, result.bounds.high) if result.bounds else (MIDI_MIN, MIDI_MAX)
        )
        count = len(result.chords)
        column_width = self.width / max(1, count)
        lines = format_sequence_lines(result)

        columns: list[PitchMapColumn] = []
        for i, chord in enumerate(result.chords):
            ys = self._y_positions(list(chord.pitches), low, high)
            dots = [
                PitchDot(pitch=p, note_name=midi_to_note(p), y=float(y))
                for p, y in zip(chord.pitches, ys)
            ]
            columns.append(
                PitchMapColumn(
                    index=i + 1,
                    symbol=chord.spec.symbol,
                    x=i * column_width,
                    width=column_width,
                    dots=dots,
                    label=f"{i + 1}/{count}  {chord.spec.symbol}  {' '.join(chord.note_names)}",
                    sequence_line=lines[i],
                )
            )

        return PitchMapDocument(
            title=self.title,
            low=low,
            high=high,
            width=self.width,
            height=self.height,
            columns=columns,
        )

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------

    def render(self, result: GenerationResult) -> str:
        """Render *result* in the selected format."""
        return self.renderer.render(self._build_document(result))

    def export(self, result: GenerationResult, output_path: str) -> None:
        """
        Render *result* and write it to disk.

        Raises:
            OSError: If the output file cannot be written.
        """
        content = self.render(result)
        with open(output_path, "w", encoding="utf-8") as fh:
            fh.write(content)
