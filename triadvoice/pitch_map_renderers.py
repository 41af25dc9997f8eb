"""Renderer implementations for pitch-map output formats."""

from __future__ import annotations

from abc import ABC, abstractmethod

from triadvoice.pitch import midi_to_note
from triadvoice.pitch_map_models import PitchMapColumn, PitchMapDocument

EMPTY_MESSAGE = "Enter a progression and generate it."


def _escape_html(text: str) -> str:
    """Escape the characters that are unsafe in HTML text and attribute content."""
    return (
        text.replace("&", "&amp;")
        .replace("<", "&lt;")
        .replace(">", "&gt;")
        .replace('"', "&quot;")
    )


class PitchMapRenderer(ABC):
    """Abstract pitch-map renderer."""

    @property
    @abstractmethod
    def default_extension(self) -> str:
        """Default filename extension for this renderer."""

    @abstractmethod
    def render(self, document: PitchMapDocument) -> str:
        """Render output into a file content string."""


class HtmlPitchMapRenderer(PitchMapRenderer):
    """Render a pitch map as a self-contained HTML page with inline SVG.

    Hovering a column highlights it and reveals its label
    (``"index/count  symbol  note names"``); the same text is also the SVG
    ``<title>`` so browsers show it as a tooltip.
    """

    _DOT_RADIUS: float = 2.5
    _LABEL_X: int = 10
    _LABEL_Y: int = 22

    @property
    def default_extension(self) -> str:
        return ".html"

    def render(self, document: PitchMapDocument) -> str:
        svg = self.render_svg(document)
        return self.build_html(document.title, svg)

    def _render_column(self, column: PitchMapColumn, height: int) -> str:
        label_safe = _escape_html(column.label)
        centre = column.x + column.width / 2
        dots = "".join(
            f'<circle class="dot" cx="{centre:.1f}" cy="{dot.y:.1f}" r="{self._DOT_RADIUS}">'
            f"<title>{_escape_html(dot.note_name)} ({dot.pitch})</title></circle>"
            for dot in column.dots
        )
        return (
            f'    <g class="column" data-index="{column.index}">\n'
            f"      <title>{label_safe}</title>\n"
            f'      <rect class="band" x="{column.x:.1f}" y="0" '
            f'width="{column.width:.1f}" height="{height}" />\n'
            f"      {dots}\n"
            f'      <text class="step" x="{centre:.1f}" y="{height - 6}">{column.index}</text>\n'
            f'      <text class="label" x="{self._LABEL_X}" y="{self._LABEL_Y}">{label_safe}</text>\n'
            f"    </g>"
        )

    def render_svg(self, document: PitchMapDocument) -> str:
        """Render the document's columns as a single SVG element."""
        width, height = document.width, document.height
        if document.columns:
            body = "\n".join(self._render_column(col, height) for col in document.columns)
        else:
            body = f'    <text class="empty" x="{self._LABEL_X}" y="{self._LABEL_Y}">{EMPTY_MESSAGE}</text>'

        return (
            f'<svg xmlns="http://www.w3.org/2000/svg" viewBox="0 0 {width} {height}" '
            f'width="{width}" height="{height}" role="img">\n'
            f'    <rect class="frame" x="0.5" y="0.5" width="{width - 1}" height="{height - 1}" rx="10" />\n'
            f"{body}\n"
            f"</svg>"
        )

    def build_html(self, title: str, svg: str) -> str:
        """Wrap an SVG pitch map in a self-contained HTML document."""
        title_safe = _escape_html(title)
        heading = f"  <h1>{title_safe}</h1>\n" if title else ""

        return f"""<!DOCTYPE html>
<html lang="en">
<head>
  <meta charset="UTF-8" />
  <meta name="viewport" content="width=device-width, initial-scale=1.0" />
  <title>{title_safe}</title>
  <style>
    body {{
      font-family: ui-monospace, SFMono-Regular, Menlo, Monaco, Consolas, monospace;
      background: #0c0d14;
      color: #e8e8ee;
      margin: 0;
      padding: 2rem;
    }}
    h1 {{
      font-size: 1.1rem;
      font-weight: normal;
      opacity: 0.8;
    }}
    svg {{
      display: block;
      max-width: 100%;
      height: auto;
      font-size: 12px;
    }}
    .frame {{ fill: none; stroke: rgba(255, 255, 255, 0.1); }}
    .band {{ fill: #fff; fill-opacity: 0.025; }}
    .dot {{ fill: #fff; fill-opacity: 0.5; }}
    .step {{ fill: #fff; fill-opacity: 0.22; text-anchor: middle; }}
    .label {{ fill: #fff; fill-opacity: 0.8; visibility: hidden; }}
    .empty {{ fill: #fff; fill-opacity: 0.22; }}
    .column:hover .band {{ fill-opacity: 0.07; }}
    .column:hover .dot {{ fill-opacity: 0.82; }}
    .column:hover .step {{ fill-opacity: 0.47; }}
    .column:hover .label {{ visibility: visible; }}
  </style>
</head>
<body>
{heading}  {svg}
</body>
</html>"""


class TextPitchMapRenderer(PitchMapRenderer):
    """Render the sequence as plain text, one line per chord."""

    @property
    def default_extension(self) -> str:
        return ".txt"

    def render(self, document: PitchMapDocument) -> str:
        header = (
            f"{document.title}\n"
            f"Range: {midi_to_note(document.low)} ({document.low}) - "
            f"{midi_to_note(document.high)} ({document.high})\n\n"
        )
        if not document.columns:
            return header + "(not generated yet)\n"
        return header + "\n".join(col.sequence_line for col in document.columns) + "\n"
