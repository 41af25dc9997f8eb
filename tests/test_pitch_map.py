"""Unit tests for PitchMapExporter and its renderers."""

from pathlib import Path

import pytest

from triadvoice.pipeline import GenerationResult, generate_sequence, safe_generate
from triadvoice.pitch_map import PitchMapExporter


def _sample_result() -> GenerationResult:
    return generate_sequence("Am, F, G, C/E", "C2", "C6", "close")


def test_unsupported_format_raises() -> None:
    with pytest.raises(ValueError, match="Unsupported output format 'png'"):
        PitchMapExporter(output_format="png")


def test_html_has_one_column_per_chord() -> None:
    html = PitchMapExporter(title="Demo").render(_sample_result())
    assert html.startswith("<!DOCTYPE html>")
    assert html.count('<g class="column"') == 4
    assert "<svg" in html


def test_html_has_one_dot_per_pitch() -> None:
    result = _sample_result()
    html = PitchMapExporter().render(result)
    assert html.count('<circle class="dot"') == sum(len(c.pitches) for c in result.chords)


def test_html_hover_label() -> None:
    result = _sample_result()
    html = PitchMapExporter().render(result)
    names = " ".join(result.chords[0].note_names)
    assert f"1/4  Am  {names}" in html
    assert ".column:hover .label" in html


def test_html_escapes_title() -> None:
    html = PitchMapExporter(title="<Am> & F").render(_sample_result())
    assert "<title>&lt;Am&gt; &amp; F</title>" in html
    assert "<h1>&lt;Am&gt; &amp; F</h1>" in html


def test_html_empty_title_no_h1() -> None:
    html = PitchMapExporter().render(_sample_result())
    assert "<h1>" not in html


def test_html_empty_sequence_message() -> None:
    html = PitchMapExporter().render(safe_generate(""))
    assert "Enter a progression" in html
    assert '<g class="column"' not in html


def test_dots_interpolate_between_bounds() -> None:
    exporter = PitchMapExporter(height=560)
    document = exporter._build_document(generate_sequence("C", "C2", "C6", "close"))
    ys = [dot.y for dot in document.columns[0].dots]
    # C3 (48) sits a quarter of the way up from C2 (36) to C6 (84).
    assert ys[0] == pytest.approx(534 - (534 - 34) * 0.25)
    assert ys == sorted(ys, reverse=True)


def test_text_format_lists_sequence() -> None:
    text = PitchMapExporter(title="Demo", output_format="text").render(_sample_result())
    assert text.startswith("Demo\nRange: C2 (36) - C6 (84)")
    assert "01. Am" in text
    assert "04. C/E" in text


@pytest.mark.integration
def test_export_writes_file(tmp_path: Path) -> None:
    out = tmp_path / "map.html"
    PitchMapExporter(title="File").export(_sample_result(), str(out))
    assert "<svg" in out.read_text(encoding="utf-8")
