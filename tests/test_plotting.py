"""Tests for rendering sampled surfaces."""

import os

import pytest

from critpoint_pkg.api import analyze
from critpoint_pkg.plotting import KIND_COLORS, render_surface
from critpoint_pkg.types import Kind, PlotGenerationError


class TestRenderSurface:
    def test_saves_png(self, tmp_path):
        result = analyze("x^3 + y^3-3x-3y")
        target = tmp_path / "cubic.png"
        path = render_surface(result.surface, title=result.function, output_path=str(target))
        assert path == str(target)
        with open(path, "rb") as handle:
            assert handle.read(8) == b"\x89PNG\r\n\x1a\n"

    def test_temporary_file_when_no_path(self):
        result = analyze("x^2 + y^2")
        path = render_surface(result.surface)
        try:
            assert path.endswith(".png")
            assert os.path.getsize(path) > 0
        finally:
            os.remove(path)

    def test_surface_with_holes(self, tmp_path):
        result = analyze("log(x) + y")
        path = render_surface(result.surface, output_path=str(tmp_path / "holes.png"))
        assert os.path.exists(path)

    def test_unwritable_path(self, tmp_path):
        result = analyze("x^2 + y^2")
        with pytest.raises(PlotGenerationError):
            render_surface(
                result.surface, output_path=str(tmp_path / "missing" / "plot.png")
            )

    def test_every_kind_has_a_color(self):
        assert set(KIND_COLORS) == set(Kind)
