"""End-to-end tests for the analysis API."""

import json

import numpy as np
import pytest
import sympy as sp

from critpoint_pkg.api import analyze, resample, validate_function
from critpoint_pkg.solver import DEGENERATE_MESSAGE
from critpoint_pkg.types import AnalysisResult, Kind

x, y = sp.symbols("x y")


def _points(result):
    return [(p.x, p.y, p.kind) for p in result.critical_points]


class TestScenarios:
    """Documented example functions."""

    def test_paraboloid(self):
        result = analyze("x^2 + y^2")
        assert isinstance(result, AnalysisResult)
        assert result.ok is True
        assert result.first_derivatives.dx == 2 * x
        assert result.first_derivatives.dy == 2 * y
        assert _points(result) == [(0, 0, Kind.LOCAL_MIN)]
        hessian = result.critical_points[0].hessian
        assert (hessian.dxx, hessian.dyy, hessian.dxy, hessian.determinant) == (2, 2, 0, 4)
        assert result.degenerate_message is None

    def test_saddle(self):
        result = analyze("x^2 - y^2")
        assert _points(result) == [(0, 0, Kind.SADDLE)]
        assert result.critical_points[0].hessian.determinant == -4

    def test_classic_cubic(self):
        result = analyze("x^3 + y^3-3x-3y")
        assert result.first_derivatives.dx == 3 * x**2 - 3
        assert result.first_derivatives.dy == 3 * y**2 - 3
        kinds = {(p.x, p.y): p.kind for p in result.critical_points}
        assert len(kinds) == 4
        assert kinds[(1, 1)] is Kind.LOCAL_MIN
        assert kinds[(-1, -1)] is Kind.LOCAL_MAX
        assert kinds[(1, -1)] is Kind.SADDLE
        assert kinds[(-1, 1)] is Kind.SADDLE
        # x-solutions outer loop, y-solutions inner loop
        xs = [p.x for p in result.critical_points]
        assert xs[0] == xs[1] and xs[2] == xs[3] and xs[0] != xs[2]

    def test_degenerate_plane(self):
        result = analyze("x + y")
        assert result.ok is True
        assert result.critical_points == []
        assert result.degenerate_message == DEGENERATE_MESSAGE
        assert result.surface is not None
        assert result.surface.missing_count == 0
        assert result.surface.overlay_points == ()
        assert result.surface.z[50, 50] == pytest.approx(10.0)

    def test_degenerate_in_one_variable_only(self):
        result = analyze("x + y^2")
        assert result.first_derivatives.dx == 1
        assert result.critical_points == []
        assert result.degenerate_message == DEGENERATE_MESSAGE

    def test_double_well(self):
        result = analyze("(x^2 - 1)^2 + (y^2 - 1)^2")
        kinds = [p.kind for p in result.critical_points]
        assert len(kinds) == 9
        assert kinds.count(Kind.LOCAL_MIN) == 4
        assert kinds.count(Kind.LOCAL_MAX) == 1
        assert kinds.count(Kind.SADDLE) == 4

    def test_inconclusive(self):
        result = analyze("x^4 + y^4")
        assert _points(result) == [(0, 0, Kind.INCONCLUSIVE)]

    def test_no_real_critical_points(self):
        result = analyze("x^3/3 + x + y^2")
        assert result.ok is True
        assert result.critical_points == []
        assert result.degenerate_message is None
        assert result.surface is not None

    def test_coupled_system_kept_symbolic(self):
        result = analyze("x^2 + x*y + y^2")
        (point,) = result.critical_points
        assert point.x == -y / 2
        assert point.kind is Kind.LOCAL_MIN
        assert result.surface.overlay_points == ()

    def test_three_real_roots_of_a_cubic_partial(self):
        result = analyze("x^4/4 - 3x^2/2 + x + y^2")
        assert result.ok is True
        kinds = sorted(p.kind.value for p in result.critical_points)
        assert kinds == ["Local Minimum", "Local Minimum", "Saddle Point"]
        overlay = sorted(result.surface.overlay_points, key=lambda p: p.x)
        assert [p.x for p in overlay] == pytest.approx([-1.8793852, 0.3472964, 1.5320889])
        assert [p.kind for p in overlay] == [Kind.LOCAL_MIN, Kind.SADDLE, Kind.LOCAL_MIN]

    def test_unsolvable_quintic_partial(self):
        result = analyze("x^6 - 3x^2 + 6x + y^2")
        assert result.ok is True
        assert result.error is None
        (point,) = result.critical_points
        assert point.kind is Kind.LOCAL_MIN
        (overlay,) = result.surface.overlay_points
        assert overlay.x == pytest.approx(-1.1673040)
        assert overlay.y == 0.0
        x0 = -1.1673040
        assert overlay.z == pytest.approx(x0**6 - 3 * x0**2 + 6 * x0, rel=1e-5)

    def test_scientific_notation_coefficient(self):
        result = analyze("1e-3*x^2 + y^2")
        assert result.ok is True
        (point,) = result.critical_points
        assert point.kind is Kind.LOCAL_MIN


class TestSurface:
    def test_grid_and_overlay(self):
        result = analyze("x^3 + y^3-3x-3y", plot_range=5)
        surface = result.surface
        assert surface.shape == (51, 51)
        assert surface.xs[0] == -5 and surface.xs[-1] == 5
        assert len(surface.overlay_points) == 4
        kinds = {(p.x, p.y): p.kind for p in surface.overlay_points}
        assert kinds[(1.0, 1.0)] is Kind.LOCAL_MIN
        minimum = next(p for p in surface.overlay_points if p.kind is Kind.LOCAL_MIN)
        assert minimum.z == pytest.approx(-4.0)

    def test_overlay_respects_range(self):
        result = analyze("(x-3)^2 + (y+3)^2", plot_range=2)
        assert len(result.critical_points) == 1
        assert result.surface.overlay_points == ()
        wider = resample(result, 4)
        assert len(wider.surface.overlay_points) == 1

    def test_holes_do_not_fail_analysis(self):
        result = analyze("log(x) + y")
        assert result.ok is True
        assert result.degenerate_message == DEGENERATE_MESSAGE
        assert 0 < result.surface.missing_count < 51 * 51


class TestRangeChange:
    def test_resample_keeps_derivatives_and_points(self):
        first = analyze("x^3 + y^3-3x-3y", plot_range=5)
        second = resample(first, 10)
        assert second.first_derivatives is first.first_derivatives
        assert second.second_derivatives is first.second_derivatives
        assert second.critical_points == first.critical_points
        assert second.plot_range == 10
        assert second.surface.xs[-1] == 10
        assert first.surface.xs[-1] == 5

    def test_resample_requires_derivatives(self):
        failed = analyze("x^2 +* y")
        with pytest.raises(ValueError):
            resample(failed, 10)

    def test_resample_with_bad_range_keeps_points(self):
        first = analyze("x^2 + y^2")
        broken = resample(first, 0)
        assert broken.ok is False
        assert broken.surface is None
        assert broken.critical_points == first.critical_points
        repaired = resample(broken, 3)
        assert repaired.ok is True
        assert repaired.surface is not None


class TestDeterminism:
    def test_identical_runs(self):
        first = analyze("(x^2 - 1)^2 + (y^2 - 1)^2", plot_range=3)
        second = analyze("(x^2 - 1)^2 + (y^2 - 1)^2", plot_range=3)
        assert _points(first) == _points(second)
        np.testing.assert_array_equal(first.surface.z, second.surface.z)
        assert first.to_dict() == second.to_dict()


class TestSerialization:
    def test_to_dict_is_json_ready(self):
        data = analyze("x^2 - y^2").to_dict()
        encoded = json.loads(json.dumps(data))
        assert encoded["ok"] is True
        assert encoded["first_derivatives"] == {"dfdx": "2*x", "dfdy": "-2*y"}
        assert encoded["second_derivatives"]["d2fdxdy"] == "0"
        assert encoded["critical_points"] == [{"x": "0", "y": "0", "type": "Saddle Point"}]
        assert len(encoded["surface"]["z"]) == 51

    def test_repr(self):
        assert "AnalysisResult" in repr(analyze("x^2 + y^2"))
        assert "error" in repr(analyze(""))


class TestValidateFunction:
    def test_valid(self):
        assert validate_function("x^2 + y^2") == (True, None)

    def test_invalid(self):
        is_valid, error = validate_function("import os")
        assert is_valid is False
        assert "forbidden" in error.lower()
