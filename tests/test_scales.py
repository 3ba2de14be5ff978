import pytest

import scales


def test_year_color_palette_and_fallback():
    assert scales.year_color(2008) == "#3b82f6"
    assert scales.year_color(2025) == "#22d3ee"
    assert scales.year_color(1999) == scales.FALLBACK_COLOR
    assert scales.year_color(2040) == scales.FALLBACK_COLOR


@pytest.mark.parametrize("count,expected", [
    (10, "#ef4444"),
    (8, "#ef4444"),
    (7, "#f97316"),
    (5, "#f97316"),
    (3, "#facc15"),
    (2, scales.FALLBACK_COLOR),
    (1, scales.FALLBACK_COLOR),
])
def test_frequency_bands(count, expected):
    assert scales.frequency_color(count, 10) == expected


def test_airline_color_is_stable_hash():
    hue = sum(ord(c) for c in "Delta") % 360
    assert scales.airline_hue("Delta") == hue
    assert scales.airline_color("Delta") == f"hsl({hue}, 70%, 60%)"
    assert scales.airline_color("") == "hsl(0, 70%, 60%)"


def test_default_gradient_alpha_grows_with_count():
    assert scales.default_gradient(10, 10) == ("rgba(180, 150, 255, 0.9)", "rgba(255, 255, 255, 0.9)")
    assert scales.default_gradient(0, 10) == ("rgba(180, 150, 255, 0.5)", "rgba(255, 255, 255, 0.5)")


def test_stroke_width_bounds_and_sqrt():
    assert scales.stroke_width(0, 4) == pytest.approx(scales.MIN_STROKE)
    assert scales.stroke_width(4, 4) == pytest.approx(scales.MAX_STROKE)
    assert scales.stroke_width(1, 4) == pytest.approx(0.3 + 0.5 * 1.2)


def test_marker_size_is_monotonic_and_bounded():
    sizes = [scales.marker_size(v, 100) for v in (1, 4, 25, 100)]
    assert sizes == sorted(sizes)
    assert sizes[-1] == pytest.approx(scales.MAX_MARKER_SIZE)
    assert all(scales.MIN_MARKER_SIZE <= s <= scales.MAX_MARKER_SIZE for s in sizes)
    assert scales.marker_size(0, 0) == pytest.approx(scales.MIN_MARKER_SIZE)


def test_marker_color_for_busiest_airport():
    assert scales.marker_color(9, 9) == "hsl(30, 100%, 65%)"


def test_animation_has_floor():
    assert scales.animation_ms(100) == 2000
    assert scales.animation_ms(4000) == pytest.approx(12000)


def test_dim_color():
    assert scales.dim_color(("a", "b")) == scales.DIMMED_GRADIENT
    assert scales.dim_color("rgba(1, 2, 3, 0.8)") == "rgba(1, 2, 3, 0.15)"
    assert scales.dim_color("#ef4444") == "#ef4444"
