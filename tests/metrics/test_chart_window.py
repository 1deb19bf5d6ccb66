import datetime as dt

import pytest

from training_load.config.settings import LoadModelConfig
from training_load.metrics.chart_window import format_chart_window
from training_load.metrics.errors import InvalidRangeError
from training_load.models.load import LoadPoint

START = dt.date(2025, 1, 1)


def make_points(tsb_values: list[float]) -> list[LoadPoint]:
    return [
        LoadPoint(date=START + dt.timedelta(days=i), ctl=50.0, atl=50.0 - tsb, tsb=tsb)
        for i, tsb in enumerate(tsb_values)
    ]


def test_trailing_window_is_sliced():
    points = make_points([float(i) for i in range(30)])

    window = format_chart_window(points, 14)

    assert len(window.points) == 14
    assert window.points[0].date == points[16].date
    assert window.points[-1].date == points[-1].date
    assert window.short_window is False


def test_basis_is_largest_absolute_tsb():
    window = format_chart_window(make_points([10.0, -40.0, 25.0]), 3)

    assert window.basis == 40.0
    assert [p.fraction for p in window.points] == [0.25, -1.0, 0.625]


def test_basis_is_floored_for_small_values():
    window = format_chart_window(make_points([1.0, -2.0, 0.5]), 3)

    assert window.basis == 20.0
    assert window.points[1].fraction == pytest.approx(-0.1)


def test_basis_floor_is_configurable():
    window = format_chart_window(make_points([1.0, -2.0]), 2, LoadModelConfig(chart_basis_floor=4.0))

    assert window.basis == 4.0
    assert window.points[1].fraction == -0.5


def test_fractions_are_bounded_and_signed():
    window = format_chart_window(make_points([33.3, -12.0, 0.0, -71.5, 5.0]), 5)

    assert all(-1.0 <= p.fraction <= 1.0 for p in window.points)
    assert [p.fraction > 0 for p in window.points] == [True, False, False, False, True]


def test_short_history_is_signalled_not_padded():
    points = make_points([5.0, -5.0, 8.0])

    window = format_chart_window(points, 14)

    assert window.short_window is True
    assert len(window.points) == 3
    assert window.window_size == 14


def test_empty_series_is_short_window():
    window = format_chart_window([], 14)

    assert window.points == []
    assert window.short_window is True
    assert window.basis == 20.0


@pytest.mark.parametrize("size", [0, -3])
def test_non_positive_window_is_rejected(size):
    with pytest.raises(InvalidRangeError):
        format_chart_window(make_points([1.0]), size)
