"""
Unit tests for overload_detector.py and utilization_history.py
"""

import pytest

from dcsimpy.core.errors import InsufficientHistoryError
from dcsimpy.power.overload_detector import (
    InterQuartileRangeDetector, ThresholdReason, interquartile_range, quartiles,
)
from dcsimpy.power.utilization_history import (
    UtilizationHistory, count_non_zero_beginning, trim_zero_head,
)

TWELVE = [10, 20, 30, 40, 50, 60, 70, 80, 90, 100, 110, 120]


@pytest.fixture
def detector():
    return InterQuartileRangeDetector()


def test_quartiles_of_twelve_samples():
    assert quartiles(TWELVE) == pytest.approx((32.5, 97.5))
    assert interquartile_range(TWELVE) == pytest.approx(65.0)


def test_iqr_measure(detector):
    result = detector.compute_threshold_measure(TWELVE)
    assert result.ok
    assert result.measure == pytest.approx(65.0)
    assert result.unwrap() == pytest.approx(65.0)
    assert (result.available, result.required) == (12, 12)


def test_outlier_does_not_move_iqr(detector):
    history = TWELVE[:-1] + [10000]
    assert detector.compute_threshold_measure(history).measure == pytest.approx(65.0)


def test_constant_history_gives_zero(detector):
    assert detector.compute_threshold_measure([0.5] * 12).measure == 0.0


@pytest.mark.parametrize("length", [0, 1, 11])
def test_short_history_fails(detector, length):
    result = detector.compute_threshold_measure([0.5] * length)
    assert not result.ok
    assert result.reason == ThresholdReason.INSUFFICIENT_HISTORY
    assert result.available == length
    assert result.required == 12


def test_idle_zeros_before_first_sample_do_not_count(detector):
    history = [0.0] * 5 + [0.5] * 11
    result = detector.compute_threshold_measure(history)
    assert result.reason == ThresholdReason.INSUFFICIENT_HISTORY
    assert result.available == 11
    with pytest.raises(InsufficientHistoryError):
        result.unwrap()


def test_recent_and_inner_zeros_count(detector):
    history = [0.0] * 5 + [0.5, 0.0] * 6 + [0.0] * 4
    result = detector.compute_threshold_measure(history)
    assert result.ok
    assert result.available == 16
    assert result.required == 12


def test_idle_zeros_do_not_shrink_iqr(detector):
    history = [0.0] * 8 + TWELVE
    result = detector.compute_threshold_measure(history)
    assert result.measure == pytest.approx(65.0)
    assert result.available == 12


def test_custom_min_samples():
    assert InterQuartileRangeDetector(min_samples=3).compute_threshold_measure([0.1, 0.2, 0.3]).ok
    with pytest.raises(ValueError):
        InterQuartileRangeDetector(min_samples=0)


def test_count_non_zero_beginning():
    assert count_non_zero_beginning([0.0, 0.0, 0.3, 0.0, 0.5]) == 3
    assert count_non_zero_beginning([0.3, 0.0, 0.0]) == 3
    assert count_non_zero_beginning([0.0, 0.0]) == 0
    assert count_non_zero_beginning([]) == 0
    assert trim_zero_head([0.0, 0.3, 0.0, 0.5]) == (0.3, 0.0, 0.5)
    assert trim_zero_head([0.0, 0.0]) == ()


class TestUtilizationHistory:

    def test_bounded_to_max_length(self):
        history = UtilizationHistory(max_length=3)
        for t, u in enumerate([0.1, 0.2, 0.3, 0.4]):
            history.append(float(t), u)

        assert history.snapshot() == (0.2, 0.3, 0.4)
        assert history.timestamps() == (1.0, 2.0, 3.0)
        assert history.latest() == 0.4
        assert len(history) == 3

    def test_rejects_older_sample(self):
        history = UtilizationHistory()
        history.append(5.0, 0.1)
        with pytest.raises(ValueError):
            history.append(4.0, 0.2)

    def test_rejects_negative_utilization(self):
        with pytest.raises(ValueError):
            UtilizationHistory().append(0.0, -0.1)

    def test_empty(self):
        history = UtilizationHistory()
        assert history.latest() is None
        assert history.snapshot() == ()
        assert history.max_length == 30
