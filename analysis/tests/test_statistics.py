"""
Tests for time-series statistics.
Hand-verifiable inputs; population standard deviation throughout.
"""

import pytest

from analysis.calculations.statistics import (
    exponential_moving_average,
    mean,
    moving_average_series,
    percentile_rank,
    simple_moving_average,
    stddev,
    z_score,
)


class TestMeanAndStddev:
    """Tests for mean and stddev."""

    def test_mean(self):
        assert mean([1, 2, 3, 4]) == 2.5

    def test_mean_empty(self):
        assert mean([]) == 0.0

    def test_population_stddev(self):
        # Classic example: population σ = 2
        assert stddev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)

    def test_stddev_short_input(self):
        assert stddev([]) == 0.0
        assert stddev([42.0]) == 0.0

    def test_stddev_non_negative(self):
        for values in ([1, 1, 1], [-5, 3, 100], [0.001, 0.002]):
            assert stddev(values) >= 0


class TestMovingAverages:
    """Tests for SMA and EMA."""

    def test_sma_trailing_window(self):
        assert simple_moving_average([1, 2, 3, 4, 5], 3) == pytest.approx(4.0)

    def test_sma_insufficient(self):
        assert simple_moving_average([1, 2], 3) is None

    def test_moving_average_series(self):
        assert moving_average_series([1, 2, 3, 4], 2) == pytest.approx([1.5, 2.5, 3.5])
        assert moving_average_series([1, 2], 5) == []

    def test_ema_seeded_with_sma(self):
        # seed 2 → 3 → 4 with multiplier 0.5
        assert exponential_moving_average([1, 2, 3, 4, 5], 3) == pytest.approx(4.0)

    def test_ema_insufficient(self):
        assert exponential_moving_average([1, 2], 3) is None

    def test_ema_of_constant(self):
        assert exponential_moving_average([7.0] * 30, 12) == pytest.approx(7.0)


class TestPercentileRank:
    """Tests for percentile_rank."""

    def test_ranks(self):
        batch = [1, 2, 3, 4]

        assert percentile_rank(1, batch) == 0.0
        assert percentile_rank(3, batch) == 50.0

    def test_above_all(self):
        assert percentile_rank(5, [1, 2, 3, 4]) == 100.0

    def test_monotonic(self):
        batch = sorted([5, 1, 9, 3, 7, 3, 8])
        ranks = [percentile_rank(v, batch) for v in range(0, 12)]

        assert ranks == sorted(ranks)
        assert all(0 <= r <= 100 for r in ranks)

    def test_empty_batch(self):
        assert percentile_rank(1, []) == 100.0


class TestZScore:
    """Tests for z_score."""

    def test_z_score(self):
        assert z_score(12, 10, 2) == 1.0

    def test_zero_sigma(self):
        assert z_score(12, 10, 0) is None
