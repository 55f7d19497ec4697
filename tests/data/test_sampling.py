"""
Unit tests for training subset selection strategies.
"""

from collections import Counter

import pytest
import torch

from lvq.data.sampling import WeightsInitializer, class_quotas
from lvq.exceptions import InsufficientDataError


def gen(seed=42):
    return torch.Generator().manual_seed(seed)


# 150 records, 3 classes of 50, grouped like iris.csv
IRIS_LIKE = [0] * 50 + [1] * 50 + [2] * 50


class TestNFirst:
    def test_strict_prefix(self):
        indices = WeightsInitializer.N_FIRST.select(IRIS_LIKE, 30, gen())

        assert indices == list(range(30))

    def test_wraps_when_dataset_is_shorter(self):
        indices = WeightsInitializer.N_FIRST.select([0, 1, 2], 5, gen())

        assert indices == [0, 1, 2, 0, 1]


class TestNRandom:
    def test_draws_requested_count_in_range(self):
        indices = WeightsInitializer.N_RANDOM.select(IRIS_LIKE, 100, gen())

        assert len(indices) == 100
        assert all(0 <= i < 150 for i in indices)

    def test_allows_duplicates(self):
        """With replacement: drawing 20 of 5 must repeat."""
        indices = WeightsInitializer.N_RANDOM.select([0, 1, 0, 1, 0], 20, gen())

        assert len(indices) == 20
        assert len(set(indices)) <= 5

    def test_empty_dataset(self):
        with pytest.raises(InsufficientDataError):
            WeightsInitializer.N_RANDOM.select([], 1, gen())


class TestNRandomUnique:
    def test_no_duplicates(self):
        for seed in range(10):
            indices = WeightsInitializer.N_RANDOM_UNIQUE.select(IRIS_LIKE, 60, gen(seed))

            assert len(indices) == 60
            assert len(set(indices)) == 60

    def test_whole_dataset(self):
        indices = WeightsInitializer.N_RANDOM_UNIQUE.select(IRIS_LIKE, 150, gen())

        assert sorted(indices) == list(range(150))

    def test_insufficient_data(self):
        with pytest.raises(InsufficientDataError, match="unique samples"):
            WeightsInitializer.N_RANDOM_UNIQUE.select([0, 1, 2], 4, gen())


class TestNRandomRational:
    def test_iris_scenario_ten_per_class(self):
        """150 records, 3 classes, 30 samples -> exactly 10 per class."""
        indices = WeightsInitializer.N_RANDOM_RATIONAL.select(IRIS_LIKE, 30, gen())

        assert len(indices) == 30
        assert len(set(indices)) == 30
        assert Counter(IRIS_LIKE[i] for i in indices) == {0: 10, 1: 10, 2: 10}

    def test_remainder_goes_to_first_classes(self):
        indices = WeightsInitializer.N_RANDOM_RATIONAL.select(IRIS_LIKE, 32, gen())

        assert len(indices) == 32
        assert Counter(IRIS_LIKE[i] for i in indices) == {0: 11, 1: 11, 2: 10}

    def test_remainder_follows_label_id_not_file_order(self):
        labels = [2] * 10 + [0] * 10 + [1] * 10
        indices = WeightsInitializer.N_RANDOM_RATIONAL.select(labels, 7, gen())

        assert Counter(labels[i] for i in indices) == {0: 3, 1: 2, 2: 2}

    def test_class_below_quota(self):
        labels = [0] * 50 + [1] * 3
        with pytest.raises(InsufficientDataError, match="class 1 has 3 records"):
            WeightsInitializer.N_RANDOM_RATIONAL.select(labels, 10, gen())

    def test_class_quotas(self):
        assert class_quotas([0, 1, 2], 30) == {0: 10, 1: 10, 2: 10}
        assert class_quotas([2, 0, 1], 31) == {0: 11, 1: 10, 2: 10}
        assert class_quotas([0, 1], 1) == {0: 1, 1: 0}


class TestDeterminism:
    @pytest.mark.parametrize("strategy", list(WeightsInitializer))
    def test_same_seed_same_selection(self, strategy):
        first = strategy.select(IRIS_LIKE, 30, gen(7))
        second = strategy.select(IRIS_LIKE, 30, gen(7))

        assert first == second

    def test_enum_from_value(self):
        assert WeightsInitializer("n_random_rational") is WeightsInitializer.N_RANDOM_RATIONAL
