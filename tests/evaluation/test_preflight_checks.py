"""
Unit tests for the preflight check system.

Tests that preflight checks flag configurations that train a model which
cannot predict every class, or that report misleading accuracy.
"""

import warnings

import pytest

from lvq.data.record import LabelMapping
from lvq.data.sampling import WeightsInitializer
from lvq.evaluation.preflight_checks import (
    run_preflight_checks,
    check_class_coverage,
    check_learn_rate_schedule,
    check_evaluation_scope,
    PreflightCheckError,
    PreflightCheckWarning
)
from lvq.training.config import EvaluationScope, TrainingConfiguration
from lvq.training.wrapper import ModelWrapper


def make_wrapper(records, **options):
    options.setdefault('sample_count', 30)
    return ModelWrapper(TrainingConfiguration.create(records=records, **options))


class TestClassCoverage:
    """Test training subset class coverage (every class needs a prototype)."""

    def test_balanced_subset_passes(self, blobs, labels):
        subset = blobs[:10] + blobs[50:60] + blobs[100:110]

        with warnings.catch_warnings():
            warnings.simplefilter("error", PreflightCheckWarning)
            result = check_class_coverage(subset, labels)

        assert result['is_covered']
        assert result['balance_ratio'] == 1.0
        assert result['class_counts'] == {0: 10, 1: 10, 2: 10}

    def test_missing_class_warns(self, blobs, labels):
        """A prefix of grouped data holds a single class."""
        with pytest.warns(PreflightCheckWarning, match="no samples of 2 class"):
            result = check_class_coverage(blobs[:30], labels)

        assert not result['is_covered']
        assert result['missing_classes'] == [1, 2]

    def test_missing_class_named(self, blobs):
        mapping = LabelMapping({0: "alpha", 1: "beta", 2: "gamma", 3: "delta"})

        with pytest.warns(PreflightCheckWarning, match="delta"):
            check_class_coverage(blobs, mapping)

    def test_imbalanced_subset_warns(self, blobs, labels):
        subset = blobs[:20] + blobs[50:55] + blobs[100:120]

        with pytest.warns(PreflightCheckWarning, match="Imbalanced"):
            result = check_class_coverage(subset, labels)

        assert result['is_covered']
        assert result['balance_ratio'] == 0.25


class TestLearnRateSchedule:
    """Test learn-rate schedule analysis."""

    def test_default_schedule_stops_on_learn_rate(self):
        result = check_learn_rate_schedule(0.3, 0.001, 0.97, 200)

        assert result['epochs_to_quit_learn_rate'] == 188
        assert result['stops_on_learn_rate']
        assert result['expected_epochs'] == 188

    def test_max_epochs_reached_first(self):
        result = check_learn_rate_schedule(0.3, 0.001, 0.97, 100)

        assert not result['stops_on_learn_rate']
        assert result['expected_epochs'] == 100

    def test_no_decay_never_reaches_quit(self):
        result = check_learn_rate_schedule(0.3, 0.001, 1.0, 50)

        assert result['epochs_to_quit_learn_rate'] is None
        assert result['expected_epochs'] == 50

    def test_large_learn_rate_warns(self):
        with pytest.warns(PreflightCheckWarning, match="moves prototypes past"):
            check_learn_rate_schedule(1.5, 0.001, 0.97, 200)


class TestEvaluationScope:
    """Test evaluation/training overlap detection."""

    def test_held_out_passes(self):
        result = check_evaluation_scope(EvaluationScope.HELD_OUT)

        assert not result['overlaps_training']

    @pytest.mark.parametrize("scope", [EvaluationScope.ALL, EvaluationScope.TRAINING])
    def test_overlapping_scope_warns(self, scope):
        with pytest.warns(PreflightCheckWarning, match="includes training records"):
            result = check_evaluation_scope(scope)

        assert result['overlaps_training']


class TestRunPreflightChecks:
    """Test the complete preflight check suite."""

    def test_clean_configuration(self, blobs):
        wrapper = make_wrapper(blobs, weights_initializer=WeightsInitializer.N_RANDOM_RATIONAL,
                               evaluation_scope=EvaluationScope.HELD_OUT)

        with warnings.catch_warnings():
            warnings.simplefilter("error", PreflightCheckWarning)
            results = run_preflight_checks(wrapper)

        assert results['warnings'] == []
        assert results['class_coverage']['is_covered']
        assert results['evaluation_scope']['scope'] == "held_out"

    def test_problems_reissued_as_warnings(self, blobs):
        wrapper = make_wrapper(blobs, weights_initializer=WeightsInitializer.N_FIRST)

        with pytest.warns(PreflightCheckWarning) as record:
            results = run_preflight_checks(wrapper)

        assert len(results['warnings']) == 2
        assert len(record) == 2

    def test_strict_mode_raises(self, blobs):
        wrapper = make_wrapper(blobs, weights_initializer=WeightsInitializer.N_FIRST)

        with pytest.raises(PreflightCheckError, match="Preflight checks failed"):
            run_preflight_checks(wrapper, strict=True)

    def test_strict_mode_passes_clean_configuration(self, blobs):
        wrapper = make_wrapper(blobs, weights_initializer=WeightsInitializer.N_RANDOM_RATIONAL,
                               evaluation_scope=EvaluationScope.HELD_OUT)

        results = run_preflight_checks(wrapper, strict=True)

        assert results['learn_rate_schedule']['expected_epochs'] == 188
