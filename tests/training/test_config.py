"""
Unit tests for TrainingConfiguration validation.
"""

import pytest
from pydantic import ValidationError

from lvq.data.normalization import NormalizationFunction
from lvq.data.record import DataRecord
from lvq.exceptions import ConfigurationError
from lvq.training.config import EvaluationScope, TrainingConfiguration
from lvq.training.events import CallbackListener


class TestTrainingConfiguration:
    """Tests for TrainingConfiguration.create."""

    def test_defaults(self, blobs):
        config = TrainingConfiguration.create(records=blobs, sample_count=30)

        assert config.learn_rate == 0.3
        assert config.quit_learn_rate == 0.001
        assert config.momentum_learn_rate_decay == 0.97
        assert config.max_epochs == 200
        assert config.progress_report_period == 0
        assert config.evaluation_scope is EvaluationScope.ALL
        assert config.num_features == 2
        assert len(config.records) == 150

    def test_sample_count_may_equal_dataset_size(self, blobs):
        config = TrainingConfiguration.create(records=blobs, sample_count=150)

        assert config.sample_count == 150

    def test_sample_count_exceeds_dataset(self, blobs):
        with pytest.raises(ConfigurationError, match=r"exceeds dataset size \(151 > 150\)"):
            TrainingConfiguration.create(records=blobs, sample_count=151)

    @pytest.mark.parametrize("sample_count", [0, -3])
    def test_sample_count_must_be_positive(self, blobs, sample_count):
        with pytest.raises(ConfigurationError, match="sample_count"):
            TrainingConfiguration.create(records=blobs, sample_count=sample_count)

    def test_empty_dataset(self):
        with pytest.raises(ConfigurationError, match="records"):
            TrainingConfiguration.create(records=[], sample_count=1)

    def test_learn_rate_must_exceed_quit(self, blobs):
        with pytest.raises(ConfigurationError, match="learn-rate must exceed quit-learn-rate"):
            TrainingConfiguration.create(records=blobs, sample_count=30,
                                         learn_rate=0.001, quit_learn_rate=0.001)

    def test_quit_learn_rate_must_be_positive(self, blobs):
        with pytest.raises(ConfigurationError, match="quit_learn_rate"):
            TrainingConfiguration.create(records=blobs, sample_count=30, quit_learn_rate=0.0)

    @pytest.mark.parametrize("decay", [0.0, 1.5, -0.5])
    def test_decay_bounds(self, blobs, decay):
        with pytest.raises(ConfigurationError, match="momentum_learn_rate_decay"):
            TrainingConfiguration.create(records=blobs, sample_count=30,
                                         momentum_learn_rate_decay=decay)

    def test_decay_of_one_allowed(self, blobs):
        config = TrainingConfiguration.create(records=blobs, sample_count=30,
                                              momentum_learn_rate_decay=1.0)

        assert config.momentum_learn_rate_decay == 1.0

    def test_max_epochs_must_be_positive(self, blobs):
        with pytest.raises(ConfigurationError, match="max_epochs"):
            TrainingConfiguration.create(records=blobs, sample_count=30, max_epochs=0)

    def test_negative_report_period(self, blobs):
        with pytest.raises(ConfigurationError, match="progress_report_period"):
            TrainingConfiguration.create(records=blobs, sample_count=30, progress_report_period=-1)

    def test_inconsistent_feature_counts(self, blobs):
        odd = DataRecord.create((1.0, 2.0, 3.0), "alpha", blobs[0].mapping)

        with pytest.raises(ConfigurationError, match=r"inconsistent feature counts \[2, 3\]"):
            TrainingConfiguration.create(records=blobs + [odd], sample_count=30)

    def test_rejects_non_records(self):
        with pytest.raises(ConfigurationError, match="expected DataRecord"):
            TrainingConfiguration.create(records=[(1.0, 2.0)], sample_count=1)

    def test_enum_values_from_strings(self, blobs):
        config = TrainingConfiguration.create(records=blobs, sample_count=30,
                                              normalization="z_score", evaluation_scope="held_out")

        assert config.normalization is NormalizationFunction.Z_SCORE
        assert config.evaluation_scope is EvaluationScope.HELD_OUT

    def test_callables_become_listeners(self, blobs):
        def on_update(model, epoch, learn_rate, squared_error, finished_training):
            pass

        config = TrainingConfiguration.create(records=blobs, sample_count=30, listeners=[on_update])

        assert isinstance(config.listeners[0], CallbackListener)
        assert config.listeners[0].callback is on_update

    def test_rejects_non_callable_listener(self, blobs):
        with pytest.raises(ConfigurationError, match="listeners: listener must be"):
            TrainingConfiguration.create(records=blobs, sample_count=30, listeners=[42])

    def test_error_chains_validation_error(self, blobs):
        with pytest.raises(ConfigurationError) as exc_info:
            TrainingConfiguration.create(records=blobs, sample_count=500)

        assert isinstance(exc_info.value.__cause__, ValidationError)
        assert isinstance(exc_info.value, ValueError)

    def test_frozen(self, blobs):
        config = TrainingConfiguration.create(records=blobs, sample_count=30)

        with pytest.raises(ValidationError):
            config.learn_rate = 0.5

    def test_summary_excludes_records(self, blobs):
        summary = TrainingConfiguration.create(records=blobs, sample_count=30, seed=7).summary()

        assert 'records' not in summary
        assert 'listeners' not in summary
        assert summary['seed'] == 7
        assert summary['weights_initializer'] == "n_first"
