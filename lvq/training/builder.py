"""
Fluent builder for training configurations and model wrappers.

Usage:
    wrapper = (ModelBuilder()
               .with_train_data(records, 30)
               .with_input_normalization_func(NormalizationFunction.MIN_MAX)
               .with_weights_initializer(WeightsInitializer.N_RANDOM_UNIQUE)
               .with_distance_metric(DistanceMetric.EUCLIDEAN)
               .with_random_number_generator(321895892175192714)
               .with_progress_report_period(5)
               .with_model_state_listener(EvaluationListener())
               .with_learn_rate(0.3)
               .with_quit_learn_rate(0.001)
               .with_momentum_learn_rate_decay(0.97)
               .with_max_epochs(200)
               .build())
"""

from typing import Any, Dict, List, Sequence

from ..data.normalization import NormalizationFunction
from ..data.record import DataRecord
from ..data.sampling import WeightsInitializer
from ..exceptions import ConfigurationError
from ..models.distance import DistanceMetric
from .config import EvaluationScope, TrainingConfiguration
from .events import ModelStateListener
from .wrapper import ModelWrapper


class ModelBuilder:
    """Accumulates options; all validation happens in ``build``."""

    def __init__(self):
        self._options: Dict[str, Any] = {}
        self._listeners: List[ModelStateListener] = []

    def with_train_data(self, records: Sequence[DataRecord], sample_count: int) -> "ModelBuilder":
        self._options['records'] = tuple(records)
        self._options['sample_count'] = sample_count
        return self

    def with_input_normalization_func(self, function: NormalizationFunction) -> "ModelBuilder":
        self._options['normalization'] = function
        return self

    def with_weights_initializer(self, initializer: WeightsInitializer) -> "ModelBuilder":
        self._options['weights_initializer'] = initializer
        return self

    def with_distance_metric(self, metric: DistanceMetric) -> "ModelBuilder":
        self._options['distance_metric'] = metric
        return self

    def with_random_number_generator(self, seed: int) -> "ModelBuilder":
        self._options['seed'] = seed
        return self

    def with_progress_report_period(self, epochs: int) -> "ModelBuilder":
        self._options['progress_report_period'] = epochs
        return self

    def with_model_state_listener(self, listener: Any) -> "ModelBuilder":
        """Attach a listener; may be called repeatedly."""
        self._listeners.append(listener)
        return self

    def with_learn_rate(self, learn_rate: float) -> "ModelBuilder":
        self._options['learn_rate'] = learn_rate
        return self

    def with_quit_learn_rate(self, quit_learn_rate: float) -> "ModelBuilder":
        self._options['quit_learn_rate'] = quit_learn_rate
        return self

    def with_momentum_learn_rate_decay(self, decay: float) -> "ModelBuilder":
        self._options['momentum_learn_rate_decay'] = decay
        return self

    def with_max_epochs(self, max_epochs: int) -> "ModelBuilder":
        self._options['max_epochs'] = max_epochs
        return self

    def with_evaluation_scope(self, scope: EvaluationScope) -> "ModelBuilder":
        self._options['evaluation_scope'] = scope
        return self

    def with_progress_bar(self, show: bool = True) -> "ModelBuilder":
        self._options['show_progress'] = show
        return self

    def build_configuration(self) -> TrainingConfiguration:
        """Validate the accumulated options.

        Raises:
            ConfigurationError: Naming the first violated constraint
        """
        if 'records' not in self._options:
            raise ConfigurationError("train data is not set, call with_train_data()")

        return TrainingConfiguration.create(listeners=tuple(self._listeners), **self._options)

    def build(self) -> ModelWrapper:
        """Validate the options and create a ModelWrapper ready to train.

        Raises:
            ConfigurationError: If the options are invalid
            InsufficientDataError: If the training subset cannot be drawn
        """
        return ModelWrapper(self.build_configuration())
