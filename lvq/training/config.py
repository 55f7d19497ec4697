"""
Validated, immutable training configuration.

All invariants are checked in one place, when the configuration is
created, so a run never starts from a half-valid configuration:

- 1 <= sample_count <= dataset size
- learn_rate > quit_learn_rate > 0
- momentum_learn_rate_decay in (0, 1]
- max_epochs > 0, progress_report_period >= 0, seed >= 0
- every record has the same number of features
"""

from enum import Enum
from typing import Any, Dict, Tuple

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from ..data.normalization import NormalizationFunction
from ..data.record import DataRecord
from ..data.sampling import WeightsInitializer
from ..exceptions import ConfigurationError
from ..models.distance import DistanceMetric
from .events import ModelStateListener, as_listener


class EvaluationScope(str, Enum):
    """Which records the trained model is evaluated on."""
    ALL = "all"
    HELD_OUT = "held_out"
    TRAINING = "training"


class TrainingConfiguration(BaseModel):
    """Hyperparameters and strategy choices for one training run.

    Prefer ``TrainingConfiguration.create`` (or ModelBuilder), which turns
    validation failures into a ConfigurationError naming the first violated
    constraint.
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    # Dataset
    records: Tuple[Any, ...] = Field(min_length=1, description="Full dataset")
    sample_count: int = Field(gt=0, description="Records drawn for training")

    # Strategies
    normalization: NormalizationFunction = NormalizationFunction.NONE
    weights_initializer: WeightsInitializer = WeightsInitializer.N_FIRST
    distance_metric: DistanceMetric = DistanceMetric.EUCLIDEAN
    seed: int = Field(ge=0, default=0)

    # Training loop
    progress_report_period: int = Field(ge=0, default=0,
                                        description="Epochs between reports (0 = completion only)")
    learn_rate: float = Field(gt=0.0, default=0.3)
    quit_learn_rate: float = Field(gt=0.0, default=0.001,
                                   description="Training stops once the learn rate drops below this")
    momentum_learn_rate_decay: float = Field(gt=0.0, le=1.0, default=0.97)
    max_epochs: int = Field(gt=0, default=200)

    # Observation and evaluation
    listeners: Tuple[ModelStateListener, ...] = ()
    evaluation_scope: EvaluationScope = EvaluationScope.ALL
    show_progress: bool = False

    @field_validator("records")
    @classmethod
    def validate_records(cls, v: Tuple[Any, ...]) -> Tuple[Any, ...]:
        for record in v:
            if not isinstance(record, DataRecord):
                raise ValueError(f"expected DataRecord, got {type(record).__name__}")
        return v

    @field_validator("listeners", mode="before")
    @classmethod
    def wrap_callables(cls, v: Any) -> Tuple[ModelStateListener, ...]:
        try:
            return tuple(as_listener(listener) for listener in v)
        except TypeError as e:
            raise ValueError(str(e)) from e

    @model_validator(mode="after")
    def validate_sample_count(self) -> "TrainingConfiguration":
        if self.sample_count > len(self.records):
            raise ValueError(
                f"train sample count exceeds dataset size "
                f"({self.sample_count} > {len(self.records)})"
            )
        return self

    @model_validator(mode="after")
    def validate_learn_rates(self) -> "TrainingConfiguration":
        if self.learn_rate <= self.quit_learn_rate:
            raise ValueError(
                f"learn-rate must exceed quit-learn-rate "
                f"({self.learn_rate} <= {self.quit_learn_rate})"
            )
        return self

    @model_validator(mode="after")
    def validate_feature_arity(self) -> "TrainingConfiguration":
        arities = {record.num_features for record in self.records}
        if len(arities) > 1:
            raise ValueError(f"records have inconsistent feature counts {sorted(arities)}")
        return self

    @classmethod
    def create(cls, **options: Any) -> "TrainingConfiguration":
        """Validate ``options`` and build the configuration.

        Raises:
            ConfigurationError: Naming the first violated constraint
        """
        try:
            return cls(**options)
        except ValidationError as e:
            first = e.errors()[0]
            location = ".".join(str(part) for part in first["loc"])
            message = first["msg"].removeprefix("Value error, ")
            raise ConfigurationError(f"{location}: {message}" if location else message) from e

    @property
    def num_features(self) -> int:
        return self.records[0].num_features

    def summary(self) -> Dict[str, Any]:
        """Hyperparameters as a plain dict (no records or listeners)."""
        return self.model_dump(mode="json", exclude={"records", "listeners"})
