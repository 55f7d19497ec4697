"""
LVQ Classification Pipeline

Prototype-based supervised classification with Learning Vector
Quantization: asynchronous codebook training with progress listeners,
followed by overall and per-class accuracy evaluation.
"""

import logging

__version__ = "0.1.0"

# Library logging stays silent unless the application configures it
logging.getLogger(__name__).addHandler(logging.NullHandler())

from .exceptions import (
    LVQError,
    ConfigurationError,
    InsufficientDataError,
    UnknownLabelError,
    ObserverFailure,
    DataFormatError,
)
from .data import DataRecord, LabelMapping, IRIS_LABELS, load_records, NormalizationFunction, WeightsInitializer
from .models import DistanceMetric, LVQModel
from .training import ModelBuilder, ModelWrapper, TrainingConfiguration, EvaluationScope, ModelStateListener
from .evaluation import EvaluationEngine, EvaluationListener, EvaluationReport

__all__ = [
    "LVQError",
    "ConfigurationError",
    "InsufficientDataError",
    "UnknownLabelError",
    "ObserverFailure",
    "DataFormatError",
    "DataRecord",
    "LabelMapping",
    "IRIS_LABELS",
    "load_records",
    "NormalizationFunction",
    "WeightsInitializer",
    "DistanceMetric",
    "LVQModel",
    "ModelBuilder",
    "ModelWrapper",
    "TrainingConfiguration",
    "EvaluationScope",
    "ModelStateListener",
    "EvaluationEngine",
    "EvaluationListener",
    "EvaluationReport",
]
