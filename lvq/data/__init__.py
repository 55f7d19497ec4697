"""LVQ Data Module - Labeled records, loading, normalization and sampling."""

from .record import DataRecord, LabelMapping, IRIS_LABELS
from .loader import load_records
from .normalization import NormalizationFunction, Normalizer
from .sampling import WeightsInitializer, class_quotas

__all__ = [
    "DataRecord",
    "LabelMapping",
    "IRIS_LABELS",
    "load_records",
    "NormalizationFunction",
    "Normalizer",
    "WeightsInitializer",
    "class_quotas",
]
