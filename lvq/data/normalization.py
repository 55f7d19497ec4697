"""
Input normalization for feature vectors.

Statistics are fitted on the training subset only and then applied,
unchanged, to every vector the model sees (training and evaluation).
"""

from enum import Enum

import torch
from torch import Tensor


class NormalizationFunction(str, Enum):
    """How feature vectors are rescaled before training."""
    NONE = "none"
    MIN_MAX = "min_max"
    Z_SCORE = "z_score"


class Normalizer:
    """Affine per-feature rescaling: x' = (x - offset) / scale.

    Args:
        function (NormalizationFunction): Rescaling that produced the statistics
        offset (Tensor): Per-feature offset. Shape: [num_features]
        scale (Tensor): Per-feature scale, never zero. Shape: [num_features]

    Example:
        >>> train = torch.tensor([[0.0, 10.0], [2.0, 30.0]], dtype=torch.float64)
        >>> norm = Normalizer.fit(NormalizationFunction.MIN_MAX, train)
        >>> norm.transform(torch.tensor([1.0, 20.0], dtype=torch.float64))
        tensor([0.5000, 0.5000], dtype=torch.float64)
    """

    def __init__(self, function: NormalizationFunction, offset: Tensor, scale: Tensor):
        self.function = NormalizationFunction(function)
        self.offset = offset
        self.scale = scale

    @classmethod
    def fit(cls, function: NormalizationFunction, features: Tensor) -> "Normalizer":
        """Compute normalization statistics from training features.

        Constant features (zero range or zero std) get a scale of 1 so they
        map to a constant instead of dividing by zero.

        Args:
            function (NormalizationFunction): Rescaling to fit
            features (Tensor): Training features. Shape: [num_samples, num_features]

        Returns:
            Normalizer: Fitted normalizer
        """
        function = NormalizationFunction(function)
        num_features = features.size(1)

        if function is NormalizationFunction.NONE:
            offset = torch.zeros(num_features, dtype=features.dtype)
            scale = torch.ones(num_features, dtype=features.dtype)
        elif function is NormalizationFunction.MIN_MAX:
            offset = features.amin(dim=0)
            scale = features.amax(dim=0) - offset
        elif function is NormalizationFunction.Z_SCORE:
            offset = features.mean(dim=0)
            scale = features.std(dim=0, correction=0)
        else:
            raise ValueError(f"Unknown normalization function: {function}")

        scale = torch.where(scale == 0, torch.ones_like(scale), scale)
        return cls(function, offset, scale)

    def transform(self, features: Tensor) -> Tensor:
        """Rescale a vector [num_features] or a batch [n, num_features]."""
        return (features - self.offset) / self.scale

    def __repr__(self) -> str:
        return f"Normalizer(function={self.function.value}, num_features={self.offset.numel()})"
