"""
Distance metrics between a feature vector and the codebook prototypes.
"""

from enum import Enum

from torch import Tensor


class DistanceMetric(str, Enum):
    """Metric used to find the winning (nearest) prototype."""
    EUCLIDEAN = "euclidean"
    SQUARED_EUCLIDEAN = "squared_euclidean"
    MANHATTAN = "manhattan"
    CHEBYSHEV = "chebyshev"

    def distances(self, x: Tensor, prototypes: Tensor) -> Tensor:
        """Distance from ``x`` to every prototype.

        Args:
            x (Tensor): Feature vector. Shape: [num_features]
            prototypes (Tensor): Codebook. Shape: [num_prototypes, num_features]

        Returns:
            Tensor: Distances. Shape: [num_prototypes]
        """
        diff = prototypes - x

        if self is DistanceMetric.EUCLIDEAN:
            return diff.pow(2).sum(dim=-1).sqrt()
        elif self is DistanceMetric.SQUARED_EUCLIDEAN:
            return diff.pow(2).sum(dim=-1)
        elif self is DistanceMetric.MANHATTAN:
            return diff.abs().sum(dim=-1)
        elif self is DistanceMetric.CHEBYSHEV:
            return diff.abs().amax(dim=-1)
        else:
            raise ValueError(f"Unknown distance metric: {self}")
