"""Tests for input normalization."""

import pytest
import torch

from lvq.data.normalization import NormalizationFunction, Normalizer


@pytest.fixture
def train():
    return torch.tensor([[0.0, 10.0, 3.0],
                         [2.0, 30.0, 3.0],
                         [4.0, 20.0, 3.0]], dtype=torch.float64)


class TestNormalizer:
    def test_none_is_identity(self, train):
        norm = Normalizer.fit(NormalizationFunction.NONE, train)

        assert torch.equal(norm.transform(train), train)

    def test_min_max(self, train):
        norm = Normalizer.fit(NormalizationFunction.MIN_MAX, train)
        out = norm.transform(train)

        assert torch.allclose(out[:, 0], torch.tensor([0.0, 0.5, 1.0], dtype=torch.float64))
        assert torch.allclose(out[:, 1], torch.tensor([0.0, 1.0, 0.5], dtype=torch.float64))

    def test_z_score(self, train):
        norm = Normalizer.fit(NormalizationFunction.Z_SCORE, train)
        out = norm.transform(train)

        assert torch.allclose(out[:, :2].mean(dim=0), torch.zeros(2, dtype=torch.float64), atol=1e-12)
        assert torch.allclose(out[:, :2].std(dim=0, correction=0),
                              torch.ones(2, dtype=torch.float64))

    @pytest.mark.parametrize("function", [NormalizationFunction.MIN_MAX, NormalizationFunction.Z_SCORE])
    def test_constant_feature_does_not_divide_by_zero(self, train, function):
        out = Normalizer.fit(function, train).transform(train)

        assert torch.isfinite(out).all()
        assert torch.allclose(out[:, 2], torch.zeros(3, dtype=torch.float64))

    def test_statistics_reused_for_unseen_vectors(self, train):
        """Vectors outside the training range keep the training statistics."""
        norm = Normalizer.fit(NormalizationFunction.MIN_MAX, train)
        out = norm.transform(torch.tensor([8.0, 50.0, 3.0], dtype=torch.float64))

        assert torch.allclose(out, torch.tensor([2.0, 2.0, 0.0], dtype=torch.float64))

    def test_accepts_string_value(self, train):
        norm = Normalizer.fit("min_max", train)

        assert norm.function is NormalizationFunction.MIN_MAX
