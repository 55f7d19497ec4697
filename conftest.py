"""Shared fixtures: small synthetic labeled datasets."""

import pytest
import torch

from lvq.data.record import DataRecord, LabelMapping

SYNTHETIC_LABELS = LabelMapping({0: "alpha", 1: "beta", 2: "gamma"}, name="synthetic")


def make_blobs(
    per_class=50,
    centers=((0.0, 0.0), (5.0, 5.0), (10.0, 0.0)),
    spread=0.5,
    seed=0,
    mapping=SYNTHETIC_LABELS
):
    """Gaussian blobs, one per class, records grouped by class like iris.csv."""
    generator = torch.Generator().manual_seed(seed)
    records = []
    for label_id, center in enumerate(centers):
        noise = torch.randn(per_class, len(center), generator=generator, dtype=torch.float64) * spread
        points = torch.tensor(center, dtype=torch.float64) + noise
        for row in points.tolist():
            records.append(DataRecord.create(row, mapping.label_text(label_id), mapping))
    return records


@pytest.fixture
def labels():
    return SYNTHETIC_LABELS


@pytest.fixture
def make_records():
    return make_blobs


@pytest.fixture
def blobs():
    """150 records, 3 classes of 50."""
    return make_blobs()
