"""
Training subset selection (weights initialization strategies).

Each strategy returns indices into the dataset rather than records, so
records drawn more than once (N_RANDOM) and held-out records can be told
apart later. All randomness comes from the caller's seeded torch.Generator.
"""

from collections import defaultdict
from enum import Enum
from typing import Dict, List, Sequence

import torch

from ..exceptions import InsufficientDataError


class WeightsInitializer(str, Enum):
    """Strategy for choosing the records a model is initialized and trained from."""
    N_FIRST = "n_first"
    N_RANDOM = "n_random"
    N_RANDOM_UNIQUE = "n_random_unique"
    N_RANDOM_RATIONAL = "n_random_rational"

    def select(
        self,
        labels: Sequence[int],
        sample_count: int,
        generator: torch.Generator
    ) -> List[int]:
        """Select ``sample_count`` record indices.

        Args:
            labels: Label id of every record in dataset order
            sample_count: Number of indices to draw
            generator: Seeded random number generator

        Returns:
            List of record indices

        Raises:
            InsufficientDataError: If the strategy cannot satisfy its quota
        """
        if sample_count < 0:
            raise ValueError(f"sample_count must be non-negative, got {sample_count}")
        if sample_count > 0 and not labels:
            raise InsufficientDataError("cannot draw samples from an empty dataset")

        return _STRATEGIES[self](labels, sample_count, generator)


def select_first(labels: Sequence[int], sample_count: int, generator: torch.Generator) -> List[int]:
    # Strict prefix unless the dataset is shorter, then wrap around
    return [i % len(labels) for i in range(sample_count)]


def select_random(labels: Sequence[int], sample_count: int, generator: torch.Generator) -> List[int]:
    return torch.randint(len(labels), (sample_count,), generator=generator).tolist()


def select_random_unique(
    labels: Sequence[int],
    sample_count: int,
    generator: torch.Generator
) -> List[int]:
    if sample_count > len(labels):
        raise InsufficientDataError(
            f"cannot draw {sample_count} unique samples from {len(labels)} records"
        )
    return torch.randperm(len(labels), generator=generator)[:sample_count].tolist()


def class_quotas(class_ids: Sequence[int], sample_count: int) -> Dict[int, int]:
    """Split ``sample_count`` evenly across classes.

    The remainder of the integer division goes one-per-class to the first
    classes in ascending label id order.

    Example:
        >>> class_quotas([0, 1, 2], 31)
        {0: 11, 1: 10, 2: 10}
    """
    ordered = sorted(class_ids)
    if not ordered:
        return {}
    base, remainder = divmod(sample_count, len(ordered))
    return {class_id: base + (1 if i < remainder else 0) for i, class_id in enumerate(ordered)}


def select_random_rational(
    labels: Sequence[int],
    sample_count: int,
    generator: torch.Generator
) -> List[int]:
    by_class: Dict[int, List[int]] = defaultdict(list)
    for idx, label in enumerate(labels):
        by_class[label].append(idx)

    quotas = class_quotas(list(by_class), sample_count)

    # Check every quota before drawing anything
    for class_id, quota in quotas.items():
        if quota > len(by_class[class_id]):
            raise InsufficientDataError(
                f"class {class_id} has {len(by_class[class_id])} records, "
                f"cannot draw {quota} of {sample_count} samples"
            )

    selected: List[int] = []
    for class_id, quota in quotas.items():
        members = by_class[class_id]
        order = torch.randperm(len(members), generator=generator)[:quota]
        selected.extend(members[i] for i in order.tolist())

    return selected


_STRATEGIES = {
    WeightsInitializer.N_FIRST: select_first,
    WeightsInitializer.N_RANDOM: select_random,
    WeightsInitializer.N_RANDOM_UNIQUE: select_random_unique,
    WeightsInitializer.N_RANDOM_RATIONAL: select_random_rational,
}
