"""
Learning Vector Quantization (LVQ1) prototype classifier.

The model holds a codebook of labeled prototype vectors. Training moves
the winning (nearest) prototype towards a sample of its own class and
away from a sample of another class:

    w ← w + α (x - w)   if label(w) == label(x)
    w ← w - α (x - w)   otherwise

Classification returns the label of the winning prototype.

Usage:
    model = LVQModel(DistanceMetric.EUCLIDEAN, normalizer)
    model.initialize_codebook(prototypes, prototype_labels)
    model.train(features, labels, scheduler, max_epochs=200,
                report_period=5, report=callback, generator=gen)
    label_id = model.classify([5.1, 3.5, 1.4, 0.2])
"""

import logging
import threading
from enum import Enum
from typing import Callable, Optional, Sequence

import torch
from torch import Tensor
from tqdm import tqdm

from ..data.normalization import Normalizer
from .scheduler import LearnRateScheduler
from .distance import DistanceMetric

logger = logging.getLogger(__name__)

ReportCallback = Callable[[int, float, float, bool], None]


class ModelState(str, Enum):
    """Model lifecycle state."""
    UNTRAINED = "untrained"
    TRAINING = "training"
    TRAINED = "trained"
    HALTED = "halted"


class LVQModel:
    """LVQ1 classifier over a labeled prototype codebook.

    The codebook is mutated only by the thread running ``train``. Other
    threads may call ``halt`` at any time and may call ``classify`` once
    training has ended.

    Args:
        distance_metric (DistanceMetric): Metric for winner search
        normalizer (Normalizer, optional): Applied to every input vector,
            set by ModelWrapper during preprocessing
        dtype (torch.dtype): Floating point type of the codebook

    Example:
        >>> model = LVQModel(DistanceMetric.MANHATTAN)
        >>> model.initialize_codebook(
        ...     torch.tensor([[0.0, 0.0], [1.0, 1.0]]), torch.tensor([0, 1]))
        >>> model.classify([0.9, 0.8])
        1
    """

    def __init__(
        self,
        distance_metric: DistanceMetric = DistanceMetric.EUCLIDEAN,
        normalizer: Optional[Normalizer] = None,
        dtype: torch.dtype = torch.float64
    ):
        self.distance_metric = DistanceMetric(distance_metric)
        self.normalizer = normalizer
        self.dtype = dtype

        self.prototypes: Optional[Tensor] = None
        self.prototype_labels: Optional[Tensor] = None

        self._state = ModelState.UNTRAINED
        self._state_lock = threading.Lock()
        self._halt_requested = threading.Event()
        self._last_winner_distance = float('nan')

    @property
    def state(self) -> ModelState:
        return self._state

    def initialize_codebook(self, prototypes: Tensor, labels: Tensor) -> None:
        """Set the initial codebook.

        Args:
            prototypes (Tensor): Already-normalized prototype vectors.
                Shape: [num_prototypes, num_features]
            labels (Tensor): Label id of each prototype. Shape: [num_prototypes]
        """
        if self._state is not ModelState.UNTRAINED:
            raise RuntimeError(f"cannot initialize codebook of a {self._state.value} model")
        if prototypes.dim() != 2 or prototypes.size(0) == 0:
            raise ValueError(f"prototypes must be a non-empty 2D tensor, got shape {tuple(prototypes.shape)}")
        if labels.shape != (prototypes.size(0),):
            raise ValueError("need exactly one label per prototype")

        self.prototypes = prototypes.to(self.dtype).clone()
        self.prototype_labels = labels.to(torch.long).clone()

    def halt(self) -> bool:
        """Request training to stop at the next epoch boundary.

        Safe to call from any thread. A no-op unless the model is training.

        Returns:
            bool: True if a running training loop was asked to stop
        """
        with self._state_lock:
            if self._state is not ModelState.TRAINING:
                logger.debug("halt() ignored, model is %s", self._state.value)
                return False
            self._halt_requested.set()
            return True

    def classify(self, features: Sequence[float]) -> int:
        """Label id of the prototype nearest to ``features``.

        Also records the winner distance, see ``get_last_winner_distance``.
        """
        if self.prototypes is None:
            raise RuntimeError("codebook is not initialized")

        x = torch.as_tensor(features, dtype=self.dtype)
        if self.normalizer is not None:
            x = self.normalizer.transform(x)

        distances = self.distance_metric.distances(x, self.prototypes)
        winner = int(torch.argmin(distances))
        self._last_winner_distance = distances[winner].item()

        return int(self.prototype_labels[winner])

    def get_last_winner_distance(self) -> float:
        """Distance to the winning prototype of the last ``classify`` call."""
        return self._last_winner_distance

    def train(
        self,
        features: Tensor,
        labels: Tensor,
        scheduler: LearnRateScheduler,
        max_epochs: int,
        report_period: int,
        report: ReportCallback,
        generator: Optional[torch.Generator] = None,
        show_progress: bool = False,
        halt_event: Optional[threading.Event] = None
    ) -> int:
        """Run LVQ1 epochs until the learn rate is exhausted, max epochs, or halt.

        ``report(epoch, learn_rate, squared_error, finished_training)`` is
        called after every epoch that is a multiple of ``report_period``
        (0 disables periodic reports) and exactly once more, last, with
        ``finished_training=True``. Periodic reports have strictly
        increasing epochs. After a halt no further epoch runs, so the
        completion report may repeat the epoch of the last periodic report.
        Exceptions raised by ``report`` abort training and propagate.

        Args:
            features (Tensor): Normalized training vectors. Shape: [n, num_features]
            labels (Tensor): Training label ids. Shape: [n]
            scheduler (LearnRateScheduler): Learn-rate decay
            max_epochs (int): Upper bound on epochs
            report_period (int): Epochs between progress reports
            report (callable): Progress callback
            generator (torch.Generator, optional): Sample order randomness
            show_progress (bool): Show a tqdm progress bar
            halt_event (threading.Event, optional): Shared cancellation flag,
                replaces the model's own so a halt requested before the
                loop starts is not lost

        Returns:
            int: Number of epochs run
        """
        with self._state_lock:
            if self._state is not ModelState.UNTRAINED:
                raise RuntimeError(f"cannot train a {self._state.value} model")
            if self.prototypes is None:
                raise RuntimeError("codebook is not initialized")
            if halt_event is not None:
                self._halt_requested = halt_event
            self._state = ModelState.TRAINING

        features = features.to(self.dtype)
        labels = labels.to(torch.long)

        epoch = 0
        learn_rate = scheduler.get_learn_rate()
        squared_error = 0.0
        halted = False

        try:
            with tqdm(total=max_epochs, desc="Training", disable=not show_progress) as pbar:
                while True:
                    # Only a halt seen at an epoch boundary stops the run
                    if self._halt_requested.is_set():
                        halted = True
                        break
                    if epoch >= max_epochs or scheduler.exhausted:
                        break

                    epoch += 1
                    learn_rate = scheduler.get_learn_rate()
                    squared_error = self._train_epoch(features, labels, learn_rate, generator)
                    scheduler.step()

                    pbar.update(1)
                    pbar.set_postfix({'lr': f"{learn_rate:.4f}", 'err': f"{squared_error:.4f}"})

                    # The final epoch is reported once, below, as finished
                    if epoch >= max_epochs or scheduler.exhausted:
                        break

                    if report_period and epoch % report_period == 0:
                        report(epoch, learn_rate, squared_error, False)
        except BaseException:
            with self._state_lock:
                self._state = ModelState.HALTED
            raise

        with self._state_lock:
            self._state = ModelState.HALTED if halted else ModelState.TRAINED

        if halted:
            logger.info("Training halted after %d epochs", epoch)
        else:
            logger.info("Training finished after %d epochs", epoch)

        report(epoch, learn_rate, squared_error, True)
        return epoch

    def _train_epoch(
        self,
        features: Tensor,
        labels: Tensor,
        learn_rate: float,
        generator: Optional[torch.Generator]
    ) -> float:
        """One pass over the training samples, returns summed squared winner distance."""
        squared_error = 0.0

        for idx in torch.randperm(features.size(0), generator=generator).tolist():
            x = features[idx]
            distances = self.distance_metric.distances(x, self.prototypes)
            winner = int(torch.argmin(distances))
            winner_distance = distances[winner].item()
            if self.distance_metric is DistanceMetric.SQUARED_EUCLIDEAN:
                squared_error += winner_distance
            else:
                squared_error += winner_distance ** 2

            direction = 1.0 if self.prototype_labels[winner] == labels[idx] else -1.0
            self.prototypes[winner] += direction * learn_rate * (x - self.prototypes[winner])

        return squared_error

    def __repr__(self) -> str:
        size = 0 if self.prototypes is None else self.prototypes.size(0)
        return (f"LVQModel(metric={self.distance_metric.value}, "
                f"prototypes={size}, state={self._state.value})")
