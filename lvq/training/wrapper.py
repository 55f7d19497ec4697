"""
Asynchronous training orchestration.

ModelWrapper owns one LVQModel, the full dataset and a validated
configuration, and runs preprocessing, codebook initialization and
training as one operation off the caller's thread.

Usage:
    wrapper = ModelWrapper(config)
    wrapper.start()                 # returns immediately
    for event in wrapper.events():  # progress, in epoch order
        print(event.epoch, event.squared_error)
    report = wrapper.evaluate()
"""

import logging
import queue
import threading
from enum import Enum
from typing import Iterator, List, Optional

import torch

from ..data.normalization import Normalizer
from ..data.record import DataRecord, LabelMapping
from ..evaluation.accuracy import EvaluationEngine, EvaluationReport
from ..exceptions import ObserverFailure
from ..models.lvq import LVQModel
from ..models.scheduler import LearnRateScheduler
from .config import EvaluationScope, TrainingConfiguration
from .events import LifecycleEvent

logger = logging.getLogger(__name__)


class TrainingStatus(str, Enum):
    """Training run status."""
    CONFIGURED = "configured"
    PREPROCESSING = "preprocessing"
    TRAINING = "training"
    TRAINED = "trained"
    FAILED = "failed"


class ModelWrapper:
    """Runs one training run of an LVQ model and reports its progress.

    The training subset is drawn when the wrapper is created, so sampling
    errors (InsufficientDataError) surface to the caller setting up the
    run rather than on the worker thread.

    Args:
        config (TrainingConfiguration): Validated configuration
        model (LVQModel, optional): Model to train, created from the
            configuration when omitted

    Attributes:
        model: The trainable model
        config: The configuration
        input_records: Every record of the dataset, in file order
        train_indices: Dataset indices of the training subset, in draw order
        train_records: Records of the training subset
        status: Current TrainingStatus
        error: Exception that failed the run, if any
    """

    def __init__(self, config: TrainingConfiguration, model: Optional[LVQModel] = None):
        self.config = config
        self.model = model if model is not None else LVQModel(config.distance_metric)
        self.input_records: List[DataRecord] = list(config.records)

        self._generator = torch.Generator().manual_seed(config.seed)
        self.train_indices: List[int] = config.weights_initializer.select(
            [record.label_id for record in self.input_records],
            config.sample_count,
            self._generator,
        )
        self.train_records: List[DataRecord] = [self.input_records[i] for i in self.train_indices]

        self.status = TrainingStatus.CONFIGURED
        self.error: Optional[BaseException] = None

        self._lock = threading.Lock()
        self._halt_requested = threading.Event()
        self._events: "queue.Queue[LifecycleEvent]" = queue.Queue()
        self._thread: Optional[threading.Thread] = None
        self._last_event: Optional[LifecycleEvent] = None

        for listener in config.listeners:
            listener.on_attach(self)

    @property
    def train_sample_count(self) -> int:
        """How many records participate in training."""
        return len(self.train_records)

    @property
    def label_mapping(self) -> LabelMapping:
        """Classes of the dataset, also those absent from the evaluation records."""
        return self.input_records[0].mapping

    @property
    def evaluation_records(self) -> List[DataRecord]:
        """Records the trained model is evaluated on, per the evaluation scope."""
        scope = self.config.evaluation_scope
        if scope is EvaluationScope.ALL:
            return list(self.input_records)
        if scope is EvaluationScope.TRAINING:
            return list(self.train_records)

        selected = set(self.train_indices)
        return [record for i, record in enumerate(self.input_records) if i not in selected]

    def start(self) -> threading.Thread:
        """Run ``preprocess_initialize_and_train`` on a dedicated thread.

        Returns immediately. Raises RuntimeError if already started.
        """
        with self._lock:
            if self._thread is not None or self.status is not TrainingStatus.CONFIGURED:
                raise RuntimeError("training has already been started")
            self._thread = threading.Thread(
                target=self._run, name="LVQ Train Thread", daemon=True
            )
        self._thread.start()
        return self._thread

    def _run(self) -> None:
        try:
            self.preprocess_initialize_and_train()
        except Exception as e:
            # Run failures are stored and posted by _fail, anything else is not
            if e is not self.error:
                logger.error("Train thread failed: %s: %s", type(e).__name__, e)

    def preprocess_initialize_and_train(self) -> None:
        """Normalize, initialize the codebook, and train, on the calling thread.

        Meant to be run off the caller's thread (see ``start``). Any error is
        stored on ``self.error``, posted as a terminal failed event, and
        re-raised.
        """
        self._transition(TrainingStatus.CONFIGURED, TrainingStatus.PREPROCESSING)

        try:
            features, labels = self._preprocess()
            self._initialize_weights(features, labels)

            self._transition(TrainingStatus.PREPROCESSING, TrainingStatus.TRAINING)
            logger.info(
                "Training on %d of %d records (%s, %s, %s)",
                self.train_sample_count, len(self.input_records),
                self.config.weights_initializer.value,
                self.config.normalization.value,
                self.config.distance_metric.value,
            )

            self.model.train(
                features,
                labels,
                LearnRateScheduler(
                    self.config.learn_rate,
                    self.config.quit_learn_rate,
                    self.config.momentum_learn_rate_decay,
                ),
                max_epochs=self.config.max_epochs,
                report_period=self.config.progress_report_period,
                report=self._dispatch,
                generator=self._generator,
                show_progress=self.config.show_progress,
                halt_event=self._halt_requested,
            )
        except Exception as e:
            self._fail(e)
            raise

    def _transition(self, expected: TrainingStatus, new: TrainingStatus) -> None:
        with self._lock:
            if self.status is not expected:
                raise RuntimeError(f"cannot move training from {self.status.value} to {new.value}")
            self.status = new

    def _preprocess(self):
        """Fit the normalizer on the training subset and normalize it."""
        train_features = torch.tensor(
            [record.features for record in self.train_records], dtype=self.model.dtype
        )
        labels = torch.tensor([record.label_id for record in self.train_records], dtype=torch.long)

        normalizer = Normalizer.fit(self.config.normalization, train_features)
        self.model.normalizer = normalizer

        logger.debug("Fitted %r on %d training records", normalizer, len(self.train_records))
        return normalizer.transform(train_features), labels

    def _initialize_weights(self, features: torch.Tensor, labels: torch.Tensor) -> None:
        """One prototype per class, copied from its first drawn record."""
        first_of_class = {}
        for position, label in enumerate(labels.tolist()):
            first_of_class.setdefault(label, position)

        class_ids = sorted(first_of_class)
        positions = [first_of_class[class_id] for class_id in class_ids]

        self.model.initialize_codebook(
            features[positions], torch.tensor(class_ids, dtype=torch.long)
        )
        logger.debug("Initialized codebook with %d prototypes for classes %s",
                     len(class_ids), class_ids)

    def _dispatch(self, epoch: int, learn_rate: float, squared_error: float,
                  finished_training: bool) -> None:
        """Deliver one progress report to every listener, then to the event queue."""
        if finished_training:
            with self._lock:
                self.status = TrainingStatus.TRAINED
            logger.info("Finished training: epoch %d, learn rate %.6f, squared error %.6f",
                        epoch, learn_rate, squared_error)
        else:
            logger.info("Epoch %d: learn rate %.6f, squared error %.6f",
                        epoch, learn_rate, squared_error)

        event = LifecycleEvent(epoch, learn_rate, squared_error, finished_training)
        self._last_event = event

        for listener in self.config.listeners:
            try:
                listener.on_update(self.model, epoch, learn_rate, squared_error, finished_training)
            except Exception as e:
                raise ObserverFailure(
                    f"listener {listener!r} failed at epoch {epoch}: {type(e).__name__}: {e}"
                ) from e

        self._events.put(event)

    def _fail(self, error: BaseException) -> None:
        with self._lock:
            self.status = TrainingStatus.FAILED
            self.error = error

        logger.error("Training failed: %s: %s", type(error).__name__, error)

        last = self._last_event
        self._events.put(LifecycleEvent(
            epoch=last.epoch if last else 0,
            learn_rate=last.learn_rate if last else self.config.learn_rate,
            squared_error=last.squared_error if last else 0.0,
            finished_training=False,
            error=error,
        ))

    def halt(self) -> bool:
        """Ask a running training loop to stop at the next epoch boundary.

        Safe to call from any thread at any time. Before the run starts and
        after it ends this is a no-op.

        Returns:
            bool: True if a running run was asked to stop
        """
        with self._lock:
            if self.status not in (TrainingStatus.PREPROCESSING, TrainingStatus.TRAINING):
                logger.debug("halt() ignored, training is %s", self.status.value)
                return False
            self._halt_requested.set()

        logger.info("Halt requested")
        return True

    def events(self, timeout: Optional[float] = None) -> Iterator[LifecycleEvent]:
        """Yield lifecycle events in order until the terminal one.

        Args:
            timeout: Seconds to wait for each event

        Raises:
            queue.Empty: If no event arrives within ``timeout``
        """
        while True:
            event = self._events.get(timeout=timeout)
            yield event
            if event.terminal:
                return

    def wait(self, timeout: Optional[float] = None) -> TrainingStatus:
        """Block until the worker thread ends and return the final status.

        Raises:
            TimeoutError: If training is still running after ``timeout``
            Exception: The error that failed the run
        """
        if self._thread is not None:
            self._thread.join(timeout)
            if self._thread.is_alive():
                raise TimeoutError(f"training still running after {timeout}s")

        if self.error is not None:
            raise self.error
        return self.status

    def evaluate(self) -> EvaluationReport:
        """Evaluate the trained model on ``evaluation_records``."""
        if self.status is not TrainingStatus.TRAINED:
            raise RuntimeError(f"cannot evaluate, training is {self.status.value}")
        return EvaluationEngine(
            self.model, self.evaluation_records, self.label_mapping
        ).evaluate()

    def __repr__(self) -> str:
        return (f"ModelWrapper(status={self.status.value}, "
                f"train_samples={self.train_sample_count}/{len(self.input_records)})")
