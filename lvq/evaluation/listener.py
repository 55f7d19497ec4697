"""
Listener that evaluates the model once training has finished.
"""

import logging
from typing import Any, Optional

from ..training.events import ModelStateListener
from .accuracy import EvaluationEngine, EvaluationReport

logger = logging.getLogger(__name__)


class EvaluationListener(ModelStateListener):
    """Evaluates the trained model on the wrapper's evaluation records.

    Periodic reports are ignored. On the completion report the listener
    runs an EvaluationEngine, logs the summary and keeps the report on
    ``self.report``.

    Example:
        >>> listener = EvaluationListener()
        >>> wrapper = ModelBuilder().with_train_data(records, 30) \\
        ...     .with_model_state_listener(listener).build()
        >>> wrapper.start()
        >>> wrapper.wait()
        >>> listener.report.overall_accuracy
    """

    def __init__(self, log_summary: bool = True):
        self.log_summary = log_summary
        self.wrapper: Optional[Any] = None
        self.report: Optional[EvaluationReport] = None

    def on_attach(self, wrapper: Any) -> None:
        self.wrapper = wrapper

    def on_update(self, model, epoch, learn_rate, squared_error, finished_training):
        if not finished_training:
            return

        if self.wrapper is None:
            raise RuntimeError("EvaluationListener is not attached to a ModelWrapper")

        logger.info("The model has finished training after %d epochs, evaluating", epoch)

        self.report = EvaluationEngine(
            model, self.wrapper.evaluation_records, self.wrapper.label_mapping
        ).evaluate()

        if self.log_summary:
            self.report.log_summary(logger)
