"""
Overall and per-class classification accuracy.

Every evaluation record is classified by the trained model and compared
to its true label id. Counters are kept per class (indexed by label id)
and globally:

    overall accuracy   = correct / total * 100
    per-class accuracy = class_correct[c] / class_total[c] * 100

A class with no evaluation records has no accuracy. It is reported as
``None`` (rendered as NO_DATA), never as 0% or NaN.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Sequence

import numpy as np

from ..data.record import DataRecord, LabelMapping

logger = logging.getLogger(__name__)

NO_DATA = "no data"


def percentage(correct: int, total: int) -> Optional[float]:
    """correct / total * 100, or None when total is zero."""
    if total == 0:
        return None
    return correct / total * 100.0


@dataclass(frozen=True)
class ClassAccuracy:
    """Accuracy counters for one class."""
    label_id: int
    label_text: str
    total: int
    correct: int

    @property
    def has_data(self) -> bool:
        return self.total > 0

    @property
    def accuracy(self) -> Optional[float]:
        return percentage(self.correct, self.total)

    def describe(self) -> str:
        accuracy = self.accuracy
        return NO_DATA if accuracy is None else f"{accuracy}%"


@dataclass(frozen=True)
class EvaluationReport:
    """Result of evaluating a model over a set of records.

    Attributes:
        total: Records evaluated
        correct: Records classified correctly
        per_class: Counters for every class of the label mapping, by label id
    """
    total: int
    correct: int
    per_class: Dict[int, ClassAccuracy] = field(default_factory=dict)

    @property
    def overall_accuracy(self) -> Optional[float]:
        return percentage(self.correct, self.total)

    def class_accuracy(self, label_id: int) -> Optional[float]:
        return self.per_class[label_id].accuracy

    @property
    def classes_without_data(self) -> List[int]:
        return [label_id for label_id, stats in self.per_class.items() if not stats.has_data]

    def to_dict(self) -> Dict[str, Any]:
        """Plain dict; classes without data map to the NO_DATA sentinel."""
        overall = self.overall_accuracy
        return {
            'total': self.total,
            'correct': self.correct,
            'overall_accuracy': NO_DATA if overall is None else overall,
            'per_class': {
                stats.label_text: NO_DATA if stats.accuracy is None else stats.accuracy
                for stats in self.per_class.values()
            },
        }

    def summary_lines(self) -> List[str]:
        overall = self.overall_accuracy
        lines = [
            "===============================================",
            "  SUMMARY",
            f"    Overall accuracy: {NO_DATA if overall is None else f'{overall}%'}",
            "    Accuracy per class:",
        ]
        for label_id, stats in self.per_class.items():
            lines.append(f"      {label_id} ({stats.label_text}): {stats.describe()}")
        lines.append("===============================================")
        return lines

    def log_summary(self, log: Optional[logging.Logger] = None) -> None:
        log = log or logger
        for line in self.summary_lines():
            log.info(line)


class EvaluationEngine:
    """Classify every record and tally overall and per-class accuracy.

    Args:
        model: Trained model exposing ``classify(features) -> int`` and
            ``get_last_winner_distance() -> float``
        records: Records to evaluate
        mapping (LabelMapping, optional): Known classes. Defaults to the
            mapping of the first record.

    Example:
        >>> report = EvaluationEngine(model, records).evaluate()
        >>> report.overall_accuracy
        96.0
        >>> report.class_accuracy(0)
        100.0
    """

    def __init__(
        self,
        model: Any,
        records: Sequence[DataRecord],
        mapping: Optional[LabelMapping] = None
    ):
        if mapping is None:
            if not records:
                raise ValueError("need a label mapping to evaluate an empty record set")
            mapping = records[0].mapping

        self.model = model
        self.records = list(records)
        self.mapping = mapping

    def evaluate(self) -> EvaluationReport:
        """Run the evaluation.

        Raises:
            UnknownLabelError: If a record or a prediction has a label id
                outside the mapping
        """
        label_ids = self.mapping.label_ids
        num_slots = max(label_ids) + 1

        actual = np.empty(len(self.records), dtype=np.int64)
        predicted = np.empty(len(self.records), dtype=np.int64)

        for i, record in enumerate(self.records):
            actual[i] = record.label_id
            predicted[i] = self.model.classify(record.features)

            # Both lookups raise UnknownLabelError for ids outside the mapping
            actual_text = self.mapping.label_text(int(actual[i]))
            predicted_text = self.mapping.label_text(int(predicted[i]))

            logger.debug(
                "Predicted: %d (%s), actual: %d (%s), dist: %s -----> %s",
                predicted[i], predicted_text, actual[i], actual_text,
                self.model.get_last_winner_distance(),
                "correct" if predicted[i] == actual[i] else "WRONG",
            )

        hits = predicted == actual
        class_total = np.bincount(actual, minlength=num_slots)
        class_correct = np.bincount(actual[hits], minlength=num_slots)

        per_class = {
            label_id: ClassAccuracy(
                label_id=label_id,
                label_text=self.mapping.label_text(label_id),
                total=int(class_total[label_id]),
                correct=int(class_correct[label_id]),
            )
            for label_id in label_ids
        }

        return EvaluationReport(
            total=len(self.records),
            correct=int(hits.sum()),
            per_class=per_class,
        )
