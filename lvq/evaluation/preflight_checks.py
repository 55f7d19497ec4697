"""
Preflight checks for LVQ training runs.

Flags configurations that are valid but likely to produce a misleading
model or misleading accuracy numbers, before training starts.

Usage:
    from lvq.evaluation.preflight_checks import run_preflight_checks

    wrapper = builder.build()
    run_preflight_checks(wrapper)
    wrapper.start()
"""

import logging
import math
import warnings
from collections import Counter
from typing import Any, Dict, Sequence

from ..data.record import DataRecord, LabelMapping
from ..training.config import EvaluationScope

logger = logging.getLogger(__name__)


class PreflightCheckError(Exception):
    """Raised when a preflight check fails in strict mode."""
    pass


class PreflightCheckWarning(UserWarning):
    """Issued when a preflight check fails."""
    pass


def check_class_coverage(
    train_records: Sequence[DataRecord],
    mapping: LabelMapping,
    balance_threshold: float = 0.5
) -> Dict[str, Any]:
    """
    Check that the training subset covers every class, reasonably evenly.

    The codebook gets one prototype per class present in the training
    subset, so a missing class can never be predicted.

    Args:
        train_records: Training subset
        mapping: Known classes
        balance_threshold: Warn if the smallest class has less than this
            fraction of the largest class's samples

    Returns:
        dict: Class counts and coverage statistics
    """
    logger.info("Checking training subset class coverage...")

    class_counts = Counter(record.label_id for record in train_records)
    missing = [label_id for label_id in mapping.label_ids if label_id not in class_counts]

    if missing:
        names = ", ".join(mapping.label_text(label_id) for label_id in missing)
        warnings.warn(
            f"Training subset has no samples of {len(missing)} class(es): {names}. "
            f"The model will never predict them. Consider N_RANDOM_RATIONAL.",
            PreflightCheckWarning
        )

    balance = 0.0
    if class_counts:
        balance = min(class_counts.values()) / max(class_counts.values())
        if not missing and balance < balance_threshold:
            warnings.warn(
                f"Imbalanced training subset: smallest/largest class ratio {balance:.2f} "
                f"(threshold: {balance_threshold:.2f})",
                PreflightCheckWarning
            )

    return {
        'class_counts': dict(class_counts),
        'missing_classes': missing,
        'balance_ratio': balance,
        'is_covered': not missing,
    }


def check_learn_rate_schedule(
    learn_rate: float,
    quit_learn_rate: float,
    decay: float,
    max_epochs: int
) -> Dict[str, Any]:
    """
    Check the learn-rate schedule.

    Returns:
        dict: Number of epochs until the learn rate drops below the quit
        threshold (None when decay is 1) and which condition ends training
    """
    logger.info("Checking learn-rate schedule (%s -> %s, decay %s)...",
                learn_rate, quit_learn_rate, decay)

    if learn_rate > 1.0:
        warnings.warn(
            f"Learn rate {learn_rate} > 1.0 moves prototypes past the samples "
            f"they are pulled towards",
            PreflightCheckWarning
        )

    # Smallest e with learn_rate * decay^e < quit_learn_rate
    epochs_to_quit = None
    if decay < 1.0:
        epochs_to_quit = math.floor(math.log(quit_learn_rate / learn_rate) / math.log(decay)) + 1

    stops_on_learn_rate = epochs_to_quit is not None and epochs_to_quit <= max_epochs

    return {
        'epochs_to_quit_learn_rate': epochs_to_quit,
        'expected_epochs': epochs_to_quit if stops_on_learn_rate else max_epochs,
        'stops_on_learn_rate': stops_on_learn_rate,
    }


def check_evaluation_scope(scope: EvaluationScope) -> Dict[str, Any]:
    """
    Check whether evaluation records overlap the training subset.
    """
    scope = EvaluationScope(scope)
    overlaps = scope is not EvaluationScope.HELD_OUT

    if overlaps:
        warnings.warn(
            f"Evaluation scope '{scope.value}' includes training records; "
            f"accuracy will overstate performance on unseen data. "
            f"Use EvaluationScope.HELD_OUT for a separate test set.",
            PreflightCheckWarning
        )

    return {'scope': scope.value, 'overlaps_training': overlaps}


def run_preflight_checks(wrapper: Any, strict: bool = False) -> Dict[str, Any]:
    """
    Run all preflight checks for a configured ModelWrapper.

    Args:
        wrapper: ModelWrapper that has not started training
        strict: Raise PreflightCheckError instead of warning

    Returns:
        dict: Results of every check

    Raises:
        PreflightCheckError: In strict mode, if any check warned
    """
    config = wrapper.config
    mapping = wrapper.input_records[0].mapping

    with warnings.catch_warnings(record=True) as caught:
        warnings.simplefilter("always", PreflightCheckWarning)

        results = {
            'class_coverage': check_class_coverage(wrapper.train_records, mapping),
            'learn_rate_schedule': check_learn_rate_schedule(
                config.learn_rate,
                config.quit_learn_rate,
                config.momentum_learn_rate_decay,
                config.max_epochs,
            ),
            'evaluation_scope': check_evaluation_scope(config.evaluation_scope),
        }

    problems = [w for w in caught if issubclass(w.category, PreflightCheckWarning)]

    if strict and problems:
        raise PreflightCheckError(
            "Preflight checks failed:\n" + "\n".join(f"  - {w.message}" for w in problems)
        )

    # Re-issue outside the recording context so callers' filters apply
    for w in problems:
        warnings.warn(str(w.message), PreflightCheckWarning)
    for w in caught:
        if not issubclass(w.category, PreflightCheckWarning):
            warnings.warn_explicit(w.message, w.category, w.filename, w.lineno)

    if problems:
        logger.warning("%d preflight check(s) raised warnings", len(problems))
    else:
        logger.info("All preflight checks passed")

    results['warnings'] = [str(w.message) for w in problems]
    return results
