"""
LVQ evaluation modules.

Provides accuracy evaluation, the evaluating listener and preflight checks.
"""

from lvq.evaluation.accuracy import (
    EvaluationEngine,
    EvaluationReport,
    ClassAccuracy,
    NO_DATA,
)

from lvq.evaluation.listener import EvaluationListener

from lvq.evaluation.preflight_checks import (
    run_preflight_checks,
    check_class_coverage,
    check_learn_rate_schedule,
    check_evaluation_scope,
    PreflightCheckError,
    PreflightCheckWarning
)

__all__ = [
    # Accuracy
    'EvaluationEngine',
    'EvaluationReport',
    'ClassAccuracy',
    'NO_DATA',
    # Listener
    'EvaluationListener',
    # Preflight checks
    'run_preflight_checks',
    'check_class_coverage',
    'check_learn_rate_schedule',
    'check_evaluation_scope',
    'PreflightCheckError',
    'PreflightCheckWarning',
]
