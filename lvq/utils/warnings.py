"""
Warning configuration utilities for LVQ.

Preflight checks report through ``warnings`` so callers can silence,
record or escalate them with the usual filters.
"""

import os
import warnings


def suppress_preflight_warnings():
    """
    Suppress PreflightCheckWarning.

    Useful for batch runs where configurations are known to trade evaluation
    rigor for comparability (e.g. evaluating on the full dataset).
    """
    from lvq.evaluation.preflight_checks import PreflightCheckWarning

    warnings.filterwarnings('ignore', category=PreflightCheckWarning)


def configure_warnings(
    suppress_preflight: bool = False,
    errors: bool = False
):
    """
    Configure warning behavior for LVQ training/evaluation.

    Args:
        suppress_preflight: Ignore preflight check warnings
        errors: Turn preflight check warnings into exceptions

    The LVQ_SUPPRESS_WARNINGS=1 environment variable forces suppression.

    Example:
        >>> from lvq.utils.warnings import configure_warnings
        >>> configure_warnings(suppress_preflight=True)
    """
    from lvq.evaluation.preflight_checks import PreflightCheckWarning

    if suppress_preflight or os.getenv('LVQ_SUPPRESS_WARNINGS', '0') == '1':
        suppress_preflight_warnings()
    elif errors:
        warnings.filterwarnings('error', category=PreflightCheckWarning)
