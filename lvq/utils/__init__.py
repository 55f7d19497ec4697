"""
LVQ utility modules.

Provides logging setup and warning configuration.
"""

from lvq.utils.logging import setup_logging, get_logger
from lvq.utils.warnings import configure_warnings, suppress_preflight_warnings

__all__ = ['setup_logging', 'get_logger', 'configure_warnings', 'suppress_preflight_warnings']
