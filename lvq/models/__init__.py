"""
LVQ model components.

Provides the prototype classifier, its distance metrics and learn-rate decay.
"""

from .distance import DistanceMetric
from .scheduler import LearnRateScheduler
from .lvq import LVQModel, ModelState

__all__ = [
    'DistanceMetric',
    'LearnRateScheduler',
    'LVQModel',
    'ModelState',
]
