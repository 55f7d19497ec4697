# LVQ Training Infrastructure

from .events import (
    LifecycleEvent,
    ModelStateListener,
    CallbackListener
)
from .config import (
    TrainingConfiguration,
    EvaluationScope
)
from .wrapper import (
    ModelWrapper,
    TrainingStatus
)
from .builder import ModelBuilder

__all__ = [
    'LifecycleEvent',
    'ModelStateListener',
    'CallbackListener',
    'TrainingConfiguration',
    'EvaluationScope',
    'ModelWrapper',
    'TrainingStatus',
    'ModelBuilder'
]
