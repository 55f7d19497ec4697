"""
Training lifecycle events and listeners.

Every progress report of a training run is delivered twice: synchronously
to each attached ModelStateListener on the training thread, and as a
LifecycleEvent posted to the wrapper's event queue for consumers on other
threads.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Callable, Optional


@dataclass(frozen=True)
class LifecycleEvent:
    """One progress report of a training run.

    Attributes:
        epoch: Epochs completed when the report was made
        learn_rate: Learn rate used in that epoch
        squared_error: Summed squared winner distance of that epoch
        finished_training: True only for the completion report
        error: Set on the terminal event of a failed run
    """
    epoch: int
    learn_rate: float
    squared_error: float
    finished_training: bool
    error: Optional[BaseException] = None

    @property
    def failed(self) -> bool:
        return self.error is not None

    @property
    def terminal(self) -> bool:
        """Whether no further events follow this one."""
        return self.finished_training or self.failed


class ModelStateListener(ABC):
    """Callback notified of training progress.

    ``on_update`` runs on the training thread and blocks the next epoch
    while it runs. An exception raised from it aborts the run.

    Example:
        >>> class PrintListener(ModelStateListener):
        ...     def on_update(self, model, epoch, learn_rate, squared_error, finished_training):
        ...         print(epoch, learn_rate, squared_error)
    """

    def on_attach(self, wrapper: Any) -> None:
        """Called once when a ModelWrapper is created with this listener."""
        pass

    @abstractmethod
    def on_update(
        self,
        model: Any,
        epoch: int,
        learn_rate: float,
        squared_error: float,
        finished_training: bool
    ) -> None:
        pass


class CallbackListener(ModelStateListener):
    """Adapts a plain function with the ``on_update`` signature."""

    def __init__(self, callback: Callable[[Any, int, float, float, bool], None]):
        self.callback = callback

    def on_update(self, model, epoch, learn_rate, squared_error, finished_training):
        self.callback(model, epoch, learn_rate, squared_error, finished_training)

    def __repr__(self) -> str:
        name = getattr(self.callback, '__qualname__', repr(self.callback))
        return f"CallbackListener({name})"


def as_listener(listener: Any) -> ModelStateListener:
    """Wrap plain callables, pass listeners through.

    Raises:
        TypeError: If ``listener`` is neither
    """
    if isinstance(listener, ModelStateListener):
        return listener
    if callable(listener):
        return CallbackListener(listener)
    raise TypeError(
        f"listener must be a ModelStateListener or a callable, got {type(listener).__name__}"
    )
