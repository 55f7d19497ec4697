"""
Learn-rate scheduling for LVQ training.

Decays the learn rate exponentially per epoch and reports when it has
fallen below the quit threshold.
"""


class LearnRateScheduler:
    """Exponential learn-rate decay with a quit threshold.

    Mathematical formulation:
        α(epoch) = α_initial * decay^epoch

    Training stops once α drops below ``quit_learn_rate``.

    Args:
        learn_rate (float): Starting learn rate
        quit_learn_rate (float): Threshold below which training stops
        decay (float): Multiplicative decay per epoch, in (0, 1]

    Example:
        >>> scheduler = LearnRateScheduler(0.3, 0.001, 0.97)
        >>> scheduler.step()   # 0.291
        >>> scheduler.step()   # 0.28227
    """

    def __init__(self, learn_rate: float, quit_learn_rate: float, decay: float):
        assert learn_rate > quit_learn_rate > 0, "Need learn_rate > quit_learn_rate > 0"
        assert 0 < decay <= 1, "Decay must be in (0, 1]"

        self.initial = learn_rate
        self.quit = quit_learn_rate
        self.decay = decay

        self.current_learn_rate = learn_rate
        self.epoch = 0

    def step(self) -> float:
        """Advance one epoch and return the decayed learn rate."""
        self.epoch += 1
        self.current_learn_rate = self.initial * (self.decay ** self.epoch)
        return self.current_learn_rate

    def get_learn_rate(self) -> float:
        """Get current learn rate without advancing epoch."""
        return self.current_learn_rate

    @property
    def exhausted(self) -> bool:
        """Whether the learn rate has decayed below the quit threshold."""
        return self.current_learn_rate < self.quit

