"""Auto-gain: a running average used as the normalisation denominator."""

from bannervis.config import GAIN_FLOOR, GAIN_TAU


class GainController:
    """Exponential moving average, avg += (sample - avg) / tau.

    Starts at 1 so the first frames never divide by zero, and is never reset:
    it is what makes the display look the same at any volume.
    """

    def __init__(self, tau: float = GAIN_TAU, initial: float = 1.0, floor: float | None = GAIN_FLOOR):
        if tau < 1:
            raise ValueError(f"tau must be >= 1, got {tau}")
        self.tau = tau
        self.floor = floor
        self.value = float(initial)

    def update(self, sample: float) -> float:
        self.value += (sample - self.value) / self.tau
        if self.floor is not None and self.value < self.floor:
            self.value = self.floor
        return self.value
