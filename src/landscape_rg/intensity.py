from typing import Union

from .grid import Grid
from .height_map import NoiseField
from .point_process import IntensityFunction


class MaskIntensityFunction(IntensityFunction):
    """Accepts cells whose mask value is at or above a threshold.

    The uniform draw is ignored, acceptance only depends on the mask.
    """

    def __init__(self, rate: Union[int, float], mask: Grid, threshold: float = .5) -> None:
        super().__init__()
        self._rate = rate
        self._mask = mask
        self._threshold = threshold

    @property
    def rate(self):
        return self._rate

    def is_accepted(self, value: tuple[int, ...], threshold: float) -> bool:
        x, y = value[:2]
        return self._mask.get(x, y) >= self._threshold


class UniformDensityFunction(IntensityFunction):
    """Accepts a candidate with fixed probability `density`."""

    def __init__(self, density: float) -> None:
        super().__init__()
        self._density = density

    @property
    def rate(self):
        return self._density

    def is_accepted(self, value, threshold):
        return threshold < self._density


class NoiseDensityFunction(IntensityFunction):
    """Accepts a candidate with probability `density` scaled by a coherent noise field.

    Neighbouring candidates share similar probabilities, so accepted points gather in clusters.
    """

    def __init__(self, density: float, noise: NoiseField) -> None:
        super().__init__()
        self._density = density
        self._noise = noise

    @property
    def rate(self):
        return self._density

    def is_accepted(self, value, threshold):
        x, y = value[:2]
        return threshold < self._density * self._noise.value(x, y)
