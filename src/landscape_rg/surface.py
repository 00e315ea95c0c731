"""Height and normal sampling used by placement"""

from math import acos, degrees, sqrt
from typing import Callable

from .common import Bounds
from .grid import Grid

Vector = tuple[float, float, float]
SurfaceSampler = Callable[[float, float], tuple[float, Vector]]
"""It maps grid coordinates ``(x, y)`` to ``(height, normal)``; height is normalized, normal is
a unit vector ``(x, y, up)``."""

default_bounds = Bounds()


class GridSurface:
    """Samples an elevation grid as a surface stretched over `bounds`.

    Height is interpolated bilinearly, the normal is computed by central differences scaled by
    world cell size and vertical extent.
    """

    def __init__(self, elevation: Grid, bounds: Bounds = default_bounds) -> None:
        bounds.check()
        self._elevation = elevation
        self._bounds = bounds
        # rise per unit of elevation difference over two cells
        self._scale_x = bounds.height / (2 * bounds.size_x / max(elevation.width - 1, 1))
        self._scale_y = bounds.height / (2 * bounds.size_y / max(elevation.height - 1, 1))

    @property
    def elevation(self) -> Grid:
        return self._elevation

    @property
    def bounds(self) -> Bounds:
        return self._bounds

    def __call__(self, x: float, y: float) -> tuple[float, Vector]:
        grid = self._elevation
        height = grid.sample(x, y)

        d_x = (grid.sample(x + 1, y) - grid.sample(x - 1, y)) * self._scale_x
        d_y = (grid.sample(x, y + 1) - grid.sample(x, y - 1)) * self._scale_y
        length = sqrt(d_x * d_x + d_y * d_y + 1)
        return height, (-d_x / length, -d_y / length, 1 / length)


def slope_angle(normal: Vector) -> float:
    """It is the angle of the surface to the horizontal, in degrees."""

    return degrees(acos(min(max(normal[2], -1.), 1.)))
