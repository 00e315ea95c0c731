"""Dense grid of floats used for elevation and masks"""

from __future__ import annotations

from math import floor
from typing import Iterable, Union

import numpy as np
from PIL import Image

from .common import InvalidDimensionsError


class Grid:
    """It is a dense 2D grid of floats.

    Values are expected in [0, 1] but not enforced by the constructor, see :meth:`clamp` and
    :func:`as_grid`. Cells are addressed as ``(x, y)``, i.e. ``(column, row)``, everywhere in the
    package. The underlying :class:`numpy.ndarray` is row-major with shape
    ``(height, width)``, therefore ``grid.get(x, y) == grid.data[y, x]``.
    """

    def __init__(self, data: Union[np.ndarray, Iterable]) -> None:
        array = np.array(data, dtype=np.float64)
        if array.ndim != 2:
            raise InvalidDimensionsError("Grid data should be two dimensional, not %d" %
                                         array.ndim)
        if array.shape[0] <= 0 or array.shape[1] <= 0:
            raise InvalidDimensionsError("Grid dimensions should be positive")
        self._data = array

    @classmethod
    def full(cls, width: int, height: int, value: float = 0.) -> Grid:
        if not isinstance(width, int) or not isinstance(height, int):
            raise TypeError("Arguments 'width' and 'height' should be integer numbers")
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError("Arguments 'width' and 'height' should be positive")
        return cls(np.full((height, width), value, dtype=np.float64))

    @classmethod
    def zeros(cls, width: int, height: int) -> Grid:
        return cls.full(width, height, 0.)

    @classmethod
    def from_image(cls, image: Image.Image) -> Grid:
        """Reads a texture handed over by an external collaborator.

        Images of mode ``F`` are clamped to [0, 1], everything else is converted to greyscale and
        scaled to [0, 1].

        :param image: It is the texture.
        :type image: :class:`PIL.Image.Image`
        :return: A new grid of the same size.
        :rtype: :class:`Grid`
        """

        if image.mode == 'F':
            return cls(np.asarray(image, dtype=np.float64)).clamp()
        return cls(np.asarray(image.convert('L'), dtype=np.float64) / 255)

    def to_image(self) -> Image.Image:
        """Creates a greyscale texture, values are clamped to [0, 1]."""

        return Image.fromarray(np.rint(np.clip(self._data, 0, 1) * 255).astype(np.uint8))

    @property
    def data(self) -> np.ndarray:
        """It is the underlying array, indexed ``[row, column]``."""

        return self._data

    @property
    def width(self) -> int:
        return self._data.shape[1]

    @property
    def height(self) -> int:
        return self._data.shape[0]

    @property
    def size(self) -> tuple[int, int]:
        """It is ``(width, height)``."""

        return self.width, self.height

    def __repr__(self) -> str:
        return "%s(%dx%d)" % (self.__class__.__name__, self.width, self.height)

    def copy(self) -> Grid:
        return Grid(self._data.copy())

    def in_bounds(self, x: float, y: float) -> bool:
        return 0 <= x <= self.width - 1 and 0 <= y <= self.height - 1

    def get(self, x: int, y: int) -> float:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError("Cell (%d, %d) is out of %r" % (x, y, self))
        return float(self._data[y, x])

    def set(self, x: int, y: int, value: float) -> None:
        if not (0 <= x < self.width and 0 <= y < self.height):
            raise IndexError("Cell (%d, %d) is out of %r" % (x, y, self))
        self._data[y, x] = value

    def sample(self, x: float, y: float) -> float:
        """Samples the grid bilinearly.

        Coordinates outside of the grid are clamped to the nearest edge.

        :param x: It is the column coordinate.
        :type x: :class:`float`
        :param y: It is the row coordinate.
        :type y: :class:`float`
        :return: Interpolated value.
        :rtype: :class:`float`
        """

        x = min(max(x, 0.), self.width - 1.)
        y = min(max(y, 0.), self.height - 1.)
        x0, y0 = floor(x), floor(y)
        x1, y1 = min(x0 + 1, self.width - 1), min(y0 + 1, self.height - 1)
        tx, ty = x - x0, y - y0
        data = self._data
        top = data[y0, x0] * (1 - tx) + data[y0, x1] * tx
        bottom = data[y1, x0] * (1 - tx) + data[y1, x1] * tx
        return float(top * (1 - ty) + bottom * ty)

    def sample_normalized(self, u: float, v: float) -> float:
        """Samples the grid bilinearly at normalized coordinates in [0, 1]."""

        return self.sample(u * (self.width - 1), v * (self.height - 1))

    def resampled(self, width: int, height: int) -> Grid:
        """Resizes the grid using bilinear filter.

        It is used to match a lower resolution mask to the elevation grid.
        """

        if (width, height) == self.size:
            return self.copy()
        image = Image.fromarray(self._data.astype(np.float32))
        image = image.resize((width, height), resample=Image.Resampling.BILINEAR)
        return Grid(np.asarray(image, dtype=np.float64))

    def clamp(self) -> Grid:
        """Clamps values to [0, 1] in place."""

        np.clip(self._data, 0, 1, out=self._data)
        return self

    def binary(self, threshold: float = .5) -> Grid:
        """Creates a mask set where value is at or above `threshold`."""

        return Grid((self._data >= threshold).astype(np.float64))

    def union(self, other: Grid) -> Grid:
        check_same_size(self, other)
        return Grid(np.maximum(self._data, other.data))

    def intersection(self, other: Grid) -> Grid:
        check_same_size(self, other)
        return Grid(np.minimum(self._data, other.data))

    def difference(self, other: Grid) -> Grid:
        check_same_size(self, other)
        return Grid(np.clip(self._data - other.data, 0, 1))


def check_same_size(*grids: Grid) -> None:
    """Raises :exc:`.InvalidDimensionsError` unless each grid has the same size."""

    sizes = {grid.size for grid in grids}
    if len(sizes) > 1:
        raise InvalidDimensionsError("Grid sizes don't match: %s" %
                                     ', '.join('%dx%d' % size for size in sorted(sizes)))


def as_grid(value: Union[Grid, np.ndarray, Image.Image], size: tuple[int, int] = None) -> Grid:
    """Accepts grids, arrays and textures, resampling them to `size` if given.

    Arrays and textures are handed over by external collaborators, their values are clamped to
    [0, 1]. Grids are taken as they are.
    """

    if isinstance(value, Grid):
        grid = value
    elif isinstance(value, Image.Image):
        grid = Grid.from_image(value)
    elif isinstance(value, np.ndarray):
        grid = Grid(value).clamp()
    else:
        raise TypeError("Expected a Grid, numpy array or image, not '%s'" % type(value).__name__)
    if size is not None and grid.size != size:
        grid = grid.resampled(*size)
    return grid
