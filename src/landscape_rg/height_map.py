"""Terrain generator"""

from typing import Iterable, Optional

import numpy as np
import structlog
from opensimplex import OpenSimplex

from .common import (InvalidDimensionsError, MountainConfig, NoiseConfig, PlateauArea, SeedType,
                     get_safe_seed)
from .grid import Grid

logger = structlog.get_logger()

default_noise_config = NoiseConfig()
default_mountain_config = MountainConfig()


class NoiseField:
    """It is a seeded coherent noise field with values in [0, 1].

    Used wherever values have to vary smoothly over neighbouring cells, e.g. clustering zones or
    density gates.
    """

    def __init__(self, seed: int, frequency: float = 1., offset: tuple[float, float] = (0., 0.)
                 ) -> None:
        self._noise = OpenSimplex(seed=seed)
        self.frequency = frequency
        self.offset = offset

    @classmethod
    def from_rng(cls, rng: np.random.Generator, frequency: float = 1.) -> 'NoiseField':
        """Creates a field with seed and offset drawn from `rng`."""

        seed = int(rng.integers(0, 1 << 31))
        offset = tuple(float(value) for value in rng.uniform(0, 1000, 2))
        return cls(seed, frequency, offset)

    def value(self, x: float, y: float) -> float:
        sample = self._noise.noise2(x * self.frequency + self.offset[0],
                                    y * self.frequency + self.offset[1])
        return min(max((sample + 1) / 2, 0.), 1.)

    def array(self, width: int, height: int) -> np.ndarray:
        """Samples each cell, returns an array of shape ``(height, width)``."""

        xs = np.arange(width, dtype=np.float64) * self.frequency + self.offset[0]
        ys = np.arange(height, dtype=np.float64) * self.frequency + self.offset[1]
        return np.clip((self._noise.noise2array(xs, ys) + 1) / 2, 0, 1)


class HeightMap:
    """It is a fractal (multi-octave) noise generator.

    Each octave is an OpenSimplex layer mapped to [0, 1]; layers are summed with decreasing
    amplitude and increasing frequency and divided by the sum of amplitudes, so every value of the
    result is in [0, 1] regardless of the number of octaves.
    """

    def __init__(self, width: int, height: int, config: NoiseConfig = default_noise_config, *,
                 seed: SeedType = None, bit_length: int = 64) -> None:
        """Initializes height map generation.

        For more on parameters see also :class:`.NoiseConfig`.

        :param width: It is the number of columns, needs to be positive.
        :type width: :class:`int`
        :param height: It is the number of rows, needs to be positive.
        :type height: :class:`int`
        :param config: It contains scale, octaves, persistence, lacunarity and offset.
        :type config: :class:`.NoiseConfig`
        :param seed: It is used to seed noise and its random offset.
        :type seed: :data:`.SeedType`
        :param bit_length: It is used for creating a safe seed.
        :type bit_length: :class:`int`
        """

        config.check()
        if not isinstance(width, int) or not isinstance(height, int):
            raise TypeError("Arguments 'width' and 'height' should be integer numbers")
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError("Arguments 'width' and 'height' should be positive")

        self._width = width
        self._height = height
        self._config = config
        self._seed = get_safe_seed(seed, bit_length)

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def max_amplitude(self) -> float:
        """It is the largest possible sum of octave amplitudes."""

        total = 0.
        amplitude = 1.
        for _ in range(self._config.octaves):
            total += amplitude
            amplitude *= self._config.persistence
        return total

    def generate(self) -> Grid:
        """Generates a height map.

        :return: Generated height map.
        :rtype: :class:`.Grid`
        """

        rng = np.random.default_rng(self._seed)
        noise = OpenSimplex(seed=int(rng.integers(0, 1 << 31)))
        offset_x, offset_y = rng.uniform(0, 1000, 2) + self._config.offset

        xs = np.arange(self._width, dtype=np.float64) / self._config.scale
        ys = np.arange(self._height, dtype=np.float64) / self._config.scale

        accumulated = np.zeros((self._height, self._width), dtype=np.float64)
        amplitude = 1.
        frequency = 1.
        for _ in range(self._config.octaves):
            layer = noise.noise2array(xs * frequency + offset_x, ys * frequency + offset_y)
            accumulated += np.clip((layer + 1) / 2, 0, 1) * amplitude
            amplitude *= self._config.persistence
            frequency *= self._config.lacunarity

        grid = Grid(accumulated / self.max_amplitude).clamp()
        logger.info("Height map generated", width=self._width, height=self._height,
                    octaves=self._config.octaves)
        return grid


def synthesize(width: int, height: int, config: NoiseConfig = default_noise_config,
               seed: SeedType = None) -> Grid:
    """Shorthand for ``HeightMap(width, height, config, seed=seed).generate()``."""

    return HeightMap(width, height, config, seed=seed).generate()


class MountainMap:
    """It is a single mountain rising from outside of the grid.

    The summit is placed :attr:`~.MountainConfig.edge_offset` cells beyond a randomly chosen edge,
    at a random position along it. The base shape is a radial profile
    ``clamp(1 - distance / radius, 0, 1) ** smoothness``; fractal undulation centred on zero is
    added in proportion to the profile, so terrain beyond the foot of the mountain stays at zero.
    """

    def __init__(self, width: int, height: int, config: MountainConfig = default_mountain_config,
                 *, seed: SeedType = None, bit_length: int = 64) -> None:
        """Initializes mountain generation.

        For more on parameters see also :class:`.MountainConfig`.

        :param width: It is the number of columns, needs to be positive.
        :type width: :class:`int`
        :param height: It is the number of rows, needs to be positive.
        :type height: :class:`int`
        :param config: It contains the shape of the mountain and its undulation.
        :type config: :class:`.MountainConfig`
        :param seed: It is used to place the summit and to seed noise.
        :type seed: :data:`.SeedType`
        :param bit_length: It is used for creating a safe seed.
        :type bit_length: :class:`int`
        """

        config.check()
        if not isinstance(width, int) or not isinstance(height, int):
            raise TypeError("Arguments 'width' and 'height' should be integer numbers")
        if width <= 0 or height <= 0:
            raise InvalidDimensionsError("Arguments 'width' and 'height' should be positive")

        self._width = width
        self._height = height
        self._config = config
        self._seed = get_safe_seed(seed, bit_length)
        self._summit = None

    @property
    def size(self) -> tuple[int, int]:
        return self._width, self._height

    @property
    def summit(self) -> Optional[tuple[float, float]]:
        """It is the ``(x, y)`` of the summit of the last generated mountain."""

        return self._summit

    def _place_summit(self, rng: np.random.Generator) -> tuple[float, float]:
        offset = self._config.edge_offset
        edge = int(rng.integers(4))
        along_x = float(rng.uniform(0, self._width - 1))
        along_y = float(rng.uniform(0, self._height - 1))
        if edge == 0:
            return along_x, -offset
        if edge == 1:
            return self._width - 1 + offset, along_y
        if edge == 2:
            return along_x, self._height - 1 + offset
        return -offset, along_y

    def generate(self) -> Grid:
        """Generates a mountain.

        :return: Generated height map.
        :rtype: :class:`.Grid`
        """

        config = self._config
        rng = np.random.default_rng(self._seed)
        self._summit = summit_x, summit_y = self._place_summit(rng)
        noise = OpenSimplex(seed=int(rng.integers(0, 1 << 31)))
        offset_x, offset_y = rng.uniform(0, 1000, 2)

        xs = np.arange(self._width, dtype=np.float64)
        ys = np.arange(self._height, dtype=np.float64)
        distance = np.hypot(xs[None, :] - summit_x, ys[:, None] - summit_y)
        profile = np.clip(1 - distance / config.radius, 0, 1) ** config.smoothness

        # noise periods per cell
        base = config.noise_scale / max(self._width, self._height)
        undulation = np.zeros((self._height, self._width), dtype=np.float64)
        amplitude = 1.
        frequency = 1.
        total = 0.
        for _ in range(config.octaves):
            layer = noise.noise2array(xs * base * frequency + offset_x,
                                      ys * base * frequency + offset_y)
            undulation += np.clip(layer, -1, 1) / 2 * amplitude
            total += amplitude
            amplitude *= config.persistence
            frequency *= config.lacunarity
        undulation /= total

        elevation = profile * (1 + undulation * config.noise_strength) * config.max_height
        grid = Grid(elevation).clamp()
        logger.info("Mountain generated", width=self._width, height=self._height,
                    summit=self._summit, octaves=config.octaves)
        return grid


def synthesize_mountain(width: int, height: int,
                        config: MountainConfig = default_mountain_config,
                        seed: SeedType = None) -> Grid:
    """Shorthand for ``MountainMap(width, height, config, seed=seed).generate()``."""

    return MountainMap(width, height, config, seed=seed).generate()


def apply_plateau(grid: Grid, area: PlateauArea) -> Grid:
    """Blends a rectangle of `grid` toward a flat height in place.

    Blend factor is the distance to the nearest edge of the rectangle divided by
    :attr:`~.PlateauArea.falloff` and clamped to [0, 1]; it weighs the original height against
    :attr:`~.PlateauArea.target`. Edge cells take the target, cells at least ``falloff`` inside
    keep their height, so a plateau is a flat rim around the untouched inside. Zero falloff
    flattens the whole rectangle. Parts of the rectangle outside of the grid are ignored.

    :param grid: It is the elevation grid, mutated.
    :type grid: :class:`.Grid`
    :param area: It is the rectangle with target height and falloff.
    :type area: :class:`.PlateauArea`
    :return: `grid` itself.
    :rtype: :class:`.Grid`
    """

    area.check()

    x0, x1 = max(area.x, 0), min(area.x + area.width, grid.width)
    y0, y1 = max(area.y, 0), min(area.y + area.height, grid.height)
    if x0 >= x1 or y0 >= y1:
        return grid

    xs = np.arange(x0, x1)
    ys = np.arange(y0, y1)
    to_edge_x = np.minimum(xs - area.x, area.x + area.width - 1 - xs)
    to_edge_y = np.minimum(ys - area.y, area.y + area.height - 1 - ys)
    to_edge = np.minimum(to_edge_y[:, None], to_edge_x[None, :]).astype(np.float64)

    if area.falloff > 0:
        blend = np.clip(to_edge / area.falloff, 0, 1)
    else:
        blend = np.zeros_like(to_edge)

    region = grid.data[y0:y1, x0:x1]
    region[...] = region * blend + area.target * (1 - blend)
    return grid


def apply_plateaus(grid: Grid, areas: Iterable[PlateauArea]) -> Grid:
    """Applies each area in order, later areas overwrite earlier ones where they overlap."""

    for area in areas:
        apply_plateau(grid, area)
        logger.info("Plateau applied", name=area.name, target=area.target)
    return grid
