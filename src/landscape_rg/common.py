"""Commonly used classes and functions"""

from __future__ import annotations

import hashlib
import random
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any, Optional, Union

if TYPE_CHECKING:
    from .grid import Grid

PointType = tuple[int, int]
"""It is the type of grid cells, ``(column, row)``."""
SeedType = Union[None, int, str, bytes, bytearray]
"""It is the type of various seeds."""


class InvalidDimensionsError(ValueError):
    """Grid sizes are not positive or don't match."""


class PathNotFoundError(Exception):
    """Endpoints are out of bounds or no route connects them."""


class InsufficientCandidatesError(Exception):
    """Too few valid candidates to produce a usable result."""


class DegradedResultWarning(UserWarning):
    """Attempt limit hit, the result is partial but still usable."""


def get_safe_seed(seed: Any, bit_length: int) -> int:
    """Creates a safe integer seed.

    :param seed: Only  :class:`None`, :class:`int`, :class:`str`, :class:`bytes`, and
        :class:`bytearray` are supported types.
    :type seed: :class:`Any` (technically)
    :param bit_length: Needs to be positive and less than 64.
    :type bit_length: :class:`int`
    :return: A number safe to be used with :mod:`numpy.random` functions.
    :raises: :exc:`TypeError`, :exc:`ValueError`
    """
    if not isinstance(bit_length, int):
        raise TypeError("Argument 'bit_length' should be integer number, not '%s'" %
                        type(bit_length).__name__)
    if bit_length < 0:
        raise ValueError("Argument 'bit_length' should be positive")
    if bit_length > 64:
        raise ValueError("Argument 'bit_length' should be less than 64")

    if seed is None:
        seed = random.randint(0, 1 << bit_length - 1)  # signed
    elif not isinstance(seed, int):
        if isinstance(seed, (str, bytes, bytearray)):
            if isinstance(seed, str):
                seed = seed.encode()
            seed += hashlib.sha512(seed).digest()
            seed = int.from_bytes(seed, 'big')
        else:
            raise TypeError("The only supported seed types are: "
                            "None, int, str, bytes, and bytearray")
    return seed & (1 << bit_length) - 1  # masked


def derive_seed(seed: int, label: str, bit_length: int = 64) -> int:
    """Derives an independent seed for a named stage of a run.

    :param seed: It is a safe seed (see: :func:`get_safe_seed`).
    :type seed: :class:`int`
    :param label: It is the name of the stage.
    :type label: :class:`str`
    :param bit_length: Needs to be positive and less than 64.
    :type bit_length: :class:`int`
    :return: A number safe to be used with :mod:`numpy.random` functions.
    :rtype: :class:`int`
    """
    hashed = hashlib.sha256(b'%d:%s' % (seed, label.encode()))
    return int.from_bytes(hashed.digest(), 'big') & (1 << bit_length) - 1


def _check_range(name: str, value: tuple[float, float], low: float = None,
                 high: float = None) -> None:
    if (not isinstance(value, tuple) or len(value) != 2 or
            any(not isinstance(item, (float, int)) for item in value)):
        raise TypeError("Argument '%s' should be a pair of numbers, not '%s'" %
                        (name, type(value).__name__))
    if value[0] > value[1]:
        raise ValueError("Argument '%s' should be ordered (min, max)" % name)
    if low is not None and value[0] < low or high is not None and value[1] > high:
        raise ValueError("Argument '%s' should be in [%s, %s] inclusive range" % (name, low, high))


@dataclass(frozen=True)
class Bounds:
    # noinspection PyUnresolvedReferences
    """It is the world-space size of the terrain.

    :param size_x: It is the extent along columns.
    :type size_x: :class:`float`
    :param size_y: It is the extent along rows.
    :type size_y: :class:`float`
    :param height: It is the vertical extent, i.e. the world height of elevation ``1.0``.
    :type height: :class:`float`
    """

    size_x: float = 1000.
    size_y: float = 1000.
    height: float = 100.

    def check(self) -> None:
        """Performs sanity check

        :raises: :exc:`TypeError`, :exc:`ValueError`
        """

        for name in ('size_x', 'size_y', 'height'):
            value = getattr(self, name)
            if not isinstance(value, (float, int)):
                raise TypeError("Argument '%s' should be a number, not '%s'" %
                                (name, type(value).__name__))
            if value <= 0:
                raise ValueError("Argument '%s' should be positive" % name)


@dataclass(frozen=True)
class NoiseConfig:
    # noinspection PyUnresolvedReferences
    """It is a boilerplate used by :class:`.HeightMap`.

    :param scale: It is the number of cells covered by one unit of noise space, needs to be
        positive.
    :type scale: :class:`float`
    :param octaves: It is the number of noise layers summed, needs to be at least 1.
    :type octaves: :class:`int`
    :param persistence: It is the ratio by which amplitude changes per octave, needs to be in
        [0, 1] inclusive range.
    :type persistence: :class:`float`
    :param lacunarity: It is the ratio by which frequency changes per octave, needs to be at
        least 1.
    :type lacunarity: :class:`float`
    :param offset: It is added to every sample position.
    :type offset: :class:`tuple` [:class:`float`, :class:`float`]
    """

    scale: float = 20.
    octaves: int = 4
    persistence: float = .5
    lacunarity: float = 2.
    offset: tuple[float, float] = (0., 0.)

    def check(self) -> None:
        """Performs sanity check

        :raises: :exc:`TypeError`, :exc:`ValueError`
        """

        if not isinstance(self.scale, (float, int)):
            raise TypeError("Argument 'scale' should be a number, not '%s'" %
                            type(self.scale).__name__)
        if self.scale <= 0:
            raise ValueError("Argument 'scale' should be positive")

        if not isinstance(self.octaves, int):
            raise TypeError("Argument 'octaves' should be integer number, not '%s'" %
                            type(self.octaves).__name__)
        if self.octaves < 1:
            raise ValueError("Argument 'octaves' should be at least 1")

        if not isinstance(self.persistence, (float, int)):
            raise TypeError("Argument 'persistence' should be a number, not '%s'" %
                            type(self.persistence).__name__)
        if not 0 <= self.persistence <= 1:
            raise ValueError("Argument 'persistence' should be in [0, 1] inclusive range")

        if not isinstance(self.lacunarity, (float, int)):
            raise TypeError("Argument 'lacunarity' should be a number, not '%s'" %
                            type(self.lacunarity).__name__)
        if self.lacunarity < 1:
            raise ValueError("Argument 'lacunarity' should be at least 1")

        if (not isinstance(self.offset, tuple) or len(self.offset) != 2 or
                any(not isinstance(item, (float, int)) for item in self.offset)):
            raise TypeError("Argument 'offset' should be a pair of numbers")


@dataclass(frozen=True)
class MountainConfig:
    # noinspection PyUnresolvedReferences
    """It is a boilerplate used by :class:`.MountainMap`.

    :param radius: It is the distance in cells from the summit at which the mountain reaches zero,
        needs to be positive.
    :type radius: :class:`float`
    :param edge_offset: The summit is placed this many cells outside of a randomly chosen edge,
        needs to be non-negative.
    :type edge_offset: :class:`float`
    :param max_height: It is the elevation of the summit without undulation, in [0, 1] inclusive
        range.
    :type max_height: :class:`float`
    :param smoothness: It is the exponent applied to the radial profile, larger values give wider
        foothills, needs to be positive.
    :type smoothness: :class:`float`
    :param noise_scale: It is the number of base noise periods across the longer side of the grid,
        needs to be positive.
    :type noise_scale: :class:`float`
    :param octaves: It is the number of undulation layers, needs to be at least 1.
    :type octaves: :class:`int`
    :param persistence: It is the ratio by which amplitude changes per octave, in [0, 1]
        inclusive range.
    :type persistence: :class:`float`
    :param lacunarity: It is the ratio by which frequency changes per octave, needs to be at
        least 1.
    :type lacunarity: :class:`float`
    :param noise_strength: It is the undulation relative to the local height of the mountain, in
        [0, 1] inclusive range.
    :type noise_strength: :class:`float`
    """

    radius: float = 360.
    edge_offset: float = 120.
    max_height: float = .7
    smoothness: float = 2.
    noise_scale: float = 15.
    octaves: int = 7
    persistence: float = .5
    lacunarity: float = 2.
    noise_strength: float = .6

    def check(self) -> None:
        """Performs sanity check

        :raises: :exc:`TypeError`, :exc:`ValueError`
        """

        for name in ('radius', 'edge_offset', 'max_height', 'smoothness', 'noise_scale',
                     'persistence', 'lacunarity', 'noise_strength'):
            value = getattr(self, name)
            if not isinstance(value, (float, int)):
                raise TypeError("Argument '%s' should be a number, not '%s'" %
                                (name, type(value).__name__))
        if not isinstance(self.octaves, int):
            raise TypeError("Argument 'octaves' should be integer number, not '%s'" %
                            type(self.octaves).__name__)

        if self.radius <= 0 or self.smoothness <= 0 or self.noise_scale <= 0:
            raise ValueError("Arguments 'radius', 'smoothness' and 'noise_scale' should be "
                             "positive")
        if self.edge_offset < 0:
            raise ValueError("Argument 'edge_offset' should not be negative")
        if self.octaves < 1:
            raise ValueError("Argument 'octaves' should be at least 1")
        for name in ('max_height', 'persistence', 'noise_strength'):
            if not 0 <= getattr(self, name) <= 1:
                raise ValueError("Argument '%s' should be in [0, 1] inclusive range" % name)
        if self.lacunarity < 1:
            raise ValueError("Argument 'lacunarity' should be at least 1")


@dataclass(frozen=True)
class PlateauArea:
    # noinspection PyUnresolvedReferences
    """It is a rectangle flattened by :func:`.height_map.apply_plateau`.

    :param x: It is the first column of the rectangle.
    :type x: :class:`int`
    :param y: It is the first row of the rectangle.
    :type y: :class:`int`
    :param width: Needs to be positive.
    :type width: :class:`int`
    :param height: Needs to be positive.
    :type height: :class:`int`
    :param target: It is the flat elevation, needs to be in [0, 1] inclusive range.
    :type target: :class:`float`
    :param falloff: It is the width of the blended border in cells, needs to be non-negative.
    :type falloff: :class:`int`
    :param name: It is only used in log messages.
    :type name: :class:`str`
    """

    x: int
    y: int
    width: int
    height: int
    target: float = .5
    falloff: int = 10
    name: str = ''

    def check(self) -> None:
        """Performs sanity check

        :raises: :exc:`TypeError`, :exc:`ValueError`
        """

        for name in ('x', 'y', 'width', 'height', 'falloff'):
            value = getattr(self, name)
            if not isinstance(value, int):
                raise TypeError("Argument '%s' should be integer number, not '%s'" %
                                (name, type(value).__name__))
        if self.width <= 0 or self.height <= 0:
            raise ValueError("Arguments 'width' and 'height' should be positive")
        if self.falloff < 0:
            raise ValueError("Argument 'falloff' should not be negative")

        if not isinstance(self.target, (float, int)):
            raise TypeError("Argument 'target' should be a number, not '%s'" %
                            type(self.target).__name__)
        if not 0 <= self.target <= 1:
            raise ValueError("Argument 'target' should be in [0, 1] inclusive range")


@dataclass(frozen=True)
class NetworkConfig:
    # noinspection PyUnresolvedReferences
    """It is a boilerplate used by :class:`.NetworkBuilder`.

    All lengths are measured in cells.

    :param node_count: It is the number of nodes sampled, needs to be at least 2.
    :type node_count: :class:`int`
    :param width: It is the fully solid width of uniform networks, needs to be positive.
    :type width: :class:`float`
    :param smoothing_width: It is the extra width over which strength decays to zero.
    :type smoothing_width: :class:`float`
    :param flow_graded: If set, edge width is graded by flow accumulation (rivers).
    :type flow_graded: :class:`bool`
    :param min_width: It is the width of the thinnest flow graded edge.
    :type min_width: :class:`float`
    :param max_width: It is the width of an edge draining every node.
    :type max_width: :class:`float`
    :param threshold: Cells with candidate mask value below it are rejected.
    :type threshold: :class:`float`
    :param attempt_multiplier: Node sampling gives up after ``node_count`` times this many
        attempts.
    :type attempt_multiplier: :class:`int`
    :param flatten_strength: It is how strongly terrain is pulled to the centre line height, in
        [0, 1] inclusive range, 0 leaves terrain untouched.
    :type flatten_strength: :class:`float`
    """

    node_count: int = 15
    width: float = 6.
    smoothing_width: float = 4.
    flow_graded: bool = False
    min_width: float = 1.5
    max_width: float = 12.
    threshold: float = .5
    attempt_multiplier: int = 100
    flatten_strength: float = 0.

    def check(self) -> None:
        """Performs sanity check

        :raises: :exc:`TypeError`, :exc:`ValueError`
        """

        if not isinstance(self.node_count, int):
            raise TypeError("Argument 'node_count' should be integer number, not '%s'" %
                            type(self.node_count).__name__)
        if self.node_count < 2:
            raise ValueError("Argument 'node_count' should be at least 2")

        for name in ('width', 'smoothing_width', 'min_width', 'max_width'):
            value = getattr(self, name)
            if not isinstance(value, (float, int)):
                raise TypeError("Argument '%s' should be a number, not '%s'" %
                                (name, type(value).__name__))
            if value < 0:
                raise ValueError("Argument '%s' should not be negative" % name)
        if self.width <= 0:
            raise ValueError("Argument 'width' should be positive")
        if self.min_width > self.max_width:
            raise ValueError("Argument 'min_width' should not exceed 'max_width'")

        for name in ('threshold', 'flatten_strength'):
            value = getattr(self, name)
            if not isinstance(value, (float, int)):
                raise TypeError("Argument '%s' should be a number, not '%s'" %
                                (name, type(value).__name__))
            if not 0 <= value <= 1:
                raise ValueError("Argument '%s' should be in [0, 1] inclusive range" % name)

        if not isinstance(self.attempt_multiplier, int):
            raise TypeError("Argument 'attempt_multiplier' should be integer number, not '%s'" %
                            type(self.attempt_multiplier).__name__)
        if self.attempt_multiplier < 1:
            raise ValueError("Argument 'attempt_multiplier' should be positive")


@dataclass(frozen=True)
class ZoneConfig:
    # noinspection PyUnresolvedReferences
    """It is a boilerplate used by :func:`.zones.classify`.

    :param forest_threshold: Cells higher than a value drawn from this range are forest.
    :type forest_threshold: :class:`tuple` [:class:`float`, :class:`float`]
    :param cluster_scale: It is the number of clustering noise units across the grid, smaller
        values give bigger clusters.
    :type cluster_scale: :class:`float`
    :param field_ratio: It is the share of flat land becoming farmland, in [0, 1] inclusive
        range.
    :type field_ratio: :class:`float`
    """

    forest_threshold: tuple[float, float] = (.55, .65)
    cluster_scale: float = 15.
    field_ratio: float = .5

    def check(self) -> None:
        """Performs sanity check

        :raises: :exc:`TypeError`, :exc:`ValueError`
        """

        _check_range('forest_threshold', self.forest_threshold, 0, 1)

        if not isinstance(self.cluster_scale, (float, int)):
            raise TypeError("Argument 'cluster_scale' should be a number, not '%s'" %
                            type(self.cluster_scale).__name__)
        if self.cluster_scale <= 0:
            raise ValueError("Argument 'cluster_scale' should be positive")

        if not isinstance(self.field_ratio, (float, int)):
            raise TypeError("Argument 'field_ratio' should be a number, not '%s'" %
                            type(self.field_ratio).__name__)
        if not 0 <= self.field_ratio <= 1:
            raise ValueError("Argument 'field_ratio' should be in [0, 1] inclusive range")


@dataclass(frozen=True, eq=False)
class DistanceConstraint:
    # noinspection PyUnresolvedReferences
    """It bounds the distance of a placement to the nearest cell of a mask.

    :param mask: It is the feature mask, e.g. roads.
    :type mask: :class:`.Grid`
    :param min_distance: Placements closer than this (in cells) are rejected.
    :type min_distance: :class:`float` or :data:`None`
    :param max_distance: Placements farther than this (in cells) are rejected.
    :type max_distance: :class:`float` or :data:`None`
    :param threshold: Mask cells at or above it belong to the feature.
    :type threshold: :class:`float`
    """

    mask: Grid
    min_distance: Optional[float] = None
    max_distance: Optional[float] = None
    threshold: float = .5

    def check(self) -> None:
        """Performs sanity check

        :raises: :exc:`TypeError`, :exc:`ValueError`
        """

        if self.min_distance is None and self.max_distance is None:
            raise ValueError("At least one of 'min_distance' and 'max_distance' should be set")
        for name in ('min_distance', 'max_distance'):
            value = getattr(self, name)
            if value is None:
                continue
            if not isinstance(value, (float, int)):
                raise TypeError("Argument '%s' should be a number, not '%s'" %
                                (name, type(value).__name__))
            if value < 0:
                raise ValueError("Argument '%s' should not be negative" % name)
        if (self.min_distance is not None and self.max_distance is not None and
                self.min_distance > self.max_distance):
            raise ValueError("Argument 'min_distance' should not exceed 'max_distance'")
        if not 0 <= self.threshold <= 1:
            raise ValueError("Argument 'threshold' should be in [0, 1] inclusive range")


@dataclass(frozen=True, eq=False)
class PlacementRule:
    # noinspection PyUnresolvedReferences
    """It is the configuration of one kind of entity used by :class:`.PlacementEngine`.

    All lengths are measured in cells.

    :param kind: It is the type tag of placed entities.
    :type kind: :class:`str`
    :param strategy: Either ``'scan'`` (lattice scan) or ``'feature'`` (along a linear
        feature).
    :type strategy: :class:`str`
    :param mask_threshold: Candidate mask value required at the placement.
    :type mask_threshold: :class:`float`
    :param height_band: Allowed elevation range.
    :type height_band: :class:`tuple` [:class:`float`, :class:`float`]
    :param max_slope: Steepest allowed surface in degrees.
    :type max_slope: :class:`float`
    :param spacing: Minimum distance between entities of this kind.
    :type spacing: :class:`float`
    :param avoid: Pairs of other kinds and minimum distance to them.
    :type avoid: :class:`tuple` [:class:`tuple` [:class:`str`, :class:`float`], ...]
    :param constraints: Distance constraints to feature masks.
    :type constraints: :class:`tuple` [:class:`DistanceConstraint`, ...]
    :param target_count: Placement stops once reached. Required by ``'feature'``.
    :type target_count: :class:`int` or :data:`None`
    :param min_count: Fewer placements raise :exc:`InsufficientCandidatesError`.
    :type min_count: :class:`int`
    :param density: It is the probability gate of ``'scan'``, in [0, 1] inclusive range.
    :type density: :class:`float`
    :param density_noise_scale: If set, the gate is modulated by coherent noise of this
        frequency (per cell), giving clustered densities.
    :type density_noise_scale: :class:`float` or :data:`None`
    :param step: It is the lattice step of ``'scan'``.
    :type step: :class:`float`
    :param jitter: It is the random displacement of lattice points as a fraction of ``step``.
    :type jitter: :class:`float`
    :param rotation_coherence: If set, ``'scan'`` orientation snaps to right angles driven by
        coherent noise of this frequency (per cell).
    :type rotation_coherence: :class:`float` or :data:`None`
    :param offset_range: It is the range of perpendicular offsets of ``'feature'``.
    :type offset_range: :class:`tuple` [:class:`float`, :class:`float`]
    :param attempt_multiplier: ``'feature'`` gives up after ``target_count`` times this many
        attempts.
    :type attempt_multiplier: :class:`int`
    :param cluster_count: If positive, ``'feature'`` placements gather around this many
        centres.
    :type cluster_count: :class:`int`
    :param core_radius: Within it around a centre placements are always allowed.
    :type core_radius: :class:`float`
    :param max_radius: Beyond it around every centre placements are never allowed.
    :type max_radius: :class:`float`
    :param rotation_offset: It is added to every orientation in degrees.
    :type rotation_offset: :class:`float`
    :param scale_range: Scale is drawn uniformly from it.
    :type scale_range: :class:`tuple` [:class:`float`, :class:`float`]
    :param footprint: If set, the elevation under each placed entity is flattened over a
        rectangle of this ``(width, depth)`` turned by the entity's orientation.
    :type footprint: :class:`tuple` [:class:`float`, :class:`float`] or :data:`None`
    :param sink: The flattened footprint is lowered by this much below the surface height at the
        entity, in [0, 1] inclusive range. Only used with ``footprint``.
    :type sink: :class:`float`
    """

    kind: str
    strategy: str = 'scan'
    mask_threshold: float = .5
    height_band: tuple[float, float] = (0., 1.)
    max_slope: float = 90.
    spacing: float = 0.
    avoid: tuple[tuple[str, float], ...] = ()
    constraints: tuple[DistanceConstraint, ...] = ()
    target_count: Optional[int] = None
    min_count: int = 0
    density: float = 1.
    density_noise_scale: Optional[float] = None
    step: float = 5.
    jitter: float = 0.
    rotation_coherence: Optional[float] = None
    offset_range: tuple[float, float] = (4., 6.)
    attempt_multiplier: int = 20
    cluster_count: int = 0
    core_radius: float = 20.
    max_radius: float = 60.
    rotation_offset: float = 0.
    scale_range: tuple[float, float] = (.8, 1.2)
    footprint: Optional[tuple[float, float]] = None
    sink: float = 0.

    def check(self) -> None:
        """Performs sanity check

        also checks each of :attr:`constraints`

        :raises: :exc:`TypeError`, :exc:`ValueError`
        """

        if not isinstance(self.kind, str) or not self.kind:
            raise TypeError("Argument 'kind' should be a non-empty string")
        if self.strategy not in ('scan', 'feature'):
            raise ValueError("Argument 'strategy' should be either 'scan' or 'feature'")

        if not 0 <= self.mask_threshold <= 1:
            raise ValueError("Argument 'mask_threshold' should be in [0, 1] inclusive range")
        _check_range('height_band', self.height_band, 0, 1)
        if not 0 <= self.max_slope <= 90:
            raise ValueError("Argument 'max_slope' should be in [0, 90] inclusive range")
        if self.spacing < 0:
            raise ValueError("Argument 'spacing' should not be negative")
        for kind, radius in self.avoid:
            if not isinstance(kind, str) or radius < 0:
                raise ValueError("Argument 'avoid' should hold (kind, non-negative radius) pairs")
        for constraint in self.constraints:
            constraint.check()

        if self.target_count is not None:
            if not isinstance(self.target_count, int):
                raise TypeError("Argument 'target_count' should be integer number, not '%s'" %
                                type(self.target_count).__name__)
            if self.target_count < 0:
                raise ValueError("Argument 'target_count' should not be negative")
        elif self.strategy == 'feature':
            raise ValueError("Argument 'target_count' is required by 'feature' strategy")
        if not isinstance(self.min_count, int) or self.min_count < 0:
            raise ValueError("Argument 'min_count' should be a non-negative integer")

        if not 0 <= self.density <= 1:
            raise ValueError("Argument 'density' should be in [0, 1] inclusive range")
        if self.step <= 0:
            raise ValueError("Argument 'step' should be positive")
        if not 0 <= self.jitter <= 1:
            raise ValueError("Argument 'jitter' should be in [0, 1] inclusive range")
        _check_range('offset_range', self.offset_range, 0)
        if not isinstance(self.attempt_multiplier, int) or self.attempt_multiplier < 1:
            raise ValueError("Argument 'attempt_multiplier' should be a positive integer")
        if not isinstance(self.cluster_count, int) or self.cluster_count < 0:
            raise ValueError("Argument 'cluster_count' should be a non-negative integer")
        if not 0 <= self.core_radius <= self.max_radius:
            raise ValueError("Argument 'core_radius' should be in [0, max_radius] range")
        _check_range('scale_range', self.scale_range, 0)

        if self.footprint is not None:
            if (not isinstance(self.footprint, tuple) or len(self.footprint) != 2 or
                    any(not isinstance(item, (float, int)) for item in self.footprint)):
                raise TypeError("Argument 'footprint' should be a pair of numbers")
            if min(self.footprint) <= 0:
                raise ValueError("Argument 'footprint' should hold positive sizes")
        if not 0 <= self.sink <= 1:
            raise ValueError("Argument 'sink' should be in [0, 1] inclusive range")


@dataclass(frozen=True)
class GraphNode:
    # noinspection PyUnresolvedReferences
    """It is a sampled network node.

    :param x: It is the column.
    :type x: :class:`int`
    :param y: It is the row.
    :type y: :class:`int`
    :param elevation: It is the elevation cached when sampled.
    :type elevation: :class:`float`
    """

    x: int
    y: int
    elevation: float = 0.

    @property
    def cell(self) -> PointType:
        return self.x, self.y


@dataclass(frozen=True)
class GraphEdge:
    # noinspection PyUnresolvedReferences
    """It is an undirected network edge.

    :param u: It is the index of the first node.
    :type u: :class:`int`
    :param v: It is the index of the second node.
    :type v: :class:`int`
    :param weight: It is the Euclidean distance of the nodes.
    :type weight: :class:`float`
    """

    u: int
    v: int
    weight: float


@dataclass(frozen=True)
class PixelPath:
    # noinspection PyUnresolvedReferences
    """It is a boilerplate used by :meth:`.pathfinder.Pathfinder.find_path`.

    :param cost: Total cost of the path, including orthogonal, diagonal and slope cost.
    :type cost: :class:`float`
    :param pixels: A list of each pixel the path contains, from source to target inclusive.
    :type pixels: :class:`list` [:class:`tuple` [:class:`int`, :class:`int` ]]
    """

    cost: float
    pixels: list[PointType]

    def __len__(self) -> int:
        return len(self.pixels)


@dataclass(frozen=True)
class PlacedEntity:
    # noinspection PyUnresolvedReferences
    """It is an entity accepted by :class:`.PlacementEngine`.

    :param kind: It is the type tag.
    :type kind: :class:`str`
    :param x: It is the column coordinate.
    :type x: :class:`float`
    :param y: It is the row coordinate.
    :type y: :class:`float`
    :param elevation: It is the sampled surface height (normalized).
    :type elevation: :class:`float`
    :param rotation: It is the yaw in degrees, counter-clockwise from the column axis.
    :type rotation: :class:`float`
    :param scale: It is the uniform scale.
    :type scale: :class:`float`
    """

    kind: str
    x: float
    y: float
    elevation: float = 0.
    rotation: float = 0.
    scale: float = 1.

    def world_position(self, bounds: Bounds, size: tuple[int, int]) -> tuple[float, float, float]:
        """Converts grid coordinates to world coordinates.

        :param bounds: It is the world-space size of the terrain.
        :type bounds: :class:`Bounds`
        :param size: It is the ``(width, height)`` of the grid the entity was placed on.
        :type size: :class:`tuple` [:class:`int`, :class:`int`]
        :return: ``(x, y, z)`` with ``z`` being the world height.
        :rtype: :class:`tuple` [:class:`float`, :class:`float`, :class:`float`]
        """

        width, height = size
        return (self.x / max(width - 1, 1) * bounds.size_x,
                self.y / max(height - 1, 1) * bounds.size_y,
                self.elevation * bounds.height)


@dataclass(frozen=True, eq=False)
class Network:
    # noinspection PyUnresolvedReferences
    """It is a boilerplate used by :meth:`.NetworkBuilder.build`.

    :param mask: It is the rasterized network.
    :type mask: :class:`.Grid`
    :param nodes: It is the list of sampled nodes.
    :type nodes: :class:`list` [:class:`GraphNode`, ...]
    :param edges: It is the list of minimum spanning tree edges.
    :type edges: :class:`list` [:class:`GraphEdge`, ...]
    :param widths: It is the rasterized width of each edge.
    :type widths: :class:`list` [:class:`float`, ...]
    :param requested: It is the number of nodes requested.
    :type requested: :class:`int`
    :param root: It is the index of the flow root (flow graded networks only).
    :type root: :class:`int` or :data:`None`
    :param flow: It is the accumulated flow of each node (flow graded networks only).
    :type flow: :class:`list` [:class:`int`, ...] or :data:`None`
    """

    mask: Grid
    nodes: list[GraphNode]
    edges: list[GraphEdge]
    widths: list[float]
    requested: int
    root: Optional[int] = None
    flow: Optional[list[int]] = None

    @property
    def degraded(self) -> bool:
        """It is set if fewer nodes were sampled than requested."""

        return len(self.nodes) < self.requested


@dataclass(frozen=True, eq=False)
class ZoneMasks:
    # noinspection PyUnresolvedReferences
    """It is a boilerplate used by :func:`.zones.classify`.

    :param forest: It is set where elevation exceeds :attr:`forest_threshold`.
    :type forest: :class:`.Grid`
    :param settlement: It is set on flat land outside of farmland clusters.
    :type settlement: :class:`.Grid`
    :param farmland: It is set on flat land inside of farmland clusters.
    :type farmland: :class:`.Grid`
    :param forest_threshold: It is the threshold drawn for the run.
    :type forest_threshold: :class:`float`
    """

    forest: Grid
    settlement: Grid
    farmland: Grid
    forest_threshold: float

    @property
    def flat(self) -> Grid:
        """It is the union of settlement and farmland."""

        return self.settlement.union(self.farmland)


@dataclass(frozen=True)
class PlacementResult:
    # noinspection PyUnresolvedReferences
    """It is a boilerplate used by :meth:`.PlacementEngine.place`.

    :param kind: It is the type tag of the rule.
    :type kind: :class:`str`
    :param entities: It is the list of entities placed by this call only.
    :type entities: :class:`list` [:class:`PlacedEntity`, ...]
    :param attempts: It is the number of candidates evaluated.
    :type attempts: :class:`int`
    :param target: It is the requested count, if any.
    :type target: :class:`int` or :data:`None`
    """

    kind: str
    entities: list[PlacedEntity] = field(default_factory=list)
    attempts: int = 0
    target: Optional[int] = None

    @property
    def degraded(self) -> bool:
        """It is set if fewer entities were placed than targeted."""

        return self.target is not None and len(self.entities) < self.target
