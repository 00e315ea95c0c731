"""Road and river networks

A network connects randomly sampled nodes by a minimum spanning tree, then every edge is drawn as a
straight line with a radial brush. Rivers grade the width of each edge by the flow accumulated
toward the lowest node.
"""

from __future__ import annotations

import warnings
from math import ceil, floor, hypot
from typing import Iterable, Optional, Sequence

import numpy as np
import structlog

from .common import (DegradedResultWarning, GraphNode, InsufficientCandidatesError, Network,
                     NetworkConfig, PointType, SeedType, get_safe_seed)
from .grid import Grid, check_same_size
from .intensity import MaskIntensityFunction
from .point_process import RejectionSampler
from .spanning_tree import downstream, flow_accumulation, minimum_spanning_tree

logger = structlog.get_logger()

default_road_config = NetworkConfig(node_count=15, width=6., smoothing_width=4.,
                                    flatten_strength=.5)
default_river_config = NetworkConfig(node_count=30, width=4., smoothing_width=6.,
                                     flow_graded=True, min_width=1.5, max_width=12.)


class Brush:
    """Radial stamps: fully solid within ``width / 2``, fading linearly to zero at
    ``(width + smoothing_width) / 2``."""

    _brush_cache = {}

    @classmethod
    def clear_cache(cls) -> None:
        cls._brush_cache.clear()

    @classmethod
    def get(cls, width: float, smoothing_width: float) -> np.ndarray:
        key = (width, smoothing_width)
        if key not in cls._brush_cache:
            inner = width / 2
            outer = (width + smoothing_width) / 2
            radius = ceil(outer)
            offsets = np.arange(-radius, radius + 1, dtype=np.float64)
            distance = np.hypot(offsets[None, :], offsets[:, None])
            if smoothing_width > 0:
                brush = np.clip((outer - distance) / (outer - inner), 0, 1)
            else:
                brush = (distance <= inner).astype(np.float64)
            brush.setflags(write=False)
            cls._brush_cache[key] = brush
        return cls._brush_cache[key]


def _clip_window(shape: tuple[int, int], centre: PointType, radius: int
                 ) -> tuple[tuple[slice, slice], tuple[slice, slice]]:
    height, width = shape
    x, y = centre
    x0, x1 = max(x - radius, 0), min(x + radius + 1, width)
    y0, y1 = max(y - radius, 0), min(y + radius + 1, height)
    target = (slice(y0, y1), slice(x0, x1))
    source = (slice(y0 - y + radius, y1 - y + radius), slice(x0 - x + radius, x1 - x + radius))
    return target, source


def stamp(data: np.ndarray, centre: PointType, brush: np.ndarray) -> None:
    """Composites `brush` onto `data` keeping the maximum of overlapping values."""

    target, source = _clip_window(data.shape, centre, brush.shape[0] // 2)
    np.maximum(data[target], brush[source], out=data[target])


def line_cells(start: PointType, end: PointType) -> list[PointType]:
    """Samples the segment at steps no longer than one cell.

    Consecutive cells are 8-neighbours, both endpoints are included.
    """

    length = hypot(end[0] - start[0], end[1] - start[1])
    steps = max(ceil(length), 1)
    cells = []
    for k in range(steps + 1):
        t = k / steps
        cell = (floor(start[0] + (end[0] - start[0]) * t + .5),
                floor(start[1] + (end[1] - start[1]) * t + .5))
        if not cells or cells[-1] != cell:
            cells.append(cell)
    return cells


def rasterize_cells(mask: Grid, cells: Iterable[PointType], width: float,
                    smoothing_width: float) -> Grid:
    """Stamps each cell onto `mask` in place."""

    brush = Brush.get(width, smoothing_width)
    for cell in cells:
        stamp(mask.data, cell, brush)
    return mask


def rasterize_line(mask: Grid, start: PointType, end: PointType, width: float,
                   smoothing_width: float) -> Grid:
    return rasterize_cells(mask, line_cells(start, end), width, smoothing_width)


def rasterize_path(size: tuple[int, int], pixels: Sequence[PointType], width: float,
                   smoothing_width: float) -> Grid:
    """Draws a path (e.g. found by :class:`.Pathfinder`) onto a new mask of `size`."""

    return rasterize_cells(Grid.zeros(*size), pixels, width, smoothing_width)


def flatten_terrain(elevation: Grid, centres: Sequence[PointType], width: float,
                    smoothing_width: float, strength: float) -> Grid:
    """Pulls terrain under a rasterized line toward the height of its centre line in place.

    Each cell follows the centre whose brush covers it the most; the height of centres is read
    before any change. Within ``width / 2`` a cell moves `strength` of the way, on the shoulder
    proportionally less.

    :param elevation: It is the elevation grid, mutated.
    :type elevation: :class:`.Grid`
    :param centres: It is a list of centre line cells.
    :type centres: :class:`list` [:data:`.PointType`, ...]
    :param width: It is the fully flattened width.
    :type width: :class:`float`
    :param smoothing_width: It is the width of shoulders.
    :type smoothing_width: :class:`float`
    :param strength: It is in [0, 1] inclusive range.
    :type strength: :class:`float`
    :return: `elevation` itself.
    :rtype: :class:`.Grid`
    """

    if not 0 <= strength <= 1:
        raise ValueError("Argument 'strength' should be in [0, 1] inclusive range")
    if strength == 0 or not centres:
        return elevation

    original = elevation.data.copy()
    weights = np.zeros_like(original)
    targets = np.zeros_like(original)
    brush = Brush.get(width, smoothing_width)
    for centre in centres:
        if not elevation.in_bounds(*centre):
            continue
        target, source = _clip_window(original.shape, centre, brush.shape[0] // 2)
        better = brush[source] > weights[target]
        weights[target] = np.where(better, brush[source], weights[target])
        targets[target] = np.where(better, original[centre[1], centre[0]], targets[target])

    weights *= strength
    elevation.data[...] = original * (1 - weights) + targets * weights
    return elevation


class NetworkBuilder:
    """Builds a network over cells of a candidate mask.

    Used both for roads (uniform width) and rivers (flow graded width, see:
    :attr:`.NetworkConfig.flow_graded`).
    """

    def __init__(self, candidate_mask: Grid, config: NetworkConfig = default_road_config, *,
                 elevation: Optional[Grid] = None, seed: SeedType = None,
                 bit_length: int = 64) -> None:
        """Initializes network generation.

        :param candidate_mask: Nodes are only sampled where it is at or above
            :attr:`~.NetworkConfig.threshold`.
        :type candidate_mask: :class:`.Grid`
        :param config: It contains node count, widths and sampling bounds.
        :type config: :class:`.NetworkConfig`
        :param elevation: It is cached in nodes, required by flow graded networks to find the
            outlet.
        :type elevation: :class:`.Grid` or :data:`None`
        :param seed: It is used for sampling nodes.
        :type seed: :data:`.SeedType`
        :param bit_length: It is used for creating a safe seed.
        :type bit_length: :class:`int`
        """

        config.check()
        if elevation is not None:
            check_same_size(candidate_mask, elevation)
        elif config.flow_graded:
            raise ValueError("Argument 'elevation' is required by flow graded networks")

        self._mask = candidate_mask
        self._elevation = elevation
        self._config = config
        self._seed = get_safe_seed(seed, bit_length)

    @property
    def config(self) -> NetworkConfig:
        return self._config

    def sample_nodes(self, rng: np.random.Generator) -> list[GraphNode]:
        """Samples distinct cells of the candidate mask uniformly.

        At most ``node_count * attempt_multiplier`` candidates are drawn.
        """

        sampler = RejectionSampler(
            MaskIntensityFunction(self._config.node_count, self._mask, self._config.threshold),
            self._mask.size,
            rng,
            max_attempts=self._config.node_count * self._config.attempt_multiplier
        )
        return [GraphNode(x, y, self._elevation.get(x, y) if self._elevation is not None else 0.)
                for x, y in sampler]

    def build(self) -> Network:
        """Samples nodes, connects them and rasterizes the result.

        :return: Mask, nodes and edges of the network.
        :rtype: :class:`.Network`
        :raises: :exc:`.InsufficientCandidatesError` if less than two nodes could be sampled.
        """

        rng = np.random.default_rng(self._seed)
        nodes = self.sample_nodes(rng)
        requested = self._config.node_count
        if len(nodes) < 2:
            raise InsufficientCandidatesError("Network too sparse: %d of %d nodes sampled" %
                                              (len(nodes), requested))
        if len(nodes) < requested:
            warnings.warn("Only %d of %d network nodes could be sampled" %
                          (len(nodes), requested), DegradedResultWarning, stacklevel=2)

        edges = minimum_spanning_tree(nodes)

        root = flow = None
        if self._config.flow_graded:
            root = min(range(len(nodes)), key=lambda i: (nodes[i].elevation, i))
            parent, flow = flow_accumulation(len(nodes), edges, root)
            widths = [self._config.min_width + (self._config.max_width - self._config.min_width) *
                      flow[downstream(edge, parent)] / len(nodes) for edge in edges]
        else:
            widths = [self._config.width] * len(edges)

        mask = Grid.zeros(*self._mask.size)
        for edge, width in zip(edges, widths):
            rasterize_line(mask, nodes[edge.u].cell, nodes[edge.v].cell, width,
                           self._config.smoothing_width)

        logger.info("Network built", nodes=len(nodes), requested=requested, edges=len(edges),
                    flow_graded=self._config.flow_graded)
        return Network(mask, nodes, edges, widths, requested, root, flow)


def build_network(candidate_mask: Grid, config: NetworkConfig = default_road_config,
                  seed: SeedType = None, *, elevation: Optional[Grid] = None) -> Network:
    """Shorthand for ``NetworkBuilder(candidate_mask, config, ...).build()``."""

    return NetworkBuilder(candidate_mask, config, elevation=elevation, seed=seed).build()


def centre_cells(network: Network) -> list[PointType]:
    """Lists the distinct cells on centre lines of each edge of `network`."""

    cells = {}
    for edge in network.edges:
        for cell in line_cells(network.nodes[edge.u].cell, network.nodes[edge.v].cell):
            cells[cell] = None
    return list(cells)


def flatten_under(elevation: Grid, network: Network, config: NetworkConfig) -> Grid:
    """Flattens terrain under each edge of `network` by :attr:`~.NetworkConfig.flatten_strength`.
    """

    check_same_size(elevation, network.mask)
    for edge, width in zip(network.edges, network.widths):
        flatten_terrain(elevation,
                        line_cells(network.nodes[edge.u].cell, network.nodes[edge.v].cell),
                        width, config.smoothing_width, config.flatten_strength)
    return elevation
