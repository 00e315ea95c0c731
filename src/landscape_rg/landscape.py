"""Landscape generation pipeline

Stages run strictly in order, each with its own seed derived from the seed of the run:

1. elevation synthesis (fractal noise or a mountain) and plateaus
2. zone classification
3. rivers
4. roads (and terrain flattening)
5. primary road (optional)
6. houses, paddies (flattening the terrain under them) and trees
"""

from __future__ import annotations

import warnings
from dataclasses import dataclass, field, replace
from typing import Optional

import structlog

from .common import (Bounds, DegradedResultWarning, DistanceConstraint,
                     InsufficientCandidatesError, InvalidDimensionsError, MountainConfig, Network,
                     NetworkConfig, NoiseConfig, PathNotFoundError, PixelPath, PlacedEntity,
                     PlacementRule, PlateauArea, PointType, SeedType, ZoneConfig, ZoneMasks,
                     derive_seed, get_safe_seed)
from .grid import Grid
from .height_map import apply_plateaus, synthesize, synthesize_mountain
from .network import (NetworkBuilder, centre_cells, default_river_config, default_road_config,
                      flatten_terrain, flatten_under, rasterize_path)
from .pathfinder import Pathfinder
from .placement import PlacementEngine
from .surface import GridSurface
from .zones import classify

logger = structlog.get_logger()

default_house_rule = PlacementRule('house', strategy='feature', max_slope=25., spacing=6.,
                                   target_count=60, offset_range=(5., 8.), cluster_count=3,
                                   core_radius=20., max_radius=60.)
default_paddy_rule = PlacementRule('paddy', step=6., max_slope=30., avoid=(('house', 6.),),
                                   rotation_coherence=.05, scale_range=(1., 1.),
                                   footprint=(5., 5.), sink=.01)
default_tree_rule = PlacementRule('tree', step=3., jitter=1., density=.35,
                                  density_noise_scale=.05, height_band=(.4, 1.), max_slope=40.,
                                  scale_range=(.8, 1.5))


@dataclass(frozen=True)
class LandscapeConfig:
    # noinspection PyUnresolvedReferences
    """It is a boilerplate used by :class:`LandscapeGenerator`.

    :param width: It is the number of columns, needs to be positive.
    :type width: :class:`int`
    :param height: It is the number of rows, needs to be positive.
    :type height: :class:`int`
    :param bounds: It is the world-space size of the terrain.
    :type bounds: :class:`.Bounds`
    :param noise: It is used for elevation synthesis unless ``mountain`` is set.
    :type noise: :class:`.NoiseConfig`
    :param mountain: If set, the base elevation is a single mountain rising from outside of the
        grid instead of fractal noise.
    :type mountain: :class:`.MountainConfig` or :data:`None`
    :param plateaus: They are flattened in order after synthesis.
    :type plateaus: :class:`tuple` [:class:`.PlateauArea`, ...]
    :param zones: It is used for classifying land.
    :type zones: :class:`.ZoneConfig`
    :param rivers: It is used for the river network, usually flow graded.
    :type rivers: :class:`.NetworkConfig`
    :param roads: It is used for the road network.
    :type roads: :class:`.NetworkConfig`
    :param primary_road: If set, a road is routed between these two cells.
    :type primary_road: :class:`tuple` [:data:`.PointType`, :data:`.PointType`] or :data:`None`
    :param primary_road_width: It is the fully solid width of the primary road.
    :type primary_road_width: :class:`float`
    :param slope_penalty: It is the cost of elevation change along the primary road.
    :type slope_penalty: :class:`float`
    :param road_clearance: Entities are kept at least this far from road cells.
    :type road_clearance: :class:`float`
    :param river_clearance: Entities are kept at least this far from river cells.
    :type river_clearance: :class:`float`
    :param houses: It is the placement rule of houses.
    :type houses: :class:`.PlacementRule`
    :param paddies: It is the placement rule of paddies.
    :type paddies: :class:`.PlacementRule`
    :param trees: It is the placement rule of trees.
    :type trees: :class:`.PlacementRule`
    :param bit_length: It is used for creating safe seeds.
    :type bit_length: :class:`int`
    """

    width: int = 256
    height: int = 256
    bounds: Bounds = Bounds()
    noise: NoiseConfig = NoiseConfig(scale=80.)
    mountain: Optional[MountainConfig] = None
    plateaus: tuple[PlateauArea, ...] = ()
    zones: ZoneConfig = ZoneConfig()
    rivers: NetworkConfig = default_river_config
    roads: NetworkConfig = default_road_config
    primary_road: Optional[tuple[PointType, PointType]] = None
    primary_road_width: float = 4.
    slope_penalty: float = 200.
    road_clearance: float = 1.
    river_clearance: float = 2.
    houses: PlacementRule = default_house_rule
    paddies: PlacementRule = default_paddy_rule
    trees: PlacementRule = default_tree_rule
    bit_length: int = 64

    def check(self) -> None:
        """Performs sanity check

        also checks each nested configuration

        :raises: :exc:`TypeError`, :exc:`ValueError`
        """

        if not isinstance(self.width, int) or not isinstance(self.height, int):
            raise TypeError("Arguments 'width' and 'height' should be integer numbers")
        if self.width <= 0 or self.height <= 0:
            raise InvalidDimensionsError("Arguments 'width' and 'height' should be positive")

        self.bounds.check()
        self.noise.check()
        if self.mountain is not None:
            self.mountain.check()
        for area in self.plateaus:
            area.check()
        self.zones.check()
        self.rivers.check()
        self.roads.check()

        if self.primary_road is not None:
            if (len(self.primary_road) != 2 or
                    any(len(cell) != 2 or any(not isinstance(i, int) for i in cell)
                        for cell in self.primary_road)):
                raise TypeError("Argument 'primary_road' should be a pair of cells")
        if self.primary_road_width <= 0:
            raise ValueError("Argument 'primary_road_width' should be positive")
        if self.slope_penalty < 0:
            raise ValueError("Argument 'slope_penalty' should not be negative")
        if self.road_clearance < 0 or self.river_clearance < 0:
            raise ValueError("Arguments 'road_clearance' and 'river_clearance' should not be "
                             "negative")

        for rule in (self.houses, self.paddies, self.trees):
            rule.check()

        if not isinstance(self.bit_length, int):
            raise TypeError("Argument 'bit_length' should be integer number, not '%s'" %
                            type(self.bit_length).__name__)
        if not 0 < self.bit_length <= 64:
            raise ValueError("Argument 'bit_length' should be in (0, 64] range")


default_landscape_config = LandscapeConfig()


@dataclass(frozen=True, eq=False)
class LandscapeData:
    # noinspection PyUnresolvedReferences
    """It is the result of :meth:`LandscapeGenerator.generate`.

    :param seed: It is the safe seed of the run.
    :type seed: :class:`int`
    :param bounds: It is the world-space size of the terrain.
    :type bounds: :class:`.Bounds`
    :param elevation: It is the final elevation, including flattening under roads and paddies.
    :type elevation: :class:`.Grid`
    :param zones: It is the land classification.
    :type zones: :class:`.ZoneMasks`
    :param rivers: It is the river network.
    :type rivers: :class:`.Network`
    :param roads: It is the road network.
    :type roads: :class:`.Network`
    :param road_mask: It is the road network and the primary road combined.
    :type road_mask: :class:`.Grid`
    :param primary_road: It is the path of the primary road, if any was found.
    :type primary_road: :class:`.PixelPath` or :data:`None`
    :param entities: Placed entities grouped by kind.
    :type entities: :class:`dict` [:class:`str`, :class:`list` [:class:`.PlacedEntity`, ...]]
    :param degraded: Names of stages whose result is partial.
    :type degraded: :class:`list` [:class:`str`, ...]
    """

    seed: int
    bounds: Bounds
    elevation: Grid
    zones: ZoneMasks
    rivers: Network
    roads: Network
    road_mask: Grid
    primary_road: Optional[PixelPath] = None
    entities: dict[str, list[PlacedEntity]] = field(default_factory=dict)
    degraded: list[str] = field(default_factory=list)

    @property
    def size(self) -> tuple[int, int]:
        return self.elevation.size

    def world_positions(self, kind: str) -> list[tuple[float, float, float]]:
        """Converts every entity of `kind` to world coordinates."""

        return [entity.world_position(self.bounds, self.size)
                for entity in self.entities.get(kind, [])]


class LandscapeGenerator:

    def __init__(self, config: LandscapeConfig = default_landscape_config, *,
                 seed: SeedType = None) -> None:
        config.check()
        self._config = config
        self._seed = get_safe_seed(seed, config.bit_length)

    @property
    def config(self) -> LandscapeConfig:
        return self._config

    @property
    def seed(self) -> int:
        return self._seed

    def _stage_seed(self, stage: str) -> int:
        return derive_seed(self._seed, stage, self._config.bit_length)

    def _degrade(self, stage: str, degraded: list[str], reason: str) -> None:
        warnings.warn("Stage '%s' degraded: %s" % (stage, reason), DegradedResultWarning,
                      stacklevel=3)
        logger.warning("Stage degraded", stage=stage, reason=reason)
        degraded.append(stage)

    def _build_network(self, stage: str, candidate_mask: Grid, config: NetworkConfig,
                       elevation: Grid, degraded: list[str]) -> Network:
        try:
            with warnings.catch_warnings():
                warnings.simplefilter('ignore', DegradedResultWarning)
                network = NetworkBuilder(candidate_mask, config, elevation=elevation,
                                         seed=self._stage_seed(stage)).build()
        except InsufficientCandidatesError as err:
            self._degrade(stage, degraded, str(err))
            return Network(Grid.zeros(*candidate_mask.size), [], [], [], config.node_count)
        if network.degraded:
            self._degrade(stage, degraded, "%d of %d nodes sampled" %
                          (len(network.nodes), network.requested))
        return network

    def _place(self, engine: PlacementEngine, candidate_mask: Grid, rule: PlacementRule,
               entities: dict[str, list[PlacedEntity]], degraded: list[str],
               feature: Optional[list[PointType]] = None) -> None:
        existing = [entity for placed in entities.values() for entity in placed]
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', DegradedResultWarning)
            result = engine.place(candidate_mask, rule, existing, feature=feature)
        if result.degraded:
            self._degrade(rule.kind, degraded, "%d of %d placed" %
                          (len(result.entities), result.target))
        entities.setdefault(rule.kind, []).extend(result.entities)

    def _clearance(self, rule: PlacementRule, road_mask: Grid, river_mask: Grid
                   ) -> PlacementRule:
        constraints = list(rule.constraints)
        if self._config.road_clearance > 0:
            constraints.append(DistanceConstraint(road_mask,
                                                  min_distance=self._config.road_clearance))
        if self._config.river_clearance > 0:
            constraints.append(DistanceConstraint(river_mask,
                                                  min_distance=self._config.river_clearance))
        return replace(rule, constraints=tuple(constraints))

    def generate(self) -> LandscapeData:
        """Runs every stage of the pipeline.

        :return: Elevation, zones, networks and entities.
        :rtype: :class:`LandscapeData`
        :raises: :exc:`.InsufficientCandidatesError` if a placement rule's
            :attr:`~.PlacementRule.min_count` is unmet.
        """

        config = self._config
        size = config.width, config.height
        degraded = []
        logger.info("Landscape generation started", seed=self._seed, width=config.width,
                    height=config.height)

        if config.mountain is not None:
            elevation = synthesize_mountain(config.width, config.height, config.mountain,
                                            self._stage_seed('elevation'))
        else:
            elevation = synthesize(config.width, config.height, config.noise,
                                   self._stage_seed('elevation'))
        apply_plateaus(elevation, config.plateaus)

        zones = classify(elevation, config.zones, self._stage_seed('zones'))
        flat = zones.flat

        rivers = self._build_network('rivers', flat, config.rivers, elevation, degraded)

        roads = self._build_network('roads', flat.difference(rivers.mask), config.roads,
                                    elevation, degraded)
        flatten_under(elevation, roads, config.roads)
        road_mask = roads.mask.copy()
        feature = centre_cells(roads)

        primary_road = None
        if config.primary_road is not None:
            start, end = config.primary_road
            try:
                primary_road = Pathfinder(elevation, config.slope_penalty,
                                          obstacles=rivers.mask).find_path(start, end)
            except PathNotFoundError as err:
                self._degrade('primary_road', degraded, str(err))
            else:
                road_mask = road_mask.union(rasterize_path(size, primary_road.pixels,
                                                           config.primary_road_width,
                                                           config.roads.smoothing_width))
                flatten_terrain(elevation, primary_road.pixels, config.primary_road_width,
                                config.roads.smoothing_width, config.roads.flatten_strength)
                feature = list(dict.fromkeys(feature + primary_road.pixels))

        engine = PlacementEngine(GridSurface(elevation, config.bounds),
                                 seed=self._stage_seed('placement'))
        entities = {}
        self._place(engine, zones.settlement,
                    self._clearance(config.houses, road_mask, rivers.mask), entities, degraded,
                    feature)
        self._place(engine, zones.farmland,
                    self._clearance(config.paddies, road_mask, rivers.mask), entities, degraded)
        self._place(engine, zones.forest,
                    self._clearance(config.trees, road_mask, rivers.mask), entities, degraded)

        logger.info("Landscape generation finished", degraded=degraded,
                    placed={kind: len(placed) for kind, placed in entities.items()})
        return LandscapeData(self._seed, config.bounds, elevation, zones, rivers, roads,
                             road_mask, primary_road, entities, degraded)


def generate(config: LandscapeConfig = default_landscape_config,
             seed: SeedType = None) -> LandscapeData:
    """Shorthand for ``LandscapeGenerator(config, seed=seed).generate()``."""

    return LandscapeGenerator(config, seed=seed).generate()
