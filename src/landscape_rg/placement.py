"""Constrained placement of entities

Entities are placed either by scanning a lattice (trees, paddies) or along a linear feature such
as road centre lines (houses). Every candidate is checked against the mask, the height and slope
bands, the distance constraints and the spacing to entities placed earlier; accepted entities are
never moved afterwards.
"""

from __future__ import annotations

import warnings
from math import atan2, ceil, cos, degrees, floor, hypot, radians, sin
from typing import Optional, Sequence

import numpy as np
import structlog
from scipy.ndimage import distance_transform_edt
from scipy.spatial import cKDTree

from .common import (DegradedResultWarning, DistanceConstraint, InsufficientCandidatesError,
                     PlacedEntity, PlacementResult, PlacementRule, PointType, SeedType,
                     get_safe_seed)
from .grid import Grid, check_same_size
from .height_map import NoiseField
from .intensity import NoiseDensityFunction, UniformDensityFunction
from .point_process import IntensityFunction
from .surface import GridSurface, SurfaceSampler, slope_angle

logger = structlog.get_logger()


def distance_field(constraint: DistanceConstraint) -> np.ndarray:
    """Computes the distance of each cell to the nearest feature cell of the constraint's mask.

    Feature cells have distance 0; if there are none, every distance is infinite.
    """

    feature = constraint.mask.data >= constraint.threshold
    if not feature.any():
        return np.full(feature.shape, np.inf)
    return distance_transform_edt(~feature)


def flatten_footprint(elevation: Grid, x: float, y: float, rotation: float,
                      footprint: tuple[float, float], height: float) -> int:
    """Sets the elevation inside a turned rectangle to a constant height in place.

    :param elevation: It is the elevation grid, mutated.
    :type elevation: :class:`.Grid`
    :param x: It is the column of the rectangle's centre.
    :type x: :class:`float`
    :param y: It is the row of the rectangle's centre.
    :type y: :class:`float`
    :param rotation: It is the orientation of the rectangle in degrees.
    :type rotation: :class:`float`
    :param footprint: It is the ``(width, depth)`` of the rectangle in cells.
    :type footprint: :class:`tuple` [:class:`float`, :class:`float`]
    :param height: Cells inside are set to it.
    :type height: :class:`float`
    :return: Number of cells changed.
    :rtype: :class:`int`
    """

    half_width, half_depth = footprint[0] / 2, footprint[1] / 2
    reach = hypot(half_width, half_depth)
    x0, x1 = max(floor(x - reach), 0), min(ceil(x + reach), elevation.width - 1)
    y0, y1 = max(floor(y - reach), 0), min(ceil(y + reach), elevation.height - 1)
    if x0 > x1 or y0 > y1:
        return 0

    d_x = np.arange(x0, x1 + 1) - x
    d_y = np.arange(y0, y1 + 1) - y
    angle = radians(rotation)
    # cell offsets turned back into the frame of the rectangle
    along = d_x[None, :] * cos(angle) + d_y[:, None] * sin(angle)
    across = d_y[:, None] * cos(angle) - d_x[None, :] * sin(angle)
    inside = (np.abs(along) < half_width) & (np.abs(across) < half_depth)

    elevation.data[y0:y1 + 1, x0:x1 + 1][inside] = height
    return int(inside.sum())


class ConstraintSet:
    """Checks a candidate against every constraint of a rule.

    :param candidate_mask: It is the mask of allowed area.
    :type candidate_mask: :class:`.Grid`
    :param rule: It is the rule being placed.
    :type rule: :class:`.PlacementRule`
    :param surface: It is sampled for height and slope.
    :type surface: :data:`.SurfaceSampler`
    :param existing: It is the list of every entity placed earlier.
    :type existing: :class:`list` [:class:`.PlacedEntity`, ...]
    """

    def __init__(self, candidate_mask: Grid, rule: PlacementRule, surface: SurfaceSampler,
                 existing: Sequence[PlacedEntity]) -> None:
        self._mask = candidate_mask
        self._rule = rule
        self._surface = surface
        self._fields = []
        for constraint in rule.constraints:
            check_same_size(candidate_mask, constraint.mask)
            self._fields.append((distance_field(constraint), constraint))

        self._same_kind = [(entity.x, entity.y) for entity in existing if entity.kind == rule.kind]
        radii = dict(rule.avoid)
        self._avoided = [(entity.x, entity.y, radii[entity.kind]) for entity in existing
                         if entity.kind in radii]

    def add(self, entity: PlacedEntity) -> None:
        self._same_kind.append((entity.x, entity.y))

    def evaluate(self, x: float, y: float) -> Optional[float]:
        """Returns the surface height if every constraint is met at ``(x, y)``, otherwise
        :data:`None`."""

        rule = self._rule
        if not self._mask.in_bounds(x, y):
            return None
        column, row = floor(x + .5), floor(y + .5)
        if self._mask.sample(x, y) < rule.mask_threshold:
            return None
        if self._mask.get(column, row) < rule.mask_threshold:
            return None

        for field, constraint in self._fields:
            distance = field[row, column]
            if constraint.min_distance is not None and distance < constraint.min_distance:
                return None
            if constraint.max_distance is not None and distance > constraint.max_distance:
                return None

        if rule.spacing > 0 and any(hypot(x - s_x, y - s_y) < rule.spacing
                                    for s_x, s_y in self._same_kind):
            return None
        if any(hypot(x - a_x, y - a_y) < radius for a_x, a_y, radius in self._avoided):
            return None

        height, normal = self._surface(x, y)
        if not rule.height_band[0] <= height <= rule.height_band[1]:
            return None
        if slope_angle(normal) > rule.max_slope:
            return None
        return height


class PlacementEngine:
    """Places entities kind by kind on a surface.

    The engine owns its random generator, so repeated calls in the same order with the same seed
    reproduce the same entities. Rules with a :attr:`~.PlacementRule.footprint` flatten the
    terrain under each entity as soon as it is placed, so later candidates see the changed
    surface.
    """

    def __init__(self, surface: SurfaceSampler, *, seed: SeedType = None, bit_length: int = 64,
                 terrain: Optional[Grid] = None) -> None:
        """Initializes placement.

        :param surface: It maps grid coordinates to height and normal.
        :type surface: :data:`.SurfaceSampler`
        :param seed: It is used for every random decision.
        :type seed: :data:`.SeedType`
        :param bit_length: It is used for creating a safe seed.
        :type bit_length: :class:`int`
        :param terrain: It is flattened under footprints, defaults to the elevation of a
            :class:`.GridSurface`.
        :type terrain: :class:`.Grid` or :data:`None`
        """

        self._surface = surface
        if terrain is None and isinstance(surface, GridSurface):
            terrain = surface.elevation
        self._terrain = terrain
        self._rng = np.random.default_rng(get_safe_seed(seed, bit_length))

    def place(self, candidate_mask: Grid, rule: PlacementRule,
              existing: Sequence[PlacedEntity] = (), *,
              feature: Optional[Sequence[PointType]] = None) -> PlacementResult:
        """Places entities of one kind.

        :param candidate_mask: Entities are only placed where it is at least
            :attr:`~.PlacementRule.mask_threshold`.
        :type candidate_mask: :class:`.Grid`
        :param rule: It is the rule of the kind.
        :type rule: :class:`.PlacementRule`
        :param existing: It is the list of every entity placed earlier, of any kind.
        :type existing: :class:`list` [:class:`.PlacedEntity`, ...]
        :param feature: It is the list of feature cells, required by ``'feature'`` strategy.
        :type feature: :class:`list` [:data:`.PointType`, ...] or :data:`None`
        :return: Entities placed by this call.
        :rtype: :class:`.PlacementResult`
        :raises: :exc:`.InsufficientCandidatesError` if less than
            :attr:`~.PlacementRule.min_count` entities could be placed.
        """

        rule.check()
        if rule.footprint is not None:
            if self._terrain is None:
                raise ValueError("Argument 'terrain' is required by rules with a footprint")
            check_same_size(candidate_mask, self._terrain)
        constraints = ConstraintSet(candidate_mask, rule, self._surface, existing)
        if rule.strategy == 'scan':
            result = self._scan(candidate_mask, rule, constraints)
        else:
            if feature is None:
                raise ValueError("Argument 'feature' is required by 'feature' strategy")
            result = self._along_feature(rule, constraints, feature)

        if result.degraded:
            warnings.warn("Only %d of %d '%s' entities could be placed" %
                          (len(result.entities), result.target, rule.kind),
                          DegradedResultWarning, stacklevel=2)
        if len(result.entities) < rule.min_count:
            raise InsufficientCandidatesError("Only %d of at least %d '%s' entities placed" %
                                              (len(result.entities), rule.min_count, rule.kind))
        logger.info("Entities placed", kind=rule.kind, strategy=rule.strategy,
                    placed=len(result.entities), target=rule.target_count,
                    attempts=result.attempts, footprint=rule.footprint)
        return result

    def _scale(self, rule: PlacementRule) -> float:
        return float(self._rng.uniform(*rule.scale_range))

    def _accept(self, rule: PlacementRule, constraints: ConstraintSet, x: float, y: float,
                elevation: float, rotation: float) -> PlacedEntity:
        rotation %= 360
        if rule.footprint is not None:
            elevation = max(elevation - rule.sink, 0.)
            flatten_footprint(self._terrain, x, y, rotation, rule.footprint, elevation)
        entity = PlacedEntity(rule.kind, x, y, elevation, rotation, self._scale(rule))
        constraints.add(entity)
        return entity

    def _scan(self, candidate_mask: Grid, rule: PlacementRule,
              constraints: ConstraintSet) -> PlacementResult:
        if rule.density_noise_scale is not None:
            gate: IntensityFunction = NoiseDensityFunction(
                rule.density, NoiseField.from_rng(self._rng, rule.density_noise_scale))
        else:
            gate = UniformDensityFunction(rule.density)
        if rule.rotation_coherence is not None:
            orientation = NoiseField.from_rng(self._rng, rule.rotation_coherence)
        else:
            orientation = None

        entities = []
        attempts = 0
        width, height = candidate_mask.size
        for y in np.arange(rule.step / 2, height, rule.step):
            for x in np.arange(rule.step / 2, width, rule.step):
                if rule.target_count is not None and len(entities) >= rule.target_count:
                    return PlacementResult(rule.kind, entities, attempts, rule.target_count)
                attempts += 1

                if rule.jitter > 0:
                    j_x, j_y = self._rng.uniform(-.5, .5, 2) * rule.jitter * rule.step
                    c_x, c_y = float(x + j_x), float(y + j_y)
                else:
                    c_x, c_y = float(x), float(y)
                elevation = constraints.evaluate(c_x, c_y)
                if elevation is None:
                    continue
                if not gate.is_accepted((c_x, c_y), self._rng.random()):
                    continue

                if orientation is not None:
                    rotation = min(floor(orientation.value(c_x, c_y) * 4), 3) * 90.
                else:
                    rotation = float(self._rng.uniform(0, 360))
                entities.append(self._accept(rule, constraints, c_x, c_y, elevation,
                                             rotation + rule.rotation_offset))
        return PlacementResult(rule.kind, entities, attempts, rule.target_count)

    def _cluster_acceptance(self, rule: PlacementRule, centres: np.ndarray,
                            point: np.ndarray) -> float:
        distance = float(np.min(np.hypot(*(centres - point).T)))
        if distance <= rule.core_radius:
            return 1.
        if distance >= rule.max_radius:
            return 0.
        return 1 - (distance - rule.core_radius) / (rule.max_radius - rule.core_radius)

    def _along_feature(self, rule: PlacementRule, constraints: ConstraintSet,
                       feature: Sequence[PointType]) -> PlacementResult:
        points = np.array(feature, dtype=np.float64).reshape(-1, 2)
        entities = []
        attempts = 0
        if len(points) < 2:
            logger.warning("Feature too short to place along", kind=rule.kind,
                           points=len(points))
            return PlacementResult(rule.kind, entities, attempts, rule.target_count)

        tree = cKDTree(points)
        if rule.cluster_count > 0:
            chosen = self._rng.choice(len(points), min(rule.cluster_count, len(points)),
                                      replace=False)
            centres = points[chosen]
        else:
            centres = None

        max_attempts = rule.target_count * rule.attempt_multiplier
        while len(entities) < rule.target_count and attempts < max_attempts:
            attempts += 1
            anchor = points[self._rng.integers(len(points))]
            if (centres is not None and
                    self._rng.random() >= self._cluster_acceptance(rule, centres, anchor)):
                continue

            _, (_, nearest) = tree.query(anchor, k=2)
            tangent = points[nearest] - anchor
            length = np.hypot(*tangent)
            if length == 0:
                continue
            tangent /= length
            side = 1 if self._rng.random() < .5 else -1
            offset = self._rng.uniform(*rule.offset_range)
            x, y = anchor + np.array((-tangent[1], tangent[0])) * side * offset
            x, y = float(x), float(y)

            if tree.query((x, y))[0] < rule.offset_range[0] / 2:
                continue
            elevation = constraints.evaluate(x, y)
            if elevation is None:
                continue

            rotation = degrees(atan2(anchor[1] - y, anchor[0] - x)) + rule.rotation_offset
            entities.append(self._accept(rule, constraints, x, y, elevation, rotation))

        return PlacementResult(rule.kind, entities, attempts, rule.target_count)
