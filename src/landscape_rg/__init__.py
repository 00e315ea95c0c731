"""Generates a settlement-ready landscape

Starting from an elevation grid the following steps are taken:

* a height map is synthesized from fractal OpenSimplex noise and flattened in plateau areas,
* land is classified into forest, settlement and farmland,
* river and road networks are built as minimum spanning trees over sampled nodes, roads flatten
    the terrain below them, a primary road may be routed using A*,
* houses are placed along roads, paddies and trees are scattered on a lattice.

Modules include:

    :mod:`landscape_rg.grid`
        A dense grid of floats used for elevation and masks alike.

    :mod:`landscape_rg.height_map`
        Fractal noise synthesis, a mountain rising from outside of the grid and plateaus.

    :mod:`landscape_rg.zones`
        Classification of land use.

    :mod:`landscape_rg.pathfinder`
        A slope-aware A* pathfinder over the 8-connected grid.

    :mod:`landscape_rg.spanning_tree`
        Kruskal's algorithm and flow accumulation.

    :mod:`landscape_rg.network`
        Road and river networks, rasterization and terrain flattening.

    :mod:`landscape_rg.placement`
        Constrained placement of entities, sampling the surface through
        :data:`.surface.SurfaceSampler`.

    :mod:`landscape_rg.point_process`
        A rejection sampler and an abstract :class:`~.point_process.IntensityFunction` providing
        an interface used by it, implemented in :mod:`landscape_rg.intensity`.

    :mod:`landscape_rg.landscape`
        The generation pipeline.

"""

__all__ = ("Bounds", "DegradedResultWarning", "DistanceConstraint", "Grid", "GridSurface",
           "HeightMap", "InsufficientCandidatesError", "InvalidDimensionsError",
           "LandscapeConfig", "LandscapeData", "LandscapeGenerator", "MountainConfig",
           "MountainMap", "Network", "NetworkBuilder", "NetworkConfig", "NoiseConfig",
           "PathNotFoundError", "Pathfinder", "PixelPath", "PlacedEntity", "PlacementEngine",
           "PlacementResult", "PlacementRule", "PlateauArea", "PointType", "SeedType", "ZoneConfig",
           "ZoneMasks", "apply_plateau", "build_network", "classify", "default_landscape_config",
           "find_path", "generate", "get_safe_seed", "intensity", "point_process", "synthesize",
           "synthesize_mountain")

from . import intensity, point_process, _version
from .common import (Bounds, DegradedResultWarning, DistanceConstraint,
                     InsufficientCandidatesError, InvalidDimensionsError, MountainConfig, Network,
                     NetworkConfig, NoiseConfig, PathNotFoundError, PixelPath, PlacedEntity,
                     PlacementResult, PlacementRule, PlateauArea, PointType, SeedType, ZoneConfig,
                     ZoneMasks, get_safe_seed)
from .grid import Grid
from .height_map import HeightMap, MountainMap, apply_plateau, synthesize, synthesize_mountain
from .landscape import (LandscapeConfig, LandscapeData, LandscapeGenerator,
                        default_landscape_config, generate)
from .network import NetworkBuilder, build_network
from .pathfinder import Pathfinder, find_path
from .placement import PlacementEngine
from .surface import GridSurface
from .zones import classify

__version__ = _version.__version__
"""Version of package"""
__version_info__ = tuple(int(i) for i in __version__.split('.') if i.isdigit())
