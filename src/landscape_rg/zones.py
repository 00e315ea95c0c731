"""Land use classification"""

import numpy as np
import structlog

from .common import SeedType, ZoneConfig, ZoneMasks, get_safe_seed
from .grid import Grid
from .height_map import NoiseField

logger = structlog.get_logger()

default_zone_config = ZoneConfig()


def classify(elevation: Grid, config: ZoneConfig = default_zone_config, seed: SeedType = None,
             *, bit_length: int = 64) -> ZoneMasks:
    """Splits land into forest, settlement and farmland.

    Cells higher than a threshold drawn from :attr:`~.ZoneConfig.forest_threshold` are forest.
    The rest is split by a coherent noise field: values below :attr:`~.ZoneConfig.field_ratio`
    are farmland, others are settlement. The masks are binary, mutually exclusive and cover every
    cell.

    :param elevation: It is the elevation grid.
    :type elevation: :class:`.Grid`
    :param config: It contains threshold range, cluster scale and field ratio.
    :type config: :class:`.ZoneConfig`
    :param seed: It is used to draw threshold and clustering noise.
    :type seed: :data:`.SeedType`
    :param bit_length: It is used for creating a safe seed.
    :type bit_length: :class:`int`
    :return: Zone masks of the same size as `elevation`.
    :rtype: :class:`.ZoneMasks`
    """

    config.check()
    rng = np.random.default_rng(get_safe_seed(seed, bit_length))

    low, high = config.forest_threshold
    threshold = float(rng.uniform(low, high)) if low < high else float(low)

    forest = elevation.data > threshold
    noise = NoiseField.from_rng(rng, config.cluster_scale / max(elevation.size))
    farmland = ~forest & (noise.array(*elevation.size) < config.field_ratio)
    settlement = ~forest & ~farmland

    masks = ZoneMasks(Grid(forest.astype(np.float64)), Grid(settlement.astype(np.float64)),
                      Grid(farmland.astype(np.float64)), threshold)
    logger.info("Zones classified", forest_threshold=threshold,
                forest=int(forest.sum()), settlement=int(settlement.sum()),
                farmland=int(farmland.sum()))
    return masks
