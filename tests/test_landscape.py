"""Tests for the landscape generation pipeline."""

from dataclasses import replace
from math import floor, hypot

import numpy as np
import pytest

from landscape_rg.common import (DegradedResultWarning, InvalidDimensionsError, MountainConfig,
                                 NetworkConfig, NoiseConfig, PlateauArea, ZoneConfig)
from landscape_rg.landscape import (LandscapeConfig, LandscapeGenerator, default_house_rule,
                                    generate)

SEED = 'landscape'


@pytest.fixture(scope='module')
def config():
    """A small landscape, quick to generate."""
    return LandscapeConfig(
        width=96, height=96,
        noise=NoiseConfig(scale=40.),
        plateaus=(PlateauArea(30, 30, 30, 30, target=.3, falloff=5, name='village'),),
        rivers=NetworkConfig(node_count=8, width=2., smoothing_width=2., flow_graded=True,
                             min_width=1., max_width=5.),
        roads=NetworkConfig(node_count=8, width=3., smoothing_width=2., flatten_strength=.5),
        primary_road=((2, 2), (93, 93)),
        houses=replace(default_house_rule, target_count=15),
    )


@pytest.fixture(scope='module')
def data(config):
    return generate(config, seed=SEED)


class TestPipeline:
    """Test the output of a whole run."""

    def test_elevation_in_unit_range(self, data, config):
        assert data.size == (config.width, config.height)
        assert data.elevation.data.min() >= 0.
        assert data.elevation.data.max() <= 1.

    def test_entity_kinds(self, data):
        assert set(data.entities) == {'house', 'paddy', 'tree'}
        for kind, placed in data.entities.items():
            assert all(entity.kind == kind for entity in placed)

    def test_houses_in_settlement(self, data):
        for house in data.entities['house']:
            assert data.zones.settlement.sample(house.x, house.y) >= .5

    def test_paddies_in_farmland(self, data):
        for paddy in data.entities['paddy']:
            assert data.zones.farmland.sample(paddy.x, paddy.y) >= .5

    def test_paddies_avoid_houses(self, data, config):
        radius = dict(config.paddies.avoid)['house']
        for paddy in data.entities['paddy']:
            for house in data.entities['house']:
                assert hypot(paddy.x - house.x, paddy.y - house.y) >= radius

    def test_paddies_flatten_terrain(self, data):
        for paddy in data.entities['paddy']:
            cell = floor(paddy.x + .5), floor(paddy.y + .5)
            assert data.elevation.get(*cell) == pytest.approx(paddy.elevation)

    def test_trees_in_forest(self, data, config):
        low, high = config.trees.height_band
        for tree in data.entities['tree']:
            assert data.zones.forest.sample(tree.x, tree.y) >= .5
            assert low <= tree.elevation <= high

    def test_entities_off_roads_and_rivers(self, data):
        for placed in data.entities.values():
            for entity in placed:
                cell = floor(entity.x + .5), floor(entity.y + .5)
                assert data.road_mask.get(*cell) < .5
                assert data.rivers.mask.get(*cell) < .5

    def test_primary_road(self, data):
        if data.primary_road is None:
            assert 'primary_road' in data.degraded
        else:
            assert data.primary_road.pixels[0] == (2, 2)
            assert data.primary_road.pixels[-1] == (93, 93)
            assert all(data.road_mask.get(*pixel) >= .5 for pixel in data.primary_road.pixels)

    def test_rivers_flow_graded(self, data):
        if data.rivers.nodes:
            assert data.rivers.flow[data.rivers.root] == len(data.rivers.nodes)

    def test_world_positions(self, data, config):
        positions = data.world_positions('tree')
        assert len(positions) == len(data.entities['tree'])
        for x, y, z in positions:
            assert 0 <= x <= config.bounds.size_x
            assert 0 <= y <= config.bounds.size_y
            assert 0 <= z <= config.bounds.height


class TestReproducibility:
    """Test that equal seeds give equal landscapes."""

    def test_same_seed(self, data, config):
        again = LandscapeGenerator(config, seed=SEED).generate()
        assert again.seed == data.seed
        assert np.array_equal(again.elevation.data, data.elevation.data)
        assert np.array_equal(again.road_mask.data, data.road_mask.data)
        assert again.entities == data.entities
        assert again.degraded == data.degraded

    def test_different_seed(self, data, config):
        other = generate(config, seed='other')
        assert not np.array_equal(other.elevation.data, data.elevation.data)


class TestMountainMode:
    """Test the pipeline on a mountain instead of fractal noise."""

    @pytest.fixture(scope='class')
    def mountain_data(self, config):
        mountain = MountainConfig(radius=150., edge_offset=20., max_height=.6)
        return generate(replace(config, mountain=mountain), seed=SEED)

    def test_elevation_in_unit_range(self, mountain_data, config):
        assert mountain_data.size == (config.width, config.height)
        assert mountain_data.elevation.data.min() >= 0.
        assert mountain_data.elevation.data.max() <= 1.

    def test_differs_from_noise(self, mountain_data, data):
        assert not np.array_equal(mountain_data.elevation.data, data.elevation.data)

    def test_invalid_mountain(self):
        with pytest.raises(ValueError):
            LandscapeGenerator(LandscapeConfig(mountain=MountainConfig(radius=-1.)))


class TestDegradation:
    """Test that later stages tolerate reduced inputs."""

    def test_no_flat_land(self, config):
        everything_forest = replace(config, zones=ZoneConfig(forest_threshold=(0., 0.)))
        with pytest.warns(DegradedResultWarning):
            data = generate(everything_forest, seed=SEED)
        assert 'rivers' in data.degraded and 'roads' in data.degraded
        assert not data.rivers.nodes and not data.roads.nodes
        assert not data.entities['house']
        assert not data.entities['paddy']


class TestConfig:

    def test_invalid_size(self):
        with pytest.raises(InvalidDimensionsError):
            LandscapeGenerator(LandscapeConfig(width=0))

    def test_nested_config_checked(self):
        with pytest.raises(ValueError):
            LandscapeGenerator(LandscapeConfig(roads=NetworkConfig(node_count=1)))

    def test_invalid_primary_road(self):
        with pytest.raises(TypeError):
            LandscapeGenerator(LandscapeConfig(primary_road=((0, 0),)))

    def test_seed_property(self):
        assert LandscapeGenerator(seed=5).seed == 5
