"""Tests for road and river networks."""

import numpy as np
import pytest
from scipy import ndimage

from landscape_rg.common import DegradedResultWarning, InsufficientCandidatesError, NetworkConfig
from landscape_rg.grid import Grid
from landscape_rg.network import (Brush, NetworkBuilder, build_network, centre_cells,
                                  flatten_terrain, flatten_under, line_cells, rasterize_path)


@pytest.fixture
def full_mask():
    return Grid.full(64, 64, 1.)


@pytest.fixture
def slope():
    """Elevation rising along rows."""
    return Grid(np.tile(np.linspace(0., 1., 64)[:, None], (1, 64)))


def is_connected(mask, threshold=.5):
    _, count = ndimage.label(mask.data >= threshold, structure=np.ones((3, 3)))
    return count == 1


class TestBrush:
    """Test radial stamps."""

    def test_hard_edge(self):
        brush = Brush.get(4., 0.)
        assert brush.shape == (5, 5)
        assert brush[2, 2] == 1. and brush[2, 0] == 1.
        assert brush[0, 0] == 0.

    def test_linear_falloff(self):
        brush = Brush.get(2., 2.)
        # inner radius 1, outer radius 2
        assert brush[2, 2] == 1.
        assert brush[2, 3] == pytest.approx(1.)
        assert brush[2, 4] == pytest.approx(0.)
        assert brush[3, 3] == pytest.approx(2 - np.sqrt(2))

    def test_cached(self):
        assert Brush.get(3., 1.) is Brush.get(3., 1.)
        Brush.clear_cache()
        assert Brush.get(3., 1.) is not None


class TestRasterization:
    """Test drawing lines and paths."""

    @pytest.mark.parametrize("end", [(20, 3), (0, 17), (13, 13), (-9, 5)])
    def test_line_cells_connected(self, end):
        cells = line_cells((0, 0), end)
        assert cells[0] == (0, 0) and cells[-1] == end
        assert all(max(abs(a[0] - b[0]), abs(a[1] - b[1])) == 1 for a, b in zip(cells, cells[1:]))

    def test_single_cell_line(self):
        assert line_cells((4, 4), (4, 4)) == [(4, 4)]

    def test_rasterize_path(self):
        mask = rasterize_path((32, 32), [(5, 5), (6, 6), (7, 7)], 2., 2.)
        assert mask.get(6, 6) == 1.
        assert mask.get(20, 20) == 0.
        assert mask.data.max() <= 1.

    def test_stamps_clipped_at_border(self):
        mask = rasterize_path((8, 8), [(0, 0), (7, 7)], 6., 4.)
        assert mask.get(0, 0) == 1. and mask.get(7, 7) == 1.


class TestNetworkBuilder:
    """Test uniform width networks."""

    def test_edge_count(self, full_mask):
        """Ten nodes are connected by nine edges."""
        network = build_network(full_mask, NetworkConfig(node_count=10), seed=3)
        assert len(network.nodes) == 10
        assert len({node.cell for node in network.nodes}) == 10
        assert len(network.edges) == 9
        assert network.widths == [6.] * 9
        assert not network.degraded

    def test_connected(self, full_mask):
        network = build_network(full_mask, NetworkConfig(node_count=12, width=2.,
                                                         smoothing_width=0.), seed=11)
        assert is_connected(network.mask)

    def test_nodes_respect_mask(self):
        data = np.zeros((64, 64))
        data[:, 32:] = 1.
        data[10, 40] = .4
        network = build_network(Grid(data), NetworkConfig(node_count=20), seed=5)
        assert all(node.x >= 32 for node in network.nodes)
        assert (40, 10) not in {node.cell for node in network.nodes}

    def test_reproducible(self, full_mask):
        a = build_network(full_mask, NetworkConfig(node_count=8), seed='roads')
        b = build_network(full_mask, NetworkConfig(node_count=8), seed='roads')
        assert a.nodes == b.nodes
        assert np.array_equal(a.mask.data, b.mask.data)

    def test_too_sparse(self):
        mask = Grid.zeros(16, 16)
        mask.set(3, 3, 1.)
        with pytest.raises(InsufficientCandidatesError):
            build_network(mask, NetworkConfig(node_count=5), seed=0)

    def test_degraded(self):
        mask = Grid.zeros(8, 8)
        for cell in ((1, 1), (6, 2), (3, 6)):
            mask.set(*cell, 1.)
        with pytest.warns(DegradedResultWarning):
            network = build_network(mask, NetworkConfig(node_count=5, attempt_multiplier=200),
                                    seed=0)
        assert len(network.nodes) == 3
        assert len(network.edges) == 2
        assert network.degraded

    def test_centre_cells(self, full_mask):
        network = build_network(full_mask, NetworkConfig(node_count=6), seed=9)
        cells = centre_cells(network)
        assert len(cells) == len(set(cells))
        assert {node.cell for node in network.nodes} <= set(cells)
        assert all(network.mask.get(*cell) == 1. for cell in cells)


class TestFlowGraded:
    """Test rivers, widened by flow toward the lowest node."""

    @pytest.fixture
    def config(self):
        return NetworkConfig(node_count=12, flow_graded=True, min_width=1., max_width=9.)

    def test_requires_elevation(self, full_mask, config):
        with pytest.raises(ValueError):
            NetworkBuilder(full_mask, config, seed=0)

    def test_root_is_lowest(self, full_mask, slope, config):
        network = build_network(full_mask, config, seed=4, elevation=slope)
        lowest = min(node.elevation for node in network.nodes)
        assert network.nodes[network.root].elevation == lowest
        assert network.flow[network.root] == len(network.nodes)

    def test_widest_at_root(self, full_mask, slope, config):
        network = build_network(full_mask, config, seed=4, elevation=slope)
        for edge, width in zip(network.edges, network.widths):
            assert config.min_width <= width <= config.max_width
            if network.root in (edge.u, edge.v):
                assert width == pytest.approx(config.max_width)
            else:
                assert width < config.max_width

    def test_widening_downstream(self, full_mask, slope, config):
        """Each edge is at most as wide as the edge it drains into."""
        network = build_network(full_mask, config, seed=8, elevation=slope)
        flow = network.flow
        for edge, width in zip(network.edges, network.widths):
            expected = config.min_width + (config.max_width - config.min_width) * max(
                flow[edge.u], flow[edge.v]) / len(network.nodes)
            assert width == pytest.approx(expected)


class TestFlattening:
    """Test pulling terrain toward road height."""

    def test_full_strength(self, slope):
        centres = [(x, 10) for x in range(64)]
        flatten_terrain(slope, centres, 4., 0., 1.)
        target = 10 / 63
        assert np.allclose(slope.data[8:13], target)
        assert slope.get(5, 13) == pytest.approx(13 / 63)

    def test_half_strength(self, slope):
        flatten_terrain(slope, [(x, 10) for x in range(64)], 4., 0., .5)
        assert slope.get(5, 8) == pytest.approx((8 / 63 + 10 / 63) / 2)

    def test_stays_in_unit_range(self, slope):
        flatten_terrain(slope, [(0, 0), (63, 63), (5, 60)], 10., 6., 1.)
        assert slope.data.min() >= 0. and slope.data.max() <= 1.

    def test_zero_strength(self, full_mask, slope):
        before = slope.copy()
        network = build_network(full_mask, NetworkConfig(node_count=5), seed=2, elevation=slope)
        flatten_under(slope, network, NetworkConfig(node_count=5, flatten_strength=0.))
        assert np.array_equal(before.data, slope.data)

    def test_invalid_strength(self, slope):
        with pytest.raises(ValueError):
            flatten_terrain(slope, [(1, 1)], 2., 0., 1.5)
