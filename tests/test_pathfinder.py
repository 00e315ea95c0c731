"""Tests for the slope-aware A* pathfinder."""

import numpy as np
import pytest

from landscape_rg.common import PathNotFoundError
from landscape_rg.grid import Grid
from landscape_rg.pathfinder import Pathfinder, find_path


@pytest.fixture
def flat():
    return Grid.zeros(64, 64)


@pytest.fixture
def ridge():
    """Elevation rising toward the middle column."""
    columns = np.abs(np.arange(32) - 16) / 16
    return Grid(np.tile(1 - columns, (32, 1)))


def is_connected(pixels):
    return all(max(abs(a[0] - b[0]), abs(a[1] - b[1])) == 1 for a, b in zip(pixels, pixels[1:]))


class TestFlatTerrain:
    """Test paths where only distance matters."""

    def test_diagonal(self, flat):
        """A 64x64 diagonal takes 63 diagonal steps."""
        path = find_path(flat, (0, 0), (63, 63), slope_penalty=5.)
        assert len(path) == 64
        assert path.cost == pytest.approx(882)
        assert path.pixels == [(i, i) for i in range(64)]

    def test_straight(self, flat):
        path = find_path(flat, (3, 10), (13, 10))
        assert path.cost == pytest.approx(100)
        assert path.pixels[0] == (3, 10) and path.pixels[-1] == (13, 10)

    def test_octile_cost(self, flat):
        """Cost on flat terrain equals the octile distance."""
        path = find_path(flat, (2, 5), (40, 17))
        assert path.cost == pytest.approx(Pathfinder.octile((2, 5), (40, 17)))
        assert is_connected(path.pixels)

    def test_same_endpoints(self, flat):
        path = find_path(flat, (5, 5), (5, 5))
        assert path.cost == 0
        assert path.pixels == [(5, 5)]

    def test_deterministic(self, flat):
        a = find_path(flat, (0, 7), (50, 30))
        b = find_path(flat, (0, 7), (50, 30))
        assert a.pixels == b.pixels


class TestSlope:
    """Test penalizing elevation change."""

    def test_cost_grows_with_penalty(self, ridge):
        costs = [find_path(ridge, (0, 0), (31, 31), slope_penalty=penalty).cost
                 for penalty in (0., 10., 100., 1000.)]
        assert costs == sorted(costs)
        assert costs[-1] > costs[0]

    def test_cost_includes_climb(self, ridge):
        """Crossing the ridge costs at least the distance plus the climb both ways."""
        path = find_path(ridge, (0, 16), (31, 16), slope_penalty=100.)
        assert path.cost >= 310 + 100 * (1 + 15 / 16) - 1e-9
        assert is_connected(path.pixels)

    def test_negative_penalty(self, ridge):
        with pytest.raises(ValueError):
            Pathfinder(ridge, -1.)


class TestFailures:
    """Test when no path can be found."""

    @pytest.mark.parametrize("start,end", [((-1, 0), (5, 5)), ((0, 0), (64, 5))])
    def test_out_of_bounds(self, flat, start, end):
        with pytest.raises(PathNotFoundError):
            find_path(flat, start, end)

    def test_walled_off(self):
        obstacles = Grid.zeros(16, 16)
        obstacles.data[:, 8] = 1.
        with pytest.raises(PathNotFoundError):
            find_path(Grid.zeros(16, 16), (0, 0), (15, 15), obstacles=obstacles)

    def test_blocked_endpoint(self):
        obstacles = Grid.zeros(16, 16)
        obstacles.set(15, 15, .5)
        with pytest.raises(PathNotFoundError):
            find_path(Grid.zeros(16, 16), (0, 0), (15, 15), obstacles=obstacles)

    def test_gap_is_found(self):
        obstacles = Grid.zeros(16, 16)
        obstacles.data[:, 8] = 1.
        obstacles.set(8, 3, 0.)
        path = find_path(Grid.zeros(16, 16), (0, 0), (15, 15), obstacles=obstacles)
        assert (8, 3) in path.pixels
        assert all(obstacles.get(*pixel) < .5 for pixel in path.pixels)
