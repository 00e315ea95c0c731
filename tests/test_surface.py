"""Tests for surface sampling."""

import numpy as np
import pytest

from landscape_rg.common import Bounds
from landscape_rg.grid import Grid
from landscape_rg.surface import GridSurface, slope_angle


class TestGridSurface:

    def test_flat(self):
        height, normal = GridSurface(Grid.full(8, 8, .3))(3.5, 2.)
        assert height == pytest.approx(.3)
        assert normal == pytest.approx((0., 0., 1.))
        assert slope_angle(normal) == pytest.approx(0.)

    def test_ramp_slope(self):
        """Rising 10 world units over a 10 units wide cell is 45 degrees."""
        ramp = Grid(np.tile(np.linspace(0., 1., 11), (11, 1)))
        surface = GridSurface(ramp, Bounds(size_x=100., size_y=100., height=100.))
        height, normal = surface(5., 5.)
        assert height == pytest.approx(.5)
        assert slope_angle(normal) == pytest.approx(45.)
        # normal leans away from the rise
        assert normal[0] < 0 and normal[1] == pytest.approx(0.)

    def test_vertical_extent_matters(self):
        ramp = Grid(np.tile(np.linspace(0., 1., 11), (11, 1)))
        low = GridSurface(ramp, Bounds(100., 100., 10.))(5., 5.)[1]
        high = GridSurface(ramp, Bounds(100., 100., 1000.))(5., 5.)[1]
        assert slope_angle(low) < slope_angle(high)

    def test_invalid_bounds(self):
        with pytest.raises(ValueError):
            GridSurface(Grid.zeros(4, 4), Bounds(size_x=0.))
