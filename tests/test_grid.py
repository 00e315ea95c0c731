"""Tests for the dense grid used for elevation and masks."""

import numpy as np
import pytest
from PIL import Image

from landscape_rg.common import InvalidDimensionsError
from landscape_rg.grid import Grid, as_grid, check_same_size


@pytest.fixture
def ramp():
    """A 2x2 grid with distinct corners."""
    return Grid([[0., 1.], [2., 3.]])


class TestGridBasics:
    """Test construction and cell access."""

    def test_size_is_width_height(self):
        """Size is (columns, rows) while the array is row-major."""
        grid = Grid.zeros(4, 3)
        assert grid.size == (4, 3)
        assert grid.data.shape == (3, 4)

    def test_get_is_column_row(self):
        """Cells are addressed as (x, y)."""
        grid = Grid(np.arange(6).reshape(2, 3))
        assert grid.get(2, 0) == 2.
        assert grid.get(0, 1) == 3.

    def test_set_out_of_bounds(self):
        """Writing outside of the grid raises."""
        grid = Grid.zeros(2, 2)
        with pytest.raises(IndexError):
            grid.set(2, 0, 1.)
        with pytest.raises(IndexError):
            grid.get(0, -1)

    @pytest.mark.parametrize("data", [[1., 2.], np.zeros((0, 3)), np.zeros((2, 2, 2))])
    def test_invalid_dimensions(self, data):
        """Only non-empty two dimensional data is accepted."""
        with pytest.raises(InvalidDimensionsError):
            Grid(data)

    def test_full_requires_positive_size(self):
        with pytest.raises(InvalidDimensionsError):
            Grid.full(0, 3)


class TestSampling:
    """Test bilinear sampling and resampling."""

    def test_bilinear_centre(self, ramp):
        assert ramp.sample(.5, .5) == pytest.approx(1.5)

    def test_bilinear_edge(self, ramp):
        assert ramp.sample(1., .5) == pytest.approx(2.)

    def test_clamped_outside(self, ramp):
        """Coordinates outside of the grid are clamped to the nearest edge."""
        assert ramp.sample(-5., 0.) == pytest.approx(0.)
        assert ramp.sample(10., 10.) == pytest.approx(3.)

    def test_normalized(self, ramp):
        assert ramp.sample_normalized(1., 1.) == pytest.approx(3.)

    def test_resampled_constant(self):
        """Resampling a constant grid keeps its value."""
        grid = Grid.full(4, 4, .7).resampled(8, 6)
        assert grid.size == (8, 6)
        assert np.allclose(grid.data, .7, atol=1e-6)


class TestMaskAlgebra:
    """Test combination of masks."""

    @pytest.fixture
    def masks(self):
        return Grid([[0., .5], [1., .2]]), Grid([[1., .25], [.5, .2]])

    def test_union(self, masks):
        a, b = masks
        assert np.array_equal(a.union(b).data, [[1., .5], [1., .2]])

    def test_intersection(self, masks):
        a, b = masks
        assert np.array_equal(a.intersection(b).data, [[0., .25], [.5, .2]])

    def test_difference_is_clamped(self, masks):
        a, b = masks
        assert np.allclose(a.difference(b).data, [[0., .25], [.5, 0.]])

    def test_mismatched_sizes(self):
        with pytest.raises(InvalidDimensionsError):
            Grid.zeros(2, 2).union(Grid.zeros(3, 2))
        with pytest.raises(InvalidDimensionsError):
            check_same_size(Grid.zeros(2, 2), Grid.zeros(2, 2), Grid.zeros(2, 3))

    def test_binary_threshold_inclusive(self, masks):
        a, _ = masks
        assert np.array_equal(a.binary(.5).data, [[0., 1.], [1., 0.]])

    def test_clamp_in_place(self):
        grid = Grid([[-1., .5, 2.]])
        assert grid.clamp() is grid
        assert np.array_equal(grid.data, [[0., .5, 1.]])


class TestConversion:
    """Test in-memory conversion of textures and arrays."""

    def test_image_round_trip(self):
        grid = Grid([[0., 1.], [1., 0.]])
        image = grid.to_image()
        assert image.mode == 'L'
        assert np.array_equal(Grid.from_image(image).data, grid.data)

    def test_float_image(self):
        image = Image.fromarray(np.full((3, 5), .25, dtype=np.float32))
        assert Grid.from_image(image).size == (5, 3)
        assert Grid.from_image(image).get(4, 2) == pytest.approx(.25)

    def test_float_image_clamped(self):
        data = np.array([[-.5, .5], [1.5, 1.]], dtype=np.float32)
        grid = Grid.from_image(Image.fromarray(data))
        assert np.array_equal(grid.data, [[0., .5], [1., 1.]])

    def test_as_grid_clamps_arrays(self):
        grid = as_grid(np.array([[-2., .25], [3., 1.]]))
        assert grid.data.min() == 0. and grid.data.max() == 1.
        assert grid.get(1, 0) == pytest.approx(.25)

    def test_as_grid_keeps_grids(self):
        grid = Grid([[0., 1.]])
        assert as_grid(grid) is grid

    def test_as_grid_resamples(self):
        grid = as_grid(np.full((2, 2), .5), (4, 4))
        assert grid.size == (4, 4)
        assert np.allclose(grid.data, .5, atol=1e-6)

    def test_as_grid_rejects_other_types(self):
        with pytest.raises(TypeError):
            as_grid([[0., 1.]])
