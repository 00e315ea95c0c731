"""Tests for the rejection sampler and intensity functions."""

import numpy as np
import pytest

from landscape_rg.grid import Grid
from landscape_rg.height_map import NoiseField
from landscape_rg.intensity import (MaskIntensityFunction, NoiseDensityFunction,
                                    UniformDensityFunction)
from landscape_rg.point_process import RejectionSampler


class TestRejectionSampler:

    def test_distinct_points(self):
        points = list(RejectionSampler(20, (8, 8), 0, max_attempts=1000))
        assert len(points) == 20
        assert len(set(points)) == 20
        assert all(0 <= x < 8 and 0 <= y < 8 for x, y in points)

    def test_bounded_attempts(self):
        sampler = RejectionSampler(10, (2, 2), 0, max_attempts=50)
        points = list(sampler)
        assert len(points) == 4
        assert sampler.attempts == 50

    def test_mask_intensity(self):
        data = np.zeros((10, 10))
        data[2:4, 5:9] = 1.
        sampler = RejectionSampler(MaskIntensityFunction(5, Grid(data)), (10, 10),
                                   np.random.default_rng(1), max_attempts=2000)
        points = list(sampler)
        assert len(points) == 5
        assert all(5 <= x < 9 and 2 <= y < 4 for x, y in points)

    def test_reproducible(self):
        a = list(RejectionSampler(10, (50, 50), 3, max_attempts=100))
        b = list(RejectionSampler(10, (50, 50), 3, max_attempts=100))
        assert a == b

    @pytest.mark.parametrize("kwargs,error", [
        (dict(rate=-1, size=(4, 4)), ValueError),
        (dict(rate=1, size=(4, 0)), ValueError),
        (dict(rate=1, size=[4, 4]), TypeError),
    ])
    def test_invalid_arguments(self, kwargs, error):
        with pytest.raises(error):
            RejectionSampler(seed=0, max_attempts=10, **kwargs)


class TestIntensityFunctions:

    def test_mask_threshold_inclusive(self):
        mask = Grid([[.5, .49]])
        function = MaskIntensityFunction(1, mask, .5)
        assert function.is_accepted((0, 0), .99)
        assert not function.is_accepted((1, 0), 0.)

    def test_uniform_density(self):
        function = UniformDensityFunction(.3)
        assert function.is_accepted((0, 0), .29)
        assert not function.is_accepted((0, 0), .3)

    def test_noise_density(self):
        noise = NoiseField(5, .2)
        function = NoiseDensityFunction(1., noise)
        assert function.is_accepted((3, 4), noise.value(3, 4) - 1e-6)
        assert not function.is_accepted((3, 4), noise.value(3, 4))
