"""Tests for tactigrid.mapgen.noise — lattice hash, value noise, heightmap."""

import numpy as np
import pytest

from tactigrid.mapgen.noise import fractal_heightmap, hash_noise, value_noise

_MASK = 0xFFFFFFFF


def reference_hash(x: int, y: int, seed: int) -> float:
    """Scalar 32-bit hash written out with explicit masking."""
    h = ((x & _MASK) * 374761393 + (y & _MASK) * 668265263) & _MASK
    h ^= ((seed + 0x9E3779B9) + ((h << 6) & _MASK) + (h >> 2)) & _MASK
    h = ((h ^ (h >> 13)) * 1274126177) & _MASK
    h ^= h >> 16
    return (h & 0x00FFFFFF) / 16777215.0


class TestHashNoise:
    """Tests for the integer lattice hash."""

    @pytest.mark.parametrize("seed", [0, 1, 42, 12345, -7, 2**31 - 1])
    def test_matches_reference(self, seed: int) -> None:
        xs, ys = np.meshgrid(np.arange(-6, 7), np.arange(-4, 9))
        values = hash_noise(xs, ys, seed)
        expected = np.array(
            [
                [reference_hash(int(x), int(y), seed) for x, y in zip(row_x, row_y)]
                for row_x, row_y in zip(xs, ys)
            ],
        )
        assert values.shape == xs.shape
        assert np.array_equal(values, expected)

    def test_scalar_input(self) -> None:
        value = hash_noise(3, 5, 42)
        assert np.ndim(value) == 0
        assert float(value) == reference_hash(3, 5, 42)

    def test_range(self) -> None:
        xs, ys = np.meshgrid(np.arange(64), np.arange(64))
        values = hash_noise(xs, ys, 99)
        assert values.min() >= 0.0
        assert values.max() <= 1.0

    def test_seed_changes_values(self) -> None:
        xs, ys = np.meshgrid(np.arange(16), np.arange(16))
        assert not np.array_equal(hash_noise(xs, ys, 1), hash_noise(xs, ys, 2))


class TestValueNoise:
    """Tests for smooth value noise."""

    def test_lattice_points_equal_hash(self) -> None:
        xs = np.array([0.0, 1.0, 2.0, -3.0])
        ys = np.array([0.0, 4.0, -1.0, 5.0])
        expected = hash_noise(xs.astype(int), ys.astype(int), 42)
        assert np.allclose(value_noise(xs, ys, 42), expected)

    def test_midpoint_is_corner_average(self) -> None:
        corners = [reference_hash(x, y, 7) for x, y in [(0, 0), (1, 0), (0, 1), (1, 1)]]
        value = value_noise(0.5, 0.5, 7)
        assert float(value) == pytest.approx(sum(corners) / 4)

    def test_values_stay_in_range(self) -> None:
        xs, ys = np.meshgrid(np.linspace(-5, 5, 41), np.linspace(-5, 5, 41))
        values = value_noise(xs, ys, 3)
        assert values.min() >= 0.0
        assert values.max() <= 1.0

    def test_deterministic(self) -> None:
        xs, ys = np.meshgrid(np.linspace(0, 3, 20), np.linspace(0, 3, 20))
        assert np.array_equal(value_noise(xs, ys, 5), value_noise(xs, ys, 5))


class TestFractalHeightmap:
    """Tests for the octave-summed heightmap."""

    def test_shape_is_rows_by_columns(self) -> None:
        heights = fractal_heightmap(7, 3, seed=1, scale=0.1, octaves=4)
        assert heights.shape == (3, 7)

    def test_normalised(self) -> None:
        heights = fractal_heightmap(32, 32, seed=8, scale=0.2, octaves=5)
        assert heights.min() >= 0.0
        assert heights.max() <= 1.0

    def test_single_octave_is_plain_noise(self) -> None:
        heights = fractal_heightmap(6, 4, seed=11, scale=0.3, octaves=1)
        ys, xs = np.mgrid[0:4, 0:6]
        assert np.allclose(heights, value_noise(xs * 0.3, ys * 0.3, 11))

    def test_zero_octaves_is_flat(self) -> None:
        heights = fractal_heightmap(5, 5, seed=1, scale=0.05, octaves=0)
        assert np.all(heights == 0.0)

    def test_empty(self) -> None:
        assert fractal_heightmap(0, 0, seed=1, scale=0.05, octaves=4).shape == (0, 0)
