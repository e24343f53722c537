"""GeneratorConfig — tunable inputs of the terrain generator.

Parameters are plain data so a map can be regenerated from its config
alone.  They can be written by hand in YAML and loaded with
``GeneratorConfig.from_yaml``.
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path

import yaml


def _matches(value: object, kind: type) -> bool:
    """Return True if a YAML scalar can fill a field of type ``kind``."""
    if isinstance(value, bool):
        return kind is bool
    if kind is float:
        return isinstance(value, (int, float))
    return isinstance(value, kind)


@dataclass(frozen=True)
class GeneratorConfig:
    """Immutable terrain generation parameters.

    Thresholds are compared against the normalised height in ascending
    order.  They are not validated; a non-ascending set still produces a
    map, just a lopsided one.

    Attributes:
        width: Number of grid columns.
        height: Number of grid rows.
        seed: Seed for the noise hash and road placement.
        noise_scale: Base sampling frequency of the first octave.
        noise_octaves: Number of noise layers summed into the heightmap.
        ca_iterations: Cellular-automata smoothing passes.
        water_threshold: Heights below this become water.
        grass_threshold: Heights below this become grass.
        forest_threshold: Heights below this become forest.
        mountain_threshold: Heights below this become mountain or desert
            (picked by a secondary noise sample); above it, mountain.
        carve_corridors: Join regions the single connectivity patch pass
            left isolated by carving grass corridors.
    """

    width: int = 50
    height: int = 50
    seed: int = 42

    noise_scale: float = 0.05
    noise_octaves: int = 4

    ca_iterations: int = 3

    water_threshold: float = 0.3
    grass_threshold: float = 0.5
    forest_threshold: float = 0.7
    mountain_threshold: float = 0.85

    carve_corridors: bool = True

    @property
    def thresholds(self) -> tuple[float, float, float, float]:
        """The four classification thresholds, water first."""
        return (
            self.water_threshold,
            self.grass_threshold,
            self.forest_threshold,
            self.mountain_threshold,
        )

    @property
    def has_ascending_thresholds(self) -> bool:
        """Return True if every threshold is at least the previous one."""
        values = self.thresholds
        return all(lo <= hi for lo, hi in zip(values, values[1:]))

    def with_seed(self, seed: int) -> GeneratorConfig:
        """Return a copy of this config with a different seed."""
        return replace(self, seed=seed)

    @classmethod
    def from_yaml(cls, path: str | Path) -> GeneratorConfig:
        """Load a config from a flat YAML mapping.

        Missing keys keep their defaults.  Integer values are accepted for
        float fields; no other conversion is done.

        Args:
            path: Path to the YAML file.

        Returns:
            A populated GeneratorConfig.

        Raises:
            FileNotFoundError: If the file does not exist.
            ValueError: If the file is not a mapping, holds keys that are
                not config fields, or holds a value of the wrong type.
        """
        path = Path(path)
        with path.open("r") as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            msg = f"Generator config in {path} must be a mapping"
            raise ValueError(msg)

        known = {fld.name for fld in fields(cls)}
        unknown = sorted(set(data) - set(known))
        if unknown:
            msg = f"Unknown generator config keys in {path}: {', '.join(unknown)}"
            raise ValueError(msg)

        defaults = cls()
        values = {}
        for name in known:
            default = getattr(defaults, name)
            value = data.get(name, default)
            if not _matches(value, type(default)):
                kind = type(default).__name__
                msg = f"Generator config key {name!r} must be {kind}, got {value!r}"
                raise ValueError(msg)
            values[name] = type(default)(value)
        return cls(**values)
