"""Tests for tactigrid.mapgen.config — generator parameters and YAML loading."""

import dataclasses
from pathlib import Path

import pytest

from tactigrid.mapgen.config import GeneratorConfig

_REPO_CONFIG = Path(__file__).resolve().parent.parent / "config" / "default.yaml"


class TestGeneratorConfig:
    """Tests for defaults and helpers."""

    def test_defaults(self) -> None:
        cfg = GeneratorConfig()
        assert (cfg.width, cfg.height, cfg.seed) == (50, 50, 42)
        assert cfg.noise_scale == 0.05
        assert cfg.noise_octaves == 4
        assert cfg.ca_iterations == 3
        assert cfg.thresholds == (0.3, 0.5, 0.7, 0.85)
        assert cfg.carve_corridors is True

    def test_frozen(self) -> None:
        cfg = GeneratorConfig()
        with pytest.raises(dataclasses.FrozenInstanceError):
            cfg.seed = 1  # type: ignore[misc]

    def test_with_seed(self) -> None:
        cfg = GeneratorConfig(width=10)
        other = cfg.with_seed(43)
        assert other.seed == 43
        assert other.width == 10
        assert cfg.seed == 42

    def test_ascending_thresholds(self) -> None:
        assert GeneratorConfig().has_ascending_thresholds
        assert not GeneratorConfig(grass_threshold=0.1).has_ascending_thresholds


class TestFromYaml:
    """Tests for YAML config loading."""

    def test_from_yaml(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "map.yaml"
        yaml_file.write_text("seed: 99\nwidth: 16\nheight: 12\nnoise_scale: 0.1\n")
        cfg = GeneratorConfig.from_yaml(yaml_file)
        assert cfg.seed == 99
        assert cfg.width == 16
        assert cfg.height == 12
        assert cfg.noise_scale == 0.1
        assert cfg.noise_octaves == 4

    def test_int_accepted_for_float(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "map.yaml"
        yaml_file.write_text("water_threshold: 0\n")
        cfg = GeneratorConfig.from_yaml(yaml_file)
        assert isinstance(cfg.water_threshold, float)
        assert cfg.water_threshold == 0.0

    @pytest.mark.parametrize(
        "line",
        [
            "width: 10.9",
            "seed: '7'",
            "noise_octaves: true",
            "noise_scale: fine",
            "carve_corridors: 'no'",
            "carve_corridors: 1",
        ],
    )
    def test_wrong_value_type_rejected(self, tmp_path: Path, line: str) -> None:
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text(line + "\n")
        key = line.split(":")[0]
        with pytest.raises(ValueError, match=key):
            GeneratorConfig.from_yaml(yaml_file)

    def test_unquoted_yaml_boolean(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "map.yaml"
        yaml_file.write_text("carve_corridors: no\n")
        assert GeneratorConfig.from_yaml(yaml_file).carve_corridors is False

    def test_non_mapping_rejected(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "list.yaml"
        yaml_file.write_text("- width\n- height\n")
        with pytest.raises(ValueError, match="mapping"):
            GeneratorConfig.from_yaml(yaml_file)

    def test_empty_file_gives_defaults(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "empty.yaml"
        yaml_file.write_text("")
        assert GeneratorConfig.from_yaml(yaml_file) == GeneratorConfig()

    def test_unknown_key_rejected(self, tmp_path: Path) -> None:
        yaml_file = tmp_path / "bad.yaml"
        yaml_file.write_text("seed: 1\nroughness: 3\n")
        with pytest.raises(ValueError, match="roughness"):
            GeneratorConfig.from_yaml(yaml_file)

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(FileNotFoundError):
            GeneratorConfig.from_yaml(tmp_path / "nope.yaml")

    def test_shipped_default_matches_dataclass(self) -> None:
        assert GeneratorConfig.from_yaml(_REPO_CONFIG) == GeneratorConfig()
