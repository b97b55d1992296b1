"""Tests for pipeline configuration."""

from pathlib import Path

import pytest
import yaml

from caleitc_schedules.config import PipelineConfig, YCTCPolicy
from caleitc_schedules.errors import ConfigError


class TestYCTCPolicy:
    def test_defaults(self):
        policy = YCTCPolicy()
        assert policy.start_year == 2019
        assert policy.amount == 1000
        assert policy.phaseout_start == 25000
        assert policy.phaseout_end == 30000
        assert policy.phaseout_rate == 0.2

    def test_active(self):
        policy = YCTCPolicy()
        assert not policy.active(2018)
        assert policy.active(2019)
        assert policy.active(2020)


class TestPipelineConfig:
    def test_defaults(self):
        config = PipelineConfig()
        assert config.years == [2015, 2016, 2017]
        assert config.max_dependents == 3
        assert config.state == "CA"
        assert config.publish is False
        assert config.output_dir == Path("data/interim")

    def test_all_years(self):
        config = PipelineConfig(years=[2015, 2017], tcja_years=(2017, 2018), yctc_year=2019)
        assert config.all_years == [2015, 2017, 2018, 2019]

    def test_publish_requires_directory(self):
        with pytest.raises(ConfigError):
            PipelineConfig(publish=True)

    def test_unknown_calculator(self):
        with pytest.raises(ConfigError):
            PipelineConfig(calculator="excel")

    def test_with_overrides_ignores_none(self):
        config = PipelineConfig().with_overrides(years=[2016], figure_dir=None)
        assert config.years == [2016]
        assert config.figure_dir == Path("output/figures")


class TestFromYaml:
    def test_load(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(yaml.dump({
            "years": [2016],
            "output_dir": str(tmp_path / "out"),
            "publish": True,
            "publish_dir": str(tmp_path / "paper"),
            "yctc": {"amount": 1000, "start_year": 2019},
        }))

        config = PipelineConfig.from_yaml(path)
        assert config.years == [2016]
        assert config.output_dir == tmp_path / "out"
        assert config.publish_dir == tmp_path / "paper"
        assert isinstance(config.yctc, YCTCPolicy)

    def test_empty_file_gives_defaults(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("")
        assert PipelineConfig.from_yaml(path).years == [2015, 2016, 2017]

    def test_unknown_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("yeers: [2016]\n")
        with pytest.raises(ConfigError, match="yeers"):
            PipelineConfig.from_yaml(path)

    def test_unknown_yctc_key(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("yctc:\n  credit: 5\n")
        with pytest.raises(ConfigError, match="credit"):
            PipelineConfig.from_yaml(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigError):
            PipelineConfig.from_yaml(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- 2016\n- 2017\n")
        with pytest.raises(ConfigError):
            PipelineConfig.from_yaml(path)


def test_shipped_config_loads():
    path = Path(__file__).parent.parent / "config" / "appendix_figures.yaml"
    config = PipelineConfig.from_yaml(path)
    assert config.years == [2015, 2016, 2017]
    assert config.child_ages == (4, 5)
    assert config.yctc == YCTCPolicy()
