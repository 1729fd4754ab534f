"""
Tests for configuration loading and default resolution
"""
import pytest

from costimator.config.settings import (
    ClusterConf,
    CostimatorConfig,
    ResourceConf,
    Settings,
    resolve_resource_config,
)
from costimator.core.exceptions import ConfigurationException


class TestResolveResourceConfig:
    """Tests for merging overrides onto the built-in defaults"""

    def test_no_overrides_gives_defaults(self):
        config = resolve_resource_config()

        assert config.machine_family == "E2"
        assert config.region == "us-central1"
        assert config.default_cpu_millicores == 250
        assert config.default_memory_bytes == 64000000
        assert config.unbounded_limit_buffer_percent == 200
        assert config.nodes_count == 3

    def test_provided_values_override(self):
        override = CostimatorConfig(
            resource_conf=ResourceConf(machine_family="N2", default_cpu_millicores=100),
            cluster_conf=ClusterConf(nodes_count=7),
        )
        config = resolve_resource_config(override)

        assert config.machine_family == "N2"
        assert config.default_cpu_millicores == 100
        assert config.nodes_count == 7
        assert config.region == "us-central1"

    def test_zero_and_empty_never_override(self):
        override = CostimatorConfig(
            resource_conf=ResourceConf(region="", default_memory_bytes=0),
            cluster_conf=ClusterConf(nodes_count=0),
        )
        config = resolve_resource_config(override)

        assert config.region == "us-central1"
        assert config.default_memory_bytes == 64000000
        assert config.nodes_count == 3

    def test_later_overrides_win(self):
        first = CostimatorConfig(resource_conf=ResourceConf(region="europe-west1"))
        second = CostimatorConfig(resource_conf=ResourceConf(region="asia-east1"))

        assert resolve_resource_config(first, None, second).region == "asia-east1"


class TestCostimatorConfigFile:
    """Tests for YAML config files"""

    def test_camel_case_keys(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text(
            "resourceConf:\n"
            "  machineFamily: N1\n"
            "  region: europe-west4\n"
            "  defaultCPUinMillis: 500\n"
            "  defaultMemoryinBytes: 128000000\n"
            "  percentageIncreaseForUnboundedRerouces: 50\n"
            "clusterConf:\n"
            "  nodesCount: 9\n"
        )

        config = resolve_resource_config(CostimatorConfig.from_yaml(path))

        assert config.machine_family == "N1"
        assert config.region == "europe-west4"
        assert config.default_cpu_millicores == 500
        assert config.default_memory_bytes == 128000000
        assert config.unbounded_limit_buffer_percent == 50
        assert config.nodes_count == 9

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationException):
            CostimatorConfig.from_yaml(tmp_path / "missing.yaml")

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("- a\n- b\n")

        with pytest.raises(ConfigurationException):
            CostimatorConfig.from_yaml(path)

    def test_unknown_machine_family(self, tmp_path):
        path = tmp_path / "config.yaml"
        path.write_text("resourceConf:\n  machineFamily: Z9\n")

        with pytest.raises(ConfigurationException):
            CostimatorConfig.from_yaml(path)


class TestSettings:
    """Tests for environment settings"""

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("COSTIMATOR_RESOURCE_REGION", "europe-west1")
        monkeypatch.setenv("COSTIMATOR_CLUSTER_NODES_COUNT", "5")

        config = resolve_resource_config(Settings.create_from_env().to_costimator_config())

        assert config.region == "europe-west1"
        assert config.nodes_count == 5

    def test_log_level_is_case_insensitive(self, monkeypatch):
        monkeypatch.setenv("LOG_LEVEL", "debug")

        assert Settings.create_from_env().log_level == "DEBUG"
