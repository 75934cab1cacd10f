"""
Tests for ConfigLoader and the configuration models.
"""

import pytest
from pydantic import ValidationError

from vsan_collector.config import (
    CollectionConfig,
    ConfigError,
    ConfigLoader,
    ConfigState,
    VCenterConfig,
    get_config,
)
from vsan_collector.shared.models.enums import VSAN_PERF_ENTITY_GROUPS, EntityGroup


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "VSAN_ENV",
        "VSAN_CONFIG_DIR",
        "VSAN_VCENTER_URL",
        "VSAN_SESSION_COOKIE",
        "VSAN_WINDOW_MINUTES",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def config_dir(tmp_path):
    (tmp_path / "vcenter.yaml").write_text(
        "url: https://vc01.example/\nverify_ssl: true\ntimeout: 30\n"
    )
    (tmp_path / "collection.yaml").write_text(
        "window_minutes: 10\n"
        "clusters:\n"
        "  - vcenter: vc01.example\n"
        "    dcname: dc-east\n"
        "    name: cluster-a\n"
        "    moid: domain-c7\n"
    )
    (tmp_path / "logging.yaml").write_text("level: WARNING\njson_logs: true\n")
    env_dir = tmp_path / "env"
    env_dir.mkdir()
    (env_dir / "dev.yaml").write_text(
        "logging:\n  level: DEBUG\nvcenter:\n  verify_ssl: false\n"
    )
    return tmp_path


class TestConfigLoader:
    def test_loads_sections_from_files(self, config_dir):
        state = ConfigLoader(config_dir).load()

        assert state.vcenter.url == "https://vc01.example"
        assert state.vcenter.timeout == 30
        assert state.vcenter.endpoint == "https://vc01.example/vsanHealth"
        assert state.collection.window_minutes == 10
        assert [c.moid for c in state.collection.clusters] == ["domain-c7"]
        assert state.env == "dev"
        assert state.config_dir == str(config_dir)

    def test_env_file_overrides_section_files(self, config_dir):
        state = ConfigLoader(config_dir).load()

        assert state.logging.level == "DEBUG"
        assert state.vcenter.verify_ssl is False
        # Keys absent from the env file survive the merge
        assert state.logging.json_logs is True
        assert state.vcenter.timeout == 30

    def test_env_selects_env_file(self, config_dir, monkeypatch):
        (config_dir / "env" / "prod.yaml").write_text("logging:\n  level: ERROR\n")
        monkeypatch.setenv("VSAN_ENV", "prod")

        state = ConfigLoader(config_dir).load()

        assert state.env == "prod"
        assert state.logging.level == "ERROR"
        assert state.vcenter.verify_ssl is True

    def test_environment_variables_win(self, config_dir, monkeypatch):
        monkeypatch.setenv("VSAN_VCENTER_URL", "https://vc02.example")
        monkeypatch.setenv("VSAN_SESSION_COOKIE", "52c0ffee")
        monkeypatch.setenv("VSAN_WINDOW_MINUTES", "15")
        monkeypatch.setenv("LOG_LEVEL", "ERROR")

        state = ConfigLoader(config_dir).load()

        assert state.vcenter.url == "https://vc02.example"
        assert state.vcenter.session_cookie == "52c0ffee"
        assert state.collection.window_minutes == 15
        assert state.logging.level == "ERROR"

    def test_missing_directory_uses_defaults(self, tmp_path):
        state = ConfigLoader(tmp_path / "absent").load()

        assert state.vcenter.vsan_path == "/vsanHealth"
        assert state.vcenter.soap_action == "urn:vsan"
        assert state.collection.window_minutes == 5
        assert state.collection.entity_groups == list(VSAN_PERF_ENTITY_GROUPS)
        assert state.collection.clusters == []
        assert state.logging.level == "INFO"

    def test_unparseable_yaml_raises_config_error(self, tmp_path):
        (tmp_path / "vcenter.yaml").write_text("url: [unclosed\n")

        with pytest.raises(ConfigError):
            ConfigLoader(tmp_path).load()

    def test_non_mapping_yaml_raises_config_error(self, tmp_path):
        (tmp_path / "collection.yaml").write_text("- just\n- a list\n")

        with pytest.raises(ConfigError):
            ConfigLoader(tmp_path).load()

    def test_invalid_values_raise_validation_error(self, tmp_path):
        (tmp_path / "collection.yaml").write_text("window_minutes: 0\n")

        with pytest.raises(ValidationError):
            ConfigLoader(tmp_path).load()

    def test_get_config_reads_env_dir(self, config_dir, monkeypatch):
        monkeypatch.setenv("VSAN_CONFIG_DIR", str(config_dir))

        state = get_config()

        assert state.collection.window_minutes == 10

    def test_get_config_explicit_dir(self, config_dir):
        assert get_config(str(config_dir)).vcenter.url == "https://vc01.example"


class TestVCenterConfig:
    @pytest.mark.parametrize("url", ["vc01.example", "ftp://vc01.example", ""])
    def test_rejects_non_http_urls(self, url):
        with pytest.raises(ValidationError):
            VCenterConfig(url=url)

    def test_path_gets_leading_slash(self):
        config = VCenterConfig(url="https://vc", vsan_path="vsanHealth")
        assert config.endpoint == "https://vc/vsanHealth"

    def test_session_cookie_hidden_from_repr(self):
        config = VCenterConfig(url="https://vc", session_cookie="secret-cookie")
        assert "secret-cookie" not in repr(config)


class TestCollectionConfig:
    def test_groups_from_strings(self):
        config = CollectionConfig(entity_groups=["cache-disk", "vsan-pnic-net"])
        assert config.entity_groups == [
            EntityGroup.CACHE_DISK,
            EntityGroup.VSAN_PNIC_NET,
        ]

    def test_repeated_groups_are_collapsed(self):
        config = CollectionConfig(
            entity_groups=["cache-disk", "host-domclient", "cache-disk"]
        )
        assert config.entity_groups == [
            EntityGroup.CACHE_DISK,
            EntityGroup.HOST_DOMCLIENT,
        ]

    def test_unknown_group_rejected(self):
        with pytest.raises(ValidationError):
            CollectionConfig(entity_groups=["capacity-disk"])

    def test_empty_groups_rejected(self):
        with pytest.raises(ValidationError):
            CollectionConfig(entity_groups=[])

    @pytest.mark.parametrize("minutes", [0, 61])
    def test_window_bounds(self, minutes):
        with pytest.raises(ValidationError):
            CollectionConfig(window_minutes=minutes)

    def test_cluster_fields_required(self):
        with pytest.raises(ValidationError):
            CollectionConfig(clusters=[{"vcenter": "vc", "dcname": "dc", "name": "c"}])


def test_config_state_defaults():
    state = ConfigState()
    assert state.env == "dev"
    assert state.logging.json_logs is True
