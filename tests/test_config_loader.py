"""Tests for fdb.yaml loading and cluster spec merging."""

from pathlib import Path

import pytest

from fdb.config.loader import (
    FdbConfig,
    build_cluster_spec,
    get_config_path,
    load_config,
    resolve_kubeconfig,
    validate_cluster_name,
)
from fdb.config.settings import Settings
from fdb.core.catalog import WorkloadKind
from fdb.core.errors import ConfigurationError, InvalidInputError


class TestGetConfigPath:
    """Tests for config file discovery."""

    def test_explicit_path(self, tmp_path):
        """An explicit existing path is used as is."""
        path = tmp_path / "custom.yaml"
        path.write_text("{}")
        assert get_config_path(path) == path

    def test_explicit_missing(self, tmp_path):
        """An explicit missing path raises ConfigurationError."""
        with pytest.raises(ConfigurationError):
            get_config_path(tmp_path / "missing.yaml")

    def test_cwd_before_home(self, tmp_path, monkeypatch):
        """The working directory is searched before the home directory."""
        cwd = tmp_path / "work"
        home = tmp_path / "home"
        cwd.mkdir()
        home.mkdir()
        (cwd / "fdb.yaml").write_text("{}")
        (home / "fdb.yaml").write_text("{}")
        monkeypatch.chdir(cwd)

        assert get_config_path(home=home) == cwd / "fdb.yaml"

    def test_home_fallback(self, tmp_path, monkeypatch):
        """The home directory is used when the working directory has no file."""
        home = tmp_path / "home"
        home.mkdir()
        (home / "fdb.yaml").write_text("{}")
        monkeypatch.chdir(tmp_path)

        assert get_config_path(home=home) == home / "fdb.yaml"

    def test_nothing_found(self, tmp_path, monkeypatch):
        """No file anywhere yields None."""
        monkeypatch.chdir(tmp_path)
        assert get_config_path(home=tmp_path / "nowhere") is None


class TestLoadConfig:
    """Tests for load_config."""

    def test_defaults_without_file(self, tmp_path, monkeypatch):
        """Without a file the config is empty."""
        monkeypatch.chdir(tmp_path)
        config = load_config(home=tmp_path)
        assert config.kubeconfig is None
        assert config.kinds == {}
        assert config.source is None

    def test_parses_sections(self, tmp_path):
        """Kind sections resolve aliases and unknown sections are dropped."""
        path = tmp_path / "fdb.yaml"
        path.write_text(
            "kubernetes:\n"
            "  kubeconfig: /etc/kube/dev\n"
            "postgresql:\n"
            "  replicas: 3\n"
            "  storage: 10Gi\n"
            "rabbit:\n"
            "  cpu: 1\n"
            "mysql:\n"
            "  replicas: 2\n"
        )

        config = load_config(path)

        assert config.kubeconfig == "/etc/kube/dev"
        assert config.source == path
        assert config.overrides_for(WorkloadKind.POSTGRESQL).replicas == 3
        assert config.overrides_for(WorkloadKind.POSTGRESQL).storage == "10Gi"
        assert config.overrides_for(WorkloadKind.RABBITMQ).cpu == "1"
        assert set(config.kinds) == {WorkloadKind.POSTGRESQL, WorkloadKind.RABBITMQ}

    def test_empty_file(self, tmp_path):
        """An empty file is an empty config."""
        path = tmp_path / "fdb.yaml"
        path.write_text("")
        assert load_config(path).kinds == {}

    def test_invalid_yaml(self, tmp_path):
        """Malformed YAML raises ConfigurationError."""
        path = tmp_path / "fdb.yaml"
        path.write_text("postgresql: [unclosed\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_not_a_mapping(self, tmp_path):
        """A top-level list raises ConfigurationError."""
        path = tmp_path / "fdb.yaml"
        path.write_text("- a\n- b\n")
        with pytest.raises(ConfigurationError):
            load_config(path)

    def test_kubernetes_not_a_mapping(self, tmp_path):
        """A scalar kubernetes section raises ConfigurationError naming the file."""
        path = tmp_path / "fdb.yaml"
        path.write_text("kubernetes: x\n")
        with pytest.raises(ConfigurationError) as exc_info:
            load_config(path)
        assert "kubernetes" in exc_info.value.message
        assert str(path) in exc_info.value.message

    @pytest.mark.parametrize("value", ["oops", ["a"], 3])
    def test_kubernetes_not_a_mapping_from_dict(self, value):
        """from_dict rejects a non-mapping kubernetes value."""
        with pytest.raises(ConfigurationError):
            FdbConfig.from_dict({"kubernetes": value})

    def test_invalid_replicas(self, tmp_path):
        """Invalid replica counts in the file are rejected."""
        path = tmp_path / "fdb.yaml"
        path.write_text("redis:\n  replicas: 0\n")
        with pytest.raises(InvalidInputError):
            load_config(path)


class TestResolveKubeconfig:
    """Tests for kubeconfig precedence."""

    def test_override_wins(self):
        """A command-line path beats the file."""
        config = FdbConfig(kubeconfig="/from/file")
        assert resolve_kubeconfig(config, "/from/cli") == Path("/from/cli")

    def test_file_value(self):
        """The file value is used without an override."""
        assert resolve_kubeconfig(FdbConfig(kubeconfig="/from/file")) == Path("/from/file")

    def test_default(self):
        """The fallback is ~/.kube/config."""
        assert resolve_kubeconfig(FdbConfig()) == Path("~/.kube/config").expanduser()


class TestValidateClusterName:
    """Tests for cluster name validation."""

    @pytest.mark.parametrize("name", ["pg1", "my-db", "a"])
    def test_valid(self, name):
        """RFC 1123 labels pass through unchanged."""
        assert validate_cluster_name(name) == name

    @pytest.mark.parametrize("name", ["", "PG1", "1db", "db-", "my_db", "x" * 64])
    def test_invalid(self, name):
        """Everything else raises InvalidInputError."""
        with pytest.raises(InvalidInputError):
            validate_cluster_name(name)


class TestBuildClusterSpec:
    """Tests for merging sizing into a ClusterSpec."""

    def test_catalog_defaults(self):
        """With no overrides the kind defaults apply."""
        spec = build_cluster_spec(WorkloadKind.POSTGRESQL, "pg1", FdbConfig())

        assert (spec.replicas, spec.storage, spec.cpu, spec.memory) == (1, "2Gi", "0.5", "0.8Gi")

    def test_cli_beats_file_beats_default(self):
        """Command-line values beat file values, which beat defaults."""
        config = FdbConfig.from_dict(
            {"postgresql": {"replicas": 3, "storage": "10Gi", "memory": "2Gi"}}
        )

        spec = build_cluster_spec(
            WorkloadKind.POSTGRESQL,
            "pg1",
            config,
            kubeconfig="/tmp/kc",
            replicas=5,
        )

        assert spec.replicas == 5
        assert spec.storage == "10Gi"
        assert spec.memory == "2Gi"
        assert spec.cpu == "0.5"
        assert spec.kubeconfig == Path("/tmp/kc")

    def test_invalid_name(self):
        """An invalid cluster name is rejected."""
        with pytest.raises(InvalidInputError):
            build_cluster_spec(WorkloadKind.REDIS, "Bad_Name", FdbConfig())


class TestSettings:
    """Tests for environment settings."""

    def test_env_prefix(self, monkeypatch, tmp_path):
        """FDB_ variables populate Settings."""
        monkeypatch.setenv("FDB_HOME", str(tmp_path))
        monkeypatch.setenv("FDB_NAMESPACE", "databases")

        settings = Settings()

        assert settings.home_dir == tmp_path
        assert settings.bin_dir == tmp_path / "bin"
        assert settings.namespace == "databases"
