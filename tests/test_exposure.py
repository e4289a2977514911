"""Tests for NodePort exposure and host resolution."""

import pytest
import yaml

from fdb.core.catalog import KIND_CONFIGS, WorkloadKind
from fdb.core.errors import ConfigurationError, ExternalToolError, ResourceNotReadyError
from fdb.exposure import (
    ExposureManager,
    build_service_manifest,
    parse_port,
    parse_server_host,
    port_queries,
)

SERVICE = "pg1-postgresql-external"


@pytest.fixture
def manager(kubectl, clock):
    return ExposureManager(kubectl, sleep=clock.sleep)


class TestParsePort:
    """Tests for nodePort extraction from jsonpath output."""

    @pytest.mark.parametrize(
        "output,expected",
        [
            ("31234", 31234),
            ("  31234\n", 31234),
            ("0 31234", 31234),
            ("abc 30001 30002", 30001),
            ("", None),
            ("0", None),
            ("70000", None),
            ("３１２３４", None),
        ],
    )
    def test_parse_port(self, output, expected):
        """The first ASCII token in 1..65535 wins."""
        assert parse_port(output) == expected


class TestServiceManifest:
    """Tests for the generated NodePort Service."""

    def test_manifest_shape(self):
        """The Service selects the primary replica and maps the kind's port."""
        manifest = build_service_manifest(KIND_CONFIGS[WorkloadKind.REDIS], "cache", "default")

        assert manifest["metadata"] == {"name": "cache-redis-external", "namespace": "default"}
        assert manifest["spec"]["type"] == "NodePort"
        assert manifest["spec"]["selector"] == {
            "app.kubernetes.io/instance": "cache",
            "apps.kubeblocks.io/component-name": "redis",
            "kubeblocks.io/role": "primary",
        }
        assert manifest["spec"]["ports"] == [
            {"port": 6379, "targetPort": 6379, "protocol": "TCP", "name": "redis"}
        ]


class TestEnsureExternalEndpoint:
    """Tests for ExposureManager.ensure_external_endpoint."""

    def test_creates_missing_service(self, manager, runner):
        """A missing Service is applied from a YAML manifest on stdin."""
        runner.on("get", "svc", SERVICE, "-n", "default", "-o", "name", returncode=1, stderr="NotFound")
        runner.on(f"jsonpath={port_queries(5432)[0]}", stdout="31234")

        port = manager.ensure_external_endpoint(WorkloadKind.POSTGRESQL, "pg1")

        assert port == 31234
        ((argv, manifest),) = [(a, i) for a, i in runner.calls if "apply" in a]
        assert argv[-3:] == ("apply", "-f", "-")
        document = yaml.safe_load(manifest)
        assert document["metadata"]["name"] == SERVICE
        assert document["spec"]["ports"][0]["targetPort"] == 5432

    def test_create_then_reuse(self, manager, runner):
        """The first call creates the Service, the second reuses it."""
        runner.sequence(
            ("-o", "name"),
            [(1, "", f'services "{SERVICE}" not found'), (0, f"service/{SERVICE}\n", "")],
        )
        runner.on(f"jsonpath={port_queries(5432)[0]}", stdout="31234")

        first = manager.ensure_external_endpoint(WorkloadKind.POSTGRESQL, "pg1")
        second = manager.ensure_external_endpoint(WorkloadKind.POSTGRESQL, "pg1")

        assert first == second == 31234
        assert len(runner.calls_matching("apply")) == 1
        assert len(runner.calls_matching("-o", "name")) == 2

    def test_existing_service_is_not_reapplied(self, manager, runner):
        """A pre-existing Service is never applied again."""
        runner.on("-o", "name", stdout=f"service/{SERVICE}\n")
        runner.on(f"jsonpath={port_queries(5432)[0]}", stdout="31234")

        first = manager.ensure_external_endpoint(WorkloadKind.POSTGRESQL, "pg1")
        second = manager.ensure_external_endpoint(WorkloadKind.POSTGRESQL, "pg1")

        assert first == second == 31234
        assert runner.calls_matching("apply") == []

    def test_apply_failure(self, manager, runner):
        """A rejected apply raises ExternalToolError with kubectl's stderr."""
        runner.on("-o", "name", returncode=1)
        runner.on("apply", returncode=1, stderr="admission webhook denied")

        with pytest.raises(ExternalToolError) as exc_info:
            manager.ensure_external_endpoint(WorkloadKind.POSTGRESQL, "pg1")
        assert exc_info.value.message == "kubectl apply -f - failed: admission webhook denied"

    def test_falls_back_to_other_query_shapes(self, manager, runner):
        """Empty or failing queries fall through to the next shape."""
        runner.on("-o", "name", stdout=f"service/{SERVICE}")
        runner.on(f"jsonpath={port_queries(5432)[0]}", stdout="")
        runner.on(f"jsonpath={port_queries(5432)[1]}", returncode=1)
        runner.on(f"jsonpath={port_queries(5432)[2]}", stdout="30500")

        assert manager.ensure_external_endpoint(WorkloadKind.POSTGRESQL, "pg1") == 30500

    def test_port_assigned_on_later_attempt(self, manager, runner, clock):
        """Discovery retries with a fixed delay until the port shows up."""
        runner.on("-o", "name", stdout=f"service/{SERVICE}")
        runner.sequence(
            (f"jsonpath={port_queries(5432)[0]}",),
            [(0, "", ""), (0, "", ""), (0, "31999", "")],
        )
        runner.on("jsonpath={.spec.ports[*].nodePort}", stdout="")
        runner.on("jsonpath={.spec.ports[0].nodePort}", stdout="")

        assert manager.ensure_external_endpoint(WorkloadKind.POSTGRESQL, "pg1") == 31999
        assert clock.sleeps == [0.5, 0.5]

    def test_gives_up_after_attempts(self, manager, runner, clock):
        """Exhausted attempts raise ResourceNotReadyError with a hint command."""
        runner.on("-o", "name", stdout=f"service/{SERVICE}")

        with pytest.raises(ResourceNotReadyError) as exc_info:
            manager.ensure_external_endpoint(WorkloadKind.POSTGRESQL, "pg1")

        assert f"kubectl get svc {SERVICE} -n default -o yaml" in exc_info.value.message
        assert len(runner.calls_matching("-o", "jsonpath={.spec.ports[0].nodePort}")) == 3
        assert clock.sleeps == [0.5, 0.5]

    def test_alias_kind(self, manager, runner):
        """Kind names are accepted as strings."""
        runner.on("-o", "name", stdout="service/q-qdrant-external")
        runner.on("jsonpath={.spec.ports[?(@.port==6333)].nodePort}", stdout="32000")

        assert manager.ensure_external_endpoint("qdrant", "q") == 32000


class TestResolveHost:
    """Tests for API server host resolution."""

    @pytest.mark.parametrize(
        "url,expected",
        [
            ("https://10.0.0.5:6443", "10.0.0.5"),
            ("https://api.dev.example.com:6443\n", "api.dev.example.com"),
            ("http://localhost", "localhost"),
            ("https://[fd00::1]:6443", "[fd00::1]"),
            ("tcp://10.0.0.5:6443", None),
            ("", None),
            ("https://", None),
        ],
    )
    def test_parse_server_host(self, url, expected):
        """Only http(s) URLs with a host parse; IPv6 hosts are bracketed."""
        assert parse_server_host(url) == expected

    def test_resolve_host(self, manager, runner):
        """The host comes from the current context's server URL."""
        runner.on("config", "view", stdout="https://192.168.49.2:8443")
        assert manager.resolve_host() == "192.168.49.2"

    def test_config_view_failure(self, manager, runner):
        """A failing kubectl config view raises ExternalToolError."""
        runner.on("config", "view", returncode=1, stderr="no context")
        with pytest.raises(ExternalToolError):
            manager.resolve_host()

    def test_unparseable_url(self, manager, runner):
        """An unusable server URL raises ConfigurationError."""
        runner.on("config", "view", stdout="")
        with pytest.raises(ConfigurationError):
            manager.resolve_host()
