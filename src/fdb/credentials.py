"""Account password lookup from the secret KubeBlocks generates per cluster."""

from __future__ import annotations

import base64
import binascii

import structlog

from fdb.core.catalog import WorkloadKind, get_kind_config, secret_name
from fdb.core.errors import DecodeError, ExternalToolError
from fdb.models import Credential
from fdb.tools.kubectl import Kubectl

logger = structlog.get_logger()

PASSWORD_JSONPATH = "{.data.password}"


def decode_secret_value(payload: str) -> str:
    """Decode a base64 secret field to text.

    Raises:
        DecodeError: If the payload is not base64 or not UTF-8
    """
    try:
        raw = base64.b64decode(payload.strip(), validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"secret value is not valid base64: {e}") from None
    try:
        return raw.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"password not utf-8: {e}") from None


class CredentialResolver:
    """Looks up the generated account credential for a cluster.

    Secrets are created together with the cluster, so there is no retry.
    """

    def __init__(self, kubectl: Kubectl):
        self.kubectl = kubectl

    def resolve(self, kind: WorkloadKind | str, cluster_name: str) -> Credential | None:
        config = get_kind_config(kind)
        if not config.has_credentials:
            return None

        name = secret_name(config.kind, cluster_name)
        result = self.kubectl.get_jsonpath("secret", name, PASSWORD_JSONPATH)
        if not result.ok:
            raise ExternalToolError(f"kubectl get secret {name} failed", result.stderr)

        password = decode_secret_value(result.stdout)
        logger.debug("credential_resolved", secret=name)
        return Credential(username=config.principal, password=password)
