"""Connection descriptor assembly."""

from __future__ import annotations

from fdb.core.catalog import WorkloadKind, connection_string, get_kind_config
from fdb.models import ConnectionDescriptor, Credential


def assemble(
    kind: WorkloadKind | str,
    user: str,
    credential: Credential | None,
    host: str | None,
    port: int | None,
) -> ConnectionDescriptor:
    """Compose the connection details shown after create.

    An empty host or a zero port means the endpoint could not be exposed;
    the descriptor then carries credentials only instead of a malformed URI.
    """
    config = get_kind_config(kind)
    password = credential.password if credential is not None else None

    if not host or not port:
        return ConnectionDescriptor(kind=config.kind, user=user, password=password)

    return ConnectionDescriptor(
        kind=config.kind,
        user=user,
        password=password,
        host=host,
        port=port,
        connection_string=connection_string(config.kind, user, password, host, port),
    )


class ConnectionAssembler:
    """Object form of ``assemble`` for injection into the workflow."""

    def assemble(
        self,
        kind: WorkloadKind | str,
        user: str,
        credential: Credential | None,
        host: str | None,
        port: int | None,
    ) -> ConnectionDescriptor:
        return assemble(kind, user, credential, host, port)
