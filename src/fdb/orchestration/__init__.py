"""Top-level provisioning workflow."""

from fdb.orchestration.provision import ProvisionResult, ProvisionWorkflow

__all__ = ["ProvisionResult", "ProvisionWorkflow"]
