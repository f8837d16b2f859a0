"""Test-environment helpers shared by the test suite and ``dev`` mode."""

from .postgres import EphemeralPostgres, ProvisioningError, probe_connection

__all__ = ["EphemeralPostgres", "ProvisioningError", "probe_connection"]
