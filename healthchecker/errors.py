"""Exception types shared across the health checker."""

from __future__ import annotations


class HealthCheckerError(Exception):
    """Base class for all health checker errors."""


class ConfigError(HealthCheckerError):
    """Raised when startup configuration is invalid.  Always fatal."""

    def __init__(self, variable: str, value: str, reason: str) -> None:
        super().__init__(f"{variable} {reason} (got {value!r})")
        self.variable = variable
        self.value = value
        self.reason = reason


class FetchError(HealthCheckerError):
    """Raised when a cluster API call fails (transport, auth, not-found, timeout).

    Check units recover from this locally by reporting the fail-closed value.
    """

    def __init__(self, operation: str, cause: BaseException | str) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class ClusterConnectionError(HealthCheckerError):
    """Raised when the Kubernetes client cannot be configured or created."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"cannot configure cluster access: {cause}")
        self.cause = cause
