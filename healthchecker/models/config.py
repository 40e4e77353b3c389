"""Configuration data structures."""

from __future__ import annotations

from dataclasses import dataclass, field

DEFAULT_NAMESPACE_PREFIXES = ("openshift-", "kube-")


@dataclass(frozen=True)
class NamespaceRule:
    """Which namespaces count as platform/system namespaces.

    The ``kube-`` default prefix covers kube-system, kube-public,
    kube-node-lease and any future kube-* namespace, so ``exact_names`` is
    empty by default.  It exists for non-prefixed names such as ``monitoring``.
    """

    prefixes: frozenset[str] = frozenset(DEFAULT_NAMESPACE_PREFIXES)
    exact_names: frozenset[str] = frozenset()


@dataclass(frozen=True)
class CheckerConfig:
    """Check scheduling configuration."""

    interval_seconds: float = 30.0
    api_timeout_seconds: float = 10.0
    namespaces: NamespaceRule = field(default_factory=NamespaceRule)


@dataclass(frozen=True)
class APIConfig:
    """Metrics HTTP server configuration."""

    port: int = 8080


@dataclass(frozen=True)
class LogConfig:
    """Logging configuration."""

    level: str = "info"


@dataclass(frozen=True)
class HealthCheckerConfig:
    """Top-level health checker configuration."""

    checker: CheckerConfig = field(default_factory=CheckerConfig)
    api: APIConfig = field(default_factory=APIConfig)
    log: LogConfig = field(default_factory=LogConfig)
