"""Click commands: run the exporter, or run one check cycle and report.

Both commands read configuration from the same environment variables.
"""

from __future__ import annotations

import asyncio
import json

import click

from healthchecker.checker import build_scheduler
from healthchecker.cluster.client import ClusterClient, load_kube_configuration
from healthchecker.config import load_config
from healthchecker.errors import ClusterConnectionError, ConfigError
from healthchecker.models.config import HealthCheckerConfig
from healthchecker.models.metrics import HealthMetric
from healthchecker.observability.logging import setup_logging
from healthchecker.observability.metrics import GaugeRegistry

EXIT_HEALTHY = 0
EXIT_UNHEALTHY = 1
EXIT_CONFIG_ERROR = 2
EXIT_CLUSTER_ERROR = 3


async def check_once(config: HealthCheckerConfig) -> dict[HealthMetric, int | None]:
    """Run a single check cycle against the configured cluster and return the gauges.

    Raises:
        ClusterConnectionError: the kube configuration could not be loaded or
            the client could not be created.
    """
    try:
        await load_kube_configuration()
        cluster = ClusterClient(timeout_seconds=config.checker.api_timeout_seconds)
    except Exception as exc:
        raise ClusterConnectionError(exc) from exc
    registry = GaugeRegistry()
    try:
        await build_scheduler(cluster, registry, config.checker).run_cycle()
    finally:
        await cluster.close()
    return registry.snapshot()


def _load_or_exit() -> HealthCheckerConfig:
    try:
        return load_config()
    except ConfigError as exc:
        click.echo(f"invalid configuration: {exc}", err=True)
        raise SystemExit(EXIT_CONFIG_ERROR) from exc


@click.group()
@click.version_option(package_name="openshift-health-checker")
def cli() -> None:
    """OpenShift platform health checker."""


@cli.command()
def serve() -> None:
    """Run checks periodically and serve /metrics until SIGTERM/SIGINT."""
    from healthchecker.app import main

    asyncio.run(main())


@cli.command()
@click.option(
    "--output",
    "-o",
    type=click.Choice(["text", "json"]),
    default="text",
    show_default=True,
    help="Report format.",
)
def check(output: str) -> None:
    """Run one check cycle and print every gauge.

    Exits 0 when all gauges are healthy, 1 when any is unhealthy, 2 on
    invalid configuration, 3 when the cluster client cannot be configured.
    """
    config = _load_or_exit()
    setup_logging(config.log.level)
    try:
        values = asyncio.run(check_once(config))
    except ClusterConnectionError as exc:
        click.echo(str(exc), err=True)
        raise SystemExit(EXIT_CLUSTER_ERROR) from exc

    if output == "json":
        click.echo(json.dumps({metric.value: value for metric, value in values.items()}, indent=2))
    else:
        for metric, value in values.items():
            state = "healthy" if value == 0 else "UNHEALTHY"
            click.echo(f"{metric.value:<40} {value}  {state}")

    raise SystemExit(EXIT_UNHEALTHY if any(v != 0 for v in values.values()) else EXIT_HEALTHY)
