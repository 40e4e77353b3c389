"""Application bootstrap for the health checker.

Wires all components in dependency order and manages the asyncio lifecycle.
Startup order: config → logging → K8s client → gauge registry → scheduler
              → initial check cycle → REST (/metrics) → scheduler loop

The initial cycle runs before the HTTP server starts so that the first
scrape already sees populated gauges.

Shutdown stops components in reverse startup order.  Each component's stop
error is caught and logged independently so that a single failure does not
prevent the rest from shutting down cleanly.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from healthchecker.checker import build_scheduler
from healthchecker.checker.scheduler import CheckScheduler
from healthchecker.cluster.client import ClusterClient, load_kube_configuration
from healthchecker.config import load_config
from healthchecker.errors import ConfigError
from healthchecker.models.config import HealthCheckerConfig
from healthchecker.observability.logging import get_logger, setup_logging
from healthchecker.observability.metrics import GaugeRegistry

if TYPE_CHECKING:
    import structlog

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class HealthCheckerApp:
    """Application root.  Owns every component and coordinates their lifecycle.

    Calling ``stop()`` on an app that was never started (or already stopped)
    is safe.
    """

    def __init__(self) -> None:
        self.config: HealthCheckerConfig | None = None
        self.registry: GaugeRegistry | None = None

        self._cluster: ClusterClient | None = None
        self._scheduler: CheckScheduler | None = None
        self._rest_server: object | None = None

        self._background_tasks: list[asyncio.Task[None]] = []
        self._stopped = asyncio.Event()
        self._startup_done = asyncio.Event()

        self._starting = False
        self._stopping = False
        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    @property
    def running(self) -> bool:
        return self._running

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start; every
        component is mandatory.  If ``stop()`` is called while startup is in
        progress, startup returns after its current step without starting
        anything further, and ``stop()`` tears down what was started.
        """
        self._starting = True
        try:
            await self._start_components()
        finally:
            self._starting = False
            self._startup_done.set()

    def _shutdown_requested(self, step: str) -> bool:
        if self._stopping:
            assert self._log is not None
            self._log.info("startup aborted, shutdown requested", before=step)
        return self._stopping

    async def _start_components(self) -> None:
        # --- 1. Configuration -------------------------------------------
        try:
            self.config = load_config()
        except ConfigError as exc:
            raise _ComponentError("config", exc) from exc

        # --- 2. Logging -------------------------------------------------
        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info(
            "health-checker starting",
            version=_version(),
            interval_seconds=self.config.checker.interval_seconds,
            port=self.config.api.port,
            namespace_prefixes=sorted(self.config.checker.namespaces.prefixes),
            namespace_names=sorted(self.config.checker.namespaces.exact_names),
        )

        # --- 3. Kubernetes client ----------------------------------------
        await self._start_k8s_client()
        if self._shutdown_requested("registry"):
            return

        # --- 4. Gauge registry + scheduler --------------------------------
        assert self._cluster is not None
        self.registry = GaugeRegistry()
        self._scheduler = build_scheduler(self._cluster, self.registry, self.config.checker)

        # --- 5. Initial check cycle ---------------------------------------
        self._log.info("running initial health check cycle")
        await self._scheduler.run_cycle()
        if self._shutdown_requested("rest"):
            return

        # --- 6. REST API ------------------------------------------------
        await self._start_rest()
        if self._shutdown_requested("scheduler"):
            return

        # --- 7. Periodic checks -----------------------------------------
        self._background_tasks.append(self._scheduler.start(initial_pass=False))

        self._running = True
        self._log.info("health-checker started", port=self.config.api.port)

    async def _start_k8s_client(self) -> None:
        """Configure kubernetes-asyncio and create the cluster client."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting k8s client")
        try:
            source = await load_kube_configuration()
            if self._stopping:
                return
            self._cluster = ClusterClient(timeout_seconds=self.config.checker.api_timeout_seconds)
            self._log.info("k8s client configured", source=source)
        except Exception as exc:
            raise _ComponentError("k8s_client", exc) from exc

    async def _start_rest(self) -> None:
        """Start the uvicorn server for /metrics and /healthz."""
        assert self._log is not None
        assert self.config is not None
        assert self.registry is not None
        self._log.debug("starting rest api")
        try:
            import uvicorn

            from healthchecker.api import create_app

            uv_config = uvicorn.Config(
                app=create_app(registry=self.registry),
                host="0.0.0.0",
                port=self.config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
            server = uvicorn.Server(uv_config)
            task = asyncio.create_task(server.serve(), name="rest-server")
            task.add_done_callback(self._on_rest_exit)
            self._background_tasks.append(task)
            self._rest_server = server
            self._log.info("serving metrics", port=self.config.api.port, paths=["/metrics", "/healthz"])
        except Exception as exc:
            raise _ComponentError("rest", exc) from exc

    def _on_rest_exit(self, task: asyncio.Task[None]) -> None:
        """Shut the whole app down when the HTTP server exits while we are running.

        uvicorn exits on its own after a failed bind, or after catching
        SIGTERM/SIGINT itself while serving.
        """
        if not self._running or task.cancelled():
            return
        log = self._log or get_logger("app")
        exc = task.exception()
        if exc is not None:
            log.error("rest server failed", error=str(exc))
        else:
            log.info("rest server exited")
        asyncio.create_task(self.stop(), name="shutdown")

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Gracefully stop all components in reverse startup order.

        A concurrent or repeated call waits for the first one to finish.
        """
        if self._stopping:
            await self._stopped.wait()
            return
        self._stopping = True

        if self._starting:
            # start() returns after its current step (possibly the initial
            # cycle); teardown must not close the client under it.
            await self._startup_done.wait()

        if self._log is None:
            # Never started
            self._stopped.set()
            return

        log = self._log or get_logger("app")
        log.info("health-checker shutting down")
        self._running = False

        # The scheduler finishes any in-flight cycle before returning.
        await self._stop_component("scheduler", self._scheduler)

        server = self._rest_server
        if server is not None:
            server.should_exit = True  # type: ignore[attr-defined]

        if self._background_tasks:
            done, pending = await asyncio.wait(self._background_tasks, timeout=_SHUTDOWN_GRACE_SECONDS)
            for task in pending:
                task.cancel()
            await asyncio.gather(*pending, return_exceptions=True)
            for task in done:
                if not task.cancelled() and task.exception() is not None:
                    log.debug("background task ended with error", task=task.get_name(), error=str(task.exception()))
        self._background_tasks.clear()

        await self._stop_component("k8s_client", self._cluster, method="close")

        log.info("health-checker stopped")
        self._stopped.set()

    async def _stop_component(self, name: str, component: object | None, method: str = "stop") -> None:
        """Call *method* on a component if it has one, catching all errors."""
        if component is None:
            return
        log = self._log or get_logger("app")
        stop_fn = getattr(component, method, None)
        if stop_fn is None:
            return
        try:
            result = stop_fn()
            if asyncio.iscoroutine(result):
                await asyncio.wait_for(result, timeout=_SHUTDOWN_GRACE_SECONDS)
        except TimeoutError:
            log.warning("component stop timed out", component=name, timeout=_SHUTDOWN_GRACE_SECONDS)
        except Exception as exc:
            log.error("component stop raised an error", component=name, error=str(exc))

    async def wait_stopped(self) -> None:
        await self._stopped.wait()


def _version() -> str:
    from healthchecker import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main() -> None:
    """Create the app, register OS signals, run until shutdown is requested."""
    app = HealthCheckerApp()
    loop = asyncio.get_running_loop()

    shutdown_triggered = False

    def _request_shutdown(sig: signal.Signals) -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            return
        shutdown_triggered = True
        get_logger("app").info("received signal, shutting down", signal=sig.name)
        asyncio.create_task(app.stop(), name="shutdown")

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_shutdown, sig)

    try:
        await app.start()
        await app.wait_stopped()
    except _ComponentError as exc:
        log = get_logger("app")
        log.critical(
            "fatal startup error",
            component=exc.component,
            error=str(exc.cause),
        )
        await app.stop()
        raise SystemExit(1) from exc
    finally:
        if app.running:
            await app.stop()
