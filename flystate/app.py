"""Application bootstrap for flystate.

Wires all components in dependency order and manages the asyncio lifecycle.
Startup order: config -> logging -> remote client -> resource registry -> REST

Shutdown stops components in reverse startup order. Each stop step is caught
and logged independently so one failure does not block the rest.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING, Any

from flystate.config import load_config
from flystate.models.config import FlyStateConfig
from flystate.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog

    from flystate.client.api import FlyAPI

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class FlyStateApp:
    """Application root. Owns the remote client, the registry and the REST server.

    ``stop()`` is safe on an app that was never started or is already stopped.
    """

    def __init__(self) -> None:
        self.config: FlyStateConfig | None = None
        self._api: FlyAPI | None = None
        self._registry: dict[str, Any] = {}
        self._rest_server: object | None = None
        self._background_tasks: list[asyncio.Task[None]] = []
        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    # ------------------------------------------------------------------
    # Startup
    # ------------------------------------------------------------------

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start.
        """
        # --- 1. Configuration -------------------------------------------
        self.config = load_config()

        # --- 2. Logging -------------------------------------------------
        setup_logging(self.config.log.level)
        self._log = get_logger("app")
        self._log.info("flystate starting", version=_flystate_version())

        # --- 3. Remote client -------------------------------------------
        self._start_client()

        # --- 4. Resource registry ---------------------------------------
        self._start_registry()

        # --- 5. REST API ------------------------------------------------
        await self._start_rest()

        self._running = True
        self._log.info("flystate started", port=self.config.api.port)

    def _start_client(self) -> None:
        assert self._log is not None
        assert self.config is not None
        try:
            from flystate.client import build_api

            self._api = build_api(self.config.client)
        except Exception as exc:
            raise _ComponentError("client", exc) from exc
        self._log.info(
            "remote client ready",
            endpoint=self.config.client.endpoint,
            debug_trace=self.config.client.debug_trace,
        )

    def _start_registry(self) -> None:
        assert self._log is not None
        assert self._api is not None
        from flystate.resources import build_registry

        self._registry = build_registry(self._api)
        self._log.info("resource registry ready", resource_types=sorted(self._registry))

    async def _start_rest(self) -> None:
        """Start the uvicorn REST server."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting rest api")
        try:
            import uvicorn

            from flystate.api import create_app

            fastapi_app = create_app(registry=self._registry, api=self._api, config=self.config)
            uv_config = uvicorn.Config(
                app=fastapi_app,
                host="0.0.0.0",
                port=self.config.api.port,
                log_config=None,  # structlog handles all logging
                access_log=False,
            )
            server = uvicorn.Server(uv_config)
            task = asyncio.create_task(server.serve(), name="rest-server")
            self._background_tasks.append(task)
            self._rest_server = server
            self._log.info("rest api started", port=self.config.api.port)
        except Exception as exc:
            raise _ComponentError("rest", exc) from exc

    # ------------------------------------------------------------------
    # Shutdown
    # ------------------------------------------------------------------

    async def stop(self) -> None:
        """Stop all components in reverse startup order."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("flystate shutting down")
        self._running = False

        if self._rest_server is not None:
            self._rest_server.should_exit = True  # type: ignore[attr-defined]

        for task in reversed(self._background_tasks):
            if not task.done():
                try:
                    await asyncio.wait_for(asyncio.shield(task), timeout=_SHUTDOWN_GRACE_SECONDS)
                except TimeoutError:
                    log.warning("rest api stop timed out", timeout=_SHUTDOWN_GRACE_SECONDS)
                    task.cancel()
                except Exception as exc:
                    log.error("rest api stop raised an error", error=str(exc))
        self._background_tasks.clear()
        self._rest_server = None
        self._registry = {}

        await self._stop_client()
        log.info("flystate stopped")

    async def _stop_client(self) -> None:
        """Close the httpx connection pool held by the remote client."""
        if self._api is None:
            return
        log = self._log or get_logger("app")
        try:
            await self._api.close()
        except Exception as exc:
            log.debug("client close raised (non-fatal)", error=str(exc))
        self._api = None


def _flystate_version() -> str:
    from flystate import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main() -> None:
    """Create the app, register OS signals, run until shutdown is requested."""
    app = FlyStateApp()
    loop = asyncio.get_running_loop()

    shutdown_triggered = False

    def _request_shutdown() -> None:
        nonlocal shutdown_triggered
        if shutdown_triggered:
            return
        shutdown_triggered = True
        asyncio.create_task(app.stop(), name="shutdown")

    for sig in (signal.SIGTERM, signal.SIGINT):
        loop.add_signal_handler(sig, _request_shutdown)

    try:
        await app.start()
        while app._running:
            await asyncio.sleep(1)
    except _ComponentError as exc:
        log = get_logger("app")
        log.critical("fatal startup error", component=exc.component, error=str(exc.cause))
        await app.stop()
        raise SystemExit(1) from exc
    finally:
        if app._running:
            await app.stop()
