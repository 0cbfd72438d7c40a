"""Application bootstrap for fieldaudit.

Wires components in dependency order and manages the asyncio lifecycle.
Startup order: config -> logging -> change log -> REST

Shutdown runs in reverse: the REST server drains first, then the change log
is closed.
"""

from __future__ import annotations

import asyncio
import signal
from typing import TYPE_CHECKING

from fieldaudit.config import load_config
from fieldaudit.ledger import ChangeLog
from fieldaudit.models.config import FieldAuditConfig
from fieldaudit.observability.logging import get_logger, setup_logging

if TYPE_CHECKING:
    import structlog

_SHUTDOWN_GRACE_SECONDS = 15


class _ComponentError(Exception):
    """Raised when a mandatory component fails to start."""

    def __init__(self, component: str, cause: Exception) -> None:
        super().__init__(f"Component '{component}' failed to start: {cause}")
        self.component = component
        self.cause = cause


class FieldAuditApp:
    """Application root.  Owns every component and coordinates their lifecycle.

    Calling ``stop()`` on an app that was never started (or already stopped)
    is safe.
    """

    def __init__(self) -> None:
        self.config: FieldAuditConfig | None = None
        self._change_log: ChangeLog | None = None
        self._rest_server: object | None = None
        self._background_tasks: list[asyncio.Task[None]] = []
        self._running = False
        self._log: structlog.stdlib.BoundLogger | None = None

    async def start(self) -> None:
        """Start all components in dependency order.

        Raises _ComponentError if a mandatory component cannot start.
        """
        self.config = load_config()

        setup_logging(self.config.log.level, self.config.log.format)
        self._log = get_logger("app")
        self._log.info("fieldaudit starting", version=_fieldaudit_version())

        await self._start_change_log()
        await self._start_rest()

        self._running = True
        self._log.info("fieldaudit started", port=self.config.api.port)

    async def _start_change_log(self) -> None:
        """Open the configured change log sink."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting change log")
        try:
            from fieldaudit.ledger import build_change_log

            self._change_log = build_change_log(
                self.config.change_log.backend,
                self.config.change_log.sqlite_path,
            )
            self._log.info("change log started", backend=self.config.change_log.backend)
        except Exception as exc:
            raise _ComponentError("change_log", exc) from exc

    async def _start_rest(self) -> None:
        """Start the uvicorn REST server."""
        assert self._log is not None
        assert self.config is not None
        self._log.debug("starting rest api")
        try:
            import uvicorn

            from fieldaudit.api import create_app

            fastapi_app = create_app(change_log=self._change_log, config=self.config)
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

    async def stop(self) -> None:
        """Stop the REST server, then close the change log."""
        if not self._running and self._log is None:
            return

        log = self._log or get_logger("app")
        log.info("fieldaudit shutting down")
        self._running = False

        if self._rest_server is not None:
            self._rest_server.should_exit = True  # type: ignore[attr-defined]
        for task in self._background_tasks:
            try:
                await asyncio.wait_for(task, timeout=_SHUTDOWN_GRACE_SECONDS)
            except TimeoutError:
                log.warning("rest server stop timed out", timeout=_SHUTDOWN_GRACE_SECONDS)
                task.cancel()
            except Exception as exc:  # noqa: BLE001
                log.error("rest server raised on shutdown", error=str(exc))
        self._background_tasks.clear()
        self._rest_server = None

        if self._change_log is not None:
            try:
                self._change_log.stop()
            except Exception as exc:  # noqa: BLE001
                log.error("change log stop raised an error", sink=self._change_log.sink_name, error=str(exc))
            self._change_log = None
        log.info("fieldaudit stopped")


def _fieldaudit_version() -> str:
    from fieldaudit import __version__

    return __version__


# ---------------------------------------------------------------------------
# Async entrypoint
# ---------------------------------------------------------------------------


async def main() -> None:
    """Create the app, register OS signals, run until shutdown is requested."""
    app = FieldAuditApp()
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
        log.critical(
            "fatal startup error",
            component=exc.component,
            error=str(exc.cause),
        )
        await app.stop()
        raise SystemExit(1) from exc
    finally:
        if app._running:
            await app.stop()


def run() -> None:
    """Console-script entrypoint."""
    asyncio.run(main())
