"""Liveness endpoint: GET / answers 200 "alive"."""

from __future__ import annotations

from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Optional

import structlog
from aiohttp import web

if TYPE_CHECKING:
    from cardano_listing_monitor.config import Settings


async def alive_handler(request: web.Request) -> web.Response:
    return web.Response(text="alive")


def create_health_app() -> web.Application:
    app = web.Application()
    app.router.add_get("/", alive_handler)
    return app


class HealthServer:
    """Small aiohttp site for process supervisors. Independent of monitoring health."""

    def __init__(
        self,
        settings: "Settings",
        *,
        get_logger: Callable[[str], Any] = structlog.get_logger,
        logger_name: Optional[str] = None,
    ) -> None:
        self._settings = settings
        self._logger = get_logger(logger_name or self.__class__.__name__)
        self._runner: Optional[web.AppRunner] = None

    @property
    def is_running(self) -> bool:
        return self._runner is not None

    async def start(self) -> None:
        cfg = self._settings.health
        if not cfg.enabled or self._runner is not None:
            return
        runner = web.AppRunner(create_health_app(), access_log=None)
        await runner.setup()
        site = web.TCPSite(runner, host=cfg.host, port=cfg.port)
        try:
            await site.start()
        except OSError:
            await runner.cleanup()
            raise
        self._runner = runner
        self._logger.info("health_server_started", health_host=cfg.host, health_port=cfg.port)

    async def stop(self) -> None:
        if self._runner is None:
            return
        await self._runner.cleanup()
        self._runner = None
        self._logger.info("health_server_stopped")
