"""HTTP keep-alive for hosts that suspend idle web processes.

Serves a liveness page and pings it on an interval so the process never looks
idle to the platform.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Optional

import aiohttp
from aiohttp import web

from .services.stats import RuntimeStats

log = logging.getLogger("epic_roles.keepalive")

SERVICE_NAME = "epic-roles"


def build_app(stats: RuntimeStats) -> web.Application:
    app = web.Application()

    async def index(_: web.Request) -> web.Response:
        return web.Response(text="Bot is alive ✅")

    async def health(_: web.Request) -> web.Response:
        return web.json_response({"ok": True, "service": SERVICE_NAME, **stats.snapshot()})

    app.router.add_get("/", index)
    app.router.add_get("/healthz", health)
    return app


class KeepAliveServer:
    def __init__(self, stats: RuntimeStats, port: int, ping_interval_seconds: float = 300) -> None:
        self.stats = stats
        self.port = port
        self.ping_interval_seconds = ping_interval_seconds
        self._runner: Optional[web.AppRunner] = None
        self._ping_task: Optional[asyncio.Task] = None

    @property
    def url(self) -> str:
        return f"http://localhost:{self.port}/"

    async def start(self) -> None:
        self._runner = web.AppRunner(build_app(self.stats))
        await self._runner.setup()
        site = web.TCPSite(self._runner, "0.0.0.0", self.port)
        await site.start()
        log.info(f"💡 Keep-alive server running on port {self.port}")

        self._ping_task = asyncio.create_task(self._ping_loop(), name="epic-roles-self-ping")

    async def stop(self) -> None:
        if self._ping_task is not None:
            self._ping_task.cancel()
            try:
                await self._ping_task
            except asyncio.CancelledError:
                pass
            self._ping_task = None
        if self._runner is not None:
            await self._runner.cleanup()
            self._runner = None

    async def ping_once(self, session: aiohttp.ClientSession) -> bool:
        try:
            async with session.get(self.url, timeout=aiohttp.ClientTimeout(total=10)) as resp:
                resp.raise_for_status()
        except (aiohttp.ClientError, asyncio.TimeoutError) as e:
            log.error(f"❌ Self-ping failed: {e}")
            return False
        log.info("💓 Self-ping successful")
        return True

    async def _ping_loop(self) -> None:
        async with aiohttp.ClientSession() as session:
            while True:
                await asyncio.sleep(self.ping_interval_seconds)
                await self.ping_once(session)
