from __future__ import annotations

import asyncio
import logging
import signal

from dotenv import load_dotenv

from .bot import EpicRolesBot
from .config import load_settings
from .keepalive import KeepAliveServer
from .logging_setup import setup_logging

log = logging.getLogger("epic_roles.main")


async def main_async() -> None:
    load_dotenv()
    settings = load_settings()
    setup_logging(settings.log_level)

    bot = EpicRolesBot(settings)

    keepalive = None
    if settings.keepalive_enabled:
        keepalive = KeepAliveServer(bot.stats, settings.port, settings.self_ping_interval_seconds)
        await keepalive.start()

    stop_event = asyncio.Event()

    def _signal_handler() -> None:
        stop_event.set()

    loop = asyncio.get_running_loop()
    for sig in (signal.SIGINT, signal.SIGTERM):
        try:
            loop.add_signal_handler(sig, _signal_handler)
        except NotImplementedError:
            # Windows
            pass

    try:
        async with bot:
            bot_task = asyncio.create_task(bot.start(settings.token), name="epic-roles-bot")
            stop_task = asyncio.create_task(stop_event.wait(), name="epic-roles-stop")
            done, pending = await asyncio.wait({bot_task, stop_task}, return_when=asyncio.FIRST_COMPLETED)

            if stop_event.is_set():
                log.info("Shutdown signal received; closing bot...")
                await bot.close()

            for t in pending:
                t.cancel()
            if bot_task in done:
                # Surface login failures instead of exiting silently.
                bot_task.result()
    finally:
        if keepalive is not None:
            await keepalive.stop()


def main() -> None:
    asyncio.run(main_async())


if __name__ == "__main__":
    main()
