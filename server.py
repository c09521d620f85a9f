# server.py
"""
Main entry point for the Almanac environment service.
Builds the world, runs the ticker and autosave loop, and handles graceful shutdown.
"""
import asyncio
import logging
import config
from typing import Optional
from almanac.database import db_manager
from almanac.world import World
from almanac.ticker import Ticker

# --- Logging Setup ---
log_format = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
log_handlers = [
    logging.FileHandler("almanac.log"),
    logging.StreamHandler()
]
logging.basicConfig(
    level=logging.INFO,
    format=log_format,
    handlers=log_handlers
)
log = logging.getLogger(__name__)

world: Optional[World] = None


async def _autosave_loop(world: World, interval_seconds: int):
    """Periodically saves the world state."""
    log.info("Autosave task started. Interval: %d seconds.", interval_seconds)
    while True:
        try:
            await asyncio.sleep(interval_seconds)
            log.info("Autosave: Starting periodic world state save....")
            await world.save_state()
        except asyncio.CancelledError:
            log.info("Autosave task cancelled.")
            break
        except Exception:
            log.exception("Autosave: Unexpected error in autosave loop.")
            await asyncio.sleep(60)


async def main():
    """Service entry point."""
    global world

    log.info("Starting Almanac environment service...")

    await db_manager.connect()
    await db_manager.init_db()
    world = World(db_manager)
    if not await world.build():
        log.critical("!!! Failed to build world state. Service cannot start.")
        await db_manager.close()
        return

    ticker = Ticker(config.TICKER_INTERVAL_SECONDS)
    world.subscribe_to_ticker(ticker)
    ticker.start()
    autosave_task = None
    if config.AUTOSAVE_INTERVAL_SECONDS > 0:
        autosave_task = asyncio.create_task(_autosave_loop(world, config.AUTOSAVE_INTERVAL_SECONDS))

    try:
        await asyncio.Event().wait()
    except asyncio.CancelledError:
        log.info("Main task cancelled.")
    finally:
        log.info("Shutting down...")
        await ticker.stop()
        if autosave_task: autosave_task.cancel()
        await world.synchronizer.drain()

        log.info("Performing final world state save...")
        await world.save_state()

        await db_manager.close()
        log.info("Shutdown complete.")

if __name__ == "__main__":
    try:
        asyncio.run(main())
    except KeyboardInterrupt:
        log.info("Service stopped manually.")
