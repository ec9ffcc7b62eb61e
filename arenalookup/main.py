"""
Server entry point.

Bootstraps the card data (downloading it on first run), then serves the
line protocol over TCP and on the local console until interrupted.

Usage:
    python -m arenalookup.main [--update] [--port PORT] [--no-stdin]
"""

import argparse
import asyncio
import functools
import logging
import sys

from arenalookup.config import Settings, settings
from arenalookup.models.failure import DatasetLoadError, DatasetRefreshError, KnownError
from arenalookup.models.session import create_session_scope
from arenalookup.server.console import run_console
from arenalookup.server.tcp import LookupServer
from arenalookup.services.command_interpreter import CommandInterpreter
from arenalookup.services.data_refresh import DatasetRefresher, refresh_and_reload
from arenalookup.services.dataset_store import DatasetStore

logger = logging.getLogger(__name__)


async def bootstrap(store: DatasetStore, refresher: DatasetRefresher, force_update: bool) -> None:
    """
    Make sure the store holds a Dataset before any client is accepted.

    Downloads the data when the backing file is missing or an update is forced.
    A failed forced update falls back to the existing file.

    Raises:
        DatasetRefreshError: If the file is missing and cannot be downloaded
        DatasetLoadError: If no usable data could be loaded
    """
    if not store.path.exists():
        logger.info("No card data at %s, downloading", store.path)
        await refresh_and_reload(store, refresher)
        return

    if force_update:
        try:
            await refresh_and_reload(store, refresher)
            return
        except KnownError as e:
            logger.warning("Update failed, using existing data: %s", e.describe())

    store.load()


def build_interpreter(
    config: Settings,
    store: DatasetStore,
    refresher: DatasetRefresher,
) -> CommandInterpreter:
    return CommandInterpreter(
        store=store,
        sessions=create_session_scope(config.session_scope, config.default_target_set),
        updater=functools.partial(refresh_and_reload, store, refresher),
    )


async def stop_console(console: asyncio.Task[None]) -> None:
    """Cancel the console reader and surface anything it died with."""
    console.cancel()
    try:
        await console
    except asyncio.CancelledError:
        pass
    except Exception:
        logger.exception("Console reader failed")


async def serve(config: Settings, force_update: bool = False) -> None:
    """Load the data, then serve TCP and console clients until cancelled."""
    store = DatasetStore(config.data_path)
    refresher = DatasetRefresher(config.data_url, timeout=config.download_timeout)
    await bootstrap(store, refresher, force_update)

    interpreter = build_interpreter(config, store, refresher)

    if "port" not in config.model_fields_set:
        logger.info("PORT variable not set, so defaulting to %d", config.port)

    server = LookupServer(
        interpreter,
        host=config.host,
        port=config.port,
        prefix=config.command_prefix,
    )
    await server.start()

    if config.read_stdin:
        console = asyncio.create_task(run_console(interpreter, prefix=config.command_prefix))
    else:
        console = None

    try:
        await server.serve_forever()
    finally:
        if console is not None:
            await stop_console(console)


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Serve card lookups over TCP")
    parser.add_argument(
        "--update",
        action="store_true",
        help="Download the latest card data before starting",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port to listen on (default: $PORT or 4000)",
    )
    parser.add_argument(
        "--no-stdin",
        action="store_true",
        help="Do not read commands from standard input",
    )
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    """CLI entry point."""
    args = parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    overrides: dict[str, object] = {}
    if args.port is not None:
        overrides["port"] = args.port
    if args.no_stdin:
        overrides["read_stdin"] = False
    config = settings.model_copy(update=overrides) if overrides else settings

    try:
        asyncio.run(serve(config, force_update=args.update))
    except (DatasetLoadError, DatasetRefreshError) as e:
        logger.error("Failed to start: %s", e.describe())
        if e.suggestion:
            logger.error(e.suggestion)
        return 1
    except KeyboardInterrupt:
        logger.info("Shutting down")

    return 0


if __name__ == "__main__":
    sys.exit(main())
