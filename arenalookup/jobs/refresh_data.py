"""
Refresh the card data file.

Run this job to fetch the latest MTGJSON data without starting the server.
The download is validated before it replaces the existing file, so a bad
document never overwrites good data.
"""

import asyncio
import logging
import sys

from arenalookup.config import Settings, settings
from arenalookup.models.card import Dataset
from arenalookup.models.failure import KnownError
from arenalookup.services.data_refresh import DatasetRefresher, refresh_and_reload
from arenalookup.services.dataset_store import DatasetStore

logger = logging.getLogger(__name__)


async def run_refresh(config: Settings | None = None) -> Dataset:
    """Download, validate and install the card data at the configured path."""
    config = config or settings
    logger.info("Refreshing card data...")

    store = DatasetStore(config.data_path)
    refresher = DatasetRefresher(config.data_url, timeout=config.download_timeout)
    dataset = await refresh_and_reload(store, refresher)

    logger.info("Saved %d sets to %s", len(dataset), config.data_path)
    return dataset


def main() -> int:
    """CLI entry point."""
    logging.basicConfig(
        level=logging.DEBUG if settings.debug else logging.INFO,
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    try:
        asyncio.run(run_refresh())
    except KnownError as e:
        logger.error("Card data refresh failed: %s", e.describe())
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
