"""
Card data refresh.

Downloads a fresh MTGJSON document next to the backing file, loads it, and
only then moves it into place and publishes it. A failed download or a bad
document leaves both the backing file and the in-memory Dataset untouched.
"""

import logging
from pathlib import Path

import httpx

from arenalookup.models.card import Dataset
from arenalookup.models.failure import DatasetRefreshError
from arenalookup.services.dataset_store import DatasetStore

logger = logging.getLogger(__name__)

USER_AGENT = "arenalookup/1.0"


def staging_path(path: Path) -> Path:
    """Where a download for `path` is written before it is accepted."""
    return path.with_name(path.name + ".download")


class DatasetRefresher:
    """Downloads the dataset document from a fixed URL."""

    def __init__(self, url: str, timeout: float = 300.0):
        self.url = url
        self.timeout = timeout

    async def download(self, output_path: Path) -> Path:
        """
        Stream the dataset document to a file.

        Args:
            output_path: Where to save the document

        Returns:
            Path to the downloaded file.

        Raises:
            DatasetRefreshError: If the request or the write fails
        """
        output_path.parent.mkdir(parents=True, exist_ok=True)
        logger.info("Downloading %s to %s", self.url, output_path)

        try:
            async with (
                httpx.AsyncClient(
                    headers={"User-Agent": USER_AGENT},
                    follow_redirects=True,
                    timeout=self.timeout,
                ) as client,
                client.stream("GET", self.url) as response,
            ):
                response.raise_for_status()
                with open(output_path, "wb") as f:
                    async for chunk in response.aiter_bytes(8192):
                        f.write(chunk)
        except httpx.HTTPStatusError as e:
            output_path.unlink(missing_ok=True)
            raise DatasetRefreshError(self.url, f"HTTP {e.response.status_code}") from e
        except httpx.RequestError as e:
            output_path.unlink(missing_ok=True)
            raise DatasetRefreshError(self.url, str(e) or type(e).__name__) from e
        except OSError as e:
            output_path.unlink(missing_ok=True)
            raise DatasetRefreshError(self.url, f"could not write {output_path}: {e}") from e

        logger.info("Download complete")
        return output_path


async def refresh_and_reload(store: DatasetStore, refresher: DatasetRefresher) -> Dataset:
    """
    Download fresh data and publish it.

    The store's reload lock is held from the download through the publish,
    so overlapping refreshes never share the staging file. The document is
    moved over the backing file before it is published; if the move fails,
    nothing is published.

    Returns:
        The newly published Dataset.

    Raises:
        DatasetRefreshError: If the download or the move into place fails
        DatasetLoadError: If the downloaded document cannot be loaded
    """
    async with store.reload_lock:
        staged = await refresher.download(staging_path(store.path))

        def move_into_place() -> None:
            try:
                staged.replace(store.path)
            except OSError as e:
                raise DatasetRefreshError(
                    refresher.url, f"could not replace {store.path}: {e}"
                ) from e

        try:
            dataset = await store.reload_locked(source=staged, commit=move_into_place)
        finally:
            staged.unlink(missing_ok=True)

    logger.info("Card data refreshed (version %d)", store.version)
    return dataset
