"""
Dataset store.

Holds the active card Dataset and publishes replacements atomically: a reload
builds a complete new Dataset and then swaps a single reference, so a reader
either sees the old snapshot or the new one, never a mix.
"""

import asyncio
import json
import logging
from collections.abc import Callable
from pathlib import Path
from types import MappingProxyType

from arenalookup.models.card import Dataset
from arenalookup.models.failure import DatasetLoadError
from arenalookup.parsers.mtgjson import parse_dataset

logger = logging.getLogger(__name__)


def load_dataset(path: Path) -> Dataset:
    """
    Load a Dataset from a JSON file.

    Args:
        path: Path to the MTGJSON file

    Returns:
        Read-only mapping of set code -> SetEntry.

    Raises:
        DatasetLoadError: If the file is missing, corrupted or malformed
    """
    if not path.exists():
        raise DatasetLoadError(path, "file not found")

    logger.info("Loading card data from %s", path)

    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except json.JSONDecodeError as e:
        raise DatasetLoadError(path, f"file is corrupted: {e}") from e
    except OSError as e:
        raise DatasetLoadError(path, str(e)) from e

    try:
        dataset = parse_dataset(raw)
    except ValueError as e:
        raise DatasetLoadError(path, f"unexpected content: {e}") from e

    logger.info(
        "Loaded %d sets (%d cards)",
        len(dataset),
        sum(len(entry.cards) for entry in dataset.values()),
    )
    return dataset


class DatasetStore:
    """
    Owner of the active Dataset.

    Readers call current() once per request and keep using that snapshot.
    Writers go through replace() or reload(); both publish by swapping the
    reference, never by mutating the published mapping.
    """

    def __init__(self, path: Path, dataset: Dataset | None = None):
        self.path = path
        self._dataset: Dataset = dataset if dataset is not None else MappingProxyType({})
        self._version = 0 if dataset is None else 1
        # Held for a whole reload, including any download that feeds it
        self.reload_lock = asyncio.Lock()

    @property
    def version(self) -> int:
        """Incremented on every published replacement."""
        return self._version

    @property
    def loaded(self) -> bool:
        return self._version > 0

    def current(self) -> Dataset:
        """Return the active snapshot."""
        return self._dataset

    def replace(self, dataset: Dataset) -> None:
        """Publish a new Dataset for all subsequent readers."""
        self._dataset = dataset
        self._version += 1
        logger.debug("Published dataset version %d", self._version)

    def load(self) -> Dataset:
        """
        Load the backing file synchronously and publish it.

        Only used at start-up, before the event loop is serving clients.

        Raises:
            DatasetLoadError: If the file cannot be loaded
        """
        dataset = load_dataset(self.path)
        self.replace(dataset)
        return dataset

    async def reload(
        self,
        source: Path | None = None,
        commit: Callable[[], None] | None = None,
    ) -> Dataset:
        """
        Reload without blocking the event loop.

        The active Dataset is only replaced if the load succeeds.
        Overlapping reloads run one after another.

        Args:
            source: File to load instead of the backing file
            commit: Called after a successful load and before publishing;
                if it raises, nothing is published

        Raises:
            DatasetLoadError: If the file cannot be loaded
        """
        async with self.reload_lock:
            return await self.reload_locked(source, commit)

    async def reload_locked(
        self,
        source: Path | None = None,
        commit: Callable[[], None] | None = None,
    ) -> Dataset:
        """Same as reload(), for callers already holding reload_lock."""
        dataset = await asyncio.to_thread(load_dataset, source or self.path)
        if commit is not None:
            commit()
        self.replace(dataset)
        return dataset
