"""Non-recursive directory listing with bounded concurrent classification."""

from __future__ import annotations

import asyncio
import logging
import os

from .classifier import FileClassifier
from .models import FileInfo, Listing

LOGGER = logging.getLogger(__name__)


class DirectoryScanner:
    """List the immediate entries of a directory and classify each one."""

    def __init__(self, classifier: FileClassifier, max_concurrency: int = 32) -> None:
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.classifier = classifier
        self.max_concurrency = max_concurrency

    async def list_all(self) -> Listing:
        """Return a mapping of filename to classification for the root.

        Ignored entries are omitted. If any entry fails to classify, the
        outstanding work is cancelled and the error propagates; no partial
        listing is returned.

        Raises:
            OSError: If the directory cannot be read or an entry cannot be classified.
        """
        root = self.classifier.root
        names = await asyncio.to_thread(os.listdir, root)
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def _bounded(name: str) -> FileInfo | None:
            async with semaphore:
                return await self.classifier.classify(name)

        tasks = [asyncio.ensure_future(_bounded(name)) for name in names]
        try:
            results = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            # Let cancelled tasks settle so none outlive the listing.
            await asyncio.gather(*tasks, return_exceptions=True)
            raise

        listing: Listing = {info.filename: info for info in results if info is not None}
        LOGGER.debug("Listed %d of %d entries in %s", len(listing), len(names), root)
        return listing


__all__ = ["DirectoryScanner"]
