"""Sequential per-item analysis across a user's taste lists."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from ..models import Category, ItemFacetRecord
from .item_analyzer import ItemAnalyzer

logger = logging.getLogger(__name__)

# Per category, so a long music list never crowds out movies or shows.
MAX_ITEMS_PER_CATEGORY = 10


class BatchCollector:
    """Drives :class:`ItemAnalyzer` over movies, then music, then shows."""

    def __init__(self, analyzer: ItemAnalyzer):
        self._analyzer = analyzer

    async def collect_all(
        self,
        movies: Sequence[Any] | None,
        music: Sequence[Any] | None,
        shows: Sequence[Any] | None,
    ) -> list[ItemFacetRecord]:
        """Return one record per analyzed item in category then input order.

        Items are awaited one at a time; the provider never sees more than a
        single in-flight request from a pipeline run.
        """

        batches: tuple[tuple[Category, Sequence[Any]], ...] = (
            ("movie", movies or ()),
            ("music", music or ()),
            ("show", shows or ()),
        )
        logger.info(
            "Starting item analysis: %d movies, %d music, %d shows",
            *(len(values) for _, values in batches),
        )

        records: list[ItemFacetRecord] = []
        for category, values in batches:
            for item in list(values)[:MAX_ITEMS_PER_CATEGORY]:
                records.append(await self._analyzer.analyze(item, category))

        degraded = sum(1 for record in records if record.is_degraded())
        logger.info(
            "Completed analysis of %d items (%d degraded)", len(records), degraded
        )
        return records
