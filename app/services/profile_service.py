"""High level orchestration for the profiling pipeline."""

from __future__ import annotations

import logging
from typing import Any, Sequence

from ..config import Settings
from ..models import AggregateProfile
from .batch_collector import BatchCollector
from .inference import InferenceClient
from .item_analyzer import ItemAnalyzer
from .profile_aggregator import ProfileAggregationError, ProfileAggregator
from .profile_renderer import ProfileRenderer

logger = logging.getLogger(__name__)


class ProfileService:
    """Composes the pipeline stages behind the entry points used by the API."""

    def __init__(
        self,
        collector: BatchCollector,
        aggregator: ProfileAggregator,
        renderer: ProfileRenderer | None = None,
    ):
        self._collector = collector
        self._aggregator = aggregator
        self._renderer = renderer or ProfileRenderer()

    @classmethod
    def from_client(cls, settings: Settings, client: InferenceClient) -> "ProfileService":
        """Wire every stage around a single inference client."""

        analyzer = ItemAnalyzer(settings, client)
        return cls(
            BatchCollector(analyzer),
            ProfileAggregator(settings, client),
            ProfileRenderer(),
        )

    async def build_profile(
        self,
        movies: Sequence[Any] | None,
        music: Sequence[Any] | None,
        shows: Sequence[Any] | None,
    ) -> AggregateProfile:
        """Run item analysis and aggregation; aggregation errors propagate."""

        records = await self._collector.collect_all(movies, music, shows)
        return await self._aggregator.combine(records, movies, music, shows)

    async def resolve_profile(
        self,
        movies: Sequence[Any] | None,
        music: Sequence[Any] | None,
        shows: Sequence[Any] | None,
    ) -> AggregateProfile:
        """Return a profile for display, substituting defaults instead of failing.

        Users without any picks get the empty profile without touching the
        provider. A failed synthesis is replaced by the generic fallback
        profile so callers always receive something renderable.
        """

        if not (movies or music or shows):
            return AggregateProfile.empty()
        try:
            return await self.build_profile(movies, music, shows)
        except ProfileAggregationError as exc:
            logger.warning("Using fallback profile: %s", exc)
            return AggregateProfile.fallback()

    async def build_embedding_text(
        self,
        movies: Sequence[Any] | None,
        music: Sequence[Any] | None,
        shows: Sequence[Any] | None,
    ) -> str:
        profile = await self.resolve_profile(movies, music, shows)
        return self._renderer.render(profile, movies, music, shows)
