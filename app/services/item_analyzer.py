"""Per-item psychological analysis."""

from __future__ import annotations

import logging
from typing import Any

from pydantic import ValidationError

from ..config import Settings
from ..models import (
    Category,
    EntertainmentItem,
    ItemFacetRecord,
    normalise_category,
)
from ..utils import extract_json_object
from .inference import InferenceClient, InferenceError

logger = logging.getLogger(__name__)

DESCRIPTION_LIMIT = 300

CATEGORY_LABELS: dict[str, str] = {
    "movie": "Movie",
    "music": "Music/Artist",
    "show": "TV Show",
}

ITEM_ANALYSIS_TEMPLATE = """
Analyze this {category} deeply to understand what it reveals about someone's personality, psychological traits, emotional needs, cultural background, themes, and regional connections.

{label}: "{title}"
{details}
Consider:
1. Psychological traits it reveals (e.g. thrill-seeking, introspective, optimistic)
2. Emotional themes and impact (e.g. nostalgia, joy, intensity)
3. Personality indicators (e.g. open-mindedness, risk-taking, emotional depth)
4. Social and relationship patterns (e.g. romantic, independent, social)
5. Cognitive style: one of analytical, creative, practical, intuitive
6. Values and worldview (e.g. traditional, progressive, existential)
7. Cultural context: cultural background and traditions it draws on
8. Thematic elements: major themes such as coming-of-age, family, social justice
9. Regional connections: the region or country where it is set, produced or originates

Respond strictly with JSON following this structure:
{{
  "psychologicalTraits": ["trait"],
  "emotionalThemes": ["theme"],
  "personalityIndicators": ["indicator"],
  "socialPatterns": ["pattern"],
  "cognitiveStyle": "analytical",
  "values": ["value"],
  "culturalContext": ["culture"],
  "thematicElements": ["theme"],
  "regionalConnections": ["region"],
  "analysis": "Two or three sentences on what this {category} reveals about the person"
}}
"""


class ItemAnalyzer:
    """Turns one entertainment item into an :class:`ItemFacetRecord`."""

    def __init__(self, settings: Settings, client: InferenceClient):
        self._settings = settings
        self._client = client

    async def analyze(self, item: Any, category: Category) -> ItemFacetRecord:
        """Analyze ``item``; failures yield a degraded record instead of raising.

        ``category`` may be a common alias such as ``"tv"`` or ``"film"``. A
        name that maps to no category is a caller error and raises
        ``ValueError`` before any request is made.
        """

        category = normalise_category(category)
        try:
            source = EntertainmentItem.from_raw(item, category)
        except Exception:
            logger.exception("Unreadable %s item; recording it as unknown", category)
            return ItemFacetRecord.degraded(EntertainmentItem(category=category))

        logger.info("Analyzing %s: %r", category, source.title)
        try:
            content = await self._client.complete_json(
                self._build_prompt(source),
                temperature=self._settings.item_analysis_temperature,
            )
            parsed = extract_json_object(content)
            record = ItemFacetRecord.model_validate(
                {**parsed, "item": source.title, "type": source.category}
            )
        except (InferenceError, ValueError, ValidationError) as exc:
            logger.warning(
                "Item analysis failed for %s %r: %s", category, source.title, exc
            )
            return ItemFacetRecord.degraded(source)
        except Exception:
            logger.exception(
                "Unexpected error analyzing %s %r", category, source.title
            )
            return ItemFacetRecord.degraded(source)

        logger.info(
            "Analyzed %r: %d traits", source.title, len(record.psychological_traits)
        )
        return record

    def _build_prompt(self, item: EntertainmentItem) -> str:
        details: list[str] = []
        if item.genres:
            details.append(f"Genres: {', '.join(item.genres)}")
        if item.description:
            details.append(f"Description: {item.description[:DESCRIPTION_LIMIT]}")
        return ITEM_ANALYSIS_TEMPLATE.format(
            category=item.category,
            label=CATEGORY_LABELS[item.category],
            title=item.title,
            details="\n".join(details),
        )
