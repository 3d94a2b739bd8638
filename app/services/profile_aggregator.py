"""Second-stage synthesis of item records into one personality profile."""

from __future__ import annotations

import logging
from collections import Counter
from dataclasses import dataclass, field
from typing import Any, Sequence

from pydantic import ValidationError

from ..config import Settings
from ..models import AggregateProfile, ItemFacetRecord
from ..utils import extract_json_object, join_or, unique
from .inference import InferenceClient, InferenceError

logger = logging.getLogger(__name__)

# Facet attribute names paired with the label used in the synthesis prompt.
FACET_FIELDS: tuple[tuple[str, str], ...] = (
    ("psychological_traits", "Psychological Traits Found"),
    ("emotional_themes", "Emotional Themes"),
    ("personality_indicators", "Personality Indicators"),
    ("social_patterns", "Social Patterns"),
    ("values", "Values"),
    ("cultural_context", "Cultural Contexts"),
    ("thematic_elements", "Thematic Elements"),
    ("regional_connections", "Regional Connections"),
)
FREQUENT_TAG_LIMIT = 8

PROFILE_REQUEST_TEMPLATE = """
Based on deep individual analysis of {record_count} entertainment items, create a comprehensive personality profile that includes psychological, cultural, thematic, and regional insights.

Individual item analyses summary:
{facet_lines}
- Cognitive Styles: {cognitive_styles}

Recurring signals (tag x occurrences): {frequent_tags}

Entertainment collection:
- Movies: {movie_count} items
- Music: {music_count} items
- TV Shows: {show_count} items

Synthesize a cohesive personality type, dominant traits, emotional needs, cultural, thematic and regional preferences, relationship compatibility and entertainment taste.

Respond strictly with JSON following this structure:
{{
  "personalityType": "e.g. The Thrill-Seeking Intellectual",
  "dominantTraits": ["up to five traits"],
  "emotionalProfile": {{
    "energyLevel": "low|medium|high",
    "emotionalIntensity": "low|medium|high",
    "stressCoping": "active|passive|avoidant|creative",
    "socialOrientation": "introverted|ambivert|extroverted",
    "emotionalNeeds": ["need"]
  }},
  "psychologicalSummary": "Three or four sentences",
  "culturalProfile": {{
    "preferredCultures": ["culture"],
    "culturalOpenness": "low|medium|high",
    "culturalConnections": ["connection"]
  }},
  "thematicProfile": {{
    "preferredThemes": ["theme"],
    "themeComplexity": "simple|moderate|complex",
    "thematicInterests": ["interest"]
  }},
  "regionalProfile": {{
    "preferredRegions": ["region"],
    "regionalDiversity": "low|medium|high",
    "regionalConnections": ["connection"]
  }},
  "entertainmentProfile": {{
    "preferredGenres": ["genre"],
    "tasteComplexity": "simple|moderate|complex",
    "preferenceStyle": "mainstream|niche|eclectic|curated"
  }},
  "compatibilityFactors": {{
    "idealMatchTraits": ["trait"],
    "compatiblePersonalityTypes": ["type"],
    "relationshipStyle": "independent|interdependent|co-dependent",
    "culturalCompatibility": ["culture"],
    "thematicCompatibility": ["theme"],
    "regionalCompatibility": ["region"]
  }},
  "personalityInsights": ["three deep insights"]
}}
"""


class ProfileAggregationError(RuntimeError):
    """Raised when the aggregate profile cannot be synthesised."""


@dataclass(slots=True)
class FacetSummary:
    """Flattened facet tags across a batch of item records."""

    tags: dict[str, list[str]] = field(default_factory=dict)
    cognitive_styles: list[str] = field(default_factory=list)

    @classmethod
    def from_records(cls, records: Sequence[ItemFacetRecord]) -> "FacetSummary":
        tags: dict[str, list[str]] = {name: [] for name, _ in FACET_FIELDS}
        styles: list[str] = []
        for record in records:
            for name, _ in FACET_FIELDS:
                tags[name].extend(getattr(record, name))
            styles.append(record.cognitive_style)
        return cls(tags=tags, cognitive_styles=styles)

    def unique_tags(self, name: str) -> list[str]:
        return unique(self.tags.get(name, []))

    def frequent_tags(self, limit: int = FREQUENT_TAG_LIMIT) -> list[tuple[str, int]]:
        """Return tags seen more than once across every facet, most common first."""

        counter: Counter[str] = Counter()
        for values in self.tags.values():
            counter.update(values)
        return [(tag, count) for tag, count in counter.most_common(limit) if count > 1]


class ProfileAggregator:
    """Synthesises an :class:`AggregateProfile` from item facet records."""

    def __init__(self, settings: Settings, client: InferenceClient):
        self._settings = settings
        self._client = client

    async def combine(
        self,
        records: Sequence[ItemFacetRecord],
        movies: Sequence[Any] | None,
        music: Sequence[Any] | None,
        shows: Sequence[Any] | None,
    ) -> AggregateProfile:
        """Return the aggregate profile; provider failures raise ``ProfileAggregationError``."""

        summary = FacetSummary.from_records(records)
        prompt = self._build_prompt(
            summary,
            record_count=len(records),
            counts=(len(movies or ()), len(music or ()), len(shows or ())),
        )
        logger.info("Combining %d item analyses into a profile", len(records))

        try:
            content = await self._client.complete_json(
                prompt, temperature=self._settings.profile_temperature
            )
            parsed = extract_json_object(content)
        except (InferenceError, ValueError) as exc:
            raise ProfileAggregationError(f"Profile synthesis failed: {exc}") from exc

        parsed.pop("individualAnalyses", None)
        parsed.pop("individual_analyses", None)
        try:
            profile = AggregateProfile.model_validate(
                {**parsed, "individual_analyses": list(records)}
            )
        except ValidationError as exc:
            raise ProfileAggregationError(
                "Profile synthesis returned an invalid profile"
            ) from exc

        logger.info(
            "Profile created: %r (dominant traits: %s)",
            profile.personality_type,
            ", ".join(profile.dominant_traits) or "none",
        )
        return profile

    def _build_prompt(
        self,
        summary: FacetSummary,
        *,
        record_count: int,
        counts: tuple[int, int, int],
    ) -> str:
        facet_lines = "\n".join(
            f"- {label}: {join_or(summary.unique_tags(name), 'None')}"
            for name, label in FACET_FIELDS
        )
        frequent = join_or(
            (f"{tag} x{count}" for tag, count in summary.frequent_tags()), "None"
        )
        movie_count, music_count, show_count = counts
        return PROFILE_REQUEST_TEMPLATE.format(
            record_count=record_count,
            facet_lines=facet_lines,
            cognitive_styles=join_or(summary.cognitive_styles, "None"),
            frequent_tags=frequent,
            movie_count=movie_count,
            music_count=music_count,
            show_count=show_count,
        )
