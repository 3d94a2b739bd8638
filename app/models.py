"""Pydantic models describing taste items and psychological profiles."""

from __future__ import annotations

from typing import Annotated, Any, Iterable, Literal, Mapping

from pydantic import (
    AliasChoices,
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    PrivateAttr,
    field_validator,
)
from pydantic.alias_generators import to_camel

Category = Literal["movie", "music", "show"]
CognitiveStyle = Literal["analytical", "creative", "practical", "intuitive", "balanced"]

COGNITIVE_STYLES: frozenset[str] = frozenset(
    ("analytical", "creative", "practical", "intuitive", "balanced")
)
DEGRADED_ANALYSIS = "Unable to analyze this item"
MAX_DOMINANT_TRAITS = 5
MAX_PERSONALITY_INSIGHTS = 3


def _coerce_str_list(value: Any) -> list[str]:
    if value is None:
        return []
    if isinstance(value, str):
        value = [value]
    if not isinstance(value, (list, tuple)):
        return []
    cleaned: list[str] = []
    for entry in value:
        if entry is None or isinstance(entry, (dict, list)):
            continue
        text = str(entry).strip()
        if text:
            cleaned.append(text)
    return cleaned


def _coerce_text(value: Any) -> str:
    if value is None or isinstance(value, (dict, list)):
        return ""
    return str(value).strip()


def _text_or(default: str) -> BeforeValidator:
    return BeforeValidator(lambda value: _coerce_text(value) or default)


def _mapping_or_empty(value: Any) -> Any:
    if isinstance(value, (BaseModel, Mapping)):
        return value
    return {}


StrList = Annotated[list[str], BeforeValidator(_coerce_str_list)]


class _CamelModel(BaseModel):
    """Base model serialising with the camelCase keys used on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, frozen=True
    )


class EntertainmentItem(BaseModel):
    """A movie, artist or show picked by a user."""

    model_config = ConfigDict(frozen=True)

    title: str = "Unknown"
    category: Category
    genres: list[str] = Field(default_factory=list)
    description: str = ""

    @classmethod
    def from_raw(cls, value: Any, category: Category) -> "EntertainmentItem":
        """Normalise a caller supplied value into an item of ``category``."""

        if isinstance(value, EntertainmentItem):
            if value.category == category:
                return value
            return value.model_copy(update={"category": category})

        if isinstance(value, Mapping):
            # Artists are usually keyed by name, films and shows by title.
            keys = ("name", "title") if category == "music" else ("title", "name")
            title = ""
            for key in keys:
                title = _coerce_text(value.get(key))
                if title:
                    break
            description = _coerce_text(value.get("overview")) or _coerce_text(
                value.get("description")
            )
            return cls(
                title=title or "Unknown",
                category=category,
                genres=_coerce_str_list(value.get("genres")),
                description=description,
            )

        title = _coerce_text(value)
        return cls(title=title or "Unknown", category=category)


CATEGORY_ALIASES: dict[str, Category] = {
    "movie": "movie",
    "movies": "movie",
    "film": "movie",
    "music": "music",
    "song": "music",
    "artist": "music",
    "show": "show",
    "shows": "show",
    "tv": "show",
    "series": "show",
    "tv_show": "show",
}


def normalise_category(value: Any) -> Category:
    """Resolve a category name or common alias; unknown names raise ``ValueError``."""

    key = _coerce_text(value).lower().replace("-", "_").replace(" ", "_")
    try:
        return CATEGORY_ALIASES[key]
    except KeyError:
        raise ValueError(f"Unknown entertainment category: {value!r}") from None


def normalise_items(
    values: Iterable[Any] | None, category: Category
) -> list[EntertainmentItem]:
    """Return canonical items for a raw category list, treating ``None`` as empty."""

    if not values:
        return []
    return [EntertainmentItem.from_raw(value, category) for value in values]


class ItemFacetRecord(_CamelModel):
    """Psychological and cultural facets inferred for a single item."""

    item: str
    type: Category
    psychological_traits: StrList = Field(default_factory=list)
    emotional_themes: StrList = Field(default_factory=list)
    personality_indicators: StrList = Field(default_factory=list)
    social_patterns: StrList = Field(default_factory=list)
    cognitive_style: CognitiveStyle = "balanced"
    values: StrList = Field(default_factory=list)
    cultural_context: StrList = Field(default_factory=list)
    thematic_elements: StrList = Field(default_factory=list)
    regional_connections: StrList = Field(default_factory=list)
    analysis: Annotated[str, BeforeValidator(_coerce_text)] = ""

    _degraded: bool = PrivateAttr(default=False)

    @field_validator("cognitive_style", mode="before")
    @classmethod
    def _normalise_cognitive_style(cls, value: object) -> str:
        """Collapse unknown or compound styles to ``balanced``."""

        style = _coerce_text(value).lower()
        if style in COGNITIVE_STYLES:
            return style
        return "balanced"

    @classmethod
    def degraded(cls, item: EntertainmentItem) -> "ItemFacetRecord":
        """Return the placeholder record used when analysis fails."""

        record = cls(item=item.title, type=item.category, analysis=DEGRADED_ANALYSIS)
        record._degraded = True
        return record

    def is_degraded(self) -> bool:
        return self._degraded


class EmotionalProfile(_CamelModel):
    energy_level: Annotated[str, _text_or("medium")] = "medium"
    emotional_intensity: Annotated[str, _text_or("medium")] = "medium"
    stress_coping: Annotated[str, _text_or("active")] = "active"
    social_orientation: Annotated[str, _text_or("ambivert")] = "ambivert"
    emotional_needs: StrList = Field(default_factory=list)


class CulturalProfile(_CamelModel):
    preferred_cultures: StrList = Field(default_factory=list)
    cultural_openness: Annotated[str, _text_or("medium")] = "medium"
    cultural_connections: StrList = Field(default_factory=list)


class ThematicProfile(_CamelModel):
    preferred_themes: StrList = Field(default_factory=list)
    theme_complexity: Annotated[str, _text_or("moderate")] = "moderate"
    thematic_interests: StrList = Field(default_factory=list)


class RegionalProfile(_CamelModel):
    preferred_regions: StrList = Field(default_factory=list)
    regional_diversity: Annotated[str, _text_or("medium")] = "medium"
    regional_connections: StrList = Field(default_factory=list)


class EntertainmentProfile(_CamelModel):
    preferred_genres: StrList = Field(default_factory=list)
    taste_complexity: Annotated[str, _text_or("moderate")] = "moderate"
    preference_style: Annotated[str, _text_or("eclectic")] = "eclectic"


class CompatibilityFactors(_CamelModel):
    ideal_match_traits: StrList = Field(default_factory=list)
    compatible_personality_types: StrList = Field(default_factory=list)
    relationship_style: Annotated[str, _text_or("independent")] = "independent"
    cultural_compatibility: StrList = Field(default_factory=list)
    thematic_compatibility: StrList = Field(default_factory=list)
    regional_compatibility: StrList = Field(default_factory=list)


def _sub_profile(model: type[BaseModel]) -> Any:
    return Field(default_factory=model)


class AggregateProfile(_CamelModel):
    """Holistic personality profile synthesised from every item record."""

    personality_type: Annotated[str, _text_or("Entertainment Enthusiast")] = (
        "Entertainment Enthusiast"
    )
    dominant_traits: StrList = Field(
        default_factory=list,
        validation_alias=AliasChoices("dominantTraits", "dominant_traits", "traits"),
        serialization_alias="dominantTraits",
    )
    emotional_profile: Annotated[
        EmotionalProfile, BeforeValidator(_mapping_or_empty)
    ] = _sub_profile(EmotionalProfile)
    psychological_summary: Annotated[str, _text_or("No analysis available")] = (
        "No analysis available"
    )
    cultural_profile: Annotated[
        CulturalProfile, BeforeValidator(_mapping_or_empty)
    ] = _sub_profile(CulturalProfile)
    thematic_profile: Annotated[
        ThematicProfile, BeforeValidator(_mapping_or_empty)
    ] = _sub_profile(ThematicProfile)
    regional_profile: Annotated[
        RegionalProfile, BeforeValidator(_mapping_or_empty)
    ] = _sub_profile(RegionalProfile)
    entertainment_profile: Annotated[
        EntertainmentProfile, BeforeValidator(_mapping_or_empty)
    ] = _sub_profile(EntertainmentProfile)
    compatibility_factors: Annotated[
        CompatibilityFactors, BeforeValidator(_mapping_or_empty)
    ] = _sub_profile(CompatibilityFactors)
    personality_insights: StrList = Field(default_factory=list)
    individual_analyses: list[ItemFacetRecord] = Field(default_factory=list)

    @field_validator("dominant_traits")
    @classmethod
    def _cap_dominant_traits(cls, value: list[str]) -> list[str]:
        return value[:MAX_DOMINANT_TRAITS]

    @field_validator("personality_insights")
    @classmethod
    def _cap_insights(cls, value: list[str]) -> list[str]:
        return value[:MAX_PERSONALITY_INSIGHTS]

    @classmethod
    def empty(cls) -> "AggregateProfile":
        """Profile for a user who has not picked anything yet."""

        return cls(
            personality_type="Unknown",
            psychological_summary="No preferences provided",
        )

    @classmethod
    def fallback(cls) -> "AggregateProfile":
        """Generic profile substituted when aggregation is unavailable."""

        return cls(
            personality_type="Entertainment Enthusiast",
            dominant_traits=["open-minded"],
            psychological_summary="Unable to analyze preferences",
            personality_insights=["Preferences indicate diverse interests"],
        )

    def to_payload(self) -> dict[str, Any]:
        """Return the camelCase JSON payload exposed to API consumers."""

        return self.model_dump(mode="json", by_alias=True)


class TasteRequest(BaseModel):
    """Request body carrying a user's raw taste lists."""

    movies: list[Any] = Field(default_factory=list)
    music: list[Any] = Field(default_factory=list)
    shows: list[Any] = Field(
        default_factory=list, validation_alias=AliasChoices("shows", "tvShows")
    )

    @field_validator("movies", "music", "shows", mode="before")
    @classmethod
    def _missing_list_is_empty(cls, value: object) -> object:
        if value is None:
            return []
        return value
