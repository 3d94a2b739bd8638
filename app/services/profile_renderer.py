"""Render profiles into the text block used for embedding similarity."""

from __future__ import annotations

import logging
from typing import Any, Mapping, Sequence

from ..models import AggregateProfile, EntertainmentItem, normalise_items
from ..utils import join_or, unique

logger = logging.getLogger(__name__)

PROFILE_TEXT_TEMPLATE = """
Entertainment Preferences:
Movies: {movies}
Music: {music}
TV Shows: {shows}
Genres: {genres}

Psychological Profile:
Traits: {traits}
Summary: {summary}
Emotional Profile: Energy {energy}, Intensity {intensity}, Coping {coping}, Social {social}
Insights: {insights}

Cultural & Regional Profile:
Cultures: {cultures}
Themes: {themes}
Regions: {regions}
"""


class ProfileRenderer:
    """Deterministic text rendering that never raises."""

    def render(
        self,
        profile: AggregateProfile | Mapping[str, Any] | None,
        movies: Sequence[Any] | None,
        music: Sequence[Any] | None,
        shows: Sequence[Any] | None,
    ) -> str:
        try:
            return self._render(profile, movies, music, shows)
        except Exception:
            logger.exception("Profile rendering failed; using title-only text")
            return self._render_fallback(movies, music, shows)

    def _render(
        self,
        profile: AggregateProfile | Mapping[str, Any] | None,
        movies: Sequence[Any] | None,
        music: Sequence[Any] | None,
        shows: Sequence[Any] | None,
    ) -> str:
        resolved = self._resolve_profile(profile)
        movie_items = normalise_items(movies, "movie")
        music_items = normalise_items(music, "music")
        show_items = normalise_items(shows, "show")
        genres = unique(
            genre for item in (*movie_items, *music_items) for genre in item.genres
        )
        emotional = resolved.emotional_profile

        return PROFILE_TEXT_TEMPLATE.format(
            movies=join_or(_titles(movie_items), "None"),
            music=join_or(_titles(music_items), "None"),
            shows=join_or(_titles(show_items), "None"),
            genres=join_or(genres, "None"),
            traits=join_or(resolved.dominant_traits, "Unknown"),
            summary=resolved.psychological_summary,
            energy=emotional.energy_level,
            intensity=emotional.emotional_intensity,
            coping=emotional.stress_coping,
            social=emotional.social_orientation,
            insights=join_or(
                resolved.personality_insights, "No insights available", ". "
            ),
            cultures=join_or(resolved.cultural_profile.preferred_cultures, "None"),
            themes=join_or(resolved.thematic_profile.preferred_themes, "None"),
            regions=join_or(resolved.regional_profile.preferred_regions, "None"),
        ).strip()

    def _resolve_profile(
        self, profile: AggregateProfile | Mapping[str, Any] | None
    ) -> AggregateProfile:
        if isinstance(profile, AggregateProfile):
            return profile
        if profile is None:
            return AggregateProfile()
        if isinstance(profile, Mapping):
            # Item records are never rendered; a bad entry must not cost the profile.
            fields = {
                key: value
                for key, value in profile.items()
                if key not in ("individualAnalyses", "individual_analyses")
            }
            return AggregateProfile.model_validate(fields)
        raise TypeError(f"Unsupported profile type: {type(profile).__name__}")

    def _render_fallback(
        self,
        movies: Sequence[Any] | None,
        music: Sequence[Any] | None,
        shows: Sequence[Any] | None,
    ) -> str:
        sections = (
            ("Movies", movies, "movie"),
            ("Music", music, "music"),
            ("TV Shows", shows, "show"),
        )
        parts: list[str] = []
        for label, values, category in sections:
            try:
                titles = _titles(normalise_items(values, category))
            except Exception:  # unreadable list
                titles = []
            parts.append(f"{label}: {', '.join(titles)}.")
        return " ".join(parts)


def _titles(items: Sequence[EntertainmentItem]) -> list[str]:
    return [item.title for item in items]
