from __future__ import annotations

import asyncio
import json
from typing import Any, Callable, cast

import pytest

from app.config import Settings
from app.models import AggregateProfile, ItemFacetRecord
from app.services.inference import InferenceClient, InferenceError
from app.services.profile_aggregator import (
    FacetSummary,
    ProfileAggregationError,
    ProfileAggregator,
)

PROFILE_RESPONSE = {
    "personalityType": "The Thoughtful Explorer",
    "dominantTraits": ["curious", "introspective"],
    "emotionalProfile": {
        "energyLevel": "high",
        "emotionalIntensity": "medium",
        "stressCoping": "creative",
        "socialOrientation": "introverted",
        "emotionalNeeds": ["meaning"],
    },
    "psychologicalSummary": "Drawn to layered stories.",
    "culturalProfile": {"preferredCultures": ["Korean"], "culturalOpenness": "high"},
    "thematicProfile": {"preferredThemes": ["identity"]},
    "regionalProfile": {"preferredRegions": ["East Asia"]},
    "entertainmentProfile": {"preferredGenres": ["Thriller"]},
    "compatibilityFactors": {"idealMatchTraits": ["patient"]},
    "personalityInsights": ["Seeks depth."],
    "individualAnalyses": [{"item": "Invented", "type": "movie"}],
}


class _ScriptedClient:
    def __init__(self, respond: Callable[[str], str]):
        self._respond = respond
        self.prompts: list[str] = []
        self.temperatures: list[float] = []

    async def complete_json(self, prompt: str, *, temperature: float) -> str:
        self.prompts.append(prompt)
        self.temperatures.append(temperature)
        return self._respond(prompt)


def _aggregator(client: _ScriptedClient) -> ProfileAggregator:
    return ProfileAggregator(Settings(_env_file=None), cast(InferenceClient, client))


def _records() -> list[ItemFacetRecord]:
    return [
        ItemFacetRecord(
            item="Parasite",
            type="movie",
            psychological_traits=["observant", "curious"],
            cultural_context=["Korean"],
            cognitive_style="analytical",
        ),
        ItemFacetRecord(
            item="IU",
            type="music",
            psychological_traits=["curious", "warm"],
            cultural_context=["Korean"],
            regional_connections=["East Asia"],
            cognitive_style="creative",
        ),
        ItemFacetRecord(item="Lost", type="show", analysis="Unable to analyze this item"),
    ]


def _combine(aggregator: ProfileAggregator, records: list[ItemFacetRecord], *lists: Any) -> AggregateProfile:
    return asyncio.run(aggregator.combine(records, *lists))


def test_facet_summary_flattens_with_duplicates() -> None:
    summary = FacetSummary.from_records(_records())

    assert summary.tags["psychological_traits"] == ["observant", "curious", "curious", "warm"]
    assert summary.unique_tags("psychological_traits") == ["observant", "curious", "warm"]
    assert summary.cognitive_styles == ["analytical", "creative", "balanced"]
    assert summary.frequent_tags() == [("curious", 2), ("Korean", 2)]


def test_combine_attaches_records_in_order() -> None:
    records = _records()
    client = _ScriptedClient(lambda prompt: json.dumps(PROFILE_RESPONSE))

    profile = _combine(_aggregator(client), records, ["Parasite"], ["IU"], ["Lost"])

    assert profile.personality_type == "The Thoughtful Explorer"
    assert profile.emotional_profile.stress_coping == "creative"
    assert profile.cultural_profile.preferred_cultures == ["Korean"]
    assert profile.thematic_profile.theme_complexity == "moderate"
    assert profile.individual_analyses == records
    assert [record.item for record in profile.individual_analyses] == ["Parasite", "IU", "Lost"]
    assert client.temperatures == [0.8]


def test_combine_prompt_carries_unique_tags_and_counts() -> None:
    client = _ScriptedClient(lambda prompt: json.dumps(PROFILE_RESPONSE))

    _combine(_aggregator(client), _records(), ["Parasite", "Oldboy"], ["IU"], None)

    prompt = client.prompts[0]
    assert "analysis of 3 entertainment items" in prompt
    assert "- Psychological Traits Found: observant, curious, warm" in prompt
    assert "- Emotional Themes: None" in prompt
    assert "- Cognitive Styles: analytical, creative, balanced" in prompt
    assert "curious x2" in prompt
    assert "- Movies: 2 items" in prompt
    assert "- Music: 1 items" in prompt
    assert "- TV Shows: 0 items" in prompt


def test_combine_with_no_records_returns_valid_profile() -> None:
    client = _ScriptedClient(lambda prompt: "{}")

    profile = _combine(_aggregator(client), [], [], [], [])

    assert isinstance(profile, AggregateProfile)
    assert profile.individual_analyses == []
    assert profile.emotional_profile.energy_level == "medium"
    assert len(client.prompts) == 1


def test_combine_propagates_provider_failures() -> None:
    def fail(prompt: str) -> str:
        raise InferenceError("provider unavailable")

    with pytest.raises(ProfileAggregationError, match="provider unavailable") as excinfo:
        _combine(_aggregator(_ScriptedClient(fail)), _records(), [], [], [])

    assert isinstance(excinfo.value.__cause__, InferenceError)


def test_combine_propagates_unparseable_responses() -> None:
    client = _ScriptedClient(lambda prompt: "The user seems nice.")

    with pytest.raises(ProfileAggregationError):
        _combine(_aggregator(client), _records(), [], [], [])
