import pytest

from app.models import (
    AggregateProfile,
    EntertainmentItem,
    ItemFacetRecord,
    TasteRequest,
    normalise_category,
    normalise_items,
)


def test_entertainment_item_from_plain_string():
    item = EntertainmentItem.from_raw("Parasite", "movie")

    assert item.title == "Parasite"
    assert item.category == "movie"
    assert item.genres == []
    assert item.description == ""


def test_entertainment_item_accepts_catalog_payload_keys():
    item = EntertainmentItem.from_raw(
        {
            "name": "Dark",
            "overview": "A family saga with a supernatural twist.",
            "genres": ["Sci-Fi", None, " Mystery "],
        },
        "show",
    )

    assert item.title == "Dark"
    assert item.description == "A family saga with a supernatural twist."
    assert item.genres == ["Sci-Fi", "Mystery"]


def test_music_items_prefer_artist_name():
    item = EntertainmentItem.from_raw({"name": "Björk", "title": "Homogenic"}, "music")

    assert item.title == "Björk"


def test_malformed_item_falls_back_to_unknown_title():
    item = EntertainmentItem.from_raw({"genres": "Drama"}, "movie")

    assert item.title == "Unknown"
    assert item.genres == ["Drama"]


def test_normalise_items_treats_none_as_empty():
    assert normalise_items(None, "music") == []
    items = normalise_items(["A", {"title": "B"}], "movie")
    assert [item.title for item in items] == ["A", "B"]


def test_facet_record_fills_missing_and_malformed_fields():
    record = ItemFacetRecord.model_validate(
        {
            "item": "Inception",
            "type": "movie",
            "psychologicalTraits": None,
            "emotionalThemes": "wonder",
            "values": [1, "", "curiosity"],
            "cognitiveStyle": "Analytical",
        }
    )

    assert record.psychological_traits == []
    assert record.emotional_themes == ["wonder"]
    assert record.values == ["1", "curiosity"]
    assert record.regional_connections == []
    assert record.cognitive_style == "analytical"
    assert record.analysis == ""


def test_facet_record_unknown_cognitive_style_is_balanced():
    record = ItemFacetRecord(item="X", type="music", cognitive_style="analytical|creative")

    assert record.cognitive_style == "balanced"


def test_degraded_record_matches_placeholder_shape():
    record = ItemFacetRecord.degraded(EntertainmentItem(title="Up", category="movie"))

    assert record.model_dump(by_alias=True) == {
        "item": "Up",
        "type": "movie",
        "psychologicalTraits": [],
        "emotionalThemes": [],
        "personalityIndicators": [],
        "socialPatterns": [],
        "cognitiveStyle": "balanced",
        "values": [],
        "culturalContext": [],
        "thematicElements": [],
        "regionalConnections": [],
        "analysis": "Unable to analyze this item",
    }
    assert record.is_degraded()


def test_aggregate_profile_defaults_are_neutral():
    profile = AggregateProfile.model_validate({})

    assert profile.personality_type == "Entertainment Enthusiast"
    assert profile.emotional_profile.energy_level == "medium"
    assert profile.emotional_profile.social_orientation == "ambivert"
    assert profile.cultural_profile.preferred_cultures == []
    assert profile.individual_analyses == []


def test_aggregate_profile_caps_traits_and_insights():
    profile = AggregateProfile.model_validate(
        {
            "dominantTraits": ["a", "b", "c", "d", "e", "f", "g"],
            "personalityInsights": ["one", "two", "three", "four"],
            "emotionalProfile": "very intense",
            "culturalProfile": {"culturalOpenness": None, "preferredCultures": ["Korean"]},
        }
    )

    assert profile.dominant_traits == ["a", "b", "c", "d", "e"]
    assert profile.personality_insights == ["one", "two", "three"]
    assert profile.emotional_profile.emotional_intensity == "medium"
    assert profile.cultural_profile.cultural_openness == "medium"
    assert profile.cultural_profile.preferred_cultures == ["Korean"]


def test_aggregate_profile_payload_uses_camel_case():
    payload = AggregateProfile.fallback().to_payload()

    assert payload["personalityType"] == "Entertainment Enthusiast"
    assert payload["dominantTraits"] == ["open-minded"]
    assert payload["emotionalProfile"]["stressCoping"] == "active"
    assert payload["individualAnalyses"] == []


def test_taste_request_accepts_missing_lists():
    request = TasteRequest.model_validate({"movies": ["Heat"], "music": None})

    assert request.movies == ["Heat"]
    assert request.music == []
    assert request.shows == []


def test_normalise_category_resolves_aliases():
    assert normalise_category("TV") == "show"
    assert normalise_category("tv-show") == "show"
    assert normalise_category("film") == "movie"
    assert normalise_category("artist") == "music"


def test_normalise_category_rejects_unknown_names():
    with pytest.raises(ValueError, match="Unknown entertainment category"):
        normalise_category("podcast")


def test_only_placeholder_records_are_flagged_degraded():
    lookalike = ItemFacetRecord(item="Up", type="movie", analysis="Unable to analyze this item")

    assert not lookalike.is_degraded()
    assert ItemFacetRecord.degraded(EntertainmentItem(title="Up", category="movie")).is_degraded()
