"""Normalization of Plant.id and PlantNet payloads into ProviderSuggestions."""

import math

import pytest

from app.modules.plant_identification.domain.models.provider_responses import parse_provider_response
from app.modules.plant_identification.domain.services.response_normalizer import (
    clamp_probability,
    normalize_response,
    to_confidence,
)

from .conftest import plant_id_payload, plantnet_payload


@pytest.mark.parametrize(
    "probability, expected",
    [
        (0.0, 0),
        (1.0, 100),
        (0.87, 87),
        (0.005, 1),
        (1.7, 100),
        (-0.3, 0),
        (None, 0),
        (math.nan, 0),
    ],
)
def test_confidence_is_clamped_percentage(probability, expected) -> None:
    assert to_confidence(probability) == expected
    assert 0.0 <= clamp_probability(probability) <= 1.0


def test_plant_id_flat_shape() -> None:
    (suggestion,) = normalize_response(plant_id_payload(), "en")

    assert suggestion.rank == 1
    assert suggestion.scientific_name == "Rosa rubiginosa"
    assert suggestion.common_name == "Rose"
    assert suggestion.confidence == 87
    assert suggestion.probability == pytest.approx(0.87)
    assert suggestion.source == "Plant.id API"
    assert suggestion.details.taxonomy == {"family": "Rosaceae", "genus": "Rosa"}
    assert suggestion.details.description == "A wild rose."
    assert suggestion.details.care_info.light == "Unknown"
    assert suggestion.details.toxicity == "Unknown"
    assert suggestion.details.uses == []


def test_plant_id_v3_nested_shape() -> None:
    response = parse_provider_response(
        "plant_id",
        {
            "result": {
                "is_plant": {"binary": True, "probability": 0.99},
                "classification": {
                    "suggestions": [
                        {
                            "name": "Ocimum basilicum",
                            "probability": 0.93,
                            "details": {
                                "language": "fr",
                                "common_names": ["Basilic", "Basilic commun"],
                                "description": {"value": "Herbe aromatique."},
                                "watering": {"min": 2, "max": 3},
                                "best_light_condition": "Full sun",
                                "best_soil_type": "Well drained",
                                "common_uses": "Culinary herb",
                                "toxicity": "Non-toxic",
                                "edible_parts": ["leaves"],
                            },
                        },
                        {"name": "Ocimum tenuiflorum", "probability": 0.04},
                    ]
                },
            }
        },
    )

    first, second = normalize_response(response, "fr")

    assert first.common_name == "Basilic"
    assert first.details.common_names == {"fr": ["Basilic", "Basilic commun"]}
    assert first.details.description == "Herbe aromatique."
    assert first.details.care_info.water == "3"
    assert first.details.care_info.light == "Full sun"
    assert first.details.uses == ["Culinary herb"]
    assert first.details.edible_parts == ["leaves"]
    assert second.rank == 2
    assert second.common_name == "Ocimum tenuiflorum"
    assert second.confidence == 4


def test_plant_id_common_name_language_preference() -> None:
    response = parse_provider_response(
        "plant_id",
        {
            "suggestions": [
                {
                    "plant_name": "Rosa canina",
                    "probability": 0.5,
                    "plant_details": {"common_names": {"de": ["Hunds-Rose"], "en": ["Dog rose"]}},
                }
            ]
        },
    )

    assert normalize_response(response, "de")[0].common_name == "Hunds-Rose"
    assert normalize_response(response, "sw")[0].common_name == "Dog rose"


def test_plantnet_shape() -> None:
    (suggestion,) = normalize_response(plantnet_payload(), "en")

    assert suggestion.scientific_name == "Mangifera indica L."
    assert suggestion.common_name == "Mango"
    assert suggestion.confidence == 64
    assert suggestion.source == "PlantNet API"
    assert suggestion.details.common_names == {"en": ["Mango"]}
    assert suggestion.details.taxonomy == {"family": "Anacardiaceae", "genus": "Mangifera"}
    assert suggestion.details.url == "https://www.gbif.org/species/3190638"


def test_plantnet_without_common_names_uses_scientific_name() -> None:
    (suggestion,) = normalize_response(plantnet_payload(common_names=[]), "en")

    assert suggestion.common_name == "Mangifera indica L."
    assert suggestion.details.common_names == {}


def test_normalization_is_deterministic() -> None:
    response = plant_id_payload()

    assert normalize_response(response, "en") == normalize_response(response, "en")


def test_ranks_follow_provider_order() -> None:
    response = parse_provider_response(
        "plant_id",
        {
            "suggestions": [
                {"plant_name": "A", "probability": 0.2},
                {"plant_name": "B", "probability": 0.7},
            ]
        },
    )

    suggestions = normalize_response(response)

    assert [s.scientific_name for s in suggestions] == ["A", "B"]
    assert [s.rank for s in suggestions] == [1, 2]


def test_plant_id_null_probability_counts_as_zero() -> None:
    response = parse_provider_response(
        "plant_id",
        {
            "suggestions": [
                {"plant_name": "Rosa", "probability": None},
                {"plant_name": "Malus", "probability": 0.4},
            ]
        },
    )

    suggestions = normalize_response(response)

    assert [s.confidence for s in suggestions] == [0, 40]
    assert suggestions[0].probability == 0.0


def test_plant_id_null_common_names_are_skipped() -> None:
    response = parse_provider_response(
        "plant_id",
        {
            "suggestions": [
                {
                    "plant_name": "Rosa canina",
                    "probability": 0.6,
                    "plant_details": {"common_names": {"en": None, "fr": [None, "Rosier"]}},
                }
            ]
        },
    )

    (suggestion,) = normalize_response(response, "en")

    assert suggestion.common_name == "Rosier"
    assert suggestion.details.common_names == {"fr": ["Rosier"]}


def test_plantnet_null_fields_use_defaults() -> None:
    response = parse_provider_response(
        "plantnet",
        {
            "results": [
                {
                    "score": None,
                    "species": {"scientificName": "Ficus carica L.", "commonNames": None},
                    "gbif": None,
                },
                {"score": 0.3, "species": None},
            ]
        },
    )

    first, second = normalize_response(response)

    assert first.confidence == 0
    assert first.common_name == "Ficus carica L."
    assert first.details.url == ""
    assert second.confidence == 30
    assert second.common_name == "Unknown"


@pytest.mark.parametrize(
    "provider, payload",
    [
        ("plantnet", {"results": [{"score": 0.5, "species": {"commonNames": []}}]}),
        ("plant_id", {"suggestions": [{"probability": 0.5, "plant_details": {"common_names": {"en": []}}}]}),
    ],
)
def test_common_name_is_never_blank(provider, payload) -> None:
    (suggestion,) = normalize_response(parse_provider_response(provider, payload))

    assert suggestion.common_name == "Unknown"
    assert suggestion.scientific_name == ""
