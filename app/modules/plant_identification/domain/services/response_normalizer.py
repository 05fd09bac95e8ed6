# 📄 File: app/modules/plant_identification/domain/services/response_normalizer.py
# 🧭 Purpose (Layman Explanation):
# Turns the different answer formats of Plant.id and PlantNet into one common list of
# "this plant might be X, with Y% confidence" suggestions.
# 🧪 Purpose (Technical Summary):
# Pure mapping from a tagged provider payload variant to a ProviderSuggestion list. Confidence
# is round(clamp(p, 0, 1) * 100), rank follows the provider's own order, common names fall back
# to the scientific name then "Unknown", and absent or null optional fields become sentinels.
# 🔗 Dependencies:
# domain models (ProviderSuggestion, SuggestionDetails, provider response variants), math
# 🔄 Connected Modules / Calls From:
# identification_orchestrator.py, tests

import math
from typing import Dict, List, Optional, Union

from ..models.identification import CareInfo, ProviderSuggestion, SuggestionDetails
from ..models.provider_responses import (
    PlantIdDetails,
    PlantIdResponse,
    PlantIdSuggestion,
    PlantIdText,
    PlantNetResponse,
    PlantNetResult,
    PlantNetSpecies,
)

PLANT_ID_SOURCE = "Plant.id API"
PLANTNET_SOURCE = "PlantNet API"
UNKNOWN = "Unknown"
DEFAULT_LANGUAGE = "en"


def clamp_probability(value: Optional[float]) -> float:
    """Clamp a provider probability/score into [0, 1]; missing or NaN counts as 0."""
    if value is None or math.isnan(value):
        return 0.0
    return min(1.0, max(0.0, float(value)))


def to_confidence(value: Optional[float]) -> int:
    """Integer percent, rounding halves up."""
    return int(math.floor(clamp_probability(value) * 100 + 0.5))


def _text(value: Union[PlantIdText, str, None]) -> str:
    if isinstance(value, PlantIdText):
        return value.value or ""
    return value or ""


def _plant_id_common_names(
    details: PlantIdDetails,
    language: str
) -> Dict[str, List[str]]:
    names = details.common_names
    if names is None:
        return {}
    if isinstance(names, list):
        # v3 returns names for the requested language only
        return {details.language or language: [n for n in names if n]}
    return {lang: [n for n in values if n] for lang, values in names.items() if values}


def _pick_common_name(
    common_names: Dict[str, List[str]],
    language: str,
    fallback: str
) -> str:
    for lang in (language, DEFAULT_LANGUAGE):
        if common_names.get(lang):
            return common_names[lang][0]
    for values in common_names.values():
        if values:
            return values[0]
    return fallback


def _normalize_plant_id_suggestion(
    index: int,
    suggestion: PlantIdSuggestion,
    language: str
) -> ProviderSuggestion:
    details = suggestion.detail_bag
    scientific_name = suggestion.scientific_name
    common_names = _plant_id_common_names(details, language)

    uses = details.common_uses
    if isinstance(uses, str):
        uses = [uses] if uses else []

    watering_max = details.watering.max if details.watering else None

    return ProviderSuggestion(
        rank=index + 1,
        scientific_name=scientific_name,
        common_name=_pick_common_name(common_names, language, scientific_name or UNKNOWN),
        confidence=to_confidence(suggestion.probability),
        probability=clamp_probability(suggestion.probability),
        details=SuggestionDetails(
            common_names=common_names,
            taxonomy={k: str(v) for k, v in (details.taxonomy or {}).items() if v},
            description=_text(details.wiki_description) or _text(details.description),
            url=details.url or "",
            care_info=CareInfo(
                light=details.best_light_condition or UNKNOWN,
                water=str(watering_max) if watering_max is not None else UNKNOWN,
                soil=details.best_soil_type or UNKNOWN,
            ),
            uses=list(uses or []),
            toxicity=details.toxicity or UNKNOWN,
            edible_parts=list(details.edible_parts or []),
        ),
        source=PLANT_ID_SOURCE,
    )


def _normalize_plantnet_result(
    index: int,
    result: PlantNetResult,
    language: str
) -> ProviderSuggestion:
    species = result.species or PlantNetSpecies()
    scientific_name = species.scientific_name or species.scientific_name_without_author or ""
    names = [n for n in species.common_names or [] if n]
    gbif_id = result.gbif.id if result.gbif else None

    return ProviderSuggestion(
        rank=index + 1,
        scientific_name=scientific_name,
        common_name=names[0] if names else scientific_name or UNKNOWN,
        confidence=to_confidence(result.score),
        probability=clamp_probability(result.score),
        details=SuggestionDetails(
            common_names={language: names} if names else {},
            taxonomy={
                "family": species.family.label if species.family else "",
                "genus": species.genus.label if species.genus else "",
            },
            url=f"https://www.gbif.org/species/{gbif_id}" if gbif_id else "",
        ),
        source=PLANTNET_SOURCE,
    )


def normalize_response(
    response: Union[PlantIdResponse, PlantNetResponse],
    language: Optional[str] = None
) -> List[ProviderSuggestion]:
    """
    Collapse one provider payload into an ordered ProviderSuggestion list.

    Args:
        response: Validated provider payload variant
        language: Preferred language for common names, defaults to "en"

    Returns:
        List[ProviderSuggestion]: Suggestions in the provider's own order,
        empty when the provider returned no matches
    """
    if isinstance(response, PlantIdResponse):
        lang = language or DEFAULT_LANGUAGE
        return [
            _normalize_plant_id_suggestion(i, s, lang)
            for i, s in enumerate(response.all_suggestions)
        ]

    if isinstance(response, PlantNetResponse):
        lang = response.language or language or DEFAULT_LANGUAGE
        return [
            _normalize_plantnet_result(i, r, lang)
            for i, r in enumerate(response.results)
        ]

    raise TypeError(f"Unsupported provider response: {type(response).__name__}")
