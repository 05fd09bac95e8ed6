# 📄 File: app/modules/plant_identification/domain/models/provider_responses.py
# 🧭 Purpose (Layman Explanation):
# Each plant identification service answers in its own format. This file describes both formats
# so the rest of the app never has to guess which fields exist.
# 🧪 Purpose (Technical Summary):
# Tagged pydantic variants for raw provider payloads: PlantIdResponse (legacy flat and v3 nested
# shapes) and PlantNetResponse, discriminated by the `provider` literal. Each variant reports
# its own provider-level failure (not a plant, no matches).
# 🔗 Dependencies:
# pydantic, typing
# 🔄 Connected Modules / Calls From:
# plant_id_client.py, plantnet_client.py, response_normalizer.py, identification_orchestrator.py

from typing import Annotated, Any, Dict, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter


# =============================================================================
# PLANT.ID
# =============================================================================

class PlantIdText(BaseModel):
    """Wikipedia-style text block ({"value": ..., "citation": ...})"""
    value: Optional[str] = None
    citation: Optional[str] = None


class PlantIdWatering(BaseModel):
    min: Optional[int] = None
    max: Optional[int] = None


class PlantIdDetails(BaseModel):
    """
    Optional detail bag. Legacy payloads key common names by language and use
    wiki_description; v3 returns a plain list and uses description.
    """
    common_names: Optional[Union[Dict[str, Optional[List[Optional[str]]]], List[Optional[str]]]] = None
    taxonomy: Optional[Dict[str, Optional[str]]] = None
    wiki_description: Optional[Union[PlantIdText, str]] = None
    description: Optional[Union[PlantIdText, str]] = None
    url: Optional[str] = None
    watering: Optional[PlantIdWatering] = None
    best_light_condition: Optional[str] = None
    best_soil_type: Optional[str] = None
    common_uses: Optional[Union[List[str], str]] = None
    toxicity: Optional[str] = None
    edible_parts: Optional[List[str]] = None
    language: Optional[str] = None


class PlantIdSuggestion(BaseModel):
    # legacy: plant_name / plant_details, v3: name / details
    plant_name: Optional[str] = None
    name: Optional[str] = None
    probability: Optional[float] = None
    plant_details: Optional[PlantIdDetails] = None
    details: Optional[PlantIdDetails] = None

    @property
    def scientific_name(self) -> str:
        return self.plant_name or self.name or ""

    @property
    def detail_bag(self) -> PlantIdDetails:
        return self.plant_details or self.details or PlantIdDetails()


class PlantIdBinary(BaseModel):
    binary: Optional[bool] = None
    probability: Optional[float] = None


class PlantIdClassification(BaseModel):
    suggestions: List[PlantIdSuggestion] = Field(default_factory=list)


class PlantIdResult(BaseModel):
    is_plant: Optional[PlantIdBinary] = None
    classification: Optional[PlantIdClassification] = None


class PlantIdResponse(BaseModel):
    """Raw Plant.id identification payload."""
    provider: Literal["plant_id"] = "plant_id"
    is_plant: Optional[Union[bool, PlantIdBinary]] = None
    suggestions: List[PlantIdSuggestion] = Field(default_factory=list)
    result: Optional[PlantIdResult] = None

    @property
    def plant_signal(self) -> Optional[bool]:
        """Explicit is-plant verdict from either shape, None when absent."""
        if isinstance(self.is_plant, bool):
            return self.is_plant
        if isinstance(self.is_plant, PlantIdBinary):
            return self.is_plant.binary
        if self.result and self.result.is_plant:
            return self.result.is_plant.binary
        return None

    @property
    def all_suggestions(self) -> List[PlantIdSuggestion]:
        if self.suggestions:
            return self.suggestions
        if self.result and self.result.classification:
            return self.result.classification.suggestions
        return []

    def failure_reason(self) -> Optional[str]:
        if self.plant_signal is False:
            return "Plant.id determined this image does not contain a plant"
        if not self.all_suggestions:
            return "Plant.id found no plant matches"
        return None


# =============================================================================
# PLANTNET
# =============================================================================

class PlantNetTaxon(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scientific_name: Optional[str] = Field(None, alias="scientificName")
    scientific_name_without_author: Optional[str] = Field(None, alias="scientificNameWithoutAuthor")

    @property
    def label(self) -> str:
        return self.scientific_name_without_author or self.scientific_name or ""


class PlantNetSpecies(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    scientific_name: Optional[str] = Field(None, alias="scientificName")
    scientific_name_without_author: Optional[str] = Field(None, alias="scientificNameWithoutAuthor")
    common_names: Optional[List[Optional[str]]] = Field(None, alias="commonNames")
    family: Optional[PlantNetTaxon] = None
    genus: Optional[PlantNetTaxon] = None


class PlantNetGbif(BaseModel):
    id: Optional[Union[int, str]] = None


class PlantNetResult(BaseModel):
    score: Optional[float] = None
    species: Optional[PlantNetSpecies] = None
    gbif: Optional[PlantNetGbif] = None


class PlantNetResponse(BaseModel):
    """Raw PlantNet identify payload."""
    model_config = ConfigDict(populate_by_name=True)

    provider: Literal["plantnet"] = "plantnet"
    language: Optional[str] = None
    best_match: Optional[str] = Field(None, alias="bestMatch")
    results: List[PlantNetResult] = Field(default_factory=list)
    remaining_requests: Optional[int] = Field(None, alias="remainingIdentificationRequests")

    def failure_reason(self) -> Optional[str]:
        if not self.results:
            return "PlantNet found no plant matches"
        return None


ProviderResponse = Annotated[
    Union[PlantIdResponse, PlantNetResponse],
    Field(discriminator="provider"),
]

_provider_response_adapter = TypeAdapter(ProviderResponse)


def parse_provider_response(provider: str, payload: Dict[str, Any]) -> Union[PlantIdResponse, PlantNetResponse]:
    """Validate a raw JSON payload into the variant for ``provider``."""
    return _provider_response_adapter.validate_python({**payload, "provider": provider})
