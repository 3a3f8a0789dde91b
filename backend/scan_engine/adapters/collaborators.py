"""
Payload contracts for the collaborators around the engine: barcode product lookup,
menu inference, and the profile store.
Legacy profile shapes (flat lists vs {common, custom, none}) are reconciled here, never in the matcher.
Malformed fields degrade to empty collections; they do not fail the scan.
"""
from typing import Any, List, Optional, Union
import logging

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationError, field_validator

from scan_engine.models.profile import Profile
from scan_engine.normalization.normalizer import product_to_text

logger = logging.getLogger(__name__)


def _string_list(value: Any, field_name: str = "") -> List[str]:
    """Keep non-blank strings; anything that is not a list of strings becomes []."""
    if value is None:
        return []
    if isinstance(value, str):
        return [value] if value.strip() else []
    if not isinstance(value, (list, tuple, set)):
        logger.warning("PROFILE_ADAPTER malformed_field field=%s type=%s -> []", field_name, type(value).__name__)
        return []
    out = [v for v in value if isinstance(v, str) and v.strip()]
    if len(out) != len(value):
        logger.warning("PROFILE_ADAPTER dropped_non_string field=%s dropped=%d", field_name, len(value) - len(out))
    return out


class TermSelection(BaseModel):
    """Structured selection stored by the setup screens: picked options, typed options, 'none' flag."""
    model_config = ConfigDict(extra="ignore")

    common: List[str] = Field(default_factory=list)
    custom: List[str] = Field(default_factory=list)
    none: bool = False

    @field_validator("common", "custom", mode="before")
    @classmethod
    def _clean_lists(cls, v: Any, info) -> List[str]:
        return _string_list(v, info.field_name)

    @field_validator("none", mode="before")
    @classmethod
    def _clean_flag(cls, v: Any) -> bool:
        return bool(v) if isinstance(v, (bool, int)) else False

    @classmethod
    def coerce(cls, value: Any, field_name: str = "") -> "TermSelection":
        """Flat list (legacy) or dict shape -> TermSelection."""
        if isinstance(value, TermSelection):
            return value
        if isinstance(value, dict):
            return cls.model_validate(value)
        return cls(common=_string_list(value, field_name))


class StoredProfile(BaseModel):
    """Profile document as returned by the profile store (main profile or family member)."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = ""
    name: str = Field(default="", validation_alias=AliasChoices("name", "displayName", "display_name"))
    allergies: TermSelection = Field(default_factory=TermSelection)
    preferences: TermSelection = Field(default_factory=TermSelection)
    forbidden_keywords: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("forbidden_keywords", "forbiddenKeywords", "keywords"),
    )

    @field_validator("id", "name", mode="before")
    @classmethod
    def _clean_text(cls, v: Any) -> str:
        return str(v).strip() if isinstance(v, (str, int)) else ""

    @field_validator("allergies", "preferences", mode="before")
    @classmethod
    def _coerce_selection(cls, v: Any, info) -> TermSelection:
        return TermSelection.coerce(v, info.field_name)

    @field_validator("forbidden_keywords", mode="before")
    @classmethod
    def _clean_keywords(cls, v: Any) -> List[str]:
        return _string_list(v, "forbidden_keywords")

    def to_profile(self) -> Profile:
        # A 'none' flag with terms still present keeps the terms.
        if self.allergies.none and (self.allergies.common or self.allergies.custom):
            logger.warning("PROFILE_ADAPTER none_flag_with_terms profile=%s field=allergies", self.id)
        if self.preferences.none and (self.preferences.common or self.preferences.custom):
            logger.warning("PROFILE_ADAPTER none_flag_with_terms profile=%s field=preferences", self.id)
        return Profile(
            id=self.id,
            name=self.name,
            allergies=tuple(self.allergies.common),
            custom_allergies=tuple(self.allergies.custom),
            preferences=tuple(self.preferences.common),
            custom_preferences=tuple(self.preferences.custom),
            forbidden_keywords=tuple(self.forbidden_keywords),
        )


def profile_from_payload(data: Any, shared_keywords: Optional[List[str]] = None) -> Profile:
    """
    Profile-store document -> Profile. Never raises for ordinary documents.
    shared_keywords: the account-level forbidden keyword list, applied to every profile.
    """
    if isinstance(data, StoredProfile):
        stored = data
    elif not isinstance(data, dict):
        logger.warning("PROFILE_ADAPTER malformed_profile type=%s -> empty profile", type(data).__name__)
        stored = StoredProfile()
    else:
        try:
            stored = StoredProfile.model_validate(data)
        except ValidationError as e:
            logger.warning("PROFILE_ADAPTER invalid_profile errors=%d -> empty profile", e.error_count())
            stored = StoredProfile(id=str(data.get("id", "") or ""))
    if shared_keywords:
        stored = stored.model_copy(
            update={"forbidden_keywords": list(stored.forbidden_keywords) + _string_list(shared_keywords, "shared_keywords")}
        )
    return stored.to_profile()


def profiles_from_payload(documents: Any, shared_keywords: Optional[List[str]] = None) -> List[Profile]:
    if not isinstance(documents, (list, tuple)):
        return []
    return [profile_from_payload(d, shared_keywords) for d in documents]


class ScannedProduct(BaseModel):
    """Barcode lookup result."""
    model_config = ConfigDict(extra="ignore")

    name: Optional[str] = None
    barcode: Optional[str] = None
    ingredients: List[str] = Field(default_factory=list)
    allergens: List[str] = Field(default_factory=list)

    @field_validator("ingredients", "allergens", mode="before")
    @classmethod
    def _clean_lists(cls, v: Any, info) -> List[str]:
        return _string_list(v, info.field_name)

    def to_text(self) -> str:
        return product_to_text(self.ingredients, self.allergens)


class MenuDish(BaseModel):
    """One dish from the menu inference collaborator, with its inferred ingredient list."""
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    name: str
    description: Optional[str] = None
    price: Optional[Union[str, float]] = None
    ingredients: List[str] = Field(
        default_factory=list,
        validation_alias=AliasChoices("ingredients", "inferred_ingredients", "inferredIngredients"),
    )

    @field_validator("ingredients", mode="before")
    @classmethod
    def _clean_ingredients(cls, v: Any) -> List[str]:
        return _string_list(v, "ingredients")


def dish_from_payload(data: Any) -> MenuDish:
    """Menu-inference dish entry -> MenuDish. Never raises for dict or MenuDish input."""
    if isinstance(data, MenuDish):
        return data
    if not isinstance(data, dict):
        logger.warning("MENU_ADAPTER malformed_dish type=%s -> empty dish", type(data).__name__)
        return MenuDish(name="")
    try:
        return MenuDish.model_validate(data)
    except ValidationError as e:
        logger.warning("MENU_ADAPTER invalid_dish errors=%d -> name and ingredients only", e.error_count())
        name = data.get("name")
        ingredients = next(
            (data[k] for k in ("ingredients", "inferred_ingredients", "inferredIngredients") if k in data), None
        )
        return MenuDish(name=name if isinstance(name, str) else "", ingredients=_string_list(ingredients, "ingredients"))
