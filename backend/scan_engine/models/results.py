"""
Structured scan results. Created once per scan or dish evaluation and never mutated.
"""
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any, Mapping, Optional, Tuple, Union

from scan_engine.normalization.normalizer import IngredientToken


class MatchCategory(str, Enum):
    ALLERGEN = "allergen"
    FORBIDDEN_KEYWORD = "forbidden_keyword"
    PREFERENCE_CONFLICT = "preference_conflict"

    @property
    def severity(self) -> int:
        return _CATEGORY_SEVERITY[self]

    @property
    def is_severe(self) -> bool:
        """Allergens and forbidden keywords are hard safety signals."""
        return self in (MatchCategory.ALLERGEN, MatchCategory.FORBIDDEN_KEYWORD)


_CATEGORY_SEVERITY = {
    MatchCategory.PREFERENCE_CONFLICT: 1,
    MatchCategory.FORBIDDEN_KEYWORD: 2,
    MatchCategory.ALLERGEN: 3,
}


class ScanStatus(str, Enum):
    SAFE = "safe"
    CAUTION = "caution"
    UNSAFE = "unsafe"
    INSUFFICIENT_DATA = "insufficient_data"

    @property
    def severity(self) -> int:
        return _STATUS_SEVERITY[self]


_STATUS_SEVERITY = {
    ScanStatus.SAFE: 0,
    ScanStatus.INSUFFICIENT_DATA: 1,
    ScanStatus.CAUTION: 2,
    ScanStatus.UNSAFE: 3,
}


@dataclass(frozen=True)
class MatchRecord:
    token: IngredientToken
    term_name: str
    category: MatchCategory
    profile_id: str
    pattern: str = ""

    @property
    def ingredient(self) -> str:
        return self.token.original

    def to_dict(self) -> dict[str, Any]:
        return {
            "ingredient": self.token.original,
            "term": self.term_name,
            "category": self.category.value,
            "profile_id": self.profile_id,
            "pattern": self.pattern,
        }


@dataclass(frozen=True)
class ProfileResult:
    profile_id: str
    profile_name: str
    status: ScanStatus
    matched_allergens: Tuple[str, ...] = field(default_factory=tuple)
    matched_keywords: Tuple[str, ...] = field(default_factory=tuple)
    matched_preferences: Tuple[str, ...] = field(default_factory=tuple)
    reasons: Tuple[str, ...] = field(default_factory=tuple)
    flagged_ingredients: Tuple[str, ...] = field(default_factory=tuple)

    def to_dict(self) -> dict[str, Any]:
        return {
            "profile_id": self.profile_id,
            "profile_name": self.profile_name,
            "status": self.status.value,
            "matched_allergens": list(self.matched_allergens),
            "matched_keywords": list(self.matched_keywords),
            "matched_preferences": list(self.matched_preferences),
            "reasons": list(self.reasons),
            "flagged_ingredients": list(self.flagged_ingredients),
        }


@dataclass(frozen=True)
class AnalysisResult:
    status: ScanStatus
    tokens: Tuple[IngredientToken, ...] = field(default_factory=tuple)
    profile_results: Tuple[ProfileResult, ...] = field(default_factory=tuple)
    match_index: Mapping[str, MatchCategory] = field(default_factory=lambda: MappingProxyType({}))
    raw_text: str = ""
    dictionary_version: str = ""

    @property
    def ingredients(self) -> Tuple[str, ...]:
        return tuple(t.original for t in self.tokens)

    @property
    def is_empty(self) -> bool:
        return not self.tokens

    def profile_result(self, profile_id: str) -> Optional[ProfileResult]:
        for r in self.profile_results:
            if r.profile_id == profile_id:
                return r
        return None

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": self.status.value,
            "ingredients": list(self.ingredients),
            "profile_results": [r.to_dict() for r in self.profile_results],
            "matched_ingredients": [
                {"name": name, "type": cat.value} for name, cat in self.match_index.items()
            ],
            "raw_text": self.raw_text,
            "dictionary_version": self.dictionary_version,
        }


class ConflictType(str, Enum):
    ALLERGY_RISK = "allergy_risk"
    PREFERENCE_MISMATCH = "preference_mismatch"
    FORBIDDEN_KEYWORD = "forbidden_keyword"


CATEGORY_TO_CONFLICT_TYPE = {
    MatchCategory.ALLERGEN: ConflictType.ALLERGY_RISK,
    MatchCategory.FORBIDDEN_KEYWORD: ConflictType.FORBIDDEN_KEYWORD,
    MatchCategory.PREFERENCE_CONFLICT: ConflictType.PREFERENCE_MISMATCH,
}


class DishVerdictStatus(str, Enum):
    SAFE = "Safe"
    UNSAFE = "Unsafe"


@dataclass(frozen=True)
class ConflictRecord:
    type: ConflictType
    conflict: str
    detail: str

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.type.value, "conflict": self.conflict, "detail": self.detail}


@dataclass(frozen=True)
class DishVerdict:
    name: str
    verdict: DishVerdictStatus
    description: Optional[str] = None
    price: Optional[Union[str, float]] = None
    ingredients: Tuple[str, ...] = field(default_factory=tuple)
    conflicts: Tuple[ConflictRecord, ...] = field(default_factory=tuple)
    ingredients_known: bool = True

    @property
    def is_safe(self) -> bool:
        return self.verdict == DishVerdictStatus.SAFE

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "verdict": self.verdict.value,
            "ingredients": list(self.ingredients),
            "conflicts": [c.to_dict() for c in self.conflicts],
            "ingredients_known": self.ingredients_known,
        }
