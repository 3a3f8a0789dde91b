"""
Deterministic ingredient safety matching for per-person dietary profiles.
"""
from scan_engine.adapters import MenuDish, ScannedProduct, StoredProfile, profile_from_payload, profiles_from_payload
from scan_engine.errors import TermDictionaryError
from scan_engine.evaluation import (
    ScanAggregator,
    analyze_ingredients_text,
    evaluate_dish,
    evaluate_menu,
    evaluate_profile,
    find_matches,
)
from scan_engine.highlighting import HighlightSegment, highlight_segments
from scan_engine.history import build_history_entry
from scan_engine.models import (
    AnalysisResult,
    ConflictRecord,
    ConflictType,
    DishVerdict,
    DishVerdictStatus,
    MatchCategory,
    MatchRecord,
    Profile,
    ProfileResult,
    ScanStatus,
    merge_profiles,
)
from scan_engine.normalization import IngredientToken, tokenize_ingredients
from scan_engine.terms import RestrictionTerm, TermCategory, TermDictionary

__all__ = [
    "AnalysisResult",
    "ConflictRecord",
    "ConflictType",
    "DishVerdict",
    "DishVerdictStatus",
    "HighlightSegment",
    "IngredientToken",
    "MatchCategory",
    "MatchRecord",
    "MenuDish",
    "Profile",
    "ProfileResult",
    "RestrictionTerm",
    "ScanAggregator",
    "ScanStatus",
    "ScannedProduct",
    "StoredProfile",
    "TermCategory",
    "TermDictionary",
    "TermDictionaryError",
    "analyze_ingredients_text",
    "build_history_entry",
    "evaluate_dish",
    "evaluate_menu",
    "evaluate_profile",
    "find_matches",
    "highlight_segments",
    "merge_profiles",
    "profile_from_payload",
    "profiles_from_payload",
    "tokenize_ingredients",
]
