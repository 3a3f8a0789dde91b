from .matcher import find_matches, match_tokens, pattern_matches, profile_terms
from .profile_evaluator import evaluate_profile, status_for
from .scan_aggregator import ScanAggregator, analyze_ingredients_text, build_match_index, overall_status
from .dish_adapter import evaluate_dish, evaluate_menu

__all__ = [
    "ScanAggregator",
    "analyze_ingredients_text",
    "build_match_index",
    "evaluate_dish",
    "evaluate_menu",
    "evaluate_profile",
    "find_matches",
    "match_tokens",
    "overall_status",
    "pattern_matches",
    "profile_terms",
    "status_for",
]
