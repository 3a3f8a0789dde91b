from .term_schema import RestrictionTerm, TermCategory, custom_preference_pattern
from .term_dictionary import TermDictionary

__all__ = [
    "RestrictionTerm",
    "TermCategory",
    "TermDictionary",
    "custom_preference_pattern",
]
