"""
Pattern matching of ingredient tokens against one profile's restrictions.
Case-insensitive substring search with a word-boundary guard: 'pea' does not match 'peaches',
'milk' matches 'milk chocolate' and 'powdered milk'.
"""
from functools import lru_cache
from typing import Iterable, List, Optional, Pattern, Tuple
import re
import logging

from scan_engine.config import get_plural_matching_enabled
from scan_engine.models.profile import Profile
from scan_engine.models.results import MatchCategory, MatchRecord
from scan_engine.normalization.normalizer import IngredientToken, normalize_comparison
from scan_engine.terms import RestrictionTerm, TermCategory, TermDictionary

logger = logging.getLogger(__name__)

# (?<![^\W_]) / (?![^\W_]): not bordered by a letter or digit (unicode aware, underscore excluded).
_BOUNDARY_BEFORE = r"(?<![^\W_])"
_BOUNDARY_AFTER = r"(?![^\W_])"
_PLURAL_SUFFIX = r"(?:e?s)?"
# "berry" -> "berries"; the bare "y" and "ys" stay valid.
_Y_PLURAL = r"(?:y|ies|ys)"

_TERM_TO_MATCH_CATEGORY = {
    TermCategory.ALLERGEN: MatchCategory.ALLERGEN,
    TermCategory.FORBIDDEN_KEYWORD: MatchCategory.FORBIDDEN_KEYWORD,
    TermCategory.PREFERENCE: MatchCategory.PREFERENCE_CONFLICT,
}


@lru_cache(maxsize=4096)
def _compile(pattern: str, allow_plural: bool) -> Pattern[str]:
    if not allow_plural:
        return re.compile(_BOUNDARY_BEFORE + re.escape(pattern) + _BOUNDARY_AFTER)
    if len(pattern) > 1 and pattern.endswith("y"):
        return re.compile(_BOUNDARY_BEFORE + re.escape(pattern[:-1]) + _Y_PLURAL + _BOUNDARY_AFTER)
    return re.compile(_BOUNDARY_BEFORE + re.escape(pattern) + _PLURAL_SUFFIX + _BOUNDARY_AFTER)


def pattern_matches(pattern: str, text: str, allow_plural: Optional[bool] = None) -> bool:
    """
    True if pattern occurs in text as a whole word or phrase.
    Both sides are compared in normalized (case-folded) form.
    """
    p = normalize_comparison(pattern)
    t = normalize_comparison(text)
    if not p or not t:
        return False
    if allow_plural is None:
        allow_plural = get_plural_matching_enabled()
    return _compile(p, allow_plural).search(t) is not None


def profile_terms(profile: Profile, dictionary: TermDictionary) -> List[RestrictionTerm]:
    """
    Every term to check for this profile: allergies, forbidden keywords, then preferences.
    Custom entries resolve through the dictionary first so 'dairy' typed by hand still expands.
    """
    terms: List[RestrictionTerm] = []
    for name in profile.all_allergies:
        terms.append(dictionary.resolve(name, TermCategory.ALLERGEN))
    for keyword in profile.forbidden_keywords:
        terms.append(RestrictionTerm.single(keyword, TermCategory.FORBIDDEN_KEYWORD))
    for name in profile.all_preferences:
        terms.append(dictionary.resolve(name, TermCategory.PREFERENCE))
    return terms


def _mask_exclusions(term: RestrictionTerm, text: str, allow_plural: bool) -> str:
    """Blank out the term's exclusion phrases: 'cocoa butter, sugar' -> ' , sugar' for Milk."""
    for phrase in sorted(term.exclusions, key=len, reverse=True):
        text = _compile(phrase, allow_plural).sub(" ", text)
    return text


def _first_matching_pattern(term: RestrictionTerm, text: str, allow_plural: bool) -> Optional[str]:
    if term.exclusions:
        text = _mask_exclusions(term, text, allow_plural)
    # Sorted so the reported pattern does not depend on set iteration order.
    for pattern in sorted(term.patterns):
        if _compile(pattern, allow_plural).search(text):
            return pattern
    return None


def find_matches(
    token: IngredientToken,
    profile: Profile,
    dictionary: TermDictionary,
    allow_plural: Optional[bool] = None,
    terms: Optional[Iterable[RestrictionTerm]] = None,
) -> List[MatchRecord]:
    """
    All matches of one token against one profile. A token may match several terms
    (an allergen and a forbidden keyword); every one is returned.
    """
    if allow_plural is None:
        allow_plural = get_plural_matching_enabled()
    if terms is None:
        terms = profile_terms(profile, dictionary)
    records: List[MatchRecord] = []
    for term in terms:
        pattern = _first_matching_pattern(term, token.comparison, allow_plural)
        if pattern is None:
            continue
        category = _TERM_TO_MATCH_CATEGORY[term.category]
        logger.debug(
            "MATCHER match profile=%s term=%s category=%s pattern=%s ingredient=%s",
            profile.id, term.name, category.value, pattern, token.original,
        )
        records.append(
            MatchRecord(
                token=token,
                term_name=term.name,
                category=category,
                profile_id=profile.id,
                pattern=pattern,
            )
        )
    return records


def match_tokens(
    tokens: Iterable[IngredientToken],
    profile: Profile,
    dictionary: TermDictionary,
    allow_plural: Optional[bool] = None,
) -> List[MatchRecord]:
    """Matches for a whole token sequence against one profile, in token order."""
    if allow_plural is None:
        allow_plural = get_plural_matching_enabled()
    terms: Tuple[RestrictionTerm, ...] = tuple(profile_terms(profile, dictionary))
    records: List[MatchRecord] = []
    for token in tokens:
        records.extend(find_matches(token, profile, dictionary, allow_plural=allow_plural, terms=terms))
    return records
