"""
Aggregates one profile's matches into a verdict with human-readable reasons.
Precedence is fixed: any allergen or forbidden keyword -> unsafe; else any preference conflict -> caution; else safe.
"""
from typing import Iterable, List, Sequence, Tuple
import logging

from scan_engine.models.profile import Profile
from scan_engine.models.results import MatchCategory, MatchRecord, ProfileResult, ScanStatus

logger = logging.getLogger(__name__)


def _dedupe_names(names: Iterable[str]) -> Tuple[str, ...]:
    seen: set = set()
    out: List[str] = []
    for n in names:
        key = n.casefold()
        if key not in seen:
            seen.add(key)
            out.append(n)
    return tuple(out)


def status_for(
    allergens: Sequence[str],
    keywords: Sequence[str],
    preferences: Sequence[str],
) -> ScanStatus:
    if allergens or keywords:
        return ScanStatus.UNSAFE
    if preferences:
        return ScanStatus.CAUTION
    return ScanStatus.SAFE


def build_reasons(
    profile_name: str,
    allergens: Sequence[str],
    keywords: Sequence[str],
    preferences: Sequence[str],
) -> Tuple[str, ...]:
    reasons = [f"Contains {a} (allergen for {profile_name})" for a in allergens]
    reasons += [f"Contains {k} (forbidden for {profile_name})" for k in keywords]
    reasons += [f"violates {p} preference" for p in preferences]
    return tuple(reasons)


def evaluate_profile(profile: Profile, matches: Iterable[MatchRecord]) -> ProfileResult:
    """
    One profile's result. Matches owned by other profiles are ignored so results never
    leak between family members.
    """
    own = [m for m in matches if m.profile_id == profile.id]

    def names(category: MatchCategory) -> Tuple[str, ...]:
        return _dedupe_names(m.term_name for m in own if m.category == category)

    allergens = names(MatchCategory.ALLERGEN)
    keywords = names(MatchCategory.FORBIDDEN_KEYWORD)
    preferences = names(MatchCategory.PREFERENCE_CONFLICT)
    status = status_for(allergens, keywords, preferences)

    logger.debug(
        "PROFILE_EVALUATOR profile=%s status=%s allergens=%s keywords=%s preferences=%s",
        profile.id, status.value, list(allergens), list(keywords), list(preferences),
    )
    return ProfileResult(
        profile_id=profile.id,
        profile_name=profile.display_name,
        status=status,
        matched_allergens=allergens,
        matched_keywords=keywords,
        matched_preferences=preferences,
        reasons=build_reasons(profile.display_name, allergens, keywords, preferences),
        flagged_ingredients=_dedupe_names(m.token.original for m in own),
    )
