"""
Menu path: per-dish verdicts from inferred ingredients against the union of the selected profiles.
Menu results are not split per person, and any conflict, including a preference mismatch, makes the dish Unsafe.
"""
from typing import Iterable, List, Optional, Sequence, Set, Tuple, Union
import logging

from scan_engine.adapters.collaborators import dish_from_payload
from scan_engine.config import get_plural_matching_enabled
from scan_engine.models.profile import Profile, merge_profiles
from scan_engine.models.results import (
    CATEGORY_TO_CONFLICT_TYPE,
    ConflictRecord,
    DishVerdict,
    DishVerdictStatus,
    MatchCategory,
    MatchRecord,
)
from scan_engine.normalization.normalizer import tokens_from_list
from scan_engine.terms import TermDictionary
from .matcher import match_tokens

logger = logging.getLogger(__name__)


def conflict_detail(match: MatchRecord) -> str:
    ingredient = match.token.original
    if match.category == MatchCategory.ALLERGEN:
        return f"Contains {ingredient}, which may trigger a {match.term_name} allergy"
    if match.category == MatchCategory.FORBIDDEN_KEYWORD:
        return f"Contains {ingredient}, which matches your forbidden keyword \"{match.term_name}\""
    return f"{ingredient} does not fit a {match.term_name} diet"


def build_conflicts(matches: Iterable[MatchRecord]) -> Tuple[ConflictRecord, ...]:
    """One ConflictRecord per (type, term); the first ingredient that triggered it supplies the detail."""
    seen: Set[Tuple[str, str]] = set()
    conflicts: List[ConflictRecord] = []
    ordered = sorted(matches, key=lambda m: (-m.category.severity, m.token.position))
    for m in ordered:
        conflict_type = CATEGORY_TO_CONFLICT_TYPE[m.category]
        key = (conflict_type.value, m.term_name.casefold())
        if key in seen:
            continue
        seen.add(key)
        conflicts.append(ConflictRecord(type=conflict_type, conflict=m.term_name, detail=conflict_detail(m)))
    return tuple(conflicts)


def evaluate_dish(
    name: str,
    ingredients: Sequence[str],
    profiles: Union[Profile, Sequence[Profile]],
    dictionary: Optional[TermDictionary] = None,
    description: Optional[str] = None,
    price: Optional[Union[str, float]] = None,
    allow_plural: Optional[bool] = None,
) -> DishVerdict:
    if dictionary is None:
        dictionary = TermDictionary.default()
    if allow_plural is None:
        allow_plural = get_plural_matching_enabled()
    viewer = profiles if isinstance(profiles, Profile) else merge_profiles(profiles)

    tokens = tokens_from_list(ingredients)
    if not tokens:
        logger.warning("DISH_ADAPTER no_inferred_ingredients dish=%s verdict=Safe", name)

    matches = match_tokens(tokens, viewer, dictionary, allow_plural=allow_plural)
    conflicts = build_conflicts(matches)
    verdict = DishVerdictStatus.UNSAFE if conflicts else DishVerdictStatus.SAFE
    logger.debug("DISH_ADAPTER dish=%s verdict=%s conflicts=%d", name, verdict.value, len(conflicts))
    return DishVerdict(
        name=name,
        verdict=verdict,
        description=description,
        price=price,
        ingredients=tuple(t.original for t in tokens),
        conflicts=conflicts,
        ingredients_known=bool(tokens),
    )


def evaluate_menu(
    dishes: Iterable,
    profiles: Sequence[Profile],
    dictionary: Optional[TermDictionary] = None,
) -> List[DishVerdict]:
    """
    Verdicts for every dish entry (anything with name, ingredients and optional description/price),
    in menu order.
    """
    if dictionary is None:
        dictionary = TermDictionary.default()
    viewer = merge_profiles(profiles)
    verdicts = [
        _evaluate_entry(d, viewer, dictionary)
        for d in dishes or []
    ]
    unsafe = sum(1 for v in verdicts if not v.is_safe)
    logger.info(
        "DISH_ADAPTER menu dishes=%d unsafe=%d safe=%d profiles=%d",
        len(verdicts), unsafe, len(verdicts) - unsafe, len(profiles or []),
    )
    return verdicts


def _evaluate_entry(d, viewer: Profile, dictionary: TermDictionary) -> DishVerdict:
    # Plain dicts from the inference collaborator go through the same contract as MenuDish.
    if isinstance(d, dict):
        d = dish_from_payload(d)
    return evaluate_dish(
        name=getattr(d, "name", ""),
        ingredients=getattr(d, "ingredients", None) or [],
        profiles=viewer,
        dictionary=dictionary,
        description=getattr(d, "description", None),
        price=getattr(d, "price", None),
    )
