"""
Runs matching and evaluation for every active profile against one scan's tokens.
Profiles are evaluated independently; the match index is a union computed afterwards,
so profile order never changes the result.
"""
from types import MappingProxyType
from typing import Dict, Iterable, List, Mapping, Optional, Sequence
import logging

from scan_engine.config import EMPTY_INPUT_REASON, get_plural_matching_enabled
from scan_engine.models.profile import Profile
from scan_engine.models.results import (
    AnalysisResult,
    MatchCategory,
    MatchRecord,
    ProfileResult,
    ScanStatus,
)
from scan_engine.normalization.normalizer import (
    IngredientToken,
    product_to_text,
    tokenize_ingredients,
)
from scan_engine.terms import TermDictionary
from .matcher import match_tokens
from .profile_evaluator import evaluate_profile

logger = logging.getLogger(__name__)


def build_match_index(matches: Iterable[MatchRecord]) -> Mapping[str, MatchCategory]:
    """
    Ingredient display name -> most severe category it triggered for any profile
    (allergen > forbidden_keyword > preference_conflict). Keys keep first-seen token order.
    """
    index: Dict[str, MatchCategory] = {}
    for m in sorted(matches, key=lambda r: r.token.position):
        name = m.token.original
        current = index.get(name)
        if current is None or m.category.severity > current.severity:
            index[name] = m.category
    return MappingProxyType(index)


def overall_status(results: Iterable[ProfileResult]) -> ScanStatus:
    """Most severe profile status (unsafe > caution > insufficient_data > safe)."""
    status = ScanStatus.SAFE
    for r in results:
        if r.status.severity > status.severity:
            status = r.status
    return status


def _insufficient_result(profile: Profile) -> ProfileResult:
    return ProfileResult(
        profile_id=profile.id,
        profile_name=profile.display_name,
        status=ScanStatus.INSUFFICIENT_DATA,
        reasons=(EMPTY_INPUT_REASON,),
    )


class ScanAggregator:
    """
    Entry point for grocery/label scans.
    dictionary defaults to the process-wide TermDictionary.default().
    """

    def __init__(
        self,
        dictionary: Optional[TermDictionary] = None,
        allow_plural: Optional[bool] = None,
    ):
        self._dictionary = dictionary if dictionary is not None else TermDictionary.default()
        self._allow_plural = get_plural_matching_enabled() if allow_plural is None else allow_plural

    @property
    def dictionary(self) -> TermDictionary:
        return self._dictionary

    def analyze_tokens(
        self,
        tokens: Sequence[IngredientToken],
        profiles: Sequence[Profile],
        raw_text: str = "",
    ) -> AnalysisResult:
        tokens = tuple(tokens or ())
        profiles = list(profiles or [])

        if not tokens:
            logger.warning(
                "SCAN_AGGREGATOR empty_input profiles=%d status=%s",
                len(profiles), ScanStatus.INSUFFICIENT_DATA.value,
            )
            return AnalysisResult(
                status=ScanStatus.INSUFFICIENT_DATA,
                tokens=(),
                profile_results=tuple(_insufficient_result(p) for p in profiles),
                raw_text=raw_text or "",
                dictionary_version=self._dictionary.version,
            )

        if not profiles:
            logger.info("SCAN_AGGREGATOR no_profiles tokens=%d status=safe", len(tokens))

        all_matches: List[MatchRecord] = []
        results: List[ProfileResult] = []
        for profile in profiles:
            matches = match_tokens(tokens, profile, self._dictionary, allow_plural=self._allow_plural)
            results.append(evaluate_profile(profile, matches))
            all_matches.extend(matches)

        status = overall_status(results)
        logger.info(
            "SCAN_AGGREGATOR tokens=%d profiles=%d matches=%d status=%s dictionary_version=%s",
            len(tokens), len(profiles), len(all_matches), status.value, self._dictionary.version,
        )
        return AnalysisResult(
            status=status,
            tokens=tokens,
            profile_results=tuple(results),
            match_index=build_match_index(all_matches),
            raw_text=raw_text or "",
            dictionary_version=self._dictionary.version,
        )

    def analyze_text(self, raw_text: str, profiles: Sequence[Profile]) -> AnalysisResult:
        """Free-form label text (OCR output) -> AnalysisResult."""
        return self.analyze_tokens(tokenize_ingredients(raw_text), profiles, raw_text=raw_text or "")

    def analyze_product(self, product, profiles: Sequence[Profile]) -> AnalysisResult:
        """Barcode product with .ingredients and .allergens lists -> AnalysisResult."""
        text = product_to_text(getattr(product, "ingredients", None) or [], getattr(product, "allergens", None) or [])
        return self.analyze_text(text, profiles)


def analyze_ingredients_text(
    raw_text: str,
    profiles: Sequence[Profile],
    dictionary: Optional[TermDictionary] = None,
) -> AnalysisResult:
    return ScanAggregator(dictionary).analyze_text(raw_text, profiles)
