"""
Restriction terms: a canonical name plus the lowercase patterns that indicate its presence.
Allergen patterns name the substance; preference patterns name what conflicts with the preference.
"""
from dataclasses import dataclass, field
from enum import Enum
from typing import FrozenSet, Iterable, Tuple
import re


class TermCategory(str, Enum):
    ALLERGEN = "allergen"
    PREFERENCE = "preference"
    FORBIDDEN_KEYWORD = "forbidden_keyword"


# Custom preferences are usually phrased as an avoidance ("no onion", "garlic-free").
_AVOIDANCE_PATTERNS = [
    re.compile(r"^(?:no|avoid|without|non)[\s-]+(.+)$"),
    re.compile(r"^(.+?)[\s-]+free$"),
]


def _clean_pattern(text: str) -> str:
    return " ".join(str(text).casefold().split())


def custom_preference_pattern(text: str) -> str:
    """
    Pattern for a user-authored preference with no dictionary entry.
    'No onion' -> 'onion', 'Garlic-free' -> 'garlic'; anything else is used literally.
    """
    pattern = _clean_pattern(text)
    for regex in _AVOIDANCE_PATTERNS:
        m = regex.match(pattern)
        if m and m.group(1).strip():
            return m.group(1).strip()
    return pattern


@dataclass(frozen=True)
class RestrictionTerm:
    name: str
    category: TermCategory
    patterns: FrozenSet[str]
    aliases: Tuple[str, ...] = field(default_factory=tuple)
    custom: bool = False
    # Phrases that contain a pattern but are not the restricted substance ("cocoa butter" for Milk).
    exclusions: FrozenSet[str] = frozenset()

    def __post_init__(self) -> None:
        cleaned = frozenset(p for p in (_clean_pattern(p) for p in self.patterns) if p)
        object.__setattr__(self, "patterns", cleaned)
        object.__setattr__(self, "exclusions", frozenset(e for e in (_clean_pattern(e) for e in self.exclusions) if e))

    @property
    def key(self) -> str:
        return _clean_pattern(self.name)

    @classmethod
    def single(cls, text: str, category: TermCategory) -> "RestrictionTerm":
        """Term for user-authored text: the text itself is the only pattern."""
        name = " ".join(str(text).split())
        if category == TermCategory.PREFERENCE:
            pattern = custom_preference_pattern(name)
        else:
            pattern = _clean_pattern(name)
        return cls(name=name, category=category, patterns=frozenset([pattern]), custom=True)

    def to_dict(self) -> dict:
        return {
            "name": self.name,
            "category": self.category.value,
            "aliases": list(self.aliases),
            "patterns": sorted(self.patterns),
            "exclusions": sorted(self.exclusions),
        }

    @classmethod
    def from_dict(cls, d: dict) -> "RestrictionTerm":
        cat = d.get("category", "allergen")
        if isinstance(cat, str):
            cat = TermCategory(cat)
        return cls(
            name=d["name"],
            category=cat,
            patterns=frozenset(_iter_strings(d.get("patterns", []))),
            aliases=tuple(_iter_strings(d.get("aliases", []))),
            exclusions=frozenset(_iter_strings(d.get("exclusions", []))),
        )


def _iter_strings(values: Iterable) -> Iterable[str]:
    for v in values or []:
        if isinstance(v, str) and v.strip():
            yield v
