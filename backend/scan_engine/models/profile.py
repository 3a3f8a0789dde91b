"""
Per-person dietary profile as seen by the engine. Read-only; built by the profile-store adapter.
Allergies and preferences keep common (picked from a list) and custom (typed) entries apart
so custom text can be resolved as its own single-pattern term.
"""
from dataclasses import dataclass, field
from typing import Iterable, List, Sequence, Tuple


def _dedupe(values: Iterable[str]) -> Tuple[str, ...]:
    """Trim, drop blanks, and remove case-insensitive duplicates keeping first spelling."""
    if isinstance(values, str):
        values = [values]
    seen: set = set()
    out: List[str] = []
    for v in values or ():
        if not isinstance(v, str):
            continue
        text = " ".join(v.split())
        key = text.lower()
        if text and key not in seen:
            seen.add(key)
            out.append(text)
    return tuple(out)


@dataclass(frozen=True)
class Profile:
    id: str
    name: str = ""
    allergies: Tuple[str, ...] = field(default_factory=tuple)
    custom_allergies: Tuple[str, ...] = field(default_factory=tuple)
    preferences: Tuple[str, ...] = field(default_factory=tuple)
    custom_preferences: Tuple[str, ...] = field(default_factory=tuple)
    forbidden_keywords: Tuple[str, ...] = field(default_factory=tuple)

    def __post_init__(self) -> None:
        for name in ("allergies", "custom_allergies", "preferences", "custom_preferences", "forbidden_keywords"):
            object.__setattr__(self, name, _dedupe(getattr(self, name)))
        object.__setattr__(self, "id", str(self.id or ""))
        object.__setattr__(self, "name", str(self.name or "").strip())

    @property
    def display_name(self) -> str:
        return self.name or self.id or "You"

    @property
    def all_allergies(self) -> Tuple[str, ...]:
        return _dedupe(self.allergies + self.custom_allergies)

    @property
    def all_preferences(self) -> Tuple[str, ...]:
        return _dedupe(self.preferences + self.custom_preferences)

    def is_empty(self) -> bool:
        """True if the profile restricts nothing."""
        return not (self.all_allergies or self.all_preferences or self.forbidden_keywords)

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "allergies": list(self.allergies),
            "custom_allergies": list(self.custom_allergies),
            "preferences": list(self.preferences),
            "custom_preferences": list(self.custom_preferences),
            "forbidden_keywords": list(self.forbidden_keywords),
        }


COMBINED_PROFILE_ID = "combined"


def merge_profiles(profiles: Sequence[Profile]) -> Profile:
    """
    Union of several profiles' restrictions, used where results are not split per person (menus).
    """
    profiles = list(profiles or [])
    if len(profiles) == 1:
        return profiles[0]

    def union(attr: str) -> Tuple[str, ...]:
        return _dedupe(v for p in profiles for v in getattr(p, attr))

    return Profile(
        id=COMBINED_PROFILE_ID,
        name=", ".join(p.display_name for p in profiles),
        allergies=union("allergies"),
        custom_allergies=union("custom_allergies"),
        preferences=union("preferences"),
        custom_preferences=union("custom_preferences"),
        forbidden_keywords=union("forbidden_keywords"),
    )
