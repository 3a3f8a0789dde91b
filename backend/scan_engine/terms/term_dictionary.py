"""
Loads the versioned term dictionary (data/term_dictionary.json) into an immutable lookup.
Load once at process start via TermDictionary.default(); tests construct their own.
"""
from functools import lru_cache
from pathlib import Path
from types import MappingProxyType
from typing import Dict, FrozenSet, Iterable, List, Optional, Tuple
import json
import logging

from .term_schema import RestrictionTerm, TermCategory
from scan_engine.config import get_term_dictionary_path
from scan_engine.errors import TermDictionaryError

logger = logging.getLogger(__name__)


def _lookup_key(name: str) -> str:
    return " ".join(str(name).casefold().split())


class TermDictionary:
    """
    Canonical allergen and preference terms, indexed by lowercase name and alias.
    Unknown names resolve to a single-pattern custom term built from the name itself.
    """

    def __init__(self, terms: Iterable[RestrictionTerm], version: str = ""):
        self._version = version
        index: Dict[Tuple[TermCategory, str], RestrictionTerm] = {}
        ordered: List[RestrictionTerm] = []
        for term in terms:
            if not term.patterns:
                raise TermDictionaryError(f"term {term.name!r} has no patterns")
            if term.category == TermCategory.FORBIDDEN_KEYWORD:
                raise TermDictionaryError(
                    f"term {term.name!r}: forbidden keywords are user-authored, not dictionary terms"
                )
            for key in (term.name, *term.aliases):
                lk = (term.category, _lookup_key(key))
                if lk in index and index[lk] is not term:
                    raise TermDictionaryError(f"duplicate {term.category.value} name or alias {key!r}")
                index[lk] = term
            ordered.append(term)
        self._index = MappingProxyType(index)
        self._terms = tuple(ordered)

    @property
    def version(self) -> str:
        return self._version

    def __len__(self) -> int:
        return len(self._terms)

    def __iter__(self):
        return iter(self._terms)

    def get(self, name: str, category: TermCategory) -> Optional[RestrictionTerm]:
        return self._index.get((category, _lookup_key(name)))

    def resolve(self, name: str, category: TermCategory) -> RestrictionTerm:
        """Dictionary term for name, or a custom single-pattern term when none is defined."""
        if category != TermCategory.FORBIDDEN_KEYWORD:
            term = self.get(name, category)
            if term is not None:
                return term
            logger.debug("TERM_DICTIONARY custom_term category=%s name=%s", category.value, name)
        return RestrictionTerm.single(name, category)

    def patterns_for(self, name: str, category: TermCategory) -> FrozenSet[str]:
        return self.resolve(name, category).patterns

    def names(self, category: TermCategory) -> List[str]:
        return [t.name for t in self._terms if t.category == category]

    def to_dict(self) -> dict:
        return {"version": self._version, "terms": [t.to_dict() for t in self._terms]}

    @classmethod
    def from_dict(cls, data: dict, source: str = "") -> "TermDictionary":
        if not isinstance(data, dict):
            raise TermDictionaryError("term dictionary must be a JSON object", source)
        try:
            terms = [RestrictionTerm.from_dict(item) for item in data.get("terms", [])]
        except (KeyError, TypeError, ValueError) as e:
            raise TermDictionaryError(f"malformed term entry: {e}", source) from e
        try:
            return cls(terms, version=str(data.get("version", "")))
        except TermDictionaryError as e:
            raise TermDictionaryError(str(e), source) from e

    @classmethod
    def from_file(cls, path: Optional[Path] = None) -> "TermDictionary":
        path = Path(path) if path is not None else get_term_dictionary_path()
        try:
            with open(path, encoding="utf-8") as f:
                data = json.load(f)
        except OSError as e:
            raise TermDictionaryError(f"cannot read term dictionary: {e}", str(path)) from e
        except json.JSONDecodeError as e:
            raise TermDictionaryError(f"invalid JSON: {e}", str(path)) from e
        dictionary = cls.from_dict(data, source=str(path))
        logger.info(
            "TERM_DICTIONARY loaded version=%s allergens=%d preferences=%d path=%s",
            dictionary.version,
            len(dictionary.names(TermCategory.ALLERGEN)),
            len(dictionary.names(TermCategory.PREFERENCE)),
            path,
        )
        return dictionary

    @classmethod
    def default(cls) -> "TermDictionary":
        """Process-wide dictionary from the configured path, loaded on first use."""
        return _load_default(str(get_term_dictionary_path()))


@lru_cache(maxsize=4)
def _load_default(path: str) -> TermDictionary:
    return TermDictionary.from_file(Path(path))
