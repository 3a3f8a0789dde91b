"""
Deterministic tokenization of raw ingredient text. No LLM, no guessing.
Original casing is kept for display; the comparison form is case-folded with whitespace collapsed.
"""
from dataclasses import dataclass
from typing import Iterable, List, Optional
import re
import logging

logger = logging.getLogger(__name__)

_SEPARATORS = ",;\n\r"
_LABEL_PREFIX_RE = re.compile(r"^\s*ingredients?\s*:\s*", re.IGNORECASE)
_EDGE_PUNCT = " \t.*:()[]"


@dataclass(frozen=True)
class IngredientToken:
    """One candidate ingredient: display text, comparison text, and position in the scan."""
    original: str
    comparison: str
    position: int = 0

    def to_dict(self) -> dict:
        return {"original": self.original, "comparison": self.comparison, "position": self.position}


def normalize_comparison(text: str) -> str:
    """Case-fold and collapse whitespace. 'Wheat  Flour ' -> 'wheat flour'."""
    if not text or not isinstance(text, str):
        return ""
    return " ".join(text.casefold().split())


def _clean_display(text: str) -> str:
    t = _LABEL_PREFIX_RE.sub("", text)
    return " ".join(t.split()).strip(_EDGE_PUNCT)


def make_token(text: str, position: int = 0) -> Optional[IngredientToken]:
    """Token for one ingredient string, or None when nothing usable remains."""
    if not isinstance(text, str):
        return None
    display = _clean_display(text)
    comparison = normalize_comparison(display)
    if not comparison:
        return None
    return IngredientToken(original=display, comparison=comparison, position=position)


def _split_by_parentheses(text: str) -> List[str]:
    """
    Split a segment by top-level parentheses, flattening the contents.
    'Enriched Flour (Wheat Flour, Niacin)' -> ['Enriched Flour', 'Wheat Flour', 'Niacin']
    Unbalanced parentheses leave the remainder as one chunk.
    """
    out: List[str] = []
    depth = 0
    start = 0
    for i, ch in enumerate(text):
        if ch == "(":
            if depth == 0:
                chunk = text[start:i].strip()
                if chunk:
                    out.append(chunk)
                start = i + 1
            depth += 1
        elif ch == ")" and depth > 0:
            depth -= 1
            if depth == 0:
                inner = text[start:i]
                for part in re.split(r"[,;]", inner):
                    out.extend(_split_by_parentheses(part))
                start = i + 1
    tail = text[start:].strip()
    if tail:
        out.append(tail)
    return out


def _matched_paren_pairs(text: str) -> List[tuple]:
    """(open, close) index pairs of balanced parentheses; a stray ')' or an unclosed '(' pairs with nothing."""
    pairs = []
    stack: List[int] = []
    for i, ch in enumerate(text):
        if ch == "(":
            stack.append(i)
        elif ch == ")" and stack:
            pairs.append((stack.pop(), i))
    return pairs


def _split_top_level(text: str) -> List[str]:
    """
    Split on separators outside balanced parentheses.
    'Flour (Wheat, Niacin), Sugar' -> ['Flour (Wheat, Niacin)', ' Sugar']
    'Milk, Sugar, Salt)' -> ['Milk', ' Sugar', ' Salt)']
    """
    nested = [0] * (len(text) + 1)
    for start, end in _matched_paren_pairs(text):
        nested[start] += 1
        nested[end + 1] -= 1
    segments: List[str] = []
    depth = 0
    last = 0
    for i, ch in enumerate(text):
        depth += nested[i]
        if ch in _SEPARATORS and depth == 0:
            segments.append(text[last:i])
            last = i + 1
    segments.append(text[last:])
    return segments


def split_ingredient_text(raw_text: str) -> List[str]:
    """Split raw label text into display strings, in label order."""
    if not raw_text or not isinstance(raw_text, str):
        return []
    parts: List[str] = []
    for segment in _split_top_level(raw_text):
        if not segment.strip():
            continue
        parts.extend(_split_by_parentheses(segment))
    return parts


def tokenize_ingredients(raw_text: str) -> List[IngredientToken]:
    """
    Raw ingredient text -> ordered tokens.
    'Wheat flour, Sugar, Milk' -> [Wheat flour, Sugar, Milk]
    Empty or whitespace-only input yields []; callers report that as insufficient data.
    """
    tokens: List[IngredientToken] = []
    for part in split_ingredient_text(raw_text):
        token = make_token(part, position=len(tokens))
        if token is not None:
            tokens.append(token)
    logger.debug("NORMALIZER tokenized count=%d", len(tokens))
    return tokens


def tokens_from_list(ingredients: Iterable[str]) -> List[IngredientToken]:
    """Tokens for an already-split list (inferred dish ingredients). Blank and non-string entries are skipped."""
    tokens: List[IngredientToken] = []
    for item in ingredients or []:
        token = make_token(item, position=len(tokens))
        if token is not None:
            tokens.append(token)
    return tokens


def product_to_text(ingredients: Iterable[str], allergens: Iterable[str] = ()) -> str:
    """Barcode product -> one text block; declared allergens are rendered 'Contains: X'."""
    parts = [i for i in (ingredients or []) if isinstance(i, str) and i.strip()]
    parts.extend(f"Contains: {a.strip()}" for a in (allergens or []) if isinstance(a, str) and a.strip())
    return ", ".join(parts)
