"""
Splits raw label text into plain and highlighted segments for the result screen.
Red for allergens and forbidden keywords, yellow for preference conflicts.
"""
from dataclasses import dataclass
from typing import List, Mapping, Optional, Tuple

from scan_engine.models.results import MatchCategory


@dataclass(frozen=True)
class HighlightSegment:
    text: str
    category: Optional[MatchCategory] = None

    @property
    def highlighted(self) -> bool:
        return self.category is not None

    @property
    def is_severe(self) -> bool:
        return self.category is not None and self.category.is_severe

    def to_dict(self) -> dict:
        return {"text": self.text, "type": self.category.value if self.category else None}


def _find_spans(raw_text: str, match_index: Mapping[str, MatchCategory]) -> List[Tuple[int, int, MatchCategory]]:
    lower = raw_text.casefold()
    spans: List[Tuple[int, int, MatchCategory]] = []
    for name, category in match_index.items():
        term = name.casefold()
        if not term:
            continue
        pos = lower.find(term)
        while pos != -1:
            spans.append((pos, pos + len(term), category))
            pos = lower.find(term, pos + 1)
    # Earlier start first; at the same start the longer, then more severe, span wins.
    spans.sort(key=lambda s: (s[0], -(s[1] - s[0]), -s[2].severity))
    return spans


def highlight_segments(raw_text: str, match_index: Mapping[str, MatchCategory]) -> List[HighlightSegment]:
    """
    Cover raw_text with segments; overlapping spans after the first are skipped.
    Returns [] for empty text.
    """
    if not raw_text:
        return []
    if len(raw_text.casefold()) != len(raw_text):
        # Case folding changed the length (e.g. 'ß'); offsets would drift, so show plain text.
        return [HighlightSegment(raw_text)]
    segments: List[HighlightSegment] = []
    cursor = 0
    for start, end, category in _find_spans(raw_text, match_index or {}):
        if start < cursor:
            continue
        if start > cursor:
            segments.append(HighlightSegment(raw_text[cursor:start]))
        segments.append(HighlightSegment(raw_text[start:end], category))
        cursor = end
    if cursor < len(raw_text):
        segments.append(HighlightSegment(raw_text[cursor:]))
    return segments
