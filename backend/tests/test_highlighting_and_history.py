"""
Unit tests: raw-text highlight segments and the history record built from a scan.
Run from repo root: python -m pytest backend/tests/test_highlighting_and_history.py -v
"""


def test_segments_cover_text_in_order():
    from scan_engine.highlighting import highlight_segments
    from scan_engine.models import MatchCategory
    raw = "Wheat flour, Milk, Honey"
    segments = highlight_segments(raw, {"Milk": MatchCategory.ALLERGEN, "Honey": MatchCategory.PREFERENCE_CONFLICT})
    assert "".join(s.text for s in segments) == raw
    assert [(s.text, s.category) for s in segments] == [
        ("Wheat flour, ", None),
        ("Milk", MatchCategory.ALLERGEN),
        (", ", None),
        ("Honey", MatchCategory.PREFERENCE_CONFLICT),
    ]
    assert segments[1].is_severe and not segments[3].is_severe


def test_highlight_is_case_insensitive_and_repeats():
    from scan_engine.highlighting import highlight_segments
    from scan_engine.models import MatchCategory
    segments = highlight_segments("MSG, rice, msg", {"MSG": MatchCategory.FORBIDDEN_KEYWORD})
    assert [s.text for s in segments if s.highlighted] == ["MSG", "msg"]


def test_overlapping_spans_keep_the_first_longest():
    from scan_engine.highlighting import highlight_segments
    from scan_engine.models import MatchCategory
    segments = highlight_segments(
        "Milk chocolate",
        {"chocolate": MatchCategory.PREFERENCE_CONFLICT, "Milk chocolate": MatchCategory.ALLERGEN},
    )
    assert [(s.text, s.category) for s in segments] == [("Milk chocolate", MatchCategory.ALLERGEN)]


def test_highlight_empty_text_and_no_matches():
    from scan_engine.highlighting import highlight_segments
    assert highlight_segments("", {}) == []
    segments = highlight_segments("Sugar", {})
    assert [(s.text, s.highlighted) for s in segments] == [("Sugar", False)]


def test_highlight_from_analysis_result(dictionary):
    from scan_engine.evaluation import ScanAggregator
    from scan_engine.highlighting import highlight_segments
    from scan_engine.models import Profile
    result = ScanAggregator(dictionary).analyze_text("Sugar, Peanuts, Salt", [Profile(id="a", allergies=("Peanuts",))])
    segments = highlight_segments(result.raw_text, result.match_index)
    assert [s.to_dict() for s in segments if s.highlighted] == [{"text": "Peanuts", "type": "allergen"}]


def test_history_entry_counts(dictionary):
    from scan_engine.evaluation import ScanAggregator
    from scan_engine.history import build_history_entry
    from scan_engine.models import Profile
    profiles = [
        Profile(id="a", name="Alice", allergies=("Milk",)),
        Profile(id="b", name="Bob", preferences=("Vegan",)),
        Profile(id="c", name="Cara"),
    ]
    result = ScanAggregator(dictionary).analyze_text("Sugar, Honey, Cocoa", profiles)
    entry = build_history_entry(result, scanned_at="2026-10-19T12:00:00Z")
    assert entry["ingredients"] == ["Sugar", "Honey", "Cocoa"]
    assert (entry["safe_count"], entry["caution_count"], entry["unsafe_count"]) == (2, 1, 0)
    assert entry["status"] == "caution"
    assert entry["scanned_at"] == "2026-10-19T12:00:00Z"
    assert [p["status"] for p in entry["profiles"]] == ["safe", "caution", "safe"]


def test_history_entry_for_empty_scan_counts_nothing_as_safe(dictionary):
    from scan_engine.evaluation import ScanAggregator
    from scan_engine.history import build_history_entry
    from scan_engine.models import Profile
    entry = build_history_entry(ScanAggregator(dictionary).analyze_text("", [Profile(id="a")]))
    assert entry["status"] == "insufficient_data"
    assert (entry["safe_count"], entry["caution_count"], entry["unsafe_count"]) == (0, 0, 0)
    assert "scanned_at" not in entry
