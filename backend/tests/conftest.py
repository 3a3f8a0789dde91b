"""
Shared fixtures. Run from the repo root: python -m pytest backend/tests -v
"""
import json

import pytest


@pytest.fixture
def dictionary():
    """The bundled term dictionary."""
    from scan_engine.terms import TermDictionary
    return TermDictionary.default()


@pytest.fixture
def small_dictionary_file(tmp_path):
    """A two-term dictionary on disk, for loader and override tests."""
    path = tmp_path / "terms.json"
    path.write_text(json.dumps({
        "version": "test-1",
        "terms": [
            {"name": "Peanuts", "category": "allergen", "aliases": ["peanut"], "patterns": ["peanut", "groundnut"]},
            {"name": "Vegan", "category": "preference", "patterns": ["milk", "egg", "honey"]},
        ],
    }), encoding="utf-8")
    return path
