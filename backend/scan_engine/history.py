"""
History record for a finished scan: what the history store persists.
"""
from typing import Any, Dict, Optional

from scan_engine.models.results import AnalysisResult, ScanStatus


def build_history_entry(result: AnalysisResult, scanned_at: Optional[str] = None) -> Dict[str, Any]:
    """
    Ingredient list plus per-profile safe/caution/unsafe counts.
    Profiles with insufficient data are not counted as safe. scanned_at comes from the caller.
    """
    statuses = [r.status for r in result.profile_results]
    entry: Dict[str, Any] = {
        "ingredients": list(result.ingredients),
        "status": result.status.value,
        "safe_count": statuses.count(ScanStatus.SAFE),
        "caution_count": statuses.count(ScanStatus.CAUTION),
        "unsafe_count": statuses.count(ScanStatus.UNSAFE),
        "profiles": [
            {"profile_id": r.profile_id, "profile_name": r.profile_name, "status": r.status.value}
            for r in result.profile_results
        ],
        "dictionary_version": result.dictionary_version,
    }
    if scanned_at is not None:
        entry["scanned_at"] = scanned_at
    return entry
