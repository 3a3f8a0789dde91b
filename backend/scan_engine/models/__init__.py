from .profile import Profile, merge_profiles, COMBINED_PROFILE_ID
from .results import (
    AnalysisResult,
    CATEGORY_TO_CONFLICT_TYPE,
    ConflictRecord,
    ConflictType,
    DishVerdict,
    DishVerdictStatus,
    MatchCategory,
    MatchRecord,
    ProfileResult,
    ScanStatus,
)

__all__ = [
    "AnalysisResult",
    "CATEGORY_TO_CONFLICT_TYPE",
    "COMBINED_PROFILE_ID",
    "ConflictRecord",
    "ConflictType",
    "DishVerdict",
    "DishVerdictStatus",
    "MatchCategory",
    "MatchRecord",
    "Profile",
    "ProfileResult",
    "ScanStatus",
    "merge_profiles",
]
