from .collaborators import (
    MenuDish,
    ScannedProduct,
    StoredProfile,
    TermSelection,
    dish_from_payload,
    profile_from_payload,
    profiles_from_payload,
)

__all__ = [
    "MenuDish",
    "ScannedProduct",
    "StoredProfile",
    "TermSelection",
    "dish_from_payload",
    "profile_from_payload",
    "profiles_from_payload",
]
