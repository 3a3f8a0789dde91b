from .normalizer import (
    IngredientToken,
    make_token,
    normalize_comparison,
    product_to_text,
    split_ingredient_text,
    tokenize_ingredients,
    tokens_from_list,
)

__all__ = [
    "IngredientToken",
    "make_token",
    "normalize_comparison",
    "product_to_text",
    "split_ingredient_text",
    "tokenize_ingredients",
    "tokens_from_list",
]
