"""
Unit tests for the menu path: per-dish Safe/Unsafe verdicts and conflict records.
Run from repo root: python -m pytest backend/tests/test_dish_adapter.py -v
"""


def test_cheeseburger_unsafe_with_two_conflict_types(dictionary):
    from scan_engine.evaluation.dish_adapter import evaluate_dish
    from scan_engine.models import ConflictType, DishVerdictStatus, Profile
    profiles = [Profile(id="a", allergies=("Milk",)), Profile(id="b", preferences=("Vegetarian",))]
    v = evaluate_dish(
        "Classic Cheeseburger",
        ["Beef", "Cheddar cheese", "Brioche bun"],
        profiles,
        dictionary,
        description="Beef patty, cheddar, brioche bun.",
        price="$12.99",
    )
    assert v.verdict == DishVerdictStatus.UNSAFE
    assert [(c.type, c.conflict) for c in v.conflicts] == [
        (ConflictType.ALLERGY_RISK, "Milk"),
        (ConflictType.PREFERENCE_MISMATCH, "Vegetarian"),
    ]
    assert "Cheddar cheese" in v.conflicts[0].detail
    assert v.price == "$12.99"
    assert v.description == "Beef patty, cheddar, brioche bun."
    assert v.ingredients == ("Beef", "Cheddar cheese", "Brioche bun")


def test_preference_only_conflict_is_unsafe(dictionary):
    """The menu path has no caution tier: a preference mismatch alone makes the dish Unsafe."""
    from scan_engine.evaluation.dish_adapter import evaluate_dish
    from scan_engine.models import ConflictType, DishVerdictStatus, Profile
    v = evaluate_dish("Honey Toast", ["Bread", "Honey"], [Profile(id="a", preferences=("Vegan",))], dictionary)
    assert v.verdict == DishVerdictStatus.UNSAFE
    assert [c.type for c in v.conflicts] == [ConflictType.PREFERENCE_MISMATCH]


def test_forbidden_keyword_conflict(dictionary):
    from scan_engine.evaluation.dish_adapter import evaluate_dish
    from scan_engine.models import ConflictType, Profile
    v = evaluate_dish("Fried Rice", ["Rice", "MSG", "Scallions"], [Profile(id="a", forbidden_keywords=("msg",))], dictionary)
    assert [(c.type, c.conflict) for c in v.conflicts] == [(ConflictType.FORBIDDEN_KEYWORD, "msg")]


def test_safe_dish_has_no_conflicts(dictionary):
    from scan_engine.evaluation.dish_adapter import evaluate_dish
    from scan_engine.models import DishVerdictStatus, Profile
    v = evaluate_dish("Garden Salad", ["Lettuce", "Tomato", "Olive oil"], [Profile(id="a", allergies=("Milk",))], dictionary)
    assert v.verdict == DishVerdictStatus.SAFE
    assert v.conflicts == ()
    assert v.ingredients_known


def test_conflicts_deduplicated_per_term(dictionary):
    from scan_engine.evaluation.dish_adapter import evaluate_dish
    from scan_engine.models import Profile
    v = evaluate_dish("Alfredo", ["Cream", "Butter", "Parmesan cheese"], [Profile(id="a", allergies=("Milk",))], dictionary)
    assert len(v.conflicts) == 1
    assert "Cream" in v.conflicts[0].detail


def test_dish_without_inferred_ingredients(dictionary):
    from scan_engine.evaluation.dish_adapter import evaluate_dish
    from scan_engine.models import DishVerdictStatus, Profile
    v = evaluate_dish("Chef's Special", [], [Profile(id="a", allergies=("Milk",))], dictionary)
    assert v.verdict == DishVerdictStatus.SAFE
    assert not v.ingredients_known


def test_evaluate_menu_keeps_order_and_passthrough(dictionary):
    from scan_engine.adapters import MenuDish
    from scan_engine.evaluation.dish_adapter import evaluate_menu
    from scan_engine.models import Profile
    dishes = [
        MenuDish(name="Vegan Buddha Bowl", description="Quinoa bowl", price=11.5,
                 ingredients=["Quinoa", "Chickpeas", "Avocado", "Tahini"]),
        MenuDish.model_validate({"name": "Shrimp Tacos", "inferredIngredients": ["Shrimp", "Corn tortilla"]}),
    ]
    verdicts = evaluate_menu(dishes, [Profile(id="a", allergies=("Shellfish",))], dictionary)
    assert [v.name for v in verdicts] == ["Vegan Buddha Bowl", "Shrimp Tacos"]
    assert [v.verdict.value for v in verdicts] == ["Safe", "Unsafe"]
    assert verdicts[0].price == 11.5
    assert verdicts[0].description == "Quinoa bowl"


def test_menu_uses_union_of_profiles(dictionary):
    from scan_engine.adapters import MenuDish
    from scan_engine.evaluation.dish_adapter import evaluate_menu
    from scan_engine.models import Profile
    dishes = [MenuDish(name="Satay", ingredients=["Chicken", "Peanut sauce"])]
    profiles = [Profile(id="a", allergies=("Peanuts",)), Profile(id="b", preferences=("Vegetarian",))]
    conflicts = evaluate_menu(dishes, profiles, dictionary)[0].conflicts
    assert {c.conflict for c in conflicts} == {"Peanuts", "Vegetarian"}


def test_dish_verdict_to_dict(dictionary):
    from scan_engine.evaluation.dish_adapter import evaluate_dish
    from scan_engine.models import Profile
    d = evaluate_dish("Omelette", ["Eggs"], [Profile(id="a", allergies=("Eggs",))], dictionary).to_dict()
    assert d["verdict"] == "Unsafe"
    assert d["conflicts"][0]["type"] == "allergy_risk"
    assert d["conflicts"][0]["conflict"] == "Eggs"


def test_menu_accepts_plain_dict_dishes(dictionary):
    """Dish entries straight from the inference collaborator (dicts) keep their name and ingredients."""
    from scan_engine.evaluation.dish_adapter import evaluate_menu
    from scan_engine.models import DishVerdictStatus, Profile
    dishes = [
        {"name": "Pad Thai", "ingredients": ["rice noodles", "peanuts"], "price": "$11"},
        {"name": "Green Salad", "inferredIngredients": ["lettuce", "cucumber"]},
    ]
    verdicts = evaluate_menu(dishes, [Profile(id="a", allergies=("Peanuts",))], dictionary)
    assert [v.name for v in verdicts] == ["Pad Thai", "Green Salad"]
    assert verdicts[0].verdict == DishVerdictStatus.UNSAFE
    assert verdicts[0].ingredients == ("rice noodles", "peanuts")
    assert verdicts[0].price == "$11"
    assert verdicts[1].verdict == DishVerdictStatus.SAFE
    assert verdicts[1].ingredients_known


def test_menu_dict_dish_with_bad_field_keeps_ingredients(dictionary):
    from scan_engine.evaluation.dish_adapter import evaluate_menu
    from scan_engine.models import DishVerdictStatus, Profile
    dishes = [{"name": "Satay", "ingredients": ["chicken", "peanut sauce"], "price": {"amount": 9}}]
    verdicts = evaluate_menu(dishes, [Profile(id="a", allergies=("Peanuts",))], dictionary)
    assert verdicts[0].name == "Satay"
    assert verdicts[0].verdict == DishVerdictStatus.UNSAFE
