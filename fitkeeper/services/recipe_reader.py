# backend/fitkeeper/services/recipe_reader.py
from typing import Any, Dict, Optional

from .. import db
from ..errors import AuthorizationError, NotFoundError
from ..models.measurement import Measurement
from ..models.recipe import PHASES, Recipe
from .cards import card_to_dict, cards_by_ids, total_seconds


def recipe_view(recipe: Recipe, cards=None, raw_seconds: bool = False) -> Dict[str, Any]:
    """
    Recipe metadata plus one card list per phase, in stored order.

    ``cards`` maps phase -> Card list when the caller already has them.
    raw_seconds=False formats durations as "m:ss" (measurement views),
    True returns integer seconds plus per-phase totals (public recipe view).
    """
    view = {
        "id": recipe.id,
        "recipe_title": recipe.recipe_title or "",
        "recipe_intro": recipe.recipe_intro or "",
        "difficulty": recipe.difficulty or "",
        "duration_min": recipe.duration_min or 0,
        "fitness_grade": recipe.fitness_grade or "",
    }
    for phase in PHASES:
        phase_cards = cards[phase] if cards is not None else cards_by_ids(recipe.card_ids(phase))
        view[f"{phase}_card_list"] = [card_to_dict(c, raw_seconds) for c in phase_cards]
        if raw_seconds:
            view[f"{phase}_duration_sec"] = total_seconds(phase_cards)
    if raw_seconds:
        view["fitness_score"] = recipe.fitness_score
        view["created_at"] = recipe.created_at.isoformat() if recipe.created_at else None
    return view


def get_recipe(recipe_id: int) -> Recipe:
    recipe = db.session.get(Recipe, recipe_id)
    if recipe is None:
        raise NotFoundError("recipe not found")
    return recipe


def recipe_for_measurement(measurement_id: int, user_id: int) -> Recipe:
    """The recipe generated from the session that measurement row belongs to."""
    measurement = db.session.get(Measurement, measurement_id)
    if measurement is None:
        raise NotFoundError("measurement not found")
    if measurement.user_id != user_id:
        raise AuthorizationError("this measurement belongs to another user")

    recipe = (
        Recipe.query.filter_by(
            user_id=measurement.user_id,
            measurement_uuid=measurement.measurement_uuid,
        )
        .order_by(Recipe.id.desc())
        .first()
    )
    if recipe is None:
        raise NotFoundError("recipe not found")
    return recipe


def list_recipes(
    page: int,
    limit: int,
    offset: int,
    title: Optional[str] = None,
    user_id: Optional[int] = None,
):
    """(total_count, recipes) newest first; user_id restricts to one owner."""
    q = Recipe.query
    if title:
        q = q.filter(Recipe.recipe_title.like(f"%{title}%"))
    if user_id is not None:
        q = q.filter(Recipe.user_id == user_id)

    total_count = q.count()
    rows = (
        q.order_by(Recipe.created_at.desc(), Recipe.id.desc())
        .limit(limit)
        .offset(offset)
        .all()
    )
    return total_count, rows
