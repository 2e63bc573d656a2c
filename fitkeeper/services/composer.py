# backend/fitkeeper/services/composer.py
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from flask import current_app

from .. import db
from ..models.recipe import PHASES, Card, Recipe
from ..models.user import User
from ..utils import round_half_up
from .cards import cards_by_ids, resolve_card_ids, total_seconds
from .catalog import AGE_GROUPS, MeasureValue, feature_vector
from .recommender import Recommendation, RecommendationClient
from .text_generator import RecipeTextGenerator

logger = logging.getLogger(__name__)


@dataclass
class ComposedRecipe:
    recipe: Recipe
    recommendation: Recommendation
    cards: Dict[str, List[Card]] = field(default_factory=dict)
    phase_seconds: Dict[str, int] = field(default_factory=dict)


class RecipeComposer:
    """
    Turn one measurement session into a persisted Recipe.

    Neither collaborator can fail the composition: the recommender and the
    text generator both fall back to fixed content.
    """

    def __init__(self, recommender: RecommendationClient, text_generator: RecipeTextGenerator):
        self.recommender = recommender
        self.text_generator = text_generator

    @classmethod
    def from_app(cls, app=None) -> "RecipeComposer":
        app = app or current_app
        return cls(app.extensions["recommender"], app.extensions["text_generator"])

    def compose(
        self,
        user: User,
        age_group: str,
        age: int,
        gender: str,
        values: Dict[str, MeasureValue],
        measurement_id: Optional[int] = None,
        measurement_uuid: Optional[str] = None,
    ) -> ComposedRecipe:
        """Adds the recipe to the session; the caller commits."""
        items = {code: v.raw for code, v in values.items()}
        features = feature_vector(AGE_GROUPS[age_group], values)

        rec = self.recommender.recommend(age_group, age, gender, items, features)
        logger.info(
            f"recommendation grade={rec.fitness_grade} score={rec.fitness_score} "
            f"fallback={rec.fallback}"
        )

        cards: Dict[str, List[Card]] = {}
        phase_seconds: Dict[str, int] = {}
        for phase in PHASES:
            # dedupe is per phase; the same card may appear in several phases
            cards[phase] = cards_by_ids(resolve_card_ids(rec.names(phase)))
            phase_seconds[phase] = total_seconds(cards[phase])

        duration_min = round_half_up(sum(phase_seconds.values()) / 60)
        difficulty = rec.difficulty

        text = self.text_generator.generate(
            age_group=age_group,
            age=age,
            gender=gender,
            fitness_grade=rec.fitness_grade,
            difficulty=difficulty,
            exercises={phase: [c.exercise_name for c in cards[phase]] for phase in PHASES},
        )

        recipe = Recipe(
            user_id=user.id,
            measurement_id=measurement_id,
            measurement_uuid=measurement_uuid,
            recipe_title=text.title,
            recipe_intro=text.intro,
            difficulty=difficulty,
            duration_min=duration_min,
            fitness_grade=rec.fitness_grade,
            fitness_score=rec.fitness_score,
        )
        for phase in PHASES:
            recipe.set_card_ids(phase, [c.id for c in cards[phase]])
        db.session.add(recipe)

        user.fitness_grade = rec.fitness_grade
        user.fitness_score = rec.fitness_score

        return ComposedRecipe(
            recipe=recipe,
            recommendation=rec,
            cards=cards,
            phase_seconds=phase_seconds,
        )
