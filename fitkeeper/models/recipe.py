# backend/fitkeeper/models/recipe.py
from datetime import datetime
from typing import Iterable, List

from .. import db

# Recipe phases, in display order
PHASES = ("warm_up", "main", "cool_down")


def dedupe_ids(ids: Iterable[int]) -> List[int]:
    """Drop repeated ids, keeping the first occurrence's position."""
    return list(dict.fromkeys(ids))


def parse_card_ids(value) -> List[int]:
    """
    "3,3, 5" -> [3, 5]

    Blank or non-numeric entries are ignored.
    """
    if not value:
        return []
    ids = []
    for part in str(value).split(","):
        part = part.strip()
        if part.isdigit():
            ids.append(int(part))
    return dedupe_ids(ids)


def join_card_ids(ids: Iterable[int]) -> str:
    return ",".join(str(i) for i in dedupe_ids(ids))


class Card(db.Model):
    """Exercise catalog entry (read-only for this service)."""

    __tablename__ = "card"

    id = db.Column(db.Integer, primary_key=True)
    exercise_name = db.Column(db.String(200), nullable=False, index=True)
    description = db.Column(db.Text)
    video_url = db.Column(db.String(500))
    image_url = db.Column(db.String(500))
    video_duration = db.Column(db.String(20))
    fitness_category = db.Column(db.String(100))
    equipment = db.Column(db.String(100))
    body_part = db.Column(db.String(100))
    target_audience = db.Column(db.String(100))


class Recipe(db.Model):
    __tablename__ = "recipe"

    id = db.Column(db.BigInteger().with_variant(db.Integer, "sqlite"), primary_key=True)
    user_id = db.Column(db.BigInteger, db.ForeignKey("users.id"), nullable=False)
    measurement_id = db.Column(db.BigInteger, db.ForeignKey("measurement.id"))
    measurement_uuid = db.Column("measurement_UUID", db.String(12), index=True)

    recipe_title = db.Column(db.String(200), nullable=False)
    recipe_intro = db.Column(db.Text)
    difficulty = db.Column(db.String(20), nullable=False, default="beginner")
    duration_min = db.Column(db.Integer, nullable=False, default=0)
    fitness_grade = db.Column(db.String(20))
    fitness_score = db.Column(db.Float, default=0)

    # comma-joined card ids, deduplicated within each phase
    warm_up_cards = db.Column(db.Text, nullable=False, default="")
    main_cards = db.Column(db.Text, nullable=False, default="")
    cool_down_cards = db.Column(db.Text, nullable=False, default="")

    created_at = db.Column(db.DateTime, default=datetime.utcnow, nullable=False)

    user = db.relationship("User", backref="recipes")

    def card_ids(self, phase: str) -> List[int]:
        return parse_card_ids(getattr(self, f"{phase}_cards"))

    def set_card_ids(self, phase: str, ids: Iterable[int]) -> None:
        setattr(self, f"{phase}_cards", join_card_ids(ids))

    @property
    def card_count(self) -> int:
        return sum(len(self.card_ids(phase)) for phase in PHASES)

    def to_summary_dict(self):
        return {
            "id": self.id,
            "recipe_title": self.recipe_title,
            "recipe_intro": self.recipe_intro,
            "difficulty": self.difficulty,
            "duration_min": self.duration_min,
            "card_count": self.card_count,
        }
