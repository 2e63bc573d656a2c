# backend/fitkeeper/models/__init__.py
from .user import User
from .measurement import Measurement, MeasurementCode
from .recipe import Card, Recipe
from .exercise_record import ExerciseRecord
from .grass import GrassHistory, MyPage
from .directory import ClubInfo, SportsFacility

__all__ = [
    "User",
    "Measurement",
    "MeasurementCode",
    "Card",
    "Recipe",
    "ExerciseRecord",
    "GrassHistory",
    "MyPage",
    "ClubInfo",
    "SportsFacility",
]
