# backend/fitkeeper/services/recommender.py
"""
Client for the external exercise recommendation service.

The service is a black box: it receives the measured items (or a numeric
feature vector) and answers with three lists of exercise names plus a fitness
grade tier. Any failure yields fallback_recommendation(); callers never see an error.
"""
import logging
import math
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

import requests

logger = logging.getLogger(__name__)

PARTICIPANT_GRADE = "participant"

# numeric tier from the service -> stored grade label
GRADE_LABELS = {1: "A", 2: "B", 3: "C"}

# grade label -> recipe difficulty; anything else is "beginner"
DIFFICULTY_BY_GRADE = {"A": "advanced", "B": "intermediate"}


@dataclass
class Recommendation:
    warm_up: List[str] = field(default_factory=list)
    main: List[str] = field(default_factory=list)
    cool_down: List[str] = field(default_factory=list)
    fitness_grade: str = PARTICIPANT_GRADE
    fitness_score: float = 0.0
    fallback: bool = False

    @property
    def difficulty(self) -> str:
        return difficulty_for_grade(self.fitness_grade)

    def names(self, phase: str) -> List[str]:
        return getattr(self, phase)


def difficulty_for_grade(grade: Optional[str]) -> str:
    return DIFFICULTY_BY_GRADE.get((grade or "").upper(), "beginner")


def grade_label(tier: Any) -> str:
    try:
        return GRADE_LABELS.get(int(tier), PARTICIPANT_GRADE)
    except (TypeError, ValueError, OverflowError):
        return PARTICIPANT_GRADE


def fallback_recommendation() -> Recommendation:
    return Recommendation(
        warm_up=["Full Body Stretching"],
        main=["Aerobic Exercise", "Strength Training"],
        cool_down=["Full Body Stretching"],
        fitness_grade=PARTICIPANT_GRADE,
        fitness_score=0.0,
        fallback=True,
    )


class MalformedRecommendation(ValueError):
    pass


def _name_list(data: Dict[str, Any], key: str) -> List[str]:
    value = data.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise MalformedRecommendation(f"{key} must be a list")
    return value


def parse_recommendation(data: Any) -> Recommendation:
    """
    Expected body:
    {
      "warmUpExercises": ["..."],
      "mainExercises": ["..."],
      "coolDownExercises": ["..."],
      "fitnessGrade": 2,
      "fitnessScore": 71.5
    }
    """
    if not isinstance(data, dict):
        raise MalformedRecommendation("response body is not an object")

    tier = data.get("fitnessGrade")
    if isinstance(tier, bool) or not isinstance(tier, (int, float, str)):
        raise MalformedRecommendation("fitnessGrade is missing or not numeric")
    try:
        tier = float(tier)
    except ValueError:
        raise MalformedRecommendation("fitnessGrade is not numeric")
    if not math.isfinite(tier):
        raise MalformedRecommendation("fitnessGrade is not finite")

    score = data.get("fitnessScore") or 0
    try:
        score = float(score)
    except (TypeError, ValueError):
        raise MalformedRecommendation("fitnessScore is not numeric")
    if not math.isfinite(score):
        raise MalformedRecommendation("fitnessScore is not finite")

    return Recommendation(
        warm_up=_name_list(data, "warmUpExercises"),
        main=_name_list(data, "mainExercises"),
        cool_down=_name_list(data, "coolDownExercises"),
        fitness_grade=grade_label(tier),
        fitness_score=score,
    )


class RecommendationClient:
    def __init__(self, base_url: Optional[str], timeout: float = 30.0, mode: str = "items"):
        self.base_url = (base_url or "").rstrip("/") or None
        self.timeout = timeout
        self.mode = mode

    @classmethod
    def from_config(cls, config) -> "RecommendationClient":
        return cls(
            base_url=config.get("AI_SERVER_URL"),
            timeout=float(config.get("AI_SERVER_TIMEOUT_SECONDS") or 30),
            mode=config.get("AI_SERVER_MODE") or "items",
        )

    def build_payload(self, age_group, age, gender, items, features) -> Dict[str, Any]:
        payload = {"ageGroup": age_group, "age": age, "gender": gender}
        if self.mode == "features":
            payload["features"] = features
        else:
            payload["measurementItems"] = items
        return payload

    def recommend(
        self,
        age_group: str,
        age: int,
        gender: str,
        items: Dict[str, str],
        features: Optional[List[Optional[float]]] = None,
    ) -> Recommendation:
        if not self.base_url:
            logger.warning("AI_SERVER_URL is not configured, using fallback recipe")
            return fallback_recommendation()

        payload = self.build_payload(age_group, age, gender, items, features or [])
        try:
            resp = requests.post(
                f"{self.base_url}/generate-recipe",
                json=payload,
                timeout=self.timeout,
            )
            resp.raise_for_status()
            return parse_recommendation(resp.json())
        except (requests.RequestException, ValueError) as e:
            # ValueError covers undecodable JSON and MalformedRecommendation
            logger.warning(f"Recommendation service failed, using fallback recipe: {e}")
            return fallback_recommendation()
