# backend/fitkeeper/services/ranking.py
"""
Per-exercise leaderboards.

Rank is 1 + the number of records for the same title with strictly higher
accuracy. Duration only orders records that tie on accuracy in the
leaderboard listing; it never changes a rank number.
"""
import math
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from .. import db
from ..errors import InvalidRecordError, ValidationError
from ..models.exercise_record import ExerciseRecord
from ..models.user import User


def _number(value: Any, field_name: str) -> float:
    if isinstance(value, bool):
        raise ValidationError(f"{field_name} must be a number")
    try:
        number = float(value)
    except (TypeError, ValueError):
        raise ValidationError(f"{field_name} must be a number")
    if not math.isfinite(number):
        raise ValidationError(f"{field_name} must be a finite number")
    return number


def validate_record(title: Any, accuracy: Any, duration: Any) -> Tuple[str, float, int]:
    if not title or accuracy is None or duration is None:
        raise ValidationError(
            "missing required fields (title, averageAccuracy, exerciseDuration)"
        )
    accuracy = _number(accuracy, "averageAccuracy")
    # stored in whole seconds; 0.4s would be saved as 0
    duration = int(round(_number(duration, "exerciseDuration")))
    if accuracy <= 0 or duration <= 0:
        raise InvalidRecordError(
            "records with 0% accuracy or 0 seconds of exercise cannot be registered"
        )
    return str(title), accuracy, duration


def submit_record(user_id: int, title: Any, accuracy: Any, duration: Any) -> Tuple[ExerciseRecord, bool]:
    """
    Upsert the user's record for ``title``; a later submission replaces the
    earlier one. Returns (record, is_update).
    """
    title, accuracy, duration = validate_record(title, accuracy, duration)

    record = ExerciseRecord.query.filter_by(user_id=user_id, title=title).first()
    is_update = record is not None
    if record is None:
        record = ExerciseRecord(user_id=user_id, title=title)
        db.session.add(record)

    record.average_accuracy = accuracy
    record.exercise_duration = duration
    record.created_at = datetime.utcnow()
    try:
        db.session.commit()
    except IntegrityError:
        # lost an insert race on (user_id, title): overwrite the winner's row
        db.session.rollback()
        record = ExerciseRecord.query.filter_by(user_id=user_id, title=title).one()
        record.average_accuracy = accuracy
        record.exercise_duration = duration
        record.created_at = datetime.utcnow()
        db.session.commit()
        is_update = True
    return record, is_update


def rank_for(title: str, accuracy: float) -> int:
    higher = (
        db.session.query(func.count(ExerciseRecord.id))
        .filter(ExerciseRecord.title == title, ExerciseRecord.average_accuracy > accuracy)
        .scalar()
    )
    return (higher or 0) + 1


def participant_count(title: str) -> int:
    return ExerciseRecord.query.filter_by(title=title).count()


def leaderboard(title: str, limit: int = 10) -> List[Dict[str, Any]]:
    rank_position = func.rank().over(
        order_by=(
            ExerciseRecord.average_accuracy.desc(),
            ExerciseRecord.exercise_duration.desc(),
        )
    )
    rows = (
        db.session.query(ExerciseRecord, User.name, rank_position.label("rank_position"))
        .join(User, ExerciseRecord.user_id == User.id)
        .filter(ExerciseRecord.title == title)
        .order_by(
            ExerciseRecord.average_accuracy.desc(),
            ExerciseRecord.exercise_duration.desc(),
        )
        .limit(limit)
        .all()
    )
    board = []
    for record, user_name, position in rows:
        entry = record.to_dict()
        entry.update(
            {"user_id": record.user_id, "user_name": user_name, "rank_position": int(position)}
        )
        board.append(entry)
    return board


def my_record(user_id: int, title: str) -> Optional[Dict[str, Any]]:
    record = ExerciseRecord.query.filter_by(user_id=user_id, title=title).first()
    if record is None:
        return None
    data = record.to_dict()
    data["myRank"] = rank_for(title, record.average_accuracy)
    data["totalParticipants"] = participant_count(title)
    return data
