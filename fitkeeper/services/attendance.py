# backend/fitkeeper/services/attendance.py
from datetime import date
from typing import Optional

from flask import current_app
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from .. import db
from ..models.grass import GrassHistory

FLAGS = ("attendance", "video_watch", "measurement")


def mark_day(user_id: int, flag: str, day: Optional[date] = None) -> GrassHistory:
    """
    Set one activity flag on the user's row for ``day`` (default today),
    creating the row if needed. Calling it again is a no-op.

    A concurrent insert for the same (user, date) hits the unique key; the
    loser rolls back and updates the winner's row.
    """
    if flag not in FLAGS:
        raise ValueError(f"unknown grass flag: {flag}")
    day = day or date.today()

    row = GrassHistory.query.filter_by(user_id=user_id, record_date=day).first()
    if row is None:
        row = GrassHistory(user_id=user_id, record_date=day)
        setattr(row, flag, True)
        db.session.add(row)
        try:
            db.session.commit()
            return row
        except IntegrityError:
            db.session.rollback()
            row = GrassHistory.query.filter_by(user_id=user_id, record_date=day).one()

    if not getattr(row, flag):
        setattr(row, flag, True)
        db.session.commit()
    return row


def mark_day_quietly(user_id: int, flag: str) -> bool:
    """mark_day() for side effects that must never fail the caller."""
    try:
        mark_day(user_id, flag)
        return True
    except SQLAlchemyError as e:
        db.session.rollback()
        current_app.logger.exception(
            f"[grass_history] failed to set {flag} for user_id={user_id}: {e}"
        )
        return False
