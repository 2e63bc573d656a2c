# backend/fitkeeper/services/badges.py
"""
Badges are recomputed from history on every read and stored as a
comma-joined id list ("1,3,5") in mypage.badge_info.

  1: 7-day attendance streak
  2: grade A
  3: top 2% by fitness score
  4: 30 attendance days in total
  5: 3 or more measurement days
  6: premium member
"""
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, List, Optional, Sequence, Tuple

from sqlalchemy import func
from sqlalchemy.exc import IntegrityError

from .. import db
from ..models.grass import GrassHistory, MyPage
from ..models.user import User
from ..utils import round_half_up


@dataclass
class BadgeStats:
    current_streak: int
    user_rank: int
    total_users: int
    top_percent: int
    total_attendance: int
    total_measurement: int
    fitness_grade: Optional[str]
    is_premium: bool


BADGE_RULES: Tuple[Tuple[str, Callable[[BadgeStats], bool]], ...] = (
    ("1", lambda s: s.current_streak >= 7),
    ("2", lambda s: bool(s.fitness_grade) and s.fitness_grade.upper().startswith("A")),
    ("3", lambda s: s.top_percent <= 2),
    ("4", lambda s: s.total_attendance >= 30),
    ("5", lambda s: s.total_measurement >= 3),
    ("6", lambda s: s.is_premium),
)


def earned_badges(stats: BadgeStats) -> List[str]:
    return [badge_id for badge_id, rule in BADGE_RULES if rule(stats)]


def current_streak(rows: Sequence, today: Optional[date] = None) -> int:
    """
    Consecutive attended days ending today.

    ``rows`` are grass rows newest first; the count stops at the first date
    gap or the first day without attendance.
    """
    today = today or date.today()
    streak = 0
    for i, row in enumerate(rows):
        if row.record_date == today - timedelta(days=i) and row.attendance:
            streak += 1
        else:
            break
    return streak


def score_rank(score: Optional[float]) -> Tuple[int, int, int]:
    """(user_rank, total_users, top_percent) among users with a fitness score."""
    score = score or 0
    higher = db.session.query(func.count(User.id)).filter(User.fitness_score > score).scalar() or 0
    total = (
        db.session.query(func.count(User.id)).filter(User.fitness_score.isnot(None)).scalar() or 0
    )
    user_rank = higher + 1
    top_percent = round_half_up(user_rank / total * 100) if total > 0 else 100
    return user_rank, total, top_percent


def _count_days(user_id: int, flag) -> int:
    return (
        db.session.query(func.count(GrassHistory.id))
        .filter(GrassHistory.user_id == user_id, flag.is_(True))
        .scalar()
        or 0
    )


def collect_stats(user: User, today: Optional[date] = None) -> BadgeStats:
    history = (
        GrassHistory.query.filter_by(user_id=user.id)
        .order_by(GrassHistory.record_date.desc())
        .all()
    )
    user_rank, total_users, top_percent = score_rank(user.fitness_score)
    return BadgeStats(
        current_streak=current_streak(history, today),
        user_rank=user_rank,
        total_users=total_users,
        top_percent=top_percent,
        total_attendance=_count_days(user.id, GrassHistory.attendance),
        total_measurement=_count_days(user.id, GrassHistory.measurement),
        fitness_grade=user.fitness_grade,
        is_premium=bool(user.is_premium),
    )


def save_badge_info(user_id: int, badge_info: str) -> None:
    row = db.session.get(MyPage, user_id)
    if row is None:
        db.session.add(MyPage(user_id=user_id, badge_info=badge_info))
        try:
            db.session.commit()
            return
        except IntegrityError:
            db.session.rollback()
            row = db.session.get(MyPage, user_id)
    if row.badge_info != badge_info:
        row.badge_info = badge_info
        db.session.commit()


def refresh_badges(user: User, today: Optional[date] = None) -> Tuple[str, BadgeStats]:
    stats = collect_stats(user, today)
    badge_info = ",".join(earned_badges(stats))
    save_badge_info(user.id, badge_info)
    return badge_info, stats
