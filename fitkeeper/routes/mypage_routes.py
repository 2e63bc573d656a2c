# backend/fitkeeper/routes/mypage_routes.py
from datetime import date, timedelta

from flask import Blueprint, jsonify
from flask_jwt_extended import jwt_required

from .. import db
from ..models.grass import GrassHistory
from ..models.recipe import Recipe
from ..services.badges import refresh_badges
from ..services.identity import current_user

mypage_bp = Blueprint("mypage", __name__)

RECENT_RECIPES = 4


def _week_start(today: date) -> date:
    # Monday of the current week
    return today - timedelta(days=today.weekday())


def _one_year_ago(today: date) -> date:
    try:
        return today.replace(year=today.year - 1)
    except ValueError:
        # Feb 29 -> Feb 28
        return today.replace(year=today.year - 1, day=28)


@mypage_bp.route("", methods=["GET"])
@jwt_required()
def get_mypage():
    """
    Profile, percentile ranking, streak, badges, this week's video days,
    one year of grass and the four latest recipes.
    """
    user = current_user()
    today = date.today()

    badge_info, stats = refresh_badges(user, today)

    weekly_video_watch = (
        db.session.query(db.func.count(GrassHistory.id))
        .filter(
            GrassHistory.user_id == user.id,
            GrassHistory.video_watch.is_(True),
            GrassHistory.record_date >= _week_start(today),
        )
        .scalar()
        or 0
    )

    grass = (
        GrassHistory.query.filter(
            GrassHistory.user_id == user.id,
            GrassHistory.record_date >= _one_year_ago(today),
        )
        .order_by(GrassHistory.record_date.asc())
        .all()
    )

    recipes = (
        Recipe.query.filter_by(user_id=user.id)
        .order_by(Recipe.created_at.desc(), Recipe.id.desc())
        .limit(RECENT_RECIPES)
        .all()
    )
    recent = []
    for r in recipes:
        item = r.to_summary_dict()
        item["fitness_grade"] = r.fitness_grade
        item["created_at"] = r.created_at.isoformat() if r.created_at else None
        item["exerciseCount"] = item.pop("card_count")
        recent.append(item)

    return jsonify(
        {
            "success": True,
            "data": {
                "profile": {
                    "userId": user.id,
                    "name": user.name,
                    "email": user.email,
                    "fitnessGrade": user.fitness_grade,
                    "fitnessScore": user.fitness_score,
                },
                "ranking": {
                    "totalUsers": stats.total_users,
                    "userRank": stats.user_rank,
                    "topPercent": stats.top_percent,
                },
                "streak": {"currentStreak": stats.current_streak},
                "badgeInfo": badge_info,
                "weeklyVideoWatch": int(weekly_video_watch),
                "grass": [g.to_dict() for g in grass],
                "recipes": recent,
            },
        }
    ), 200
