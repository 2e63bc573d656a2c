# backend/fitkeeper/routes/exercise_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required

from ..models.exercise_record import ExerciseRecord
from ..services.identity import current_user
from ..services.ranking import leaderboard, my_record, submit_record
from ..utils import MAX_PAGE_SIZE, safe_int

exercise_bp = Blueprint("exercise", __name__)

DEFAULT_LEADERBOARD_SIZE = 10


@exercise_bp.route("", methods=["POST"])
@jwt_required()
def save_record():
    """
    Body: { "title": "Squat", "averageAccuracy": 87.5, "exerciseDuration": 120 }

    One record per user and title; resubmitting overwrites it.
    """
    user = current_user()
    data = request.get_json(silent=True) or {}

    record, is_update = submit_record(
        user.id,
        data.get("title"),
        data.get("averageAccuracy"),
        data.get("exerciseDuration"),
    )
    current_app.logger.info(
        f"[exercise] user_id={user.id} title={record.title} "
        f"accuracy={record.average_accuracy} update={is_update}"
    )

    return jsonify(
        {
            "success": True,
            "message": "Exercise record updated" if is_update else "Exercise record saved",
            "data": {"id": record.id, "isUpdate": is_update},
        }
    ), (200 if is_update else 201)


@exercise_bp.route("/ranking/<path:title>", methods=["GET"])
def ranking(title):
    limit = safe_int(request.args.get("limit"), DEFAULT_LEADERBOARD_SIZE)
    if limit < 1:
        limit = DEFAULT_LEADERBOARD_SIZE
    limit = min(limit, MAX_PAGE_SIZE)

    board = leaderboard(title, limit)
    return jsonify({"success": True, "title": title, "data": board}), 200


@exercise_bp.route("/my-record/<path:title>", methods=["GET"])
@jwt_required()
def get_my_record(title):
    user = current_user()
    return jsonify({"success": True, "data": my_record(user.id, title)}), 200


@exercise_bp.route("/my-records", methods=["GET"])
@jwt_required()
def get_my_records():
    user = current_user()
    records = (
        ExerciseRecord.query.filter_by(user_id=user.id)
        .order_by(ExerciseRecord.created_at.desc(), ExerciseRecord.id.desc())
        .all()
    )
    return jsonify({"success": True, "data": [r.to_dict() for r in records]}), 200
