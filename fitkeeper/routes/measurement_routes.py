# backend/fitkeeper/routes/measurement_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required

from .. import db
from ..errors import AuthorizationError, NotFoundError, ValidationError
from ..models.measurement import Measurement, MeasurementCode
from ..models.recipe import Recipe
from ..services.catalog import AGE_GROUPS, get_age_group
from ..services.composer import RecipeComposer
from ..services.identity import current_user
from ..services.intake import record_measurement
from ..services.recipe_reader import recipe_for_measurement, recipe_view
from ..utils import safe_int_or_none

measurement_bp = Blueprint("measurement", __name__)


def _session_dict(rows, recipe=None):
    first = rows[0]
    return {
        "measurement_id": first.id,
        "measurement_uuid": first.measurement_uuid,
        "created_at": first.created_at.isoformat() if first.created_at else None,
        "items": {r.measurement_code: r.measurement_data for r in rows},
        "recipe_id": recipe.id if recipe else None,
        "recipe_title": recipe.recipe_title if recipe else None,
        "fitness_score": recipe.fitness_score if recipe else None,
    }


@measurement_bp.route("/items", methods=["GET"])
@jwt_required()
def measurement_items():
    """
    GET /api/measurement/items?age=34  or  ?ageGroup=adult
    """
    group_key = request.args.get("ageGroup")
    age = safe_int_or_none(request.args.get("age"))
    if not group_key and age is not None:
        group_key = get_age_group(age)

    if not group_key:
        raise ValidationError("age or ageGroup is required")
    group = AGE_GROUPS.get(group_key)
    if group is None:
        raise ValidationError(f"unknown ageGroup '{group_key}'")

    return jsonify({"success": True, "data": group.to_dict()}), 200


@measurement_bp.route("/codes", methods=["GET"])
def measurement_codes():
    codes = MeasurementCode.query.order_by(MeasurementCode.measurement_code_name.asc()).all()
    return jsonify({"success": True, "data": [c.to_dict() for c in codes]}), 200


@measurement_bp.route("", methods=["POST"])
@jwt_required()
def create_measurement():
    """
    Body:
    {
      "req_arr": [
        { "measure_key": "53", "measure_value": "34" },
        { "measure_key": "1",  "measure_value": "172.5" },
        { "measure_key": "2",  "measure_value": "68" }
      ]
    }
    """
    user = current_user()
    data = request.get_json(silent=True) or {}
    req_arr = data.get("req_arr") or data.get("measurements")

    result = record_measurement(user, req_arr, RecipeComposer.from_app())
    composed = result.composed

    view = recipe_view(composed.recipe, cards=composed.cards)
    view.pop("id")
    view.update(
        {
            "recipe_id": composed.recipe.id,
            "measurement_id": result.measurement_id,
            "measurement_uuid": result.measurement_uuid,
            "measurements": result.parsed.echo(),
        }
    )
    return jsonify(view), 201


@measurement_bp.route("", methods=["GET"])
@jwt_required()
def list_measurements():
    user = current_user()
    rows = (
        Measurement.query.filter_by(user_id=user.id)
        .order_by(Measurement.created_at.desc(), Measurement.id.asc())
        .all()
    )

    sessions = {}
    for row in rows:
        sessions.setdefault(row.measurement_uuid, []).append(row)

    recipes = {
        r.measurement_uuid: r
        for r in Recipe.query.filter(
            Recipe.user_id == user.id,
            Recipe.measurement_uuid.in_(list(sessions)),
        ).all()
    } if sessions else {}

    data = [
        _session_dict(sorted(session_rows, key=lambda r: r.id), recipes.get(uuid))
        for uuid, session_rows in sessions.items()
    ]
    data.sort(key=lambda s: s["measurement_uuid"], reverse=True)
    return jsonify({"success": True, "data": data}), 200


@measurement_bp.route("/<int:measurement_id>", methods=["GET"])
@jwt_required()
def get_measurement(measurement_id):
    user = current_user()
    row = db.session.get(Measurement, measurement_id)
    if row is None:
        raise NotFoundError("measurement not found")
    if row.user_id != user.id:
        raise AuthorizationError("this measurement belongs to another user")

    rows = (
        Measurement.query.filter_by(user_id=user.id, measurement_uuid=row.measurement_uuid)
        .order_by(Measurement.id.asc())
        .all()
    )
    recipe = Recipe.query.filter_by(
        user_id=user.id, measurement_uuid=row.measurement_uuid
    ).first()
    return jsonify({"success": True, "data": _session_dict(rows, recipe)}), 200


@measurement_bp.route("/<int:measurement_id>/recipe", methods=["GET"])
@jwt_required()
def get_measurement_recipe(measurement_id):
    user = current_user()
    recipe = recipe_for_measurement(measurement_id, user.id)
    return jsonify({"success": True, "data": recipe_view(recipe)}), 200
