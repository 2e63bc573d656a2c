# backend/fitkeeper/routes/recipe_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import verify_jwt_in_request

from ..errors import AuthenticationError
from ..services.identity import current_user
from ..services.recipe_reader import get_recipe, list_recipes, recipe_view
from ..utils import page_meta, page_params

recipes_bp = Blueprint("recipes", __name__)


@recipes_bp.route("", methods=["GET"])
def recipe_list():
    """
    GET /api/recipes?recipe_title=&for_me=Y&page=1&limit=20

    Public; for_me=Y narrows to the caller's recipes and then needs a token.
    """
    page, limit, offset = page_params(request.args)
    title = (request.args.get("recipe_title") or "").strip() or None
    for_me = (request.args.get("for_me") or "").upper() == "Y"

    user_id = None
    if for_me:
        # a bad token raises through the jwt loaders (401)
        if verify_jwt_in_request(optional=True) is None:
            raise AuthenticationError("login required to list your recipes", {"reason": "missing"})
        user_id = current_user().id

    total_count, rows = list_recipes(page, limit, offset, title=title, user_id=user_id)

    return jsonify(
        {
            "success": True,
            **page_meta(total_count, page, limit, len(rows)),
            "data": [r.to_summary_dict() for r in rows],
        }
    ), 200


@recipes_bp.route("/<int:recipe_id>", methods=["GET"])
def recipe_detail(recipe_id):
    recipe = get_recipe(recipe_id)
    return jsonify({"success": True, "data": recipe_view(recipe, raw_seconds=True)}), 200
