# backend/fitkeeper/routes/club_routes.py
from flask import Blueprint, jsonify, request

from ..services.directory import club_stats, search_clubs
from ..utils import page_meta, page_params

clubs_bp = Blueprint("clubs", __name__)


def _filters():
    keyword = (request.args.get("keyword") or "").strip() or None
    category = (request.args.get("category") or "").strip() or None
    return keyword, category


@clubs_bp.route("", methods=["GET"])
def list_clubs():
    """GET /api/clubs?keyword=&category=&page=&limit="""
    page, limit, offset = page_params(request.args)
    keyword, category = _filters()

    total_count, rows = search_clubs(keyword, category, limit, offset)
    return jsonify(
        {
            "success": True,
            **page_meta(total_count, page, limit, len(rows)),
            "data": [c.to_dict() for c in rows],
        }
    ), 200


@clubs_bp.route("/stats", methods=["GET"])
def get_club_stats():
    keyword, category = _filters()
    return jsonify({"success": True, "data": club_stats(keyword, category)}), 200
