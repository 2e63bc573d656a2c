# backend/fitkeeper/routes/facility_routes.py
from flask import Blueprint, jsonify, request

from ..errors import ValidationError
from ..services.directory import DEFAULT_RADIUS_KM, nearby_facilities, search_facilities
from ..utils import page_meta, page_params, safe_float_or_none

facilities_bp = Blueprint("sports_facilities", __name__)


@facilities_bp.route("", methods=["GET"])
def list_facilities():
    """
    GET /api/sports-facilities?keyword=&category=&lat=&lng=&page=&limit=

    With both lat and lng every row carries a `distance` (km) and rows come
    nearest first.
    """
    page, limit, offset = page_params(request.args)
    keyword = (request.args.get("keyword") or "").strip() or None
    category = (request.args.get("category") or "").strip() or None
    lat = safe_float_or_none(request.args.get("lat"))
    lng = safe_float_or_none(request.args.get("lng"))

    total_count, rows = search_facilities(keyword, category, limit, offset, lat=lat, lng=lng)
    return jsonify(
        {
            "success": True,
            **page_meta(total_count, page, limit, len(rows)),
            "data": rows,
        }
    ), 200


@facilities_bp.route("/nearby", methods=["GET"])
def list_nearby_facilities():
    lat = safe_float_or_none(request.args.get("lat"))
    lng = safe_float_or_none(request.args.get("lng"))
    if lat is None or lng is None:
        raise ValidationError("lat and lng are required")

    radius = safe_float_or_none(request.args.get("radius"))
    if radius is None or radius <= 0:
        radius = DEFAULT_RADIUS_KM
    facility_type = (request.args.get("facilityType") or "").strip() or None
    page, limit, offset = page_params(request.args)

    total_count, rows = nearby_facilities(lat, lng, radius, limit, offset, facility_type)
    return jsonify(
        {
            "success": True,
            **page_meta(total_count, page, limit, len(rows)),
            "data": rows,
            "meta": {"centerLat": lat, "centerLng": lng, "radius": radius},
        }
    ), 200
