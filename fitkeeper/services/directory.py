# backend/fitkeeper/services/directory.py
from typing import Any, Dict, List, Optional, Tuple

from sqlalchemy import func, or_

from .. import db
from ..models.directory import ClubInfo, SportsFacility

EARTH_RADIUS_KM = 6371

DEFAULT_RADIUS_KM = 5.0


# -----------------------------
# Clubs
# -----------------------------
def _club_query(keyword: Optional[str], category: Optional[str]):
    q = ClubInfo.query
    if keyword:
        pattern = f"%{keyword}%"
        q = q.filter(
            or_(
                ClubInfo.club_name.like(pattern),
                ClubInfo.sido_name.like(pattern),
                ClubInfo.sigungu_name.like(pattern),
            )
        )
    if category:
        q = q.filter(ClubInfo.item_name.like(f"%{category}%"))
    return q


def search_clubs(keyword, category, limit: int, offset: int) -> Tuple[int, List[ClubInfo]]:
    q = _club_query(keyword, category)
    total = q.count()
    rows = q.order_by(ClubInfo.id.asc()).limit(limit).offset(offset).all()
    return total, rows


def club_stats(keyword=None, category=None) -> Dict[str, Any]:
    """Club counts per sport item and per province, largest first."""
    base = _club_query(keyword, category)

    def grouped(column, key: str):
        count = func.count(ClubInfo.id)
        rows = (
            base.with_entities(column, count.label("count"))
            .group_by(column)
            .order_by(count.desc(), column.asc())
            .all()
        )
        return [{key: value, "count": int(n)} for value, n in rows]

    return {
        "totalCount": base.count(),
        "byCategory": grouped(ClubInfo.item_name, "itemName"),
        "byRegion": grouped(ClubInfo.sido_name, "sidoName"),
    }


# -----------------------------
# Sports facilities
# -----------------------------
def haversine_km(lat: float, lng: float):
    """SQL expression: great-circle distance (km, 2 dp) from (lat, lng) to each facility."""
    return func.round(
        EARTH_RADIUS_KM
        * func.acos(
            func.cos(func.radians(lat))
            * func.cos(func.radians(SportsFacility.latitude))
            * func.cos(func.radians(SportsFacility.longitude) - func.radians(lng))
            + func.sin(func.radians(lat)) * func.sin(func.radians(SportsFacility.latitude))
        ),
        2,
    )


def _active_facilities():
    return SportsFacility.query.filter(
        or_(SportsFacility.deleted.is_(None), SportsFacility.deleted == "N")
    )


def _facility_row(facility: SportsFacility, distance=None) -> Dict[str, Any]:
    data = facility.to_dict()
    if distance is not None:
        data["distance"] = float(distance)
    return data


def search_facilities(
    keyword: Optional[str],
    category: Optional[str],
    limit: int,
    offset: int,
    lat: Optional[float] = None,
    lng: Optional[float] = None,
) -> Tuple[int, List[Dict[str, Any]]]:
    q = _active_facilities()
    if keyword:
        pattern = f"%{keyword}%"
        q = q.filter(
            or_(
                SportsFacility.facility_name.like(pattern),
                SportsFacility.sido_name.like(pattern),
                SportsFacility.sigungu_name.like(pattern),
                SportsFacility.address_main.like(pattern),
            )
        )
    if category:
        q = q.filter(SportsFacility.facility_type.like(f"%{category}%"))

    total = q.count()

    if lat is None or lng is None:
        rows = q.order_by(SportsFacility.id.asc()).limit(limit).offset(offset).all()
        return total, [_facility_row(f) for f in rows]

    distance = haversine_km(lat, lng).label("distance")
    rows = (
        q.add_columns(distance)
        .order_by(distance.asc(), SportsFacility.id.asc())
        .limit(limit)
        .offset(offset)
        .all()
    )
    return total, [_facility_row(f, d) for f, d in rows]


def nearby_facilities(
    lat: float,
    lng: float,
    radius: float,
    limit: int,
    offset: int,
    facility_type: Optional[str] = None,
) -> Tuple[int, List[Dict[str, Any]]]:
    distance = haversine_km(lat, lng)
    q = _active_facilities().filter(
        SportsFacility.latitude.isnot(None),
        SportsFacility.longitude.isnot(None),
    )
    if facility_type:
        q = q.filter(SportsFacility.facility_type.like(f"%{facility_type}%"))
    q = q.filter(distance <= radius)

    total = q.count()
    rows = (
        q.add_columns(distance.label("distance"))
        .order_by(distance.asc(), SportsFacility.id.asc())
        .limit(limit)
        .offset(offset)
        .all()
    )
    return total, [_facility_row(f, d) for f, d in rows]
