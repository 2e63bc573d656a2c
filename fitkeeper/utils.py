# backend/fitkeeper/utils.py
import math
from typing import Any, Dict, Optional, Tuple

DEFAULT_PAGE_SIZE = 20
MAX_PAGE_SIZE = 100


def safe_int(v: Any, default: int = 0) -> int:
    try:
        return int(v)
    except (TypeError, ValueError):
        return default


def safe_int_or_none(v: Any) -> Optional[int]:
    if v is None:
        return None
    try:
        return int(v)
    except (TypeError, ValueError):
        return None


def safe_float_or_none(v: Any) -> Optional[float]:
    if v is None or v == "":
        return None
    try:
        value = float(v)
    except (TypeError, ValueError):
        return None
    return value if math.isfinite(value) else None


def round_half_up(value: float) -> int:
    # round() is banker's rounding; percentages and minutes round .5 up
    return int(math.floor(value + 0.5))


def page_params(args, default_limit: int = DEFAULT_PAGE_SIZE) -> Tuple[int, int, int]:
    """Read ?page=&limit= -> (page, limit, offset)."""
    page = safe_int(args.get("page"), 1)
    if page < 1:
        page = 1
    limit = safe_int(args.get("limit"), default_limit)
    if limit < 1:
        limit = default_limit
    limit = min(limit, MAX_PAGE_SIZE)
    return page, limit, (page - 1) * limit


def page_meta(total_count: int, page: int, limit: int, count: int) -> Dict[str, Any]:
    total_pages = math.ceil(total_count / limit) if limit else 0
    return {
        "count": count,
        "totalCount": total_count,
        "page": page,
        "totalPages": total_pages,
        "hasNextPage": page < total_pages,
    }
