import pytest

from fitkeeper.services.durations import format_seconds, parse_video_duration
from fitkeeper.utils import page_meta, page_params, round_half_up


@pytest.mark.parametrize(
    "value, seconds",
    [
        ("27:30:00", 1650),
        ("1:30:15", 5415),
        ("5:30:15", 19815),
        ("75:00:10", 270010),
        ("1:27", 87),
        ("45", 45),
        ("", 0),
        (None, 0),
        ("ab:10", 10),
    ],
)
def test_parse_video_duration(value, seconds):
    assert parse_video_duration(value) == seconds


def test_format_seconds():
    assert format_seconds(1650) == "27:30"
    assert format_seconds(65) == "1:05"
    assert format_seconds(0) == "0:00"
    assert format_seconds(None) == "0:00"


def test_round_half_up():
    assert round_half_up(2.5) == 3
    assert round_half_up(33.75) == 34
    assert round_half_up(0.49) == 0


def test_page_params_defaults_and_clamp():
    assert page_params({}) == (1, 20, 0)
    assert page_params({"page": "3", "limit": "10"}) == (3, 10, 20)
    assert page_params({"page": "0", "limit": "500"}) == (1, 100, 0)
    assert page_params({"page": "x", "limit": "-4"}) == (1, 20, 0)


def test_page_meta():
    meta = page_meta(total_count=45, page=2, limit=20, count=20)
    assert meta == {
        "count": 20,
        "totalCount": 45,
        "page": 2,
        "totalPages": 3,
        "hasNextPage": True,
    }
    assert page_meta(0, 1, 20, 0)["hasNextPage"] is False
