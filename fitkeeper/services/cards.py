# backend/fitkeeper/services/cards.py
from typing import Dict, Iterable, List, Optional

from ..models.recipe import Card, dedupe_ids
from .durations import format_seconds, parse_video_duration


def card_id_for_name(name) -> Optional[int]:
    """Exact exercise_name match; the lowest id wins."""
    if not isinstance(name, str) or not name:
        return None
    card = Card.query.filter_by(exercise_name=name).order_by(Card.id.asc()).first()
    return card.id if card else None


def resolve_card_ids(names: Iterable) -> List[int]:
    """Map exercise names to card ids, dropping unknown names and repeats."""
    ids = []
    for name in names:
        card_id = card_id_for_name(name)
        if card_id is not None:
            ids.append(card_id)
    return dedupe_ids(ids)


def cards_by_ids(ids: List[int]) -> List[Card]:
    """Cards in the order of ``ids`` (ids without a card are skipped)."""
    if not ids:
        return []
    by_id: Dict[int, Card] = {c.id: c for c in Card.query.filter(Card.id.in_(ids)).all()}
    return [by_id[i] for i in ids if i in by_id]


def total_seconds(cards: Iterable[Card]) -> int:
    return sum(parse_video_duration(c.video_duration) for c in cards)


def card_to_dict(card: Card, raw_seconds: bool = False):
    seconds = parse_video_duration(card.video_duration)
    data = {
        "id": card.id,
        "exercise_name": card.exercise_name or "",
        "description": card.description or "",
        "video_url": card.video_url or "",
        "image_url": card.image_url or "",
        "fitness_category": card.fitness_category or "",
        "equipment": card.equipment or "",
        "body_part": card.body_part or "",
        "target_audience": card.target_audience or "",
    }
    if raw_seconds:
        data["video_duration_seconds"] = seconds
    else:
        data["video_duration"] = format_seconds(seconds)
    return data
