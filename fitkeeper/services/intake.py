# backend/fitkeeper/services/intake.py
from dataclasses import dataclass, field
from datetime import date
from typing import Any, Dict, List, Optional

from flask import current_app
from sqlalchemy import func

from .. import db
from ..errors import MissingRequiredFieldError, ValidationError
from ..models.measurement import Measurement
from ..models.user import User
from ..utils import safe_float_or_none
from .attendance import mark_day_quietly
from .catalog import (
    AGE_CODE,
    AGE_GROUPS,
    DEFAULT_AGE,
    DEFAULT_GENDER,
    GENDER_CODE,
    MONTHS_CODE,
    MeasureValue,
    get_age_group,
    missing_required,
    normalize_gender,
    tag_value,
)
from .composer import ComposedRecipe, RecipeComposer

# clients may name the demographic items instead of using their codes
KEY_ALIASES = {"age": AGE_CODE, "gender": GENDER_CODE, "months": MONTHS_CODE}


def _leading_int(value: str) -> Optional[int]:
    # non-numeric or non-finite -> None, so the caller applies its default
    number = safe_float_or_none(value)
    return int(number) if number is not None else None


@dataclass
class ParsedMeasurement:
    age: int
    gender: str
    months: Optional[int]
    age_group: str
    values: Dict[str, MeasureValue] = field(default_factory=dict)

    def echo(self) -> List[Dict[str, str]]:
        return [
            {"measure_key": code, "measure_value": v.raw} for code, v in self.values.items()
        ]


def parse_measurements(req_arr: Any) -> ParsedMeasurement:
    """
    Validate [{"measure_key": "1", "measure_value": "172.5"}, ...].

    Entries without a key or value are skipped. Age defaults to 30 and
    gender to "M" when absent; the age decides which items are required.
    """
    if not isinstance(req_arr, list) or not req_arr:
        raise ValidationError(
            "measurements are required: [{measure_key: string, measure_value: string}, ...]"
        )

    values: Dict[str, MeasureValue] = {}
    age = gender = months = None

    for item in req_arr:
        if not isinstance(item, dict):
            continue
        key = item.get("measure_key")
        raw = item.get("measure_value")
        if key in (None, "") or raw is None or raw == "":
            continue

        code = KEY_ALIASES.get(str(key), str(key))
        raw = str(raw)

        if code == AGE_CODE:
            age = _leading_int(raw)
        elif code == GENDER_CODE:
            gender = normalize_gender(raw)
            raw = gender
        elif code == MONTHS_CODE:
            months = _leading_int(raw)

        values[code] = tag_value(code, raw)

    if not age:
        age = DEFAULT_AGE
    if not gender:
        gender = DEFAULT_GENDER

    age_group = get_age_group(age)
    missing = missing_required(AGE_GROUPS[age_group], values)
    if missing:
        raise MissingRequiredFieldError(missing)

    return ParsedMeasurement(
        age=age, gender=gender, months=months, age_group=age_group, values=values
    )


def next_session_uuid(user_id: int, today: Optional[date] = None) -> str:
    """YYYYMMDD + the user's 4-digit session sequence for that day."""
    prefix = (today or date.today()).strftime("%Y%m%d")
    existing = (
        db.session.query(func.count(func.distinct(Measurement.measurement_uuid)))
        .filter(
            Measurement.user_id == user_id,
            Measurement.measurement_uuid.like(f"{prefix}%"),
        )
        .scalar()
    )
    return f"{prefix}{(existing or 0) + 1:04d}"


@dataclass
class IntakeResult:
    composed: ComposedRecipe
    measurement_id: int
    measurement_uuid: str
    parsed: ParsedMeasurement


def record_measurement(user: User, req_arr: Any, composer: RecipeComposer) -> IntakeResult:
    parsed = parse_measurements(req_arr)
    session_uuid = next_session_uuid(user.id)
    current_app.logger.info(
        f"[measurement] user_id={user.id} uuid={session_uuid} "
        f"age={parsed.age} gender={parsed.gender} group={parsed.age_group} "
        f"items={len(parsed.values)}"
    )

    try:
        rows = [
            Measurement(
                user_id=user.id,
                measurement_uuid=session_uuid,
                measurement_code=code,
                measurement_data=value.raw,
            )
            for code, value in parsed.values.items()
        ]
        db.session.add_all(rows)
        db.session.flush()
        first_id = rows[0].id

        composed = composer.compose(
            user,
            age_group=parsed.age_group,
            age=parsed.age,
            gender=parsed.gender,
            values=parsed.values,
            measurement_id=first_id,
            measurement_uuid=session_uuid,
        )
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        f"[measurement] recipe_id={composed.recipe.id} duration_min={composed.recipe.duration_min}"
    )

    mark_day_quietly(user.id, "measurement")

    return IntakeResult(
        composed=composed,
        measurement_id=first_id,
        measurement_uuid=session_uuid,
        parsed=parsed,
    )
