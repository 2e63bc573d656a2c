# backend/fitkeeper/services/catalog.py
"""
Measurement code catalog and the age-group schema it is validated against.

Codes are strings because clients send them as measure_key values. Every
known code is tagged numeric or categorical; codes outside the catalog are
accepted as opaque categorical values.
"""
from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

from ..utils import safe_float_or_none

NUMERIC = "numeric"
CATEGORICAL = "categorical"

# reserved demographic codes
AGE_CODE = "53"
GENDER_CODE = "54"
MONTHS_CODE = "55"

HEIGHT_CODE = "1"
WEIGHT_CODE = "2"

DEFAULT_AGE = 30
DEFAULT_GENDER = "M"


@dataclass(frozen=True)
class CatalogItem:
    code: str
    label: str
    kind: str = NUMERIC


CATALOG: Dict[str, CatalogItem] = {
    item.code: item
    for item in (
        CatalogItem("1", "Height (cm)"),
        CatalogItem("2", "Weight (kg)"),
        CatalogItem("3", "Body fat (%)"),
        CatalogItem("4", "Waist circumference (cm)"),
        CatalogItem("5", "BMI (kg/m2)"),
        CatalogItem("6", "Grip strength, left (kg)"),
        CatalogItem("7", "Grip strength, right (kg)"),
        CatalogItem("8", "Relative grip strength (%)"),
        CatalogItem("9", "Curl-ups (reps)"),
        CatalogItem("10", "Cross sit-ups (reps/min)"),
        CatalogItem("11", "Sit and reach (cm)"),
        CatalogItem("12", "Total body flexibility (cm)"),
        CatalogItem("13", "20m shuttle run (laps)"),
        CatalogItem("14", "Treadmill VO2max (ml/kg/min)"),
        CatalogItem("15", "Step test (VO2max)"),
        CatalogItem("16", "2-minute step (reps)"),
        CatalogItem("17", "10m shuttle run (s)"),
        CatalogItem("18", "Standing long jump (cm)"),
        CatalogItem("19", "Illinois agility (s)"),
        CatalogItem("20", "Air time (s)"),
        CatalogItem("21", "Coordination (s)"),
        CatalogItem("22", "Chair stand (reps/30s)"),
        CatalogItem("23", "6-minute walk (m)"),
        CatalogItem("24", "Timed up and go (s)"),
        CatalogItem("25", "Figure-8 walk (s)"),
        CatalogItem(AGE_CODE, "Age"),
        CatalogItem(GENDER_CODE, "Gender", CATEGORICAL),
        CatalogItem(MONTHS_CODE, "Age in months"),
    )
}


@dataclass(frozen=True)
class AgeGroup:
    key: str
    label: str
    min_age: int
    max_age: Optional[int]
    item_codes: Tuple[str, ...]
    required: Tuple[str, ...] = (HEIGHT_CODE, WEIGHT_CODE)

    @property
    def items(self) -> Dict[str, str]:
        return {code: CATALOG[code].label for code in self.item_codes}

    def label_for(self, code: str) -> str:
        item = CATALOG.get(code)
        return item.label if item else code

    def to_dict(self):
        return {
            "ageGroup": self.key,
            "label": self.label,
            "required": list(self.required),
            "items": self.items,
        }


AGE_GROUPS: Dict[str, AgeGroup] = {
    group.key: group
    for group in (
        AgeGroup(
            "infant", "Infant (under 7)", 0, 6,
            ("1", "2", "3", "5", "55", "11", "17", "18", "21"),
        ),
        AgeGroup(
            "child", "Child (7-12)", 7, 12,
            ("1", "2", "3", "5", "6", "7", "9", "11", "13", "17", "18"),
        ),
        AgeGroup(
            "adolescent", "Adolescent (13-18)", 13, 18,
            ("1", "2", "3", "5", "6", "7", "9", "11", "13", "18", "19", "20"),
        ),
        AgeGroup(
            "adult", "Adult (19-64)", 19, 64,
            ("1", "2", "3", "4", "5", "6", "7", "8", "10", "11", "13", "14",
             "18", "19", "20"),
        ),
        AgeGroup(
            "senior", "Senior (65+)", 65, None,
            ("1", "2", "3", "4", "5", "6", "7", "12", "16", "22", "23", "24", "25"),
        ),
    )
}


def get_age_group(age: int) -> str:
    for group in AGE_GROUPS.values():
        if age >= group.min_age and (group.max_age is None or age <= group.max_age):
            return group.key
    # negative ages fall through to the youngest band
    return "infant"


@dataclass(frozen=True)
class MeasureValue:
    """A submitted measurement value tagged with its catalog kind."""

    code: str
    raw: str
    kind: str
    number: Optional[float] = None


def tag_value(code: str, raw: str) -> MeasureValue:
    item = CATALOG.get(code)
    kind = item.kind if item else CATEGORICAL
    number = safe_float_or_none(raw) if kind == NUMERIC else None
    return MeasureValue(code=code, raw=raw, kind=kind, number=number)


def normalize_gender(value: str) -> str:
    if value in ("male", "M"):
        return "M"
    if value in ("female", "F"):
        return "F"
    return value


def missing_required(group: AgeGroup, codes) -> List[str]:
    """Labels of the group's required codes absent from ``codes``."""
    return [group.label_for(code) for code in group.required if code not in codes]


def feature_vector(group: AgeGroup, values: Dict[str, MeasureValue]) -> List[Optional[float]]:
    """Numeric values in the group's catalog order; missing or categorical -> None."""
    vector = []
    for code in group.item_codes:
        value = values.get(code)
        vector.append(value.number if value is not None else None)
    return vector
