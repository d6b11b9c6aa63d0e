"""
Daily Log Data Model
====================

One DailyLog per calendar date. The dataclass field names are the wire
contract for JSON export/import, so renaming a field breaks old backups.

Normalization (run on every construction):
  - every catalog id present in each checklist, missing ids -> False
  - checklist values and flags coerced to bool
  - measurements are finite floats or None, never NaN
"""

from __future__ import annotations

import math
import re
import uuid
from dataclasses import asdict, dataclass, field
from datetime import date as date_cls
from typing import Any, Dict, Mapping, Optional, Sequence

from healthlog.records.catalog import EXERCISE_IDS, SUPPLEMENT_IDS
from healthlog.utils.exceptions import ValidationError

MEASUREMENT_FIELDS = (
    "fasting_blood_sugar",
    "pre_dinner_sugar",
    "post_dinner_sugar",
    "waist_size",
    "weight",
    "fat_percentage",
    "blood_pressure_systolic",
    "blood_pressure_diastolic",
    "grip_strength_left",
    "grip_strength_right",
)

FLAG_FIELDS = ("fasted", "water_fasted")
CHECKLIST_FIELDS = ("supplements", "exercises")

_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")
_TRUE_STRINGS = {"1", "true", "yes", "y", "on"}


def new_log_id() -> str:
    return str(uuid.uuid4())


def is_valid_date(value: Any) -> bool:
    if not isinstance(value, str) or not _DATE_RE.match(value):
        return False
    try:
        date_cls.fromisoformat(value)
    except ValueError:
        return False
    return True


def validate_date(value: Any, field_name: str = "date") -> str:
    """Return ``value`` if it is a real YYYY-MM-DD date, else raise ValidationError."""
    if not value:
        raise ValidationError(f"{field_name} is required")
    if not is_valid_date(value):
        raise ValidationError(f"{field_name} must be a YYYY-MM-DD calendar date", detail=repr(value))
    return value


def safe_num(value: Any) -> Optional[float]:
    """Coerce a raw measurement to a finite float, or None when absent/garbage."""
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return None
    try:
        num = float(value)
    except (TypeError, ValueError):
        return None
    return num if math.isfinite(num) else None


def as_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0 and not (isinstance(value, float) and math.isnan(value))
    if isinstance(value, str):
        return value.strip().lower() in _TRUE_STRINGS
    return False


def normalize_checklist(raw: Any, catalog_ids: Sequence[str]) -> Dict[str, bool]:
    """Every catalog id gets a bool; ids outside the catalog are kept as-is."""
    out: Dict[str, bool] = {cid: False for cid in catalog_ids}
    if isinstance(raw, Mapping):
        for key, value in raw.items():
            out[str(key)] = as_bool(value)
    return out


@dataclass
class DailyLog:
    """One calendar day of checklists, flags and measurements."""
    id: str = field(default_factory=new_log_id)
    date: str = ""                                   # YYYY-MM-DD, primary key
    supplements: Dict[str, bool] = field(default_factory=dict)
    custom_vitamin_name: str = ""
    custom_vitamin_taken: bool = False
    exercises: Dict[str, bool] = field(default_factory=dict)
    fasted: bool = False
    water_fasted: bool = False
    fasting_blood_sugar: Optional[float] = None     # mmol/L
    pre_dinner_sugar: Optional[float] = None        # mmol/L
    post_dinner_sugar: Optional[float] = None       # mmol/L
    waist_size: Optional[float] = None              # cm
    weight: Optional[float] = None                  # kg
    fat_percentage: Optional[float] = None          # %
    blood_pressure_systolic: Optional[float] = None   # mmHg
    blood_pressure_diastolic: Optional[float] = None  # mmHg
    grip_strength_left: Optional[float] = None      # kg
    grip_strength_right: Optional[float] = None     # kg

    def __post_init__(self):
        self.normalize()

    def normalize(self) -> "DailyLog":
        if not self.id:
            self.id = new_log_id()
        self.id = str(self.id)
        self.supplements = normalize_checklist(self.supplements, SUPPLEMENT_IDS)
        self.exercises = normalize_checklist(self.exercises, EXERCISE_IDS)
        vitamin = self.custom_vitamin_name
        self.custom_vitamin_name = "" if vitamin is None else str(vitamin).strip()
        self.custom_vitamin_taken = as_bool(self.custom_vitamin_taken)
        for flag in FLAG_FIELDS:
            setattr(self, flag, as_bool(getattr(self, flag)))
        for name in MEASUREMENT_FIELDS:
            setattr(self, name, safe_num(getattr(self, name)))
        return self

    @classmethod
    def empty(cls, log_date: str) -> "DailyLog":
        """Fresh skeleton for a date with no stored entry."""
        return cls(date=log_date)

    @property
    def has_custom_item(self) -> bool:
        return bool(self.custom_vitamin_name)

    def measurements(self) -> Dict[str, Optional[float]]:
        return {name: getattr(self, name) for name in MEASUREMENT_FIELDS}

    def overlay(self, raw: Mapping[str, Any]) -> "DailyLog":
        """
        Return a new log with ``raw`` laid over this one, field by field.

        Checklists merge key by key so ids absent from ``raw`` survive.
        A missing or empty ``id`` in ``raw`` keeps the current id.
        """
        merged = self.to_dict()
        for key, value in raw.items():
            if key not in self.__dataclass_fields__:
                continue
            if key in CHECKLIST_FIELDS:
                if isinstance(value, Mapping):
                    merged[key] = {**merged[key], **value}
            elif key == "id":
                if value:
                    merged["id"] = value
            else:
                merged[key] = value
        return DailyLog.from_dict(merged)

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, d: Mapping[str, Any]) -> "DailyLog":
        return cls(**{k: v for k, v in d.items() if k in cls.__dataclass_fields__})
