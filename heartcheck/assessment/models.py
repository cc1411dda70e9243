# -*- coding: utf-8 -*-
"""Assessment domain: Pydantic models.

Field names follow the JSON shape used by the website and the
``heart_health_assessments`` table: ``height`` is centimetres, ``weight`` is
kilograms, ``systolic``/``diastolic`` are mmHg.
"""

from __future__ import annotations

from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Gender(str, Enum):
    male = "male"
    female = "female"
    other = "other"


class ImportAction(str, Enum):
    parse = "parse"
    calculate = "calculate"

    @classmethod
    def coerce(cls, value: Any) -> "ImportAction":
        """Anything other than "calculate" means parse."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str) and value.strip().lower() == cls.calculate.value:
            return cls.calculate
        return cls.parse


class PatientAssessment(BaseModel):
    model_config = ConfigDict(extra="allow", use_enum_values=True, validate_default=True)

    name: str = ""
    mobile: str = ""
    email: str = ""

    age: int = Field(30, ge=1)
    gender: Gender = Gender.male

    height: float = Field(165.0, gt=0, description="cm")
    weight: float = Field(65.0, gt=0, description="kg")
    bmi: Optional[float] = Field(None, description="Always recomputed from height/weight")

    systolic: int = Field(120, gt=0)
    diastolic: int = Field(80, gt=0)
    pulse: int = Field(72, gt=0)

    ldl: Optional[float] = None
    hdl: Optional[float] = None
    fasting_sugar: Optional[float] = None
    post_meal_sugar: Optional[float] = None

    diet: str = ""
    exercise: str = ""
    sleep_hours: float = Field(7.0, ge=0)
    water_intake: Optional[float] = None
    smoking: str = Field("no", description="no|occasionally|regularly|yes")
    diabetes: str = Field("no", description="no|yes")
    tobacco_use: bool = False
    knows_lipids: bool = False
    high_cholesterol: bool = False

    chest_pain: bool = False
    shortness_of_breath: bool = False
    dizziness: bool = False
    fatigue: bool = False
    swelling: bool = False
    palpitations: bool = False
    family_history: bool = False

    user_notes: str = ""
    profession: str = ""

    risk_score: Optional[float] = Field(None, ge=0, le=99.9, description="percent")
    heart_age: Optional[int] = Field(None, ge=18, le=100)


class DiscoveredFields(BaseModel):
    """Which canonical columns were found at least once across an import."""

    name: bool = False
    mobile: bool = False
    email: bool = False
    age: bool = False
    bp: bool = False
    pulse: bool = False
    sugar: bool = False
    bmi_input: bool = False


class ProcessReportRequest(BaseModel):
    url: Optional[str] = Field(None, description="Spreadsheet download URL")
    action: ImportAction = ImportAction.parse
    data: Optional[List[Dict[str, Any]]] = Field(None, description="Already-normalized records (calculate)")

    @field_validator("action", mode="before")
    @classmethod
    def _coerce_action(cls, value: Any) -> ImportAction:
        return ImportAction.coerce(value)


class ProcessReportResponse(BaseModel):
    data: List[PatientAssessment]
    discovery: Optional[DiscoveredFields] = None
    diagnostic: Optional[str] = None


class StoredAssessment(BaseModel):
    id: str
    assessment: PatientAssessment
    created_at: str
    updated_at: str


class ScoreResponse(BaseModel):
    id: str
    heart_age: int
    risk_score: float
