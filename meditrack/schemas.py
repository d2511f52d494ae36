from datetime import datetime
from typing import List, Literal, Optional

from pydantic import BaseModel, Field, field_validator


class SymptomItem(BaseModel):
    description: str
    location: Optional[str] = None  # body area, e.g. "head", "chest"
    characteristics: Optional[str] = None

    @field_validator("description")
    @classmethod
    def description_not_blank(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Symptom description must not be empty")
        return value


class SymptomCheckRequest(BaseModel):
    symptoms: List[SymptomItem]
    severity: int = Field(ge=1, le=5)  # 1-5 self-assessment
    duration: str  # UI label ("1-3 days") or bucket ("days")


class PossibleCondition(BaseModel):
    name: str
    probability: int = Field(ge=0, le=95)
    description: str


class UrgencyLevel(BaseModel):
    score: float = Field(ge=1.0, le=5.0)
    description: str
    category: str  # "emergency", "high", "moderate", "low"


class TriageResult(BaseModel):
    possible_conditions: List[PossibleCondition] = []
    urgency_level: UrgencyLevel
    general_advice: str
    suggested_actions: List[str] = []
    follow_up_recommendation: str
    disclaimer: str
    red_flags: List[str] = []
    severity_label: Optional[str] = None
    status: Literal["analyzed", "error"] = "analyzed"


class AnalysisResult(BaseModel):
    urgency_level: str
    possible_conditions: List[PossibleCondition] = []
    disclaimer: str


class RecommendationResult(BaseModel):
    general_advice: str
    suggested_actions: List[str] = []
    follow_up_recommendation: str
    disclaimer: str


class SymptomCheck(BaseModel):
    """A patient's submitted symptom check, before or after analysis"""
    id: Optional[int] = None
    patient_id: Optional[int] = None
    symptoms: List[SymptomItem]
    severity: int = Field(ge=1, le=5)
    duration: str
    status: Literal["pending", "analyzed", "error"] = "pending"
    analysis: Optional[AnalysisResult] = None
    recommendations: Optional[RecommendationResult] = None
    created_at: Optional[datetime] = None


class ConditionDetails(BaseModel):
    name: str
    description: str
    severity: int
    symptoms: List[str]
    red_flags: List[str]
    common_treatments: List[str]
    when_to_seek_help: str


class SeverityLevelInfo(BaseModel):
    level: int
    label: str
    description: str
