"""
Data models for the burnout assessment service
Mirrors the documents stored in the bat_responses collection
"""
from datetime import datetime, timezone
from typing import Optional, List, Dict, Literal
from pydantic import BaseModel, ConfigDict, Field
import uuid

RiskLabel = Literal["green", "orange", "red"]


# ==================== SCORE MODELS ====================
class BATScores(BaseModel):
    """Eight slice means plus six risk labels for one submission"""
    exhaustion_score: float
    mental_distance_score: float
    cognitive_impairment_score: float
    emotional_impairment_score: float
    total_bat_score: float
    psychological_complaints_score: float
    psychosomatic_complaints_score: float
    combined_secondary_score: float

    risk_level: RiskLabel
    exhaustion_risk: RiskLabel
    mental_distance_risk: RiskLabel
    cognitive_risk: RiskLabel
    emotional_risk: RiskLabel
    secondary_risk: RiskLabel


# ==================== ASSESSMENT MODELS ====================
class AssessmentInDB(BATScores):
    """Assessment record as stored in database (never updated after insert)"""
    id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    user_id: str
    responses: List[int] = Field(min_length=33, max_length=33)
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "9f1c2d4e-0b7a-4f51-9a52-4d0f3c1e7b21",
                "user_id": "user_123",
                "responses": [3] * 33,
                "exhaustion_score": 3.0,
                "mental_distance_score": 3.0,
                "cognitive_impairment_score": 3.0,
                "emotional_impairment_score": 3.0,
                "total_bat_score": 3.0,
                "psychological_complaints_score": 3.0,
                "psychosomatic_complaints_score": 3.0,
                "combined_secondary_score": 3.0,
                "risk_level": "orange",
                "exhaustion_risk": "green",
                "mental_distance_risk": "orange",
                "cognitive_risk": "orange",
                "emotional_risk": "red",
                "secondary_risk": "orange",
                "timestamp": "2024-01-15T10:30:00Z",
            }
        }
    )


class AssessmentResponse(AssessmentInDB):
    """Assessment response model"""
    pass


class SubmissionResponse(BaseModel):
    message: str
    assessment: AssessmentResponse


# ==================== TREND MODELS ====================
class TrendPoint(BaseModel):
    total_bat_score: float
    timestamp: datetime
    risk_level: RiskLabel


class TrendSummary(BaseModel):
    """Aggregated view over a user's trend points"""
    total_assessments: int = 0
    first_assessment: Optional[datetime] = None
    last_assessment: Optional[datetime] = None
    latest_score: Optional[float] = None
    latest_risk_level: Optional[RiskLabel] = None
    mean_score: float = 0.0
    min_score: float = 0.0
    max_score: float = 0.0
    std_score: float = 0.0
    change: float = 0.0
    direction: Literal["improving", "worsening", "stable"] = "stable"
    risk_distribution: Dict[str, int] = Field(
        default_factory=lambda: {"green": 0, "orange": 0, "red": 0}
    )


# ==================== RESPONSE MODELS ====================
class HealthCheck(BaseModel):
    """Health check response model"""
    status: str
    database: str
    collections: Dict[str, int]
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


__all__ = [
    "RiskLabel",
    "BATScores",
    "AssessmentInDB", "AssessmentResponse", "SubmissionResponse",
    "TrendPoint", "TrendSummary",
    "HealthCheck",
]
