import math
import uuid
from datetime import datetime, timezone
from numbers import Real
from typing import Dict, Any, List, Optional

from burnout.models import BATScores

# -------------------------------------------------------
# 1. ITEM SLICES (0-indexed, end exclusive)
# -------------------------------------------------------
TOTAL_ITEMS = 33
MIN_RESPONSE = 1
MAX_RESPONSE = 5

SCORE_SLICES = {
    # Core BAT-23
    "exhaustion_score": (0, 8),
    "mental_distance_score": (8, 13),
    "cognitive_impairment_score": (13, 18),
    "emotional_impairment_score": (18, 23),
    "total_bat_score": (0, 23),
    # Secondary symptoms
    "psychological_complaints_score": (23, 28),
    "psychosomatic_complaints_score": (28, 33),
    "combined_secondary_score": (23, 33),
}

# -------------------------------------------------------
# 2. CUTOFF TABLE (Flemish BAT norms, closed intervals)
# -------------------------------------------------------
RISK_CUTOFFS = {
    "total": [("green", 1.00, 2.58), ("orange", 2.59, 3.01), ("red", 3.02, 5.00)],
    "exhaustion": [("green", 1.00, 3.05), ("orange", 3.06, 3.30), ("red", 3.31, 5.00)],
    "mental_distance": [("green", 1.00, 2.49), ("orange", 2.50, 3.09), ("red", 3.10, 5.00)],
    "cognitive": [("green", 1.00, 2.69), ("orange", 2.70, 3.09), ("red", 3.10, 5.00)],
    "emotional": [("green", 1.00, 2.09), ("orange", 2.10, 2.89), ("red", 2.90, 5.00)],
    "secondary": [("green", 1.00, 2.84), ("orange", 2.85, 3.34), ("red", 3.35, 5.00)],
}

# label field -> (cutoff dimension, score field)
RISK_FIELDS = {
    "risk_level": ("total", "total_bat_score"),
    "exhaustion_risk": ("exhaustion", "exhaustion_score"),
    "mental_distance_risk": ("mental_distance", "mental_distance_score"),
    "cognitive_risk": ("cognitive", "cognitive_impairment_score"),
    "emotional_risk": ("emotional", "emotional_impairment_score"),
    "secondary_risk": ("secondary", "combined_secondary_score"),
}

INVALID_LENGTH_MESSAGE = f"Invalid responses. Must provide {TOTAL_ITEMS} answers."
INVALID_TYPE_MESSAGE = f"All responses must be whole numbers between {MIN_RESPONSE} and {MAX_RESPONSE}."
INVALID_RANGE_MESSAGE = f"All responses must be between {MIN_RESPONSE} and {MAX_RESPONSE}."


class ResponseValidationError(ValueError):
    """Raised when a submitted response vector cannot be scored."""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


# -------------------------------------------------------
# 3. VALIDATION
# -------------------------------------------------------
def validate_responses(raw_responses: Any) -> List[int]:
    """
    Check a submitted response vector before scoring:
    - exactly 33 answers
    - every answer a whole number
    - every answer within 1..5

    Returns the answers as plain ints (3.0 becomes 3).
    """
    if not isinstance(raw_responses, (list, tuple)) or len(raw_responses) != TOTAL_ITEMS:
        raise ResponseValidationError(INVALID_LENGTH_MESSAGE)

    responses = []
    for value in raw_responses:
        if isinstance(value, bool) or not isinstance(value, Real):
            raise ResponseValidationError(INVALID_TYPE_MESSAGE)
        if not math.isfinite(value) or value != int(value):
            raise ResponseValidationError(INVALID_TYPE_MESSAGE)
        responses.append(int(value))

    if not all(MIN_RESPONSE <= r <= MAX_RESPONSE for r in responses):
        raise ResponseValidationError(INVALID_RANGE_MESSAGE)

    return responses


# -------------------------------------------------------
# 4. SCORING
# -------------------------------------------------------
def classify_risk(dimension: str, score: float) -> str:
    for label, lower, upper in RISK_CUTOFFS[dimension]:
        if lower <= score <= upper:
            return label
    # Unreachable for valid input: scores always sit inside 1.00-5.00
    return "green"


def _slice_mean(responses: List[int], start: int, end: int) -> float:
    items = responses[start:end]
    return sum(items) / len(items)


def calculate_scores(responses: List[int]) -> BATScores:
    """
    Score a validated 33-item response vector.
    Every score is the plain mean of its slice; no rounding is applied.
    """
    scores: Dict[str, Any] = {
        field: _slice_mean(responses, start, end)
        for field, (start, end) in SCORE_SLICES.items()
    }
    for field, (dimension, score_field) in RISK_FIELDS.items():
        scores[field] = classify_risk(dimension, scores[score_field])

    return BATScores(**scores)


# -------------------------------------------------------
# 5. RECORD ASSEMBLY
# -------------------------------------------------------
def build_assessment_record(
    user_id: str,
    responses: List[int],
    scores: BATScores,
    timestamp: Optional[datetime] = None,
) -> Dict[str, Any]:
    """Merge identity, raw answers and computed scores into one stored document."""
    return {
        "id": str(uuid.uuid4()),
        "user_id": user_id,
        "responses": list(responses),
        **scores.model_dump(),
        "timestamp": timestamp or datetime.now(timezone.utc),
    }
