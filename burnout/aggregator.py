"""
Trend aggregation for a user's BAT history
"""
from typing import Dict, Any, List
import statistics

from burnout.models import TrendSummary


def summarize_trend(points: List[Dict[str, Any]]) -> TrendSummary:
    """
    Summarize oldest-first trend points (total_bat_score, timestamp, risk_level).
    A higher BAT score means more burnout, so a falling score is an improvement.
    """
    if not points:
        return TrendSummary()

    scores = [float(p["total_bat_score"]) for p in points]
    first, latest = points[0], points[-1]

    risk_distribution = {"green": 0, "orange": 0, "red": 0}
    for point in points:
        label = point.get("risk_level")
        if label in risk_distribution:
            risk_distribution[label] += 1

    change = scores[-1] - scores[0] if len(scores) > 1 else 0.0
    if change < 0:
        direction = "improving"
    elif change > 0:
        direction = "worsening"
    else:
        direction = "stable"

    return TrendSummary(
        total_assessments=len(points),
        first_assessment=first.get("timestamp"),
        last_assessment=latest.get("timestamp"),
        latest_score=round(scores[-1], 2),
        latest_risk_level=latest.get("risk_level"),
        mean_score=round(statistics.mean(scores), 2),
        min_score=round(min(scores), 2),
        max_score=round(max(scores), 2),
        std_score=round(statistics.stdev(scores), 2) if len(scores) > 1 else 0.0,
        change=round(change, 2),
        direction=direction,
        risk_distribution=risk_distribution,
    )
