from datetime import datetime
from typing import Any, Dict, List

from reportlab.lib import colors
from reportlab.lib.pagesizes import letter
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import (
    Paragraph,
    SimpleDocTemplate,
    Spacer,
    Table,
    TableStyle,
)


RISK_COLORS = {
    "green": "#10B981",
    "orange": "#F59E0B",
    "red": "#DC2626",
}

RISK_TEXT = {
    "green": "No risk",
    "orange": "At risk",
    "red": "Very high risk",
}

# (label, score field, risk field)
CORE_DIMENSIONS = [
    ("Exhaustion", "exhaustion_score", "exhaustion_risk"),
    ("Mental Distance", "mental_distance_score", "mental_distance_risk"),
    ("Cognitive Impairment", "cognitive_impairment_score", "cognitive_risk"),
    ("Emotional Impairment", "emotional_impairment_score", "emotional_risk"),
]

SECONDARY_DIMENSIONS = [
    ("Psychological Complaints", "psychological_complaints_score"),
    ("Psychosomatic Complaints", "psychosomatic_complaints_score"),
]


def _fmt_score(value: Any) -> str:
    return f"{float(value or 0):.2f}"


def _fmt_time(value: Any) -> str:
    if isinstance(value, datetime):
        return value.strftime("%Y-%m-%d %H:%M UTC")
    return str(value or "")


def _header_bar(text: str, color_hex: str = "#1D4ED8") -> Table:
    t = Table([[text]], colWidths=[520], rowHeights=[20])
    t.setStyle(
        TableStyle(
            [
                ("BACKGROUND", (0, 0), (-1, -1), colors.HexColor(color_hex)),
                ("TEXTCOLOR", (0, 0), (-1, -1), colors.white),
                ("FONTNAME", (0, 0), (-1, -1), "Helvetica-Bold"),
                ("FONTSIZE", (0, 0), (-1, -1), 11),
                ("LEFTPADDING", (0, 0), (-1, -1), 8),
            ]
        )
    )
    return t


def _score_table(rows: List[List[str]], risk_labels: List[str]) -> Table:
    """rows[0] is the header; risk_labels lines up with rows[1:]"""
    t = Table(rows, colWidths=[220, 100, 200])
    style = [
        ("BACKGROUND", (0, 0), (-1, 0), colors.HexColor("#E2E8F0")),
        ("FONTNAME", (0, 0), (-1, 0), "Helvetica-Bold"),
        ("FONTSIZE", (0, 0), (-1, -1), 10),
        ("GRID", (0, 0), (-1, -1), 0.5, colors.HexColor("#CBD5E1")),
        ("ALIGN", (1, 1), (1, -1), "RIGHT"),
    ]
    for row_idx, label in enumerate(risk_labels, start=1):
        color_hex = RISK_COLORS.get(label)
        if color_hex:
            style.append(("BACKGROUND", (2, row_idx), (2, row_idx), colors.HexColor(color_hex)))
            style.append(("TEXTCOLOR", (2, row_idx), (2, row_idx), colors.white))
    t.setStyle(TableStyle(style))
    return t


def _risk_cell(label: str) -> str:
    return f"{label.upper()} - {RISK_TEXT.get(label, '')}" if label else "-"


def build_assessment_pdf_report(buffer, assessment: Dict[str, Any]) -> None:
    doc = SimpleDocTemplate(
        buffer,
        pagesize=letter,
        leftMargin=36,
        rightMargin=36,
        topMargin=36,
        bottomMargin=44,
        title="Burnout Assessment Report",
    )
    styles = getSampleStyleSheet()
    body = ParagraphStyle("body", parent=styles["BodyText"], fontSize=10, leading=14, textColor=colors.HexColor("#1E293B"))

    story: List[Any] = []

    story.append(_header_bar("Burnout Assessment Tool (BAT) Report", "#0F766E"))
    story.append(Spacer(1, 10))
    story.append(Paragraph(f"<b>Submitted:</b> {_fmt_time(assessment.get('timestamp'))}", body))
    story.append(Paragraph(f"<b>Assessment ID:</b> {assessment.get('id', '')}", body))
    story.append(Spacer(1, 12))

    risk_level = assessment.get("risk_level", "")
    story.append(_header_bar("Overall Result", "#1E40AF"))
    story.append(Spacer(1, 8))
    story.append(_score_table(
        [["Scale", "Score", "Risk"],
         ["Total BAT (core 23 items)", _fmt_score(assessment.get("total_bat_score")), _risk_cell(risk_level)]],
        [risk_level],
    ))
    story.append(Spacer(1, 12))

    story.append(_header_bar("Core Dimensions", "#1E40AF"))
    story.append(Spacer(1, 8))
    core_rows = [["Dimension", "Score", "Risk"]]
    core_labels = []
    for title, score_field, risk_field in CORE_DIMENSIONS:
        label = assessment.get(risk_field, "")
        core_rows.append([title, _fmt_score(assessment.get(score_field)), _risk_cell(label)])
        core_labels.append(label)
    story.append(_score_table(core_rows, core_labels))
    story.append(Spacer(1, 12))

    story.append(_header_bar("Secondary Symptoms", "#7C3AED"))
    story.append(Spacer(1, 8))
    secondary_rows = [["Scale", "Score", "Risk"]]
    for title, score_field in SECONDARY_DIMENSIONS:
        secondary_rows.append([title, _fmt_score(assessment.get(score_field)), ""])
    secondary_label = assessment.get("secondary_risk", "")
    secondary_rows.append([
        "Combined Secondary",
        _fmt_score(assessment.get("combined_secondary_score")),
        _risk_cell(secondary_label),
    ])
    story.append(_score_table(secondary_rows, ["", "", secondary_label]))
    story.append(Spacer(1, 12))

    story.append(Paragraph(
        "Scores range from 1 (never) to 5 (always). Risk bands follow the Flemish BAT cutoffs.",
        body,
    ))

    doc.build(story)
