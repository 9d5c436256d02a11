import os
import io
import asyncio
from contextlib import asynccontextmanager
from typing import Dict, Any, List

from fastapi import FastAPI, HTTPException, Query, Depends, status
from fastapi.responses import StreamingResponse
from fastapi.middleware.cors import CORSMiddleware
from dotenv import load_dotenv

from burnout import db
from burnout.aggregator import summarize_trend
from burnout.auth import get_current_user_id
from burnout.models import AssessmentResponse, HealthCheck, SubmissionResponse, TrendPoint, TrendSummary
from burnout.processor import (
    ResponseValidationError,
    validate_responses,
    calculate_scores,
    build_assessment_record,
)
from burnout.reports.assessment_pdf import build_assessment_pdf_report
from burnout.repository import AssessmentRepo
from burnout.schemas import BATSubmission

load_dotenv()


@asynccontextmanager
async def lifespan(app: FastAPI):
    if db.MONGODB_URI:
        await asyncio.to_thread(db.init_database)
    else:
        print("⚠️ MONGODB_URI not set, skipping database initialization")
    yield
    db.close_clients()


app = FastAPI(
    title="Burnout Assessment Tool API",
    description="Scores BAT questionnaires and tracks each user's burnout risk over time",
    version="1.0.0",
    docs_url="/api/docs",
    redoc_url="/api/redoc",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in os.getenv("CORS_ORIGINS", "*").split(",") if o.strip()],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
    max_age=3600
)


def get_assessment_repo() -> AssessmentRepo:
    # Collection is resolved on first query, after the payload has been validated
    return AssessmentRepo(get_collection=db.get_async_bat_collection)


def _server_error(message: str, e: Exception) -> HTTPException:
    print(f"❌ {message}: {e}")
    return HTTPException(status_code=500, detail={"message": message, "error": str(e)})


# ==================== HEALTH ====================
@app.get("/health", response_model=HealthCheck)
async def health_check():
    """System health check"""
    health_data = await asyncio.to_thread(db.check_database_health)
    if health_data["status"] != "healthy":
        raise HTTPException(status_code=500, detail=f"Unhealthy: {health_data.get('error', 'Unknown error')}")
    return HealthCheck(
        status="healthy",
        database=health_data["database"],
        collections=health_data["collections"],
    )


# ==================== BAT ASSESSMENTS ====================
@app.post("/api/bat/submit", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
async def submit_assessment(
    payload: BATSubmission,
    user_id: str = Depends(get_current_user_id),
    repo: AssessmentRepo = Depends(get_assessment_repo),
):
    """Validate, score and store one BAT submission"""
    try:
        responses = validate_responses(payload.responses)
    except ResponseValidationError as e:
        raise HTTPException(status_code=400, detail=e.message)

    try:
        scores = calculate_scores(responses)
        record = build_assessment_record(user_id, responses, scores)
        saved = await repo.save(record)
        print(f"📝 BAT assessment stored for {user_id}: {scores.total_bat_score:.2f} ({scores.risk_level})")
        return {
            "message": "Assessment submitted successfully",
            "assessment": saved,
        }
    except Exception as e:
        raise _server_error("Failed to submit assessment", e)


@app.get("/api/bat/latest", response_model=AssessmentResponse)
async def get_latest_assessment(
    user_id: str = Depends(get_current_user_id),
    repo: AssessmentRepo = Depends(get_assessment_repo),
):
    try:
        assessment = await repo.latest(user_id)
    except Exception as e:
        raise _server_error("Failed to fetch assessment", e)

    if not assessment:
        raise HTTPException(status_code=404, detail="No assessment found")
    return assessment


@app.get("/api/bat/history", response_model=List[AssessmentResponse])
async def get_assessment_history(
    limit: int = Query(10, ge=1),
    user_id: str = Depends(get_current_user_id),
    repo: AssessmentRepo = Depends(get_assessment_repo),
):
    try:
        return await repo.history(user_id, limit=limit)
    except Exception as e:
        raise _server_error("Failed to fetch history", e)


@app.get("/api/bat/trend", response_model=List[TrendPoint])
async def get_trend_analysis(
    user_id: str = Depends(get_current_user_id),
    repo: AssessmentRepo = Depends(get_assessment_repo),
):
    try:
        return await repo.trend(user_id)
    except Exception as e:
        raise _server_error("Failed to fetch trend data", e)


@app.get("/api/bat/trend/summary", response_model=TrendSummary)
async def get_trend_summary(
    user_id: str = Depends(get_current_user_id),
    repo: AssessmentRepo = Depends(get_assessment_repo),
):
    try:
        points = await repo.trend(user_id)
    except Exception as e:
        raise _server_error("Failed to fetch trend data", e)
    return summarize_trend(points)


async def _get_owned_assessment(repo: AssessmentRepo, user_id: str, assessment_id: str) -> Dict[str, Any]:
    try:
        assessment = await repo.get(user_id, assessment_id)
    except Exception as e:
        raise _server_error("Failed to fetch assessment", e)

    if not assessment:
        raise HTTPException(status_code=404, detail="Assessment not found")
    return assessment


@app.get("/api/bat/assessments/{assessment_id}", response_model=AssessmentResponse)
async def get_assessment(
    assessment_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: AssessmentRepo = Depends(get_assessment_repo),
):
    return await _get_owned_assessment(repo, user_id, assessment_id)


@app.get("/api/bat/assessments/{assessment_id}/report.pdf")
async def assessment_report_pdf(
    assessment_id: str,
    user_id: str = Depends(get_current_user_id),
    repo: AssessmentRepo = Depends(get_assessment_repo),
):
    assessment = await _get_owned_assessment(repo, user_id, assessment_id)

    try:
        buffer = io.BytesIO()
        build_assessment_pdf_report(buffer, assessment)
        pdf_bytes = buffer.getvalue()
    except Exception as e:
        raise _server_error("Failed to build report", e)

    filename = f"bat_report_{assessment_id}.pdf"
    headers = {"Content-Disposition": f"attachment; filename={filename}"}
    return StreamingResponse(io.BytesIO(pdf_bytes), media_type="application/pdf", headers=headers)
