"""
Diagnostics for the AI analysis pipeline.

Only exams the caller may read are inspected.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session

from examprep.auth import AuthUser, get_current_user
from examprep.database import get_db
from examprep.errors import bad_request, forbidden, internal_error, not_found
from examprep.models import AISettings, Question, QuestionAIAnalysis
from examprep.policy import can_read_exam
from examprep.schemas import AIAnalysisOut, AISettingsOut
from examprep.services.exam_queries import get_exam

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Debug"])

SAMPLE_SIZE = 3


@router.get("/check-ai-data")
def check_ai_data(
    exam_id: Optional[str] = Query(default=None),
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    if not exam_id:
        raise bad_request("Missing exam_id")

    try:
        exam = get_exam(db, exam_id)
        if exam is None:
            raise not_found("Exam not found")
        if not can_read_exam(user, exam):
            raise forbidden("You do not have access to this exam")

        questions = (
            db.query(Question.id, Question.question_text)
            .filter(Question.exam_id == exam_id)
            .order_by(Question.question_number.asc())
            .limit(SAMPLE_SIZE)
            .all()
        )
        question_ids = [q.id for q in questions]

        analyses = []
        if question_ids:
            analyses = db.query(QuestionAIAnalysis).filter(QuestionAIAnalysis.question_id.in_(question_ids)).all()

        settings_row = db.query(AISettings).first()

        return {
            "success": True,
            "questions": [{"id": q.id, "question_text": q.question_text} for q in questions],
            "aiAnalysisCount": len(analyses),
            "aiAnalysisData": [AIAnalysisOut.model_validate(a).model_dump(mode="json") for a in analyses],
            "aiSettings": AISettingsOut.model_validate(settings_row).model_dump(mode="json") if settings_row else None,
            "settingsError": None if settings_row else "AI settings not initialized",
        }
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Failed to fetch debug data", e)
