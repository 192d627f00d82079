"""
Admin routes. Only the configured admin identity may use the mutating ones.
"""
import logging
from datetime import datetime, timezone

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from examprep.auth import AuthUser, get_current_user
from examprep.database import get_db
from examprep.errors import bad_request, forbidden, internal_error, not_found
from examprep.models import AISettings, Exam
from examprep.policy import can_admin_delete, is_admin
from examprep.schemas import AdminExamOut, AISettingsOut, UpdateAISettingsRequest
from examprep.services.exam_queries import get_exam, question_counts
from examprep.services.supabase_client import UserDirectory, get_user_directory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Admin"])


@router.get("/exams")
def list_all_exams(
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Every exam with its owner's email and question count, newest first."""
    if not is_admin(user):
        raise forbidden("Forbidden - Admin only")

    try:
        exams = db.query(Exam).order_by(Exam.created_at.desc()).all()
        counts = question_counts(db, [exam.id for exam in exams])

        emails = {}
        result = []
        for exam in exams:
            if exam.user_id and exam.user_id not in emails:
                emails[exam.user_id] = directory.email_for(exam.user_id)
            result.append(AdminExamOut(
                id=exam.id,
                name=exam.name,
                user_id=exam.user_id,
                user_email=emails.get(exam.user_id) or "Unknown",
                file_name=exam.file_name,
                created_at=exam.created_at,
                is_sample=bool(exam.is_sample),
                question_count=counts.get(exam.id, 0),
            ).model_dump(mode="json"))

        return {"success": True, "exams": result}
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Failed to fetch exams", e)


@router.delete("/exams/{exam_id}")
def admin_delete_exam(exam_id: str, user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Delete any exam, sample or not, regardless of owner.
    Questions, sessions and shares are removed with it.
    """
    if not can_admin_delete(user):
        logger.warning("Non-admin user %s attempted admin delete of exam %s", user.id, exam_id)
        raise forbidden("Forbidden - Admin only")

    if not exam_id or not exam_id.strip():
        raise bad_request("Missing exam_id")

    try:
        exam = get_exam(db, exam_id)
        if exam is None:
            raise not_found("Exam not found")

        name = exam.name
        db.delete(exam)
        db.commit()
        logger.info("Exam %s (%s) deleted by admin", exam_id, name)

        return {
            "success": True,
            "message": f'Exam "{name}" deleted successfully',
            "exam_id": exam_id,
        }
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise internal_error("Failed to delete exam", e)


@router.get("/ai-settings")
def get_ai_settings(user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    try:
        row = db.query(AISettings).first()
        if row is None:
            raise not_found("AI settings not initialized")
        return {"success": True, "settings": AISettingsOut.model_validate(row).model_dump(mode="json")}
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Failed to fetch settings", e)


@router.post("/ai-settings")
def update_ai_settings(
    request: UpdateAISettingsRequest,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Switch the model used for AI analysis."""
    if not is_admin(user):
        raise forbidden("Admin access required")

    if not request.provider or not request.model_id or not request.model_name:
        raise bad_request("Missing required fields: provider, model_id, model_name")

    try:
        row = db.query(AISettings).first()
        if row is None:
            raise internal_error("Settings not initialized")

        row.provider = request.provider
        row.model_id = request.model_id
        row.model_name = request.model_name
        row.input_price_per_million = request.input_price_per_million
        row.output_price_per_million = request.output_price_per_million
        row.updated_by = user.email
        row.updated_at = datetime.now(timezone.utc)
        db.commit()
        db.refresh(row)

        return {
            "success": True,
            "settings": AISettingsOut.model_validate(row).model_dump(mode="json"),
            "message": f"AI model updated to {row.model_name}",
        }
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise internal_error("Failed to update settings", e)
