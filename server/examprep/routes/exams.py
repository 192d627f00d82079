"""
Exam routes: listing, fetch by id and owner-scoped deletion.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import or_
from sqlalchemy.orm import Session

from examprep.auth import AuthUser, get_current_user
from examprep.database import get_db
from examprep.errors import forbidden, internal_error, not_found
from examprep.models import Exam
from examprep.policy import can_read_exam, is_owner
from examprep.services.exam_queries import exam_payload, get_exam, question_counts

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Exams"])


@router.get("")
def list_exams(user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    The caller's own exams plus every sample exam.
    Sample exams come first, then newest first.
    """
    try:
        exams = (
            db.query(Exam)
            .filter(or_(Exam.user_id == user.id, Exam.is_sample.is_(True)))
            .order_by(Exam.is_sample.desc(), Exam.created_at.desc())
            .all()
        )
        counts = question_counts(db, [exam.id for exam in exams])

        return {
            "success": True,
            "exams": [exam_payload(exam, counts.get(exam.id, 0)) for exam in exams],
        }
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Failed to fetch exams", e)


@router.get("/{exam_id}")
def get_exam_by_id(exam_id: str, user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Full exam row, if the caller owns it or it is a sample."""
    try:
        exam = get_exam(db, exam_id)
        if exam is None:
            raise not_found("Exam not found")

        if not can_read_exam(user, exam):
            raise forbidden("You do not have access to this exam")

        counts = question_counts(db, [exam.id])
        return {"success": True, "exam": exam_payload(exam, counts.get(exam.id, 0))}
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Failed to fetch exam", e)


@router.delete("/{exam_id}")
def delete_exam(exam_id: str, user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """
    Delete one of the caller's exams.
    Questions, sessions and shares are removed with it.
    """
    try:
        exam = get_exam(db, exam_id)
        if exam is None:
            raise not_found("Exam not found")

        if not is_owner(user, exam):
            logger.info("User %s refused delete of exam %s: not owner", user.id, exam_id)
            raise forbidden("You do not have permission to delete this exam")

        if exam.is_sample:
            logger.info("User %s refused delete of sample exam %s", user.id, exam_id)
            raise forbidden("Sample exams cannot be deleted")

        db.delete(exam)
        db.commit()
        logger.info("Exam %s deleted by owner %s", exam_id, user.id)

        return {"success": True, "message": "Exam deleted successfully"}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise internal_error("Failed to delete exam", e)
