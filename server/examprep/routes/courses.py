import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from examprep.auth import AuthUser, get_current_user
from examprep.database import get_db
from examprep.errors import bad_request, forbidden, internal_error, not_found
from examprep.models import CourseSection
from examprep.policy import can_read_exam
from examprep.schemas import CourseOut, CourseSectionOut, CourseTopic
from examprep.services.exam_queries import get_exam

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Courses"])


def load_course(db: Session, exam_id: str) -> Optional[CourseOut]:
    """Course content for an exam, or None if none has been generated yet."""
    sections = (
        db.query(CourseSection)
        .filter(CourseSection.exam_id == exam_id)
        .order_by(CourseSection.order_index.asc())
        .all()
    )
    if not sections:
        return None

    return CourseOut(
        exam_id=exam_id,
        topics=[CourseTopic(topic_name=s.topic_name, order_index=s.order_index) for s in sections],
        sections=[CourseSectionOut.model_validate(s) for s in sections],
    )


@router.get("/{exam_id}")
def get_course(exam_id: str, user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    if not exam_id or not exam_id.strip():
        raise bad_request("Missing exam_id")

    try:
        exam = get_exam(db, exam_id)
        if exam is None:
            raise not_found("Exam not found")

        if not can_read_exam(user, exam):
            raise forbidden("Unauthorized")

        course = load_course(db, exam_id)
        if course is None:
            raise not_found("No course found for this exam", exam_id=exam_id, status="not_generated")

        return course.model_dump()
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Failed to load course", e)
