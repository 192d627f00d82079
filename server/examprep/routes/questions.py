import logging
from typing import Any, Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy import or_
from sqlalchemy.orm import Session, selectinload

from examprep.auth import AuthUser, get_current_user
from examprep.database import get_db
from examprep.errors import internal_error
from examprep.models import Exam, Question
from examprep.policy import is_admin
from examprep.schemas import AIAnalysisOut, QuestionOut

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Questions"])


def collapse_ai_analysis(analysis: Any) -> Optional[Any]:
    """
    Reduce a question's analysis relation to one object or None.
    Accepts a list (zero or one rows), a single row, or None.
    """
    if analysis is None:
        return None
    if isinstance(analysis, (list, tuple)):
        return analysis[0] if analysis else None
    return analysis


def question_payload(question: Question) -> dict:
    data = QuestionOut.model_validate(question).model_dump(mode="json")
    analysis = collapse_ai_analysis(question.analyses)
    data["ai_analysis"] = (
        AIAnalysisOut.model_validate(analysis).model_dump(mode="json") if analysis is not None else None
    )
    return data


@router.get("")
def get_questions(
    ids: Optional[str] = Query(default=None),
    exam_id: Optional[str] = Query(default=None),
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """
    Questions filtered by exam and/or a comma-separated id list, by question number.
    Only questions of exams the caller may read are returned.
    """
    try:
        query = db.query(Question).options(selectinload(Question.analyses))

        if not is_admin(user):
            query = query.join(Question.exam).filter(or_(Exam.user_id == user.id, Exam.is_sample.is_(True)))

        if exam_id:
            query = query.filter(Question.exam_id == exam_id)

        if ids:
            id_list = [i.strip() for i in ids.split(",") if i.strip()]
            query = query.filter(Question.id.in_(id_list))

        questions = query.order_by(Question.question_number.asc()).all()
        payload = [question_payload(q) for q in questions]

        return {"success": True, "questions": payload, "count": len(payload)}
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Failed to fetch questions", e)
