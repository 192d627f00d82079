"""
Queries shared by the exam, admin, course and debug routes.
"""
from typing import Dict, Iterable, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session

from examprep.models import Exam, Question
from examprep.schemas import ExamOut


def get_exam(db: Session, exam_id: str) -> Optional[Exam]:
    return db.query(Exam).filter(Exam.id == exam_id).one_or_none()


def question_counts(db: Session, exam_ids: Iterable[str]) -> Dict[str, int]:
    """Number of question rows per exam id; exams without questions are absent."""
    exam_ids = list(exam_ids)
    if not exam_ids:
        return {}
    rows = (
        db.query(Question.exam_id, func.count(Question.id))
        .filter(Question.exam_id.in_(exam_ids))
        .group_by(Question.exam_id)
        .all()
    )
    return {exam_id: count for exam_id, count in rows}


def exam_payload(exam: Exam, question_count: int = 0) -> dict:
    data = ExamOut.model_validate(exam).model_dump(mode="json")
    data["question_count"] = question_count
    return data
