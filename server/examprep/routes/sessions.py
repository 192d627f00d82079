"""
Exam session routes: start, answer, finish, delete and per-user statistics.
"""
import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from examprep.auth import AuthUser, get_current_user
from examprep.database import get_db
from examprep.errors import bad_request, forbidden, internal_error, not_found
from examprep.models import ExamAnswer, ExamSession, Question
from examprep.policy import can_read_exam
from examprep.schemas import (
    AnswerOut,
    DeleteSessionsRequest,
    FinishSessionRequest,
    SaveAnswerRequest,
    SessionOut,
    StartSessionRequest,
)
from examprep.services.aggregation import score_answers, summarize_sessions
from examprep.services.exam_queries import get_exam

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Sessions"])


def _session_payload(session: ExamSession) -> dict:
    return SessionOut.model_validate(session).model_dump(mode="json")


def _own_session(db: Session, user: AuthUser, session_id: str) -> ExamSession:
    session = db.query(ExamSession).filter(ExamSession.id == session_id).one_or_none()
    if session is None:
        raise not_found("Session not found")
    if session.user_id != user.id:
        raise forbidden("You do not have access to this session")
    return session


@router.get("/session/stats")
def get_session_stats(user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """The caller's completed sessions, newest first, with summary figures."""
    try:
        sessions = (
            db.query(ExamSession)
            .filter(ExamSession.user_id == user.id, ExamSession.completed.is_(True))
            .order_by(ExamSession.created_at.desc())
            .all()
        )

        return {
            "success": True,
            "sessions": [_session_payload(s) for s in sessions],
            "stats": summarize_sessions(sessions).model_dump(),
        }
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Failed to fetch session stats", e)


@router.post("/session/start")
def start_session(
    request: StartSessionRequest,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Resume the caller's open session for the exam, or open a new one."""
    if not request.examId:
        raise bad_request("Exam ID is required")

    try:
        exam = get_exam(db, request.examId)
        if exam is None:
            raise not_found("Exam not found")
        if not can_read_exam(user, exam):
            raise forbidden("You do not have access to this exam")

        existing = (
            db.query(ExamSession)
            .filter(
                ExamSession.exam_id == exam.id,
                ExamSession.user_id == user.id,
                ExamSession.completed.is_(False),
            )
            .order_by(ExamSession.created_at.desc())
            .first()
        )
        if existing is not None:
            return {"success": True, "session": _session_payload(existing)}

        session = ExamSession(
            user_id=user.id,
            exam_id=exam.id,
            completed=False,
            total_questions=len(request.questionIds or []),
            score=0,
            correct_count=0,
            wrong_count=0,
        )
        db.add(session)
        db.commit()
        db.refresh(session)
        logger.info("Session %s started by %s on exam %s", session.id, user.id, exam.id)

        return {"success": True, "session": _session_payload(session)}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise internal_error("Failed to start exam session", e)


@router.post("/session/answer")
def save_answer(
    request: SaveAnswerRequest,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Record or replace the answer to one question of a session."""
    if not request.sessionId or not request.questionId or not request.selectedAnswer:
        raise bad_request("Session ID, question ID, and selected answer are required")

    try:
        session = _own_session(db, user, request.sessionId)

        question = db.query(Question).filter(Question.id == request.questionId).one_or_none()
        if question is None:
            raise not_found("Question not found")
        if question.exam_id != session.exam_id:
            raise bad_request("Question does not belong to this session's exam")

        answer = (
            db.query(ExamAnswer)
            .filter(ExamAnswer.session_id == session.id, ExamAnswer.question_id == request.questionId)
            .one_or_none()
        )
        if answer is None:
            answer = ExamAnswer(session_id=session.id, question_id=request.questionId)
            db.add(answer)
        answer.selected_answer = request.selectedAnswer
        answer.is_correct = request.isCorrect

        db.commit()
        db.refresh(answer)

        return {"success": True, "answer": AnswerOut.model_validate(answer).model_dump(mode="json")}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise internal_error("Failed to save answer", e)


@router.post("/session/finish")
def finish_session(
    request: FinishSessionRequest,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Score the session from its answers and mark it completed."""
    if not request.sessionId:
        raise bad_request("Session ID is required")

    try:
        session = _own_session(db, user, request.sessionId)

        answers = db.query(ExamAnswer).filter(ExamAnswer.session_id == session.id).all()
        results = score_answers(answers)

        session.completed = True
        session.total_questions = results.totalQuestions
        session.correct_count = results.correctCount
        session.wrong_count = results.wrongCount
        session.score = results.score
        session.elapsed_time = request.elapsedTime
        db.commit()
        db.refresh(session)

        return {
            "success": True,
            "session": _session_payload(session),
            "results": results.model_dump(),
        }
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise internal_error("Failed to finish exam session", e)


@router.post("/sessions/delete")
def delete_sessions(
    request: DeleteSessionsRequest,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Delete the caller's sessions among ``sessionIds``; others are left alone."""
    session_ids = request.sessionIds
    if not session_ids or not isinstance(session_ids, list):
        raise bad_request("Session IDs are required")

    try:
        sessions = (
            db.query(ExamSession)
            .filter(ExamSession.id.in_([str(i) for i in session_ids]), ExamSession.user_id == user.id)
            .all()
        )
        for session in sessions:
            db.delete(session)
        db.commit()

        if len(sessions) < len(session_ids):
            logger.info(
                "User %s requested deletion of %d sessions, %d deleted",
                user.id, len(session_ids), len(sessions),
            )

        return {"success": True, "deletedCount": len(sessions), "requestedCount": len(session_ids)}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise internal_error("Failed to delete sessions", e)
