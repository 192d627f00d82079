import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session, joinedload

from examprep.auth import AuthUser, get_current_user
from examprep.database import get_db
from examprep.errors import bad_request, internal_error
from examprep.models import Question, QuestionAIAnalysis
from examprep.policy import can_read_exam
from examprep.schemas import AnalyzeQuestionsRequest
from examprep.services.analysis import QuestionAnalyzer, get_question_analyzer, to_record

logger = logging.getLogger(__name__)

router = APIRouter(tags=["AI"])

BATCH_SIZE = 5


@router.post("/analyze-questions")
def analyze_questions(
    request: AnalyzeQuestionsRequest,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    analyzer: Optional[QuestionAnalyzer] = Depends(get_question_analyzer),
):
    """
    Run AI analysis on the given questions and store one analysis per question,
    replacing any previous one. Questions of exams the caller cannot read are skipped.
    """
    if not request.questionIds:
        raise bad_request("No question IDs provided")

    if analyzer is None:
        raise internal_error("AI analysis not configured. Please add OPENAI_API_KEY to environment variables.")

    try:
        questions = (
            db.query(Question)
            .options(joinedload(Question.exam))
            .filter(Question.id.in_(request.questionIds))
            .order_by(Question.question_number.asc())
            .all()
        )
        questions = [q for q in questions if can_read_exam(user, q.exam)]

        analyzed = 0
        errors = []
        for start in range(0, len(questions), BATCH_SIZE):
            batch = questions[start:start + BATCH_SIZE]
            for question in batch:
                try:
                    result = analyzer.analyze(question)
                except Exception as e:
                    logger.error("Failed to analyze question %s: %s", question.id, e)
                    errors.append({"questionId": question.id, "error": str(e)})
                    continue

                db.query(QuestionAIAnalysis).filter(QuestionAIAnalysis.question_id == question.id).delete(
                    synchronize_session=False
                )
                db.add(QuestionAIAnalysis(**to_record(question.id, result)))
                analyzed += 1
            db.commit()
            logger.info("Analyzed batch %d (%d questions)", start // BATCH_SIZE + 1, len(batch))

        response = {"success": True, "analyzed": analyzed, "failed": len(errors)}
        if errors:
            response["errors"] = errors
        return response
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise internal_error("Analysis failed", e)
