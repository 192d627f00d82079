import logging

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy.orm import Session

from examprep.auth import AuthUser, get_current_user
from examprep.database import get_db
from examprep.errors import internal_error
from examprep.models import ExamSession
from examprep.services.aggregation import dashboard_stats

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Stats"])


@router.get("")
def get_dashboard_stats(user: AuthUser = Depends(get_current_user), db: Session = Depends(get_db)):
    """Dashboard figures over the caller's completed sessions."""
    try:
        sessions = (
            db.query(ExamSession)
            .filter(ExamSession.user_id == user.id, ExamSession.completed.is_(True))
            .order_by(ExamSession.created_at.desc())
            .all()
        )
        return {"success": True, "stats": dashboard_stats(sessions).model_dump()}
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Failed to fetch stats", e)
