"""
Exam sharing routes.

A share records who sent which exam to whom; it does not grant read access.
Recipients see the exam in their share listing; opening it still goes through
``policy.can_read_exam``.
"""
import logging
from typing import Optional

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session, joinedload

from examprep.auth import AuthUser, get_current_user
from examprep.database import get_db
from examprep.errors import bad_request, forbidden, internal_error, not_found
from examprep.models import ExamShare
from examprep.schemas import ShareExamRequest, ShareOut
from examprep.services.exam_queries import get_exam
from examprep.services.supabase_client import UserDirectory, get_user_directory

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Share"])


def _share_payload(share: ExamShare, include_owner: bool = False) -> dict:
    data = ShareOut.model_validate(share).model_dump(mode="json")
    exam = share.exam
    summary = None
    if exam is not None:
        summary = {"id": exam.id, "name": exam.name, "description": exam.description}
        if include_owner:
            summary["user_id"] = exam.user_id
    data["exams"] = summary
    return data


@router.get("/list")
def list_shares(
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Shares the caller created and shares addressed to the caller."""
    try:
        try:
            given = (
                db.query(ExamShare)
                .options(joinedload(ExamShare.exam))
                .filter(ExamShare.shared_by == user.id)
                .all()
            )
        except Exception as e:
            raise internal_error("Failed to fetch shares given", e)

        try:
            received = (
                db.query(ExamShare)
                .options(joinedload(ExamShare.exam))
                .filter(ExamShare.shared_with == user.id)
                .all()
            )
        except Exception as e:
            raise internal_error("Failed to fetch shares received", e)

        shares_given = []
        for share in given:
            data = _share_payload(share)
            data["shared_with_email"] = directory.email_for(share.shared_with) or share.shared_with
            shares_given.append(data)

        shares_received = []
        for share in received:
            data = _share_payload(share, include_owner=True)
            data["shared_by_email"] = directory.email_for(share.shared_by) or share.shared_by
            shares_received.append(data)

        return {"success": True, "sharesGiven": shares_given, "sharesReceived": shares_received}
    except HTTPException:
        raise
    except Exception as e:
        raise internal_error("Internal server error", e)


@router.post("/exam")
def share_exam(
    request: ShareExamRequest,
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
    directory: UserDirectory = Depends(get_user_directory),
):
    """Share one of the caller's exams with another user, by email."""
    if not request.examId or not request.targetUserEmail:
        raise bad_request("Missing examId or targetUserEmail")

    try:
        exam = get_exam(db, request.examId)
        if exam is None:
            raise not_found("Exam not found")

        if exam.user_id != user.id:
            raise forbidden("You can only share your own exams")

        target_user_id = directory.id_for_email(request.targetUserEmail)
        if not target_user_id:
            raise not_found(
                f"User with email {request.targetUserEmail} not found. They may need to sign up first."
            )

        existing = (
            db.query(ExamShare)
            .filter(ExamShare.exam_id == exam.id, ExamShare.shared_with == target_user_id)
            .first()
        )
        if existing is not None:
            raise bad_request("Exam is already shared with this user")

        share = ExamShare(exam_id=exam.id, shared_by=user.id, shared_with=target_user_id)
        db.add(share)
        db.commit()
        db.refresh(share)
        logger.info("Exam %s shared by %s with %s", exam.id, user.id, target_user_id)

        return {
            "success": True,
            "message": f'Exam "{exam.name}" successfully shared with {request.targetUserEmail}',
            "share": ShareOut.model_validate(share).model_dump(mode="json"),
        }
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise internal_error("Failed to share exam", e)


@router.delete("/exam")
def unshare_exam(
    share_id: Optional[str] = Query(default=None, alias="shareId"),
    user: AuthUser = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    """Remove a share the caller created."""
    if not share_id:
        raise bad_request("Missing shareId parameter")

    try:
        (
            db.query(ExamShare)
            .filter(ExamShare.id == share_id, ExamShare.shared_by == user.id)
            .delete(synchronize_session=False)
        )
        db.commit()

        return {"success": True, "message": "Share removed successfully"}
    except HTTPException:
        raise
    except Exception as e:
        db.rollback()
        raise internal_error("Failed to remove share", e)
