"""
Authorization policy for exams.

Two delete rules: the owner route refuses sample exams and
other users' exams, the admin route lets the admin delete anything.
"""
from examprep.auth import AuthUser
from examprep.config import settings
from examprep.models import Exam


def is_admin(user: AuthUser) -> bool:
    admin_email = settings.admin_email
    return bool(admin_email) and user.email == admin_email


def is_owner(user: AuthUser, exam: Exam) -> bool:
    return exam.user_id is not None and exam.user_id == user.id


def can_read_exam(user: AuthUser, exam: Exam) -> bool:
    return is_owner(user, exam) or bool(exam.is_sample) or is_admin(user)


def can_owner_delete(user: AuthUser, exam: Exam) -> bool:
    return is_owner(user, exam) and not exam.is_sample


def can_admin_delete(user: AuthUser) -> bool:
    return is_admin(user)


def can_delete_exam(user: AuthUser, exam: Exam) -> bool:
    """True if either delete route would let ``user`` remove ``exam``."""
    return can_owner_delete(user, exam) or can_admin_delete(user)
