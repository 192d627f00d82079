"""
Models package initialization
Import all models here to ensure they are registered with SQLAlchemy
"""

from examprep.models.content import Exam, Question, QuestionAIAnalysis, AISettings, CourseSection
from examprep.models.session import ExamSession, ExamAnswer
from examprep.models.share import ExamShare

__all__ = [
    "Exam",
    "Question",
    "QuestionAIAnalysis",
    "AISettings",
    "CourseSection",
    "ExamSession",
    "ExamAnswer",
    "ExamShare",
]
