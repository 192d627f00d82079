from sqlalchemy import Column, String, Integer, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from examprep.database import Base
from examprep.models.content import new_id


class ExamSession(Base):
    """One attempt of a user at an exam"""
    __tablename__ = "exam_sessions"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=False, index=True)
    exam_id = Column(String(36), ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    completed = Column(Boolean, nullable=False, default=False)
    score = Column(Integer, nullable=False, default=0)  # 0-100
    total_questions = Column(Integer, nullable=False, default=0)
    correct_count = Column(Integer, nullable=False, default=0)
    wrong_count = Column(Integer, nullable=False, default=0)
    elapsed_time = Column(Integer, nullable=False, default=0)  # seconds
    shuffled_question_order = Column(JSON, nullable=True)
    shuffled_options_map = Column(JSON, nullable=True)

    # Relationships
    exam = relationship("Exam", back_populates="sessions")
    answers = relationship("ExamAnswer", back_populates="session", cascade="all, delete-orphan")


class ExamAnswer(Base):
    """Answer given to one question within a session"""
    __tablename__ = "exam_answers"

    id = Column(String(36), primary_key=True, default=new_id)
    session_id = Column(String(36), ForeignKey("exam_sessions.id", ondelete="CASCADE"), nullable=False, index=True)
    question_id = Column(String(36), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False)
    selected_answer = Column(String, nullable=False)
    is_correct = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Relationships
    session = relationship("ExamSession", back_populates="answers")
    question = relationship("Question", back_populates="answers")
