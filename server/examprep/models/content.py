import uuid

from sqlalchemy import Column, String, Text, Integer, Float, Boolean, DateTime, ForeignKey, JSON
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from examprep.database import Base


def new_id() -> str:
    return str(uuid.uuid4())


class Exam(Base):
    """Exams owned by a user, or sample exams visible to everyone"""
    __tablename__ = "exams"

    id = Column(String(36), primary_key=True, default=new_id)
    user_id = Column(String(36), nullable=True, index=True)  # auth.users id
    name = Column(String, nullable=False)
    file_name = Column(String, nullable=True)
    description = Column(Text, nullable=True)
    is_sample = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    # Dependents go with the exam. The FKs also declare ON DELETE CASCADE.
    questions = relationship("Question", back_populates="exam", cascade="all, delete-orphan")
    sessions = relationship("ExamSession", back_populates="exam", cascade="all, delete-orphan")
    shares = relationship("ExamShare", back_populates="exam", cascade="all, delete-orphan")
    course_sections = relationship("CourseSection", back_populates="exam", cascade="all, delete-orphan")

    def __repr__(self):
        return f"<Exam {self.name} ({self.id})>"


class Question(Base):
    """A single question of an exam"""
    __tablename__ = "questions"

    id = Column(String(36), primary_key=True, default=new_id)
    exam_id = Column(String(36), ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    question_number = Column(Integer, nullable=False)
    question_text = Column(Text, nullable=False)
    options = Column(JSON, nullable=False, default=dict)  # {"A": "...", "B": "...", ...}
    correct_answer = Column(String, nullable=True)
    community_vote = Column(String, nullable=True)
    has_illustration = Column(Boolean, nullable=False, default=False)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    exam = relationship("Exam", back_populates="questions")
    # Zero or one row in practice; loaded as a list and collapsed on output
    analyses = relationship("QuestionAIAnalysis", back_populates="question", cascade="all, delete-orphan")
    answers = relationship("ExamAnswer", back_populates="question", cascade="all, delete-orphan")


class QuestionAIAnalysis(Base):
    """AI-generated answer recommendation and explanations for a question"""
    __tablename__ = "question_ai_analysis"

    id = Column(String(36), primary_key=True, default=new_id)
    question_id = Column(
        String(36), ForeignKey("questions.id", ondelete="CASCADE"), nullable=False, unique=True, index=True
    )
    ai_recommended_answer = Column(String, nullable=True)
    ai_confidence_score = Column(Float, nullable=True)
    option_short_explanations = Column(JSON, nullable=True)
    option_long_explanations = Column(JSON, nullable=True)
    reasoning_summary = Column(Text, nullable=True)
    reasoning_detailed = Column(Text, nullable=True)
    analyzed_at = Column(DateTime(timezone=True), server_default=func.now())
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    question = relationship("Question", back_populates="analyses")


class AISettings(Base):
    """Single-row table holding the model used for AI analysis"""
    __tablename__ = "ai_settings"

    id = Column(String(36), primary_key=True, default=new_id)
    provider = Column(String, nullable=False)
    model_id = Column(String, nullable=False)
    model_name = Column(String, nullable=False)
    input_price_per_million = Column(Float, nullable=True)
    output_price_per_million = Column(Float, nullable=True)
    updated_by = Column(String, nullable=True)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())


class CourseSection(Base):
    """Generated study course content for an exam, one row per topic"""
    __tablename__ = "ai_generated_course_sections"

    id = Column(String(36), primary_key=True, default=new_id)
    exam_id = Column(String(36), ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    topic_name = Column(String, nullable=False)
    content_md = Column(Text, nullable=False, default="")
    order_index = Column(Integer, nullable=False, default=0)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    exam = relationship("Exam", back_populates="course_sections")
