from sqlalchemy import Column, String, DateTime, ForeignKey, UniqueConstraint
from sqlalchemy.sql import func
from sqlalchemy.orm import relationship

from examprep.database import Base
from examprep.models.content import new_id


class ExamShare(Base):
    """An exam shared by its owner with another user"""
    __tablename__ = "exam_shares"
    __table_args__ = (UniqueConstraint("exam_id", "shared_with", name="exam_shares_exam_recipient_key"),)

    id = Column(String(36), primary_key=True, default=new_id)
    exam_id = Column(String(36), ForeignKey("exams.id", ondelete="CASCADE"), nullable=False, index=True)
    shared_by = Column(String(36), nullable=False, index=True)
    shared_with = Column(String(36), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    exam = relationship("Exam", back_populates="shares")

    def __repr__(self):
        return f"<ExamShare {self.exam_id} {self.shared_by} -> {self.shared_with}>"
