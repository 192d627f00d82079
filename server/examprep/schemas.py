from pydantic import BaseModel, ConfigDict
from typing import Optional, List, Dict, Any
from datetime import datetime


# Exam Schemas
class ExamOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: Optional[str] = None
    name: str
    file_name: Optional[str] = None
    description: Optional[str] = None
    is_sample: bool = False
    created_at: Optional[datetime] = None
    question_count: int = 0


class AdminExamOut(BaseModel):
    id: str
    name: str
    user_id: Optional[str] = None
    user_email: str
    file_name: Optional[str] = None
    created_at: Optional[datetime] = None
    is_sample: bool = False
    question_count: int = 0


# Question Schemas
class AIAnalysisOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    question_id: str
    ai_recommended_answer: Optional[str] = None
    ai_confidence_score: Optional[float] = None
    option_short_explanations: Optional[Dict[str, str]] = None
    option_long_explanations: Optional[Dict[str, str]] = None
    reasoning_summary: Optional[str] = None
    reasoning_detailed: Optional[str] = None
    analyzed_at: Optional[datetime] = None
    created_at: Optional[datetime] = None


class QuestionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    exam_id: str
    question_number: int
    question_text: str
    options: Dict[str, str] = {}
    correct_answer: Optional[str] = None
    community_vote: Optional[str] = None
    has_illustration: bool = False
    created_at: Optional[datetime] = None
    # Always present; null when the question has not been analysed
    ai_analysis: Optional[AIAnalysisOut] = None


class AISettingsOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    provider: str
    model_id: str
    model_name: str
    input_price_per_million: Optional[float] = None
    output_price_per_million: Optional[float] = None
    updated_by: Optional[str] = None
    updated_at: Optional[datetime] = None


# Session Schemas
class SessionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    user_id: str
    exam_id: str
    created_at: Optional[datetime] = None
    completed: bool
    score: int
    total_questions: int
    correct_count: int
    wrong_count: int
    elapsed_time: int = 0
    shuffled_question_order: Optional[List[str]] = None
    shuffled_options_map: Optional[Dict[str, Dict[str, str]]] = None


class AnswerOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    session_id: str
    question_id: str
    selected_answer: str
    is_correct: bool
    created_at: Optional[datetime] = None


class SessionStats(BaseModel):
    totalSessions: int = 0
    averageScore: int = 0
    bestScore: int = 0
    totalQuestions: int = 0
    totalCorrect: int = 0


class ScoreTrendPoint(BaseModel):
    date: str
    score: int


class DashboardStats(BaseModel):
    totalExams: int = 0
    averageScore: int = 0
    bestScore: int = 0
    totalQuestions: int = 0
    totalCorrect: int = 0
    totalTimeSpent: int = 0
    recentActivity: int = 0
    scoreTrend: List[ScoreTrendPoint] = []


class SessionResults(BaseModel):
    totalQuestions: int = 0
    correctCount: int = 0
    wrongCount: int = 0
    score: int = 0
    wrongQuestionIds: List[str] = []


# Share Schemas
class ShareOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: str
    exam_id: str
    shared_by: str
    shared_with: str
    created_at: Optional[datetime] = None


# Course Schemas
class CourseTopic(BaseModel):
    topic_name: str
    order_index: int


class CourseSectionOut(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    topic_name: str
    content_md: str
    order_index: int


class CourseOut(BaseModel):
    exam_id: str
    topics: List[CourseTopic]
    sections: List[CourseSectionOut]


# Request bodies. Required fields are checked in the handlers so that a
# missing value is answered with 400 rather than a validation error.
class StartSessionRequest(BaseModel):
    examId: Optional[str] = None
    questionIds: Optional[List[str]] = None


class SaveAnswerRequest(BaseModel):
    sessionId: Optional[str] = None
    questionId: Optional[str] = None
    selectedAnswer: Optional[str] = None
    isCorrect: bool = False


class FinishSessionRequest(BaseModel):
    sessionId: Optional[str] = None
    elapsedTime: int = 0


class DeleteSessionsRequest(BaseModel):
    sessionIds: Optional[Any] = None


class ShareExamRequest(BaseModel):
    examId: Optional[str] = None
    targetUserEmail: Optional[str] = None


class UpdateAISettingsRequest(BaseModel):
    provider: Optional[str] = None
    model_id: Optional[str] = None
    model_name: Optional[str] = None
    input_price_per_million: Optional[float] = None
    output_price_per_million: Optional[float] = None


class AnalyzeQuestionsRequest(BaseModel):
    questionIds: Optional[List[str]] = None
    examId: Optional[str] = None
