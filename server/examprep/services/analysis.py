"""
AI question analysis.

Encapsulates OpenAI's structured output: the model answers each question on
its own and explains every option. The stored correct answer and community
vote are never sent.
"""
import logging
from typing import List, Optional

from fastapi import Depends
from openai import OpenAI
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from examprep.config import settings
from examprep.database import get_db
from examprep.models import AISettings, Question
from examprep.services.prompt_management import get_prompt

logger = logging.getLogger(__name__)


class OptionExplanation(BaseModel):
    key: str
    short: str = Field(..., description="One-line verdict, max 15 words")
    long: str = Field(..., description="3-5 sentence technical explanation")


class QuestionAnalysisResult(BaseModel):
    recommended_answer: str
    confidence_score: float = Field(..., ge=0, le=1)
    reasoning_summary: str
    reasoning_detailed: str
    options: List[OptionExplanation]


def build_prompts(question: Question) -> tuple[str, str]:
    options = question.options or {}
    options_text = "\n".join(f"{key}. {value}" for key, value in sorted(options.items()))
    prompt = get_prompt(
        "question_analysis",
        question_text=question.question_text,
        options_text=options_text,
    )
    return prompt["system_prompt"], prompt["human_prompt"]


def to_record(question_id: str, result: QuestionAnalysisResult) -> dict:
    """Column values for a ``question_ai_analysis`` row."""
    return {
        "question_id": question_id,
        "ai_recommended_answer": result.recommended_answer,
        "ai_confidence_score": result.confidence_score,
        "option_short_explanations": {o.key: o.short for o in result.options},
        "option_long_explanations": {o.key: o.long for o in result.options},
        "reasoning_summary": result.reasoning_summary,
        "reasoning_detailed": result.reasoning_detailed,
    }


class QuestionAnalyzer:
    """Runs one structured completion per question."""

    def __init__(self, api_key: str, model: str):
        self.client = OpenAI(api_key=api_key)
        self.model = model

    def analyze(self, question: Question, temperature: float = 0.2, max_tokens: int = 2500) -> QuestionAnalysisResult:
        system_prompt, user_prompt = build_prompts(question)
        completion = self.client.chat.completions.parse(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt},
            ],
            response_format=QuestionAnalysisResult,
            temperature=temperature,
            max_tokens=max_tokens,
        )
        parsed = completion.choices[0].message.parsed
        if parsed is None:
            raise ValueError(f"Model returned no parsable analysis for question {question.id}")
        return parsed


def get_question_analyzer(db: Session = Depends(get_db)) -> Optional[QuestionAnalyzer]:
    """
    FastAPI dependency. None when no OpenAI key is configured.
    The model comes from the ai_settings row when it names an OpenAI model.
    """
    if not settings.openai_api_key:
        return None

    model = settings.analysis_model
    row = db.query(AISettings).first()
    if row is not None and row.provider == "openai" and row.model_id:
        model = row.model_id
    return QuestionAnalyzer(api_key=settings.openai_api_key, model=model)
