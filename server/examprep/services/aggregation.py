"""
Aggregation helpers.

Pure functions folding session and answer rows into summary numbers. Rows may
be ORM objects or plain mappings. Every figure is 0 for an empty input.
"""
import math
from datetime import datetime, timedelta, timezone
from typing import Any, Iterable, List, Optional

from examprep.schemas import DashboardStats, ScoreTrendPoint, SessionResults, SessionStats

RECENT_ACTIVITY_DAYS = 7
SCORE_TREND_LENGTH = 10


def _field(row: Any, name: str, default: Any = None) -> Any:
    if isinstance(row, dict):
        value = row.get(name, default)
    else:
        value = getattr(row, name, default)
    return default if value is None else value


def round_half_up(value: float) -> int:
    """Round like JavaScript's Math.round (89.5 -> 90), not banker's rounding."""
    return int(math.floor(value + 0.5))


def _as_utc(value: Any) -> Optional[datetime]:
    if isinstance(value, str):
        value = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if not isinstance(value, datetime):
        return None
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def summarize_sessions(sessions: Iterable[Any]) -> SessionStats:
    """Summary of completed sessions only; incomplete rows are ignored."""
    completed = [s for s in sessions if _field(s, "completed", False)]
    if not completed:
        return SessionStats()

    scores = [_field(s, "score", 0) for s in completed]
    return SessionStats(
        totalSessions=len(completed),
        averageScore=round_half_up(sum(scores) / len(scores)),
        bestScore=max(scores),
        totalQuestions=sum(_field(s, "total_questions", 0) for s in completed),
        totalCorrect=sum(_field(s, "correct_count", 0) for s in completed),
    )


def dashboard_stats(sessions: Iterable[Any], now: Optional[datetime] = None) -> DashboardStats:
    """
    Dashboard figures over completed sessions.

    ``sessions`` is expected newest first; the score trend keeps the newest
    ``SCORE_TREND_LENGTH`` and returns them oldest to newest.
    """
    completed = [s for s in sessions if _field(s, "completed", False)]
    summary = summarize_sessions(completed)
    now = _as_utc(now) or datetime.now(timezone.utc)
    cutoff = now - timedelta(days=RECENT_ACTIVITY_DAYS)

    recent = 0
    for s in completed:
        created = _as_utc(_field(s, "created_at"))
        if created is not None and created >= cutoff:
            recent += 1

    trend: List[ScoreTrendPoint] = []
    for s in reversed(completed[:SCORE_TREND_LENGTH]):
        created = _as_utc(_field(s, "created_at"))
        trend.append(ScoreTrendPoint(
            date=created.date().isoformat() if created else "",
            score=_field(s, "score", 0),
        ))

    return DashboardStats(
        totalExams=summary.totalSessions,
        averageScore=summary.averageScore,
        bestScore=summary.bestScore,
        totalQuestions=summary.totalQuestions,
        totalCorrect=summary.totalCorrect,
        totalTimeSpent=sum(_field(s, "elapsed_time", 0) for s in completed),
        recentActivity=recent,
        scoreTrend=trend,
    )


def score_answers(answers: Iterable[Any]) -> SessionResults:
    """Final results of a session from its recorded answers."""
    answers = list(answers)
    total = len(answers)
    correct = sum(1 for a in answers if _field(a, "is_correct", False))
    return SessionResults(
        totalQuestions=total,
        correctCount=correct,
        wrongCount=total - correct,
        score=round_half_up(correct / total * 100) if total else 0,
        wrongQuestionIds=[str(_field(a, "question_id")) for a in answers if not _field(a, "is_correct", False)],
    )
