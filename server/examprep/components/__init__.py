"""
Exam-taking widgets: timer, progress bar and navigation controls.
"""
from examprep.components.navigation import NavigationButtons
from examprep.components.progress import ExamProgress
from examprep.components.timer import ExamTimer, format_time

__all__ = [
    "ExamTimer",
    "ExamProgress",
    "NavigationButtons",
    "format_time",
]
