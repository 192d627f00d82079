class ExamProgress:
    """
    Progress through an exam.

    ``progress`` follows the current position; ``answered_count`` is shown
    separately and need not agree with it.
    """

    def __init__(self, current_question: int, total_questions: int, answered_count: int):
        self.current_question = current_question
        self.total_questions = total_questions
        self.answered_count = answered_count

    @property
    def progress(self) -> float:
        if self.total_questions <= 0:
            return 0.0
        return (self.current_question + 1) / self.total_questions * 100

    @property
    def percent_complete(self) -> int:
        return int(self.progress + 0.5)

    @property
    def position_label(self) -> str:
        return f"Question {self.current_question + 1} of {self.total_questions}"

    @property
    def answered_label(self) -> str:
        return f"{self.answered_count}/{self.total_questions} Answered"

    @property
    def complete_label(self) -> str:
        return f"{self.percent_complete}% Complete"
