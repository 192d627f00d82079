from typing import Callable, Optional

FINISH_LABEL = "Finish Exam"
NEXT_LABEL = "Next"
PREVIOUS_LABEL = "Previous"


class NavigationButtons:
    """Previous / Next / Finish controls for moving between questions."""

    def __init__(
        self,
        current_index: int,
        total_questions: int,
        on_previous: Optional[Callable[[], None]] = None,
        on_next: Optional[Callable[[], None]] = None,
        on_finish: Optional[Callable[[], None]] = None,
        can_finish: bool = False,
    ):
        self.current_index = current_index
        self.total_questions = total_questions
        self.on_previous = on_previous
        self.on_next = on_next
        self.on_finish = on_finish
        self.can_finish = can_finish

    @property
    def is_first(self) -> bool:
        return self.current_index == 0

    @property
    def is_last(self) -> bool:
        return self.current_index == self.total_questions - 1

    @property
    def previous_disabled(self) -> bool:
        return self.is_first

    @property
    def primary_label(self) -> str:
        return FINISH_LABEL if self.is_last else NEXT_LABEL

    @property
    def primary_disabled(self) -> bool:
        # Next is always enabled; Finish waits for the caller's go-ahead
        return self.is_last and not self.can_finish

    @property
    def counter_label(self) -> str:
        return f"{self.current_index + 1} / {self.total_questions}"

    def press_previous(self) -> bool:
        """Invoke ``on_previous`` unless disabled. Returns whether it fired."""
        if self.previous_disabled or self.on_previous is None:
            return False
        self.on_previous()
        return True

    def press_primary(self) -> bool:
        """Invoke ``on_finish`` on the last question, ``on_next`` otherwise."""
        if self.primary_disabled:
            return False
        callback = self.on_finish if self.is_last else self.on_next
        if callback is None:
            return False
        callback()
        return True
