"""The SQL tutorial lessons."""

from sqlprimer.tutorial.lessons import LESSONS, Lesson, get_lesson, run_lesson

__all__ = ["LESSONS", "Lesson", "get_lesson", "run_lesson"]
