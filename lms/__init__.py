"""Learning-management backend: courses, weeks, learning items and auto-graded quizzes."""

__version__ = "0.1.0"
