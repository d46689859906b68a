"""Event context and evaluation result models"""

from dataclasses import dataclass
from datetime import date, datetime

# Event types reported by request handlers
QUIZ_SUBMITTED = "quiz.submitted"
LESSON_COMPLETED = "lesson.completed"
LOGIN = "auth.login"
FORUM_POST_CREATED = "forum.post_created"
FORUM_REPLY_CREATED = "forum.reply_created"
MENTOR_SESSION_COMPLETED = "mentorship.session_completed"


@dataclass(frozen=True)
class EventContext:
    """A single triggering event, `occurred_at` is in the local time zone"""

    student_id: str
    event_type: str
    occurred_at: datetime
    quiz_id: str | None = None
    subject: str | None = None
    score: int | None = None
    total_questions: int | None = None
    completion_time_seconds: int | None = None

    @property
    def has_score(self) -> bool:
        return self.score is not None and bool(self.total_questions)

    @property
    def percentage(self) -> float | None:
        if not self.has_score:
            return None
        return self.score / self.total_questions * 100

    def scores_at_least(self, min_score: float) -> bool:
        # integer cross-multiplication, 4/5 must be exactly 80
        return self.has_score and self.score * 100 >= min_score * self.total_questions

    def scores_exactly(self, min_score: float) -> bool:
        return self.has_score and self.score * 100 == min_score * self.total_questions

    @property
    def is_perfect(self) -> bool:
        return self.has_score and self.score == self.total_questions

    @property
    def local_hour(self) -> int:
        return self.occurred_at.hour

    @property
    def local_date(self) -> date:
        return self.occurred_at.date()

    @property
    def is_weekend(self) -> bool:
        return self.occurred_at.weekday() >= 5


@dataclass
class EvaluationResult:
    """Progress computed for one badge on one event"""

    progress: int
    threshold: int
    message: str | None = None
