"""Student Activity API Routes
- Each route persists the activity first, then asks the badge service for
  newly earned badges and queues one email per badge.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from pydantic import BaseModel, Field, model_validator
from sqlalchemy.orm import Session

from classbeyond.apps.api.dependencies import get_badge_service, get_student
from classbeyond.badges.processor import BadgeService
from classbeyond.badges.schemas import BadgeDefinition
from classbeyond.core.data.database import get_db
from classbeyond.core.data.models import Lesson, Quiz, User, isoformat
from classbeyond.core.data.repositories import StudentActivityRepository
from classbeyond.core.email import BadgeNotification, EmailService, get_email_service

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/students/{student_id}", tags=["activity"])


class QuizSubmissionRequest(BaseModel):
    """Quiz submission request model"""

    quiz_id: str
    score: int = Field(ge=0)
    total_questions: int = Field(gt=0)
    completion_time_seconds: int | None = Field(None, ge=0)

    @model_validator(mode="after")
    def score_within_total(self) -> "QuizSubmissionRequest":
        if self.score > self.total_questions:
            raise ValueError("score cannot exceed total_questions")
        return self


class ForumPostRequest(BaseModel):
    """Forum post request model"""

    title: str = Field(min_length=1, max_length=255)
    body: str = Field(min_length=1)
    subject: str | None = None


class ForumReplyRequest(BaseModel):
    """Forum reply request model"""

    question_id: int
    body: str = Field(min_length=1)


class EarnedBadge(BaseModel):
    """A badge earned by the request"""

    id: int
    name: str
    description: str
    icon: str
    rarity: str
    points: int

    @classmethod
    def from_definition(cls, badge: BadgeDefinition) -> "EarnedBadge":
        return cls(
            id=badge.id,
            name=badge.name,
            description=badge.description,
            icon=badge.icon,
            rarity=badge.rarity,
            points=badge.points,
        )


class ActivityResponse(BaseModel):
    """Base response: what was recorded and the badges it earned"""

    new_badges: list[EarnedBadge]


class QuizSubmissionResponse(ActivityResponse):
    submission: dict


class LessonCompletionResponse(ActivityResponse):
    progress: dict


class LoginResponse(ActivityResponse):
    logged_in_at: str


class ForumActivityResponse(ActivityResponse):
    id: int


class MentorshipSessionResponse(ActivityResponse):
    session_id: int
    status: str


def _queue_badge_emails(
    background_tasks: BackgroundTasks,
    email_service: EmailService,
    student: User,
    badges: list[BadgeDefinition],
) -> list[EarnedBadge]:
    """Queue one notification per newly earned badge"""
    earned = [EarnedBadge.from_definition(badge) for badge in badges]
    if badges and not student.email:
        logger.debug("Student %s has no email, badge emails skipped", student.id)
        return earned

    for badge in badges:
        background_tasks.add_task(
            email_service.send_badge_earned,
            BadgeNotification(
                recipient_id=student.id,
                recipient_email=student.email,
                recipient_name=student.display_name,
                badge_name=badge.name,
                description=badge.description,
                points=badge.points,
            ),
        )
    return earned


@router.post("/quiz-submissions", response_model=QuizSubmissionResponse, status_code=201)
def submit_quiz(
    payload: QuizSubmissionRequest,
    background_tasks: BackgroundTasks,
    student: User = Depends(get_student),
    service: BadgeService = Depends(get_badge_service),
    email_service: EmailService = Depends(get_email_service),
    db: Session = Depends(get_db),
):
    """Record a graded quiz attempt and award badges"""
    quiz = db.get(Quiz, payload.quiz_id)
    if not quiz:
        raise HTTPException(status_code=404, detail="Quiz not found")

    submission = StudentActivityRepository(db, student.id).record_quiz_submission(
        quiz_id=quiz.id,
        score=payload.score,
        total_questions=payload.total_questions,
        completion_time_seconds=payload.completion_time_seconds,
        submitted_at=service.clock(),
    )
    submission_data = submission.to_dict()

    new_badges = service.check_and_award_badges_for_quiz(
        db,
        student.id,
        quiz.id,
        payload.score,
        payload.total_questions,
        payload.completion_time_seconds,
    )
    return QuizSubmissionResponse(
        submission=submission_data,
        new_badges=_queue_badge_emails(
            background_tasks, email_service, student, new_badges
        ),
    )


@router.post("/lessons/{lesson_id}/complete", response_model=LessonCompletionResponse)
def complete_lesson(
    lesson_id: str,
    background_tasks: BackgroundTasks,
    student: User = Depends(get_student),
    service: BadgeService = Depends(get_badge_service),
    email_service: EmailService = Depends(get_email_service),
    db: Session = Depends(get_db),
):
    """Mark a lesson complete and award badges"""
    if not db.get(Lesson, lesson_id):
        raise HTTPException(status_code=404, detail="Lesson not found")

    progress = StudentActivityRepository(db, student.id).complete_lesson(
        lesson_id, completed_at=service.clock()
    )
    progress_data = progress.to_dict()

    new_badges = service.check_lesson_badges(db, student.id)
    return LessonCompletionResponse(
        progress=progress_data,
        new_badges=_queue_badge_emails(
            background_tasks, email_service, student, new_badges
        ),
    )


@router.post("/logins", response_model=LoginResponse, status_code=201)
def record_login(
    background_tasks: BackgroundTasks,
    student: User = Depends(get_student),
    service: BadgeService = Depends(get_badge_service),
    email_service: EmailService = Depends(get_email_service),
    db: Session = Depends(get_db),
):
    """Record a successful login, used for streak badges"""
    login = StudentActivityRepository(db, student.id).record_login(service.clock())
    logged_in_at = isoformat(login.logged_in_at)

    new_badges = service.check_login_badges(db, student.id)
    return LoginResponse(
        logged_in_at=logged_in_at,
        new_badges=_queue_badge_emails(
            background_tasks, email_service, student, new_badges
        ),
    )


@router.post("/forum/posts", response_model=ForumActivityResponse, status_code=201)
def create_forum_post(
    payload: ForumPostRequest,
    background_tasks: BackgroundTasks,
    student: User = Depends(get_student),
    service: BadgeService = Depends(get_badge_service),
    email_service: EmailService = Depends(get_email_service),
    db: Session = Depends(get_db),
):
    """Create a forum post and award badges"""
    post = StudentActivityRepository(db, student.id).create_forum_post(
        title=payload.title, body=payload.body, subject=payload.subject
    )
    post_id = post.id

    new_badges = service.check_forum_badges(db, student.id, is_reply=False)
    return ForumActivityResponse(
        id=post_id,
        new_badges=_queue_badge_emails(
            background_tasks, email_service, student, new_badges
        ),
    )


@router.post("/forum/replies", response_model=ForumActivityResponse, status_code=201)
def create_forum_reply(
    payload: ForumReplyRequest,
    background_tasks: BackgroundTasks,
    student: User = Depends(get_student),
    service: BadgeService = Depends(get_badge_service),
    email_service: EmailService = Depends(get_email_service),
    db: Session = Depends(get_db),
):
    """Reply to a forum post and award badges"""
    reply = StudentActivityRepository(db, student.id).create_forum_reply(
        payload.question_id, payload.body
    )
    if reply is None:
        raise HTTPException(status_code=404, detail="Forum post not found")
    reply_id = reply.id

    new_badges = service.check_forum_badges(db, student.id, is_reply=True)
    return ForumActivityResponse(
        id=reply_id,
        new_badges=_queue_badge_emails(
            background_tasks, email_service, student, new_badges
        ),
    )


@router.post(
    "/mentorship-sessions/{session_id}/complete",
    response_model=MentorshipSessionResponse,
)
def complete_mentorship_session(
    session_id: int,
    background_tasks: BackgroundTasks,
    student: User = Depends(get_student),
    service: BadgeService = Depends(get_badge_service),
    email_service: EmailService = Depends(get_email_service),
    db: Session = Depends(get_db),
):
    """Mark a mentorship session completed and award badges"""
    try:
        session = StudentActivityRepository(db, student.id).complete_mentorship_session(
            session_id
        )
    except ValueError as e:
        raise HTTPException(status_code=409, detail=str(e)) from e
    if session is None:
        raise HTTPException(status_code=404, detail="Mentorship session not found")
    session_status = session.status

    new_badges = service.check_mentor_session_badges(db, student.id)
    return MentorshipSessionResponse(
        session_id=session_id,
        status=session_status,
        new_badges=_queue_badge_emails(
            background_tasks, email_service, student, new_badges
        ),
    )
