"""Badge Definition Schema"""

import json
from datetime import datetime
from typing import Annotated, Any, Literal, Union, get_args

from pydantic import BaseModel, ConfigDict, Field, PositiveInt, model_validator

BadgeType = Literal["achievement", "streak", "participation", "mastery", "special"]
BadgeRarity = Literal["common", "rare", "epic", "legendary"]


class _Requirement(BaseModel):
    """Common shape: every requirement compares an aggregate against `value`"""

    model_config = ConfigDict(frozen=True, extra="forbid")

    value: PositiveInt


class QuizCountRequirement(_Requirement):
    type: Literal["quiz_count"] = "quiz_count"


class PerfectScoreRequirement(_Requirement):
    type: Literal["perfect_score"] = "perfect_score"


class LessonCountRequirement(_Requirement):
    type: Literal["lesson_count"] = "lesson_count"


class LoginStreakRequirement(_Requirement):
    type: Literal["login_streak"] = "login_streak"


class ForumPostsRequirement(_Requirement):
    type: Literal["forum_posts"] = "forum_posts"


class ForumRepliesRequirement(_Requirement):
    type: Literal["forum_replies"] = "forum_replies"


class MentorSessionsRequirement(_Requirement):
    type: Literal["mentor_sessions"] = "mentor_sessions"


class WeekendActivityRequirement(_Requirement):
    type: Literal["weekend_activity"] = "weekend_activity"


class SubjectMasteryRequirement(_Requirement):
    """`value` quizzes in `subject` scoring at least `min_score` percent"""

    type: Literal["subject_mastery"] = "subject_mastery"
    subject: str = Field(min_length=1, max_length=50)
    min_score: float = Field(ge=0, le=100)

    def matches_subject(self, subject: str | None) -> bool:
        return subject is not None and subject.casefold() == self.subject.casefold()


class TimeBasedRequirement(_Requirement):
    """`value` quizzes submitted during [start_hour, end_hour) local time.
    The window wraps past midnight when start_hour > end_hour.
    """

    type: Literal["time_based"] = "time_based"
    start_hour: int = Field(ge=0, le=23)
    end_hour: int = Field(ge=0, le=24)

    @model_validator(mode="after")
    def check_window(self):
        if self.start_hour == self.end_hour:
            raise ValueError("start_hour and end_hour must differ")
        return self

    def contains_hour(self, hour: int) -> bool:
        if self.start_hour > self.end_hour:
            return hour >= self.start_hour or hour < self.end_hour
        return self.start_hour <= hour < self.end_hour


class SpeedCompletionRequirement(_Requirement):
    """One-shot: a single quiz finished within `value` seconds scoring exactly `min_score`"""

    type: Literal["speed_completion"] = "speed_completion"
    min_score: float = Field(ge=0, le=100)


Requirement = Annotated[
    Union[
        QuizCountRequirement,
        PerfectScoreRequirement,
        LessonCountRequirement,
        LoginStreakRequirement,
        ForumPostsRequirement,
        ForumRepliesRequirement,
        MentorSessionsRequirement,
        SubjectMasteryRequirement,
        TimeBasedRequirement,
        WeekendActivityRequirement,
        SpeedCompletionRequirement,
    ],
    Field(discriminator="type"),
]

REQUIREMENT_TYPES = frozenset(
    variant.model_fields["type"].default for variant in get_args(get_args(Requirement)[0])
)


class UnknownRequirement(BaseModel):
    """Requirement tag this build does not know how to evaluate"""

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str

    @model_validator(mode="after")
    def check_not_known(self):
        # a known tag that failed validation must not be downgraded to unknown
        if self.type in REQUIREMENT_TYPES:
            raise ValueError(f"Invalid {self.type} requirement")
        return self


AnyRequirement = Annotated[
    Union[Requirement, UnknownRequirement], Field(union_mode="left_to_right")
]


class BadgeSchema(BaseModel):
    """Validates a badge entry of badges.yaml"""

    model_config = ConfigDict(frozen=True)

    name: str = Field(min_length=2, max_length=100)
    description: str = Field(min_length=5)
    type: BadgeType
    rarity: BadgeRarity = "common"
    icon: str = Field(min_length=1, max_length=16)
    points: int = Field(ge=0, le=1000, default=10)
    requirement: AnyRequirement

    @property
    def requirement_type(self) -> str:
        return self.requirement.type


class BadgeDefinition(BadgeSchema):
    """A persisted badge definition, immutable once loaded"""

    id: int

    @classmethod
    def from_row(cls, row: Any) -> "BadgeDefinition":
        """Build a snapshot from a `badges` table row"""
        return cls(
            id=row.id,
            name=row.name,
            description=row.description,
            type=row.type,
            rarity=row.rarity,
            icon=row.icon,
            points=row.points,
            requirement=json.loads(row.requirement),
        )


class CatalogFile(BaseModel):
    """Top level structure of badges.yaml"""

    version: str = Field(min_length=1)
    badges: list[BadgeSchema] = Field(min_length=1)

    @model_validator(mode="after")
    def check_unique_names(self):
        seen: set[str] = set()
        for badge in self.badges:
            if badge.name in seen:
                raise ValueError(f"Duplicate badge name: {badge.name}")
            seen.add(badge.name)
        return self


class StudentBadgeView(BaseModel):
    """A catalog badge joined with one student's progress"""

    id: int
    name: str
    description: str
    type: BadgeType
    rarity: BadgeRarity
    icon: str
    points: int
    requirement: dict[str, Any]
    progress: int = 0
    earned_at: datetime | None = None
    is_earned: bool = False
