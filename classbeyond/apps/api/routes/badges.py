"""Badge API Routes"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query
from pydantic import BaseModel
from sqlalchemy.orm import Session

from classbeyond.apps.api.dependencies import get_badge_service, get_student
from classbeyond.badges.processor import BadgeService
from classbeyond.badges.schemas import StudentBadgeView
from classbeyond.core.data.database import get_db
from classbeyond.core.data.models import User
from classbeyond.core.data.repositories import BadgeRepository, StudentBadgeRepository

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1", tags=["badges"])


class BadgeItem(BaseModel):
    """Badge catalog item model"""

    id: int
    name: str
    description: str
    type: str
    rarity: str
    icon: str
    points: int
    requirement: dict


class StudentBadgesResponse(BaseModel):
    """Every badge with the student's progress"""

    student_id: str
    earned_count: int
    total_points: int
    badges: list[StudentBadgeView]


@router.get("/badges", response_model=list[BadgeItem])
def list_badges(
    badge_type: str | None = Query(None, alias="type"),
    rarity: str | None = Query(None),
    db: Session = Depends(get_db),
):
    """List the badge catalog"""
    badges = BadgeRepository(db).list_badges(badge_type=badge_type, rarity=rarity)
    return [BadgeItem(**badge.to_dict()) for badge in badges]


@router.get("/badges/{name}", response_model=BadgeItem)
def get_badge(name: str, db: Session = Depends(get_db)):
    """Get one badge definition by name"""
    badge = BadgeRepository(db).get_by_name(name)
    if not badge:
        raise HTTPException(status_code=404, detail="Badge not found")
    return BadgeItem(**badge.to_dict())


@router.get("/students/{student_id}/badges", response_model=StudentBadgesResponse)
def get_student_badges(
    student: User = Depends(get_student),
    service: BadgeService = Depends(get_badge_service),
    db: Session = Depends(get_db),
):
    """All badges with the student's progress, unearned ones included"""
    badges = service.get_student_badges(db, student.id)
    return StudentBadgesResponse(
        student_id=student.id,
        earned_count=sum(1 for badge in badges if badge.is_earned),
        total_points=StudentBadgeRepository(db).total_points(student.id),
        badges=badges,
    )
