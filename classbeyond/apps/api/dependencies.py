"""Shared FastAPI dependencies for the API routes"""

from fastapi import Depends, HTTPException, Request
from sqlalchemy.orm import Session

from classbeyond.badges.processor import BadgeService
from classbeyond.core.data.database import get_db
from classbeyond.core.data.models import User


def get_badge_service(request: Request) -> BadgeService:
    """The service built from the catalog snapshot at startup"""
    service = getattr(request.app.state, "badge_service", None)
    if service is None:
        raise HTTPException(status_code=503, detail="Badge catalog not loaded")
    return service


def get_student(student_id: str, db: Session = Depends(get_db)) -> User:
    student = db.get(User, student_id)
    if student is None:
        raise HTTPException(status_code=404, detail="Student not found")
    return student
