"""User router (signed-in respondents)."""
from typing import Annotated
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.api.dependencies import AnyUser
from app.schemas.user import UserDashboard, UserOwnResponse
from app.services.user_service import UserService

router = APIRouter(prefix="/users", tags=["Users"])


@router.get("/dashboard", response_model=UserDashboard)
def get_dashboard(
    db: Annotated[Session, Depends(get_db)],
    current_user: AnyUser
):
    """
    Pending and completed active surveys for the current user.
    """
    return UserService(db).get_dashboard(current_user)


@router.get("/responses/survey/{survey_id}", response_model=UserOwnResponse)
def get_my_response(
    survey_id: int,
    db: Annotated[Session, Depends(get_db)],
    current_user: AnyUser
):
    """Current user's answers to one survey."""
    return UserService(db).get_own_response(current_user, survey_id)
