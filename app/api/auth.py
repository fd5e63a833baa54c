"""Authentication router."""
from typing import Annotated
from fastapi import APIRouter, Depends
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy.orm import Session

from app.core.database import get_db
from app.services.auth_service import AuthService
from app.schemas.user import Token, UserRegister, UserResponse
from app.api.dependencies import AnyUser

router = APIRouter(prefix="/auth", tags=["Authentication"])


@router.post("/login", response_model=Token)
def login(
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
    db: Annotated[Session, Depends(get_db)]
):
    """
    Login with email and password.
    
    Accepts FormData with:
    - username: user email
    - password: user password
    """
    auth_service = AuthService(db)
    # OAuth2PasswordRequestForm uses "username" field for email
    return auth_service.login(form_data.username, form_data.password)


@router.post("/register", response_model=UserResponse, status_code=201)
def register(
    user_data: UserRegister,
    db: Annotated[Session, Depends(get_db)]
):
    """Create a respondent account."""
    return AuthService(db).register(user_data)


@router.post("/logout")
def logout(
    db: Annotated[Session, Depends(get_db)],
    current_user: AnyUser
):
    """
    Logout current user.
    Increments token_version to invalidate all tokens issued so far.
    """
    current_user.token_version = (current_user.token_version or 1) + 1
    db.add(current_user)
    db.commit()
    return {"message": "Successfully logged out"}


@router.get("/me", response_model=UserResponse)
def get_current_user_info(current_user: AnyUser):
    """
    Get current authenticated user's information.
    
    Requires valid JWT token in Authorization header.
    """
    return current_user
