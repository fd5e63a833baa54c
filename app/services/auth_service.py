"""Authentication service."""
from datetime import timedelta
from typing import Optional
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from app.core.security import verify_password, create_access_token, get_password_hash
from app.core.config import settings
from app.repositories.user_repository import UserRepository
from app.models.user import User, UserRole
from app.schemas.user import Token, UserRegister


class AuthService:
    """Authentication business logic."""
    
    def __init__(self, db: Session):
        self.db = db
        self.user_repo = UserRepository(db)
    
    def authenticate_user(self, email: str, password: str) -> Optional[User]:
        """
        Authenticate user by email and password.
        
        Returns:
            User if authentication successful, None otherwise
        """
        user = self.user_repo.get_by_email(email)
        
        if not user:
            return None
        
        if not user.is_active:
            return None
        
        if not verify_password(password, user.hashed_password):
            return None
        
        return user
    
    def login(self, email: str, password: str) -> Token:
        """
        Login user and return a JWT access token.
        
        Raises:
            HTTPException: If authentication fails
        """
        user = self.authenticate_user(email, password)
        
        if not user:
            raise HTTPException(
                status_code=status.HTTP_401_UNAUTHORIZED,
                detail="Incorrect email or password",
                headers={"WWW-Authenticate": "Bearer"},
            )
        
        access_token = create_access_token(
            data={"sub": str(user.id), "role": user.role.value, "ver": user.token_version},
            expires_delta=timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
        )
        return Token(access_token=access_token)
    
    def register(self, user_data: UserRegister) -> User:
        """
        Create a respondent account.
        
        Raises:
            HTTPException: If email already exists
        """
        if self.user_repo.get_by_email(user_data.email):
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail="Email already registered"
            )
        
        return self.user_repo.create(
            name=user_data.name.strip(),
            email=user_data.email,
            hashed_password=get_password_hash(user_data.password),
            role=UserRole.USER
        )
