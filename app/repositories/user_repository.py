"""User repository."""
from typing import Optional
from sqlalchemy.orm import Session
from sqlalchemy import func

from app.models.user import User, UserRole


class UserRepository:
    """User data access layer."""
    
    def __init__(self, db: Session):
        self.db = db
    
    def create(self, name: str, email: str, hashed_password: str,
               role: UserRole = UserRole.USER) -> User:
        """Create a new user."""
        user = User(
            name=name,
            email=email.strip().lower(),
            hashed_password=hashed_password,
            role=role
        )
        self.db.add(user)
        self.db.commit()
        self.db.refresh(user)
        return user
    
    def get_by_id(self, user_id: int) -> Optional[User]:
        """Get user by ID."""
        return self.db.query(User).filter(User.id == user_id).first()
    
    def get_by_email(self, email: str) -> Optional[User]:
        """Get user by email (case-insensitive)."""
        return (
            self.db.query(User)
            .filter(func.lower(User.email) == email.strip().lower())
            .first()
        )
