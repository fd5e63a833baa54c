#!/usr/bin/env python3
"""Create initial admin user"""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.database import SessionLocal
from app.core.security import get_password_hash
from app.models import User, UserRole
from sqlalchemy import select

ADMIN_EMAIL = os.environ.get("ADMIN_EMAIL", "admin@feedback.local")
ADMIN_PASSWORD = os.environ.get("ADMIN_PASSWORD", "admin12345")


def create_admin_user():
    """Create an initial admin user"""
    db = SessionLocal()
    try:
        existing = db.execute(
            select(User).where(User.email == ADMIN_EMAIL)
        ).scalar_one_or_none()
        
        if existing:
            print("Admin user already exists:")
            print(f"   Email: {existing.email}")
            print(f"   Role: {existing.role.value}")
            print(f"   ID: {existing.id}")
            return existing
        
        admin = User(
            name="Administrator",
            email=ADMIN_EMAIL,
            hashed_password=get_password_hash(ADMIN_PASSWORD),
            role=UserRole.ADMIN,
            is_active=True,
        )
        
        db.add(admin)
        db.commit()
        db.refresh(admin)
        
        print("\nAdmin user created:")
        print(f"   Email: {admin.email}")
        print(f"   Role: {admin.role.value}")
        print(f"   ID: {admin.id}")
        print("\nChange this password after the first login.\n")
        
        return admin
        
    except Exception as e:
        print(f"Error: {str(e)}")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    create_admin_user()
