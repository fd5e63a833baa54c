#!/usr/bin/env python3
"""Create all tables for the configured database."""
import sys
import os

# Add parent directory to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from app.core.database import Base, engine
import app.models  # noqa: F401  registers the models on Base


def init_db():
    """Create missing tables; existing tables are left untouched."""
    Base.metadata.create_all(bind=engine)
    print(f"Tables ready: {', '.join(sorted(Base.metadata.tables))}")


if __name__ == "__main__":
    init_db()
