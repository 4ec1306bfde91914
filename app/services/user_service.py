from sqlalchemy.orm import Session
from sqlalchemy.exc import IntegrityError
from typing import Iterable, Optional, List
from app.models.user import User
from app.logger_config import logger


def get_user_by_id(db: Session, user_id: str) -> Optional[User]:
    """Get user by ID."""
    return db.query(User).filter(User.id == user_id).first()


def get_user_by_email(db: Session, email: str) -> Optional[User]:
    """Get user by email."""
    return db.query(User).filter(User.email == email).first()


def get_users_by_ids(db: Session, user_ids: Iterable[str]) -> dict[str, User]:
    """Fetch many users in one query, keyed by id. Unknown ids are absent."""
    ids = set(user_ids)
    if not ids:
        return {}
    return {user.id: user for user in db.query(User).filter(User.id.in_(ids)).all()}


def get_all_users(
    db: Session,
    skip: int = 0,
    limit: int = 100,
    search: Optional[str] = None
) -> tuple[List[User], int]:
    """Get all users with optional filtering."""
    query = db.query(User)

    if search:
        search_term = f"%{search}%"
        query = query.filter(
            (User.name.ilike(search_term)) |
            (User.email.ilike(search_term))
        )

    total = query.count()
    users = query.order_by(User.name).offset(skip).limit(limit).all()

    return users, total


def create_user(db: Session, name: str, email: Optional[str] = None) -> User:
    """Create a new user."""
    if email and get_user_by_email(db, email):
        raise ValueError("User with this email already exists")

    user = User(name=name, email=email)
    db.add(user)

    try:
        db.commit()
        db.refresh(user)
        logger.info(f"User created: {user.id}")
        return user
    except IntegrityError as e:
        db.rollback()
        logger.error(f"Error creating user: {str(e)}")
        raise ValueError("Failed to create user.")
