from fastapi import APIRouter, Depends, HTTPException, status, Query
from sqlalchemy.orm import Session
from typing import Optional
from app.core.dependencies import get_db
from app.services.user_service import (
    get_user_by_id,
    get_all_users,
    create_user,
)
from app.schemas.user import (
    UserCreate,
    UserResponse,
    UserListResponse,
)
from app.logger_config import logger

router = APIRouter()


@router.get("", response_model=UserListResponse)
def get_users(
    skip: int = Query(0, ge=0),
    limit: int = Query(100, ge=1, le=100),
    search: Optional[str] = Query(None),
    db: Session = Depends(get_db)
):
    users, total = get_all_users(db, skip=skip, limit=limit, search=search)
    return UserListResponse(
        total=total,
        users=[UserResponse.model_validate(user) for user in users]
    )


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: str,
    db: Session = Depends(get_db)
):
    user = get_user_by_id(db, user_id)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found"
        )
    return UserResponse.model_validate(user)


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def create_user_route(
    user_data: UserCreate,
    db: Session = Depends(get_db)
):
    """
    Create a new user.
    """
    try:
        user = create_user(db=db, name=user_data.name, email=user_data.email)
        return UserResponse.model_validate(user)
    except ValueError as e:
        logger.warning(f"User creation rejected: {str(e)}")
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=str(e)
        )
