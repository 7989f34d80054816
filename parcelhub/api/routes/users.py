"""User administration routes."""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from parcelhub.core.authorization import Principal, route_guard
from parcelhub.core.database import get_db
from parcelhub.schemas.user import UserCreate, UserResponse
from parcelhub.services import auth as auth_service

router = APIRouter(prefix="/users", tags=["users"])


@router.post("", response_model=UserResponse, status_code=status.HTTP_201_CREATED)
def register_user(
    user_data: UserCreate,
    _: Principal = Depends(route_guard("users.create")),
    db: Session = Depends(get_db),
):
    """Register a new user with a role."""
    return auth_service.create_user(db, user_data)


@router.get("", response_model=list[UserResponse])
def list_users(
    skip: int = 0,
    limit: int = 100,
    _: Principal = Depends(route_guard("users.list")),
    db: Session = Depends(get_db),
):
    """List users."""
    return auth_service.get_users(db, skip, limit)


@router.get("/{user_id}", response_model=UserResponse)
def get_user(
    user_id: int,
    _: Principal = Depends(route_guard("users.get")),
    db: Session = Depends(get_db),
):
    """Get a user by ID."""
    return auth_service.get_user(db, user_id)
