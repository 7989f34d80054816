"""Authentication routes."""

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from parcelhub.core.authorization import Principal, route_guard
from parcelhub.core.database import get_db
from parcelhub.schemas.user import LoginRequest, Token, UserResponse
from parcelhub.services.auth import authenticate_user, create_user_token, get_user

router = APIRouter(prefix="/auth", tags=["authentication"])


@router.post("/login", response_model=Token)
def login(
    login_data: LoginRequest,
    _: None = Depends(route_guard("auth.login")),
    db: Session = Depends(get_db),
):
    """Login with RUT and password and receive a JWT access token."""
    user = authenticate_user(db, login_data.rut, login_data.password)
    if not user:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid credentials",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return {"access_token": create_user_token(user), "token_type": "bearer"}


@router.get("/me", response_model=UserResponse)
def read_current_user(
    principal: Principal = Depends(route_guard("auth.me")),
    db: Session = Depends(get_db),
):
    """Get the authenticated user."""
    return get_user(db, principal.id)
