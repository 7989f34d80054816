"""Authentication service: password hashing, JWT tokens and user lookup."""

import logging
from datetime import UTC, datetime, timedelta

import bcrypt
import jwt
from fastapi import HTTPException, status
from sqlalchemy.orm import Session

from parcelhub.core.config import settings
from parcelhub.models.enums import Role
from parcelhub.models.user import User
from parcelhub.schemas.user import UserCreate

logger = logging.getLogger(__name__)

CREDENTIALS_EXCEPTION_DETAIL = "Could not validate credentials"


def get_password_hash(password: str) -> str:
    """Hash a password with bcrypt."""
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Check a plain password against a bcrypt hash."""
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Malformed hash stored for the user
        return False


def create_access_token(data: dict, expires_delta: timedelta | None = None) -> str:
    """Create a signed JWT carrying ``data`` plus an expiry claim."""
    to_encode = data.copy()
    expire = datetime.now(UTC) + (
        expires_delta or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    )
    to_encode["exp"] = expire
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_user_token(user: User, expires_delta: timedelta | None = None) -> str:
    """Create the access token for a user: ``sub`` is the user id, plus the role."""
    return create_access_token(
        data={"sub": str(user.id), "role": Role(user.role).value},
        expires_delta=expires_delta,
    )


def decode_token(token: str) -> dict:
    """
    Decode and validate a JWT.

    Returns the claims. Raises a 401 HTTPException when the signature is bad,
    the token has expired, or the ``sub``/``role`` claims are missing.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=CREDENTIALS_EXCEPTION_DETAIL,
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except jwt.PyJWTError as exc:
        logger.info("Rejected access token: %s", exc)
        raise credentials_exception from exc

    if payload.get("sub") is None or payload.get("role") is None:
        raise credentials_exception
    return payload


def get_user_by_rut(db: Session, rut: str) -> User | None:
    """Get a user by RUT."""
    return db.query(User).filter(User.rut == rut).first()


def get_user_by_email(db: Session, email: str) -> User | None:
    """Get a user by email."""
    return db.query(User).filter(User.email == email).first()


def authenticate_user(db: Session, rut: str, password: str) -> User | None:
    """Return the user if the RUT/password pair is valid and the user is active."""
    user = get_user_by_rut(db, rut)
    if not user or not user.is_active:
        return None
    if not verify_password(password, user.hashed_password):
        return None
    return user


def create_user(db: Session, user_data: UserCreate) -> User:
    """Register a new user."""
    if get_user_by_rut(db, user_data.rut):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="RUT already registered",
        )
    if get_user_by_email(db, user_data.email):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Email already registered",
        )

    db_user = User(
        rut=user_data.rut,
        name=user_data.name,
        email=user_data.email,
        hashed_password=get_password_hash(user_data.password),
        role=user_data.role,
    )
    db.add(db_user)
    db.commit()
    db.refresh(db_user)
    logger.info("Registered user %s with role %s", db_user.id, Role(db_user.role).value)
    return db_user


def get_users(db: Session, skip: int = 0, limit: int = 100) -> list[User]:
    """Get all users with pagination."""
    return db.query(User).order_by(User.id).offset(skip).limit(limit).all()


def get_user(db: Session, user_id: int) -> User:
    """Get a user by ID."""
    user = db.query(User).filter(User.id == user_id).first()
    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="User not found",
        )
    return user
