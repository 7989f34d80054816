"""Parcel service for business logic."""

import logging

from fastapi import HTTPException, status
from sqlalchemy import delete, insert, select
from sqlalchemy.orm import Session

from parcelhub.core.authorization import Principal
from parcelhub.core.policies import can_view_parcel
from parcelhub.models.associations import parcel_owners
from parcelhub.models.parcel import Parcel
from parcelhub.models.user import User
from parcelhub.schemas.parcel import ParcelCreate
from parcelhub.services.auth import get_user

logger = logging.getLogger(__name__)


def create_parcel(db: Session, parcel_data: ParcelCreate) -> Parcel:
    """Create a new parcel."""
    db_parcel = Parcel(name=parcel_data.name, address=parcel_data.address)
    db.add(db_parcel)
    db.commit()
    db.refresh(db_parcel)
    return db_parcel


def get_parcels(db: Session, skip: int = 0, limit: int = 100) -> list[Parcel]:
    """Get all parcels with pagination."""
    return db.query(Parcel).order_by(Parcel.id).offset(skip).limit(limit).all()


def find_parcel_by_id(db: Session, parcel_id: int) -> Parcel | None:
    """Get a parcel by ID, or None."""
    return db.query(Parcel).filter(Parcel.id == parcel_id).first()


def get_parcel(db: Session, parcel_id: int) -> Parcel:
    """Get a parcel by ID, raising 404 if it does not exist."""
    db_parcel = find_parcel_by_id(db, parcel_id)
    if not db_parcel:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Parcel not found",
        )
    return db_parcel


def find_parcel_owners(db: Session, parcel_id: int) -> list[User]:
    """Get the users that own a parcel."""
    stmt = (
        select(User)
        .join(parcel_owners, parcel_owners.c.user_id == User.id)
        .where(parcel_owners.c.parcel_id == parcel_id)
        .order_by(User.id)
    )
    return list(db.scalars(stmt).all())


def find_parcel_owner_ids(db: Session, parcel_id: int) -> list[int]:
    """Get the ids of the users that own a parcel."""
    stmt = select(parcel_owners.c.user_id).where(parcel_owners.c.parcel_id == parcel_id)
    return list(db.scalars(stmt).all())


def ensure_can_view_parcel(db: Session, principal: Principal, parcel_id: int) -> Parcel:
    """Return the parcel if the principal may see it; 404 or 401 otherwise."""
    db_parcel = get_parcel(db, parcel_id)
    if not can_view_parcel(principal, find_parcel_owner_ids(db, parcel_id)):
        logger.warning("User %s denied access to parcel %s", principal.id, parcel_id)
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Access denied: You do not have permission to view this parcel.",
        )
    return db_parcel


def add_parcel_owner(db: Session, parcel_id: int, user_id: int) -> None:
    """Associate an owner with a parcel. Adding an existing owner is a no-op."""
    get_parcel(db, parcel_id)
    get_user(db, user_id)

    if user_id in find_parcel_owner_ids(db, parcel_id):
        return
    db.execute(insert(parcel_owners).values(parcel_id=parcel_id, user_id=user_id))
    db.commit()
    logger.info("User %s added as owner of parcel %s", user_id, parcel_id)


def remove_parcel_owner(db: Session, parcel_id: int, user_id: int) -> None:
    """Remove an owner from a parcel."""
    get_parcel(db, parcel_id)
    get_user(db, user_id)

    db.execute(
        delete(parcel_owners).where(
            parcel_owners.c.parcel_id == parcel_id,
            parcel_owners.c.user_id == user_id,
        )
    )
    db.commit()
