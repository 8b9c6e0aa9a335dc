"""Profile API routes."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.identity import Identity, get_identity
from eventhub.schemas.profile import ProfileOut, ProfileRegister, ProfileUpdate
from eventhub.services import profile_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.post("/register", response_model=ProfileOut, status_code=status.HTTP_201_CREATED)
def register(
    payload: ProfileRegister,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Called by the auth collaborator once a new account exists."""
    return profile_service.register_identity(
        db, identity.user_id or "", payload.model_dump(exclude_none=True)
    )


@router.get("/{profile_id}", response_model=ProfileOut)
def get_profile(profile_id: str, db: Session = Depends(get_db)):
    return profile_service.get_profile(db, profile_id)


@router.patch("/{profile_id}", response_model=ProfileOut)
def update_profile(
    profile_id: str,
    payload: ProfileUpdate,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Update your own profile (partial update)."""
    return profile_service.update_profile(
        db, identity, profile_id, payload.model_dump(exclude_unset=True)
    )
