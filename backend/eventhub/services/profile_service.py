"""Profile service: registration, updates and account removal."""
import logging
from typing import Any, Mapping, Optional

from sqlalchemy.orm import Session

from eventhub.config import settings
from eventhub.errors import ConstraintViolation, ValidationError
from eventhub.identity import Identity
from eventhub.models.profile import Profile
from eventhub.services import lifecycle, store
from eventhub.services.authorization import EntityKind, Operation, authorize

logger = logging.getLogger(__name__)

# Width of the profiles.id column.
PROFILE_ID_MAX = 36

_UPDATABLE = {
    "full_name": lambda v: lifecycle.required_text("full_name", v, lifecycle.FULL_NAME_MAX),
    "bio": lambda v: lifecycle.optional_text("bio", v, lifecycle.BIO_MAX),
    "location": lambda v: lifecycle.optional_text("location", v, lifecycle.PROFILE_LOCATION_MAX),
    "profile_picture": lambda v: lifecycle.optional_text("profile_picture", v, lifecycle.PICTURE_MAX),
}


def register_identity(
    db: Session,
    identity_id: str,
    metadata: Optional[Mapping[str, Any]] = None,
) -> Profile:
    """Create the Profile for a newly registered account as one atomic unit.

    ``full_name`` comes from the account metadata when present, otherwise the
    configured placeholder is used.
    """
    identity_id = (identity_id or "").strip()
    if not identity_id:
        raise ValidationError("id", "identity id is required")
    if len(identity_id) > PROFILE_ID_MAX:
        raise ValidationError("id", f"identity id must be at most {PROFILE_ID_MAX} characters")

    metadata = metadata or {}
    full_name = lifecycle.optional_text(
        "full_name", metadata.get("full_name"), lifecycle.FULL_NAME_MAX
    ) or settings.DEFAULT_PROFILE_NAME

    if db.get(Profile, identity_id) is not None:
        raise ConstraintViolation("unique_profile", "Identity is already registered", {"id": identity_id})

    profile = Profile(
        id=identity_id,
        full_name=full_name,
        bio=lifecycle.optional_text("bio", metadata.get("bio"), lifecycle.BIO_MAX),
        location=lifecycle.optional_text("location", metadata.get("location"), lifecycle.PROFILE_LOCATION_MAX),
    )
    authorize(Identity(identity_id), EntityKind.profile, Operation.insert, profile)
    db.add(profile)
    store.commit(db, rule="unique_profile")
    db.refresh(profile)
    logger.info("Registered identity %s with profile '%s'", identity_id, full_name)
    return profile


def get_profile(db: Session, profile_id: str) -> Profile:
    """Profiles are readable by anyone."""
    return store.get_or_404(db, Profile, profile_id)


def update_profile(db: Session, identity: Identity, profile_id: str, updates: Mapping[str, Any]) -> Profile:
    """Partial update of the caller's own profile."""
    profile = store.get_or_404(db, Profile, profile_id)
    authorize(identity, EntityKind.profile, Operation.update, profile)

    unknown = set(updates) - set(_UPDATABLE)
    if unknown:
        raise ValidationError(sorted(unknown)[0], "field cannot be updated")
    cleaned = {field: _UPDATABLE[field](value) for field, value in updates.items()}

    for field, value in cleaned.items():
        setattr(profile, field, value)
    store.touch(profile)
    store.commit(db)
    db.refresh(profile)
    logger.info("Updated profile %s", profile_id)
    return profile


def remove_identity(db: Session, identity: Identity) -> None:
    """The account was removed upstream: delete its profile and everything it owns.

    Called by the auth collaborator only; there is no end-user route for it.
    """
    if identity.is_anonymous:
        raise ValidationError("id", "identity id is required")
    profile = store.get_or_404(db, Profile, identity.user_id)
    db.delete(profile)
    store.commit(db)
    logger.info("Removed identity %s and its owned events, RSVPs and reviews", identity.user_id)
