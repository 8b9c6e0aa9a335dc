"""Review API routes."""
import logging

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from eventhub.database import get_db
from eventhub.identity import Identity, get_identity
from eventhub.schemas.review import ReviewOut, ReviewUpdate
from eventhub.services import review_service

logger = logging.getLogger(__name__)
router = APIRouter()


@router.get("/{review_id}", response_model=ReviewOut)
def get_review(review_id: str, db: Session = Depends(get_db)):
    return review_service.get_review(db, review_id)


@router.patch("/{review_id}", response_model=ReviewOut)
def update_review(
    review_id: str,
    payload: ReviewUpdate,
    identity: Identity = Depends(get_identity),
    db: Session = Depends(get_db),
):
    """Edit your own review."""
    return review_service.update_review(db, identity, review_id, payload.model_dump(exclude_unset=True))


@router.delete("/{review_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_review(review_id: str, identity: Identity = Depends(get_identity), db: Session = Depends(get_db)):
    review_service.delete_review(db, identity, review_id)
