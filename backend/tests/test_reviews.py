"""Tests for review eligibility, uniqueness and author-only edits."""
import pytest
from sqlalchemy import select

from eventhub.errors import (
    ConstraintViolation,
    DuplicateReview,
    IneligibleReview,
    NotFound,
    Unauthorized,
    ValidationError,
)
from eventhub.identity import ANONYMOUS
from eventhub.models import Review
from eventhub.services import review_service
from tests.conftest import hours_from_now, make_event, make_past_event


def _reviews(db, event_id):
    return db.scalars(select(Review).where(Review.event_id == event_id)).all()


class TestSubmit:

    def test_review_after_event_ended(self, db, alice, bob):
        event = make_past_event(db, alice)
        review = review_service.submit_review(db, bob, event.id, 4, "  Well organised  ")
        assert review.rating == 4
        assert review.comment == "Well organised"
        assert review.user_id == bob.user_id

    def test_upcoming_event_is_ineligible(self, db, alice, bob):
        event = make_event(db, alice)
        with pytest.raises(IneligibleReview):
            review_service.submit_review(db, bob, event.id, 5, "Can't wait")
        assert _reviews(db, event.id) == []

    def test_running_event_is_ineligible(self, db, alice, bob):
        event = make_event(db, alice, start=hours_from_now(-1), end=hours_from_now(1))
        with pytest.raises(IneligibleReview):
            review_service.submit_review(db, bob, event.id, 5, "So far so good")

    def test_second_review_rejected(self, db, alice, bob):
        event = make_past_event(db, alice)
        review_service.submit_review(db, bob, event.id, 4, "Good")
        with pytest.raises(DuplicateReview):
            review_service.submit_review(db, bob, event.id, 1, "Changed my mind")
        rows = _reviews(db, event.id)
        assert [(r.rating, r.comment) for r in rows] == [(4, "Good")]

    def test_duplicate_is_a_constraint_violation(self, db, alice, bob):
        event = make_past_event(db, alice)
        review_service.submit_review(db, bob, event.id, 4, "Good")
        with pytest.raises(ConstraintViolation):
            review_service.submit_review(db, bob, event.id, 4, "Good")

    def test_racing_insert_resolves_to_one_row(self, db, alice, bob, monkeypatch):
        event = make_past_event(db, alice)
        review_service.submit_review(db, bob, event.id, 4, "Good")

        monkeypatch.setattr(review_service, "find_review", lambda *args: None)
        with pytest.raises(DuplicateReview):
            review_service.submit_review(db, bob, event.id, 2, "Late duplicate")
        assert len(_reviews(db, event.id)) == 1

    @pytest.mark.parametrize("rating", [0, 6, -1, 3.5, "4", True])
    def test_rating_out_of_range(self, db, alice, bob, rating):
        event = make_past_event(db, alice)
        with pytest.raises(ValidationError) as exc_info:
            review_service.submit_review(db, bob, event.id, rating, "Fine")
        assert exc_info.value.field == "rating"

    @pytest.mark.parametrize("rating", [1, 5])
    def test_rating_bounds_inclusive(self, db, alice, bob, rating):
        event = make_past_event(db, alice)
        assert review_service.submit_review(db, bob, event.id, rating, "Ok").rating == rating

    def test_comment_required(self, db, alice, bob):
        event = make_past_event(db, alice)
        with pytest.raises(ValidationError) as exc_info:
            review_service.submit_review(db, bob, event.id, 3, "   ")
        assert exc_info.value.field == "comment"

    def test_anonymous_cannot_review(self, db, alice):
        event = make_past_event(db, alice)
        with pytest.raises(Unauthorized):
            review_service.submit_review(db, ANONYMOUS, event.id, 3, "Nice")

    def test_private_event_hidden(self, db, alice, bob):
        event = make_past_event(db, alice, is_public=False)
        with pytest.raises(Unauthorized):
            review_service.submit_review(db, bob, event.id, 3, "Sneaky")


class TestEditAndDelete:

    def test_author_can_edit(self, db, alice, bob):
        event = make_past_event(db, alice)
        review = review_service.submit_review(db, bob, event.id, 2, "Meh")
        before = review.updated_at
        edited = review_service.update_review(db, bob, review.id, {"rating": 3, "comment": "Better on reflection"})
        assert (edited.rating, edited.comment) == (3, "Better on reflection")
        assert edited.updated_at > before

    def test_other_user_cannot_edit(self, db, alice, bob):
        event = make_past_event(db, alice)
        review = review_service.submit_review(db, bob, event.id, 2, "Meh")
        with pytest.raises(Unauthorized):
            review_service.update_review(db, alice, review.id, {"rating": 5})
        with pytest.raises(Unauthorized):
            review_service.delete_review(db, alice, review.id)

    def test_edit_validates_rating(self, db, alice, bob):
        event = make_past_event(db, alice)
        review = review_service.submit_review(db, bob, event.id, 2, "Meh")
        with pytest.raises(ValidationError):
            review_service.update_review(db, bob, review.id, {"rating": 9})

    def test_author_can_delete(self, db, alice, bob):
        event = make_past_event(db, alice)
        review = review_service.submit_review(db, bob, event.id, 2, "Meh")
        review_service.delete_review(db, bob, review.id)
        assert _reviews(db, event.id) == []

    def test_missing_review(self, db, bob):
        with pytest.raises(NotFound):
            review_service.update_review(db, bob, "missing", {"rating": 3})
