"""Tests for RSVP upsert semantics, ownership and the uniqueness invariant."""
import pytest
from sqlalchemy import func, select

from eventhub.errors import ConstraintViolation, NotFound, Unauthorized, ValidationError
from eventhub.identity import ANONYMOUS
from eventhub.models import RSVP, RSVPStatus
from eventhub.services import rsvp_service, store
from tests.conftest import make_event


def _rsvp_rows(db, event_id):
    return db.scalars(select(RSVP).where(RSVP.event_id == event_id)).all()


class TestUpsert:

    def test_first_submission_inserts(self, db, alice, bob):
        event = make_event(db, alice)
        rsvp = rsvp_service.upsert_rsvp(db, bob, event.id, "going")
        assert rsvp.status == RSVPStatus.going
        assert rsvp.user_id == bob.user_id
        assert rsvp.created_at is not None

    def test_resubmission_updates_single_row(self, db, alice, bob):
        event = make_event(db, alice)
        first = rsvp_service.upsert_rsvp(db, bob, event.id, "going")
        created_at, stamp_1 = first.created_at, first.updated_at

        second = rsvp_service.upsert_rsvp(db, bob, event.id, "maybe")
        stamp_2 = second.updated_at
        third = rsvp_service.upsert_rsvp(db, bob, event.id, "not_going")
        stamp_3 = third.updated_at

        rows = _rsvp_rows(db, event.id)
        assert len(rows) == 1
        assert rows[0].status == RSVPStatus.not_going
        assert rows[0].created_at == created_at
        assert stamp_1 < stamp_2 < stamp_3

    def test_same_status_is_idempotent(self, db, alice, bob):
        event = make_event(db, alice)
        rsvp_service.upsert_rsvp(db, bob, event.id, "maybe")
        rsvp_service.upsert_rsvp(db, bob, event.id, "maybe")
        assert len(_rsvp_rows(db, event.id)) == 1

    def test_invalid_status(self, db, alice, bob):
        event = make_event(db, alice)
        with pytest.raises(ValidationError) as exc_info:
            rsvp_service.upsert_rsvp(db, bob, event.id, "declined")
        assert exc_info.value.field == "status"
        assert _rsvp_rows(db, event.id) == []

    def test_anonymous_cannot_rsvp(self, db, alice):
        event = make_event(db, alice)
        with pytest.raises(Unauthorized):
            rsvp_service.upsert_rsvp(db, ANONYMOUS, event.id, "going")

    def test_private_event_of_someone_else(self, db, alice, bob):
        event = make_event(db, alice, is_public=False)
        with pytest.raises(Unauthorized):
            rsvp_service.upsert_rsvp(db, bob, event.id, "going")
        assert rsvp_service.upsert_rsvp(db, alice, event.id, "going").status == RSVPStatus.going

    def test_unknown_event(self, db, bob):
        with pytest.raises(NotFound):
            rsvp_service.upsert_rsvp(db, bob, "missing", "going")


class TestConcurrentInsert:

    def test_losing_insert_gets_constraint_violation(self, db, alice, bob, monkeypatch):
        """A request that read "no RSVP yet" before another one committed loses."""
        event = make_event(db, alice)
        rsvp_service.upsert_rsvp(db, bob, event.id, "going")

        monkeypatch.setattr(rsvp_service, "find_rsvp", lambda *args: None)
        with pytest.raises(ConstraintViolation) as exc_info:
            rsvp_service.upsert_rsvp(db, bob, event.id, "maybe")
        assert exc_info.value.rule == "unique_rsvp"

        rows = _rsvp_rows(db, event.id)
        assert len(rows) == 1
        assert rows[0].status == RSVPStatus.going

    def test_two_sessions_racing(self, session_factory, db, alice, bob):
        event_id = make_event(db, alice).id
        first, second = session_factory(), session_factory()
        try:
            first.add(RSVP(event_id=event_id, user_id=bob.user_id, status=RSVPStatus.going))
            second.add(RSVP(event_id=event_id, user_id=bob.user_id, status=RSVPStatus.maybe))
            store.commit(first)
            with pytest.raises(ConstraintViolation):
                store.commit(second)
        finally:
            first.close()
            second.close()
        assert db.scalar(select(func.count()).select_from(RSVP)) == 1


class TestMineAndDelete:

    def test_get_my_rsvp(self, db, alice, bob):
        event = make_event(db, alice)
        assert rsvp_service.get_my_rsvp(db, bob, event.id) is None
        rsvp_service.upsert_rsvp(db, bob, event.id, "maybe")
        assert rsvp_service.get_my_rsvp(db, bob, event.id).status == RSVPStatus.maybe
        assert rsvp_service.get_my_rsvp(db, ANONYMOUS, event.id) is None

    def test_delete_own(self, db, alice, bob):
        event = make_event(db, alice)
        rsvp_service.upsert_rsvp(db, bob, event.id, "going")
        rsvp_service.upsert_rsvp(db, alice, event.id, "going")
        rsvp_service.delete_rsvp(db, bob, event.id)
        assert [r.user_id for r in _rsvp_rows(db, event.id)] == [alice.user_id]

    def test_delete_when_none(self, db, alice, bob):
        event = make_event(db, alice)
        with pytest.raises(NotFound):
            rsvp_service.delete_rsvp(db, bob, event.id)
