"""Authorization evaluator.

Fixed per-entity rules mapping (identity, entity kind, operation, snapshot) to
allow/deny. Everything here is pure so the rule table can be tested without a
database. Snapshots may be ORM rows or plain mappings; INSERT checks run on the
submitted values before a row exists.
"""
import enum
from typing import Any, Mapping

from eventhub.errors import Unauthorized
from eventhub.identity import Identity


class EntityKind(str, enum.Enum):
    profile = "Profile"
    event = "Event"
    rsvp = "RSVP"
    review = "Review"


class Operation(str, enum.Enum):
    select = "SELECT"
    insert = "INSERT"
    update = "UPDATE"
    delete = "DELETE"


def _field(snapshot: Any, name: str) -> Any:
    if isinstance(snapshot, Mapping):
        return snapshot.get(name)
    return getattr(snapshot, name, None)


def _profile_rule(identity: Identity, operation: Operation, snapshot: Any) -> bool:
    if operation == Operation.select:
        return True
    if operation in (Operation.insert, Operation.update):
        return identity.owns(_field(snapshot, "id"))
    # Profiles only disappear through account removal.
    return False


def _event_rule(identity: Identity, operation: Operation, snapshot: Any) -> bool:
    organizer_id = _field(snapshot, "organizer_id")
    if operation == Operation.select:
        return bool(_field(snapshot, "is_public")) or identity.owns(organizer_id)
    return identity.owns(organizer_id)


def _authored_rule(identity: Identity, operation: Operation, snapshot: Any) -> bool:
    if operation == Operation.select:
        return True
    return identity.owns(_field(snapshot, "user_id"))


_RULES = {
    EntityKind.profile: _profile_rule,
    EntityKind.event: _event_rule,
    EntityKind.rsvp: _authored_rule,
    EntityKind.review: _authored_rule,
}


def can_perform(identity: Identity, kind: EntityKind, operation: Operation, snapshot: Any) -> bool:
    """Return True when ``identity`` may perform ``operation`` on ``snapshot``."""
    return _RULES[kind](identity, operation, snapshot)


def authorize(identity: Identity, kind: EntityKind, operation: Operation, snapshot: Any) -> None:
    """Raise Unauthorized unless ``can_perform`` allows the operation."""
    if not can_perform(identity, kind, operation, snapshot):
        raise Unauthorized(kind.value, operation.value, _field(snapshot, "id"))
