"""Import every model so Base.metadata knows all four tables."""
from eventhub.models.profile import Profile  # noqa: F401
from eventhub.models.event import Event  # noqa: F401
from eventhub.models.rsvp import RSVP, RSVPStatus  # noqa: F401
from eventhub.models.review import Review  # noqa: F401
