"""Identity context passed into every engine operation.

Authentication happens upstream; the auth collaborator forwards the caller's
stable account key in a request header. A missing header means anonymous.
"""
from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from eventhub.config import settings


@dataclass(frozen=True)
class Identity:
    user_id: Optional[str] = None

    @property
    def is_anonymous(self) -> bool:
        return self.user_id is None

    def owns(self, key: Optional[str]) -> bool:
        """True when this identity is the given owner key. Anonymous owns nothing."""
        return self.user_id is not None and self.user_id == key


ANONYMOUS = Identity()


def get_identity(request: Request) -> Identity:
    """FastAPI dependency resolving the caller from the identity header."""
    user_id = (request.headers.get(settings.IDENTITY_HEADER) or "").strip()
    return Identity(user_id) if user_id else ANONYMOUS
