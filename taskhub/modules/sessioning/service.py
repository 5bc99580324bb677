from typing import MutableMapping
from uuid import UUID

from taskhub.core.errors import ConflictError, UnauthenticatedError

SessionDoc = MutableMapping[str, object]


class SessionService:
    """Tracks which user, if any, is logged in on an HTTP session."""

    def start(self, session: SessionDoc, user: UUID):
        self.is_logged_out(session)
        session["user"] = str(user)

    def end(self, session: SessionDoc):
        self.is_logged_in(session)
        session.pop("user", None)

    def get_user(self, session: SessionDoc) -> UUID:
        user = session.get("user")
        if user is None:
            raise UnauthenticatedError("Must be logged in!")
        return UUID(str(user))

    def is_logged_in(self, session: SessionDoc):
        if session.get("user") is None:
            raise UnauthenticatedError("Must be logged in!")

    def is_logged_out(self, session: SessionDoc):
        if session.get("user") is not None:
            raise ConflictError("Must be logged out!")
