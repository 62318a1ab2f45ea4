"""
Identity model.

The identity provider is external; the companion only ever reads the
current user's id and email.
"""

from pydantic import BaseModel


class CurrentUser(BaseModel):
    """The signed-in league member."""

    user_id: str
    email: str | None = None

    @property
    def email_prefix(self) -> str:
        if not self.email:
            return ""
        return self.email.split("@", 1)[0]


class NotAuthenticatedError(Exception):
    """Raised when an operation that mutates league state has no signed-in user."""

    def __init__(self, message: str = "No user is signed in"):
        self.message = message
        super().__init__(self.message)


def require_user(user: CurrentUser | None) -> CurrentUser:
    """Return the user, or raise NotAuthenticatedError when there is none."""
    if user is None or not user.user_id:
        raise NotAuthenticatedError()
    return user
