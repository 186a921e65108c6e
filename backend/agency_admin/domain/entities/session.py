"""Auth session value objects — a snapshot of who is signed in."""

from dataclasses import dataclass


@dataclass(frozen=True)
class AuthUser:
    """The user object returned by the hosted auth API."""

    id: str
    email: str


@dataclass(frozen=True)
class AuthSession:
    user: AuthUser
    access_token: str
    refresh_token: str | None = None


@dataclass(frozen=True)
class AuthSnapshot:
    """Immutable view of the auth state handed to subscribers."""

    user: AuthUser | None = None
    role: str | None = None
    loading: bool = False

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None
