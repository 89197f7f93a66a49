"""Session-scoped identity used when no hosted auth provider is configured."""
from __future__ import annotations

from typing import Any, MutableMapping, Optional, Protocol
from uuid import NAMESPACE_URL, uuid5

from src.core.entities import CurrentUser, UserRole
from src.utils.logger import logger

_SESSION_KEY = "streetwise_current_user"


class AuthProvider(Protocol):
    def current_user(self) -> Optional[CurrentUser]:
        ...


class SessionAuthProvider:
    """Keep the signed-in user in a mutable session mapping.

    Streamlit's ``st.session_state`` satisfies the mapping interface. User ids are
    derived from the email address so the same person keeps the same id across
    sessions.
    """

    def __init__(self, session: MutableMapping[str, Any]) -> None:
        self._session = session

    def current_user(self) -> Optional[CurrentUser]:
        user = self._session.get(_SESSION_KEY)
        return user if isinstance(user, CurrentUser) else None

    def sign_in(self, email: str, display_name: Optional[str] = None) -> CurrentUser:
        normalized = email.strip().lower()
        if "@" not in normalized:
            raise ValueError("A valid email address is required to sign in.")

        user = CurrentUser(
            id=str(uuid5(NAMESPACE_URL, f"mailto:{normalized}")),
            email=normalized,
            display_name=(display_name or "").strip() or None,
            role=UserRole.USER,
        )
        self._session[_SESSION_KEY] = user
        logger.info("Signed in {}", normalized)
        return user

    def sign_out(self) -> None:
        if self._session.pop(_SESSION_KEY, None) is not None:
            logger.info("Signed out current user")


__all__ = ["AuthProvider", "SessionAuthProvider"]
