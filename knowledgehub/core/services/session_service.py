"""Session store: authentication lifecycle and its persisted copy."""

import json
import logging

from ..domain import Notification, User
from ..domain.exceptions import (
    HttpError,
    KnowledgeHubError,
    NetworkError,
    NotAuthenticatedError,
    StorageError,
)
from ..ports.api_port import KnowledgeApiPort
from ..ports.notifier_port import NotifierPort
from ..ports.storage_port import TOKEN_KEY, USER_KEY, StoragePort

logger = logging.getLogger(__name__)

NETWORK_ERROR_MESSAGE = "Network error. Please try again."


class SessionStore:
    """Holds the authenticated user and keeps storage in step with memory.

    The token and user are persisted under two independent keys. After
    every public operation either both keys hold a valid session and
    ``user``/``token`` are set, or both keys are gone and the store is
    unauthenticated.

    Services that need auth context receive this object explicitly; there
    is no module-level session.
    """

    def __init__(
        self,
        api: KnowledgeApiPort,
        storage: StoragePort,
        notifier: NotifierPort,
    ) -> None:
        self.api = api
        self.storage = storage
        self.notifier = notifier
        self.user: User | None = None
        self.token: str | None = None
        self.loading = True

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None and self.token is not None

    def require_authenticated(self) -> User:
        """Return the current user or raise ``NotAuthenticatedError``."""
        if not self.is_authenticated or self.user is None:
            raise NotAuthenticatedError("Please log in to continue")
        return self.user

    def bootstrap(self) -> None:
        """Restore the session persisted by a previous run.

        A missing key or an unreadable user record clears both keys and
        leaves the store unauthenticated. ``loading`` is False afterwards
        whatever the outcome.
        """
        try:
            token = self.storage.get(TOKEN_KEY)
            raw_user = self.storage.get(USER_KEY)
            if token and raw_user:
                try:
                    user = User.from_dict(json.loads(raw_user))
                except (ValueError, KeyError, TypeError, AttributeError) as e:
                    logger.warning(f"Discarding unreadable persisted session: {e}")
                    self._clear_persisted()
                else:
                    self.token, self.user = token, user
                    logger.info(f"Restored session for {user.email}")
            elif token or raw_user:
                logger.warning("Discarding incomplete persisted session")
                self._clear_persisted()
        except StorageError as e:
            logger.error(f"Session bootstrap failed [{e.error_code}]: {e.message}")
            self.token, self.user = None, None
        finally:
            self.loading = False

    def login(self, email: str, password: str) -> bool:
        """Authenticate and persist the session.

        Returns:
            True on success. On failure the previous session is untouched,
            a notification is shown and False is returned.
        """
        try:
            token, user = self.api.login(email, password)
            self.storage.set(TOKEN_KEY, token)
            self.storage.set(USER_KEY, json.dumps(user.to_dict()))
        except KnowledgeHubError as e:
            logger.error(f"Login failed [{e.error_code}]: {e.message}")
            self._restore_persisted()
            self.notifier.notify(
                Notification.error(self._failure_text(e, "Invalid credentials"), "Login Failed")
            )
            return False

        self.token, self.user = token, user
        logger.info(f"Logged in as {user.email} ({user.role.value})")
        self.notifier.notify(Notification.success("Logged in successfully!"))
        return True

    def register(self, email: str, password: str) -> bool:
        """Create an account. Does not log in."""
        try:
            self.api.register(email, password)
        except KnowledgeHubError as e:
            logger.error(f"Registration failed [{e.error_code}]: {e.message}")
            self.notifier.notify(
                Notification.error(
                    self._failure_text(e, "Unable to create account"), "Registration Failed"
                )
            )
            return False

        logger.info(f"Registered account {email}")
        self.notifier.notify(Notification.success("Account created successfully! Please log in."))
        return True

    def logout(self) -> None:
        """Forget the session in memory and in storage. Never raises."""
        email = self.user.email if self.user else None
        self.token, self.user = None, None
        try:
            self._clear_persisted()
        except StorageError as e:
            logger.error(f"Could not clear persisted session [{e.error_code}]: {e.message}")
        logger.info(f"Logged out {email or '(no session)'}")
        self.notifier.notify(Notification("Logged out", "See you next time!"))

    def _clear_persisted(self) -> None:
        self.storage.remove(TOKEN_KEY)
        self.storage.remove(USER_KEY)

    def _restore_persisted(self) -> None:
        """Put the in-memory session back into storage after a failed write."""
        try:
            if self.is_authenticated and self.user is not None and self.token is not None:
                self.storage.set(TOKEN_KEY, self.token)
                self.storage.set(USER_KEY, json.dumps(self.user.to_dict()))
            else:
                self._clear_persisted()
        except StorageError as e:
            logger.error(f"Could not restore persisted session [{e.error_code}]: {e.message}")

    @staticmethod
    def _failure_text(exc: KnowledgeHubError, default: str) -> str:
        if isinstance(exc, NetworkError):
            return NETWORK_ERROR_MESSAGE
        if isinstance(exc, HttpError) and exc.detail:
            return exc.detail
        return default
