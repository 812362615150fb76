"""Profile store and authentication context.

``AuthContext`` is an explicit object: construct it over the shared
storage backend plus a per-device store, and it restores whatever
session the device holds. Pages keep one instance per browser session
and pass it to whatever needs the current user.

Login is passwordless. An unknown email is registered on the spot.
"""

import asyncio
import logging

from pydantic import ValidationError

from fitboost import chat_store
from fitboost.config import Settings, settings as default_settings
from fitboost.models import UserProfile, new_id
from fitboost.storage import (
    PROFILE_PREFIX,
    SESSION_KEY,
    LocalStorage,
    MemoryStorage,
    profile_key,
)

logger = logging.getLogger(__name__)

# Fields a profile update may never touch.
_PROTECTED_FIELDS = {"id", "email", "is_admin"}


class InvalidEmailError(ValueError):
    """Raised when the login form holds an unusable email.

    ``str(exc)`` is an i18n key (``login_error_empty`` or ``login_error_invalid``).
    """


def normalise_email(email: str) -> str:
    """Strip and lower-case *email* so one address maps to one profile."""
    return email.strip().lower()


def validate_email(email: str) -> str:
    """Return the normalised email or raise ``InvalidEmailError``."""
    cleaned = normalise_email(email)
    if not cleaned:
        raise InvalidEmailError("login_error_empty")
    if "@" not in cleaned:
        raise InvalidEmailError("login_error_invalid")
    return cleaned


def display_name_from_email(email: str) -> str:
    """Derive a default display name from the local part, first letter capitalised."""
    local_part = email.split("@")[0]
    return local_part[:1].upper() + local_part[1:]


class AuthContext:
    """Owns ``UserProfile`` records and one device's session pointer.

    Profiles and chat histories live in *storage*, which may be shared by
    every visitor. The session pointer lives in *device*, which belongs to
    a single browser session; it defaults to a private in-memory store.
    """

    def __init__(
        self,
        storage: LocalStorage,
        settings: Settings | None = None,
        device: LocalStorage | None = None,
    ) -> None:
        self._storage = storage
        self._device = device if device is not None else MemoryStorage()
        self._settings = settings or default_settings
        self._user: UserProfile | None = None
        self._restore_session()

    # ── Session state ─────────────────────────────────────────────────────────

    @property
    def user(self) -> UserProfile | None:
        return self._user

    @property
    def is_authenticated(self) -> bool:
        return self._user is not None

    def is_admin_email(self, email: str) -> bool:
        return normalise_email(email) == normalise_email(self._settings.admin_email)

    def _restore_session(self) -> None:
        """Load the session pointer, clearing it when it is unusable."""
        raw = self._device.get_item(SESSION_KEY)
        if raw is None:
            return
        try:
            pointer = UserProfile.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Failed to parse session user, clearing it: %s", exc)
            self._device.remove_item(SESSION_KEY)
            return

        persisted = self._load_profile(pointer.email)
        if persisted is None:
            logger.warning("Session points at missing profile %s, clearing it.", pointer.email)
            self._device.remove_item(SESSION_KEY)
            return
        self._user = persisted

    def _load_profile(self, email: str) -> UserProfile | None:
        """Read the persisted profile for *email*. Corrupt records count as absent."""
        raw = self._storage.get_item(profile_key(email))
        if raw is None:
            return None
        try:
            return UserProfile.model_validate_json(raw)
        except ValidationError as exc:
            logger.warning("Corrupted profile record for %s: %s", email, exc)
            return None

    def _persist(self, profile: UserProfile) -> None:
        """Write *profile* to both the session pointer and its by-email key."""
        payload = profile.model_dump_json()
        self._device.set_item(SESSION_KEY, payload)
        self._storage.set_item(profile_key(profile.email), payload)
        self._user = profile

    # ── Operations ────────────────────────────────────────────────────────────

    async def login(self, email: str) -> UserProfile:
        """Sign in by email, auto-registering unknown addresses.

        Args:
            email: Address typed into the login form.

        Returns:
            The active ``UserProfile``.

        Raises:
            InvalidEmailError: If the email is empty or lacks an ``@``.
        """
        email = validate_email(email)

        # Mimic a network-backed sign-in.
        await asyncio.sleep(self._settings.login_delay_seconds)

        profile = self._load_profile(email)
        if profile is None:
            logger.info("New user, auto-registering: %s", email)
            profile = UserProfile(
                id=new_id(),
                email=email,
                name=display_name_from_email(email),
                onboarded=False,
                is_admin=self.is_admin_email(email),
            )
        else:
            logger.info("Existing user found: %s", email)

        # The stored flag is never trusted.
        is_admin = self.is_admin_email(email)
        if profile.is_admin != is_admin:
            logger.warning("Correcting admin flag for %s to %s.", email, is_admin)
            profile = profile.model_copy(update={"is_admin": is_admin})

        self._persist(profile)
        return profile

    def logout(self) -> None:
        """Clear the session pointer. Profile data stays in storage."""
        self._user = None
        self._device.remove_item(SESSION_KEY)

    def update_profile(self, **fields: object) -> UserProfile | None:
        """Merge *fields* into the current profile and persist it.

        Returns:
            The updated profile, or ``None`` when nobody is signed in.

        Raises:
            ValueError: If a field is unknown or protected.
            pydantic.ValidationError: If a value does not fit the schema.
        """
        if self._user is None:
            return None

        unknown = set(fields) - set(UserProfile.model_fields)
        if unknown:
            raise ValueError(f"Unknown profile field(s): {', '.join(sorted(unknown))}")
        protected = set(fields) & _PROTECTED_FIELDS
        if protected:
            raise ValueError(f"Profile field(s) cannot be changed: {', '.join(sorted(protected))}")

        updated = UserProfile.model_validate({**self._user.model_dump(), **fields})
        self._persist(updated)
        return updated

    # ── Admin ─────────────────────────────────────────────────────────────────

    def get_all_users(self) -> list[UserProfile]:
        """Return every persisted profile, skipping malformed records."""
        users: list[UserProfile] = []
        for key in self._storage.keys():
            if not key.startswith(PROFILE_PREFIX):
                continue
            raw = self._storage.get_item(key)
            if raw is None:
                continue
            try:
                users.append(UserProfile.model_validate_json(raw))
            except ValidationError as exc:
                logger.warning("Error parsing user data under %s: %s", key, exc)
        return users

    def delete_user(self, email: str) -> bool:
        """Remove a profile together with both of its chat-history partitions.

        Args:
            email: Address of the user to remove.

        Returns:
            ``True`` if the deletion ran, ``False`` if it was refused.
        """
        email = normalise_email(email)
        if self.is_admin_email(email):
            logger.warning("Attempted to delete admin.")
            return False

        self._storage.remove_item(profile_key(email))
        chat_store.delete_user_histories(self._storage, email)

        if self._user is not None and self._user.email == email:
            self.logout()
        return True
