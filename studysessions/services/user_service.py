"""User lookups for inviting participants."""

from studysessions.domain.errors import UserNotFoundError
from studysessions.domain.value_objects import UserRef
from studysessions.stores.interfaces import UserStore

SEARCH_LIMIT = 10


class UserService:
    """Service for user directory operations."""

    def __init__(self, store: UserStore) -> None:
        self._store = store

    def list_users(self) -> list[UserRef]:
        return self._store.list_users()

    def get_user(self, user_id: str) -> UserRef:
        """Return a user by ID.

        Raises:
            UserNotFoundError: If the ID is malformed or the user does not exist.
        """
        try:
            parsed = int(user_id)
        except ValueError:
            raise UserNotFoundError() from None

        user = self._store.get_user(parsed)
        if user is None:
            raise UserNotFoundError()
        return user

    def search_users(self, email_fragment: str) -> list[UserRef]:
        fragment = email_fragment.strip()
        if not fragment:
            return []
        return self._store.search_users(fragment, limit=SEARCH_LIMIT)
