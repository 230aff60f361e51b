from studysessions.services.session_service import SessionService
from studysessions.services.user_service import UserService

__all__ = ["SessionService", "UserService"]
