from backend.app.domains.user.models import User
from backend.app.domains.user.repository import UserRepository

__all__ = ["User", "UserRepository"]
