from todoflow.models.refresh_token import RefreshToken
from todoflow.models.todo import Todo
from todoflow.models.user import User

__all__ = [
    "RefreshToken",
    "Todo",
    "User",
]
