from .core import authenticate, get_current_profile, get_current_user
from .decorators import login_required
from .users import UserExistsError, UserManager

create_user = UserManager.create_user
get_user = UserManager.get_user

__all__ = [
    "authenticate",
    "create_user",
    "get_current_profile",
    "get_current_user",
    "get_user",
    "login_required",
    "UserExistsError",
]
