from admin_api.dao.user_dao import UserDAO

__all__ = [
    "UserDAO",
]
