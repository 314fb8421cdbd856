from shopbot.db.database import get_connection, init_db
from shopbot.db.repositories import (
    add_action_history,
    ensure_user,
    get_action_history,
    get_user,
    update_user_bank,
)

__all__ = [
    "add_action_history",
    "ensure_user",
    "get_action_history",
    "get_connection",
    "get_user",
    "init_db",
    "update_user_bank",
]
