"""Role definitions and authorization."""
from enum import Enum
from functools import wraps
from typing import Any, Callable, Optional

from betting_table.config import config
from betting_table.game.errors import AuthorizationError


class Role(str, Enum):
    """Player roles."""
    PLAYER = "player"
    ADMIN = "admin"


def resolve_role(name: Optional[str], admin_name: Optional[str] = None) -> Role:
    """Decide the role of a seated player from its display name.
    
    Args:
        name: Player's display name, or None if not seated.
        admin_name: Name that grants admin; defaults to ADMIN_NAME.
        
    Returns:
        ADMIN if the name matches (case-insensitive), else PLAYER.
    """
    wanted = (admin_name if admin_name is not None else config.admin_name).lower()
    if name is not None and wanted and name.lower() == wanted:
        return Role.ADMIN
    return Role.PLAYER


def require_admin(action: str) -> Callable:
    """Decorator to reject an admin directive from a non-admin caller.
    
    The wrapped method takes the pre-checked is_admin flag as its first
    argument after self.
    
    Args:
        action: What the directive does, used in the error message.
        
    Returns:
        Decorator function.
    """
    def decorator(func: Callable) -> Callable:
        @wraps(func)
        def wrapper(self, is_admin: bool, *args: Any, **kwargs: Any) -> Any:
            if not is_admin:
                raise AuthorizationError(f"Only the table admin can {action}.")
            return func(self, *args, **kwargs)
        return wrapper
    return decorator
