"""Admin policy."""
from .roles import Role, require_admin, resolve_role

__all__ = ["Role", "require_admin", "resolve_role"]
