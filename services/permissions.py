"""
Permission checks for the admin -> subadmin -> player hierarchy.
"""

from domain.exceptions import PermissionDenied
from domain.models.user import User


def has_admin_permission(actor: User) -> bool:
    """Admins may do everything."""
    return actor.is_admin and not actor.is_blocked


def can_manage_user(actor: User, target: User) -> bool:
    """
    Check if actor may act on target's account.

    Admins manage everyone; a subadmin manages only the players assigned to it.
    """
    if has_admin_permission(actor):
        return True
    if actor.is_subadmin and not actor.is_blocked:
        return target.is_player and target.assigned_to == actor.user_id
    return False


def can_set_odds(actor: User, scope_subadmin_id: int | None) -> bool:
    """Global defaults are admin-only; a subadmin may set its own overrides."""
    if has_admin_permission(actor):
        return True
    return (
        scope_subadmin_id is not None
        and actor.is_subadmin
        and not actor.is_blocked
        and actor.user_id == scope_subadmin_id
    )


def require_admin(actor: User) -> None:
    if not has_admin_permission(actor):
        raise PermissionDenied(f"User {actor.user_id} is not an admin.")


def require_can_manage(actor: User, target: User) -> None:
    if not can_manage_user(actor, target):
        raise PermissionDenied(
            f"User {actor.user_id} may not manage user {target.user_id}."
        )
