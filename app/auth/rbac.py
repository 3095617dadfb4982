from typing import Dict, FrozenSet

from fastapi import Depends, HTTPException, status

from app.auth.dependencies import get_current_user
from app.auth.schemas import CurrentUser
from app.core.enums import UserRole

# Capability sets per role: {module: {action, ...}}
ROLE_PERMISSIONS: Dict[str, Dict[str, FrozenSet[str]]] = {
    UserRole.ADMIN.value: {
        "transactions": frozenset({"create", "create_any", "read_all", "review"}),
        "accounts": frozenset({"read_all"}),
        "audit": frozenset({"read"}),
        "settings": frozenset({"manage"}),
        "users": frozenset({"manage"}),
    },
    UserRole.STAFF.value: {
        "transactions": frozenset({"create", "create_any", "read_all", "review"}),
        "accounts": frozenset({"read_all"}),
    },
    UserRole.STUDENT.value: {
        "transactions": frozenset({"create"}),
    },
}


def has_permission(role: str, module: str, action: str) -> bool:
    return action in ROLE_PERMISSIONS.get(role, {}).get(module, frozenset())


def check_permission(module: str, action: str):
    """
    Dependency factory to enforce a specific permission.

    Example:
        Depends(check_permission("transactions", "review"))
    """

    async def _checker(current_user: CurrentUser = Depends(get_current_user)) -> None:
        if not has_permission(current_user.role, module, action):
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient permissions",
            )

    return _checker
