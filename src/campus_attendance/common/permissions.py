from __future__ import annotations

from ..core.enums import Role
from ..core.exceptions import AuthorizationError


def require_staff(actor: Role) -> None:
    if actor != Role.STAFF:
        raise AuthorizationError("Staff access required")
