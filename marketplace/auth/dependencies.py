from dataclasses import dataclass
from typing import Callable

from fastapi import Depends, Header, HTTPException, status

from marketplace.auth.jwt import decode_jwt, jwt_http_exception
from marketplace.config import allowed_roles_list, settings

AllowedRole = str


@dataclass
class AuthContext:
    user_id: str
    role: AllowedRole
    source: str | None = None

    @property
    def is_admin(self) -> bool:
        return self.role == "ADMIN"


def get_auth_context(
    authorization: str | None = Header(default=None),
) -> AuthContext:
    if not authorization and settings.enable_test_auth_bypass:
        return AuthContext(user_id="test-admin", role="ADMIN", source="test")

    if not authorization or not authorization.startswith("Bearer "):
        raise jwt_http_exception("Missing bearer token")

    token = authorization.removeprefix("Bearer ").strip()
    try:
        payload = decode_jwt(token, settings.jwt_secret)
    except Exception as err:
        raise jwt_http_exception("Invalid JWT") from err

    role = payload.get("role")
    user_id = payload.get("sub")
    if role not in allowed_roles_list() or not isinstance(user_id, str):
        raise jwt_http_exception("Invalid JWT claims")

    return AuthContext(user_id=user_id, role=role, source=payload.get("source"))


def require_roles(*roles: str) -> Callable[[AuthContext], AuthContext]:
    def dependency(auth: AuthContext = Depends(get_auth_context)) -> AuthContext:
        if auth.role not in roles:
            raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Insufficient role")
        return auth

    return dependency


require_admin = require_roles("ADMIN")
require_fulfillment_write = require_roles("SELLER", "ADMIN")
