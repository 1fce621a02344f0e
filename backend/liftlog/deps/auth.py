# liftlog/deps/auth.py
from dataclasses import dataclass
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose.exceptions import ExpiredSignatureError, JWTError

from liftlog.security import decode_token

# Exposes Bearer auth in Swagger; tokens come from the identity provider
bearer_scheme = HTTPBearer(auto_error=False)

@dataclass(frozen=True, slots=True)
class CurrentUser:
    id: str
    role: str | None = None

def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
) -> CurrentUser:
    """
    Resolve the caller once per request. No database access happens here, so
    an anonymous request fails before any query runs.
    """
    unauth = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Not authenticated",
        headers={"WWW-Authenticate": "Bearer"},
    )
    if credentials is None or credentials.scheme.lower() != "bearer":
        raise unauth
    try:
        payload = decode_token(credentials.credentials)
    except ExpiredSignatureError:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Token expired",
            headers={"WWW-Authenticate": "Bearer"},
        )
    except JWTError:
        raise unauth

    sub = payload.get("sub")
    if not sub:
        raise unauth
    return CurrentUser(id=str(sub), role=payload.get("role"))

def require_role(*allowed_roles: str):
    """
    Usage: dependencies=[Depends(require_role("admin"))]
    """
    def dependency(current_user: CurrentUser = Depends(get_current_user)) -> CurrentUser:
        if current_user.role not in allowed_roles:
            raise HTTPException(
                status_code=status.HTTP_403_FORBIDDEN,
                detail="Insufficient role",
            )
        return current_user
    return dependency
