from collections.abc import Callable

from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from build_api.config import get_settings

bearer_scheme = HTTPBearer(auto_error=False)


def require_scopes(*allowed: str) -> Callable[[HTTPAuthorizationCredentials | None], frozenset[str]]:
    allowed_scopes = frozenset(allowed)

    def dependency(
        credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    ) -> frozenset[str]:
        if credentials is None or not credentials.credentials:
            raise HTTPException(
                status_code=401,
                detail="missing bearer token",
                headers={"WWW-Authenticate": "Bearer"},
            )

        scopes = get_settings().api_tokens.get(credentials.credentials)
        if scopes is None:
            raise HTTPException(
                status_code=401,
                detail="invalid bearer token",
                headers={"WWW-Authenticate": "Bearer"},
            )
        if not scopes & allowed_scopes:
            raise HTTPException(status_code=403, detail="insufficient scope")
        return scopes

    return dependency
