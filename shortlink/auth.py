import hmac

from fastapi import HTTPException, Request, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

bearer_scheme = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def token_matches(provided: str, expected: str) -> bool:
    return hmac.compare_digest(provided.encode(), expected.encode())


async def require_token(request: Request) -> None:
    credentials: HTTPAuthorizationCredentials | None = await bearer_scheme(request)
    if credentials is None:
        raise _unauthorized("Missing or malformed Authorization header")
    if not token_matches(credentials.credentials, request.app.state.settings.api_token):
        raise _unauthorized("Invalid token")
