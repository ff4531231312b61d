import secrets
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPBearer
from fastapi.security.http import HTTPAuthorizationCredentials

from app.core.config import settings


security = HTTPBearer()


def _check_token(credentials: HTTPAuthorizationCredentials, expected: str) -> None:
    if not secrets.compare_digest(credentials.credentials.encode(), expected.encode()):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid authentication credentials",
        )


async def verify_webhook_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> None:
    _check_token(credentials, settings.WEBHOOK_TOKEN)


async def verify_admin_token(credentials: HTTPAuthorizationCredentials = Depends(security)) -> None:
    _check_token(credentials, settings.ADMIN_TOKEN)
