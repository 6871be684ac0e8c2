from fastapi import Depends, HTTPException
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt
from sqlalchemy.ext.asyncio import AsyncSession

from tourdesk.cards import CardRenderer, build_card_renderer
from tourdesk.config import settings
from tourdesk.database import get_db
from tourdesk.models.user import User

bearer_scheme = HTTPBearer(auto_error=False)

_UNAUTHORIZED = {"WWW-Authenticate": "Bearer"}


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(bearer_scheme),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Resolve the bearer token to an active user, or fail with 401."""
    if credentials is None:
        raise HTTPException(status_code=401, detail="Not authenticated", headers=_UNAUTHORIZED)

    try:
        payload = jwt.decode(credentials.credentials, settings.secret_key, algorithms=[settings.algorithm])
        user_id = int(payload.get("sub", ""))
    except (JWTError, ValueError):
        raise HTTPException(status_code=401, detail="Invalid or expired token", headers=_UNAUTHORIZED)

    user = await db.get(User, user_id)
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid or expired token", headers=_UNAUTHORIZED)
    return user


def get_card_renderer() -> CardRenderer:
    return build_card_renderer(settings.locale, settings.currency, settings.default_tour_image)
