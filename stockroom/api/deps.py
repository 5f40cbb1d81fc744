# stockroom/api/deps.py
from fastapi import Depends, Header, HTTPException, Request, status
from fastapi.security import OAuth2PasswordBearer
from jose import JWTError
from sqlalchemy.ext.asyncio import AsyncSession

from stockroom.core.config import settings
from stockroom.core.logging import security_alert
from stockroom.core.permissions import Permission, has_permission, has_role
from stockroom.core.security import decode_access_token
from stockroom.db.operations import commit_async
from stockroom.db.session_async import get_async_db
from stockroom.domain.enums import ResourceType, UserRole
from stockroom.models.user import ApiKey, User
from stockroom.schemas.user import TokenPayload
from stockroom.services import access_service, user_service
from stockroom.services.api_key_service import verify_api_key
from stockroom.services.exceptions import AuthenticationError


oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

oauth2_scheme_optional = OAuth2PasswordBearer(
    tokenUrl=f"{settings.API_V1_STR}/auth/login",
    auto_error=False,
)


def _credentials_exception(detail: str = "Could not validate credentials") -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def _forbidden(detail: str = "Insufficient permissions") -> HTTPException:
    return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


def decode_token_no_db(token: str) -> TokenPayload:
    return TokenPayload(**decode_access_token(token))


async def get_current_user(
    db: AsyncSession = Depends(get_async_db),
    token: str = Depends(oauth2_scheme),
) -> User:
    try:
        token_data = decode_token_no_db(token)
    except JWTError as exc:
        if "revoked" in str(exc):
            security_alert("Revoked token presented", reason=str(exc))
        raise _credentials_exception("Invalid or expired token") from exc

    if token_data.sub is None:
        raise _credentials_exception()

    user = await user_service.get_by_id(db, token_data.sub)
    if user is None:
        raise _credentials_exception("User not found")
    if not user.is_active:
        raise _credentials_exception("User is inactive")
    return user


async def get_optional_user(
    db: AsyncSession = Depends(get_async_db),
    token: str | None = Depends(oauth2_scheme_optional),
) -> User | None:
    if not token:
        return None

    try:
        token_data = decode_token_no_db(token)
    except JWTError:
        return None

    if token_data.sub is None:
        return None

    user = await user_service.get_by_id(db, token_data.sub)
    if user is None or not user.is_active:
        return None
    return user


def require_roles(*roles: UserRole):
    """Allow-list of roles; admin always passes."""

    allowed = frozenset(roles)

    async def _dependency(current_user: User = Depends(get_current_user)) -> User:
        if not has_role(current_user.role, allowed):
            raise _forbidden()
        return current_user

    return _dependency


def require_permission(permission: Permission):
    async def _dependency(current_user: User = Depends(get_current_user)) -> User:
        if not has_permission(current_user.role, permission):
            raise _forbidden()
        return current_user

    return _dependency


def authorize_resource(resource_type: ResourceType, param: str = "id"):
    """Ownership check on the path parameter ``param``.

    Runs before the handler, so a refused request never reaches the service.
    """

    async def _dependency(
        request: Request,
        db: AsyncSession = Depends(get_async_db),
        current_user: User = Depends(get_current_user),
    ) -> User:
        resource_id = request.path_params.get(param)
        if resource_id is None:
            raise _forbidden("Access denied to this resource")
        if not await access_service.can_access(db, current_user, resource_type, resource_id):
            raise _forbidden("Access denied to this resource")
        return current_user

    return _dependency


def get_current_admin(current_user: User = Depends(require_roles(UserRole.admin))) -> User:
    return current_user


async def validate_api_key(
    x_api_key: str | None = Header(default=None, alias="x-api-key"),
    db: AsyncSession = Depends(get_async_db),
) -> ApiKey:
    if not x_api_key:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="API key required")
    try:
        api_key = await verify_api_key(db, x_api_key)
    except AuthenticationError as exc:
        security_alert("Invalid API key presented", key_prefix=x_api_key[:12], reason=exc.detail)
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=exc.detail) from exc
    await commit_async(db)
    return api_key

