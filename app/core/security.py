# app/core/security.py

"""
Security utilities and dependencies.

- Password hashing and verification.
- JWT creation and validation.
- Resolving the current user through the OAuth2 password bearer scheme.
- Role-based authorization (fixed action x resource matrix per role).
"""

import logging
from datetime import datetime, timedelta, timezone
from typing import Dict, FrozenSet, Optional

from jose import jwt, JWTError
from passlib.context import CryptContext
from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from app import API_PREFIX
from app.core.config import settings
from app.core.database import get_session
from app.core.exceptions import ForbiddenError
from app.domains.usr import models as usr_models

logger = logging.getLogger(__name__)


# --- Password hashing ---
pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


# --- OAuth2 scheme ---
# Swagger UI uses tokenUrl to find the login endpoint.
oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{API_PREFIX}/usr/auth/token")


# --- JWT ---
def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    """
    Create an access token. Expiry defaults to ACCESS_TOKEN_EXPIRE_MINUTES.
    """
    to_encode = data.copy()
    if expires_delta:
        expire = datetime.now(timezone.utc) + expires_delta
    else:
        expire = datetime.now(timezone.utc) + timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode.update({"exp": expire})
    encoded_jwt = jwt.encode(to_encode, settings.SECRET_KEY.get_secret_value(), algorithm=settings.ALGORITHM)
    logger.debug("Access token created, expires at %s", expire)
    return encoded_jwt


async def get_current_user_from_token(
    token: str = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_session),
) -> usr_models.User:
    """
    Decode and validate the JWT, then load the user it names.
    """
    credentials_exception = HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail="Could not validate credentials",
        headers={"WWW-Authenticate": "Bearer"},
    )
    try:
        payload = jwt.decode(token, settings.SECRET_KEY.get_secret_value(), algorithms=[settings.ALGORITHM])
        username: str = payload.get("sub")
        if username is None:
            raise credentials_exception
    except JWTError as e:
        logger.debug("JWTError: %s", e)
        raise credentials_exception

    statement = select(usr_models.User).where(usr_models.User.username == username)
    result = await db.execute(statement)
    user = result.scalars().one_or_none()
    if user is None:
        raise credentials_exception
    return user


def get_current_active_user(
    current_user: usr_models.User = Depends(get_current_user_from_token),
) -> usr_models.User:
    """
    Return the authenticated user; 400 when the account is disabled.
    """
    if not current_user.is_active:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail="Inactive user")
    return current_user


def get_current_admin_user(
    current_user: usr_models.User = Depends(get_current_active_user),
) -> usr_models.User:
    """
    Return the authenticated user if they hold the ADMIN role, else 403.
    """
    if current_user.role != usr_models.UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Not enough permissions. Admin role required."
        )
    return current_user


# =============================================================================
# Role-based authorization
# =============================================================================
ALL_ACTIONS: FrozenSet[str] = frozenset({"create", "read", "update", "delete", "list"})
READ_ONLY: FrozenSet[str] = frozenset({"read", "list"})

# role -> resource -> allowed actions
ROLE_PERMISSIONS: Dict[usr_models.UserRole, Dict[str, FrozenSet[str]]] = {
    usr_models.UserRole.ADMIN: {
        "vendor": ALL_ACTIONS,
        "variety": ALL_ACTIONS,
        "purchase": ALL_ACTIONS,
        "inventory": ALL_ACTIONS,
        "batch": ALL_ACTIONS,
        "user": ALL_ACTIONS,
        "audit_log": READ_ONLY,
    },
    usr_models.UserRole.OPERATOR: {
        "vendor": ALL_ACTIONS - {"delete"},
        "variety": ALL_ACTIONS,
        "purchase": ALL_ACTIONS,
        "inventory": ALL_ACTIONS,
        "batch": ALL_ACTIONS,
        "user": READ_ONLY,
        "audit_log": READ_ONLY,
    },
    usr_models.UserRole.VIEWER: {
        "vendor": READ_ONLY,
        "variety": READ_ONLY,
        "purchase": READ_ONLY,
        "inventory": READ_ONLY,
        "batch": READ_ONLY,
        "user": READ_ONLY,
        "audit_log": READ_ONLY,
    },
}


class RoleAuthorizer:
    """Answers "may this user perform `action` on `resource`?" from a fixed matrix."""

    def __init__(self, permissions: Optional[Dict[usr_models.UserRole, Dict[str, FrozenSet[str]]]] = None):
        self.permissions = permissions if permissions is not None else ROLE_PERMISSIONS

    def is_allowed(self, user: usr_models.User, action: str, resource: str) -> bool:
        if user is None or not user.is_active:
            return False
        return action in self.permissions.get(user.role, {}).get(resource, frozenset())

    def ensure_allowed(self, user: usr_models.User, action: str, resource: str) -> None:
        if not self.is_allowed(user, action, resource):
            logger.info(
                "Permission denied: user=%s role=%s action=%s resource=%s",
                getattr(user, "username", None), getattr(user, "role", None), action, resource
            )
            raise ForbiddenError(f"Not enough permissions to {action} {resource}.")


authorizer = RoleAuthorizer()


def require_permission(action: str, resource: str):
    """
    Dependency factory: resolves the current active user and checks the role matrix.

        current_user: User = Depends(require_permission("update", "vendor"))
    """
    def _check(current_user: usr_models.User = Depends(get_current_active_user)) -> usr_models.User:
        authorizer.ensure_allowed(current_user, action, resource)
        return current_user
    return _check
