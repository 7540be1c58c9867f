from datetime import datetime, timedelta
from typing import Optional

from fastapi import Depends, Request
from fastapi.security import OAuth2PasswordBearer
from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.future import select
import logging

from json_post_type.config import settings
from json_post_type.database import get_db
from json_post_type.exceptions import AuthenticationError, InvalidTokenError
from json_post_type.models.user import User

logger = logging.getLogger(__name__)

ACCESS_TOKEN_COOKIE = "access_token"

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# OAuth2 scheme; anonymous requests are allowed through and resolved per route
oauth2_scheme = OAuth2PasswordBearer(tokenUrl="/auth/token", auto_error=False)


def hash_password(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    return pwd_context.verify(plain_password, hashed_password)


def create_access_token(data: dict, expires_delta: Optional[timedelta] = None) -> str:
    to_encode = data.copy()
    if "sub" not in to_encode:
        raise ValueError("Missing 'sub' claim (email) in token data.")

    expire = datetime.utcnow() + (expires_delta or timedelta(minutes=settings.access_token_expire_minutes))
    to_encode.update({"exp": expire})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str) -> str:
    """Return the email in the token's `sub` claim."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        logger.info("Token expired")
        raise InvalidTokenError("Token has expired")
    except JWTError as e:
        logger.info(f"JWT decoding failed: {str(e)}")
        raise InvalidTokenError()

    email = payload.get("sub")
    if email is None:
        logger.warning("Token is missing 'sub' claim")
        raise InvalidTokenError("Token does not contain 'sub' field.")
    return email


async def get_user_by_email(email: str, db: AsyncSession) -> Optional[User]:
    result = await db.execute(select(User).where(User.email == email))
    return result.scalars().first()


async def user_from_token(token: Optional[str], db: AsyncSession) -> Optional[User]:
    """Resolve a token to its user; None when there is no token."""
    if not token:
        return None
    email = decode_access_token(token)
    user = await get_user_by_email(email, db)
    if user is None:
        logger.warning(f"User with email '{email}' not found.")
        raise InvalidTokenError("Could not validate credentials")
    return user


async def get_optional_user(
    token: Optional[str] = Depends(oauth2_scheme),
    db: AsyncSession = Depends(get_db),
) -> Optional[User]:
    """Bearer-token user, or None for anonymous requests."""
    return await user_from_token(token, db)


async def get_current_user(user: Optional[User] = Depends(get_optional_user)) -> User:
    if user is None:
        raise AuthenticationError("Not authenticated")
    return user


async def get_cookie_user(request: Request, db: AsyncSession = Depends(get_db)) -> Optional[User]:
    """User behind the admin session cookie; None when missing or invalid."""
    token = request.cookies.get(ACCESS_TOKEN_COOKIE)
    if token and token.lower().startswith("bearer "):
        token = token[7:]
    try:
        return await user_from_token(token, db)
    except InvalidTokenError:
        return None

