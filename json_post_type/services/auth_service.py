import logging
from typing import Optional

from sqlalchemy.ext.asyncio import AsyncSession

from json_post_type.auth import get_user_by_email, hash_password, verify_password
from json_post_type.constants import DEFAULT_ROLE
from json_post_type.exceptions import ValidationError
from json_post_type.models.user import User
from json_post_type.services.capability_service import get_role

logger = logging.getLogger(__name__)


async def authenticate_user(email: str, password: str, db: AsyncSession) -> Optional[User]:
    user = await get_user_by_email(email, db)
    if not user or not verify_password(password, user.hashed_password):
        logger.warning(f"Login failed for email: {email}")
        return None
    return user


async def create_user(
    username: str,
    email: str,
    password: str,
    db: AsyncSession,
    role_name: str = DEFAULT_ROLE.value,
) -> User:
    role = await get_role(db, role_name)
    if role is None:
        raise ValidationError(f"Unknown role: {role_name}", field="role")

    user = User(username=username, email=email, hashed_password=hash_password(password), role_id=role.id)
    db.add(user)
    await db.commit()
    await db.refresh(user)
    logger.info(f"Created user {email} with role {role_name}")
    return user


async def ensure_admin_user(email: Optional[str], password: Optional[str], db: AsyncSession) -> Optional[User]:
    """Create the bootstrap administrator unless it exists or no credentials are configured."""
    if not email or not password:
        return None
    existing = await get_user_by_email(email, db)
    if existing:
        return existing
    return await create_user(email.split("@")[0], email, password, db, role_name="administrator")
