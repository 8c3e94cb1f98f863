"""
User repository implementation.
"""

from typing import Optional

from sqlalchemy import func, select, update
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from cineshare.domain.entities import User
from cineshare.domain.exceptions import ConflictError
from cineshare.domain.repositories import IUserRepository
from cineshare.infrastructure.persistence.models import UserModel


class UserRepository(IUserRepository):
    """SQLAlchemy implementation of user repository."""

    def __init__(self, session: AsyncSession):
        """
        Initialize repository with database session.

        Args:
            session: SQLAlchemy async session
        """
        self.session = session

    async def create(self, user: User) -> User:
        """
        Create new user in database.

        Raises:
            ConflictError: If email or username is already taken
        """
        model = UserModel(
            id=user.id,
            email=user.email.lower(),
            username=user.username,
            password_hash=user.password_hash,
            display_name=user.display_name,
            avatar=user.avatar,
            refresh_token_id=user.refresh_token_id,
            created_at=user.created_at,
        )

        self.session.add(model)
        try:
            await self.session.flush()
        except IntegrityError:
            raise ConflictError("Email or username already in use")
        await self.session.refresh(model)

        return self._to_entity(model)

    async def get_by_id(self, user_id: str) -> Optional[User]:
        stmt = select(UserModel).where(UserModel.id == user_id)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_entity(model) if model else None

    async def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(UserModel).where(func.lower(UserModel.email) == email.lower())
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_entity(model) if model else None

    async def get_by_username(self, username: str) -> Optional[User]:
        stmt = select(UserModel).where(UserModel.username == username)
        result = await self.session.execute(stmt)
        model = result.scalar_one_or_none()

        return self._to_entity(model) if model else None

    async def set_refresh_token_id(
        self, user_id: str, refresh_token_id: Optional[str]
    ) -> None:
        stmt = (
            update(UserModel)
            .where(UserModel.id == user_id)
            .values(refresh_token_id=refresh_token_id)
        )
        await self.session.execute(stmt)

    async def rotate_refresh_token_id(
        self, user_id: str, current_id: str, new_id: str
    ) -> bool:
        # Compare-and-swap in one statement; concurrent exchanges of the
        # same token cannot both match
        stmt = (
            update(UserModel)
            .where(
                UserModel.id == user_id,
                UserModel.refresh_token_id == current_id,
            )
            .values(refresh_token_id=new_id)
        )
        result = await self.session.execute(stmt)
        return result.rowcount == 1

    def _to_entity(self, model: UserModel) -> User:
        """
        Convert database model to domain entity.

        Args:
            model: UserModel from database

        Returns:
            User domain entity
        """
        return User(
            id=model.id,
            email=model.email,
            username=model.username,
            password_hash=model.password_hash,
            display_name=model.display_name,
            avatar=model.avatar,
            refresh_token_id=model.refresh_token_id,
            created_at=model.created_at,
        )
