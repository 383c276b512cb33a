from datetime import datetime
from typing import Optional
from uuid import UUID

from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.errors import TokenStoreError
from src.app.repositories.password_reset_token_repository import IPasswordResetTokenRepository
from src.domain.entities import PasswordResetToken


class PasswordResetTokenRepository(IPasswordResetTokenRepository):
    """PasswordResetToken repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, token: PasswordResetToken) -> PasswordResetToken:
        """Create a new password reset token"""
        try:
            self.session.add(token)
            await self.session.flush()
            await self.session.refresh(token)
        except SQLAlchemyError as exc:
            raise TokenStoreError(str(exc)) from exc
        return token

    async def get_by_token_hash(self, token_hash: str) -> Optional[PasswordResetToken]:
        """Get password reset token by token hash"""
        stmt = select(PasswordResetToken).where(PasswordResetToken.token_hash == token_hash)
        try:
            result = await self.session.exec(stmt)
            return result.one_or_none()
        except SQLAlchemyError as exc:
            raise TokenStoreError(str(exc)) from exc

    async def update(self, token: PasswordResetToken) -> PasswordResetToken:
        """Update existing password reset token"""
        try:
            self.session.add(token)
            await self.session.flush()
            await self.session.refresh(token)
        except SQLAlchemyError as exc:
            raise TokenStoreError(str(exc)) from exc
        return token

    async def delete_all_for_user(self, user_id: UUID) -> int:
        """Delete every token owned by a user"""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.user_id == user_id)
        try:
            result = await self.session.execute(stmt)
            await self.session.flush()
        except SQLAlchemyError as exc:
            raise TokenStoreError(str(exc)) from exc
        return result.rowcount or 0

    async def delete_expired(self, now: datetime) -> int:
        """Delete tokens whose expires_at is before now"""
        stmt = delete(PasswordResetToken).where(PasswordResetToken.expires_at < now)
        try:
            result = await self.session.execute(stmt)
        except SQLAlchemyError as exc:
            raise TokenStoreError(str(exc)) from exc
        return result.rowcount or 0
