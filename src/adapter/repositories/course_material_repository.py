from typing import Optional
from uuid import UUID

from sqlmodel import select
from sqlmodel.ext.asyncio.session import AsyncSession

from src.app.repositories.course_material_repository import ICourseMaterialRepository
from src.domain.entities import CourseMaterial


class CourseMaterialRepository(ICourseMaterialRepository):
    """CourseMaterial repository implementation using SQLModel"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_for_user(self, material_id: UUID, user_id: UUID) -> Optional[CourseMaterial]:
        """Get a material by ID, only if owned by the given user"""
        stmt = select(CourseMaterial).where(
            CourseMaterial.id == material_id, CourseMaterial.user_id == user_id
        )
        result = await self.session.exec(stmt)
        return result.one_or_none()

    async def update(self, material: CourseMaterial) -> CourseMaterial:
        """Update existing material"""
        self.session.add(material)
        await self.session.flush()
        await self.session.refresh(material)
        return material
