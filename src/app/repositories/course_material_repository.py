from abc import ABC, abstractmethod
from typing import Optional
from uuid import UUID

from src.domain.entities import CourseMaterial


class ICourseMaterialRepository(ABC):
    """CourseMaterial repository interface - application layer"""

    @abstractmethod
    async def get_for_user(self, material_id: UUID, user_id: UUID) -> Optional[CourseMaterial]:
        """Get a material by ID, only if owned by the given user"""
        pass

    @abstractmethod
    async def update(self, material: CourseMaterial) -> CourseMaterial:
        """Update existing material"""
        pass
