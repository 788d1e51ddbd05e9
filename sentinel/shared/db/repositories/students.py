"""Student registry repositories."""

from typing import Optional, List, Set

from sqlalchemy import select, delete

from ..models import RegistryEntry, Student, PersonType, PresenceStatus
from .base import Repository

# Risk levels shown on the student risk view
RISK_LEVELS = ("critical", "high_risk", "watch")


class RegistryRepository(Repository[RegistryEntry]):
    """Repository for ``user_registry``, the primary roster."""

    model = RegistryEntry

    def _students(self):
        return self._base_query().where(RegistryEntry.person_type == PersonType.STUDENT)

    async def get_by_user_id(self, user_id: str) -> Optional[RegistryEntry]:
        """Get a registry entry by its external id."""
        query = self._base_query().where(RegistryEntry.user_id == user_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_students(
        self,
        limit: Optional[int] = None,
        status: Optional[PresenceStatus] = None,
    ) -> List[RegistryEntry]:
        """Students ordered by name."""
        query = self._students()
        if status:
            query = query.where(RegistryEntry.current_status == status)
        query = query.order_by(RegistryEntry.full_name)
        if limit is not None:
            query = query.limit(limit)
        return await self._all(query)

    async def get_at_risk(self) -> List[RegistryEntry]:
        """Students with a risk level, highest score first."""
        query = (
            self._students()
            .where(RegistryEntry.risk_level.in_(RISK_LEVELS))
            .order_by(RegistryEntry.risk_score.desc())
        )
        return await self._all(query)

    async def student_ids(self) -> Set[str]:
        """External ids of every registered student."""
        query = select(RegistryEntry.user_id).where(
            RegistryEntry.person_type == PersonType.STUDENT
        )
        result = await self.session.execute(query)
        return set(result.scalars().all())

    async def count_students(self) -> int:
        """Count students in the registry."""
        return await self.count(RegistryEntry.person_type == PersonType.STUDENT)

    async def delete_by_user_id(self, user_id: str) -> bool:
        """Delete a registry entry by its external id."""
        query = delete(RegistryEntry).where(RegistryEntry.user_id == user_id)
        result = await self.session.execute(query)
        return result.rowcount > 0


class StudentRepository(Repository[Student]):
    """Repository for the ``students`` table."""

    model = Student

    async def get_by_student_id(self, student_id: str) -> Optional[Student]:
        """Get a student by external id."""
        query = self._base_query().where(Student.student_id == student_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_with_photos(self) -> List[Student]:
        """Students that have a photo URL, ordered by student id."""
        query = (
            self._base_query()
            .where(Student.photo_url.is_not(None))
            .where(Student.photo_url != "")
            .order_by(Student.student_id)
        )
        return await self._all(query)
