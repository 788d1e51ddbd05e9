"""Camera metadata repository."""

from typing import Optional, List

from ..models import CameraMetadata
from .base import Repository


class CameraRepository(Repository[CameraMetadata]):
    """Repository for camera registrations."""

    model = CameraMetadata

    async def get_by_device_id(self, device_id: str) -> Optional[CameraMetadata]:
        """Get camera by its device id."""
        query = self._base_query().where(CameraMetadata.device_id == device_id)
        result = await self.session.execute(query)
        return result.scalar_one_or_none()

    async def get_listed(self, active_only: bool = False) -> List[CameraMetadata]:
        """Cameras ordered by display name."""
        query = self._base_query()
        if active_only:
            query = query.where(CameraMetadata.is_active.is_(True))
        return await self._all(query.order_by(CameraMetadata.display_name))
