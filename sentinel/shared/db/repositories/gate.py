"""Gate, visitor and leave repositories."""

from typing import Optional, List

from ..models import (
    GateApprovalRequest,
    GateRequestStatus,
    GateTransaction,
    Visitor,
    VisitorStatus,
    LeaveApproval,
    ApprovalStatus,
)
from .base import Repository


class GateRequestRepository(Repository[GateApprovalRequest]):
    """Repository for gate approval requests."""

    model = GateApprovalRequest

    async def get_pending(self) -> List[GateApprovalRequest]:
        query = (
            self._base_query()
            .where(GateApprovalRequest.status == GateRequestStatus.PENDING)
            .order_by(GateApprovalRequest.requested_at.desc())
        )
        return await self._all(query)


class GateTransactionRepository(Repository[GateTransaction]):
    """Repository for the gate passage log."""

    model = GateTransaction

    async def get_recent(self, limit: int = 20) -> List[GateTransaction]:
        query = (
            self._base_query()
            .order_by(GateTransaction.timestamp.desc())
            .limit(limit)
        )
        return await self._all(query)


class VisitorRepository(Repository[Visitor]):
    """Repository for visitors."""

    model = Visitor

    async def get_recent(
        self,
        status: Optional[VisitorStatus] = None,
        limit: Optional[int] = None,
    ) -> List[Visitor]:
        """Visitors by most recent entry."""
        query = self._base_query()
        if status:
            query = query.where(Visitor.status == status)
        query = query.order_by(Visitor.entry_time.desc())
        if limit is not None:
            query = query.limit(limit)
        return await self._all(query)


class LeaveRepository(Repository[LeaveApproval]):
    """Repository for leave requests."""

    model = LeaveApproval

    async def get_filtered(
        self,
        status: Optional[ApprovalStatus] = None,
        student_id: Optional[str] = None,
    ) -> List[LeaveApproval]:
        """Leave requests with filters, newest request first."""
        conditions = []
        if status:
            conditions.append(LeaveApproval.approval_status == status)
        if student_id:
            conditions.append(LeaveApproval.student_id == student_id)

        query = (
            self._base_query()
            .where(*conditions)
            .order_by(LeaveApproval.requested_at.desc())
        )
        return await self._all(query)

    async def get_awaiting_exit(self) -> List[LeaveApproval]:
        """Approved leave whose exit has not been confirmed yet."""
        query = (
            self._base_query()
            .where(LeaveApproval.approval_status == ApprovalStatus.APPROVED)
            .where(LeaveApproval.exit_confirmed.is_(False))
            .order_by(LeaveApproval.start_datetime)
        )
        return await self._all(query)
