"""
Voucher Service -- approval of cash receipts and disbursements.

Responsibility:
    Fires the ``approve`` transition of ``VOUCHER_WORKFLOW`` on one voucher
    and stamps the approver and approval time.  Vouchers are otherwise
    created, edited and deleted by the application, not here.

Invariants:
    - Only transitions declared in ``VOUCHER_WORKFLOW`` are applied.
    - ``approved_at`` comes from the injected clock, never the wall clock.
    - This service flushes but never commits.

Failure modes:
    - Unknown voucher id -> ``VoucherNotFoundError``.
    - Voucher already approved -> ``InvalidStatusTransitionError``.
"""

from __future__ import annotations

from uuid import UUID

from sqlalchemy.orm import Session

from cashbook_kernel.domain.clock import Clock, SystemClock
from cashbook_kernel.domain.dtos import Voucher, VoucherKind, VoucherStatus
from cashbook_kernel.exceptions import InvalidStatusTransitionError, VoucherNotFoundError
from cashbook_kernel.logging_config import LogContext, get_logger
from cashbook_kernel.models.voucher import CashDisbursement, CashReceipt
from cashbook_modules.vouchers.workflows import APPROVE, VOUCHER_WORKFLOW

logger = get_logger("modules.vouchers.service")

_MODELS = {
    VoucherKind.RECEIPT: CashReceipt,
    VoucherKind.DISBURSEMENT: CashDisbursement,
}


class VoucherService:
    """
    Voucher lifecycle transitions.

    Contract:
        ``approve`` returns the updated voucher as a DTO.  The caller owns
        the transaction.

    Non-goals:
        - Does NOT recompute any report; aggregates are always derived on
          read.
    """

    def __init__(self, session: Session, clock: Clock | None = None):
        self._session = session
        self._clock = clock or SystemClock()

    def approve(self, kind: VoucherKind, voucher_id: UUID, approver_id: UUID) -> Voucher:
        kind = VoucherKind(kind)
        row = self._session.get(_MODELS[kind], voucher_id)
        if row is None:
            raise VoucherNotFoundError(str(voucher_id), kind.value)

        transition = VOUCHER_WORKFLOW.find_transition(row.status, APPROVE)
        if transition is None:
            logger.warning(
                "voucher_transition_rejected",
                extra={
                    "voucher_id": str(voucher_id),
                    "kind": kind.value,
                    "from_status": row.status,
                    "action": APPROVE,
                },
            )
            raise InvalidStatusTransitionError(str(voucher_id), row.status, APPROVE)
        if approver_id is None:
            raise ValueError(f"Guard {transition.guard.name} failed: approver_id is required")

        with LogContext.bind(actor_id=str(approver_id)):
            from_status = row.status
            row.status = VoucherStatus(transition.to_state).value
            row.approved_by_id = approver_id
            row.approved_at = self._clock.now()
            row.updated_by_id = approver_id
            self._session.flush()

            dto = row.to_dto()
            logger.info(
                "voucher_approved",
                extra={
                    "voucher_id": str(voucher_id),
                    "kind": kind.value,
                    "number": dto.number,
                    "from_status": from_status,
                    "to_status": row.status,
                },
            )
        return dto
