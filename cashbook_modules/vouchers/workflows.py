"""
Voucher Workflows (``cashbook_modules.vouchers.workflows``).

Responsibility
--------------
Declares the state machine shared by cash receipts and cash
disbursements.  A voucher is created in ``draft`` and moves to
``approved`` through the single one-way ``approve`` action.  ``pending``
is a legal stored status that nothing here sets; a pending voucher can
still be approved.

Architecture position
---------------------
**Modules layer** -- declarative workflow definitions.  Imports canonical
Guard, Transition, Workflow from ``cashbook_kernel.domain.workflow``.
Consumed by ``VoucherService``.

Invariants enforced
-------------------
* ``approved`` is terminal: no transition leaves it, so there is no way
  back to ``draft``.
"""

from cashbook_kernel.domain.dtos import VoucherStatus
from cashbook_kernel.domain.workflow import Guard, Transition, Workflow
from cashbook_kernel.logging_config import get_logger

logger = get_logger("modules.vouchers.workflows")


APPROVE = "approve"

# -----------------------------------------------------------------------------
# Guards
# -----------------------------------------------------------------------------

APPROVER_ASSIGNED = Guard(
    name="approver_assigned",
    description="An approver id is supplied with the approval",
)

logger.info(
    "voucher_workflow_guards_defined",
    extra={"guards": [APPROVER_ASSIGNED.name]},
)


# -----------------------------------------------------------------------------
# Voucher Workflow
# -----------------------------------------------------------------------------

VOUCHER_WORKFLOW = Workflow(
    name="cash_voucher",
    description="Cash receipt / disbursement voucher lifecycle",
    initial_state=VoucherStatus.DRAFT.value,
    states=tuple(s.value for s in VoucherStatus),
    transitions=(
        Transition(
            VoucherStatus.DRAFT.value,
            VoucherStatus.APPROVED.value,
            action=APPROVE,
            guard=APPROVER_ASSIGNED,
        ),
        Transition(
            VoucherStatus.PENDING.value,
            VoucherStatus.APPROVED.value,
            action=APPROVE,
            guard=APPROVER_ASSIGNED,
        ),
    ),
    terminal_states=(VoucherStatus.APPROVED.value,),
)

logger.info(
    "voucher_workflow_defined",
    extra={
        "workflow": VOUCHER_WORKFLOW.name,
        "state_count": len(VOUCHER_WORKFLOW.states),
        "transition_count": len(VOUCHER_WORKFLOW.transitions),
    },
)
