"""
Request / Order Status Lifecycle

FLOW OVERVIEW
- pending  → approved | rejected
- approved → fulfilled
- rejected, fulfilled are final.
- apply_status(record, new_status) validates the move and stamps updated_at;
  the caller commits.
"""

import logging
from datetime import datetime

from .prom_metrics import observe_status_transition

STATUS_PENDING = 'pending'
STATUS_APPROVED = 'approved'
STATUS_REJECTED = 'rejected'
STATUS_FULFILLED = 'fulfilled'

STATUSES = (STATUS_PENDING, STATUS_APPROVED, STATUS_REJECTED, STATUS_FULFILLED)

TRANSITIONS = {
    STATUS_PENDING: (STATUS_APPROVED, STATUS_REJECTED),
    STATUS_APPROVED: (STATUS_FULFILLED,),
    STATUS_REJECTED: (),
    STATUS_FULFILLED: (),
}

logger = logging.getLogger(__name__)


class StatusTransitionError(ValueError):
    """Raised for unknown statuses or moves the admin console does not offer"""


def allowed_transitions(status):
    """Next statuses offered for a record in `status` (legacy NULL counts as pending)"""
    return TRANSITIONS.get(status or STATUS_PENDING, ())


def can_transition(current, new_status):
    return new_status in allowed_transitions(current)


def apply_status(record, new_status, entity='record'):
    """
    Move a JerseyRequest or Order to `new_status`

    Args:
        record: Model instance with a `status` column
        new_status: Target status
        entity: Label used for logs and metrics

    Returns:
        The previous status

    Raises:
        StatusTransitionError: unknown status or disallowed move
    """
    if new_status not in STATUSES:
        raise StatusTransitionError(f"Unknown status: {new_status}")

    current = record.status or STATUS_PENDING
    if not can_transition(current, new_status):
        raise StatusTransitionError(f"Cannot change status from {current} to {new_status}")

    record.status = new_status
    record.updated_at = datetime.utcnow()
    logger.info(f"{entity} {record.id}: {current} -> {new_status}")
    observe_status_transition(entity, new_status)
    return current
