"""
Activity logger - append-only audit trail of studio operations

Use cases call ActivityLogger.record() after their mutation has been flushed
and commit both together. The log row is written inside a SAVEPOINT, so a
failure to log rolls back only the log entry: it is reported through the
module logger and never undoes the mutation.
"""
import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from studiodesk.infrastructure.db.models import ActivityLog

logger = logging.getLogger(__name__)

# Actions recorded by the use cases
CLIENT_ADDED = "client_added"
EVENT_CREATED = "event_created"
EVENT_STATUS_UPDATED = "event_status_updated"
TASK_ASSIGNED = "task_assigned"
TASK_UPDATED = "task_updated"
PAYMENT_RECEIVED = "payment_received"
EXPENSE_ADDED = "expense_added"
QUOTATION_CREATED = "quotation_created"
QUOTATION_STATUS_UPDATED = "quotation_status_updated"
QUOTATION_CONVERTED = "quotation_converted"
USER_SIGNED_UP = "user_signed_up"
TEAM_MEMBER_ADDED = "team_member_added"
FIRM_CREATED = "firm_created"
FIRM_DEACTIVATED = "firm_deactivated"

DEFAULT_FEED_LIMIT = 10


class ActivityLogger:
    """Best-effort recorder; see module docstring for the transaction contract."""

    def __init__(self, db: Session):
        self.db = db

    def record(
        self,
        firm_id: int,
        user_id: int,
        action: str,
        entity_type: str,
        entity_id: int,
        description: str,
    ) -> ActivityLog | None:
        """
        Append one activity entry

        Returns:
            The new ActivityLog, or None if it could not be written
        """
        try:
            with self.db.begin_nested():
                entry = ActivityLog(
                    firm_id=firm_id,
                    user_id=user_id,
                    action=action,
                    entity_type=entity_type,
                    entity_id=entity_id,
                    description=description,
                )
                self.db.add(entry)
        except SQLAlchemyError:
            logger.exception(
                "Failed to record activity %s for %s #%s (firm %s)",
                action, entity_type, entity_id, firm_id,
            )
            return None
        return entry


class ActivityFeedService:
    def __init__(self, db: Session):
        self.db = db

    def get_activity_logs_by_firm(self, firm_id: int, limit: int = DEFAULT_FEED_LIMIT) -> list[ActivityLog]:
        """Newest first."""
        return (
            self.db.query(ActivityLog)
            .filter(ActivityLog.firm_id == firm_id)
            .order_by(ActivityLog.created_at.desc(), ActivityLog.id.desc())
            .limit(limit)
            .all()
        )
