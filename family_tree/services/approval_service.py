"""
Service applying approved changes to persons and resolving conflicting proposals
"""

from dataclasses import dataclass, field

from family_tree.database.models import EditHistory, PendingChange
from family_tree.repositories.change_repository import EditHistoryRepository, PendingChangeRepository
from family_tree.repositories.person_repository import PersonRepository
from family_tree.services.base_service import BaseService
from family_tree.services.exceptions import (
    ConflictError,
    NotFoundError,
    PartialApplyError,
    ValidationError,
    handle_service_exceptions,
)
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)

CONFLICT_REJECTION_REASON = "Conflicting change was approved"


@dataclass
class ApprovalResult:
    """Outcome of an approval: the approved change, its history entry and the proposals it rejected"""
    change: PendingChange
    history_entry: EditHistory
    rejected_ids: list[str] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            'change': self.change.to_dict(),
            'history': self.history_entry.to_dict(),
            'rejected_conflicts': list(self.rejected_ids),
        }


class ApprovalService(BaseService):
    """Approves and rejects pending changes"""

    def __init__(self, db_session=None):
        super().__init__(db_session)
        self.change_repository = PendingChangeRepository(self.db_session)
        self.history_repository = EditHistoryRepository(self.db_session)
        self.person_repository = PersonRepository(self.db_session)

    @handle_service_exceptions(logger)
    def approve(self, change_id, approver_id, notes: str = None) -> ApprovalResult:
        """
        Apply a pending change, record it in the edit history and reject its conflicts

        All writes happen in one transaction. The steps run in order:
        apply_changes, record_history, mark_approved, reject_conflicts, commit.

        Raises:
            NotFoundError: the change or its person does not exist
            ConflictError: the change is no longer pending
            PartialApplyError: a step failed; nothing was written
        """
        if not approver_id:
            raise ValidationError('An approver is required')

        change = self.change_repository.get_by_id(change_id)
        if change is None:
            raise NotFoundError(f"Pending change {change_id} not found")
        if not change.is_pending:
            raise ConflictError(f"Pending change {change_id} is already {change.status}")

        person = self.person_repository.get_by_id(change.person_id)
        if person is None:
            raise NotFoundError(f"Person {change.person_id} not found")

        now = self.now()
        completed_steps = []
        step = None
        try:
            step = 'apply_changes'
            updates = {name: entry.get('new') for name, entry in change.changes.items()}
            self.person_repository.update(
                person,
                **updates,
                last_edited_by=str(approver_id),
                last_edited_at=now,
                updated_at=now,
            )
            completed_steps.append(step)

            step = 'record_history'
            history_entry = self.history_repository.append(
                person_id=change.person_id,
                family_id=change.family_id,
                pending_change_id=change.id,
                changed_by=change.changed_by,
                approved_by=str(approver_id),
                changes=change.changes,
                reason=change.reason,
                approval_notes=notes or None,
                status=PendingChange.STATUS_APPROVED,
                created_at=now,
                approved_at=now,
            )
            completed_steps.append(step)

            step = 'mark_approved'
            self.change_repository.update(
                change,
                status=PendingChange.STATUS_APPROVED,
                approved_by=str(approver_id),
                approved_at=now,
                approval_notes=notes or None,
            )
            completed_steps.append(step)

            step = 'reject_conflicts'
            rejected_ids = self._reject_conflicts(change, approver_id, now)
            completed_steps.append(step)

            step = 'commit'
            self.db_session.commit()
        except Exception as e:
            self.db_session.rollback()
            logger.error(f"Approval of change {change_id} failed during {step} "
                         f"after {completed_steps}: {e}")
            raise PartialApplyError(
                f"Approval of change {change_id} failed during {step}: {e}",
                step=step,
                completed_steps=completed_steps,
            ) from e

        logger.info(f"Approved change {change.id} for person {change.person_id}; "
                    f"rejected {len(rejected_ids)} conflicting")
        return ApprovalResult(change=change, history_entry=history_entry, rejected_ids=rejected_ids)

    def _reject_conflicts(self, change: PendingChange, approver_id, now) -> list[str]:
        """Reject every proposal listed as conflicting, whatever its current status"""
        rejected_ids = []
        for conflict_id in change.conflicts_with or []:
            other = self.change_repository.get_by_id(conflict_id)
            if other is None:
                logger.warning(f"Conflicting change {conflict_id} of {change.id} no longer exists")
                continue
            if not other.is_pending:
                logger.warning(f"Overwriting {other.status} change {other.id} with rejection "
                               f"after approval of {change.id}")
            self.change_repository.update(
                other,
                status=PendingChange.STATUS_REJECTED,
                rejected_by=str(approver_id),
                rejected_at=now,
                rejection_reason=CONFLICT_REJECTION_REASON,
            )
            rejected_ids.append(str(other.id))
        return rejected_ids

    @handle_service_exceptions(logger)
    def reject(self, change_id, rejector_id, reason: str = None) -> PendingChange:
        """
        Reject a pending change; conflicting proposals are left untouched

        Raises:
            NotFoundError: the change does not exist
            ConflictError: the change is no longer pending
        """
        if not rejector_id:
            raise ValidationError('A rejector is required')

        change = self.change_repository.get_by_id(change_id)
        if change is None:
            raise NotFoundError(f"Pending change {change_id} not found")
        if not change.is_pending:
            raise ConflictError(f"Pending change {change_id} is already {change.status}")

        self.change_repository.update(
            change,
            status=PendingChange.STATUS_REJECTED,
            rejected_by=str(rejector_id),
            rejected_at=self.now(),
            rejection_reason=reason or None,
        )
        self.db_session.commit()
        logger.info(f"Rejected change {change.id} for person {change.person_id}")
        return change


approval_service = ApprovalService()
