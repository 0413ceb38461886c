"""
Service for proposing field-level edits to persons and detecting overlapping proposals
"""

from sqlalchemy.exc import SQLAlchemyError

from family_tree.database.models import PendingChange
from family_tree.repositories.base_repository import to_uuid
from family_tree.repositories.change_repository import EditHistoryRepository, PendingChangeRepository
from family_tree.repositories.person_repository import PersonRepository
from family_tree.services.base_service import BaseService
from family_tree.services.exceptions import (
    ConflictComputationError,
    NoChangeError,
    NotFoundError,
    ValidationError,
    handle_service_exceptions,
)
from family_tree.services.person_service import clean_person_values
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)

# Shared marker for None and '' so both compare equal after normalization
EMPTY = object()


def normalize_value(value):
    """Collapse empty values to EMPTY; stringify and trim everything else"""
    if value is None or (isinstance(value, str) and value == ''):
        return EMPTY
    return str(value).strip()


def compute_changes(current_values: dict, proposed_values: dict) -> dict:
    """
    Diff proposed values against the current ones

    Only fields present in proposed_values are compared. The result keeps the
    original, non-normalized values: ``{field: {'old': ..., 'new': ...}}``.
    """
    current_values = current_values or {}
    changes = {}
    for field, new_value in proposed_values.items():
        old_value = current_values.get(field)
        if normalize_value(old_value) != normalize_value(new_value):
            changes[field] = {'old': old_value, 'new': new_value}
    return changes


class ChangeService(BaseService):
    """Creates pending changes and answers questions about them"""

    def __init__(self, db_session=None):
        super().__init__(db_session)
        self.change_repository = PendingChangeRepository(self.db_session)
        self.history_repository = EditHistoryRepository(self.db_session)
        self.person_repository = PersonRepository(self.db_session)

    def find_conflicts(self, person_id, changed_fields, exclude_id=None) -> list[PendingChange]:
        """
        Pending proposals for the person that touch any of the given fields

        Raises:
            ConflictComputationError: when the pending proposals cannot be read
        """
        try:
            # A failed read must not abort the surrounding transaction
            with self.db_session.begin_nested():
                pending = self.change_repository.find_pending_for_person(person_id)
        except SQLAlchemyError as e:
            raise ConflictComputationError(f"Could not scan pending changes for person {person_id}: {e}") from e

        fields = set(changed_fields)
        return [
            change for change in pending
            if change.id != exclude_id and fields & set(change.changed_fields or [])
        ]

    @handle_service_exceptions(logger)
    def propose(self, person_id, family_id, proposer_id, current_values: dict,
                proposed_values: dict, reason: str = None) -> str:
        """
        Record a proposed edit to a person and return the new proposal id

        Raises:
            ValidationError: unknown fields or missing proposer
            NotFoundError: the person does not exist
            NoChangeError: no proposed value differs from the current one
        """
        if not proposer_id:
            raise ValidationError('A proposer is required')
        if not proposed_values:
            raise NoChangeError('No changes detected')

        # Approval writes these values as-is, so store them in their cleaned form
        proposed_values = clean_person_values(proposed_values)

        person = self.person_repository.get_by_id(person_id)
        if person is None:
            raise NotFoundError(f"Person {person_id} not found")

        changes = compute_changes(current_values, proposed_values)
        if not changes:
            raise NoChangeError('No changes detected')
        changed_fields = list(changes)

        try:
            conflicting = self.find_conflicts(person.id, changed_fields)
        except ConflictComputationError as e:
            logger.warning(f"{e}; proposal recorded without conflicts")
            conflicting = []

        change = self.change_repository.create(
            person_id=person.id,
            family_id=to_uuid(family_id) if family_id else person.family_id,
            changed_by=str(proposer_id),
            changes=changes,
            changed_fields=changed_fields,
            reason=reason or None,
            status=PendingChange.STATUS_PENDING,
            conflicts_with=[str(other.id) for other in conflicting],
        )
        for other in conflicting:
            self.change_repository.add_conflict(other, change.id)

        self.db_session.commit()
        logger.info(
            f"Proposed change {change.id} to person {person.id} "
            f"({', '.join(changed_fields)}), {len(conflicting)} conflicting"
        )
        return str(change.id)

    @handle_service_exceptions(logger)
    def list_pending(self, person_id) -> list[PendingChange]:
        """Pending proposals for a person, newest first"""
        return self.change_repository.find_pending_for_person(person_id)

    @handle_service_exceptions(logger)
    def list_family_pending(self, family_id) -> list[PendingChange]:
        """Pending proposals for every person of a family, newest first"""
        return self.change_repository.find_pending_for_family(family_id)

    @handle_service_exceptions(logger)
    def get_change(self, change_id) -> PendingChange:
        change = self.change_repository.get_by_id(change_id)
        if change is None:
            raise NotFoundError(f"Pending change {change_id} not found")
        return change

    @handle_service_exceptions(logger)
    def get_edit_history(self, person_id, limit: int = 50):
        """Approved edits for a person, newest first"""
        return self.history_repository.list_for_person(person_id, limit=limit)


change_service = ChangeService()
