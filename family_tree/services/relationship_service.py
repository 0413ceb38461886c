"""
Service for parent-child and spousal relationships between persons
"""

from family_tree.database.models import ParentChildRelationship, SpousalRelationship
from family_tree.repositories.base_repository import to_uuid
from family_tree.repositories.person_repository import PersonRepository
from family_tree.repositories.relationship_repository import RelationshipRepository
from family_tree.services.base_service import BaseService
from family_tree.services.exceptions import (
    ConflictError,
    NotFoundError,
    ValidationError,
    handle_service_exceptions,
)
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)


class RelationshipService(BaseService):
    """Creates, lists and removes edges of the family graph"""

    def __init__(self, db_session=None):
        super().__init__(db_session)
        self.person_repository = PersonRepository(self.db_session)
        self.relationship_repository = RelationshipRepository(self.db_session)

    def _require_person(self, person_id, role: str):
        if not person_id:
            raise ValidationError(f"{role} is required")
        person = self.person_repository.get_by_id(person_id)
        if person is None:
            raise NotFoundError(f"Person {person_id} not found")
        return person

    @handle_service_exceptions(logger)
    def add_parent_child(self, parent_id, child_id, notes: str = None) -> ParentChildRelationship:
        """
        Record that parent_id is a parent of child_id

        Raises:
            ValidationError: a person would be its own parent
            NotFoundError: either person does not exist
            ConflictError: the edge already exists
        """
        if parent_id and child_id and to_uuid(parent_id) == to_uuid(child_id):
            raise ValidationError('A person cannot be their own parent')

        parent = self._require_person(parent_id, 'parent_id')
        child = self._require_person(child_id, 'child_id')

        if self.relationship_repository.find_parent_child(parent.id, child.id):
            raise ConflictError(f"{parent.full_name} is already a parent of {child.full_name}")

        relationship = self.relationship_repository.add_parent_child(parent.id, child.id, notes=notes or None)
        self.db_session.commit()
        logger.info(f"Added parent {parent.id} of {child.id}")
        return relationship

    @handle_service_exceptions(logger)
    def add_spouse(self, first_id, second_id, marital_status: str = 'married') -> SpousalRelationship:
        """
        Record a spousal relationship; the pair is stored once whichever order it is given in

        Raises:
            ValidationError: same person twice or unknown marital status
            NotFoundError: either person does not exist
            ConflictError: the pair is already recorded
        """
        marital_status = marital_status or 'married'
        if marital_status not in SpousalRelationship.MARITAL_STATUSES:
            raise ValidationError(
                f"Invalid marital_status {marital_status!r}; expected one of "
                f"{', '.join(SpousalRelationship.MARITAL_STATUSES)}"
            )
        if first_id and second_id and to_uuid(first_id) == to_uuid(second_id):
            raise ValidationError('A person cannot be their own spouse')

        first = self._require_person(first_id, 'spouse1_id')
        second = self._require_person(second_id, 'spouse2_id')

        if self.relationship_repository.find_spousal(first.id, second.id):
            raise ConflictError(f"{first.full_name} and {second.full_name} are already spouses")

        relationship = self.relationship_repository.add_spousal(first.id, second.id, marital_status)
        self.db_session.commit()
        logger.info(f"Added spouses {relationship.spouse1_id} & {relationship.spouse2_id} ({marital_status})")
        return relationship

    @handle_service_exceptions(logger)
    def get_spouses(self, person_id) -> list[SpousalRelationship]:
        """Spousal edges of a person, looked up from either side in one query"""
        person = self._require_person(person_id, 'person_id')
        return self.relationship_repository.spouses_of(person.id)

    @handle_service_exceptions(logger)
    def remove_parent_child(self, relationship_id) -> None:
        relationship = self.relationship_repository.get_parent_child(relationship_id)
        if relationship is None:
            raise NotFoundError(f"Parent-child relationship {relationship_id} not found")
        self.relationship_repository.delete(relationship)
        self.db_session.commit()
        logger.info(f"Removed parent-child relationship {relationship_id}")

    @handle_service_exceptions(logger)
    def remove_spouse(self, relationship_id) -> None:
        relationship = self.relationship_repository.get_spousal(relationship_id)
        if relationship is None:
            raise NotFoundError(f"Spousal relationship {relationship_id} not found")
        self.relationship_repository.delete(relationship)
        self.db_session.commit()
        logger.info(f"Removed spousal relationship {relationship_id}")


relationship_service = RelationshipService()
