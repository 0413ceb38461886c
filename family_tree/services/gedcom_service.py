"""
GEDCOM service for both CLI and web interface
"""

from datetime import datetime

from family_tree.repositories.person_repository import FamilyRepository, PersonRepository
from family_tree.repositories.relationship_repository import RelationshipRepository
from family_tree.services.base_service import BaseService
from family_tree.services.exceptions import NotFoundError, ValidationError, handle_service_exceptions
from family_tree.shared.gedcom_formatter import GEDCOMFormatter
from family_tree.shared.gedcom_parser import GEDCOMParser
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)

DEFAULT_SOURCE_NAME = "FamilyTree App"


class GedcomService(BaseService):
    """Moves a stored family in and out of GEDCOM text"""

    def __init__(self, db_session=None):
        super().__init__(db_session)
        self.family_repository = FamilyRepository(self.db_session)
        self.person_repository = PersonRepository(self.db_session)
        self.relationship_repository = RelationshipRepository(self.db_session)

    def _get_family(self, family_id):
        family = self.family_repository.get_by_id(family_id)
        if family is None:
            raise NotFoundError(f"Family {family_id} not found")
        return family

    @handle_service_exceptions(logger)
    def export_family(self, family_id, source_name: str = None, now: datetime = None) -> str:
        """Generate GEDCOM text for every person and relationship of a family"""
        family = self._get_family(family_id)
        persons = self.person_repository.list_by_family(family.id)
        parent_child = self.relationship_repository.parent_child_for_family(family.id)
        spouses = self.relationship_repository.spousal_for_family(family.id)

        formatter = GEDCOMFormatter(source_name=source_name or DEFAULT_SOURCE_NAME, now=now)
        content = formatter.generate(persons, parent_child, spouses, file_name=family.family_name)

        if formatter.dropped_children:
            logger.warning(f"Export of family {family.id} left {len(formatter.dropped_children)} "
                           f"children without a family record")
        logger.info(f"Exported family {family.id}: {len(persons)} persons, "
                    f"{len(parent_child)} parent-child and {len(spouses)} spousal relationships")
        return content

    @handle_service_exceptions(logger)
    def preview_import(self, content: str) -> dict:
        """Parse GEDCOM text without storing anything"""
        graph = GEDCOMParser().parse_content(content or '')
        return {
            'summary': graph.summary(),
            'persons': [{'gedcom_id': person.id, **person.to_record()} for person in graph.persons],
            'issues': [issue.to_dict() for issue in graph.issues],
        }

    @handle_service_exceptions(logger)
    def import_into_family(self, family_id, content: str, created_by: str = None) -> dict:
        """
        Store the persons and relationships of GEDCOM text in a family

        GEDCOM record ids are only meaningful inside the file; every imported
        person gets a new database id. Lines the parser skipped are returned
        as issues rather than failing the import.
        """
        if not content or not content.strip():
            raise ValidationError('GEDCOM content is empty')

        family = self._get_family(family_id)
        graph = GEDCOMParser().parse_content(content)

        stored_ids = {}
        for parsed in graph.persons:
            values = parsed.to_record()
            values['full_name'] = values['full_name'] or 'Unknown'
            person = self.person_repository.create(family_id=family.id, created_by=created_by, **values)
            stored_ids[parsed.id] = person.id

        for edge in graph.parent_child:
            self.relationship_repository.add_parent_child(stored_ids[edge.parent_id], stored_ids[edge.child_id])

        for edge in graph.spouses:
            self.relationship_repository.add_spousal(stored_ids[edge.spouse1_id], stored_ids[edge.spouse2_id],
                                                     edge.marital_status)

        self.db_session.commit()
        summary = graph.summary()
        logger.info(f"Imported GEDCOM into family {family.id}: {summary}")
        return {
            'family_id': str(family.id),
            'summary': summary,
            'person_ids': {gedcom_id: str(person_id) for gedcom_id, person_id in stored_ids.items()},
            'issues': [issue.to_dict() for issue in graph.issues],
        }


gedcom_service = GedcomService()
