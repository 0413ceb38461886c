"""
Service for families, persons and the stories and documents attached to them
"""

from family_tree.database.models import Document, Family, Person
from family_tree.repositories.media_repository import DocumentRepository, StoryRepository
from family_tree.repositories.person_repository import FamilyRepository, PersonRepository
from family_tree.repositories.relationship_repository import RelationshipRepository
from family_tree.services.base_service import BaseService
from family_tree.services.exceptions import NotFoundError, ValidationError, handle_service_exceptions
from family_tree.shared.date_utils import GEDCOMDateParser
from family_tree.shared.logging_config import get_project_logger


logger = get_project_logger(__name__)

DATE_FIELDS = ('date_of_birth', 'date_of_death')
BOOLEAN_FIELDS = ('alive_status', 'verified_by_elder')
FAMILY_FIELDS = ('family_name', 'clan_name', 'village_origin')
STORY_FIELDS = ('title', 'story_text', 'audio_url', 'narrator_name', 'narrator_relationship',
                'recorded_date', 'location', 'tags')
DOCUMENT_FIELDS = ('document_type', 'file_url', 'file_name', 'mime_type', 'title', 'description')


def clean_person_values(values: dict) -> dict:
    """
    Validate editable person values and return them normalized

    Dates become ISO ``YYYY-MM-DD``; empty strings become None.

    Raises:
        ValidationError: unknown field, bad gender, date or flag
    """
    unknown = sorted(name for name in values if name not in Person.EDITABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown person fields: {', '.join(unknown)}")

    cleaned = {}
    for name, value in values.items():
        if isinstance(value, str):
            value = value.strip() or None

        if name == 'full_name' and not value:
            raise ValidationError('full_name cannot be empty')
        if name == 'gender' and value is not None and value not in Person.GENDERS:
            raise ValidationError(f"Invalid gender {value!r}; expected one of {', '.join(Person.GENDERS)}")
        if name in DATE_FIELDS and value is not None:
            iso_date = GEDCOMDateParser.to_iso(value)
            if iso_date is None:
                raise ValidationError(f"Invalid date for {name}: {value!r}")
            value = iso_date
        if name in BOOLEAN_FIELDS and value is not None and not isinstance(value, bool):
            raise ValidationError(f"{name} must be true or false")

        cleaned[name] = value
    return cleaned


class PersonService(BaseService):
    """Records service for families and persons"""

    def __init__(self, db_session=None):
        super().__init__(db_session)
        self.family_repository = FamilyRepository(self.db_session)
        self.person_repository = PersonRepository(self.db_session)
        self.relationship_repository = RelationshipRepository(self.db_session)
        self.story_repository = StoryRepository(self.db_session)
        self.document_repository = DocumentRepository(self.db_session)

    @handle_service_exceptions(logger)
    def create_family(self, data: dict, created_by: str = None) -> Family:
        family_name = (data.get('family_name') or '').strip()
        if not family_name:
            raise ValidationError('family_name is required')

        values = {name: (data.get(name) or '').strip() or None for name in FAMILY_FIELDS}
        values['family_name'] = family_name
        family = self.family_repository.create(**values, created_by=created_by)
        self.db_session.commit()
        logger.info(f"Created family {family.family_name} ({family.id})")
        return family

    @handle_service_exceptions(logger)
    def get_family(self, family_id) -> Family:
        family = self.family_repository.get_by_id(family_id)
        if family is None:
            raise NotFoundError(f"Family {family_id} not found")
        return family

    @handle_service_exceptions(logger)
    def list_family_persons(self, family_id) -> list[Person]:
        """Persons of a family, oldest first"""
        family = self.get_family(family_id)
        return self.person_repository.list_by_family(family.id)

    @handle_service_exceptions(logger)
    def create_person(self, data: dict, created_by: str = None) -> Person:
        """Create a person in an existing family"""
        if not data.get('family_id'):
            raise ValidationError('family_id is required')
        family = self.get_family(data['family_id'])
        values = clean_person_values({name: value for name, value in data.items() if name != 'family_id'})
        if not values.get('full_name'):
            raise ValidationError('full_name is required')

        person = self.person_repository.create(family_id=family.id, created_by=created_by, **values)
        self.db_session.commit()
        logger.info(f"Created person {person.full_name} ({person.id}) in family {family.id}")
        return person

    @handle_service_exceptions(logger)
    def get_person(self, person_id) -> Person:
        person = self.person_repository.get_by_id(person_id)
        if person is None:
            raise NotFoundError(f"Person {person_id} not found")
        return person

    @handle_service_exceptions(logger)
    def get_person_details(self, person_id) -> dict:
        """Person with parents, children, spouses, stories and documents"""
        person = self.get_person(person_id)

        parents = [
            self._related(edge.parent_id, relationship_id=str(edge.id))
            for edge in self.relationship_repository.parents_of(person.id)
        ]
        children = [
            self._related(edge.child_id, relationship_id=str(edge.id))
            for edge in self.relationship_repository.children_of(person.id)
        ]
        spouses = [
            self._related(edge.other_spouse(person.id), relationship_id=str(edge.id),
                          marital_status=edge.marital_status)
            for edge in self.relationship_repository.spouses_of(person.id)
        ]

        return {
            'person': person.to_dict(),
            'parents': [entry for entry in parents if entry],
            'children': [entry for entry in children if entry],
            'spouses': [entry for entry in spouses if entry],
            'stories': [story.to_dict() for story in self.story_repository.list_for_person(person.id)],
            'documents': [document.to_dict() for document in self.document_repository.list_for_person(person.id)],
        }

    def _related(self, person_id, **extra) -> dict | None:
        related = self.person_repository.get_by_id(person_id)
        if related is None:
            return None
        return {
            'person_id': str(related.id),
            'full_name': related.full_name,
            'gender': related.gender,
            'date_of_birth': related.date_of_birth,
            'profile_photo_url': related.profile_photo_url,
            **extra,
        }

    @handle_service_exceptions(logger)
    def update_person(self, person_id, data: dict, edited_by: str = None) -> Person:
        """Direct edit of a person, bypassing the approval workflow"""
        person = self.get_person(person_id)
        values = clean_person_values(data)
        if not values:
            raise ValidationError('No fields to update')

        now = self.now()
        self.person_repository.update(person, **values, last_edited_by=edited_by,
                                      last_edited_at=now, updated_at=now)
        self.db_session.commit()
        logger.info(f"Updated person {person.id}: {', '.join(values)}")
        return person

    @handle_service_exceptions(logger)
    def delete_person(self, person_id) -> dict[str, int]:
        """Delete a person with its relationships, stories and documents"""
        person = self.get_person(person_id)
        deleted = self.person_repository.delete_with_relationships(person)
        self.db_session.commit()
        return deleted

    @handle_service_exceptions(logger)
    def add_story(self, person_id, data: dict, created_by: str = None):
        person = self.get_person(person_id)
        title = (data.get('title') or '').strip()
        if not title:
            raise ValidationError('title is required')

        values = {name: data.get(name) for name in STORY_FIELDS if name in data}
        values['title'] = title
        tags = values.get('tags')
        if tags is not None and not isinstance(tags, list):
            raise ValidationError('tags must be a list')

        story = self.story_repository.create(person_id=person.id, family_id=person.family_id,
                                             created_by=created_by, **values)
        self.db_session.commit()
        logger.info(f"Added story '{story.title}' to person {person.id}")
        return story

    @handle_service_exceptions(logger)
    def add_document(self, person_id, data: dict, uploaded_by: str = None):
        person = self.get_person(person_id)
        file_url = (data.get('file_url') or '').strip()
        if not file_url:
            raise ValidationError('file_url is required')

        values = {name: data.get(name) for name in DOCUMENT_FIELDS if name in data}
        values['file_url'] = file_url
        values['document_type'] = values.get('document_type') or 'other'
        if values['document_type'] not in Document.DOCUMENT_TYPES:
            raise ValidationError(f"Invalid document_type {values['document_type']!r}")

        document = self.document_repository.create(person_id=person.id, family_id=person.family_id,
                                                   uploaded_by=uploaded_by, **values)
        self.db_session.commit()
        logger.info(f"Added {document.document_type} document to person {person.id}")
        return document

    @handle_service_exceptions(logger)
    def get_family_tree(self, family_id) -> dict:
        """
        Graph view of a family for tree rendering

        Returns nodes (persons), edges (parent and spouse links) and the ids
        of root nodes, the persons with no recorded parent.
        """
        family = self.get_family(family_id)
        persons = self.person_repository.list_by_family(family.id)
        parent_child = self.relationship_repository.parent_child_for_family(family.id)
        spouses = self.relationship_repository.spousal_for_family(family.id)

        edges = [
            {
                'id': str(edge.id),
                'source': str(edge.parent_id),
                'target': str(edge.child_id),
                'type': 'parent',
            }
            for edge in parent_child
        ]
        edges.extend(
            {
                'id': str(edge.id),
                'source': str(edge.spouse1_id),
                'target': str(edge.spouse2_id),
                'type': 'spouse',
                'marital_status': edge.marital_status,
            }
            for edge in spouses
        )

        children = {edge.child_id for edge in parent_child}
        return {
            'family': family.to_dict(),
            'nodes': [{'id': str(person.id), 'label': person.full_name, 'data': person.to_dict()}
                      for person in persons],
            'edges': edges,
            'root_nodes': [str(person.id) for person in persons if person.id not in children],
        }


person_service = PersonService()
