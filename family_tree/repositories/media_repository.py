"""
Repositories for stories and documents attached to persons
"""

from family_tree.database.models import Document, Story
from family_tree.repositories.base_repository import ModelRepository, to_uuid


class StoryRepository(ModelRepository[Story]):
    """Repository for oral-history stories"""

    def __init__(self, db_session=None):
        super().__init__(Story, db_session)

    def list_for_person(self, person_id) -> list[Story]:
        return self.query({'person_id': to_uuid(person_id)}, order_by=Story.created_at.desc())


class DocumentRepository(ModelRepository[Document]):
    """Repository for document references"""

    def __init__(self, db_session=None):
        super().__init__(Document, db_session)

    def list_for_person(self, person_id) -> list[Document]:
        return self.query({'person_id': to_uuid(person_id)}, order_by=Document.created_at.desc())
