"""
Repository for persons and the families that group them
"""

from family_tree.database import db
from family_tree.database.models import (
    Document,
    Family,
    ParentChildRelationship,
    Person,
    SpousalRelationship,
    Story,
)
from family_tree.repositories.base_repository import ModelRepository, to_uuid


class FamilyRepository(ModelRepository[Family]):
    """Repository for family groups"""

    def __init__(self, db_session=None):
        super().__init__(Family, db_session)


class PersonRepository(ModelRepository[Person]):
    """Repository for person records"""

    def __init__(self, db_session=None):
        super().__init__(Person, db_session)

    def list_by_family(self, family_id) -> list[Person]:
        """Persons of a family, oldest first with undated persons last"""
        family_key = to_uuid(family_id)

        def _list_by_family():
            statement = (
                db.select(Person)
                .where(Person.family_id == family_key)
                .order_by(Person.date_of_birth.is_(None), Person.date_of_birth, Person.created_at)
            )
            return self.db_session.execute(statement).scalars().all()

        return self.safe_query(_list_by_family, f"list persons of family {family_id}")

    def delete_with_relationships(self, person: Person) -> dict[str, int]:
        """Delete a person together with every record that references it"""
        def _delete_with_relationships():
            person_id = person.id
            deleted = {
                'relationships': self.db_session.execute(
                    db.delete(ParentChildRelationship).where(
                        db.or_(ParentChildRelationship.parent_id == person_id,
                               ParentChildRelationship.child_id == person_id)
                    )
                ).rowcount,
                'spouse_relationships': self.db_session.execute(
                    db.delete(SpousalRelationship).where(
                        db.or_(SpousalRelationship.spouse1_id == person_id,
                               SpousalRelationship.spouse2_id == person_id)
                    )
                ).rowcount,
                'stories': self.db_session.execute(
                    db.delete(Story).where(Story.person_id == person_id)
                ).rowcount,
                'documents': self.db_session.execute(
                    db.delete(Document).where(Document.person_id == person_id)
                ).rowcount,
            }
            self.db_session.delete(person)
            self.logger.info(f"Deleted person {person_id} with {deleted}")
            return deleted

        return self.safe_operation(_delete_with_relationships, f"delete person {person.id}")
