"""
Repository for parent-child and spousal relationships
"""

from family_tree.database import db
from family_tree.database.models import ParentChildRelationship, Person, SpousalRelationship
from family_tree.repositories.base_repository import BaseRepository, to_uuid


def canonical_pair(first, second) -> tuple:
    """Order a spouse pair so each couple has exactly one stored form"""
    first, second = to_uuid(first), to_uuid(second)
    return (first, second) if str(first) <= str(second) else (second, first)


class RelationshipRepository(BaseRepository):
    """Repository for the edges of the family graph"""

    def get_parent_child(self, relationship_id) -> ParentChildRelationship | None:
        key = to_uuid(relationship_id)
        return self.safe_query(lambda: self.db_session.get(ParentChildRelationship, key),
                               "get parent-child relationship")

    def get_spousal(self, relationship_id) -> SpousalRelationship | None:
        key = to_uuid(relationship_id)
        return self.safe_query(lambda: self.db_session.get(SpousalRelationship, key),
                               "get spousal relationship")

    def find_parent_child(self, parent_id, child_id) -> ParentChildRelationship | None:
        parent_key, child_key = to_uuid(parent_id), to_uuid(child_id)

        def _find():
            statement = db.select(ParentChildRelationship).where(
                ParentChildRelationship.parent_id == parent_key,
                ParentChildRelationship.child_id == child_key,
            )
            return self.db_session.execute(statement).scalars().first()

        return self.safe_query(_find, "find parent-child relationship")

    def find_spousal(self, first_id, second_id) -> SpousalRelationship | None:
        spouse1, spouse2 = canonical_pair(first_id, second_id)

        def _find():
            statement = db.select(SpousalRelationship).where(
                SpousalRelationship.spouse1_id == spouse1,
                SpousalRelationship.spouse2_id == spouse2,
            )
            return self.db_session.execute(statement).scalars().first()

        return self.safe_query(_find, "find spousal relationship")

    def add_parent_child(self, parent_id, child_id, notes: str = None) -> ParentChildRelationship:
        def _add():
            relationship = ParentChildRelationship(
                parent_id=to_uuid(parent_id), child_id=to_uuid(child_id), notes=notes
            )
            self.db_session.add(relationship)
            return relationship

        return self.safe_operation(_add, f"add parent {parent_id} of {child_id}")

    def add_spousal(self, first_id, second_id, marital_status: str = 'married') -> SpousalRelationship:
        spouse1, spouse2 = canonical_pair(first_id, second_id)

        def _add():
            relationship = SpousalRelationship(
                spouse1_id=spouse1, spouse2_id=spouse2, marital_status=marital_status
            )
            self.db_session.add(relationship)
            return relationship

        return self.safe_operation(_add, f"add spouses {spouse1} & {spouse2}")

    def spouses_of(self, person_id) -> list[SpousalRelationship]:
        """Spousal edges touching a person, whichever side it is stored on"""
        key = to_uuid(person_id)

        def _spouses_of():
            statement = db.select(SpousalRelationship).where(
                db.or_(SpousalRelationship.spouse1_id == key, SpousalRelationship.spouse2_id == key)
            )
            return self.db_session.execute(statement).scalars().all()

        return self.safe_query(_spouses_of, f"spouses of {person_id}")

    def parents_of(self, person_id) -> list[ParentChildRelationship]:
        key = to_uuid(person_id)
        return self.safe_query(
            lambda: self.db_session.execute(
                db.select(ParentChildRelationship).where(ParentChildRelationship.child_id == key)
            ).scalars().all(),
            f"parents of {person_id}"
        )

    def children_of(self, person_id) -> list[ParentChildRelationship]:
        key = to_uuid(person_id)
        return self.safe_query(
            lambda: self.db_session.execute(
                db.select(ParentChildRelationship).where(ParentChildRelationship.parent_id == key)
            ).scalars().all(),
            f"children of {person_id}"
        )

    def parent_child_for_family(self, family_id) -> list[ParentChildRelationship]:
        """Parent-child edges whose both ends belong to the family, in creation order"""
        family_key = to_uuid(family_id)
        member_ids = db.select(Person.id).where(Person.family_id == family_key)

        def _for_family():
            statement = (
                db.select(ParentChildRelationship)
                .where(ParentChildRelationship.parent_id.in_(member_ids),
                       ParentChildRelationship.child_id.in_(member_ids))
                .order_by(ParentChildRelationship.created_at)
            )
            return self.db_session.execute(statement).scalars().all()

        return self.safe_query(_for_family, f"parent-child edges of family {family_id}")

    def spousal_for_family(self, family_id) -> list[SpousalRelationship]:
        """Spousal edges whose both ends belong to the family, in creation order"""
        family_key = to_uuid(family_id)
        member_ids = db.select(Person.id).where(Person.family_id == family_key)

        def _for_family():
            statement = (
                db.select(SpousalRelationship)
                .where(SpousalRelationship.spouse1_id.in_(member_ids),
                       SpousalRelationship.spouse2_id.in_(member_ids))
                .order_by(SpousalRelationship.created_at)
            )
            return self.db_session.execute(statement).scalars().all()

        return self.safe_query(_for_family, f"spousal edges of family {family_id}")

    def delete(self, relationship) -> None:
        def _delete():
            self.db_session.delete(relationship)

        return self.safe_operation(_delete, f"delete relationship {relationship.id}")
