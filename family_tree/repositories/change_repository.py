"""
Repositories for pending changes and the append-only edit history
"""

from family_tree.database import db
from family_tree.database.models import EditHistory, PendingChange
from family_tree.repositories.base_repository import BaseRepository, ModelRepository, to_uuid


class PendingChangeRepository(ModelRepository[PendingChange]):
    """Repository for proposed edits"""

    def __init__(self, db_session=None):
        super().__init__(PendingChange, db_session)

    def find_pending_for_person(self, person_id) -> list[PendingChange]:
        """Pending proposals for a person, newest first"""
        return self.query(
            {'person_id': to_uuid(person_id), 'status': PendingChange.STATUS_PENDING},
            order_by=PendingChange.created_at.desc()
        )

    def find_pending_for_family(self, family_id) -> list[PendingChange]:
        """Pending proposals across a family, newest first"""
        return self.query(
            {'family_id': to_uuid(family_id), 'status': PendingChange.STATUS_PENDING},
            order_by=PendingChange.created_at.desc()
        )

    def add_conflict(self, change: PendingChange, other_id) -> PendingChange:
        """Record another proposal id in this one's conflict list"""
        other_id = str(other_id)
        existing = list(change.conflicts_with or [])
        if other_id in existing:
            return change
        # Assign a new list so the JSON column is marked dirty
        return self.update(change, conflicts_with=existing + [other_id])


class EditHistoryRepository(BaseRepository):
    """Append-only store of approved changes; entries are never updated or deleted"""

    def append(self, **kwargs) -> EditHistory:
        def _append():
            entry = EditHistory(**kwargs)
            self.db_session.add(entry)
            return entry

        return self.safe_operation(_append, f"append history for {kwargs.get('person_id')}")

    def list_for_person(self, person_id, limit: int = 50) -> list[EditHistory]:
        """History entries for a person, newest first"""
        key = to_uuid(person_id)

        def _list_for_person():
            statement = (
                db.select(EditHistory)
                .where(EditHistory.person_id == key)
                .order_by(EditHistory.created_at.desc())
                .limit(limit)
            )
            return self.db_session.execute(statement).scalars().all()

        return self.safe_query(_list_for_person, f"list history for {person_id}")
