"""
SQLAlchemy models for family tree records, relationships and the edit approval workflow
"""

import uuid
from datetime import UTC, datetime

from sqlalchemy.dialects.postgresql import UUID as POSTGRESQL_UUID
from sqlalchemy.types import CHAR, TypeDecorator

from . import db


def utcnow():
    return datetime.now(UTC)


class UUID(TypeDecorator):
    """Platform-independent UUID type.

    Uses PostgreSQL's UUID type when available, otherwise uses CHAR(36)
    to store the UUID string.
    """
    impl = CHAR
    cache_ok = True

    def load_dialect_impl(self, dialect):
        if dialect.name == 'postgresql':
            return dialect.type_descriptor(POSTGRESQL_UUID())
        else:
            return dialect.type_descriptor(CHAR(36))

    def process_bind_param(self, value, dialect):
        if value is None:
            return value
        elif dialect.name == 'postgresql':
            return str(value)
        else:
            if not isinstance(value, uuid.UUID):
                return str(uuid.UUID(value))
            return str(value)

    def process_result_value(self, value, dialect):
        if value is None:
            return value
        else:
            if not isinstance(value, uuid.UUID):
                return uuid.UUID(value)
            return value


def _iso(value):
    return value.isoformat() if value else None


def _str_id(value):
    return str(value) if value else None


class Family(db.Model):
    """A family group owning a set of persons"""
    __tablename__ = 'families'

    id = db.Column(UUID(), primary_key=True, default=uuid.uuid4)
    family_name = db.Column(db.String(255), nullable=False)
    clan_name = db.Column(db.String(255))
    village_origin = db.Column(db.String(255))
    created_by = db.Column(db.String(128))
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    persons = db.relationship('Person', back_populates='family')

    def to_dict(self):
        return {
            'family_id': str(self.id),
            'family_name': self.family_name,
            'clan_name': self.clan_name,
            'village_origin': self.village_origin,
            'created_by': self.created_by,
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        }

    def __repr__(self):
        return f'<Family {self.family_name}>'


class Person(db.Model):
    """Model for individuals in the family tree"""
    __tablename__ = 'persons'

    # Attributes that may be changed through direct edits or the approval workflow
    EDITABLE_FIELDS = (
        'full_name', 'gender', 'date_of_birth', 'date_of_death',
        'place_of_birth', 'place_of_death', 'occupation', 'biography',
        'clan_name', 'village_origin', 'alive_status', 'verified_by_elder',
        'claimed_by_user_id', 'profile_photo_url',
    )
    GENDERS = ('male', 'female', 'other', 'unset')

    id = db.Column(UUID(), primary_key=True, default=uuid.uuid4)
    family_id = db.Column(UUID(), db.ForeignKey('families.id'), nullable=False)

    full_name = db.Column(db.String(255), nullable=False)
    gender = db.Column(db.String(20))

    # ISO dates (YYYY-MM-DD) kept as text like the rest of the record
    date_of_birth = db.Column(db.String(32))
    date_of_death = db.Column(db.String(32))
    place_of_birth = db.Column(db.String(255))
    place_of_death = db.Column(db.String(255))

    occupation = db.Column(db.String(255))
    biography = db.Column(db.Text)
    clan_name = db.Column(db.String(255))
    village_origin = db.Column(db.String(255))
    alive_status = db.Column(db.Boolean, default=True)
    verified_by_elder = db.Column(db.Boolean, default=False)

    claimed_by_user_id = db.Column(db.String(128))
    profile_photo_url = db.Column(db.Text)

    created_by = db.Column(db.String(128))
    last_edited_by = db.Column(db.String(128))
    last_edited_at = db.Column(db.DateTime)
    created_at = db.Column(db.DateTime, default=utcnow)
    updated_at = db.Column(db.DateTime, default=utcnow, onupdate=utcnow)

    family = db.relationship('Family', back_populates='persons')

    __table_args__ = (
        db.Index('idx_persons_family_id', 'family_id'),
    )

    def editable_values(self) -> dict:
        """Current values of every editable attribute"""
        return {field: getattr(self, field) for field in self.EDITABLE_FIELDS}

    def to_dict(self):
        data = {'person_id': str(self.id), 'family_id': _str_id(self.family_id)}
        data.update(self.editable_values())
        data.update({
            'created_by': self.created_by,
            'last_edited_by': self.last_edited_by,
            'last_edited_at': _iso(self.last_edited_at),
            'created_at': _iso(self.created_at),
            'updated_at': _iso(self.updated_at),
        })
        return data

    def __repr__(self):
        return f'<Person {self.full_name}>'


class ParentChildRelationship(db.Model):
    """Directed parent -> child edge"""
    __tablename__ = 'parent_child_relationships'

    id = db.Column(UUID(), primary_key=True, default=uuid.uuid4)
    parent_id = db.Column(UUID(), db.ForeignKey('persons.id'), nullable=False)
    child_id = db.Column(UUID(), db.ForeignKey('persons.id'), nullable=False)
    notes = db.Column(db.Text)
    created_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (
        db.UniqueConstraint('parent_id', 'child_id', name='unique_parent_child'),
        db.CheckConstraint('parent_id != child_id', name='no_self_parent'),
        db.Index('idx_parent_child_parent', 'parent_id'),
        db.Index('idx_parent_child_child', 'child_id'),
    )

    def to_dict(self):
        return {
            'relationship_id': str(self.id),
            'parent_id': str(self.parent_id),
            'child_id': str(self.child_id),
            'notes': self.notes,
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<ParentChild {self.parent_id} -> {self.child_id}>'


class SpousalRelationship(db.Model):
    """Undirected spouse edge, stored once with the pair in sorted order"""
    __tablename__ = 'spousal_relationships'

    MARITAL_STATUSES = ('married', 'divorced', 'widowed', 'separated')

    id = db.Column(UUID(), primary_key=True, default=uuid.uuid4)
    spouse1_id = db.Column(UUID(), db.ForeignKey('persons.id'), nullable=False)
    spouse2_id = db.Column(UUID(), db.ForeignKey('persons.id'), nullable=False)
    marital_status = db.Column(db.String(20), default='married')
    created_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (
        db.UniqueConstraint('spouse1_id', 'spouse2_id', name='unique_spouse_pair'),
        db.CheckConstraint('spouse1_id != spouse2_id', name='no_self_spouse'),
        db.Index('idx_spouse_1', 'spouse1_id'),
        db.Index('idx_spouse_2', 'spouse2_id'),
    )

    def other_spouse(self, person_id):
        return self.spouse2_id if self.spouse1_id == person_id else self.spouse1_id

    def to_dict(self):
        return {
            'relationship_id': str(self.id),
            'spouse1_id': str(self.spouse1_id),
            'spouse2_id': str(self.spouse2_id),
            'marital_status': self.marital_status,
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Spouses {self.spouse1_id} & {self.spouse2_id}>'


class Story(db.Model):
    """Oral history attached to a person"""
    __tablename__ = 'stories'

    id = db.Column(UUID(), primary_key=True, default=uuid.uuid4)
    person_id = db.Column(UUID(), db.ForeignKey('persons.id'), nullable=False)
    family_id = db.Column(UUID(), db.ForeignKey('families.id'))
    title = db.Column(db.String(255), nullable=False)
    story_text = db.Column(db.Text)
    audio_url = db.Column(db.Text)
    narrator_name = db.Column(db.String(255))
    narrator_relationship = db.Column(db.String(255))
    recorded_date = db.Column(db.String(32))
    location = db.Column(db.String(255))
    tags = db.Column(db.JSON, default=list)
    created_by = db.Column(db.String(128))
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'story_id': str(self.id),
            'person_id': str(self.person_id),
            'family_id': _str_id(self.family_id),
            'title': self.title,
            'story_text': self.story_text,
            'audio_url': self.audio_url,
            'narrator_name': self.narrator_name,
            'narrator_relationship': self.narrator_relationship,
            'recorded_date': self.recorded_date,
            'location': self.location,
            'tags': self.tags or [],
            'created_by': self.created_by,
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Story {self.title}>'


class Document(db.Model):
    """Reference to an uploaded file (photo, certificate, recording)"""
    __tablename__ = 'documents'

    DOCUMENT_TYPES = ('photo', 'certificate', 'audio', 'video', 'other')

    id = db.Column(UUID(), primary_key=True, default=uuid.uuid4)
    person_id = db.Column(UUID(), db.ForeignKey('persons.id'), nullable=False)
    family_id = db.Column(UUID(), db.ForeignKey('families.id'))
    document_type = db.Column(db.String(50), nullable=False, default='other')
    file_url = db.Column(db.Text, nullable=False)
    file_name = db.Column(db.String(255))
    mime_type = db.Column(db.String(100))
    title = db.Column(db.String(255))
    description = db.Column(db.Text)
    uploaded_by = db.Column(db.String(128))
    created_at = db.Column(db.DateTime, default=utcnow)

    def to_dict(self):
        return {
            'document_id': str(self.id),
            'person_id': str(self.person_id),
            'family_id': _str_id(self.family_id),
            'document_type': self.document_type,
            'file_url': self.file_url,
            'file_name': self.file_name,
            'mime_type': self.mime_type,
            'title': self.title,
            'description': self.description,
            'uploaded_by': self.uploaded_by,
            'created_at': _iso(self.created_at),
        }

    def __repr__(self):
        return f'<Document {self.file_name or self.file_url}>'


class PendingChange(db.Model):
    """Proposed field-level edit to a person awaiting approval"""
    __tablename__ = 'pending_changes'

    STATUS_PENDING = 'pending'
    STATUS_APPROVED = 'approved'
    STATUS_REJECTED = 'rejected'

    id = db.Column(UUID(), primary_key=True, default=uuid.uuid4)
    person_id = db.Column(UUID(), nullable=False)
    family_id = db.Column(UUID())
    changed_by = db.Column(db.String(128), nullable=False)

    changes = db.Column(db.JSON, nullable=False)  # {field: {"old": ..., "new": ...}}
    changed_fields = db.Column(db.JSON, nullable=False)
    reason = db.Column(db.Text)

    status = db.Column(db.String(20), nullable=False, default=STATUS_PENDING)
    conflicts_with = db.Column(db.JSON, default=list)
    created_at = db.Column(db.DateTime, default=utcnow)

    approved_by = db.Column(db.String(128))
    approved_at = db.Column(db.DateTime)
    approval_notes = db.Column(db.Text)

    rejected_by = db.Column(db.String(128))
    rejected_at = db.Column(db.DateTime)
    rejection_reason = db.Column(db.Text)

    __table_args__ = (
        db.Index('idx_pending_person_status', 'person_id', 'status'),
        db.Index('idx_pending_family_status', 'family_id', 'status'),
    )

    @property
    def is_pending(self):
        return self.status == self.STATUS_PENDING

    def to_dict(self):
        return {
            'pending_change_id': str(self.id),
            'person_id': str(self.person_id),
            'family_id': _str_id(self.family_id),
            'changed_by': self.changed_by,
            'changes': self.changes,
            'changed_fields': self.changed_fields,
            'reason': self.reason,
            'status': self.status,
            'conflicts_with': list(self.conflicts_with or []),
            'created_at': _iso(self.created_at),
            'approved_by': self.approved_by,
            'approved_at': _iso(self.approved_at),
            'approval_notes': self.approval_notes,
            'rejected_by': self.rejected_by,
            'rejected_at': _iso(self.rejected_at),
            'rejection_reason': self.rejection_reason,
        }

    def __repr__(self):
        return f'<PendingChange {self.id} {self.status}>'


class EditHistory(db.Model):
    """Write-once record of an approved change"""
    __tablename__ = 'edit_history'

    id = db.Column(UUID(), primary_key=True, default=uuid.uuid4)
    person_id = db.Column(UUID(), nullable=False)
    family_id = db.Column(UUID())
    pending_change_id = db.Column(UUID())
    changed_by = db.Column(db.String(128), nullable=False)
    approved_by = db.Column(db.String(128), nullable=False)
    changes = db.Column(db.JSON, nullable=False)
    reason = db.Column(db.Text)
    approval_notes = db.Column(db.Text)
    status = db.Column(db.String(20), nullable=False, default='approved')
    created_at = db.Column(db.DateTime, default=utcnow)
    approved_at = db.Column(db.DateTime, default=utcnow)

    __table_args__ = (
        db.Index('idx_history_person', 'person_id'),
    )

    def to_dict(self):
        return {
            'history_id': str(self.id),
            'person_id': str(self.person_id),
            'family_id': _str_id(self.family_id),
            'pending_change_id': _str_id(self.pending_change_id),
            'changed_by': self.changed_by,
            'approved_by': self.approved_by,
            'changes': self.changes,
            'reason': self.reason,
            'approval_notes': self.approval_notes,
            'status': self.status,
            'created_at': _iso(self.created_at),
            'approved_at': _iso(self.approved_at),
        }

    def __repr__(self):
        return f'<EditHistory {self.person_id} by {self.approved_by}>'
