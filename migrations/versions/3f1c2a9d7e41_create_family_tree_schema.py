"""Create family tree records schema

Revision ID: 3f1c2a9d7e41
Revises:
Create Date: 2026-10-18 09:12:37.514022

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '3f1c2a9d7e41'
down_revision = None
branch_labels = None
depends_on = None


def upgrade():
    op.create_table(
        'families',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('family_name', sa.String(length=255), nullable=False),
        sa.Column('clan_name', sa.String(length=255), nullable=True),
        sa.Column('village_origin', sa.String(length=255), nullable=True),
        sa.Column('created_by', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'persons',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('family_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('gender', sa.String(length=20), nullable=True),
        sa.Column('date_of_birth', sa.String(length=32), nullable=True),
        sa.Column('date_of_death', sa.String(length=32), nullable=True),
        sa.Column('place_of_birth', sa.String(length=255), nullable=True),
        sa.Column('place_of_death', sa.String(length=255), nullable=True),
        sa.Column('occupation', sa.String(length=255), nullable=True),
        sa.Column('biography', sa.Text(), nullable=True),
        sa.Column('clan_name', sa.String(length=255), nullable=True),
        sa.Column('village_origin', sa.String(length=255), nullable=True),
        sa.Column('alive_status', sa.Boolean(), nullable=True),
        sa.Column('verified_by_elder', sa.Boolean(), nullable=True),
        sa.Column('claimed_by_user_id', sa.String(length=128), nullable=True),
        sa.Column('profile_photo_url', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=128), nullable=True),
        sa.Column('last_edited_by', sa.String(length=128), nullable=True),
        sa.Column('last_edited_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['family_id'], ['families.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_persons_family_id', 'persons', ['family_id'])

    op.create_table(
        'parent_child_relationships',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('parent_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('child_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['parent_id'], ['persons.id']),
        sa.ForeignKeyConstraint(['child_id'], ['persons.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('parent_id', 'child_id', name='unique_parent_child'),
        sa.CheckConstraint('parent_id != child_id', name='no_self_parent')
    )
    op.create_index('idx_parent_child_parent', 'parent_child_relationships', ['parent_id'])
    op.create_index('idx_parent_child_child', 'parent_child_relationships', ['child_id'])

    op.create_table(
        'spousal_relationships',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('spouse1_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('spouse2_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('marital_status', sa.String(length=20), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['spouse1_id'], ['persons.id']),
        sa.ForeignKeyConstraint(['spouse2_id'], ['persons.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('spouse1_id', 'spouse2_id', name='unique_spouse_pair'),
        sa.CheckConstraint('spouse1_id != spouse2_id', name='no_self_spouse')
    )
    op.create_index('idx_spouse_1', 'spousal_relationships', ['spouse1_id'])
    op.create_index('idx_spouse_2', 'spousal_relationships', ['spouse2_id'])

    op.create_table(
        'stories',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('person_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('family_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('story_text', sa.Text(), nullable=True),
        sa.Column('audio_url', sa.Text(), nullable=True),
        sa.Column('narrator_name', sa.String(length=255), nullable=True),
        sa.Column('narrator_relationship', sa.String(length=255), nullable=True),
        sa.Column('recorded_date', sa.String(length=32), nullable=True),
        sa.Column('location', sa.String(length=255), nullable=True),
        sa.Column('tags', sa.JSON(), nullable=True),
        sa.Column('created_by', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['person_id'], ['persons.id']),
        sa.ForeignKeyConstraint(['family_id'], ['families.id']),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'documents',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('person_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('family_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('document_type', sa.String(length=50), nullable=False),
        sa.Column('file_url', sa.Text(), nullable=False),
        sa.Column('file_name', sa.String(length=255), nullable=True),
        sa.Column('mime_type', sa.String(length=100), nullable=True),
        sa.Column('title', sa.String(length=255), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('uploaded_by', sa.String(length=128), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['person_id'], ['persons.id']),
        sa.ForeignKeyConstraint(['family_id'], ['families.id']),
        sa.PrimaryKeyConstraint('id')
    )

    # Pending changes and history outlive the person they describe: no foreign keys
    op.create_table(
        'pending_changes',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('person_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('family_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('changed_by', sa.String(length=128), nullable=False),
        sa.Column('changes', sa.JSON(), nullable=False),
        sa.Column('changed_fields', sa.JSON(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('conflicts_with', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('approved_by', sa.String(length=128), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.Column('approval_notes', sa.Text(), nullable=True),
        sa.Column('rejected_by', sa.String(length=128), nullable=True),
        sa.Column('rejected_at', sa.DateTime(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_pending_person_status', 'pending_changes', ['person_id', 'status'])
    op.create_index('idx_pending_family_status', 'pending_changes', ['family_id', 'status'])

    op.create_table(
        'edit_history',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('person_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('family_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('pending_change_id', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('changed_by', sa.String(length=128), nullable=False),
        sa.Column('approved_by', sa.String(length=128), nullable=False),
        sa.Column('changes', sa.JSON(), nullable=False),
        sa.Column('reason', sa.Text(), nullable=True),
        sa.Column('approval_notes', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('approved_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_history_person', 'edit_history', ['person_id'])


def downgrade():
    op.drop_index('idx_history_person', table_name='edit_history')
    op.drop_table('edit_history')
    op.drop_index('idx_pending_family_status', table_name='pending_changes')
    op.drop_index('idx_pending_person_status', table_name='pending_changes')
    op.drop_table('pending_changes')
    op.drop_table('documents')
    op.drop_table('stories')
    op.drop_index('idx_spouse_2', table_name='spousal_relationships')
    op.drop_index('idx_spouse_1', table_name='spousal_relationships')
    op.drop_table('spousal_relationships')
    op.drop_index('idx_parent_child_child', table_name='parent_child_relationships')
    op.drop_index('idx_parent_child_parent', table_name='parent_child_relationships')
    op.drop_table('parent_child_relationships')
    op.drop_index('idx_persons_family_id', table_name='persons')
    op.drop_table('persons')
    op.drop_table('families')
