"""initial_schema

Revision ID: 000000000001
Revises: 
Create Date: 2026-10-18 12:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '000000000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # ENUMS
    sa.Enum('private', 'shared', 'public', name='visibility_enum').create(op.get_bind())
    sa.Enum(
        'created', 'updated', 'title_changed', 'content_changed', 'visibility_changed',
        name='change_type_enum',
    ).create(op.get_bind())

    # 1. users
    op.create_table('users',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=320), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email')
    )

    # 2. documents
    op.create_table('documents',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('visibility', postgresql.ENUM('private', 'shared', 'public', name='visibility_enum', create_type=False), nullable=False),
        sa.Column('author_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('current_version', sa.Integer(), nullable=False),
        sa.Column('last_version_created_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['author_id'], ['users.id'], )
    )

    # 3. document_versions
    op.create_table('document_versions',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('document_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('version_number', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('content', sa.Text(), nullable=False),
        sa.Column('visibility', postgresql.ENUM('private', 'shared', 'public', name='visibility_enum', create_type=False), nullable=False),
        sa.Column('changed_by', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('change_type', postgresql.ENUM('created', 'updated', 'title_changed', 'content_changed', 'visibility_changed', name='change_type_enum', create_type=False), nullable=False),
        sa.Column('change_summary', sa.String(), nullable=False),
        sa.Column('word_count', sa.Integer(), nullable=False),
        sa.Column('character_count', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['document_id'], ['documents.id'], ),
        sa.UniqueConstraint('document_id', 'version_number', name='uq_document_version')
    )
    op.create_index('ix_document_versions_document_version', 'document_versions', ['document_id', 'version_number'])
    op.create_index('ix_document_versions_document_created', 'document_versions', ['document_id', 'created_at'])

    # 4. audit_logs
    op.create_table('audit_logs',
        sa.Column('id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('entity_type', sa.String(), nullable=False),
        sa.Column('entity_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('action', sa.String(), nullable=False),
        sa.Column('actor', postgresql.UUID(as_uuid=True), nullable=True),
        sa.Column('metadata', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_audit_logs_entity', 'audit_logs', ['entity_type', 'entity_id'])


def downgrade() -> None:
    op.drop_index('ix_audit_logs_entity', table_name='audit_logs')
    op.drop_table('audit_logs')
    op.drop_index('ix_document_versions_document_created', table_name='document_versions')
    op.drop_index('ix_document_versions_document_version', table_name='document_versions')
    op.drop_table('document_versions')
    op.drop_table('documents')
    op.drop_table('users')

    sa.Enum(name='change_type_enum').drop(op.get_bind())
    sa.Enum(name='visibility_enum').drop(op.get_bind())
