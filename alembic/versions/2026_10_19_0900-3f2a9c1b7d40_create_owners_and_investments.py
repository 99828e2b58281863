"""create owners and investments tables

Revision ID: 3f2a9c1b7d40
Revises:
Create Date: 2026-10-19 09:00:00.000000+00:00

"""
import sqlalchemy as sa
from alembic import op
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision = '3f2a9c1b7d40'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    # Create owners table
    op.create_table(
        'owners',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('national_id', sa.String(length=11), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('attributes', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
    )
    op.create_index('ix_owners_id', 'owners', ['id'])
    op.create_index('ix_owners_national_id', 'owners', ['national_id'], unique=True)
    op.create_index('ix_owners_created_at', 'owners', ['created_at'])

    # Create investments table
    op.create_table(
        'investments',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('owner_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('category', sa.String(length=50), nullable=False),
        sa.Column('code', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.Numeric(precision=18, scale=2), nullable=False),
        sa.Column('operation', sa.String(length=10), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False, server_default=sa.text('now()')),
        sa.ForeignKeyConstraint(['owner_id'], ['owners.id'], ondelete='RESTRICT'),
    )
    op.create_index('ix_investments_id', 'investments', ['id'])
    op.create_index('ix_investments_owner_id', 'investments', ['owner_id'])
    op.create_index('ix_investments_category', 'investments', ['category'])
    op.create_index('ix_investments_created_at', 'investments', ['created_at'])


def downgrade() -> None:
    op.drop_index('ix_investments_created_at', table_name='investments')
    op.drop_index('ix_investments_category', table_name='investments')
    op.drop_index('ix_investments_owner_id', table_name='investments')
    op.drop_index('ix_investments_id', table_name='investments')
    op.drop_table('investments')

    op.drop_index('ix_owners_created_at', table_name='owners')
    op.drop_index('ix_owners_national_id', table_name='owners')
    op.drop_index('ix_owners_id', table_name='owners')
    op.drop_table('owners')
