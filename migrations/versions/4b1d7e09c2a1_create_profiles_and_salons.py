"""create_profiles_and_salons

Revision ID: 4b1d7e09c2a1
Revises:
Create Date: 2026-10-12 09:41:18.502331

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '4b1d7e09c2a1'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profiles and salons tables, both keyed by (app_id, id)."""
    op.create_table('profiles',
        sa.Column('app_id', sa.String(length=255), nullable=False),
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('display_name', sa.String(length=255), nullable=True),
        sa.Column('photo_url', sa.String(length=2048), nullable=True),
        sa.Column('phone_number', sa.String(length=50), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='customer'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('last_login_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.Column('owned_salons', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('associated_salons', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('favorite_salons', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('address', postgresql.JSONB(), nullable=True),
        sa.CheckConstraint("role IN ('customer', 'salon_owner', 'admin')", name='ck_profiles_role'),
        sa.PrimaryKeyConstraint('app_id', 'id'),
    )
    # text_pattern_ops keeps the email prefix range scan on the index
    op.execute(
        "CREATE INDEX ix_profiles_app_email ON profiles (app_id, email text_pattern_ops)"
    )

    op.create_table('salons',
        sa.Column('app_id', sa.String(length=255), nullable=False),
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('address', postgresql.JSONB(), nullable=False),
        sa.Column('owner_id', sa.UUID(), nullable=True),
        sa.Column('phone_number', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=True),
        sa.Column('website', sa.String(length=2048), nullable=True),
        sa.Column('image_urls', postgresql.JSONB(), server_default='[]', nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint(
            "status IN ('active', 'inactive', 'pending_approval', 'suspended')",
            name='ck_salons_status',
        ),
        sa.PrimaryKeyConstraint('app_id', 'id'),
    )
    op.create_index('ix_salons_app_owner', 'salons', ['app_id', 'owner_id'], unique=False)


def downgrade() -> None:
    """Drop salons and profiles tables."""
    op.drop_index('ix_salons_app_owner', table_name='salons')
    op.drop_table('salons')
    op.execute("DROP INDEX IF EXISTS ix_profiles_app_email")
    op.drop_table('profiles')
