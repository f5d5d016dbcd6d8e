"""add_rls_policies

Revision ID: 8c5f3a6d1e47
Revises: 4b1d7e09c2a1
Create Date: 2026-10-12 10:02:55.117804

"""

from collections.abc import Sequence

from alembic import op

# revision identifiers, used by Alembic.
revision: str = "8c5f3a6d1e47"
down_revision: str | Sequence[str] | None = "4b1d7e09c2a1"
branch_labels: str | Sequence[str] | None = None
depends_on: str | Sequence[str] | None = None


def upgrade() -> None:
    """Add Row Level Security policies for direct Supabase client access.

    The API connects with a service account that bypasses RLS. These policies
    apply to browser clients reading through PostgREST or realtime.
    """
    # SECURITY DEFINER so the admin lookup does not recurse into profiles RLS
    op.execute("""
        CREATE OR REPLACE FUNCTION is_profile_admin(uid UUID)
        RETURNS BOOLEAN
        LANGUAGE sql
        SECURITY DEFINER
        STABLE
        SET search_path = public
        AS $$
            SELECT EXISTS (
                SELECT 1 FROM profiles WHERE id = uid AND role = 'admin'
            );
        $$;
    """)

    for table in ["profiles", "salons"]:
        op.execute(f"ALTER TABLE {table} ENABLE ROW LEVEL SECURITY;")

    # Profiles: own row, or any row for admins. Writes go through the API.
    op.execute("""
        CREATE POLICY profile_select ON profiles
            FOR SELECT USING (
                id = (SELECT auth.uid())
                OR is_profile_admin((SELECT auth.uid()))
            );
    """)

    # Salons are public listings
    op.execute("""
        CREATE POLICY salon_select ON salons
            FOR SELECT USING (true);
    """)


def downgrade() -> None:
    """Remove RLS policies and disable RLS."""
    op.execute("DROP POLICY IF EXISTS salon_select ON salons;")
    op.execute("DROP POLICY IF EXISTS profile_select ON profiles;")

    for table in ["profiles", "salons"]:
        op.execute(f"ALTER TABLE {table} DISABLE ROW LEVEL SECURITY;")

    op.execute("DROP FUNCTION IF EXISTS is_profile_admin(UUID);")
