"""create_marketplace_tables

Revision ID: 5b1f0c7a2e94
Revises:
Create Date: 2026-10-16 09:12:44.318205

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = '5b1f0c7a2e94'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create profile, handle namespace and listing tables."""
    op.create_table('user_profiles',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('district', sa.String(length=100), nullable=False),
        sa.Column('phone', sa.String(length=40), nullable=False),
        sa.Column('phone_e164', sa.String(length=20), nullable=False),
        sa.Column('name_change_count', sa.Integer(), server_default='0', nullable=False),
        sa.Column('recent_locations', postgresql.JSONB(astext_type=sa.Text()), server_default='[]', nullable=True),
        sa.Column('last_location_id', sa.String(length=255), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('name_change_count >= 0', name='ck_user_profiles_name_change_count'),
        sa.PrimaryKeyConstraint('id'),
    )

    op.create_table('public_profiles',
        sa.Column('id', sa.String(length=128), nullable=False),
        sa.Column('display_name', sa.String(length=201), nullable=False),
        sa.Column('avatar_url', sa.String(length=500), nullable=True),
        sa.Column('seller_slug', sa.String(length=30), nullable=True),
        sa.Column('location_city', sa.String(length=100), nullable=True),
        sa.Column('location_region', sa.String(length=100), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_public_profiles_seller_slug', 'public_profiles', ['seller_slug'], unique=False)

    op.create_table('name_changes',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('prev_first', sa.String(length=100), nullable=False),
        sa.Column('prev_last', sa.String(length=100), nullable=False),
        sa.Column('new_first', sa.String(length=100), nullable=False),
        sa.Column('new_last', sa.String(length=100), nullable=False),
        sa.Column('changed_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_name_changes_user_id', 'name_changes', ['user_id'], unique=False)

    op.create_table('user_locations',
        sa.Column('user_id', sa.String(length=128), nullable=False),
        sa.Column('location_id', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=False),
        sa.Column('region', sa.String(length=100), nullable=False),
        sa.Column('country', sa.String(length=100), nullable=False),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lon', sa.Float(), nullable=True),
        sa.Column('visit_count', sa.Integer(), server_default='1', nullable=False),
        sa.Column('first_seen_at', sa.DateTime(), nullable=False),
        sa.Column('last_seen_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('user_id', 'location_id'),
    )

    # Handles are reserved before the profile row exists, so owner_id has no FK.
    op.create_table('slug_reservations',
        sa.Column('slug', sa.String(length=30), nullable=False),
        sa.Column('owner_id', sa.String(length=128), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.PrimaryKeyConstraint('slug'),
    )
    op.create_index('ix_slug_reservations_owner_id', 'slug_reservations', ['owner_id'], unique=False)

    op.create_table('listings',
        sa.Column('id', sa.UUID(), nullable=False),
        sa.Column('owner_id', sa.String(length=128), nullable=False),
        sa.Column('owner_slug', sa.String(length=30), nullable=False),
        sa.Column('owner_name', sa.String(length=201), nullable=False),
        sa.Column('owner_avatar_url', sa.String(length=500), nullable=True),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('price', sa.Numeric(precision=12, scale=2), server_default='0', nullable=False),
        sa.Column('location', sa.String(length=200), server_default='Unknown', nullable=False),
        sa.Column('category', sa.String(length=100), server_default='Other', nullable=False),
        sa.Column('description', sa.Text(), server_default='', nullable=False),
        sa.Column('images', postgresql.JSONB(astext_type=sa.Text()), server_default='[]', nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.CheckConstraint('price >= 0', name='ck_listings_price'),
        sa.ForeignKeyConstraint(['owner_id'], ['user_profiles.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    # Keyset pagination for handle propagation and newest-first seller pages
    op.create_index('ix_listings_owner_id_id', 'listings', ['owner_id', 'id'], unique=False)
    op.create_index('ix_listings_owner_id_created_at', 'listings', ['owner_id', 'created_at'], unique=False)


def downgrade() -> None:
    """Drop all marketplace tables."""
    op.drop_index('ix_listings_owner_id_created_at', table_name='listings')
    op.drop_index('ix_listings_owner_id_id', table_name='listings')
    op.drop_table('listings')
    op.drop_index('ix_slug_reservations_owner_id', table_name='slug_reservations')
    op.drop_table('slug_reservations')
    op.drop_table('user_locations')
    op.drop_index('ix_name_changes_user_id', table_name='name_changes')
    op.drop_table('name_changes')
    op.drop_index('ix_public_profiles_seller_slug', table_name='public_profiles')
    op.drop_table('public_profiles')
    op.drop_table('user_profiles')
