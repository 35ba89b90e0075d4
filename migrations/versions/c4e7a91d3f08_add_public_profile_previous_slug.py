"""add_public_profile_previous_slug

Revision ID: c4e7a91d3f08
Revises: 5b1f0c7a2e94
Create Date: 2026-10-17 10:41:07.552914

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'c4e7a91d3f08'
down_revision: Union[str, Sequence[str], None] = '5b1f0c7a2e94'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Track the handle a seller is moving away from until listings follow."""
    op.add_column(
        'public_profiles',
        sa.Column('previous_slug', sa.String(length=30), nullable=True),
    )


def downgrade() -> None:
    """Drop the pending handle column."""
    op.drop_column('public_profiles', 'previous_slug')
