"""Create plant identifications table

Revision ID: 001
Revises:
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create plant_identifications table"""

    op.create_table('plant_identifications',
        sa.Column('identification_id', postgresql.UUID(as_uuid=True), nullable=False),
        sa.Column('user_id', sa.String(255), nullable=False),
        sa.Column('original_image', sa.Text(), nullable=False),
        sa.Column('status', sa.String(20), nullable=False, server_default='pending'),
        sa.Column('identified_plant', postgresql.JSON(), nullable=True),
        sa.Column('results', postgresql.JSON(), nullable=True),
        sa.Column('confidence', sa.Integer(), nullable=True),
        sa.Column('primary_service', sa.String(50), nullable=True),
        sa.Column('processing_time_ms', sa.Integer(), nullable=True),
        sa.Column('error', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),

        sa.PrimaryKeyConstraint('identification_id'),
        sa.CheckConstraint(
            "status IN ('pending', 'completed', 'failed')",
            name='ck_plant_identifications_status'
        ),
        sa.CheckConstraint(
            'confidence IS NULL OR (confidence >= 0 AND confidence <= 100)',
            name='ck_plant_identifications_confidence'
        ),
    )

    op.create_index('ix_plant_identifications_user_id', 'plant_identifications', ['user_id'])
    op.create_index(
        'ix_plant_identifications_user_created',
        'plant_identifications',
        ['user_id', 'created_at']
    )


def downgrade() -> None:
    """Drop plant_identifications table"""
    op.drop_index('ix_plant_identifications_user_created', table_name='plant_identifications')
    op.drop_index('ix_plant_identifications_user_id', table_name='plant_identifications')
    op.drop_table('plant_identifications')
