"""Create card, card_tag and study_review tables

Revision ID: 001_initial_migration
Revises:
Create Date: 2025-01-01 00:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_migration'
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        'card',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('front', sa.String(length=2000), nullable=False),
        sa.Column('back', sa.String(length=2000), nullable=False),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='active'),
        sa.Column('source', sa.String(length=16), nullable=False, server_default='manual'),
        sa.Column('study_weight', sa.Float(), nullable=False, server_default='1.0'),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=False),
        sa.Column('deleted_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        # Study weight always stays within [0.5, 5.0]
        sa.CheckConstraint('study_weight >= 0.5 AND study_weight <= 5.0', name='ck_card_study_weight_range'),
    )
    op.create_index(op.f('ix_card_user_id'), 'card', ['user_id'], unique=False)
    op.create_index(op.f('ix_card_status'), 'card', ['status'], unique=False)

    op.create_table(
        'card_tag',
        sa.Column('card_id', sa.Uuid(), nullable=False),
        sa.Column('tag', sa.String(length=100), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False, server_default='0'),
        sa.ForeignKeyConstraint(['card_id'], ['card.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('card_id', 'tag'),
    )
    op.create_index(op.f('ix_card_tag_tag'), 'card_tag', ['tag'], unique=False)

    op.create_table(
        'study_review',
        sa.Column('id', sa.Uuid(), nullable=False),
        sa.Column('user_id', sa.Uuid(), nullable=False),
        sa.Column('card_id', sa.Uuid(), nullable=False),
        sa.Column('outcome', sa.String(length=16), nullable=False),
        sa.Column('previous_weight', sa.Float(), nullable=False),
        sa.Column('new_weight', sa.Float(), nullable=False),
        sa.Column('reviewed_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['card_id'], ['card.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint("outcome IN ('correct', 'incorrect', 'skipped')", name='ck_study_review_outcome'),
    )
    op.create_index(op.f('ix_study_review_user_id'), 'study_review', ['user_id'], unique=False)
    op.create_index(op.f('ix_study_review_card_id'), 'study_review', ['card_id'], unique=False)
    op.create_index(op.f('ix_study_review_reviewed_at'), 'study_review', ['reviewed_at'], unique=False)


def downgrade() -> None:
    op.drop_index(op.f('ix_study_review_reviewed_at'), table_name='study_review')
    op.drop_index(op.f('ix_study_review_card_id'), table_name='study_review')
    op.drop_index(op.f('ix_study_review_user_id'), table_name='study_review')
    op.drop_table('study_review')

    op.drop_index(op.f('ix_card_tag_tag'), table_name='card_tag')
    op.drop_table('card_tag')

    op.drop_index(op.f('ix_card_status'), table_name='card')
    op.drop_index(op.f('ix_card_user_id'), table_name='card')
    op.drop_table('card')
