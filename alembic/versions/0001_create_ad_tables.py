"""create ad and photo tables

Revision ID: 0001_create_ad_tables
Revises: 
Create Date: 2026-10-19 10:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '0001_create_ad_tables'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        't_ad',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('title', sa.String(), nullable=False),
        sa.Column('description', sa.String(), nullable=False),
        sa.Column('price', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    # 광고 삭제 시 cascade 없음
    op.create_table(
        't_photo',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('ad_id', sa.Integer(), sa.ForeignKey('t_ad.id'), nullable=False),
        sa.Column('url_original', sa.String(), nullable=False),
    )
    op.create_index('ix_t_photo_ad_id', 't_photo', ['ad_id'])


def downgrade() -> None:
    # 역순 삭제
    op.drop_index('ix_t_photo_ad_id', table_name='t_photo')
    op.drop_table('t_photo')
    op.drop_table('t_ad')
