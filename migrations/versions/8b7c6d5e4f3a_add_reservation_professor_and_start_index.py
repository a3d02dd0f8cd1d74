"""add reservation professor_name and live start index

Revision ID: 8b7c6d5e4f3a
Revises: 4f1a2b3c5d6e
Create Date: 2025-11-26 18:30:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '8b7c6d5e4f3a'
down_revision = '4f1a2b3c5d6e'
branch_labels = None
depends_on = None


def upgrade():
    with op.batch_alter_table('reservations', schema=None) as batch_op:
        batch_op.add_column(sa.Column('professor_name', sa.String(length=160), nullable=True))

    # one non-cancelled reservation per (lab, start instant)
    op.create_index(
        'uq_reservation_lab_start_active',
        'reservations',
        ['lab_id', 'start_time'],
        unique=True,
        sqlite_where=sa.text("status != 'CANCELLED'"),
        postgresql_where=sa.text("status != 'CANCELLED'"),
    )


def downgrade():
    op.drop_index('uq_reservation_lab_start_active', table_name='reservations')

    with op.batch_alter_table('reservations', schema=None) as batch_op:
        batch_op.drop_column('professor_name')
