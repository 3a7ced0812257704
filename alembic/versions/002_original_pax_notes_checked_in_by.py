"""Add original_pax, notes and checked_in_by to passenger and archive records

Revision ID: 002_original_pax_notes_checked_in_by
Revises: 001_initial
Create Date: 2025-04-16

original_pax snapshots the imported party size so later manual pax
corrections can be compared against it. Existing rows get 0.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '002_original_pax_notes_checked_in_by'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

TABLES = ('passenger_records', 'archive_passenger_records')


def upgrade() -> None:
    for table in TABLES:
        with op.batch_alter_table(table) as batch_op:
            batch_op.add_column(sa.Column('original_pax', sa.Integer(), nullable=False, server_default='0'))
            batch_op.add_column(sa.Column('notes', sa.Text(), nullable=True))
            batch_op.add_column(sa.Column('checked_in_by', sa.String(256), nullable=True))


def downgrade() -> None:
    for table in TABLES:
        with op.batch_alter_table(table) as batch_op:
            batch_op.drop_column('checked_in_by')
            batch_op.drop_column('notes')
            batch_op.drop_column('original_pax')
