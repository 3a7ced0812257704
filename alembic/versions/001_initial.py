"""Initial schema: users, tours, passengers, passenger records and archive

Revision ID: 001_initial
Revises:
Create Date: 2025-04-10
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '001_initial'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _record_columns():
    return [
        sa.Column('tour_date', sa.DateTime(), nullable=False),
        sa.Column('tour_type', sa.String(256), nullable=True),
        sa.Column('seats', sa.String(256), nullable=True),
        sa.Column('surname', sa.String(256), nullable=True),
        sa.Column('first_name', sa.String(256), nullable=True),
        sa.Column('pax', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('email_address', sa.String(320), nullable=True),
        sa.Column('unique_reference', sa.String(256), nullable=True),
        sa.Column('phone_number', sa.String(64), nullable=True),
        sa.Column('checked_in', sa.Boolean(), nullable=False, server_default=sa.false()),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.String(36), primary_key=True),
        sa.Column('email', sa.String(320), nullable=False),
        sa.Column('user_name', sa.String(256), nullable=True),
        sa.Column('hashed_password', sa.String(255), nullable=False),
        sa.Column('role', sa.String(30), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('last_login', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_role', 'users', ['role'])

    op.create_table(
        'tours',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('tour_date', sa.DateTime(), nullable=False),
        sa.Column('tour_type', sa.String(256), nullable=True),
        sa.Column('tour_name', sa.String(256), nullable=True),
        sa.Column('guide_name', sa.String(256), nullable=True),
    )
    op.create_index('ix_tours_tour_type', 'tours', ['tour_type'])

    op.create_table(
        'passengers',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('passenger_guid', sa.String(36), nullable=False),
        sa.Column('tour_id', sa.Integer(), sa.ForeignKey('tours.id', ondelete='CASCADE'), nullable=False),
        sa.Column('timestamp', sa.DateTime(), nullable=False),
        sa.Column('surname', sa.String(256), nullable=True),
        sa.Column('first_name', sa.String(256), nullable=True),
        sa.Column('pax', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('email', sa.String(320), nullable=True),
        sa.Column('unique_reference', sa.String(256), nullable=True),
        sa.Column('other_booking_reference', sa.String(256), nullable=True),
        sa.Column('phone_number', sa.String(64), nullable=True),
        sa.Column('qr_code_image', sa.Text(), nullable=True),
        sa.Column('checked_in', sa.Boolean(), nullable=False, server_default=sa.false()),
    )
    op.create_index('ix_passengers_tour_id', 'passengers', ['tour_id'])

    op.create_table(
        'passenger_records',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        *_record_columns(),
    )
    op.create_index('ix_passenger_records_tour_date', 'passenger_records', ['tour_date'])
    op.create_index('ix_passenger_records_tour_type', 'passenger_records', ['tour_type'])
    op.create_index('ix_passenger_records_unique_reference', 'passenger_records', ['unique_reference'])

    op.create_table(
        'archive_passenger_records',
        sa.Column('id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('archived_at', sa.DateTime(), nullable=False),
        *_record_columns(),
    )
    op.create_index('ix_archive_passenger_records_archived_at', 'archive_passenger_records', ['archived_at'])
    op.create_index('ix_archive_passenger_records_tour_date', 'archive_passenger_records', ['tour_date'])
    op.create_index('ix_archive_passenger_records_tour_type', 'archive_passenger_records', ['tour_type'])
    op.create_index('ix_archive_passenger_records_unique_reference', 'archive_passenger_records', ['unique_reference'])
    op.create_index('ix_archive_tour_type_date', 'archive_passenger_records', ['tour_type', 'tour_date'])


def downgrade() -> None:
    op.drop_table('archive_passenger_records')
    op.drop_table('passenger_records')
    op.drop_table('passengers')
    op.drop_table('tours')
    op.drop_table('users')
