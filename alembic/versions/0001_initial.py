"""initial schema: users, ticket batches, bookings

Revision ID: 0001_initial
Revises:
Create Date: 2025-10-04
"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '0001_initial'
down_revision = None
branch_labels = None
depends_on = None

def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('full_name', sa.String(length=255), nullable=False),
        sa.Column('hashed_password', sa.String(length=255), nullable=False),
        sa.Column('role', sa.String(length=32), nullable=False, server_default='staff'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.UniqueConstraint('email'),
    )
    op.create_index('ix_users_email', 'users', ['email'])
    op.create_table('ticket_batches',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('country_code', sa.String(length=2), nullable=False),
        sa.Column('airline', sa.String(length=120), nullable=False),
        sa.Column('flight_date', sa.Date(), nullable=False),
        sa.Column('flight_time', sa.String(length=5), nullable=False),
        sa.Column('buying_price', sa.Numeric(10,2), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('available_count', sa.Integer(), nullable=False),
        sa.Column('agent_name', sa.String(length=255), nullable=False),
        sa.Column('agent_contact', sa.String(length=32), nullable=False),
        sa.Column('agent_address', sa.Text(), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint('available_count >= 0', name='ck_ticket_batch_available_floor'),
        sa.CheckConstraint('available_count <= quantity', name='ck_ticket_batch_available_cap'),
    )
    op.create_index('ix_ticket_batches_country_code', 'ticket_batches', ['country_code'])
    op.create_index('ix_ticket_batches_airline', 'ticket_batches', ['airline'])
    op.create_index('ix_ticket_batches_flight_date', 'ticket_batches', ['flight_date'])
    op.create_table('bookings',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('batch_id', sa.Integer(), sa.ForeignKey('ticket_batches.id'), nullable=False),
        sa.Column('passenger_name', sa.String(length=255), nullable=False),
        sa.Column('passenger_passport', sa.String(length=32), nullable=False),
        sa.Column('passenger_phone', sa.String(length=32), nullable=False),
        sa.Column('passenger_email', sa.String(length=255), nullable=True),
        sa.Column('pax_count', sa.Integer(), nullable=False, server_default='1'),
        sa.Column('selling_price', sa.Numeric(10,2), nullable=False),
        sa.Column('payment_type', sa.String(length=16), nullable=False, server_default='full'),
        sa.Column('status', sa.String(length=16), nullable=False, server_default='pending'),
        sa.Column('comments', sa.Text(), nullable=True),
        sa.Column('created_by', sa.String(length=255), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('confirmed_at', sa.DateTime(), nullable=True),
    )
    op.create_index('ix_bookings_batch_id', 'bookings', ['batch_id'])
    op.create_index('ix_bookings_status', 'bookings', ['status'])


def downgrade():
    op.drop_index('ix_bookings_status', table_name='bookings')
    op.drop_index('ix_bookings_batch_id', table_name='bookings')
    op.drop_table('bookings')
    op.drop_index('ix_ticket_batches_flight_date', table_name='ticket_batches')
    op.drop_index('ix_ticket_batches_airline', table_name='ticket_batches')
    op.drop_index('ix_ticket_batches_country_code', table_name='ticket_batches')
    op.drop_table('ticket_batches')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
