"""umrah group tickets and passenger tables

Revision ID: 0002_umrah_group_tickets
Revises: 0001_initial
Create Date: 2025-10-06
"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0002_umrah_group_tickets'
down_revision: Union[str, None] = '0001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

def upgrade() -> None:
    op.create_table(
        'umrah_group_tickets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('group_name', sa.String(length=255), nullable=False),
        sa.Column('package_type', sa.String(length=32), nullable=False, server_default='with-transport'),
        sa.Column('departure_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=False),
        sa.Column('ticket_count', sa.Integer(), nullable=False),
        sa.Column('total_cost', sa.Integer(), nullable=False),
        sa.Column('remaining_tickets', sa.Integer(), nullable=False),
        sa.Column('agent_name', sa.String(length=255), nullable=False),
        sa.Column('agent_contact', sa.String(length=64), nullable=True),
        sa.Column('purchase_notes', sa.Text(), nullable=True),
        sa.Column('departure_airline', sa.String(length=120), nullable=True),
        sa.Column('departure_flight_number', sa.String(length=32), nullable=True),
        sa.Column('departure_time', sa.String(length=5), nullable=True),
        sa.Column('departure_route', sa.String(length=64), nullable=True),
        sa.Column('return_airline', sa.String(length=120), nullable=True),
        sa.Column('return_flight_number', sa.String(length=32), nullable=True),
        sa.Column('return_time', sa.String(length=5), nullable=True),
        sa.Column('return_route', sa.String(length=64), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.CheckConstraint('ticket_count > 0', name='ck_group_ticket_count_positive'),
        sa.CheckConstraint('total_cost > 0', name='ck_group_ticket_cost_positive'),
        sa.CheckConstraint('remaining_tickets >= 0', name='ck_group_ticket_remaining_floor'),
        sa.CheckConstraint('remaining_tickets <= ticket_count', name='ck_group_ticket_remaining_cap'),
        sa.CheckConstraint('return_date > departure_date', name='ck_group_ticket_dates'),
    )
    # lookup used when picking a pool for a passenger's date pair
    op.create_index('ix_group_tickets_lookup', 'umrah_group_tickets', ['package_type', 'departure_date', 'return_date'])

    op.create_table(
        'umrah_with_transport',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('passenger_name', sa.String(length=255), nullable=False),
        sa.Column('pnr', sa.String(length=32), nullable=False),
        sa.Column('passport_number', sa.String(length=32), nullable=False),
        sa.Column('flight_airline_name', sa.String(length=120), nullable=False),
        sa.Column('departure_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=False),
        sa.Column('approved_by', sa.String(length=255), nullable=False),
        sa.Column('reference_agency', sa.String(length=255), nullable=False),
        sa.Column('emergency_flight_contact', sa.String(length=32), nullable=False),
        sa.Column('passenger_mobile', sa.String(length=32), nullable=False),
        sa.Column('group_ticket_id', sa.Integer(), sa.ForeignKey('umrah_group_tickets.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_umrah_with_transport_passenger_name', 'umrah_with_transport', ['passenger_name'])
    op.create_index('ix_umrah_with_transport_pnr', 'umrah_with_transport', ['pnr'])
    op.create_index('ix_umrah_with_transport_passport_number', 'umrah_with_transport', ['passport_number'])
    op.create_index('ix_umrah_with_transport_group_ticket_id', 'umrah_with_transport', ['group_ticket_id'])

    op.create_table(
        'umrah_without_transport',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('flight_departure_date', sa.Date(), nullable=False),
        sa.Column('return_date', sa.Date(), nullable=False),
        sa.Column('passenger_name', sa.String(length=255), nullable=False),
        sa.Column('passport_number', sa.String(length=32), nullable=False),
        sa.Column('entry_recorded_by', sa.String(length=255), nullable=False),
        sa.Column('total_amount', sa.Integer(), nullable=False),
        sa.Column('amount_paid', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('last_payment_date', sa.Date(), nullable=True),
        sa.Column('remarks', sa.Text(), nullable=True),
        sa.Column('group_ticket_id', sa.Integer(), sa.ForeignKey('umrah_group_tickets.id', ondelete='SET NULL'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
    )
    op.create_index('ix_umrah_without_transport_passenger_name', 'umrah_without_transport', ['passenger_name'])
    op.create_index('ix_umrah_without_transport_passport_number', 'umrah_without_transport', ['passport_number'])
    op.create_index('ix_umrah_without_transport_group_ticket_id', 'umrah_without_transport', ['group_ticket_id'])


def downgrade() -> None:
    op.drop_index('ix_umrah_without_transport_group_ticket_id', table_name='umrah_without_transport')
    op.drop_index('ix_umrah_without_transport_passport_number', table_name='umrah_without_transport')
    op.drop_index('ix_umrah_without_transport_passenger_name', table_name='umrah_without_transport')
    op.drop_table('umrah_without_transport')
    op.drop_index('ix_umrah_with_transport_group_ticket_id', table_name='umrah_with_transport')
    op.drop_index('ix_umrah_with_transport_passport_number', table_name='umrah_with_transport')
    op.drop_index('ix_umrah_with_transport_pnr', table_name='umrah_with_transport')
    op.drop_index('ix_umrah_with_transport_passenger_name', table_name='umrah_with_transport')
    op.drop_table('umrah_with_transport')
    op.drop_index('ix_group_tickets_lookup', table_name='umrah_group_tickets')
    op.drop_table('umrah_group_tickets')
