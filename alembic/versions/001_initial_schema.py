"""initial_schema

Revision ID: 001
Revises:
Create Date: 2026-01-12 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

availability        = sa.Enum('Available', 'Reserved', 'In Maintenance', name='availability')
reservation_status  = sa.Enum('pending', 'confirmed', 'cancelled', 'completed', name='reservation_status')
document_type       = sa.Enum('driver-license', 'valid-id', name='document_type')
document_status     = sa.Enum('pending', 'approved', 'rejected', name='document_status')
transaction_type    = sa.Enum('payment', 'deposit', 'refund', name='transaction_type')
transaction_status  = sa.Enum('pending', 'completed', 'cancelled', name='transaction_status')
contact_status      = sa.Enum('new', 'read', 'responded', name='contact_status')
admin_role          = sa.Enum('admin', 'super-admin', name='admin_role')


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(name, sa.TIMESTAMP(timezone=True), server_default=sa.func.now(), nullable=nullable)


def upgrade() -> None:
    # Accounts
    op.create_table(
        'auth_accounts',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.Text(), nullable=False),
        sa.Column('email_confirmed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('user_metadata', sa.JSON(), nullable=False),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_auth_accounts_email'), 'auth_accounts', ['email'], unique=True)

    op.create_table(
        'refresh_tokens',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('account_id', sa.String(36), nullable=False),
        sa.Column('token', sa.Text(), nullable=False),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        sa.Column('revoked', sa.Boolean(), nullable=False),
        sa.ForeignKeyConstraint(['account_id'], ['auth_accounts.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('token'),
    )
    op.create_index(op.f('ix_refresh_tokens_account_id'), 'refresh_tokens', ['account_id'], unique=False)

    op.create_table(
        'otp_codes',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('code', sa.String(10), nullable=False),
        sa.Column('expires_at', sa.TIMESTAMP(timezone=True), nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_otp_codes_email'), 'otp_codes', ['email'], unique=False)

    op.create_table(
        'admin_users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('role', admin_role, nullable=False),
        sa.Column('last_login', sa.TIMESTAMP(timezone=True), nullable=True),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_admin_users_email'), 'admin_users', ['email'], unique=True)

    op.create_table(
        'users',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('username', sa.String(100), nullable=True),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('phone', sa.String(30), nullable=True),
        sa.Column('driver_license_url', sa.Text(), nullable=True),
        sa.Column('license_number', sa.String(100), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_username'), 'users', ['username'], unique=True)

    # Fleet and bookings
    op.create_table(
        'motorcycles',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('brand', sa.String(100), nullable=True),
        sa.Column('model', sa.String(100), nullable=True),
        sa.Column('type', sa.String(50), nullable=True),
        sa.Column('engine_capacity', sa.Integer(), nullable=True),
        sa.Column('transmission', sa.String(50), nullable=True),
        sa.Column('year', sa.Integer(), nullable=True),
        sa.Column('color', sa.String(50), nullable=True),
        sa.Column('plate_number', sa.String(50), nullable=True),
        sa.Column('fuel_capacity', sa.Float(), nullable=True),
        sa.Column('price_per_day', sa.Float(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.Text(), nullable=True),
        sa.Column('features', sa.JSON(), nullable=False),
        sa.Column('availability', availability, nullable=False),
        sa.Column('rating', sa.Float(), nullable=False),
        sa.Column('review_count', sa.Integer(), nullable=False),
        sa.Column('fuel_type', sa.String(50), nullable=True),
        sa.Column('mileage', sa.String(50), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('plate_number'),
    )
    op.create_index(op.f('ix_motorcycles_type'), 'motorcycles', ['type'], unique=False)
    op.create_index(op.f('ix_motorcycles_availability'), 'motorcycles', ['availability'], unique=False)

    op.create_table(
        'reservations',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('motorcycle_id', sa.String(36), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('pickup_time', sa.String(10), nullable=True),
        sa.Column('return_time', sa.String(10), nullable=True),
        sa.Column('total_price', sa.Float(), nullable=False),
        sa.Column('status', reservation_status, nullable=False),
        sa.Column('customer_name', sa.String(255), nullable=True),
        sa.Column('customer_email', sa.String(255), nullable=True),
        sa.Column('customer_phone', sa.String(30), nullable=True),
        sa.Column('payment_method', sa.String(30), nullable=True),
        sa.Column('gcash_reference_number', sa.String(100), nullable=True),
        sa.Column('gcash_proof_url', sa.Text(), nullable=True),
        sa.Column('admin_notes', sa.Text(), nullable=True),
        sa.Column('license_image_url', sa.Text(), nullable=True),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['motorcycle_id'], ['motorcycles.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_reservations_user_id'), 'reservations', ['user_id'], unique=False)
    op.create_index(op.f('ix_reservations_motorcycle_id'), 'reservations', ['motorcycle_id'], unique=False)
    op.create_index(op.f('ix_reservations_status'), 'reservations', ['status'], unique=False)

    op.create_table(
        'transactions',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('reservation_id', sa.String(36), nullable=True),
        sa.Column('type', transaction_type, nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        _timestamp('date'),
        sa.Column('status', transaction_status, nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservations.id']),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_transactions_user_id'), 'transactions', ['user_id'], unique=False)
    op.create_index(op.f('ix_transactions_reservation_id'), 'transactions', ['reservation_id'], unique=False)

    # Verification, notifications, contact
    op.create_table(
        'document_verifications',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('document_type', document_type, nullable=False),
        sa.Column('document_url', sa.Text(), nullable=False),
        sa.Column('status', document_status, nullable=False),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        _timestamp('submitted_at'),
        sa.Column('reviewed_at', sa.TIMESTAMP(timezone=True), nullable=True),
        sa.Column('reviewed_by', sa.String(36), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_document_verifications_user_id'), 'document_verifications', ['user_id'], unique=False)
    op.create_index(op.f('ix_document_verifications_status'), 'document_verifications', ['status'], unique=False)

    op.create_table(
        'notifications',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('user_id', sa.String(36), nullable=False),
        sa.Column('type', sa.String(50), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('reservation_id', sa.String(36), nullable=True),
        sa.Column('motorcycle_name', sa.String(255), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False),
        _timestamp('timestamp'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['reservation_id'], ['reservations.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_notifications_user_id'), 'notifications', ['user_id'], unique=False)

    op.create_table(
        'contact_messages',
        sa.Column('id', sa.String(36), nullable=False),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('status', contact_status, nullable=False),
        _timestamp('created_at'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_contact_messages_status'), 'contact_messages', ['status'], unique=False)


def downgrade() -> None:
    for table in (
        'contact_messages', 'notifications', 'document_verifications', 'transactions',
        'reservations', 'motorcycles', 'users', 'admin_users', 'otp_codes',
        'refresh_tokens', 'auth_accounts',
    ):
        op.drop_table(table)

    bind = op.get_bind()
    for enum in (
        contact_status, transaction_status, transaction_type, document_status,
        document_type, reservation_status, availability, admin_role,
    ):
        enum.drop(bind, checkfirst=True)
