"""Create rental lifecycle tables

Revision ID: 20261019_000001
Revises: None
Create Date: 2026-10-19

This migration creates users, properties, documents, applications, leases,
lease occupants (colocation), receipts and notifications.
"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create the rental tables."""
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=False),
        sa.Column('last_name', sa.String(length=100), nullable=False),
        sa.Column('is_tenant', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_owner', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table(
        'properties',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('city', sa.String(length=100), nullable=True),
        sa.Column('rent', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('available', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('occupant_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_properties_owner_id'),
        sa.ForeignKeyConstraint(['occupant_id'], ['users.id'], name='fk_properties_occupant_id'),
    )
    op.create_index('ix_properties_owner_id', 'properties', ['owner_id'])

    op.create_table(
        'documents',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('owner_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=255), nullable=False),
        sa.Column('url', sa.String(length=500), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['owner_id'], ['users.id'], name='fk_documents_owner_id'),
    )
    op.create_index('ix_documents_owner_id', 'documents', ['owner_id'])

    op.create_table(
        'applications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'ACCEPTED', 'REJECTED', 'CANCELLED', name='application_status', create_constraint=True),
            nullable=False,
            server_default='PENDING'
        ),
        sa.Column('message', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['property_id'],
            ['properties.id'],
            name='fk_applications_property_id',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(['tenant_id'], ['users.id'], name='fk_applications_tenant_id'),
    )
    op.create_index('ix_applications_property_id', 'applications', ['property_id'])
    op.create_index('ix_applications_tenant_id', 'applications', ['tenant_id'])
    op.create_index('ix_applications_status', 'applications', ['status'])

    op.create_table(
        'application_documents',
        sa.Column('application_id', sa.Integer(), nullable=False),
        sa.Column('document_id', sa.Integer(), nullable=False),
        sa.Column('shared_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('application_id', 'document_id'),
        sa.ForeignKeyConstraint(
            ['application_id'],
            ['applications.id'],
            name='fk_application_documents_application_id',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(
            ['document_id'],
            ['documents.id'],
            name='fk_application_documents_document_id',
            ondelete='CASCADE'
        ),
    )

    op.create_table(
        'leases',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('property_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('application_id', sa.Integer(), nullable=True),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=True),
        sa.Column('monthly_rent', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('deposit', sa.Numeric(precision=12, scale=2), nullable=True),
        sa.Column('charges', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column(
            'status',
            sa.Enum('PENDING', 'ACTIVE', 'ENDED', name='lease_status', create_constraint=True),
            nullable=False,
            server_default='PENDING'
        ),
        sa.Column('inventory_in_done', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('inventory_in_at', sa.DateTime(), nullable=True),
        sa.Column('inventory_in_by', sa.Integer(), nullable=True),
        sa.Column('inventory_out_done', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('inventory_out_at', sa.DateTime(), nullable=True),
        sa.Column('inventory_out_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['property_id'], ['properties.id'], name='fk_leases_property_id'),
        sa.ForeignKeyConstraint(['tenant_id'], ['users.id'], name='fk_leases_tenant_id'),
        sa.ForeignKeyConstraint(
            ['application_id'],
            ['applications.id'],
            name='fk_leases_application_id',
            ondelete='SET NULL'
        ),
        sa.ForeignKeyConstraint(['inventory_in_by'], ['users.id'], name='fk_leases_inventory_in_by'),
        sa.ForeignKeyConstraint(['inventory_out_by'], ['users.id'], name='fk_leases_inventory_out_by'),
    )
    op.create_index('ix_leases_property_id', 'leases', ['property_id'])
    op.create_index('ix_leases_tenant_id', 'leases', ['tenant_id'])
    op.create_index('ix_leases_status', 'leases', ['status'])

    op.create_table(
        'lease_tenants',
        sa.Column('lease_id', sa.Integer(), nullable=False),
        sa.Column('tenant_id', sa.Integer(), nullable=False),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('share', sa.Integer(), nullable=False, server_default='100'),
        sa.Column('joined_at', sa.DateTime(), nullable=False),
        sa.Column('left_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('lease_id', 'tenant_id'),
        sa.ForeignKeyConstraint(
            ['lease_id'],
            ['leases.id'],
            name='fk_lease_tenants_lease_id',
            ondelete='CASCADE'
        ),
        sa.ForeignKeyConstraint(['tenant_id'], ['users.id'], name='fk_lease_tenants_tenant_id'),
        sa.CheckConstraint('share >= 0 AND share <= 100', name='ck_lease_tenants_share_range'),
    )

    op.create_table(
        'receipts',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('lease_id', sa.Integer(), nullable=False),
        sa.Column('month', sa.Integer(), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('rent_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column('charges', sa.Numeric(precision=12, scale=2), nullable=False, server_default='0'),
        sa.Column('total_amount', sa.Numeric(precision=12, scale=2), nullable=False),
        sa.Column(
            'status',
            sa.Enum('DECLARED', 'CONFIRMED', name='receipt_status', create_constraint=True),
            nullable=False,
            server_default='DECLARED'
        ),
        sa.Column('payment_method', sa.String(length=50), nullable=False, server_default='transfer'),
        sa.Column('declared_at', sa.DateTime(), nullable=True),
        sa.Column('paid_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['lease_id'],
            ['leases.id'],
            name='fk_receipts_lease_id',
            ondelete='CASCADE'
        ),
        sa.UniqueConstraint('lease_id', 'month', 'year', name='uq_receipts_lease_period'),
        sa.CheckConstraint('month >= 1 AND month <= 12', name='ck_receipts_month_range'),
    )
    op.create_index('ix_receipts_lease_id', 'receipts', ['lease_id'])
    op.create_index('ix_receipts_status', 'receipts', ['status'])

    op.create_table(
        'notifications',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=50), nullable=False, server_default='SYSTEM'),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('message', sa.Text(), nullable=False),
        sa.Column('link', sa.String(length=500), nullable=True),
        sa.Column('read', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), server_default=sa.func.now(), nullable=False),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(
            ['user_id'],
            ['users.id'],
            name='fk_notifications_user_id',
            ondelete='CASCADE'
        ),
    )
    op.create_index('ix_notifications_user_id', 'notifications', ['user_id'])


def downgrade() -> None:
    """Drop the rental tables."""
    op.drop_index('ix_notifications_user_id', table_name='notifications')
    op.drop_table('notifications')
    op.drop_index('ix_receipts_status', table_name='receipts')
    op.drop_index('ix_receipts_lease_id', table_name='receipts')
    op.drop_table('receipts')
    op.drop_table('lease_tenants')
    op.drop_index('ix_leases_status', table_name='leases')
    op.drop_index('ix_leases_tenant_id', table_name='leases')
    op.drop_index('ix_leases_property_id', table_name='leases')
    op.drop_table('leases')
    op.drop_table('application_documents')
    op.drop_index('ix_applications_status', table_name='applications')
    op.drop_index('ix_applications_tenant_id', table_name='applications')
    op.drop_index('ix_applications_property_id', table_name='applications')
    op.drop_table('applications')
    op.drop_index('ix_documents_owner_id', table_name='documents')
    op.drop_table('documents')
    op.drop_index('ix_properties_owner_id', table_name='properties')
    op.drop_table('properties')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
