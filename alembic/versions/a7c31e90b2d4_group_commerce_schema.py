"""group commerce schema

Revision ID: a7c31e90b2d4
Revises:
Create Date: 2026-10-19 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = 'a7c31e90b2d4'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _audit_columns():
	return [
		sa.Column('is_deleted', sa.Boolean(), nullable=False, server_default=sa.false()),
		sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.Column('deleted_at', sa.DateTime(timezone=True), nullable=True),
	]


def upgrade() -> None:
	"""Upgrade schema."""
	op.create_table(
		'users',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('email', sa.String(), nullable=False),
		sa.Column('name', sa.String(), nullable=False),
		sa.Column('hashed_password', sa.String(), nullable=False),
		sa.Column('is_active', sa.Boolean(), nullable=True),
		sa.Column('is_superuser', sa.Boolean(), nullable=True),
		sa.Column('balance', sa.Integer(), server_default='0', nullable=False),
		sa.Column('reward_points', sa.Integer(), server_default='0', nullable=False),
		*_audit_columns(),
		sa.PrimaryKeyConstraint('id', name=op.f('pk_users')),
	)
	op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)
	op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)

	op.create_table(
		'products',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('name', sa.String(length=200), nullable=False),
		sa.Column('description', sa.Text(), nullable=True),
		sa.Column('price', sa.Integer(), nullable=False),
		sa.Column('category', sa.String(length=64), nullable=False),
		sa.Column('module', sa.String(length=16), nullable=False),
		*_audit_columns(),
		sa.PrimaryKeyConstraint('id', name=op.f('pk_products')),
	)
	op.create_index(op.f('ix_products_id'), 'products', ['id'], unique=False)
	op.create_index(op.f('ix_products_category'), 'products', ['category'], unique=False)
	op.create_index(op.f('ix_products_module'), 'products', ['module'], unique=False)

	op.create_table(
		'shopping_groups',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('name', sa.String(length=100), nullable=False),
		sa.Column('description', sa.Text(), nullable=False),
		sa.Column('creator_id', sa.Integer(), nullable=False),
		sa.Column('is_active', sa.Boolean(), nullable=False),
		sa.Column('max_members', sa.Integer(), nullable=False),
		sa.Column('room_code', sa.String(length=16), nullable=False),
		*_audit_columns(),
		sa.ForeignKeyConstraint(['creator_id'], ['users.id'], name=op.f('fk_shopping_groups_creator_id_users'), ondelete='CASCADE'),
		sa.PrimaryKeyConstraint('id', name=op.f('pk_shopping_groups')),
	)
	op.create_index(op.f('ix_shopping_groups_id'), 'shopping_groups', ['id'], unique=False)
	op.create_index(op.f('ix_shopping_groups_creator_id'), 'shopping_groups', ['creator_id'], unique=False)
	op.create_index(op.f('ix_shopping_groups_is_active'), 'shopping_groups', ['is_active'], unique=False)
	op.create_index(op.f('ix_shopping_groups_room_code'), 'shopping_groups', ['room_code'], unique=True)

	op.create_table(
		'group_members',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('group_id', sa.Integer(), nullable=False),
		sa.Column('user_id', sa.Integer(), nullable=False),
		sa.Column('role', sa.String(length=16), nullable=False),
		sa.Column('joined_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.ForeignKeyConstraint(['group_id'], ['shopping_groups.id'], name=op.f('fk_group_members_group_id_shopping_groups'), ondelete='CASCADE'),
		sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_group_members_user_id_users'), ondelete='CASCADE'),
		sa.PrimaryKeyConstraint('id', name=op.f('pk_group_members')),
		sa.UniqueConstraint('group_id', 'user_id', name='uq_group_members_group_user'),
	)
	op.create_index(op.f('ix_group_members_id'), 'group_members', ['id'], unique=False)
	op.create_index(op.f('ix_group_members_group_id'), 'group_members', ['group_id'], unique=False)
	op.create_index(op.f('ix_group_members_user_id'), 'group_members', ['user_id'], unique=False)

	op.create_table(
		'cart_items',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('user_id', sa.Integer(), nullable=False),
		sa.Column('product_id', sa.Integer(), nullable=False),
		sa.Column('quantity', sa.Integer(), nullable=False),
		sa.Column('group_id', sa.Integer(), nullable=True),
		sa.Column('added_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_cart_items_user_id_users'), ondelete='CASCADE'),
		sa.ForeignKeyConstraint(['product_id'], ['products.id'], name=op.f('fk_cart_items_product_id_products'), ondelete='CASCADE'),
		sa.ForeignKeyConstraint(['group_id'], ['shopping_groups.id'], name=op.f('fk_cart_items_group_id_shopping_groups'), ondelete='CASCADE'),
		sa.PrimaryKeyConstraint('id', name=op.f('pk_cart_items')),
	)
	op.create_index(op.f('ix_cart_items_id'), 'cart_items', ['id'], unique=False)
	op.create_index(op.f('ix_cart_items_user_id'), 'cart_items', ['user_id'], unique=False)
	op.create_index(op.f('ix_cart_items_product_id'), 'cart_items', ['product_id'], unique=False)
	op.create_index(op.f('ix_cart_items_group_id'), 'cart_items', ['group_id'], unique=False)

	op.create_table(
		'wallet_transactions',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('user_id', sa.Integer(), nullable=False),
		sa.Column('amount', sa.Integer(), nullable=False),
		sa.Column('type', sa.String(length=32), nullable=False),
		sa.Column('description', sa.String(length=255), nullable=False),
		sa.Column('group_id', sa.Integer(), nullable=True),
		sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_wallet_transactions_user_id_users'), ondelete='CASCADE'),
		sa.ForeignKeyConstraint(['group_id'], ['shopping_groups.id'], name=op.f('fk_wallet_transactions_group_id_shopping_groups'), ondelete='SET NULL'),
		sa.PrimaryKeyConstraint('id', name=op.f('pk_wallet_transactions')),
	)
	op.create_index(op.f('ix_wallet_transactions_id'), 'wallet_transactions', ['id'], unique=False)
	op.create_index(op.f('ix_wallet_transactions_user_id'), 'wallet_transactions', ['user_id'], unique=False)
	op.create_index(op.f('ix_wallet_transactions_type'), 'wallet_transactions', ['type'], unique=False)
	op.create_index(op.f('ix_wallet_transactions_group_id'), 'wallet_transactions', ['group_id'], unique=False)
	op.create_index('ix_wallet_transactions_user_created_at', 'wallet_transactions', ['user_id', 'created_at'], unique=False)

	op.create_table(
		'orders',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('user_id', sa.Integer(), nullable=False),
		sa.Column('group_id', sa.Integer(), nullable=True),
		sa.Column('total_amount', sa.Integer(), nullable=False),
		sa.Column('module', sa.String(length=16), nullable=False),
		sa.Column('status', sa.String(length=32), nullable=False),
		*_audit_columns(),
		sa.ForeignKeyConstraint(['user_id'], ['users.id'], name=op.f('fk_orders_user_id_users'), ondelete='CASCADE'),
		sa.ForeignKeyConstraint(['group_id'], ['shopping_groups.id'], name=op.f('fk_orders_group_id_shopping_groups'), ondelete='SET NULL'),
		sa.PrimaryKeyConstraint('id', name=op.f('pk_orders')),
	)
	op.create_index(op.f('ix_orders_id'), 'orders', ['id'], unique=False)
	op.create_index(op.f('ix_orders_user_id'), 'orders', ['user_id'], unique=False)
	op.create_index(op.f('ix_orders_group_id'), 'orders', ['group_id'], unique=False)
	op.create_index(op.f('ix_orders_status'), 'orders', ['status'], unique=False)

	op.create_table(
		'request_logs',
		sa.Column('id', sa.Integer(), nullable=False),
		sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
		sa.Column('correlation_id', sa.String(length=64), nullable=False),
		sa.Column('direction', sa.String(length=16), nullable=False),
		sa.Column('connection_type', sa.String(length=16), nullable=True),
		sa.Column('method', sa.String(length=16), nullable=True),
		sa.Column('path_template', sa.String(length=512), nullable=True),
		sa.Column('raw_path', sa.String(length=512), nullable=True),
		sa.Column('route_name', sa.String(length=128), nullable=True),
		sa.Column('status_code', sa.Integer(), nullable=True),
		sa.Column('duration_ms', sa.Integer(), nullable=False),
		sa.Column('client_ip', sa.String(length=64), nullable=True),
		sa.Column('user_agent', sa.String(length=256), nullable=True),
		sa.Column('auth_type', sa.String(length=16), nullable=True),
		sa.Column('user_id', sa.Integer(), nullable=True),
		sa.Column('provider', sa.String(length=64), nullable=True),
		sa.Column('target', sa.String(length=256), nullable=True),
		sa.Column('error_code', sa.String(length=64), nullable=True),
		sa.PrimaryKeyConstraint('id', name=op.f('pk_request_logs')),
	)
	op.create_index(op.f('ix_request_logs_id'), 'request_logs', ['id'], unique=False)
	op.create_index(op.f('ix_request_logs_created_at'), 'request_logs', ['created_at'], unique=False)
	op.create_index(op.f('ix_request_logs_correlation_id'), 'request_logs', ['correlation_id'], unique=False)
	op.create_index(op.f('ix_request_logs_path_template'), 'request_logs', ['path_template'], unique=False)
	op.create_index(op.f('ix_request_logs_status_code'), 'request_logs', ['status_code'], unique=False)
	op.create_index(op.f('ix_request_logs_user_id'), 'request_logs', ['user_id'], unique=False)
	op.create_index(op.f('ix_request_logs_provider'), 'request_logs', ['provider'], unique=False)
	op.create_index(op.f('ix_request_logs_target'), 'request_logs', ['target'], unique=False)
	op.create_index('ix_request_logs_direction_created_at', 'request_logs', ['direction', 'created_at'], unique=False)


def downgrade() -> None:
	"""Downgrade schema."""
	op.drop_table('request_logs')
	op.drop_table('orders')
	op.drop_table('wallet_transactions')
	op.drop_table('cart_items')
	op.drop_table('group_members')
	op.drop_table('shopping_groups')
	op.drop_table('products')
	op.drop_table('users')
