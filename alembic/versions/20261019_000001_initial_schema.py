"""Initial schema

Revision ID: 20261019_000001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '20261019_000001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

MONEY = sa.DECIMAL(18, 8)


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('display_name', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('referral_code', sa.String(length=20), nullable=True),
        sa.Column('referred_by', sa.String(length=20), nullable=True),
        sa.Column('referral_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column(
            'total_referral_points', sa.Integer(),
            nullable=False, server_default='0'
        ),
        sa.Column(
            'package', sa.String(length=50),
            nullable=False, server_default='basic'
        ),
        sa.Column('level', sa.String(length=100), nullable=True),
        sa.Column('balance', MONEY, nullable=False, server_default='0'),
        sa.Column('personal_earnings', MONEY, nullable=False, server_default='0'),
        sa.Column('team_earnings', MONEY, nullable=False, server_default='0'),
        sa.Column('bonuses', MONEY, nullable=False, server_default='0'),
        sa.Column('is_verified', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint('balance >= 0', name='check_user_balance_non_negative'),
        sa.CheckConstraint(
            'personal_earnings >= 0',
            name='check_user_personal_earnings_non_negative'
        ),
        sa.CheckConstraint(
            'team_earnings >= 0', name='check_user_team_earnings_non_negative'
        ),
        sa.CheckConstraint('bonuses >= 0', name='check_user_bonuses_non_negative'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)
    op.create_index('ix_users_referral_code', 'users', ['referral_code'], unique=True)
    op.create_index('ix_users_referred_by', 'users', ['referred_by'], unique=False)
    op.create_index(
        'ix_users_total_referral_points', 'users',
        ['total_referral_points'], unique=False
    )

    op.create_table(
        'offers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('price', MONEY, nullable=True),
        sa.Column('daily_profit', MONEY, nullable=True),
        sa.Column('monthly_profit', MONEY, nullable=True),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('deadline', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'user_offers',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('offer_id', sa.Integer(), nullable=False),
        sa.Column('active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('joined_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('deactivated_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['offer_id'], ['offers.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('idx_user_offers_active', 'user_offers', ['active'], unique=False)
    op.create_index(
        'idx_user_offers_user', 'user_offers', ['user_id', 'active'], unique=False
    )
    op.create_index(
        'ix_user_offers_offer_id', 'user_offers', ['offer_id'], unique=False
    )

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('offer_id', sa.Integer(), nullable=True),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('period_start', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['offer_id'], ['offers.id'], ondelete='SET NULL'),
        sa.UniqueConstraint(
            'user_id', 'offer_id', 'type', 'period_start',
            name='uq_transactions_profit_period'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'idx_transactions_user_type', 'transactions',
        ['user_id', 'type'], unique=False
    )
    op.create_index(
        'idx_transactions_created_at', 'transactions', ['created_at'], unique=False
    )

    op.create_table(
        'referrals',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('referrer_id', sa.Integer(), nullable=False),
        sa.Column('referred_id', sa.Integer(), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('points_earned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('referral_code', sa.String(length=20), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['referrer_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['referred_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint(
            'referred_id', 'level', name='uq_referrals_referred_level'
        ),
        sa.CheckConstraint(
            'level >= 1 AND level <= 3', name='check_referral_level_range'
        ),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'idx_referrals_referrer_level', 'referrals',
        ['referrer_id', 'level'], unique=False
    )

    op.create_table(
        'referral_settings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('level1_points', sa.Integer(), nullable=False, server_default='100'),
        sa.Column('level2_points', sa.Integer(), nullable=False, server_default='50'),
        sa.Column('level3_points', sa.Integer(), nullable=False, server_default='25'),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )

    op.create_table(
        'withdrawal_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('method', sa.String(length=32), nullable=False),
        sa.Column('account_details', sa.Text(), nullable=False),
        sa.Column(
            'status', sa.String(length=20),
            nullable=False, server_default='pending'
        ),
        sa.Column('admin_note', sa.Text(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('proof_image_url', sa.String(length=1024), nullable=True),
        sa.Column('user_name', sa.String(length=255), nullable=True),
        sa.Column('user_email', sa.String(length=255), nullable=True),
        sa.Column('user_phone', sa.String(length=50), nullable=True),
        sa.Column('active_offer_titles', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('paid_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint('amount > 0', name='check_withdrawal_amount_positive'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'idx_withdrawal_requests_user_created', 'withdrawal_requests',
        ['user_id', 'created_at'], unique=False
    )
    op.create_index(
        'idx_withdrawal_requests_status', 'withdrawal_requests',
        ['status'], unique=False
    )

    op.create_table(
        'deposit_requests',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('amount', MONEY, nullable=False),
        sa.Column('method', sa.String(length=32), nullable=True),
        sa.Column('reference', sa.String(length=255), nullable=True),
        sa.Column('proof_image_url', sa.String(length=1024), nullable=True),
        sa.Column(
            'status', sa.String(length=20),
            nullable=False, server_default='pending'
        ),
        sa.Column('admin_note', sa.Text(), nullable=True),
        sa.Column('rejection_reason', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.Column('processed_at', sa.DateTime(timezone=True), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.CheckConstraint('amount > 0', name='check_deposit_amount_positive'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(
        'idx_deposit_requests_user_status', 'deposit_requests',
        ['user_id', 'status'], unique=False
    )

    op.create_table(
        'settings',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('key', sa.String(length=100), nullable=False),
        sa.Column('value', sa.JSON(), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_settings_key', 'settings', ['key'], unique=True)

    op.create_table(
        'badges',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('type', sa.String(length=32), nullable=False),
        sa.Column('requirement', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('icon', sa.String(length=100), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_badges_type', 'badges', ['type'], unique=False)

    op.create_table(
        'user_badges',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('badge_id', sa.Integer(), nullable=False),
        sa.Column('awarded_at', sa.DateTime(timezone=True), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['badge_id'], ['badges.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('user_id', 'badge_id', name='uq_user_badges_user_badge'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_user_badges_user_id', 'user_badges', ['user_id'], unique=False)

    op.create_table(
        'levels',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('requirement', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('description', sa.Text(), nullable=True),
        sa.UniqueConstraint('name'),
        sa.PrimaryKeyConstraint('id')
    )


def downgrade() -> None:
    op.drop_table('levels')
    op.drop_index('ix_user_badges_user_id', table_name='user_badges')
    op.drop_table('user_badges')
    op.drop_index('ix_badges_type', table_name='badges')
    op.drop_table('badges')
    op.drop_index('ix_settings_key', table_name='settings')
    op.drop_table('settings')
    op.drop_index('idx_deposit_requests_user_status', table_name='deposit_requests')
    op.drop_table('deposit_requests')
    op.drop_index('idx_withdrawal_requests_status', table_name='withdrawal_requests')
    op.drop_index(
        'idx_withdrawal_requests_user_created', table_name='withdrawal_requests'
    )
    op.drop_table('withdrawal_requests')
    op.drop_table('referral_settings')
    op.drop_index('idx_referrals_referrer_level', table_name='referrals')
    op.drop_table('referrals')
    op.drop_index('idx_transactions_created_at', table_name='transactions')
    op.drop_index('idx_transactions_user_type', table_name='transactions')
    op.drop_table('transactions')
    op.drop_index('ix_user_offers_offer_id', table_name='user_offers')
    op.drop_index('idx_user_offers_user', table_name='user_offers')
    op.drop_index('idx_user_offers_active', table_name='user_offers')
    op.drop_table('user_offers')
    op.drop_table('offers')
    op.drop_index('ix_users_total_referral_points', table_name='users')
    op.drop_index('ix_users_referred_by', table_name='users')
    op.drop_index('ix_users_referral_code', table_name='users')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
