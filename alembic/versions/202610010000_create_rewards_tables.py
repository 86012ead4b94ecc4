"""create rewards tables

Revision ID: 202610010000
Revises: 
Create Date: 2026-10-01 09:00:00.000000

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '202610010000'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create users table
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('username', sa.String(length=50), nullable=True),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('first_name', sa.String(length=100), nullable=True),
        sa.Column('last_name', sa.String(length=100), nullable=True),
        sa.Column('company_name', sa.String(length=200), nullable=True),
        sa.Column('role', sa.String(length=20), nullable=False, server_default='gamer'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default='true'),
        sa.Column('puzzles_solved', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_earnings', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_time', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_moves', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('attempts', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('success_rate', sa.Float(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
        sa.UniqueConstraint('username')
    )
    op.create_index('ix_users_email', 'users', ['email'])

    # Create campaigns table
    op.create_table('campaigns',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('brand_id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('brand_url', sa.String(length=500), nullable=True),
        sa.Column('puzzle_image_url', sa.String(length=500), nullable=True),
        sa.Column('original_image_url', sa.String(length=500), nullable=True),
        sa.Column('game_type', sa.String(length=30), nullable=False),
        sa.Column('questions', sa.JSON(), nullable=False),
        sa.Column('words', sa.JSON(), nullable=True),
        sa.Column('package_type', sa.String(length=20), nullable=False),
        sa.Column('time_limit', sa.Integer(), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='draft'),
        sa.Column('payment_status', sa.String(length=20), nullable=False, server_default='unpaid'),
        sa.Column('expected_charge_amount', sa.Float(), nullable=False, server_default='0'),
        sa.Column('total_budget', sa.Float(), nullable=False, server_default='0'),
        sa.Column('daily_allocation', sa.Float(), nullable=False, server_default='0'),
        sa.Column('budget_used', sa.Float(), nullable=False, server_default='0'),
        sa.Column('budget_remaining', sa.Float(), nullable=False, server_default='0'),
        sa.Column('transaction_id', sa.Integer(), nullable=True),
        sa.Column('start_date', sa.DateTime(), nullable=False),
        sa.Column('end_date', sa.DateTime(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['brand_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_campaigns_brand_id', 'campaigns', ['brand_id'])
    op.create_index('ix_campaigns_status', 'campaigns', ['status'])

    # Create transactions table
    op.create_table('transactions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('campaign_id', sa.Integer(), nullable=False),
        sa.Column('brand_id', sa.Integer(), nullable=False),
        sa.Column('package_type', sa.String(length=20), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='NGN'),
        sa.Column('reference', sa.String(length=100), nullable=False),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('gateway_response', sa.JSON(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['campaign_id'], ['campaigns.id']),
        sa.ForeignKeyConstraint(['brand_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('reference')
    )
    op.create_index('ix_transactions_campaign_id', 'transactions', ['campaign_id'])
    op.create_index('ix_transactions_brand_id', 'transactions', ['brand_id'])

    # Create daily_prize_pools table
    op.create_table('daily_prize_pools',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('date', sa.String(length=10), nullable=False),
        sa.Column('active_campaigns', sa.JSON(), nullable=False),
        sa.Column('total_daily_pool', sa.Float(), nullable=False, server_default='0'),
        sa.Column('gamer_share', sa.Float(), nullable=False, server_default='0'),
        sa.Column('platform_fee', sa.Float(), nullable=False, server_default='0'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='active'),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('date')
    )

    # Create puzzle_attempts table
    op.create_table('puzzle_attempts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('campaign_id', sa.Integer(), nullable=False),
        sa.Column('time_taken', sa.Integer(), nullable=False),
        sa.Column('moves_taken', sa.Integer(), nullable=False),
        sa.Column('solved', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('first_time_solved', sa.Boolean(), nullable=False, server_default='false'),
        sa.Column('quiz_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('answers', sa.JSON(), nullable=False),
        sa.Column('points_earned', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('timestamp', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.ForeignKeyConstraint(['campaign_id'], ['campaigns.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_puzzle_attempts_user_id', 'puzzle_attempts', ['user_id'])
    op.create_index('ix_puzzle_attempts_campaign_id', 'puzzle_attempts', ['campaign_id'])
    op.create_index('ix_puzzle_attempts_timestamp', 'puzzle_attempts', ['timestamp'])
    op.create_index(
        'uq_first_time_solve', 'puzzle_attempts', ['user_id', 'campaign_id'],
        unique=True, postgresql_where=sa.text('first_time_solved = true')
    )

    # Create payouts table
    op.create_table('payouts',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('week_key', sa.String(length=24), nullable=False),
        sa.Column('position', sa.Integer(), nullable=False),
        sa.Column('points', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('puzzles_solved', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_weekly_pool', sa.Float(), nullable=False, server_default='0'),
        sa.Column('gamer_share', sa.Float(), nullable=False, server_default='0'),
        sa.Column('distribution_percentage', sa.Float(), nullable=False),
        sa.Column('amount', sa.Float(), nullable=False),
        sa.Column('currency', sa.String(length=3), nullable=False, server_default='NGN'),
        sa.Column('status', sa.String(length=20), nullable=False, server_default='pending'),
        sa.Column('payment_reference', sa.String(length=100), nullable=True),
        sa.Column('processed_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id', 'week_key', name='uq_payout_user_week')
    )
    op.create_index('ix_payouts_week_key', 'payouts', ['week_key'])
    op.create_index('ix_payouts_status', 'payouts', ['status'])

    # Create leaderboards table
    op.create_table('leaderboards',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('type', sa.String(length=10), nullable=False, server_default='weekly'),
        sa.Column('period_key', sa.String(length=24), nullable=False),
        sa.Column('entries', sa.JSON(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('CURRENT_TIMESTAMP')),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('type', 'period_key', name='uq_leaderboard_period')
    )


def downgrade() -> None:
    op.drop_table('leaderboards')
    op.drop_index('ix_payouts_status', table_name='payouts')
    op.drop_index('ix_payouts_week_key', table_name='payouts')
    op.drop_table('payouts')
    op.drop_index('uq_first_time_solve', table_name='puzzle_attempts')
    op.drop_table('puzzle_attempts')
    op.drop_table('daily_prize_pools')
    op.drop_table('transactions')
    op.drop_table('campaigns')
    op.drop_table('users')
