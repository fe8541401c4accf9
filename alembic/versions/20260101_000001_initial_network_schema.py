"""Initial referral network schema.

Revision ID: 20260101_000001
Revises:
Create Date: 2026-01-01

Members, placement tree, wallets, BV ledger, referral level unlocks,
transactions and the shop.
"""

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '20260101_000001'
down_revision = None
branch_labels = None
depends_on = None


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        nullable=nullable,
        server_default=None if nullable else sa.text('CURRENT_TIMESTAMP'),
    )


def upgrade() -> None:
    """Create all tables."""
    op.create_table(
        'members',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('mobile', sa.String(length=20), nullable=False),
        sa.Column('profile_image', sa.String(length=500), nullable=True),
        sa.Column('password_hash', sa.String(length=255), nullable=False),
        sa.Column('referral_code', sa.String(length=20), nullable=False),
        sa.Column('referrer_id', sa.Integer(), nullable=True),
        sa.Column('preferred_side', sa.String(length=5), nullable=True),
        sa.Column(
            'kyc_status', sa.String(length=20), nullable=False,
            server_default='pending',
            comment='pending, verified, rejected'
        ),
        sa.Column(
            'rank', sa.String(length=50), nullable=False,
            server_default='Associate'
        ),
        _timestamp('join_date'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(
            ['referrer_id'], ['members.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_members_email', 'members', ['email'], unique=True)
    op.create_index(
        'ix_members_referral_code', 'members', ['referral_code'], unique=True
    )
    op.create_index('ix_members_referrer_id', 'members', ['referrer_id'])
    op.create_index('ix_members_kyc_status', 'members', ['kyc_status'])

    op.create_table(
        'team_structure',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column(
            'sponsor_id', sa.Integer(), nullable=True,
            comment='Placement parent; NULL for a root'
        ),
        sa.Column(
            'referrer_id', sa.Integer(), nullable=True,
            comment='Member whose referral code was used'
        ),
        sa.Column('side', sa.String(length=5), nullable=True),
        sa.Column('level', sa.Integer(), nullable=False, server_default='0'),
        sa.Column(
            'path', sa.String(length=4000), nullable=False, server_default='',
            comment='Ancestor member ids from the root, e.g. 1/4/9'
        ),
        sa.Column('direct_team', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('left_team', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('right_team', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('total_team', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('left_bv', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('right_bv', sa.BigInteger(), nullable=False, server_default='0'),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['sponsor_id'], ['members.id'], ondelete='RESTRICT'),
        sa.ForeignKeyConstraint(['referrer_id'], ['members.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id'),
        sa.UniqueConstraint('sponsor_id', 'side', name='uq_team_structure_slot'),
        sa.CheckConstraint(
            "side IN ('left', 'right') OR side IS NULL",
            name='check_team_structure_side'
        ),
        sa.CheckConstraint('left_bv >= 0', name='check_team_structure_left_bv'),
        sa.CheckConstraint('right_bv >= 0', name='check_team_structure_right_bv'),
    )
    op.create_index('idx_team_structure_sponsor', 'team_structure', ['sponsor_id'])
    op.create_index(
        'ix_team_structure_referrer_id', 'team_structure', ['referrer_id']
    )

    op.create_table(
        'wallets',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('main_balance', sa.DECIMAL(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('topup_balance', sa.DECIMAL(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('purchased_amount', sa.DECIMAL(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('referral_bonus', sa.DECIMAL(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('stk_balance', sa.DECIMAL(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('business_volume', sa.BigInteger(), nullable=False, server_default='0'),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id'),
        sa.CheckConstraint('main_balance >= 0', name='check_wallet_main_balance_non_negative'),
        sa.CheckConstraint('topup_balance >= 0', name='check_wallet_topup_balance_non_negative'),
        sa.CheckConstraint('business_volume >= 0', name='check_wallet_business_volume_non_negative'),
    )

    op.create_table(
        'bv_ledger',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('source_member_id', sa.Integer(), nullable=True),
        sa.Column('amount', sa.BigInteger(), nullable=False),
        sa.Column(
            'source', sa.String(length=20), nullable=False,
            server_default='purchase'
        ),
        sa.Column('reference_id', sa.String(length=64), nullable=True),
        _timestamp('created_at'),
        _timestamp('expires_at', nullable=True),
        _timestamp('expired_at', nullable=True),
        _timestamp('expiry_failed_at', nullable=True),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(
            ['source_member_id'], ['members.id'], ondelete='SET NULL'
        ),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('amount > 0', name='check_bv_ledger_amount_positive'),
    )
    op.create_index(
        'idx_bv_ledger_member_created', 'bv_ledger', ['member_id', 'created_at']
    )
    op.create_index('idx_bv_ledger_due', 'bv_ledger', ['expires_at', 'expired_at'])

    op.create_table(
        'referral_level_unlocks',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('level', sa.Integer(), nullable=False),
        sa.Column('is_unlocked', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('total_earned', sa.DECIMAL(precision=18, scale=2), nullable=False, server_default='0'),
        _timestamp('unlocked_at'),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('member_id', 'level', name='uq_referral_level_unlock'),
    )
    op.create_index(
        'ix_referral_level_unlocks_member_id', 'referral_level_unlocks', ['member_id']
    )

    op.create_table(
        'transactions',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column(
            'type', sa.String(length=20), nullable=False,
            comment='deposit, withdraw, transfer, topup, purchase, referral_bonus, salary'
        ),
        sa.Column('amount', sa.DECIMAL(precision=18, scale=2), nullable=False),
        sa.Column(
            'status', sa.String(length=20), nullable=False,
            server_default='completed'
        ),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('reference_id', sa.String(length=64), nullable=True),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'idx_transactions_member_type', 'transactions', ['member_id', 'type']
    )
    op.create_index(
        'idx_transactions_member_created', 'transactions', ['member_id', 'created_at']
    )

    op.create_table(
        'products',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image', sa.String(length=500), nullable=True),
        sa.Column('base_price', sa.DECIMAL(precision=18, scale=2), nullable=False),
        sa.Column('gst', sa.DECIMAL(precision=18, scale=2), nullable=False, server_default='0'),
        sa.Column('bv_credit', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column('stock', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        _timestamp('created_at'),
        _timestamp('updated_at'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint('stock >= 0', name='check_product_stock_non_negative'),
        sa.CheckConstraint('bv_credit >= 0', name='check_product_bv_non_negative'),
    )
    op.create_index('ix_products_is_active', 'products', ['is_active'])

    op.create_table(
        'orders',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('member_id', sa.Integer(), nullable=False),
        sa.Column('product_id', sa.Integer(), nullable=False),
        sa.Column('quantity', sa.Integer(), nullable=False),
        sa.Column('unit_price', sa.DECIMAL(precision=18, scale=2), nullable=False),
        sa.Column('total_price', sa.DECIMAL(precision=18, scale=2), nullable=False),
        sa.Column('bv_earned', sa.BigInteger(), nullable=False, server_default='0'),
        sa.Column(
            'status', sa.String(length=20), nullable=False,
            server_default='completed'
        ),
        _timestamp('created_at'),
        sa.ForeignKeyConstraint(['member_id'], ['members.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['product_id'], ['products.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('ix_orders_member_id', 'orders', ['member_id'])


def downgrade() -> None:
    """Drop all tables."""
    op.drop_table('orders')
    op.drop_table('products')
    op.drop_table('transactions')
    op.drop_table('referral_level_unlocks')
    op.drop_table('bv_ledger')
    op.drop_table('wallets')
    op.drop_table('team_structure')
    op.drop_table('members')
