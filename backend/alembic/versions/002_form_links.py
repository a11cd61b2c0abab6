"""Single-use form links

Revision ID: 002_form_links
Revises: 001_initial
Create Date: 2026-10-06

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql

# revision identifiers, used by Alembic.
revision: str = '002_form_links'
down_revision: Union[str, None] = '001_initial'
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'form_links',
        sa.Column('id', postgresql.UUID(as_uuid=True), primary_key=True),
        sa.Column('tenant_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('tenants.id'), nullable=False),
        sa.Column('campaign_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('campaigns.id'), nullable=False),
        sa.Column('token', sa.String(64), nullable=False),
        sa.Column('used_at', sa.DateTime(), nullable=True),
        sa.Column('coupon_id', postgresql.UUID(as_uuid=True), sa.ForeignKey('coupons.id'), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=False, server_default=sa.text('now()')),
        sa.UniqueConstraint('token', name='uq_form_links_token'),
    )
    op.create_index('ix_form_links_tenant_campaign', 'form_links', ['tenant_id', 'campaign_id'])
    # Unused-link counts per campaign
    op.execute(
        "CREATE INDEX ix_form_links_unused ON form_links (campaign_id) WHERE used_at IS NULL"
    )


def downgrade() -> None:
    op.execute("DROP INDEX IF EXISTS ix_form_links_unused")
    op.drop_index('ix_form_links_tenant_campaign', table_name='form_links')
    op.drop_table('form_links')
