"""initial_schema

Revision ID: 001
Revises: 
Create Date: 2026-10-17 09:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        'users',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('avatar', sa.String(1024), nullable=True),
        sa.Column('email_verified_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('is_admin', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('registration_ip', sa.String(45), nullable=True),
        sa.Column('browser', sa.String(100), nullable=True),
        sa.Column('platform', sa.String(100), nullable=True),
        sa.Column('device', sa.String(50), nullable=True),
        sa.Column('last_login_ip', sa.String(45), nullable=True),
        sa.Column('last_login_country', sa.String(2), nullable=True),
        sa.Column('last_login_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('email'),
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=False)
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    op.create_table(
        'providers',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('provider', sa.Enum('google', 'github', name='provider_name'), nullable=False),
        sa.Column('provider_id', sa.String(255), nullable=False),
        sa.Column('provider_token', sa.Text(), nullable=True),
        sa.Column('avatar', sa.String(1024), nullable=True),
        sa.Column('name', sa.String(255), nullable=True),
        sa.Column('nickname', sa.String(255), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('provider', 'provider_id', name='uq_providers_provider_provider_id'),
    )
    op.create_index(op.f('ix_providers_id'), 'providers', ['id'], unique=False)
    op.create_index(op.f('ix_providers_user_id'), 'providers', ['user_id'], unique=False)
    op.create_index(op.f('ix_providers_provider'), 'providers', ['provider'], unique=False)

    op.create_table(
        'phones',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('label', sa.String(255), nullable=False),
        sa.Column('number', sa.String(32), nullable=False),
        sa.Column('phone_type', sa.Enum('mobile', 'landline', 'fax', 'voip', name='phonetype'), nullable=False),
        sa.Column('extension', sa.String(10), nullable=True),
        sa.Column('location', sa.String(255), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('number'),
    )
    op.create_index(op.f('ix_phones_id'), 'phones', ['id'], unique=False)
    op.create_index(op.f('ix_phones_number'), 'phones', ['number'], unique=False)

    op.create_table(
        'settings',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('group', sa.String(100), nullable=False),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('payload', sa.JSON(), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('group', 'name', name='uq_settings_group_name'),
    )
    op.create_index(op.f('ix_settings_id'), 'settings', ['id'], unique=False)
    op.create_index(op.f('ix_settings_group'), 'settings', ['group'], unique=False)

    op.create_table(
        'posts',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('title', sa.String(255), nullable=False),
        sa.Column('slug', sa.String(255), nullable=False),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('author_name', sa.String(255), nullable=True),
        sa.Column('published_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug'),
    )
    op.create_index(op.f('ix_posts_id'), 'posts', ['id'], unique=False)
    op.create_index(op.f('ix_posts_slug'), 'posts', ['slug'], unique=False)
    op.create_index(op.f('ix_posts_published_at'), 'posts', ['published_at'], unique=False)

    op.create_table(
        'reservations',
        sa.Column('id', sa.String(), nullable=False),
        sa.Column('user_id', sa.String(), nullable=False),
        sa.Column('project_name', sa.String(255), nullable=False),
        sa.Column('project_image_url', sa.String(1024), nullable=True),
        sa.Column('reserved_for', sa.DateTime(timezone=True), nullable=False),
        sa.Column('guests', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column(
            'status',
            sa.Enum('pending', 'confirmed', 'cancelled', name='reservationstatus'),
            nullable=False,
        ),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='CASCADE'),
    )
    op.create_index(op.f('ix_reservations_id'), 'reservations', ['id'], unique=False)
    op.create_index(op.f('ix_reservations_user_id'), 'reservations', ['user_id'], unique=False)


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_table('reservations')
    op.drop_table('posts')
    op.drop_table('settings')
    op.drop_table('phones')
    op.drop_table('providers')
    op.drop_table('users')
    sa.Enum(name='reservationstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='phonetype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='provider_name').drop(op.get_bind(), checkfirst=True)
