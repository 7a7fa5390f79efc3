"""Create business site tables

Revision ID: 001
Revises: 
Create Date: 2026-10-19

"""
from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision = '001'
down_revision = None
branch_labels = None
depends_on = None

CATEGORIES = (
    "Shop", "Restaurant", "Hotel", "Clinic", "Library", "Services", "Temple",
    "School", "College", "Gym", "Salon", "Spa", "Pharmacy", "Bank",
    "Travel Agency", "Real Estate", "Law Firm", "Accounting", "IT Services",
    "Photography", "Event Management", "Catering", "Bakery", "Jewelry",
    "Fashion", "Electronics", "Furniture", "Automobile", "Repair Services",
    "Education", "Healthcare", "Beauty", "Fitness", "Entertainment", "Tourism",
    "Food & Beverage", "Retail", "Wholesale", "Manufacturing", "Construction",
    "Other",
)


def _in_list(column, values):
    quoted = ", ".join("'" + value.replace("'", "''") + "'" for value in values)
    return f"{column} IN ({quoted})"


def _json():
    return sa.JSON().with_variant(postgresql.JSONB(), 'postgresql')


def upgrade():
    # Create users table
    op.create_table(
        'users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(), nullable=False),
        sa.Column('name', sa.String(), nullable=True),
        sa.Column('role', sa.String(), nullable=False, server_default='normal'),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint(_in_list('role', ('normal', 'content_admin', 'main_admin')), name='ck_users_role'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_users_email'), 'users', ['email'], unique=True)
    op.create_index(op.f('ix_users_id'), 'users', ['id'], unique=False)

    # Create businesses table
    op.create_table(
        'businesses',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(length=50), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=True),
        sa.Column('business_name', sa.String(), nullable=False),
        sa.Column('owner_name', sa.String(), nullable=True),
        sa.Column('category', sa.String(), nullable=False, server_default='Services'),
        sa.Column('address', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=False),
        sa.Column('mobile', sa.String(), nullable=True),
        sa.Column('email', sa.String(), nullable=True),
        sa.Column('map_link', sa.Text(), nullable=True),
        sa.Column('whatsapp', sa.String(), nullable=True),
        sa.Column('logo_url', sa.Text(), nullable=True),
        sa.Column('images_url', _json(), nullable=True),
        sa.Column('youtube_video', sa.Text(), nullable=True),
        sa.Column('theme', sa.String(), nullable=False, server_default='modern'),
        sa.Column('navbar_tagline', sa.String(), nullable=True),
        sa.Column('footer_description', sa.Text(), nullable=True),
        sa.Column('social_links', _json(), nullable=True),
        sa.Column('services', _json(), nullable=True),
        sa.Column('special_offers', _json(), nullable=True),
        sa.Column('business_hours', _json(), nullable=True),
        sa.Column('appointment_settings', _json(), nullable=True),
        sa.Column('faqs', _json(), nullable=True),
        sa.Column('reviews', _json(), nullable=True),
        sa.Column('amenities', _json(), nullable=True),
        sa.Column('status', sa.String(), nullable=False, server_default='pending'),
        sa.Column('edit_approval_status', sa.String(), nullable=False, server_default='none'),
        sa.Column('pending_changes', _json(), nullable=True),
        sa.Column('is_premium', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('subdomain_url', sa.String(), nullable=True),
        sa.Column('subdirectory_url', sa.String(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id'], ondelete='SET NULL'),
        sa.UniqueConstraint('slug', name='uq_businesses_slug'),
        sa.UniqueConstraint('email', name='uq_businesses_email'),
        sa.CheckConstraint(_in_list('category', CATEGORIES), name='ck_businesses_category'),
        sa.CheckConstraint(
            _in_list('status', ('pending', 'approved', 'rejected', 'active')),
            name='ck_businesses_status'
        ),
        sa.CheckConstraint(
            _in_list('edit_approval_status', ('none', 'pending', 'approved', 'rejected')),
            name='ck_businesses_edit_approval_status'
        ),
        sa.CheckConstraint(_in_list('theme', ('modern', 'classic', 'minimal')), name='ck_businesses_theme'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_businesses_id'), 'businesses', ['id'], unique=False)
    op.create_index(op.f('ix_businesses_slug'), 'businesses', ['slug'], unique=False)
    op.create_index(op.f('ix_businesses_user_id'), 'businesses', ['user_id'], unique=False)
    op.create_index(op.f('ix_businesses_email'), 'businesses', ['email'], unique=False)
    op.create_index(op.f('ix_businesses_status'), 'businesses', ['status'], unique=False)
    op.create_index(op.f('ix_businesses_created_at'), 'businesses', ['created_at'], unique=False)

    # Create slug_registry table
    op.create_table(
        'slug_registry',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('slug', sa.String(length=50), nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_slug_registry_id'), 'slug_registry', ['id'], unique=False)
    op.create_index(op.f('ix_slug_registry_slug'), 'slug_registry', ['slug'], unique=True)

    # Create analytics table
    op.create_table(
        'analytics',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('visitor_count', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('call_clicks', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('whatsapp_clicks', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('gallery_views', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('map_clicks', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ondelete='CASCADE'),
        sa.UniqueConstraint('business_id'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_analytics_id'), 'analytics', ['id'], unique=False)

    # Create analytics_events table
    op.create_table(
        'analytics_events',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('business_id', sa.Integer(), nullable=False),
        sa.Column('event_type', sa.String(length=50), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.ForeignKeyConstraint(['business_id'], ['businesses.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index(op.f('ix_analytics_events_id'), 'analytics_events', ['id'], unique=False)
    op.create_index(op.f('ix_analytics_events_business_id'), 'analytics_events', ['business_id'], unique=False)
    op.create_index(op.f('ix_analytics_events_event_type'), 'analytics_events', ['event_type'], unique=False)
    op.create_index(op.f('ix_analytics_events_created_at'), 'analytics_events', ['created_at'], unique=False)


def downgrade():
    op.drop_index(op.f('ix_analytics_events_created_at'), table_name='analytics_events')
    op.drop_index(op.f('ix_analytics_events_event_type'), table_name='analytics_events')
    op.drop_index(op.f('ix_analytics_events_business_id'), table_name='analytics_events')
    op.drop_index(op.f('ix_analytics_events_id'), table_name='analytics_events')
    op.drop_table('analytics_events')
    op.drop_index(op.f('ix_analytics_id'), table_name='analytics')
    op.drop_table('analytics')
    op.drop_index(op.f('ix_slug_registry_slug'), table_name='slug_registry')
    op.drop_index(op.f('ix_slug_registry_id'), table_name='slug_registry')
    op.drop_table('slug_registry')
    op.drop_index(op.f('ix_businesses_created_at'), table_name='businesses')
    op.drop_index(op.f('ix_businesses_status'), table_name='businesses')
    op.drop_index(op.f('ix_businesses_email'), table_name='businesses')
    op.drop_index(op.f('ix_businesses_user_id'), table_name='businesses')
    op.drop_index(op.f('ix_businesses_slug'), table_name='businesses')
    op.drop_index(op.f('ix_businesses_id'), table_name='businesses')
    op.drop_table('businesses')
    op.drop_index(op.f('ix_users_id'), table_name='users')
    op.drop_index(op.f('ix_users_email'), table_name='users')
    op.drop_table('users')
