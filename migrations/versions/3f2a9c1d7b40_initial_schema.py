"""initial schema

Revision ID: 3f2a9c1d7b40
Revises:
Create Date: 2026-10-18 10:00:00.000000

"""
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision = '3f2a9c1d7b40'
down_revision = None
branch_labels = None
depends_on = None

# (category, text, min_risk_level, condition_type) as of this revision
SEED_RECOMMENDATIONS = [
    ('Activity', 'Air quality is fine for your usual outdoor activities.', 'Low', 'any'),
    ('Activity', 'Consider shortening strenuous outdoor exercise today.', 'Medium', 'any'),
    ('Activity', 'Avoid strenuous outdoor activity and exercise indoors where possible.', 'High', 'any'),
    ('Home', 'Keep windows closed during busy traffic hours.', 'Medium', 'any'),
    ('Home', 'Run an air purifier in the rooms you use most if you have one.', 'High', 'any'),
    ('Medication', 'Carry your reliever inhaler when you go out.', 'Low', 'asthma'),
    ('Medication', 'Take your preventer inhaler as prescribed and keep your reliever close.', 'Medium', 'asthma'),
    ('Medication', 'Follow your asthma action plan and seek help if symptoms worsen.', 'High', 'asthma'),
    ('Medication', 'Take your antihistamine before heading outdoors.', 'Medium', 'allergies'),
    ('Outdoors', 'Wear wraparound sunglasses to keep irritants out of your eyes.', 'Medium', 'allergies'),
    ('Outdoors', 'Shower and change clothes after spending time outside.', 'High', 'allergies'),
    ('Medication', 'Keep both your inhaler and antihistamines with you today.', 'Medium', 'both'),
]


def upgrade():
    op.create_table('users',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('email', sa.String(255), nullable=False),
        sa.Column('password_hash', sa.String(255), nullable=False),
        sa.Column('first_name', sa.String(100), nullable=True),
        sa.Column('last_name', sa.String(100), nullable=True),
        sa.Column('date_of_birth', sa.Date(), nullable=True),
        sa.Column('sex_at_birth', sa.String(100), nullable=True),
        sa.Column('gender', sa.String(100), nullable=True),
        sa.Column('nationality', sa.String(100), nullable=True),
        sa.Column('condition_type', sa.String(20), nullable=True),
        sa.Column('sensitivity_level', sa.String(20), nullable=True),
        sa.Column('accessibility_mode', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('analytics_opt_in', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('accepted_disclaimer_at', sa.DateTime(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_users_email', 'users', ['email'], unique=True)

    op.create_table('locations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('label', sa.String(255), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('is_home', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_locations_user_id', 'locations', ['user_id'])

    op.create_table('thresholds',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('trigger_aqi', sa.Integer(), nullable=True),
        sa.Column('use_default', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.Column('updated_at', sa.DateTime(), nullable=True),
        sa.CheckConstraint('trigger_aqi IS NULL OR (trigger_aqi BETWEEN 1 AND 5)',
                           name='ck_thresholds_trigger_aqi_range'),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('user_id')
    )

    op.create_table('air_quality_readings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('source', sa.String(50), nullable=False, server_default='public_api'),
        sa.Column('area_label', sa.String(255), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=True),
        sa.Column('longitude', sa.Float(), nullable=True),
        sa.Column('observed_at', sa.DateTime(), nullable=False),
        sa.Column('aqi', sa.Integer(), nullable=True),
        sa.Column('pm25', sa.Float(), nullable=True),
        sa.Column('pm10', sa.Float(), nullable=True),
        sa.Column('no2', sa.Float(), nullable=True),
        sa.Column('o3', sa.Float(), nullable=True),
        sa.Column('so2', sa.Float(), nullable=True),
        sa.Column('co', sa.Float(), nullable=True),
        sa.Column('created_at', sa.DateTime(), nullable=True),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('area_label', 'observed_at', name='uq_reading_area_observed')
    )
    op.create_index('ix_air_quality_readings_area_label', 'air_quality_readings', ['area_label'])
    op.create_index('ix_reading_area_observed', 'air_quality_readings', ['area_label', 'observed_at'])

    op.create_table('risk_assessments',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('user_id', sa.Integer(), nullable=False),
        sa.Column('created_at', sa.DateTime(), nullable=False),
        sa.Column('risk_level', sa.String(10), nullable=False),
        sa.Column('dominant_pollutant', sa.String(20), nullable=True),
        sa.Column('explanation', sa.Text(), nullable=True),
        sa.ForeignKeyConstraint(['user_id'], ['users.id']),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_risk_assessments_user_id', 'risk_assessments', ['user_id'])

    recommendations = op.create_table('recommendations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('category', sa.String(50), nullable=False),
        sa.Column('text', sa.Text(), nullable=False),
        sa.Column('min_risk_level', sa.String(10), nullable=False, server_default='Low'),
        sa.Column('condition_type', sa.String(20), nullable=False, server_default='any'),
        sa.Column('is_active', sa.Boolean(), nullable=False, server_default=sa.true()),
        sa.PrimaryKeyConstraint('id')
    )

    # Seed the default recommendation catalogue
    op.bulk_insert(recommendations, [
        {
            'category': category,
            'text': text,
            'min_risk_level': min_level,
            'condition_type': condition,
            'is_active': True,
        }
        for category, text, min_level, condition in SEED_RECOMMENDATIONS
    ])


def downgrade():
    op.drop_table('recommendations')
    op.drop_index('ix_risk_assessments_user_id', table_name='risk_assessments')
    op.drop_table('risk_assessments')
    op.drop_index('ix_reading_area_observed', table_name='air_quality_readings')
    op.drop_index('ix_air_quality_readings_area_label', table_name='air_quality_readings')
    op.drop_table('air_quality_readings')
    op.drop_table('thresholds')
    op.drop_index('ix_locations_user_id', table_name='locations')
    op.drop_table('locations')
    op.drop_index('ix_users_email', table_name='users')
    op.drop_table('users')
