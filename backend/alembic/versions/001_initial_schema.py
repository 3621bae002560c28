"""initial schema: users, preferences, jobs, resumes, match cache, tailored resumes, applications

Revision ID: 001_initial
Revises:
Create Date: 2026-10-18 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial'
down_revision = None
branch_labels = None
depends_on = None


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    ]


def upgrade() -> None:
    op.create_table(
        'users',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('email', sa.String(320), nullable=True, unique=True),
        sa.Column('name', sa.String(200), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'user_preferences',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False, unique=True),
        sa.Column('desired_titles', sa.Text(), nullable=True),
        sa.Column('desired_locations', sa.Text(), nullable=True),
        sa.Column('desired_salary_min', sa.Integer(), nullable=True),
        sa.Column(
            'remote_preference',
            sa.Enum('remote_only', 'hybrid', 'onsite', 'flexible', name='remotepreference'),
            nullable=True,
        ),
        sa.Column('auto_apply', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('daily_application_limit', sa.Integer(), nullable=True),
        sa.Column('search_queries', sa.Text(), nullable=True),
        *_timestamps(),
    )

    op.create_table(
        'jobs',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('external_id', sa.String(255), nullable=False, unique=True),
        sa.Column('title', sa.String(500), nullable=False),
        sa.Column('company', sa.String(500), nullable=False),
        sa.Column('description', sa.Text(), nullable=False, server_default=''),
        sa.Column('requirements', sa.Text(), nullable=True),
        sa.Column('location', sa.String(500), nullable=True),
        sa.Column('location_type', sa.Enum('remote', 'hybrid', 'onsite', name='locationtype'), nullable=True),
        sa.Column('salary_min', sa.Integer(), nullable=True),
        sa.Column('salary_max', sa.Integer(), nullable=True),
        sa.Column('salary_currency', sa.String(3), nullable=True),
        sa.Column('source_url', sa.String(1000), nullable=False),
        sa.Column('source_board', sa.String(100), nullable=False),
        sa.Column('posted_date', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_jobs_external_id', 'jobs', ['external_id'])
    op.create_index('ix_jobs_salary_min', 'jobs', ['salary_min'])
    op.create_index('ix_jobs_posted_date', 'jobs', ['posted_date'])

    op.create_table(
        'resumes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('file_name', sa.String(255), nullable=False),
        sa.Column('file_url', sa.String(1000), nullable=True),
        sa.Column('file_type', sa.Enum('pdf', 'docx', name='filekind'), nullable=False),
        sa.Column('full_name', sa.String(200), nullable=True),
        sa.Column('email', sa.String(320), nullable=True),
        sa.Column('phone', sa.String(50), nullable=True),
        sa.Column('location', sa.String(200), nullable=True),
        sa.Column('summary', sa.Text(), nullable=True),
        sa.Column('skills', sa.Text(), nullable=True),
        sa.Column('experience', sa.Text(), nullable=True),
        sa.Column('education', sa.Text(), nullable=True),
        sa.Column('certifications', sa.Text(), nullable=True),
        sa.Column('is_primary', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('version', sa.Integer(), nullable=False, server_default='1'),
        *_timestamps(),
    )
    op.create_index('ix_resumes_user_id', 'resumes', ['user_id'])

    op.create_table(
        'job_match_cache',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('job_id', sa.Uuid(), sa.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('resume_id', sa.Uuid(), sa.ForeignKey('resumes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('confidence_score', sa.Integer(), nullable=False),
        sa.Column('matched_skills', sa.Text(), nullable=True),
        sa.Column('missing_skills', sa.Text(), nullable=True),
        sa.Column('transferable_skills', sa.Text(), nullable=True),
        sa.Column('strengths', sa.Text(), nullable=True),
        sa.Column('gaps', sa.Text(), nullable=True),
        sa.Column('recommendation', sa.Text(), nullable=True),
        sa.Column('keywords_detected', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False),
        sa.UniqueConstraint('job_id', 'resume_id', name='uq_job_match_cache_pair'),
    )

    op.create_table(
        'tailored_resumes',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('original_resume_id', sa.Uuid(), sa.ForeignKey('resumes.id', ondelete='CASCADE'), nullable=False),
        sa.Column('job_id', sa.Uuid(), sa.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('content', sa.Text(), nullable=True),
        sa.Column('changes', sa.Text(), nullable=True),
        sa.Column('keywords_applied', sa.Text(), nullable=True),
        sa.Column('keywords_skipped', sa.Text(), nullable=True),
        sa.Column('honesty_score', sa.Integer(), nullable=False, server_default='0'),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now()),
    )
    op.create_index('ix_tailored_resumes_original_resume_id', 'tailored_resumes', ['original_resume_id'])

    op.create_table(
        'applications',
        sa.Column('id', sa.Uuid(), primary_key=True),
        sa.Column('user_id', sa.Uuid(), sa.ForeignKey('users.id', ondelete='CASCADE'), nullable=False),
        sa.Column('job_id', sa.Uuid(), sa.ForeignKey('jobs.id', ondelete='CASCADE'), nullable=False),
        sa.Column('resume_id', sa.Uuid(), sa.ForeignKey('resumes.id', ondelete='SET NULL'), nullable=True),
        sa.Column(
            'status',
            sa.Enum(
                'pending', 'applied', 'viewed', 'interview_requested',
                'interviewed', 'offered', 'rejected', 'withdrawn',
                name='applicationstatus',
            ),
            nullable=False,
            server_default='pending',
        ),
        sa.Column('cover_letter', sa.Text(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('match_score', sa.Integer(), nullable=True),
        sa.Column('applied_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('viewed_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('responded_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
    )
    op.create_index('ix_applications_user_id', 'applications', ['user_id'])


def downgrade() -> None:
    op.drop_index('ix_applications_user_id', table_name='applications')
    op.drop_table('applications')
    op.drop_index('ix_tailored_resumes_original_resume_id', table_name='tailored_resumes')
    op.drop_table('tailored_resumes')
    op.drop_table('job_match_cache')
    op.drop_index('ix_resumes_user_id', table_name='resumes')
    op.drop_table('resumes')
    op.drop_index('ix_jobs_posted_date', table_name='jobs')
    op.drop_index('ix_jobs_salary_min', table_name='jobs')
    op.drop_index('ix_jobs_external_id', table_name='jobs')
    op.drop_table('jobs')
    op.drop_table('user_preferences')
    op.drop_table('users')
    sa.Enum(name='applicationstatus').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='filekind').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='locationtype').drop(op.get_bind(), checkfirst=True)
    sa.Enum(name='remotepreference').drop(op.get_bind(), checkfirst=True)
