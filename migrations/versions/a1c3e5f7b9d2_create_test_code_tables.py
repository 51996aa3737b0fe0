"""create_test_code_tables

Revision ID: a1c3e5f7b9d2
Revises:
Create Date: 2026-10-19 09:12:40.518304

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa
from sqlalchemy.dialects import postgresql


# revision identifiers, used by Alembic.
revision: str = 'a1c3e5f7b9d2'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    """Create test_codes, questions, test_results and exam_answer_mappings"""
    op.create_table(
        'test_codes',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('code', sa.String(length=16), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('subject_id', sa.Integer(), nullable=False),
        sa.Column('class_level', sa.String(length=20), nullable=False),
        sa.Column('term_id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('test_type', sa.String(length=50), nullable=False),
        sa.Column('duration_minutes', sa.Integer(), nullable=False),
        sa.Column('total_questions', sa.Integer(), nullable=False),
        sa.Column('score_per_question', sa.Integer(), nullable=False),
        sa.Column('pass_score', sa.Integer(), nullable=False),
        sa.Column('expires_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('batch_id', sa.String(length=64), nullable=False),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        sa.Column('is_activated', sa.Boolean(), nullable=False),
        sa.Column('activated_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column(
            'status',
            sa.Enum('active', 'using', 'used', name='test_code_status', native_enum=False),
            nullable=False,
        ),
        sa.Column('used_by', sa.Integer(), nullable=True),
        sa.Column('used_at', sa.DateTime(timezone=True), nullable=True),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.CheckConstraint(
            "(status = 'active' AND used_by IS NULL AND used_at IS NULL) OR "
            "(status <> 'active' AND used_by IS NOT NULL AND used_at IS NOT NULL)",
            name='ck_test_codes_usage_stamp',
        ),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(op.f('ix_test_codes_code'), 'test_codes', ['code'], unique=True)
    op.create_index(op.f('ix_test_codes_batch_id'), 'test_codes', ['batch_id'], unique=False)
    op.create_index(op.f('ix_test_codes_status'), 'test_codes', ['status'], unique=False)
    op.create_index(op.f('ix_test_codes_used_by'), 'test_codes', ['used_by'], unique=False)
    op.create_index('ix_test_codes_scope', 'test_codes', ['subject_id', 'class_level', 'term_id'], unique=False)

    op.create_table(
        'questions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('subject_id', sa.Integer(), nullable=False),
        sa.Column('class_level', sa.String(length=20), nullable=False),
        sa.Column('term_id', sa.Integer(), nullable=False),
        sa.Column('session_id', sa.Integer(), nullable=False),
        sa.Column('question_assignment', sa.String(length=50), nullable=True),
        sa.Column('question_text', sa.Text(), nullable=False),
        sa.Column('option_a', sa.Text(), nullable=True),
        sa.Column('option_b', sa.Text(), nullable=True),
        sa.Column('option_c', sa.Text(), nullable=True),
        sa.Column('option_d', sa.Text(), nullable=True),
        sa.Column('correct_answer', sa.String(length=1), nullable=False),
        sa.Column(
            'question_type',
            sa.Enum('multiple_choice', 'true_false', name='question_type', native_enum=False),
            nullable=False,
        ),
        sa.Column('created_by', sa.Integer(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index(
        'ix_questions_pool', 'questions', ['subject_id', 'class_level', 'term_id', 'session_id'], unique=False
    )

    op.create_table(
        'test_results',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('test_code_id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('score', sa.Integer(), nullable=False),
        sa.Column('total_questions', sa.Integer(), nullable=False),
        sa.Column('time_taken', sa.Integer(), nullable=True),
        sa.Column('submitted_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['test_code_id'], ['test_codes.id'], ),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('test_code_id', 'student_id', name='uq_test_results_code_student'),
    )
    op.create_index(op.f('ix_test_results_test_code_id'), 'test_results', ['test_code_id'], unique=False)
    op.create_index(op.f('ix_test_results_student_id'), 'test_results', ['student_id'], unique=False)

    op.create_table(
        'exam_answer_mappings',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('test_code_id', sa.Integer(), nullable=False),
        sa.Column('student_id', sa.Integer(), nullable=False),
        sa.Column('mapping', postgresql.JSONB(astext_type=sa.Text()), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('now()'), nullable=False),
        sa.ForeignKeyConstraint(['test_code_id'], ['test_codes.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('test_code_id', 'student_id', name='uq_exam_answer_mappings_code_student'),
    )
    op.create_index(
        op.f('ix_exam_answer_mappings_test_code_id'), 'exam_answer_mappings', ['test_code_id'], unique=False
    )


def downgrade() -> None:
    """Drop the test code tables"""
    op.drop_index(op.f('ix_exam_answer_mappings_test_code_id'), table_name='exam_answer_mappings')
    op.drop_table('exam_answer_mappings')
    op.drop_index(op.f('ix_test_results_student_id'), table_name='test_results')
    op.drop_index(op.f('ix_test_results_test_code_id'), table_name='test_results')
    op.drop_table('test_results')
    op.drop_index('ix_questions_pool', table_name='questions')
    op.drop_table('questions')
    op.drop_index('ix_test_codes_scope', table_name='test_codes')
    op.drop_index(op.f('ix_test_codes_used_by'), table_name='test_codes')
    op.drop_index(op.f('ix_test_codes_status'), table_name='test_codes')
    op.drop_index(op.f('ix_test_codes_batch_id'), table_name='test_codes')
    op.drop_index(op.f('ix_test_codes_code'), table_name='test_codes')
    op.drop_table('test_codes')
