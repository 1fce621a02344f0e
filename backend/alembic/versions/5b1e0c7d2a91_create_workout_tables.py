"""create exercises/workouts/workout_exercises/sets

Revision ID: 5b1e0c7d2a91
Revises:
Create Date: 2025-09-01 19:12:04.118302

"""
from typing import Sequence, Union
from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '5b1e0c7d2a91'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # 1) exercise catalog (global, not user-owned)
    op.create_table(
        'exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.Text(), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.CheckConstraint('length(trim(name)) > 0', name='exercises_name_check'),
    )
    op.create_index('exercises_name_idx', 'exercises', ['name'])
    op.create_index('exercises_name_lower_key', 'exercises', [sa.text('lower(name)')], unique=True)

    # 2) workouts, owned by an external user id
    op.create_table(
        'workouts',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('user_id', sa.Text(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('name', sa.Text(), nullable=True),
        sa.Column('duration_minutes', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.CheckConstraint('duration_minutes IS NULL OR duration_minutes > 0', name='workouts_duration_minutes_check'),
    )
    op.create_index('workouts_user_id_idx', 'workouts', ['user_id'])
    op.create_index('workouts_user_id_date_idx', 'workouts', ['user_id', 'date'])
    op.create_index('workouts_date_idx', 'workouts', ['date'])

    # 3) workout_exercises: cascade from workouts, restrict on exercises
    op.create_table(
        'workout_exercises',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_id', sa.Integer(), sa.ForeignKey('workouts.id', ondelete='CASCADE'), nullable=False),
        sa.Column('exercise_id', sa.Integer(), sa.ForeignKey('exercises.id', ondelete='RESTRICT'), nullable=False),
        sa.Column('order', sa.Integer(), nullable=False),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.UniqueConstraint('workout_id', 'exercise_id', name='workout_exercises_workout_id_exercise_id_unique'),
    )
    op.create_index('workout_exercises_workout_id_idx', 'workout_exercises', ['workout_id'])
    op.create_index('workout_exercises_workout_id_order_idx', 'workout_exercises', ['workout_id', 'order'])

    # 4) sets
    op.create_table(
        'sets',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('workout_exercise_id', sa.Integer(), sa.ForeignKey('workout_exercises.id', ondelete='CASCADE'), nullable=False),
        sa.Column('set_number', sa.Integer(), nullable=False),
        sa.Column('is_bodyweight', sa.Boolean(), nullable=False, server_default=sa.false()),
        sa.Column('weight', sa.Numeric(10, 2), nullable=True),
        sa.Column('reps', sa.Integer(), nullable=False),
        sa.Column('rpe', sa.Integer(), nullable=True),
        sa.Column('notes', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=False),
        sa.CheckConstraint('rpe IS NULL OR (rpe >= 1 AND rpe <= 10)', name='sets_rpe_check'),
        sa.CheckConstraint('reps > 0', name='sets_reps_check'),
        sa.CheckConstraint('weight IS NULL OR weight >= 0', name='sets_weight_check'),
        sa.CheckConstraint('set_number > 0', name='sets_set_number_check'),
    )
    op.create_index('sets_workout_exercise_id_idx', 'sets', ['workout_exercise_id'])
    op.create_index('sets_workout_exercise_id_set_number_idx', 'sets', ['workout_exercise_id', 'set_number'])


def downgrade() -> None:
    # drop child tables in reverse order
    op.drop_table('sets')
    op.drop_table('workout_exercises')
    op.drop_table('workouts')
    op.drop_table('exercises')
