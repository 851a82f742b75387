"""Create workout and exercise session tables.

Revision ID: 0001
Revises:
Create Date: 2025-09-07
"""

from __future__ import annotations

import sqlalchemy as sa
from alembic import op

revision = "0001"
down_revision = None
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table(
        "workout",
        sa.Column("workout_id", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("total_volume", sa.Float(), nullable=True),
        sa.Column("total_sets", sa.Integer(), nullable=True),
        sa.PrimaryKeyConstraint("workout_id", name="pk_workout"),
    )
    op.create_index("ix_workout_user_id", "workout", ["user_id"])

    op.create_table(
        "exercise_session",
        sa.Column("session_id", sa.String(length=32), nullable=False),
        sa.Column("workout_id", sa.String(length=32), nullable=False),
        sa.Column("user_id", sa.String(), nullable=False),
        sa.Column("machine_id", sa.String(), nullable=False),
        sa.Column("machine_type", sa.String(), nullable=True),
        sa.Column("started_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("ended_at", sa.DateTime(timezone=True), nullable=False),
        sa.Column("sets", sa.Text(), nullable=False),
        sa.Column("tap_session_id", sa.String(), nullable=True),
        sa.ForeignKeyConstraint(
            ["workout_id"],
            ["workout.workout_id"],
            name="fk_exercise_session_workout_id_workout",
            ondelete="CASCADE",
        ),
        sa.PrimaryKeyConstraint("session_id", name="pk_exercise_session"),
        sa.UniqueConstraint(
            "workout_id", "tap_session_id", name="uq_exercise_session_workout_id"
        ),
    )
    op.create_index(
        "ix_exercise_session_workout_id", "exercise_session", ["workout_id"]
    )


def downgrade() -> None:
    op.drop_index("ix_exercise_session_workout_id", table_name="exercise_session")
    op.drop_table("exercise_session")
    op.drop_index("ix_workout_user_id", table_name="workout")
    op.drop_table("workout")
