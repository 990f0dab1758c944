"""create grading tables

Revision ID: 3f1c9a2b7d10
Revises:
Create Date: 2026-10-19 10:12:41.307215

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = '3f1c9a2b7d10'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamp(name: str, nullable: bool = False) -> sa.Column:
    return sa.Column(
        name,
        sa.DateTime(timezone=True),
        server_default=sa.func.now(),
        nullable=nullable,
    )


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "users",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("email", sa.String(255), nullable=False),
        sa.Column("full_name", sa.String(255), nullable=True),
        sa.Column("avatar_url", sa.String(512), nullable=True),
        sa.Column("hashed_password", sa.String(255), nullable=False),
        sa.Column("role", sa.String(50), nullable=False),
    )
    op.create_index("ix_users_id", "users", ["id"])
    op.create_index("ix_users_email", "users", ["email"], unique=True)

    op.create_table(
        "final_groups",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("name", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        _timestamp("created_at"),
    )
    op.create_index("ix_final_groups_id", "final_groups", ["id"])

    op.create_table(
        "final_group_members",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("final_groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("role", sa.String(20), nullable=False),
        _timestamp("joined_at"),
        sa.UniqueConstraint("group_id", "user_id", name="uq_final_group_members_group_user"),
    )
    op.create_index("ix_final_group_members_id", "final_group_members", ["id"])
    op.create_index("ix_final_group_members_group_id", "final_group_members", ["group_id"])
    op.create_index("ix_final_group_members_user_id", "final_group_members", ["user_id"])

    op.create_table(
        "final_tasks",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("final_groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("created_by_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("status", sa.String(20), nullable=False),
        _timestamp("created_at"),
        _timestamp("updated_at"),
    )
    op.create_index("ix_final_tasks_id", "final_tasks", ["id"])
    op.create_index("ix_final_tasks_group_id", "final_tasks", ["group_id"])

    op.create_table(
        "final_task_assignees",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("task_id", sa.Integer(), sa.ForeignKey("final_tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.UniqueConstraint("task_id", "user_id", name="uq_final_task_assignees_task_user"),
    )
    op.create_index("ix_final_task_assignees_id", "final_task_assignees", ["id"])
    op.create_index("ix_final_task_assignees_task_id", "final_task_assignees", ["task_id"])
    op.create_index("ix_final_task_assignees_user_id", "final_task_assignees", ["user_id"])

    op.create_table(
        "final_task_grades",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("task_id", sa.Integer(), sa.ForeignKey("final_tasks.id", ondelete="CASCADE"), nullable=False),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("grader_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("points", sa.Float(), nullable=False),
        sa.Column("max_points", sa.Float(), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        _timestamp("graded_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("task_id", "student_id", name="uq_final_task_grades_task_student"),
    )
    op.create_index("ix_final_task_grades_id", "final_task_grades", ["id"])
    op.create_index("ix_final_task_grades_task_id", "final_task_grades", ["task_id"])
    op.create_index("ix_final_task_grades_student_id", "final_task_grades", ["student_id"])

    op.create_table(
        "final_evaluations",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("group_id", sa.Integer(), sa.ForeignKey("final_groups.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("evaluator_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="SET NULL"), nullable=True),
        sa.Column("total_points", sa.Float(), nullable=False),
        sa.Column("overall_feedback", sa.Text(), nullable=True),
        _timestamp("created_at"),
        _timestamp("updated_at"),
        sa.UniqueConstraint("group_id", "user_id", name="uq_final_evaluations_group_user"),
    )
    op.create_index("ix_final_evaluations_id", "final_evaluations", ["id"])
    op.create_index("ix_final_evaluations_group_id", "final_evaluations", ["group_id"])
    op.create_index("ix_final_evaluations_user_id", "final_evaluations", ["user_id"])

    op.create_table(
        "assignments",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column("due_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("max_score", sa.Float(), nullable=False),
        sa.Column("closed", sa.Boolean(), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_assignments_id", "assignments", ["id"])

    op.create_table(
        "submissions",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("assignment_id", sa.Integer(), sa.ForeignKey("assignments.id", ondelete="CASCADE"), nullable=False),
        sa.Column("student_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("content", sa.Text(), nullable=True),
        _timestamp("submitted_at"),
        sa.Column("score", sa.Float(), nullable=True),
        sa.Column("feedback", sa.Text(), nullable=True),
        sa.Column("graded_at", sa.DateTime(timezone=True), nullable=True),
        sa.UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
    )
    op.create_index("ix_submissions_id", "submissions", ["id"])
    op.create_index("ix_submissions_assignment_id", "submissions", ["assignment_id"])
    op.create_index("ix_submissions_student_id", "submissions", ["student_id"])

    op.create_table(
        "quizzes",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("title", sa.String(255), nullable=False),
        sa.Column("grade", sa.Float(), nullable=False),
        sa.Column("closed", sa.Boolean(), nullable=False),
        _timestamp("created_at"),
    )
    op.create_index("ix_quizzes_id", "quizzes", ["id"])

    op.create_table(
        "quiz_results",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("quiz_id", sa.Integer(), sa.ForeignKey("quizzes.id", ondelete="CASCADE"), nullable=False),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("score", sa.Float(), nullable=True),
        _timestamp("completed_at"),
        sa.UniqueConstraint("quiz_id", "user_id", name="uq_quiz_results_quiz_user"),
    )
    op.create_index("ix_quiz_results_id", "quiz_results", ["id"])
    op.create_index("ix_quiz_results_quiz_id", "quiz_results", ["quiz_id"])
    op.create_index("ix_quiz_results_user_id", "quiz_results", ["user_id"])

    op.create_table(
        "student_grades",
        sa.Column("id", sa.Integer(), primary_key=True),
        sa.Column("user_id", sa.Integer(), sa.ForeignKey("users.id", ondelete="CASCADE"), nullable=False),
        sa.Column("extra_points", sa.Float(), nullable=False),
        _timestamp("updated_at"),
    )
    op.create_index("ix_student_grades_id", "student_grades", ["id"])
    op.create_index("ix_student_grades_user_id", "student_grades", ["user_id"], unique=True)


def downgrade() -> None:
    """Downgrade schema."""
    for table in (
        "student_grades",
        "quiz_results",
        "quizzes",
        "submissions",
        "assignments",
        "final_evaluations",
        "final_task_grades",
        "final_task_assignees",
        "final_tasks",
        "final_group_members",
        "final_groups",
        "users",
    ):
        op.drop_table(table)
