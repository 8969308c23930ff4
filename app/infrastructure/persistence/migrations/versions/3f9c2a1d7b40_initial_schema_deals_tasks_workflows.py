"""initial_schema_deals_tasks_workflows

Revision ID: 3f9c2a1d7b40
Revises:
Create Date: 2026-10-19 09:12:44.120318

"""

from collections.abc import Sequence
from typing import Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = "3f9c2a1d7b40"
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def _timestamps() -> list[sa.Column]:
    return [
        sa.Column(
            "created_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
        sa.Column(
            "updated_at",
            sa.DateTime(timezone=True),
            server_default=sa.text("now()"),
            nullable=False,
        ),
    ]


def upgrade() -> None:
    """Upgrade schema."""
    op.create_table(
        "deal",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("team_id", sa.String(), nullable=False),
        sa.Column("user_id", sa.String(), nullable=True),
        sa.Column("name", sa.String(length=300), nullable=True),
        sa.Column("amount", sa.Float(), nullable=True),
        sa.Column("stage", sa.String(length=64), nullable=True),
        sa.Column("probability", sa.Float(), nullable=True),
        sa.Column("close_date", sa.String(length=64), nullable=True),
        sa.Column("tags", sa.JSON(), nullable=False),
        sa.Column("attributes", sa.JSON(), nullable=False),
        sa.Column("stage_changed_at", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_deal_team_id", "deal", ["team_id"])
    op.create_index("ix_deal_user_id", "deal", ["user_id"])
    op.create_index(
        "ix_deal_team_stage_changed", "deal", ["team_id", "stage_changed_at"]
    )

    op.create_table(
        "task",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("team_id", sa.String(), nullable=False),
        sa.Column("deal_id", sa.String(), nullable=True),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("assigned_to", sa.String(), nullable=True),
        sa.Column("title", sa.String(length=500), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "priority", sa.String(length=16), server_default="medium", nullable=False
        ),
        sa.Column("status", sa.String(length=32), server_default="open", nullable=False),
        sa.Column("due_date", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(["deal_id"], ["deal.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_task_team_id", "task", ["team_id"])
    op.create_index("ix_task_deal_id", "task", ["deal_id"])
    op.create_index("ix_task_team_deal", "task", ["team_id", "deal_id"])
    op.create_index("ix_task_assigned", "task", ["team_id", "assigned_to"])

    op.create_table(
        "workflow",
        sa.Column("id", sa.String(), nullable=False),
        sa.Column("team_id", sa.String(), nullable=False),
        sa.Column("created_by", sa.String(), nullable=True),
        sa.Column("name", sa.String(length=200), nullable=False),
        sa.Column("description", sa.Text(), nullable=True),
        sa.Column(
            "enabled", sa.Boolean(), server_default=sa.text("true"), nullable=False
        ),
        sa.Column("trigger_type", sa.String(length=64), nullable=False),
        sa.Column("trigger_config", sa.JSON(), nullable=False),
        sa.Column("conditions", sa.JSON(), nullable=False),
        sa.Column("actions", sa.JSON(), nullable=False),
        sa.Column("execution_history", sa.JSON(), nullable=False),
        sa.Column(
            "total_executions", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column(
            "successful_executions",
            sa.Integer(),
            server_default=sa.text("0"),
            nullable=False,
        ),
        sa.Column(
            "failed_executions", sa.Integer(), server_default=sa.text("0"), nullable=False
        ),
        sa.Column("last_executed", sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_workflow_team_id", "workflow", ["team_id"])
    op.create_index(
        "ix_workflow_team_trigger_enabled",
        "workflow",
        ["team_id", "trigger_type", "enabled"],
    )


def downgrade() -> None:
    """Downgrade schema."""
    op.drop_index("ix_workflow_team_trigger_enabled", table_name="workflow")
    op.drop_index("ix_workflow_team_id", table_name="workflow")
    op.drop_table("workflow")
    op.drop_index("ix_task_assigned", table_name="task")
    op.drop_index("ix_task_team_deal", table_name="task")
    op.drop_index("ix_task_deal_id", table_name="task")
    op.drop_index("ix_task_team_id", table_name="task")
    op.drop_table("task")
    op.drop_index("ix_deal_team_stage_changed", table_name="deal")
    op.drop_index("ix_deal_user_id", table_name="deal")
    op.drop_index("ix_deal_team_id", table_name="deal")
    op.drop_table("deal")
