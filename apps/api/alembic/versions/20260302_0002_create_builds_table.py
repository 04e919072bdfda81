"""create builds table

Revision ID: 20260302_0002
Revises: 20260227_0001
Create Date: 2026-03-02 10:10:00
"""

from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa


# revision identifiers, used by Alembic.
revision: str = "20260302_0002"
down_revision: Union[str, Sequence[str], None] = "20260227_0001"
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        "builds",
        sa.Column("id", sa.Integer(), primary_key=True, autoincrement=True, nullable=False),
        sa.Column(
            "job_id",
            sa.String(length=64),
            sa.ForeignKey("jobs.id", ondelete="CASCADE"),
            nullable=False,
        ),
        sa.Column("number", sa.Integer(), nullable=False, server_default=sa.text("1")),
        sa.Column(
            "status",
            sa.Enum(
                "QUEUED",
                "RUNNING",
                "SUCCESS",
                "FAILURE",
                "ABORTED",
                name="build_status",
                native_enum=False,
                length=16,
            ),
            nullable=False,
            server_default=sa.text("'QUEUED'"),
        ),
        sa.Column("cause", sa.String(length=256), nullable=True),
        sa.Column("sha", sa.String(length=64), nullable=True),
        sa.Column(
            "create_time",
            sa.DateTime(timezone=True),
            nullable=False,
            server_default=sa.text("CURRENT_TIMESTAMP"),
        ),
        sa.Column("start_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("end_time", sa.DateTime(timezone=True), nullable=True),
        sa.Column("meta", sa.JSON(), nullable=True),
    )
    op.create_index("ix_builds_job_id_create_time_id", "builds", ["job_id", "create_time", "id"])


def downgrade() -> None:
    op.drop_index("ix_builds_job_id_create_time_id", table_name="builds")
    op.drop_table("builds")
