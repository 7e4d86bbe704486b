"""initial reconciliation schema

Revision ID: 20261018_0001
Revises:
Create Date: 2026-10-18 00:00:01
"""

from collections.abc import Sequence

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = "20261018_0001"
down_revision: str | None = None
branch_labels: Sequence[str] | None = None
depends_on: Sequence[str] | None = None


def upgrade() -> None:
    op.create_table(
        "operators",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("records_processed", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("records_with_error", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("score", sa.Integer(), nullable=False, server_default=sa.text("100")),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )

    op.create_table(
        "proposals",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("unique_id", sa.String(length=255), nullable=False),
        sa.Column("cpf", sa.String(length=64), nullable=False),
        sa.Column("registration_number", sa.String(length=64), nullable=False),
        sa.Column("name", sa.String(length=255), nullable=False),
        sa.Column("employer", sa.String(length=255), nullable=False),
        sa.Column("logo_code", sa.Integer(), nullable=False),
        sa.Column("reference_value", sa.String(length=255), nullable=False),
        sa.Column("digitization_status", sa.String(length=32), nullable=False),
        sa.Column("situation", sa.String(length=255), nullable=False),
        sa.Column("extractor", sa.String(length=255), nullable=False),
        sa.Column("utilization", sa.String(length=255), nullable=False),
        sa.Column("contract_value", sa.Numeric(14, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("installment_value", sa.Numeric(14, 2), nullable=False, server_default=sa.text("0")),
        sa.Column("term_months", sa.Integer(), nullable=False, server_default=sa.text("0")),
        sa.Column("source_type", sa.String(length=32), nullable=False),
        sa.Column("importing_operator", sa.String(length=255), nullable=False),
        sa.Column("imported_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.Column("updated_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_proposals_unique_id", "proposals", ["unique_id"], unique=True)
    op.create_index("ix_proposals_cpf", "proposals", ["cpf"], unique=False)
    op.create_index("ix_proposals_digitization_status", "proposals", ["digitization_status"], unique=False)
    op.create_index("ix_proposals_source_type", "proposals", ["source_type"], unique=False)

    op.create_table(
        "validation_issues",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("unique_id", sa.String(length=255), nullable=False),
        sa.Column("issue_type", sa.String(length=32), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("resolved", sa.Boolean(), nullable=False, server_default=sa.text("false")),
        sa.Column("resolved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("resolved_by", sa.Integer(), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_validation_issues_unique_id", "validation_issues", ["unique_id"], unique=False)
    op.create_index("ix_validation_issues_issue_type", "validation_issues", ["issue_type"], unique=False)
    op.create_index("ix_validation_issues_resolved", "validation_issues", ["resolved"], unique=False)

    op.create_table(
        "history",
        sa.Column("id", sa.Integer(), autoincrement=True, nullable=False),
        sa.Column("operator_id", sa.Integer(), nullable=False),
        sa.Column("action", sa.String(length=32), nullable=False),
        sa.Column("description", sa.Text(), nullable=False),
        sa.Column("created_at", sa.DateTime(timezone=True), server_default=sa.text("now()"), nullable=False),
        sa.ForeignKeyConstraint(["operator_id"], ["operators.id"], ondelete="CASCADE"),
        sa.PrimaryKeyConstraint("id"),
    )
    op.create_index("ix_history_operator_id", "history", ["operator_id"], unique=False)
    op.create_index("ix_history_action", "history", ["action"], unique=False)


def downgrade() -> None:
    op.drop_index("ix_history_action", table_name="history")
    op.drop_index("ix_history_operator_id", table_name="history")
    op.drop_table("history")
    op.drop_index("ix_validation_issues_resolved", table_name="validation_issues")
    op.drop_index("ix_validation_issues_issue_type", table_name="validation_issues")
    op.drop_index("ix_validation_issues_unique_id", table_name="validation_issues")
    op.drop_table("validation_issues")
    op.drop_index("ix_proposals_source_type", table_name="proposals")
    op.drop_index("ix_proposals_digitization_status", table_name="proposals")
    op.drop_index("ix_proposals_cpf", table_name="proposals")
    op.drop_index("ix_proposals_unique_id", table_name="proposals")
    op.drop_table("proposals")
    op.drop_table("operators")
