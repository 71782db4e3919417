"""Initial schema: employees and leave applications

Revision ID: 001
Revises:
Create Date: 2026-10-19

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

revision: str = "001"
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None

ALLOTMENT_COLUMNS = (
    "casual_leave",
    "sick_leave",
    "earned_leave",
    "privilege_leave",
    "maternity_leave",
    "paternity_leave",
    "compensatory_off",
    "leave_without_pay",
)


def upgrade() -> None:
    # Employees (self-referencing manager tree)
    op.create_table(
        "employees",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("full_name", sa.String(255), nullable=False),
        sa.Column("email", sa.String(255), unique=True, nullable=False),
        sa.Column("role", sa.String(50), nullable=False, server_default="employee"),
        sa.Column("manager_id", sa.Integer, sa.ForeignKey("employees.id"), nullable=True),
        *[
            sa.Column(name, sa.Integer, nullable=False, server_default="0")
            for name in ALLOTMENT_COLUMNS
        ],
        sa.Column("leaves_entitled", sa.Integer, nullable=False, server_default="0"),
        sa.Column("leaves_taken", sa.Integer, nullable=False, server_default="0"),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("leaves_taken >= 0", name="ck_employees_leaves_taken"),
    )
    op.create_index("ix_employees_manager_id", "employees", ["manager_id"])

    # Leave Applications
    op.create_table(
        "leave_applications",
        sa.Column("id", sa.Integer, primary_key=True, autoincrement=True),
        sa.Column("employee_id", sa.Integer, sa.ForeignKey("employees.id"), nullable=False),
        sa.Column("leave_type", sa.String(50), nullable=False),
        sa.Column("start_date", sa.Date, nullable=False),
        sa.Column("end_date", sa.Date, nullable=False),
        sa.Column("days_requested", sa.Integer, nullable=False),
        sa.Column("reason", sa.Text, nullable=False, server_default=""),
        sa.Column("status", sa.String(20), nullable=False, server_default="pending"),
        sa.Column("approved_by", sa.Integer, sa.ForeignKey("employees.id"), nullable=True),
        sa.Column("rejection_reason", sa.Text, nullable=True),
        sa.Column("approved_at", sa.DateTime(timezone=True), nullable=True),
        sa.Column("created_at", sa.DateTime(timezone=True), nullable=False),
        sa.CheckConstraint("days_requested > 0", name="ck_leave_applications_days"),
        sa.CheckConstraint("start_date <= end_date", name="ck_leave_applications_dates"),
    )
    op.create_index("ix_leave_applications_employee_id", "leave_applications", ["employee_id"])
    op.create_index("ix_leave_applications_created_at", "leave_applications", ["created_at"])


def downgrade() -> None:
    op.drop_index("ix_leave_applications_created_at", table_name="leave_applications")
    op.drop_index("ix_leave_applications_employee_id", table_name="leave_applications")
    op.drop_table("leave_applications")
    op.drop_index("ix_employees_manager_id", table_name="employees")
    op.drop_table("employees")
