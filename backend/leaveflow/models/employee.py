from datetime import datetime, timezone
from typing import Optional

from sqlalchemy import CheckConstraint, DateTime, ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column

from leaveflow.core.database import Base


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (
        CheckConstraint("leaves_taken >= 0", name="ck_employees_leaves_taken"),
    )

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    full_name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True)
    role: Mapped[str] = mapped_column(
        String(50), nullable=False, default="employee"
    )  # owner, admin, employee
    manager_id: Mapped[Optional[int]] = mapped_column(
        Integer, ForeignKey("employees.id"), nullable=True, index=True
    )

    # Days granted for the current period, one column per leave category
    casual_leave: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    sick_leave: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    earned_leave: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    privilege_leave: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    maternity_leave: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    paternity_leave: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    compensatory_off: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    leave_without_pay: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    leaves_entitled: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    leaves_taken: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )
