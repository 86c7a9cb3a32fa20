import uuid
from datetime import date, datetime, timezone

from sqlalchemy import CheckConstraint, Date, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from leavedesk.core.database import Base

ROLES = ("admin", "employee")


class Employee(Base):
    __tablename__ = "employees"
    __table_args__ = (
        CheckConstraint("leave_balance >= 0", name="ck_employees_leave_balance_non_negative"),
    )

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    email: Mapped[str] = mapped_column(String(255), nullable=False)
    department: Mapped[str] = mapped_column(String(255), nullable=False, default="")
    role: Mapped[str] = mapped_column(
        String(50), nullable=False, default="employee"
    )  # admin, employee
    hire_date: Mapped[date | None] = mapped_column(Date, nullable=True)
    # Only the leave engine decrements this; see services.leave_engine
    leave_balance: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    @property
    def is_admin(self) -> bool:
        return self.role == "admin"
