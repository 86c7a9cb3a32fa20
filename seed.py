"""Seed script for LeaveDesk.

Populates the database with demo data:
- 1 admin and 7 employees, each with a login
- public and company holidays for the current year
- a handful of leave requests (pending, approved, rejected); balances
  already reflect the approved ones

Usage:
    python seed.py
"""

import asyncio
from datetime import date, datetime, timezone

from sqlalchemy import select

from leavedesk.core.config import settings
from leavedesk.core.database import async_session_factory, init_db
from leavedesk.core.security import hash_password
from leavedesk.models import Employee, Holiday, LeaveRequest, User
from leavedesk.services.leave_rules import days_inclusive

PASSWORD = "password123"
YEAR = date.today().year


# ── Seed Data Definitions ────────────────────────────────────────────────────

USERS_DATA = [
    {"role": "admin", "name": "Sarah Chen", "email": "sarah.chen@acme.com",
     "dept": "Human Resources", "hire": date(2022, 1, 15)},
    {"role": "employee", "name": "Emily Johnson", "email": "emily.johnson@acme.com",
     "dept": "Engineering", "hire": date(2023, 3, 10)},
    {"role": "employee", "name": "James Wilson", "email": "james.wilson@acme.com",
     "dept": "Engineering", "hire": date(2023, 4, 22)},
    {"role": "employee", "name": "Priya Patel", "email": "priya.patel@acme.com",
     "dept": "Marketing", "hire": date(2023, 6, 1)},
    {"role": "employee", "name": "David Kim", "email": "david.kim@acme.com",
     "dept": "Finance", "hire": date(2024, 7, 15)},
    {"role": "employee", "name": "Maria Garcia", "email": "maria.garcia@acme.com",
     "dept": "Sales", "hire": date(2024, 9, 1)},
    {"role": "employee", "name": "Alex Thompson", "email": "alex.thompson@acme.com",
     "dept": "Engineering", "hire": date(2024, 11, 1)},
    {"role": "employee", "name": "Robert Brown", "email": "robert.brown@acme.com",
     "dept": "Operations", "hire": date(2025, 3, 1)},
]

HOLIDAYS_DATA = [
    ("New Year's Day", date(YEAR, 1, 1), "public"),
    ("Independence Day", date(YEAR, 7, 4), "public"),
    ("Company Anniversary", date(YEAR, 9, 15), "company"),
    ("Thanksgiving", date(YEAR, 11, 26), "public"),
    ("Christmas Day", date(YEAR, 12, 25), "public"),
    ("Year-End Shutdown", date(YEAR, 12, 31), "company"),
]

# (employee index, leave type, start, end, status, reason)
REQUESTS_DATA = [
    (1, "Vacation", date(YEAR, 2, 10), date(YEAR, 2, 14), "approved", "Family trip"),
    (2, "Sick", date(YEAR, 3, 3), date(YEAR, 3, 4), "approved", "Flu"),
    (3, "Personal", date(YEAR, 4, 7), date(YEAR, 4, 7), "rejected", "Moving house"),
    (4, "Vacation", date(YEAR, 8, 3), date(YEAR, 8, 14), "pending", "Summer holiday"),
    (5, "Emergency", date(YEAR, 5, 19), date(YEAR, 5, 20), "approved", "Family emergency"),
    (6, "Vacation", date(YEAR, 10, 5), date(YEAR, 10, 9), "pending", "Conference and travel"),
    (7, "Personal", date(YEAR, 6, 12), date(YEAR, 6, 12), "pending", "Appointment"),
]


async def seed() -> None:
    await init_db()

    async with async_session_factory() as db:
        existing = await db.execute(select(User).where(User.email == USERS_DATA[0]["email"]))
        if existing.scalar_one_or_none():
            print("⚠️  Seed data already present, nothing to do")
            return

        now = datetime.now(timezone.utc)

        # 1. Employees and logins
        print("\n👥 Creating employees...")
        employees = []
        for data in USERS_DATA:
            emp = Employee(
                name=data["name"],
                email=data["email"],
                department=data["dept"],
                role=data["role"],
                hire_date=data["hire"],
                leave_balance=settings.DEFAULT_LEAVE_BALANCE,
                created_at=now,
            )
            db.add(emp)
            employees.append(emp)
        await db.flush()

        for emp in employees:
            db.add(User(
                email=emp.email,
                hashed_password=hash_password(PASSWORD),
                employee_id=emp.id,
                created_at=now,
            ))
        await db.flush()
        print(f"   ✅ {len(employees)} employees with logins created")

        # 2. Holidays
        print("\n📅 Creating holidays...")
        for name, day, kind in HOLIDAYS_DATA:
            db.add(Holiday(name=name, date=day, type=kind, created_at=now))
        await db.flush()
        print(f"   ✅ {len(HOLIDAYS_DATA)} holidays created")

        # 3. Leave requests, deducting approved ones from balances
        print("\n📝 Creating leave requests...")
        admin = employees[0]
        for idx, leave_type, start, end, status, reason in REQUESTS_DATA:
            emp = employees[idx]
            days = days_inclusive(start, end)
            decided = status != "pending"
            db.add(LeaveRequest(
                employee_id=emp.id,
                employee_name=emp.name,
                leave_type=leave_type,
                start_date=start,
                end_date=end,
                days_requested=days,
                reason=reason,
                status=status,
                created_at=now,
                reviewed_at=now if decided else None,
                reviewed_by=admin.name if decided else None,
            ))
            if status == "approved":
                emp.leave_balance -= days
        await db.flush()
        print(f"   ✅ {len(REQUESTS_DATA)} leave requests created")

        await db.commit()

    print("\n" + "=" * 60)
    print("✅ Database seeding complete!")
    print("=" * 60)
    print(f"\n🔑 Login Credentials (all use password: {PASSWORD}):")
    print(f"   {'Email':<35} {'Role':<10} {'Name'}")
    print(f"   {'-'*35} {'-'*10} {'-'*20}")
    for data in USERS_DATA:
        print(f"   {data['email']:<35} {data['role']:<10} {data['name']}")
    print()


# ── Entry Point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 60)
    print("🌱 LeaveDesk Seed Script")
    print("=" * 60)
    asyncio.run(seed())
