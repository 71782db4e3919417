"""Seed script for the leave management service.

Populates the employee directory with the SOEN Audio roster:
- 3 owners (no manager)
- 1 admin reporting to an owner
- 9 employees reporting to the admin or an owner
- default allotments for every leave category

Usage:
    cd backend && alembic upgrade head && python seed.py
"""

import asyncio
import os
import sys

from sqlalchemy import select

# Ensure the backend directory is on the path when running from backend/
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from leaveflow.core.database import async_session_factory
from leaveflow.models import Employee, LeaveType
from leaveflow.services.directory import EmployeeDirectory


# ── Seed Data Definitions ────────────────────────────────────────────────────

# (roster id, name, email, role, roster id of manager)
ROSTER = [
    (1, "Hari Seedhar", "h@soenaudio.com", "owner", None),
    (2, "Daniel Kissel", "daniel@soenaudio.com", "owner", None),
    (3, "Glen Walters", "glen@soenaudio.com", "owner", None),
    (4, "Rajesh Murali", "rajesh@soenaudio.com", "admin", 1),
    (5, "Sanket Mahadik", "sanket@soenaudio.com", "employee", 4),
    (6, "Chindan Thiyagarajan", "chindan@soenaudio.com", "employee", 4),
    (7, "Upendra Kagana", "upendra@soenaudio.com", "employee", 4),
    (8, "John Verma", "john@soenaudio.com", "employee", 4),
    (9, "Rick", "rick@soenaudio.com", "employee", 1),
    (10, "Bruce Ryan", "bruce@soenaudio.com", "employee", 1),
    (11, "Nikki", "nikki@soenaudio.com", "employee", 1),
    (12, "Andy Yang", "andy@soenaudio.com", "employee", 2),
    (13, "Jacky Wu", "jacky@soenaudio.com", "employee", 2),
]

DEFAULT_ALLOTMENTS = {
    LeaveType.CASUAL.value: 12,
    LeaveType.SICK.value: 12,
    LeaveType.EARNED.value: 15,
    LeaveType.PRIVILEGE.value: 15,
    LeaveType.MATERNITY.value: 0,
    LeaveType.PATERNITY.value: 0,
    LeaveType.COMPENSATORY_OFF.value: 0,
    LeaveType.LEAVE_WITHOUT_PAY.value: 0,
}


async def seed():
    async with async_session_factory() as db:
        result = await db.execute(select(Employee.id).limit(1))
        if result.scalar_one_or_none() is not None:
            print("⚠️  Employees already exist. Skipping seed.")
            print("   To re-seed, reset the database first.")
            return

        print("🌱 Starting database seed...\n")
        print("👥 Creating employees...")
        directory = EmployeeDirectory(db)
        ids: dict[int, int] = {}
        for roster_id, name, email, role, manager_roster_id in ROSTER:
            employee = await directory.add_employee(
                full_name=name,
                email=email,
                role=role,
                manager_id=ids[manager_roster_id] if manager_roster_id else None,
                allotments=DEFAULT_ALLOTMENTS,
            )
            ids[roster_id] = employee.id
            print(f"   ✅ #{employee.id}: {name} ({role})")

        await db.commit()
        print("\n" + "=" * 60)
        print("✅ Database seeding complete!")
        print("=" * 60)
        print(f"\n📊 Summary:")
        print(f"   • {len(ROSTER)} employees")
        print(f"   • {sum(DEFAULT_ALLOTMENTS.values())} days entitled per employee")
        print()


# ── Entry Point ───────────────────────────────────────────────────────────────

if __name__ == "__main__":
    print("=" * 60)
    print("🌱 Leave Management Seed Script")
    print("=" * 60)
    print()
    asyncio.run(seed())
