"""Seed demo data for a local ClubOps database.

Creates one club with a manager and a DJ login, two stages with their
queues, three licensed dancers, two VIP suites and a couple of
transactions so every screen has something to show.

Usage:
    cd backend
    python seed_demo_data.py
"""

import sys
import os
from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

# Ensure the backend package is importable
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from clubops.core.security import get_password_hash
from clubops.db.base import Base
from clubops.db.session import SessionLocal, engine
from clubops.models import (
    Club, ClubRole, Dancer, DancerLicense, DjQueue, FinancialTransaction, PaymentMethod,
    Stage, TransactionCategory, TransactionType, User, UserClubRole, VipRoom,
)

CLUB_NAME = "Elite Gentlemen's Club"


def seed():
    """Insert demo data unless the demo club already exists."""
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if db.query(Club).filter(Club.name == CLUB_NAME).first():
            print("Demo club already present, nothing to do.")
            return
        _seed_all(db)
        db.commit()
        print("Seed data committed successfully.")
    except Exception as e:
        db.rollback()
        print(f"Error seeding data: {e}")
        raise
    finally:
        db.close()


def _seed_all(db):
    # ---------------------------------------------------------------
    # 1. Club and logins
    # ---------------------------------------------------------------
    club = Club(
        name=CLUB_NAME,
        address="123 Main Street",
        city="Las Vegas",
        state="NV",
        zip_code="89101",
        phone="(555) 123-4567",
        email="info@eliteclub.com",
        license_number="LIC-2024-001",
        timezone="America/Los_Angeles",
    )
    db.add(club)
    db.flush()

    manager = User(
        email="admin@eliteclub.com",
        password_hash=get_password_hash("admin123"),
        first_name="John",
        last_name="Manager",
        phone="(555) 987-6543",
    )
    manager.club_roles.append(UserClubRole(club_id=club.id, role=ClubRole.MANAGER))
    dj = User(
        email="dj@eliteclub.com",
        password_hash=get_password_hash("dj123"),
        first_name="Mike",
        last_name="DJ",
        phone="(555) 555-1234",
    )
    dj.club_roles.append(UserClubRole(club_id=club.id, role=ClubRole.DJ))
    db.add_all([manager, dj])
    db.flush()
    print("  + Users (2)")

    # ---------------------------------------------------------------
    # 2. Stages and queues
    # ---------------------------------------------------------------
    for name, description, capacity in (
        ("Main Stage", "Primary performance stage", 1),
        ("Side Stage", "Secondary performance area", 1),
    ):
        stage = Stage(club_id=club.id, name=name, description=description, max_capacity=capacity)
        db.add(stage)
        db.flush()
        db.add(DjQueue(club_id=club.id, stage_id=stage.id, name=f"{name} Queue"))
    print("  + Stages and queues (2)")

    # ---------------------------------------------------------------
    # 3. Dancers with licenses
    # ---------------------------------------------------------------
    today = date.today()
    for stage_name, first, last, email, dob in (
        ("Aria", "Sarah", "Johnson", "aria@example.com", date(1995, 3, 15)),
        ("Bella", "Emily", "Davis", "bella@example.com", date(1993, 7, 22)),
        ("Crystal", "Jessica", "Wilson", "crystal@example.com", date(1996, 11, 8)),
    ):
        dancer = Dancer(
            club_id=club.id,
            stage_name=stage_name,
            first_name=first,
            last_name=last,
            email=email,
            date_of_birth=dob,
            created_by_id=manager.id,
        )
        dancer.licenses.append(DancerLicense(
            license_type="ENTERTAINMENT",
            license_number=f"ENT-{stage_name.upper()}-2024",
            issue_date=today - timedelta(days=180),
            expiration_date=today + timedelta(days=365),
            issuing_authority="Clark County",
        ))
        db.add(dancer)
    print("  + Dancers (3)")

    # ---------------------------------------------------------------
    # 4. VIP rooms
    # ---------------------------------------------------------------
    db.add_all([
        VipRoom(
            club_id=club.id,
            name="VIP Suite 1",
            description="Luxury private suite with premium amenities",
            hourly_rate=Decimal("150.00"),
            capacity=4,
            amenities=["Private bar", "Premium sound system", "Luxury seating"],
        ),
        VipRoom(
            club_id=club.id,
            name="VIP Suite 2",
            description="Intimate private room",
            hourly_rate=Decimal("125.00"),
            capacity=2,
            amenities=["Private bar", "Sound system"],
        ),
    ])
    print("  + VIP rooms (2)")

    # ---------------------------------------------------------------
    # 5. Sample transactions
    # ---------------------------------------------------------------
    now = datetime.now(timezone.utc)
    db.add_all([
        FinancialTransaction(
            club_id=club.id,
            transaction_type=TransactionType.REVENUE,
            category=TransactionCategory.BAR_FEE,
            amount=Decimal("40.00"),
            description="Bar fee - Aria",
            payment_method=PaymentMethod.CASH,
            processed_at=now - timedelta(hours=3),
            created_by_id=manager.id,
        ),
        FinancialTransaction(
            club_id=club.id,
            transaction_type=TransactionType.REVENUE,
            category=TransactionCategory.VIP_ROOM,
            amount=Decimal("300.00"),
            description="VIP Suite 1 - 2 hours",
            payment_method=PaymentMethod.CREDIT_CARD,
            processed_at=now - timedelta(hours=1),
            created_by_id=manager.id,
        ),
    ])
    print("  + Transactions (2)")


if __name__ == "__main__":
    print("=" * 60)
    print("ClubOps - Seed Demo Data")
    print("=" * 60)
    seed()
