"""Financial tests: bar fees, revenue dashboard windows, append-only ledger."""

import pytest
from datetime import datetime, timedelta, timezone
from decimal import Decimal

from clubops.models.dancer import DancerSession
from clubops.models.financial import (
    FinancialTransaction, PaymentMethod, TransactionCategory, TransactionType,
)
from clubops.services.financial_service import FinancialService, revenue_windows

# A Friday
NOW = datetime(2026, 10, 16, 12, 0, tzinfo=timezone.utc)


def _tx(club_id, amount, processed_at, transaction_type=TransactionType.REVENUE, **extra):
    return FinancialTransaction(
        club_id=club_id,
        transaction_type=transaction_type,
        category=extra.pop("category", TransactionCategory.VIP_ROOM),
        amount=Decimal(str(amount)),
        payment_method=extra.pop("payment_method", PaymentMethod.CASH),
        processed_at=processed_at,
        **extra,
    )


class TestBarFee:
    def test_collect_bar_fee(self, client, db_session, auth_headers, test_user, test_dancers):
        aria = test_dancers[0]
        res = client.post("/api/financial/bar-fee", json={
            "dancerId": aria.id,
            "amount": 40,
            "paymentMethod": "CASH",
            "notes": "Friday shift",
        }, headers=auth_headers)
        assert res.status_code == 201
        data = res.json()
        assert data["category"] == "Bar Fee"
        assert data["transactionType"] == "REVENUE"
        assert data["amount"] == 40.0
        assert data["description"] == "Bar fee - Aria"
        assert data["reference"] == str(aria.id)
        assert data["notes"] == "Friday shift"
        assert data["createdBy"] == {"firstName": "Test", "lastName": "Manager"}

    def test_marks_only_open_sessions_paid(self, client, db_session, auth_headers, test_dancers):
        aria = test_dancers[0]
        closed = DancerSession(
            dancer_id=aria.id,
            check_in_time=NOW - timedelta(days=1, hours=8),
            check_out_time=NOW - timedelta(days=1),
        )
        open_ = DancerSession(dancer_id=aria.id, check_in_time=NOW)
        db_session.add_all([closed, open_])
        db_session.commit()

        client.post("/api/financial/bar-fee", json={
            "dancerId": aria.id, "amount": 55.5, "paymentMethod": "DEBIT_CARD",
        }, headers=auth_headers)

        db_session.refresh(closed)
        db_session.refresh(open_)
        assert open_.bar_fee_paid is True
        assert open_.bar_fee_amount == Decimal("55.50")
        assert closed.bar_fee_paid is False
        assert closed.bar_fee_amount is None

    def test_unknown_dancer_404(self, client, db_session, auth_headers, test_club):
        res = client.post("/api/financial/bar-fee", json={
            "dancerId": 9999, "amount": 40, "paymentMethod": "CASH",
        }, headers=auth_headers)
        assert res.status_code == 404
        assert db_session.query(FinancialTransaction).count() == 0

    @pytest.mark.parametrize("amount", [0, -10])
    def test_non_positive_amount_400(self, client, auth_headers, test_dancers, amount):
        res = client.post("/api/financial/bar-fee", json={
            "dancerId": test_dancers[0].id, "amount": amount, "paymentMethod": "CASH",
        }, headers=auth_headers)
        assert res.status_code == 400

    def test_invalid_payment_method_400(self, client, auth_headers, test_dancers):
        res = client.post("/api/financial/bar-fee", json={
            "dancerId": test_dancers[0].id, "amount": 40, "paymentMethod": "BITCOIN",
        }, headers=auth_headers)
        assert res.status_code == 400


class TestRevenueWindows:
    def test_week_starts_on_sunday(self):
        windows = revenue_windows(NOW)
        assert windows["daily"] == datetime(2026, 10, 16, tzinfo=timezone.utc)
        assert windows["weekly"] == datetime(2026, 10, 11, tzinfo=timezone.utc)
        assert windows["monthly"] == datetime(2026, 10, 1, tzinfo=timezone.utc)

    def test_sunday_is_its_own_week_start(self):
        sunday = datetime(2026, 10, 18, 23, 59, tzinfo=timezone.utc)
        assert revenue_windows(sunday)["weekly"] == datetime(2026, 10, 18, tzinfo=timezone.utc)


class TestDashboard:
    def test_revenue_sums(self, db_session, test_club, other_club):
        db_session.add_all([
            _tx(test_club.id, 100, datetime(2026, 10, 16, 9, 0, tzinfo=timezone.utc)),
            _tx(test_club.id, 50, datetime(2026, 10, 12, 10, 0, tzinfo=timezone.utc)),
            _tx(test_club.id, 25, datetime(2026, 10, 2, 10, 0, tzinfo=timezone.utc)),
            _tx(test_club.id, 1000, datetime(2026, 9, 30, 23, 0, tzinfo=timezone.utc)),
            _tx(test_club.id, 70, datetime(2026, 10, 16, 10, 0, tzinfo=timezone.utc),
                transaction_type=TransactionType.EXPENSE, category="Supplies"),
            _tx(other_club.id, 500, datetime(2026, 10, 16, 10, 0, tzinfo=timezone.utc)),
        ])
        db_session.commit()

        summary = FinancialService(db_session, test_club.id, clock=lambda: NOW).revenue_summary()
        assert summary == {"daily": 100.0, "weekly": 150.0, "monthly": 175.0}

    def test_dashboard_endpoint(self, client, db_session, auth_headers, test_club, test_user):
        now = datetime.now(timezone.utc)
        db_session.add_all([
            _tx(test_club.id, 10 + i, now - timedelta(minutes=i), created_by_id=test_user.id)
            for i in range(12)
        ])
        db_session.commit()

        res = client.get("/api/financial/dashboard", headers=auth_headers)
        assert res.status_code == 200
        data = res.json()
        assert data["revenue"]["daily"] >= 10.0
        recent = data["recentTransactions"]
        assert len(recent) == 10
        # Newest first
        assert [t["amount"] for t in recent[:3]] == [10.0, 11.0, 12.0]
        assert recent[0]["createdBy"]["firstName"] == "Test"

    def test_empty_dashboard(self, client, auth_headers):
        res = client.get("/api/financial/dashboard", headers=auth_headers)
        assert res.json() == {
            "revenue": {"daily": 0.0, "weekly": 0.0, "monthly": 0.0},
            "recentTransactions": [],
        }


class TestAppendOnlyLedger:
    def test_update_rejected(self, db_session, test_club):
        tx = _tx(test_club.id, 100, NOW)
        db_session.add(tx)
        db_session.commit()

        tx.amount = Decimal("1.00")
        with pytest.raises(ValueError, match="append-only"):
            db_session.commit()
        db_session.rollback()
        db_session.refresh(tx)
        assert tx.amount == Decimal("100.00")

    def test_delete_rejected(self, db_session, test_club):
        tx = _tx(test_club.id, 100, NOW)
        db_session.add(tx)
        db_session.commit()

        db_session.delete(tx)
        with pytest.raises(ValueError, match="append-only"):
            db_session.commit()
        db_session.rollback()
        assert db_session.query(FinancialTransaction).count() == 1
