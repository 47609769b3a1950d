import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["JWT_SECRET"] = "test-jwt-secret"
os.environ["CRON_SECRET"] = "test-cron-secret"

from datetime import date, datetime
from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from shared.core.auth import create_access_token
from shared.core.database import Base, build_engine, get_billing_db
from shared.models.users import User
from billing_service.app.main import app
from billing_service.app.models.financials.expenses import Expense
from billing_service.app.models.financials.invoices import Invoice, InvoiceLineItem
from billing_service.app.models.financials.late_fee_configs import LateFeeConfig
from billing_service.app.models.leasing_tenants.leases import Lease
from billing_service.app.models.leasing_tenants.payments import Payment
from billing_service.app.models.leasing_tenants.recurring_charges import RecurringCharge
from billing_service.app.models.leasing_tenants.rent_charges import RentCharge
from billing_service.app.models.space_sites.properties import Property
from billing_service.app.models.space_sites.tenant_invites import TenantInvite
from billing_service.app.models.space_sites.units import Unit

CRON_SECRET = "test-cron-secret"


@pytest.fixture
def engine():
    engine = build_engine("sqlite://", poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client(db):
    def override_get_db():
        yield db

    app.dependency_overrides[get_billing_db] = override_get_db
    with TestClient(app, raise_server_exceptions=False) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def auth_headers(user) -> dict:
    token = create_access_token({"user_id": user.id, "role": user.role, "name": user.name})
    return {"Authorization": f"Bearer {token}"}


class Factory:
    """Persists domain rows with sensible defaults."""

    def __init__(self, db):
        self.db = db
        self._seq = 0

    def _save(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def _next(self) -> int:
        self._seq += 1
        return self._seq

    def user(self, role="OWNER", **kwargs):
        n = self._next()
        data = {
            "name": f"{role.title()} {n}",
            "email": f"{role.lower()}{n}@example.com",
            "phone": f"555-01{n:02d}",
            "role": role,
        }
        data.update(kwargs)
        return self._save(User(**data))

    def property(self, owner, **kwargs):
        n = self._next()
        data = {
            "owner_id": owner.id,
            "name": f"Property {n}",
            "address": f"{n} Main St",
            "city": "Austin",
            "state": "TX",
            "zip_code": "78701",
            "status": "ACTIVE",
        }
        data.update(kwargs)
        return self._save(Property(**data))

    def unit(self, prop, **kwargs):
        n = self._next()
        data = {
            "property_id": prop.id,
            "unit_number": f"{100 + n}",
            "status": "VACANT",
            "bedrooms": 2,
            "bathrooms": Decimal("1.0"),
            "sqft": 900,
            "rent_amount": Decimal("1800"),
        }
        data.update(kwargs)
        return self._save(Unit(**data))

    def lease(self, unit, tenant=None, **kwargs):
        data = {
            "unit_id": unit.id,
            "tenant_id": tenant.id if tenant else None,
            "start_date": date(2023, 1, 1),
            "end_date": date(2025, 12, 31),
            "rent_amount": Decimal("1800"),
            "status": "ACTIVE",
        }
        data.update(kwargs)
        return self._save(Lease(**data))

    def charge(self, lease, due_date, amount="1800", **kwargs):
        data = {
            "lease_id": lease.id,
            "charge_type": "RENT",
            "amount": Decimal(amount),
            "paid_amount": Decimal("0"),
            "due_date": due_date,
            "period_start": date(due_date.year, due_date.month, 1),
            "status": "UNPAID",
            "created_at": datetime(due_date.year, due_date.month, 1),
            "updated_at": datetime(due_date.year, due_date.month, 1),
        }
        data.update(kwargs)
        return self._save(RentCharge(**data))

    def recurring(self, lease, charge_type, amount, day_of_month=1, is_active=True):
        return self._save(RecurringCharge(
            lease_id=lease.id, charge_type=charge_type, amount=Decimal(amount),
            day_of_month=day_of_month, is_active=is_active))

    def payment(self, lease, due_date, amount="1800", status="PENDING", paid_date=None):
        return self._save(Payment(
            lease_id=lease.id, amount=Decimal(amount), due_date=due_date,
            status=status, paid_date=paid_date))

    def late_fee_config(self, prop, **kwargs):
        data = {
            "property_id": prop.id,
            "grace_period_days": 5,
            "fee_type": "FLAT",
            "fee_amount": Decimal("50"),
            "max_fee_amount": None,
            "is_active": True,
        }
        data.update(kwargs)
        return self._save(LateFeeConfig(**data))

    def invite(self, unit, email="prospect@example.com", status="PENDING"):
        return self._save(TenantInvite(unit_id=unit.id, email=email, status=status))

    def invoice(self, owner, paid_date, items, status="PAID"):
        n = self._next()
        invoice = Invoice(
            owner_id=owner.id,
            invoice_number=f"INV-{n:04d}",
            total_amount=sum(Decimal(amount) for _, amount in items),
            status=status,
            paid_date=paid_date,
        )
        invoice.line_items = [
            InvoiceLineItem(type=item_type, amount=Decimal(amount))
            for item_type, amount in items
        ]
        return self._save(invoice)

    def expense(self, owner, prop=None, **kwargs):
        data = {
            "owner_id": owner.id,
            "property_id": prop.id if prop else None,
            "category": "MAINTENANCE",
            "amount": Decimal("100"),
            "date": date(2024, 1, 15),
            "description": "Expense",
        }
        data.update(kwargs)
        return self._save(Expense(**data))


@pytest.fixture
def factory(db):
    return Factory(db)


@pytest.fixture
def admin(factory):
    return factory.user(role="ADMIN", name="Admin User")


@pytest.fixture
def owner(factory):
    return factory.user(role="OWNER", name="Olivia Owner")


@pytest.fixture
def tenant(factory):
    return factory.user(role="TENANT", name="Tom Tenant")


@pytest.fixture
def headers_for():
    return auth_headers


@pytest.fixture
def cron_secret():
    return CRON_SECRET
