import logging

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from shared.core.config import settings
from shared.core.database import Base, billing_engine
from shared.exception_handler import setup_exception_handlers
from shared.models import users
from .models.space_sites import properties, units, tenant_invites
from .models.leasing_tenants import leases, rent_charges, recurring_charges, payments, payment_aging
from .models.financials import late_fee_configs, invoices, expenses
from .router.billing import billing_router, cron_router
from .router.rent_roll import rent_roll_router
from .router.properties import properties_router
from .router.reports import reports_router
from .router.expenses import expenses_router

logging.basicConfig(
    level=settings.LOG_LEVEL.upper(),
    format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
)

app = FastAPI(title="Billing Service API")

# Create all tables
Base.metadata.create_all(bind=billing_engine)

origins = [o.strip() for o in settings.CORS_ORIGINS.split(",") if o.strip()]

app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

setup_exception_handlers(app)

# Include routers
app.include_router(billing_router.router)
app.include_router(cron_router.router)
app.include_router(rent_roll_router.router)
app.include_router(properties_router.router)
app.include_router(reports_router.router)
app.include_router(expenses_router.router)
