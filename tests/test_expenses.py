import uuid
from datetime import date
from decimal import Decimal

import pytest

from billing_service.app.crud.expenses.expense_import_crud import (
    parse_row_amount, parse_row_date
)
from billing_service.app.models.financials.expenses import Expense


@pytest.fixture
def rental(factory, owner):
    return factory.property(owner, name="Cedar House", address="9 Cedar Ln")


def test_create_and_fetch_expense(client, owner, rental, headers_for):
    headers = headers_for(owner)

    created = client.post("/api/expenses", headers=headers, json={
        "amount": 245.5,
        "date": "2024-03-12",
        "category": "REPAIRS",
        "description": "Water heater",
        "vendorName": "Hot Water Inc",
        "propertyId": str(rental.id),
    })

    assert created.status_code == 201
    body = created.json()
    assert body["vendorName"] == "Hot Water Inc"
    assert body["property"]["name"] == "Cedar House"

    fetched = client.get(f"/api/expenses/{body['id']}", headers=headers)
    assert fetched.status_code == 200
    assert fetched.json()["description"] == "Water heater"


def test_owner_must_name_a_property(client, owner, headers_for):
    response = client.post("/api/expenses", headers=headers_for(owner), json={
        "amount": 10, "date": "2024-03-12", "category": "OTHER",
    })

    assert response.status_code == 400
    assert response.json() == {"error": "Missing required fields: amount, date, category, propertyId"}


def test_admin_may_record_company_overhead(client, db, admin, headers_for):
    response = client.post("/api/expenses", headers=headers_for(admin), json={
        "amount": 99, "date": "2024-03-12", "category": "SOFTWARE",
    })

    assert response.status_code == 201
    assert db.query(Expense).one().property_id is None


def test_cannot_file_expense_against_foreign_property(client, factory, rental, headers_for):
    stranger = factory.user(role="OWNER")

    response = client.post("/api/expenses", headers=headers_for(stranger), json={
        "amount": 10, "date": "2024-03-12", "category": "OTHER",
        "propertyId": str(rental.id),
    })

    assert response.status_code == 404
    assert response.json() == {"error": "Property not found or not owned by you"}


def test_invalid_amount_is_a_bad_request(client, owner, rental, headers_for):
    response = client.post("/api/expenses", headers=headers_for(owner), json={
        "amount": -5, "date": "2024-03-12", "category": "OTHER",
        "propertyId": str(rental.id),
    })

    assert response.status_code == 400
    assert "error" in response.json()


def test_list_filters_paginates_and_summarizes(client, factory, owner, rental, headers_for):
    factory.expense(owner, rental, category="UTILITIES", amount=Decimal("80"), date=date(2024, 1, 5))
    factory.expense(owner, rental, category="UTILITIES", amount=Decimal("20"), date=date(2024, 2, 5))
    factory.expense(owner, rental, category="TAX", amount=Decimal("500"), date=date(2024, 2, 10))
    factory.expense(owner, rental, category="TAX", amount=Decimal("700"), date=date(2023, 12, 1))
    factory.expense(factory.user(role="OWNER"), category="TAX", amount=Decimal("1"))

    response = client.get(
        "/api/expenses",
        params={"startDate": "2024-01-01", "limit": 2},
        headers=headers_for(owner),
    )

    assert response.status_code == 200
    body = response.json()
    assert [e["date"] for e in body["expenses"]] == ["2024-02-10", "2024-02-05"]
    assert body["pagination"] == {"page": 1, "limit": 2, "total": 3, "totalPages": 2}
    assert body["summary"]["total"] == 600
    assert body["summary"]["byCategory"] == [
        {"category": "TAX", "amount": 500},
        {"category": "UTILITIES", "amount": 100},
    ]


def test_update_and_delete(client, db, factory, owner, rental, headers_for):
    headers = headers_for(owner)
    expense = factory.expense(owner, rental, vendor_name="Old Vendor")

    patched = client.patch(f"/api/expenses/{expense.id}", headers=headers, json={
        "amount": 150, "vendorName": "", "description": "",
    })

    assert patched.status_code == 200
    assert patched.json()["amount"] == 150
    assert patched.json()["vendorName"] is None
    assert patched.json()["description"] == "Expense"

    deleted = client.delete(f"/api/expenses/{expense.id}", headers=headers)
    assert deleted.json() == {"success": True}

    missing = client.get(f"/api/expenses/{expense.id}", headers=headers)
    assert missing.status_code == 404
    assert missing.json() == {"error": "Expense not found"}


def test_other_owner_cannot_see_expense(client, factory, owner, rental, headers_for):
    expense = factory.expense(owner, rental)

    response = client.get(
        f"/api/expenses/{expense.id}", headers=headers_for(factory.user(role="OWNER")))

    assert response.status_code == 404


@pytest.mark.parametrize("value,expected", [
    ("2024-03-01", date(2024, 3, 1)),
    ("03/15/2024", date(2024, 3, 15)),
    ("", None),
    ("not a date", None),
])
def test_parse_row_date(value, expected):
    assert parse_row_date(value) == expected


@pytest.mark.parametrize("value,expected", [
    ("125.40", Decimal("125.40")),
    ("1,200", Decimal("1200")),
    (75, Decimal("75")),
    ("0", None),
    ("-3", None),
    ("abc", None),
    ("NaN", None),
    (None, None),
])
def test_parse_row_amount(value, expected):
    assert parse_row_amount(value) == expected


def test_import_reports_bad_rows_and_keeps_good_ones(client, db, factory, owner, rental, headers_for):
    other = factory.property(owner, name="Pine Lofts")
    rows = [
        {"date": "2024-03-01", "amount": "120", "category": "utilities",
         "description": "Electric", "property": "Pine Lofts"},
        {"date": "2024-03-02", "amount": "60", "category": "MAINTENANCE",
         "description": "Gutter cleaning", "vendor": "Gutter Guys"},
        {"date": "2024-03-03", "amount": "15", "category": "FOOD", "description": "Lunch"},
        {"date": "2024-03-04", "amount": "abc", "category": "OTHER", "description": "Misc"},
        {"date": "2024-03-05", "amount": "40", "category": "OTHER",
         "description": "Keys", "property": "Nowhere"},
    ]

    response = client.post("/api/expenses/import", headers=headers_for(owner), json={
        "csvData": rows, "propertyId": str(rental.id),
    })

    assert response.status_code == 200
    body = response.json()
    assert body["success"] is True
    assert body["message"] == "Imported 3 expenses. 2 rows skipped."
    assert body["results"]["imported"] == 3
    assert body["results"]["skipped"] == 2
    assert body["results"]["errors"] == [
        'Row 3: Invalid category "FOOD". Valid categories: MAINTENANCE, REPAIRS, '
        'UTILITIES, INSURANCE, TAX, MORTGAGE, HOA, LEGAL, ADVERTISING, OTHER',
        'Row 4: Invalid amount "abc"',
        'Row 5: Property "Nowhere" not found, using default property',
    ]

    stored = db.query(Expense).order_by(Expense.date).all()
    assert [e.property_id for e in stored] == [other.id, rental.id, rental.id]
    assert stored[0].category == "UTILITIES"
    assert stored[1].vendor_name == "Gutter Guys"


def test_import_without_default_property_skips_unmatched_rows(client, owner, rental, headers_for):
    response = client.post("/api/expenses/import", headers=headers_for(owner), json={
        "csvData": [
            {"date": "2024-03-01", "amount": "10", "category": "OTHER",
             "description": "Stamps", "property": "9 Cedar Ln"},
            {"date": "2024-03-01", "amount": "10", "category": "OTHER", "description": "Tape"},
        ],
    })

    results = response.json()["results"]
    assert results["imported"] == 1
    assert results["errors"] == [
        "Row 2: No property specified and no default property provided"]


def test_import_requires_properties(client, factory, headers_for):
    response = client.post(
        "/api/expenses/import", headers=headers_for(factory.user(role="OWNER")),
        json={"csvData": []})

    assert response.status_code == 400
    assert response.json() == {"error": "No properties found. Please add properties first."}


def test_import_rejects_foreign_default_property(client, factory, owner, rental, headers_for):
    stranger = factory.user(role="OWNER")
    factory.property(stranger)

    response = client.post("/api/expenses/import", headers=headers_for(stranger), json={
        "csvData": [], "propertyId": str(rental.id),
    })

    assert response.status_code == 404


def test_export_csv(client, factory, owner, rental, headers_for):
    factory.expense(owner, rental, category="HOA", amount=Decimal("310"),
                    date=date(2024, 2, 1), description='Dues, "Q1"', notes="paid online")

    response = client.get("/api/expenses/export", headers=headers_for(owner))

    assert response.status_code == 200
    assert response.headers["content-disposition"].startswith(
        'attachment; filename="expenses-')
    assert response.text.split("\n") == [
        "date,amount,category,description,vendor,property,notes",
        '2024-02-01,310.00,HOA,"Dues, ""Q1""",,Cedar House,paid online',
    ]


def test_unknown_expense_id_is_404(client, owner, headers_for):
    response = client.delete(f"/api/expenses/{uuid.uuid4()}", headers=headers_for(owner))

    assert response.status_code == 404
