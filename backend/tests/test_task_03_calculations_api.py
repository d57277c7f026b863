"""Task-03: calculation API (preview, save, detail, report)"""

from __future__ import annotations

from decimal import Decimal

import pytest
from httpx import AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.calculation_log import CalculationLog

pytestmark = pytest.mark.asyncio


NEW_BUILD_FORM = {
    "price": "300000",
    "property_type": "new_build",
    "region": "valencia",
    "include_mortgage": True,
    "user_email": "buyer@example.com",
}


# ---------------------------------------------------------------------------
# T-1: health
# ---------------------------------------------------------------------------


async def test_health(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/health")
    assert resp.status_code == 200
    assert resp.json() == {"status": "ok"}


# ---------------------------------------------------------------------------
# T-2: preview
# ---------------------------------------------------------------------------


async def test_preview_returns_breakdown(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/calculations/preview",
        json={"price": "150000", "property_type": "resale", "region": "murcia"},
    )
    assert resp.status_code == 200
    result = resp.json()["result"]
    assert Decimal(result["purchase_taxes"]) == 12000
    assert Decimal(result["legal_fees"]) == 2250
    assert Decimal(result["registry_fees"]) == 400
    assert Decimal(result["notary_fees"]) == 600
    assert result["tax_display"] == "8% ITP"


@pytest.mark.parametrize("price", ["", "abc", "0", "-10", "1e30", "1" * 27])
async def test_preview_invalid_price_has_no_result(client: AsyncClient, price: str) -> None:
    resp = await client.post("/api/v1/calculations/preview", json={"price": price})
    assert resp.status_code == 200
    assert resp.json() == {"result": None}


async def test_preview_unknown_region_rejected(client: AsyncClient) -> None:
    resp = await client.post(
        "/api/v1/calculations/preview",
        json={"price": "150000", "property_type": "resale", "region": "catalonia"},
    )
    assert resp.status_code == 422


# ---------------------------------------------------------------------------
# T-3: calculate & save
# ---------------------------------------------------------------------------


async def test_create_calculation_stores_breakdown(client: AsyncClient, db: AsyncSession) -> None:
    resp = await client.post("/api/v1/calculations", json=NEW_BUILD_FORM)
    assert resp.status_code == 201
    data = resp.json()
    assert Decimal(data["result"]["purchase_taxes"]) == 34500
    assert Decimal(data["result"]["commodities_fees"]) == 500
    assert Decimal(data["result"]["mortgage_fees"]) == 1500
    assert data["email_subject"] == "New Property Calculation - €300,000.00 (buyer@example.com)"

    log = await db.get(CalculationLog, data["id"])
    assert log is not None
    assert log.property_price == Decimal("300000")
    assert log.purchase_tax == Decimal("34500")
    assert log.mortgage_fees == Decimal("1500")
    assert log.total_cost == Decimal(data["result"]["total_costs"])
    assert log.total_purchase == Decimal(data["result"]["total_purchase"])
    assert log.tax_display == "10% IVA + 1.5% AJD"
    assert log.user_email == "buyer@example.com"


async def test_stored_figures_keep_every_digit(client: AsyncClient, db: AsyncSession) -> None:
    form = {"price": "987654321098.77", "property_type": "new_build", "region": "murcia", "include_mortgage": True}
    resp = await client.post("/api/v1/calculations", json=form)
    assert resp.status_code == 201
    result = resp.json()["result"]
    assert result["purchase_taxes"] == "113580246926.35855"

    log = await db.get(CalculationLog, resp.json()["id"])
    assert log.property_price == Decimal("987654321098.77")
    assert log.purchase_tax == Decimal(result["purchase_taxes"])
    assert log.notary_fees == Decimal(result["notary_fees"])
    assert log.mortgage_fees == Decimal(result["mortgage_fees"])
    assert log.total_purchase == Decimal(result["total_purchase"])

    detail = (await client.get(f"/api/v1/calculations/{log.id}")).json()
    assert Decimal(detail["total_cost"]) == Decimal(result["total_costs"])


@pytest.mark.parametrize("price", ["0", "1e30"])
async def test_create_calculation_invalid_price(client: AsyncClient, price: str) -> None:
    resp = await client.post("/api/v1/calculations", json={**NEW_BUILD_FORM, "price": price})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Please enter a valid property price"


# ---------------------------------------------------------------------------
# T-4: detail and report
# ---------------------------------------------------------------------------


async def test_get_calculation(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/calculations", json=NEW_BUILD_FORM)
    calculation_id = resp.json()["id"]

    resp = await client.get(f"/api/v1/calculations/{calculation_id}")
    assert resp.status_code == 200
    data = resp.json()
    assert data["id"] == calculation_id
    assert data["property_type"] == "new_build"
    assert data["region"] == "valencia"
    assert data["include_mortgage"] is True
    assert Decimal(data["purchase_tax"]) == 34500


async def test_get_calculation_not_found(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/calculations/does-not-exist")
    assert resp.status_code == 404


async def test_report_uses_stored_figures(client: AsyncClient) -> None:
    resp = await client.post("/api/v1/calculations", json=NEW_BUILD_FORM)
    calculation_id = resp.json()["id"]

    resp = await client.get(f"/api/v1/calculations/{calculation_id}/report")
    assert resp.status_code == 200
    assert resp.headers["content-type"].startswith("text/html")
    body = resp.text
    assert "€34,500.00" in body
    assert "Connecting Commodities" in body
    assert "Mortgage Arrangement Fees" in body
    assert "buyer@example.com" in body


async def test_report_not_found(client: AsyncClient) -> None:
    resp = await client.get("/api/v1/calculations/does-not-exist/report")
    assert resp.status_code == 404
