"""Purchase cost calculation endpoints."""

from __future__ import annotations

import logging
from dataclasses import asdict
from decimal import Decimal
from typing import Any

from fastapi import APIRouter, Depends, HTTPException
from fastapi.responses import HTMLResponse
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.calculator.engine import calculate_costs, parse_price
from app.config import settings
from app.models.calculation_log import CalculationLog
from app.notifications.calculation_email import build_calculation_email
from app.schemas.calculation import (
    CalculationInput,
    CalculationRequest,
    CostBreakdown,
    PropertyType,
    Region,
)

logger = logging.getLogger("app.calculations")

router = APIRouter()

INVALID_PRICE_DETAIL = "Please enter a valid property price"


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _to_input(payload: CalculationRequest) -> CalculationInput | None:
    price = parse_price(payload.price)
    if price is None:
        return None
    return CalculationInput(
        price=price,
        property_type=payload.property_type,
        region=payload.region,
        include_mortgage=payload.include_mortgage,
    )


def _compute(payload: CalculationRequest) -> tuple[CalculationInput, CostBreakdown] | None:
    calculation = _to_input(payload)
    if calculation is None:
        return None
    breakdown = calculate_costs(calculation)
    if breakdown is None:
        return None
    return calculation, breakdown


def _plain(value: Any) -> Any:
    # exact decimal strings, JSON floats would round
    return str(value) if isinstance(value, Decimal) else value


def serialize_breakdown(breakdown: CostBreakdown | None) -> dict[str, Any] | None:
    if breakdown is None:
        return None
    return {key: _plain(value) for key, value in asdict(breakdown).items()}


_LOG_MONEY_FIELDS = (
    "property_price",
    "tax_rate",
    "purchase_tax",
    "notary_fees",
    "registry_fees",
    "legal_fees",
    "admin_fees",
    "commodities_fees",
    "mortgage_fees",
    "total_professional_fees",
    "total_cost",
    "total_purchase",
)


def serialize_log(log: CalculationLog) -> dict[str, Any]:
    data: dict[str, Any] = {
        "id": log.id,
        "user_email": log.user_email,
        "property_type": PropertyType(log.property_type).value,
        "region": Region(log.region).value,
        "include_mortgage": bool(log.include_mortgage),
        "tax_display": log.tax_display,
        "created_at": log.created_at.isoformat(),
    }
    for name in _LOG_MONEY_FIELDS:
        value = getattr(log, name)
        data[name] = _plain(Decimal(str(value))) if value is not None else None
    return data


# ---------------------------------------------------------------------------
# Endpoints
# ---------------------------------------------------------------------------


@router.post("/preview")
async def preview_calculation(payload: CalculationRequest) -> dict:
    """Compute a breakdown without saving it.

    An empty or invalid price yields ``{"result": null}`` so the form can
    render its placeholder state.
    """
    computed = _compute(payload)
    return {"result": serialize_breakdown(computed[1] if computed else None)}


@router.post("", status_code=201)
async def create_calculation(
    payload: CalculationRequest,
    db: AsyncSession = Depends(get_db),
) -> dict:
    """Calculate, store the calculation log and render the notification e-mail."""
    computed = _compute(payload)
    if computed is None:
        raise HTTPException(status_code=400, detail=INVALID_PRICE_DETAIL)
    calculation, breakdown = computed

    log = CalculationLog.from_breakdown(calculation, breakdown, user_email=payload.user_email)
    db.add(log)
    await db.commit()
    await db.refresh(log)

    email = build_calculation_email(
        breakdown,
        calculation,
        user_email=payload.user_email,
        generated_at=log.created_at,
        sender=settings.notification_sender,
        recipients=settings.notification_recipients,
    )
    logger.info(
        "saved calculation %s: price=%s total=%s, notification prepared for %s",
        log.id,
        breakdown.price,
        breakdown.total_purchase,
        ", ".join(email.recipients),
    )
    return {
        "id": log.id,
        "created_at": log.created_at.isoformat(),
        "result": serialize_breakdown(breakdown),
        "email_subject": email.subject,
    }


@router.get("/{calculation_id}")
async def get_calculation(calculation_id: str, db: AsyncSession = Depends(get_db)) -> dict:
    """Return a stored calculation."""
    log = await db.get(CalculationLog, calculation_id)
    if not log:
        raise HTTPException(status_code=404, detail="Calculation not found")
    return serialize_log(log)


@router.get("/{calculation_id}/report", response_class=HTMLResponse)
async def get_calculation_report(calculation_id: str, db: AsyncSession = Depends(get_db)) -> HTMLResponse:
    """Render the notification e-mail body from the stored figures."""
    log = await db.get(CalculationLog, calculation_id)
    if not log:
        raise HTTPException(status_code=404, detail="Calculation not found")

    email = build_calculation_email(
        log.to_breakdown(),
        log.to_input(),
        user_email=log.user_email,
        generated_at=log.created_at,
        sender=settings.notification_sender,
        recipients=settings.notification_recipients,
    )
    return HTMLResponse(content=email.html)
