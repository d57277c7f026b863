"""Spanish property purchase cost engine.

Computes the taxes and professional fees of a purchase and the grand total.
All arithmetic is done in ``Decimal`` so the figures shown to the client, the
stored calculation log and the notification e-mail are identical.
"""

from __future__ import annotations

import logging
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from app.schemas.calculation import (
    CalculationInput,
    CostBreakdown,
    PropertyType,
    Region,
    TaxInfo,
)

logger = logging.getLogger(__name__)

CENT = Decimal("0.01")
ZERO = Decimal("0")

# Largest price the form accepts; keeps every derived amount well inside the
# default 28-digit decimal context.
MAX_PRICE = Decimal("1000000000000")


# ---------------------------------------------------------------------------
# 1. Tax rates
# ---------------------------------------------------------------------------

IVA_RATE = Decimal("0.10")
AJD_RATE = Decimal("0.015")

NEW_BUILD_TAX = TaxInfo(
    rate=IVA_RATE + AJD_RATE,
    display_label="10% IVA + 1.5% AJD",
    components=(("IVA", IVA_RATE), ("AJD", AJD_RATE)),
)

RESALE_TAX: dict[Region, TaxInfo] = {
    Region.VALENCIA: TaxInfo(rate=Decimal("0.10"), display_label="10% ITP"),
    Region.MURCIA: TaxInfo(rate=Decimal("0.08"), display_label="8% ITP"),
    Region.ANDALUSIA: TaxInfo(rate=Decimal("0.08"), display_label="8% ITP"),
}

_missing_regions = set(Region) - set(RESALE_TAX)
if _missing_regions:
    raise RuntimeError(f"ITP rate missing for regions: {sorted(r.value for r in _missing_regions)}")


# ---------------------------------------------------------------------------
# 2. Professional fees
# ---------------------------------------------------------------------------

NOTARY_RATE = Decimal("0.003")
NOTARY_MINIMUM = Decimal("600")
REGISTRY_RATE = Decimal("0.002")
REGISTRY_MINIMUM = Decimal("400")
LEGAL_RATE = Decimal("0.015")
ADMIN_FEE = Decimal("500")
COMMODITIES_FEE = Decimal("500")  # utility connection, new builds only
MORTGAGE_RATE = Decimal("0.005")


def get_tax_info(property_type: PropertyType | str, region: Region | str) -> TaxInfo:
    """Return the tax rule for a purchase.

    New builds pay IVA + AJD regardless of region; resales pay the regional
    ITP. Values outside the enums raise ``ValueError``.
    """
    property_type = PropertyType(property_type)
    region = Region(region)

    if property_type is PropertyType.NEW_BUILD:
        return NEW_BUILD_TAX
    return RESALE_TAX[region]


def calculate_costs(calculation: CalculationInput) -> CostBreakdown | None:
    """Compute the full cost breakdown of a purchase.

    Returns ``None`` when the price is missing or not positive; the caller
    shows no breakdown in that case.
    """
    price = calculation.price
    if price is None or price <= 0:
        return None

    price = Decimal(price)
    property_type = PropertyType(calculation.property_type)
    tax_info = get_tax_info(property_type, calculation.region)

    purchase_taxes = price * tax_info.rate

    notary_fees = max(price * NOTARY_RATE, NOTARY_MINIMUM)
    registry_fees = max(price * REGISTRY_RATE, REGISTRY_MINIMUM)
    legal_fees = price * LEGAL_RATE
    admin_fees = ADMIN_FEE
    commodities_fees = COMMODITIES_FEE if property_type is PropertyType.NEW_BUILD else ZERO
    mortgage_fees = price * MORTGAGE_RATE if calculation.include_mortgage else ZERO

    total_professional_fees = (
        notary_fees
        + registry_fees
        + legal_fees
        + admin_fees
        + commodities_fees
        + mortgage_fees
    )
    total_costs = purchase_taxes + total_professional_fees
    total_purchase = price + total_costs

    return CostBreakdown(
        price=price,
        purchase_taxes=purchase_taxes,
        notary_fees=notary_fees,
        registry_fees=registry_fees,
        legal_fees=legal_fees,
        admin_fees=admin_fees,
        commodities_fees=commodities_fees,
        mortgage_fees=mortgage_fees,
        total_professional_fees=total_professional_fees,
        total_costs=total_costs,
        total_purchase=total_purchase,
        tax_rate=tax_info.rate,
        tax_display=tax_info.display_label,
    )


# ---------------------------------------------------------------------------
# 3. Form input
# ---------------------------------------------------------------------------


def parse_price(raw: str | int | float | Decimal | None) -> Decimal | None:
    """Parse a user-entered price into euros, rounded to the cent.

    Returns ``None`` for empty, non-numeric, non-finite, negative input and
    for anything above ``MAX_PRICE``.
    """
    if raw is None or isinstance(raw, bool):
        return None
    if isinstance(raw, float):
        raw = repr(raw)
    text = str(raw).strip()
    if not text:
        return None

    try:
        value = Decimal(text)
    except InvalidOperation:
        logger.debug("unparseable price: %r", raw)
        return None

    if not value.is_finite() or value < 0:
        return None
    if value > MAX_PRICE:
        logger.debug("price above %s rejected: %r", MAX_PRICE, raw)
        return None
    return value.quantize(CENT, rounding=ROUND_HALF_UP)


def quote(
    raw_price: str | int | float | Decimal | None,
    property_type: PropertyType | str,
    region: Region | str,
    include_mortgage: bool = False,
) -> CostBreakdown | None:
    """Parse the form's price and calculate in one step."""
    price = parse_price(raw_price)
    calculation = CalculationInput(
        price=price if price is not None else ZERO,
        property_type=PropertyType(property_type),
        region=Region(region),
        include_mortgage=bool(include_mortgage),
    )
    return calculate_costs(calculation)


# ---------------------------------------------------------------------------
# 4. Presentation
# ---------------------------------------------------------------------------


def format_currency(amount: Decimal | int | float) -> str:
    """Format euros the way the calculator shows them, e.g. ``€1,234.56``."""
    value = Decimal(str(amount)).quantize(CENT, rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    return f"{sign}€{abs(value):,.2f}"


def format_rate(rate: Decimal | float) -> str:
    """Format a fractional rate as a percentage with one decimal, e.g. ``11.5%``."""
    percent = (Decimal(str(rate)) * 100).quantize(Decimal("0.1"), rounding=ROUND_HALF_UP)
    return f"{percent}%"
