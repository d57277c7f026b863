"""Calculation notification e-mail rendering.

The e-mail repeats the figures the client saw. Every amount comes from the
``CostBreakdown`` it is given; nothing is recalculated here.
"""

from __future__ import annotations

import html
import logging
from dataclasses import dataclass
from datetime import datetime
from decimal import Decimal

from app.calculator.engine import format_currency, format_rate
from app.notifications.templates import (
    EMAIL_TEMPLATE,
    ROW_TEMPLATE,
    SECTION_TEMPLATE,
    SUBJECT_TEMPLATE,
)
from app.schemas.calculation import CalculationInput, CostBreakdown, PropertyType, Region

logger = logging.getLogger("app.notifications")

UNKNOWN_USER = "Unknown"
DATE_FORMAT = "%b %d, %Y %H:%M"


@dataclass(frozen=True)
class CalculationEmail:
    sender: str
    recipients: tuple[str, ...]
    subject: str
    html: str


def _rows(items: list[tuple[str, str]]) -> str:
    return "".join(
        ROW_TEMPLATE.format(label=html.escape(label), value=html.escape(value))
        for label, value in items
    )


def _section(title: str, items: list[tuple[str, str]]) -> str:
    return SECTION_TEMPLATE.format(title=html.escape(title), rows=_rows(items))


def cost_share(breakdown: CostBreakdown) -> str:
    """Additional costs as a percentage of the price, e.g. ``16.3%``."""
    price = Decimal(breakdown.price)
    if price <= 0:
        return format_rate(0)
    return format_rate(Decimal(breakdown.total_costs) / price)


def build_subject(breakdown: CostBreakdown, user_email: str | None) -> str:
    return SUBJECT_TEMPLATE.format(
        price=format_currency(breakdown.price),
        user_email=user_email or UNKNOWN_USER,
    )


def render_calculation_html(
    breakdown: CostBreakdown,
    calculation: CalculationInput,
    *,
    user_email: str | None,
    generated_at: datetime,
) -> str:
    """Render the HTML report for one calculation."""
    property_type = PropertyType(calculation.property_type)
    region = Region(calculation.region)
    timestamp = generated_at.strftime(DATE_FORMAT)

    client = [
        ("Email", user_email or UNKNOWN_USER),
        ("Calculation Date", timestamp),
    ]
    details = [
        ("Property Price", format_currency(breakdown.price)),
        ("Property Type", property_type.label),
        ("Region", region.label),
        ("Include Mortgage", "Yes" if calculation.include_mortgage else "No"),
        ("Tax Rate", format_rate(breakdown.tax_rate)),
    ]
    costs = [
        (f"Purchase Taxes ({breakdown.tax_display})", format_currency(breakdown.purchase_taxes)),
        ("Notary Fees", format_currency(breakdown.notary_fees)),
        ("Registry Fees", format_currency(breakdown.registry_fees)),
        ("Legal Fees", format_currency(breakdown.legal_fees)),
        ("Administrative Fees", format_currency(breakdown.admin_fees)),
    ]
    if breakdown.commodities_fees > 0:
        costs.append(("Connecting Commodities", format_currency(breakdown.commodities_fees)))
    if breakdown.mortgage_fees > 0:
        costs.append(("Mortgage Arrangement Fees", format_currency(breakdown.mortgage_fees)))
    summary = [
        ("Property Price", format_currency(breakdown.price)),
        ("Total Professional Fees", format_currency(breakdown.total_professional_fees)),
        ("Total Additional Costs", format_currency(breakdown.total_costs)),
    ]

    sections = "".join(
        [
            _section("Client Information", client),
            _section("Property Details", details),
            _section("Cost Breakdown", costs),
            _section("Summary", summary),
        ]
    )
    return EMAIL_TEMPLATE.format(
        sections=sections,
        total_purchase=format_currency(breakdown.total_purchase),
        cost_share=cost_share(breakdown),
        generated_at=timestamp,
    )


def build_calculation_email(
    breakdown: CostBreakdown,
    calculation: CalculationInput,
    *,
    user_email: str | None,
    generated_at: datetime,
    sender: str,
    recipients: list[str] | tuple[str, ...],
) -> CalculationEmail:
    """Build the notification e-mail for a saved calculation."""
    email = CalculationEmail(
        sender=sender,
        recipients=tuple(recipients),
        subject=build_subject(breakdown, user_email),
        html=render_calculation_html(
            breakdown,
            calculation,
            user_email=user_email,
            generated_at=generated_at,
        ),
    )
    logger.debug("rendered calculation email: %s", email.subject)
    return email
