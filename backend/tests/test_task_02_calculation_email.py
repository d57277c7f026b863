"""Task-02: calculation notification e-mail rendering"""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal

from app.calculator.engine import calculate_costs
from app.notifications.calculation_email import (
    build_calculation_email,
    build_subject,
    cost_share,
)
from app.schemas.calculation import CalculationInput, PropertyType, Region

GENERATED_AT = datetime(2024, 5, 17, 10, 30)


def _email(calculation: CalculationInput, user_email: str | None = "buyer@example.com"):
    breakdown = calculate_costs(calculation)
    return breakdown, build_calculation_email(
        breakdown,
        calculation,
        user_email=user_email,
        generated_at=GENERATED_AT,
        sender="Calculator <calc@example.com>",
        recipients=["sales@example.com"],
    )


# ---------------------------------------------------------------------------
# T-1: subject and envelope
# ---------------------------------------------------------------------------


def test_subject_contains_price_and_user():
    calculation = CalculationInput(Decimal("250000"), PropertyType.RESALE, Region.VALENCIA)
    _, email = _email(calculation)

    assert email.subject == "New Property Calculation - €250,000.00 (buyer@example.com)"
    assert email.sender == "Calculator <calc@example.com>"
    assert email.recipients == ("sales@example.com",)


def test_subject_without_user_email():
    calculation = CalculationInput(Decimal("250000"), PropertyType.RESALE, Region.VALENCIA)
    breakdown = calculate_costs(calculation)
    assert build_subject(breakdown, None).endswith("(Unknown)")


# ---------------------------------------------------------------------------
# T-2: body repeats the breakdown figures
# ---------------------------------------------------------------------------


def test_resale_body_omits_zero_rows():
    calculation = CalculationInput(Decimal("250000"), PropertyType.RESALE, Region.VALENCIA)
    _, email = _email(calculation)

    assert "€25,000.00" in email.html  # purchase taxes
    assert "€280,500.00" in email.html  # total purchase
    assert "€30,500.00" in email.html  # total additional costs
    assert "Resale" in email.html
    assert "Valencia" in email.html
    assert "10.0%" in email.html
    assert "May 17, 2024 10:30" in email.html
    assert "Connecting Commodities" not in email.html
    assert "Mortgage Arrangement Fees" not in email.html


def test_new_build_body_includes_optional_rows():
    calculation = CalculationInput(Decimal("300000"), PropertyType.NEW_BUILD, Region.MURCIA, True)
    _, email = _email(calculation)

    assert "New Build" in email.html
    assert "11.5%" in email.html
    assert "Connecting Commodities" in email.html
    assert "Mortgage Arrangement Fees" in email.html
    assert "€1,500.00" in email.html
    assert "Include Mortgage:</span><span>Yes" in email.html


def test_cost_share():
    calculation = CalculationInput(Decimal("250000"), PropertyType.RESALE, Region.VALENCIA)
    breakdown, email = _email(calculation)

    # 30500 / 250000 = 12.2%
    assert cost_share(breakdown) == "12.2%"
    assert "Additional costs represent 12.2% of the property price" in email.html


def test_user_email_is_escaped():
    calculation = CalculationInput(Decimal("250000"), PropertyType.RESALE, Region.VALENCIA)
    _, email = _email(calculation, user_email="<script>@example.com")

    assert "<script>" not in email.html
    assert "&lt;script&gt;@example.com" in email.html
