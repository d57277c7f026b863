"""Property purchase cost calculation schemas"""

from dataclasses import dataclass, field
from decimal import Decimal
from enum import Enum


class PropertyType(str, Enum):
    NEW_BUILD = "new_build"
    RESALE = "resale"

    @classmethod
    def _missing_(cls, value: object) -> "PropertyType | None":
        # the calculator form posts camelCase
        if value == "newBuild":
            return cls.NEW_BUILD
        return None

    @property
    def label(self) -> str:
        return "New Build" if self is PropertyType.NEW_BUILD else "Resale"


class Region(str, Enum):
    VALENCIA = "valencia"
    MURCIA = "murcia"
    ANDALUSIA = "andalusia"

    @property
    def label(self) -> str:
        return self.value.capitalize()


@dataclass(frozen=True)
class TaxInfo:
    """Tax rule applied to a purchase.

    ``rate`` is the scalar rate charged on the price. For new builds it is the
    composite IVA + AJD rate and ``components`` lists the parts.
    """

    rate: Decimal
    display_label: str
    components: tuple[tuple[str, Decimal], ...] = ()


@dataclass(frozen=True)
class CalculationInput:
    price: Decimal
    property_type: PropertyType
    region: Region
    include_mortgage: bool = False


@dataclass(frozen=True)
class CostBreakdown:
    """Every tax and fee of a purchase, in euros."""

    price: Decimal
    purchase_taxes: Decimal
    notary_fees: Decimal
    registry_fees: Decimal
    legal_fees: Decimal
    admin_fees: Decimal
    commodities_fees: Decimal
    mortgage_fees: Decimal
    total_professional_fees: Decimal
    total_costs: Decimal
    total_purchase: Decimal
    tax_rate: Decimal
    tax_display: str


@dataclass
class CalculationRequest:
    """Calculator form state as posted by the client.

    ``price`` is kept as the raw user-entered value; the engine decides
    whether it yields a result.
    """

    price: str | float | None = None
    property_type: PropertyType = PropertyType.RESALE
    region: Region = Region.VALENCIA
    include_mortgage: bool = False
    user_email: str | None = field(default=None)
