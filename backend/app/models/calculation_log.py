import uuid
from datetime import datetime, timezone
from decimal import Decimal

from sqlalchemy import Boolean, DateTime, Enum, String, func
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy.types import TypeDecorator

from app.database import Base
from app.schemas.calculation import CalculationInput, CostBreakdown, PropertyType, Region


class DecimalText(TypeDecorator):
    """Money stored as decimal text.

    SQLite keeps NUMERIC values as floats, so amounts are written with
    ``str(Decimal)`` and read back through ``Decimal``. Rows of older tables
    whose columns are still NUMERIC come back as int/float and are converted
    the same way.
    """

    impl = String(40)
    cache_ok = True

    def process_bind_param(self, value, dialect):
        if value is None:
            return None
        return str(Decimal(str(value)))

    def process_result_value(self, value, dialect):
        if value is None:
            return None
        return Decimal(str(value))


Money = DecimalText()


def _utcnow() -> datetime:
    return datetime.now(timezone.utc).replace(tzinfo=None)


class CalculationLog(Base):
    __tablename__ = "calculation_logs"

    id: Mapped[str] = mapped_column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_email: Mapped[str | None] = mapped_column(String(255), nullable=True)

    # Input
    property_price: Mapped[Decimal] = mapped_column(Money)
    property_type: Mapped[PropertyType] = mapped_column(
        Enum(PropertyType, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20)
    )
    region: Mapped[Region] = mapped_column(
        Enum(Region, values_callable=lambda e: [m.value for m in e], native_enum=False, length=20)
    )
    include_mortgage: Mapped[bool] = mapped_column(Boolean, default=False)

    # Breakdown (copied from the engine, never recomputed)
    tax_rate: Mapped[Decimal] = mapped_column(Money)
    tax_display: Mapped[str | None] = mapped_column(String(50), nullable=True)
    purchase_tax: Mapped[Decimal] = mapped_column(Money)
    notary_fees: Mapped[Decimal] = mapped_column(Money)
    registry_fees: Mapped[Decimal] = mapped_column(Money)
    legal_fees: Mapped[Decimal] = mapped_column(Money)
    admin_fees: Mapped[Decimal] = mapped_column(Money)
    commodities_fees: Mapped[Decimal] = mapped_column(Money)
    mortgage_fees: Mapped[Decimal] = mapped_column(Money)
    total_professional_fees: Mapped[Decimal | None] = mapped_column(Money, nullable=True)
    total_cost: Mapped[Decimal] = mapped_column(Money)
    total_purchase: Mapped[Decimal | None] = mapped_column(Money, nullable=True)

    created_at: Mapped[datetime] = mapped_column(DateTime, default=_utcnow, server_default=func.now())

    @classmethod
    def from_breakdown(
        cls,
        calculation: CalculationInput,
        breakdown: CostBreakdown,
        user_email: str | None = None,
    ) -> "CalculationLog":
        return cls(
            user_email=user_email,
            property_price=breakdown.price,
            property_type=calculation.property_type,
            region=calculation.region,
            include_mortgage=calculation.include_mortgage,
            tax_rate=breakdown.tax_rate,
            tax_display=breakdown.tax_display,
            purchase_tax=breakdown.purchase_taxes,
            notary_fees=breakdown.notary_fees,
            registry_fees=breakdown.registry_fees,
            legal_fees=breakdown.legal_fees,
            admin_fees=breakdown.admin_fees,
            commodities_fees=breakdown.commodities_fees,
            mortgage_fees=breakdown.mortgage_fees,
            total_professional_fees=breakdown.total_professional_fees,
            total_cost=breakdown.total_costs,
            total_purchase=breakdown.total_purchase,
        )

    def to_input(self) -> CalculationInput:
        return CalculationInput(
            price=self.property_price,
            property_type=PropertyType(self.property_type),
            region=Region(self.region),
            include_mortgage=bool(self.include_mortgage),
        )

    def to_breakdown(self) -> CostBreakdown:
        """Rebuild the breakdown from the stored figures."""
        return CostBreakdown(
            price=self.property_price,
            purchase_taxes=self.purchase_tax,
            notary_fees=self.notary_fees,
            registry_fees=self.registry_fees,
            legal_fees=self.legal_fees,
            admin_fees=self.admin_fees,
            commodities_fees=self.commodities_fees,
            mortgage_fees=self.mortgage_fees,
            total_professional_fees=self.total_professional_fees,
            total_costs=self.total_cost,
            total_purchase=self.total_purchase,
            tax_rate=self.tax_rate,
            tax_display=self.tax_display or "",
        )
