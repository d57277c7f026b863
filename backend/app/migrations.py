"""Migration helpers for calculation_logs tables created before the current schema.

SQLite does not support full ALTER TABLE, but ALTER TABLE ADD COLUMN works.
This module provides idempotent migration functions.
"""

import logging

from sqlalchemy import or_, select, text
from sqlalchemy.ext.asyncio import AsyncSession

from app.calculator.engine import get_tax_info
from app.models.calculation_log import CalculationLog

logger = logging.getLogger(__name__)

# Columns missing from early calculation_logs tables: (column_name, column_definition)
_NEW_COLUMNS = [
    ("user_email", "VARCHAR(255)"),
    ("tax_display", "VARCHAR(50)"),
    ("total_professional_fees", "VARCHAR(40)"),
    ("total_purchase", "VARCHAR(40)"),
]


async def run_migrations(session: AsyncSession) -> None:
    """Add new columns to the calculation_logs table if they don't already exist."""
    if session.bind.dialect.name != "sqlite":
        return

    result = await session.execute(text("PRAGMA table_info(calculation_logs)"))
    existing_columns = {row[1] for row in result.fetchall()}
    if not existing_columns:
        return

    for col_name, col_def in _NEW_COLUMNS:
        if col_name not in existing_columns:
            await session.execute(
                text(f"ALTER TABLE calculation_logs ADD COLUMN {col_name} {col_def}")
            )
            logger.info("Added column %s to calculation_logs table", col_name)

    await session.commit()


def fill_derived_fields(log: CalculationLog) -> None:
    """Derive the columns old rows lack from the figures they do store.

    This mutates the log in-place. Call before db.commit().
    """
    if log.total_professional_fees is None:
        log.total_professional_fees = log.total_cost - log.purchase_tax
    if log.total_purchase is None:
        log.total_purchase = log.property_price + log.total_cost
    if not log.tax_display:
        log.tax_display = get_tax_info(log.property_type, log.region).display_label


async def backfill_derived_fields(session: AsyncSession) -> int:
    """Backfill derived columns for every log where one of them is NULL."""
    result = await session.execute(
        select(CalculationLog).where(
            or_(
                CalculationLog.total_professional_fees.is_(None),
                CalculationLog.total_purchase.is_(None),
                CalculationLog.tax_display.is_(None),
            )
        )
    )
    logs = result.scalars().all()

    if not logs:
        logger.info("No calculation logs to backfill")
        return 0

    for log in logs:
        fill_derived_fields(log)

    await session.commit()
    logger.info("Backfilled derived fields for %d calculation logs", len(logs))
    return len(logs)
