"""Read-only admin views over the calculation log and registered users."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone

from fastapi import APIRouter, Depends, Query
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from app.api.deps import get_db
from app.api.v1.calculations import serialize_log
from app.config import settings
from app.database import Base
from app.models.calculation_log import CalculationLog
from app.models.user_profile import UserProfile
from app.schemas.calculation import PropertyType, Region

logger = logging.getLogger("app.admin")

router = APIRouter()

MAX_PAGE_SIZE = 500
ANONYMOUS = "Anonymous"


async def _count_since(db: AsyncSession, model: type[Base], since: datetime | None = None) -> int:
    query = select(func.count()).select_from(model)
    if since is not None:
        query = query.where(model.created_at >= since)
    result = await db.execute(query)
    return result.scalar_one()


@router.get("/overview")
async def get_overview(db: AsyncSession = Depends(get_db)) -> dict:
    """Counters for the admin dashboard (UTC days)."""
    now = datetime.now(timezone.utc).replace(tzinfo=None)
    start_of_day = now.replace(hour=0, minute=0, second=0, microsecond=0)
    week_ago = now - timedelta(days=7)

    return {
        "total_users": await _count_since(db, UserProfile),
        "new_users_this_week": await _count_since(db, UserProfile, week_ago),
        "total_calculations": await _count_since(db, CalculationLog),
        "calculations_today": await _count_since(db, CalculationLog, start_of_day),
        "calculations_this_week": await _count_since(db, CalculationLog, week_ago),
    }


@router.get("/calculation-logs")
async def list_calculation_logs(
    db: AsyncSession = Depends(get_db),
    limit: int | None = Query(None, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
    region: Region | None = Query(None, description="Region filter"),
    property_type: PropertyType | None = Query(None, description="Property type filter"),
) -> dict:
    """List calculation logs, newest first."""
    page_size = limit or settings.calculation_log_limit

    query = select(CalculationLog)
    count_query = select(func.count()).select_from(CalculationLog)
    if region is not None:
        query = query.where(CalculationLog.region == region)
        count_query = count_query.where(CalculationLog.region == region)
    if property_type is not None:
        query = query.where(CalculationLog.property_type == property_type)
        count_query = count_query.where(CalculationLog.property_type == property_type)

    query = query.order_by(CalculationLog.created_at.desc()).offset(offset).limit(page_size)

    total = (await db.execute(count_query)).scalar_one()
    logs = (await db.execute(query)).scalars().all()
    logger.debug("listed %d of %d calculation logs (offset=%d)", len(logs), total, offset)

    items = []
    for log in logs:
        item = serialize_log(log)
        item["user_email"] = log.user_email or ANONYMOUS
        items.append(item)

    return {"total": total, "limit": page_size, "offset": offset, "items": items}


@router.get("/users")
async def list_users(
    db: AsyncSession = Depends(get_db),
    limit: int = Query(100, ge=1, le=MAX_PAGE_SIZE, description="Page size"),
    offset: int = Query(0, ge=0, description="Rows to skip"),
) -> dict:
    """List registered users, newest first."""
    total = await _count_since(db, UserProfile)
    query = select(UserProfile).order_by(UserProfile.created_at.desc()).offset(offset).limit(limit)
    users = (await db.execute(query)).scalars().all()

    return {
        "total": total,
        "limit": limit,
        "offset": offset,
        "items": [
            {
                "id": user.id,
                "email": user.email,
                "role": user.role,
                "created_at": user.created_at.isoformat(),
                "updated_at": user.updated_at.isoformat(),
            }
            for user in users
        ],
    }
