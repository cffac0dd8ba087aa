"""
Rates API Routes

Exposes the loaded bracket tables and tariff schedule.
"""

from typing import Any

from fastapi import APIRouter, Query

from tax import get_rules

router = APIRouter(prefix="/rates", tags=["rates"])


@router.get("/income-tax")
async def get_income_tax_table() -> dict[str, Any]:
    """Individual income tax brackets currently in force."""
    return get_rules().income_tax.to_dict()


@router.get("/customs-fees")
async def get_customs_fee_tables() -> dict[str, Any]:
    """Brokerage fee and import processing charge schedules."""
    customs = get_rules().customs
    return {
        "brokerage_fee": customs.brokerage_fee.to_dict(),
        "import_processing_charge": customs.import_processing_charge.to_dict(),
        "bir_documentary_stamp_tax": float(customs.bir_documentary_stamp_tax),
        "customs_documentary_stamp": float(customs.customs_documentary_stamp),
    }


@router.get("/tariffs")
async def list_tariffs() -> list[dict[str, Any]]:
    """Tariff lines available for rate-of-duty lookup."""
    return [item.to_dict() for item in get_rules().customs.tariff_items.values()]


@router.get("/directory")
async def get_tax_directory(category: str | None = Query(None)) -> list[dict[str, Any]]:
    """Published reference rates, optionally filtered by category."""
    entries = get_rules().directory
    if category:
        entries = [e for e in entries if e.category.lower() == category.lower()]
    return [entry.to_dict() for entry in entries]
