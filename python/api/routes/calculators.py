"""
Calculator API Routes

Provides one endpoint per tax calculator. Request bodies are validated
here; the calculators assume non-negative input.
"""

from decimal import Decimal
from typing import Any, Literal

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel, Field

from tax import (
    CustomsInput,
    UnknownTariffError,
    calculate_compensation_tax,
    calculate_customs,
    calculate_freelancer_tax,
    calculate_income_tax,
    calculate_vat,
    extract_vat,
)
from tax.money import round_money

router = APIRouter(prefix="/calculators", tags=["calculators"])


def _decimal(value: float) -> Decimal:
    return Decimal(str(value))


class CompensationRequest(BaseModel):
    """Monthly compensation input."""

    gross_monthly_salary: float = Field(ge=0, allow_inf_nan=False)


class CompensationResponse(BaseModel):
    """Compensation tax breakdown."""

    gross_salary: float
    annual_salary: float
    sss_contribution: float
    philhealth_contribution: float
    pagibig_contribution: float
    total_contributions: float
    taxable_income: float
    annual_taxable_income: float
    monthly_tax: float
    annual_tax: float
    net_salary: float
    tax_bracket: str
    effective_rate: float


class IncomeTaxRequest(BaseModel):
    annual_taxable_income: float = Field(ge=0, allow_inf_nan=False)


class IncomeTaxResponse(BaseModel):
    annual_taxable_income: float
    income_tax: float


class VATRequest(BaseModel):
    amount: float = Field(ge=0, allow_inf_nan=False)


class VATResponse(BaseModel):
    base_amount: float
    rate: float
    amount: float
    gross_amount: float


class CustomsRequest(BaseModel):
    """Imported shipment input. Foreign amounts use the invoice currency."""

    fob_fca_value: float = Field(ge=0, allow_inf_nan=False)
    freight: float = Field(0, ge=0, allow_inf_nan=False)
    insurance: float = Field(0, ge=0, allow_inf_nan=False)
    exchange_rate: float = Field(gt=0, allow_inf_nan=False)
    rate_of_duty: float | None = Field(None, ge=0, le=1, allow_inf_nan=False)
    excise_rate: float = Field(0, ge=0, le=1, allow_inf_nan=False)
    ahtn_code: str = ""
    description: str = ""


class FreelancerRequest(BaseModel):
    """Self-employed income for one filing period."""

    gross_sales: float = Field(ge=0, allow_inf_nan=False)
    deductions: float = Field(0, ge=0, allow_inf_nan=False)
    filing_period: Literal["quarterly", "yearly"] = "quarterly"


@router.post("/compensation", response_model=CompensationResponse)
async def compute_compensation(request: CompensationRequest) -> CompensationResponse:
    """Compute contributions, withholding tax and net pay."""
    result = calculate_compensation_tax(_decimal(request.gross_monthly_salary))
    return CompensationResponse(**result.to_dict())


@router.post("/income-tax", response_model=IncomeTaxResponse)
async def compute_income_tax(request: IncomeTaxRequest) -> IncomeTaxResponse:
    """Graduated income tax on an annual taxable income."""
    tax = calculate_income_tax(_decimal(request.annual_taxable_income))
    return IncomeTaxResponse(
        annual_taxable_income=request.annual_taxable_income,
        income_tax=float(round_money(tax)),
    )


@router.post("/vat", response_model=VATResponse)
async def compute_vat(request: VATRequest) -> VATResponse:
    """Add VAT to a VAT-exclusive amount."""
    return VATResponse(**calculate_vat(_decimal(request.amount)).to_dict())


@router.post("/vat-extract", response_model=VATResponse)
async def compute_vat_extract(request: VATRequest) -> VATResponse:
    """Split a VAT-inclusive amount into base and VAT."""
    return VATResponse(**extract_vat(_decimal(request.amount)).to_dict())


@router.post("/customs")
async def compute_customs(request: CustomsRequest) -> dict[str, Any]:
    """Estimate duties, taxes and landed cost of an import."""
    if request.rate_of_duty is None and not request.ahtn_code:
        raise HTTPException(status_code=400, detail="Provide rate_of_duty or ahtn_code")

    data = CustomsInput(
        fob_fca_value=_decimal(request.fob_fca_value),
        freight=_decimal(request.freight),
        insurance=_decimal(request.insurance),
        exchange_rate=_decimal(request.exchange_rate),
        rate_of_duty=_decimal(request.rate_of_duty) if request.rate_of_duty is not None else None,
        excise_rate=_decimal(request.excise_rate),
        ahtn_code=request.ahtn_code,
        description=request.description,
    )

    try:
        result = calculate_customs(data)
    except UnknownTariffError:
        raise HTTPException(status_code=404, detail=f"Unknown AHTN code: {request.ahtn_code}")

    return result.to_dict()


@router.post("/freelancer")
async def compute_freelancer(request: FreelancerRequest) -> dict[str, Any]:
    """Compare graduated and 8% flat income tax for a freelancer."""
    result = calculate_freelancer_tax(
        _decimal(request.gross_sales),
        _decimal(request.deductions),
        request.filing_period,
    )
    return result.to_dict()
