"""
Flip calculation API endpoints.

These endpoints accept inputs and return calculated results. The client
posts the full input snapshot after every edit and renders the response.
"""

from dataclasses import asdict
from typing import Literal

from fastapi import APIRouter
from pydantic import BaseModel

from flipdesk.calculations import formulas
from flipdesk.calculations.analysis import (
    DEFAULT_ANNUAL_INTEREST_RATE,
    DEFAULT_DOWN_PAYMENT_PERCENTAGE,
    DEFAULT_MONTHS_HELD,
    DealInputs,
    recompute,
)

router = APIRouter()

HOLDING_COST_FIELDS = (
    "property_taxes",
    "insurance_costs",
    "hoa_fees",
    "utilities_costs",
    "accounting_legal_fees",
    "other_holding_fees",
)


class DealInputsSchema(BaseModel):
    """
    Input for a flip analysis.

    Holding costs are entered per holding_costs_period and converted to
    annual amounts before analysis.
    """

    # Acquisition
    purchase_price: float = 0.0
    closing_costs: float = 0.0
    rehab_cost: float = 0.0
    after_repair_value: float = 0.0
    interior_sqft: float = 0.0
    tax_rate: float = formulas.DEFAULT_TAX_RATE

    # Timing
    months_held: float = DEFAULT_MONTHS_HELD
    rehab_duration_months: float = 0.0

    # Holding costs
    holding_costs_period: Literal["annual", "monthly"] = "annual"
    property_taxes: float = 0.0
    insurance_costs: float = 0.0
    hoa_fees: float = 0.0
    utilities_costs: float = 0.0
    accounting_legal_fees: float = 0.0
    other_holding_fees: float = 0.0

    # Financing
    is_financing: bool = False
    down_payment_percentage: float = DEFAULT_DOWN_PAYMENT_PERCENTAGE
    annual_interest_rate: float = DEFAULT_ANNUAL_INTEREST_RATE
    loan_term_years: float = formulas.DEFAULT_LOAN_TERM_YEARS
    underwriting_processing_fees: float = 0.0
    appraisal_fee: float = 0.0
    projected_loan_extension_fees: float = 0.0
    closing_loan_fees: float = 0.0

    # Debt service
    monthly_income: float = 0.0
    other_monthly_debt: float = 0.0

    def to_deal_inputs(self) -> DealInputs:
        """Convert to engine inputs, annualizing holding costs."""
        data = self.model_dump(exclude={"holding_costs_period", *HOLDING_COST_FIELDS})
        factor = 12 if self.holding_costs_period == "monthly" else 1
        for field in HOLDING_COST_FIELDS:
            data[f"{field}_annual"] = getattr(self, field) * factor
        return DealInputs(**data)

    @classmethod
    def from_deal_inputs(cls, inputs: DealInputs) -> "DealInputsSchema":
        """Build an annual-period schema from engine inputs."""
        data = asdict(inputs)
        for field in HOLDING_COST_FIELDS:
            data[field] = data.pop(f"{field}_annual")
        return cls(**data)


class MortgageInput(BaseModel):
    """Input for long-term mortgage metrics."""

    loan_amount: float
    annual_rate: float  # decimal, e.g. 0.075
    loan_term_years: float = formulas.DEFAULT_LOAN_TERM_YEARS
    loan_fees: float = 0.0


class MortgageResponse(BaseModel):
    monthly_payment: float
    amortized_total_interest: float
    total_loan_costs: float


class SeventyPercentRuleInput(BaseModel):
    after_repair_value: float
    estimated_repairs: float
    purchase_price: float


class RehabEstimateInput(BaseModel):
    interior_sqft: float
    cost_per_sqft: float = formulas.DEFAULT_REHAB_COST_PSF
    rehab_duration_days: float = 0.0


@router.post("/flip")
async def calculate_flip(inputs: DealInputsSchema):
    """Run the full flip analysis on an input snapshot."""
    return recompute(inputs.to_deal_inputs()).to_dict()


@router.post("/mortgage", response_model=MortgageResponse)
async def calculate_mortgage(inputs: MortgageInput):
    """Monthly payment and total cost of a loan held to term."""
    payment = formulas.calculate_monthly_mortgage_payment(
        inputs.loan_amount, inputs.annual_rate, inputs.loan_term_years
    )
    interest = formulas.calculate_amortized_total_interest(
        payment, inputs.loan_term_years, inputs.loan_amount
    )
    return MortgageResponse(
        monthly_payment=payment,
        amortized_total_interest=interest,
        total_loan_costs=formulas.calculate_total_loan_costs(interest, inputs.loan_fees),
    )


@router.post("/seventy-percent-rule")
async def calculate_seventy_percent_rule(inputs: SeventyPercentRuleInput):
    """Check a purchase price against the 70% rule."""
    result = formulas.calculate_seventy_percent_rule(
        inputs.after_repair_value, inputs.estimated_repairs, inputs.purchase_price
    )
    return asdict(result)


@router.post("/rehab-estimate")
async def calculate_rehab_estimate(inputs: RehabEstimateInput):
    """Estimate rehab cost from square footage and convert duration to months."""
    return {
        "rehab_cost": formulas.calculate_rehab_cost(
            inputs.interior_sqft, inputs.cost_per_sqft
        ),
        "rehab_duration_months": formulas.calculate_rehab_duration_months(
            inputs.rehab_duration_days
        ),
    }
