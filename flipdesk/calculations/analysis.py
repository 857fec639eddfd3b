"""
Flip Analysis Orchestrator

Turns a snapshot of deal inputs into a complete investment analysis.

The caller owns DealInputs and edits it field by field; after every edit it
calls recompute() again. There is no incremental update: each call derives
every output from scratch in a fixed order, because later steps consume the
results of earlier ones.
"""

from dataclasses import dataclass, asdict, replace
from typing import Any, Dict, List, Optional

from flipdesk.calculations.formulas import (
    BreakEvenAnalysis,
    SeventyPercentRule,
    DEFAULT_LOAN_TERM_YEARS,
    DEFAULT_TAX_RATE,
    calculate_annualized_roi,
    calculate_break_even_analysis,
    calculate_debt_to_income_ratio,
    calculate_down_payment,
    calculate_holding_costs,
    calculate_holding_period_simple_interest,
    calculate_loan_amount,
    calculate_loan_to_cost_ratio,
    calculate_loan_to_value_ratio,
    calculate_monthly_mortgage_payment,
    calculate_post_tax_profit,
    calculate_profit_per_sqft,
    calculate_return_on_equity,
    calculate_sale_proceeds,
    calculate_selling_costs,
    calculate_seventy_percent_rule,
    calculate_total_loan_costs,
    calculate_total_roi,
)

DEFAULT_MONTHS_HELD = 6.0
DEFAULT_DOWN_PAYMENT_PERCENTAGE = 20.0
DEFAULT_ANNUAL_INTEREST_RATE = 7.5


@dataclass
class DealInputs:
    """
    Raw inputs for a flip analysis.

    Holding costs are always stored as annual amounts. Percent fields follow
    the form convention: down_payment_percentage and annual_interest_rate are
    whole percents (20, 7.5) while tax_rate is a decimal (0.25).
    """

    # Acquisition
    purchase_price: float = 0.0
    closing_costs: float = 0.0
    rehab_cost: float = 0.0
    after_repair_value: float = 0.0
    interior_sqft: float = 0.0
    tax_rate: float = DEFAULT_TAX_RATE

    # Timing
    months_held: float = DEFAULT_MONTHS_HELD  # prorates holding/financing costs
    rehab_duration_months: float = 0.0  # from the listing, annualizes ROI

    # Holding costs (annual)
    property_taxes_annual: float = 0.0
    insurance_costs_annual: float = 0.0
    hoa_fees_annual: float = 0.0
    utilities_costs_annual: float = 0.0
    accounting_legal_fees_annual: float = 0.0
    other_holding_fees_annual: float = 0.0

    # Financing
    is_financing: bool = False
    down_payment_percentage: float = DEFAULT_DOWN_PAYMENT_PERCENTAGE
    annual_interest_rate: float = DEFAULT_ANNUAL_INTEREST_RATE
    loan_term_years: float = DEFAULT_LOAN_TERM_YEARS
    underwriting_processing_fees: float = 0.0
    appraisal_fee: float = 0.0
    projected_loan_extension_fees: float = 0.0
    closing_loan_fees: float = 0.0

    # Debt service
    monthly_income: float = 0.0
    other_monthly_debt: float = 0.0

    @property
    def annual_holding_costs(self) -> List[float]:
        return [
            self.property_taxes_annual,
            self.insurance_costs_annual,
            self.hoa_fees_annual,
            self.utilities_costs_annual,
            self.accounting_legal_fees_annual,
            self.other_holding_fees_annual,
        ]

    @property
    def loan_fees(self) -> float:
        return (
            self.underwriting_processing_fees
            + self.appraisal_fee
            + self.projected_loan_extension_fees
            + self.closing_loan_fees
        )

    def with_changes(self, **changes: Any) -> "DealInputs":
        """Return a copy with the given fields replaced."""
        return replace(self, **changes)

    @classmethod
    def from_saved_analysis(
        cls,
        purchase_price: Optional[float],
        closing_costs: Optional[float],
        rehab_cost: Optional[float],
        after_repair_value: Optional[float],
        interior_sqft: Optional[float],
        tax_rate: Optional[float],
        rehab_duration_months: Optional[float] = None,
    ) -> "DealInputs":
        """
        Seed inputs from a persisted analysis (or a listing).

        Missing values fall back to the defaults; tax_rate is a decimal.
        """
        return cls(
            purchase_price=purchase_price or 0.0,
            closing_costs=closing_costs or 0.0,
            rehab_cost=rehab_cost or 0.0,
            after_repair_value=after_repair_value or 0.0,
            interior_sqft=interior_sqft or 0.0,
            tax_rate=DEFAULT_TAX_RATE if tax_rate is None else tax_rate,
            rehab_duration_months=rehab_duration_months or 0.0,
        )

    def to_saved_analysis(self) -> Dict[str, float]:
        """Flattened subset of the inputs that gets persisted."""
        return {
            "purchase_price": self.purchase_price,
            "closing_costs": self.closing_costs,
            "rehab_cost": self.rehab_cost,
            "after_repair_value": self.after_repair_value,
            "interior_sqft": self.interior_sqft,
            "tax_rate": self.tax_rate,
        }


@dataclass(frozen=True)
class AnalysisResult:
    """Derived analysis. Always the full image of one DealInputs snapshot."""

    # Cash-flow chain
    selling_costs: float
    sale_proceeds: float
    down_payment: float
    total_investment: float
    capital_needed: float
    holding_costs: float
    financing_costs: float
    loan_amount: float
    total_profit: float
    post_tax_profit: float
    profit_per_sqft: float

    # Returns
    total_roi: float
    annualized_roi: float

    # Loan metrics
    monthly_mortgage_payment: float
    total_interest_paid: float
    total_loan_costs: float
    loan_to_value_ratio: float
    debt_to_income_ratio: float
    loan_to_cost_ratio: float
    return_on_equity: float

    # Risk / thresholds
    seventy_percent_rule: SeventyPercentRule
    break_even_analysis: BreakEvenAnalysis

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def recompute(inputs: DealInputs) -> AnalysisResult:
    """
    Derive the complete analysis for a deal.

    Steps run in dependency order. Financed and cash deals differ in how
    invested capital and profit are computed:

    - Financed: the investor puts in the down payment; the loan covers the
      rest of the price and carries simple interest over the months held.
    - Cash: the investor pays price plus closing costs; no financing costs.

    Two interest figures coexist. total_interest_paid is the
    simple interest carried while flipping, whereas monthly_mortgage_payment
    describes the full-term amortizing loan.

    Never raises; zero denominators are handled inside each formula.
    """
    financed = inputs.is_financing
    down_payment_pct = inputs.down_payment_percentage / 100

    selling_costs = calculate_selling_costs(inputs.after_repair_value)
    sale_proceeds = calculate_sale_proceeds(inputs.after_repair_value, selling_costs)
    down_payment = calculate_down_payment(inputs.purchase_price, down_payment_pct)

    if financed:
        total_investment = down_payment
        capital_needed = down_payment
    else:
        total_investment = inputs.purchase_price + inputs.closing_costs
        capital_needed = inputs.purchase_price

    holding_costs = calculate_holding_costs(inputs.months_held, inputs.annual_holding_costs)
    loan_amount = calculate_loan_amount(inputs.purchase_price, down_payment_pct)

    holding_period_interest = 0.0
    financing_costs = 0.0
    if financed:
        holding_period_interest = calculate_holding_period_simple_interest(
            loan_amount, inputs.annual_interest_rate, inputs.months_held
        )
        financing_costs = holding_period_interest + inputs.loan_fees

    if financed:
        total_profit = (
            sale_proceeds
            - loan_amount
            - down_payment
            - inputs.rehab_cost
            - holding_costs
            - financing_costs
        )
    else:
        total_profit = (
            sale_proceeds
            - inputs.rehab_cost
            - total_investment
            - holding_costs
            - financing_costs
        )

    total_roi = calculate_total_roi(total_profit, total_investment)
    annualized_roi = calculate_annualized_roi(total_roi, inputs.rehab_duration_months)
    post_tax_profit = calculate_post_tax_profit(total_profit, inputs.tax_rate)

    seventy_percent_rule = calculate_seventy_percent_rule(
        inputs.after_repair_value, inputs.rehab_cost, inputs.purchase_price
    )

    monthly_payment = calculate_monthly_mortgage_payment(
        loan_amount, inputs.annual_interest_rate / 100, inputs.loan_term_years
    )
    total_loan_costs = calculate_total_loan_costs(holding_period_interest, inputs.loan_fees)

    cash_invested = down_payment + inputs.rehab_cost + inputs.closing_costs

    # Acquisition cost that profit is measured against in each branch
    break_even_basis = inputs.purchase_price if financed else total_investment

    return AnalysisResult(
        selling_costs=selling_costs,
        sale_proceeds=sale_proceeds,
        down_payment=down_payment,
        total_investment=total_investment,
        capital_needed=capital_needed,
        holding_costs=holding_costs,
        financing_costs=financing_costs,
        loan_amount=loan_amount,
        total_profit=total_profit,
        post_tax_profit=post_tax_profit,
        profit_per_sqft=calculate_profit_per_sqft(total_profit, inputs.interior_sqft),
        total_roi=total_roi,
        annualized_roi=annualized_roi,
        monthly_mortgage_payment=monthly_payment,
        total_interest_paid=holding_period_interest,
        total_loan_costs=total_loan_costs,
        loan_to_value_ratio=calculate_loan_to_value_ratio(
            loan_amount, inputs.purchase_price
        ),
        debt_to_income_ratio=calculate_debt_to_income_ratio(
            inputs.other_monthly_debt, monthly_payment, inputs.monthly_income
        ),
        loan_to_cost_ratio=calculate_loan_to_cost_ratio(
            loan_amount, inputs.purchase_price, inputs.rehab_cost
        ),
        return_on_equity=calculate_return_on_equity(total_profit, cash_invested),
        seventy_percent_rule=seventy_percent_rule,
        break_even_analysis=calculate_break_even_analysis(
            inputs.after_repair_value,
            break_even_basis,
            inputs.rehab_cost,
            holding_costs,
            financing_costs,
            selling_costs,
            financed,
        ),
    )
