"""
Fix-and-Flip Formula Library

Independent financial formulas for flip feasibility analysis.
Every function is pure and total: ratios with a zero denominator
return 0.0 instead of raising or producing inf/nan.

All percentage-style results are decimal fractions (0.15 = 15%).
"""

from dataclasses import dataclass
from typing import Iterable

DEFAULT_SELLING_COSTS_PERCENT = 0.06
DEFAULT_DOWN_PAYMENT_PERCENT = 0.20
DEFAULT_REHAB_COST_PSF = 50.0
DEFAULT_TAX_RATE = 0.25
DEFAULT_LOAN_TERM_YEARS = 30
SEVENTY_PERCENT_RULE_FACTOR = 0.70
DAYS_PER_MONTH = 30


@dataclass(frozen=True)
class SeventyPercentRule:
    """Result of the 70% rule check."""

    max_purchase_price: float
    passes: bool


@dataclass(frozen=True)
class BreakEvenAnalysis:
    """Break-even ARV and cost margins relative to ARV."""

    break_even_arv: float = 0.0
    rehab_costs_margin: float = 0.0
    holding_costs_margin: float = 0.0
    financing_costs_margin: float = 0.0


# === Sale side ===


def calculate_selling_costs(
    after_repair_value: float,
    selling_costs_percent: float = DEFAULT_SELLING_COSTS_PERCENT,
) -> float:
    """
    Calculate selling costs (agent commissions, transfer fees, etc.).

    Args:
        after_repair_value: Projected value after repairs
        selling_costs_percent: Share of ARV as decimal (default 0.06 = 6%)

    Returns:
        Selling costs amount
    """
    return after_repair_value * selling_costs_percent


def calculate_sale_proceeds(after_repair_value: float, selling_costs: float) -> float:
    """Calculate net proceeds from the sale (ARV - selling costs)."""
    return after_repair_value - selling_costs


def calculate_total_profit(sale_proceeds: float, total_investment: float) -> float:
    """Calculate total profit (sale proceeds - total investment)."""
    return sale_proceeds - total_investment


def calculate_post_tax_profit(
    total_profit: float, tax_rate: float = DEFAULT_TAX_RATE
) -> float:
    """Calculate profit after tax. Tax rate is a decimal (0.25 = 25%)."""
    return total_profit * (1 - tax_rate)


# === Returns ===


def calculate_total_roi(total_profit: float, total_investment: float) -> float:
    """
    Calculate total return on investment.

    Args:
        total_profit: Total profit
        total_investment: Total investment made

    Returns:
        ROI as decimal (e.g., 0.15 for 15%), 0.0 if nothing was invested
    """
    if total_investment == 0:
        return 0.0
    return total_profit / total_investment


def calculate_annualized_roi(total_roi: float, rehab_duration_months: float) -> float:
    """
    Annualize a total ROI over the rehab duration.

    Args:
        total_roi: Total ROI as decimal
        rehab_duration_months: Duration of the project in months

    Returns:
        Annualized ROI as decimal, 0.0 if the duration is missing or zero
    """
    if not rehab_duration_months:
        return 0.0
    return total_roi / (rehab_duration_months / 12)


def calculate_return_on_equity(total_profit: float, cash_invested: float) -> float:
    """Calculate return on the investor's own cash (0.0 if none invested)."""
    if cash_invested == 0:
        return 0.0
    return total_profit / cash_invested


def calculate_profit_per_sqft(total_profit: float, interior_sqft: float) -> float:
    """Calculate profit per interior square foot (0.0 without a positive area)."""
    if interior_sqft <= 0:
        return 0.0
    return total_profit / interior_sqft


# === Acquisition and rehab ===


def calculate_down_payment(
    purchase_price: float,
    down_payment_percent: float = DEFAULT_DOWN_PAYMENT_PERCENT,
) -> float:
    """Calculate down payment. Percentage is a decimal (0.20 = 20%)."""
    return purchase_price * down_payment_percent


def calculate_capital_needed(total_investment: float, down_payment: float) -> float:
    """Calculate capital needed beyond the down payment."""
    return total_investment - down_payment


def calculate_rehab_duration_months(rehab_duration_days: float) -> float:
    """Convert a rehab duration in days to months (30-day months)."""
    return rehab_duration_days / DAYS_PER_MONTH


def calculate_rehab_cost(
    interior_sqft: float, cost_per_sqft: float = DEFAULT_REHAB_COST_PSF
) -> float:
    """Estimate rehab cost from interior square footage."""
    return interior_sqft * cost_per_sqft


def calculate_holding_costs(months_held: float, annual_costs: Iterable[float]) -> float:
    """
    Prorate annual holding costs over the months held.

    Straight-line proration (months / 12); not calendar aware.

    Args:
        months_held: Holding period in months (may be fractional)
        annual_costs: Annual amounts (taxes, insurance, HOA, utilities, ...)

    Returns:
        Holding costs for the period
    """
    return (months_held / 12) * sum(annual_costs)


def calculate_seventy_percent_rule(
    after_repair_value: float,
    estimated_repairs: float,
    purchase_price: float,
) -> SeventyPercentRule:
    """
    Check a purchase price against the 70% rule.

    Max purchase price = ARV * 0.70 - repairs. A price equal to the
    maximum passes.
    """
    max_purchase_price = after_repair_value * SEVENTY_PERCENT_RULE_FACTOR - estimated_repairs
    return SeventyPercentRule(
        max_purchase_price=max_purchase_price,
        passes=purchase_price <= max_purchase_price,
    )


# === Financing ===


def calculate_loan_amount(
    purchase_price: float,
    down_payment_percent: float = DEFAULT_DOWN_PAYMENT_PERCENT,
) -> float:
    """Calculate the financed principal (price less down payment)."""
    return purchase_price * (1 - down_payment_percent)


def calculate_monthly_mortgage_payment(
    loan_amount: float,
    annual_rate: float,
    loan_term_years: float = DEFAULT_LOAN_TERM_YEARS,
) -> float:
    """
    Calculate the monthly payment of a fully amortizing loan.

    Matches Excel's PMT() function (sign flipped).

    Args:
        loan_amount: Loan principal
        annual_rate: Annual interest rate as decimal (e.g., 0.075 for 7.5%)
        loan_term_years: Amortization term in years

    Returns:
        Monthly payment, 0.0 for a zero loan, a zero rate or a zero term
    """
    if loan_amount == 0 or annual_rate == 0:
        return 0.0

    monthly_rate = annual_rate / 12
    num_payments = loan_term_years * 12

    try:
        growth = (1 + monthly_rate) ** num_payments
    except OverflowError:
        # growth / (growth - 1) tends to 1 for very long terms
        return loan_amount * monthly_rate

    if growth == 1:
        return 0.0
    return loan_amount * monthly_rate * growth / (growth - 1)


def calculate_amortized_total_interest(
    monthly_payment: float, loan_term_years: float, loan_amount: float
) -> float:
    """
    Total interest paid if the loan is held to term.

    Sum of all scheduled payments less the principal.
    """
    return monthly_payment * loan_term_years * 12 - loan_amount


def calculate_holding_period_simple_interest(
    loan_amount: float, annual_interest_rate_pct: float, months_held: float
) -> float:
    """
    Simple interest carried on the loan while the property is held.

    Args:
        loan_amount: Loan principal
        annual_interest_rate_pct: Annual rate in percent (e.g., 7.5)
        months_held: Holding period in months

    Returns:
        Interest accrued over the holding period (no amortization)
    """
    annual_interest = loan_amount * (annual_interest_rate_pct / 100)
    return annual_interest * (months_held / 12)


def calculate_total_loan_costs(total_interest: float, loan_fees: float = 0.0) -> float:
    """Calculate total cost of borrowing (interest + fees)."""
    return total_interest + loan_fees


# === Lender risk ratios ===


def calculate_loan_to_value_ratio(loan_amount: float, property_value: float) -> float:
    """Calculate LTV (0.0 if the property value is zero)."""
    if property_value == 0:
        return 0.0
    return loan_amount / property_value


def calculate_debt_to_income_ratio(
    other_monthly_debt: float,
    monthly_mortgage_payment: float,
    monthly_income: float,
) -> float:
    """Calculate DTI (0.0 if there is no income)."""
    if monthly_income == 0:
        return 0.0
    return (other_monthly_debt + monthly_mortgage_payment) / monthly_income


def calculate_loan_to_cost_ratio(
    loan_amount: float, purchase_price: float, rehab_cost: float
) -> float:
    """Calculate LTC against purchase price plus rehab (0.0 if no cost)."""
    total_cost = purchase_price + rehab_cost
    if total_cost == 0:
        return 0.0
    return loan_amount / total_cost


def calculate_break_even_analysis(
    after_repair_value: float,
    purchase_price: float,
    rehab_cost: float,
    holding_costs: float,
    financing_costs: float,
    selling_costs: float,
    is_financing: bool,
) -> BreakEvenAnalysis:
    """
    Find the ARV at which the flip makes exactly zero profit.

    Selling costs scale with the sale price, so they are carried as a rate
    (selling_costs / ARV) rather than a fixed amount:

        break_even_arv = fixed_costs / (1 - selling_rate)

    Fixed costs are the acquisition basis, rehab and holding costs, plus
    financing costs for financed deals. Callers pass the basis their profit
    is measured against as purchase_price (price plus closing for cash
    deals). Margins express each cost as a share of ARV.

    Returns:
        BreakEvenAnalysis, all zeros when ARV is zero
    """
    if after_repair_value == 0:
        return BreakEvenAnalysis()

    financing = financing_costs if is_financing else 0.0
    selling_rate = selling_costs / after_repair_value
    fixed_costs = purchase_price + rehab_cost + holding_costs + financing

    break_even_arv = fixed_costs / (1 - selling_rate) if selling_rate < 1 else 0.0

    return BreakEvenAnalysis(
        break_even_arv=break_even_arv,
        rehab_costs_margin=rehab_cost / after_repair_value,
        holding_costs_margin=holding_costs / after_repair_value,
        financing_costs_margin=financing / after_repair_value,
    )
