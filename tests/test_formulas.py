"""
Tests for the fix-and-flip formula library.
"""

import math

import pytest

from flipdesk.calculations.formulas import (
    BreakEvenAnalysis,
    calculate_amortized_total_interest,
    calculate_annualized_roi,
    calculate_break_even_analysis,
    calculate_capital_needed,
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
    calculate_rehab_cost,
    calculate_rehab_duration_months,
    calculate_return_on_equity,
    calculate_sale_proceeds,
    calculate_selling_costs,
    calculate_seventy_percent_rule,
    calculate_total_loan_costs,
    calculate_total_profit,
    calculate_total_roi,
)


class TestSaleAndProfit:
    """Test sale-side and profit formulas."""

    def test_selling_costs_default_percentage(self):
        """Default selling costs are 6% of ARV."""
        assert calculate_selling_costs(200000) == pytest.approx(12000)

    @pytest.mark.parametrize("arv,pct", [(0, 0.06), (150000, 0.0), (325000, 0.05), (1e6, 1.0)])
    def test_selling_costs_is_linear(self, arv, pct):
        """Selling costs are exactly ARV times the percentage."""
        assert calculate_selling_costs(arv, pct) == arv * pct

    def test_sale_proceeds(self):
        assert calculate_sale_proceeds(200000, 12000) == 188000

    def test_total_profit(self):
        assert calculate_total_profit(188000, 150000) == 38000

    def test_post_tax_profit_default_rate(self):
        """Default tax rate is 25%."""
        assert calculate_post_tax_profit(40000) == 30000

    def test_post_tax_profit_keeps_losses_negative(self):
        assert calculate_post_tax_profit(-10000, 0.3) == pytest.approx(-7000)


class TestReturns:
    """Test ROI formulas and their zero guards."""

    def test_total_roi(self):
        assert calculate_total_roi(38000, 150000) == pytest.approx(0.2533, abs=1e-3)

    def test_total_roi_zero_investment(self):
        """Zero investment returns 0 rather than inf."""
        assert calculate_total_roi(100, 0) == 0

    def test_annualized_roi(self):
        """A 24% return over 6 months annualizes to 48%."""
        assert calculate_annualized_roi(0.24, 6) == pytest.approx(0.48)

    @pytest.mark.parametrize("months", [0, None])
    def test_annualized_roi_missing_duration(self, months):
        assert calculate_annualized_roi(0.24, months) == 0

    def test_return_on_equity(self):
        assert calculate_return_on_equity(26500, 110000) == pytest.approx(0.24091, abs=1e-4)

    def test_return_on_equity_zero_cash(self):
        assert calculate_return_on_equity(5000, 0) == 0

    def test_profit_per_sqft(self):
        assert calculate_profit_per_sqft(30000, 1500) == pytest.approx(20)

    @pytest.mark.parametrize("sqft", [0, -100])
    def test_profit_per_sqft_without_area(self, sqft):
        assert calculate_profit_per_sqft(30000, sqft) == 0


class TestAcquisitionAndRehab:
    """Test acquisition and rehab formulas."""

    def test_down_payment_default_percentage(self):
        """Default down payment is 20%."""
        assert calculate_down_payment(300000) == 60000

    def test_capital_needed(self):
        assert calculate_capital_needed(150000, 60000) == 90000

    def test_rehab_duration_months(self):
        """Days convert to 30-day months."""
        assert calculate_rehab_duration_months(90) == pytest.approx(3)

    def test_rehab_cost_default_psf(self):
        """Default rehab cost is $50/sqft."""
        assert calculate_rehab_cost(2000) == 100000

    def test_holding_costs_prorated_by_months(self):
        """Annual costs are prorated straight-line over months held."""
        annual = [2400, 1200, 0, 1800, 600, 0]  # 6000 per year
        assert calculate_holding_costs(6, annual) == pytest.approx(3000)
        assert calculate_holding_costs(1.5, annual) == pytest.approx(750)

    def test_holding_costs_zero_months(self):
        assert calculate_holding_costs(0, [1200, 1200]) == 0


class TestSeventyPercentRule:
    """Test the 70% rule."""

    def test_fails_above_max(self):
        result = calculate_seventy_percent_rule(200000, 30000, 120000)
        assert result.max_purchase_price == pytest.approx(110000)
        assert result.passes is False

    def test_passes_below_max(self):
        result = calculate_seventy_percent_rule(200000, 30000, 100000)
        assert result.max_purchase_price == pytest.approx(110000)
        assert result.passes is True

    @pytest.mark.parametrize("arv,repairs", [(200000, 30000), (0, 0), (350000, 50000)])
    def test_boundary_matches_comparison_exactly(self, arv, repairs):
        """A price exactly at the max passes, one cent above fails."""
        max_price = arv * 0.70 - repairs
        assert calculate_seventy_percent_rule(arv, repairs, max_price).passes is True
        assert calculate_seventy_percent_rule(arv, repairs, max_price + 0.01).passes is False

    def test_zero_values(self):
        result = calculate_seventy_percent_rule(0, 0, 0)
        assert result.max_purchase_price == 0
        assert result.passes is True


class TestFinancing:
    """Test loan formulas."""

    def test_loan_amount_default_down_payment(self):
        assert calculate_loan_amount(300000) == 240000

    def test_loan_amount_custom_down_payment(self):
        assert calculate_loan_amount(300000, 0.25) == 225000

    def test_monthly_mortgage_payment(self):
        """$240k at 5% for 30 years is about $1,288.37/month."""
        payment = calculate_monthly_mortgage_payment(240000, 0.05, 30)
        assert payment == pytest.approx(1288.37, abs=0.05)

    def test_monthly_mortgage_payment_default_term(self):
        assert calculate_monthly_mortgage_payment(240000, 0.05) == pytest.approx(
            calculate_monthly_mortgage_payment(240000, 0.05, 30)
        )

    def test_monthly_mortgage_payment_zero_guards(self):
        assert calculate_monthly_mortgage_payment(0, 0.05, 30) == 0
        assert calculate_monthly_mortgage_payment(240000, 0, 30) == 0

    def test_monthly_mortgage_payment_zero_term(self):
        """A zero-length loan has no payment schedule."""
        assert calculate_monthly_mortgage_payment(200000, 0.075, 0) == 0

    def test_monthly_mortgage_payment_very_long_term(self):
        """Payment approaches interest-only as the term grows without bound."""
        payment = calculate_monthly_mortgage_payment(200000, 0.075, 1e9)
        assert payment == pytest.approx(200000 * 0.075 / 12)
        assert math.isfinite(payment)

    def test_amortized_total_interest(self):
        total_interest = calculate_amortized_total_interest(1288.37, 30, 240000)
        assert total_interest == pytest.approx(223813.2, abs=0.5)

    def test_amortized_total_interest_zero(self):
        assert calculate_amortized_total_interest(0, 30, 0) == 0

    def test_holding_period_simple_interest(self):
        """$200k at 7.5% for 2 months of simple interest is $2,500."""
        assert calculate_holding_period_simple_interest(200000, 7.5, 2) == pytest.approx(2500)

    def test_interest_concepts_differ(self):
        """Simple interest while flipping is far below the full-term amortized total."""
        payment = calculate_monthly_mortgage_payment(200000, 0.075, 30)
        amortized = calculate_amortized_total_interest(payment, 30, 200000)
        simple = calculate_holding_period_simple_interest(200000, 7.5, 6)
        assert simple < amortized

    def test_total_loan_costs(self):
        assert calculate_total_loan_costs(223813.2, 5000) == pytest.approx(228813.2)
        assert calculate_total_loan_costs(1000) == 1000


class TestRiskRatios:
    """Test lender risk ratios and their zero guards."""

    def test_loan_to_value(self):
        assert calculate_loan_to_value_ratio(240000, 300000) == pytest.approx(0.8)

    def test_debt_to_income(self):
        dti = calculate_debt_to_income_ratio(500, 1288.37, 8000)
        assert dti == pytest.approx(0.2235, abs=1e-3)

    def test_loan_to_cost(self):
        assert calculate_loan_to_cost_ratio(200000, 250000, 50000) == pytest.approx(0.6667, abs=1e-4)

    def test_zero_denominators_return_zero(self):
        """Every ratio returns 0 (never inf/nan) on a zero denominator."""
        results = [
            calculate_total_roi(100, 0),
            calculate_annualized_roi(0.5, 0),
            calculate_loan_to_value_ratio(100, 0),
            calculate_debt_to_income_ratio(100, 100, 0),
            calculate_loan_to_cost_ratio(100, 0, 0),
            calculate_return_on_equity(100, 0),
        ]
        for value in results:
            assert value == 0
            assert math.isfinite(value)

    def test_loan_to_cost_offsetting_denominator(self):
        """Price and rehab that cancel out still count as a zero denominator."""
        assert calculate_loan_to_cost_ratio(100, 500, -500) == 0


class TestBreakEvenAnalysis:
    """Test break-even ARV."""

    def test_cash_deal(self):
        """Break-even grosses up fixed costs by the selling rate."""
        result = calculate_break_even_analysis(
            350000, 250000, 50000, 6000, 0, 21000, False
        )
        assert result.break_even_arv == pytest.approx(306000 / 0.94)
        assert result.rehab_costs_margin == pytest.approx(50000 / 350000)
        assert result.holding_costs_margin == pytest.approx(6000 / 350000)
        assert result.financing_costs_margin == 0

    def test_financed_deal_includes_financing_costs(self):
        result = calculate_break_even_analysis(
            350000, 250000, 50000, 0, 2500, 21000, True
        )
        assert result.break_even_arv == pytest.approx(302500 / 0.94)
        assert result.financing_costs_margin == pytest.approx(2500 / 350000)

    def test_financing_ignored_for_cash_deal(self):
        cash = calculate_break_even_analysis(350000, 250000, 50000, 0, 2500, 21000, False)
        assert cash.break_even_arv == pytest.approx(300000 / 0.94)
        assert cash.financing_costs_margin == 0

    def test_profit_is_zero_at_break_even(self):
        """Selling at the break-even ARV exactly covers all fixed costs."""
        result = calculate_break_even_analysis(400000, 250000, 50000, 4000, 3000, 24000, True)
        arv = result.break_even_arv
        proceeds = calculate_sale_proceeds(arv, calculate_selling_costs(arv))
        assert proceeds - (250000 + 50000 + 4000 + 3000) == pytest.approx(0, abs=1e-6)

    def test_zero_arv_returns_zero_struct(self):
        result = calculate_break_even_analysis(0, 250000, 50000, 1000, 1000, 0, True)
        assert result == BreakEvenAnalysis()
        assert result.break_even_arv == 0

    def test_selling_costs_consume_all_proceeds(self):
        """A 100% selling rate has no break-even point."""
        result = calculate_break_even_analysis(100000, 50000, 0, 0, 0, 100000, False)
        assert result.break_even_arv == 0
