"""
Unit Tests for Tax Calculator
"""

import pytest

from quote_engine.calculators import (
    AddOnCalculator,
    FeeCalculator,
    PromotionResolver,
    TaxCalculator,
    TradeInResolver,
)
from quote_engine.models import TradeInType


@pytest.fixture
def prepared(make_context):
    """Context with every step the tax calculator reads already populated."""

    def _prepare(config):
        ctx = make_context(config)
        ctx.promotions = PromotionResolver().resolve(ctx)
        ctx.trade_ins = TradeInResolver().resolve(ctx)
        ctx.addons = AddOnCalculator().calculate(ctx)
        ctx.fees = FeeCalculator().calculate(ctx)
        return ctx

    return _prepare


@pytest.fixture
def calculator():
    return TaxCalculator()


class TestRecurringTax:
    def test_taxes_included_plan(self, calculator, prepared, make_config):
        ctx = prepared(make_config(plan="experience-beyond", tax_rate=10))
        assert calculator.calculate(ctx).recurring_tax == 0

    def test_plan_price_taxed(self, calculator, prepared, make_config):
        """Experience More 1 line: $90 x 10% = $9"""
        ctx = prepared(make_config(plan="experience-more", tax_rate=10))
        assert calculator.calculate(ctx).recurring_tax == 900

    def test_taxed_before_discounts(self, calculator, prepared, make_config):
        ctx = prepared(make_config(plan="experience-more", tax_rate=10, autopay=True))
        assert calculator.calculate(ctx).recurring_tax == 900

    def test_insurance_and_service_plans_taxed(self, calculator, prepared, make_config, new_device):
        """($90 + $18 insurance + $15 watch plan) x 10% = $12.30"""
        watch = new_device(299, model_id="apple-watch-se", service_plan_id="watch_paired_15")
        config = make_config(
            plan="experience-more", tax_rate=10, insurance_tier="p360", insurance_lines=1, devices=[watch]
        )
        assert calculator.calculate(prepared(config)).recurring_tax == 1230


class TestDeviceTax:
    def test_full_price_without_trade_in(self, calculator, prepared, make_config, new_device):
        ctx = prepared(make_config(tax_rate=10, devices=[new_device(999)]))
        result = calculator.calculate(ctx)
        assert result.total_device_cost == 99900
        assert result.device_tax == 9990

    def test_net_of_monthly_trade_in(self, calculator, prepared, make_config, new_device):
        """($999 - $200) x 10% = $79.90"""
        ctx = prepared(make_config(tax_rate=10, devices=[new_device(999, trade_in=200, down_payment=100)]))
        assert calculator.calculate(ctx).device_tax == 7990

    def test_net_of_lump_sum_trade_in(self, calculator, prepared, make_config, new_device):
        device = new_device(999, trade_in=200, trade_in_type=TradeInType.LUMP_SUM)
        ctx = prepared(make_config(tax_rate=10, devices=[device]))
        assert calculator.calculate(ctx).device_tax == 7990

    def test_net_of_instant_rebate(self, calculator, prepared, make_config, new_device):
        """($1,299 - $100 rebate) x 6% = $71.94"""
        device = new_device(
            1299,
            trade_in_type=TradeInType.PROMO,
            model_id="samsung-s24-ultra",
            applied_promo_id="new-line-no-trade-100-off",
        )
        ctx = prepared(make_config(tax_rate=6, devices=[device]))
        assert calculator.calculate(ctx).device_tax == 7194

    def test_never_negative(self, calculator, prepared, make_config, new_device):
        ctx = prepared(make_config(tax_rate=10, devices=[new_device(100, trade_in=500)]))
        assert calculator.calculate(ctx).device_tax == 0


class TestOneTimeTaxes:
    def test_fee_tax(self, calculator, prepared, make_config):
        """Activation $10 x 2 lines = $20; 6% = $1.20"""
        ctx = prepared(make_config(lines=2, tax_rate=6, activation=True))
        assert calculator.calculate(ctx).fees_tax == 120

    def test_accessory_taxes(self, calculator, prepared, make_config, new_accessory):
        config = make_config(
            tax_rate=10,
            accessories=[new_accessory(49.99, quantity=2), new_accessory(120, financed=True)],
        )
        result = calculator.calculate(prepared(config))
        assert result.paid_in_full_accessories_cost == 9998
        assert result.paid_in_full_accessories_tax == 1000
        # Financed accessories are taxed on full retail today
        assert result.financed_accessories_full_cost == 12000
        assert result.financed_accessories_tax == 1200
