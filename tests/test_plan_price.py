"""
Unit Tests for Plan Price Resolver
"""

from decimal import Decimal

import pytest

from quote_engine.calculators.plan_price import PlanPriceResolver
from quote_engine.models import PlanDetails, PricingModel


def tiered(*prices):
    return PlanDetails(
        id="tiered",
        name="Tiered",
        pricing_model=PricingModel.TIERED,
        tiered_prices=tuple(Decimal(str(p)) for p in prices),
    )


class TestTieredPricing:
    """Tiered plans index the price table by line count."""

    @pytest.fixture
    def resolver(self):
        return PlanPriceResolver()

    def test_single_line(self, resolver):
        assert resolver.base_price(tiered(105, 180, 230), 1) == 10500

    def test_three_lines(self, resolver):
        assert resolver.base_price(tiered(105, 180, 230), 3) == 23000

    def test_lines_beyond_table_use_last_tier(self, resolver):
        """A 2-tier 55+ plan quoted for 4 lines is clamped to the 2-line price."""
        assert resolver.base_price(tiered(90, 140), 4) == 14000

    def test_empty_table_is_zero(self, resolver):
        assert resolver.base_price(tiered(), 2) == 0

    def test_zero_lines_is_zero(self, resolver):
        assert resolver.base_price(tiered(105, 180), 0) == 0

    def test_tier_price_past_table_is_zero(self):
        assert PlanPriceResolver.tier_price(tiered(90, 140), 3) == 0


class TestPerLinePricing:
    """Per-line plans charge a first line plus a flat additional-line price."""

    @pytest.fixture
    def plan(self):
        return PlanDetails(
            id="flat",
            name="Flat",
            pricing_model=PricingModel.PER_LINE,
            first_line_price=Decimal("60"),
            additional_line_price=Decimal("35.50"),
        )

    def test_single_line(self, plan):
        assert PlanPriceResolver().base_price(plan, 1) == 6000

    def test_four_lines(self, plan):
        """$60 + 3 x $35.50 = $166.50"""
        assert PlanPriceResolver().base_price(plan, 4) == 16650

    def test_tier_price_does_not_apply(self, plan):
        assert PlanPriceResolver.tier_price(plan, 1) == 0


class TestSeedPlans:
    def test_experience_beyond_two_lines(self, catalogs):
        plan = catalogs.plans["experience-beyond"]
        assert PlanPriceResolver().base_price(plan, 2) == 18000

    def test_essentials_twelve_lines_clamped(self, catalogs):
        plan = catalogs.plans["essentials"]
        assert PlanPriceResolver().base_price(plan, 12) == 18000
