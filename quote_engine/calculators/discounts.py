"""
Discount Calculator

Applies AutoPay, Insider, Third-Line-Free and promotion discounts to the
base plan price, honoring the plan's discount eligibility flags.
"""

import logging

from ..conditions import is_standard_customer
from ..models import DiscountCalculation, PricingModel, ProcessingContext
from ..money import fmt_cents, percent_of, to_cents
from .plan_price import PlanPriceResolver

logger = logging.getLogger(__name__)


class DiscountCalculator:
    """Calculates recurring plan discounts."""

    # AutoPay is credited on at most this many lines
    MAX_AUTOPAY_LINES = 8

    def calculate(self, ctx: ProcessingContext) -> DiscountCalculation:
        base = ctx.base_plan_price

        third_line_free = self._calculate_third_line_free(ctx)
        autopay = self._calculate_autopay(ctx, third_line_applied=third_line_free > 0)
        insider = self._calculate_insider(ctx, base)
        promotion = ctx.promotions.plan_discount

        total = autopay + insider + third_line_free + promotion
        final_price = base - total
        if final_price < 0:
            # Only reachable with malformed catalog data
            ctx.warnings.append(
                f"Plan discounts ({fmt_cents(total)}) exceed the base plan price ({fmt_cents(base)}); "
                "final plan price clamped to zero"
            )
            logger.debug("Clamped negative plan price %s for plan %s", final_price, ctx.plan.id)
            final_price = 0

        return DiscountCalculation(
            autopay_discount=autopay,
            insider_discount=insider,
            third_line_free_discount=third_line_free,
            promotion_discount=promotion,
            total_discounts=total,
            final_plan_price=final_price,
        )

    def _calculate_third_line_free(self, ctx: ProcessingContext) -> int:
        """Marginal price of the 3rd line on a tiered plan with at least 3 tiers."""
        config, plan = ctx.config, ctx.plan
        if not config.discounts.third_line_free or not plan.allowed_discounts.third_line_free:
            return 0
        if config.lines < 3 or plan.pricing_model != PricingModel.TIERED or len(plan.tiered_prices) < 3:
            return 0
        value = PlanPriceResolver.tier_price(plan, 3) - PlanPriceResolver.tier_price(plan, 2)
        return max(0, value)

    def _calculate_autopay(self, ctx: ProcessingContext, third_line_applied: bool) -> int:
        """
        Per-line AutoPay credit, capped at MAX_AUTOPAY_LINES.

        A line made free by Third-Line-Free earns no AutoPay credit.
        """
        config = ctx.config
        if not config.discounts.autopay or not ctx.plan.allowed_discounts.autopay:
            return 0
        lines = config.lines - 1 if third_line_applied else config.lines
        eligible_lines = max(0, min(lines, self.MAX_AUTOPAY_LINES))
        return eligible_lines * to_cents(ctx.catalogs.discount_settings.autopay)

    def _calculate_insider(self, ctx: ProcessingContext, base: int) -> int:
        """Percentage of the base plan price, Standard customers only."""
        if not ctx.config.discounts.insider or not ctx.plan.allowed_discounts.insider:
            return 0
        if not is_standard_customer(ctx.config):
            return 0
        return percent_of(base, ctx.catalogs.discount_settings.insider)
