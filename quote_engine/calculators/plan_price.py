"""
Plan Price Resolver

Looks up the monthly base price of a plan for a line count.
"""

from ..models import PlanDetails, PricingModel, ProcessingContext
from ..money import to_cents


class PlanPriceResolver:
    """Resolves the pre-discount base plan price in cents."""

    def calculate(self, ctx: ProcessingContext) -> int:
        return self.base_price(ctx.plan, ctx.config.lines)

    def base_price(self, plan: PlanDetails, lines: int) -> int:
        """
        Pricing models:
        - "tiered": price table indexed by line count, clamped to the table length
        - "per_line": first line price + (lines - 1) x additional line price
        """
        if lines <= 0:
            return 0

        if plan.pricing_model == PricingModel.PER_LINE:
            return to_cents(plan.first_line_price) + (lines - 1) * to_cents(plan.additional_line_price)

        if not plan.tiered_prices:
            return 0
        index = min(lines, len(plan.tiered_prices)) - 1
        return to_cents(plan.tiered_prices[index])

    @staticmethod
    def tier_price(plan: PlanDetails, lines: int) -> int:
        """Price of the tier for exactly `lines` lines, or 0 when the table is shorter."""
        if plan.pricing_model != PricingModel.TIERED or lines > len(plan.tiered_prices):
            return 0
        return to_cents(plan.tiered_prices[lines - 1])
