"""
Tax Calculator

Applies the caller-supplied tax rate to recurring and one-time charges.
Each taxed amount is rounded to a whole cent on its own.
"""

from ..models import ProcessingContext, TaxCalculation
from ..money import percent_of, to_cents


class TaxCalculator:
    """Calculates recurring and due-today taxes."""

    def calculate(self, ctx: ProcessingContext) -> TaxCalculation:
        config = ctx.config
        rate = config.tax_rate

        total_device_cost = sum(to_cents(d.price) for d in config.devices)
        paid_in_full_cost = sum(to_cents(a.price) * a.quantity for a in config.accessories if not a.is_financed)
        financed_full_cost = sum(to_cents(a.price) * a.quantity for a in config.accessories if a.is_financed)

        return TaxCalculation(
            recurring_tax=self._calculate_recurring(ctx),
            device_tax=percent_of(self.taxable_device_amount(ctx, total_device_cost), rate),
            fees_tax=percent_of(ctx.fees.total_one_time_fees, rate),
            paid_in_full_accessories_tax=percent_of(paid_in_full_cost, rate),
            # Financed accessories are taxed on full retail, up front
            financed_accessories_tax=percent_of(financed_full_cost, rate),
            total_device_cost=total_device_cost,
            paid_in_full_accessories_cost=paid_in_full_cost,
            financed_accessories_full_cost=financed_full_cost,
        )

    def _calculate_recurring(self, ctx: ProcessingContext) -> int:
        """
        Monthly tax on the pre-discount plan price plus insurance and
        service plans. Zero when the plan's price already includes taxes.
        """
        if ctx.plan.taxes_included:
            return 0
        taxable = ctx.base_plan_price + ctx.addons.insurance_cost + ctx.addons.service_plan_cost
        return percent_of(taxable, ctx.config.tax_rate)

    @staticmethod
    def taxable_device_amount(ctx: ProcessingContext, total_device_cost: int) -> int:
        """Device retail less instant rebates and the value of every trade-in."""
        credits = ctx.promotions.instant_device_rebate + ctx.trade_ins.total_trade_in_value
        return max(0, total_device_cost - credits)
