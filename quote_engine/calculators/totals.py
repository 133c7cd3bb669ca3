"""
Totals Aggregator

Combines the step results into the monthly and due-today totals.
Every term is already a whole-cent integer; nothing is rounded here.
"""

from ..models import ProcessingContext


class TotalsAggregator:
    """Calculates the monthly and due-today totals."""

    def monthly_addons(self, ctx: ProcessingContext) -> int:
        """Everything on the monthly bill except the plan itself and taxes."""
        addons = ctx.addons.insurance_cost
        addons += ctx.financing.monthly_device_payment
        addons += ctx.financing.financed_accessories_monthly_cost
        addons += ctx.addons.service_plan_cost
        addons -= ctx.trade_ins.monthly_trade_in_credit
        addons -= ctx.promotions.monthly_device_promo_credit
        addons -= ctx.promotions.monthly_service_plan_promo_credit
        return addons

    def total_monthly(self, ctx: ProcessingContext) -> int:
        """
        Total Monthly = Final Plan Price
                      + Insurance
                      + Device Payments
                      + Financed Accessory Payments
                      + Service Plans
                      - Monthly Trade-In Credit
                      - Monthly Promo Credits
                      + Recurring Tax
        """
        total = ctx.discounts.final_plan_price
        total += self.monthly_addons(ctx)
        total += ctx.taxes.recurring_tax
        return max(0, total)

    def due_today(self, ctx: ProcessingContext) -> int:
        """
        Due Today = Device Tax
                  - Lump-Sum Trade-In
                  - Instant Rebate Not Absorbed By Financing
                  + One-Time Fees + Fee Tax
                  + Paid-In-Full Accessories + Their Tax
                  + Financed Accessories Tax
                  + Optional Down Payment
                  + Required Down Payment
        """
        taxes = ctx.taxes
        due = taxes.device_tax
        due -= ctx.trade_ins.lump_sum_trade_in
        due -= ctx.financing.down_payment_rebate
        due += ctx.fees.total_one_time_fees
        due += taxes.fees_tax
        due += taxes.paid_in_full_accessories_cost
        due += taxes.paid_in_full_accessories_tax
        due += taxes.financed_accessories_tax
        due += ctx.financing.optional_down_payment
        due += ctx.financing.required_down_payment
        return max(0, due)
