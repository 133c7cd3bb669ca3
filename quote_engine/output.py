"""
Output Builder

Constructs the final totals and the API breakdown from processing context.
"""

from decimal import Decimal

from .calculators.totals import TotalsAggregator
from .models import CalculatedTotals, ProcessingContext
from .money import fmt_cents


def to_money(cents: int) -> float:
    """Convert integer cents to a float dollar amount with 2 decimal places."""
    return round(float(Decimal(cents) / 100), 2)


class OutputBuilder:
    """Builds CalculatedTotals and the human-readable breakdown."""

    def build(self, ctx: ProcessingContext, aggregator: TotalsAggregator = None) -> CalculatedTotals:
        """Construct the complete quote totals from processing context."""
        aggregator = aggregator or TotalsAggregator()
        discounts = ctx.discounts
        financing = ctx.financing
        taxes = ctx.taxes

        return CalculatedTotals(
            plan_name=ctx.plan.name,
            taxes_included=ctx.plan.taxes_included,
            # Monthly
            base_plan_price_in_cents=ctx.base_plan_price,
            autopay_discount_in_cents=discounts.autopay_discount,
            insider_discount_in_cents=discounts.insider_discount,
            third_line_free_discount_in_cents=discounts.third_line_free_discount,
            promotion_discount_in_cents=discounts.promotion_discount,
            total_discounts_in_cents=discounts.total_discounts,
            final_plan_price_in_cents=discounts.final_plan_price,
            insurance_cost_in_cents=ctx.addons.insurance_cost,
            monthly_device_payment_in_cents=financing.monthly_device_payment,
            financed_accessories_monthly_cost_in_cents=financing.financed_accessories_monthly_cost,
            monthly_service_plan_cost_in_cents=ctx.addons.service_plan_cost,
            monthly_trade_in_credit_in_cents=ctx.trade_ins.monthly_trade_in_credit,
            monthly_device_promo_credit_in_cents=ctx.promotions.monthly_device_promo_credit,
            monthly_service_plan_promo_credit_in_cents=ctx.promotions.monthly_service_plan_promo_credit,
            total_monthly_addons_in_cents=aggregator.monthly_addons(ctx),
            calculated_taxes_in_cents=taxes.recurring_tax,
            total_monthly_in_cents=aggregator.total_monthly(ctx),
            # Due today
            activation_fee_in_cents=ctx.fees.activation_fee,
            upgrade_fee_in_cents=ctx.fees.upgrade_fee,
            total_one_time_fees_in_cents=ctx.fees.total_one_time_fees,
            total_device_cost_in_cents=taxes.total_device_cost,
            due_today_device_tax_in_cents=taxes.device_tax,
            due_today_fees_tax_in_cents=taxes.fees_tax,
            paid_in_full_accessories_cost_in_cents=taxes.paid_in_full_accessories_cost,
            paid_in_full_accessories_tax_in_cents=taxes.paid_in_full_accessories_tax,
            financed_accessories_tax_in_cents=taxes.financed_accessories_tax,
            lump_sum_trade_in_in_cents=ctx.trade_ins.lump_sum_trade_in,
            instant_device_rebate_in_cents=ctx.promotions.instant_device_rebate,
            down_payment_rebate_in_cents=financing.down_payment_rebate,
            optional_down_payment_in_cents=financing.optional_down_payment,
            required_down_payment_in_cents=financing.required_down_payment,
            due_today_in_cents=aggregator.due_today(ctx),
            # Financing details
            amount_to_finance_before_limit_in_cents=financing.amount_to_finance,
            financed_by_devices_in_cents=financing.financed_by_devices,
            financed_by_accessories_in_cents=financing.financed_by_accessories,
            available_financing_limit_in_cents=financing.available_limit,
            total_financed_principal_in_cents=financing.financed_principal,
            total_lines_for_ec=financing.ec_lines,
            financed_accessories=tuple(self._financed_accessories(ctx)),
            paid_in_full_accessories=tuple(self._paid_in_full_accessories(ctx)),
            applied_promotions=tuple(ctx.promotions.applied_promotions),
            warnings=tuple(ctx.warnings),
        )

    def _financed_accessories(self, ctx: ProcessingContext) -> list:
        return [
            {
                "name": line.name,
                "price": float(line.price),
                "quantity": line.quantity,
                "term": line.term,
                "downPayment": float(line.down_payment),
                "monthlyPaymentInCents": line.monthly_payment_in_cents,
            }
            for line in ctx.financing.financed_accessories
        ]

    def _paid_in_full_accessories(self, ctx: ProcessingContext) -> list:
        return [
            {
                "name": accessory.name,
                "price": float(accessory.price),
                "quantity": accessory.quantity,
            }
            for accessory in ctx.config.accessories
            if not accessory.is_financed
        ]

    def breakdown(self, totals: CalculatedTotals) -> dict:
        """Build the breakdown section with value and dynamic description for each line item."""
        t = totals
        _fmt = fmt_cents

        if t.taxes_included:
            tax_desc = f"Taxes are included in the {t.plan_name} price"
        else:
            tax_desc = "Tax on plan, insurance and service plans"

        if t.required_down_payment_in_cents > 0:
            down_desc = (
                f"Amount to finance ({_fmt(t.amount_to_finance_before_limit_in_cents)}) exceeds the "
                f"financing limit ({_fmt(t.available_financing_limit_in_cents)})"
            )
        else:
            down_desc = "Equipment fits within the available financing limit"

        return {
            # Plan
            "base_plan_price": {
                "value": to_money(t.base_plan_price_in_cents),
                "description": f"{t.plan_name} price before discounts",
            },
            "total_discounts": {
                "value": to_money(t.total_discounts_in_cents),
                "description": (
                    f"autopay ({_fmt(t.autopay_discount_in_cents)}) + insider ({_fmt(t.insider_discount_in_cents)}) "
                    f"+ third_line_free ({_fmt(t.third_line_free_discount_in_cents)}) "
                    f"+ promotions ({_fmt(t.promotion_discount_in_cents)}) = {_fmt(t.total_discounts_in_cents)}"
                ),
            },
            "final_plan_price": {
                "value": to_money(t.final_plan_price_in_cents),
                "description": (
                    f"{_fmt(t.base_plan_price_in_cents)} - {_fmt(t.total_discounts_in_cents)} "
                    f"= {_fmt(t.final_plan_price_in_cents)}"
                ),
            },

            # Monthly add-ons
            "monthly_addons": {
                "value": to_money(t.total_monthly_addons_in_cents),
                "description": (
                    f"insurance ({_fmt(t.insurance_cost_in_cents)}) + devices ({_fmt(t.monthly_device_payment_in_cents)}) "
                    f"+ accessories ({_fmt(t.financed_accessories_monthly_cost_in_cents)}) "
                    f"+ service plans ({_fmt(t.monthly_service_plan_cost_in_cents)}) "
                    f"- trade-in credit ({_fmt(t.monthly_trade_in_credit_in_cents)}) "
                    f"- promo credits ({_fmt(t.monthly_device_promo_credit_in_cents + t.monthly_service_plan_promo_credit_in_cents)})"
                ),
            },
            "monthly_taxes": {
                "value": to_money(t.calculated_taxes_in_cents),
                "description": tax_desc,
            },
            "total_monthly": {
                "value": to_money(t.total_monthly_in_cents),
                "description": (
                    f"plan ({_fmt(t.final_plan_price_in_cents)}) + add-ons ({_fmt(t.total_monthly_addons_in_cents)}) "
                    f"+ taxes ({_fmt(t.calculated_taxes_in_cents)}) = {_fmt(t.total_monthly_in_cents)}"
                ),
            },

            # Due today
            "one_time_fees": {
                "value": to_money(t.total_one_time_fees_in_cents),
                "description": (
                    f"activation ({_fmt(t.activation_fee_in_cents)}) + upgrade ({_fmt(t.upgrade_fee_in_cents)})"
                ),
            },
            "device_tax": {
                "value": to_money(t.due_today_device_tax_in_cents),
                "description": (
                    f"Tax on device retail ({_fmt(t.total_device_cost_in_cents)}) less trade-ins and instant rebates"
                ),
            },
            "required_down_payment": {
                "value": to_money(t.required_down_payment_in_cents),
                "description": down_desc,
            },
            "due_today": {
                "value": to_money(t.due_today_in_cents),
                "description": (
                    f"device tax ({_fmt(t.due_today_device_tax_in_cents)}) "
                    f"- lump-sum trade-in ({_fmt(t.lump_sum_trade_in_in_cents)}) "
                    f"- rebate against down payment ({_fmt(t.down_payment_rebate_in_cents)}) "
                    f"+ fees and fee tax ({_fmt(t.total_one_time_fees_in_cents + t.due_today_fees_tax_in_cents)}) "
                    f"+ accessories and tax ({_fmt(t.paid_in_full_accessories_cost_in_cents + t.paid_in_full_accessories_tax_in_cents + t.financed_accessories_tax_in_cents)}) "
                    f"+ down payments ({_fmt(t.optional_down_payment_in_cents + t.required_down_payment_in_cents)})"
                ),
            },
        }
