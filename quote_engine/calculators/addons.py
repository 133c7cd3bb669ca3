"""
Recurring Add-On Calculator

Prices the monthly extras that sit outside the voice plan: device
protection (insurance) and service plans for connected devices.
"""

from ..models import ProcessingContext, RecurringAddOns
from ..money import to_cents

NO_INSURANCE = "none"


class AddOnCalculator:
    """Calculates insurance and service plan costs."""

    def calculate(self, ctx: ProcessingContext) -> RecurringAddOns:
        return RecurringAddOns(
            insurance_cost=self._calculate_insurance(ctx),
            service_plan_cost=self._calculate_service_plans(ctx),
        )

    def _calculate_insurance(self, ctx: ProcessingContext) -> int:
        """
        Account-level tier x covered lines, plus any per-device protection.

        Unknown plan ids contribute nothing.
        """
        config = ctx.config
        plans = ctx.catalogs.insurance_plans
        cost = 0

        if config.insurance_tier and config.insurance_tier != NO_INSURANCE:
            plan = plans.get(config.insurance_tier)
            if plan is not None:
                covered = max(0, min(config.insurance_lines, config.lines))
                cost += covered * to_cents(plan.price)

        for device in config.devices:
            if device.insurance_id and device.insurance_id != NO_INSURANCE:
                plan = plans.get(device.insurance_id)
                if plan is not None:
                    cost += to_cents(plan.price)

        return cost

    def _calculate_service_plans(self, ctx: ProcessingContext) -> int:
        cost = 0
        for device in ctx.config.devices:
            if not device.service_plan_id:
                continue
            plan = ctx.catalogs.service_plans.get(device.service_plan_id)
            if plan is not None:
                cost += to_cents(plan.price)
        return cost
