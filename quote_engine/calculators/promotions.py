"""
Promotion Resolver

Filters the promotion catalog down to the promotions that apply to this
quote and turns their effects into cent amounts for the later stages.
"""

import logging
from decimal import Decimal

from ..conditions import all_conditions_met
from ..models import (
    CatalogSet,
    Device,
    DeviceCategory,
    DeviceCreditFixed,
    DeviceInstantRebate,
    PlanDiscountFixed,
    PlanDiscountPercentage,
    ProcessingContext,
    Promotion,
    PromotionCategory,
    PromotionResolution,
    ServicePlanDiscountFixed,
    StackingGroup,
    TradeInRequirement,
    TradeInType,
)
from ..money import percent_of, round_cents, to_cents

logger = logging.getLogger(__name__)

PLAN_CATEGORIES = (PromotionCategory.PLAN, PromotionCategory.ACCOUNT)


def is_device_eligible(promo: Promotion, device: Device, catalogs: CatalogSet) -> bool:
    """A promotion with no device constraints matches every device."""
    if not promo.has_device_constraints:
        return True
    if device.model_id and device.model_id in promo.eligible_device_ids:
        return True
    model = catalogs.devices.get(device.model_id) if device.model_id else None
    if model is None:
        return False
    return any(tag in promo.eligible_device_tags for tag in model.tags)


class PromotionResolver:
    """Resolves plan, device and BTS promotions into discounts and credits."""

    def resolve(self, ctx: ProcessingContext) -> PromotionResolution:
        result = PromotionResolution()

        self._apply_plan_promotions(ctx, result)
        self._apply_device_promotions(ctx, result)
        self._apply_bts_promotions(ctx, result)

        return result

    def eligible(self, ctx: ProcessingContext, category: PromotionCategory, device: Device | None = None) -> list[Promotion]:
        """Active promotions of a category whose device constraints and conditions pass."""
        eligible = []
        for promo in ctx.catalogs.promotions:
            if not promo.is_active or promo.category != category:
                continue
            if device is not None and not is_device_eligible(promo, device, ctx.catalogs):
                continue
            if not all_conditions_met(ctx.config, promo.conditions):
                continue
            eligible.append(promo)
        return eligible

    # -------------------------------------------------------------------------
    # Plan / account promotions
    # -------------------------------------------------------------------------

    def plan_discount_value(self, promo: Promotion, base_plan_price: int) -> int:
        """Monthly plan discount a promotion is worth, in cents."""
        value = 0
        for effect in promo.effects:
            if isinstance(effect, PlanDiscountPercentage):
                value += percent_of(base_plan_price, effect.percent)
            elif isinstance(effect, PlanDiscountFixed):
                value += to_cents(effect.amount)
        return value

    def _apply_plan_promotions(self, ctx: ProcessingContext, result: PromotionResolution) -> None:
        """
        Stacking rules:
        - OPEN group: every eligible promotion applies
        - Any other group is exclusive: the best-value promotion applies
          (first in catalog order on a tie) and the rest are reported
        """
        groups: dict[StackingGroup, list[Promotion]] = {}
        eligible = [p for category in PLAN_CATEGORIES for p in self.eligible(ctx, category)]
        # Keep catalog order across both categories for tie-breaks
        eligible.sort(key=ctx.catalogs.promotions.index)
        for promo in eligible:
            groups.setdefault(promo.stacking_group, []).append(promo)

        for group, promos in groups.items():
            if group == StackingGroup.OPEN:
                selected = promos
            else:
                best = promos[0]
                for promo in promos[1:]:
                    if self.plan_discount_value(promo, ctx.base_plan_price) > self.plan_discount_value(best, ctx.base_plan_price):
                        best = promo
                selected = [best]
                if len(promos) > 1:
                    skipped = ", ".join(p.name for p in promos if p is not best)
                    result.warnings.append(
                        f"Only one '{group.value}' promotion can apply; used '{best.name}' instead of {skipped}"
                    )
                    logger.debug("Exclusive group %s resolved to %s", group.value, best.id)

            for promo in selected:
                discount = self.plan_discount_value(promo, ctx.base_plan_price)
                result.plan_discount += discount
                result.applied_promotions.append(self._applied(promo, discount))

    # -------------------------------------------------------------------------
    # Device promotions
    # -------------------------------------------------------------------------

    def _apply_device_promotions(self, ctx: ProcessingContext, result: PromotionResolution) -> None:
        """
        Apply the promotion each promo trade-in device names.

        A BOGO promotion pays out at most eligible // buy quantity rewards.
        The cheapest qualifying devices receive them, so the result is the
        same whatever order the devices were added in.
        """
        promos_by_id = {p.id: p for p in ctx.catalogs.promotions}
        devices = ctx.config.devices
        qualifying: dict[str, list[int]] = {}
        for index, device in enumerate(devices):
            promo = self._qualifying_promotion(ctx, promos_by_id, device)
            if promo is not None:
                qualifying.setdefault(promo.id, []).append(index)

        result.device_rebates = [0] * len(devices)
        for promo in ctx.catalogs.promotions:
            indexes = qualifying.pop(promo.id, None)
            if not indexes:
                continue
            if promo.bogo_config is not None:
                max_rewards = self._bogo_eligible_count(ctx, promo) // promo.bogo_config.buy_quantity
                indexes = sorted(indexes, key=lambda i: self._reward_order(devices[i]))[:max_rewards]
                logger.debug("BOGO %s rewards devices %s", promo.id, indexes)
            for index in indexes:
                self._apply_device_effects(promo, devices[index], index, result)

    def _qualifying_promotion(
        self, ctx: ProcessingContext, promos_by_id: dict[str, Promotion], device: Device
    ) -> Promotion | None:
        if device.trade_in_type != TradeInType.PROMO or not device.applied_promo_id:
            return None
        promo = promos_by_id.get(device.applied_promo_id)
        if promo is None or not promo.is_active or promo.category != PromotionCategory.DEVICE:
            return None
        if not is_device_eligible(promo, device, ctx.catalogs):
            return None
        if not all_conditions_met(ctx.config, promo.conditions):
            return None
        if not self._requirements_met(promo, device):
            return None
        return promo

    @staticmethod
    def _reward_order(device: Device) -> tuple:
        return (to_cents(device.price), device.model_id or "", device.term, to_cents(device.down_payment))

    def _apply_device_effects(self, promo: Promotion, device: Device, index: int, result: PromotionResolution) -> None:
        price = to_cents(device.price)
        for effect in promo.effects:
            if isinstance(effect, DeviceCreditFixed):
                credit = min(price, to_cents(effect.amount))
                result.monthly_device_promo_credit += round_cents(Decimal(credit) / effect.duration_months)
            elif isinstance(effect, DeviceInstantRebate):
                # Rebates on one device never add up to more than its price
                rebate = min(price - result.device_rebates[index], to_cents(effect.amount))
                result.device_rebates[index] += rebate
                result.instant_device_rebate += rebate
        result.applied_promotions.append(self._applied(promo, 0))

    def _requirements_met(self, promo: Promotion, device: Device) -> bool:
        requirement = promo.device_requirements.trade_in
        has_trade_in = device.trade_in > 0
        if requirement == TradeInRequirement.REQUIRED:
            return has_trade_in
        if requirement == TradeInRequirement.NOT_ALLOWED:
            return not has_trade_in
        return True

    def _bogo_eligible_count(self, ctx: ProcessingContext, promo: Promotion) -> int:
        count = 0
        for device in ctx.config.devices:
            if device.model_id not in ctx.catalogs.devices:
                continue
            if is_device_eligible(promo, device, ctx.catalogs):
                count += 1
        return count

    # -------------------------------------------------------------------------
    # BTS (connected device) promotions
    # -------------------------------------------------------------------------

    def _apply_bts_promotions(self, ctx: ProcessingContext, result: PromotionResolution) -> None:
        """The first eligible BTS promotion applies to each connected device's service plan."""
        for device in ctx.config.devices:
            if not device.service_plan_id:
                continue
            model = ctx.catalogs.devices.get(device.model_id) if device.model_id else None
            if model is None or model.category == DeviceCategory.PHONE:
                continue
            service_plan = ctx.catalogs.service_plans.get(device.service_plan_id)
            plan_price = to_cents(service_plan.price) if service_plan else 0

            for promo in self.eligible(ctx, PromotionCategory.BTS, device):
                credit = 0
                for effect in promo.effects:
                    if isinstance(effect, ServicePlanDiscountFixed):
                        credit += to_cents(effect.amount)
                # A service plan credit never exceeds the plan it discounts
                result.monthly_service_plan_promo_credit += min(credit, plan_price)
                result.applied_promotions.append(self._applied(promo, 0))
                break

    @staticmethod
    def _applied(promo: Promotion, discount: int) -> dict:
        return {
            "id": promo.id,
            "name": promo.name,
            "category": promo.category.value,
            "discountInCents": discount,
        }
