"""
Unit Tests for Promotion Resolver

Uses the seed promotion catalog unless a test builds its own.
"""

from decimal import Decimal

import pytest

from quote_engine.calculators.promotions import PromotionResolver, is_device_eligible
from quote_engine.models import (
    CatalogSet,
    DeviceCreditFixed,
    PlanDiscountPercentage,
    Promotion,
    PromotionCategory,
    TradeInType,
    parse_effect,
)
from quote_engine.seed import DEVICES, PLANS, PROMOTIONS


@pytest.fixture
def resolver():
    return PromotionResolver()


def promo_device(new_device, model_id, price, promo_id, trade_in=0, **kwargs):
    return new_device(
        price,
        trade_in=trade_in,
        trade_in_type=TradeInType.PROMO,
        model_id=model_id,
        applied_promo_id=promo_id,
        **kwargs,
    )


class TestEffectParsing:
    def test_known_effect(self):
        effect = parse_effect({"type": "device_credit_fixed", "value": 830, "durationMonths": 24})
        assert isinstance(effect, DeviceCreditFixed)
        assert effect.duration_months == 24

    def test_unknown_effect_rejected(self):
        with pytest.raises(ValueError, match="Unknown promotion effect type"):
            parse_effect({"type": "free_netflix", "value": 1})


class TestDeviceEligibility:
    def test_unconstrained_promotion_matches_any_device(self, catalogs, new_device):
        promo = Promotion(id="any", name="Any", category=PromotionCategory.DEVICE)
        assert is_device_eligible(promo, new_device(100), catalogs)

    def test_tag_match_through_catalog(self, catalogs, new_device):
        promo = Promotion(
            id="pro", name="Pro", category=PromotionCategory.DEVICE, eligible_device_tags=("apple_pro",)
        )
        assert is_device_eligible(promo, new_device(999, model_id="iphone-15-pro"), catalogs)
        assert not is_device_eligible(promo, new_device(829, model_id="iphone-15"), catalogs)

    def test_id_match(self, catalogs, new_device):
        promo = Promotion(
            id="ids", name="Ids", category=PromotionCategory.DEVICE, eligible_device_ids=("ipad-10",)
        )
        assert is_device_eligible(promo, new_device(599, model_id="ipad-10"), catalogs)

    def test_constrained_promotion_rejects_custom_device(self, catalogs, new_device):
        promo = Promotion(
            id="pro", name="Pro", category=PromotionCategory.DEVICE, eligible_device_tags=("apple_pro",)
        )
        assert not is_device_eligible(promo, new_device(500), catalogs)


class TestPlanPromotions:
    """Plan and account promotions with stacking groups."""

    def _catalogs(self, *promotions):
        return CatalogSet.build(plans=PLANS, promotions=list(promotions))

    def _plan_promo(self, promo_id, effect, group="open", category="plan", conditions=()):
        return {
            "id": promo_id,
            "name": promo_id.title(),
            "category": category,
            "stackingGroup": group,
            "conditions": list(conditions),
            "effects": [effect],
        }

    def test_customer_type_gates_promotion(self, resolver, make_config, make_context):
        config = make_config(plan="experience-more-55", customer_type="plus-55")
        result = resolver.resolve(make_context(config))
        assert result.plan_discount == 1500
        assert [p["id"] for p in result.applied_promotions] == ["plus55-discount"]

    def test_standard_customer_gets_no_plan_promotion(self, resolver, make_config, make_context):
        result = resolver.resolve(make_context(make_config()))
        assert result.plan_discount == 0
        assert result.applied_promotions == []

    def test_open_group_stacks(self, resolver, make_config, make_context):
        catalogs = self._catalogs(
            self._plan_promo("ten", {"type": "plan_discount_fixed", "value": 10}),
            self._plan_promo("acct", {"type": "plan_discount_fixed", "value": 5}, category="account"),
        )
        result = resolver.resolve(make_context(make_config(), catalogs))
        assert result.plan_discount == 1500
        assert result.warnings == []

    def test_exclusive_group_takes_best_value(self, resolver, make_config, make_context):
        """$10 fixed vs 20% of $105 ($21): the percentage wins."""
        catalogs = self._catalogs(
            self._plan_promo("fixed", {"type": "plan_discount_fixed", "value": 10}, group="plan_discount"),
            self._plan_promo("percent", {"type": "plan_discount_percentage", "value": 20}, group="plan_discount"),
        )
        result = resolver.resolve(make_context(make_config(), catalogs))
        assert result.plan_discount == 2100
        assert [p["id"] for p in result.applied_promotions] == ["percent"]
        assert len(result.warnings) == 1
        assert "Fixed" in result.warnings[0]

    def test_exclusive_tie_keeps_catalog_order(self, resolver, make_config, make_context):
        catalogs = self._catalogs(
            self._plan_promo("first", {"type": "plan_discount_fixed", "value": 10}, group="plan_discount"),
            self._plan_promo("second", {"type": "plan_discount_fixed", "value": 10}, group="plan_discount"),
        )
        result = resolver.resolve(make_context(make_config(), catalogs))
        assert result.plan_discount == 1000
        assert result.applied_promotions[0]["id"] == "first"

    def test_inactive_promotion_ignored(self, resolver, make_config, make_context):
        promo = self._plan_promo("off", {"type": "plan_discount_fixed", "value": 10})
        promo["isActive"] = False
        result = resolver.resolve(make_context(make_config(), self._catalogs(promo)))
        assert result.plan_discount == 0

    def test_percentage_value(self, resolver):
        promo = Promotion(
            id="p",
            name="P",
            category=PromotionCategory.PLAN,
            effects=(PlanDiscountPercentage(percent=Decimal("10")),),
        )
        assert resolver.plan_discount_value(promo, 10500) == 1050


class TestDevicePromotions:
    """Device promotions applied through a promo trade-in."""

    def test_trade_in_required_credit(self, resolver, make_config, make_context, new_device):
        """$830 over 24 months = $34.58/mo"""
        device = promo_device(new_device, "iphone-15-pro", 999, "iphone-15-on-us", trade_in=300)
        result = resolver.resolve(make_context(make_config(devices=[device])))
        assert result.monthly_device_promo_credit == 3458
        assert result.applied_promotions[0]["id"] == "iphone-15-on-us"

    def test_missing_required_trade_in(self, resolver, make_config, make_context, new_device):
        device = promo_device(new_device, "iphone-15-pro", 999, "iphone-15-on-us")
        result = resolver.resolve(make_context(make_config(devices=[device])))
        assert result.monthly_device_promo_credit == 0

    def test_plan_condition_not_met(self, resolver, make_config, make_context, new_device):
        device = promo_device(new_device, "iphone-15-pro", 999, "iphone-15-on-us", trade_in=300)
        result = resolver.resolve(make_context(make_config(plan="essentials", devices=[device])))
        assert result.monthly_device_promo_credit == 0

    def test_ineligible_device(self, resolver, make_config, make_context, new_device):
        device = promo_device(new_device, "samsung-s24-ultra", 1299, "iphone-15-on-us", trade_in=300)
        result = resolver.resolve(make_context(make_config(devices=[device])))
        assert result.monthly_device_promo_credit == 0

    def test_manual_trade_in_does_not_apply_promotion(self, resolver, make_config, make_context, new_device):
        device = new_device(
            999, trade_in=300, model_id="iphone-15-pro", applied_promo_id="iphone-15-on-us"
        )
        result = resolver.resolve(make_context(make_config(devices=[device])))
        assert result.monthly_device_promo_credit == 0

    def test_instant_rebate_without_trade_in(self, resolver, make_config, make_context, new_device):
        device = promo_device(new_device, "samsung-s24-ultra", 1299, "new-line-no-trade-100-off")
        result = resolver.resolve(make_context(make_config(devices=[device])))
        assert result.instant_device_rebate == 10000
        assert result.monthly_device_promo_credit == 0

    def test_instant_rebate_not_allowed_with_trade_in(self, resolver, make_config, make_context, new_device):
        device = promo_device(new_device, "samsung-s24-ultra", 1299, "new-line-no-trade-100-off", trade_in=50)
        result = resolver.resolve(make_context(make_config(devices=[device])))
        assert result.instant_device_rebate == 0

    def test_credit_capped_at_device_price(self, resolver, make_config, make_context, new_device):
        catalogs = CatalogSet.build(
            plans=PLANS,
            devices=DEVICES,
            promotions=[
                {
                    "id": "big-rebate",
                    "name": "Big Rebate",
                    "category": "device",
                    "effects": [{"type": "device_instant_rebate", "value": 500}],
                }
            ],
        )
        device = promo_device(new_device, "apple-watch-se", 299, "big-rebate")
        result = resolver.resolve(make_context(make_config(devices=[device]), catalogs))
        assert result.instant_device_rebate == 29900


class TestBogo:
    """Buy 2 iPhones, save $700 on one."""

    def _iphones(self, new_device, count):
        return [promo_device(new_device, "iphone-15", 829, "iphone-bogo-700") for _ in range(count)]

    def test_pair_earns_one_credit(self, resolver, make_config, make_context, new_device):
        """$700 / 24 = $29.17/mo, once"""
        config = make_config(lines=2, devices=self._iphones(new_device, 2))
        result = resolver.resolve(make_context(config))
        assert result.monthly_device_promo_credit == 2917

    def test_single_device_earns_nothing(self, resolver, make_config, make_context, new_device):
        result = resolver.resolve(make_context(make_config(devices=self._iphones(new_device, 1))))
        assert result.monthly_device_promo_credit == 0

    def test_three_devices_earn_one_credit(self, resolver, make_config, make_context, new_device):
        config = make_config(lines=3, devices=self._iphones(new_device, 3))
        assert resolver.resolve(make_context(config)).monthly_device_promo_credit == 2917

    def test_four_devices_earn_two_credits(self, resolver, make_config, make_context, new_device):
        config = make_config(lines=4, devices=self._iphones(new_device, 4))
        assert resolver.resolve(make_context(config)).monthly_device_promo_credit == 2 * 2917

    def test_cheapest_device_takes_reward(self, resolver, make_config, make_context, new_device):
        """One reward for three devices goes to the $200 phone: $200 / 24 = $8.33"""
        devices = self._iphones(new_device, 2) + [promo_device(new_device, "iphone-15", 200, "iphone-bogo-700")]
        result = resolver.resolve(make_context(make_config(lines=3, devices=devices)))
        assert result.monthly_device_promo_credit == 833
        assert len(result.applied_promotions) == 1


class TestBtsPromotions:
    """Service plan credits for connected devices."""

    def test_watch_plan_credit(self, resolver, make_config, make_context, new_device):
        watch = new_device(299, model_id="apple-watch-se", service_plan_id="watch_paired_15")
        result = resolver.resolve(make_context(make_config(devices=[watch])))
        assert result.monthly_service_plan_promo_credit == 500
        assert result.applied_promotions[0]["category"] == "bts"

    def test_phone_gets_no_bts_credit(self, resolver, make_config, make_context, new_device):
        phone = new_device(999, model_id="iphone-15-pro", service_plan_id="watch_paired_15")
        result = resolver.resolve(make_context(make_config(devices=[phone])))
        assert result.monthly_service_plan_promo_credit == 0

    def test_credit_capped_at_service_plan_price(self, resolver, make_config, make_context, new_device):
        catalogs = CatalogSet.build(
            plans=PLANS,
            devices=DEVICES,
            service_plans=[{"id": "cheap", "name": "Cheap", "price": 3, "deviceCategory": "watch"}],
            promotions=PROMOTIONS,
        )
        watch = new_device(299, model_id="apple-watch-se", service_plan_id="cheap")
        result = resolver.resolve(make_context(make_config(devices=[watch]), catalogs))
        assert result.monthly_service_plan_promo_credit == 300


class TestDeviceRebates:
    def test_rebates_tracked_per_device(self, resolver, make_config, make_context, new_device):
        devices = [
            new_device(829, model_id="iphone-15"),
            promo_device(new_device, "samsung-s24-ultra", 1299, "new-line-no-trade-100-off"),
        ]
        result = resolver.resolve(make_context(make_config(lines=2, devices=devices)))
        assert result.device_rebates == [0, 10000]
        assert result.instant_device_rebate == 10000

    def test_stacked_rebates_capped_at_price(self, resolver, make_config, make_context, new_device):
        catalogs = CatalogSet.build(
            plans=PLANS,
            devices=DEVICES,
            promotions=[
                {
                    "id": "double-rebate",
                    "name": "Double Rebate",
                    "category": "device",
                    "effects": [
                        {"type": "device_instant_rebate", "value": 200},
                        {"type": "device_instant_rebate", "value": 200},
                    ],
                }
            ],
        )
        device = promo_device(new_device, "apple-watch-se", 299, "double-rebate")
        result = resolver.resolve(make_context(make_config(devices=[device]), catalogs))
        assert result.device_rebates == [29900]
        assert result.instant_device_rebate == 29900
