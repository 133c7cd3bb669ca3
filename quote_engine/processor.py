"""
Quote Processor - Main Orchestrator

Coordinates the quote rating pipeline through discrete, testable steps.
"""

import json
import logging
from typing import Any, Dict, Optional

from .calculators import (
    AddOnCalculator,
    DiscountCalculator,
    FeeCalculator,
    FinancingAllocator,
    PlanPriceResolver,
    PromotionResolver,
    TaxCalculator,
    TotalsAggregator,
    TradeInResolver,
)
from .models import CalculatedTotals, CatalogSet, ProcessingContext, QuoteConfiguration
from .money import fmt_cents
from .output import OutputBuilder
from .seed import seed_catalogs
from .validators import InputValidator

logger = logging.getLogger(__name__)


class QuoteProcessor:
    """
    Main orchestrator for quote rating.

    Implements a clear pipeline pattern:
    1. Validate Input
    2. Resolve Plan (unknown plan -> None)
    3. Base Plan Price
    4. Resolve Promotions
    5. Plan Discounts
    6. Equipment Financing
    7. Trade-Ins
    8. Insurance & Service Plans
    9. One-Time Fees
    10. Taxes
    11. Build Totals

    Calculators hold no state, so one processor can serve concurrent calls.
    """

    def __init__(self):
        # Initialize all calculators
        self.validator = InputValidator()
        self.plan_price_resolver = PlanPriceResolver()
        self.promotion_resolver = PromotionResolver()
        self.discount_calculator = DiscountCalculator()
        self.financing_allocator = FinancingAllocator()
        self.trade_in_resolver = TradeInResolver()
        self.addon_calculator = AddOnCalculator()
        self.fee_calculator = FeeCalculator()
        self.tax_calculator = TaxCalculator()
        self.totals_aggregator = TotalsAggregator()
        self.output_builder = OutputBuilder()

    def process(self, config: QuoteConfiguration, catalogs: CatalogSet) -> Optional[CalculatedTotals]:
        """
        Rate a quote through the complete pipeline.

        Args:
            config: The customer's quote configuration
            catalogs: Snapshot of the reference catalogs

        Returns:
            CalculatedTotals, or None when the plan does not resolve
        """
        # Step 1: Validate
        self.validator.validate(config)

        # Step 2: Resolve plan
        plan = catalogs.plans.get(config.plan)
        if plan is None:
            logger.debug("Plan %r not in catalog; quote is incomplete", config.plan)
            return None

        ctx = ProcessingContext(config=config, plan=plan, catalogs=catalogs)

        # Step 3: Base plan price
        ctx.base_plan_price = self.plan_price_resolver.calculate(ctx)

        # Step 4: Promotions
        ctx.promotions = self.promotion_resolver.resolve(ctx)
        ctx.warnings.extend(ctx.promotions.warnings)

        # Step 5: Plan discounts
        ctx.discounts = self.discount_calculator.calculate(ctx)

        # Step 6: Equipment financing
        ctx.financing = self.financing_allocator.allocate(ctx)

        # Step 7: Trade-ins
        ctx.trade_ins = self.trade_in_resolver.resolve(ctx)

        # Step 8: Insurance and service plans
        ctx.addons = self.addon_calculator.calculate(ctx)

        # Step 9: One-time fees
        ctx.fees = self.fee_calculator.calculate(ctx)

        # Step 10: Taxes
        ctx.taxes = self.tax_calculator.calculate(ctx)

        # Step 11: Build totals
        return self.output_builder.build(ctx, self.totals_aggregator)

    def process_from_dict(self, data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Rate a quote from raw dictionary input.

        Convenience method for API usage. `data` holds the quote under
        "config" and, optionally, the catalogs under "catalogs"; the seed
        catalogs are used when none are supplied.
        """
        config = QuoteConfiguration.from_dict(data["config"])
        catalogs = self._catalogs_from_dict(data.get("catalogs"))

        totals = self.process(config, catalogs)
        if totals is None:
            return {"status": "incomplete", "message": f"Select a plan (unknown plan: {config.plan!r})"}

        output = totals.to_dict()
        output["breakdown"] = self.output_builder.breakdown(totals)
        output["status"] = "ok"
        return output

    @staticmethod
    def _catalogs_from_dict(data: Optional[Dict[str, Any]]) -> CatalogSet:
        if not data:
            return seed_catalogs()
        return CatalogSet.from_dict(data)


# =============================================================================
# CONVENIENCE FUNCTIONS
# =============================================================================

_processor = QuoteProcessor()


def calculate_totals(
    config: QuoteConfiguration,
    plan_catalog,
    service_plan_catalog=None,
    discount_settings=None,
    insurance_catalog=None,
    promotion_catalog=None,
    device_catalog=None,
) -> Optional[CalculatedTotals]:
    """
    Rate a quote against explicitly supplied catalogs.

    Catalogs may be lists or id-keyed mappings of model objects or raw
    dicts. Returns None when config.plan is not in plan_catalog.
    """
    catalogs = CatalogSet.build(
        plans=plan_catalog,
        service_plans=service_plan_catalog,
        discount_settings=discount_settings,
        insurance_plans=insurance_catalog,
        promotions=promotion_catalog,
        devices=device_catalog,
    )
    return _processor.process(config, catalogs)


def calculate_quote_from_json(json_input: str) -> str:
    """
    Rate a quote from a JSON string and return a JSON string.
    """
    try:
        input_data = json.loads(json_input)
        result = _processor.process_from_dict(input_data)
        return json.dumps(result, indent=2)

    except (ValueError, KeyError, TypeError) as e:
        error_response = {"error": str(e), "status": "validation_failed"}
        return json.dumps(error_response, indent=2)


# =============================================================================
# HTTP HELPERS (shared by main.py and lambda_handler.py)
# =============================================================================

ENDPOINTS = {
    "calculate_quote": {
        "route": "/calculate_quote [POST]",
        "body": {
            "config": "quote configuration: plan, lines, customerType, discounts, fees, taxRate, "
            "maxEC, perLineEC, devices, accessories, insuranceTier, insuranceLines",
            "catalogs": "optional: plans, servicePlans, discountSettings, insurancePlans, "
            "promotions, deviceDatabase (bundled catalogs are used when omitted)",
        },
        "returns": "monthly and due-today totals in cents with a breakdown, "
        "or status 'incomplete' when the plan is unknown",
    },
    "health": {"route": "/health [GET]"},
}


def describe_request(data: Dict[str, Any]) -> str:
    """One-line summary of a quote request for the request log."""
    config = data.get("config") or {}
    return (
        f"plan={config.get('plan') or 'none'} lines={config.get('lines')} "
        f"customer={config.get('customerType', 'standard')} "
        f"devices={len(config.get('devices') or [])} accessories={len(config.get('accessories') or [])} "
        f"catalogs={'request' if data.get('catalogs') else 'bundled'}"
    )


def describe_result(result: Dict[str, Any]) -> str:
    """One-line summary of a rated quote for the request log."""
    if result.get("status") != "ok":
        return f"quote incomplete ({result.get('message')})"
    return (
        f"{result['planName']}: {fmt_cents(result['totalMonthlyInCents'])}/mo, "
        f"{fmt_cents(result['dueTodayInCents'])} due today, "
        f"{len(result['appliedPromotions'])} promotion(s), {len(result['warnings'])} warning(s)"
    )
