"""Shared fixtures for quote engine tests."""

from decimal import Decimal

import pytest

from quote_engine.calculators import PlanPriceResolver
from quote_engine.models import (
    Accessory,
    AccessoryPaymentType,
    CustomerType,
    Device,
    ProcessingContext,
    QuoteConfiguration,
    QuoteDiscounts,
    QuoteFees,
    TradeInType,
)
from quote_engine.seed import seed_catalogs


@pytest.fixture
def catalogs():
    return seed_catalogs()


@pytest.fixture
def make_config():
    """Factory for QuoteConfiguration with plain-number keyword arguments."""

    def _make(
        plan="experience-beyond",
        lines=1,
        customer_type="standard",
        autopay=False,
        insider=False,
        third_line_free=False,
        activation=False,
        upgrade=False,
        tax_rate=0,
        max_ec=6500,
        per_line_ec=1500,
        devices=(),
        accessories=(),
        insurance_tier="none",
        insurance_lines=0,
    ):
        return QuoteConfiguration(
            plan=plan,
            lines=lines,
            customer_type=CustomerType(customer_type),
            discounts=QuoteDiscounts(autopay=autopay, insider=insider, third_line_free=third_line_free),
            fees=QuoteFees(activation=activation, upgrade=upgrade),
            tax_rate=Decimal(str(tax_rate)),
            max_ec=Decimal(str(max_ec)),
            per_line_ec=Decimal(str(per_line_ec)),
            devices=tuple(devices),
            accessories=tuple(accessories),
            insurance_tier=insurance_tier,
            insurance_lines=insurance_lines,
        )

    return _make


@pytest.fixture
def make_context(catalogs):
    """Factory for a ProcessingContext with the base plan price resolved."""

    def _make(config, catalog_set=None):
        catalog_set = catalog_set or catalogs
        ctx = ProcessingContext(config=config, plan=catalog_set.plans[config.plan], catalogs=catalog_set)
        ctx.base_plan_price = PlanPriceResolver().calculate(ctx)
        return ctx

    return _make


def device(price, trade_in=0, trade_in_type=TradeInType.MONTHLY_CREDIT, down_payment=0, term=24, **kwargs):
    """Build a Device from plain numbers."""
    return Device(
        price=Decimal(str(price)),
        trade_in=Decimal(str(trade_in)),
        trade_in_type=trade_in_type,
        down_payment=Decimal(str(down_payment)),
        term=term,
        **kwargs,
    )


def accessory(price, financed=False, quantity=1, term=12, down_payment=0, name="Case"):
    """Build an Accessory from plain numbers."""
    return Accessory(
        price=Decimal(str(price)),
        payment_type=AccessoryPaymentType.FINANCED if financed else AccessoryPaymentType.FULL,
        quantity=quantity,
        term=term,
        down_payment=Decimal(str(down_payment)),
        name=name,
    )


@pytest.fixture
def new_device():
    return device


@pytest.fixture
def new_accessory():
    return accessory
