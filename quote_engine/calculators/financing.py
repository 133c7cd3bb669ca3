"""
Equipment Financing Allocator

Pools every device and every financed accessory against one shared,
capped equipment-credit (EC) limit. Any amount above the limit becomes a
required down payment; the principal that is financed is prorated back to
each item by its share of the pool.

An instant device rebate comes off the device's financed principal. The
part of a rebate larger than that principal (the customer chose to pay the
device down) is credited against the down payment instead.
"""

import logging
from dataclasses import dataclass
from decimal import Decimal

from ..models import FinancedAccessoryLine, FinancingAllocation, ProcessingContext
from ..money import fmt_cents, round_cents, to_cents

logger = logging.getLogger(__name__)


@dataclass
class _PoolItem:
    cost: int
    down_payment: int
    term: int
    rebate: int = 0

    @property
    def principal(self) -> int:
        return self.cost - self.down_payment - self.rebate


class FinancingAllocator:
    """Allocates the shared equipment credit across devices and accessories."""

    def allocate(self, ctx: ProcessingContext) -> FinancingAllocation:
        """
        Allocation steps:
        1. Pool totals (cost, optional down payment, rebates) over all items
        2. Amount to finance = cost - optional down payment - financed rebates
        3. Available limit = min(max EC, per-line EC x EC lines)
        4. Required down payment = overage above the limit
        5. Financed principal = amount to finance - required down payment
        6. Each item's monthly payment = principal x share / term, where the
           share is computed once over the combined pool
        """
        config = ctx.config

        device_items = []
        down_payment_rebate = 0
        for device, rebate in zip(config.devices, self._device_rebates(ctx)):
            item = _PoolItem(cost=to_cents(device.price), down_payment=to_cents(device.down_payment), term=device.term)
            item.rebate = min(rebate, item.principal)
            down_payment_rebate += rebate - item.rebate
            device_items.append(item)

        financed_accessories = [a for a in config.accessories if a.is_financed]
        accessory_items = [
            _PoolItem(
                cost=to_cents(a.price) * a.quantity,
                down_payment=to_cents(a.down_payment) * a.quantity,
                term=a.term,
            )
            for a in financed_accessories
        ]

        # Pass 1: pool totals
        pool = device_items + accessory_items
        total_cost = sum(item.cost for item in pool)
        optional_down_payment = sum(item.down_payment for item in pool)
        amount_to_finance = sum(item.principal for item in pool)

        ec_lines = self.ec_lines(ctx)
        available_limit = self.available_limit(ctx, ec_lines)

        if amount_to_finance <= 0:
            required_down_payment = 0
            financed_principal = 0
        else:
            required_down_payment = max(0, amount_to_finance - available_limit)
            financed_principal = amount_to_finance - required_down_payment

        if required_down_payment > 0:
            ctx.warnings.append(
                f"Equipment cost exceeds the available financing limit of {fmt_cents(available_limit)}; "
                f"a down payment of {fmt_cents(required_down_payment)} is required"
            )
            logger.debug(
                "Financing overage: to_finance=%s limit=%s required=%s",
                amount_to_finance, available_limit, required_down_payment,
            )

        # Pass 2: prorate the financed principal
        device_payments = [self._monthly_payment(item, financed_principal, amount_to_finance) for item in device_items]
        accessory_payments = [self._monthly_payment(item, financed_principal, amount_to_finance) for item in accessory_items]

        accessory_lines = [
            FinancedAccessoryLine(
                name=accessory.name,
                price=accessory.price,
                quantity=accessory.quantity,
                term=accessory.term,
                down_payment=accessory.down_payment,
                monthly_payment_in_cents=payment,
            )
            for accessory, payment in zip(financed_accessories, accessory_payments)
        ]

        return FinancingAllocation(
            total_equipment_cost=total_cost,
            optional_down_payment=optional_down_payment,
            financed_by_devices=sum(item.principal for item in device_items),
            financed_device_rebate=sum(item.rebate for item in device_items),
            down_payment_rebate=down_payment_rebate,
            financed_by_accessories=sum(item.principal for item in accessory_items),
            amount_to_finance=amount_to_finance,
            ec_lines=ec_lines,
            available_limit=available_limit,
            required_down_payment=required_down_payment,
            financed_principal=financed_principal,
            monthly_device_payment=sum(device_payments),
            device_payments=device_payments,
            financed_accessories_monthly_cost=sum(accessory_payments),
            financed_accessories=accessory_lines,
        )

    @staticmethod
    def _device_rebates(ctx: ProcessingContext) -> list[int]:
        rebates = ctx.promotions.device_rebates
        if len(rebates) != len(ctx.config.devices):
            return [0] * len(ctx.config.devices)
        return rebates

    @staticmethod
    def ec_lines(ctx: ProcessingContext) -> int:
        """Voice lines plus connected devices on a service plan."""
        connected = sum(1 for d in ctx.config.devices if d.service_plan_id)
        return ctx.config.lines + connected

    @staticmethod
    def available_limit(ctx: ProcessingContext, ec_lines: int) -> int:
        """A limit of zero means nothing can be financed."""
        config = ctx.config
        return max(0, min(to_cents(config.max_ec), to_cents(config.per_line_ec) * ec_lines))

    @staticmethod
    def _monthly_payment(item: _PoolItem, financed_principal: int, amount_to_finance: int) -> int:
        if item.principal <= 0 or amount_to_finance <= 0 or financed_principal <= 0:
            return 0
        share = Decimal(item.principal) / Decimal(amount_to_finance)
        financed_amount = Decimal(financed_principal) * share
        return round_cents(financed_amount / item.term)
