"""
Trade-In Resolver

Turns each device's manual trade-in into either a due-today credit or a
recurring bill credit. Promo trade-ins are credited by the promotion's
effect (see PromotionResolver), not by the manual value.
"""

from decimal import Decimal

from ..models import ProcessingContext, TradeInResolution, TradeInType
from ..money import round_cents, to_cents


class TradeInResolver:
    """Resolves lump-sum and monthly trade-in credits."""

    # Monthly trade-in credits always run on a 24-month schedule,
    # independent of the device's own financing term
    CREDIT_MONTHS = 24

    def resolve(self, ctx: ProcessingContext) -> TradeInResolution:
        lump_sum = 0
        monthly = 0
        total_value = 0

        for device in ctx.config.devices:
            value = to_cents(device.trade_in)
            if value <= 0:
                continue
            total_value += value

            if device.trade_in_type == TradeInType.LUMP_SUM:
                lump_sum += value
            elif device.trade_in_type == TradeInType.MONTHLY_CREDIT:
                monthly += self.monthly_credit(value)

        return TradeInResolution(
            lump_sum_trade_in=lump_sum,
            monthly_trade_in_credit=monthly,
            total_trade_in_value=total_value,
        )

    def monthly_credit(self, value_in_cents: int) -> int:
        return round_cents(Decimal(value_in_cents) / self.CREDIT_MONTHS)
