"""
One-Time Fee Calculator

Activation and upgrade fees charged on the due-today bill. Both flags may
be set at once; the fees are summed.
"""

from ..models import OneTimeFees, ProcessingContext
from ..money import to_cents


class FeeCalculator:
    """Calculates one-time fees for a quote."""

    def calculate(self, ctx: ProcessingContext) -> OneTimeFees:
        config = ctx.config
        settings = ctx.catalogs.discount_settings

        activation = self._calculate_activation(
            per_line=to_cents(settings.activation_fee),
            lines=self.activation_lines(ctx),
            is_applicable=config.fees.activation,
        )
        upgrade = self._calculate_upgrade(
            per_device=to_cents(settings.upgrade_fee),
            devices=len(config.devices),
            is_applicable=config.fees.upgrade,
        )

        return OneTimeFees(
            activation_fee=activation,
            upgrade_fee=upgrade,
            total_one_time_fees=activation + upgrade,
        )

    @staticmethod
    def activation_lines(ctx: ProcessingContext) -> int:
        """Voice lines plus connected devices activated on a service plan."""
        connected = sum(1 for d in ctx.config.devices if d.service_plan_id)
        return ctx.config.lines + connected

    def _calculate_activation(self, per_line: int, lines: int, is_applicable: bool) -> int:
        """Activation fee per activated line."""
        if not is_applicable:
            return 0
        return per_line * lines

    def _calculate_upgrade(self, per_device: int, devices: int, is_applicable: bool) -> int:
        """Upgrade fee per device on the quote."""
        if not is_applicable:
            return 0
        return per_device * devices
