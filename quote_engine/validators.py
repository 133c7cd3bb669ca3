"""
Input Validation for the Quote Rating Engine

Validates the quote configuration before rating begins.
Raises ValueError with clear messages for any constraint violations.
An unknown plan id is not a validation error: the engine reports it
as an incomplete quote instead.
"""

from decimal import Decimal

from .models import Accessory, Device, QuoteConfiguration


class InputValidator:
    """Validates quote input according to business rules."""

    def validate(self, config: QuoteConfiguration) -> None:
        """
        Run all validations. Raises ValueError if any check fails.
        """
        self._validate_quote(config)
        for index, device in enumerate(config.devices):
            self._validate_device(index, device)
        for index, accessory in enumerate(config.accessories):
            self._validate_accessory(index, accessory)

    def _validate_quote(self, config: QuoteConfiguration) -> None:
        """Validate quote-level constraints."""
        if config.lines < 1:
            raise ValueError(f"lines must be at least 1, got: {config.lines}")

        if config.insurance_lines < 0:
            raise ValueError(f"insurance_lines cannot be negative, got: {config.insurance_lines}")

        self._check_amount("tax_rate", config.tax_rate)
        self._check_amount("max_ec", config.max_ec)
        self._check_amount("per_line_ec", config.per_line_ec)

    def _validate_device(self, index: int, device: Device) -> None:
        """Validate device-level constraints."""
        label = f"devices[{index}]"
        self._check_amount(f"{label}.price", device.price)
        self._check_amount(f"{label}.trade_in", device.trade_in)
        self._check_amount(f"{label}.down_payment", device.down_payment)

        if device.term <= 0:
            raise ValueError(f"{label}.term must be positive, got: {device.term}")

        if device.down_payment > device.price:
            raise ValueError(
                f"{label}.down_payment ({device.down_payment}) cannot exceed price ({device.price})"
            )

    def _validate_accessory(self, index: int, accessory: Accessory) -> None:
        """Validate accessory-level constraints."""
        label = f"accessories[{index}]"
        self._check_amount(f"{label}.price", accessory.price)
        self._check_amount(f"{label}.down_payment", accessory.down_payment)

        if accessory.quantity < 1:
            raise ValueError(f"{label}.quantity must be at least 1, got: {accessory.quantity}")

        if accessory.term <= 0:
            raise ValueError(f"{label}.term must be positive, got: {accessory.term}")

        if accessory.down_payment > accessory.price:
            raise ValueError(
                f"{label}.down_payment ({accessory.down_payment}) cannot exceed price ({accessory.price})"
            )

    @staticmethod
    def _check_amount(name: str, value: Decimal) -> None:
        if value.is_nan() or value.is_infinite():
            raise ValueError(f"{name} must be a finite number, got: {value}")
        if value < 0:
            raise ValueError(f"{name} cannot be negative, got: {value}")
